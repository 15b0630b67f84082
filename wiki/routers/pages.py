import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import PlainTextResponse, RedirectResponse, Response
from slowapi import Limiter

from wiki.config import Settings
from wiki.deps import get_app_settings, get_renderer, get_store
from wiki.models.page import Page
from wiki.routing import EDIT, VIEW, RouteMatch, page_url, resolve_route
from wiki.services.renderer import Renderer
from wiki.services.store import PageNotFound, PageStore, PageStoreError

logger = logging.getLogger(__name__)


def home(
    request: Request,
    store: PageStore = Depends(get_store),
    renderer: Renderer = Depends(get_renderer),
    settings: Settings = Depends(get_app_settings),
) -> Response:
    """Render the home page along with the list of all pages."""
    try:
        page = store.load(settings.home_page)
    except PageNotFound:
        logger.info("Home page %s does not exist yet", settings.home_page)
        return RedirectResponse(page_url(EDIT, settings.home_page), status_code=302)
    except PageStoreError as exc:
        return _store_error(exc)
    return renderer.render(request, "home", page)


def view(
    request: Request,
    match: RouteMatch = Depends(resolve_route),
    store: PageStore = Depends(get_store),
    renderer: Renderer = Depends(get_renderer),
) -> Response:
    """Render *name*, or send the browser to its edit form if it does not exist."""
    try:
        page = store.load(match.name)
    except PageNotFound:
        return RedirectResponse(page_url(EDIT, match.name), status_code=302)
    except PageStoreError as exc:
        return _store_error(exc)
    return renderer.render(request, "view", page)


def edit(
    request: Request,
    match: RouteMatch = Depends(resolve_route),
    store: PageStore = Depends(get_store),
    renderer: Renderer = Depends(get_renderer),
) -> Response:
    """Render the edit form, blank when the page does not exist yet."""
    try:
        page = store.load(match.name)
    except PageNotFound:
        page = Page(name=match.name)
    except PageStoreError as exc:
        return _store_error(exc)
    return renderer.render(request, "edit", page)


def save(
    request: Request,
    body: str = Form(""),
    match: RouteMatch = Depends(resolve_route),
    store: PageStore = Depends(get_store),
) -> Response:
    """Write the submitted ``body`` form field and redirect to the page view."""
    page = Page(name=match.name, body=body.encode("utf-8"))
    try:
        store.save(page)
    except PageStoreError as exc:
        return _store_error(exc)
    return RedirectResponse(page_url(VIEW, match.name), status_code=302)


def _store_error(exc: PageStoreError) -> Response:
    return PlainTextResponse(str(exc), status_code=500)


def create_router(limiter: Limiter, save_rate_limit: Optional[str] = None) -> APIRouter:
    """Wire the page handlers; ``save`` is rate limited only when a limit is given."""
    router = APIRouter(tags=["Pages"])
    router.add_api_route("/", home, methods=["GET"], response_class=Response, summary="Home page")
    router.add_api_route("//", home, methods=["GET"], response_class=Response, include_in_schema=False)
    router.add_api_route("/view/{name}", view, methods=["GET"], response_class=Response, summary="View a page")
    router.add_api_route("/edit/{name}", edit, methods=["GET"], response_class=Response, summary="Edit a page")

    save_endpoint = limiter.limit(save_rate_limit)(save) if save_rate_limit else save
    router.add_api_route(
        "/save/{name}", save_endpoint, methods=["POST"], response_class=Response, summary="Save a page"
    )
    return router