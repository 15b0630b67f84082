import logging
import logging.config
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.exceptions import HTTPException as StarletteHTTPException

from wiki.config import Settings, get_settings
from wiki.routers.pages import create_router
from wiki.routing import NOT_FOUND, VIEW, page_url
from wiki.services.renderer import Renderer
from wiki.services.store import PageStore

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "format": '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                },
            },
            "root": {"level": level, "handlers": ["console"]},
        }
    )


def log_existing_pages(store: PageStore, port: int) -> None:
    """Log a browsable URL for every page in the store.

    Listing errors propagate: the server refuses to start without a readable
    page directory.
    """
    names = store.list_page_names()
    logger.info("Create a new page by visiting http://localhost:%d/view/{newPageName}", port)
    logger.info("%d existing page(s)", len(names))
    for name in names:
        logger.info("http://localhost:%d%s", port, page_url(VIEW, name))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = app.state.settings
    logger.info("Starting wiki on port %d with pages in %s", settings.port, settings.pages_dir)

    store = PageStore(
        settings.pages_dir,
        extension=settings.page_extension,
        strict_extension=settings.strict_extension,
    )
    store.ensure_directory()
    app.state.store = store
    app.state.renderer = Renderer(settings.templates_dir)

    log_existing_pages(store, settings.port)
    yield
    logger.info("Wiki stopped")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the wiki application; *settings* defaults to the environment."""
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="Wiki",
        description="A minimal wiki serving pages stored as flat text files.",
        version="1.0.0",
        lifespan=lifespan,
        redirect_slashes=False,
    )
    app.state.settings = settings

    # Rate-limiting state
    limiter = Limiter(key_func=get_remote_address)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
        detail = NOT_FOUND if exc.status_code == 404 else str(exc.detail)
        return PlainTextResponse(detail, status_code=exc.status_code, headers=exc.headers)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> PlainTextResponse:
        logger.exception("Unhandled exception for %s", request.url)
        return PlainTextResponse("An unexpected error occurred.", status_code=500)

    app.include_router(create_router(limiter, settings.save_rate_limit))

    if settings.static_dir.is_dir():
        app.mount("/static", StaticFiles(directory=str(settings.static_dir)), name="static")

    return app


configure_logging(get_settings().log_level)

app = create_app()


def run() -> None:
    """Serve the wiki with uvicorn on the configured host and port."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
