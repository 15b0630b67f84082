"""URL grammar of the wiki: the home route plus view/edit/save of a named page."""

import re
from typing import NamedTuple, Optional

from fastapi import HTTPException, Request

PAGE_NAME = r"[a-zA-Z0-9]+"
_PAGE_PATH_PATTERN = re.compile(rf"/(edit|save|view)/({PAGE_NAME})")

HOME = "home"
VIEW = "view"
EDIT = "edit"
SAVE = "save"

NOT_FOUND = "404 page not found"


class RouteMatch(NamedTuple):
    route: str
    name: str


def match_route(path: str) -> Optional[RouteMatch]:
    """Resolve *path* against the grammar; ``None`` means not found.

    The home route yields an empty name.
    """
    if path in ("/", "//"):
        return RouteMatch(HOME, "")
    m = _PAGE_PATH_PATTERN.fullmatch(path)
    if m is None:
        return None
    return RouteMatch(m.group(1), m.group(2))


def page_url(route: str, name: str) -> str:
    return f"/{route}/{name}"


def resolve_route(request: Request) -> RouteMatch:
    """FastAPI dependency: the grammar match for the request path, or a 404."""
    match = match_route(request.scope["path"])
    if match is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return match
