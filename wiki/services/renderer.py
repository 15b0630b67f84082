"""HTML rendering of pages through the Jinja2 template set."""

import logging
from pathlib import Path
from typing import Tuple

from fastapi import Request
from fastapi.responses import PlainTextResponse, Response
from fastapi.templating import Jinja2Templates
from jinja2 import TemplateError

from wiki.models.page import Page

logger = logging.getLogger(__name__)

TEMPLATE_NAMES: Tuple[str, ...] = ("home", "view", "edit")


class Renderer:
    """Fills the named templates with a :class:`Page`.

    Every template in *names* is loaded and parsed on construction, so a
    missing or broken template fails at startup instead of on first request.
    The instance is read-only afterwards and shared by all requests.
    """

    def __init__(self, directory: Path, names: Tuple[str, ...] = TEMPLATE_NAMES):
        self.templates = Jinja2Templates(directory=str(directory))
        self.names = names
        for name in names:
            # Raises TemplateNotFound / TemplateSyntaxError.
            self.templates.get_template(_filename(name))
        logger.info("Loaded templates %s from %s", ", ".join(names), directory)

    def render(self, request: Request, name: str, page: Page) -> Response:
        """Render template *name* with *page*; any failure while rendering becomes a 500."""
        try:
            if name not in self.names:
                raise TemplateError(f"no such template: {name}")
            return self.templates.TemplateResponse(
                request,
                _filename(name),
                {"page": page},
            )
        except Exception as exc:
            logger.error("Failed to render template %s for page %s: %s", name, page.name, exc)
            return PlainTextResponse(str(exc), status_code=500)


def _filename(name: str) -> str:
    return f"{name}.html"
