"""HTML template rendering and static file serving."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape
from werkzeug.exceptions import NotFound
from werkzeug.middleware.shared_data import SharedDataMiddleware

log = logging.getLogger(__name__)

DEFAULT_TEMPLATE_DIR = "views"
DEFAULT_ASSETS_DIR = "assets"


class Templates:
    """The HTML templates of a directory, each named after its file without '.html'."""

    def __init__(self, directory: str | os.PathLike[str] = DEFAULT_TEMPLATE_DIR) -> None:
        folder = Path(directory)
        self._environment = Environment(
            loader=FileSystemLoader(str(folder)),
            autoescape=select_autoescape(["html"]),
        )
        self.names = sorted(path.stem for path in folder.glob("*.html"))

    def render(self, name: str, data: Any = None) -> str:
        """Render a template; mapping data is also spread out as variables."""
        context: dict[str, Any] = dict(data) if isinstance(data, Mapping) else {}
        context["data"] = data
        try:
            return self._environment.get_template(f"{name}.html").render(**context)
        except TemplateError as exc:
            log.error("Broken template %s: %s", name, exc)
            raise


def static_app(directory: str | os.PathLike[str] = DEFAULT_ASSETS_DIR):
    """WSGI app serving files of a directory by their request path."""
    return SharedDataMiddleware(NotFound(), {"/": str(Path(directory))})