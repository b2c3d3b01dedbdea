"""Template engine: renders server-side HTML pages with Jinja2.

Wraps FastAPI's Jinja2Templates with the formatting helpers the pages use
(registered as Jinja filters) and injects pending flash messages into every
page context.
"""

from pathlib import Path
from typing import Any, Dict, Optional

from fastapi.templating import Jinja2Templates
from starlette.requests import Request
from starlette.responses import Response

from core.engine.flash import pop_flashed_messages


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

def fmt_money(value: float | int | None, currency: str = "$") -> str:
    """Format a number as currency."""
    if value is None:
        return "N/A"
    return f"{currency}{value:,.2f}"


def fmt_int(value: int | None) -> str:
    """Format an integer with comma separators."""
    if value is None:
        return "N/A"
    return f"{value:,}"


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class TemplateEngine:
    """Renders named templates into HTML responses.

    Usage::

        engine = TemplateEngine(Path(__file__).parent / "templates", currency="$")
        return engine.render(request, "books/index.html", {"books": books})
    """

    def __init__(self, directory: str | Path, currency: str = "$"):
        self.templates = Jinja2Templates(directory=str(directory))
        env = self.templates.env
        env.filters["money"] = lambda value: fmt_money(value, currency)
        env.filters["number"] = fmt_int

    def render(
        self,
        request: Request,
        name: str,
        context: Optional[Dict[str, Any]] = None,
        status_code: int = 200,
    ) -> Response:
        """Render ``name`` with ``context`` plus the pending flash messages.

        Args:
            request: The current request (needed for url_for in templates).
            name: Template path relative to the template directory.
            context: Values exposed to the template.
            status_code: HTTP status of the response.
        """
        context = dict(context or {})
        context.setdefault("messages", pop_flashed_messages(request))
        return self.templates.TemplateResponse(
            request,
            name,
            context,
            status_code=status_code,
        )
