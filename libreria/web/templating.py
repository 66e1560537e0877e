"""
Jinja2 rendering for the web client.
"""

from pathlib import Path
from typing import Optional

from fastapi import Request
from fastapi.templating import Jinja2Templates

from .session import pop_flash, read_user

TEMPLATES_DIR = Path(__file__).parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def render(
    request: Request,
    name: str,
    context: Optional[dict] = None,
    status_code: int = 200,
):
    """Render ``name`` with the pending flash notice and the current user."""
    page = {
        "title": "Libreria",
        "flash": pop_flash(request),
        "user": read_user(request),
    }
    page.update(context or {})
    return templates.TemplateResponse(request, name, page, status_code=status_code)
