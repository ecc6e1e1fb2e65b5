"""Jinja integration and helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from fastapi import Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from flashkit.utils.flash import FLASH_STATE, fetch_flash, get_flash
from flashkit.utils.session import fetch_session

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

# Router dependencies for HTML pages, resolved in order
BROWSER_PIPELINE = [Depends(fetch_session), Depends(fetch_flash)]


def render(
    request: Request, name: str, context: dict[str, Any] | None = None, status_code: int = 200
) -> HTMLResponse:
    """Render a template injecting the flash when this request fetched it."""
    ctx: dict[str, Any] = {
        "flash": get_flash(request) if FLASH_STATE in request.scope else {},
    }
    if context:
        ctx.update(context)
    return templates.TemplateResponse(request, name, ctx, status_code=status_code)
