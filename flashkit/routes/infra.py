"""Infra/diagnostic routes (non-prod helpers)."""

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import RedirectResponse, Response

from flashkit.config import get_settings
from flashkit.utils.flash import flash_config, get_flash, put_flash, put_flash_cookie
from flashkit.utils.keys import FlashLevel
from flashkit.web import BROWSER_PIPELINE

router = APIRouter()


@router.get("/demo/flash", tags=["infra"], dependencies=BROWSER_PIPELINE)
def demo_flash(request: Request, msg: str = "Operation completed") -> Response:
    """Flash a message through the session and redirect to home."""
    put_flash(request, FlashLevel.SUCCESS, msg)
    return RedirectResponse("/", status_code=303)


@router.get("/demo/flash-token", tags=["infra"])
def demo_flash_token(request: Request, msg: str = "Operation completed") -> Response:
    """Flash a message through a signed cookie, without touching the session."""
    response = RedirectResponse("/", status_code=303)
    put_flash_cookie(response, flash_config(request), {FlashLevel.INFO: msg})
    return response


@router.get("/debug/unfetched-flash", tags=["infra"])
def debug_unfetched_flash(request: Request) -> dict[str, str]:
    """Read the flash without fetching it first (always a programming error)."""
    if get_settings().env == "prod":
        raise HTTPException(404, "Not found")
    return get_flash(request)


@router.get("/debug/error", tags=["infra"])
def debug_error() -> None:
    """Intentionally raise an error to exercise the 500 handler in non-prod."""
    settings = get_settings()
    if settings.env == "prod":
        raise HTTPException(404, "Not found")
    raise RuntimeError("Simulated failure for testing purposes")
