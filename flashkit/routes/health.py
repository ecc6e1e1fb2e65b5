"""Infra endpoints: health."""

from fastapi import APIRouter, Request

from flashkit.utils.flash import flash_config

router = APIRouter()


@router.get("/health", tags=["Infra"])
def health(request: Request) -> dict[str, str]:
    """Return basic service health and whether signed flash cookies are read."""
    cookie_flash = "enabled" if flash_config(request).codec is not None else "disabled"
    return {"status": "ok", "cookie_flash": cookie_flash}
