import os

# Settings require a secret; set it before any app module reads the env.
os.environ.setdefault("FLASHKIT_SECRET_KEY_BASE", "abc123")
os.environ.setdefault("FLASHKIT_FLASH_SIGNING_SALT", "liveview_salt456")

from typing import Any  # noqa: E402

import pytest  # noqa: E402
from fastapi import APIRouter, FastAPI, Request  # noqa: E402
from fastapi.responses import Response  # noqa: E402

from flashkit.config import FlashConfig, get_settings  # noqa: E402
from flashkit.middleware import install_middlewares  # noqa: E402
from flashkit.utils.flash import (  # noqa: E402
    FLASH_CONFIG,
    clear_flash,
    fetch_flash,
    flash_config as request_flash_config,
    get_flash,
    put_flash,
    put_flash_cookie,
)
from flashkit.web import BROWSER_PIPELINE  # noqa: E402

CONFIG = FlashConfig(secret_key_base="abc123", signing_salt="liveview_salt456")


@pytest.fixture
def flash_app() -> FastAPI:
    """Bare app exercising the flash helpers with an explicit response status."""
    get_settings.cache_clear()
    app = FastAPI()
    install_middlewares(app, get_settings())

    router = APIRouter(dependencies=BROWSER_PIPELINE)

    @router.get("/put")
    def put(request: Request, key: str = "notice", value: str = "elixir", status: int = 302):
        put_flash(request, key, value)
        return Response("ok", status_code=status)

    @router.get("/clear")
    def clear(request: Request, status: int = 302):
        clear_flash(request)
        return Response("ok", status_code=status)

    @router.get("/forward")
    def forward(request: Request, value: str = "again"):
        # Hand the flash on through a fresh cookie, as a stateless redirect would
        clear_flash(request)
        response = Response("ok", status_code=303, headers={"location": "/read"})
        put_flash_cookie(response, request_flash_config(request), {"notice": value})
        return response

    @router.get("/read")
    def read(request: Request) -> dict[str, str]:
        return get_flash(request)

    app.include_router(router)

    @app.get("/flash-without-session")
    def flash_without_session(request: Request):
        fetch_flash(request)
        return Response("ok")

    return app


@pytest.fixture
def flash_config() -> FlashConfig:
    return CONFIG


@pytest.fixture
def make_request():
    """Build a bare request scope as the session and flash middlewares leave it."""

    def _make(
        session: dict[str, Any] | None = None,
        cookies: dict[str, str] | None = None,
        config: FlashConfig | None = CONFIG,
        with_session: bool = True,
    ) -> Request:
        headers = []
        if cookies:
            cookie = "; ".join(f"{name}={value}" for name, value in cookies.items())
            headers.append((b"cookie", cookie.encode("latin-1")))
        scope: dict[str, Any] = {"type": "http", "method": "GET", "path": "/", "headers": headers}
        if with_session:
            scope["session"] = {} if session is None else session
        if config is not None:
            scope[FLASH_CONFIG] = config
        return Request(scope)

    return _make
