"""Application middlewares (sessions, flash)."""

from __future__ import annotations

from fastapi import FastAPI
from starlette.datastructures import MutableHeaders
from starlette.middleware.sessions import SessionMiddleware
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from flashkit.config import FlashConfig, Settings, get_settings
from flashkit.services.persistence import write_back
from flashkit.utils.flash import FLASH_CONFIG, FLASH_STATE


class FlashMiddleware:
    """Expose the flash config to handlers and write the flash back on send.

    Must sit inside ``SessionMiddleware``: the session is mutated here, on
    ``http.response.start``, before the session middleware serializes it.
    """

    def __init__(self, app: ASGIApp, config: FlashConfig) -> None:
        self.app = app
        self.config = config

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        scope[FLASH_CONFIG] = self.config
        if scope["type"] != "http":
            # No response status on websockets: read-only flash.
            await self.app(scope, receive, send)
            return

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                state = scope.get(FLASH_STATE)
                if state is not None:
                    write_back(scope["session"], state, message["status"], self.config)
                    if state.cookie_present:
                        headers = MutableHeaders(scope=message)
                        if not self._sets_flash_cookie(headers):
                            headers.append("Set-Cookie", self._expired_cookie())
            await send(message)

        await self.app(scope, receive, send_wrapper)

    def _sets_flash_cookie(self, headers: MutableHeaders) -> bool:
        # A handler that re-issued the token keeps it
        prefix = f"{self.config.cookie_name}="
        return any(value.startswith(prefix) for value in headers.getlist("set-cookie"))

    def _expired_cookie(self) -> str:
        return f"{self.config.cookie_name}=; path=/; Max-Age=0; httponly; samesite=lax"


def install_middlewares(app: FastAPI, settings: Settings | None = None) -> None:
    """Install required middlewares (flash inside session)."""
    settings = settings or get_settings()
    app.add_middleware(FlashMiddleware, config=FlashConfig.from_settings(settings))
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.secret_key_base,
        session_cookie=settings.session_cookie,
        max_age=settings.session_max_age,
        https_only=settings.https_only,
    )
