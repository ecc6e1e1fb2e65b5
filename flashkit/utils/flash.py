"""One-time flash messages carried across a single redirect.

Flash is read once per request by ``fetch_flash``: from the session when it
holds a flash entry, else from a signed flash cookie, else empty. Handlers then
read and update it through ``get_flash``/``put_flash``/``clear_flash``. What
happens to it afterwards is decided by ``FlashMiddleware`` once the response
status is known.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum

from starlette.requests import HTTPConnection
from starlette.responses import Response

from flashkit.config import FlashConfig
from flashkit.exceptions import PreconditionError
from flashkit.utils.keys import normalize_key
from flashkit.utils.session import ensure_session_fetched

logger = logging.getLogger(__name__)

FLASH_STATE = "flashkit.flash"
FLASH_CONFIG = "flashkit.flash_config"


@dataclass(frozen=True)
class FlashState:
    """Flash messages of one request. Updates return a new state."""

    messages: Mapping[str, str] = field(default_factory=dict)
    changed: bool = False
    from_session: bool = False  # a session flash entry existed at fetch
    from_cookie: bool = False  # messages were decoded from the flash cookie
    cookie_present: bool = False  # the request carried a flash cookie at all

    def get(self, key: str | Enum) -> str | None:
        return self.messages.get(normalize_key(key))

    def put(self, key: str | Enum, value: str) -> FlashState:
        if not isinstance(value, str):
            raise TypeError(f"Flash values must be strings, got {type(value).__name__}")
        messages = {**self.messages, normalize_key(key): value}
        return replace(self, messages=messages, changed=True)

    def merge(self, pairs: Mapping) -> FlashState:
        state = self
        for key, value in pairs.items():
            state = state.put(key, value)
        return replace(state, changed=True)

    def clear(self) -> FlashState:
        return replace(self, messages={}, changed=True)


def flash_config(conn: HTTPConnection) -> FlashConfig:
    try:
        return conn.scope[FLASH_CONFIG]
    except KeyError:
        raise PreconditionError("FlashMiddleware must be installed to use flash") from None


def _normalized(messages: Mapping) -> dict[str, str]:
    return {normalize_key(k): v for k, v in messages.items() if isinstance(v, str)}


def read_flash_cookie(conn: HTTPConnection, config: FlashConfig) -> tuple[bool, dict[str, str] | None]:
    """Return (cookie present, verified messages or None).

    The cookie value may carry attributes (``token; max-age=N; path=/``);
    only the part before the first ``;`` is the token.
    """
    raw = conn.cookies.get(config.cookie_name)
    if raw is None:
        return False, None
    if config.codec is None:
        return True, None
    token = raw.split(";", 1)[0].strip()
    return True, config.codec.verify(token)


def fetch_flash(conn: HTTPConnection) -> FlashState:
    """Load the flash for this request. Idempotent; needs a fetched session.

    Usable directly as a FastAPI dependency.
    """
    state = conn.scope.get(FLASH_STATE)
    if state is not None:
        return state

    session = ensure_session_fetched(conn)
    config = flash_config(conn)

    # Popped here; the middleware writes it back only if it must survive.
    session_flash = session.pop(config.session_key, None)
    cookie_present, cookie_flash = read_flash_cookie(conn, config)

    if isinstance(session_flash, Mapping):
        state = FlashState(
            messages=_normalized(session_flash),
            from_session=True,
            cookie_present=cookie_present,
        )
    elif cookie_flash is not None:
        state = FlashState(messages=cookie_flash, from_cookie=True, cookie_present=True)
    else:
        state = FlashState(cookie_present=cookie_present)

    logger.debug(
        "Fetched flash (session=%s, cookie=%s, keys=%s)",
        state.from_session,
        state.from_cookie,
        sorted(state.messages),
    )
    conn.scope[FLASH_STATE] = state
    return state


def ensure_flash_fetched(conn: HTTPConnection) -> FlashState:
    state = conn.scope.get(FLASH_STATE)
    if state is None:
        raise PreconditionError("flash not fetched, call fetch_flash() first")
    return state


def _store(conn: HTTPConnection, state: FlashState) -> FlashState:
    conn.scope[FLASH_STATE] = state
    return state


def get_flash(conn: HTTPConnection, key: str | Enum | None = None) -> dict[str, str] | str | None:
    """Return all flash messages, or the one stored under ``key``."""
    state = ensure_flash_fetched(conn)
    if key is None:
        return dict(state.messages)
    return state.get(key)


def put_flash(conn: HTTPConnection, key: str | Enum, value: str) -> FlashState:
    """Set ``value`` under ``key`` for this request and, on redirect, the next."""
    return _store(conn, ensure_flash_fetched(conn).put(key, value))


def merge_flash(conn: HTTPConnection, pairs: Mapping) -> FlashState:
    """Put every key/value pair of ``pairs``."""
    return _store(conn, ensure_flash_fetched(conn).merge(pairs))


def clear_flash(conn: HTTPConnection) -> FlashState:
    """Drop all messages. Marks the flash as changed even when already empty."""
    return _store(conn, ensure_flash_fetched(conn).clear())


def put_flash_cookie(response: Response, config: FlashConfig, messages: Mapping) -> None:
    """Carry ``messages`` in a signed cookie instead of the session.

    For responses whose follow-up request has no server-side session, such as a
    redirect issued from a live-update connection.
    """
    token = config.require_codec().sign(messages)
    response.set_cookie(
        config.cookie_name,
        token,
        max_age=config.cookie_max_age,
        path="/",
        httponly=True,
        samesite="lax",
    )
