"""Fetch-before-use access to the Starlette session."""

from __future__ import annotations

from typing import Any

from starlette.requests import HTTPConnection

from flashkit.exceptions import PreconditionError

SESSION_FETCHED = "flashkit.session_fetched"


def fetch_session(conn: HTTPConnection) -> dict[str, Any]:
    """Mark the session as fetched for this request and return it.

    Idempotent. Usable directly as a FastAPI dependency.
    """
    if "session" not in conn.scope:
        raise PreconditionError("SessionMiddleware must be installed to fetch the session")
    conn.scope[SESSION_FETCHED] = True
    return conn.session


def session_fetched(conn: HTTPConnection) -> bool:
    return bool(conn.scope.get(SESSION_FETCHED))


def ensure_session_fetched(conn: HTTPConnection) -> dict[str, Any]:
    if not session_fetched(conn):
        raise PreconditionError("session not fetched, call fetch_session() first")
    return conn.session


def get_session(conn: HTTPConnection, key: str | None = None) -> Any:
    session = ensure_session_fetched(conn)
    if key is None:
        return session
    return session.get(key)


def put_session(conn: HTTPConnection, key: str, value: Any) -> None:
    ensure_session_fetched(conn)[key] = value


def delete_session(conn: HTTPConnection, key: str) -> None:
    ensure_session_fetched(conn).pop(key, None)
