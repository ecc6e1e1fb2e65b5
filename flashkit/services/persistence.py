"""Write-back decision for the flash, made once the response status is known."""

from __future__ import annotations

import enum
import logging
from collections.abc import MutableMapping
from typing import Any

from flashkit.config import FlashConfig
from flashkit.utils.flash import FlashState

logger = logging.getLogger(__name__)

REDIRECT_STATUSES = range(300, 309)


class WriteBack(str, enum.Enum):
    SKIP = "skip"  # nothing to carry and nothing to purge
    PERSIST = "persist"  # redirect with messages: keep them for the next request
    PURGE = "purge"  # a session flash was explicitly cleared
    DISCARD = "discard"  # shown on this response, not forwarded


def decide_write_back(state: FlashState, status_code: int) -> WriteBack:
    """Pick the write-back action; rules are evaluated in order."""
    if not state.messages and not state.from_session and not state.from_cookie:
        return WriteBack.SKIP
    if state.messages and status_code in REDIRECT_STATUSES:
        return WriteBack.PERSIST
    if not state.messages and state.changed and state.from_session:
        return WriteBack.PURGE
    return WriteBack.DISCARD


def write_back(
    session: MutableMapping[str, Any], state: FlashState, status_code: int, config: FlashConfig
) -> WriteBack:
    """Apply the decision to the session.

    The session middleware then re-issues, expires or leaves its cookie alone
    depending on whether the session ends up non-empty, emptied or untouched.
    """
    action = decide_write_back(state, status_code)
    if action is WriteBack.PERSIST:
        session[config.session_key] = dict(state.messages)
    elif action in (WriteBack.PURGE, WriteBack.DISCARD):
        session.pop(config.session_key, None)

    logger.debug("Flash write-back %s (status=%s)", action.value, status_code)
    return action
