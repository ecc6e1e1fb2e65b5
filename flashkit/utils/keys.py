"""Flash key normalization."""

from __future__ import annotations

import enum


class FlashLevel(str, enum.Enum):
    INFO = "info"
    NOTICE = "notice"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


def normalize_key(key: str | enum.Enum) -> str:
    """Collapse enum members and plain strings naming the same entry to one key.

    ``FlashLevel.NOTICE`` and ``"notice"`` both normalize to ``"notice"``.
    Enum members without a string value fall back to their lowercased name.
    """
    if isinstance(key, enum.Enum):
        return key.value if isinstance(key.value, str) else key.name.lower()
    if isinstance(key, str):
        return key
    raise TypeError(f"Flash keys must be strings or enum members, got {type(key).__name__}")
