from __future__ import annotations

from typing import Any

_TRUE = {"1", "true", "t", "yes", "y", "on"}
_FALSE = {"0", "false", "f", "no", "n", "off"}


def safe_int(val: Any) -> int | None:
    """
    Parse an int safely.
    Returns None on missing/invalid input.
    """
    if val is None:
        return None
    s = str(val).strip()
    if not s:
        return None
    try:
        return int(s)
    except ValueError:
        return None


def safe_bool(val: Any) -> bool | None:
    """
    Parse a boolean flag (``true``/``1``/``yes``/``on`` and friends).
    Returns None on missing/unrecognised input.
    """
    if val is None:
        return None
    s = str(val).strip().lower()
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    return None
