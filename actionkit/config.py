from __future__ import annotations

import os
import uuid
from pathlib import Path
from typing import Any

from .parseutil import safe_bool, safe_int
from .resolve import DEFAULT_STREAM_THRESHOLD


def _env_bool(name: str, default: bool = False) -> bool:
    parsed = safe_bool(os.environ.get(name))
    return default if parsed is None else parsed


def _env_int(name: str, default: int) -> int:
    parsed = safe_int(os.environ.get(name))
    return default if parsed is None else parsed


def _env_path(name: str) -> Path | None:
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return None
    return Path(raw).expanduser()


def load_config(*, repo_root: Path) -> dict[str, Any]:
    """
    Load configuration from environment variables with safe defaults.

    Supported env vars:
      - DEBUG
      - WEB_ROOT (directory served by rooted file results)
      - STREAM_THRESHOLD (bytes; larger files are streamed)
      - LOG_LEVEL
      - SECRET_KEY
    """
    debug = _env_bool("DEBUG", default=False)

    web_root = _env_path("WEB_ROOT") or (repo_root / "wwwroot")
    stream_threshold = _env_int("STREAM_THRESHOLD", default=DEFAULT_STREAM_THRESHOLD)
    log_level = (os.environ.get("LOG_LEVEL") or "").strip().upper() or "INFO"

    secret_key = (os.environ.get("SECRET_KEY") or "").strip() or None
    if not secret_key:
        secret_key = "actionkit-dev" if debug else uuid.uuid4().hex

    return {
        "DEBUG": debug,
        "WEB_ROOT": web_root,
        "STREAM_THRESHOLD": max(0, stream_threshold),
        "LOG_LEVEL": log_level,
        "SECRET_KEY": secret_key,
        "ROUTES": {},
    }
