from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .config import load_config
from .errors import register_error_handlers
from .host import ActionFlask, RegexConverter
from .routes import books, files, home, store


def _repo_root() -> Path:
    # actionkit/app.py -> actionkit/ -> repo root
    return Path(__file__).resolve().parents[1]


def create_app(config: dict[str, Any] | None = None) -> ActionFlask:
    """
    Build the sample app. Explicit *config* keys override environment values.
    """
    cfg = load_config(repo_root=_repo_root())
    cfg.update(config or {})
    cfg["WEB_ROOT"] = Path(cfg["WEB_ROOT"]).expanduser().resolve()

    app = ActionFlask(__name__, static_folder=None)
    app.url_map.converters["regex"] = RegexConverter
    app.config.update(cfg)

    logging.getLogger("actionkit").setLevel(str(cfg.get("LOG_LEVEL") or "INFO"))

    register_error_handlers(app)

    home.register(app)
    files.register(app)
    books.register(app)
    store.register(app)

    return app
