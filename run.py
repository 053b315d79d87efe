from __future__ import annotations

import logging

from actionkit.app import create_app

app = create_app()

if __name__ == "__main__":
    logging.basicConfig(level=app.config.get("LOG_LEVEL") or "INFO")
    # Local dev server
    app.run(host="127.0.0.1", port=8000, debug=bool(app.config.get("DEBUG")))
