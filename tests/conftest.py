from __future__ import annotations

from pathlib import Path

import pytest

from actionkit.app import create_app

SAMPLE_BYTES = b"%PDF-1.4\n% sample for tests\n%%EOF\n"


@pytest.fixture()
def sample_bytes() -> bytes:
    return SAMPLE_BYTES


@pytest.fixture()
def web_root(tmp_path: Path) -> Path:
    root = tmp_path / "wwwroot"
    root.mkdir()
    (root / "sample.pdf").write_bytes(SAMPLE_BYTES)
    (root / "docs").mkdir()
    (root / "docs" / "readme.txt").write_text("hello docs", encoding="utf-8")
    return root


@pytest.fixture()
def app(web_root: Path):
    app = create_app(
        {
            "WEB_ROOT": web_root,
            "SECRET_KEY": "test",
            "DEBUG": False,
        }
    )
    app.config.update(TESTING=True)
    return app


@pytest.fixture()
def client(app):
    return app.test_client()
