"""
Files controller: rooted, physical and in-memory downloads.

A blueprint gives "files.<action>" endpoints for ``redirect_to_action``.
"""
from __future__ import annotations

import mimetypes
from pathlib import Path, PurePosixPath

from flask import Blueprint, Flask, current_app

from .. import results
from ..errors import MissingFileError

SAMPLE_PDF = "sample.pdf"
PDF = "application/pdf"

bp = Blueprint("files", __name__)


def web_root() -> Path:
    return Path(current_app.config["WEB_ROOT"])


def _guess_media_type(name: str) -> str:
    mt, _ = mimetypes.guess_type(name)
    return mt or "application/octet-stream"


@bp.get("/file-download")
def file_download():
    # Rooted: resolved and checked under WEB_ROOT.
    return results.file_path(f"/{SAMPLE_PDF}", PDF, root=web_root())


@bp.get("/file-download2")
def file_download2():
    # Physical path built by the app itself, so no root check.
    return results.file_path(web_root() / SAMPLE_PDF, PDF, rooted=False)


@bp.get("/file-download3")
def file_download3():
    p = web_root() / SAMPLE_PDF
    try:
        data = p.read_bytes()
    except OSError as e:
        raise MissingFileError(
            f"File not found or unreadable: {p.name}", details={"path": str(p)}
        ) from e
    return results.file_bytes(data, PDF)


@bp.get("/files/<path:name>")
def download(name: str):
    return results.file_path(
        name,
        _guess_media_type(name),
        download_name=PurePosixPath(name).name,
        root=web_root(),
    )


def register(app: Flask) -> None:
    app.register_blueprint(bp)
