"""
Books controller: query validation ahead of a download or redirect.

A blueprint gives "books.<action>" endpoints for ``redirect_to_action``.
"""
from __future__ import annotations

from flask import Blueprint, Flask, request

from .. import results
from ..queryparams import book_query_from_args
from ..results import Status
from .files import PDF, SAMPLE_PDF, web_root

bp = Blueprint("books", __name__)


@bp.get("/book")
def book():
    # url: /book?isloggedin=true&bookid=1
    q = book_query_from_args(request.args)
    if isinstance(q, Status):
        return q
    return results.file_path(f"/{SAMPLE_PDF}", PDF, root=web_root())


@bp.get("/bookstore")
def bookstore():
    q = book_query_from_args(request.args)
    if isinstance(q, Status):
        return q
    return results.redirect_to_action(
        "books", "store", {"id": q.book_id}, permanent=True
    )


def register(app: Flask) -> None:
    app.register_blueprint(bp)
