"""
Store controller, the target of the bookstore redirect.

A blueprint gives "store.<action>" endpoints, so
``redirect_to_action("books", "store")`` finds ``store.books``.
"""
from __future__ import annotations

from flask import Blueprint, Flask, request

from .. import results

LATEST_PRODUCT_ID = 42

bp = Blueprint("store", __name__)


@bp.get("/store/books/<int:id>")
def books(id: int):
    return results.html(f"<h1>The id of book: {id}</h1>")


@bp.get("/products/latest")
def latest_product():
    return results.redirect_to_route("ProductDetails", {"id": LATEST_PRODUCT_ID})


@bp.get("/store/continue")
def continue_shopping():
    # Only same-site targets; anything else fails before a response exists.
    nxt = (request.args.get("next") or "").strip() or "/"
    return results.local_redirect(nxt)


def product_details(id: int):
    return results.html(f"<h1>Product {id}</h1>")


def register(app: Flask) -> None:
    app.register_blueprint(bp)
    # Registered on the app so the route name carries no blueprint prefix.
    app.add_url_rule(
        "/products/<int:id>", endpoint="ProductDetails", view_func=product_details
    )
