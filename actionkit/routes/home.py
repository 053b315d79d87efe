"""
Home controller: content, JSON and multi-route samples.

Views live on a blueprint rather than directly on the app so endpoints
read "home.<action>", which is what ``redirect_to_action`` resolves.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass

from flask import Blueprint, Flask

from .. import results

bp = Blueprint("home", __name__)


@dataclass(frozen=True)
class Person:
    id: uuid.UUID
    first_name: str
    last_name: str
    age: int


# One view may answer on several URLs.
@bp.get("/sayhello")
@bp.get("/sayhello2")
def say_hello():
    return results.text("Hello from method1")


@bp.get("/")
@bp.get("/home")
def index():
    return results.html("<h1>Welcome</h1> <h2>Hello from Index</h2>")


@bp.get("/about")
def about():
    return results.text("Hello from About")


@bp.get('/contact-us/<regex("\\d{10}"):mobile>')
def contact(mobile: str):
    return results.text("Hello from Contact")


@bp.get("/person")
def person():
    p = Person(id=uuid.uuid4(), first_name="John", last_name="Doe", age=26)
    return results.json(p)


def register(app: Flask) -> None:
    app.register_blueprint(bp)
