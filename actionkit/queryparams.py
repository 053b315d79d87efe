from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Union

from . import results
from .parseutil import safe_bool, safe_int
from .results import Status

MAX_BOOK_ID = 1000


@dataclass(frozen=True)
class BookQuery:
    book_id: int
    is_logged_in: bool


def book_query_from_args(args: Mapping[str, Any]) -> Union[BookQuery, Status]:
    """
    Validate ``?bookid=<1..1000>&isloggedin=<bool>``.

    Returns the parsed query, or the Status result to send back:
      - bookid missing, empty, not an int, or <= 0 -> 400
      - bookid above MAX_BOOK_ID                    -> 404
      - isloggedin not true                         -> 401
    """
    if "bookid" not in args:
        return results.bad_request("Book id is not supplied")

    raw = str(args.get("bookid") or "").strip()
    if not raw:
        return results.bad_request("Book id can't be null or empty")

    book_id = safe_int(raw)
    if book_id is None:
        return results.bad_request("Book id must be a whole number")
    if book_id <= 0:
        return results.bad_request("Book id can't be less than or equal to zero")
    if book_id > MAX_BOOK_ID:
        return results.not_found(f"Book id can't be greater than {MAX_BOOK_ID}")

    if not safe_bool(args.get("isloggedin")):
        return results.unauthorized("User must be authenticated")

    return BookQuery(book_id=book_id, is_logged_in=True)
