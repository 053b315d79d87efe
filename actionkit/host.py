from __future__ import annotations

import threading
from typing import Any

from flask import Flask, Response, g, has_request_context
from werkzeug.routing import BaseConverter, Map

from .errors import ActionResultError
from .resolve import DEFAULT_STREAM_THRESHOLD, ResolveContext, ResolvedResponse, resolve
from .results import ACTION_RESULT_TYPES
from .routing import RouteTable


class RegexConverter(BaseConverter):
    """``<regex("\\d{10}"):mobile>``: match a path segment against a pattern."""

    def __init__(self, url_map: Map, pattern: str) -> None:
        super().__init__(url_map)
        self.regex = pattern


def to_flask_response(resolved: ResolvedResponse) -> Response:
    body = resolved.body
    streamed = not isinstance(body, (bytes, bytearray))
    resp = Response(
        body,
        status=resolved.status,
        headers=resolved.headers,
        direct_passthrough=streamed,
    )
    # Response() falls back to a default Content-Type; bodyless results have none.
    if "Content-Type" not in resolved.headers:
        resp.headers.remove("Content-Type")
    return resp


def request_cancel_event() -> threading.Event | None:
    """Cancellation signal a host may stash on ``flask.g`` for this request."""
    if not has_request_context():
        return None
    ev = getattr(g, "cancel_event", None)
    return ev if isinstance(ev, threading.Event) else None


class ActionFlask(Flask):
    """Flask app whose views may return action results directly."""

    _route_table: RouteTable | None = None

    def route_table(self) -> RouteTable:
        # Built lazily: blueprints may still be registering at construction.
        if self._route_table is None:
            table = RouteTable.from_flask(self)
            self._route_table = table.merged(self.config.get("ROUTES") or {})
        return self._route_table

    def resolve_context(self) -> ResolveContext:
        threshold = self.config.get("STREAM_THRESHOLD")
        return ResolveContext(
            routes=self.route_table(),
            cancel_event=request_cancel_event(),
            stream_threshold=(
                DEFAULT_STREAM_THRESHOLD if threshold is None else int(threshold)
            ),
        )

    def _resolve_rv(self, rv: Any) -> Any:
        # (result, status), (result, headers) and (result, status, headers)
        if isinstance(rv, tuple) and rv and isinstance(rv[0], ACTION_RESULT_TYPES):
            return (self._resolve_rv(rv[0]), *rv[1:])
        if isinstance(rv, ACTION_RESULT_TYPES):
            return to_flask_response(resolve(rv, self.resolve_context()))
        return rv

    def dispatch_request(self) -> Any:
        # Resolve inside full_dispatch_request's try so errorhandler sees failures.
        return self._resolve_rv(super().dispatch_request())

    def make_response(self, rv: Any) -> Response:
        # Results returned by before_request hooks or error handlers.
        try:
            rv = self._resolve_rv(rv)
        except ActionResultError as e:
            rv = self.handle_user_exception(e)
        return super().make_response(rv)
