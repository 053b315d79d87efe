from __future__ import annotations

import logging
import uuid
from typing import Any

from flask import Flask, Response, current_app, g, has_request_context, jsonify, request

log = logging.getLogger(__name__)


class ActionResultError(Exception):
    """Base class for failures raised while building or resolving a result."""

    default_code = "action_result_error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code or self.default_code
        self.message = message
        self.details = details


class InvalidStatusError(ActionResultError):
    default_code = "invalid_status"


class InvalidPathError(ActionResultError):
    default_code = "invalid_path"


class PathTraversalError(ActionResultError):
    default_code = "path_traversal"


class MissingFileError(ActionResultError, FileNotFoundError):
    default_code = "file_not_found"


class SerializationError(ActionResultError):
    default_code = "serialization_failed"


class InvalidRedirectError(ActionResultError):
    default_code = "invalid_redirect"


class RouteNotFoundError(ActionResultError):
    default_code = "route_not_found"


class ResolutionCancelledError(ActionResultError):
    default_code = "cancelled"


def request_id() -> str:
    """Request id for error envelopes: the caller's X-Request-ID or a fresh one."""
    if has_request_context():
        rid = getattr(g, "request_id", None)
        if not rid:
            rid = (request.headers.get("X-Request-ID") or "").strip()
            g.request_id = rid or uuid.uuid4().hex[:12]
        return str(g.request_id)
    return uuid.uuid4().hex[:12]


def error_response(
    err: ActionResultError, *, status: int = 500, debug: bool = False
) -> Response:
    rid = request_id()
    body: dict[str, Any] = {"code": err.code, "message": err.message, "request_id": rid}
    if debug and err.details:
        body["details"] = err.details

    resp = jsonify({"error": body})
    resp.status_code = status
    resp.headers["X-Request-ID"] = rid
    return resp


def register_error_handlers(app: Flask) -> None:
    # Escaped failures always become a generic 500; never a 2xx.
    @app.errorhandler(ActionResultError)
    def _handle_action_result_error(err: ActionResultError):
        log.error(
            "unhandled %s [%s] on %s: %s",
            type(err).__name__,
            err.code,
            request.path,
            err.message,
        )
        return error_response(err, debug=bool(current_app.config.get("DEBUG")))
