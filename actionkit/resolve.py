from __future__ import annotations

import logging
import threading
import unicodedata
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Callable, Iterable, Union
from urllib.parse import quote

from werkzeug.wsgi import FileWrapper

from .errors import MissingFileError, PathTraversalError, ResolutionCancelledError
from .paths import contain
from .results import (
    JSON_MEDIA_TYPE,
    TEXT_MEDIA_TYPE,
    ActionResult,
    Content,
    FileBytes,
    FilePath,
    Json,
    Redirect,
    RedirectToRoute,
    Status,
)
from .routing import RouteTable

log = logging.getLogger(__name__)

Body = Union[bytes, Iterable[bytes]]

DEFAULT_STREAM_THRESHOLD = 1024 * 1024
DEFAULT_CHUNK_SIZE = 64 * 1024


def _open_binary(path: Path) -> IO[bytes]:
    return open(path, "rb")


@dataclass(frozen=True)
class ResolveContext:
    """What the resolver needs from the host: routes, cancellation, file access."""

    routes: RouteTable = field(default_factory=RouteTable)
    cancel_event: threading.Event | None = None
    open_file: Callable[[Path], IO[bytes]] = _open_binary
    stream_threshold: int = DEFAULT_STREAM_THRESHOLD
    chunk_size: int = DEFAULT_CHUNK_SIZE

    @property
    def cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()


@dataclass(frozen=True)
class ResolvedResponse:
    status: int
    headers: dict[str, str]
    body: Body = b""


def content_disposition(download_name: str) -> str:
    """
    ``attachment`` disposition for *download_name*.

    Non-ASCII names get an ASCII fallback plus an RFC 6266 ``filename*``.
    """
    name = download_name.replace("\r", "").replace("\n", "")
    try:
        name.encode("ascii")
    except UnicodeEncodeError:
        simple = unicodedata.normalize("NFKD", name)
        simple = simple.encode("ascii", "ignore").decode("ascii")
        quoted = quote(name, safe="!#$&+^`|~")
        return (
            f'attachment; filename="{_strip_quotes(simple)}"; '
            f"filename*=UTF-8''{quoted}"
        )
    return f'attachment; filename="{_strip_quotes(name)}"'


def _strip_quotes(s: str) -> str:
    return s.replace('"', "").replace("\\", "")


def redirect_status(*, permanent: bool, preserve_method: bool = False) -> int:
    if preserve_method:
        return 308 if permanent else 307
    return 301 if permanent else 302


def _file_headers(media_type: str, download_name: str | None) -> dict[str, str]:
    headers = {"Content-Type": media_type}
    if download_name:
        headers["Content-Disposition"] = content_disposition(download_name)
    return headers


def _size_of(fh: IO[bytes]) -> int | None:
    try:
        size = fh.seek(0, 2)
        fh.seek(0)
    except (OSError, ValueError):
        return None
    return int(size)


# ----------------------------- Per-variant -----------------------------


def _resolve_content(result: Content) -> ResolvedResponse:
    return ResolvedResponse(
        status=result.status_code,
        headers={"Content-Type": result.media_type},
        body=result.body.encode("utf-8"),
    )


def _resolve_json(result: Json) -> ResolvedResponse:
    return ResolvedResponse(
        status=result.status_code,
        headers={"Content-Type": JSON_MEDIA_TYPE},
        body=result.payload,
    )


def _resolve_file_bytes(result: FileBytes) -> ResolvedResponse:
    headers = _file_headers(result.media_type, result.download_name)
    headers["Content-Length"] = str(len(result.data))
    return ResolvedResponse(status=200, headers=headers, body=result.data)


def _resolve_file_path(result: FilePath, ctx: ResolveContext) -> ResolvedResponse:
    if result.rooted:
        try:
            target = contain(result.path, result.root or "")
        except PathTraversalError:
            log.warning("rejected path %r outside root %r", result.path, result.root)
            raise
    else:
        target = Path(result.path)

    if ctx.cancelled:
        raise ResolutionCancelledError(
            "Request cancelled before file read", details={"path": str(target)}
        )

    try:
        fh = ctx.open_file(target)
    except OSError as e:
        log.warning("file %s not readable: %s", target, e)
        raise MissingFileError(
            f"File not found or unreadable: {target.name}",
            details={"path": str(target)},
        ) from e

    headers = _file_headers(result.media_type, result.download_name)
    try:
        size = _size_of(fh)
        if size is not None and size > ctx.stream_threshold:
            headers["Content-Length"] = str(size)
            # FileWrapper.close() releases the handle once the server is done.
            return ResolvedResponse(
                status=200, headers=headers, body=FileWrapper(fh, ctx.chunk_size)
            )
        with fh:
            data = fh.read()
    except BaseException:
        fh.close()
        raise

    headers["Content-Length"] = str(len(data))
    return ResolvedResponse(status=200, headers=headers, body=data)


def _resolve_status(result: Status) -> ResolvedResponse:
    if not result.message:
        return ResolvedResponse(status=result.code, headers={}, body=b"")
    return ResolvedResponse(
        status=result.code,
        headers={"Content-Type": TEXT_MEDIA_TYPE},
        body=result.message.encode("utf-8"),
    )


def _redirect_to(target: str, status: int) -> ResolvedResponse:
    return ResolvedResponse(status=status, headers={"Location": target}, body=b"")


def _resolve_redirect(result: Redirect) -> ResolvedResponse:
    return _redirect_to(
        result.target,
        redirect_status(
            permanent=result.permanent, preserve_method=result.preserve_method
        ),
    )


def _resolve_redirect_to_route(
    result: RedirectToRoute, ctx: ResolveContext
) -> ResolvedResponse:
    target = ctx.routes.expand(result.route_name, result.route_parameters)
    return _redirect_to(
        target,
        redirect_status(
            permanent=result.permanent, preserve_method=result.preserve_method
        ),
    )


def resolve(
    result: ActionResult, context: ResolveContext | None = None
) -> ResolvedResponse:
    """
    Turn an action result into status, headers and body.

    Each result is resolved once. Failures (traversal, missing files,
    unknown routes, cancellation) propagate to the caller unchanged.
    """
    ctx = context or ResolveContext()

    if isinstance(result, Content):
        resp = _resolve_content(result)
    elif isinstance(result, Json):
        resp = _resolve_json(result)
    elif isinstance(result, FileBytes):
        resp = _resolve_file_bytes(result)
    elif isinstance(result, FilePath):
        resp = _resolve_file_path(result, ctx)
    elif isinstance(result, Status):
        resp = _resolve_status(result)
    elif isinstance(result, Redirect):
        resp = _resolve_redirect(result)
    elif isinstance(result, RedirectToRoute):
        resp = _resolve_redirect_to_route(result, ctx)
    else:
        raise TypeError(f"Not an action result: {type(result).__name__}")

    log.debug("resolved %s -> %s", type(result).__name__, resp.status)
    return resp
