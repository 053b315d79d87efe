from __future__ import annotations

import json as _json
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Union
from urllib.parse import unquote, urlsplit

from flask.json.provider import DefaultJSONProvider

from .errors import InvalidPathError, InvalidRedirectError, InvalidStatusError, SerializationError

JSON_MEDIA_TYPE = "application/json"
TEXT_MEDIA_TYPE = "text/plain; charset=utf-8"
HTML_MEDIA_TYPE = "text/html; charset=utf-8"


def check_status_code(code: Any) -> int:
    """Return *code* if it is a usable HTTP status (100-599), else raise."""
    if isinstance(code, bool) or not isinstance(code, int):
        raise InvalidStatusError(
            f"Status code must be an integer, got {type(code).__name__}",
            details={"status_code": repr(code)},
        )
    if not 100 <= code <= 599:
        raise InvalidStatusError(
            f"Status code {code} is outside 100-599",
            details={"status_code": code},
        )
    return code


def serialize_json(value: Any) -> bytes:
    """
    Encode *value* as compact UTF-8 JSON.

    Accepts whatever Flask's JSON provider accepts (dataclasses, UUIDs,
    dates, Decimals). Cycles, NaN/Infinity and unknown types raise
    SerializationError; nothing partial is ever returned.
    """
    try:
        text = _json.dumps(
            value,
            default=DefaultJSONProvider.default,
            ensure_ascii=False,
            allow_nan=False,
            separators=(",", ":"),
        )
    except (TypeError, ValueError, RecursionError) as e:
        raise SerializationError(
            f"Value cannot be serialized to JSON: {e}",
            details={"type": type(value).__name__},
        ) from e
    return text.encode("utf-8")


def is_local_url(target: str) -> bool:
    """
    True for same-origin relative references like ``/store/books/1``.

    Rejects scheme/host forms (``https://x``, ``//x``, ``/\\x``), control
    characters, and any ``..`` segment (also when percent-encoded).
    """
    if not target.startswith("/"):
        return False
    if "\\" in target or target.startswith("//"):
        return False
    if any(ord(c) < 0x20 or ord(c) == 0x7F for c in target):
        return False
    parts = urlsplit(target)
    if parts.scheme or parts.netloc:
        return False
    segments = unquote(parts.path).split("/")
    return ".." not in segments


# ----------------------------- Variants -----------------------------


@dataclass(frozen=True)
class Content:
    body: str
    media_type: str
    status_code: int = 200

    def __post_init__(self) -> None:
        check_status_code(self.status_code)


@dataclass(frozen=True)
class Json:
    value: Any
    status_code: int = 200
    payload: bytes = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        check_status_code(self.status_code)
        object.__setattr__(self, "payload", serialize_json(self.value))


@dataclass(frozen=True)
class FileBytes:
    data: bytes
    media_type: str
    download_name: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.data, (bytes, bytearray, memoryview)):
            raise TypeError(
                f"File data must be bytes-like, got {type(self.data).__name__}"
            )
        object.__setattr__(self, "data", bytes(self.data))


@dataclass(frozen=True)
class FilePath:
    path: str
    media_type: str
    download_name: str | None = None
    rooted: bool = True
    root: str | None = None

    def __post_init__(self) -> None:
        if not str(self.path or "").strip():
            raise InvalidPathError("File path is empty")
        if self.rooted and not str(self.root or "").strip():
            raise InvalidPathError(
                "Rooted file result needs a root directory",
                details={"path": str(self.path)},
            )
        object.__setattr__(self, "path", str(self.path))
        if self.root is not None:
            object.__setattr__(self, "root", str(self.root))


@dataclass(frozen=True)
class Status:
    code: int
    message: str | None = None

    def __post_init__(self) -> None:
        check_status_code(self.code)


@dataclass(frozen=True)
class Redirect:
    target: str
    permanent: bool = False
    local_only: bool = False
    preserve_method: bool = False

    def __post_init__(self) -> None:
        if not self.target:
            raise InvalidRedirectError("Redirect target is empty")
        if self.local_only and not is_local_url(self.target):
            raise InvalidRedirectError(
                "Local redirect target must be a same-origin relative path",
                details={"target": self.target},
            )


@dataclass(frozen=True)
class RedirectToRoute:
    route_name: str
    route_parameters: Mapping[str, Any] = field(default_factory=dict)
    permanent: bool = False
    preserve_method: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "route_parameters", MappingProxyType(dict(self.route_parameters))
        )


ActionResult = Union[
    Content, Json, FileBytes, FilePath, Status, Redirect, RedirectToRoute
]

ACTION_RESULT_TYPES: tuple[type, ...] = (
    Content,
    Json,
    FileBytes,
    FilePath,
    Status,
    Redirect,
    RedirectToRoute,
)


# ----------------------------- Constructors -----------------------------


def content(body: str, media_type: str, status_code: int = 200) -> Content:
    return Content(body=body, media_type=media_type, status_code=status_code)


def text(body: str, status_code: int = 200) -> Content:
    return Content(body=body, media_type=TEXT_MEDIA_TYPE, status_code=status_code)


def html(body: str, status_code: int = 200) -> Content:
    return Content(body=body, media_type=HTML_MEDIA_TYPE, status_code=status_code)


def json(value: Any, status_code: int = 200) -> Json:
    return Json(value=value, status_code=status_code)


def file_bytes(
    data: bytes, media_type: str, download_name: str | None = None
) -> FileBytes:
    return FileBytes(data=data, media_type=media_type, download_name=download_name)


def file_path(
    path: str | Path,
    media_type: str,
    download_name: str | None = None,
    rooted: bool = True,
    root: str | Path | None = None,
) -> FilePath:
    return FilePath(
        path=str(path),
        media_type=media_type,
        download_name=download_name,
        rooted=rooted,
        root=None if root is None else str(root),
    )


def status(code: int, message: str | None = None) -> Status:
    return Status(code=code, message=message)


def ok(message: str | None = None) -> Status:
    return Status(200, message)


def bad_request(message: str | None = None) -> Status:
    return Status(400, message)


def unauthorized(message: str | None = None) -> Status:
    return Status(401, message)


def not_found(message: str | None = None) -> Status:
    return Status(404, message)


def redirect(
    target: str,
    permanent: bool = False,
    local_only: bool = False,
    preserve_method: bool = False,
) -> Redirect:
    return Redirect(
        target=target,
        permanent=permanent,
        local_only=local_only,
        preserve_method=preserve_method,
    )


def local_redirect(target: str, permanent: bool = False) -> Redirect:
    return Redirect(target=target, permanent=permanent, local_only=True)


def redirect_to_route(
    route_name: str,
    route_parameters: Mapping[str, Any] | None = None,
    permanent: bool = False,
    preserve_method: bool = False,
) -> RedirectToRoute:
    return RedirectToRoute(
        route_name=route_name,
        route_parameters=dict(route_parameters or {}),
        permanent=permanent,
        preserve_method=preserve_method,
    )


def redirect_to_action(
    action: str,
    controller: str,
    route_parameters: Mapping[str, Any] | None = None,
    permanent: bool = False,
) -> RedirectToRoute:
    # Controllers are blueprints, so "<controller>.<action>" is the endpoint.
    return redirect_to_route(
        f"{controller}.{action}", route_parameters, permanent=permanent
    )
