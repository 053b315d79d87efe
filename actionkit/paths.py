from __future__ import annotations

from pathlib import Path
from typing import Union

from .errors import PathTraversalError

Pathish = Union[str, Path]


def normalize_relative(path: Pathish) -> str:
    """
    Turn a virtual path into one relative to the root.

    ``/sample.pdf`` and ``~/sample.pdf`` both mean "sample.pdf under the
    root", the way web-root file results are usually written.
    """
    s = str(path).replace("\\", "/")
    if s.startswith("~/"):
        s = s[2:]
    return s.lstrip("/")


def contain(path: Pathish, root: Pathish) -> Path:
    """
    Resolve *path* under *root* and return the absolute result.

    The path is always taken relative to the root. Symlinks and ``.``/``..``
    are resolved on both sides first, then the result must be the root
    itself or sit below it, segment by segment.
    """
    root_abs = Path(root).expanduser().resolve()
    candidate = (root_abs / normalize_relative(path)).resolve()
    try:
        candidate.relative_to(root_abs)
    except ValueError:
        raise PathTraversalError(
            "Path escapes the configured root",
            details={"path": str(path), "root": str(root_abs)},
        ) from None
    return candidate
