"""Remote path helpers shared by the folder registry and the journal."""

from __future__ import annotations

import posixpath


def normalize_path(path: str) -> str:
    """Normalize an absolute remote path.

    - Ensures leading /
    - Resolves .. and . references
    - Removes double slashes
    - Removes trailing slash (except for root)

    Examples:
        normalize_path("Photos") -> "/Photos"
        normalize_path("/a//b/") -> "/a/b"
        normalize_path("") -> "/"
    """
    if not path:
        return "/"

    path = path.strip()

    if not path.startswith("/"):
        path = "/" + path

    path = posixpath.normpath(path)

    # posixpath keeps a leading "//" as-is
    if path.startswith("//"):
        path = "/" + path.lstrip("/")

    if path != "/" and path.endswith("/"):
        path = path[:-1]

    return path


def is_within(root: str, path: str) -> bool:
    """True if *path* is *root* or lies below it at a ``/`` boundary.

    ``/foo2`` is not within ``/foo``.
    """
    if not path.startswith(root):
        return False
    return path == root or root.endswith("/") or path[len(root)] == "/"


def relative_to(root: str, path: str) -> str:
    """Path of *path* below *root*, without a leading ``/``.

    Assumes :func:`is_within` holds.  The root itself maps to ``""``.
    """
    relative = path[len(root):]
    if relative.startswith("/"):
        relative = relative[1:]
    return relative


def journal_path(path: str) -> str:
    """Canonical journal form: no leading or trailing slash, root is ``""``."""
    return normalize_path(path).strip("/")
