"""Account — the session context shares are bound to."""

from __future__ import annotations

import re
from dataclasses import dataclass

_VERSION_RE = re.compile(r"^\s*(\d+)(?:\.(\d+))?(?:\.(\d+))?")


def make_server_version(major: int, minor: int, patch: int) -> int:
    """Encode a version triple so that versions compare as integers."""
    return (major << 16) + (minor << 8) + patch


def parse_server_version(version: str) -> int:
    """Encode a version string such as ``"10.0.3.1"``.

    Components past the patch level are ignored.  An empty or
    unparsable string encodes to 0, the oldest known server.
    """
    match = _VERSION_RE.match(version or "")
    if not match:
        return 0
    major, minor, patch = (int(part) if part else 0 for part in match.groups())
    return make_server_version(major, minor, patch)


@dataclass(eq=False)
class Account:
    """Connection details of one server account.

    Compared by identity: two accounts pointing at the same server are
    still different sessions.
    """

    url: str
    """Server base URL, e.g. ``"https://cloud.example.com/"``."""

    server_version: str = ""
    """Version string reported by the server's status endpoint."""

    user: str = ""
    """Login of the acting user."""

    @property
    def server_version_int(self) -> int:
        return parse_server_version(self.server_version)

    def __repr__(self) -> str:
        return f"Account(url={self.url!r}, user={self.user!r}, server_version={self.server_version!r})"
