"""Share types and recipient descriptors."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class ShareType(IntEnum):
    """Numeric share types used by the OCS sharing API."""

    USER = 0
    GROUP = 1
    LINK = 3
    EMAIL = 4
    CONTACT = 5
    REMOTE = 6
    CIRCLE = 7
    ROOM = 10


def coerce_share_type(value: object) -> ShareType | int:
    """Map a raw ``share_type`` to :class:`ShareType`, keeping unknown codes as ints."""
    # Missing or non-numeric codes read as 0.
    try:
        code = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return ShareType.USER
    try:
        return ShareType(code)
    except ValueError:
        return code


@dataclass(frozen=True, slots=True)
class Sharee:
    """The user, group or address a share is granted to."""

    share_with: str
    display_name: str
    type: ShareType | int

    def format(self) -> str:
        if not self.display_name or self.display_name == self.share_with:
            return self.share_with
        return f"{self.display_name} ({self.share_with})"
