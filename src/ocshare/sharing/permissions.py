"""Share permission flags and re-share permission negotiation."""

from __future__ import annotations

from enum import IntFlag
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


class SharePermission(IntFlag):
    """Permission bits understood by the OCS sharing API.

    ``DEFAULT`` is a sentinel meaning "unspecified"; it is never
    combined with the other bits.
    """

    NONE = 0
    READ = 1
    UPDATE = 2
    CREATE = 4
    DELETE = 8
    SHARE = 16
    DEFAULT = 1 << 30

    ALL = READ | UPDATE | CREATE | DELETE | SHARE


def _permission_bits(value: Any) -> int:
    """Raw permission value as an int; anything non-numeric grants nothing."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def find_existing_permissions(
    entries: Iterable[Mapping[str, Any]], path: str
) -> SharePermission:
    """Permissions the acting user was granted on *path*.

    *entries* is the ``data`` list of a "shared with me" reply.  Entries
    are matched on ``file_target``; the last match wins.  Returns
    ``DEFAULT`` when nothing on *path* was shared with us.
    """
    existing = SharePermission.DEFAULT
    for entry in entries:
        if entry.get("file_target") == path:
            existing = SharePermission(_permission_bits(entry.get("permissions")))
    return existing


def negotiate_permissions(
    desired: SharePermission, existing: SharePermission
) -> SharePermission:
    """Limit *desired* to what was granted to us on the same item.

    A re-share can never carry more permissions than the share it was
    derived from.
    """
    valid = desired
    if valid == SharePermission.DEFAULT:
        valid = existing
    if existing != SharePermission.DEFAULT:
        valid &= existing
    return valid
