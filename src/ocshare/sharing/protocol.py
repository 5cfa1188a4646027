"""ShareJobs protocol — the request layer consumed by ShareManager.

Each method performs exactly one exchange with the OCS sharing API
and returns the decoded reply document::

    {"ocs": {"meta": {"statuscode": 100, "message": "OK"}, "data": ...}}

A non-success answer is raised as :class:`~ocshare.sharing.exceptions.TransportError`
carrying the status code and message.  Authentication, timeouts and HTTP
details belong to the implementation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from datetime import date

    from .permissions import SharePermission
    from .types import ShareType

Reply = dict[str, Any]


@runtime_checkable
class ShareJobs(Protocol):
    """Async request layer for share operations."""

    async def get_shares(self, path: str) -> Reply:
        """List shares on *path* (``data`` is a list)."""
        ...

    async def get_shared_with_me(self) -> Reply:
        """List shares granted to the acting user (``data`` is a list)."""
        ...

    async def create_share(
        self,
        path: str,
        share_type: ShareType,
        share_with: str,
        permissions: SharePermission,
    ) -> Reply:
        """Create a user, group or remote share.

        *permissions* may be ``SharePermission.DEFAULT`` when neither the
        caller nor an existing grant constrains it.  Implementations must
        then leave ``permissions`` out of the request so the server applies
        its own default; the sentinel is never sent.
        """
        ...

    async def create_link_share(self, path: str, name: str, password: str) -> Reply: ...

    async def set_permissions(self, share_id: str, permissions: SharePermission) -> Reply: ...

    async def set_name(self, share_id: str, name: str) -> Reply: ...

    async def set_password(self, share_id: str, password: str) -> Reply: ...

    async def set_expire_date(self, share_id: str, expire_date: date | None) -> Reply: ...

    async def delete_share(self, share_id: str) -> Reply: ...
