"""Share and LinkShare — in-memory view of one share on the server.

Entities are created by the parsers from a successful reply.  Their
mutable fields are only written by the completion of the operation that
targets that field; callers go through the async mutators, which route
the request through the owning :class:`~ocshare.sharing.manager.ShareManager`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import urlsplit, urlunsplit

from .permissions import SharePermission
from .types import ShareType

if TYPE_CHECKING:
    from datetime import date

    from ocshare.account import Account

    from .manager import ShareManager
    from .types import Sharee


class Share:
    """A grant of access on one remote path."""

    def __init__(
        self,
        account: Account,
        id: str,
        path: str,
        share_type: ShareType | int,
        permissions: SharePermission,
        share_with: Sharee | None = None,
        *,
        manager: ShareManager | None = None,
    ) -> None:
        self._account = account
        self._id = id
        self._path = path
        self._share_type = share_type
        self._permissions = permissions
        self._share_with = share_with
        self._manager = manager
        self._deleted = False

    @property
    def account(self) -> Account:
        return self._account

    @property
    def id(self) -> str:
        return self._id

    @property
    def path(self) -> str:
        return self._path

    @property
    def share_type(self) -> ShareType | int:
        return self._share_type

    @property
    def permissions(self) -> SharePermission:
        return self._permissions

    @property
    def share_with(self) -> Sharee | None:
        return self._share_with

    @property
    def deleted(self) -> bool:
        """True once a delete request for this share succeeded."""
        return self._deleted

    @property
    def manager(self) -> ShareManager:
        if self._manager is None:
            raise RuntimeError(f"Share {self._id} is not bound to a ShareManager")
        return self._manager

    async def set_permissions(self, permissions: SharePermission) -> None:
        """Request new permissions; emits ``PERMISSIONS_SET`` on success."""
        await self.manager.set_permissions(self, permissions)

    async def delete(self) -> None:
        """Delete the share on the server; emits ``SHARE_DELETED`` on success."""
        await self.manager.delete_share(self)

    # Completion hooks, called by the manager once the matching request succeeded.

    def _permissions_set(self, permissions: SharePermission) -> None:
        self._permissions = permissions

    def _mark_deleted(self) -> None:
        self._deleted = True

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self._id!r}, path={self._path!r}, share_type={self._share_type!r})"


class LinkShare(Share):
    """A public link share: token-derived URL, optional password and expiry."""

    def __init__(
        self,
        account: Account,
        id: str,
        path: str,
        name: str,
        token: str,
        permissions: SharePermission,
        password_set: bool,
        url: str,
        expire_date: date | None = None,
        *,
        manager: ShareManager | None = None,
    ) -> None:
        super().__init__(account, id, path, ShareType.LINK, permissions, manager=manager)
        self._name = name
        self._token = token
        self._password_set = password_set
        self._url = url
        self._expire_date = expire_date

    @property
    def name(self) -> str:
        return self._name

    @property
    def token(self) -> str:
        return self._token

    @property
    def url(self) -> str:
        return self._url

    @property
    def direct_download_link(self) -> str:
        """The link with ``/download`` appended to its path."""
        parts = urlsplit(self._url)
        return urlunsplit(parts._replace(path=parts.path + "/download"))

    @property
    def password_set(self) -> bool:
        return self._password_set

    @property
    def expire_date(self) -> date | None:
        return self._expire_date

    @property
    def public_upload(self) -> bool:
        return bool(self._permissions & SharePermission.CREATE)

    @property
    def show_file_listing(self) -> bool:
        return bool(self._permissions & SharePermission.READ)

    async def set_name(self, name: str) -> None:
        await self.manager.set_name(self, name)

    async def set_password(self, password: str) -> None:
        """Emits ``PASSWORD_SET`` on success, ``PASSWORD_SET_ERROR`` on failure."""
        await self.manager.set_password(self, password)

    async def set_expire_date(self, expire_date: date | None) -> None:
        await self.manager.set_expire_date(self, expire_date)

    def _name_set(self, name: str) -> None:
        self._name = name

    def _password_changed(self, password_set: bool) -> None:
        self._password_set = password_set

    def _expire_date_set(self, expire_date: date | None) -> None:
        self._expire_date = expire_date
