"""ShareManager — orchestrates share requests, entity updates and events.

Every operation awaits its request(s) on the :class:`ShareJobs` layer and
reports the outcome on the :class:`~ocshare.events.EventBus`.  Failures are
never raised to the caller: each one is delivered as an event attributed
to the operation that caused it, and nothing is retried here.  Callers
that want fire-and-forget semantics wrap the call in ``asyncio.create_task``.

Creating or deleting a share changes what the server reports for the
parent directories, so those operations also notify the local sync
folders (see :func:`~ocshare.sync.folders.notify_share_changed`).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ocshare.events import EventBus, EventType, ShareEvent
from ocshare.sync.folders import FolderRegistry, notify_share_changed

from .exceptions import (
    ParseError,
    PasswordRequiredError,
    PasswordUpdateError,
    ShareError,
    TransportError,
)
from .parser import (
    ocs_data,
    ocs_status,
    parse_any_share,
    parse_expire_date,
    parse_link_share,
    parse_share,
)
from .permissions import SharePermission, find_existing_permissions, negotiate_permissions
from .types import ShareType

if TYPE_CHECKING:
    from collections.abc import Awaitable
    from datetime import date

    from ocshare.account import Account

    from .entities import LinkShare, Share
    from .protocol import Reply, ShareJobs

logger = logging.getLogger(__name__)

PASSWORD_REQUIRED_STATUS = 403
"""Status legacy servers answer when a link share needs a password."""


class ShareManager:
    """Creates, fetches and updates shares of one account."""

    def __init__(
        self,
        account: Account,
        jobs: ShareJobs,
        event_bus: EventBus | None = None,
        folders: FolderRegistry | None = None,
    ) -> None:
        self._account = account
        self._jobs = jobs
        self._events = event_bus if event_bus is not None else EventBus()
        self._folders = folders if folders is not None else FolderRegistry()

    @property
    def account(self) -> Account:
        return self._account

    @property
    def events(self) -> EventBus:
        return self._events

    @property
    def folders(self) -> FolderRegistry:
        return self._folders

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    async def _emit(self, event_type: EventType, path: str, **kwargs: Any) -> None:
        await self._events.emit(ShareEvent(event_type=event_type, path=path, **kwargs))

    async def _server_error(
        self,
        path: str,
        error: ShareError,
        status_code: int,
        message: str,
        share: Share | None = None,
    ) -> None:
        logger.warning("Share request on %s failed: %s %s", path, status_code, message)
        await self._emit(
            EventType.SERVER_ERROR,
            path,
            share=share,
            status_code=status_code,
            message=message,
            error=error,
        )

    async def _request(
        self, path: str, request: Awaitable[Reply], share: Share | None = None
    ) -> Reply | None:
        """Await *request*; on failure emit ``SERVER_ERROR`` and return None."""
        try:
            reply = await request
        except TransportError as e:
            await self._server_error(path, e, e.status_code, e.message, share)
            return None
        logger.debug("Share request on %s finished: %s", path, ocs_status(reply))
        return reply

    async def _parse_error(self, path: str, reply: Reply, error: ParseError) -> None:
        code, _ = ocs_status(reply)
        await self._server_error(path, error, code, str(error))

    async def _share_changed(self, path: str) -> None:
        await notify_share_changed(self._folders, self._account, path)

    # ------------------------------------------------------------------
    # Creation and listing
    # ------------------------------------------------------------------

    async def create_link_share(
        self, path: str, name: str = "", password: str = ""
    ) -> LinkShare | None:
        """Create a public link on *path*.

        Emits ``LINK_SHARE_CREATED`` and notifies the sync folders on
        success.  A 403 means the server requires a password and is
        reported as ``LINK_SHARE_REQUIRES_PASSWORD`` instead of an error.
        """
        try:
            reply = await self._jobs.create_link_share(path, name, password)
        except TransportError as e:
            if e.status_code == PASSWORD_REQUIRED_STATUS:
                await self._password_required(path, e.message)
            else:
                await self._server_error(path, e, e.status_code, e.message)
            return None

        # Older servers answer 200 with an OCS 403 when a password is mandatory
        code, message = ocs_status(reply)
        if code == PASSWORD_REQUIRED_STATUS:
            await self._password_required(path, message)
            return None

        try:
            share = parse_link_share(ocs_data(reply) or {}, self._account, manager=self)
        except ParseError as e:
            await self._parse_error(path, reply, e)
            return None

        await self._emit(EventType.LINK_SHARE_CREATED, share.path, share=share)
        await self._share_changed(share.path)
        return share

    async def _password_required(self, path: str, message: str) -> None:
        logger.debug("Link share on %s requires a password: %s", path, message)
        await self._emit(
            EventType.LINK_SHARE_REQUIRES_PASSWORD,
            path,
            message=message,
            error=PasswordRequiredError(message),
        )

    async def create_share(
        self,
        path: str,
        share_type: ShareType,
        share_with: str,
        permissions: SharePermission = SharePermission.DEFAULT,
    ) -> Share | None:
        """Share *path* with a user, group or remote recipient.

        First fetches the shares granted to us, so that re-sharing an
        item never asks for more permissions than we were given.  The
        share list may change between the two requests; nothing guards
        against that here.
        """
        if share_type == ShareType.LINK:
            raise ValueError("Link shares are created with create_link_share()")

        reply = await self._request(path, self._jobs.get_shared_with_me())
        if reply is None:
            return None

        shared_with_me = ocs_data(reply)
        if shared_with_me is None:
            shared_with_me = []
        if not isinstance(shared_with_me, list):
            await self._parse_error(path, reply, ParseError("data"))
            return None
        entries = [e for e in shared_with_me if isinstance(e, dict)]
        existing = find_existing_permissions(entries, path)
        valid = negotiate_permissions(permissions, existing)
        if valid != permissions:
            logger.debug(
                "Limiting permissions on %s from %r to %r (granted %r)",
                path,
                permissions,
                valid,
                existing,
            )

        reply = await self._request(
            path, self._jobs.create_share(path, share_type, share_with, valid)
        )
        if reply is None:
            return None

        try:
            share = parse_share(ocs_data(reply) or {}, self._account, manager=self)
        except ParseError as e:
            await self._parse_error(path, reply, e)
            return None

        await self._emit(EventType.SHARE_CREATED, share.path, share=share)
        await self._share_changed(share.path)
        return share

    async def fetch_shares(self, path: str) -> list[Share] | None:
        """Fetch all shares on *path*; emits ``SHARES_FETCHED`` in server order."""
        reply = await self._request(path, self._jobs.get_shares(path))
        if reply is None:
            return None

        entries = ocs_data(reply)
        if entries is None:
            entries = []
        try:
            if not isinstance(entries, list):
                raise ParseError("data")
            logger.debug(
                "Server %s: fetched %d shares on %s",
                self._account.server_version,
                len(entries),
                path,
            )
            shares = [parse_any_share(data, self._account, manager=self) for data in entries]
        except ParseError as e:
            await self._parse_error(path, reply, e)
            return None

        await self._emit(EventType.SHARES_FETCHED, path, shares=tuple(shares))
        return shares

    # ------------------------------------------------------------------
    # Per-share updates (reached through Share / LinkShare)
    # ------------------------------------------------------------------

    async def set_permissions(self, share: Share, permissions: SharePermission) -> bool:
        reply = await self._request(
            share.path, self._jobs.set_permissions(share.id, permissions), share
        )
        if reply is None:
            return False
        share._permissions_set(permissions)
        await self._emit(EventType.PERMISSIONS_SET, share.path, share=share)
        return True

    async def delete_share(self, share: Share) -> bool:
        reply = await self._request(share.path, self._jobs.delete_share(share.id), share)
        if reply is None:
            return False
        share._mark_deleted()
        await self._emit(EventType.SHARE_DELETED, share.path, share=share)
        await self._share_changed(share.path)
        return True

    async def set_name(self, share: LinkShare, name: str) -> bool:
        reply = await self._request(share.path, self._jobs.set_name(share.id, name), share)
        if reply is None:
            return False
        share._name_set(name)
        await self._emit(EventType.NAME_SET, share.path, share=share)
        return True

    async def set_password(self, share: LinkShare, password: str) -> bool:
        """Set or, with an empty *password*, remove the link password.

        Failures go to ``PASSWORD_SET_ERROR`` rather than ``SERVER_ERROR``
        so callers can re-prompt.
        """
        try:
            await self._jobs.set_password(share.id, password)
        except TransportError as e:
            logger.warning("Setting password on %s failed: %s", share.path, e)
            await self._emit(
                EventType.PASSWORD_SET_ERROR,
                share.path,
                share=share,
                status_code=e.status_code,
                message=e.message,
                error=PasswordUpdateError(e.status_code, e.message),
            )
            return False
        share._password_changed(password != "")
        await self._emit(EventType.PASSWORD_SET, share.path, share=share)
        return True

    async def set_expire_date(self, share: LinkShare, expire_date: date | None) -> bool:
        reply = await self._request(
            share.path, self._jobs.set_expire_date(share.id, expire_date), share
        )
        if reply is None:
            return False
        # Newer servers echo the stored date back
        data = ocs_data(reply)
        if isinstance(data, dict) and isinstance(data.get("expiration"), str):
            expire_date = parse_expire_date(data["expiration"])
        share._expire_date_set(expire_date)
        await self._emit(EventType.EXPIRE_DATE_SET, share.path, share=share)
        return True
