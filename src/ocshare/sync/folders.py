"""SyncFolder, FolderRegistry and the share-change invalidation notifier."""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .paths import is_within, normalize_path, relative_to

if TYPE_CHECKING:
    from collections.abc import Callable

    from ocshare.account import Account

    from .journal import SyncJournal

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class SyncFolder:
    """Configuration of one locally synced remote folder."""

    account: Account
    """Account the folder syncs against."""

    remote_path: str
    """Remote root of the folder, e.g. "/Documents"."""

    journal: SyncJournal
    """Journal receiving cache invalidation marks."""

    alias: str = ""
    """Unique name of the folder; defaults to the journal's folder name."""

    schedule_sync: Callable[[SyncFolder], Any] | None = None
    """Hook asking the sync engine for a pass soon.  May be sync or async."""

    sync_scheduled: bool = False
    """Set when an expedited sync was requested; reset by :meth:`take_scheduled_sync`."""

    def __post_init__(self) -> None:
        self.remote_path = normalize_path(self.remote_path)
        if not self.alias:
            self.alias = self.journal.folder

    async def invalidate_cached_entry(self, relative_path: str) -> None:
        """Make the next sync pass re-fetch *relative_path* from the server."""
        await self.journal.avoid_read_from_db_on_next_sync(relative_path)

    async def schedule_expedited_sync(self) -> None:
        """Request a sync pass for this folder soon."""
        self.sync_scheduled = True
        if self.schedule_sync is None:
            return
        result = self.schedule_sync(self)
        if inspect.isawaitable(result):
            await result

    def take_scheduled_sync(self) -> bool:
        """Consume a pending sync request.  Called by the sync engine when a pass starts."""
        scheduled = self.sync_scheduled
        self.sync_scheduled = False
        return scheduled


class FolderRegistry:
    """Registry of configured sync folders, keyed by alias."""

    def __init__(self) -> None:
        self._folders: dict[str, SyncFolder] = {}

    def add_folder(self, folder: SyncFolder) -> None:
        """Add or replace a folder."""
        self._folders[folder.alias] = folder

    def remove_folder(self, alias: str) -> None:
        self._folders.pop(alias, None)

    def has_folder(self, alias: str) -> bool:
        return alias in self._folders

    def list_folders(self) -> list[SyncFolder]:
        """List all folders, sorted by alias."""
        return sorted(self._folders.values(), key=lambda f: f.alias)

    def folders_for(self, account: Account) -> list[SyncFolder]:
        """Folders syncing against *account*."""
        return [f for f in self.list_folders() if f.account is account]


async def notify_share_changed(
    registry: FolderRegistry,
    account: Account,
    path: str,
) -> list[SyncFolder]:
    """Tell every folder containing *path* that its sharing state changed.

    The server does not invalidate the etags of parent directories when
    something is shared, so each matching folder gets the path marked in
    its journal and an expedited sync to pick up the new share flags.
    Returns the folders that were notified.
    """
    touched: list[SyncFolder] = []
    for folder in registry.folders_for(account):
        if not is_within(folder.remote_path, path):
            continue
        relative = relative_to(folder.remote_path, path)
        await folder.invalidate_cached_entry(relative)
        await folder.schedule_expedited_sync()
        logger.info("Share change on %s: resyncing folder %s (%r)", path, folder.alias, relative)
        touched.append(folder)
    return touched
