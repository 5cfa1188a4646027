"""Local sync layer boundary: folders, journal and share-change invalidation."""

from ocshare.sync.folders import FolderRegistry, SyncFolder, notify_share_changed
from ocshare.sync.journal import SyncJournal
from ocshare.sync.paths import is_within, normalize_path, relative_to

__all__ = [
    "FolderRegistry",
    "SyncFolder",
    "SyncJournal",
    "is_within",
    "normalize_path",
    "notify_share_changed",
    "relative_to",
]
