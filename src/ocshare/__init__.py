"""ocshare: share management for OCS file-sync servers.

Creates and updates user, group and public-link shares, and keeps the
local sync journal consistent with the sharing state on the server.
"""

__version__ = "0.1.0"

from ocshare.account import Account, make_server_version
from ocshare.events import EventBus, EventType, ShareEvent
from ocshare.sharing import (
    LinkShare,
    ParseError,
    PasswordRequiredError,
    PasswordUpdateError,
    Share,
    ShareError,
    Sharee,
    ShareJobs,
    ShareManager,
    SharePermission,
    ShareType,
    TransportError,
)
from ocshare.sync import FolderRegistry, SyncFolder, SyncJournal, notify_share_changed

__all__ = [
    "Account",
    "EventBus",
    "EventType",
    "FolderRegistry",
    "LinkShare",
    "ParseError",
    "PasswordRequiredError",
    "PasswordUpdateError",
    "Share",
    "ShareError",
    "ShareEvent",
    "ShareJobs",
    "ShareManager",
    "SharePermission",
    "ShareType",
    "Sharee",
    "SyncFolder",
    "SyncJournal",
    "TransportError",
    "__version__",
    "make_server_version",
    "notify_share_changed",
]
