"""SQLModel database models for ocshare."""

from ocshare.models.journal import SyncJournalEntry, SyncJournalEntryBase

__all__ = [
    "SyncJournalEntry",
    "SyncJournalEntryBase",
]
