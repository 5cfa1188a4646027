"""SyncJournalEntry model — paths whose cached listing must be re-fetched.

Provides ``SyncJournalEntryBase`` (non-table) and ``SyncJournalEntry``
(concrete table).  Subclass the base with ``table=True``, a custom
``__tablename__`` and a ``UniqueConstraint("folder", "path")`` to keep
several journals in one database.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import Field, SQLModel


class SyncJournalEntryBase(SQLModel):
    """One "avoid reading from the local cache" mark for a sync folder."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    folder: str = Field(index=True)
    path: str = Field(index=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_type=DateTime(timezone=True),  # type: ignore[invalid-argument-type]
    )


class SyncJournalEntry(SyncJournalEntryBase, table=True):
    """Default journal table — ``ocshare_sync_journal``."""

    __tablename__ = "ocshare_sync_journal"
    __table_args__ = (UniqueConstraint("folder", "path"),)
