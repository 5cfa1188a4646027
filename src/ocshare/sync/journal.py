"""SyncJournal — per-folder store of paths to re-fetch on the next sync.

The server does not change the etag of parent directories when sharing
state changes, so a sync pass that trusts its cached listing would miss
the new share flags.  Paths marked here make the sync engine bypass the
cached state for the path, its ancestors and its descendants until the
next pass completes and calls :meth:`SyncJournal.clear`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from ocshare.models.journal import SyncJournalEntry

from .paths import journal_path

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.ext.asyncio import AsyncSession

    from ocshare.models.journal import SyncJournalEntryBase

logger = logging.getLogger(__name__)


class SyncJournal:
    """Journal of one sync folder, backed by a SQLModel table.

    Receives an async session factory and opens one session per call.
    The entry model is injectable so several journals can share a
    database with different tables.
    """

    def __init__(
        self,
        session_factory: Callable[..., AsyncSession],
        folder: str,
        entry_model: type[SyncJournalEntryBase] = SyncJournalEntry,
    ) -> None:
        self._session_factory = session_factory
        self._folder = folder
        self._entry_model = entry_model

    @property
    def folder(self) -> str:
        return self._folder

    async def avoid_read_from_db_on_next_sync(self, path: str) -> bool:
        """Mark *path* (relative to the folder). Returns False if already marked."""
        path = journal_path(path)
        model = self._entry_model
        async with self._session_factory() as session:
            session.add(model(folder=self._folder, path=path))
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                return False
        logger.debug("Journal %s: avoid reading %r from cache", self._folder, path)
        return True

    async def pending(self) -> list[str]:
        """All marked paths, sorted."""
        model = self._entry_model
        async with self._session_factory() as session:
            result = await session.execute(
                select(model.path).where(model.folder == self._folder)
            )
            return sorted(set(result.scalars().all()))

    async def should_avoid_read(self, path: str) -> bool:
        """True if the cached state of *path* must not be trusted.

        That is the case for a marked path, for every directory above
        it, and for everything below it.
        """
        path = journal_path(path)
        for marked in await self.pending():
            if path == marked or marked == "" or path == "":
                return True
            if marked.startswith(path + "/") or path.startswith(marked + "/"):
                return True
        return False

    async def clear(self) -> int:
        """Drop all marks, once a sync pass has completed. Returns the count removed."""
        model = self._entry_model
        async with self._session_factory() as session:
            result = await session.execute(
                delete(model).where(model.folder == self._folder)
            )
            await session.commit()
        return result.rowcount or 0
