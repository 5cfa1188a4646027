"""Shared fixtures for ocshare tests."""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING, Any

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from ocshare.account import Account
from ocshare.events import EventBus, EventType, ShareEvent
from ocshare.sharing.exceptions import TransportError
from ocshare.sharing.manager import ShareManager
from ocshare.sync.folders import FolderRegistry, SyncFolder
from ocshare.sync.journal import SyncJournal

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from sqlalchemy.ext.asyncio import AsyncEngine


BASE_URL = "https://cloud.example.com/"


def ocs_reply(data: Any = None, statuscode: int = 100, message: str = "OK") -> dict[str, Any]:
    """Build an OCS reply document."""
    return {"ocs": {"meta": {"status": "ok", "statuscode": statuscode, "message": message}, "data": data}}


class FakeShareJobs:
    """Scripted ShareJobs: queued replies or TransportErrors per method, calls recorded."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self._script: dict[str, list[Any]] = defaultdict(list)

    def script(self, method: str, *outcomes: Any) -> None:
        """Queue replies (dicts) or exceptions for *method*."""
        self._script[method].extend(outcomes)

    def calls_to(self, method: str) -> list[tuple[Any, ...]]:
        return [args for name, args in self.calls if name == method]

    async def _run(self, method: str, *args: Any) -> dict[str, Any]:
        self.calls.append((method, args))
        queue = self._script[method]
        outcome = queue.pop(0) if queue else ocs_reply()
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def get_shares(self, path):
        return await self._run("get_shares", path)

    async def get_shared_with_me(self):
        return await self._run("get_shared_with_me")

    async def create_share(self, path, share_type, share_with, permissions):
        return await self._run("create_share", path, share_type, share_with, permissions)

    async def create_link_share(self, path, name, password):
        return await self._run("create_link_share", path, name, password)

    async def set_permissions(self, share_id, permissions):
        return await self._run("set_permissions", share_id, permissions)

    async def set_name(self, share_id, name):
        return await self._run("set_name", share_id, name)

    async def set_password(self, share_id, password):
        return await self._run("set_password", share_id, password)

    async def set_expire_date(self, share_id, expire_date):
        return await self._run("set_expire_date", share_id, expire_date)

    async def delete_share(self, share_id):
        return await self._run("delete_share", share_id)


class EventCollector:
    """Records every event emitted on a bus."""

    def __init__(self, bus: EventBus) -> None:
        self.events: list[ShareEvent] = []
        bus.register_all(self._collect)

    async def _collect(self, event: ShareEvent) -> None:
        self.events.append(event)

    def of(self, event_type: EventType) -> list[ShareEvent]:
        return [e for e in self.events if e.event_type is event_type]

    @property
    def types(self) -> list[EventType]:
        return [e.event_type for e in self.events]


@pytest.fixture
async def async_engine() -> AsyncIterator[AsyncEngine]:
    """Async in-memory SQLite engine with all tables created."""
    eng = create_async_engine("sqlite+aiosqlite://", echo=False)
    async with eng.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def account() -> Account:
    return Account(url=BASE_URL, server_version="10.0.3", user="alice")


@pytest.fixture
def jobs() -> FakeShareJobs:
    return FakeShareJobs()


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def collector(bus: EventBus) -> EventCollector:
    return EventCollector(bus)


@pytest.fixture
def registry() -> FolderRegistry:
    return FolderRegistry()


@pytest.fixture
def docs_folder(
    account: Account,
    registry: FolderRegistry,
    session_factory: async_sessionmaker[AsyncSession],
) -> SyncFolder:
    """A sync folder rooted at /docs, registered for *account*."""
    folder = SyncFolder(
        account=account,
        remote_path="/docs",
        journal=SyncJournal(session_factory, "docs"),
    )
    registry.add_folder(folder)
    return folder


@pytest.fixture
def manager(
    account: Account,
    jobs: FakeShareJobs,
    bus: EventBus,
    registry: FolderRegistry,
) -> ShareManager:
    return ShareManager(account, jobs, event_bus=bus, folders=registry)


def transport_error(status_code: int, message: str = "") -> TransportError:
    return TransportError(status_code, message)
