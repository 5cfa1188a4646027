"""Tests for sync folders, path matching and share-change invalidation."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from ocshare.account import Account
from ocshare.sync.folders import FolderRegistry, SyncFolder, notify_share_changed
from ocshare.sync.journal import SyncJournal
from ocshare.sync.paths import is_within, normalize_path, relative_to

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------


class TestIsWithin:
    @pytest.mark.parametrize("path", ["/a/b", "/a/b/c", "/a/b/c/d.txt"])
    def test_matches(self, path: str) -> None:
        assert is_within("/a/b", path)

    @pytest.mark.parametrize("path", ["/a/bc", "/a", "/x/a/b", "/foo2"])
    def test_no_match(self, path: str) -> None:
        assert not is_within("/a/b", path)

    def test_string_prefix_is_not_enough(self) -> None:
        assert not is_within("/foo", "/foo2")

    def test_root_matches_everything(self) -> None:
        assert is_within("/", "/anything/deep")
        assert is_within("/", "/")


class TestRelativeTo:
    def test_root_itself(self) -> None:
        assert relative_to("/a/b", "/a/b") == ""

    def test_child(self) -> None:
        assert relative_to("/a/b", "/a/b/c/d") == "c/d"

    def test_from_server_root(self) -> None:
        assert relative_to("/", "/docs/x") == "docs/x"


class TestNormalizePath:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("", "/"),
            ("/", "/"),
            ("docs", "/docs"),
            ("/docs/", "/docs"),
            ("//docs//a", "/docs/a"),
            ("/docs/./a/../b", "/docs/b"),
        ],
    )
    def test_normalize(self, raw: str, expected: str) -> None:
        assert normalize_path(raw) == expected


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


@pytest.fixture
def other_account() -> Account:
    return Account(url="https://other.example.com/", server_version="10.0.0", user="carol")


def _folder(factory, account: Account, remote_path: str, alias: str, **kwargs) -> SyncFolder:
    return SyncFolder(
        account=account,
        remote_path=remote_path,
        journal=SyncJournal(factory, alias),
        **kwargs,
    )


class TestSyncFolder:
    def test_alias_defaults_to_journal(
        self, account: Account, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        folder = _folder(session_factory, account, "/Photos/", "photos")
        assert folder.alias == "photos"
        assert folder.remote_path == "/Photos"

    async def test_sync_hook(
        self, account: Account, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        seen: list[SyncFolder] = []
        folder = _folder(session_factory, account, "/p", "p", schedule_sync=seen.append)
        await folder.schedule_expedited_sync()
        assert seen == [folder]
        assert folder.sync_scheduled is True

    async def test_async_sync_hook(
        self, account: Account, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        seen: list[str] = []

        async def hook(folder: SyncFolder) -> None:
            seen.append(folder.alias)

        folder = _folder(session_factory, account, "/p", "p", schedule_sync=hook)
        await folder.schedule_expedited_sync()
        assert seen == ["p"]

    async def test_take_scheduled_sync_resets(
        self, account: Account, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        folder = _folder(session_factory, account, "/p", "p")
        assert folder.take_scheduled_sync() is False

        await folder.schedule_expedited_sync()
        await folder.schedule_expedited_sync()
        assert folder.take_scheduled_sync() is True
        assert folder.sync_scheduled is False
        assert folder.take_scheduled_sync() is False


class TestFolderRegistry:
    def test_add_list_remove(
        self, account: Account, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        registry = FolderRegistry()
        registry.add_folder(_folder(session_factory, account, "/b", "b"))
        registry.add_folder(_folder(session_factory, account, "/a", "a"))
        assert [f.alias for f in registry.list_folders()] == ["a", "b"]
        assert registry.has_folder("a")
        registry.remove_folder("a")
        registry.remove_folder("missing")
        assert [f.alias for f in registry.list_folders()] == ["b"]

    def test_folders_for_account(
        self,
        account: Account,
        other_account: Account,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        registry = FolderRegistry()
        mine = _folder(session_factory, account, "/a", "a")
        registry.add_folder(mine)
        registry.add_folder(_folder(session_factory, other_account, "/a", "other"))
        assert registry.folders_for(account) == [mine]


# ---------------------------------------------------------------------------
# notify_share_changed
# ---------------------------------------------------------------------------


class TestNotifyShareChanged:
    async def test_matching_folders_only(
        self,
        account: Account,
        other_account: Account,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        registry = FolderRegistry()
        ab = _folder(session_factory, account, "/a/b", "ab")
        abc = _folder(session_factory, account, "/a/bc", "abc")
        root = _folder(session_factory, account, "/", "root")
        foreign = _folder(session_factory, other_account, "/a/b", "foreign")
        for folder in (ab, abc, root, foreign):
            registry.add_folder(folder)

        touched = await notify_share_changed(registry, account, "/a/b/c")

        assert {f.alias for f in touched} == {"ab", "root"}
        assert await ab.journal.pending() == ["c"]
        assert await root.journal.pending() == ["a/b/c"]
        assert await abc.journal.pending() == []
        assert await foreign.journal.pending() == []
        assert ab.sync_scheduled and root.sync_scheduled
        assert not abc.sync_scheduled and not foreign.sync_scheduled

    async def test_folder_root_itself(
        self, account: Account, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        registry = FolderRegistry()
        ab = _folder(session_factory, account, "/a/b", "ab")
        registry.add_folder(ab)

        assert await notify_share_changed(registry, account, "/a/b") == [ab]
        assert await ab.journal.pending() == [""]

    async def test_parent_of_folder_does_not_match(
        self, account: Account, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        registry = FolderRegistry()
        registry.add_folder(_folder(session_factory, account, "/a/b", "ab"))
        assert await notify_share_changed(registry, account, "/a") == []

    async def test_no_folders(self, account: Account) -> None:
        assert await notify_share_changed(FolderRegistry(), account, "/a") == []
