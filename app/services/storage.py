"""Key-value persistence backends for the tour store.

The store reads one key, writes several keys atomically, and can drop a key.
``MemoryStorage`` keeps values in a dict (tests, throwaway runs);
``SqlStorage`` keeps them in the ``storage_items`` table.
"""
from __future__ import annotations

from collections.abc import Mapping

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models.storage_item import StorageItem


class KeyValueStorage:
    """Interface for string key -> string value persistence."""

    async def get_item(self, key: str) -> str | None:
        raise NotImplementedError

    async def set_items(self, items: Mapping[str, str]) -> None:
        """Write all items or none of them."""
        raise NotImplementedError

    async def remove_item(self, key: str) -> None:
        """Delete one key. Missing keys are ignored."""
        raise NotImplementedError


class MemoryStorage(KeyValueStorage):
    def __init__(self, initial: Mapping[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})
        self.writes = 0

    async def get_item(self, key: str) -> str | None:
        return self.data.get(key)

    async def set_items(self, items: Mapping[str, str]) -> None:
        self.data.update(items)
        self.writes += 1

    async def remove_item(self, key: str) -> None:
        if self.data.pop(key, None) is not None:
            self.writes += 1


class SqlStorage(KeyValueStorage):
    """Key-value rows in SQL; one transaction per write."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def get_item(self, key: str) -> str | None:
        async with self.session_factory() as db:
            result = await db.execute(select(StorageItem.value).where(StorageItem.key == key))
            return result.scalar_one_or_none()

    async def set_items(self, items: Mapping[str, str]) -> None:
        async with self.session_factory() as db:
            async with db.begin():
                for key, value in items.items():
                    await db.merge(StorageItem(key=key, value=value))

    async def remove_item(self, key: str) -> None:
        async with self.session_factory() as db:
            async with db.begin():
                await db.execute(delete(StorageItem).where(StorageItem.key == key))
