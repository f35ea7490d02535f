"""Repository protocol for the asset dimension cache."""

from __future__ import annotations

from typing import Protocol

from .models import DimensionRecord


class DimensionCache(Protocol):
    """Durable path -> dimensions store.

    ``put`` ignores a path that is already present: the first record written
    for a path is the canonical one.
    """

    async def get(self, path: str) -> DimensionRecord | None:
        ...

    async def put(self, path: str, width: int, height: int) -> None:
        ...


class InMemoryDimensionCache:
    """Process-local cache with the same semantics, used in tests."""

    def __init__(self) -> None:
        self._records: dict[str, DimensionRecord] = {}

    async def get(self, path: str) -> DimensionRecord | None:
        return self._records.get(path)

    async def put(self, path: str, width: int, height: int) -> None:
        self._records.setdefault(path, DimensionRecord(path, max(width, 0), max(height, 0)))

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, path: object) -> bool:
        return path in self._records
