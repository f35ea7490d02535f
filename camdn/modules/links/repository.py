"""Repository protocol for short links."""

from __future__ import annotations

from typing import Protocol

from .models import ShortLink


class ShortLinkRepository(Protocol):
    async def get(self, short_id: str) -> ShortLink | None:
        ...

    async def create(self, *, short_id: str, url: str) -> ShortLink:
        ...
