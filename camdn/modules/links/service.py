"""Short link use cases."""

from __future__ import annotations

import logging
import secrets
import string

from sqlalchemy.ext.asyncio import AsyncSession

from .exceptions import LinkNotFoundError, LinkValidationError, ShortIdExhaustedError
from .models import ShortLink
from .repository import ShortLinkRepository

logger = logging.getLogger(__name__)

SHORT_ID_ALPHABET = string.ascii_letters + string.digits
SHORT_ID_LENGTH = 8
MAX_ATTEMPTS = 5


def generate_short_id(length: int = SHORT_ID_LENGTH) -> str:
    return "".join(secrets.choice(SHORT_ID_ALPHABET) for _ in range(length))


class ShortLinkService:
    def __init__(self, repository: ShortLinkRepository) -> None:
        self._repository = repository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "ShortLinkService":
        # The SQL repository imports this package's models, so it is loaded on demand.
        from camdn.infrastructure.database.repositories.short_link_repository import SqlShortLinkRepository

        return cls(SqlShortLinkRepository(session))

    async def shorten(self, url: str | None) -> ShortLink:
        target = (url or "").strip()
        if not target:
            raise LinkValidationError("No URL provided")

        for _ in range(MAX_ATTEMPTS):
            short_id = generate_short_id()
            if await self._repository.get(short_id) is None:
                link = await self._repository.create(short_id=short_id, url=target)
                logger.info("Created short link %s", short_id)
                return link
        raise ShortIdExhaustedError("Could not allocate a short id")

    async def resolve(self, short_id: str) -> ShortLink:
        link = await self._repository.get(short_id)
        if link is None:
            raise LinkNotFoundError(short_id)
        return link
