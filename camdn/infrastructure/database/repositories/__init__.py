"""SQLAlchemy-backed repository implementations."""

from .dimension_repository import SqlDimensionCache
from .short_link_repository import SqlShortLinkRepository

__all__ = [
    "SqlDimensionCache",
    "SqlShortLinkRepository",
]
