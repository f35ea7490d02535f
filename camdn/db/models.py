"""SQLAlchemy ORM models."""
from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from camdn.infrastructure.database.base import Base


class AssetSize(Base):
    __tablename__ = "asset_size_cache"

    path = Column(String(1024), primary_key=True)
    width = Column(Integer, nullable=False, default=0)
    height = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class ShortUrl(Base):
    __tablename__ = "short_urls"

    short_id = Column(String(16), primary_key=True)
    url = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
