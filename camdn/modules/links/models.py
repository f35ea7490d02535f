"""Domain models for short links."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class ShortLink:
    short_id: str
    url: str
    created_at: Optional[datetime] = None
