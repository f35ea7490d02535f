"""Domain models for stored assets."""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from urllib.parse import quote

DEFAULT_MIME_TYPE = "application/octet-stream"
THUMBNAIL_SUFFIX = ".thumb.jpg"


@dataclass(frozen=True, slots=True)
class Dimensions:
    width: int = 0
    height: int = 0

    @classmethod
    def unknown(cls) -> "Dimensions":
        return cls(0, 0)

    @property
    def is_known(self) -> bool:
        return self.width > 0 and self.height > 0


@dataclass(frozen=True, slots=True)
class DimensionRecord:
    path: str
    width: int
    height: int

    @property
    def dimensions(self) -> Dimensions:
        return Dimensions(self.width, self.height)


@dataclass(frozen=True, slots=True)
class StoredAsset:
    """A file below the upload root addressed by ``{date}/{filename}``."""

    date: str
    filename: str
    root: Path

    @property
    def relative_path(self) -> str:
        return str(PurePosixPath(self.date, self.filename))

    @property
    def file_path(self) -> Path:
        return self.root / self.date / self.filename

    @property
    def thumbnail_path(self) -> Path:
        return self.file_path.with_name(self.filename + THUMBNAIL_SUFFIX)

    @property
    def raw_url(self) -> str:
        return f"/f/{quote(self.relative_path)}"

    @property
    def thumbnail_url(self) -> str:
        return f"/f/{quote(self.relative_path + THUMBNAIL_SUFFIX)}"

    @property
    def view_url(self) -> str:
        return f"/s/{quote(self.relative_path)}"

    @property
    def mime_type(self) -> str:
        return guess_mime_type(self.filename)


def guess_mime_type(filename: str) -> str:
    mime_type, _ = mimetypes.guess_type(filename, strict=False)
    return mime_type or DEFAULT_MIME_TYPE


def mime_category(mime_type: str) -> str:
    """Return the top-level type, e.g. ``image`` for ``image/png``."""
    return mime_type.split("/", 1)[0].lower()


def is_probeable(mime_type: str) -> bool:
    return mime_category(mime_type) in {"image", "video"}
