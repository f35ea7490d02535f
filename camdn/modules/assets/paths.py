"""Filename sanitizing and safe resolution of asset paths below the upload root."""

from __future__ import annotations

import re
from datetime import date
from pathlib import Path

from .exceptions import AssetNotFoundError
from .models import StoredAsset

MAX_NAME_BYTES = 255

_ILLEGAL_CHARS = re.compile(r'[/?<>\\:*|"]')
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x80-\x9f]")
_RESERVED_NAMES = re.compile(r"^\.+$")
_WINDOWS_RESERVED = re.compile(r"^(con|prn|aux|nul|com[0-9]|lpt[0-9])(\..*)?$", re.IGNORECASE)
_WINDOWS_TRAILING = re.compile(r"[. ]+$")


def sanitize_filename(name: str | None) -> str:
    """Strip everything that could turn a single path segment into something else.

    Removes separators and shell-hostile characters, control characters,
    dot-only names (``.``, ``..``), Windows device names and trailing dots or
    spaces, then truncates to 255 UTF-8 bytes. May return an empty string.
    """
    if not name:
        return ""
    cleaned = _ILLEGAL_CHARS.sub("", name)
    cleaned = _CONTROL_CHARS.sub("", cleaned)
    cleaned = _RESERVED_NAMES.sub("", cleaned)
    cleaned = _WINDOWS_RESERVED.sub("", cleaned)
    cleaned = _WINDOWS_TRAILING.sub("", cleaned)
    encoded = cleaned.encode("utf-8")
    if len(encoded) > MAX_NAME_BYTES:
        cleaned = encoded[:MAX_NAME_BYTES].decode("utf-8", errors="ignore")
    return cleaned


def date_bucket(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def resolve_asset(root: Path, date_segment: str, filename: str) -> StoredAsset:
    """Map untrusted URL segments onto a ``StoredAsset`` inside ``root``.

    Segments that change under sanitizing are rejected rather than repaired,
    so a traversal attempt never aliases onto another file.
    """
    safe_date = sanitize_filename(date_segment)
    safe_name = sanitize_filename(filename)
    if not safe_date or not safe_name:
        raise AssetNotFoundError(filename)
    if safe_date != date_segment or safe_name != filename:
        raise AssetNotFoundError(filename)

    asset = StoredAsset(date=safe_date, filename=safe_name, root=root)
    resolved_root = root.resolve()
    if not asset.file_path.resolve().is_relative_to(resolved_root):
        raise AssetNotFoundError(filename)
    return asset
