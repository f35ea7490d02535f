"""Upload pipeline: stream uploads into date buckets and derive video thumbnails."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Callable, Protocol

from .exceptions import StorageError, ToolError, UploadTooLargeError, UploadValidationError
from .models import StoredAsset, mime_category
from .paths import date_bucket, sanitize_filename
from .tools import CommandRunner, run_tool

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


class UploadSource(Protocol):
    async def read(self, size: int = -1) -> bytes:
        ...

    async def close(self) -> None:
        ...


@dataclass(frozen=True, slots=True)
class StoredUpload:
    asset: StoredAsset
    locator: str
    size_bytes: int

    @property
    def needs_thumbnail(self) -> bool:
        return mime_category(self.asset.mime_type) == "video"


class UploadPipeline:
    def __init__(
        self,
        storage_root: Path,
        public_base_url: str = "",
        ffmpeg_bin: str = "ffmpeg",
        thumbnail_timeout: float = 120.0,
        runner: CommandRunner = run_tool,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.storage_root = storage_root
        self.public_base_url = public_base_url.rstrip("/")
        self.ffmpeg_bin = ffmpeg_bin
        self.thumbnail_timeout = thumbnail_timeout
        self._runner = runner
        self._today = today

    def locator_for(self, asset: StoredAsset) -> str:
        return self.public_base_url + asset.view_url

    async def store(self, file_name: str | None, source: UploadSource) -> StoredUpload:
        safe_name = sanitize_filename(file_name)
        if not safe_name:
            await source.close()
            raise UploadValidationError("No file name provided")

        asset = StoredAsset(date=date_bucket(self._today()), filename=safe_name, root=self.storage_root)
        target_path = asset.file_path
        total_size = 0
        try:
            target_path.parent.mkdir(parents=True, exist_ok=True)
            # A failed copy leaves the partial file behind; a retry overwrites it.
            with target_path.open("wb") as buffer:
                while True:
                    chunk = await source.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    buffer.write(chunk)
                    total_size += len(chunk)
        except UploadTooLargeError:
            target_path.unlink(missing_ok=True)
            logger.warning("Discarded oversized upload %s after %d bytes", asset.relative_path, total_size)
            raise
        except OSError as exc:
            raise StorageError("Error uploading file") from exc
        finally:
            await source.close()

        logger.info("Stored upload %s (%d bytes)", asset.relative_path, total_size)
        return StoredUpload(asset=asset, locator=self.locator_for(asset), size_bytes=total_size)

    async def derive_thumbnail(self, asset: StoredAsset) -> bool:
        """Write a frame from the 1 second mark next to the video.

        Returns whether the thumbnail was produced; failures are only logged.
        """
        cmd = [
            self.ffmpeg_bin,
            "-y",
            "-i", str(asset.file_path),
            "-ss", "00:00:01",
            "-frames:v", "1",
            str(asset.thumbnail_path),
        ]
        try:
            await self._runner(cmd, self.thumbnail_timeout)
        except ToolError as exc:
            logger.warning("Thumbnail derivation failed for %s: %s", asset.relative_path, exc)
            return False
        logger.info("Derived thumbnail for %s", asset.relative_path)
        return True
