"""Dimension probing for images (Pillow) and videos (ffprobe).

Never raises: every failure is logged and reported as ``Dimensions(0, 0)``,
which callers treat as "unknown" and cache like any other result.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from .exceptions import ToolError
from .models import Dimensions, mime_category
from .tools import CommandRunner, run_tool

logger = logging.getLogger(__name__)


def parse_dimensions(output: str) -> Dimensions:
    """Parse ffprobe's ``WIDTHxHEIGHT`` csv output.

    Only the first two fields count: streams with side data (rotated phone
    footage) come back as ``1920x1080x``.
    """
    line = output.strip().splitlines()[0] if output.strip() else ""
    fields = line.strip().split("x")
    if len(fields) < 2:
        raise ValueError(f"unexpected probe output: {output!r}")
    width, height = int(fields[0]), int(fields[1])
    if width < 0 or height < 0:
        raise ValueError(f"negative dimensions in probe output: {output!r}")
    return Dimensions(width, height)


def _read_image_size(path: Path) -> Dimensions:
    with Image.open(path) as image:
        width, height = image.size
    return Dimensions(int(width), int(height))


class DimensionProber:
    def __init__(
        self,
        ffprobe_bin: str = "ffprobe",
        timeout: float = 30.0,
        runner: CommandRunner = run_tool,
    ) -> None:
        self.ffprobe_bin = ffprobe_bin
        self.timeout = timeout
        self._runner = runner

    async def probe(self, path: Path, mime_type: str) -> Dimensions:
        category = mime_category(mime_type)
        if category == "video":
            return await self.probe_video(path)
        if category == "image":
            return await self.probe_image(path)
        return Dimensions.unknown()

    async def probe_video(self, path: Path) -> Dimensions:
        cmd = [
            self.ffprobe_bin,
            "-v", "error",
            "-select_streams", "v:0",
            "-show_entries", "stream=width,height",
            "-of", "csv=s=x:p=0",
            str(path),
        ]
        try:
            output = await self._runner(cmd, self.timeout)
            return parse_dimensions(output.stdout)
        except (ToolError, ValueError) as exc:
            logger.warning("Video probe failed for %s: %s", path, exc)
            return Dimensions.unknown()

    async def probe_image(self, path: Path) -> Dimensions:
        try:
            return await asyncio.to_thread(_read_image_size, path)
        except (OSError, UnidentifiedImageError, ValueError, Image.DecompressionBombError) as exc:
            logger.warning("Image probe failed for %s: %s", path, exc)
            return Dimensions.unknown()
        except Exception:  # pragma: no cover - decoder specific
            logger.exception("Unexpected image decoder failure for %s", path)
            return Dimensions.unknown()
