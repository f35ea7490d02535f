"""Incremental multipart reader that hands the first file part to the upload pipeline.

Request chunks are pulled from the ASGI receive channel only when the pipeline
asks for more data, so the disk write rate sets the network read rate and
nothing is spooled to a temporary file first.
"""
from __future__ import annotations

from collections import deque
from typing import AsyncIterator

from python_multipart.exceptions import FormParserError
from python_multipart.multipart import MultipartParser, parse_options_header
from starlette.requests import ClientDisconnect

from camdn.modules.assets.exceptions import StorageError, UploadTooLargeError, UploadValidationError


def multipart_boundary(content_type: str | None) -> bytes | None:
    """Return the boundary of a ``multipart/form-data`` content type, if any."""
    if not content_type:
        return None
    media_type, params = parse_options_header(content_type)
    if media_type.strip().lower() != b"multipart/form-data":
        return None
    return params.get(b"boundary") or None


class MultipartFileStream:
    """Read the first file part of a multipart body as it arrives.

    ``open()`` advances to the first part that carries a filename and returns
    that name (``None`` when the body has no file). ``read()`` then yields the
    part's bytes; other parts are skipped. Once more than ``max_bytes`` of
    file data has been seen ``UploadTooLargeError`` is raised.
    """

    def __init__(self, chunks: AsyncIterator[bytes], boundary: bytes, max_bytes: int) -> None:
        self._chunks = chunks
        self._max_bytes = max_bytes
        self._parser = MultipartParser(
            boundary,
            {
                "on_part_begin": self._on_part_begin,
                "on_part_data": self._on_part_data,
                "on_part_end": self._on_part_end,
                "on_header_field": self._on_header_field,
                "on_header_value": self._on_header_value,
                "on_header_end": self._on_header_end,
                "on_headers_finished": self._on_headers_finished,
            },
        )
        self._pending: deque[bytes] = deque()
        self._header_name = b""
        self._header_value = b""
        self._disposition = b""
        self._in_file = False
        self._file_done = False
        self._exhausted = False
        self.filename: str | None = None
        self.received = 0

    def _on_part_begin(self) -> None:
        self._disposition = b""

    def _on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_name += data[start:end]

    def _on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value += data[start:end]

    def _on_header_end(self) -> None:
        if self._header_name.lower() == b"content-disposition":
            self._disposition = self._header_value
        self._header_name = b""
        self._header_value = b""

    def _on_headers_finished(self) -> None:
        if self.filename is not None or self._file_done:
            return
        _, options = parse_options_header(self._disposition)
        filename = options.get(b"filename")
        if filename is not None:
            self.filename = filename.decode("utf-8", errors="replace")
            self._in_file = True

    def _on_part_data(self, data: bytes, start: int, end: int) -> None:
        if self._in_file:
            chunk = data[start:end]
            self.received += len(chunk)
            if chunk:
                self._pending.append(chunk)

    def _on_part_end(self) -> None:
        if self._in_file:
            self._in_file = False
            self._file_done = True

    async def _pump(self) -> None:
        try:
            chunk = await self._chunks.__anext__()
        except StopAsyncIteration:
            self._exhausted = True
            chunk = None
        except ClientDisconnect as exc:
            raise StorageError("Client disconnected during upload") from exc

        try:
            if chunk is None:
                self._parser.finalize()
            elif chunk:
                self._parser.write(chunk)
        except FormParserError as exc:
            raise UploadValidationError("Malformed multipart body") from exc

        if self.received > self._max_bytes:
            raise UploadTooLargeError("File too large")

    async def open(self) -> str | None:
        while self.filename is None and not self._exhausted:
            await self._pump()
        return self.filename

    async def read(self, size: int = -1) -> bytes:
        while not self._pending and not self._file_done and not self._exhausted:
            await self._pump()
        if not self._pending:
            return b""
        chunk = self._pending.popleft()
        if 0 < size < len(chunk):
            self._pending.appendleft(chunk[size:])
            chunk = chunk[:size]
        return chunk

    async def close(self) -> None:
        self._pending.clear()
