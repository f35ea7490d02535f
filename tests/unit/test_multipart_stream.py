import pytest

from camdn.api.multipart import MultipartFileStream, multipart_boundary
from camdn.modules.assets.exceptions import UploadTooLargeError, UploadValidationError
from conftest import BOUNDARY, build_multipart


class ChunkFeed:
    """Async iterator over a body split into fixed-size pieces, counting pulls."""

    def __init__(self, body: bytes, piece: int = 512) -> None:
        self.pieces = [body[i:i + piece] for i in range(0, len(body), piece)]
        self.pulled = 0

    def __aiter__(self):
        return self

    async def __anext__(self) -> bytes:
        if self.pulled >= len(self.pieces):
            raise StopAsyncIteration
        self.pulled += 1
        return self.pieces[self.pulled - 1]


async def drain(stream: MultipartFileStream, size: int = 4096) -> bytes:
    out = b""
    while True:
        chunk = await stream.read(size)
        if not chunk:
            return out
        out += chunk


@pytest.mark.parametrize(
    "content_type, expected",
    [
        (f"multipart/form-data; boundary={BOUNDARY}", BOUNDARY.encode()),
        ('Multipart/Form-Data; boundary="quoted"', b"quoted"),
        ("multipart/form-data", None),
        ("application/x-www-form-urlencoded", None),
        ("", None),
        (None, None),
    ],
)
def test_multipart_boundary(content_type, expected):
    assert multipart_boundary(content_type) == expected


@pytest.mark.asyncio
async def test_first_file_part_is_streamed_and_other_parts_skipped():
    payload = bytes(range(256)) * 40
    body = build_multipart([
        ("note", None, b"hello"),
        ("file", "cat.png", payload),
        ("second", "dog.png", b"ignored"),
    ])
    stream = MultipartFileStream(ChunkFeed(body), BOUNDARY.encode(), max_bytes=1 << 20)

    assert await stream.open() == "cat.png"
    assert await drain(stream) == payload
    assert stream.received == len(payload)


@pytest.mark.asyncio
async def test_body_is_pulled_only_as_fast_as_it_is_read():
    payload = b"z" * 20_000
    feed = ChunkFeed(build_multipart([("file", "big.bin", payload)]), piece=1000)
    stream = MultipartFileStream(feed, BOUNDARY.encode(), max_bytes=1 << 20)

    await stream.open()
    assert feed.pulled == 1

    head = await stream.read(100_000)
    head += await stream.read(100_000)
    assert feed.pulled == 2

    assert head + await drain(stream) == payload
    assert feed.pulled == len(feed.pieces)


@pytest.mark.asyncio
async def test_read_honours_requested_size():
    payload = b"abcdefghij" * 100
    stream = MultipartFileStream(ChunkFeed(build_multipart([("file", "a.txt", payload)]), piece=4096),
                                 BOUNDARY.encode(), max_bytes=1 << 20)
    await stream.open()

    first = await stream.read(10)
    assert first == b"abcdefghij"
    assert first + await drain(stream) == payload


@pytest.mark.asyncio
async def test_body_without_file_opens_to_none():
    body = build_multipart([("note", None, b"just text")])
    stream = MultipartFileStream(ChunkFeed(body), BOUNDARY.encode(), max_bytes=1 << 20)

    assert await stream.open() is None
    assert await stream.read() == b""


@pytest.mark.asyncio
async def test_size_ceiling_stops_reading_early():
    feed = ChunkFeed(build_multipart([("file", "huge.iso", b"x" * 50_000)]), piece=1000)
    stream = MultipartFileStream(feed, BOUNDARY.encode(), max_bytes=4096)
    await stream.open()

    with pytest.raises(UploadTooLargeError):
        await drain(stream)
    assert feed.pulled < len(feed.pieces) // 2


@pytest.mark.asyncio
async def test_garbage_body_is_rejected():
    feed = ChunkFeed(b"this is not multipart at all\r\n" * 4)
    stream = MultipartFileStream(feed, BOUNDARY.encode(), max_bytes=1 << 20)

    with pytest.raises(UploadValidationError):
        await stream.open()
