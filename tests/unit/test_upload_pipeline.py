from datetime import date
from pathlib import Path

import pytest

from camdn.modules.assets.exceptions import StorageError, UploadTooLargeError, UploadValidationError
from camdn.modules.assets.models import StoredAsset
from camdn.modules.assets.pipeline import CHUNK_SIZE, UploadPipeline
from conftest import FakeRunner


class ChunkedSource:
    """Upload stand-in that hands out data in fixed pieces and records reads."""

    def __init__(self, data: bytes, fail_after: int | None = None) -> None:
        self._data = data
        self._offset = 0
        self._fail_after = fail_after
        self.read_sizes: list[int] = []
        self.closed = False

    async def read(self, size: int = -1) -> bytes:
        self.read_sizes.append(size)
        if self._fail_after is not None and len(self.read_sizes) > self._fail_after:
            raise OSError("connection reset")
        chunk = self._data[self._offset:self._offset + size]
        self._offset += len(chunk)
        return chunk

    async def close(self) -> None:
        self.closed = True


def make_pipeline(root: Path, runner: FakeRunner | None = None, day: date = date(2024, 3, 7)) -> UploadPipeline:
    return UploadPipeline(
        root,
        public_base_url="https://cdn.example.com/",
        runner=runner or FakeRunner(),
        today=lambda: day,
    )


@pytest.mark.asyncio
async def test_store_streams_into_date_bucket(tmp_path: Path):
    data = b"x" * (CHUNK_SIZE * 2 + 10)
    source = ChunkedSource(data)

    stored = await make_pipeline(tmp_path).store("cat.png", source)

    target = tmp_path / "2024-03-07" / "cat.png"
    assert target.read_bytes() == data
    assert stored.asset.file_path == target
    assert stored.size_bytes == len(data)
    assert stored.locator == "https://cdn.example.com/s/2024-03-07/cat.png"
    assert source.read_sizes == [CHUNK_SIZE] * 4
    assert source.closed
    assert not stored.needs_thumbnail


@pytest.mark.asyncio
async def test_store_overwrites_same_name_on_same_day(tmp_path: Path):
    pipeline = make_pipeline(tmp_path)
    await pipeline.store("notes.txt", ChunkedSource(b"first version"))
    await pipeline.store("notes.txt", ChunkedSource(b"second"))

    assert (tmp_path / "2024-03-07" / "notes.txt").read_bytes() == b"second"


@pytest.mark.asyncio
async def test_store_sanitizes_client_file_name(tmp_path: Path):
    stored = await make_pipeline(tmp_path).store("../../evil.png", ChunkedSource(b"data"))

    assert stored.asset.filename == "....evil.png"
    assert stored.asset.file_path.parent == tmp_path / "2024-03-07"


@pytest.mark.asyncio
async def test_store_quotes_locator(tmp_path: Path):
    stored = await make_pipeline(tmp_path).store("holiday photo.jpg", ChunkedSource(b"data"))

    assert stored.locator == "https://cdn.example.com/s/2024-03-07/holiday%20photo.jpg"


@pytest.mark.asyncio
async def test_store_rejects_empty_file_name(tmp_path: Path):
    source = ChunkedSource(b"data")

    with pytest.raises(UploadValidationError):
        await make_pipeline(tmp_path).store("..", source)
    assert source.closed
    assert list(tmp_path.iterdir()) == []


@pytest.mark.asyncio
async def test_store_failure_keeps_partial_file(tmp_path: Path):
    source = ChunkedSource(b"y" * (CHUNK_SIZE * 3), fail_after=1)

    with pytest.raises(StorageError) as excinfo:
        await make_pipeline(tmp_path).store("big.iso", source)

    assert str(tmp_path) not in str(excinfo.value)
    assert (tmp_path / "2024-03-07" / "big.iso").stat().st_size == CHUNK_SIZE
    assert source.closed


@pytest.mark.asyncio
async def test_store_unwritable_bucket_raises_storage_error(tmp_path: Path):
    (tmp_path / "2024-03-07").write_text("not a directory")

    with pytest.raises(StorageError):
        await make_pipeline(tmp_path).store("cat.png", ChunkedSource(b"data"))


@pytest.mark.asyncio
async def test_derive_thumbnail_runs_ffmpeg_at_one_second(tmp_path: Path):
    runner = FakeRunner()
    pipeline = make_pipeline(tmp_path, runner)
    stored = await pipeline.store("clip.mp4", ChunkedSource(b"video"))
    assert stored.needs_thumbnail

    assert await pipeline.derive_thumbnail(stored.asset) is True

    thumb = tmp_path / "2024-03-07" / "clip.mp4.thumb.jpg"
    assert thumb.exists()
    (cmd,) = runner.calls_to("ffmpeg")
    assert cmd[cmd.index("-i") + 1] == str(tmp_path / "2024-03-07" / "clip.mp4")
    assert cmd[cmd.index("-ss") + 1] == "00:00:01"
    assert cmd[-1] == str(thumb)


@pytest.mark.asyncio
async def test_derive_thumbnail_failure_is_contained(tmp_path: Path):
    runner = FakeRunner()
    runner.fail = True
    asset = StoredAsset(date="2024-03-07", filename="clip.mp4", root=tmp_path)

    assert await make_pipeline(tmp_path, runner).derive_thumbnail(asset) is False
    assert not asset.thumbnail_path.exists()


class OversizedSource(ChunkedSource):
    async def read(self, size: int = -1) -> bytes:
        if len(self.read_sizes) >= 2:
            self.read_sizes.append(size)
            raise UploadTooLargeError("File too large")
        return await super().read(size)


@pytest.mark.asyncio
async def test_store_discards_oversized_upload(tmp_path: Path):
    source = OversizedSource(b"o" * (CHUNK_SIZE * 4))

    with pytest.raises(UploadTooLargeError):
        await make_pipeline(tmp_path).store("huge.iso", source)

    assert not (tmp_path / "2024-03-07" / "huge.iso").exists()
    assert source.closed
