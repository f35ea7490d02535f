import io
from datetime import date
from pathlib import Path
from typing import Sequence

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from camdn.core.config import DatabaseSettings, Settings
from camdn.core.container import TEMPLATE_DIR, build_container
from camdn.modules.assets.exceptions import ToolError
from camdn.modules.assets.models import Dimensions
from camdn.modules.assets.prober import DimensionProber
from camdn.modules.assets.tools import ToolOutput

API_KEY = "test-secret"
PUBLIC_HOST = "https://cdn.example.com"
UPLOAD_DAY = date(2024, 1, 1)
BOUNDARY = "camdn-test-boundary"


def build_multipart(parts, boundary: str = BOUNDARY) -> bytes:
    """Encode ``(field, filename or None, data)`` triples as multipart/form-data."""
    out = b""
    for field, filename, data in parts:
        disposition = f'form-data; name="{field}"'
        if filename is not None:
            disposition += f'; filename="{filename}"'
        out += f"--{boundary}\r\nContent-Disposition: {disposition}\r\n\r\n".encode() + data + b"\r\n"
    return out + f"--{boundary}--\r\n".encode()


def make_png_bytes(w: int = 4, h: int = 3, color=(128, 64, 32)) -> bytes:
    img = Image.new("RGB", (w, h), color)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


class FakeRunner:
    """Stands in for ffprobe/ffmpeg: records calls and answers with canned output."""

    def __init__(self, probe_output: str = "1920x1080\n") -> None:
        self.probe_output = probe_output
        self.fail = False
        self.calls: list[list[str]] = []

    async def __call__(self, cmd: Sequence[str], timeout: float) -> ToolOutput:
        self.calls.append(list(cmd))
        if self.fail:
            raise ToolError(f"{cmd[0]} exited with 1: boom")
        if Path(cmd[0]).name == "ffmpeg":
            Path(cmd[-1]).write_bytes(b"\xff\xd8\xff\xe0thumb")
            return ToolOutput(stdout="", stderr="")
        return ToolOutput(stdout=self.probe_output, stderr="")

    def calls_to(self, binary: str) -> list[list[str]]:
        return [call for call in self.calls if Path(call[0]).name == binary]


class CountingProber(DimensionProber):
    """Real prober that records every probe request."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.calls: list[tuple[Path, str]] = []

    async def probe(self, path: Path, mime_type: str) -> Dimensions:
        self.calls.append((path, mime_type))
        return await super().probe(path, mime_type)


@pytest.fixture()
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture()
def prober(runner: FakeRunner) -> CountingProber:
    return CountingProber(runner=runner)


@pytest.fixture()
def upload_root(tmp_path: Path) -> Path:
    root = tmp_path / "uploads"
    root.mkdir()
    return root.resolve()


@pytest.fixture()
def settings(tmp_path: Path, upload_root: Path) -> Settings:
    return Settings(
        _env_file=None,
        environment="test",
        upload_dir=upload_root,
        api_key=API_KEY,
        host=PUBLIC_HOST + "/",
        site_name="CamDN",
        database=DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'data' / 'database.db'}"),
    )


@pytest.fixture()
def template_dir() -> Path:
    return TEMPLATE_DIR


@pytest.fixture()
def client(settings: Settings, prober: CountingProber, runner: FakeRunner):
    # lazy import so module import never touches the real working directory
    from camdn.main import create_app

    container = build_container(settings, prober=prober, runner=runner, today=lambda: UPLOAD_DAY)
    app = create_app(container=container)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def auth_header() -> dict[str, str]:
    return {"Authorization": API_KEY}
