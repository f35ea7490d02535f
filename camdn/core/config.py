"""Application configuration using pydantic settings with structured sections."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

GIB = 1024 * 1024 * 1024

DEFAULT_CRAWLER_USER_AGENTS = [
    "Discordbot",
    "Twitterbot",
    "facebookexternalhit",
    "Slackbot",
    "TelegramBot",
    "WhatsApp",
]


class DatabaseSettings(BaseModel):
    url: str = Field(default="sqlite+aiosqlite:///./data/database.db", alias="url")
    echo: bool = False


class ProbeSettings(BaseModel):
    ffprobe_bin: str = "ffprobe"
    ffmpeg_bin: str = "ffmpeg"
    timeout: float = Field(default=30.0, gt=0)
    thumbnail_timeout: float = Field(default=120.0, gt=0)


class Settings(BaseSettings):
    """Top-level application settings.

    Flat fields map one-to-one onto the documented environment variables
    (``UPLOAD_DIR``, ``API_KEY`` ...); nested sections use ``__`` as the
    delimiter (``DATABASE__URL``, ``PROBE__TIMEOUT``).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    upload_dir: Path = Path("uploads")
    file_size_limit: float = Field(default=16, gt=0)
    api_key: str = ""
    host: str = ""
    site_name: str = "CamDN"
    listen_host: str = "0.0.0.0"
    listen_port: int = 3000

    text_preview_limit: int = Field(default=1024 * 1024, gt=0)
    crawler_user_agents: list[str] = Field(default_factory=lambda: list(DEFAULT_CRAWLER_USER_AGENTS))

    database: DatabaseSettings = DatabaseSettings()
    probe: ProbeSettings = ProbeSettings()

    @property
    def database_url(self) -> str:
        return self.database.url

    @property
    def upload_root(self) -> Path:
        """Storage root as an absolute path, relative values resolved against the cwd."""
        path = self.upload_dir.expanduser()
        if not path.is_absolute():
            path = Path.cwd() / path
        return path.resolve()

    @property
    def file_size_limit_bytes(self) -> int:
        return int(self.file_size_limit * GIB)

    @property
    def public_base_url(self) -> str:
        return self.host.rstrip("/")


@lru_cache()
def get_settings() -> Settings:
    return Settings()
