# client/config.py
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MIB = 1024 * 1024
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    # Feed store
    server_url: str = "http://127.0.0.1:8080"
    request_timeout: float = Field(default=10.0, gt=0)  # seconds

    # Local files
    identity_path: Path = Path("~/.microblog/identity.json")
    keyring_dir: Path = Path("~/.microblog/keys")
    attachment_dir: Path = Path("~/.microblog/attachments")

    # Paging
    page_cap: int = Field(default=20, ge=1, le=100)
    default_count: int = Field(default=10, ge=1)

    # Limits
    max_attachment_bytes: int = Field(default=10 * MIB, ge=1)
    key_size: int = Field(default=2048, ge=2048)

    log_level: str = "WARNING"

    model_config = SettingsConfigDict(
        env_prefix="MICROBLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("identity_path", "keyring_dir", "attachment_dir")
    @classmethod
    def _expand_home(cls, value: Path) -> Path:
        return value.expanduser()

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return value

    @field_validator("server_url")
    @classmethod
    def _strip_slash(cls, value: str) -> str:
        return value.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    return Settings()
