from pathlib import Path
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env_files() -> list[str]:
    """Load .env from the project root, then a local .env."""
    base = Path(__file__).resolve().parent.parent  # project root
    return [str(base / ".env"), ".env"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=_env_files(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Thumbnail ────────────────────────────────────────────────────────────
    thumbnail_width: int = 100
    thumbnail_container: str = "thumbnails"

    # ── Storage ──────────────────────────────────────────────────────────────
    storage_backend: Literal["azure", "s3"] = "azure"

    # Azure Blob Storage (source access for Event Grid deliveries)
    blob_storage_connection_string: str = ""

    # AWS (empty keys fall back to the default boto3 credential chain)
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""
    aws_region: str = "us-east-1"

    # ── Runtime ──────────────────────────────────────────────────────────────
    env_name: str = "development"
    log_level: str = "INFO"

    @field_validator("thumbnail_width")
    @classmethod
    def _positive_width(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("thumbnail_width must be a positive integer")
        return value

    @field_validator("thumbnail_container")
    @classmethod
    def _container_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("thumbnail_container must not be empty")
        return value
