"""Session configuration loaded from environment / .env file."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_DATA_DIR = Path.home() / ".kalambury"


class Settings(BaseSettings):
    """Settings - values are sourced from KALAMBURY_* env vars or ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="KALAMBURY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Storage ──────────────────────────────────────────────────────────
    state_path: Path = Field(
        default=_DATA_DIR / "session.json",
        description="JSON file holding the roster and category selection",
    )
    database_url: str = Field(
        default=f"sqlite:///{_DATA_DIR / 'phrases.db'}",
        description="SQLAlchemy URL of the phrase store",
    )

    # ── Runtime ──────────────────────────────────────────────────────────
    log_level: str = "INFO"
    random_seed: int | None = Field(default=None, description="Seed for reproducible sessions")
