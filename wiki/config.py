"""Application settings loaded from environment variables."""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """Wiki settings. Every field can be overridden by an environment variable."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage
    pages_dir: Path = Path("./pages")
    page_extension: str = ".txt"
    strict_extension: bool = False
    """Only treat files ending in ``page_extension`` as pages when listing.

    Off by default: every entry in ``pages_dir`` is listed as a page and its
    name is whatever precedes the first ``.``.
    """
    home_page: str = "Home"

    # Presentation
    templates_dir: Path = PACKAGE_DIR / "templates"
    static_dir: Path = PACKAGE_DIR / "static"

    # Server
    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=1, le=65535)
    save_rate_limit: Optional[str] = None
    """slowapi limit for saves, e.g. ``"30/minute"``; unset or empty means unlimited."""
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
