"""Application settings with environment variable support."""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional
from pathlib import Path


# Compute base_dir at module level
_BASE_DIR = Path(__file__).parent.parent.parent.resolve()


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="CF_",  # CF_DATABASE_URL, CF_SCRAPE_CONCURRENCY, etc.
    )

    # Paths - computed from base_dir
    base_dir: Path = _BASE_DIR
    data_dir: Path = _BASE_DIR / "data"

    # Database
    database_url: str = f"sqlite:///{_BASE_DIR / 'data' / 'cfo_feeds.db'}"

    # Feed registry override (JSON file), built-in list when unset
    feeds_file: Optional[Path] = None

    # Feed fetching
    feed_timeout_seconds: float = 20
    feed_max_retries: int = 2
    feed_retry_backoff_seconds: float = 0.5

    # Image scraping
    scrape_timeout_seconds: float = 10
    scrape_max_redirects: int = 3
    scrape_concurrency: int = 4

    # Normalization
    description_max_length: int = 1200

    # Scheduling
    ingest_interval_hours: int = 6
    run_on_startup: bool = True

    # API
    allowed_origins: str = "http://localhost:5173"

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


settings = Settings()
