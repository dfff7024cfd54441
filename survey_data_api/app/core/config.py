"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service starts without any configuration; in a deployment you should
override at least ``DATABASE_URL`` and ``PORT``.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = field(default_factory=lambda: os.getenv("PROJECT_NAME", "Survey Data API"))
    api_version: str = field(default_factory=lambda: os.getenv("API_VERSION", "1.0.0"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_file: Optional[str] = field(default_factory=lambda: os.getenv("LOG_FILE") or None)

    # Path to the SQLite database file.  Relative paths are resolved
    # against the project root by ``RecordStore.from_settings``.
    database_url: str = field(default_factory=lambda: os.getenv("DATABASE_URL", "survey_data.db"))

    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "5000")))

    # Comma‑separated list of allowed origins, or ``*`` for any origin.
    cors_origins: str = field(default_factory=lambda: os.getenv("CORS_ORIGINS", "*"))

    # Populate an empty store with the default dataset when the app starts.
    seed_on_startup: bool = field(default_factory=lambda: _env_bool("SEED_ON_STARTUP", "true"))

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Tests build their own
# ``Settings`` instances instead of mutating this one.
settings = Settings()
