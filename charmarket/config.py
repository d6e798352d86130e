"""Runtime configuration: env-driven via pydantic-settings.

Reads from a .env file and CHARMARKET_* environment variables.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class MarketConfig(BaseSettings):
    """Marketplace configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export CHARMARKET_LOG_LEVEL=DEBUG
        export CHARMARKET_JOURNAL_PATH=/data/journal.db
        export CHARMARKET_CALLER=0x70997970c51812dc3a010c7d01b50e0d17dc79c8

    Or via .env file::

        CHARMARKET_ENVIRONMENT=production
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="CHARMARKET_",
        env_file_encoding="utf-8",
    )

    # Runtime environment
    environment: str = "development"
    log_level: str = "INFO"
    debug: bool = False

    # Storage paths
    journal_path: Path = Path(".charmarket/journal.db")
    metadata_store_path: Path = Path(".charmarket/metadata")

    # Default identity for CLI calls that omit --caller
    caller: str = ""

    @property
    def is_production(self) -> bool:
        """Whether running in production mode."""
        return self.environment == "production"


# Module-level singleton; import as `from charmarket.config import config`
config = MarketConfig()
