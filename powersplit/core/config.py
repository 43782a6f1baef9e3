"""Application configuration settings."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from powersplit.models.enums import UnattributedCostPolicy


def _get_default_database_url() -> str:
    """Get the default database URL, using the mounted volume path if available."""
    if os.path.isdir("/data"):
        return "sqlite:////data/powersplit.db"
    return "sqlite:///./powersplit.db"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
    )

    PROJECT_NAME: str = "PowerSplit"
    VERSION: str = "0.1.0"
    DEBUG: bool = True
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database - defaults to the volume path if /data exists
    DATABASE_URL: str = _get_default_database_url()

    # Logging
    LOG_LEVEL: str = "INFO"

    # Billing
    UNATTRIBUTED_COST_POLICY: UnattributedCostPolicy = UnattributedCostPolicy.SPLIT_EQUALLY
    DEFAULT_STATS_MONTHS: int = 12


settings = Settings()
