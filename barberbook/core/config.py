import logging

from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from typing import Optional

class Settings(BaseSettings):
    # Environment
    ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Entitlements
    ENTITLEMENTS_TABLE_PATH: Optional[str] = None  # JSON override of the default plan table
    ENTITLEMENTS_ON_CONFIG_ERROR: str = "fail"  # "fail" | "restrictive"

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
settings = Settings()


def get_log_level(settings_obj: Optional[Settings] = None) -> int:
    """Translate LOG_LEVEL into a logging level, defaulting to INFO."""
    cfg = settings_obj or settings
    return getattr(logging, str(getattr(cfg, "LOG_LEVEL", "INFO")).upper(), logging.INFO)
