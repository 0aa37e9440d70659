"""Engine settings, read from ``FORMCRAFT_*`` environment variables."""

import logging
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """FormCraft engine settings"""

    # Logging
    log_level: str = "WARNING"

    # Prefix of generated field instance ids
    id_prefix: str = "fld_"

    # Reject publishing a form made only of titles, paragraphs and separators
    require_input_field_to_publish: bool = True

    model_config = SettingsConfigDict(
        env_prefix="FORMCRAFT_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Apply the configured log level to the ``formcraft`` logger tree.

    Meant for applications embedding the engine; the library itself never
    installs handlers.
    """
    settings = settings or get_settings()
    logging.getLogger("formcraft").setLevel(settings.log_level.upper())


__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
]
