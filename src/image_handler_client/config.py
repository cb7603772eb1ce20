"""Typed CDN configuration loaded from environment variables."""

from __future__ import annotations

import logging
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

logger: logging.Logger = logging.getLogger(__name__)


class CdnSettings(BaseSettings):
    """Validated CDN and image handler settings.

    All values are sourced from ``IMAGE_HANDLER_*`` environment variables
    or a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="IMAGE_HANDLER_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    base: str
    bucket: str
    warnings: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @classmethod
    def load(cls) -> CdnSettings:
        """Load and validate settings from the environment.

        Raises ``pydantic.ValidationError`` on missing or invalid values.
        """
        settings = cls()  # type: ignore[call-arg]  # env vars supply required fields
        logger.debug(
            "cdn_settings_loaded",
            extra={
                "base": settings.base,
                "bucket": settings.bucket,
                "warnings": settings.warnings,
                "log_level": settings.log_level,
            },
        )
        return settings
