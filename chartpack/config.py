"""Packaging configuration — env-driven.

Centralized config using pydantic-settings for environment variable
support. Reads from a .env file and CHARTPACK_* environment variables.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PackConfig(BaseSettings):
    """Packaging configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export CHARTPACK_LOG_LEVEL=DEBUG
        export CHARTPACK_COMPRESS_LEVEL=9

    Or via .env file::

        CHARTPACK_LOG_LEVEL=WARNING
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="CHARTPACK_",
        env_file_encoding="utf-8",
    )

    # Logging
    log_level: str = "INFO"

    # Archive output
    compress_level: int = Field(default=6, ge=0, le=9)

    # Directory materialization permissions
    dir_mode: int = 0o755
    file_mode: int = 0o644


# Module-level singleton: import as `from chartpack.config import config`
config = PackConfig()
