"""Engine configuration.

Configuration is loaded from environment variables. For local development, you can provide a
`.env` file and set `MDOUTLINE_ENV_FILE` to point to it.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """mdoutline settings.

    All fields are environment-configurable. Prefix is `MDOUTLINE_`.
    """

    model_config = SettingsConfigDict(
        env_prefix="MDOUTLINE_",
        env_file=None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Core
    log_level: str = Field(default="INFO")
    verbose_logging: bool = Field(default=False)

    # Section extraction
    max_document_bytes: int = Field(default=1024 * 1024, ge=1)
    section_cache_size: int = Field(default=50, ge=1, le=10_000)

    # Monitored execution
    max_request_bytes: int = Field(default=10 * 1024 * 1024, ge=1)
    slow_operation_ms: float = Field(default=1000.0, ge=0.0)
    default_timeout_ms: float = Field(default=5000.0, gt=0.0)
    error_log_capacity: int = Field(default=100, ge=1, le=10_000)

    # Task hierarchy
    hierarchy_max_depth: int = Field(default=10, ge=1, le=50)

    # Workflow documents live in `<workflow_dir_name>/{requirements,design,tasks}.md`
    workflow_dir_name: str = Field(default=".cospec")


def load_settings() -> Settings:
    """Load settings from env.

    Returns:
        Settings: Parsed settings.
    """

    env_file_override = os.getenv("MDOUTLINE_ENV_FILE")
    if env_file_override:
        env_path = Path(env_file_override)
        return Settings(_env_file=env_path)

    default_env = Path.cwd() / ".env"
    if default_env.exists():
        return Settings(_env_file=default_env)

    return Settings()
