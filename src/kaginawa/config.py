"""Client configuration via environment variables and .env file."""

import logging
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings
from pydantic_settings.sources import DotEnvSettingsSource, PydanticBaseSettingsSource

# Path to .env file (patch in tests to use tmp_path / ".env")
_ENV_FILE: Path = Path(".env")


class Settings(BaseSettings):
    model_config = {
        "env_prefix": "KAGINAWA_",
        "env_file_encoding": "utf-8",
    }

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Load .env from _ENV_FILE (patchable in tests)
        return (
            init_settings,
            env_settings,
            DotEnvSettingsSource(
                settings_cls,
                env_file=_ENV_FILE,
                env_file_encoding="utf-8",
            ),
            file_secret_settings,
        )

    # Server
    endpoint: str | None = None  # e.g. https://kaginawa.example.com
    api_key: str | None = None  # needs the ADMIN role

    # Transport
    timeout: float = 30.0  # seconds per request
    proxy: str | None = None

    # Logging
    log_level: str = "info"

    @field_validator("endpoint", "api_key", "proxy", mode="before")
    @classmethod
    def blank_to_none(cls, v: object) -> object:
        """Treat KAGINAWA_X= (empty) like an unset variable."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("endpoint")
    @classmethod
    def strip_trailing_slash(cls, v: str | None) -> str | None:
        return v.rstrip("/") if v else v


def load_config() -> Settings:
    """Load configuration from .env and environment (env overrides .env)."""
    return Settings()


def configure_logging(cfg: Settings) -> None:
    """Apply ``cfg.log_level`` to the root logger.

    Intended for applications and scripts; the library itself never
    installs handlers.
    """
    logging.basicConfig(level=cfg.log_level.upper())
