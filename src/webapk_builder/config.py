"""Configuration management for the WebAPK platform.

Settings are read from ``WEBAPK_*`` environment variables or a ``.env`` file.
The legacy names ``WEBAPKTOKEN``, ``WEBAPKAPIURL``, ``WEBAPKURL`` and
``ORIGINAPKNAME`` are accepted as aliases.
"""

import logging
from functools import lru_cache

from pydantic import AliasChoices, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from webapk_builder.errors import ConfigurationError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("api_key", "build_service_url", "cdn_base_url", "requester_package_id")


class Settings(BaseSettings):
    """WebAPK settings with env and file support."""

    model_config = SettingsConfigDict(
        env_prefix="WEBAPK_", env_file=".env", extra="ignore", populate_by_name=True
    )

    # Build service
    api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("WEBAPK_API_KEY", "WEBAPKTOKEN"),
        description="API key sent as X-Api-Key to the build service",
    )
    build_service_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("WEBAPK_BUILD_SERVICE_URL", "WEBAPKAPIURL"),
        description="Endpoint that accepts serialized WebApk build requests",
    )
    cdn_base_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("WEBAPK_CDN_BASE_URL", "WEBAPKURL"),
        description="Base URL the generated APK is downloaded from (token is appended)",
    )
    requester_package_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("WEBAPK_REQUESTER_PACKAGE_ID", "ORIGINAPKNAME"),
        description="Android package id of the requesting browser",
    )

    # HTTP
    request_timeout: float = Field(
        default=30.0, gt=0, description="Timeout in seconds for each outbound HTTP call"
    )

    # Logging
    debug: bool = Field(default=False, description="Enable DEBUG level logging")

    def missing_fields(self) -> list[str]:
        """Names of required settings that are unset or blank."""
        return [name for name in REQUIRED_FIELDS if not (getattr(self, name) or "").strip()]

    def require_complete(self) -> None:
        missing = self.missing_fields()
        if missing:
            env_names = ", ".join(f"WEBAPK_{name.upper()}" for name in missing)
            raise ConfigurationError(f"Missing WebAPK configuration: set {env_names}")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    try:
        settings = Settings()
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid WebAPK configuration: {exc}") from exc
    logger.debug("Loaded settings (missing: %s)", settings.missing_fields() or "none")
    return settings


__all__ = ["Settings", "get_settings", "REQUIRED_FIELDS"]
