"""Runtime configuration — env-driven.

Centralized config using pydantic-settings for environment variable
support. Reads from a .env file and OCF_* environment variables.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class OcfConfig(BaseSettings):
    """Tool configuration with environment variable overrides.

    All settings can be overridden via OCF_* environment variables
    or a .env file in the working directory.

    Examples
    --------
    Override via environment::

        export OCF_OC_BINARY=/usr/local/bin/oc
        export OCF_LOG_LEVEL=DEBUG
        export OCF_DEFAULT_IMAGE=myorg/cf-builder
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="OCF_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Platform binary invoked for every call
    oc_binary: str = "oc"

    # Push defaults
    default_image: str = "bbrowning/openshift-cloudfoundry-docker19"
    service_port: int = 8080
    manifest_name: str = "manifest.yml"

    # Logging
    log_level: str = "WARNING"
    debug: bool = False

    @property
    def effective_log_level(self) -> str:
        """Log level after applying the debug switch."""
        return "DEBUG" if self.debug else self.log_level.upper()

