"""Toolkit configuration: env-driven defaults for OCFL objects.

Centralized config using pydantic-settings for environment variable
support. Reads from a .env file and OCFLTOOLS_* environment variables.

Components never read this module's singleton themselves; they take an
``OcflConfig`` in their constructor so tests and callers stay explicit.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class OcflConfig(BaseSettings):
    """Defaults applied to new objects and used as validator fallbacks.

    Examples
    --------
    Override via environment::

        export OCFLTOOLS_DIGEST_ALGORITHM=sha256
        export OCFLTOOLS_CONTENT_DIRECTORY=data
        export OCFLTOOLS_VERSION_FORMAT=v%d

    Or via .env file::

        OCFLTOOLS_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="OCFLTOOLS_",
        env_file_encoding="utf-8",
    )

    # Inventory defaults
    digest_algorithm: str = "sha512"  # sha512 is recommended, sha256 is common
    content_directory: str = "content"
    version_format: str = "v%04d"
    ocfl_version: str = "1.0"
    content_type: str = "https://ocfl.io/1.0/spec/#inventory"

    # Runtime
    log_level: str = "INFO"
    chunk_size: int = 1024 * 1024

    @property
    def namaste_filename(self) -> str:
        """Name of the object declaration file for the configured OCFL version."""
        return f"0=ocfl_object_{self.ocfl_version}"


# Module-level singleton, used by the CLI only.
config = OcflConfig()
