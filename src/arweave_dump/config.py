"""Settings for the command line tool, read from ARWEAVE_DUMP_* environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict

from arweave_dump.client import DEFAULT_GATEWAY_URL


class Settings(BaseSettings):
    """Command line defaults, overridable by environment variables or a .env file.

    Examples
    --------
    Use a local gateway, and fetch each bundle in a single request::

        export ARWEAVE_DUMP_GATEWAY_URL=http://localhost:1984/
        export ARWEAVE_DUMP_STREAM=false
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="ARWEAVE_DUMP_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    gateway_url: str = DEFAULT_GATEWAY_URL
    timeout: float = 30.0
    """Seconds to wait for each gateway request."""
    log_level: str = "WARNING"
    stream: bool = True
    """Fetch bundles chunk by chunk, rather than as one response."""
