"""Runtime settings for the provider tooling.

These are knobs of the tool itself (logging, timeouts, throttling), not
provider options. They are read from ``XAC_*`` environment variables or a
``.env`` file.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RuntimeSettings(BaseSettings):
    """Tool-level settings."""

    model_config = SettingsConfigDict(
        env_prefix="XAC_",
        env_file=".env",
        extra="ignore",
    )

    log_level: str = Field(default="INFO", description="Logging level")
    sts_timeout: float = Field(
        default=30.0, gt=0, description="Timeout in seconds for the AssumeRole call"
    )
    rate_limit_per_second: float = Field(
        default=20.0, gt=0, description="Requests per second allowed per API action"
    )
    rate_limit_burst: int = Field(default=20, ge=1, description="Token bucket size")
    rate_limit_wait_timeout: float = Field(
        default=30.0, ge=0, description="Seconds to wait for a rate limit token"
    )
    language: str = Field(default="en-US", description="X-TC-Language header value")


@lru_cache(maxsize=1)
def get_settings() -> RuntimeSettings:
    """Get the process-wide runtime settings."""
    return RuntimeSettings()
