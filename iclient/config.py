# ============================================================================
# MODULE CONTEXT - CLIENT CONFIGURATION
# ============================================================================
# STATUS: Core - Configuration Management
# PURPOSE: Process-wide defaults for iServer service requests
# EXPORTS: ClientSettings, get_client_settings, reset_client_settings
# DEPENDENCIES: pydantic-settings, pydantic
# SOURCE: Environment variables (ICLIENT_*), optional .env file
# PATTERNS: Singleton pattern via lru_cache
# ============================================================================

"""
Client Configuration Module

Defaults applied when a service is constructed without an explicit value
for the corresponding option. Explicit options always win.

Environment Variables:
    ICLIENT_SERVER_TYPE: iServer | iPortal | Online (default: iServer)
    ICLIENT_WITH_CREDENTIALS: Share a cookie jar across requests (default: false)
    ICLIENT_PROXY: Proxy URL prefix (default: none)
    ICLIENT_TOKEN: iServer token appended to requests (default: none)
    ICLIENT_KEY: iPortal/Online key appended to requests (default: none)
    ICLIENT_TIMEOUT: HTTP timeout in seconds (default: 30)
    ICLIENT_RETRIES: Connection retries in the HTTP transport (default: 0)
    ICLIENT_DATAFLOW_OPEN_TIMEOUT: WebSocket open timeout in seconds (default: 10)
    ICLIENT_DEBUG_LOGGING: Lower default log level to DEBUG (default: false)

Usage:
    from iclient.config import get_client_settings

    settings = get_client_settings()
    print(settings.timeout)
"""

import logging
from typing import Optional
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from iclient.common.enums import ServerType

logger = logging.getLogger(__name__)


class ClientSettings(BaseSettings):
    """
    SDK-wide configuration loaded from environment variables.

    Attributes:
        server_type: Default server product when a service gives none
        with_credentials: Default cookie sharing behaviour
        proxy: Default proxy URL prefix
        token: iServer token
        key: iPortal/Online key
        timeout: HTTP timeout in seconds
        retries: Connection retries performed by the HTTP transport
        dataflow_open_timeout: WebSocket handshake timeout in seconds
        debug_logging: Lower default log level to DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="ICLIENT_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    server_type: ServerType = Field(default=ServerType.ISERVER, description="iServer | iPortal | Online")
    with_credentials: bool = Field(default=False, description="Share cookies across requests")
    proxy: Optional[str] = Field(default=None, description="Proxy URL prefix")
    token: Optional[str] = Field(default=None, description="iServer token")
    key: Optional[str] = Field(default=None, description="iPortal/Online key")
    timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")
    retries: int = Field(default=0, ge=0, description="HTTP connection retries")
    dataflow_open_timeout: float = Field(default=10.0, gt=0, description="WebSocket open timeout")
    debug_logging: bool = Field(default=False, description="Lower default log level to DEBUG")

    @field_validator("proxy", "token", "key")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat empty environment values as unset."""
        if v is not None and not v.strip():
            return None
        return v


@lru_cache(maxsize=1)
def get_client_settings() -> ClientSettings:
    """
    Get singleton client configuration instance.

    Raises:
        ValidationError: If an environment variable holds an invalid value
    """
    settings = ClientSettings()
    logger.debug(
        "Client settings loaded: server_type=%s timeout=%s retries=%s",
        settings.server_type.value, settings.timeout, settings.retries
    )
    return settings


def reset_client_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    get_client_settings.cache_clear()
