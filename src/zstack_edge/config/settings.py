"""Configuration settings for the ZStack Edge provider.

This module defines the provider configuration: the Edge endpoint,
access-key credentials, and client tuning. Settings are loaded from
environment variables and .env files.
"""

from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..client.config import EdgeConfig


class Settings(BaseSettings):
    """Provider settings loaded from environment variables.

    :param host: ZStack Edge management host
    :type host: Optional[str]
    :param access_key: Access key ID used to sign requests
    :type access_key: Optional[str]
    :param secret_key: Access key secret used to sign requests
    :type secret_key: Optional[str]
    :param protocol: URL scheme (http/https)
    :type protocol: str
    :param port: API port
    :type port: int
    :param context_path: API path prefix
    :type context_path: str
    :param insecure: Skip TLS certificate verification
    :type insecure: bool
    :param timeout: Per-request timeout in seconds
    :type timeout: float
    :param retry_interval: Default seconds between action polls
    :type retry_interval: float
    :param retry_times: Default maximum number of action polls
    :type retry_times: int
    :param debug: Log request and response details
    :type debug: bool
    :param log_level: Logging level for the application
    :type log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    host: Optional[str] = Field(
        None, alias="ZSTACK_HOST", description="ZStack Edge host address"
    )
    access_key: Optional[str] = Field(
        None, alias="ZSTACK_ACCESS_KEY", description="ZStack Edge access key ID"
    )
    secret_key: Optional[str] = Field(
        None, alias="ZSTACK_SECRET_KEY", description="ZStack Edge access key secret"
    )

    protocol: str = Field("http", alias="ZSTACK_PROTOCOL", description="URL scheme")
    port: int = Field(80, alias="ZSTACK_PORT", description="API port")
    context_path: str = Field(
        "/ze", alias="ZSTACK_CONTEXT_PATH", description="API context path"
    )
    insecure: bool = Field(
        False, alias="ZSTACK_INSECURE", description="Skip TLS verification"
    )
    timeout: float = Field(
        60.0, alias="ZSTACK_TIMEOUT", description="Request timeout in seconds"
    )

    retry_interval: float = Field(
        2.0, alias="ZSTACK_RETRY_INTERVAL", description="Seconds between polls"
    )
    retry_times: int = Field(
        150, alias="ZSTACK_RETRY_TIMES", description="Maximum number of polls"
    )

    debug: bool = Field(False, alias="ZSTACK_DEBUG", description="Debug logging")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        "INFO", alias="LOG_LEVEL", description="Logging level"
    )

    @field_validator("protocol")
    @classmethod
    def validate_protocol(cls, v: str) -> str:
        """Only plain and TLS HTTP are supported.

        :param v: Configured protocol
        :type v: str
        :return: Lower-cased protocol
        :rtype: str
        :raises ValueError: If the protocol is not http or https
        """
        v = v.lower()
        if v not in ("http", "https"):
            raise ValueError(f"protocol must be http or https, got {v!r}")
        return v

    @field_validator("context_path")
    @classmethod
    def normalize_context_path(cls, v: str) -> str:
        """Ensure the context path has a leading and no trailing slash.

        :param v: Configured context path
        :type v: str
        :return: Normalized context path (empty for the root)
        :rtype: str
        """
        v = v.strip().strip("/")
        return f"/{v}" if v else ""

    @field_validator("retry_times")
    @classmethod
    def validate_retry_times(cls, v: int) -> int:
        if v < 1:
            raise ValueError("retry_times must be at least 1")
        return v

    def to_edge_config(self) -> EdgeConfig:
        """Build a client configuration from these settings.

        :return: Configured EdgeConfig
        :rtype: EdgeConfig
        """
        return (
            EdgeConfig(self.protocol, self.host or "", self.port, self.context_path)
            .access_key(self.access_key or "", self.secret_key or "")
            .insecure_skip_verify(self.insecure)
            .timeout(self.timeout)
            .retry_interval(self.retry_interval)
            .retry_times(self.retry_times)
            .debug(self.debug)
        )
