"""Configuration using pydantic-settings."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="CURL_MCP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    transport: Annotated[
        Literal["stdio", "sse"], Field(description="MCP transport")
    ] = "stdio"

    server_port: Annotated[int, Field(description="SSE server port")] = 8090
    server_host: Annotated[str, Field(description="SSE server host")] = "0.0.0.0"

    api_port: Annotated[int, Field(description="HTTP facade port")] = 3000
    api_host: Annotated[str, Field(description="HTTP facade host")] = "0.0.0.0"

    max_redirects: Annotated[
        int, Field(ge=0, description="Redirect hops followed per request")
    ] = 5

    log_level: Annotated[str, Field(description="Logging level")] = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def setup_logging(settings: Settings | None = None) -> logging.Logger:
    """Configure and return the application logger.

    Records go to stderr; stdout belongs to the stdio transport.
    """
    if settings is None:
        settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    logger = logging.getLogger("curl_mcp")
    logger.setLevel(getattr(logging, settings.log_level.upper()))

    return logger
