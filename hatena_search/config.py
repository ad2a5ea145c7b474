"""
Hatena Bookmark Search - Configuration

Pydantic Settings for all configuration via environment variables.
"""

import logging

from pydantic_settings import BaseSettings
from pydantic import Field
from typing import Literal


class HatenaSettings(BaseSettings):
    """Hatena Bookmark API configuration."""
    username: str = Field("", alias="HATENA_USERNAME")
    api_key: str = Field("", alias="HATENA_API_KEY")
    search_url: str = Field(
        "https://b.hatena.ne.jp/my/search/json", alias="HATENA_SEARCH_URL"
    )
    timeout_seconds: float = Field(10.0, alias="HATENA_TIMEOUT_SECONDS")

    model_config = {"env_prefix": "", "extra": "ignore"}

    @property
    def has_credentials(self) -> bool:
        return bool(self.username and self.api_key)


class SearchSettings(BaseSettings):
    """Pagination configuration."""
    first_page_limit: int = Field(20, ge=1, le=100, alias="SEARCH_FIRST_PAGE_LIMIT")
    page_limit: int = Field(100, ge=1, le=100, alias="SEARCH_PAGE_LIMIT")
    max_results: int = Field(500, ge=1, alias="SEARCH_MAX_RESULTS")

    model_config = {"env_prefix": "", "extra": "ignore"}


class CacheSettings(BaseSettings):
    """Page cache configuration."""
    enabled: bool = Field(True, alias="CACHE_ENABLED")
    ttl_seconds: int = Field(300, alias="CACHE_TTL_SECONDS")
    max_entries: int = Field(256, alias="CACHE_MAX_ENTRIES")

    model_config = {"env_prefix": "", "extra": "ignore"}


class MCPSettings(BaseSettings):
    """MCP server configuration."""
    transport: Literal["sse", "stdio"] = Field("stdio", alias="MCP_TRANSPORT")
    port: int = Field(8080, alias="MCP_PORT")
    host: str = Field("127.0.0.1", alias="MCP_HOST")

    model_config = {"env_prefix": "", "extra": "ignore"}


class LogSettings(BaseSettings):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO", alias="LOG_LEVEL"
    )

    model_config = {"env_prefix": "", "extra": "ignore"}


class Settings(BaseSettings):
    """Main settings aggregating all configuration."""
    hatena: HatenaSettings = Field(default_factory=HatenaSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    mcp: MCPSettings = Field(default_factory=MCPSettings)
    log: LogSettings = Field(default_factory=LogSettings)

    model_config = {"env_prefix": "", "extra": "ignore"}


def get_settings() -> Settings:
    """Load settings from environment variables."""
    from dotenv import load_dotenv
    load_dotenv()
    return Settings()


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings=None) -> None:
    """Install the root log handler at LOG_LEVEL."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log.level),
        format=LOG_FORMAT,
    )
