"""Centralized configuration for link-crawler using Pydantic Settings."""

import random

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from link_crawler.domain.model import DEFAULT_MAX_DEPTH, DEFAULT_MAX_LINKS, CrawlLimits


class Settings(BaseSettings):
    """Strictly typed configuration loaded from environment variables.

    Traversal bounds follow the crawler's override rule: a non-positive value
    is ignored and the default kept, rather than rejected.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",  # Ignore extra env vars not defined in model
    )

    # Traversal bounds
    max_links: int = Field(default=DEFAULT_MAX_LINKS, description="Maximum frontier pops before stopping")
    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, description="Maximum priority (iteration) reached")

    # HTTP/Request settings
    http_timeout: int = Field(default=30, ge=1, description="Connect/read timeout in seconds for each fetch")
    max_retries: int = Field(default=0, ge=0, description="Transport-level connection retries (0 disables)")
    chunk_size: int = Field(default=4096, ge=1, description="Bytes pulled from the stream per read")

    # Frontier storage
    state_db_path: str = Field(default="", description="SQLite frontier path; empty keeps the frontier in memory")

    # Matching
    search_terms: str = Field(default="", description="Comma-separated terms a page URL must contain")

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON log lines")

    # Class constant for user agents
    USER_AGENTS: list[str] = [
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/140.0.0.0 Safari/537.36",
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
        "(KHTML, like Gecko) Version/18.6 Safari/605.1.15",
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:143.0) Gecko/20100101 Firefox/143.0",
    ]

    @field_validator("max_links", mode="after")
    @classmethod
    def _default_non_positive_links(cls, value: int) -> int:
        return value if value > 0 else DEFAULT_MAX_LINKS

    @field_validator("max_depth", mode="after")
    @classmethod
    def _default_non_positive_depth(cls, value: int) -> int:
        return value if value > 0 else DEFAULT_MAX_DEPTH

    def get_random_user_agent(self) -> str:
        """Get a random User-Agent from the pool."""
        return random.choice(self.USER_AGENTS)

    def get_search_terms(self) -> list[str]:
        """Get list of search terms (comma-separated)."""
        if not self.search_terms:
            return []
        return [term.strip() for term in self.search_terms.split(",") if term.strip()]

    def to_limits(self) -> CrawlLimits:
        return CrawlLimits.from_overrides(self.max_links, self.max_depth)
