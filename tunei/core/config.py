"""
Application configuration management.

This module defines a ``Settings`` dataclass that reads its values from
environment variables at instantiation time.  Each configuration option
has a reasonable default which can be overridden by setting the
corresponding environment variable.  Collaborator credentials (Azure
OpenAI, Pexels, SerpAPI) have no defaults and are never hard-coded; when
they are absent the matching feature runs in its offline mode.
"""

from dataclasses import dataclass, field
import os
from typing import List, Optional


DEFAULT_RSS_FEEDS = [
    "https://feeds.bbci.co.uk/news/rss.xml",
    "https://rss.cnn.com/rss/edition.rss",
    "https://www.reutersagency.com/feed/?best-sectors=technology",
]

DEFAULT_REGIONAL_RSS_FEEDS = [
    "https://nation.africa/kenya/rss.xml",
    "https://www.standardmedia.co.ke/rss/headlines.php",
]

DEFAULT_CORS_PROXIES = [
    "https://corsproxy.io/?",
    "https://api.allorigins.win/raw?url=",
    "https://cors-anywhere.herokuapp.com/",
]


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None:
        return list(default)
    return [part.strip() for part in raw.split(",") if part.strip()]


@dataclass
class Settings:
    """Configuration values loaded from environment variables with defaults."""

    # Application settings
    ENVIRONMENT: str = field(default_factory=lambda: os.getenv("ENVIRONMENT", "development"))
    PORT: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    DEBUG: bool = field(init=False)
    LOG_LEVEL: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    # RSS feed sources.  ``RSS_FEEDS`` and ``REGIONAL_RSS_FEEDS`` accept
    # comma separated URL lists; the regional list is only fetched when
    # ``REGIONAL_FEEDS_ENABLED`` is true.
    RSS_FEEDS_ENABLED: bool = field(default_factory=lambda: _env_bool("RSS_FEEDS_ENABLED", "true"))
    RSS_FEEDS: List[str] = field(default_factory=lambda: _env_list("RSS_FEEDS", DEFAULT_RSS_FEEDS))
    REGIONAL_FEEDS_ENABLED: bool = field(default_factory=lambda: _env_bool("REGIONAL_FEEDS_ENABLED", "false"))
    REGIONAL_RSS_FEEDS: List[str] = field(
        default_factory=lambda: _env_list("REGIONAL_RSS_FEEDS", DEFAULT_REGIONAL_RSS_FEEDS)
    )

    # Relay prefixes tried in order for every feed.  Setting
    # ``FEED_DIRECT_FETCH`` puts a direct request ahead of the relays for
    # deployments without cross-origin restrictions.
    CORS_PROXIES: List[str] = field(default_factory=lambda: _env_list("CORS_PROXIES", DEFAULT_CORS_PROXIES))
    FEED_DIRECT_FETCH: bool = field(default_factory=lambda: _env_bool("FEED_DIRECT_FETCH", "false"))
    FEED_TIMEOUT_SECONDS: float = field(default_factory=lambda: float(os.getenv("FEED_TIMEOUT_SECONDS", "10")))

    # Azure OpenAI text-generation collaborator
    AZURE_OPENAI_ENABLED: bool = field(default_factory=lambda: _env_bool("AZURE_OPENAI_ENABLED", "false"))
    AZURE_OPENAI_ENDPOINT: Optional[str] = field(default_factory=lambda: os.getenv("AZURE_OPENAI_ENDPOINT"))
    AZURE_OPENAI_API_KEY: Optional[str] = field(default_factory=lambda: os.getenv("AZURE_OPENAI_API_KEY"))
    DEPLOYMENT_NAME: str = field(default_factory=lambda: os.getenv("DEPLOYMENT_NAME", "gpt-4o"))
    API_VERSION: str = field(default_factory=lambda: os.getenv("API_VERSION", "2024-12-01-preview"))
    LLM_MAX_TOKENS: int = field(default_factory=lambda: int(os.getenv("LLM_MAX_TOKENS", "1000")))
    LLM_TEMPERATURE: float = field(default_factory=lambda: float(os.getenv("LLM_TEMPERATURE", "0.7")))
    LLM_TOP_P: float = field(default_factory=lambda: float(os.getenv("LLM_TOP_P", "0.95")))
    SUMMARY_TIMEOUT_SECONDS: float = field(default_factory=lambda: float(os.getenv("SUMMARY_TIMEOUT_SECONDS", "30")))

    # Image search providers.  A provider is enabled by supplying its key.
    PEXELS_API_KEY: Optional[str] = field(default_factory=lambda: os.getenv("PEXELS_API_KEY"))
    SERPAPI_API_KEY: Optional[str] = field(default_factory=lambda: os.getenv("SERPAPI_API_KEY"))

    # CORS
    CORS_ORIGINS: List[str] = field(default_factory=lambda: _env_list("CORS_ORIGINS", ["*"]))

    def __post_init__(self) -> None:
        """Derive additional configuration settings after initialization."""
        self.DEBUG = self.ENVIRONMENT.lower() == "development"

    @property
    def is_development(self) -> bool:
        """Return True if the environment is set to development."""
        return self.ENVIRONMENT.lower() == "development"

    @property
    def has_llm_credentials(self) -> bool:
        """Return True if the Azure OpenAI collaborator is enabled and fully configured."""
        return bool(self.AZURE_OPENAI_ENABLED and self.AZURE_OPENAI_ENDPOINT and self.AZURE_OPENAI_API_KEY)


# Instantiate a single settings object that can be imported across the
# application.
settings = Settings()
