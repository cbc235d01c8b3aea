"""
Configuration and environment handling for Sreality Finder.
"""
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load environment variables
load_dotenv()


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(name, str(default)))


class ApifyConfig(BaseModel):
    """Apify actor configuration."""
    token: str = Field(default_factory=lambda: os.getenv("APIFY_TOKEN", ""))
    actor_slug: str = Field(
        default_factory=lambda: os.getenv("APIFY_ACTOR_SLUG", "bebich~sreality-scraper")
    )
    base_url: str = Field(default="https://api.apify.com/v2")
    poll_interval_s: float = Field(
        default_factory=lambda: _env_float("APIFY_POLL_INTERVAL_S", 2.0),
        description="Pause between run status checks",
    )
    max_poll_duration_s: float = Field(
        default_factory=lambda: _env_float("APIFY_MAX_POLL_DURATION_S", 120.0),
        description="Give up waiting for the run after this long",
    )
    request_timeout_s: float = Field(default=30.0)


class OpenAIConfig(BaseModel):
    """OpenAI API configuration."""
    api_key: str = Field(default_factory=lambda: os.getenv("OPENAI_API_KEY", ""))
    model: str = Field(default_factory=lambda: os.getenv("OPENAI_MODEL", "gpt-4.1-mini"))


class MySQLConfig(BaseModel):
    """MySQL database configuration."""
    host: str = Field(default_factory=lambda: os.getenv("MYSQL_HOST", "localhost"))
    port: int = Field(default_factory=lambda: int(os.getenv("MYSQL_PORT", "3306")))
    user: str = Field(default_factory=lambda: os.getenv("MYSQL_USER", "root"))
    password: str = Field(default_factory=lambda: os.getenv("MYSQL_PASSWORD", ""))
    database: str = Field(default_factory=lambda: os.getenv("MYSQL_DATABASE", "sreality_finder"))


class ServerConfig(BaseModel):
    """HTTP API configuration."""
    internal_api_base_url: Optional[str] = Field(
        default_factory=lambda: os.getenv("INTERNAL_API_BASE_URL") or None,
        description="Base URL used to reach our own /api/score endpoint",
    )
    host: str = Field(default_factory=lambda: os.getenv("API_HOST", "127.0.0.1"))
    port: int = Field(default_factory=lambda: int(os.getenv("API_PORT", "8000")))
    score_timeout_s: float = Field(default=300.0)


class UIConfig(BaseModel):
    """UI configuration."""
    page_title: str = Field(default="Inteligentní vyhledávač nemovitostí")
    page_icon: str = Field(default="🏠")
    api_base_url: str = Field(
        default_factory=lambda: os.getenv("FINDER_API_BASE_URL", "http://localhost:8000")
    )
    request_timeout_s: float = Field(default=600.0)


class Config(BaseModel):
    """Main configuration."""
    apify: ApifyConfig = Field(default_factory=ApifyConfig)
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)
    mysql: MySQLConfig = Field(default_factory=MySQLConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    ui: UIConfig = Field(default_factory=UIConfig)

    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))


# Singleton config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the singleton config instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Drop the cached config so the next call re-reads the environment."""
    global _config
    _config = None
