"""Configuration settings for the research assistant service."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """A required setting is missing or invalid."""

    pass


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Service identification
    service_name: str = "research-assistant"
    debug: bool = False

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 8000

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"
    log_request_headers: bool = False
    log_request_body: bool = False

    # Model provider (Fireworks, OpenAI-compatible)
    fireworks_api_key: str | None = Field(default=None, validation_alias="FIREWORKS_API_KEY")
    fireworks_base_url: str = "https://api.fireworks.ai/inference/v1"
    chat_model: str = "accounts/sentientfoundation/models/dobby-unhinged-llama-3-3-70b-new"
    chat_temperature: float = 0.7
    chat_max_tokens: int = 8000
    summary_model: str = "accounts/fireworks/models/llama-v3p3-70b-instruct"
    summary_temperature: float = 0.3
    summary_max_tokens: int = 300

    # Timeouts (seconds)
    generation_timeout: float = 120.0
    adapter_timeout: float = 8.0

    # Search providers
    tavily_api_key: str | None = Field(default=None, validation_alias="TAVILY_API_KEY")
    tavily_url: str = "https://api.tavily.com/search"
    github_token: str | None = Field(default=None, validation_alias="GITHUB_TOKEN")
    github_api_url: str = "https://api.github.com"
    coingecko_api_url: str = "https://api.coingecko.com/api/v3"
    social_search_url: str = "https://twitter.com/search"

    # Per-provider result caps
    web_max_results: int = 5
    code_host_max_results: int = 5
    market_data_max_results: int = 3

    # Session persistence
    sessions_dir: Path = Path("~/.research-assistant/sessions")

    # CORS configuration
    cors_origins: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_prefix="RESEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    def require_model_api_key(self) -> str:
        """Return the model provider key, or raise if it is not configured."""
        if not self.fireworks_api_key:
            raise ConfigurationError("Fireworks API key not configured")
        return self.fireworks_api_key


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
