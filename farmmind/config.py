"""
Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # ==========================================================================
    # Environment
    # ==========================================================================

    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # ==========================================================================
    # API Server
    # ==========================================================================

    api_host: str = "0.0.0.0"
    api_port: int = 3000
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    # ==========================================================================
    # AI / LLM
    # ==========================================================================

    # Which provider to use: ollama, openai, gemini
    llm_provider: str = "ollama"

    # Primary: local Ollama
    ollama_api_base: str = "http://localhost:11434"
    ollama_text_model: str = "mistral:7b"

    # Hosted providers
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_api_base: str = ""
    google_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"

    # ==========================================================================
    # Translation API limits
    # ==========================================================================

    translate_max_texts: int = 60
    translate_max_chars: int = 1200

    # ==========================================================================
    # Page translation engine
    # ==========================================================================

    translate_api_url: str = "http://localhost:3000/api/translate"
    translate_languages_url: str = "http://localhost:3000/api/translate/languages"
    translate_batch_size: int = 30
    translate_debounce_seconds: float = 0.35
    translate_storage_key: str = "fm_translate_lang"
    translate_state_path: str = "./data/translate_state.json"

    # ==========================================================================
    # Optional Services
    # ==========================================================================

    sentry_dsn: str = ""

    # ==========================================================================
    # Helpers
    # ==========================================================================

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
