"""
Configuration management for DreamBoard API
"""
import logging
from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import field_validator
from functools import lru_cache

logger = logging.getLogger(__name__)

class Settings(BaseSettings):
    """Application settings loaded from environment and .env"""

    # API Configuration
    api_title: str = "DreamBoard API"
    api_version: str = "1.0.0"
    api_description: str = "Goal tracking API with AI-suggested timelines and resources"

    # Server Configuration
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False

    # Sessions
    session_secret_key: str = "local-development-key"
    session_cookie_name: str = "dreamboard_session"
    session_max_age: int = 30 * 24 * 60 * 60  # 30 days
    cors_origins: str = "http://localhost:5173,http://localhost:3000,http://localhost:5000"

    # OpenAI Configuration
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o"
    openai_temperature: float = 0.4
    openai_max_tokens: int = 1200

    # Database Configuration
    database_url: str = "sqlite+aiosqlite:///./dreamboard.db"
    database_echo: bool = False

    # Logging Configuration
    log_level: str = "INFO"

    @field_validator('openai_api_key')
    @classmethod
    def validate_openai_key(cls, v):
        if v is not None:
            v = v.strip()
            if not v or v.startswith('#'):
                return None
        if v and not v.startswith('sk-'):
            raise ValueError('Invalid OpenAI API key format')
        return v

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "env_prefix": "",
        "extra": "ignore"
    }

@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()

def validate_required_settings():
    """Validate that all required settings are present"""
    settings = get_settings()
    errors = []

    # The advisory client falls back to static suggestions without a key
    if not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY not set. AI suggestions will use fallback values.")

    if not settings.session_secret_key:
        errors.append("SESSION_SECRET_KEY must not be empty")

    if errors:
        raise ValueError(f"Configuration errors: {', '.join(errors)}")

    return True
