"""Configuration management for the Portfol API."""

from functools import lru_cache
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ===========================================
    # Supabase Configuration
    # ===========================================
    SUPABASE_URL: str = Field(default="", description="Supabase project URL")
    SUPABASE_KEY: str = Field(default="", description="Supabase service key")

    # ===========================================
    # AI Gateway Configuration
    # ===========================================
    AI_GATEWAY_URL: str = Field(
        default="https://ai.gateway.lovable.dev/v1/chat/completions",
        description="Upstream chat-completion endpoint"
    )
    AI_GATEWAY_API_KEY: str = Field(default="", description="AI gateway API key")
    AI_MODEL: str = Field(default="google/gemini-2.5-flash", description="Model used for copywriting")
    AI_TIMEOUT_SECONDS: float = Field(default=60.0, description="Upstream request timeout")

    # ===========================================
    # Plans & Quotas
    # ===========================================
    FREE_PROPOSAL_LIMIT: int = Field(default=5, description="Proposals allowed on the free plan")

    # ===========================================
    # Server Configuration
    # ===========================================
    PUBLIC_BASE_URL: str = Field(
        default="http://localhost:8080",
        description="Origin used to build public share links"
    )
    DEBUG: bool = Field(default=True, description="Debug mode")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
