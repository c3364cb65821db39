from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database (default uses docker-compose service name)
    database_url: str = "postgresql+psycopg2://planner:planner_dev@db:5432/planner"

    # LLM API Keys (optional, the vision parser checks before use)
    openai_api_key: str = ""
    anthropic_api_key: str = ""

    # App settings
    app_name: str = "Transcript Planner"
    debug: bool = False
    log_level: str = "INFO"

    # Vision transcript parsing
    vision_openai_model: str = "gpt-4o"
    vision_anthropic_model: str = "claude-3-5-sonnet-20241022"
    vision_max_tokens: int = 4000
    vision_render_scale: float = 2.0  # 2x zoom keeps small table text legible

    # Uploads
    transcript_max_mb: int = 10
    transcript_max_filename_length: int = 100

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
