# Configuration for the blog API
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # App settings
    app_name: str = "Blog API"
    version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"

    # Database
    database_url: str = "sqlite:///./blog_api.db"

    # Photo storage
    backend_server_path: str = "http://localhost:8000"
    storage_dir: str = "storage"

    # Security
    secret_key: str = "change-me-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 30

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False

    # CORS
    allowed_origins: List[str] = ["http://localhost:3000"]


@lru_cache()
def get_settings() -> Settings:
    """Load settings once per process"""
    return Settings()
