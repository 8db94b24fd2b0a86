"""
Configuration management using Pydantic Settings
"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Database
    DATABASE_URL: str = "sqlite:///./quran_tracker.db"

    # Redis
    REDIS_URL: str = "redis://redis:6379/0"

    # Application
    APP_NAME: str = "Quran Reading Tracker"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Rate Limiting
    RATE_LIMIT_PER_MINUTE: int = 60
    RATE_LIMIT_PER_HOUR: int = 1000

    # Tracker Settings
    DEFAULT_USER_ID: int = 1
    CONSISTENCY_WINDOW_DAYS: int = 30
    RECENT_LOGS_LIMIT: int = 5
    DEFAULT_DAILY_TARGET: int = 5
    DEFAULT_WEEKLY_TARGET: int = 35
    LOG_SNAPSHOT_TTL: int = 604800  # 7 days
    SEED_SAMPLE_DATA: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True


# Global settings instance
settings = Settings()
