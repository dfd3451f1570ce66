"""
Configuration management using Pydantic Settings
"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Remote study API
    API_URL: str = "http://localhost:5000/api"
    REQUEST_TIMEOUT: int = 30  # seconds

    # Redis
    REDIS_URL: str = "redis://redis:6379/0"

    # Application
    APP_NAME: str = "StudyAid Web Client"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Sessions
    SESSION_COOKIE_NAME: str = "studyaid_session"
    SESSION_TTL: int = 604800  # 7 days
    SESSION_IDLE_TTL: int = 3600  # live context dropped after 1 hour idle

    # Query cache
    QUERY_CACHE_TTL: int = 300  # 5 minutes

    # Uploads
    MAX_UPLOAD_FILES: int = 5
    MAX_UPLOAD_FILE_SIZE: int = 10 * 1024 * 1024  # 10MB
    ALLOWED_UPLOAD_TYPES: List[str] = [
        "application/pdf",
        "text/plain",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ]

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True


# Global settings instance
settings = Settings()
