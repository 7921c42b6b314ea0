# ============================================================================
# FILE: app/config.py
# ============================================================================
from pydantic_settings import BaseSettings
from typing import List

DEFAULT_SECRET_KEY = "change-this-in-production"


class Settings(BaseSettings):
    """Application configuration using Pydantic BaseSettings"""

    # App settings
    APP_NAME: str = "Streamhub API"
    ENVIRONMENT: str = "development"  # development | production
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./streamhub.db"  # Change to PostgreSQL in production
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 0
    DB_POOL_TIMEOUT: int = 5
    DB_CONNECT_TIMEOUT: int = 5
    DB_QUERY_TIMEOUT_MS: int = 10000

    # Redis cache
    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_EXPIRE_SECONDS: int = 3600

    # Security
    SECRET_KEY: str = DEFAULT_SECRET_KEY
    ALGORITHM: str = "HS256"
    TOKEN_TTL_DAYS: int = 7
    BCRYPT_ROUNDS: int = 10
    COOKIE_NAME: str = "token"

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:5173"]

    # TMDB metadata
    TMDB_API_KEY: str = ""
    TMDB_BASE_URL: str = "https://api.themoviedb.org/3"
    TMDB_TIMEOUT_SECONDS: float = 10.0

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
