"""
Configuration settings for the application.
"""
import os
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """
    Application settings with default values.
    Values can be overridden by environment variables.
    """
    # API settings
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Buziz Office"

    # Security settings (tokens are issued by the identity provider)
    SECRET_KEY: str = os.environ.get("SECRET_KEY", "your-secret-key-change-in-production")
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # CORS settings
    BACKEND_CORS_ORIGINS: List[str] = ["http://localhost:5173", "http://localhost:3000"]

    # Remote key-value store (MongoDB)
    MONGODB_URL: str = os.environ.get("MONGODB_URL", "mongodb://localhost:27017")
    MONGODB_DB: str = os.environ.get("MONGODB_DB", "buziz")
    MONGODB_KV_COLLECTION: str = "kv_store"
    MONGODB_TIMEOUT_MS: int = 2000

    # Storage selection: "auto" falls back to local persistence when the
    # remote store is unreachable, "remote" never falls back, "local" never
    # touches the remote store.
    STORAGE_MODE: str = os.environ.get("STORAGE_MODE", "auto")
    LOCAL_STORAGE_PATH: Optional[str] = os.environ.get("LOCAL_STORAGE_PATH", "buziz_local.json")

    # Recurring shifts
    RECURRING_HORIZON_DAYS: int = 90

    # Logging settings
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Create settings instance
settings = Settings()


def log_config_info(logger) -> None:
    """Log configuration information at startup."""
    logger.info(f"API Version: {settings.API_V1_STR}")
    logger.info(f"Project Name: {settings.PROJECT_NAME}")
    logger.info(f"MongoDB URL: {settings.MONGODB_URL}")
    logger.info(f"MongoDB Database: {settings.MONGODB_DB}")
    logger.info(f"Storage Mode: {settings.STORAGE_MODE}")
    logger.info(f"Local Storage Path: {settings.LOCAL_STORAGE_PATH or '<memory>'}")
    logger.info(f"CORS Origins: {settings.BACKEND_CORS_ORIGINS}")
    logger.info(f"Log Level: {settings.LOG_LEVEL}")
