"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Document store
    store_backend: str = "mongo"  # 'mongo' or 'memory'
    store_timeout_seconds: float = 5.0

    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017/?replicaSet=rs0"
    mongodb_db: str = "admissions_portal"

    # Document uploads (bytes live outside the store)
    upload_dir: str = "uploads"
    max_upload_mb: int = 5

    # JWT Auth (tokens are issued by the identity service)
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440

    # Notifications
    notification_page_size: int = 20

    # App
    log_level: str = "INFO"
    debug: bool = False

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
