from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ==============================
    # Application
    # ==============================
    APP_NAME: str = "Inventoria"
    ENVIRONMENT: str = "local"

    # ==============================
    # Storage
    # ==============================
    DATABASE_URL: str = "sqlite:///./inventory.db"
    STORAGE_BACKEND: str = "sql"
    SEED_DEFAULT_DATA: bool = True

    # ==============================
    # Logging
    # ==============================
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # ==============================
    # Inventory
    # ==============================
    EXPIRES_SOON_DAYS: int = 7


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader (once per process)."""
    return Settings()


__all__ = ["Settings", "get_settings"]
