"""Environment-driven configuration with Pydantic v2."""

from typing import List, Optional
from pathlib import Path
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings driven entirely by environment variables."""

    # Server Configuration
    host: str = Field(default="127.0.0.1", env="HOST")
    port: int = Field(default=8000, env="PORT", ge=1024, le=65535)
    debug: bool = Field(default=False, env="DEBUG")
    cors_origins: List[str] = Field(default=["http://localhost:5173"], env="CORS_ORIGINS")

    # Document store (SQLAlchemy async URL)
    database_url: str = Field(default="sqlite+aiosqlite:///./data/storefront.db", env="DATABASE_URL")
    database_echo: bool = Field(default=False, env="DATABASE_ECHO")
    database_pool_size: int = Field(default=20, env="DATABASE_POOL_SIZE", ge=5, le=100)
    database_max_overflow: int = Field(default=30, env="DATABASE_MAX_OVERFLOW", ge=10, le=100)

    # Object storage
    storage_root: str = Field(default="./data/storage", env="STORAGE_ROOT")
    storage_public_url: str = Field(default="http://localhost:8000/storage", env="STORAGE_PUBLIC_URL")

    # Read-through caches
    cache_ttl_ms: int = Field(default=300000, env="CACHE_TTL_MS", ge=0)

    # Business defaults
    invitation_expiry_days: int = Field(default=7, env="INVITATION_EXPIRY_DAYS", ge=1)
    low_stock_threshold: int = Field(default=5, env="LOW_STOCK_THRESHOLD", ge=0)

    # Logging
    log_level: str = Field(default="INFO", env="LOG_LEVEL")
    log_format: str = Field(default="json", env="LOG_FORMAT")
    log_file: Optional[str] = Field(default=None, env="LOG_FILE")

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v):
        """Ensure database directory exists for SQLite."""
        if v and v.startswith("sqlite"):
            if ":///" in v:
                db_path = v.split("///")[1]
                if db_path and db_path != ":memory:":
                    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        return v

    @field_validator("storage_root")
    @classmethod
    def validate_storage_root(cls, v):
        """Ensure the object storage directory exists."""
        Path(v).mkdir(parents=True, exist_ok=True)
        return v

    @field_validator("storage_public_url")
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip("/")

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.debug

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
        "env_parse_none_str": "none",
    }
