"""Storage backend configuration."""

from typing import Literal

from pydantic import BaseModel, Field


class StorageConfig(BaseModel):
    """Session and persona store configuration."""

    backend: Literal["inmemory", "postgres"] = Field(
        default="inmemory", description="Store backend"
    )
    dsn: str | None = Field(
        default=None,
        description="PostgreSQL DSN (falls back to DATABASE_URL / POSTGRES_* env vars)",
    )
    min_pool_size: int = Field(default=2, ge=1)
    max_pool_size: int = Field(default=10, ge=1)
