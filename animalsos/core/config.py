"""
Configuration helpers for the AnimalSOS backend.

Settings are read once from environment variables so that routers, services
and storage backends never fetch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os

STORAGE_MEMORY = "memory"
STORAGE_DOCUMENT = "document"

_DEFAULT_CORS = (
    "http://localhost:5000",
    "http://127.0.0.1:5000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
)


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    storage_backend: str
    database_url: str
    session_ttl_seconds: int
    session_prune_interval_seconds: int
    seed_sample_data: bool
    seed_admin_password: str
    log_level: str
    cors_origins: tuple[str, ...]


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    def _origins(value: str | None) -> tuple[str, ...]:
        if value is None:
            return _DEFAULT_CORS
        return tuple(origin.strip().rstrip("/") for origin in value.split(",") if origin.strip())

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        storage_backend=(os.getenv("STORAGE_BACKEND") or STORAGE_MEMORY).strip().lower(),
        database_url=os.getenv("DATABASE_URL", ""),
        session_ttl_seconds=_int(os.getenv("SESSION_TTL_SECONDS", "86400"), 86400),
        session_prune_interval_seconds=_int(os.getenv("SESSION_PRUNE_INTERVAL_SECONDS", "86400"), 86400),
        seed_sample_data=_bool(os.getenv("SEED_SAMPLE_DATA"), True),
        seed_admin_password=os.getenv("SEED_ADMIN_PASSWORD", "admin123"),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        cors_origins=_origins(os.getenv("CORS_ORIGINS")),
    )
