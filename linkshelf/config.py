import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv(override=True)


def _env_bool(name: str, default: bool = False) -> bool:
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_optional_bool(name: str) -> bool | None:
    raw_value = os.getenv(name)
    if raw_value is None or not raw_value.strip():
        return None
    return _env_bool(name)


def _env_list(name: str, default: str) -> tuple[str, ...]:
    raw_value = os.getenv(name, default)
    return tuple(item.strip() for item in raw_value.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    environment: str = (
        os.getenv("APP_ENV") or os.getenv("ENVIRONMENT", "development")
    ).strip().lower()
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./linkshelf.db")
    session_cookie_name: str = os.getenv("SESSION_COOKIE_NAME", "session")
    session_cookie_same_site: str = (
        os.getenv("SESSION_COOKIE_SAMESITE", "lax").strip().lower()
    )
    session_ttl_days: int = int(os.getenv("SESSION_TTL_DAYS", "7"))
    cookie_secure_override: bool | None = _env_optional_bool("COOKIE_SECURE")
    cors_origins: tuple[str, ...] = _env_list(
        "CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
    )
    metadata_fetch_timeout_seconds: int = int(
        os.getenv("METADATA_FETCH_TIMEOUT_SECONDS", "10")
    )
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
    seed_email: str = os.getenv("SEED_EMAIL", "").strip().lower()
    seed_name: str = os.getenv("SEED_NAME", "").strip()

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

    @property
    def cookie_secure(self) -> bool:
        if self.cookie_secure_override is not None:
            return self.cookie_secure_override
        return self.is_production


settings = Settings()
