import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    secret_key: str
    env: str
    database_url: str
    log_level: str

    users_url_prefix: str
    users_strict_not_found: bool
    create_tables_on_start: bool


def _getenv(name: str, default: str = "") -> str:
    return (os.environ.get(name) or default).strip()


def _getenv_bool(name: str, default: bool) -> bool:
    raw = _getenv(name)
    if not raw:
        return default
    return raw.lower() in ("1", "true", "yes", "on")


def _normalize_prefix(prefix: str) -> str:
    prefix = "/" + prefix.strip("/")
    return prefix if prefix != "/" else "/users"


def load_settings() -> Settings:
    env = _getenv("ENV", "development")
    is_production = env.lower() in ("prod", "production")
    return Settings(
        secret_key=_getenv("SECRET_KEY", "change-me"),
        env=env,
        database_url=_getenv("DATABASE_URL", "sqlite:///fazbook.db"),
        log_level=_getenv("LOG_LEVEL", "INFO").upper(),
        users_url_prefix=_normalize_prefix(_getenv("USERS_URL_PREFIX", "/users")),
        users_strict_not_found=_getenv_bool("USERS_STRICT_NOT_FOUND", True),
        create_tables_on_start=_getenv_bool("CREATE_TABLES_ON_START", not is_production),
    )


def load_config() -> dict:
    s = load_settings()
    is_production = s.env.lower() in ("prod", "production")
    return {
        "SECRET_KEY": s.secret_key,
        "ENV": s.env,
        "DATABASE_URL": s.database_url,
        "LOG_LEVEL": s.log_level,
        "USERS_URL_PREFIX": s.users_url_prefix,
        "USERS_STRICT_NOT_FOUND": s.users_strict_not_found,
        "CREATE_TABLES_ON_START": s.create_tables_on_start,
        # security defaults
        "SESSION_COOKIE_HTTPONLY": True,
        "SESSION_COOKIE_SAMESITE": "Lax",
        "SESSION_COOKIE_SECURE": is_production,
        "MAX_CONTENT_LENGTH": 1 * 1024 * 1024,
    }
