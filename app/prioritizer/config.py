import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    secret_key: str
    env: str
    log_level: str

    store_backend: str
    database_url: str
    seed_demo_data: bool

    admin_username: str
    admin_password: str
    admin_name: str


DEFAULT_ADMIN_PASSWORD = "Raj"


def _getenv(name: str, default: str = "") -> str:
    return (os.environ.get(name) or default).strip()


def _getflag(name: str, default: str = "0") -> bool:
    return _getenv(name, default).lower() in ("1", "true", "yes", "on")


def load_settings() -> Settings:
    return Settings(
        secret_key=_getenv("SECRET_KEY", "change-me"),
        env=_getenv("ENV", "development"),
        log_level=_getenv("LOG_LEVEL", "INFO").upper(),
        store_backend=_getenv("STORE_BACKEND", "memory").lower(),
        database_url=_getenv("DATABASE_URL", "sqlite:///prioritizer.db"),
        seed_demo_data=_getflag("SEED_DEMO_DATA"),
        admin_username=_getenv("ADMIN_USERNAME", "Raj"),
        admin_password=os.environ.get("ADMIN_PASSWORD") or DEFAULT_ADMIN_PASSWORD,
        admin_name=_getenv("ADMIN_NAME", "Raj Kumar"),
    )


def load_config() -> dict:
    s = load_settings()
    is_production = s.env in ("prod", "production")
    return {
        "SECRET_KEY": s.secret_key,
        "ENV": s.env,
        "LOG_LEVEL": s.log_level,
        "STORE_BACKEND": s.store_backend,
        "DATABASE_URL": s.database_url,
        "SEED_DEMO_DATA": s.seed_demo_data,
        "ADMIN_USERNAME": s.admin_username,
        "ADMIN_PASSWORD": s.admin_password,
        "ADMIN_NAME": s.admin_name,
        # security defaults
        "SESSION_COOKIE_HTTPONLY": True,
        "SESSION_COOKIE_SAMESITE": "Lax",
        "SESSION_COOKIE_SECURE": is_production,  # Require HTTPS in production
        # JSON bodies only; nothing here uploads files
        "MAX_CONTENT_LENGTH": 1 * 1024 * 1024,
    }
