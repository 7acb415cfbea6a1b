"""Application configuration."""
import os
from pathlib import Path
from urllib.parse import quote_plus

from dotenv import load_dotenv

# Base directory (project root)
BASE_DIR = Path(__file__).resolve().parent.parent
_env_file = BASE_DIR / ".env"

# .env wins only for variables the process environment does not already set
if _env_file.exists():
    load_dotenv(_env_file)
elif (Path.cwd() / ".env").exists():
    load_dotenv(Path.cwd() / ".env")


def _env_flag(key: str, default: str = "false") -> bool:
    return os.environ.get(key, default).strip().lower() in ("1", "true", "yes", "on")


def _env_int(key: str, default: int) -> int:
    raw = (os.environ.get(key) or "").strip()
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


def _env_list(key: str) -> list[str]:
    raw = os.environ.get(key, "")
    return [x.strip() for x in raw.split(",") if x.strip()]


def _get_database_uri() -> str | None:
    """DATABASE_URL if set, else a MySQL URL assembled from the DB_* variables."""
    uri = (os.environ.get("DATABASE_URL") or "").strip()
    if uri:
        return uri.replace("postgres://", "postgresql://", 1)
    name = (os.environ.get("DB_NAME") or "").strip()
    if not name:
        return None
    host = (os.environ.get("DB_HOST") or "localhost").strip()
    port = _env_int("DB_PORT", 3306)
    user = quote_plus(os.environ.get("DB_USER") or "")
    password = quote_plus(os.environ.get("DB_PASSWORD") or "")
    auth = f"{user}:{password}@" if password else (f"{user}@" if user else "")
    return f"mysql+pymysql://{auth}{host}:{port}/{name}?charset=utf8mb4"


def _get_sqlalchemy_uri() -> str:
    """Database URI from the environment, or SQLite for local dev when unset."""
    uri = _get_database_uri()
    if uri:
        return uri
    # Local dev: no MySQL configured → use SQLite in project root (no setup required)
    path = BASE_DIR / "local.db"
    return f"sqlite:///{path.as_posix()}"


def _engine_options(uri: str) -> dict:
    options = {"pool_pre_ping": True}
    if not uri.startswith("sqlite"):
        options["pool_size"] = _env_int("DB_POOL_SIZE", 10)
        options["pool_timeout"] = _env_int("DB_POOL_TIMEOUT", 30)
        options["pool_recycle"] = 300
    return options


class Config:
    """Default configuration."""

    APP_ENV = os.environ.get("APP_ENV", "development").strip() or "development"
    DEBUG = os.environ.get("FLASK_DEBUG", "0") == "1"
    TESTING = False
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    PORT = _env_int("PORT", 3001)

    SQLALCHEMY_DATABASE_URI = _get_sqlalchemy_uri()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = _engine_options(SQLALCHEMY_DATABASE_URI)

    # Admin area (HTTP Basic). Unset means every admin request is rejected.
    ADMIN_USER = os.environ.get("ADMIN_USER", "")
    ADMIN_PASS = os.environ.get("ADMIN_PASS", "")

    # EmailJS notification on each submission; skipped unless all three are set
    EMAILJS_SERVICE_ID = os.environ.get("EMAILJS_SERVICE_ID", "").strip()
    EMAILJS_TEMPLATE_ID = os.environ.get("EMAILJS_TEMPLATE_ID", "").strip()
    EMAILJS_USER_ID = os.environ.get("EMAILJS_USER_ID", "").strip()
    EMAILJS_API_URL = "https://api.emailjs.com/api/v1.0/email/send"
    EMAILJS_TIMEOUT = 8

    ENABLE_CORS = _env_flag("ENABLE_CORS")
    CORS_ORIGINS = _env_list("CORS_ORIGIN")

    # Flask-Limiter
    RATELIMIT_ENABLED = True
    RATELIMIT_STORAGE_URI = os.environ.get("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_HEADERS_ENABLED = True
    RATELIMIT_DEFAULT = "200 per minute"
    SURVEY_SUBMIT_LIMIT = "30 per hour"


class ProductionConfig(Config):
    """Production configuration."""

    DEBUG = False
    APP_ENV = "production"


class DevelopmentConfig(Config):
    """Development configuration."""

    DEBUG = True


class TestingConfig(Config):
    """In-memory SQLite, fixed credentials, no rate limiting."""

    TESTING = True
    APP_ENV = "test"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    ADMIN_USER = "admin"
    ADMIN_PASS = "s3cret"
    EMAILJS_SERVICE_ID = ""
    EMAILJS_TEMPLATE_ID = ""
    EMAILJS_USER_ID = ""
    ENABLE_CORS = False
    CORS_ORIGINS = []
    RATELIMIT_ENABLED = False
