import os
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _load_secret_key() -> str | None:
    # SECRET_KEY_FILE wins so the secret can live in a mounted secret store.
    path = os.getenv("SECRET_KEY_FILE")
    if path:
        with open(path, encoding="utf-8") as f:
            return f.read().strip() or None
    return os.getenv("SECRET_KEY") or None


class Config:
    SECRET_KEY = _load_secret_key()
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///shopfront.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    SESSION_COOKIE_SECURE = _env_bool("SESSION_COOKIE_SECURE")
    SESSION_COOKIE_HTTPONLY = True
    PERMANENT_SESSION_LIFETIME = timedelta(hours=1)

    # fail-fast | degraded
    DB_STARTUP_POLICY = os.getenv("DB_STARTUP_POLICY", "fail-fast")

    # SMTP transport
    MAIL_SERVER = os.getenv("SMTP_HOST", "localhost")
    MAIL_PORT = int(os.getenv("SMTP_PORT") or "587")
    MAIL_USE_SSL = _env_bool("SMTP_SECURE")  # true for 465
    MAIL_USE_TLS = _env_bool("SMTP_STARTTLS")
    MAIL_USERNAME = os.getenv("EMAIL_USER")
    MAIL_PASSWORD = os.getenv("EMAIL_PASS")
    MAIL_DEFAULT_SENDER = os.getenv("EMAIL_USER")

    APP_HOST = os.getenv("APP_HOST", "0.0.0.0")
    APP_PORT = int(os.getenv("PORT") or "4000")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    PER_PAGE = int(os.getenv("PER_PAGE") or "12")


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    DB_STARTUP_POLICY = "degraded"
    MAIL_SUPPRESS_SEND = True
    MAIL_DEFAULT_SENDER = "shop@example.com"
    MAIL_USERNAME = "shop@example.com"
    PER_PAGE = 2
