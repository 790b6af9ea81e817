import os
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent
load_dotenv(BASE_DIR / ".env")

_UNITS = {"d": "days", "h": "hours", "m": "minutes", "s": "seconds"}


def parse_duration(value, default=timedelta(days=1)):
    """Parse "1d", "12h", "30m" or a plain number of seconds."""
    if not value:
        return default
    value = value.strip().lower()
    if value[-1] in _UNITS:
        return timedelta(**{_UNITS[value[-1]]: int(value[:-1])})
    return timedelta(seconds=int(value))


def split_terms(value):
    return [t.strip() for t in value.split(",") if t.strip()]


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL", f"sqlite:///{(BASE_DIR / 'records.db').as_posix()}"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    JWT_SECRET_KEY = os.getenv("JWT_SECRET", "dev-jwt-secret")
    JWT_ACCESS_TOKEN_EXPIRES = parse_duration(os.getenv("JWT_EXPIRES_IN"))
    JWT_TOKEN_LOCATION = ["cookies"]
    JWT_ACCESS_COOKIE_NAME = "token"
    JWT_COOKIE_SECURE = False
    JWT_COOKIE_SAMESITE = "Lax"
    JWT_COOKIE_CSRF_PROTECT = False
    JWT_SESSION_COOKIE = False

    # Switching semesters is a deployment setting, not a code change.
    CURRENT_TERM = os.getenv("CURRENT_TERM", "1st")
    TERM_ORDER = split_terms(os.getenv("TERM_ORDER", "1st,2nd"))

    TRANSCRIPT_INSTITUTION = os.getenv("TRANSCRIPT_INSTITUTION", "University Records Office")
    TRANSCRIPT_SIGNATURE_IMAGE = os.getenv("TRANSCRIPT_SIGNATURE_IMAGE")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_SECRET_KEY = "test-jwt-secret-key-for-testing-only"
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=1)
    CURRENT_TERM = "1st"
    TERM_ORDER = ["1st", "2nd"]
    TRANSCRIPT_SIGNATURE_IMAGE = None
    LOG_LEVEL = "WARNING"
