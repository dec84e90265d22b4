"""
Application configuration: environment-aware settings.

All environment variables are documented here. See .env.example for a template.
"""

from __future__ import annotations

import os
import warnings
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).parent

load_dotenv()


class BaseConfig:
    # Core Flask
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-key-change-in-production")

    # Upstream REST API consumed by the client layer and the snapshot builder
    API_BASE_URL = os.environ.get("API_BASE_URL", "http://localhost:5000")
    REQUEST_TIMEOUT = float(os.environ.get("REQUEST_TIMEOUT", "30"))

    # Query cache: extra attempts for transient read failures, back-off base (seconds)
    QUERY_RETRY_LIMIT = int(os.environ.get("QUERY_RETRY_LIMIT", "3"))
    QUERY_RETRY_WAIT = float(os.environ.get("QUERY_RETRY_WAIT", "1"))

    # Static snapshot artifact
    STATIC_DATA_PATH = os.environ.get(
        "STATIC_DATA_PATH", str(Path("static") / "data" / "static-data.json")
    )

    # Upload limits
    UPLOAD_FOLDER = os.environ.get("UPLOAD_FOLDER", str(BASE_DIR / "uploads"))
    MAX_UPLOAD_FILES = 10
    MAX_CONTENT_LENGTH = 10 * 10 * 1024 * 1024  # ten 10 MB photos per request

    # Logging
    LOG_FORMAT = os.environ.get("LOG_FORMAT", "text")  # "json" or "text"
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_FORMAT = os.environ.get("LOG_FORMAT", "text")


class ProductionConfig(BaseConfig):
    DEBUG = False
    LOG_FORMAT = os.environ.get("LOG_FORMAT", "json")

    @classmethod
    def validate(cls):
        """Fail fast on missing or insecure configuration in production."""
        errors: list[str] = []

        if cls.SECRET_KEY in ("dev-key-change-in-production", ""):
            errors.append("SECRET_KEY must be set to a secure value in production.")

        if cls.REQUEST_TIMEOUT <= 0:
            errors.append("REQUEST_TIMEOUT must be a positive number of seconds.")

        if cls.API_BASE_URL.startswith("http://localhost"):
            warnings.warn("API_BASE_URL points at localhost, snapshot builds will use local data.")

        if errors:
            raise RuntimeError(
                "Production configuration errors:\n" + "\n".join(f"  - {e}" for e in errors)
            )


class TestingConfig(BaseConfig):
    TESTING = True
    QUERY_RETRY_WAIT = 0


config_by_name = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}


def get_config(env: str | None = None) -> type[BaseConfig]:
    """Resolve a config class from an environment name (defaults to FLASK_ENV)."""
    env = env or os.environ.get("FLASK_ENV", "development")
    return config_by_name.get(env, config_by_name["development"])
