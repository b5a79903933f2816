from typing import List, Optional

from .base import BaseSettings


class TestingSettings(BaseSettings):
    ENVIRONMENT: str = "testing"
    DEBUG: bool = False

    PROJECT_NAME: str = "Bookshelf API - Testing"
    VERSION: str = "1.0.0-test"

    # In-memory database, replaced per test by the conftest session override
    DATABASE_URL: str = "sqlite:///:memory:"
    DATABASE_ECHO: bool = False

    SECRET_KEY: str = "testing-secret-key-not-for-real-deployments-32-chars"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    BACKEND_CORS_ORIGINS: List[str] = ["http://testserver"]

    LOG_LEVEL: str = "WARNING"
    LOG_FILE: Optional[str] = None

    model_config = {
        "case_sensitive": True,
        "env_file": ".env.test",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }
