from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings as PydanticBaseSettings


class BaseSettings(PydanticBaseSettings):
    # ===============================
    # APPLICATION SETTINGS
    # ===============================
    PROJECT_NAME: str = "Bookshelf API"
    VERSION: str = "1.0.0"
    DESCRIPTION: str = (
        "Personal reading tracker: books, daily reading sessions and statistics"
    )

    # ===============================
    # API SETTINGS
    # ===============================
    API_V1_STR: str = "/api/v1"

    # ===============================
    # JWT ALGORITHM
    # ===============================
    ALGORITHM: str = "HS256"

    # ===============================
    # CORS SETTINGS
    # ===============================
    BACKEND_CORS_ORIGINS: List[str] = []

    # ===============================
    # LOGGING SETTINGS
    # ===============================
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    # ===============================
    # READING LEDGER SETTINGS
    # ===============================
    # "additive" sums repeated logs for a day, "absolute" replaces the
    # day's total and deletes it when 0 minutes are logged.
    READING_SESSION_MERGE_POLICY: str = "absolute"
    DEFAULT_YEARLY_GOAL: int = 24
    HEATMAP_DAYS: int = 365
    MAX_HEATMAP_DAYS: int = 366 * 2

    @field_validator("READING_SESSION_MERGE_POLICY")
    @classmethod
    def check_merge_policy(cls, value: str) -> str:
        value = value.lower()
        if value not in ("additive", "absolute"):
            raise ValueError("READING_SESSION_MERGE_POLICY must be additive or absolute")
        return value

    # ===============================
    # COMPUTED PROPERTIES
    # ===============================
    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def is_testing(self) -> bool:
        return self.ENVIRONMENT == "testing"

    model_config = {
        "case_sensitive": True,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }
