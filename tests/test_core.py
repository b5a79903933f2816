"""
Core functionality tests.
"""
import pytest
from fastapi.testclient import TestClient
from pydantic import ValidationError
from sqlalchemy import text

from bookshelf.core.auth import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from bookshelf.core.config import settings
from bookshelf.core.database import engine, get_db
from bookshelf.core.exceptions import (
    SessionConflictError,
    SessionNotFoundError,
    SessionValidationError,
    StoreUnavailableError,
)
from bookshelf.core.settings import get_settings
from bookshelf.core.settings.testing import TestingSettings
from bookshelf.main import app


class TestSettings:
    """Test application settings."""

    def test_settings_loaded(self):
        """Test that settings are properly loaded."""
        assert settings.PROJECT_NAME
        assert settings.VERSION
        assert settings.API_V1_STR == "/api/v1"
        assert settings.SECRET_KEY

    def test_testing_environment_selected(self):
        assert settings.ENVIRONMENT == "testing"
        assert settings.is_testing
        assert not settings.is_production
        assert isinstance(get_settings(), TestingSettings)

    def test_default_merge_policy_is_absolute(self):
        assert TestingSettings().READING_SESSION_MERGE_POLICY == "absolute"

    def test_merge_policy_is_normalized(self):
        configured = TestingSettings(READING_SESSION_MERGE_POLICY="ADDITIVE")
        assert configured.READING_SESSION_MERGE_POLICY == "additive"

    def test_unknown_merge_policy_rejected(self):
        with pytest.raises(ValidationError):
            TestingSettings(READING_SESSION_MERGE_POLICY="sometimes")

    def test_heatmap_defaults(self):
        assert settings.HEATMAP_DAYS == 365
        assert settings.MAX_HEATMAP_DAYS >= settings.HEATMAP_DAYS


class TestDatabase:
    """Test database configuration."""

    def test_database_engine_exists(self):
        assert engine is not None

    def test_get_db_dependency(self):
        """Test get_db yields a working session and closes it."""
        db_generator = get_db()
        db = next(db_generator)
        result = db.execute(text("SELECT 1")).fetchone()
        assert result[0] == 1
        with pytest.raises(StopIteration):
            next(db_generator)


class TestSecurity:
    """Test password hashing and tokens."""

    def test_password_hash_roundtrip(self):
        hashed = get_password_hash("s3cret-password")
        assert hashed != "s3cret-password"
        assert verify_password("s3cret-password", hashed)
        assert not verify_password("wrong-password", hashed)

    def test_token_carries_user_id(self):
        token = create_access_token(42)
        assert decode_access_token(token) == 42

    def test_garbage_token_rejected(self):
        assert decode_access_token("not-a-jwt") is None


class TestLedgerErrors:
    def test_validation_error_details(self):
        error = SessionValidationError("minutes", "Minutes must be at least 1")
        assert error.status_code == 422
        assert error.error == "Validation failed"
        assert error.details == [
            {"field": "minutes", "message": "Minutes must be at least 1"}
        ]

    @pytest.mark.parametrize(
        "error_class, status_code",
        [
            (SessionNotFoundError, 404),
            (SessionConflictError, 409),
            (StoreUnavailableError, 503),
        ],
    )
    def test_status_codes(self, error_class, status_code):
        error = error_class("boom")
        assert error.status_code == status_code
        assert error.message == "boom"
        assert error.details is None


class TestApplication:
    """Test FastAPI application setup."""

    def test_app_instance(self):
        assert app.title == settings.PROJECT_NAME
        assert app.version == settings.VERSION

    def test_app_openapi_url(self):
        assert app.openapi_url == f"{settings.API_V1_STR}/openapi.json"

    def test_health_endpoint(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["status"] == "healthy"
        assert body["data"]["database"] == "connected"
        assert body["data"]["environment"] == "testing"

    def test_openapi_json_accessible(self, client: TestClient):
        response = client.get(f"{settings.API_V1_STR}/openapi.json")
        assert response.status_code == 200
        assert "/api/v1/reading-sessions/" in response.json()["paths"]

    def test_unknown_route_uses_envelope(self, client: TestClient):
        response = client.get(f"{settings.API_V1_STR}/nowhere")
        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Not Found"


class TestAPIRoutes:
    """Protected routes answer 401 without a token, not 404."""

    @pytest.mark.parametrize(
        "method, path",
        [
            ("get", "/auth/me"),
            ("get", "/books/"),
            ("get", "/reading-sessions/"),
            ("post", "/reading-sessions/"),
            ("get", "/reading-sessions/stats"),
            ("get", "/reading-sessions/heatmap"),
            ("get", "/settings/"),
            ("get", "/stats/dashboard"),
            ("post", "/migrate/"),
        ],
    )
    def test_requires_authentication(
        self, client: TestClient, api_v1_prefix: str, method: str, path: str
    ):
        response = getattr(client, method)(f"{api_v1_prefix}{path}")
        assert response.status_code == 401
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Not authenticated"
        assert response.headers["www-authenticate"] == "Bearer"
