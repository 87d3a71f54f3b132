"""
Application and Configuration Tests

Tests for the root and health endpoints, settings validation and the
table helpers in database.py.
"""

import pytest
from fastapi.testclient import TestClient
from pydantic import ValidationError
from sqlalchemy import inspect

from library_api.config import Settings
from library_api.database import create_tables, drop_tables, engine

VALID_SECRET = "a-perfectly-fine-secret-key-of-sufficient-length"


class TestEndpoints:
    """Tests for the non-GraphQL endpoints."""

    def test_root(self, client: TestClient):
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["graphql"] == "/graphql"
        assert data["health"] == "/health"

    def test_health(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["subscriptions"] == {"open": True, "book_added_subscribers": 0}


class TestSettings:
    """Tests for Settings validation."""

    def test_placeholder_secret_rejected(self):
        with pytest.raises(ValidationError):
            Settings(secret_key="REPLACE_WITH_YOUR_GENERATED_SECRET_KEY")

    def test_short_secret_rejected(self):
        with pytest.raises(ValidationError):
            Settings(secret_key="too-short")

    def test_log_level_normalized(self):
        settings = Settings(secret_key=VALID_SECRET, log_level="debug")

        assert settings.log_level == "DEBUG"

    def test_unknown_environment_rejected(self):
        with pytest.raises(ValidationError):
            Settings(secret_key=VALID_SECRET, environment="qa")

    def test_graphql_ide_can_be_disabled(self):
        assert Settings(secret_key=VALID_SECRET, graphql_ide="none").graphql_ide_option is None
        assert Settings(secret_key=VALID_SECRET).graphql_ide_option == "graphiql"

    def test_allowed_origins_list(self):
        settings = Settings(
            secret_key=VALID_SECRET,
            allowed_origins="http://a.example, http://b.example,",
        )

        assert settings.allowed_origins_list == ["http://a.example", "http://b.example"]

    def test_is_production(self):
        assert Settings(secret_key=VALID_SECRET, environment="production").is_production
        assert not Settings(secret_key=VALID_SECRET, environment="development").is_production


class TestTableHelpers:
    """Tests for create_tables and drop_tables on the configured engine."""

    def test_create_then_drop_tables(self):
        create_tables()
        assert {"authors", "books", "book_genres", "genres", "users"} <= set(
            inspect(engine).get_table_names()
        )

        drop_tables()
        assert inspect(engine).get_table_names() == []
