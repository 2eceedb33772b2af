# tests/test_config.py
"""Tests for environment-dependent settings validation."""

import pytest
from pydantic import ValidationError

from proptrack.config import Settings


class TestDatabaseValidation:

    def test_test_environment_defaults_to_sqlite(self):
        settings = Settings(environment="test", database_url=None)

        assert settings.database_url == "sqlite:///:memory:"
        assert settings.is_sqlite
        assert settings.is_test

    def test_production_requires_postgresql(self):
        with pytest.raises(ValidationError, match="requires PostgreSQL"):
            Settings(environment="production", database_url="sqlite:///prod.db")

    def test_production_accepts_postgresql(self):
        settings = Settings(
            environment="production",
            database_url="postgresql://user:pw@db:5432/proptrack",
        )

        assert settings.is_production
        assert not settings.is_sqlite

    def test_development_requires_url(self):
        with pytest.raises(ValidationError, match="DATABASE_URL is required"):
            Settings(environment="development", database_url=None)

    def test_development_warns_on_sqlite(self):
        with pytest.warns(UserWarning, match="SQLite"):
            Settings(environment="development", database_url="sqlite:///dev.db")


def test_reporting_defaults():
    settings = Settings(environment="test")

    assert settings.default_period == "monthly"
    assert settings.default_sort_by == "alphabetical"
    assert settings.default_sort_order == "asc"
