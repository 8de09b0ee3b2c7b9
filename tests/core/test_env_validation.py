"""
Tests for settings parsing and startup environment validation.
"""

import pytest

from notecards.core.config import Settings
from notecards.core.env_validation import (
    validate_database_url,
    validate_environment,
    validate_or_exit,
    validate_production_settings,
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in ("APP_ENV", "DEBUG", "DATABASE_URL", "PUBLIC_MODE", "ALLOWED_ORIGINS"):
        monkeypatch.delenv(name, raising=False)


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


# ================================
# Settings
# ================================

def test_defaults():
    config = make_settings()

    assert config.PUBLIC_MODE is True
    assert config.API_V1_PREFIX == "/api/v1"
    assert config.DATABASE_URL.startswith("postgresql+asyncpg://")
    assert config.is_development


def test_allowed_origins_are_split():
    config = make_settings(ALLOWED_ORIGINS="https://a.example, https://b.example,,")
    assert config.ALLOWED_ORIGINS == ["https://a.example", "https://b.example"]


def test_public_mode_from_environment(monkeypatch):
    monkeypatch.setenv("PUBLIC_MODE", "false")
    assert make_settings().PUBLIC_MODE is False


def test_uses_sqlite():
    assert make_settings(DATABASE_URL="sqlite+aiosqlite:///:memory:").uses_sqlite


# ================================
# Validation
# ================================

def test_valid_development_environment():
    is_valid, errors = validate_environment(make_settings())
    assert is_valid is True
    assert errors == []


def test_sync_driver_is_rejected():
    errors = validate_database_url(make_settings(DATABASE_URL="postgresql://u:p@localhost/db"))
    assert len(errors) == 1
    assert "async driver" in errors[0]


def test_sqlite_rejected_in_production():
    config = make_settings(
        APP_ENV="production",
        DEBUG=False,
        DATABASE_URL="sqlite+aiosqlite:///notecards.db",
    )
    assert validate_database_url(config) == ["DATABASE_URL must point to PostgreSQL in production"]


def test_debug_rejected_in_production():
    errors = validate_production_settings(make_settings(APP_ENV="production", DEBUG=True))
    assert errors == ["DEBUG must be false in production"]


def test_production_checks_skipped_outside_production():
    assert validate_production_settings(make_settings(DEBUG=True)) == []


def test_validate_or_exit_aborts_on_errors():
    with pytest.raises(SystemExit) as exc_info:
        validate_or_exit(make_settings(DATABASE_URL="mysql://u:p@localhost/db"))

    assert exc_info.value.code == 1


def test_validate_or_exit_passes():
    validate_or_exit(make_settings())
