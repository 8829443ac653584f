"""Tests for configuration module."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from feedwatch.config import Settings, get_settings


def test_settings_defaults():
    """Test that settings use sensible defaults."""
    with patch.dict(os.environ, {}, clear=True):
        settings = Settings(_env_file=None)

        assert settings.redis_url == "redis://localhost:6379/0"
        assert settings.feeds_key == "feedwatch:feeds"
        assert settings.http_timeout_seconds == 15.0
        assert settings.poll_interval_minutes == 60
        assert settings.poll_on_startup is True
        assert settings.badge_cap == 50
        assert settings.env == "dev"


def test_settings_env_override():
    """Test that environment variables override defaults."""
    with patch.dict(
        os.environ,
        {
            "FEEDWATCH_REDIS_URL": "redis://cache:6379/2",
            "FEEDWATCH_POLL_INTERVAL_MINUTES": "15",
            "FEEDWATCH_SCHEDULER_ENABLED": "false",
            "FEEDWATCH_ENV": "prod",
        },
        clear=True,
    ):
        settings = Settings(_env_file=None)

        assert settings.redis_url == "redis://cache:6379/2"
        assert settings.poll_interval_minutes == 15
        assert settings.scheduler_enabled is False
        assert settings.env == "prod"


def test_settings_validation_error():
    """Test that invalid values are rejected."""
    with patch.dict(os.environ, {"FEEDWATCH_ENV": "staging"}, clear=True):
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    with patch.dict(os.environ, {"FEEDWATCH_POLL_INTERVAL_MINUTES": "0"}, clear=True):
        with pytest.raises(ValidationError):
            Settings(_env_file=None)


def test_get_settings_is_cached():
    """Test that get_settings returns the same instance."""
    with patch("feedwatch.config._settings", None):
        first = get_settings()
        second = get_settings()

        assert first is second
