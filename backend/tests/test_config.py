"""
SocialNet Backend — Configuration Tests
=========================================

What we test:
    ✅ Production check fires only for production + the default JWT secret
    ✅ log_level is upper-cased and unknown names are rejected
    ✅ CORS origins are split on commas and trimmed
    ✅ The lifespan logs a configuration error and still starts
"""

import logging
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from pydantic import ValidationError

from socialnet import main
from socialnet.config import DEFAULT_JWT_SECRET, Settings


class TestProductionCheck:
    def test_default_secret_rejected_in_production(self):
        config = Settings(environment="production", jwt_secret=DEFAULT_JWT_SECRET)
        with pytest.raises(ValueError, match="JWT_SECRET"):
            config.validate_required_for_production()

    def test_environment_name_is_case_insensitive(self):
        config = Settings(environment="Production", jwt_secret=DEFAULT_JWT_SECRET)
        with pytest.raises(ValueError):
            config.validate_required_for_production()

    def test_custom_secret_accepted_in_production(self):
        config = Settings(environment="production", jwt_secret="a-long-random-production-secret-value")
        config.validate_required_for_production()

    def test_default_secret_allowed_in_development(self):
        config = Settings(environment="development", jwt_secret=DEFAULT_JWT_SECRET)
        config.validate_required_for_production()


class TestFieldValidation:
    def test_log_level_upper_cased(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValidationError, match="Invalid log_level"):
            Settings(log_level="verbose")

    def test_rate_limit_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(rate_limit_requests=0)

    def test_cors_origins_split_and_trimmed(self):
        config = Settings(cors_origins=" http://a.test , http://b.test,, ")
        assert config.cors_origins_list == ["http://a.test", "http://b.test"]

    def test_is_sqlite(self):
        assert Settings(database_url="sqlite+aiosqlite:///./social.db").is_sqlite is True
        assert Settings(database_url="postgresql+asyncpg://u:p@db/social").is_sqlite is False


class TestLifespan:
    @pytest.mark.asyncio
    async def test_configuration_error_is_logged_not_raised(self, monkeypatch, caplog):
        monkeypatch.setattr(main.settings, "environment", "production")
        monkeypatch.setattr(main.settings, "jwt_secret", DEFAULT_JWT_SECRET)
        monkeypatch.setattr(main, "setup_logging", lambda: None)
        dispose = AsyncMock()
        monkeypatch.setattr(main, "dispose_engine", dispose)
        caplog.set_level(logging.INFO, logger="socialnet.main")

        async with main.lifespan(FastAPI()):
            pass

        assert any("Configuration error" in record.getMessage() for record in caplog.records)
        dispose.assert_awaited_once()
