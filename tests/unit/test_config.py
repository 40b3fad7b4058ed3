"""Unit tests for configuration loading."""

from suvidha.config import Settings, get_settings


class TestSettings:
    """Tests for Settings defaults and environment overrides."""

    def test_defaults(self, monkeypatch):
        """Without environment overrides the SQLite dev database is used."""
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        settings = Settings(_env_file=None)

        assert settings.database_url.startswith("sqlite+aiosqlite://")
        assert settings.log_level == "INFO"
        assert settings.log_file == "logs/server.log"
        assert settings.default_language == "en"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
        monkeypatch.setenv("TOKEN_MAX_AGE_SECONDS", "60")
        monkeypatch.setenv("DEFAULT_LANGUAGE", "hi")

        settings = Settings(_env_file=None)

        assert settings.database_url == "sqlite+aiosqlite:///:memory:"
        assert settings.token_max_age_seconds == 60
        assert settings.default_language == "hi"

    def test_cors_origins_from_json(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", '["https://kiosk.example.in"]')

        settings = Settings(_env_file=None)

        assert settings.cors_origins == ["https://kiosk.example.in"]

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()
