"""Tests for settings and database helpers."""

import pytest

from linkshelf.config import _env_bool, _env_list, _env_optional_bool
from linkshelf.database import build_database_url, create_db_engine


class TestEnvHelpers:
    @pytest.mark.parametrize("raw", ["1", "true", "YES", " on "])
    def test_truthy_values(self, monkeypatch, raw):
        monkeypatch.setenv("FLAG", raw)

        assert _env_bool("FLAG") is True

    def test_falsy_value(self, monkeypatch):
        monkeypatch.setenv("FLAG", "off")

        assert _env_bool("FLAG", default=True) is False

    def test_unset_uses_default(self, monkeypatch):
        monkeypatch.delenv("FLAG", raising=False)

        assert _env_bool("FLAG", default=True) is True

    def test_optional_bool_unset(self, monkeypatch):
        monkeypatch.setenv("FLAG", "  ")

        assert _env_optional_bool("FLAG") is None

    def test_env_list(self, monkeypatch):
        monkeypatch.setenv("ORIGINS", "https://a.example, ,https://b.example")

        assert _env_list("ORIGINS", "") == ("https://a.example", "https://b.example")


class TestSettings:
    @pytest.mark.parametrize("environment", ["production", "PRODUCTION"])
    def test_is_production(self, make_settings, environment):
        assert make_settings(environment=environment).is_production is True

    @pytest.mark.parametrize("environment", ["development", "staging", "test"])
    def test_not_production(self, make_settings, environment):
        settings = make_settings(environment=environment)

        assert settings.is_production is False
        assert settings.cookie_secure is False

    def test_override_wins(self, make_settings):
        settings = make_settings(environment="development", cookie_secure_override=True)

        assert settings.cookie_secure is True


class TestDatabaseUrl:
    def test_postgres_url_uses_psycopg(self):
        assert (
            build_database_url("postgresql://user:pw@db/linkshelf")
            == "postgresql+psycopg://user:pw@db/linkshelf"
        )

    def test_other_urls_untouched(self):
        assert build_database_url("sqlite:///./linkshelf.db") == "sqlite:///./linkshelf.db"

    def test_empty_url_is_rejected(self):
        with pytest.raises(RuntimeError):
            create_db_engine("")
