"""Tests for configuration management."""

import pytest
from pydantic import ValidationError

from embedding_importer.config.settings import EMBEDDING_SIZE, Settings

DB_ENV = {
    "DB_HOST": "db.internal",
    "DB_USER": "importer",
    "DB_PASSWORD": "s3cret",
    "DB_NAME": "content",
}


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate settings from the developer's environment and .env.local."""
    for name in [*DB_ENV, "DB_PORT", "DATABASE_URL", "APPLICATION_NAME", "INPUT_FILE",
                 "EMBEDDING_SIZE", "VERIFY_MAX_LINES", "FAIL_OPEN_EXISTENCE_CHECK",
                 "LOG_LEVEL", "LOG_FILE"]:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


class TestSettings:
    """Test settings loading and validation."""

    def test_defaults(self, monkeypatch):
        for name, value in DB_ENV.items():
            monkeypatch.setenv(name, value)

        settings = Settings()

        assert settings.db_port == 5432
        assert settings.application_name == "yggdrasil"
        assert settings.input_file == "embedding.csv"
        assert settings.embedding_size == EMBEDDING_SIZE
        assert settings.verify_max_lines == 10
        assert settings.fail_open_existence_check is True
        assert settings.log_level == "INFO"
        assert settings.log_file is None

    def test_url_built_from_parts(self, monkeypatch):
        for name, value in DB_ENV.items():
            monkeypatch.setenv(name, value)
        monkeypatch.setenv("DB_PORT", "6543")

        url = Settings().sqlalchemy_url

        assert url.drivername == "postgresql+psycopg"
        assert url.host == "db.internal"
        assert url.port == 6543
        assert url.username == "importer"
        assert url.password == "s3cret"
        assert url.database == "content"
        assert url.query["application_name"] == "yggdrasil"

    def test_database_url_overrides_parts(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite:///import.db")

        assert Settings().sqlalchemy_url == "sqlite:///import.db"

    def test_missing_database_settings(self, monkeypatch):
        monkeypatch.setenv("DB_HOST", "db.internal")

        with pytest.raises(ValidationError, match="DB_USER"):
            Settings()

    def test_invalid_port(self, monkeypatch):
        for name, value in DB_ENV.items():
            monkeypatch.setenv(name, value)
        monkeypatch.setenv("DB_PORT", "70000")

        with pytest.raises(ValidationError):
            Settings()

    def test_embedding_size_must_be_positive(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite://")
        monkeypatch.setenv("EMBEDDING_SIZE", "0")

        with pytest.raises(ValidationError):
            Settings()

    def test_env_local_file(self, tmp_path):
        (tmp_path / ".env.local").write_text(
            "DB_HOST=from-file\n"
            "DB_USER=importer\n"
            "DB_PASSWORD=s3cret\n"
            "DB_NAME=content\n"
            "INPUT_FILE=export.csv\n",
            encoding="utf-8",
        )

        settings = Settings()

        assert settings.db_host == "from-file"
        assert settings.input_file == "export.csv"

    def test_environment_wins_over_file(self, tmp_path, monkeypatch):
        (tmp_path / ".env.local").write_text("DATABASE_URL=sqlite:///file.db\n", encoding="utf-8")
        monkeypatch.setenv("DATABASE_URL", "sqlite:///env.db")

        assert Settings().database_url == "sqlite:///env.db"
