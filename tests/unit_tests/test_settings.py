import pytest
from pydantic import ValidationError

from files_store.config.settings import Settings


def test_settings__defaults(monkeypatch):
    monkeypatch.delenv("MONGODB_URL", raising=False)

    settings = Settings(_env_file=None)

    assert settings.mongodb_url == "mongodb://localhost:27017"
    assert settings.database_name == "with-baby-store"
    assert settings.collection_name == "files"
    assert settings.port == 8000


def test_settings__read_from_environment(monkeypatch):
    monkeypatch.setenv("MONGODB_URL", "mongodb://db.internal:27017")
    monkeypatch.setenv("DATABASE_NAME", "files-prod")
    monkeypatch.setenv("PORT", "9000")

    settings = Settings(_env_file=None)

    assert settings.mongodb_url == "mongodb://db.internal:27017"
    assert settings.database_name == "files-prod"
    assert settings.port == 9000


def test_settings__log_level_is_normalized():
    assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"


def test_settings__unknown_log_level_is_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, log_level="chatty")
