from click.testing import CliRunner

from files_store.cli import cli
from files_store.config.settings import get_settings


def test_show_config(monkeypatch):
    monkeypatch.setenv("MONGODB_URL", "mongodb://cli-host:27017")
    get_settings.cache_clear()

    result = CliRunner().invoke(cli, ["show-config"])

    get_settings.cache_clear()
    assert result.exit_code == 0
    assert "mongodb://cli-host:27017" in result.output
    assert "GridFS Bucket: fs" in result.output


def test_init_indexes(monkeypatch, store, collection):
    monkeypatch.setattr("files_store.cli.StoreFactory.get_store", lambda settings: store)

    result = CliRunner().invoke(cli, ["init-indexes"])

    assert result.exit_code == 0
    assert collection.indexes == [{"keys": [("key", 1)], "unique": True}]
