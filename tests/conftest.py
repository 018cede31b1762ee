import pytest
from fastapi.testclient import TestClient

from files_store.adapters.mongo import MongoStore
from files_store.config.settings import Settings
from files_store.main import create_app
from tests.fixtures.fake_mongo import FakeCollection, FakeGridFSBucket


@pytest.fixture
def bucket() -> FakeGridFSBucket:
    return FakeGridFSBucket()


@pytest.fixture
def collection() -> FakeCollection:
    return FakeCollection()


@pytest.fixture
def store(bucket: FakeGridFSBucket, collection: FakeCollection) -> MongoStore:
    return MongoStore(bucket, collection)


@pytest.fixture
def settings() -> Settings:
    return Settings(mongodb_url="mongodb://test-host:27017", database_name="with-baby-store-test")


@pytest.fixture
def client(settings: Settings, store: MongoStore) -> TestClient:
    app = create_app(settings=settings, store=store)
    with TestClient(app) as client:
        yield client
