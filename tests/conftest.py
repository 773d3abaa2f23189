import boto3
import pytest
from fastapi.testclient import TestClient
from moto import mock_aws

from tests.consts import TEST_AWS_REGION, TEST_BUCKET_NAME
from tests.fixtures.store_fixtures import InMemoryFileStore
from uploads_api.config.settings import Settings
from uploads_api.main import create_app


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        mongodb_uri="mongodb://localhost:27017",
        database_name="test-db",
        collection_name="files",
    )


@pytest.fixture
def store() -> InMemoryFileStore:
    return InMemoryFileStore()


@pytest.fixture
def client(settings: Settings, store: InMemoryFileStore):
    app = create_app(settings=settings, store=store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def mocked_aws(monkeypatch):
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", TEST_AWS_REGION)

    with mock_aws():
        s3_client = boto3.client("s3", region_name=TEST_AWS_REGION)
        s3_client.create_bucket(Bucket=TEST_BUCKET_NAME)
        yield s3_client
