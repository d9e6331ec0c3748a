import os

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

import boto3
import mongomock
import pytest
from moto import mock_aws

from portfolio.config import settings
from portfolio.main import app
from portfolio.services.documents import DocumentStore
from portfolio.services.tokens import IdentityClaim


@pytest.fixture(autouse=True)
def reset_rate_limits():
    """Every test starts with empty rate limit windows."""
    app.state.rate_limiter.clear()
    yield
    app.state.rate_limiter.clear()


@pytest.fixture
def s3_client():
    """Provide a mocked S3 client with a test bucket."""
    with mock_aws():
        client = boto3.client("s3", region_name=settings.AWS_REGION)
        client.create_bucket(Bucket=settings.S3_BUCKET)
        yield client


@pytest.fixture
def store():
    """Provide a DocumentStore backed by an in-memory MongoDB."""
    return DocumentStore(client=mongomock.MongoClient(), database="portfolio-test")


@pytest.fixture
def admin_headers():
    token = app.state.token_service.issue(
        IdentityClaim(user_id="65f0c0ffee0123456789abcd", username="admin", email="admin@example.com")
    )
    return {"Authorization": f"Bearer {token}"}
