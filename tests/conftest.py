"""Pytest configuration and fixtures."""

import io
import os
import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from cloudspace.database import Base, get_db
from cloudspace.exceptions import ErrorType, ServiceError
from cloudspace.main import app
from cloudspace.storage import get_storage


class AuthHeaders(dict):
    """Dict subclass that also stores the registered user's details."""

    def __init__(self, *args, user_id: str | None = None, username: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.username = username

    @property
    def bucket(self) -> str | None:
        # Buckets are named after the user id
        return self.user_id


class InMemoryStorage:
    """Object store double keeping blobs in dicts and recording every call.

    Add an operation name to ``fail_on`` to make that call raise the same
    internal error the S3 gateway raises.
    """

    def __init__(self):
        self.buckets: dict[str, dict[str, bytes]] = {}
        self.calls: list[tuple] = []
        self.fail_on: set[str] = set()

    def _record(self, operation: str, *args) -> None:
        self.calls.append((operation, *args))
        if operation in self.fail_on:
            raise ServiceError(
                ErrorType.INTERNAL_SERVER_ERROR, "Simulated object store failure: %s", operation
            )

    def calls_named(self, operation: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == operation]

    def keys(self, bucket: str) -> set[str]:
        return set(self.buckets.get(bucket, {}))

    def ensure_bucket(self, bucket: str) -> None:
        self._record("ensure_bucket", bucket)
        self.buckets.setdefault(bucket, {})

    def put_object(self, bucket: str, key: str, data: bytes, content_type: str | None = None):
        self._record("put_object", bucket, key)
        self.buckets.setdefault(bucket, {})[key] = data

    def get_object_stream(self, bucket: str, key: str):
        self._record("get_object_stream", bucket, key)
        return io.BytesIO(self.buckets[bucket][key])

    def delete_object(self, bucket: str, key: str) -> None:
        self._record("delete_object", bucket, key)
        self.buckets.get(bucket, {}).pop(key, None)

    def create_folder(self, bucket: str, folder: str) -> None:
        self._record("create_folder", bucket, folder)
        self.buckets.setdefault(bucket, {})[f"{folder}/"] = b""

    def delete_objects(self, bucket: str, keys: list[str]) -> None:
        self._record("delete_objects", bucket, tuple(keys))
        for key in keys:
            self.buckets.get(bucket, {}).pop(key, None)

    def delete_folder(self, bucket: str, folder: str) -> None:
        self._record("delete_folder", bucket, folder)
        self.buckets.get(bucket, {}).pop(f"{folder}/", None)


# Use TEST_DATABASE_URL (an existing PostgreSQL database) when set, SQLite otherwise
SQLALCHEMY_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///./test.db")

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    from cloudspace import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def storage():
    """In-memory object store shared by the client and the services under test."""
    return InMemoryStorage()


@pytest.fixture(scope="function")
def client(db, storage):
    """Create a test client with database and object store overrides."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """Return a helper that registers a user and returns their auth headers."""

    def _register(username: str | None = None, password: str = "testpass123") -> AuthHeaders:
        username = username or f"user-{uuid.uuid4().hex[:8]}"
        response = client.post(
            "/api/v1/auth/register",
            json={"username": username, "password": password},
        )
        assert response.status_code == 201
        data = response.json()
        return AuthHeaders(
            {"Authorization": f"Bearer {data['access_token']}"},
            user_id=data["user"]["id"],
            username=username,
        )

    return _register


@pytest.fixture
def auth_headers(register):
    """Create a user and return auth headers with user info."""
    return register("testuser")


@pytest.fixture
def other_headers(register):
    """Create a second, unrelated user."""
    return register("otheruser")
