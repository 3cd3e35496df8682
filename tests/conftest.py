from typing import Any, Dict, List

import mongomock
import pytest
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from todo_api.main import create_app
from todo_api.repositories import TodoRepository
from todo_api.routers.todos import get_repository
from todo_api.settings import Settings


def make_settings(**overrides: Any) -> Settings:
    values: Dict[str, Any] = {
        "mongo_uri": "mongodb://localhost:27017/",
        "mongo_db": "todo_test",
        "mongo_collection": "todo",
        "mongo_timeout_ms": 1000,
        "host": "127.0.0.1",
        "port": 0,
        "shutdown_timeout": 1,
        "idle_timeout": 5,
        "log_level": "DEBUG",
        "cors_allow_origins": ["*"],
    }
    values.update(overrides)
    return Settings(**values)


class RecordingCollection:
    """
    Collection double that records every call and either answers with an
    empty result or fails like an unreachable server.
    """

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: List[str] = []

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if self.fail:
            raise ServerSelectionTimeoutError("localhost:27017: connection refused")

    def find(self, *args, **kwargs):
        self._record("find")
        return iter([])

    def insert_one(self, *args, **kwargs):
        self._record("insert_one")
        raise AssertionError("insert_one is only reachable with fail=True")

    def update_one(self, *args, **kwargs):
        self._record("update_one")
        raise AssertionError("update_one is only reachable with fail=True")

    def delete_one(self, *args, **kwargs):
        self._record("delete_one")
        raise AssertionError("delete_one is only reachable with fail=True")


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def mongo_client() -> mongomock.MongoClient:
    return mongomock.MongoClient()


@pytest.fixture
def client_factory(mongo_client):
    def factory(*args, **kwargs):
        return mongo_client

    return factory


@pytest.fixture
def client(settings, client_factory):
    """TestClient running the full lifespan against an in-memory store."""
    with TestClient(create_app(settings, client_factory=client_factory)) as test_client:
        yield test_client


@pytest.fixture
def recording_collection() -> RecordingCollection:
    return RecordingCollection()


@pytest.fixture
def recording_client(settings, recording_collection):
    """TestClient whose repository talks to a RecordingCollection; lifespan is not run."""
    app = create_app(settings)
    app.dependency_overrides[get_repository] = lambda: TodoRepository(recording_collection)
    return TestClient(app)
