import os

import fakeredis
import pytest
from fastapi.testclient import TestClient

# Ensure we default to memory backend for tests to avoid external services
os.environ.setdefault("PERSISTENCE_BACKEND", "memory")

from todolist.db import SQLiteTodoStore  # noqa: E402
from todolist.main import create_app  # noqa: E402
from todolist.redis_store import RedisTodoStore  # noqa: E402
from todolist.repositories import InMemoryTodoStore  # noqa: E402
from todolist.settings import Settings  # noqa: E402


def make_memory_store(tmp_path):
    return InMemoryTodoStore()


def make_sqlite_store(tmp_path):
    return SQLiteTodoStore(str(tmp_path / "data" / "todos.db"))


def make_redis_store(tmp_path):
    client = fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)
    return RedisTodoStore(client, key="todos-test")


STORE_FACTORIES = {
    "memory": make_memory_store,
    "sqlite": make_sqlite_store,
    "redis": make_redis_store,
}


@pytest.fixture(params=sorted(STORE_FACTORIES))
def store(request, tmp_path):
    """An initialized store, once per backend."""
    s = STORE_FACTORIES[request.param](tmp_path)
    s.init_data()
    yield s
    s.close()


@pytest.fixture
def client(store):
    """A TestClient whose app serves from the parametrized store."""
    app = create_app(Settings(), store=store)
    with TestClient(app) as c:
        yield c
