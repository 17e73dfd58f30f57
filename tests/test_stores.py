from unittest.mock import MagicMock

import fakeredis
import pytest
import redis

from todolist.db import SQLiteTodoStore
from todolist.errors import StoreUnavailableError
from todolist.models import Todo
from todolist.redis_store import RedisTodoStore
from todolist.repositories import InMemoryTodoStore, get_store
from todolist.settings import Settings, StoreKind

MILK = Todo(id=1, title="buy milk", completed=False, order=1, url="http://localhost/todos/1")


class TestContract:
    def test_insert_then_get_one_returns_equal(self, store):
        store.insert(MILK)
        assert store.get_one(1) == MILK

    def test_unset_fields_survive_storage(self, store):
        bare = Todo(id=9)
        store.insert(bare)
        assert store.get_one(9) == bare

    def test_get_one_absent(self, store):
        assert store.get_one(404) is None

    def test_insert_overwrites(self, store):
        store.insert(MILK)
        replacement = Todo(id=1, title="buy bread", completed=True, order=2)
        store.insert(replacement)
        assert store.get_one(1) == replacement
        assert len(store.get_all()) == 1

    def test_get_all(self, store):
        todos = [Todo(id=i, title=f"task {i}") for i in range(1, 5)]
        for t in todos:
            store.insert(t)
        assert sorted(store.get_all(), key=lambda t: t.id) == todos

    def test_update_merges_and_persists(self, store):
        store.insert(MILK)
        merged = store.update(1, Todo(completed=True))
        assert merged == Todo(id=1, title="buy milk", completed=True, order=1, url=MILK.url)
        assert store.get_one(1) == merged

    def test_update_ignores_patch_id_and_order(self, store):
        store.insert(MILK)
        merged = store.update(1, Todo(id=5, title="renamed", order=99))
        assert merged.id == 1
        assert merged.order == 1
        assert store.get_one(5) is None

    def test_update_absent_returns_none_without_writing(self, store):
        assert store.update(77, Todo(title="ghost")) is None
        assert store.get_one(77) is None
        assert store.get_all() == []

    def test_delete(self, store):
        store.insert(MILK)
        assert store.delete(1) is True
        assert store.get_one(1) is None

    def test_delete_missing_is_noop(self, store):
        assert store.delete(12345) is False

    def test_delete_all_then_get_all_is_empty(self, store):
        for i in range(1, 4):
            store.insert(Todo(id=i))
        store.delete_all()
        assert store.get_all() == []

    def test_init_data_is_repeatable(self, store):
        store.insert(MILK)
        store.init_data()
        assert store.get_one(1) == MILK


class TestRedisStore:
    def test_values_are_json_in_one_hash(self):
        client = fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)
        store = RedisTodoStore(client, key="todos")
        store.insert(MILK)
        assert client.hkeys("todos") == ["1"]
        assert '"title": "buy milk"' in client.hget("todos", "1")

    def test_connection_error_becomes_store_unavailable(self):
        client = MagicMock()
        client.hget.side_effect = redis.ConnectionError("Connection refused")
        store = RedisTodoStore(client)
        with pytest.raises(StoreUnavailableError) as excinfo:
            store.get_one(1)
        assert isinstance(excinfo.value.__cause__, redis.ConnectionError)
        assert excinfo.value.operation == "get_one"

    def test_unreachable_on_init(self):
        client = MagicMock()
        client.ping.side_effect = redis.ConnectionError("Connection refused")
        with pytest.raises(StoreUnavailableError):
            RedisTodoStore(client).init_data()

    def test_update_does_not_write_when_read_fails(self):
        client = MagicMock()
        client.hget.side_effect = redis.TimeoutError("timed out")
        with pytest.raises(StoreUnavailableError):
            RedisTodoStore(client).update(1, Todo(title="x"))
        client.hset.assert_not_called()

    def test_undecodable_value(self):
        client = fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)
        client.hset("todos", "1", "not json")
        with pytest.raises(StoreUnavailableError):
            RedisTodoStore(client, key="todos").get_one(1)

    def test_json_that_is_not_an_object(self):
        client = fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)
        client.hset("todos", "1", "[1, 2]")
        store = RedisTodoStore(client, key="todos")
        with pytest.raises(StoreUnavailableError):
            store.get_one(1)
        with pytest.raises(StoreUnavailableError):
            store.get_all()


class TestSQLiteStore:
    def test_missing_table_becomes_store_unavailable(self, tmp_path):
        store = SQLiteTodoStore(str(tmp_path / "todos.db"))
        with pytest.raises(StoreUnavailableError) as excinfo:
            store.get_all()
        assert excinfo.value.backend == "sqlite"

    def test_init_creates_directory(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "todos.db"
        SQLiteTodoStore(str(path)).init_data()
        assert path.exists()

    def test_data_survives_new_store_instance(self, tmp_path):
        path = str(tmp_path / "todos.db")
        first = SQLiteTodoStore(path)
        first.init_data()
        first.insert(MILK)
        second = SQLiteTodoStore(path)
        second.init_data()
        assert second.get_one(1) == MILK


class TestGetStore:
    def test_memory_is_default(self):
        assert isinstance(get_store(Settings()), InMemoryTodoStore)

    def test_sqlite(self, tmp_path):
        settings = Settings(persistence_backend=StoreKind.SQLITE, sqlite_db_path=str(tmp_path / "t.db"))
        assert isinstance(get_store(settings), SQLiteTodoStore)

    def test_redis(self):
        store = get_store(Settings(persistence_backend=StoreKind.REDIS, redis_todo_key="custom"))
        assert isinstance(store, RedisTodoStore)
        assert store.key == "custom"
        store.close()
