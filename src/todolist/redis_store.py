from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

import redis

from .errors import StoreUnavailableError
from .models import Todo
from .repositories import TodoService
from .settings import Settings, StoreKind

logger = logging.getLogger(__name__)


class RedisTodoStore(TodoService):
    """
    Key-value store keeping every todo in one Redis hash.

    The hash field is the todo id as text, the value the JSON encoded todo.
    All operations are a single command except update, which reads and then
    writes the field (two round trips, not atomic).
    """

    backend = StoreKind.REDIS.value

    def __init__(self, client: redis.Redis, key: str = "todos") -> None:
        self.redis_client = client
        self.key = key

    @classmethod
    def from_settings(cls, settings: Settings) -> "RedisTodoStore":
        client = redis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            password=settings.redis_password,
            encoding="utf-8",
            decode_responses=True,
        )
        return cls(client, key=settings.redis_todo_key)

    @contextmanager
    def _command(self, operation: str) -> Iterator[None]:
        try:
            yield
        except redis.RedisError as e:
            raise StoreUnavailableError(self.backend, operation, str(e)) from e

    def _decode(self, raw, operation: str) -> Todo:
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise StoreUnavailableError(self.backend, operation, f"undecodable value {raw!r}") from e
        if not isinstance(data, dict):
            raise StoreUnavailableError(self.backend, operation, f"stored value is not an object: {raw!r}")
        return Todo.from_dict(data)

    def init_data(self) -> None:
        with self._command("init_data"):
            self.redis_client.ping()
        logger.info("Redis reachable, todos kept in hash '%s'", self.key)

    def get_one(self, todo_id: int) -> Optional[Todo]:
        with self._command("get_one"):
            raw = self.redis_client.hget(self.key, str(todo_id))
        return None if raw is None else self._decode(raw, "get_one")

    def get_all(self) -> List[Todo]:
        with self._command("get_all"):
            values = self.redis_client.hvals(self.key)
        return [self._decode(raw, "get_all") for raw in values]

    def insert(self, todo: Todo) -> None:
        encoded = json.dumps(todo.to_dict())
        with self._command("insert"):
            self.redis_client.hset(self.key, str(todo.id), encoded)

    def update(self, todo_id: int, patch: Todo) -> Optional[Todo]:
        existing = self.get_one(todo_id)
        if existing is None:
            return None
        merged = existing.merge(patch)
        self.insert(merged)
        return merged

    def delete(self, todo_id: int) -> bool:
        with self._command("delete"):
            return self.redis_client.hdel(self.key, str(todo_id)) > 0

    def delete_all(self) -> None:
        with self._command("delete_all"):
            self.redis_client.delete(self.key)

    def close(self) -> None:
        self.redis_client.close()
