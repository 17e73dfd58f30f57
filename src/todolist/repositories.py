from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from threading import RLock
from typing import List, Optional

from .models import Todo
from .settings import Settings, StoreKind, get_settings

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class TodoService(ABC):
    """
    Abstract contract for todo storage backends.

    Every operation either returns its result or raises StoreUnavailableError
    when the backend itself failed. A missing todo is never an error: lookups
    return None and delete is a no-op.
    """

    backend: str = "abstract"

    @abstractmethod
    def init_data(self) -> None:
        """Make sure the backing store is reachable and its structures exist."""

    @abstractmethod
    def get_one(self, todo_id: int) -> Optional[Todo]:
        """Return the Todo stored under todo_id, or None if there is none."""

    @abstractmethod
    def get_all(self) -> List[Todo]:
        """Return every stored Todo. Order is backend specific."""

    @abstractmethod
    def insert(self, todo: Todo) -> None:
        """Store todo under its id, replacing any previous entry."""

    @abstractmethod
    def update(self, todo_id: int, patch: Todo) -> Optional[Todo]:
        """
        Merge patch into the stored Todo and persist the result.

        Returns the merged Todo, or None (without writing) if todo_id is unknown.
        The read and the write are separate steps; concurrent writers may
        interleave between them.
        """

    @abstractmethod
    def delete(self, todo_id: int) -> bool:
        """Delete a Todo by id. Return True if something was removed; a missing id is not an error."""

    @abstractmethod
    def delete_all(self) -> None:
        """Remove every Todo."""

    def close(self) -> None:
        """Release client resources. Optional for backends holding none."""


class InMemoryTodoStore(TodoService):
    """
    Thread-safe in-memory hash store suitable for testing and default runtime.
    """

    backend = StoreKind.MEMORY.value

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: dict[int, Todo] = {}

    def init_data(self) -> None:
        logger.debug("In-memory store ready")

    def get_one(self, todo_id: int) -> Optional[Todo]:
        with self._lock:
            return self._items.get(todo_id)

    def get_all(self) -> List[Todo]:
        with self._lock:
            return list(self._items.values())

    def insert(self, todo: Todo) -> None:
        with self._lock:
            self._items[todo.id] = todo

    def update(self, todo_id: int, patch: Todo) -> Optional[Todo]:
        with self._lock:
            existing = self.get_one(todo_id)
            if existing is None:
                return None
            merged = existing.merge(patch)
            self.insert(merged)
            return merged

    def delete(self, todo_id: int) -> bool:
        with self._lock:
            return self._items.pop(todo_id, None) is not None

    def delete_all(self) -> None:
        with self._lock:
            self._items.clear()


# PUBLIC_INTERFACE
def get_store(settings: Optional[Settings] = None) -> TodoService:
    """
    Factory to return the configured store based on settings.
    - memory: InMemoryTodoStore
    - redis: RedisTodoStore (a single Redis hash)
    - sqlite: SQLiteTodoStore (sqlite3 standard library)
    """
    settings = settings or get_settings()
    kind = settings.persistence_backend
    logger.info("Persistence backend: %s", kind.value)
    if kind is StoreKind.SQLITE:
        from .db import SQLiteTodoStore

        return SQLiteTodoStore(settings.sqlite_db_path)
    if kind is StoreKind.REDIS:
        from .redis_store import RedisTodoStore

        return RedisTodoStore.from_settings(settings)
    return InMemoryTodoStore()
