from __future__ import annotations

from threading import Lock

from .models import Todo


# PUBLIC_INTERFACE
class IdGenerator:
    """
    Thread-safe id counter shared by everything that creates todos.

    Two policies apply:
    - auto-increment: a todo without an id (or id 0) gets the next value
    - high-water-mark: a caller supplied id above the counter moves the
      counter up to it, so later generated ids never collide with it
    """

    def __init__(self, start: int = 0) -> None:
        self._lock = Lock()
        self._value = start

    @property
    def current(self) -> int:
        with self._lock:
            return self._value

    def next_id(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    def observe(self, todo_id: int) -> None:
        """Advance the counter to todo_id if it is ahead. Never moves backwards."""
        with self._lock:
            if todo_id > self._value:
                self._value = todo_id

    def resolve(self, todo: Todo) -> Todo:
        """Return todo with a definitive id, assigning or recording as needed."""
        with self._lock:
            if todo.id > self._value:
                self._value = todo.id
                return todo
            if todo.id == 0:
                self._value += 1
                return todo.with_id(self._value)
            return todo
