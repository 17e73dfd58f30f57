from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Generator, List, Optional

from .errors import StoreUnavailableError
from .models import Todo
from .repositories import TodoService
from .settings import StoreKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Cols:
    table: str = "todo"
    id: str = "id"
    title: str = "title"
    completed: str = "completed"
    order: str = '"order"'
    url: str = "url"


_COLS = _Cols()

_SQL_CREATE = f"""
    CREATE TABLE IF NOT EXISTS {_COLS.table} (
        {_COLS.id} INTEGER PRIMARY KEY,
        {_COLS.title} TEXT NULL,
        {_COLS.completed} INTEGER NULL,
        {_COLS.order} INTEGER NULL,
        {_COLS.url} TEXT NULL
    )
"""
_SQL_INSERT = (
    f"INSERT OR REPLACE INTO {_COLS.table} "
    f"({_COLS.id}, {_COLS.title}, {_COLS.completed}, {_COLS.order}, {_COLS.url}) "
    "VALUES (?, ?, ?, ?, ?)"
)
_SQL_QUERY = f"SELECT * FROM {_COLS.table} WHERE {_COLS.id} = ?"
_SQL_QUERY_ALL = f"SELECT * FROM {_COLS.table}"
_SQL_UPDATE = f"""
    UPDATE {_COLS.table}
    SET {_COLS.title} = ?, {_COLS.completed} = ?, {_COLS.order} = ?, {_COLS.url} = ?
    WHERE {_COLS.id} = ?
"""
_SQL_DELETE = f"DELETE FROM {_COLS.table} WHERE {_COLS.id} = ?"
_SQL_DELETE_ALL = f"DELETE FROM {_COLS.table}"


def _flag(value: Optional[bool]) -> Optional[int]:
    if value is None:
        return None
    return 1 if value else 0


class SQLiteTodoStore(TodoService):
    """
    SQLite store implementing the TodoService contract.

    Each operation opens its own connection and closes it on the way out,
    whatever the outcome. No explicit transactions span operations.
    """

    backend = StoreKind.SQLITE.value

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    @contextmanager
    def _conn(self, operation: str) -> Generator[sqlite3.Connection, None, None]:
        try:
            conn = sqlite3.connect(self._db_path)
        except sqlite3.Error as e:
            raise StoreUnavailableError(self.backend, operation, str(e)) from e
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            raise StoreUnavailableError(self.backend, operation, str(e)) from e
        finally:
            conn.close()

    def _row_to_todo(self, row: sqlite3.Row) -> Todo:
        completed = row["completed"]
        return Todo(
            id=int(row["id"]),
            title=row["title"],
            completed=None if completed is None else bool(completed),
            order=row["order"],
            url=row["url"],
        )

    def init_data(self) -> None:
        try:
            os.makedirs(os.path.dirname(self._db_path) or ".", exist_ok=True)
        except OSError as e:
            raise StoreUnavailableError(self.backend, "init_data", str(e)) from e
        with self._conn("init_data") as conn:
            conn.execute(_SQL_CREATE)
        logger.info("SQLite table '%s' ready at %s", _COLS.table, self._db_path)

    def get_one(self, todo_id: int) -> Optional[Todo]:
        with self._conn("get_one") as conn:
            row = conn.execute(_SQL_QUERY, (todo_id,)).fetchone()
            return self._row_to_todo(row) if row else None

    def get_all(self) -> List[Todo]:
        with self._conn("get_all") as conn:
            rows = conn.execute(_SQL_QUERY_ALL).fetchall()
            return [self._row_to_todo(r) for r in rows]

    def insert(self, todo: Todo) -> None:
        with self._conn("insert") as conn:
            conn.execute(
                _SQL_INSERT,
                (todo.id, todo.title, _flag(todo.completed), todo.order, todo.url),
            )

    def update(self, todo_id: int, patch: Todo) -> Optional[Todo]:
        with self._conn("update") as conn:
            row = conn.execute(_SQL_QUERY, (todo_id,)).fetchone()
            if not row:
                return None
            merged = self._row_to_todo(row).merge(patch)
            cur = conn.execute(
                _SQL_UPDATE,
                (merged.title, _flag(merged.completed), merged.order, merged.url, todo_id),
            )
            if cur.rowcount == 0:
                # deleted between the read and the write
                logger.debug("Todo %s vanished during update", todo_id)
                return None
            return merged

    def delete(self, todo_id: int) -> bool:
        with self._conn("delete") as conn:
            cur = conn.execute(_SQL_DELETE, (todo_id,))
            return cur.rowcount > 0

    def delete_all(self) -> None:
        with self._conn("delete_all") as conn:
            conn.execute(_SQL_DELETE_ALL)
