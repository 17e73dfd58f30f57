from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Mapping, Optional

_FIELDS = ("id", "title", "completed", "order", "url")


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class Todo:
    """
    A Todo item as persisted by every storage backend.

    Fields:
    - id: Unique integer identifier; 0 means "not assigned yet"
    - title: Optional short title
    - completed: Optional completion flag (reads as False when unset)
    - order: Optional sort hint
    - url: Optional self locator, filled in by the HTTP layer
    """

    id: int = 0
    title: Optional[str] = None
    completed: Optional[bool] = None
    order: Optional[int] = None
    url: Optional[str] = None

    @property
    def is_completed(self) -> bool:
        return bool(self.completed)

    def with_id(self, todo_id: int) -> "Todo":
        return replace(self, id=todo_id)

    def with_url(self, url: Optional[str]) -> "Todo":
        return replace(self, url=url)

    def merge(self, patch: "Todo") -> "Todo":
        """
        Combine this (stored) Todo with a partial patch.

        Only title and completed are taken from the patch, and only when set.
        id, order and url always come from the stored record.
        """
        return Todo(
            id=self.id,
            title=patch.title if patch.title is not None else self.title,
            completed=patch.completed if patch.completed is not None else self.completed,
            order=self.order,
            url=self.url,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Todo":
        """Build a Todo from a flat mapping, ignoring unknown keys."""
        values = {k: data[k] for k in _FIELDS if k in data}
        if values.get("id") is None:
            values["id"] = 0
        if values.get("completed") is not None:
            values["completed"] = bool(values["completed"])
        return cls(**values)
