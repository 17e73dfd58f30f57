from __future__ import annotations

import logging
from threading import Lock
from typing import Optional

from .errors import StoreUnavailableError
from .ids import IdGenerator
from .models import Todo
from .repositories import TodoService, get_store
from .settings import Settings

logger = logging.getLogger(__name__)

SAMPLE_TODO = Todo(title="Something to do...", completed=False, order=1, url="todo/ex")


# PUBLIC_INTERFACE
class TodoRuntime:
    """
    Owns the pieces that live as long as the service: the settings, the
    selected store and the id generator handed to request handlers.
    """

    def __init__(
        self,
        settings: Settings,
        store: Optional[TodoService] = None,
        ids: Optional[IdGenerator] = None,
    ) -> None:
        self.settings = settings
        self.store = store if store is not None else get_store(settings)
        self.ids = ids if ids is not None else IdGenerator()
        self._ready = False
        self._ready_lock = Lock()

    def startup(self) -> bool:
        """
        Prepare the store for traffic. Returns False when the backend could
        not be reached; the service keeps running and answers 503 until it is.
        """
        try:
            self.ensure_ready()
        except StoreUnavailableError:
            logger.exception("Persistence service is not running!")
            return False
        return True

    def ensure_ready(self) -> None:
        """
        Initialize the store and recover the id high-water mark, once.

        Retried on every call until the backend answers, so ids handed out
        after a late backend start never reuse stored ones. Raises
        StoreUnavailableError while the backend is down.
        """
        if self._ready:
            return
        with self._ready_lock:
            if self._ready:
                return
            self.store.init_data()
            self._recover_ids()
            if self.settings.seed_sample_todo:
                self._seed()
            self._ready = True

    def shutdown(self) -> None:
        self.store.close()

    def wrap(self, todo: Todo, collection_url: str) -> Todo:
        """Resolve the id of a new todo and point its url at the item resource."""
        self.ensure_ready()
        resolved = self.ids.resolve(todo)
        return resolved.with_url(f"{collection_url.rstrip('/')}/{resolved.id}")

    def _recover_ids(self) -> None:
        existing = self.store.get_all()
        if existing:
            highest = max(t.id for t in existing)
            self.ids.observe(highest)
            logger.info("Recovered %d todos, next id after %d", len(existing), highest)

    def _seed(self) -> None:
        if self.store.get_all():
            return
        sample = SAMPLE_TODO.with_id(self.ids.next_id())
        self.store.insert(sample)
        logger.info("Seeded sample todo %d", sample.id)
