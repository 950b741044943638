"""In-memory caches owned by a single repository.

Each account session holds one cache per entity. Only the owning repository
writes to it; anything else may subscribe to change events.
"""

import logging
from typing import Callable, Generic, List, NamedTuple, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CacheEvent(NamedTuple):
    """Change notification published after every cache mutation."""
    entity: str
    kind: str
    record_id: Optional[str] = None


Listener = Callable[[CacheEvent], None]


class _Observable:
    def __init__(self, entity: str):
        self.entity = entity
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, kind: str, record_id: Optional[str] = None) -> None:
        event = CacheEvent(self.entity, kind, record_id)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(f"Cache listener failed for {event}")


class ListCache(_Observable, Generic[T]):
    """Ordered list of records keyed by ``id``."""

    def __init__(self, entity: str, key: Callable[[T], str] = lambda r: r.id):
        super().__init__(entity)
        self._key = key
        self._items: List[T] = []
        self.loaded = False

    @property
    def items(self) -> List[T]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def get(self, record_id: str) -> Optional[T]:
        for item in self._items:
            if self._key(item) == record_id:
                return item
        return None

    def replace_all(self, items: List[T]) -> None:
        self._items = list(items)
        self.loaded = True
        self._notify("loaded")

    def prepend(self, item: T) -> None:
        self._items.insert(0, item)
        self._notify("created", self._key(item))

    def replace(self, item: T) -> None:
        record_id = self._key(item)
        self._items = [item if self._key(i) == record_id else i for i in self._items]
        self._notify("updated", record_id)

    def discard(self, record_id: str) -> None:
        self._items = [i for i in self._items if self._key(i) != record_id]
        self._notify("removed", record_id)

    def clear(self) -> None:
        self._items = []
        self.loaded = False
        self._notify("cleared")


class RecordCache(_Observable, Generic[T]):
    """Single record per account (settings, profile)."""

    def __init__(self, entity: str):
        super().__init__(entity)
        self._value: Optional[T] = None

    @property
    def value(self) -> Optional[T]:
        return self._value

    @property
    def loaded(self) -> bool:
        return self._value is not None

    def set(self, value: T, kind: str = "updated") -> None:
        self._value = value
        self._notify(kind)

    def clear(self) -> None:
        self._value = None
        self._notify("cleared")
