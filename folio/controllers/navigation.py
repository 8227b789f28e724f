"""Detail-view (lightbox / reader) selection and wrap-around navigation."""

import logging
from contextlib import contextmanager
from enum import Enum
from typing import Any, Generic, Iterator, Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Direction(str, Enum):
    NEXT = "next"
    PREV = "prev"


class ScrollLock:
    """Page-wide scroll suspension held while a detail view is open.

    The lock is held while any holder has it. ``acquire`` and ``release``
    are idempotent per holder, so every exit path of a detail view may
    release without tracking whether it already did, and one view closing
    never unlocks the page under another view that is still open.
    """

    def __init__(self) -> None:
        self._holders: set[Any] = set()

    @property
    def held(self) -> bool:
        return bool(self._holders)

    def acquire(self, holder: Any = None) -> None:
        self._holders.add(self if holder is None else holder)

    def release(self, holder: Any = None) -> None:
        self._holders.discard(self if holder is None else holder)

    def __enter__(self) -> "ScrollLock":
        self.acquire()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.release()


class DetailNavigator(Generic[T]):
    """Tracks the item open in a detail view over a changing collection.

    Items are matched by their ``id`` attribute. The selected item's index
    is recomputed on every move because the collection may have been
    refetched since the item was opened.
    """

    def __init__(self, items: Sequence[T] = (), lock: Optional[ScrollLock] = None):
        self.items: list[T] = list(items)
        self.lock = lock if lock is not None else ScrollLock()
        self.selected: Optional[T] = None

    @property
    def is_open(self) -> bool:
        return self.selected is not None

    @property
    def scroll_locked(self) -> bool:
        return self.lock.held

    def update(self, items: Sequence[T]) -> None:
        """Swap in a freshly fetched collection; the selection is kept."""
        self.items = list(items)

    def open(self, item: T) -> T:
        """Show *item* in the detail view and suspend page scrolling."""
        self.selected = item
        self.lock.acquire(self)
        return item

    def close(self) -> None:
        """Hide the detail view and resume page scrolling."""
        self.selected = None
        self.lock.release(self)

    def index_of(self, item: T) -> int:
        """Index of *item* by id in the current items, or -1."""
        item_id = getattr(item, "id", None)
        for i, candidate in enumerate(self.items):
            if getattr(candidate, "id", None) == item_id:
                return i
        return -1

    def navigate(self, direction: "Direction | str") -> Optional[T]:
        """Move the selection to the adjacent item, wrapping around the ends.

        Returns the newly selected item, or None when nothing is selected.
        A selection that is no longer in the collection sits outside the
        ring: ``next`` lands on the first item and ``prev`` on the last.
        An empty collection closes the detail view.
        """
        if self.selected is None:
            return None
        direction = Direction(direction)
        n = len(self.items)
        if n == 0:
            self.close()
            return None

        index = self.index_of(self.selected)
        if index == -1:
            new_index = 0 if direction is Direction.NEXT else n - 1
            logger.debug("Selection left the collection; restarting at %d", new_index)
        elif direction is Direction.NEXT:
            new_index = (index + 1) % n
        else:
            new_index = (index - 1 + n) % n

        self.selected = self.items[new_index]
        return self.selected

    def find(self, item_id: Any) -> Optional[T]:
        """Item with the given id in the current items, or None."""
        return next((i for i in self.items if getattr(i, "id", None) == item_id), None)

    @contextmanager
    def viewing(self, item: T) -> Iterator["DetailNavigator[T]"]:
        """Open *item* for the duration of the block.

        The detail view is closed and the scroll lock released on every exit
        path, including an exception raised inside the block.
        """
        self.open(item)
        try:
            yield self
        finally:
            self.close()
