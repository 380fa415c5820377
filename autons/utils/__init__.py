"""Utility types and helpers for the autons application."""
from collections.abc import MutableSet
from typing import Dict, Generic, Hashable, Iterable, Iterator, Optional, TypeVar

T = TypeVar('T', bound=Hashable)

class OrderedSet(MutableSet, Generic[T]):
    """A set that remembers insertion order.

    Backed by a dict, so membership and insertion are O(1) and iteration
    follows the order in which items were first added.

    Args:
        items: Optional initial items; duplicates are dropped
    """

    def __init__(self, items: Optional[Iterable[T]] = None):
        self._items: Dict[T, None] = {}
        if items is not None:
            self.update(items)

    def __contains__(self, item) -> bool:
        return item in self._items

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._items)!r})"

    def add(self, item: T) -> None:
        self._items[item] = None

    def discard(self, item: T) -> None:
        self._items.pop(item, None)

    def update(self, items: Iterable[T]) -> None:
        """Add every item from ``items`` in order."""
        for item in items:
            self.add(item)

    def first(self) -> T:
        """Return the earliest inserted item.

        Raises:
            KeyError: If the set is empty
        """
        for item in self._items:
            return item
        raise KeyError("first(): set is empty")
