from typing import Callable, Dict, Generic, Hashable, Iterable, Iterator, List, Optional, TypeVar

T = TypeVar("T")

class KeyedSet(Generic[T]):
    """Set whose membership is decided by an explicit key function.

    Items with equal keys are the same member; the most recently added
    item is the one kept.
    """

    def __init__(self, key: Callable[[T], Hashable], items: Optional[Iterable[T]] = None):
        self._key = key
        self._items: Dict[Hashable, T] = {}
        for item in items or []:
            self.add(item)

    def add(self, item: T) -> None:
        self._items[self._key(item)] = item

    def discard(self, item: T) -> None:
        self._items.pop(self._key(item), None)

    def toggle(self, item: T) -> bool:
        """Flip membership of item; return True if it is now a member."""
        if item in self:
            self.discard(item)
            return False
        self.add(item)
        return True

    def to_list(self) -> List[T]:
        return list(self._items.values())

    def __contains__(self, item: object) -> bool:
        try:
            return self._key(item) in self._items  # type: ignore[arg-type]
        except AttributeError:
            return False

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items.values()))

    def __len__(self) -> int:
        return len(self._items)
