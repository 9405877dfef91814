"""
Chainable in-memory collection used for report series.

Each query returns a new collection; the wrapped list is never mutated.
"""

from typing import TypeVar, Generic, Callable, List, Dict, Optional, Any, Iterable

T = TypeVar('T')


class QueryableCollection(Generic[T]):
    """
    Ordered collection with predicate filtering and grouping.

    Subclasses get their own type back from filter(), so domain queries
    can be chained.

    Examples:
        low = reports.filter(lambda r: r.ceiling_ft is not None and r.ceiling_ft < 1000)
        by_station = reports.group_by(lambda r: r.station)
    """

    def __init__(self, items: Iterable[T]):
        self._items: List[T] = list(items)

    def filter(self, predicate: Callable[[T], bool]) -> 'QueryableCollection[T]':
        """Keep the items for which predicate returns True, in order."""
        return self.__class__([item for item in self._items if predicate(item)])

    def first(self) -> Optional[T]:
        return self._items[0] if self._items else None

    def last(self) -> Optional[T]:
        return self._items[-1] if self._items else None

    def all(self) -> List[T]:
        """Copy of the items as a plain list."""
        return list(self._items)

    def count(self) -> int:
        return len(self._items)

    def group_by(self, key_func: Callable[[T], Any]) -> Dict[Any, List[T]]:
        """Group items by key; groups and their members keep collection order."""
        result: Dict[Any, List[T]] = {}
        for item in self._items:
            result.setdefault(key_func(item), []).append(item)
        return result

    def __iter__(self):
        return iter(self._items)

    def __len__(self):
        return len(self._items)

    def __getitem__(self, index: int) -> T:
        return self._items[index]

    def __bool__(self):
        return bool(self._items)

    def __repr__(self):
        name = self.__class__.__name__
        if not self._items:
            return f"{name}([])"
        shown = [repr(getattr(item, 'station', None)) for item in self._items[:3]]
        if len(self._items) > 3:
            shown.append('...')
        return f"{name}([{', '.join(shown)}], count={len(self._items)})"
