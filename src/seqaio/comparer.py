"""Equality comparers and the membership set built on them."""

from typing import Any, Callable, Dict, Generic, Iterator, TypeVar

from ._util import check_callable

__all__ = (
    'EqualityComparer',
    'KeyComparer',
    'DEFAULT_COMPARER',
    'ComparerSet',
)

T = TypeVar('T')
K = TypeVar('K')


class EqualityComparer(Generic[T]):
    """Natural equality, using ``==`` and `hash`.

    Subclass it and override both methods to compare differently. Items
    which are equal must have equal hashes.
    """

    def equals(self, a: T, b: T) -> bool:
        return bool(a == b)

    def hash(self, item: T) -> int:
        return hash(item)


class KeyComparer(EqualityComparer[T], Generic[T, K]):
    """Compare items by a key derived from them.

    Example::

        KeyComparer(str.lower)

    :param key: Function returning a hashable key for an item.
    """

    def __init__(self, key: Callable[[T], K]) -> None:
        self._key = check_callable(key, 'key')

    def equals(self, a: T, b: T) -> bool:
        return bool(self._key(a) == self._key(b))

    def hash(self, item: T) -> int:
        return hash(self._key(item))


DEFAULT_COMPARER: EqualityComparer[Any] = EqualityComparer()


class _Entry(Generic[T]):

    __slots__ = ('item', 'comparer', '_hash')

    def __init__(self, item: T, comparer: EqualityComparer[T]) -> None:
        self.item = item
        self.comparer = comparer
        self._hash = comparer.hash(item)

    def __hash__(self) -> int:
        return self._hash

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, _Entry) and \
            self.comparer.equals(self.item, other.item)


class ComparerSet(Generic[T]):
    """Set whose membership is decided by an `EqualityComparer`.

    Insertion order is preserved when iterating.

    :param comparer: Defaults to `DEFAULT_COMPARER`.
    """

    def __init__(self, comparer: EqualityComparer[T] = None) -> None:
        self._comparer = comparer or DEFAULT_COMPARER
        self._entries: Dict[_Entry[T], T] = {}

    def add(self, item: T) -> bool:
        """Add *item*, return `False` if an equal item was already present.

        :param item:
        """
        entry = _Entry(item, self._comparer)
        if entry in self._entries:
            return False
        self._entries[entry] = item
        return True

    def remove(self, item: T) -> bool:
        """Remove an item equal to *item*, return `False` if there was none.

        :param item:
        """
        entry = _Entry(item, self._comparer)
        try:
            del self._entries[entry]
        except KeyError:
            return False
        return True

    def __contains__(self, item: Any) -> bool:
        return _Entry(item, self._comparer) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[T]:
        return iter(self._entries.values())
