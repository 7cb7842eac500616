"""Set operations over two sequences."""

from abc import abstractmethod
from typing import Optional, TypeVar

from .comparer import ComparerSet, EqualityComparer
from .iterator import AsyncIteratorBase, release_all
from .sequence import AsyncSequence, Enumerator, Source
from .sources import as_sequence

__all__ = ('SetIterator', 'IntersectIterator', 'ExceptIterator',
           'intersect', 'except_')

T = TypeVar('T')


class SetIterator(AsyncIteratorBase[T]):
    """Base enumerator for set operations.

    The whole *second* sequence is drained into a `.ComparerSet` before
    a single element of *first* is pulled. Subclasses decide in `_accept`
    which elements of *first* get produced.

    :param first:
    :param second:
    :param comparer:
    """

    def __init__(
        self,
        first: AsyncSequence[T],
        second: AsyncSequence[T],
        comparer: EqualityComparer[T] = None,
    ) -> None:
        super().__init__()
        self._first = first
        self._second = second
        self._comparer = comparer
        self._enumerator: Optional[Enumerator[T]] = None
        self._set: Optional[ComparerSet[T]] = None

    def clone_fresh(self) -> 'SetIterator[T]':
        return type(self)(self._first, self._second, self._comparer)

    async def _acquire(self) -> None:
        self._set = ComparerSet(self._comparer)
        async with self._open(self._second) as e:
            while await self._pull(e):
                self._set.add(e.current)
        self._enumerator = self._open(self._first)

    async def _move_next(self) -> bool:
        while await self._pull(self._enumerator):
            item = self._enumerator.current
            if self._accept(item):
                self._current = item
                return True
        return False

    @abstractmethod
    def _accept(self, item: T) -> bool:
        pass

    async def _release_resources(self) -> None:
        enumerator, self._enumerator = self._enumerator, None
        self._set = None
        await release_all(enumerator)


class IntersectIterator(SetIterator[T]):
    """Enumerator of `intersect`."""

    def _accept(self, item: T) -> bool:
        return self._set.remove(item)


class ExceptIterator(SetIterator[T]):
    """Enumerator of `except_`."""

    def _accept(self, item: T) -> bool:
        return self._set.add(item)


def intersect(
    first: Source[T],
    second: Source[T],
    comparer: EqualityComparer[T] = None,
) -> AsyncSequence[T]:
    """Produce distinct elements of *first* which also occur in *second*.

    Example::

        intersect(['a', 'a', 'b', 'c'], ['a', 'b', 'b'])  # 'a', 'b'

    *second* is enumerated to the end before anything is pulled from
    *first*. Order follows *first*; later duplicates are suppressed.

    :param first:
    :param second:
    :param comparer: Defaults to natural equality.
    """
    return IntersectIterator(
        as_sequence(first, 'first'),
        as_sequence(second, 'second'),
        comparer,
    )


def except_(
    first: Source[T],
    second: Source[T],
    comparer: EqualityComparer[T] = None,
) -> AsyncSequence[T]:
    """Produce distinct elements of *first* which don't occur in *second*.

    Example::

        except_([1, 2, 2, 3, 4], [4, 1])  # 2, 3

    *second* is enumerated to the end before anything is pulled from
    *first*.

    :param first:
    :param second:
    :param comparer: Defaults to natural equality.
    """
    return ExceptIterator(
        as_sequence(first, 'first'),
        as_sequence(second, 'second'),
        comparer,
    )
