"""Skipping elements at the end of a sequence."""

from collections import deque
from typing import Deque, Optional, TypeVar

from ._util import check_not_none
from .errors import ArgumentError
from .iterator import AsyncIteratorBase, release_all
from .sequence import AsyncSequence, Enumerator, Source
from .sources import as_sequence

__all__ = ('SkipLastIterator', 'skip_last')

T = TypeVar('T')


class SkipLastIterator(AsyncIteratorBase[T]):
    """Enumerator of `skip_last`.

    Elements are held back in a FIFO buffer until more than *count* of them
    are waiting. With *count* of zero no buffer is allocated and elements
    pass straight through.

    :param source:
    :param count:
    """

    def __init__(self, source: AsyncSequence[T], count: int) -> None:
        super().__init__()
        self._source = source
        self._count = max(count, 0)
        self._enumerator: Optional[Enumerator[T]] = None
        self._queue: Optional[Deque[T]] = None

    def clone_fresh(self) -> 'SkipLastIterator[T]':
        return SkipLastIterator(self._source, self._count)

    async def _acquire(self) -> None:
        self._enumerator = self._open(self._source)
        if self._count > 0:
            self._queue = deque()

    async def _move_next(self) -> bool:
        while await self._pull(self._enumerator):
            item = self._enumerator.current
            if self._queue is None:
                self._current = item
                return True
            self._queue.append(item)
            if len(self._queue) > self._count:
                self._current = self._queue.popleft()
                return True
        return False

    async def _release_resources(self) -> None:
        enumerator, self._enumerator = self._enumerator, None
        self._queue = None
        await release_all(enumerator)


def skip_last(source: Source[T], count: int) -> AsyncSequence[T]:
    """Produce all but the last *count* elements.

    Example::

        skip_last([1, 2, 3, 4, 5], 2)  # 1, 2, 3

    Elements are produced with a delay of *count* elements, since it's not
    known upfront which of them are last. A sequence shorter than *count*
    produces nothing.

    :param source:
    :param count: Non-positive count skips nothing, and a sequence built
        by this library is then returned as is.
    """
    source = as_sequence(source)
    check_not_none(count, 'count')
    if not isinstance(count, int) or isinstance(count, bool):
        raise ArgumentError('count', f'Expected an int, got {count!r:.50s}')
    if count <= 0 and isinstance(source, AsyncIteratorBase):
        return source
    return SkipLastIterator(source, count)
