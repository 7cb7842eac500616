"""Sequences created from plain and asynchronous iterables."""

from contextlib import AsyncExitStack
from typing import Any, AsyncIterable, Iterable, List, Optional, Sequence, \
    TypeVar, Union, cast

from aiostream import stream
from aiostream.core import Streamer

from ._util import check_iterable, check_not_none
from .cancellation import CancellationToken
from .errors import ArgumentError
from .iterator import AsyncIteratorBase
from .sequence import AsyncSequence, Source

__all__ = (
    'IterableSequence',
    'as_sequence',
    'from_iterable',
    'from_range',
    'empty',
)

T = TypeVar('T')


class IterableSequence(AsyncIteratorBase[T]):
    """Sequence over an iterable or an async iterable.

    Items are pulled through an `aiostream` streamer, which is closed on
    release. Whether enumerating twice yields the same items depends on
    the wrapped iterable: a list does, a generator doesn't.

    :param source:
    """

    def __init__(self, source: Union[Iterable[T], AsyncIterable[T]]) -> None:
        super().__init__()
        self._source = source
        self._exit_stack: Optional[AsyncExitStack] = None
        self._streamer: Optional[Streamer[T]] = None

    def clone_fresh(self) -> 'IterableSequence[T]':
        return IterableSequence(self._source)

    async def _acquire(self) -> None:
        self._exit_stack = AsyncExitStack()
        self._streamer = await self._exit_stack.enter_async_context(
            stream.iterate(self._source).stream(),
        )

    async def _move_next(self) -> bool:
        try:
            self._current = await self._streamer.__anext__()
        except StopAsyncIteration:
            return False
        self._cancellation.raise_if_cancelled()
        return True

    async def _release_resources(self) -> None:
        exit_stack, self._exit_stack = self._exit_stack, None
        self._streamer = None
        if exit_stack is not None:
            await exit_stack.aclose()

    async def to_list(self, cancellation: CancellationToken = None) -> List[T]:
        if isinstance(self._source, Sequence):
            if cancellation is not None:
                cancellation.raise_if_cancelled()
            return list(self._source)
        return await super().to_list(cancellation)

    async def count(
        self,
        only_if_cheap: bool = False,
        cancellation: CancellationToken = None,
    ) -> int:
        if isinstance(self._source, Sequence):
            if cancellation is not None:
                cancellation.raise_if_cancelled()
            return len(self._source)
        return await super().count(only_if_cheap, cancellation)


def as_sequence(source: Source[T], param: str = 'source') -> AsyncSequence[T]:
    """Return *source* if it's already an `.AsyncSequence`, wrap it otherwise.

    :param source:
    :param param: Parameter name to report if *source* is invalid.
    :raises ArgumentNoneError: If *source* is `None`.
    :raises ArgumentError: If *source* is not iterable.
    """
    if isinstance(source, AsyncSequence):
        return source
    return IterableSequence(check_iterable(source, param))


def from_iterable(source: Union[Iterable[T], AsyncIterable[T]]) -> \
        AsyncSequence[T]:
    """Create a sequence from an iterable or an async iterable.

    :param source:
    """
    return as_sequence(source)


def from_range(start: int, count: int) -> AsyncSequence[int]:
    """Create a sequence of *count* consecutive integers.

    :param start: First integer.
    :param count: Number of integers, must not be negative.
    """
    check_not_none(count, 'count')
    if count < 0:
        raise ArgumentError('count', 'Count must not be negative')
    return IterableSequence(range(start, start + count))


def empty() -> AsyncSequence[Any]:
    """Create a sequence with no elements."""
    return IterableSequence(cast(Sequence[Any], ()))
