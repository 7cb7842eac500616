"""Sequence and enumerator contracts."""

from abc import ABC, abstractmethod
from typing import Any, AsyncIterable, AsyncIterator, Callable, Generic, \
    Iterable, List, Optional, Tuple, Type, TypeVar, Union

from aiostream import stream
from aiostream.core import Stream

from ._util import NO_SEED
from .cancellation import CancellationToken
from .comparer import EqualityComparer

__all__ = ('Enumerator', 'AsyncSequence', 'Source')

T = TypeVar('T')
U = TypeVar('U')

Source = Union['AsyncSequence[T]', Iterable[T], AsyncIterable[T]]
"""Anything operators accept as an upstream sequence."""


class Enumerator(ABC, Generic[T]):
    """Single forward cursor over one enumeration of a sequence.

    Call `advance` until it returns `False`, read `current` after each
    `True`, and call `release` once done. `release` is also called when
    the enumerator is used as an async context manager::

        async with seq.enumerate() as e:
            while await e.advance():
                print(e.current)

    Enumerators are async iterators as well. Only one `advance` call may be
    in flight at a time.
    """

    @abstractmethod
    async def advance(self) -> bool:
        """Move to the next element.

        :return: `True` if an element was produced, `False` once
            the enumeration is exhausted (or released).
        """

    @property
    @abstractmethod
    def current(self) -> T:
        """Element produced by the last successful `advance`.

        Undefined before the first `advance` and after `release`.
        """

    @abstractmethod
    async def release(self) -> None:
        """Release all held resources. Safe to call more than once."""

    def __aiter__(self) -> 'Enumerator[T]':
        return self

    async def __anext__(self) -> T:
        if await self.advance():
            return self.current
        raise StopAsyncIteration

    async def __aenter__(self) -> 'Enumerator[T]':
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.release()


class AsyncSequence(AsyncIterable[T]):
    """Restartable, lazily evaluated asynchronous sequence.

    A sequence only describes how to produce elements. Each `enumerate`
    call returns a new, independent `Enumerator`. Iterating with ``async
    for`` opens an enumeration and releases it when the loop ends::

        async for item in from_iterable([1, 2, 3]).select(str):
            print(item)
    """

    @abstractmethod
    def enumerate(
        self,
        cancellation: CancellationToken = None,
    ) -> Enumerator[T]:
        """Start a new enumeration.

        :param cancellation: Token observed at every suspension point.
        """

    async def __aiter__(self) -> AsyncIterator[T]:
        async with self.enumerate() as e:
            while await e.advance():
                yield e.current

    def stream(self) -> 'Stream[T]':
        """Return an `aiostream` stream over this sequence."""
        return stream.iterate(self)

    async def to_list(self, cancellation: CancellationToken = None) -> List[T]:
        """Enumerate everything into a list.

        :param cancellation:
        """
        result = []
        async with self.enumerate(cancellation) as e:
            while await e.advance():
                result.append(e.current)
        return result

    async def count(
        self,
        only_if_cheap: bool = False,
        cancellation: CancellationToken = None,
    ) -> int:
        """Count elements.

        :param only_if_cheap: Return ``-1`` instead of enumerating if the
            count isn't known upfront.
        :param cancellation:
        """
        if only_if_cheap:
            return -1
        count = 0
        async with self.enumerate(cancellation) as e:
            while await e.advance():
                count += 1
        return count

    # Operators

    def select(
        self,
        selector: Callable[..., Any],
        *, with_index: bool = False,
    ) -> 'AsyncSequence[Any]':
        """See `.projection.select`."""
        from .projection import select
        return select(self, selector, with_index=with_index)

    def where(
        self,
        predicate: Callable[..., Any],
        *, with_index: bool = False,
    ) -> 'AsyncSequence[T]':
        """See `.filtering.where`."""
        from .filtering import where
        return where(self, predicate, with_index=with_index)

    def of_type(
        self,
        cls: Union[Type[U], Tuple[Type, ...]],
    ) -> 'AsyncSequence[U]':
        """See `.filtering.of_type`."""
        from .filtering import of_type
        return of_type(self, cls)

    def select_many(
        self,
        selector: Callable[..., Any],
        result_selector: Optional[Callable[..., Any]] = None,
        *, with_index: bool = False,
        with_cancellation: bool = False,
    ) -> 'AsyncSequence[Any]':
        """See `.select_many.select_many`."""
        from .select_many import select_many
        return select_many(
            self, selector, result_selector,
            with_index=with_index, with_cancellation=with_cancellation,
        )

    def scan(
        self,
        accumulator: Callable[..., Any],
        seed: Any = NO_SEED,
        *, with_cancellation: bool = False,
    ) -> 'AsyncSequence[Any]':
        """See `.scan.scan`."""
        from .scan import scan
        return scan(
            self, accumulator, seed,
            with_cancellation=with_cancellation,
        )

    def intersect(
        self,
        other: 'Source[T]',
        comparer: EqualityComparer[T] = None,
    ) -> 'AsyncSequence[T]':
        """See `.sets.intersect`."""
        from .sets import intersect
        return intersect(self, other, comparer)

    def except_(
        self,
        other: 'Source[T]',
        comparer: EqualityComparer[T] = None,
    ) -> 'AsyncSequence[T]':
        """See `.sets.except_`."""
        from .sets import except_
        return except_(self, other, comparer)

    def skip_last(self, count: int) -> 'AsyncSequence[T]':
        """See `.partitioning.skip_last`."""
        from .partitioning import skip_last
        return skip_last(self, count)
