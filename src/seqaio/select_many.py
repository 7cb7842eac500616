"""Projecting each element to a sequence and flattening the results."""

from enum import Enum
from typing import Any, AsyncIterator, Callable, List, Optional, Tuple, \
    TypeVar

from aiostream import stream

from .cancellation import CancellationToken
from .errors import IndexOverflowError
from .iterator import AsyncIteratorBase, UserFunction, release_all
from .sequence import AsyncSequence, Enumerator, Source
from .sources import as_sequence

__all__ = ('Stage', 'SelectManyIterator', 'select_many')

T = TypeVar('T')
V = TypeVar('V')


class Stage(Enum):
    """Which upstream `SelectManyIterator` is currently pulling from."""

    DRAWING_FROM_OUTER = 'outer'
    DRAINING_INNER = 'inner'


class SelectManyIterator(AsyncIteratorBase[V]):
    """Enumerator of `select_many`.

    Holds at most one outer and one inner enumerator. An exhausted inner
    enumerator is released before the next outer element is pulled.

    :param source: Outer sequence.
    :param selector: Projects an outer element to an inner sequence.
    :param result_selector: Combines the outer element with each inner
        element, or `None` to produce inner elements as they are.
    """

    def __init__(
        self,
        source: AsyncSequence[T],
        selector: UserFunction,
        result_selector: Optional[UserFunction] = None,
    ) -> None:
        super().__init__()
        self._source = source
        self._selector = selector
        self._result_selector = result_selector
        self._stage: Optional[Stage] = None
        self._outer: Optional[Enumerator[T]] = None
        self._inner: Optional[Enumerator[Any]] = None
        self._outer_item: Any = None

    @property
    def stage(self) -> Optional[Stage]:
        """Current stage, `None` unless active."""
        return self._stage

    def clone_fresh(self) -> 'SelectManyIterator[V]':
        return SelectManyIterator(
            self._source, self._selector, self._result_selector,
        )

    async def _acquire(self) -> None:
        self._outer = self._open(self._source)
        self._stage = Stage.DRAWING_FROM_OUTER

    async def _move_next(self) -> bool:
        while True:
            if self._stage is Stage.DRAWING_FROM_OUTER:
                if not await self._pull(self._outer):
                    return False
                item = self._outer.current
                inner = await self._project(item)
                self._outer_item = item
                self._inner = self._open(inner)
                self._stage = Stage.DRAINING_INNER

            if await self._pull(self._inner):
                if self._result_selector is None:
                    self._current = self._inner.current
                else:
                    self._current = await self._invoke(
                        self._result_selector,
                        self._outer_item,
                        self._inner.current,
                    )
                return True

            inner, self._inner = self._inner, None
            self._outer_item = None
            self._stage = Stage.DRAWING_FROM_OUTER
            await inner.release()

    async def _project(self, item: T) -> AsyncSequence[Any]:
        index = self._next_index() if self._selector.with_index else None
        inner = await self._invoke(self._selector, item, index=index)
        return as_sequence(inner, 'selector')

    async def _release_resources(self) -> None:
        inner, self._inner = self._inner, None
        outer, self._outer = self._outer, None
        self._outer_item = None
        self._stage = None
        await release_all(inner, outer)

    async def _inner_sequences(
        self,
        cancellation: CancellationToken,
    ) -> AsyncIterator[Tuple[Any, AsyncSequence[Any]]]:
        """Yield each outer element with its projected inner sequence."""
        index = -1
        async with self._source.enumerate(cancellation) as outer:
            while await outer.advance():
                item = outer.current
                if self._selector.with_index:
                    if index >= self.max_index:
                        raise IndexOverflowError(self.max_index)
                    index += 1
                inner = await self._selector(
                    item, index=index, cancellation=cancellation,
                )
                cancellation.raise_if_cancelled()
                yield item, as_sequence(inner, 'selector')

    async def to_list(
        self,
        cancellation: CancellationToken = None,
    ) -> List[V]:
        cancellation = cancellation or CancellationToken()
        result: List[Any] = []
        async with stream.iterate(
            self._inner_sequences(cancellation),
        ).stream() as s:
            async for item, inner in s:
                inner_items = await inner.to_list(cancellation)
                if self._result_selector is None:
                    result.extend(inner_items)
                    continue
                for inner_item in inner_items:
                    result.append(await self._result_selector(
                        item, inner_item, cancellation=cancellation,
                    ))
                    cancellation.raise_if_cancelled()
        return result

    async def count(
        self,
        only_if_cheap: bool = False,
        cancellation: CancellationToken = None,
    ) -> int:
        if only_if_cheap:
            return -1
        cancellation = cancellation or CancellationToken()
        count = 0
        async with stream.iterate(
            self._inner_sequences(cancellation),
        ).stream() as s:
            async for _, inner in s:
                count += await inner.count(cancellation=cancellation)
        return count


def select_many(
    source: Source[T],
    selector: Callable[..., Any],
    result_selector: Callable[..., Any] = None,
    *, with_index: bool = False,
    with_cancellation: bool = False,
) -> AsyncSequence[Any]:
    """Project each element to a sequence and flatten the results.

    Example::

        select_many([1, 2], lambda i: [i, i * 10])  # 1, 10, 2, 20

    Inner sequences are enumerated one at a time, in the order of outer
    elements, so output order is outer-then-inner.

    Both *selector* and *result_selector* may be coroutine functions (or
    return any awaitable). The selector may return an `.AsyncSequence`,
    an async iterable or a plain iterable.

    :param source: Outer sequence.
    :param selector: Called as ``selector(item)``, or
        ``selector(item, index)`` with *with_index*.
    :param result_selector: If given, called as
        ``result_selector(item, inner_item)`` and its result is produced
        instead of ``inner_item``.
    :param with_index: Pass zero-based index of the outer element to
        *selector*. `.IndexOverflowError` is raised if it would exceed
        `.MAX_INDEX`.
    :param with_cancellation: Pass the enumeration's `.CancellationToken`
        to both selectors as ``cancellation`` keyword argument.
    """
    return SelectManyIterator(
        as_sequence(source),
        UserFunction(
            selector, 'selector',
            with_index=with_index, with_cancellation=with_cancellation,
        ),
        None if result_selector is None else UserFunction(
            result_selector, 'result_selector',
            with_cancellation=with_cancellation,
        ),
    )
