"""Running fold producing every intermediate accumulator value."""

from typing import Any, Callable, Optional, TypeVar

from ._util import NO_SEED
from .iterator import AsyncIteratorBase, UserFunction, release_all
from .sequence import AsyncSequence, Enumerator, Source
from .sources import as_sequence

__all__ = ('NO_SEED', 'ScanIterator', 'scan')

T = TypeVar('T')
A = TypeVar('A')


class ScanIterator(AsyncIteratorBase[A]):
    """Enumerator of `scan`.

    :param source:
    :param accumulator:
    :param seed: Initial accumulator value, or `NO_SEED`.
    """

    def __init__(
        self,
        source: AsyncSequence[T],
        accumulator: UserFunction,
        seed: Any = NO_SEED,
    ) -> None:
        super().__init__()
        self._source = source
        self._accumulator = accumulator
        self._seed = seed
        self._enumerator: Optional[Enumerator[T]] = None
        self._accumulated: Any = NO_SEED

    def clone_fresh(self) -> 'ScanIterator[A]':
        return ScanIterator(self._source, self._accumulator, self._seed)

    async def _acquire(self) -> None:
        self._enumerator = self._open(self._source)
        self._accumulated = self._seed

    async def _move_next(self) -> bool:
        if self._accumulated is NO_SEED:
            # the first element only starts the fold
            if not await self._pull(self._enumerator):
                return False
            self._accumulated = self._enumerator.current

        if not await self._pull(self._enumerator):
            return False
        self._accumulated = await self._invoke(
            self._accumulator,
            self._accumulated,
            self._enumerator.current,
        )
        self._current = self._accumulated
        return True

    async def _release_resources(self) -> None:
        enumerator, self._enumerator = self._enumerator, None
        self._accumulated = NO_SEED
        await release_all(enumerator)


def scan(
    source: Source[T],
    accumulator: Callable[..., Any],
    seed: Any = NO_SEED,
    *, with_cancellation: bool = False,
) -> AsyncSequence[Any]:
    """Fold the sequence, producing the accumulator after every step.

    Example::

        scan([1, 2, 3, 4], operator.add)      # 3, 6, 10
        scan([1, 2, 3, 4], operator.add, 0)   # 1, 3, 6, 10

    Without a seed, the first element becomes the initial accumulator and is
    not produced itself, so a single-element sequence produces nothing. This
    differs from a plain reduce, which would return that element.

    :param source:
    :param accumulator: Called as ``accumulator(accumulated, item)``, may be
        a coroutine function.
    :param seed: Initial accumulator value. With a seed, every element
        (including the first) is folded and produced.
    :param with_cancellation: Pass the enumeration's `.CancellationToken`
        to *accumulator* as ``cancellation`` keyword argument.
    """
    return ScanIterator(
        as_sequence(source),
        UserFunction(
            accumulator, 'accumulator',
            with_cancellation=with_cancellation,
        ),
        seed,
    )
