"""Projecting each element into a new form."""

from typing import Any, Callable, Optional, TypeVar

from .cancellation import CancellationToken
from .iterator import AsyncIteratorBase, UserFunction, release_all
from .sequence import AsyncSequence, Enumerator, Source
from .sources import as_sequence

__all__ = ('SelectIterator', 'select')

T = TypeVar('T')
U = TypeVar('U')


class SelectIterator(AsyncIteratorBase[U]):
    """Enumerator of `select`.

    :param source:
    :param selector:
    """

    def __init__(
        self,
        source: AsyncSequence[T],
        selector: UserFunction,
    ) -> None:
        super().__init__()
        self._source = source
        self._selector = selector
        self._enumerator: Optional[Enumerator[T]] = None

    def clone_fresh(self) -> 'SelectIterator[U]':
        return SelectIterator(self._source, self._selector)

    async def _acquire(self) -> None:
        self._enumerator = self._open(self._source)

    async def _move_next(self) -> bool:
        if not await self._pull(self._enumerator):
            return False
        index = self._next_index() if self._selector.with_index else None
        self._current = await self._invoke(
            self._selector, self._enumerator.current, index=index,
        )
        return True

    async def _release_resources(self) -> None:
        enumerator, self._enumerator = self._enumerator, None
        await release_all(enumerator)

    async def count(
        self,
        only_if_cheap: bool = False,
        cancellation: CancellationToken = None,
    ) -> int:
        # selector is not called, same as counting the source
        return await self._source.count(only_if_cheap, cancellation)


def select(
    source: Source[T],
    selector: Callable[..., Any],
    *, with_index: bool = False,
) -> AsyncSequence[Any]:
    """Project each element with *selector*.

    :param source:
    :param selector: Called as ``selector(item)``, or
        ``selector(item, index)`` with *with_index*. May be a coroutine
        function.
    :param with_index:
    """
    return SelectIterator(
        as_sequence(source),
        UserFunction(selector, 'selector', with_index=with_index),
    )
