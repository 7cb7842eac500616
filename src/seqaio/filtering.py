"""Filtering operators."""

from abc import abstractmethod
from typing import Any, Callable, Optional, Tuple, Type, TypeVar, Union

from .errors import ArgumentError
from .iterator import AsyncIteratorBase, UserFunction, release_all
from .sequence import AsyncSequence, Enumerator, Source
from .sources import as_sequence

__all__ = ('WhereIterator', 'OfTypeIterator', 'where', 'of_type')

T = TypeVar('T')
U = TypeVar('U')

Types = Union[Type, Tuple[Type, ...]]


class _FilterIterator(AsyncIteratorBase[T]):

    def __init__(self, source: AsyncSequence[Any]) -> None:
        super().__init__()
        self._source = source
        self._enumerator: Optional[Enumerator[Any]] = None

    async def _acquire(self) -> None:
        self._enumerator = self._open(self._source)

    async def _move_next(self) -> bool:
        while await self._pull(self._enumerator):
            item = self._enumerator.current
            if await self._matches(item):
                self._current = item
                return True
        return False

    @abstractmethod
    async def _matches(self, item: Any) -> bool:
        pass

    async def _release_resources(self) -> None:
        enumerator, self._enumerator = self._enumerator, None
        await release_all(enumerator)


class WhereIterator(_FilterIterator[T]):
    """Enumerator of `where`.

    :param source:
    :param predicate:
    """

    def __init__(
        self,
        source: AsyncSequence[T],
        predicate: UserFunction,
    ) -> None:
        super().__init__(source)
        self._predicate = predicate

    def clone_fresh(self) -> 'WhereIterator[T]':
        return WhereIterator(self._source, self._predicate)

    async def _matches(self, item: Any) -> bool:
        index = self._next_index() if self._predicate.with_index else None
        return bool(await self._invoke(self._predicate, item, index=index))


class OfTypeIterator(_FilterIterator[U]):
    """Enumerator of `of_type`.

    :param source:
    :param cls: Type or tuple of types, as accepted by `isinstance`.
    """

    def __init__(self, source: AsyncSequence[Any], cls: Types) -> None:
        super().__init__(source)
        self._cls = cls

    def clone_fresh(self) -> 'OfTypeIterator[U]':
        return OfTypeIterator(self._source, self._cls)

    async def _matches(self, item: Any) -> bool:
        return isinstance(item, self._cls)


def where(
    source: Source[T],
    predicate: Callable[..., Any],
    *, with_index: bool = False,
) -> AsyncSequence[T]:
    """Produce elements satisfying *predicate*.

    :param source:
    :param predicate: Called as ``predicate(item)``, or
        ``predicate(item, index)`` with *with_index*. May be a coroutine
        function.
    :param with_index:
    """
    return WhereIterator(
        as_sequence(source),
        UserFunction(predicate, 'predicate', with_index=with_index),
    )


def of_type(source: Source[Any], cls: Types) -> AsyncSequence[Any]:
    """Produce only elements which are instances of *cls*.

    Other elements are skipped silently. Note that `bool` is a subclass of
    `int`, so ``of_type(seq, int)`` keeps booleans too.

    :param source:
    :param cls: Type or tuple of types.
    """
    classes = cls if isinstance(cls, tuple) else (cls,)
    if not classes or not all(isinstance(c, type) for c in classes):
        raise ArgumentError('cls', f'Expected a type, got {cls!r:.50s}')
    return OfTypeIterator(as_sequence(source), cls)
