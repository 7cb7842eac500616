"""State machine every operator enumerator is built on."""

import logging
from abc import abstractmethod
from enum import Enum
from typing import Any, AsyncIterator, Callable, Optional, TypeVar, cast

from ._util import check_callable, full_name, resolve
from .cancellation import CancellationToken
from .errors import MAX_INDEX, IndexOverflowError
from .sequence import AsyncSequence, Enumerator

__all__ = ('LifecycleState', 'UserFunction', 'AsyncIteratorBase')

logger = logging.getLogger(__name__)

T = TypeVar('T')
U = TypeVar('U')


class LifecycleState(Enum):
    """Lifecycle of an `AsyncIteratorBase`."""

    FRESH = 'fresh'
    """Nothing acquired yet."""

    ACTIVE = 'active'
    """Upstream enumerators acquired, operator stage is valid."""

    RELEASED = 'released'
    """Everything released, `~AsyncIteratorBase.advance` returns `False`."""


class UserFunction:
    """User supplied projection, predicate or accumulator.

    Operators always call it with the element index and the cancellation
    token; which of them actually reach the wrapped function depends on
    *with_index* and *with_cancellation*. The index is appended to
    positional arguments, the token is passed as ``cancellation`` keyword.
    If the function returns an awaitable, it is awaited.

    :param func:
    :param param: Parameter name to report if *func* is invalid.
    :param with_index:
    :param with_cancellation:
    """

    def __init__(
        self,
        func: Callable[..., Any],
        param: str,
        *, with_index: bool = False,
        with_cancellation: bool = False,
    ) -> None:
        self.func = check_callable(func, param)
        self.with_index = with_index
        self.with_cancellation = with_cancellation

    async def __call__(
        self,
        *args: Any,
        index: int = None,
        cancellation: CancellationToken = None,
    ) -> Any:
        if self.with_index:
            args += (index,)
        if self.with_cancellation:
            return await resolve(self.func(*args, cancellation=cancellation))
        return await resolve(self.func(*args))

    def __repr__(self) -> str:
        return f'<UserFunction {self.func!r}>'


async def release_all(*enumerators: Optional[Enumerator[Any]]) -> None:
    """Release every given enumerator, even if releasing one of them fails.

    `None` entries are skipped. The first error is re-raised once all
    enumerators have been released.
    """
    error: Optional[BaseException] = None
    for enumerator in enumerators:
        if enumerator is None:
            continue
        try:
            await enumerator.release()
        except BaseException as e:
            logger.debug('Failed to release %r', enumerator, exc_info=True)
            if error is None:
                error = e
    if error is not None:
        raise error


class AsyncIteratorBase(AsyncSequence[T], Enumerator[T]):
    r"""Base class for operator enumerators.

    An instance serves as both the sequence and its enumerator: the
    instance created by an operator is a prototype, and `enumerate` returns
    a `clone_fresh` copy of it. The prototype itself stays in
    `LifecycleState.FRESH`, so the sequence can be enumerated any number of
    times, sequentially or interleaved.

    Subclasses implement:

    * `clone_fresh` -- new instance with the same parameters,
    * `_acquire` -- one-time setup on the first `advance` (open upstream
      enumerators, allocate accumulators),
    * `_move_next` -- one unit of work; set ``self._current`` and return
      `True` to produce an element, return `False` when nothing remains,
    * `_release_resources` -- release whatever `_acquire` and `_move_next`
      left open. May be called in any state, including halfway through
      `_acquire`.

    Any exception raised from `advance` (including `asyncio.CancelledError`
    and `.OperationCancelledError`) is propagated only after `release` has
    been called.
    """

    max_index = MAX_INDEX
    """Largest element index `_next_index` will hand out."""

    def __init__(self) -> None:
        self._state = LifecycleState.FRESH
        self._current: Optional[T] = None
        self._cancellation = CancellationToken()
        self._is_enumeration = False
        self._index = -1

    @property
    def state(self) -> LifecycleState:
        """Current lifecycle state."""
        return self._state

    @property
    def current(self) -> T:
        return cast(T, self._current)

    @property
    def cancellation(self) -> CancellationToken:
        """Token observed by this enumeration."""
        return self._cancellation

    @abstractmethod
    def clone_fresh(self) -> 'AsyncIteratorBase[T]':
        """Return a new `LifecycleState.FRESH` instance with the same
        parameters and upstream sequences.
        """

    def enumerate(
        self,
        cancellation: CancellationToken = None,
    ) -> 'AsyncIteratorBase[T]':
        enumerator = self.clone_fresh()
        enumerator._is_enumeration = True
        if cancellation is not None:
            enumerator._cancellation = cancellation
        return enumerator

    def __aiter__(self) -> AsyncIterator[T]:
        if self._is_enumeration:
            return self
        return super().__aiter__()

    async def advance(self) -> bool:
        if self._state is LifecycleState.RELEASED:
            return False
        try:
            self._cancellation.raise_if_cancelled()
            if self._state is LifecycleState.FRESH:
                logger.debug('Acquiring %r', self)
                await self._acquire()
                self._state = LifecycleState.ACTIVE
            if await self._move_next():
                return True
        except BaseException:
            logger.debug('Error while advancing %r', self, exc_info=True)
            try:
                await self.release()
            except BaseException:
                # the advancing error takes precedence
                logger.debug('Failed to release %r', self, exc_info=True)
            raise
        await self.release()
        return False

    async def release(self) -> None:
        if self._state is LifecycleState.RELEASED:
            return
        logger.debug('Releasing %r', self)
        self._state = LifecycleState.RELEASED
        self._current = None
        await self._release_resources()

    async def _acquire(self) -> None:
        pass

    @abstractmethod
    async def _move_next(self) -> bool:
        pass

    async def _release_resources(self) -> None:
        pass

    def _open(self, source: AsyncSequence[U]) -> Enumerator[U]:
        """Enumerate an upstream sequence with this enumeration's token."""
        return source.enumerate(self._cancellation)

    async def _pull(self, enumerator: Enumerator[Any]) -> bool:
        """Advance an upstream enumerator, checking for cancellation."""
        self._cancellation.raise_if_cancelled()
        has_next = await enumerator.advance()
        self._cancellation.raise_if_cancelled()
        return has_next

    async def _invoke(
        self,
        func: UserFunction,
        *args: Any,
        index: int = None,
    ) -> Any:
        """Call a user function, checking for cancellation."""
        result = await func(
            *args, index=index, cancellation=self._cancellation,
        )
        self._cancellation.raise_if_cancelled()
        return result

    def _next_index(self) -> int:
        """Increment and return the element index.

        :raises IndexOverflowError: If the index would exceed `max_index`.
        """
        if self._index >= self.max_index:
            raise IndexOverflowError(self.max_index)
        self._index += 1
        return self._index

    def __repr__(self) -> str:
        return f'<{full_name(type(self))} {self._state.value}>'
