"""Cooperative cancellation of enumerations."""

import logging

from .errors import OperationCancelledError

__all__ = ('CancellationToken',)

logger = logging.getLogger(__name__)


class CancellationToken:
    """Cooperative cancellation signal.

    A token is passed to `.AsyncSequence.enumerate` and is checked by the
    enumerator (and every upstream enumerator it opens) at each suspension
    point. Once it's observed cancelled, the enumerator releases everything
    it holds and `.OperationCancelledError` is raised from ``advance()``.

    Cancelling the `asyncio` task which awaits ``advance()`` works too and
    goes through the same release path.

    Example::

        token = CancellationToken()
        async with seq.enumerate(token) as e:
            while await e.advance():
                if e.current > 10:
                    token.cancel()
    """

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        """`True` once `cancel` has been called."""
        return self._cancelled

    def cancel(self) -> None:
        """Request cancellation. Calling it again has no effect."""
        if not self._cancelled:
            logger.debug('Cancellation requested on %r', self)
        self._cancelled = True

    def raise_if_cancelled(self) -> None:
        """Raise `.OperationCancelledError` if cancellation was requested."""
        if self._cancelled:
            raise OperationCancelledError(self)

    def __repr__(self) -> str:
        state = 'cancelled' if self._cancelled else 'active'
        return f'<CancellationToken {state}>'
