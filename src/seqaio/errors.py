"""Exceptions raised by sequences and their operators."""

from typing import Any

__all__ = (
    'MAX_INDEX',
    'SequenceError',
    'ArgumentError',
    'ArgumentNoneError',
    'IndexOverflowError',
    'OperationCancelledError',
)

MAX_INDEX = 2 ** 31 - 1
"""Largest value an operator's element index may take."""


class SequenceError(Exception):
    """Base sequence error."""

    pass


class ArgumentError(SequenceError, ValueError):
    """Operator was applied with an invalid argument.

    :param param: Name of the offending parameter.
    :param msg:
    """

    def __init__(self, param: str, msg: str = 'Invalid argument') -> None:
        super().__init__(param, msg)
        self.param = param
        self.msg = msg

    def __str__(self) -> str:
        return f'{self.msg}: {self.param}'


class ArgumentNoneError(ArgumentError):
    """Required argument was `None`.

    :param param: Name of the offending parameter.
    """

    def __init__(self, param: str) -> None:
        super().__init__(param, 'Argument must not be None')


class IndexOverflowError(SequenceError, OverflowError):
    """Element index grew past `MAX_INDEX`.

    :param limit:
    """

    def __init__(self, limit: int = MAX_INDEX) -> None:
        super().__init__(limit)
        self.limit = limit

    def __str__(self) -> str:
        return f'Index exceeded {self.limit}'


class OperationCancelledError(SequenceError):
    """Enumeration observed a cancelled `.CancellationToken`.

    :param token: The token which was cancelled.
    """

    def __init__(self, token: Any = None) -> None:
        super().__init__('Operation was cancelled')
        self.token = token
