from inspect import isawaitable
from typing import Any, AsyncIterable, Iterable, Type, TypeVar, cast

from .errors import ArgumentError, ArgumentNoneError

__all__ = (
    'full_name',
    'check_not_none',
    'check_callable',
    'check_iterable',
    'resolve',
    'NO_SEED',
)

T = TypeVar('T')


def full_name(cls: Type, attr: str = None) -> str:
    """Get full name of a class or its attribute.

    :param cls:
    :param attr:
    """
    s = f'{cls.__module__}.{cls.__qualname__}'
    if attr:
        s += f'.{attr}'
    return s


def check_not_none(value: T, param: str) -> T:
    """Raise `.ArgumentNoneError` if *value* is `None`.

    :param value:
    :param param: Parameter name to report.
    """
    if value is None:
        raise ArgumentNoneError(param)
    return value


def check_callable(value: T, param: str) -> T:
    """Raise if *value* is `None` or can't be called.

    :param value:
    :param param: Parameter name to report.
    """
    check_not_none(value, param)
    if not callable(value):
        raise ArgumentError(param, f'Expected a callable, got {value!r:.50s}')
    return value


def check_iterable(value: T, param: str) -> T:
    """Raise if *value* is neither an iterable nor an async iterable.

    :param value:
    :param param: Parameter name to report.
    """
    check_not_none(value, param)
    if not isinstance(value, (Iterable, AsyncIterable)):
        raise ArgumentError(
            param,
            f'Expected an iterable, got {type(value).__name__}',
        )
    return value


async def resolve(value: Any) -> Any:
    """Await *value* if it is awaitable, otherwise return it as is."""
    if isawaitable(value):
        return await cast(Any, value)
    return value


class _NoSeed:

    def __repr__(self) -> str:
        return 'NO_SEED'


NO_SEED: Any = _NoSeed()
"""Marker for a fold without an initial accumulator value."""
