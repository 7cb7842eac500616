"""Composable, lazily evaluated operators over asynchronous sequences."""

__version__ = '0.1.0'

from .cancellation import CancellationToken
from .comparer import DEFAULT_COMPARER, ComparerSet, EqualityComparer, \
    KeyComparer
from .errors import MAX_INDEX, ArgumentError, ArgumentNoneError, \
    IndexOverflowError, OperationCancelledError, SequenceError
from .filtering import of_type, where
from .iterator import AsyncIteratorBase, LifecycleState
from .partitioning import skip_last
from .projection import select
from .scan import NO_SEED, scan
from .select_many import Stage, select_many
from .sequence import AsyncSequence, Enumerator
from .sets import except_, intersect
from .sources import as_sequence, empty, from_iterable, from_range

__all__ = (
    'AsyncSequence',
    'Enumerator',
    'AsyncIteratorBase',
    'LifecycleState',
    'Stage',
    'CancellationToken',
    'EqualityComparer',
    'KeyComparer',
    'ComparerSet',
    'DEFAULT_COMPARER',
    'MAX_INDEX',
    'NO_SEED',
    'SequenceError',
    'ArgumentError',
    'ArgumentNoneError',
    'IndexOverflowError',
    'OperationCancelledError',
    'as_sequence',
    'from_iterable',
    'from_range',
    'empty',
    'select',
    'where',
    'of_type',
    'select_many',
    'scan',
    'intersect',
    'except_',
    'skip_last',
)
