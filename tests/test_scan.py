import operator

import pytest

from seqaio.cancellation import CancellationToken
from seqaio.errors import ArgumentNoneError, OperationCancelledError
from seqaio.scan import *
from seqaio.sources import from_iterable

from tracking import TrackingSequence, drain


@pytest.mark.asyncio
class TestScan:

    async def test_without_seed(self):
        seq = scan([1, 2, 3, 4], operator.add)
        assert await drain(seq.enumerate()) == [3, 6, 10]

    async def test_with_seed(self):
        seq = scan([1, 2, 3, 4], operator.add, 0)
        assert await drain(seq.enumerate()) == [1, 3, 6, 10]

    async def test_single_element_without_seed_produces_nothing(self):
        assert await scan([5], operator.add).to_list() == []

    async def test_empty_with_seed_produces_nothing(self):
        assert await scan([], operator.add, 100).to_list() == []

    @pytest.mark.parametrize('n', [0, 1, 2, 5])
    async def test_counts(self, n):
        assert len(await scan(range(n), operator.add).to_list()) == \
            max(n - 1, 0)
        assert len(await scan(range(n), operator.add, 0).to_list()) == n

    async def test_none_seed_is_a_seed(self):
        seq = scan(['a', 'b'], lambda acc, x: (acc or '') + x, None)
        assert await seq.to_list() == ['a', 'ab']

    async def test_seed_of_different_type(self):
        seq = scan('abc', lambda acc, ch: acc + [ch], [])
        assert await seq.to_list() == [['a'], ['a', 'b'], ['a', 'b', 'c']]

    async def test_async_accumulator(self):
        async def add(acc, x):
            return acc + x
        assert await scan([1, 2, 3], add).to_list() == [3, 6]

    async def test_with_cancellation(self, mocker):
        token = CancellationToken()
        accumulator = mocker.Mock(return_value=0)
        seq = scan([1, 2], accumulator, 10, with_cancellation=True)
        assert await drain(seq.enumerate(token)) == [0, 0]
        assert accumulator.call_args_list == [
            ((10, 1), {'cancellation': token}),
            ((0, 2), {'cancellation': token}),
        ]

    async def test_cancel_from_accumulator(self):
        source = TrackingSequence([1, 2, 3])
        token = CancellationToken()

        def accumulator(acc, x, cancellation):
            cancellation.cancel()
            return acc + x

        e = scan(source, accumulator, 0, with_cancellation=True) \
            .enumerate(token)
        with pytest.raises(OperationCancelledError):
            await e.advance()
        assert source.release_counts == [1]

    async def test_fluent(self):
        seq = from_iterable([1, 2, 3])
        assert await seq.scan(operator.mul).to_list() == [2, 6]
        assert await seq.scan(operator.mul, 2).to_list() == [2, 4, 12]

    async def test_release_early(self):
        source = TrackingSequence([1, 2, 3])
        e = scan(source, operator.add).enumerate()
        assert await e.advance()
        assert e.current == 3
        await e.release()
        assert not await e.advance()
        assert source.release_counts == [1]

    async def test_accumulator_error(self):
        source = TrackingSequence([1, 'a'])
        e = scan(source, operator.add, 0).enumerate()
        assert await e.advance()
        with pytest.raises(TypeError):
            await e.advance()
        assert source.release_counts == [1]

    async def test_throws_on_none_accumulator(self):
        with pytest.raises(ArgumentNoneError):
            scan([1], None)
        assert repr(NO_SEED) == 'NO_SEED'
