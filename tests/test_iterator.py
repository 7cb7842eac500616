import asyncio

import pytest

from seqaio.cancellation import CancellationToken
from seqaio.errors import IndexOverflowError, OperationCancelledError
from seqaio.iterator import *
from seqaio.iterator import release_all
from seqaio.projection import SelectIterator, select

from tracking import TrackingSequence, drain


class PairIterator(AsyncIteratorBase):
    """Opens two upstreams, zipping them; used to probe the base class."""

    def __init__(self, first, second):
        super().__init__()
        self.first = first
        self.second = second
        self.e1 = None
        self.e2 = None

    def clone_fresh(self):
        return PairIterator(self.first, self.second)

    async def _acquire(self):
        self.e1 = self._open(self.first)
        await self._pull(self.e1)
        self.e2 = self._open(self.second)

    async def _move_next(self):
        if not await self._pull(self.e2):
            return False
        self._current = (self.e1.current, self.e2.current)
        return True

    async def _release_resources(self):
        e1, self.e1 = self.e1, None
        e2, self.e2 = self.e2, None
        await release_all(e2, e1)


@pytest.mark.asyncio
class TestLifecycle:

    async def test_states(self):
        seq = select(TrackingSequence([1, 2]), lambda x: x * 2)
        e = seq.enumerate()
        assert e is not seq
        assert e.state is LifecycleState.FRESH

        assert await e.advance()
        assert e.state is LifecycleState.ACTIVE
        assert e.current == 2

        assert await e.advance()
        assert e.current == 4

        assert not await e.advance()
        assert e.state is LifecycleState.RELEASED
        assert not await e.advance()
        assert seq.state is LifecycleState.FRESH

    async def test_release_from_fresh(self):
        source = TrackingSequence([1])
        e = select(source, str).enumerate()
        await e.release()
        await e.release()
        assert e.state is LifecycleState.RELEASED
        assert not await e.advance()
        assert source.enumerators == []

    async def test_release_early_then_advance(self):
        source = TrackingSequence([1, 2, 3])
        e = select(source, str).enumerate()
        assert await e.advance()
        await e.release()
        await e.release()
        assert not await e.advance()
        assert source.release_counts == [1]

    async def test_exhaustion_releases_upstream_once(self):
        source = TrackingSequence([1, 2])
        e = select(source, str).enumerate()
        assert await drain(e) == ['1', '2']
        await e.release()
        assert source.release_counts == [1]

    async def test_enumerations_are_independent(self):
        seq = select(TrackingSequence([1, 2, 3]), lambda x: x)
        e1 = seq.enumerate()
        e2 = seq.enumerate()
        assert await e1.advance()
        assert await e1.advance()
        assert await e2.advance()
        assert (e1.current, e2.current) == (2, 1)
        assert await drain(e2) == [2, 3]
        assert await drain(e1) == [3]

    async def test_enumerate_twice_same_items(self):
        seq = select([1, 2, 3], lambda x: x + 1)
        assert await seq.to_list() == await seq.to_list() == [2, 3, 4]

    async def test_context_manager_releases(self):
        source = TrackingSequence([1, 2, 3])
        async with select(source, str).enumerate() as e:
            assert await e.advance()
        assert e.state is LifecycleState.RELEASED
        assert source.release_counts == [1]

    async def test_async_for_over_enumerator_continues_cursor(self):
        e = select([1, 2, 3], str).enumerate()
        assert await e.advance()
        assert [i async for i in e] == ['2', '3']

    async def test_async_for_over_sequence_releases_on_break(self):
        source = TrackingSequence([1, 2, 3])
        agen = select(source, str).__aiter__()
        async for item in agen:
            break
        await agen.aclose()
        assert item == '1'
        assert source.release_counts == [1]

    async def test_clone_fresh(self):
        seq = select([1], str)
        e = seq.enumerate()
        await drain(e)
        clone = e.clone_fresh()
        assert isinstance(clone, SelectIterator)
        assert clone.state is LifecycleState.FRESH
        assert await drain(clone) == ['1']

    async def test_repr(self):
        assert repr(select([], str)) == \
            '<seqaio.projection.SelectIterator fresh>'


@pytest.mark.asyncio
class TestFailures:

    async def test_upstream_error_releases_before_propagating(self):
        source = TrackingSequence([1, 2, 3], fail_at=1)
        e = select(source, str).enumerate()
        assert await e.advance()
        with pytest.raises(ValueError):
            await e.advance()
        assert e.state is LifecycleState.RELEASED
        assert source.release_counts == [1]
        assert not await e.advance()

    async def test_projection_error_releases(self):
        source = TrackingSequence([1, 0])
        e = select(source, lambda x: 1 / x).enumerate()
        assert await e.advance()
        with pytest.raises(ZeroDivisionError):
            await e.advance()
        assert source.release_counts == [1]

    async def test_error_during_acquire_releases_what_was_acquired(self):
        first = TrackingSequence([1], name='first')
        second = TrackingSequence([1], name='second')
        first.fail_at = 0
        e = PairIterator(first, second).enumerate()
        with pytest.raises(ValueError):
            await e.advance()
        assert first.release_counts == [1]
        assert second.enumerators == []

    async def test_release_order(self):
        events = []
        first = TrackingSequence([1], name='first', events=events)
        second = TrackingSequence(['a', 'b'], name='second', events=events)
        e = PairIterator(first, second).enumerate()
        assert await drain(e) == [(1, 'a'), (1, 'b')]
        releases = [name for event, name in events if event == 'release']
        assert releases == ['second', 'first']

    async def test_advance_error_wins_over_release_error(self):
        source = TrackingSequence(
            [1, 2], fail_at=0, release_error=RuntimeError('release failed'),
        )
        e = select(source, str).enumerate()
        with pytest.raises(ValueError):
            await e.advance()
        assert e.state is LifecycleState.RELEASED
        assert source.release_counts == [1]

    async def test_release_error_on_exhaustion_propagates(self):
        source = TrackingSequence([], release_error=RuntimeError('x'))
        e = select(source, str).enumerate()
        with pytest.raises(RuntimeError):
            await e.advance()
        assert not await e.advance()

    async def test_release_all_releases_everything_on_error(self, mocker):
        failing = mocker.Mock()
        failing.release = mocker.AsyncMock(side_effect=RuntimeError('x'))
        ok = mocker.Mock()
        ok.release = mocker.AsyncMock()
        with pytest.raises(RuntimeError):
            await release_all(failing, None, ok)
        assert ok.release.await_count == 1


@pytest.mark.asyncio
class TestCancellation:

    async def test_cancelled_before_first_advance(self):
        source = TrackingSequence([1, 2])
        token = CancellationToken()
        token.cancel()
        e = select(source, str).enumerate(token)
        with pytest.raises(OperationCancelledError):
            await e.advance()
        assert e.state is LifecycleState.RELEASED
        assert not await e.advance()

    async def test_token_is_passed_upstream(self):
        source = TrackingSequence([1, 2])
        token = CancellationToken()
        e = select(source, str).enumerate(token)
        assert e.cancellation is token
        assert await e.advance()
        assert source.enumerators[0].cancellation is token

    async def test_cancelled_while_pulling(self):
        gate = asyncio.Event()
        source = TrackingSequence([1, 2], gate=gate)
        token = CancellationToken()
        e = select(source, str).enumerate(token)
        task = asyncio.ensure_future(e.advance())
        await asyncio.sleep(0)
        token.cancel()
        gate.set()
        with pytest.raises(OperationCancelledError):
            await task
        assert source.release_counts == [1]

    async def test_task_cancellation_releases(self):
        source = TrackingSequence([1, 2], gate=asyncio.Event())
        e = select(source, str).enumerate()
        task = asyncio.ensure_future(e.advance())
        await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert e.state is LifecycleState.RELEASED
        assert source.release_counts == [1]


@pytest.mark.asyncio
class TestUserFunction:

    async def test_plain(self, mocker):
        func = mocker.Mock(return_value=3)
        f = UserFunction(func, 'f')
        assert await f(1, 2, index=5, cancellation=CancellationToken()) == 3
        assert func.call_args == ((1, 2),)

    async def test_with_index_and_cancellation(self, mocker):
        func = mocker.Mock(return_value=3)
        token = CancellationToken()
        f = UserFunction(func, 'f', with_index=True, with_cancellation=True)
        await f('a', index=7, cancellation=token)
        assert func.call_args == (('a', 7), {'cancellation': token})

    async def test_coroutine_function(self):
        async def double(x):
            return x * 2
        assert await UserFunction(double, 'f')(4) == 8

    async def test_index_overflow(self, mocker):
        mocker.patch.object(AsyncIteratorBase, 'max_index', 1)
        source = TrackingSequence([1, 2, 3])
        e = select(source, lambda x, i: i, with_index=True).enumerate()
        assert await e.advance()
        assert await e.advance()
        assert e.current == 1
        with pytest.raises(IndexOverflowError):
            await e.advance()
        assert source.release_counts == [1]
