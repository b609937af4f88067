import asyncio
import warnings

import pytest

from ensure_initialized import ReadinessState
from ensure_initialized.errors import (
    ReadinessError,
    AlreadyInitializedError,
    NotInitializedYetError,
    MissingErrorOrMessageError,
)
from ensure_initialized.pytest import assert_pending

pytestmark = pytest.mark.asyncio


class TestObjectInstantiation:
    async def test_not_initialized(self, result_object):
        assert not result_object.is_initialized
        assert result_object.readiness_state == ReadinessState.NOT_READY

    async def test_ensure_initialized_pending(self, result_object):
        await assert_pending(result_object.ensure_initialized)
        assert not result_object.is_initialized


class TestInitializedSuccessfully:
    async def test_already_initialized(self, result_object):
        result_object.initialized_successfully(0)

        with pytest.raises(AlreadyInitializedError):
            result_object.initialized_successfully(1)

        assert result_object.is_initialized
        assert await result_object.ensure_initialized == 0

    async def test_is_initialized(self, result_object):
        result_object.initialized_successfully(0)
        assert result_object.is_initialized
        assert result_object.readiness_state == ReadinessState.READY_SUCCESS

    async def test_ensure_initialized_result(self, result_object):
        result_object.initialized_successfully(42)
        assert await result_object.ensure_initialized == 42

    async def test_waiters_released(self, result_object):
        waiters = [asyncio.ensure_future(result_object.ensure_initialized) for _ in range(3)]
        await asyncio.sleep(0)
        assert not any(waiter.done() for waiter in waiters)

        result_object.initialized_successfully(7)
        assert await asyncio.gather(*waiters) == [7, 7, 7]

    async def test_when_initialized(self, result_object):
        subscription = result_object.when_initialized.subscribe()
        result_object.initialized_successfully(42)

        assert subscription.pending == 1
        assert await subscription.__anext__() == 42

    async def test_late_subscriber(self, result_object):
        result_object.initialized_successfully(42)
        subscription = result_object.when_initialized.subscribe()
        assert subscription.pending == 0


class TestInitializedWithError:
    async def test_already_initialized(self, result_object):
        result_object.initialized_successfully(0)

        with pytest.raises(AlreadyInitializedError):
            result_object.initialized_with_error(message='message')

        assert result_object.is_initialized
        assert await result_object.ensure_initialized == 0

    async def test_message(self, result_object):
        subscription = result_object.when_initialized.subscribe()
        result_object.initialized_with_error(message='boom')

        assert result_object.is_initialized
        assert result_object.readiness_state == ReadinessState.READY_ERROR

        with pytest.raises(ReadinessError) as awaited:
            await result_object.ensure_initialized
        assert type(awaited.value) is ReadinessError
        assert awaited.value.message == 'boom'

        with pytest.raises(ReadinessError) as emitted:
            await subscription.__anext__()
        assert emitted.value is awaited.value

    async def test_error(self, result_object):
        error = ValueError('Something went wrong!')
        subscription = result_object.when_initialized.subscribe()
        result_object.initialized_with_error(error=error)

        assert result_object.is_initialized

        with pytest.raises(ValueError) as awaited:
            await result_object.ensure_initialized
        assert awaited.value is error

        with pytest.raises(ValueError) as emitted:
            await subscription.__anext__()
        assert emitted.value is error

    async def test_missing_error_and_message(self, result_object):
        with pytest.raises(MissingErrorOrMessageError):
            result_object.initialized_with_error(message=None, error=None)

        assert not result_object.is_initialized

    async def test_error_and_message(self, result_object, disable_debug):
        error = ValueError('error')
        with warnings.catch_warnings():
            warnings.simplefilter('error')
            result_object.initialized_with_error(error=error, message='message')

        with pytest.raises(ValueError) as awaited:
            await result_object.ensure_initialized
        assert awaited.value is error

    async def test_error_and_message_debug(self, result_object, enable_debug):
        error = ValueError('error')
        with pytest.warns(UserWarning, match='message'):
            result_object.initialized_with_error(error=error, message='message')

        with pytest.raises(ValueError) as awaited:
            await result_object.ensure_initialized
        assert awaited.value is error


class TestMarkAsUninitialized:
    async def test_not_initialized(self, result_object):
        with pytest.raises(NotInitializedYetError):
            result_object.mark_as_uninitialized()

    async def test_mark_as_uninitialized(self, result_object):
        subscription = result_object.when_uninitialized.subscribe()
        result_object.initialized_successfully(0)
        previous = result_object.ensure_initialized

        result_object.mark_as_uninitialized()

        assert not result_object.is_initialized
        assert subscription.pending == 1
        assert await subscription.__anext__() is None

        # the previous cycle keeps its result, new waiters wait for the next cycle
        assert await previous == 0
        await assert_pending(result_object.ensure_initialized)

    async def test_initialize_again(self, result_object):
        result_object.initialized_with_error(message='boom')
        result_object.mark_as_uninitialized()
        result_object.initialized_successfully(1)

        assert await result_object.ensure_initialized == 1


class TestReinitialize:
    async def test_not_initialized(self, result_object):
        with pytest.raises(NotInitializedYetError):
            await result_object.reinitialize(lambda: 0)

        assert not result_object.is_initialized

    async def test_events_in_order(self, result_object, event_recorder):
        result_object.initialized_successfully(0)
        event_recorder.record('uninitialized', result_object.when_uninitialized)
        event_recorder.record('initialized', result_object.when_initialized)
        await event_recorder.settle()

        async def work():
            return 5

        assert await result_object.reinitialize(work) == 5
        await event_recorder.settle()

        assert event_recorder.events == [('uninitialized', None), ('initialized', 5)]
        assert await result_object.ensure_initialized == 5
        assert result_object.is_initialized

    async def test_uninitialized_before_work(self, result_object):
        result_object.initialized_successfully(0)
        uninitialized = result_object.when_uninitialized.subscribe()
        initialized = result_object.when_initialized.subscribe()

        def work():
            assert not result_object.is_initialized
            assert uninitialized.pending == 1
            assert initialized.pending == 0
            return 5

        await result_object.reinitialize(work)

        assert initialized.pending == 1
        assert await initialized.__anext__() == 5

    async def test_error(self, result_object, event_recorder):
        error = ValueError('format')
        result_object.initialized_successfully(0)
        event_recorder.record('uninitialized', result_object.when_uninitialized)
        event_recorder.record('initialized', result_object.when_initialized)
        await event_recorder.settle()

        async def work():
            raise error

        with pytest.raises(ValueError) as raised:
            await result_object.reinitialize(work, call_error_on_exception=True)
        assert raised.value is error

        assert result_object.is_initialized
        assert result_object.readiness_state == ReadinessState.READY_ERROR

        with pytest.raises(ValueError) as awaited:
            await result_object.ensure_initialized
        assert awaited.value is error

        await event_recorder.settle()
        assert event_recorder.events == [('uninitialized', None), ('initialized', error)]
        assert event_recorder.errors == [('initialized', error)]

    async def test_error_not_recorded(self, result_object):
        result_object.initialized_successfully(0)
        initialized = result_object.when_initialized.subscribe()

        def work():
            raise RuntimeError()

        with pytest.raises(RuntimeError):
            await result_object.reinitialize(work, call_error_on_exception=False)

        assert not result_object.is_initialized
        assert initialized.pending == 0
        await assert_pending(result_object.ensure_initialized)

        result_object.initialized_successfully(1912)
        assert await result_object.ensure_initialized == 1912
        assert await initialized.__anext__() == 1912
