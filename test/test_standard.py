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
    async def test_not_initialized(self, standard_object):
        assert not standard_object.is_initialized
        await assert_pending(standard_object.ensure_initialized)


class TestInitializedSuccessfully:
    async def test_already_initialized(self, standard_object):
        standard_object.initialized_successfully()

        with pytest.raises(AlreadyInitializedError):
            standard_object.initialized_successfully()

        assert standard_object.is_initialized

    async def test_ensure_initialized(self, standard_object):
        waiter = asyncio.ensure_future(standard_object.ensure_initialized)
        await asyncio.sleep(0)
        assert not waiter.done()

        standard_object.initialized_successfully()

        assert standard_object.is_initialized
        assert await waiter is None
        assert await standard_object.ensure_initialized is None

    async def test_when_initialized(self, standard_object):
        subscription = standard_object.when_initialized.subscribe()
        standard_object.initialized_successfully()

        assert subscription.pending == 1
        assert await subscription.__anext__() is None


class TestInitializedWithError:
    async def test_already_initialized(self, standard_object):
        standard_object.initialized_successfully()

        with pytest.raises(AlreadyInitializedError):
            standard_object.initialized_with_error(message='')

        assert standard_object.is_initialized
        assert standard_object.readiness_state == ReadinessState.READY_SUCCESS

    async def test_message(self, standard_object):
        subscription = standard_object.when_initialized.subscribe()
        standard_object.initialized_with_error(message='boom')

        assert standard_object.is_initialized

        with pytest.raises(ReadinessError, match='boom') as awaited:
            await standard_object.ensure_initialized
        assert awaited.value.message == 'boom'

        with pytest.raises(ReadinessError) as emitted:
            await subscription.__anext__()
        assert emitted.value is awaited.value

    async def test_error(self, standard_object):
        error = KeyError('foo')
        standard_object.initialized_with_error(error=error)

        with pytest.raises(KeyError) as awaited:
            await standard_object.ensure_initialized
        assert awaited.value is error

    async def test_missing_error_and_message(self, standard_object):
        with pytest.raises(MissingErrorOrMessageError):
            standard_object.initialized_with_error()

        assert not standard_object.is_initialized

    async def test_error_and_message(self, standard_object, disable_debug):
        error = ValueError('error')
        with warnings.catch_warnings():
            warnings.simplefilter('error')
            standard_object.initialized_with_error(error=error, message='message')

        assert standard_object.is_initialized
        with pytest.raises(ValueError) as awaited:
            await standard_object.ensure_initialized
        assert awaited.value is error

    async def test_error_and_message_debug(self, standard_object, enable_debug):
        error = ValueError('error')
        with pytest.warns(UserWarning, match='message'):
            standard_object.initialized_with_error(error=error, message='message')

        with pytest.raises(ValueError) as awaited:
            await standard_object.ensure_initialized
        assert awaited.value is error


class TestMarkAsUninitialized:
    async def test_not_initialized(self, standard_object):
        with pytest.raises(NotInitializedYetError):
            standard_object.mark_as_uninitialized()

    async def test_mark_as_uninitialized(self, standard_object):
        subscription = standard_object.when_uninitialized.subscribe()
        standard_object.initialized_successfully()
        standard_object.mark_as_uninitialized()

        assert not standard_object.is_initialized
        assert await subscription.__anext__() is None
        await assert_pending(standard_object.ensure_initialized)

    async def test_mark_failed_as_uninitialized(self, standard_object):
        standard_object.initialized_with_error(message='boom')
        standard_object.mark_as_uninitialized()

        assert standard_object.readiness_state == ReadinessState.NOT_READY
        standard_object.initialized_successfully()
        assert await standard_object.ensure_initialized is None


class TestReinitialize:
    async def test_not_initialized(self, standard_object):
        with pytest.raises(NotInitializedYetError):
            await standard_object.reinitialize(lambda: None)

    async def test_events_in_order(self, standard_object, event_recorder):
        standard_object.initialized_successfully()
        event_recorder.record('uninitialized', standard_object.when_uninitialized)
        event_recorder.record('initialized', standard_object.when_initialized)
        await event_recorder.settle()

        async def work():
            await asyncio.sleep(0)
            return 'discarded'

        assert await standard_object.reinitialize(work) is None
        await event_recorder.settle()

        assert event_recorder.labels == ['uninitialized', 'initialized']
        assert event_recorder.values('initialized') == [None]
        assert standard_object.is_initialized

    async def test_error(self, standard_object):
        error = ValueError()
        standard_object.initialized_successfully()

        async def work():
            raise error

        with pytest.raises(ValueError) as raised:
            await standard_object.reinitialize(work)
        assert raised.value is error

        assert standard_object.is_initialized
        with pytest.raises(ValueError) as awaited:
            await standard_object.ensure_initialized
        assert awaited.value is error

    async def test_error_not_recorded(self, standard_object):
        standard_object.initialized_successfully()

        async def work():
            raise ValueError()

        with pytest.raises(ValueError):
            await standard_object.reinitialize(work, call_error_on_exception=False)

        assert not standard_object.is_initialized
        await assert_pending(standard_object.ensure_initialized)

        standard_object.initialized_successfully()
        assert await standard_object.ensure_initialized is None
