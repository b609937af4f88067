"""
This is a pytest plugin that you can use in your conftest.py files to easier write tests for objects
using the readiness primitives.

More information:
https://docs.pytest.org/en/7.1.x/how-to/writing_plugins.html#requiring-loading-plugins-in-a-test-module-or-conftest-file

Example :

    In your root level `conftest.py` file, require the module like ::

        pytest_plugins = ['ensure_initialized.pytest']

    or import the hooks and fixtures ::

        from ensure_initialized.pytest import *  # noqa

"""

from __future__ import annotations

import asyncio
import logging
import typing

import pytest

from ensure_initialized import util
from ensure_initialized.events import Broadcast, Subscription

__verbosity__: int | None = None

PENDING_TIMEOUT = 0.05
"""
Default time in seconds :func:`assert_pending` waits for an awaitable
"""


def pytest_configure(config):
    """
    Sets verbosity
    """
    global __verbosity__
    __verbosity__ = logging.INFO - 5 * config.getoption('verbose')


@pytest.fixture(autouse=True)
def configure_verbosity(caplog):
    caplog.set_level(__verbosity__ if __verbosity__ is not None else logging.INFO)
    yield


@pytest.fixture
def enable_debug():
    """
    Turn on :func:`~ensure_initialized.util.debug` mode for the test, restores the previous value afterwards
    """
    previous = util.debug()
    util.debug(enabled=True)
    yield
    util.debug(enabled=previous)


@pytest.fixture
def disable_debug():
    """
    Turn off :func:`~ensure_initialized.util.debug` mode for the test, restores the previous value afterwards
    """
    previous = util.debug()
    util.debug(enabled=False)
    yield
    util.debug(enabled=previous)


async def assert_pending(awaitable: typing.Awaitable, timeout: float = PENDING_TIMEOUT) -> None:
    """
    Assert that the awaitable does not complete within ``timeout`` seconds.

    Only the wait is cancelled after the timeout, awaiting e.g.
    :attr:`~ensure_initialized.signal.ReadinessSignal.ensure_initialized` has no side effects.
    """
    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(awaitable, timeout=timeout)


class EventRecorder:
    """
    Records events of any number of :class:`~ensure_initialized.events.Broadcast` streams in one list, to make
    assertions about the order of events across streams.

    Every recorded event is a tuple ``(label, value)``, errors are recorded as ``(label, error)`` as well, use
    :attr:`.errors` to get them.
    """

    def __init__(self):
        self.events: typing.List[typing.Tuple[str, typing.Any]] = []
        self.errors: typing.List[typing.Tuple[str, BaseException]] = []
        self._subscriptions: typing.List[Subscription] = []

    def record(self, label: str, broadcast: Broadcast) -> Subscription:
        """
        Start recording the events of ``broadcast`` -- needs a running event loop
        """
        def on_data(value):
            self.events.append((label, value))

        def on_error(error):
            self.events.append((label, error))
            self.errors.append((label, error))

        subscription = broadcast.listen(on_data, on_error=on_error)
        self._subscriptions.append(subscription)
        return subscription

    @property
    def labels(self) -> typing.List[str]:
        """
        Labels of all recorded events, in order
        """
        return [label for label, _ in self.events]

    def values(self, label: str) -> typing.List[typing.Any]:
        """
        Recorded values (and errors) for ``label``, in order
        """
        return [value for _label, value in self.events if _label == label]

    async def settle(self, rounds: int = 5) -> None:
        """
        Give the listener tasks the chance to process pending events
        """
        for _ in range(rounds):
            await asyncio.sleep(0)

    def cancel(self) -> None:
        """
        Stop recording
        """
        for subscription in self._subscriptions:
            subscription.cancel()
        self._subscriptions.clear()


@pytest.fixture
def event_recorder():
    """
    An :class:`EventRecorder` which stops recording after the test
    """
    recorder = EventRecorder()
    yield recorder
    recorder.cancel()


__all__ = (
    'pytest_configure',
    'configure_verbosity',
    'enable_debug',
    'disable_debug',
    'event_recorder',
    'assert_pending',
    'EventRecorder',
    'PENDING_TIMEOUT',
)
