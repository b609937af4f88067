"""
This module provides a simple broadcast channel which is used for the ``when_initialized`` and
``when_uninitialized`` streams of the readiness primitives.

A :class:`Broadcast` delivers every published event to every :class:`Subscription` that exists at the time of
publishing, i.e. there is no replay of events for late subscribers. Events are either values or errors, errors are
raised by the subscription instead of being returned -- without ending the subscription.

Example:

    Iterate over a subscription ::

        import asyncio
        from ensure_initialized.events import Broadcast

        async def main():
            numbers = Broadcast(name='numbers')
            subscription = numbers.subscribe()  # registers right away

            numbers.add(1)
            numbers.add_error(ValueError('two'))
            numbers.add(3)
            numbers.close()

            while True:
                try:
                    async for number in subscription:
                        print(number)
                except ValueError as e:
                    print(f"Error: {e}")
                else:
                    break

        asyncio.run(main())  # prints 1, Error: two, 3

    Or register a callback, which runs in a background task ::

        async def main():
            numbers = Broadcast(name='numbers')
            subscription = numbers.listen(print, on_error=lambda e: print(f"Error: {e}"))
            numbers.add(1)
            await asyncio.sleep(0.1)  # callback task prints 1
            subscription.cancel()

"""
from __future__ import annotations

import asyncio
import functools
import inspect
import logging
import typing

from . import util
from .logging import VERBOSE
from .util.typing import (
    T,
    Trace,
    Consumer,
    ErrorConsumer,
)

log = logging.getLogger(__name__)


class _Event(typing.NamedTuple):
    value: typing.Any = None
    error: BaseException | None = None
    trace: Trace = None


_END = _Event()


async def _consume(callback: typing.Callable, value):
    result = callback(value)
    if inspect.isawaitable(result):
        await result


@util.dunder.repr('broadcast', 'pending', 'active')
class Subscription(typing.AsyncIterator[T]):
    """
    A subscription to a :class:`Broadcast`. Each subscription has its own queue, i.e. slow consumers don't block
    the publisher or other subscriptions.

    Iterating over a subscription returns the published values. A published error is raised by
    :meth:`__anext__`, the subscription stays active though, so it can be iterated again to receive later events.
    Iteration stops when the subscription is cancelled or the broadcast is closed.
    """

    def __init__(self: Subscription[T], broadcast: Broadcast[T]):
        """
        Args:
            broadcast: the broadcast that publishes to this subscription
        """
        self.broadcast = broadcast
        """
        Reference to the broadcast this subscription was created by
        """
        self.task: asyncio.Task | None = None
        """
        Background task consuming the subscription, if it was created with :meth:`Broadcast.listen`
        """
        self._queue: asyncio.Queue[_Event] = asyncio.Queue()
        self._active = True

    @property
    def pending(self) -> int:
        """
        Number of delivered events that were not consumed yet
        """
        return self._queue.qsize()

    @property
    def active(self) -> bool:
        """
        ``False`` after the subscription was cancelled or the broadcast closed
        """
        return self._active

    def _push(self, event: _Event):
        self._queue.put_nowait(event)

    def _end(self):
        if self._active:
            self._active = False
            self._push(_END)

    async def __anext__(self) -> T:
        event = await self._queue.get()

        if event is _END:
            # keep the marker, so every following call stops as well
            self._push(_END)
            raise StopAsyncIteration

        if event.error is not None:
            # reset to the stored traceback, every raise would extend it otherwise
            raise event.error.with_traceback(event.trace)

        return event.value

    def cancel(self) -> None:
        """
        Stop receiving events. Events that were already delivered can still be consumed before iteration stops.
        If the subscription is consumed by a listener task, the task is cancelled.
        """
        self.broadcast._remove(self)

        if self.task is not None and self.task.get_loop().is_closed():
            self._active = False
            return

        self._end()

        if self.task is not None and not self.task.done():
            self.task.cancel()

    async def aclose(self) -> None:
        """
        Same as :meth:`.cancel`, to use the subscription with :func:`contextlib.aclosing`
        """
        self.cancel()


@util.dunder.repr('subscription')
class ListenCoroutine(util.CoroutineWrapper[typing.Any, typing.Any, None], typing.Generic[T]):
    """
    A listen coroutine waits until an event is published to its subscription and then runs the matching callback.
    """

    def __init__(self, *,
                 subscription: Subscription[T],
                 on_data: Consumer[T],
                 on_error: ErrorConsumer | None = None):
        """
        Args:
            subscription: subscription producing the events
            on_data: a callable consuming the values
            on_error: a callable consuming the errors -- if not passed, errors are logged
        """
        self.__name__ = on_data.__name__ if hasattr(on_data, '__name__') else repr(on_data)  # type: ignore
        self.subscription = subscription
        self.on_data = on_data
        self.on_error = on_error
        super().__init__(coroutine=self._run())

    async def _handle_error(self, error: Exception):
        if self.on_error is None:
            log.error(f"Unhandled error event in {self.subscription.broadcast}", exc_info=error)
            return

        try:
            await _consume(self.on_error, error)
        except Exception:
            log.exception(f"Error callback {self.on_error!r} failed for {self.subscription.broadcast}")

    async def _run(self):
        while True:
            try:
                value = await self.subscription.__anext__()
            except StopAsyncIteration:
                break
            except Exception as error:
                await self._handle_error(error)
                continue

            log.log(VERBOSE, f"{self} dispatching {value!r}")
            try:
                await _consume(self.on_data, value)
            except Exception:
                log.exception(f"Callback {self.__name__} failed for {self.subscription.broadcast}")

        log.debug(f"{self} finished.")


@util.dunder.repr('name', 'subscriber_count', 'closed')
class Broadcast(typing.AsyncIterable[T]):
    """
    Publish events to any number of subscriptions.

    Publishing never blocks and never suspends, so events can be published from synchronous code, even
    without a running event loop. Consuming the events (iterating a :class:`Subscription`) requires a running loop.
    """

    def __init__(self: Broadcast[T], name: str | None = None):
        """
        Args:
            name: used in logs and the ``repr``
        """
        self.name: str = name or f"broadcast-{id(self):x}"
        """
        Name of the broadcast
        """
        self._subscriptions: typing.List[Subscription[T]] = []
        self._closed = False

    @functools.cached_property
    def task_nursery(self) -> util.TaskNursery:
        """
        takes care of managing tasks for callbacks registered with :meth:`.listen`
        """
        return util.TaskNursery(name=f"Task Nursery for {self.name}")

    @property
    def subscriber_count(self) -> int:
        """
        Number of active subscriptions
        """
        return len(self._subscriptions)

    @property
    def closed(self) -> bool:
        """
        ``True`` after :meth:`.close` was called
        """
        return self._closed

    def _check_open(self):
        if self._closed:
            raise RuntimeError(f"{self!r} is closed")

    def _remove(self, subscription: Subscription[T]):
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    def subscribe(self) -> Subscription[T]:
        """
        Create a new subscription. The subscription receives all events that are published after this call.

        Raises:
            RuntimeError: if the broadcast is closed
        """
        self._check_open()
        subscription = Subscription(self)
        self._subscriptions.append(subscription)
        return subscription

    async def __aiter__(self) -> typing.AsyncIterator[T]:
        """
        Shortcut for iterating a new subscription, which is created when the iteration starts.
        The subscription is cancelled when the iteration stops, also if the loop is left early or an error event is
        raised. Use :meth:`.subscribe` to keep receiving events after an error.
        """
        subscription = self.subscribe()
        try:
            async for value in subscription:
                yield value
        finally:
            subscription.cancel()

    def listen(self, on_data: Consumer[T], *, on_error: ErrorConsumer | None = None) -> Subscription[T]:
        """
        Register callbacks for the published events.

        This creates a subscription right away and starts a task which waits for events and executes the
        callbacks, so it needs to be called while an event loop is running. Callbacks can be plain functions or
        coroutine functions. A failing callback is logged and does not stop the listener.

        Args:
            on_data: called with every published value
            on_error: called with every published error -- if not passed, errors are logged

        Returns:
            the subscription, use :meth:`Subscription.cancel` to stop listening

        Raises:
            RuntimeError: if the broadcast is closed or no event loop is running
        """
        subscription = self.subscribe()
        subscription.task = self.task_nursery.create_task(
            ListenCoroutine(subscription=subscription, on_data=on_data, on_error=on_error)
        )
        return subscription

    def _publish(self, event: _Event):
        self._check_open()
        for subscription in tuple(self._subscriptions):
            subscription._push(event)

    def add(self, value: T) -> None:
        """
        Publish a value to all current subscriptions

        Raises:
            RuntimeError: if the broadcast is closed
        """
        self._publish(_Event(value=value))

    def add_error(self, error: BaseException, trace: Trace = None) -> None:
        """
        Publish an error to all current subscriptions

        Args:
            error: raised by the subscriptions when the event is consumed
            trace: attached to the error when it is raised, defaults to the traceback the error carries now

        Raises:
            RuntimeError: if the broadcast is closed
        """
        self._publish(_Event(error=error, trace=trace if trace is not None else error.__traceback__))

    def close(self) -> None:
        """
        Stop all subscriptions, they still deliver events that were published before closing. Closing a closed
        broadcast has no effect.
        """
        if self._closed:
            return

        self._closed = True
        subscriptions, self._subscriptions = self._subscriptions, []
        for subscription in subscriptions:
            subscription._end()

        log.debug(f"{self} closed.")


__all__ = (
    'Broadcast',
    'Subscription',
    'ListenCoroutine',
)
