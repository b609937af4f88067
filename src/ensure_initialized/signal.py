"""
The readiness state machine.

A :class:`ReadinessSignal` starts :attr:`~ReadinessState.NOT_READY`. The object owning the signal (the `host`)
performs its initialization and reports the outcome with :meth:`~ReadinessSignal.initialized_successfully` or
:meth:`~ReadinessSignal.initialized_with_error`. Everyone interested in the outcome awaits
:attr:`~ReadinessSignal.ensure_initialized`, which resolves for all waiters at once. The host can go back to
:attr:`~ReadinessState.NOT_READY` with :meth:`~ReadinessSignal.mark_as_uninitialized` (e.g. if some upstream
dependency went away) and complete the signal again later, or do both in one step using
:meth:`~ReadinessSignal.reinitialize`.

State changes are published on two :class:`~ensure_initialized.events.Broadcast` streams,
:attr:`~ReadinessSignal.when_initialized` and :attr:`~ReadinessSignal.when_uninitialized`. Within one
cycle the `uninitialized` event is always published before the `initialized` event of the next cycle, so dependent
objects can chain their own readiness to the signal.

Note:

    The signal expects all mutating calls to come from the host's own initialization logic, running on a single
    event loop. There is no internal locking, a host that mutates the signal from different threads needs to
    serialize the calls itself.

Example:

    Hold a signal as a field, if your class can't use the mixins from :mod:`ensure_initialized.mixins` ::

        import asyncio
        from ensure_initialized.signal import ReadinessSignal

        class Database:
            def __init__(self):
                self.readiness: ReadinessSignal[str] = ReadinessSignal(name='database')

            async def connect(self):
                await asyncio.sleep(1)
                self.readiness.initialized_successfully('connected')

            async def query(self):
                status = await self.readiness.ensure_initialized
                ...

"""
from __future__ import annotations

import enum
import inspect
import logging
import typing
import warnings

from . import util
from .completion import Completion
from .errors import (
    ReadinessError,
    AlreadyInitializedError,
    NotInitializedYetError,
    MissingErrorOrMessageError,
    MISSING_ERROR_OR_MESSAGE_MESSAGE,
)
from .events import Broadcast
from .util.typing import T, Trace, Work

log = logging.getLogger(__name__)


class ReadinessState(enum.Enum):
    """
    States of a :class:`ReadinessSignal`
    """
    NOT_READY = enum.auto()
    READY_SUCCESS = enum.auto()
    READY_ERROR = enum.auto()


@util.dunder.repr('name', 'state')
class ReadinessSignal(typing.Generic[T]):
    """
    Tracks whether an object is ready for usage.
    """

    def __init__(self: ReadinessSignal[T], name: str | None = None):
        """
        Args:
            name: used in logs and the ``repr`` -- `optional`
        """
        self.name: str = name or f"signal-{id(self):x}"
        """
        Name of the signal
        """
        self._pending_result: Completion[T] = Completion()
        self._initialized_events: Broadcast[T] = Broadcast(name=f"{self.name}.when_initialized")
        self._uninitialized_events: Broadcast[None] = Broadcast(name=f"{self.name}.when_uninitialized")

    @property
    def ensure_initialized(self) -> Completion[T]:
        """
        Released when :meth:`.initialized_successfully` is called, resolves to the initialization result.
        If :meth:`.initialized_with_error` is called, awaiting raises the given error.

        The returned awaitable belongs to the current initialization cycle. It can be awaited any number of times,
        after :meth:`.mark_as_uninitialized` it keeps its outcome, new calls get the awaitable of the new cycle.
        """
        return self._pending_result

    @property
    def is_initialized(self) -> bool:
        """
        Simply checks if the object is initialized at the moment (successfully or with an error)
        """
        return self._pending_result.done

    @property
    def state(self) -> ReadinessState:
        """
        Current :class:`ReadinessState`
        """
        if not self._pending_result.done:
            return ReadinessState.NOT_READY

        return ReadinessState.READY_ERROR if self._pending_result.failed else ReadinessState.READY_SUCCESS

    @property
    def when_initialized(self) -> Broadcast[T]:
        """
        Publishes the result when :meth:`.initialized_successfully` is called.
        If :meth:`.initialized_with_error` is called, the error is published instead (subscriptions raise it).
        """
        return self._initialized_events

    @property
    def when_uninitialized(self) -> Broadcast[None]:
        """
        Publishes :obj:`None` when :meth:`.mark_as_uninitialized` is called -- this includes the
        call during :meth:`.reinitialize`
        """
        return self._uninitialized_events

    def initialized_successfully(self, result: T | None = None) -> None:
        """
        Marks that the object has been initialized successfully.

        Args:
            result: value that :attr:`.ensure_initialized` resolves to

        Raises:
            AlreadyInitializedError: if the object was already initialized
        """
        if self.is_initialized:
            raise AlreadyInitializedError()

        self._pending_result.set_result(result)
        log.debug(f"{self} initialized successfully.")
        self._initialized_events.add(result)

    def initialized_with_error(self, *,
                               error: BaseException | None = None,
                               message: str | None = None,
                               trace: Trace = None) -> None:
        """
        Marks that the object was initialized with an error.

            *   If ``error`` is provided, it will be raised by :attr:`.ensure_initialized` as is.
            *   If ``message`` is provided, it will be wrapped in a :class:`~ensure_initialized.errors.ReadinessError`
                which will be raised by :attr:`.ensure_initialized`.
            *   If ``trace`` is provided, it will be attached to the error when it is raised.

        Provide either an ``error`` or a ``message``. If both are passed, ``message`` is ignored (and a warning
        is issued in :func:`~ensure_initialized.util.debug` mode).

        Raises:
            MissingErrorOrMessageError: if neither ``error`` nor ``message`` is passed
            AlreadyInitializedError: if the object was already initialized
        """
        if error is None and message is None:
            raise MissingErrorOrMessageError()

        if error is not None and message is not None and util.debug():
            warnings.warn(f"{MISSING_ERROR_OR_MESSAGE_MESSAGE}, ignoring message {message!r} for {self}")

        if self.is_initialized:
            raise AlreadyInitializedError()

        if error is None:
            error = ReadinessError(message)

        self._pending_result.set_error(error, trace)
        log.debug(f"{self} initialized with error {error!r}.")
        self._initialized_events.add_error(error, trace)

    def mark_as_uninitialized(self) -> None:
        """
        Marks that the object is again not initialized. After this, the object can be initialized again.

        Raises:
            NotInitializedYetError: if the object was not initialized yet
        """
        if not self.is_initialized:
            raise NotInitializedYetError()

        self._pending_result = Completion()
        log.debug(f"{self} marked as uninitialized.")
        self._uninitialized_events.add(None)

    async def reinitialize(self, work: Work[T], call_error_on_exception: bool = True) -> T:
        """
        Reinitialize the object with the result of ``work``.

        The object is marked as uninitialized first, then ``work`` is called (if it returns an awaitable, the
        awaitable is awaited) and its result passed to :meth:`.initialized_successfully`.

        If ``work`` raises an :class:`Exception` it is re-raised to the caller. If ``call_error_on_exception`` is
        ``True`` the exception is passed to :meth:`.initialized_with_error` before, otherwise the object stays
        uninitialized, e.g. to let the host handle the exception and decide how to complete the cycle.

        Args:
            work: coroutine function or plain callable producing the new result
            call_error_on_exception: whether to mark the object as initialized with an error if ``work`` fails

        Returns:
            the new result

        Raises:
            NotInitializedYetError: if the object was not initialized yet
        """
        if not self.is_initialized:
            raise NotInitializedYetError()

        self.mark_as_uninitialized()

        try:
            result = work()
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            log.debug(f"Reinitialization of {self} failed: {e!r}")
            if call_error_on_exception:
                self.initialized_with_error(error=e, trace=e.__traceback__)

            raise

        self.initialized_successfully(result)
        return result


__all__ = (
    'ReadinessState',
    'ReadinessSignal',
)
