"""
Mixins to track whether an object is ready for usage.

Sometimes it is nice to wait for some heavy initialization process before using an object.
Instead of implementing some kind of booleans, we can use awaitables instead.

There are two variants, :class:`EnsureInitializedMixin` if the initialization does not produce a result and
:class:`EnsureInitializedResultMixin` if it does. Both delegate to a :class:`~ensure_initialized.signal.ReadinessSignal`
that is created for every instance when it is first needed.

Note:

    The methods to change the state -- ``initialized_successfully``, ``initialized_with_error``,
    ``mark_as_uninitialized`` and ``reinitialize`` -- are meant to be called by the implementation of the class
    using the mixin (and tests), not by other objects. Python has no protected members, other objects should only
    use ``ensure_initialized``, ``is_initialized``, ``when_initialized`` and ``when_uninitialized``.

Example:

    ::

        import asyncio
        from ensure_initialized import EnsureInitializedResultMixin

        class SomeClass(EnsureInitializedResultMixin[int]):
            def __init__(self):
                self._init_task = asyncio.create_task(self._init())

            async def _heavy_computations(self) -> int:
                await asyncio.sleep(5)
                return 0

            async def _init(self):
                try:
                    result = await self._heavy_computations()
                except Exception as e:
                    self.initialized_with_error(error=e, trace=e.__traceback__)
                else:
                    self.initialized_successfully(result)

            async def do_something(self) -> int:
                result = await self.ensure_initialized
                return result + 1

"""
from __future__ import annotations

import functools
import inspect
import typing

from .events import Broadcast
from .signal import ReadinessSignal, ReadinessState
from .util.typing import T, Trace, Work


class _ReadinessMixin(typing.Generic[T]):
    """
    Delegates the shared part of the readiness API to a :class:`~ensure_initialized.signal.ReadinessSignal`
    """

    @functools.cached_property
    def readiness_signal(self) -> ReadinessSignal[T]:
        """
        The signal tracking the readiness of this object, created on first access
        """
        return ReadinessSignal(name=f"{type(self).__name__}@{id(self):x}")

    @property
    def ensure_initialized(self) -> typing.Awaitable[T]:
        """
        Released when ``initialized_successfully`` is called.
        If :meth:`.initialized_with_error` is called, awaiting raises the given error.
        """
        return self.readiness_signal.ensure_initialized

    @property
    def is_initialized(self) -> bool:
        """
        Simply checks if the object is initialized at the moment.
        """
        return self.readiness_signal.is_initialized

    @property
    def readiness_state(self) -> ReadinessState:
        """
        Current state of the :attr:`.readiness_signal`
        """
        return self.readiness_signal.state

    @property
    def when_initialized(self) -> Broadcast[T]:
        """
        Fired when ``initialized_successfully`` is called. If :meth:`.initialized_with_error` is called,
        the error is published instead.
        """
        return self.readiness_signal.when_initialized

    @property
    def when_uninitialized(self) -> Broadcast[None]:
        """
        Fired when :meth:`.mark_as_uninitialized` is called.

        Note that it will also be fired during ``reinitialize`` as it calls :meth:`.mark_as_uninitialized`.
        """
        return self.readiness_signal.when_uninitialized

    def initialized_with_error(self, *,
                               error: BaseException | None = None,
                               message: str | None = None,
                               trace: Trace = None) -> None:
        """
        Marks that the object was initialized with an error. Host-only.

        See Also:
            :meth:`ReadinessSignal.initialized_with_error
            <ensure_initialized.signal.ReadinessSignal.initialized_with_error>` -- details
        """
        self.readiness_signal.initialized_with_error(error=error, message=message, trace=trace)

    def mark_as_uninitialized(self) -> None:
        """
        Marks that the object is again not initialized. Host-only.

        Raises:
            NotInitializedYetError: if the object was not initialized yet
        """
        self.readiness_signal.mark_as_uninitialized()


class EnsureInitializedMixin(_ReadinessMixin[None]):
    """
    Tracks whether the object is ready for usage, the initialization does not produce a result.
    """

    def initialized_successfully(self) -> None:
        """
        Marks that the object has been initialized successfully. Host-only.

        Raises:
            AlreadyInitializedError: if the object was already initialized
        """
        self.readiness_signal.initialized_successfully(None)

    async def reinitialize(self, work: Work[typing.Any], call_error_on_exception: bool = True) -> None:
        """
        Reinitialize the object by running ``work``, whatever it returns is discarded. Host-only.

        See Also:
            :meth:`ReadinessSignal.reinitialize <ensure_initialized.signal.ReadinessSignal.reinitialize>` -- details
        """
        async def discard_result():
            result = work()
            if inspect.isawaitable(result):
                await result

        await self.readiness_signal.reinitialize(discard_result, call_error_on_exception)


class EnsureInitializedResultMixin(_ReadinessMixin[T]):
    """
    Tracks whether the object is ready for usage, :attr:`ensure_initialized` resolves to the result of
    the initialization.
    """

    def initialized_successfully(self, result: T) -> None:
        """
        Marks that the object has been initialized successfully. Host-only.

        Args:
            result: value that :attr:`.ensure_initialized` resolves to

        Raises:
            AlreadyInitializedError: if the object was already initialized
        """
        self.readiness_signal.initialized_successfully(result)

    async def reinitialize(self, work: Work[T], call_error_on_exception: bool = True) -> T:
        """
        Reinitialize the object with the result of ``work``. Host-only.

        See Also:
            :meth:`ReadinessSignal.reinitialize <ensure_initialized.signal.ReadinessSignal.reinitialize>` -- details
        """
        return await self.readiness_signal.reinitialize(work, call_error_on_exception)


__all__ = (
    'EnsureInitializedMixin',
    'EnsureInitializedResultMixin',
)
