"""
A :class:`Completion` is a one-shot container for the outcome of a single initialization attempt.

It behaves similar to an :class:`asyncio.Future`, but

    *   it can be created and resolved without a running event loop (the internal :class:`asyncio.Event` binds to
        a loop only when the completion is first awaited), so host objects can resolve it from their constructor
    *   it can be awaited any number of times, by any number of coroutines, and
        awaiting a failed completion never triggers "exception was never retrieved" warnings
    *   it remembers an optional traceback for a failure, which is attached again when the error is raised

Example:

    >>> import asyncio
    >>> from ensure_initialized.completion import Completion
    >>> completion = Completion()
    >>> completion.done
    False
    >>> completion.set_result(42)
    >>> asyncio.run(completion.wait())
    42

"""
from __future__ import annotations

import asyncio
import typing

from . import util
from .util.typing import T, Trace

_UNSET: typing.Any = object()


@util.dunder.repr('done', 'failed')
class Completion(typing.Awaitable[T]):
    """
    Awaitable that resolves exactly once, with a value or with an error.
    """

    def __init__(self: Completion[T]) -> None:
        self._event = asyncio.Event()
        self._value: T = _UNSET
        self._error: BaseException | None = None
        self._trace: Trace = None

    @property
    def done(self) -> bool:
        """
        ``True`` if :meth:`.set_result` or :meth:`.set_error` was called
        """
        return self._event.is_set()

    @property
    def failed(self) -> bool:
        """
        ``True`` if the completion was resolved with :meth:`.set_error`
        """
        return self._error is not None

    def set_result(self, value: T) -> None:
        """
        Resolve the completion successfully, wakes up all waiting coroutines.

        Raises:
            asyncio.InvalidStateError: if the completion is already resolved
        """
        self._check_pending()
        self._value = value
        self._event.set()

    def set_error(self, error: BaseException, trace: Trace = None) -> None:
        """
        Resolve the completion with an error, wakes up all waiting coroutines which will raise the error.

        Args:
            error: stored as is and raised by every await
            trace: attached to the error when it is raised, defaults to the traceback the error carries
                when it is stored

        Raises:
            asyncio.InvalidStateError: if the completion is already resolved
        """
        self._check_pending()
        self._error = error
        self._trace = trace if trace is not None else error.__traceback__
        self._event.set()

    def _check_pending(self):
        if self.done:
            raise asyncio.InvalidStateError(f"{self!r} is already resolved")

    def result(self) -> T:
        """
        Non-blocking access to the resolved value.

        Raises:
            asyncio.InvalidStateError: if the completion is not resolved yet
            BaseException: the stored error, if the completion failed
        """
        if not self.done:
            raise asyncio.InvalidStateError(f"{self!r} is not resolved yet")

        if self._error is not None:
            # reset to the stored traceback, every raise would extend it otherwise
            raise self._error.with_traceback(self._trace)

        return self._value

    def exception(self) -> BaseException | None:
        """
        Non-blocking access to the stored error, :obj:`None` if the completion was resolved successfully

        Raises:
            asyncio.InvalidStateError: if the completion is not resolved yet
        """
        if not self.done:
            raise asyncio.InvalidStateError(f"{self!r} is not resolved yet")

        return self._error

    @property
    def trace(self) -> Trace:
        """
        Traceback attached to the stored error, if any
        """
        return self._trace

    async def wait(self) -> T:
        """
        Coroutine waiting for the completion, same as awaiting the completion itself
        """
        await self._event.wait()
        return self.result()

    def __await__(self) -> typing.Generator[typing.Any, None, T]:
        return self.wait().__await__()


__all__ = (
    'Completion',
)
