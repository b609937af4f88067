"""
Defines some special TypeVars and Type Aliases to be used throughout the codebase.
"""

from __future__ import annotations

from types import TracebackType
from typing import (
    TypeVar,
    Coroutine,
    Any,
    Awaitable,
    Callable,
    Optional,
    Protocol,
    Union,
)

T = TypeVar('T')
"""
Simple TypeVar
"""
T_contra = TypeVar('T_contra', contravariant=True)
"""
contravariant values, used for consumers
"""

Trace = Optional[TracebackType]
"""
Traceback attached to a stored error, if any
"""
Work = Callable[[], Union[Awaitable[T], T]]
"""
Unit of work passed to ``reinitialize`` -- a coroutine function or a plain callable
"""


class Consumer(Protocol[T_contra]):
    def __call__(self, value: T_contra) -> Coroutine[Any, Any, None] | None:
        """
        Consumer objects need to have this call signature

        Args:
            value: something to consume

        Returns:
            no return or coroutine with no return
        """


class ErrorConsumer(Protocol):
    def __call__(self, error: BaseException) -> Coroutine[Any, Any, None] | None:
        """
        Callbacks handling the error channel of a stream need to have this call signature
        """


__all__ = (
    'Trace',
    'Work',
    'Consumer',
    'ErrorConsumer',
    'T',
)
"""
names that should be imported from :mod:`ensure_initialized.util.typing` and not from other modules
"""
