"""
Exceptions raised by the readiness primitives.

Every contract violation (e.g. completing an object twice) is reported with a subtype of :class:`ReadinessError`
so the kind of violation can be told apart in an :ref:`except` statement. The base type is also used to wrap
plain string messages passed to :meth:`~ensure_initialized.signal.ReadinessSignal.initialized_with_error`.

Example:

    >>> from ensure_initialized.errors import ReadinessError, AlreadyInitializedError
    >>> str(ReadinessError('boom'))
    'ReadinessError: boom'
    >>> issubclass(AlreadyInitializedError, ReadinessError)
    True

"""

from __future__ import annotations

from . import util

ALREADY_INITIALIZED_MESSAGE = 'Object was already initialized'
NOT_INITIALIZED_YET_MESSAGE = 'Object was not initialized yet'
MISSING_ERROR_OR_MESSAGE_MESSAGE = 'You must provide either an error or a message'


@util.dunder.repr('message')
class ReadinessError(Exception):
    """
    Base class for all custom errors.
    """
    default_message: str = ''

    def __init__(self, message: str | None = None):
        """
        Args:
            message: diagnostic message, falls back to :attr:`default_message`
        """
        self.message: str = self.default_message if message is None else message
        super().__init__(self.message)

    def __str__(self):
        return f"{type(self).__name__}: {self.message}"


class AlreadyInitializedError(ReadinessError):
    """
    Raised if an object is marked as initialized while it is already initialized.
    """
    default_message = ALREADY_INITIALIZED_MESSAGE


class NotInitializedYetError(ReadinessError):
    """
    Raised if an object that is not initialized should be marked as uninitialized or reinitialized.
    """
    default_message = NOT_INITIALIZED_YET_MESSAGE


class MissingErrorOrMessageError(ReadinessError):
    """
    Raised if neither an error nor a message is provided to mark an initialization as failed.
    """
    default_message = MISSING_ERROR_OR_MESSAGE_MESSAGE


__all__ = (
    'ReadinessError',
    'AlreadyInitializedError',
    'NotInitializedYetError',
    'MissingErrorOrMessageError',
    'ALREADY_INITIALIZED_MESSAGE',
    'NOT_INITIALIZED_YET_MESSAGE',
    'MISSING_ERROR_OR_MESSAGE_MESSAGE',
)
