"""
You may import common objects directly from here
"""

from .constants import (
    ReadinessConfig,
    GLOBAL_CONFIG,
)
from .errors import (
    ReadinessError,
    AlreadyInitializedError,
    NotInitializedYetError,
    MissingErrorOrMessageError,
)
from .logging import (
    logging_setup,
    parse_args,
)
from .util import debug
from .completion import Completion
from .events import (
    Broadcast,
    Subscription,
)
from .signal import (
    ReadinessSignal,
    ReadinessState,
)
from .mixins import (
    EnsureInitializedMixin,
    EnsureInitializedResultMixin,
)

__all__ = (
    'GLOBAL_CONFIG',
    'ReadinessConfig',
    'ReadinessError',
    'AlreadyInitializedError',
    'NotInitializedYetError',
    'MissingErrorOrMessageError',
    'Completion',
    'Broadcast',
    'Subscription',
    'ReadinessSignal',
    'ReadinessState',
    'EnsureInitializedMixin',
    'EnsureInitializedResultMixin',
    'logging_setup',
    'parse_args',
    'debug',
)
