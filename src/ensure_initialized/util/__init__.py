from __future__ import annotations

from codestare.async_utils import (
    CoroutineWrapper,
    TaskNursery,
)

from .collections import merge_dicts
from .functools import dunder
from .. import constants

__DEBUG__ = constants.GLOBAL_CONFIG.DEBUG


def debug(enabled: bool | None = None) -> bool:
    """
    Call without arguments to get current debug state, pass truthy value to set debug mode.

    Args:
        enabled: If passed, turns debug mode on or off

    Returns:
        debug value
    """
    global __DEBUG__
    if enabled is not None:
        __DEBUG__ = bool(enabled)

    return __DEBUG__


__all__ = (
    "CoroutineWrapper",
    "TaskNursery",
    "merge_dicts",
    "dunder",
    "debug",
)
