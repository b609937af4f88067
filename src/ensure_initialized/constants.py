"""
Global variables are problematic, but global constants are a useful feature especially as fallback for
configuration options.

Warning:

    Keep in mind that assignments to global variables are done when the module is first imported so to make sure
    to have the "correct" version of the constants defined in this module, import the module, not
    the individual names

    Good:
        >>> from ensure_initialized import constants
        >>> config = constants.GLOBAL_CONFIG

    Bad:
        >>> from ensure_initialized.constants import GLOBAL_CONFIG
"""

from __future__ import annotations

import dataclasses
import os

DEBUG_ENV = 'ENSURE_INITIALIZED_DEBUG'
"""
Setting this environment variable to a truthy value (``1``, ``true``, ``yes``, ``on``) affects :attr:`default_debug`
"""
LOG_CONFIG_ENV = 'ENSURE_INITIALIZED_LOG_CONFIG'
"""
Setting this environment variable affects :attr:`default_log_config_path`
"""

_TRUTHY = ('1', 'true', 'yes', 'on')

default_debug: bool = os.getenv(DEBUG_ENV, '').strip().lower() in _TRUTHY
"""
Global default for debug mode. Read from :attr:`DEBUG_ENV` environment variable, fallback ``False``

:meta hide-value:
"""
default_log_config_path: str | None = os.getenv(LOG_CONFIG_ENV) or None
"""
Global default for a `yaml` file with a logging config. Read from :attr:`LOG_CONFIG_ENV` environment variable,
fallback :obj:`None` i.e. use the config shipped with the package

:meta hide-value:
"""


@dataclasses.dataclass
class ReadinessConfig:
    """
    Config options for the readiness primitives.

    Note:
        Uses the global attributes from this module as default

            *   :attr:`.DEBUG` = :attr:`default_debug`
            *   :attr:`.LOG_CONFIG_PATH` = :attr:`default_log_config_path`

        i.e. assigning to those values does not change the global defaults from this module

        >>> from ensure_initialized import constants
        >>> config = constants.ReadinessConfig()
        >>> config.DEBUG = not constants.default_debug
        >>> config.DEBUG == constants.default_debug
        False

    """

    DEBUG: bool = default_debug
    """
    initial value of :func:`ensure_initialized.util.debug`. In debug mode questionable (but allowed)
    usage of the readiness primitives, e.g. passing an `error` and a `message` to mark a failed initialization,
    issues warnings.
    """
    LOG_CONFIG_PATH: str | None = default_log_config_path
    """
    path to a `yaml` file containing a dictionary for :func:`logging.config.dictConfig`, used by
    :func:`ensure_initialized.logging.parse_args` if no ``--log-config`` is passed on the command line

    :meta hide-value:
    """


GLOBAL_CONFIG = ReadinessConfig()
"""
This is a global :class:`ReadinessConfig` object.
Use this global config to share configuration changes to values in a global scope.

:meta hide-value:
"""

__all__ = [
    "GLOBAL_CONFIG",
    "DEBUG_ENV",
    "LOG_CONFIG_ENV",
    "ReadinessConfig",
    "default_debug",
    "default_log_config_path",
]
