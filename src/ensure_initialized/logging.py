"""
Logging configuration for scripts using the package, e.g. the examples.

The package itself only creates loggers (``logging.getLogger(__name__)``), the handlers and formats come from a
:func:`logging.config.dictConfig` configuration which is applied by :data:`logging_setup`. The default
configuration is shipped as ``util/logging_config.yaml``.
"""
from __future__ import annotations

import argparse
import importlib.resources
import logging.config
import typing
from typing import (
    Dict,
    List,
)

import yaml

from . import constants, util

__config__ = yaml.safe_load(importlib.resources.files(util).joinpath('logging_config.yaml').read_text())

VERBOSE = logging.DEBUG - 5
"""
Log level below ``DEBUG``, used for single events passing through the streams
"""
logging.addLevelName(VERBOSE, 'VERBOSE')


def _prefer_update(left, right):
    # lists (e.g. handlers) are extended, everything else is replaced
    if isinstance(left, list) and isinstance(right, list):
        return left + right
    return right


class _log_config(typing.NamedTuple):
    config: Dict
    level: int


class _logging_setup:
    """
    A stack of logging configurations.

    :meth:`.change` registers a configuration, using the setup as a context manager applies the topmost one.
    Changes registered inside the context are stacked on top and removed again when their own context exits.
    """

    def __init__(self, base_config: Dict, level: int = logging.INFO):
        self._configs: List[_log_config] = [_log_config(config=base_config, level=level)]
        self._applied = False

    @property
    def effective_config(self) -> _log_config:
        return self._configs[-1]

    def change(self, config: Dict | None = None, verbosity: int | None = None) -> _logging_setup:
        """
        Register a changed logging config, it gets applied when the setup is used as context manager.

        Args:
            config: dictionary for :func:`logging.config.dictConfig`, merged into the effective config if it sets
                ``incremental: true``
            verbosity: level of the root logger

        Returns:
            reference to `self`, to use the setup as context manager

        Raises:
            ValueError: if neither ``config`` nor ``verbosity`` is passed
        """
        if config is None and verbosity is None:
            raise ValueError("All arguments are None, can't apply change to logging.")

        current = self.effective_config

        if not config:
            config = current.config
        elif config.get('incremental', False):
            # the merged config is complete, so the logging framework must not treat it as incremental
            config = {**util.merge_dicts(current.config, config, op=_prefer_update), 'incremental': False}

        changed = _log_config(config={**config, 'version': 1},
                              level=current.level if verbosity is None else verbosity)

        if self._applied:
            self._configs.append(changed)
        else:
            self._configs = [changed]

        return self

    def _apply(self):
        self._applied = True
        logging.config.dictConfig(self.effective_config.config)
        logging.captureWarnings(True)
        logging.getLogger().setLevel(self.effective_config.level)

    def __enter__(self):
        self._apply()
        return self

    def __exit__(self, *exc_info):
        if len(self._configs) > 1:
            self._configs.pop()
            self._apply()
        else:
            self._applied = False


logging_setup = _logging_setup(base_config=__config__, level=logging.INFO)
"""
Shared logging setup of the package. Use :meth:`~_logging_setup.change` to register a different config
and the setup as context manager to apply it.
"""


def parse_args(parser: argparse.ArgumentParser | None = None,
               args: List[str] | None = None) -> argparse.Namespace:
    """
    Convenience function to parse command line arguments, e.g. in example scripts.
    Adds the following command line arguments to the parser:

        *   ``--verbose``, ``-v`` -- ``-v`` logs at ``DEBUG``, ``-vv`` at :data:`VERBOSE` level
        *   ``--debug`` -- sets the package to :func:`~ensure_initialized.util.debug` mode
        *   ``--log-config`` -- takes a `yaml` file containing a dictionary for :func:`logging.config.dictConfig`
            configuration, falls back to :attr:`ensure_initialized.constants.ReadinessConfig.LOG_CONFIG_PATH` and
            then to the config shipped with the package (``util/logging_config.yaml``)

    The parsed config is registered with :data:`logging_setup`, which still needs to be applied.

    Example:

        ::

            from ensure_initialized.logging import parse_args, logging_setup
            import argparse

            parser = argparse.ArgumentParser()
            parser.add_argument('--delay', type=float, default=1.)
            args = parse_args(parser=parser)

            with logging_setup:
                ...

    Args:
        parser: if no parser is passed, a new one is created  -- `optional`
        args: arguments to parse, defaults to :data:`sys.argv` -- `optional`

    Returns:
        parsed arguments
    """
    parser = parser or argparse.ArgumentParser()

    parser.add_argument('--verbose', '-v', action='count', default=0)
    parser.add_argument('--debug', action='store_true', default=False)
    parser.add_argument('--log-config', action='store', default=constants.GLOBAL_CONFIG.LOG_CONFIG_PATH)
    parsed = parser.parse_args(args)

    verbosity = (logging.INFO, logging.DEBUG, VERBOSE)[min(parsed.verbose, 2)]
    util.debug(parsed.debug or util.debug())

    if util.debug():
        verbosity = min(logging.DEBUG, verbosity)

    if parsed.log_config:
        with open(parsed.log_config) as conf:
            parsed.log_config = yaml.safe_load(conf)
    else:
        parsed.log_config = __config__

    logging_setup.change(config=parsed.log_config, verbosity=verbosity)

    return parsed


__all__ = (
    'VERBOSE',
    'logging_setup',
    'parse_args',
)
