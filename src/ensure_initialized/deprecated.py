"""
First generation of the readiness mixins, kept so existing code keeps working.

Warning:
    Use :class:`~ensure_initialized.mixins.EnsureInitializedMixin` and
    :class:`~ensure_initialized.mixins.EnsureInitializedResultMixin` instead.
"""
from __future__ import annotations

import warnings

from .mixins import EnsureInitializedMixin, EnsureInitializedResultMixin
from .signal import ReadinessSignal
from .util.typing import T


def _deprecated_signal(instance, replacement: type) -> ReadinessSignal:
    # warn once per instance, when the signal is created
    signal = instance.__dict__.get('_deprecated_readiness_signal')
    if signal is None:
        warnings.warn(
            f"{type(instance).__name__} uses a deprecated mixin, use {replacement.__qualname__} instead",
            DeprecationWarning,
            stacklevel=4,
        )
        signal = instance.__dict__['_deprecated_readiness_signal'] = ReadinessSignal(
            name=f"{type(instance).__name__}@{id(instance):x}"
        )
    return signal


class EnsureInitialized(EnsureInitializedMixin):
    """
    Deprecated, use :class:`~ensure_initialized.mixins.EnsureInitializedMixin`
    """

    @property
    def readiness_signal(self) -> ReadinessSignal[None]:
        return _deprecated_signal(self, EnsureInitializedMixin)


class EnsureInitializedResult(EnsureInitializedResultMixin[T]):
    """
    Deprecated, use :class:`~ensure_initialized.mixins.EnsureInitializedResultMixin`
    """

    @property
    def readiness_signal(self) -> ReadinessSignal[T]:
        return _deprecated_signal(self, EnsureInitializedResultMixin)


__all__ = (
    'EnsureInitialized',
    'EnsureInitializedResult',
)
