from __future__ import annotations

import pytest

from ensure_initialized import EnsureInitializedMixin, EnsureInitializedResultMixin
from ensure_initialized.pytest import *  # noqa: F401,F403


class InitializableObject(EnsureInitializedMixin):
    """
    Host without initialization logic, tests drive the state changes
    """


class ResultInitializableObject(EnsureInitializedResultMixin[int]):
    """
    Host without initialization logic, tests drive the state changes
    """


@pytest.fixture
def standard_object() -> InitializableObject:
    return InitializableObject()


@pytest.fixture
def result_object() -> ResultInitializableObject:
    return ResultInitializableObject()
