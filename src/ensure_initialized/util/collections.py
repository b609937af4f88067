from __future__ import annotations

import typing
from operator import add


def merge_dicts(base: typing.Dict, merge: typing.Dict, op: typing.Callable = add) -> typing.Dict:
    """
    Recursively merge two dictionaries, values of keys present in both are combined with ``op``
    (nested dictionaries are merged again).

    Example:

        >>> from ensure_initialized.util import merge_dicts
        >>> merge_dicts({'a': {'b': [1]}, 'c': 1}, {'a': {'b': [2]}, 'd': 2})
        {'a': {'b': [1, 2]}, 'c': 1, 'd': 2}

    """
    def merge_op(left, right):
        if isinstance(left, dict) and isinstance(right, dict):
            return merge_dicts(left, right, op=op)
        else:
            return op(left, right)

    return {**base, **merge, **{k: merge_op(base[k], merge[k]) for k in base if k in merge}}
