from __future__ import annotations

import functools
import typing


class dunder:
    """
    the following decorators can be used to create dunder methods on classes.

    Note:

        Why not use `attrs <https://www.attrs.org/>`_? Most classes in this package wrap mutable state
        (futures, queues, tasks) so they are not useful as dataclasses, nonetheless they might have
        very easy `dunder` methods
    """

    @classmethod
    def repr(cls, *attrs: str) -> typing.Callable[[type], type]:
        """
        Creates a __repr__ method on the class, that is basically ::

            def __repr__(self):
                info = {attr: getattr(self, attr, None) for attr in attrs}
                return f"<{module}.{self.__class__.__name__} with {attr}={value!r}, ...>"

        Example:

            >>> from ensure_initialized import util
            >>> @util.dunder.repr('value')
            ... class Foo:
            ...     value = 1
            ...
            >>> Foo()
            <__main__.Foo with value=1>

        Args:
            *attrs: the names of attributes that should be part of the __repr__

        Returns:
            a class decorator
        """

        def __repr__(instance):
            info = {attr: getattr(instance, attr, None) for attr in attrs}
            return (f"<{instance.__class__.__module__}.{instance.__class__.__name__} "
                    f"with {', '.join('{}={!r}'.format(k, v) for k, v in info.items())}>")

        def decorator(kls):
            kls.__repr__ = functools.wraps(kls.__repr__)(__repr__)
            return kls

        return decorator


__all__ = (
    'dunder',
)
