"""
Switchboard internal helpers.

- Unset: the "argument omitted" sentinel used by every constructor, so that
  None stays available as a real value (Cell(None, type=str), no callback, ...).
- coalesce(): turns Unset into a default, leaving None/0/"" alone.
- rename(): gives generated functions (decorator wrappers, metaclass reprs)
  readable names in tracebacks and reprs.
- mirror(): read-only property over a "_<name>" backing field; list, dict and
  set values come out as tuple, mappingproxy and frozenset snapshots.
"""
import builtins
import functools
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Type of the Unset singleton.

    Unset is falsy, prints as "Unset" and can take part in isinstance unions
    (isinstance(value, str | Unset)). The type cannot be subclassed and every
    call returns the same instance.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __init_subclass__(cls, **options):
        raise TypeError("UnsetType cannot be subclassed")

    def __or__(self, other, /):
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"


def coalesce(object, default=None, /):
    """
    Return object, or default when object is Unset.
    """
    return default if object is Unset else object


def rename(*parameters):
    """
    Rename a function in place, or build a decorator that does.

        rename(function, "name") -> function
        @rename("name")
    """
    match parameters:
        case (function, str(name)):
            if not builtins.callable(function):
                raise TypeError("rename() expects a callable")
            function.__name__ = function.__qualname__ = name
            return function
        case (str(name),):
            def decorator(function):
                return rename(function, name)
            return decorator
        case _:
            raise TypeError("rename() expects (function, name) or (name,)")


def _freeze(object):
    # snapshot containers so callers cannot mutate internal state
    if isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(object)
    if isinstance(object, Mapping):
        return MappingProxyType(dict(object))
    if isinstance(object, Set):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Read-only property returning a snapshot of self._<name>.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() expects an attribute name")

    def getter(self):
        return _freeze(getattr(self, "_" + name))

    getter.__name__ = getter.__qualname__ = name
    return property(getter)


Unset = UnsetType()


__all__ = (
    "coalesce",
    "rename",
    "mirror",
    "UnsetType",
    "Unset",
)
