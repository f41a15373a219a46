"""
sedcli utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the command model, the parser and the
  reporters. Stable enough to import, but written for the package's own use.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent "value not provided" without conflating with None.
  • Falsy (bool(Unset) is False), printable as "Unset", and non-subclassable.
- nullify(object, default)
  • Replace Unset with a default while passing every other object through.
- rename(x, name)
  • Give generated callables stable names for tracebacks and reprs.
- StorageGuard / view(name)
  • Backing storage under '-name' attributes, readable only through read-only views,
    writable only during construction.
- styles(defaults)
  • Merge a palette with the host's optional __styles__ mapping from __main__.
"""
import functools
from collections import defaultdict
from collections.abc import Sequence, Mapping, Set
from contextlib import contextmanager
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    internal singleton sentinel representing an "unset" value.

    behavior
    - truthiness: bool(Unset) is False.
    - identity: Unset is a process-wide singleton (see __new__).
    - display: repr(Unset) -> "Unset".
    - final: subclassing is forbidden to preserve semantics.
    """

    def __or__(self, other, /):
        """
        support UnsetType | T in isinstance checks (internal convenience only).
        """
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()


def nullify(object, default=None, /):
    """
    return `default` when `object` is Unset; otherwise return `object` unchanged.
    """
    return default if object is Unset else object


def rename(x, /, name=None):
    """
    set a stable __name__/__qualname__ on a callable, or return a curried renamer.

    - callable → renamed in place and returned.
    - str      → a partial that will rename a future callable to that string.
    """
    if isinstance(x, str):
        return functools.partial(rename, name=x)
    if not isinstance(name, str):
        raise TypeError("callable name must be a string")
    x.__qualname__ = name
    x.__name__ = name
    return x


class StorageGuard:
    """
    internal mixin to protect backing storage and control mutation.

    rules
    - any attribute whose name starts with '-' is backing storage and:
      • cannot be read directly (AttributeError),
      • cannot be written outside the build phase.

    build phase
    - __new__ is a context manager; backing fields may be written inside the block:
        with super().__new__(cls) as self:
            setattr(self, "-field", value)
    - afterwards, only methods that re-enter the build phase (see _rebuild) may mutate.
    """
    __slots__ = ("__building",)

    @contextmanager
    def __new__(cls):
        self = super().__new__(cls)
        self.__building = True
        try:
            yield self
        finally:
            self.__building = False

    @contextmanager
    def _rebuild(self):
        self.__building = True
        try:
            yield self
        finally:
            self.__building = False

    def __getattribute__(self, name, /):
        if isinstance(name, str) and name.startswith("-"):
            raise AttributeError("internal storage is not accessible")
        return object.__getattribute__(self, name)

    def __setattr__(self, name, value, /):
        if isinstance(name, str) and name.startswith("-"):
            if not self.__building:
                raise AttributeError("internal storage is read-only")
        return object.__setattr__(self, name, value)


def view(name):
    """
    build a read-only property over the backing field '-<name>'.

    - Sequence (non-str) → tuple
    - Mapping           → MappingProxyType
    - Set               → frozenset
    - other types       → returned as-is
    """

    @rename(name)
    def getter(self):
        value = object.__getattribute__(self, "-" + name)
        if isinstance(value, Sequence) and not isinstance(value, str):
            return tuple(value)
        if isinstance(value, Mapping):
            return MappingProxyType(value)
        if isinstance(value, Set):
            return frozenset(value)
        return value

    return property(getter)


def styles(defaults, /):
    """
    merge a default palette with the host's __styles__ mapping (if any).

    the host application may define __styles__ in __main__ to override any key;
    unknown keys resolve to an empty style.
    """
    return defaultdict(str, dict(defaults) | getattr(__import__("__main__"), "__styles__", {}))


__all__ = (
    "UnsetType",
    "Unset",
    "nullify",
    "rename",
    "StorageGuard",
    "view",
    "styles",
)
