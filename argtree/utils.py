"""
Argtree utilities (internal helpers, carefully exposed)

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/"".

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated getters for clean tracebacks.

- view("attr")
  • Read-only property over a private backing field (self._attr); containers are
    returned as immutable snapshots (tuple/MappingProxyType/frozenset).

- sanitize_name / sanitize_descr
  • Registration-time validation shared by verbs and options. Failures raise
    ConfigError immediately, never at parse time.

Constants
- SHORT_PREFIX / LONG_PREFIX: spellings of "-c" and "--name".
- ESCAPE: the bare escape token.
- DESCR_LIMIT: the maximum length of any description.
"""
import functools
import re
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final

from .faults import ConfigError, FaultCode

SHORT_PREFIX = "-"
LONG_PREFIX = "--"
ESCAPE = LONG_PREFIX
DESCR_LIMIT = 100


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset" for friendly diagnostics.
    - Non-subclassable: this type is sealed; do not subclass.
    - Singleton per process: UnsetType() always yields the same instance.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in annotations (e.g., str | UnsetType).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        """
        Support reversed PEP 604 unions when UnsetType appears on the right.
        """
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

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Falsey values like None, 0 or "" are preserved as-is; only Unset is replaced.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    - Function form: rename(callable, name) -> callable
    - Decorator form: rename(name) -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                """Decorator wrapper that applies the new name to the target callable."""
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def view(name, /):
    """
    Define a read-only property over the backing attribute "_{name}".

    Containers are returned as immutable snapshots so the public API cannot
    mutate the tree behind the builder's back:
    - Sequence (non-str) → tuple
    - Mapping           → MappingProxyType
    - Set               → frozenset
    - other types       → returned as-is
    """
    if not isinstance(name, str):
        raise TypeError("view() argument must be a string")

    @rename(name)
    def getter(self):
        value = getattr(self, "_" + name)
        if isinstance(value, Sequence) and not isinstance(value, str):
            return tuple(value)
        if isinstance(value, Mapping):
            return MappingProxyType(value)
        if isinstance(value, Set):
            return frozenset(value)
        return value

    return property(getter)


_CHARSET = re.compile(r"[A-Za-z0-9_-]+")


def sanitize_name(kind, name, /, *, minimum=1, maximum):
    """
    Validate a verb or option name at registration time.

    Rules
    - must be a string (TypeError otherwise).
    - length within [minimum, maximum].
    - must not be the escape token nor start with the option prefix.
    - charset limited to ASCII letters, digits, '_' and '-'.

    Returns the name unchanged so callers can assign in one step.
    """
    if not isinstance(name, str):
        raise TypeError(f"{kind} name must be a string")
    if not minimum <= len(name) <= maximum:
        raise ConfigError(
            f"{kind} name {name!r} must be between {minimum} and {maximum} characters long",
            code=FaultCode.INVALID_NAME,
            hint=f"pick a {kind} name of at most {maximum} characters",
        )
    if name == ESCAPE or name.startswith(SHORT_PREFIX):
        raise ConfigError(
            f"{kind} name {name!r} cannot start with {SHORT_PREFIX!r}",
            code=FaultCode.INVALID_NAME,
            hint="the prefix is added automatically on the command line",
        )
    if not _CHARSET.fullmatch(name):
        invalid = next(char for char in name if not _CHARSET.fullmatch(char))
        raise ConfigError(
            f"{kind} name {name!r} contains an invalid character: {invalid!r}",
            code=FaultCode.INVALID_NAME,
            hint="use only letters, digits, '_' and '-'",
        )
    return name


def sanitize_descr(kind, descr, /):
    """
    Validate a description (at most DESCR_LIMIT characters, may be empty).
    """
    if not isinstance(descr, str):
        raise TypeError(f"{kind} description must be a string")
    if len(descr) > DESCR_LIMIT:
        raise ConfigError(
            f"{kind} description is longer than {DESCR_LIMIT} characters",
            code=FaultCode.INVALID_DESCRIPTION,
            hint="move long explanations into the help header or footer",
        )
    return descr


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Use Unset as a default when None is a valid, user-meaningful value but you still
need to distinguish “no input” from “explicitly passed None”.
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "view",
    "sanitize_name",
    "sanitize_descr",

    # Types
    "UnsetType",

    # Constants
    "Unset",
    "SHORT_PREFIX",
    "LONG_PREFIX",
    "ESCAPE",
    "DESCR_LIMIT",
)
