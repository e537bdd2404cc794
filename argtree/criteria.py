"""
Argtree test criteria: pluggable validators for bound option values.

Variants (closed set)
- TypeCheck(kind): the value must be an "int", a "double" or any "string".
- NumberSet: the value must be one of a configured set of integers.
- NumberRangeSet: the value must equal a configured integer or fall within a
  configured inclusive [start, end] range.
- StringEnum(match_case): the value must be one of the configured strings
  (case-folded when match_case is False; an empty set accepts everything).
- CustomPredicate(message, descr, predicate): the predicate must accept the value.

Contract
- describe() -> str: a human-readable rule summary for help and faults.
- check(value) -> None: raises ValidationError with a reason on failure.
- Both are dispatched by a single match over the variants; the set is sealed,
  so subclassing outside this module is rejected.

Configuration
- Entries are validated when they are added: the same number, range or string
  added twice is a ConfigError, raised immediately and never deferred to parse time.
- A criterion is bound to exactly one option (see Option.add_criterion).

Quick example
    >>> from argtree import number_range_set
    >>> criterion = number_range_set(7).add_range(10, 20)
    >>> criterion.describe()
    'options: 7, 10-20'
    >>> criterion.check("15")
"""
import re

from .faults import ConfigError, FaultCode, ValidationError
from .utils import sanitize_descr

_INTEGER = re.compile(r"[+-]?[0-9]+")
_DOUBLE = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?")

_KINDS = {
    "int": "int",
    "double": "double",
    "string": "string",
    int: "int",
    float: "double",
    str: "string",
}


def _integer(value):
    """parse a plain ASCII decimal integer, None when the value is not one."""
    if _INTEGER.fullmatch(value):
        return int(value)
    return None


class Criterion:
    """
    Base of the criterion variants.

    The bound option (if any) is kept so faults can name it and list all of
    its criteria; the runtime value itself is never stored here.
    """

    def __init_subclass__(cls, **options):
        if cls.__module__ != __name__:
            raise TypeError(f"type {Criterion.__name__!r} is not an acceptable base type")
        super().__init_subclass__(**options)

    def __init__(self):
        if type(self) is Criterion:
            raise TypeError("criterion cannot be instantiated directly, use one of its variants")
        self._option = None

    @property
    def option(self):
        return self._option

    def describe(self):
        match self:
            case TypeCheck(kind=kind):
                return f"type: {kind}"
            case NumberSet(numbers=numbers):
                return "options: " + (", ".join(map(str, numbers)) or "(none)")
            case NumberRangeSet(numbers=numbers, ranges=ranges):
                entries = [*map(str, numbers), *("%d-%d" % bounds for bounds in ranges)]
                return "options: " + (", ".join(entries) or "(none)")
            case StringEnum(possibilities=possibilities):
                return "options: " + (", ".join(possibilities) or "(any)")
            case CustomPredicate(descr=descr):
                return f"custom test: {descr}"
        raise RuntimeError("unexpected criterion")

    def check(self, value, /):
        if not isinstance(value, str):
            raise TypeError("criterion value must be a string")

        match self:
            case TypeCheck(kind="int"):
                if _integer(value) is None:
                    self._fail(value, "should be an int")
            case TypeCheck(kind="double"):
                if not _DOUBLE.fullmatch(value):
                    self._fail(value, "should be a double")
            case TypeCheck(kind="string"):
                pass
            case NumberSet(numbers=numbers):
                if (number := _integer(value)) is None:
                    self._fail(value, "failed to parse the number")
                if number not in numbers:
                    self._fail(value, "the chosen number is not allowed")
            case NumberRangeSet(numbers=numbers, ranges=ranges):
                if (number := _integer(value)) is None:
                    self._fail(value, "failed to parse the number")
                if number not in numbers and not any(start <= number <= end for start, end in ranges):
                    self._fail(value, "the chosen number was not in the correct range")
            case StringEnum(possibilities=possibilities, match_case=match_case):
                folded = value if match_case else value.lower()
                if possibilities and folded not in possibilities:
                    self._fail(value, "the chosen value was not found in the configured options: %s" % folded)
            case CustomPredicate(message=message, predicate=predicate):
                if not predicate(value):
                    self._fail(value, message)
            case _:
                raise RuntimeError("unexpected criterion")

    def _fail(self, value, reason):
        if self._option is None:
            label = None
            criteria = (self.describe(),)
        else:
            label = self._option.label
            criteria = tuple(criterion.describe() for criterion in self._option.criteria)
        raise ValidationError(
            f"{label}: {reason}" if label else reason,
            reason=reason,
            value=value,
            option=self._option,
            criterion=self,
            criteria=criteria,
            hint="pass a value that satisfies every listed criterion",
        )

    def __repr__(self):
        return f"{type(self).__name__.lower()}({self.describe()!r})"


class TypeCheck(Criterion):

    def __init__(self, kind, /):
        super().__init__()
        try:
            self._kind = _KINDS[kind]
        except (KeyError, TypeError):
            raise ConfigError(
                f"unknown type test {kind!r}",
                code=FaultCode.INVALID_NAME,
                hint="use one of 'int', 'double' or 'string'",
            ) from None

    @property
    def kind(self):
        return self._kind


class NumberSet(Criterion):

    def __init__(self, *numbers):
        super().__init__()
        self._numbers = []
        self.add(*numbers)

    @property
    def numbers(self):
        return tuple(self._numbers)

    def add(self, *numbers):
        for number in numbers:
            if not isinstance(number, int) or isinstance(number, bool):
                raise TypeError("number set entries must be integers")
            if number in self._numbers:
                raise ConfigError(
                    f"the same number cannot be added twice: {number}",
                    code=FaultCode.DUPLICATE_ENTRY,
                )
            self._numbers.append(number)
        return self


class NumberRangeSet(Criterion):

    def __init__(self, *numbers):
        super().__init__()
        self._numbers = []
        self._ranges = []
        self.add(*numbers)

    @property
    def numbers(self):
        return tuple(self._numbers)

    @property
    def ranges(self):
        return tuple(self._ranges)

    def add(self, *numbers):
        for number in numbers:
            if not isinstance(number, int) or isinstance(number, bool):
                raise TypeError("number range set entries must be integers")
            if number in self._numbers:
                raise ConfigError(
                    f"the same number cannot be added twice: {number}",
                    code=FaultCode.DUPLICATE_ENTRY,
                )
            self._numbers.append(number)
        return self

    def add_range(self, start, end, /):
        if any(not isinstance(bound, int) or isinstance(bound, bool) for bound in (start, end)):
            raise TypeError("number range bounds must be integers")
        if start > end:
            raise ConfigError(
                f"range start {start} is greater than its end {end}",
                code=FaultCode.INVALID_RANGE,
                hint="ranges are inclusive and written as (start, end)",
            )
        if (start, end) in self._ranges:
            raise ConfigError(
                f"the same range cannot be added twice: {start}-{end}",
                code=FaultCode.DUPLICATE_ENTRY,
            )
        self._ranges.append((start, end))
        return self


class StringEnum(Criterion):

    def __init__(self, *possibilities, match_case=False):
        super().__init__()
        self._match_case = bool(match_case)
        self._possibilities = []
        self.add(*possibilities)

    @property
    def match_case(self):
        return self._match_case

    @property
    def possibilities(self):
        return tuple(self._possibilities)

    def add(self, *possibilities):
        for possibility in possibilities:
            if not isinstance(possibility, str):
                raise TypeError("string enum entries must be strings")
            folded = possibility if self._match_case else possibility.lower()
            if folded in self._possibilities:
                raise ConfigError(
                    f"the same possibility cannot be added twice: {folded!r}",
                    code=FaultCode.DUPLICATE_ENTRY,
                )
            self._possibilities.append(folded)
        return self


class CustomPredicate(Criterion):

    def __init__(self, message, descr, predicate, /):
        super().__init__()
        if not isinstance(message, str):
            raise TypeError("custom test message must be a string")
        if not callable(predicate):
            raise TypeError("custom test predicate must be callable")
        self._message = message
        self._descr = sanitize_descr("custom test", descr)
        self._predicate = predicate

    @property
    def message(self):
        return self._message

    @property
    def descr(self):
        return self._descr

    @property
    def predicate(self):
        return self._predicate


def type_check(kind, /):
    """Build a TypeCheck for "int", "double" or "string" (or int/float/str)."""
    return TypeCheck(kind)


def number_set(*numbers):
    return NumberSet(*numbers)


def number_range_set(*numbers):
    """Build a NumberRangeSet; add inclusive ranges with .add_range(start, end)."""
    return NumberRangeSet(*numbers)


def string_enum(*possibilities, match_case=False):
    return StringEnum(*possibilities, match_case=match_case)


def custom(message, descr, predicate, /):
    """
    Build a CustomPredicate.

    - message: the reason reported when predicate(value) is falsy.
    - descr: the rule summary shown by describe() (at most 100 characters).
    - predicate: Callable[[str], bool].
    """
    return CustomPredicate(message, descr, predicate)


__all__ = (
    # Types
    "Criterion",
    "TypeCheck",
    "NumberSet",
    "NumberRangeSet",
    "StringEnum",
    "CustomPredicate",

    # Factories
    "type_check",
    "number_set",
    "number_range_set",
    "string_enum",
    "custom",
)
