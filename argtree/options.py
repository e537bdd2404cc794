"""
Argtree option declarations.

An Option is a declared flag owned by exactly one Verb:
- name: the full name, spelled "--name" on the command line (2 to 15 characters,
  letters/digits/'_'/'-', no leading '-', 'help' and 'verbs' are reserved).
- short: optional single character, spelled "-c" ('?' and '-' are reserved).
- descr: short help text (at most 100 characters).
- expects_value: the token following the flag is bound as its value.
- required: the option must be present in every successful parse of its verb.
- value_required: when present, the bound value must not be empty.

Runtime state (reset before each parse)
- present: whether the flag appeared in the last parse.
- value: the bound string ("" when unset; always "" while not present).

Hooks
- criteria, attached with add_criterion(), run in registration order on a
  non-empty value after parsing.
- action, bound with action(), runs after validation iff the option is present.

Quick example
    >>> from argtree import Option, string_enum
    >>> fmt = Option("format", "f", "output format", expects_value=True, required=True)
    >>> fmt = fmt.add_criterion(string_enum("json", "yaml"))
    >>> @fmt.action
    ... def announce(option):
    ...     print("format:", option.value)
"""
from .criteria import Criterion
from .faults import ConfigError, FaultCode
from .utils import SHORT_PREFIX, LONG_PREFIX, sanitize_name, sanitize_descr, view

RESERVED_NAMES = frozenset({"help", "verbs"})
RESERVED_SHORTS = frozenset({"?", "-"})

NAME_MINIMUM = 2
NAME_MAXIMUM = 15


class Option:
    """
    Named flag declaration, optionally carrying a value.

    Equality is identity: two options with the same spelling on different
    verbs are different options.
    """

    def __init__(
            self,
            name,
            short=None,
            descr="",
            expects_value=False,
            required=False,
            value_required=False
    ):
        self._name = sanitize_name("option", name, minimum=NAME_MINIMUM, maximum=NAME_MAXIMUM)
        if name in RESERVED_NAMES:
            raise ConfigError(
                f"option name {name!r} is reserved",
                code=FaultCode.RESERVED_NAME,
                hint="'--help', '--verbs' and '-?' are provided by the parser",
            )

        if short is not None:
            if not isinstance(short, str):
                raise TypeError("option short name must be a single character string")
            if len(short) != 1 or short.isspace():
                raise ConfigError(
                    f"option short name {short!r} must be a single character",
                    code=FaultCode.INVALID_NAME,
                )
            if short in RESERVED_SHORTS:
                raise ConfigError(
                    f"option short name {short!r} is reserved",
                    code=FaultCode.RESERVED_NAME,
                    hint="'-?' and '--' are provided by the parser",
                )
        self._short = short
        self._descr = sanitize_descr("option", descr)
        self._expects_value = bool(expects_value)
        self._required = bool(required)
        self._value_required = bool(value_required)
        self._criteria = []
        self._action = None
        self._parent = None
        self.present = False
        self.value = ""

    name = view("name")
    short = view("short")
    descr = view("descr")
    expects_value = view("expects_value")
    required = view("required")
    value_required = view("value_required")
    parent = view("parent")
    criteria = view("criteria")

    @property
    def spellings(self):
        """Command-line spellings, long first: ("--name", "-n")."""
        if self._short is None:
            return (LONG_PREFIX + self._name,)
        return LONG_PREFIX + self._name, SHORT_PREFIX + self._short

    @property
    def label(self):
        """Spelling used in faults: "-n / --name" or "--name"."""
        return " / ".join(reversed(self.spellings))

    def add_criterion(self, criterion, /):
        """
        Attach a criterion; it runs on the bound value after parsing.

        Raises
        - TypeError: when criterion is not a Criterion.
        - ConfigError: when this exact criterion instance is already attached
          (to this option or to any other).
        """
        if not isinstance(criterion, Criterion):
            raise TypeError("add_criterion() argument must be a criterion")
        if criterion.option is not None:
            raise ConfigError(
                "the same criterion cannot be added twice: %r" % criterion,
                code=FaultCode.ALREADY_ATTACHED,
                hint="create a new criterion for each option",
            )
        criterion._option = self
        self._criteria.append(criterion)
        return self

    def action(self, action, /):
        """
        Bind the callback run after validation iff this option is present.

        The callback receives the option. Usable as a decorator: @option.action
        """
        if not callable(action):
            raise TypeError("option action must be callable")
        if self._action is not None:
            raise ConfigError(
                f"option {self.label} already has an action",
                code=FaultCode.ACTION_REBOUND,
            )
        self._action = action
        return action

    def check(self):
        """Run every criterion, in registration order, on the bound value."""
        for criterion in self._criteria:
            criterion.check(self.value)

    def run(self):
        if self._action is not None and self.present:
            self._action(self)

    def reset(self):
        self.present = False
        self.value = ""

    def __repr__(self):
        return "option(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def __rich_repr__(self):
        yield "name", self._name
        yield "short", self._short
        yield "descr", self._descr
        yield "expects_value", self._expects_value
        yield "required", self._required
        yield "value_required", self._value_required
        yield "present", self.present
        yield "value", self.value


def option(*args, **kwargs):
    """
    Factory for Option, mirroring its constructor.

        option("format", "f", "output format", expects_value=True, required=True)
    """
    return Option(*args, **kwargs)


__all__ = (
    "Option",
    "option",
)
