"""
Argtree faults (configuration, parse and validation errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing fault.
  Codes are grouped by domain (configuration, routing, options, positionals,
  validation, delegated) so logs and searches stay predictable.
- ParserException: base type that carries a message plus context options and
  knows how to render itself in a friendly, lowercased, actionable way.
- ConfigError / ParseError / ValidationError / ActionError: the taxonomy the
  builders and the parse engine raise.
- trigger(): central entry point to surface a fault (raise it, or print it
  when running in shell mode).

Semantics
- ConfigError is raised at registration time and is a programmer error: it
  also derives from ValueError so plain ``except ValueError`` keeps working.
- ParseError and ValidationError are raised at most once per parse call and
  abort that call.
- Help and verb-tree requests are never faults; the parser reports them as
  distinct outcomes.

Integration
- The parser collects context (option, verb, token, index, criteria) as keyword
  options on the fault and calls trigger(fault, **ctx) in shell mode.
- Outside shell mode faults are simply raised.
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - configuration (101xx)
      • INVALID_NAME, INVALID_DESCRIPTION, RESERVED_NAME, DUPLICATE_NAME,
        DUPLICATE_ENTRY, ALREADY_ATTACHED, VERB_CYCLE, INVALID_RANGE,
        ACTION_REBOUND
    - routing (111xx)
      • UNKNOWN_VERB
    - options (1111x)
      • UNKNOWN_OPTION, DUPLICATE_OPTION, MISSING_VALUE,
        MISSING_REQUIRED_OPTION, DANGLING_ESCAPE
    - positionals (1112x)
      • POSITIONAL_BEFORE_OPTIONS
    - validation (1113x)
      • FAILED_CRITERION
    - delegated (1114x)
      • DELEGATED_ERROR

    normalize() lets the host remap codes to its own labels.
    """
    # --- configuration errors (10xxx) ---
    INVALID_NAME                = 10101
    INVALID_DESCRIPTION         = 10102
    RESERVED_NAME               = 10103
    DUPLICATE_NAME              = 10104
    DUPLICATE_ENTRY             = 10105
    ALREADY_ATTACHED            = 10106
    VERB_CYCLE                  = 10107
    INVALID_RANGE               = 10108
    ACTION_REBOUND              = 10109

    # --- routing errors (11xxx) ---
    UNKNOWN_VERB                = 11101

    # --- option errors (11xxx) ---
    UNKNOWN_OPTION              = 11111
    DUPLICATE_OPTION            = 11112
    MISSING_VALUE               = 11113
    MISSING_REQUIRED_OPTION     = 11114
    DANGLING_ESCAPE             = 11115

    # --- positional errors (11xxx) ---
    POSITIONAL_BEFORE_OPTIONS   = 11121

    # --- validation errors (11xxx) ---
    FAILED_CRITERION            = 11131

    # --- delegated errors (11xxx) ---
    DELEGATED_ERROR             = 11141

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ParserException(Exception):
    """
    base fault: a message plus read-only context options.

    well-known options
    - code: FaultCode overriding the class default.
    - title: short headline overriding the class default.
    - hint: one actionable sentence shown under the message.
    - criteria: descriptions of the offending option's criteria.
    - prog, colorful, fancy, shell, console: rendering context merged in by trigger().
    """
    code = FaultCode.DELEGATED_ERROR
    title = "parser error"

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError(f"{type(self).__name__} message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)
        if "code" in options:
            self.code = options["code"]
        if "title" in options:
            self.title = options["title"]

    @property
    def hint(self):
        return self.options.get("hint")

    @property
    def criteria(self):
        return tuple(self.options.get("criteria", ()))

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "criteria-label": "bold #FFD600",  # amber criteria headline
            "criterion": "#D1D5DB",
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        prog = text(self.options.get("prog") or getattr(main, "__prog__", "argtree"), styler("prog-name"))

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(self.code.normalize(), styler("code")),
            " | ",
            text(self.title.title(), styler("error-title")),
            " ]"
        )
        renders = [text(self.message, styler("error-message"))]

        if self.criteria:
            criteria = Text()
            criteria.append(text("criteria", styler("criteria-label"))).append(":")
            for criterion in self.criteria:
                criteria.append("\n").append("    ").append(text(criterion, styler("criterion")))
            renders.append(criteria)

        if self.hint:
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(self.hint, styler("hint"))))

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        self.options.get("console", console).print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ConfigError(ParserException, ValueError):
    code = FaultCode.INVALID_NAME
    title = "invalid configuration"


class ParseError(ParserException):
    title = "parse error"


class UnknownVerbError(ParseError):
    code = FaultCode.UNKNOWN_VERB
    title = "unknown verb"


class UnknownOptionError(ParseError):
    code = FaultCode.UNKNOWN_OPTION
    title = "unknown option"


class DuplicateOptionError(ParseError):
    code = FaultCode.DUPLICATE_OPTION
    title = "duplicated option"


class MissingValueError(ParseError):
    code = FaultCode.MISSING_VALUE
    title = "missing value"


class MissingRequiredOptionError(ParseError):
    code = FaultCode.MISSING_REQUIRED_OPTION
    title = "missing required option"


class PositionalBeforeOptionsError(ParseError):
    code = FaultCode.POSITIONAL_BEFORE_OPTIONS
    title = "unexpected positional"


class DanglingEscapeError(ParseError):
    code = FaultCode.DANGLING_ESCAPE
    title = "dangling escape"


class ValidationError(ParserException):
    code = FaultCode.FAILED_CRITERION
    title = "invalid value"

    @property
    def reason(self):
        return self.options.get("reason", self.message)


class ActionError(ParserException):
    code = FaultCode.DELEGATED_ERROR
    title = "delegated action error"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ParserException).
    - options are merged into a copy of the fault via __replace__(**options)
      before triggering.
    - with shell=True the fault is printed through rich; otherwise it is raised.

    typical options
    - prog, shell, fancy, colorful, console, hint and any other context the
      renderer may want to show (option, verb, token, index, criteria).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "FaultCode",
    "ParserException",
    "ConfigError",
    "ParseError",
    "UnknownVerbError",
    "UnknownOptionError",
    "DuplicateOptionError",
    "MissingValueError",
    "MissingRequiredOptionError",
    "PositionalBeforeOptionsError",
    "DanglingEscapeError",
    "ValidationError",
    "ActionError",
    "trigger",
)
