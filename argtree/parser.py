"""
Argtree parse engine and session.

A Parser owns a root Verb. parse() runs the whole pipeline on one argument
vector and returns an Outcome:

1. resolve verbs: leading plain words select child verbs, starting at the root.
2. classify the remaining tokens (see argtree.tokens); a help request stops here.
3. match options of the selected verb, bind values and collect trailing words.
4. check required options, then run every criterion on the bound values.
5. dispatch actions: present verbs depth-first from the root, then the present
   options of the selected verb in registration order.

Faults are terminal for the call: the tree is reset so no partial bindings
remain. In shell mode the fault is printed through rich and Outcome.FAILED is
returned; otherwise it is raised.

Quick example
    >>> from argtree import Parser, Verb, Option, string_enum
    >>> parser = Parser("tool")
    >>> convert = Verb("convert", "convert between formats")
    >>> convert = convert.add_option(
    ...     Option("format", "f", expects_value=True, required=True).add_criterion(string_enum("json", "yaml"))
    ... )
    >>> parser = parser.add_verb(convert)
    >>> parser.parse(["convert", "-f", "json"])
    <Outcome.PARSED: 'parsed'>
    >>> parser.value("format")
    'json'
"""
import difflib
import enum
import logging
import os
import shlex
import sys
from collections.abc import Iterable

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from . import faults
from .faults import (
    ParserException,
    ActionError,
    UnknownVerbError,
    UnknownOptionError,
    DuplicateOptionError,
    MissingValueError,
    MissingRequiredOptionError,
    PositionalBeforeOptionsError,
    DanglingEscapeError,
    trigger,
)
from .render import render_help, render_verbs
from .tokens import Kind, Intent, tokenize
from .utils import Unset, coalesce, view, SHORT_PREFIX, LONG_PREFIX
from .verbs import Verb

logger = logging.getLogger(__name__)


class Outcome(enum.Enum):
    PARSED = "parsed"
    HELP = "help"
    VERBS = "verbs"
    FAILED = "failed"


def _tokens(args):
    """
    Normalize parse() input into a list of tokens.

    - Unset: read sys.argv[1:].
    - str: shell-like string, split with shlex.split.
    - Iterable[str]: used as is (empty strings are kept, they may be values).
    """
    if args is Unset:
        return sys.argv[1:]
    if isinstance(args, str):
        return shlex.split(args)
    if isinstance(args, Iterable):
        tokens = list(args)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parse() argument must be a string or an iterable of strings")
        return tokens
    raise TypeError("parse() argument must be a string or an iterable of strings")


def _spelling(name):
    """Map "format", "f", "--format" or "-f" to the command-line spelling."""
    if not isinstance(name, str):
        raise TypeError("option name must be a string")
    if name.startswith(SHORT_PREFIX):
        return name
    return (SHORT_PREFIX if len(name) == 1 else LONG_PREFIX) + name


class Parser:
    """
    Hierarchical argument parser: a verb tree plus the state of the last parse.

    Runtime flags
    - autohelp: an empty vector (or one naming only verbs) renders help.
    - shell: print faults through rich and return Outcome.FAILED instead of raising.
    - colorful: style help, tree and faults with the palette.
    - fancy: wrap help, tree and faults in a rich Panel.
    """

    def __init__(
            self,
            prog=Unset,
            header="",
            footer="",
            *,
            autohelp=True,
            shell=False,
            colorful=False,
            fancy=False,
            console=Unset
    ):
        main = __import__("__main__")
        prog = coalesce(prog, getattr(main, "__prog__", os.path.basename(sys.argv[0])))
        if not isinstance(prog, str):
            raise TypeError("parser prog must be a string")
        if not isinstance(header, str) or not isinstance(footer, str):
            raise TypeError("parser header and footer must be strings")

        self._prog = prog or "root"
        self._header = header
        self._footer = footer
        self._root = Verb("root")
        self._console = coalesce(console, Console())
        self._stderr = coalesce(console, faults.console)
        self.autohelp = bool(autohelp)
        self.shell = bool(shell)
        self.colorful = bool(colorful)
        self.fancy = bool(fancy)

        self._path = (self._root,)
        self._trailing = []
        self._outcome = None

    prog = view("prog")
    header = view("header")
    footer = view("footer")
    root = view("root")
    path = view("path")
    trailing = view("trailing")
    outcome = view("outcome")

    @property
    def selected(self):
        """The deepest verb matched by the last parse (the root before any parse)."""
        return self._path[-1]

    def add_option(self, option, /):
        """Attach an option to the root verb."""
        self._root.add_option(option)
        return self

    def add_verb(self, verb, /):
        """Attach a child verb to the root verb."""
        self._root.add_verb(verb)
        return self

    def reset(self):
        """Clear presence flags, values, trailing words and the selected path."""
        self._root.reset()
        self._path = (self._root,)
        self._trailing = []
        self._outcome = None

    def parse(self, args=Unset, /):
        """
        Parse an argument vector (program name excluded).

        Returns
        - Outcome.PARSED: bindings are queryable until the next parse/reset.
        - Outcome.HELP / Outcome.VERBS: help or the verb tree was printed.
        - Outcome.FAILED: only in shell mode, after the fault was printed.

        Raises
        - ParseError, ValidationError, ActionError: outside shell mode.
        - TypeError: when args is not a string or an iterable of strings.
        """
        tokens = _tokens(args)
        self.reset()
        try:
            self._outcome = self._parse(tokens)
        except ParserException as fault:
            self.reset()
            self._outcome = Outcome.FAILED
            logger.debug("parse failed with fault %s: %s", fault.code.normalize(), fault.message)
            if not self.shell:
                raise
            trigger(
                fault,
                prog=self._prog,
                shell=self.shell,
                fancy=self.fancy,
                colorful=self.colorful,
                console=self._stderr,
            )
        logger.debug("parse finished with outcome %s", self._outcome.name)
        return self._outcome

    def _parse(self, args):
        if not args and self.autohelp:
            self.print_help(self._root)
            return Outcome.HELP

        verb = self._root
        verb.present = True
        path = [verb]
        start = 0
        # a leaf verb stops resolution so its plain words reach the classifier
        while start < len(args) and not args[start].startswith(SHORT_PREFIX) and verb.children:
            try:
                verb = verb.children[args[start]]
            except KeyError:
                raise self._unknown_verb(verb, args[start], start) from None
            verb.present = True
            path.append(verb)
            start += 1
        self._path = tuple(path)
        logger.debug("resolved verb path %r", " ".join(step.name for step in path))

        if start >= len(args) and self.autohelp:
            self.print_help(verb)
            return Outcome.HELP

        tokens, edge, intent = tokenize(args, verb, start)
        match intent:
            case Intent.HELP:
                self.print_help(verb)
                return Outcome.HELP
            case Intent.VERBS:
                self.print_verbs()
                return Outcome.VERBS

        self._match(verb, tokens, edge)
        self._check(verb)
        self._dispatch(verb)
        return Outcome.PARSED

    def _match(self, verb, tokens, edge):
        position = 0
        while position < len(tokens):
            token = tokens[position]
            match token.kind:
                case Kind.ESCAPE:
                    if position == len(tokens) - 1:
                        raise DanglingEscapeError(
                            "an escape sequence was detected at the end of the input, but not followed by a value",
                            token=token.text,
                            index=token.index,
                            hint="remove the trailing '--' or put the escaped token after it",
                        )
                case Kind.FLAG:
                    option = verb.find(token.text)
                    if option is None:
                        raise self._unknown_option(verb, token)
                    if option.present:
                        raise DuplicateOptionError(
                            f"multiple occurrences of an option: {option.label}",
                            option=option,
                            verb=verb,
                            token=token.text,
                            index=token.index,
                            hint="pass each option at most once",
                        )
                    option.present = True
                    if option.expects_value:
                        following = position + 1
                        if following < len(tokens) and tokens[following].kind is Kind.ESCAPE:
                            following += 1
                        if following >= len(tokens) or tokens[following].kind is not Kind.VALUE:
                            raise MissingValueError(
                                f"a required argument was not present for the option: {token.text}",
                                option=option,
                                verb=verb,
                                token=token.text,
                                index=token.index,
                                criteria=[criterion.describe() for criterion in option.criteria],
                                hint="escape values that start with '-' as '-- <value>'",
                            )
                        option.value = tokens[following].text
                        position = following
                case Kind.POSITIONAL:
                    if token.index < edge:
                        raise PositionalBeforeOptionsError(
                            f"parameter without option: {token.text}",
                            verb=verb,
                            token=token.text,
                            index=token.index,
                            hint="move plain arguments after the last option",
                        )
                    self._trailing.append(token.text)
            position += 1

    def _check(self, verb):
        for option in verb.options:
            if option.required and not option.present:
                reason = "a required option was missing"
            elif option.present and option.value_required and not option.value:
                reason = "a required option was given without a value"
            else:
                continue
            raise MissingRequiredOptionError(
                f"{reason}: {option.label}",
                option=option,
                verb=verb,
                criteria=[criterion.describe() for criterion in option.criteria],
                hint="run '%s --help' to see the options of this verb" % self._route(verb),
            )

        for option in verb.options:
            if option.present and option.value:
                option.check()

    def _dispatch(self, verb):
        try:
            self._root.run()
            for option in verb.options:
                option.run()
        except ParserException:
            raise
        except Exception as exception:
            raise ActionError(
                f"an action raised {type(exception).__name__}: {exception}",
                verb=verb,
                exception=exception,
            ) from exception

    def _route(self, verb):
        return " ".join((self._prog, *(step.name for step in verb.path[1:])))

    def _unknown_verb(self, verb, token, index):
        suggestions = difflib.get_close_matches(token, verb.children.keys(), 5)
        route = self._route(verb)
        try:
            hint = "did you mean %r? you can also run '%s --verbs' to see all verbs" % (suggestions[0], route)
        except IndexError:
            hint = "run '%s --verbs' to see all verbs" % route
        return UnknownVerbError(
            f"the provided verb was not recognised: {token}",
            verb=verb,
            token=token,
            index=index,
            suggestions=suggestions,
            hint=hint,
        )

    def _unknown_option(self, verb, token):
        suggestions = difflib.get_close_matches(token.text, verb.switches.keys(), 5)
        route = self._route(verb)
        try:
            hint = "did you mean %r? you can also run '%s --help' to see all options" % (suggestions[0], route)
        except IndexError:
            hint = "try '%s --help' to see all available options" % route
        return UnknownOptionError(
            f"unrecognised option: {token.text}",
            verb=verb,
            token=token.text,
            index=token.index,
            suggestions=suggestions,
            hint=hint,
        )

    def _lookup(self, name):
        return self.selected.find(_spelling(name))

    def is_present(self, name, /):
        """True iff the option of the selected verb appeared in the last parse."""
        option = self._lookup(name)
        return option is not None and option.present

    def value(self, name, /):
        """
        Return the bound value of an option of the selected verb.

        None when the option is unknown or absent; "" for a present flag.
        """
        option = self._lookup(name)
        if option is None or not option.present:
            return None
        return option.value

    def typed_value(self, name, /, type=int, default=None):
        """
        Return the bound value converted with type, or default when it is unset.

        Raises
        - ValueError (or whatever type raises): when the stored string does not convert.
        """
        if not callable(type):
            raise TypeError("typed_value() type must be callable")
        value = self.value(name)
        if not value:
            return default
        return type(value)

    def verb_present(self, name, /):
        """True iff a verb named name (root excluded) was matched in the last parse."""
        return any(step.name == name for step in self._path[1:])

    def render_help(self, verb=Unset, /):
        verb = coalesce(verb, self.selected)
        if not isinstance(verb, Verb):
            raise TypeError("render_help() argument must be a verb")
        return render_help(self, verb)

    def render_verbs(self):
        return render_verbs(self)

    def print_help(self, verb=Unset, /):
        self._print(self.render_help(verb), "help")

    def print_verbs(self):
        self._print(self.render_verbs(), "verbs")

    def _print(self, renderable, title):
        if self.fancy:
            renderable = Panel(
                renderable,
                title=Text.assemble("[", " ", f"{self._prog} {title}".upper(), " ", "]"),
                title_align="left",
            )
        self._console.print(renderable)

    def __repr__(self):
        return "parser(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def __rich_repr__(self):
        yield "prog", self._prog
        yield "verbs", tuple(self._root.children)
        yield "options", tuple(option.name for option in self._root.options)
        yield "autohelp", self.autohelp
        yield "shell", self.shell


__all__ = (
    "Outcome",
    "Parser",
)
