"""
Argtree tokenizer: classify the tokens left after verb resolution.

Kinds
- FLAG: starts with '-' and was not neutralized by a preceding escape.
- ESCAPE: a bare '--' that is still a flag; it neutralizes the next token.
- VALUE: a plain word bound to the value-expecting flag before it (one
  ESCAPE in between is skipped over).
- POSITIONAL: any other plain word.

Escapes are resolved in one left-to-right pass: an escape followed by a
flag-shaped token turns that token into a plain word, and an escape that was
itself neutralized no longer neutralizes anything ("-- -- -x" leaves "-x" a flag).

The boundary is the index of the last FLAG token (escapes excluded) and
separates the option region from the trailing-arguments region; it defaults to
the index of the first classified token.
"""
import enum
import logging
from typing import NamedTuple

from .utils import SHORT_PREFIX, LONG_PREFIX, ESCAPE

logger = logging.getLogger(__name__)

HELP_SPELLINGS = frozenset({SHORT_PREFIX + "?", LONG_PREFIX + "help"})
VERBS_SPELLING = LONG_PREFIX + "verbs"


class Kind(enum.Enum):
    FLAG = "flag"
    VALUE = "value"
    POSITIONAL = "positional"
    ESCAPE = "escape"


class Intent(enum.Enum):
    HELP = "help"
    VERBS = "verbs"


class Token(NamedTuple):
    index: int
    text: str
    kind: Kind

    @property
    def word(self):
        """True for plain words (values and positionals)."""
        return self.kind in (Kind.VALUE, Kind.POSITIONAL)


def scan(args, /, start=0):
    """
    Split args[start:] into FLAG, ESCAPE and POSITIONAL tokens.

    Indices are absolute positions in args.
    """
    flagged = [token.startswith(SHORT_PREFIX) for token in args]
    for index in range(start, len(args) - 1):
        if flagged[index] and args[index] == ESCAPE and flagged[index + 1]:
            flagged[index + 1] = False

    tokens = []
    for index in range(start, len(args)):
        if not flagged[index]:
            kind = Kind.POSITIONAL
        elif args[index] == ESCAPE:
            kind = Kind.ESCAPE
        else:
            kind = Kind.FLAG
        tokens.append(Token(index, args[index], kind))
    return tokens


def boundary(tokens, /, default=0):
    """Return the index of the last FLAG token, or default when there is none."""
    return max((token.index for token in tokens if token.kind is Kind.FLAG), default=default)


def intent(tokens, /):
    """
    Return the first help request among the tokens, or None.

    '-?' and '--help' count only as flags; '--verbs' counts in any position,
    even right after an escape.
    """
    for token in tokens:
        if token.kind is Kind.FLAG and token.text in HELP_SPELLINGS:
            return Intent.HELP
        if token.text == VERBS_SPELLING:
            return Intent.VERBS
    return None


def classify(tokens, verb, /):
    """
    Mark the plain word following each value-expecting flag of verb as VALUE.

    Unknown flags are left as FLAG; the parser reports them while matching.
    """
    tokens = list(tokens)
    for position, token in enumerate(tokens):
        if token.kind is not Kind.FLAG:
            continue
        option = verb.find(token.text)
        if option is None or not option.expects_value:
            continue
        following = position + 1
        if following < len(tokens) and tokens[following].kind is Kind.ESCAPE:
            following += 1
        if following < len(tokens) and tokens[following].kind is Kind.POSITIONAL:
            tokens[following] = tokens[following]._replace(kind=Kind.VALUE)

    logger.debug("classified %d token(s) for verb %r", len(tokens), verb.name)
    return tokens


def tokenize(args, verb, /, start=0):
    """
    Run scan() and classify() and return (tokens, boundary, intent).
    """
    tokens = scan(args, start)
    return classify(tokens, verb), boundary(tokens, default=start), intent(tokens)


__all__ = (
    "Kind",
    "Intent",
    "Token",
    "scan",
    "boundary",
    "intent",
    "classify",
    "tokenize",
)
