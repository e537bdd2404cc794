"""
Argtree verbs: the nodes of the command tree.

A Verb is a named sub-command. It owns, in registration order:
- child verbs (unique names, at most one parent, no cycles), and
- options (unique full names and unique short characters within the verb).

Scoping
- Options are strictly scoped per verb: a child verb does NOT inherit the
  options of its parent. Only the options of the deepest verb matched on the
  command line are recognized by a parse.

Lifecycle
- Built once through add_verb()/add_option(); structure is never discarded.
- reset() clears presence flags and option values recursively so the same
  tree can be parsed again.
- Ownership is structural: dropping the root drops the whole tree.

Quick example
    >>> from argtree import Verb, Option
    >>> convert = Verb("convert", "convert between formats")
    >>> convert = convert.add_option(Option("format", "f", expects_value=True, required=True))
    >>> root = Verb("root").add_verb(convert)
    >>> [step.name for step in convert.path]
    ['root', 'convert']
"""
from .faults import ConfigError, FaultCode
from .options import Option
from .utils import sanitize_name, sanitize_descr, view

NAME_MAXIMUM = 16


class Verb:
    """
    Command-tree node: name, description, child verbs, options and an optional action.
    """

    def __init__(self, name, descr=""):
        self._name = sanitize_name("verb", name, maximum=NAME_MAXIMUM)
        self._descr = sanitize_descr("verb", descr)
        self._children = {}
        self._options = []
        self._switches = {}
        self._parent = None
        self._action = None
        self.present = False

    name = view("name")
    descr = view("descr")
    parent = view("parent")
    children = view("children")
    options = view("options")
    switches = view("switches")

    @property
    def root(self):
        """
        Return the topmost verb in the current hierarchy.
        """
        child, parent = self, self._parent
        while parent:
            child, parent = parent, parent._parent
        return child

    @property
    def path(self):
        """
        Return the ancestry from root to this verb as a tuple.

        The first element is the root, the last is the current verb.
        """
        path = [verb := self]
        while verb._parent:
            path.append(verb := verb._parent)
        return tuple(reversed(path))

    def add_option(self, option, /):
        """
        Attach an option to this verb.

        Raises
        - TypeError: when option is not an Option.
        - ConfigError: when the option already belongs to a verb, or when its
          full name or short character is already used on this verb.
        """
        if not isinstance(option, Option):
            raise TypeError("add_option() argument must be an option")
        if option.parent is not None:
            raise ConfigError(
                f"option {option.label} already belongs to verb {option.parent.name!r}",
                code=FaultCode.ALREADY_ATTACHED,
                hint="create a separate option for each verb",
            )
        for spelling in option.spellings:
            if spelling in self._switches:
                raise ConfigError(
                    f"an option with the same name has already been added to verb {self._name!r}: {spelling}",
                    code=FaultCode.DUPLICATE_NAME,
                )

        self._switches.update(dict.fromkeys(option.spellings, option))
        self._options.append(option)
        option._parent = self
        return self

    def add_verb(self, child, /):
        """
        Attach a child verb.

        Raises
        - TypeError: when child is not a Verb.
        - ConfigError: when the child is this verb or one of its ancestors
          (cycle), already has a parent, or its name is already in use here.
        """
        if not isinstance(child, Verb):
            raise TypeError("add_verb() argument must be a verb")
        if child in self.path:
            raise ConfigError(
                f"cannot add verb {child.name!r} below itself or one of its descendants",
                code=FaultCode.VERB_CYCLE,
            )
        if child._parent is not None:
            raise ConfigError(
                f"verb {child.name!r} already belongs to verb {child._parent.name!r}",
                code=FaultCode.ALREADY_ATTACHED,
            )
        # setdefault claims the slot only when the name is free
        if self._children.setdefault(child.name, child) is not child:
            raise ConfigError(
                f"a verb with the same name has already been added to verb {self._name!r}: {child.name!r}",
                code=FaultCode.DUPLICATE_NAME,
            )
        child._parent = self
        return self

    def action(self, action, /):
        """
        Bind the callback run after validation iff this verb is present.

        The callback receives the verb. Usable as a decorator: @verb.action
        """
        if not callable(action):
            raise TypeError("verb action must be callable")
        if self._action is not None:
            raise ConfigError(
                f"verb {self._name!r} already has an action",
                code=FaultCode.ACTION_REBOUND,
            )
        self._action = action
        return action

    def find(self, spelling, /):
        """Return the option spelled "--name" or "-c" on this verb, or None."""
        return self._switches.get(spelling)

    def reset(self):
        self.present = False
        for option in self._options:
            option.reset()
        for child in self._children.values():
            child.reset()

    def run(self):
        """Run this verb's action (when present), then its children's, depth-first."""
        if self._action is not None and self.present:
            self._action(self)
        for child in self._children.values():
            child.run()

    def __repr__(self):
        return "verb(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def __rich_repr__(self):
        yield "name", self._name
        yield "descr", self._descr
        yield "present", self.present
        yield "children", tuple(self._children)
        yield "options", tuple(option.name for option in self._options)


def verb(*args, **kwargs):
    """
    Factory for Verb, mirroring its constructor.

        verb("convert", "convert between formats")
    """
    return Verb(*args, **kwargs)


__all__ = (
    "Verb",
    "verb",
)
