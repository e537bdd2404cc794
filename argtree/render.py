"""
Argtree help and verb-tree rendering.

Both renderers return a rich Text so callers can print, capture or compare
them (Text.plain). Styling applies only when the parser is colorful; the
palette can be overridden by a __styles__ mapping in __main__.

Palette keys
- usage-label, program-name, usage-section, header-section, description-section,
  footer-section
- group-label, verb-name, verb-description
- option-name, option-description, reserved-name, reserved-description
- tree-glyph, tree-root, tree-verb, tree-description
"""
from collections import defaultdict

from rich.text import Text

from .utils import SHORT_PREFIX, LONG_PREFIX

OPTION_WIDTH = 15
VERB_WIDTH = 16

RESERVED = (
    (None, "verbs", "open the verbs tree"),
    ("?", "help", "open this help message"),
)


def _palette(colorful):
    styles = defaultdict(str, {
        # === Head sections ===
        "usage-label": "bold #00E6FF",  # cyan
        "program-name": "bold #FF4D94",  # magenta
        "usage-section": "bold #36C5F0",
        "header-section": "#D1D5DB",
        "description-section": "italic #A3A3A3",
        "footer-section": "#737373",

        # === Sections ===
        "group-label": "bold #FFFFFF",
        "verb-name": "bold #36C5F0",
        "verb-description": "#9CA3AF",
        "option-name": "bold #00E6FF",
        "option-description": "#9CA3AF",
        "reserved-name": "bold #22C55E",  # GREEN for parser-provided switches
        "reserved-description": "#9CA3AF",

        # === Verb tree ===
        "tree-glyph": "#4B5563",  # Slate guides
        "tree-root": "bold #FF4D94",
        "tree-verb": "bold #36C5F0",
        "tree-description": "italic #9CA3AF",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        # Normalize to Rich Text; in non-colorful mode every style is dropped.
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    return styler, text


def _option_line(short, name, descr, styler, text, *, reserved=False):
    style = "reserved-name" if reserved else "option-name"
    line = Text("    ")
    if short is None:
        line.append("    ")
    else:
        line.append(text(SHORT_PREFIX + short, styler(style))).append(", ")
    line.append(text(LONG_PREFIX + name, styler(style)))
    line.append(" " * max(OPTION_WIDTH - len(name), 0) + "    ")
    line.append(text(descr, styler("reserved-description" if reserved else "option-description")))
    line.rstrip()
    return line


def render_help(parser, verb, /):
    """
    Render the help page of verb.

    Layout
        usage: <prog> [verbs] [options] [args]     (root)
        usage: <prog> <path> [options] [args]      (below root)
        <header>
        <verb description>                         (below root)

        verbs:                                     (when verb has children)
            <name>               <descr>

        options:
            -c, --name           <descr>
                --verbs          open the verbs tree
            -?, --help           open this help message
        <footer>
    """
    styler, text = _palette(parser.colorful)
    lines = []

    usage = Text()
    usage.append("usage", styler("usage-label")).append(": ")
    usage.append(text(parser.prog, styler("program-name"))).append(" ")
    if verb.parent is None:
        usage.append(text("[verbs] [options] [args]", styler("usage-section")))
    else:
        route = " ".join(step.name for step in verb.path[1:])
        usage.append(text(route, styler("program-name"))).append(" ")
        usage.append(text("[options] [args]", styler("usage-section")))
    lines.append(usage)

    if parser.header:
        lines.append(text(parser.header, styler("header-section")))
    if verb.parent is not None and verb.descr:
        lines.append(text(verb.descr, styler("description-section")))

    if verb.children:
        lines.append(Text(""))
        lines.append(text("verbs", styler("group-label")).append(":"))
        for child in verb.children.values():
            line = Text("    ")
            line.append(text(child.name, styler("verb-name")))
            line.append(" " * max(VERB_WIDTH - len(child.name), 0) + "    ")
            line.append(text(child.descr, styler("verb-description")))
            line.rstrip()
            lines.append(line)

    lines.append(Text(""))
    lines.append(text("options", styler("group-label")).append(":"))
    for option in verb.options:
        lines.append(_option_line(option.short, option.name, option.descr, styler, text))
    for short, name, descr in RESERVED:
        lines.append(_option_line(short, name, descr, styler, text, reserved=True))

    if parser.footer:
        lines.append(text(parser.footer, styler("footer-section")))

    return Text("\n").join(lines)


def render_verbs(parser, /):
    """
    Render the whole verb tree under the parser root.

        prog: (program name)
            ├── convert: (convert between formats)
            │   └── batch
            └── show
    """
    styler, text = _palette(parser.colorful)
    lines = [Text.assemble(text(parser.prog, styler("tree-root")), ": (program name)")]

    def walk(verb, prefix, last):
        line = Text(prefix)
        line.append(text("└──" if last else "├──", styler("tree-glyph"))).append(" ")
        line.append(text(verb.name, styler("tree-verb")))
        if verb.descr:
            line.append(": (").append(text(verb.descr, styler("tree-description"))).append(")")
        lines.append(line)

        children = tuple(verb.children.values())
        for index, child in enumerate(children):
            walk(child, prefix + ("    " if last else "│   "), index + 1 == len(children))

    children = tuple(parser.root.children.values())
    for index, child in enumerate(children):
        walk(child, "    ", index + 1 == len(children))

    return Text("\n").join(lines)


__all__ = (
    "render_help",
    "render_verbs",
)
