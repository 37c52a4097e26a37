"""
Switchboard help and usage rendering.

Pure functions from a parser context (descriptor table, usage lines,
description, epilog) to rich Text. Nothing here touches parse state, so the
renderer can run before, after, or instead of Parser.parse().

Layout

    Usage: prog [options] [[--] args]
       or: prog [options]

    A brief description of what the program does.

        -h, --help            show this help message and exit

    Basic options
        -v, --verbose         print more
        -n, --number=<int>    how many

    Additional description of the program after the options.

- the help column is derived from the widest option row, rounded up to a
  multiple of 4 plus a 4-space gutter; help text wraps at WIDTH columns and
  continuation lines re-indent to the help column.

Palette keys
- usage-label, usage-section, description-section, epilog-section
- group-label, option-name, metavar, argument-description
- overridable through __styles__ in __main__; ignored unless colorful=True.
"""
import textwrap
from collections import defaultdict

from rich.text import Text

from .options import Kind

WIDTH = 80
"""total line width help text is wrapped to."""

INDENT = 4
"""leading spaces before each option row."""

GUTTER = 2
"""spaces between the option column and the help text."""

_palette = {
    # === Head sections ===
    "usage-label": "bold #00E6FF",  # CYAN → signature info color
    "usage-section": "bold #36C5F0",  # SKY-BLUE → softer than cyan
    "description-section": "italic #A3A3A3",  # Neutral gray
    "epilog-section": "#737373",  # Dim footer gray

    # === Groups / options ===
    "group-label": "bold #FFFFFF",  # Pure white headers
    "option-name": "bold #00E6FF",  # CYAN for options
    "metavar": "bold #FFD600",  # AMBER for parameters
    "argument-description": "#9CA3AF",  # Muted gray
}


def _stylers(parser):
    styles = defaultdict(str, _palette | getattr(__import__("__main__"), "__styles__", {}))

    def text(fragment, style=""):
        if not parser.colorful:
            return Text(str(fragment))
        return Text(str(fragment), styles[style])

    return text


def _label(descriptor):
    """
    Plain "-x, --long=<int>" label of a descriptor (without indentation).
    """
    label = ", ".join(descriptor.names)
    if descriptor.__metavar__:
        label += "=" + descriptor.__metavar__
    return label


def column(options, /):
    """
    Compute the help column for a descriptor table.

    Each row width is rounded up to a multiple of 4; the widest one plus the
    INDENT gutter gives the option column, help text starts GUTTER spaces later.
    """
    width = 0
    for descriptor in options:
        if descriptor.kind in (Kind.END, Kind.GROUP):
            continue
        length = len(_label(descriptor))
        length = (length + 3) - ((length + 3) & 3)
        width = max(width, length)
    return width + INDENT


def format_usage(parser, /):
    """
    Render only the usage block ("Usage: ..." plus "   or: ..." lines).
    """
    text = _stylers(parser)
    usage = Text()
    if not parser.usages:
        return usage.append(text("Usage:", "usage-label"))
    for index, line in enumerate(parser.usages):
        if index:
            usage.append("\n")
        usage.append(text("Usage:" if index == 0 else "   or:", "usage-label"))
        usage.append(" ").append(text(line, "usage-section"))
    return usage


def format_help(parser, /):
    """
    Render usage, description, the option list and the epilog.
    """
    text = _stylers(parser)
    help = format_usage(parser)

    if parser.description:
        help.append("\n\n").append(text(parser.description, "description-section"))
    help.append("\n")

    width = column(parser.options)
    for descriptor in parser.options:
        match descriptor.kind:
            case Kind.END:
                break
            case Kind.GROUP:
                help.append("\n" if help.plain.endswith("\n") else "\n\n")
                help.append(text(descriptor.help, "group-label"))
                continue

        row = Text("\n" + " " * INDENT)
        row.append(text(", ".join(descriptor.names), "option-name"))
        if descriptor.__metavar__:
            row.append(text("=" + descriptor.__metavar__, "metavar"))

        row.append(" " * (width - INDENT - len(_label(descriptor)) + GUTTER))

        lines = textwrap.wrap(descriptor.help, max(WIDTH - width - GUTTER, 20)) or [""]
        row.append(text(lines.pop(0), "argument-description"))
        for line in lines:
            row.append("\n" + " " * (width + GUTTER)).append(text(line, "argument-description"))
        help.append(row)

    if parser.epilog:
        help.append("\n\n").append(text(parser.epilog, "epilog-section"))

    return help


__all__ = (
    "WIDTH",
    "column",
    "format_usage",
    "format_help",
)
