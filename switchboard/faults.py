"""
Switchboard faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
- OptionException / OptionWarning: base types carrying a message plus an immutable
  options mapping; they know how to render themselves through rich.
- MalformedTableError: programming errors in a descriptor table (never user input).
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): per-code documentation supplied by the running program.

Rendering
- non-fancy: a single line "<prog>: error [<code>]: <message>".
- fancy: a panel titled "[ <prog> — <code> | <Title> ]" with the message and a hint.

Integration
- The parser builds a fault and calls Parser.trigger(fault, **ctx), which merges the
  runtime options (parser, shell, fancy, colorful, usage) and forwards to trigger().
- In non-shell mode errors are raised and warnings go through warnings.warn; in
  shell mode they are printed to stderr, errors followed by the usage block and exit(1).
"""
import copy
import inspect
import sys
import warnings
from abc import ABC
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping
    - switches (1111x/1112x): UNKNOWN_OPTION, AMBIGUOUS_OPTION, UNEXPECTED_VALUE,
      MISSING_ARGUMENT, INVALID_NUMERIC_VALUE
    - warnings (1211x): EMPTY_INLINE_VALUE
    """
    # --- switch errors (11xxx) ---
    UNKNOWN_OPTION              = 11112
    AMBIGUOUS_OPTION            = 11113
    UNEXPECTED_VALUE            = 11114
    MISSING_ARGUMENT            = 11117
    INVALID_NUMERIC_VALUE       = 11124

    # --- warnings (12xxx) ---
    EMPTY_INLINE_VALUE          = 12111

    def normalize(self):
        """
        label shown for this code: __main__.__codes__[code] when the
        running program defines it, the number otherwise.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _prog(options):
    main = __import__("__main__")
    try:
        default = options["parser"].prog
    except KeyError:
        default = "switchboard"
    return getattr(main, "__prog__", default)


class _Renderable:
    """
    shared rich rendering for errors and warnings.

    subclasses define __palette__ (style defaults) and __label__ ("error"/"warning").
    """
    __palette__ = {}
    __label__ = ""

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        styles = defaultdict(str, self.__palette__ | getattr(__import__("__main__"), "__styles__", {}))
        colorful = self.options.get("colorful", False)
        fancy = self.options.get("fancy", False)

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

        prog = text(_prog(self.options), styler("prog-name"))
        code = self.options.get("code")
        message = text(self.message or "", styler(self.__label__ + "-message"))

        if fancy:
            header = Text.assemble(
                "[ ",
                prog,
                " — ",
                text(code.normalize() if code else "", styler("code")),
                " | ",
                text(self.options.get("title", self.__label__).title(), styler(self.__label__ + "-title")),
                " ]"
            )
            renders = [message]
            if hint := self.options.get("hint"):
                renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))
            return Panel(Group(*renders), title=header, title_align="left")

        return Text.assemble(
            prog,
            ": ",
            text(self.__label__, styler(self.__label__ + "-title")),
            " [",
            text(code.normalize() if code else "", styler("code")),
            "]: ",
            message,
        )

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class OptionException(_Renderable, Exception):
    __label__ = "error"
    __palette__ = {
        "prog-name": "bold #F2F2F2",
        "code": "bold #5FD7FF",
        "error-title": "bold #FF5F5F",
        "error-message": "#D0D0D0",
        "hint-arrow": "dim #87D787",
        "hint": "italic #87D787",
    }

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self, highlight=False, soft_wrap=True)
        if usage := self.options.get("usage"):
            console.print(usage, highlight=False, soft_wrap=True)
        sys.exit(1)


class UnknownOptionError(OptionException): ...
class AmbiguousOptionError(OptionException): ...
class UnexpectedValueError(OptionException): ...
class MissingArgumentError(OptionException): ...
class InvalidNumericValueError(OptionException): ...


class OptionWarning(_Renderable, ABC, Warning):
    __label__ = "warning"
    __palette__ = {
        "prog-name": "bold #F2F2F2",
        "code": "bold #FFAF00",
        "warning-title": "bold #FFD75F",
        "warning-message": "#DADADA",
        "hint-arrow": "dim #AFD7AF",
        "hint": "italic #AFD7AF",
    }

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self, highlight=False, soft_wrap=True)


class EmptyInlineValueWarning(OptionWarning): ...


class MalformedTableError(ValueError):
    """
    a descriptor table violates its construction rules.

    this is a programming error of the calling program (missing End(), a
    descriptor without names or help, duplicated names, ...), raised eagerly
    when descriptors and parsers are built, never while parsing user input.
    """


def trigger(fault, /, **options):
    """
    copy fault with options merged in, then raise, warn or print it.

    fault must implement __trigger__ and __replace__ (OptionException and
    OptionWarning do). with shell=True the fault is printed to stderr, and
    errors end the process with status 1.
    """
    if not all(callable(getattr(fault, name, None)) for name in ("__trigger__", "__replace__")):
        raise TypeError("trigger() expects a fault implementing __trigger__ and __replace__")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    documentation string for code from __main__.__docs__, or None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() expects a FaultCode")
    return getattr(__import__("__main__"), "__docs__", {}).get(code)


__all__ = (
    "FaultCode",
    "OptionException",
    "UnknownOptionError",
    "AmbiguousOptionError",
    "UnexpectedValueError",
    "MissingArgumentError",
    "InvalidNumericValueError",
    "OptionWarning",
    "EmptyInlineValueWarning",
    "MalformedTableError",
    "trigger",
    "getdoc",
)
