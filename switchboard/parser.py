"""
Switchboard parser: match, resolve and dispatch options over an argument vector.

What this module provides
- ParseFlag: parse-time behavior flags (STOP_AT_NON_OPTION).
- Parser: the parser context. Holds the descriptor table, usage lines and
  description/epilog, walks the argument vector once and returns the residual
  (non-option) arguments in their original order.
- parse(...): one-shot convenience runner.

Token classes
- "--"             terminator; consumed, everything after it is positional.
- "--name[=value]" long option; exact match, then "--no-<name>" negation,
                   then unambiguous prefix (abbreviation) match.
- "-abc"           short cluster; a value-taking option swallows the rest of
                   the token ("-oVALUE") or, when nothing is left, the next argument.
- anything else    positional ("", "-", "file.txt").

Quick start
    from switchboard import Parser, Cell, Help, Boolean, Integer, End

    verbose, number = Cell(False), Cell(0)
    parser = Parser(
        (
            Help(),
            Boolean("-v", "--verbose", cell=verbose, help="print more"),
            Integer("-n", "--number", cell=number, help="how many"),
            End(),
        ),
        ("prog [options] [[--] args]",),
    )
    residual = parser.parse()  # sys.argv[1:]
"""
import difflib
import os.path
import shlex
import sys
from collections.abc import Iterable
from enum import IntFlag

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from . import render
from .faults import *
from .options import Descriptor, Kind, Signal
from .utils import *


class ParseFlag(IntFlag):
    """
    parse-time behavior flags.
    """
    STOP_AT_NON_OPTION = 1  # first positional ends parsing; the rest is residual


def _process_options(cls, metadata):
    """
    Internal: validate the descriptor table eagerly.

    Rules
    - must be an iterable of descriptors (a str is rejected).
    - must end with exactly one End(); End() anywhere else is an error.
    - short and long names are unique across the table.
    - decorator factories must have been applied (@integer(...) without a function
      is a common slip and is reported explicitly).
    """
    if isinstance(options := metadata["options"], str) or not isinstance(options, Iterable):
        raise TypeError(f"{cls.__name__.lower()} 'options' must be an iterable of descriptors")

    options = list(options)
    shorts = set()
    longs = set()
    for index, descriptor in enumerate(options):
        if not isinstance(descriptor, Descriptor):
            if hasattr(descriptor, "__descriptor__"):
                raise MalformedTableError(f"descriptor decorator at index {index} was never applied to a callback")
            raise MalformedTableError(f"entry at index {index} is not a descriptor: {descriptor!r}")
        if descriptor.kind is Kind.END and index != len(options) - 1:
            raise MalformedTableError(f"End() must be the last descriptor, found one at index {index}")
        if descriptor.short_name is not None:
            if descriptor.short_name in shorts:
                raise MalformedTableError(f"short name '-{descriptor.short_name}' is declared twice")
            shorts.add(descriptor.short_name)
        if descriptor.long_name is not None:
            if descriptor.long_name in longs:
                raise MalformedTableError(f"long name '--{descriptor.long_name}' is declared twice")
            longs.add(descriptor.long_name)

    if not options or options[-1].kind is not Kind.END:
        raise MalformedTableError("descriptor table must end with End()")

    metadata["options"] = tuple(options)


def _process_strings(cls, metadata):
    """
    Internal: normalize usage lines, description, epilog, prog and flags.
    """
    if isinstance(usages := metadata["usages"], str) or not isinstance(usages, Iterable):
        raise TypeError(f"{cls.__name__.lower()} 'usages' must be an iterable of strings")
    usages = tuple(usages)
    for usage in usages:
        if not isinstance(usage, str):
            raise TypeError(f"{cls.__name__.lower()} 'usages' must be an iterable of strings")
        if not usage.strip():
            raise ValueError(f"{cls.__name__.lower()} 'usages' cannot contain empty strings")
    metadata["usages"] = usages

    for name in ("prog", "description", "epilog"):
        if not isinstance(object := metadata[name], str | Unset):
            raise TypeError(f"{cls.__name__.lower()} {name!r} must be a string")
        metadata[name] = coalesce(object)
    metadata["prog"] = metadata["prog"] or os.path.basename(sys.argv[0]) or "prog"

    if not isinstance(flags := metadata["flags"], int) or isinstance(flags, bool):
        raise TypeError(f"{cls.__name__.lower()} 'flags' must be parse flags")
    metadata["flags"] = ParseFlag(flags)


def _tokenize(prompt):
    """
    Internal: normalize a prompt into a list of raw argument strings.

    - Unset: sys.argv[1:]
    - str: shell-style split via shlex.split
    - Iterable[str]: taken verbatim (empty strings are positional arguments)
    """
    if prompt is Unset:
        return sys.argv[1:]
    if isinstance(prompt, str):
        return shlex.split(prompt)
    if isinstance(prompt, Iterable):
        tokens = list(prompt)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parse() argument must be a string or an iterable of strings")
        return tokens
    raise TypeError("parse() argument must be a string or an iterable of strings")


class Parser:
    """
    Parser context: one descriptor table, one parse() call.

    Parameters
    - options: Iterable[Descriptor]
      The descriptor table; must end with End().
    - usages: Iterable[str]
      Pre-formatted usage lines ("prog [options] [[--] args]").
    - flags: ParseFlag
      Parse-time behavior (STOP_AT_NON_OPTION).
    - prog: str (keyword-only)
      Program name for diagnostics; defaults to basename(sys.argv[0]).
    - description, epilog: str (keyword-only)
      Help text printed after usage / after the option list.
    - shell, fancy, colorful: bool (keyword-only)
      Runtime switches. shell prints faults and exits instead of raising;
      fancy wraps output in rich panels; colorful enables the palette.

    State (read-only, updated during parse())
    - cursor: index of the next argument to examine.
    - write_cursor: number of residual arguments collected so far.
    - pending: inline value text in progress (cluster remainder or "=value" tail).
    - resolved: value resolved for the descriptor being dispatched (for callbacks).
    - residual: residual arguments collected so far.
    - stopped: True when a callback returned Signal.STOP.

    Raises
    - MalformedTableError on an invalid descriptor table.
    - TypeError/ValueError on invalid usages/description/epilog/flags.
    """

    options = mirror("options")
    usages = mirror("usages")
    flags = mirror("flags")
    prog = mirror("prog")
    description = mirror("description")
    epilog = mirror("epilog")
    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")
    cursor = mirror("cursor")
    write_cursor = mirror("write_cursor")
    pending = mirror("pending")
    resolved = mirror("resolved")
    residual = mirror("residual")
    stopped = mirror("stopped")

    def __new__(
            cls,
            options,
            usages=(),
            flags=ParseFlag(0),
            *,
            prog=Unset,
            description=Unset,
            epilog=Unset,
            shell=False,
            fancy=False,
            colorful=False,
    ):
        metadata = {
            "options": options,
            "usages": usages,
            "flags": flags,
            "prog": prog,
            "description": description,
            "epilog": epilog,
            "shell": bool(shell),
            "fancy": bool(fancy),
            "colorful": bool(colorful),
        }
        _process_options(cls, metadata)
        _process_strings(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

        self._arguments = []
        self._cursor = 0
        self._write_cursor = 0
        self._pending = None
        self._resolved = None
        self._residual = []
        self._stopped = False
        self._parsed = False
        return self

    def __repr__(self):
        return "parser(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def __rich_repr__(self):
        for name in ("prog", "usages", "flags", "cursor", "residual", "stopped"):
            yield name, getattr(self, name)

    def describe(self, description=Unset, epilog=Unset, /):
        """
        Attach the description (after usage) and epilog (after the options).

        Omitted values are left untouched.
        """
        for name, object in (("description", description), ("epilog", epilog)):
            if not isinstance(object, str | Unset):
                raise TypeError(f"describe() {name!r} must be a string")
            if object is not Unset:
                setattr(self, "_" + name, object)

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this parser's runtime options merged in.

        Errors raise (or print + exit(1) in shell mode, followed by the help text);
        warnings go through the warnings module (or are printed in shell mode).
        """
        trigger(
            fault,
            **options,
            parser=self,
            shell=self.shell,
            fancy=self.fancy,
            colorful=self.colorful,
            usage=render.format_help(self),
        )

    def usage(self, *, stderr=False):
        """
        Print usage, description, the option list and the epilog.
        """
        console = Console(stderr=stderr)
        renderable = render.format_help(self)
        if self.fancy:
            renderable = Panel(
                renderable,
                title=Text.assemble("[", " ", f"{self.prog} HELP".upper(), " ", "]"),
                title_align="left",
            )
        console.print(renderable, highlight=False, soft_wrap=not self.fancy)

    def format_help(self):
        """
        Plain-text rendition of usage().
        """
        return render.format_help(self).plain

    def format_usage(self):
        """
        Plain-text usage lines only.
        """
        return render.format_usage(self).plain

    def parse(self, prompt=Unset, /):
        """
        Walk the argument vector once, dispatching every recognized option.

        Parameters
        - prompt: Unset | str | Iterable[str]
          • Unset: sys.argv[1:] (the program name is never part of the prompt).
          • str: split with shlex.split.
          • Iterable[str]: used verbatim.

        Returns
        - list[str]: residual (non-option) arguments in their original order.

        Raises
        - UnknownOptionError, AmbiguousOptionError, UnexpectedValueError,
          MissingArgumentError, InvalidNumericValueError (non-shell mode).
          Options dispatched before the failing token stay applied.
        - RuntimeError when the context was already used for a parse.
        """
        if self._parsed:
            raise RuntimeError("parser context cannot be reused; create a new parser")
        self._arguments = arguments = _tokenize(prompt)
        self._parsed = True

        while self._cursor < len(arguments):
            token = arguments[self._cursor]

            if token == "--":
                self._cursor += 1
                break

            if token.startswith("--"):
                self._cursor += 1
                signal = self._parse_long(token)
            elif token.startswith("-") and len(token) > 1:
                self._cursor += 1
                signal = self._parse_short(token)
            elif self.flags & ParseFlag.STOP_AT_NON_OPTION:
                break
            else:
                self._keep(token)
                self._cursor += 1
                continue

            if signal is Signal.STOP:
                self._stopped = True
                break

        # Everything after a terminator, a stop or the first non-option is residual.
        while self._cursor < len(arguments):
            self._keep(arguments[self._cursor])
            self._cursor += 1

        return list(self._residual)

    def _keep(self, token):
        self._residual.append(token)
        self._write_cursor += 1

    def _parse_long(self, token):
        name, equals, value = token[2:].partition("=")
        descriptor, negated = self._match_long(name, token)
        input = ("--no-" if negated else "--") + descriptor.long_name
        self._pending = value if equals else None
        try:
            return self._dispatch(descriptor, input, negated=negated, inline=self._pending)
        finally:
            self._pending = None

    def _parse_short(self, token):
        self._pending = token[1:]
        while self._pending:
            input = "-" + self._pending[0]
            descriptor = self._match_short(self._pending[0], token)
            self._pending = self._pending[1:] or None
            if descriptor.valued:
                # the rest of the cluster is this option's value
                inline, self._pending = self._pending, None
                signal = self._dispatch(descriptor, input, inline=inline)
            else:
                signal = self._dispatch(descriptor, input)
            if signal is Signal.STOP:
                self._pending = None
                return signal
        return Signal.CONTINUE

    def _match_long(self, name, token):
        """
        resolve a long option name to (descriptor, negated).

        order
        1. exact long name.
        2. "no-<name>" exactly naming a negatable boolean/bit.
        3. unambiguous prefix among long names (and negated forms when the
           name itself starts with "no-").
        """
        switches = [descriptor for descriptor in self.options if descriptor.long_name is not None]

        if name:
            for descriptor in switches:
                if descriptor.long_name == name:
                    return descriptor, False

            negation = name[3:] if name.startswith("no-") and len(name) > 3 else None
            if negation is not None:
                for descriptor in switches:
                    if descriptor.negatable and descriptor.long_name == negation:
                        return descriptor, True

            candidates = [(descriptor, False) for descriptor in switches if descriptor.long_name.startswith(name)]
            if negation is not None:
                candidates.extend(
                    (descriptor, True) for descriptor in switches
                    if descriptor.negatable and descriptor.long_name.startswith(negation)
                )

            if len(candidates) == 1:
                return candidates[0]

            if candidates:
                names = sorted(("--no-" if negated else "--") + descriptor.long_name for descriptor, negated in candidates)
                return self.trigger(AmbiguousOptionError(
                    "ambiguous option %r could be %s" % ("--" + name, ", ".join(map(repr, names))),
                    title="ambiguous option",
                    code=FaultCode.AMBIGUOUS_OPTION,
                    input="--" + name,
                    token=token,
                    candidates=tuple(names),
                    hint="type more characters of the option, e.g. %r" % names[0],
                    docs=getdoc(FaultCode.AMBIGUOUS_OPTION),
                ))

        input = "--" + name
        known = ["--" + descriptor.long_name for descriptor in switches]
        if name.startswith("no-") and any(descriptor.long_name == name[3:] for descriptor in switches):
            hint = "option '--%s' cannot be negated" % name[3:]
        elif suggestions := difflib.get_close_matches(input, known, 1):
            hint = "did you mean %r? run '%s --help' to see all options" % (suggestions[0], self.prog)
        else:
            hint = "run '%s --help' to see all options" % self.prog
        return self.trigger(UnknownOptionError(
            "unknown option %r" % input,
            title="unknown option",
            code=FaultCode.UNKNOWN_OPTION,
            input=input,
            token=token,
            hint=hint,
            docs=getdoc(FaultCode.UNKNOWN_OPTION),
        ))

    def _match_short(self, char, token):
        for descriptor in self.options:
            if descriptor.short_name == char:
                return descriptor
        return self.trigger(UnknownOptionError(
            "unknown option %r" % ("-" + char),
            title="unknown option",
            code=FaultCode.UNKNOWN_OPTION,
            input="-" + char,
            token=token,
            hint="run '%s --help' to see all options" % self.prog,
            docs=getdoc(FaultCode.UNKNOWN_OPTION),
        ))

    def _resolve(self, descriptor, input, inline, negated):
        """
        determine the value of a matched descriptor.

        - boolean/bit: presence only; True, or False when negated. An inline
          value is an error.
        - integer/string: the inline value, else the next argument.
        """
        if not descriptor.valued:
            if inline is not None:
                return self.trigger(UnexpectedValueError(
                    "option %r does not take a value, got %r" % (input, inline),
                    title="unexpected value",
                    code=FaultCode.UNEXPECTED_VALUE,
                    input=input,
                    value=inline,
                    descriptor=descriptor,
                    hint="remove everything from '=' (for example: %s)" % input,
                    docs=getdoc(FaultCode.UNEXPECTED_VALUE),
                ))
            return not negated

        if inline is None:
            if self._cursor >= len(self._arguments):
                return self.trigger(MissingArgumentError(
                    "option %r requires a value" % input,
                    title="missing argument",
                    code=FaultCode.MISSING_ARGUMENT,
                    input=input,
                    descriptor=descriptor,
                    hint="pass a value after the option (for example: %s <value>)" % input,
                    docs=getdoc(FaultCode.MISSING_ARGUMENT),
                ))
            inline = self._arguments[self._cursor]
            self._cursor += 1
        elif not inline and descriptor.kind is Kind.STRING:
            self.trigger(EmptyInlineValueWarning(
                "empty inline value for option %r" % input,
                title="empty inline value",
                code=FaultCode.EMPTY_INLINE_VALUE,
                input=input,
                descriptor=descriptor,
                hint="add a value after '=' (for example: %s=<value>)" % input,
                docs=getdoc(FaultCode.EMPTY_INLINE_VALUE),
            ))

        if descriptor.kind is Kind.INTEGER:
            return self._convert(descriptor, input, inline)
        return inline

    def _convert(self, descriptor, input, text):
        # base prefixes (0x, 0o, 0b) first, then zero-padded decimals
        for base in (0, 10):
            try:
                return int(text, base)
            except ValueError:
                continue
        return self.trigger(InvalidNumericValueError(
            "option %r expects an integer value, got %r" % (input, text),
            title="invalid numeric value",
            code=FaultCode.INVALID_NUMERIC_VALUE,
            input=input,
            value=text,
            descriptor=descriptor,
            hint="use a decimal, 0x-hex, 0o-octal or 0b-binary integer (for example: %s=42)" % input,
            docs=getdoc(FaultCode.INVALID_NUMERIC_VALUE),
        ))

    def _dispatch(self, descriptor, input, *, negated=False, inline=None):
        """
        resolve the value, write it through the cell and run the callback.
        """
        value = self._resolve(descriptor, input, inline, negated)

        if (cell := descriptor.cell) is not None:
            if descriptor.kind is Kind.BIT:
                current = cell.value or 0
                cell.value = current & ~descriptor.data if negated else current | descriptor.data
            else:
                cell.value = value

        self._resolved = value
        if descriptor.callback is None:
            return Signal.CONTINUE
        return Signal.STOP if descriptor.callback(self, descriptor) == Signal.STOP else Signal.CONTINUE


def parse(options, prompt=Unset, /, usages=(), flags=ParseFlag(0), **runtime):
    """
    Build a fresh Parser over options and parse prompt with it.

    Parameters
    - options: the descriptor table (ending with End()).
    - prompt: Unset (sys.argv[1:]) | str | Iterable[str].
    - usages, flags: forwarded to Parser.
    - runtime: prog/description/epilog/shell/fancy/colorful, forwarded to Parser.

    Returns
    - list[str]: the residual arguments.
    """
    return Parser(options, usages, flags, **runtime).parse(prompt)


__all__ = (
    "ParseFlag",
    "Parser",
    "parse",
)
