r"""
Switchboard option descriptors and decorators.

Overview
- Kinds
  • End: terminator of a descriptor table (exactly one, last).
  • Group: section label, only used by the help renderer.
  • Boolean: presence-only switch writing True (or False when negated).
  • Bit: presence-only switch setting (or clearing) a bit mask in an int cell.
  • Integer: value-bearing option converted to int.
  • String: value-bearing option stored verbatim.
  • Help(): the conventional -h/--help Boolean bound to help_callback.

- Decorators
  • @boolean(...), @bit(...), @integer(...), @string(...): build the descriptor and
    bind the decorated function as its callback.

Metadata (sanitized on construction)
- names: "-x" (short) and/or "--long-name" (long); at most one of each.
- cell: Cell whose type matches the kind (bool / int / int / str), or omitted.
- help: non-empty text, required for everything but End.
- callback: callable(parser, descriptor) -> Signal | None.
- data: int payload; the bit mask for Bit.
- flags: OptionFlag set (NONEG disables --no-<name>).

Quick example:
    >>> from switchboard import Cell, End, Group, Help, Boolean, Integer, String
    >>> verbose, number, output = Cell(False), Cell(0), Cell(None, type=str)
    >>> table = (
    ...     Help(),
    ...     Group("Basic options"),
    ...     Boolean("-v", "--verbose", cell=verbose, help="print more"),
    ...     Integer("-n", "--number", cell=number, help="how many"),
    ...     String("-o", "--output", cell=output, help="where to write"),
    ...     End(),
    ... )
"""
import functools
import operator
import re
import sys
from enum import IntEnum, IntFlag
from types import MethodType

from .cells import Cell
from .faults import MalformedTableError
from .utils import *


class Kind(IntEnum):
    """
    descriptor kinds, in table-declaration order of importance.
    """
    END     = 0
    GROUP   = 1
    BOOLEAN = 2
    BIT     = 3
    INTEGER = 4
    STRING  = 5


class OptionFlag(IntFlag):
    """
    per-descriptor modifiers.
    """
    NONEG = 1  # disable --no-<name>


class Signal(IntEnum):
    """
    callback intents understood by the dispatcher.

    callbacks returning None behave like CONTINUE.
    """
    CONTINUE = 0
    STOP     = 1


class DescriptorType(type):
    """
    Metaclass giving descriptors stable names, read-only fields and representations.

    - __typename__ is derived from the class name (camel-case split with hyphens).
    - every name in __introspectable__ becomes a read-only property over "_<name>".
    - __repr__/__rich_repr__ list the introspectable fields.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                if name != "kind":
                    yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_help(cls, metadata, /):
    """
    Internal: help text is mandatory and must be a non-empty string.
    """
    if (help := metadata["help"]) is Unset:
        raise MalformedTableError(f"{cls.__typename__} must have a help text")
    if not isinstance(help, str):
        raise TypeError(f"{cls.__typename__} 'help' must be a string")
    if not (help := help.strip()):
        raise MalformedTableError(f"{cls.__typename__} 'help' cannot be empty")
    metadata["help"] = help


def _sanitize_names(cls, metadata, /):
    r"""
    Internal: split declared names into one short and one long name.

    Accepted forms
    - short: "-x" where x is any single character but '-', '=' or whitespace.
    - long: "--name" / "--long-name", matching r"--[^\W\d_](-?[^\W_]+)*"
      (unicode letters allowed, no underscores, no leading digits).
    """
    short = long = None
    for name in metadata.pop("names"):
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif re.fullmatch(r"-[^\s=-]", name):
            if short is not None:
                raise ValueError(f"{cls.__typename__} cannot have more than one short name")
            short = name[1]
        elif re.fullmatch(r"--[^\W\d_](-?[^\W_]+)*", name):
            if long is not None:
                raise ValueError(f"{cls.__typename__} cannot have more than one long name")
            long = name[2:]
        else:
            raise ValueError(f"{cls.__typename__} names must look like '-x' or '--long-name', got {name!r}")

    if short is None and long is None:
        raise MalformedTableError(f"{cls.__typename__} must specify a short or a long name")

    metadata["short_name"] = short
    metadata["long_name"] = long


def _sanitize_switch(cls, metadata, /):
    """
    Internal: validate cell, callback, data and flags of a named descriptor.
    """
    if (cell := metadata["cell"]) is not Unset:
        if not isinstance(cell, Cell):
            raise TypeError(f"{cls.__typename__} 'cell' must be a cell")
        if cell.type is not cls.__celltype__:
            raise TypeError(f"{cls.__typename__} 'cell' must hold {cls.__celltype__.__name__!r} values")
    metadata["cell"] = coalesce(cell)

    if (callback := metadata["callback"]) is not Unset and not callable(callback):
        raise TypeError(f"{cls.__typename__} 'callback' must be callable")
    metadata["callback"] = coalesce(callback)

    if not isinstance(data := metadata["data"], int) or isinstance(data, bool):
        raise TypeError(f"{cls.__typename__} 'data' must be an integer")
    if cls.__kind__ is Kind.BIT and data <= 0:
        raise ValueError(f"{cls.__typename__} 'data' must be a positive bit mask")

    if not isinstance(flags := metadata["flags"], int) or isinstance(flags, bool):
        raise TypeError(f"{cls.__typename__} 'flags' must be option flags")
    metadata["flags"] = OptionFlag(flags)


class Descriptor(metaclass=DescriptorType):
    """
    Common base of all table entries.

    The fields below are exposed read-only; unset names/cell/callback read as None.
    """

    __kind__ = Kind.END
    __metavar__ = None

    __introspectable__ = (
        "kind",
        "short_name",
        "long_name",
        "cell",
        "help",
        "callback",
        "data",
        "flags",
    )

    def __new__(cls, **metadata):
        self = super().__new__(cls)
        defaults = {
            "kind": cls.__kind__,
            "short_name": None,
            "long_name": None,
            "cell": None,
            "help": None,
            "callback": None,
            "data": 0,
            "flags": OptionFlag(0),
        }
        for name, object in (defaults | metadata).items():
            setattr(self, "_" + name, object)
        return self

    @property
    def names(self):
        """
        Dash-prefixed display names, short first ("-v", "--verbose").
        """
        names = ()
        if self.short_name is not None:
            names += ("-" + self.short_name,)
        if self.long_name is not None:
            names += ("--" + self.long_name,)
        return names

    @property
    def valued(self):
        """
        Whether the descriptor consumes a value (integer and string kinds).
        """
        return self.kind in (Kind.INTEGER, Kind.STRING)

    @property
    def negatable(self):
        """
        Whether --no-<long-name> is accepted for this descriptor.
        """
        return (
            self.kind in (Kind.BOOLEAN, Kind.BIT) and
            self.long_name is not None and
            not self.flags & OptionFlag.NONEG
        )


class End(Descriptor):
    """
    Table terminator. Carries nothing and is never matched.
    """

    __kind__ = Kind.END

    def __new__(cls):
        return super().__new__(cls)


class Group(Descriptor):
    """
    Section label rendered as an unindented header in help output.
    """

    __kind__ = Kind.GROUP

    def __new__(cls, help=Unset, /):
        metadata = {"help": help}
        _sanitize_help(cls, metadata)
        return super().__new__(cls, **metadata)


class _Switch(Descriptor):
    """
    Named descriptor (Boolean, Bit, Integer, String).

    Parameters
    - names: "-x" and/or "--long-name"
    - cell: Cell | Unset
      Destination of the resolved value; its type must match the kind.
    - help: str
      Mandatory help text.
    - callback: Callable[[Parser, Descriptor], Signal | None] | Unset
      Invoked after the cell is written; Signal.STOP ends parsing.
    - data: int
      Opaque payload for callbacks; the bit mask for Bit.
    - flags: OptionFlag
      OptionFlag.NONEG disables the --no-<name> form.
    """

    __celltype__ = object

    def __new__(
            cls,
            *names,
            cell=Unset,
            help=Unset,
            callback=Unset,
            data=0,
            flags=OptionFlag(0),
    ):
        metadata = {
            "names": names,
            "cell": cell,
            "help": help,
            "callback": callback,
            "data": data,
            "flags": flags,
        }
        _sanitize_names(cls, metadata)
        _sanitize_help(cls, metadata)
        _sanitize_switch(cls, metadata)
        return super().__new__(cls, **metadata)


class Boolean(_Switch):
    __kind__ = Kind.BOOLEAN
    __celltype__ = bool


class Bit(_Switch):
    __kind__ = Kind.BIT
    __celltype__ = int


class Integer(_Switch):
    __kind__ = Kind.INTEGER
    __celltype__ = int
    __metavar__ = "<int>"


class String(_Switch):
    __kind__ = Kind.STRING
    __celltype__ = str
    __metavar__ = "<str>"


def help_callback(parser, descriptor, /):
    """
    Built-in callback of Help(): print the full help and stop parsing.

    In shell mode the process exits with status 0 right after printing.
    """
    parser.usage()
    if parser.shell:
        sys.exit(0)
    return Signal.STOP


def Help():
    """
    The conventional -h/--help descriptor wired to help_callback.
    """
    return Boolean("-h", "--help", help="show this help message and exit", callback=help_callback)


def _decorator(cls, label, /):
    """
    Internal: build a decorator factory for a named descriptor kind.

    The returned factory validates its arguments right away (by building the
    descriptor) and binds the decorated function as the callback exactly once.
    """

    @rename(label)
    def factory(*args, **kwargs):
        descriptor = cls(*args, **kwargs)

        @rename(label)
        def wrapper(callback, /):
            if not callable(callback):
                raise TypeError(f"@{label}() must be applied to a callable")
            if descriptor._callback is not None:  # NOQA: E-501
                raise TypeError(f"@{label}() must be applied only once")
            descriptor._callback = callback
            return descriptor

        # Introspection hook, lets the parser spot a factory that was never applied.
        wrapper.__descriptor__ = MethodType(rename(lambda self: descriptor, "__descriptor__"), wrapper)
        return wrapper

    factory.__doc__ = f"""
    Decorator/factory for a {cls.__typename__} descriptor.

    Usage
        @{label}("-x", "--name", cell=..., help="...")
        def on_name(parser, descriptor): ...

    The decorated function becomes the callback; the decorator returns the
    configured {cls.__name__} descriptor.
    """
    return factory


boolean = _decorator(Boolean, "boolean")
bit = _decorator(Bit, "bit")
integer = _decorator(Integer, "integer")
string = _decorator(String, "string")


__all__ = (
    # Enumerations
    "Kind",
    "OptionFlag",
    "Signal",

    # Classes (descriptors)
    "Descriptor",
    "End",
    "Group",
    "Boolean",
    "Bit",
    "Integer",
    "String",

    # Built-ins
    "Help",
    "help_callback",

    # Decorators
    "boolean",
    "bit",
    "integer",
    "string",
)

# Remove the internal metaclass from the module namespace.
del DescriptorType
