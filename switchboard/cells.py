"""
Switchboard storage cells.

A Cell is the caller-owned destination an option writes into. It replaces the
untyped "pointer to value" of classic option tables with a small typed box:

    >>> verbose = Cell(False)
    >>> number = Cell(0)
    >>> output = Cell(None, type=str)

Descriptors check the cell type against their kind at construction time
(boolean → bool, bit/integer → int, string → str), so the parser only ever
writes values of the declared type.
"""
import builtins

from .utils import *


class Cell[_T]:
    """
    Typed mutable reference to one value.

    Parameters
    - value: _T | None
      Initial value; restored by reset().
    - type: type | Unset
      Payload type. Inferred from value when omitted; required when value is None.

    Rules
    - Writing a value that is not an instance of the payload type raises TypeError.
    - None can only be written back when the cell was created holding None.
    - bool is not accepted by int cells (bool is a subclass of int, but a flag
      written into a counter is almost always a table mistake).
    """

    __slots__ = ("_value", "_type", "_initial")

    def __init__(self, value=None, /, type=Unset):
        if type is Unset:
            if value is None:
                raise TypeError("cell holding None must specify a 'type'")
            type = builtins.type(value)
        if not isinstance(type, builtins.type):
            raise TypeError("cell 'type' must be a type")
        self._type = type
        self._initial = value
        self._value = self._check(value)

    def _check(self, value, /):
        if value is None and self._initial is None:
            return value
        if self._type is int and isinstance(value, bool):
            raise TypeError(f"cell of {self._type.__name__!r} cannot hold {value!r}")
        if not isinstance(value, self._type):
            raise TypeError(f"cell of {self._type.__name__!r} cannot hold {value!r}")
        return value

    @property
    def type(self):
        return self._type

    @property
    def value(self):
        return self._value

    @value.setter
    def value(self, value):
        self._value = self._check(value)

    def reset(self):
        """
        Restore the value the cell was created with.
        """
        self._value = self._initial

    def __repr__(self):
        return f"cell[{self._type.__name__}]({self._value!r})"

    def __rich_repr__(self):
        yield self._value
        yield "type", self._type.__name__


__all__ = (
    "Cell",
)
