"""
Cells module behavioral tests.

Scope
- Validate type inference and the explicit type of None-initialized cells.
- Validate write checks (wrong type, bool into int, None write-back).
- Validate reset() and the representation.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from switchboard import Cell


class TestCell(TestCase):
    """Behavioral tests for typed storage cells."""

    def testTypeInferredFromValue(self):
        self.assertIs(Cell(False).type, bool)
        self.assertIs(Cell(0).type, int)
        self.assertIs(Cell("x").type, str)

    def testNoneRequiresExplicitType(self):
        with self.assertRaises(TypeError):
            Cell(None)
        cell = Cell(None, type=str)
        self.assertIs(cell.type, str)
        self.assertIsNone(cell.value)

    def testTypeMustBeAType(self):
        with self.assertRaises(TypeError):
            Cell(None, type="str")

    def testWriteChecksType(self):
        cell = Cell(0)
        cell.value = 42
        self.assertEqual(cell.value, 42)
        with self.assertRaises(TypeError):
            cell.value = "42"
        self.assertEqual(cell.value, 42)

    def testIntCellRejectsBool(self):
        cell = Cell(0)
        with self.assertRaises(TypeError):
            cell.value = True

    def testNoneWriteBackOnlyWhenInitial(self):
        optional = Cell(None, type=str)
        optional.value = "out.txt"
        optional.value = None
        self.assertIsNone(optional.value)

        required = Cell("in.txt")
        with self.assertRaises(TypeError):
            required.value = None

    def testResetRestoresInitialValue(self):
        cell = Cell(7)
        cell.value = 9
        cell.reset()
        self.assertEqual(cell.value, 7)

    def testRepr(self):
        self.assertEqual(repr(Cell(0)), "cell[int](0)")
        self.assertEqual(repr(Cell(None, type=str)), "cell[str](None)")


if __name__ == "__main__":
    unittest.main()
