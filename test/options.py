"""
Options module behavioral tests.

Scope
- Validate descriptor construction (names, help, cell typing, data, flags).
- Validate derived properties (names, valued, negatable) and read-only fields.
- Validate the Help() built-in and the boolean/bit/integer/string decorators.

Conventions
- Test method names follow CamelCase per project convention.
- Descriptors are always built through the public constructors.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from switchboard import (
    Cell,
    End,
    Group,
    Boolean,
    Bit,
    Integer,
    String,
    Help,
    Kind,
    OptionFlag,
    MalformedTableError,
    help_callback,
    boolean,
    bit,
    integer,
    string,
)


class TestDescriptorNames(TestCase):
    """Behavioral tests for short/long name declaration."""

    def testShortAndLongNames(self):
        d = Boolean("-v", "--verbose", help="print more")
        self.assertEqual(d.short_name, "v")
        self.assertEqual(d.long_name, "verbose")
        self.assertEqual(d.names, ("-v", "--verbose"))

    def testNamesAreOrderIndependent(self):
        d = Boolean("--verbose", "-v", help="print more")
        self.assertEqual(d.names, ("-v", "--verbose"))

    def testLongOnly(self):
        d = Integer("--jobs", help="worker count")
        self.assertIsNone(d.short_name)
        self.assertEqual(d.names, ("--jobs",))

    def testShortOnly(self):
        d = String("-o", help="output")
        self.assertIsNone(d.long_name)
        self.assertEqual(d.names, ("-o",))

    def testNamesRequired(self):
        with self.assertRaises(MalformedTableError):
            Boolean(help="nameless")

    def testNamesValidation(self):
        for name in ("verbose", "-", "--", "-ab", "--bad_name", "--1st", "---x", "-="):
            with self.subTest(name=name), self.assertRaises(ValueError):
                Boolean(name, help="bad")

    def testNamesAllowI18N(self):
        d = Boolean("--détaillé", help="unicode")
        self.assertEqual(d.long_name, "détaillé")

    def testOneNamePerForm(self):
        with self.assertRaises(ValueError):
            Boolean("-v", "-V", help="two shorts")
        with self.assertRaises(ValueError):
            Boolean("--verbose", "--loud", help="two longs")

    def testNamesMustBeStrings(self):
        with self.assertRaises(TypeError):
            Boolean(b"-v", help="bytes")


class TestDescriptorMetadata(TestCase):
    """Behavioral tests for help, cell, callback, data and flags."""

    def testHelpRequired(self):
        with self.assertRaises(MalformedTableError):
            Boolean("-v")
        with self.assertRaises(MalformedTableError):
            Boolean("-v", help="   ")
        with self.assertRaises(TypeError):
            Boolean("-v", help=42)

    def testHelpIsStripped(self):
        self.assertEqual(Boolean("-v", help="  print more ").help, "print more")

    def testCellTypeMustMatchKind(self):
        Boolean("-v", cell=Cell(False), help="ok")
        Bit("--read", cell=Cell(0), data=1, help="ok")
        Integer("-n", cell=Cell(0), help="ok")
        String("-o", cell=Cell(None, type=str), help="ok")
        with self.assertRaises(TypeError):
            Boolean("-v", cell=Cell(0), help="int cell")
        with self.assertRaises(TypeError):
            Integer("-n", cell=Cell("0"), help="str cell")
        with self.assertRaises(TypeError):
            String("-o", cell="out", help="not a cell")

    def testCellIsOptional(self):
        self.assertIsNone(Boolean("-v", help="no storage").cell)

    def testCallbackMustBeCallable(self):
        with self.assertRaises(TypeError):
            Boolean("-v", help="print more", callback="nope")

    def testBitRequiresPositiveMask(self):
        with self.assertRaises(ValueError):
            Bit("--read", help="read")
        with self.assertRaises(ValueError):
            Bit("--read", data=-4, help="read")
        self.assertEqual(Bit("--read", data=1 << 2, help="read").data, 4)

    def testDataMustBeInteger(self):
        with self.assertRaises(TypeError):
            Boolean("-v", data="1", help="print more")
        with self.assertRaises(TypeError):
            Boolean("-v", data=True, help="print more")

    def testFlagsNormalized(self):
        d = Boolean("--color", flags=1, help="colorize")
        self.assertIsInstance(d.flags, OptionFlag)
        self.assertIn(OptionFlag.NONEG, d.flags)

    def testFieldsAreReadOnly(self):
        d = Boolean("-v", help="print more")
        with self.assertRaises(AttributeError):
            d.help = "other"
        with self.assertRaises(AttributeError):
            d.long_name = "loud"


class TestDescriptorKinds(TestCase):
    """Behavioral tests for kinds and derived properties."""

    def testKinds(self):
        self.assertIs(End().kind, Kind.END)
        self.assertIs(Group("Basic options").kind, Kind.GROUP)
        self.assertIs(Boolean("-v", help="x").kind, Kind.BOOLEAN)
        self.assertIs(Bit("-r", data=1, help="x").kind, Kind.BIT)
        self.assertIs(Integer("-n", help="x").kind, Kind.INTEGER)
        self.assertIs(String("-o", help="x").kind, Kind.STRING)

    def testGroupRequiresHelp(self):
        with self.assertRaises(MalformedTableError):
            Group()
        self.assertEqual(Group("Bits options").help, "Bits options")

    def testValued(self):
        self.assertTrue(Integer("-n", help="x").valued)
        self.assertTrue(String("-o", help="x").valued)
        self.assertFalse(Boolean("-v", help="x").valued)
        self.assertFalse(Bit("-r", data=1, help="x").valued)

    def testNegatable(self):
        self.assertTrue(Boolean("--verbose", help="x").negatable)
        self.assertTrue(Bit("--read", data=1, help="x").negatable)
        self.assertFalse(Boolean("-v", help="short only").negatable)
        self.assertFalse(Boolean("--color", flags=OptionFlag.NONEG, help="x").negatable)
        self.assertFalse(Integer("--number", help="x").negatable)

    def testRepr(self):
        text = repr(Boolean("-v", "--verbose", help="print more"))
        self.assertTrue(text.startswith("boolean("))
        self.assertIn("long_name='verbose'", text)


class TestBuiltins(TestCase):
    """Behavioral tests for Help() and decorators."""

    def testHelpDescriptor(self):
        d = Help()
        self.assertEqual(d.names, ("-h", "--help"))
        self.assertIs(d.kind, Kind.BOOLEAN)
        self.assertIs(d.callback, help_callback)

    def testDecoratorBindsCallback(self):
        number = Cell(0)

        @integer("-n", "--number", cell=number, help="how many")
        def onNumber(parser, descriptor):
            pass

        self.assertIsInstance(onNumber, Integer)
        self.assertIs(onNumber.cell, number)
        self.assertEqual(onNumber.callback.__name__, "onNumber")

    def testDecoratorKinds(self):
        def callback(parser, descriptor):
            pass

        self.assertIsInstance(boolean("-v", help="x")(callback), Boolean)
        self.assertIsInstance(bit("-r", data=1, help="x")(callback), Bit)
        self.assertIsInstance(string("-o", help="x")(callback), String)

    def testDecoratorValidatesEagerly(self):
        with self.assertRaises(MalformedTableError):
            boolean(help="nameless")

    def testDecoratorSingleAssignmentGuard(self):
        wrapper = boolean("-v", help="print more")
        wrapper(lambda parser, descriptor: None)
        with self.assertRaises(TypeError):
            wrapper(lambda parser, descriptor: None)

    def testDecoratorRequiresCallable(self):
        with self.assertRaises(TypeError):
            string("-o", help="output")("not callable")

    def testDecoratorRejectsExistingCallback(self):
        wrapper = boolean("-v", help="print more", callback=lambda parser, descriptor: None)
        with self.assertRaises(TypeError):
            wrapper(lambda parser, descriptor: None)


if __name__ == "__main__":
    unittest.main()
