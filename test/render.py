"""
Render module behavioral tests.

Scope
- Validate the usage block ("Usage:" / "   or:" lines).
- Validate the option column (rounded widths, gutter) and group headers.
- Validate wrapping of long help text and the description/epilog placement.
- Validate that the palette only applies when colorful.

Conventions
- Test method names follow CamelCase per project convention.
- Layout is asserted on plain text; styling is asserted on rich spans.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from switchboard import Parser, Cell, End, Group, Boolean, Bit, Integer, String, Help
from switchboard import render


def _parser(**runtime):
    table = (
        Help(),
        Group("Basic options"),
        Boolean("-f", "--force", cell=Cell(False), help="force to do"),
        Boolean("-t", "--test", cell=Cell(False), help="test only"),
        String("-p", "--path", cell=Cell(None, type=str), help="path to read"),
        Group("Bits options"),
        Bit("--read", cell=Cell(0), data=1 << 0, help="read perm"),
        Integer("-n", "--num", cell=Cell(0), help="selected num"),
        End(),
    )
    return Parser(
        table,
        ("test [options] [[--] args]", "test [options]"),
        prog="test",
        description="A brief description.",
        epilog="Epilog text.",
        **runtime,
    )


class TestUsage(TestCase):
    """Behavioral tests for the usage block."""

    def testUsageLines(self):
        self.assertEqual(
            _parser().format_usage(),
            "Usage: test [options] [[--] args]\n   or: test [options]",
        )

    def testNoUsageLines(self):
        self.assertEqual(Parser((End(),)).format_usage(), "Usage:")


class TestHelp(TestCase):
    """Behavioral tests for the full help layout."""

    def testColumnWidth(self):
        # widest row is "-p, --path=<str>" (16) → 16 + 4
        self.assertEqual(render.column(_parser().options), 20)

    def testFullLayout(self):
        def row(label, help):
            return ("    " + label).ljust(22) + help

        expected = "\n".join([
            "Usage: test [options] [[--] args]",
            "   or: test [options]",
            "",
            "A brief description.",
            "",
            row("-h, --help", "show this help message and exit"),
            "",
            "Basic options",
            row("-f, --force", "force to do"),
            row("-t, --test", "test only"),
            row("-p, --path=<str>", "path to read"),
            "",
            "Bits options",
            row("--read", "read perm"),
            row("-n, --num=<int>", "selected num"),
            "",
            "Epilog text.",
        ])
        self.assertEqual(_parser().format_help(), expected)

    def testGroupFirst(self):
        table = (Group("Options"), Boolean("-v", help="print more"), End())
        self.assertEqual(
            Parser(table, ("tool",)).format_help(),
            "Usage: tool\n\nOptions\n    -v    print more",
        )

    def testWrapping(self):
        words = " ".join(["word"] * 40)
        table = (String("-o", "--output", help=words), End())
        lines = Parser(table, ("tool",)).format_help().splitlines()
        rows = lines[2:]
        self.assertGreater(len(rows), 1)
        self.assertTrue(all(len(line) <= render.WIDTH for line in rows))
        # "-o, --output=<str>" (18) rounds to 20, column 24, help at 26
        self.assertTrue(rows[0].startswith("    -o, --output=<str>    word"))
        for line in rows[1:]:
            self.assertTrue(line.startswith(" " * 26 + "word"))

    def testRenderingIsPure(self):
        parser = _parser()
        before = parser.format_help()
        self.assertEqual(parser.format_help(), before)
        self.assertEqual(parser.cursor, 0)


class TestStyling(TestCase):
    """Behavioral tests for the palette switch."""

    def testPlainByDefault(self):
        self.assertEqual(render.format_help(_parser()).spans, [])

    def testColorfulAddsStyles(self):
        text = render.format_help(_parser(colorful=True))
        self.assertTrue(text.spans)
        self.assertEqual(text.plain, _parser().format_help())


if __name__ == "__main__":
    unittest.main()
