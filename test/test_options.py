"""
Options module behavioral tests (name rules, criteria binding, actions).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argtree import Option, option, type_check
from argtree.faults import ConfigError, FaultCode


class TestOptionNames(TestCase):
    """Registration-time validation of names, shorts and descriptions."""

    def testValidOption(self):
        fmt = Option("format", "f", "output format", expects_value=True, required=True)
        self.assertEqual(fmt.name, "format")
        self.assertEqual(fmt.short, "f")
        self.assertEqual(fmt.spellings, ("--format", "-f"))
        self.assertEqual(fmt.label, "-f / --format")
        self.assertTrue(fmt.expects_value)
        self.assertTrue(fmt.required)
        self.assertFalse(fmt.value_required)

    def testLongOnlyOption(self):
        level = option("level")
        self.assertEqual(level.spellings, ("--level",))
        self.assertEqual(level.label, "--level")

    def testBadLengthsRaise(self):
        for name in ("a", "x" * 16):
            with self.assertRaises(ConfigError) as context:
                Option(name)
            self.assertEqual(context.exception.code, FaultCode.INVALID_NAME)

    def testLengthBoundsAreInclusive(self):
        Option("ab")
        Option("x" * 15)

    def testLeadingDashAndCharsetRaise(self):
        for name in ("-name", "--", "bad name", "naïve", "a.b"):
            with self.assertRaises(ConfigError):
                Option(name)

    def testReservedNamesRaise(self):
        for name in ("help", "verbs"):
            with self.assertRaises(ConfigError) as context:
                Option(name)
            self.assertEqual(context.exception.code, FaultCode.RESERVED_NAME)
        for short in ("?", "-"):
            with self.assertRaises(ConfigError) as context:
                Option("name", short)
            self.assertEqual(context.exception.code, FaultCode.RESERVED_NAME)

    def testBadShortRaises(self):
        for short in ("ab", "", " "):
            with self.assertRaises(ConfigError):
                Option("name", short)

    def testNonStringInputsRaiseTypeError(self):
        with self.assertRaises(TypeError):
            Option(42)
        with self.assertRaises(TypeError):
            Option("name", 1)
        with self.assertRaises(TypeError):
            Option("name", "n", None)

    def testLongDescriptionRaises(self):
        Option("name", descr="x" * 100)
        with self.assertRaises(ConfigError) as context:
            Option("name", descr="x" * 101)
        self.assertEqual(context.exception.code, FaultCode.INVALID_DESCRIPTION)

    def testConfigErrorIsValueError(self):
        with self.assertRaises(ValueError):
            Option("help")


class TestOptionHooks(TestCase):
    """Criteria attachment, actions and runtime state."""

    def testSameCriterionTwiceRaises(self):
        criterion = type_check("int")
        first = Option("first", expects_value=True).add_criterion(criterion)
        with self.assertRaises(ConfigError) as context:
            first.add_criterion(criterion)
        self.assertEqual(context.exception.code, FaultCode.ALREADY_ATTACHED)
        with self.assertRaises(ConfigError):
            Option("second", expects_value=True).add_criterion(criterion)
        self.assertIs(criterion.option, first)
        self.assertEqual(first.criteria, (criterion,))

    def testNonCriterionRaises(self):
        with self.assertRaises(TypeError):
            Option("name").add_criterion(lambda value: True)

    def testActionDecorator(self):
        seen = []
        verbose = Option("verbose", "v")

        @verbose.action
        def announce(option):
            seen.append(option.name)

        self.assertTrue(callable(announce))
        verbose.run()
        self.assertEqual(seen, [])
        verbose.present = True
        verbose.run()
        self.assertEqual(seen, ["verbose"])

    def testActionCannotBeRebound(self):
        verbose = Option("verbose")
        verbose.action(print)
        with self.assertRaises(ConfigError) as context:
            verbose.action(print)
        self.assertEqual(context.exception.code, FaultCode.ACTION_REBOUND)

    def testActionMustBeCallable(self):
        with self.assertRaises(TypeError):
            Option("verbose").action("print")

    def testResetClearsState(self):
        fmt = Option("format", expects_value=True)
        fmt.present, fmt.value = True, "json"
        fmt.reset()
        self.assertFalse(fmt.present)
        self.assertEqual(fmt.value, "")

    def testViewsAreReadOnly(self):
        fmt = Option("format")
        with self.assertRaises(AttributeError):
            fmt.name = "other"
        self.assertIsInstance(fmt.criteria, tuple)


if __name__ == "__main__":
    unittest.main()
