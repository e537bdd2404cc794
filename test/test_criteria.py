"""
Criteria module behavioral tests (descriptions, checks, configuration faults).

Scope
- Validate describe() summaries for every variant.
- Validate check() acceptance and rejection reasons.
- Validate registration-time faults (duplicates, bad ranges, long descriptions).
- Validate that the variant set is sealed.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (factories, Option, ConfigError, ValidationError).
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argtree import (
    Criterion,
    Option,
    type_check,
    number_set,
    number_range_set,
    string_enum,
    custom,
)
from argtree.faults import ConfigError, ValidationError, FaultCode


class TestTypeCheck(TestCase):
    """TypeCheck accepts plain decimal literals only."""

    def testDescriptions(self):
        self.assertEqual(type_check("int").describe(), "type: int")
        self.assertEqual(type_check("double").describe(), "type: double")
        self.assertEqual(type_check(str).describe(), "type: string")

    def testIntAcceptsDecimalLiterals(self):
        criterion = type_check(int)
        for value in ("42", "-7", "+3", "0"):
            criterion.check(value)

    def testIntRejectsGarbage(self):
        criterion = type_check("int")
        for value in ("4.2", "12abc", " 12", "1_000", "", "abc"):
            with self.assertRaises(ValidationError) as context:
                criterion.check(value)
            self.assertEqual(context.exception.reason, "should be an int")

    def testDoubleAcceptsDecimalLiterals(self):
        criterion = type_check("double")
        for value in ("3.14", "-2", ".5", "5.", "1e10", "+6.02E23"):
            criterion.check(value)

    def testDoubleRejectsGarbage(self):
        criterion = type_check(float)
        for value in ("abc", "1.2.3", "nan", "3,14", "1e"):
            with self.assertRaises(ValidationError):
                criterion.check(value)

    def testStringAlwaysPasses(self):
        type_check("string").check("")
        type_check("string").check("anything at all")

    def testUnknownKindRaises(self):
        with self.assertRaises(ConfigError):
            type_check("float")


class TestNumberSets(TestCase):
    """NumberSet and NumberRangeSet membership and configuration."""

    def testNumberSetDescription(self):
        self.assertEqual(number_set(1, 2, 3).describe(), "options: 1, 2, 3")

    def testNumberSetMembership(self):
        criterion = number_set(1, 2, 3)
        criterion.check("2")
        with self.assertRaises(ValidationError) as context:
            criterion.check("4")
        self.assertEqual(context.exception.reason, "the chosen number is not allowed")
        with self.assertRaises(ValidationError) as context:
            criterion.check("two")
        self.assertEqual(context.exception.reason, "failed to parse the number")

    def testDuplicateNumberRaisesBeforeAnyParse(self):
        criterion = number_set(1)
        with self.assertRaises(ConfigError) as context:
            criterion.add(1)
        self.assertEqual(context.exception.code, FaultCode.DUPLICATE_ENTRY)

    def testBooleanIsNotANumber(self):
        with self.assertRaises(TypeError):
            number_set(True)

    def testRangeLaw(self):
        criterion = number_range_set(7).add_range(10, 20)
        self.assertEqual(criterion.describe(), "options: 7, 10-20")
        for value in ("7", "10", "20", "15"):
            criterion.check(value)
        for value in ("9", "21", "abc"):
            with self.assertRaises(ValidationError):
                criterion.check(value)

    def testRangeRejectionReasons(self):
        criterion = number_range_set().add_range(1, 5)
        with self.assertRaises(ValidationError) as context:
            criterion.check("6")
        self.assertEqual(context.exception.reason, "the chosen number was not in the correct range")
        with self.assertRaises(ValidationError) as context:
            criterion.check("six")
        self.assertEqual(context.exception.reason, "failed to parse the number")

    def testInvertedRangeRaises(self):
        with self.assertRaises(ConfigError) as context:
            number_range_set().add_range(20, 10)
        self.assertEqual(context.exception.code, FaultCode.INVALID_RANGE)

    def testDuplicateRangeRaises(self):
        criterion = number_range_set().add_range(1, 2)
        with self.assertRaises(ConfigError):
            criterion.add_range(1, 2)

    def testFluentBuildersReturnTheCriterion(self):
        criterion = number_range_set()
        self.assertIs(criterion.add(1), criterion)
        self.assertIs(criterion.add_range(3, 4), criterion)


class TestStringEnum(TestCase):
    """StringEnum folding and the unconstrained empty set."""

    def testCaseInsensitiveByDefault(self):
        criterion = string_enum("JSON", "yaml")
        self.assertEqual(criterion.possibilities, ("json", "yaml"))
        self.assertEqual(criterion.describe(), "options: json, yaml")
        criterion.check("Json")
        criterion.check("YAML")

    def testMatchCase(self):
        criterion = string_enum("JSON", match_case=True)
        criterion.check("JSON")
        with self.assertRaises(ValidationError) as context:
            criterion.check("json")
        self.assertIn("json", context.exception.reason)

    def testEmptySetAcceptsEverything(self):
        string_enum().check("whatever")

    def testDuplicateAfterFoldingRaises(self):
        with self.assertRaises(ConfigError):
            string_enum("json", "JSON")

    def testCaseSensitiveDuplicatesAreDistinct(self):
        criterion = string_enum("json", "JSON", match_case=True)
        self.assertEqual(criterion.possibilities, ("json", "JSON"))


class TestCustomPredicate(TestCase):
    """CustomPredicate uses the caller supplied message and description."""

    def testDescribeAndCheck(self):
        criterion = custom("must be even", "even numbers", lambda value: int(value) % 2 == 0)
        self.assertEqual(criterion.describe(), "custom test: even numbers")
        criterion.check("4")
        with self.assertRaises(ValidationError) as context:
            criterion.check("3")
        self.assertEqual(context.exception.reason, "must be even")

    def testLongDescriptionRaises(self):
        with self.assertRaises(ConfigError):
            custom("nope", "x" * 101, bool)

    def testPredicateMustBeCallable(self):
        with self.assertRaises(TypeError):
            custom("nope", "never", None)


class TestCriterionBinding(TestCase):
    """Faults raised by a bound criterion name the option and list its criteria."""

    def testBoundFaultCarriesOptionContext(self):
        option = Option("count", "c", expects_value=True)
        option.add_criterion(type_check("int")).add_criterion(number_set(1, 2))
        with self.assertRaises(ValidationError) as context:
            option.criteria[0].check("x")
        fault = context.exception
        self.assertEqual(fault.message, "-c / --count: should be an int")
        self.assertIs(fault.options["option"], option)
        self.assertEqual(fault.criteria, ("type: int", "options: 1, 2"))

    def testOptionCheckRunsCriteriaInOrder(self):
        option = Option("count", "c", expects_value=True)
        option.add_criterion(type_check("int")).add_criterion(number_set(1, 2))
        option.value = "abc"
        with self.assertRaises(ValidationError) as context:
            option.check()
        self.assertEqual(context.exception.reason, "should be an int")
        option.value = "3"
        with self.assertRaises(ValidationError) as context:
            option.check()
        self.assertEqual(context.exception.reason, "the chosen number is not allowed")


class TestSealing(TestCase):
    """The variant set is closed."""

    def testBaseCannotBeInstantiated(self):
        with self.assertRaises(TypeError):
            Criterion()

    def testSubclassingIsRejected(self):
        with self.assertRaises(TypeError):
            class Extra(Criterion):  # NOQA: F-841
                pass


if __name__ == "__main__":
    unittest.main()
