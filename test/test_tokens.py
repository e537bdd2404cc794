"""
Tokenizer behavioral tests (escape handling, boundary, help intent, values).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argtree import Verb, Option
from argtree.tokens import Kind, Intent, Token, scan, boundary, intent, classify, tokenize


def kinds(tokens):
    return [token.kind for token in tokens]


class TestScan(TestCase):
    """Provisional flags and escape neutralization."""

    def testBasicKinds(self):
        tokens = scan(["-a", "word", "--long", "--"])
        self.assertEqual(kinds(tokens), [Kind.FLAG, Kind.POSITIONAL, Kind.FLAG, Kind.ESCAPE])
        self.assertEqual(tokens[1], Token(1, "word", Kind.POSITIONAL))

    def testEscapeNeutralizesNextFlag(self):
        tokens = scan(["-k", "--", "-x"])
        self.assertEqual(kinds(tokens), [Kind.FLAG, Kind.ESCAPE, Kind.POSITIONAL])

    def testNeutralizedEscapeDoesNotNeutralize(self):
        tokens = scan(["--", "--", "-x"])
        self.assertEqual(kinds(tokens), [Kind.ESCAPE, Kind.POSITIONAL, Kind.FLAG])

    def testEscapeBeforePlainWord(self):
        self.assertEqual(kinds(scan(["--", "word"])), [Kind.ESCAPE, Kind.POSITIONAL])

    def testStartKeepsAbsoluteIndices(self):
        tokens = scan(["convert", "-f", "json"], 1)
        self.assertEqual([token.index for token in tokens], [1, 2])
        self.assertEqual(tokens[0].text, "-f")


class TestBoundary(TestCase):
    """The boundary is the last flag, escapes excluded."""

    def testLastFlag(self):
        self.assertEqual(boundary(scan(["-a", "x", "-b", "y"])), 2)

    def testEscapeIsExcluded(self):
        self.assertEqual(boundary(scan(["-a", "x", "--"])), 0)

    def testDefaultWithoutFlags(self):
        self.assertEqual(boundary(scan(["x", "y"])), 0)
        self.assertEqual(boundary(scan(["verb", "x"], 1), default=1), 1)

    def testNeutralizedFlagIsNotABoundary(self):
        self.assertEqual(boundary(scan(["-a", "--", "-b", "x"])), 0)


class TestIntent(TestCase):
    """Help requests are detected before value binding."""

    def testHelpSpellings(self):
        self.assertIs(intent(scan(["-?"])), Intent.HELP)
        self.assertIs(intent(scan(["-a", "--help"])), Intent.HELP)

    def testVerbsSpelling(self):
        self.assertIs(intent(scan(["--verbs"])), Intent.VERBS)

    def testFirstRequestWins(self):
        self.assertIs(intent(scan(["--help", "--verbs"])), Intent.HELP)
        self.assertIs(intent(scan(["--verbs", "-?"])), Intent.VERBS)

    def testEscapedHelpIsNotAFlag(self):
        self.assertIsNone(intent(scan(["--", "-?"])))
        self.assertIsNone(intent(scan(["--", "--help"])))

    def testEscapedVerbsStillCounts(self):
        self.assertIs(intent(scan(["--", "--verbs"])), Intent.VERBS)

    def testNoRequest(self):
        self.assertIsNone(intent(scan(["-a", "help", "verbs"])))


class TestClassify(TestCase):
    """Plain words after value-expecting flags become values."""

    def setUp(self):
        self.verb = Verb("root")
        self.verb.add_option(Option("key", "k", expects_value=True))
        self.verb.add_option(Option("all", "a"))

    def testValueAfterFlag(self):
        tokens = classify(scan(["-k", "v", "w"]), self.verb)
        self.assertEqual(kinds(tokens), [Kind.FLAG, Kind.VALUE, Kind.POSITIONAL])
        self.assertTrue(tokens[1].word)

    def testValueAfterEscape(self):
        tokens = classify(scan(["-k", "--", "-x"]), self.verb)
        self.assertEqual(kinds(tokens), [Kind.FLAG, Kind.ESCAPE, Kind.VALUE])

    def testFlagWithoutValue(self):
        tokens = classify(scan(["-a", "v"]), self.verb)
        self.assertEqual(kinds(tokens), [Kind.FLAG, Kind.POSITIONAL])

    def testUnknownFlagLeavesWordsAlone(self):
        tokens = classify(scan(["--missing", "v"]), self.verb)
        self.assertEqual(kinds(tokens), [Kind.FLAG, Kind.POSITIONAL])

    def testFlagAfterValueFlagIsNotAValue(self):
        tokens = classify(scan(["-k", "-a"]), self.verb)
        self.assertEqual(kinds(tokens), [Kind.FLAG, Kind.FLAG])

    def testTokenize(self):
        tokens, edge, request = tokenize(["-k", "v", "-a", "x"], self.verb)
        self.assertEqual(kinds(tokens), [Kind.FLAG, Kind.VALUE, Kind.FLAG, Kind.POSITIONAL])
        self.assertEqual(edge, 2)
        self.assertIsNone(request)


if __name__ == "__main__":
    unittest.main()
