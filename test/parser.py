"""
Parser module behavioral tests (classification, binding, validation, defaults).

Scope
- Validate option forms (long, short alias, inline values) and their faults.
- Validate positional binding, including trailing list/map arguments.
- Validate required checks, the help bypass and default resolution.
- Validate warnings for ignored input and purity of parse().

Conventions
- Test method names follow CamelCase per project convention.
- Grammars are built per test through small helpers.
"""

import unittest
from types import MappingProxyType
from unittest import TestCase

from bosun import (
    Grammar,
    InlineFlagValueWarning,
    InvalidValueError,
    MissingArgumentError,
    MissingOptionError,
    MissingValueError,
    ParseResult,
    UnexpectedArgumentWarning,
    UnknownOptionError,
    parse,
)


def _grammar():
    grammar = Grammar("tool")
    grammar.add_option("help", short="h", type="boolean")
    grammar.add_option("verbose", short="v", type="boolean")
    return grammar


class TestOptionParsing(TestCase):
    """Long/short options and inline values."""

    def testLongAndShortFlagAreEquivalent(self):
        grammar = _grammar()
        self.assertEqual(parse(["--verbose"], grammar), parse(["-v"], grammar))
        self.assertIs(parse(["-v"], grammar).options["verbose"], True)

    def testUnsetBooleansResolveToFalse(self):
        result = parse([], _grammar())
        self.assertEqual(dict(result.options), {"help": False, "verbose": False})

    def testInlineValue(self):
        grammar = _grammar()
        grammar.add_option("env", short="e")
        self.assertEqual(parse(["--env=prod"], grammar).options["env"], "prod")
        self.assertEqual(parse(["-e=stage"], grammar).options["env"], "stage")

    def testInlineValueSplitsOnFirstEquals(self):
        grammar = _grammar()
        grammar.add_option("filter")
        self.assertEqual(parse(["--filter=a=b"], grammar).options["filter"], "a=b")

    def testEmptyInlineValue(self):
        grammar = _grammar()
        grammar.add_option("env")
        self.assertEqual(parse(["--env="], grammar).options["env"], "")

    def testNonBooleanWithoutValueRaises(self):
        grammar = _grammar()
        grammar.add_option("env")
        with self.assertRaises(MissingValueError) as context:
            parse(["--env", "prod"], grammar)
        self.assertEqual(context.exception.name, "env")

    def testUnknownLongOptionRaises(self):
        with self.assertRaises(UnknownOptionError) as context:
            parse(["--bogus"], _grammar())
        self.assertEqual(context.exception.name, "bogus")
        self.assertFalse(context.exception.short)

    def testUnknownShortOptionRaises(self):
        with self.assertRaises(UnknownOptionError) as context:
            parse(["-x"], _grammar())
        self.assertEqual(context.exception.name, "x")
        self.assertTrue(context.exception.short)

    def testBundledShortFlagsAreNotSupported(self):
        with self.assertRaises(UnknownOptionError):
            parse(["-hv"], _grammar())

    def testLoneDashesAreUnknownOptions(self):
        for token in ("-", "--"):
            with self.subTest(token=token):
                with self.assertRaises(UnknownOptionError) as context:
                    parse([token], _grammar())
                self.assertEqual(context.exception.name, "")

    def testIntegerOption(self):
        grammar = _grammar()
        grammar.add_option("port", type="integer")
        self.assertEqual(parse(["--port=8080"], grammar).options["port"], 8080)

        with self.assertRaises(InvalidValueError) as context:
            parse(["--port=http"], grammar)
        self.assertEqual(context.exception.name, "--port")

    def testListOption(self):
        grammar = _grammar()
        grammar.add_option("tags", type="list")
        self.assertEqual(parse(["--tags=a,b,,c"], grammar).options["tags"], ["a", "b", "c"])

    def testMapOption(self):
        grammar = _grammar()
        grammar.add_option("labels", type="map")
        result = parse(["--labels=team:core,tier:1,loose"], grammar)
        self.assertEqual(result.options["labels"], {"team": "core", "tier": "1", 0: "loose"})

    def testRepeatedOptionKeepsLastValue(self):
        grammar = _grammar()
        grammar.add_option("env")
        self.assertEqual(parse(["--env=a", "--env=b"], grammar).options["env"], "b")

    def testFlagWithInlineValueWarns(self):
        grammar = _grammar()
        with self.assertWarns(InlineFlagValueWarning):
            result = parse(["--verbose=0"], grammar)
        self.assertIs(result.options["verbose"], True)


class TestPositionalBinding(TestCase):
    """Binding positional tokens to declared arguments."""

    def testBindsInOrderAroundOptions(self):
        grammar = _grammar()
        grammar.add_argument("source")
        grammar.add_argument("target")
        result = parse(["a", "-v", "b"], grammar)
        self.assertEqual(dict(result.arguments), {"source": "a", "target": "b"})

    def testListArgumentTakesRemaining(self):
        grammar = _grammar()
        grammar.add_argument("files", type="list")
        self.assertEqual(parse(["a.txt", "b.txt"], grammar).arguments["files"], ["a.txt", "b.txt"])

    def testListArgumentAfterScalar(self):
        grammar = _grammar()
        grammar.add_argument("command", required=True)
        grammar.add_argument("files", type="list")
        result = parse(["copy", "a", "b", "c"], grammar)
        self.assertEqual(result.arguments["command"], "copy")
        self.assertEqual(result.arguments["files"], ["a", "b", "c"])

    def testMapArgumentMixesKeyedAndBareEntries(self):
        grammar = _grammar()
        grammar.add_argument("pairs", type="map")
        result = parse(["name:bosun", "loose", "port:80", "other"], grammar)
        self.assertEqual(result.arguments["pairs"], {"name": "bosun", 0: "loose", "port": "80", 1: "other"})

    def testNumericMapKeysMoveTheAppendSlot(self):
        grammar = _grammar()
        grammar.add_argument("pairs", type="map")
        self.assertEqual(parse(["0:x", "b"], grammar).arguments["pairs"], {0: "x", 1: "b"})
        self.assertEqual(parse(["5:x", "b"], grammar).arguments["pairs"], {5: "x", 6: "b"})
        self.assertEqual(parse(["a", "0:x"], grammar).arguments["pairs"], {0: "x"})

    def testNonCanonicalNumericMapKeysStayStrings(self):
        grammar = _grammar()
        grammar.add_argument("pairs", type="map")
        self.assertEqual(parse(["07:x", "b"], grammar).arguments["pairs"], {"07": "x", 0: "b"})

    def testMapArgumentSplitsOnFirstColon(self):
        grammar = _grammar()
        grammar.add_argument("pairs", type="map")
        self.assertEqual(parse(["url:http://x"], grammar).arguments["pairs"], {"url": "http://x"})

    def testIntegerArgument(self):
        grammar = _grammar()
        grammar.add_argument("count", type="integer")
        self.assertEqual(parse(["3"], grammar).arguments["count"], 3)
        with self.assertRaises(InvalidValueError):
            parse(["three"], grammar)

    def testBooleanArgument(self):
        grammar = _grammar()
        grammar.add_argument("enabled", type="boolean")
        self.assertIs(parse(["0"], grammar).arguments["enabled"], False)
        self.assertIs(parse(["yes"], grammar).arguments["enabled"], True)

    def testEmptyTokenIsPositional(self):
        grammar = _grammar()
        grammar.add_argument("name")
        self.assertEqual(parse([""], grammar).arguments["name"], "")

    def testExtraPositionalsWarn(self):
        grammar = _grammar()
        grammar.add_argument("name")
        with self.assertWarns(UnexpectedArgumentWarning) as context:
            result = parse(["a", "b", "c"], grammar)
        self.assertEqual(dict(result.arguments), {"name": "a"})
        self.assertEqual(context.warning.options["values"], ("b", "c"))

    def testUnboundArgumentsAreAbsent(self):
        grammar = _grammar()
        grammar.add_argument("name")
        self.assertNotIn("name", parse([], grammar).arguments)


class TestValidation(TestCase):
    """Required checks and the help bypass."""

    def testMissingRequiredOption(self):
        grammar = _grammar()
        grammar.add_option("name", required=True)
        with self.assertRaises(MissingOptionError) as context:
            parse([], grammar)
        self.assertEqual(context.exception.name, "name")

    def testEmptyRequiredOptionCountsAsMissing(self):
        grammar = _grammar()
        grammar.add_option("name", required=True)
        with self.assertRaises(MissingOptionError):
            parse(["--name="], grammar)

    def testZeroSatisfiesRequiredOption(self):
        grammar = _grammar()
        grammar.add_option("retries", type="integer", required=True)
        self.assertEqual(parse(["--retries=0"], grammar).options["retries"], 0)

    def testMissingRequiredArgument(self):
        grammar = _grammar()
        grammar.add_argument("file", required=True)
        with self.assertRaises(MissingArgumentError) as context:
            parse([], grammar)
        self.assertEqual(context.exception.name, "file")

    def testHelpBypassesRequiredArguments(self):
        grammar = _grammar()
        grammar.add_argument("file", required=True)
        result = parse(["--help"], grammar)
        self.assertIs(result.options["help"], True)
        self.assertNotIn("file", result.arguments)

    def testHelpDoesNotBypassRequiredOptions(self):
        grammar = _grammar()
        grammar.add_option("name", required=True)
        with self.assertRaises(MissingOptionError):
            parse(["-h"], grammar)


class TestDefaults(TestCase):
    """Default resolution."""

    def testDefaultAppliedOnlyWhenAbsent(self):
        grammar = _grammar()
        grammar.add_option("env", default="dev")
        self.assertEqual(parse([], grammar).options["env"], "dev")
        self.assertEqual(parse(["--env=prod"], grammar).options["env"], "prod")

    def testOptionWithoutDefaultIsAbsent(self):
        grammar = _grammar()
        grammar.add_option("env")
        self.assertNotIn("env", parse([], grammar).options)

    def testArgumentDefault(self):
        grammar = _grammar()
        grammar.add_argument("mode", default="fast")
        self.assertEqual(parse([], grammar).arguments["mode"], "fast")
        self.assertEqual(parse(["slow"], grammar).arguments["mode"], "slow")

    def testCollectionDefaultsAreFreshCopies(self):
        grammar = _grammar()
        grammar.add_option("tags", type="list", default=["a"])
        first = parse([], grammar).options["tags"]
        first.append("mutated")
        self.assertEqual(parse([], grammar).options["tags"], ["a"])


class TestParseResult(TestCase):
    """Result object behavior."""

    def testParseIsPure(self):
        grammar = _grammar()
        grammar.add_option("env", default="dev")
        grammar.add_argument("files", type="list")
        tokens = ["-v", "a", "--env=prod", "b"]
        self.assertEqual(parse(tokens, grammar), parse(list(tokens), grammar))

    def testResultIsReadOnly(self):
        result = parse(["-v"], _grammar())
        self.assertIsInstance(result.options, MappingProxyType)
        with self.assertRaises(TypeError):
            result.options["verbose"] = False  # type: ignore[index]
        with self.assertRaises(AttributeError):
            result.extra = 1  # type: ignore[attr-defined]

    def testCollectionValuesAreNotShared(self):
        grammar = _grammar()
        grammar.add_argument("files", type="list")
        first = parse(["a.txt", "b.txt"], grammar)
        first.arguments["files"].append("c.txt")
        self.assertIsInstance(first.arguments, MappingProxyType)
        self.assertEqual(parse(["a.txt", "b.txt"], grammar).arguments["files"], ["a.txt", "b.txt"])

    def testOptionsFollowDeclarationOrder(self):
        grammar = _grammar()
        grammar.add_option("env", default="dev")
        self.assertEqual(list(parse(["--env=x", "-v"], grammar).options), ["help", "verbose", "env"])

    def testAccessorsWithDefault(self):
        result = ParseResult({"env": "dev"}, {})
        self.assertEqual(result.option("env"), "dev")
        self.assertEqual(result.argument("file", "none"), "none")

    def testTokensMustBeStrings(self):
        with self.assertRaises(TypeError):
            parse([1], _grammar())  # type: ignore[list-item]


if __name__ == "__main__":
    unittest.main()
