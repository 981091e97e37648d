"""
IO module behavioral tests (rich console sink, in-memory sink, tag handling).

Scope
- Validate tag → markup translation and escaping of user text.
- Validate routing of normal and error output to their streams.
- Validate palette overrides (per instance and through __main__.__styles__).
- Validate BufferIo recording and scripted answers.

Conventions
- Test method names follow CamelCase per project convention.
- Console sinks write to StringIO buffers with colors disabled.
"""

import sys
import unittest
from io import StringIO
from unittest import TestCase, mock

from bosun import BufferIo, ConsoleIo, Sink, strip_tags


def _console(**options):
    stdout, stderr = StringIO(), StringIO()
    return ConsoleIo(stdout, stderr, colorful=False, **options), stdout, stderr


class TestConsoleIo(TestCase):
    """rich-backed terminal sink."""

    def testKnownTagsBecomeMarkup(self):
        console, _, _ = _console()
        self.assertEqual(console.markup("<error>bad</error>"), "[error]bad[/error]")

    def testUnknownTagsStayLiteral(self):
        console, _, _ = _console()
        self.assertEqual(console.markup("run <command>"), "run <command>")

    def testUserBracketsAreEscaped(self):
        console, _, _ = _console()
        self.assertEqual(console.markup("[bold]x"), "\\[bold]x")

    def testTrailingBackslashKeepsClosingTag(self):
        console, stdout, _ = _console()
        self.assertEqual(console.markup("<text>C:\\dir\\</text>"), "[text]C:\\dir\\\\[/text]")
        console.write("<text>C:\\dir\\</text> done")
        self.assertEqual(stdout.getvalue(), "C:\\dir\\ done\n")

    def testTrailingBackslashAtLineEnd(self):
        console, stdout, _ = _console()
        self.assertEqual(console.markup("<info>path</info> C:\\dir\\"), "[info]path[/info] C:\\dir\\")
        console.write("<info>path</info> C:\\dir\\")
        self.assertEqual(stdout.getvalue(), "path C:\\dir\\\n")

    def testWriteRendersPlainText(self):
        console, stdout, stderr = _console()
        console.write(["<heading>Usage:</heading>", "  <text>tool [options] [arguments]</text>"])
        self.assertEqual(stdout.getvalue(), "Usage:\n  tool [options] [arguments]\n")
        self.assertEqual(stderr.getvalue(), "")

    def testWriteAcceptsSingleLine(self):
        console, stdout, _ = _console()
        console.write("console <command>")
        self.assertEqual(stdout.getvalue(), "console <command>\n")

    def testWriteErrorUsesErrorStream(self):
        console, stdout, stderr = _console()
        console.write_error(["<exception> ERROR </exception> <text>missing</text>"])
        self.assertEqual(stderr.getvalue().strip(), "ERROR  missing")
        self.assertEqual(stdout.getvalue(), "")

    def testInstanceStyles(self):
        console, _, _ = _console(styles={"brand": "bold magenta"})
        self.assertEqual(console.markup("<brand>x</brand>"), "[brand]x[/brand]")

    def testMainStyles(self):
        with mock.patch.object(sys.modules["__main__"], "__styles__", {"brand": "bold"}, create=True):
            console, _, _ = _console()
        self.assertEqual(console.markup("<brand>x</brand>"), "[brand]x[/brand]")

    def testReadLine(self):
        console, stdout, _ = _console()
        with mock.patch("builtins.input", return_value="yes"):
            self.assertEqual(console.read_line("<heading>Continue?</heading> "), "yes")
        self.assertEqual(stdout.getvalue().strip(), "Continue?")

    def testIsSink(self):
        console, _, _ = _console()
        self.assertIsInstance(console, Sink)


class TestBufferIo(TestCase):
    """In-memory sink."""

    def testRecordsStreams(self):
        io = BufferIo()
        io.write("one")
        io.write(["two", "<info>three</info>"])
        io.write_error(["<error>bad</error>"])
        self.assertEqual(io.output, ["one", "two", "<info>three</info>"])
        self.assertEqual(io.errors, ["<error>bad</error>"])
        self.assertEqual(io.text(), "one\ntwo\nthree")
        self.assertEqual(io.text(errors=True), "bad")

    def testScriptedAnswers(self):
        io = BufferIo(["first"])
        self.assertEqual(io.read_line("a?"), "first")
        self.assertEqual(io.read_line("b?"), "")
        self.assertEqual(io.prompts, ["a?", "b?"])

    def testIsSink(self):
        self.assertIsInstance(BufferIo(), Sink)


class TestStripTags(TestCase):

    def testStripsKnownTagsOnly(self):
        self.assertEqual(strip_tags("<error>x</error> <command>"), "x <command>")


if __name__ == "__main__":
    unittest.main()
