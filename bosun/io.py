"""
Bosun output sinks.

The core never prints. Commands and the dispatcher hand lines to a sink that
implements three calls:

- write(lines)        normal output
- write_error(lines)  diagnostics
- read_line(prompt)   one line of user input

Lines may carry semantic tags such as <error>...</error> or
<heading>...</heading>; rendering them is the sink's job.

Sinks
- ConsoleIo: rich-based terminal sink. Tags map to theme styles; the palette
  can be overridden per instance or through a __styles__ mapping defined in
  __main__.
- BufferIo: records everything in memory and answers prompts from a script
  (tests, embedding).
"""
import re
from collections import deque
from typing import Protocol, runtime_checkable

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

_TAG = re.compile(r"<(/?)([a-z][\w-]*)>")


@runtime_checkable
class Sink(Protocol):
    """Narrow output/input contract consumed by commands and the dispatcher."""

    def write(self, lines): ...

    def write_error(self, lines): ...

    def read_line(self, prompt): ...


def _normalize(lines):
    return [lines] if isinstance(lines, str) else list(lines)


def _literal(text, tagged):
    """
    escape plain text for rich markup.

    trailing backslashes are doubled only when a markup tag follows (tagged),
    since rich reads backslashes as escapes only in front of a tag.
    """
    body = text.rstrip("\\")
    trailing = len(text) - len(body)
    return escape(body) + "\\" * (trailing * 2 if tagged else trailing)


def strip_tags(line, /):
    """Remove known semantic tags (palette names), keeping their content."""
    return _TAG.sub(lambda match: "" if match[2] in ConsoleIo.styles else match[0], line)


class ConsoleIo:
    """
    Terminal sink built on rich.

    Palette keys are tag names; a tag with no palette entry is printed as-is.
    """

    styles = {
        # === Status ===
        "exception": "bold #FFFFFF on #EF4444",
        "error": "#EF4444",
        "warning": "#FFD600",
        "success": "#22C55E",
        "info": "#36C5F0",
        "notice": "#00E6FF",
        "debug": "#9CA3AF",

        # === Help layout ===
        "heading": "bold #FFD600",
        "text": "none",
        "code": "bold #22C55E",
        "yellow": "#FFD600",
    }

    def __init__(self, stdout=None, stderr=None, *, styles=None, colorful=True):
        palette = self.styles | getattr(__import__("__main__"), "__styles__", {}) | (styles or {})
        if not colorful:
            palette = dict.fromkeys(palette, "none")
        self._palette = palette
        theme = Theme(palette)
        self._stdout = Console(file=stdout, theme=theme, highlight=False, no_color=not colorful)
        self._stderr = Console(file=stderr, stderr=stderr is None, theme=theme, highlight=False, no_color=not colorful)

    def markup(self, line, /):
        """
        Translate one tagged line into rich markup.

        Text between tags is escaped segment by segment, so user data (brackets,
        a trailing backslash) never turns into markup or eats a style tag; only
        tags named in the palette become styles.
        """
        parts = []
        position = 0
        for match in _TAG.finditer(line):
            closing, name = match.groups()
            styled = name in self._palette
            parts.append(_literal(line[position:match.start()], styled))
            if styled:
                parts.append("[/%s]" % name if closing else "[%s]" % name)
            else:
                parts.append(escape(match[0]))
            position = match.end()
        parts.append(_literal(line[position:], False))
        return "".join(parts)

    def write(self, lines):
        for line in _normalize(lines):
            self._stdout.print(self.markup(line))

    def write_error(self, lines):
        for line in _normalize(lines):
            self._stderr.print(self.markup(line))

    def read_line(self, prompt):
        return self._stdout.input(self.markup(prompt))


class BufferIo:
    """
    In-memory sink.

    - output / errors: every line written, in order.
    - prompts: every prompt shown by read_line().
    - answers: scripted replies consumed by read_line(); an exhausted script
      answers with the empty string.
    """

    def __init__(self, answers=()):
        self.output = []
        self.errors = []
        self.prompts = []
        self.answers = deque(answers)

    def write(self, lines):
        self.output.extend(_normalize(lines))

    def write_error(self, lines):
        self.errors.extend(_normalize(lines))

    def read_line(self, prompt):
        self.prompts.append(prompt)
        return self.answers.popleft() if self.answers else ""

    def text(self, *, errors=False):
        """Everything written to one stream, tags removed, joined by newlines."""
        return "\n".join(map(strip_tags, self.errors if errors else self.output))


__all__ = (
    "Sink",
    "ConsoleIo",
    "BufferIo",
    "strip_tags",
)
