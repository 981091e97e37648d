"""
Bosun help formatter: Grammar → usage and help text.

The formatter is a pure function of a populated Grammar. It produces lists of
lines that may carry semantic tags for the output sink:

- <heading>...</heading>  section titles ("Usage:", "Options:", ...)
- <text>...</text>        prose (descriptions, epilog, extended help)
- <code>...</code>        option, argument and command names in tables
- <yellow>...</yellow>    default-value annotations

Layout of help()
    <description lines>

    Usage:
      name [command] --required [options] arg [optional]
      <extra usage lines>

    Options:
      -h, --help       Displays this help message
      --env=ENV        target environment [default: dev]

    Arguments:
      name             the database name

    Commands:
      create           creates things

    <epilog lines>

    Help:
      <extended help lines>

Empty sections are left out; declaration order is preserved everywhere.
"""
from collections.abc import Mapping

from .utils import empty

_INDENT = "  "


def _render_default(value):
    """
    render a default for the "[default: ...]" annotation.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Mapping):
        return ",".join("%s:%s" % (key, item) for key, item in value.items())
    if isinstance(value, list | tuple):
        return ",".join(map(str, value))
    return str(value)


def _table(rows):
    """
    lay out (name, description lines) rows in two columns.

    the name column is padded to the longest name plus two spaces; extra
    description lines hang under the first one.
    """
    if not rows:
        return []
    width = max(len(name) for name, _ in rows) + 2
    table = []
    for name, descr in rows:
        descr = list(descr) or [""]
        if first := descr.pop(0):
            table.append("%s<code>%s</code>%s<text>%s</text>" % (_INDENT, name, " " * (width - len(name)), first))
        else:
            table.append("%s<code>%s</code>" % (_INDENT, name))
        for line in descr:
            table.append("%s%s<text>%s</text>" % (_INDENT, " " * width, line))
    return table


class HelpFormatter:
    """
    Render usage and help for one Grammar.

    Usage
        formatter = HelpFormatter(grammar)
        formatter.usage_line()  # "db:create --connection [options] name"
        formatter.usage()       # ["<heading>Usage:</heading>", "  <text>...</text>"]
        formatter.help()        # full help lines
    """

    def __init__(self, grammar):
        self._grammar = grammar

    @property
    def grammar(self):
        return self._grammar

    def usage_line(self):
        """
        Assemble the one-line usage.

        - "<name>" (followed by "command" when sub-commands are declared),
        - every required option as "--name",
        - the literal "[options]",
        - each argument: required bare, optional bracketed,
          or "[arguments]" when no argument is declared.
        """
        grammar = self._grammar
        parts = [grammar.name]
        if grammar.subcommands:
            parts.append("command")
        parts.extend("--" + name for name, spec in grammar.options.items() if spec.required)
        parts.append("[options]")
        if grammar.arguments:
            parts.extend(spec.name if spec.required else "[%s]" % spec.name for spec in grammar.arguments)
        else:
            parts.append("[arguments]")
        return " ".join(parts)

    def usage(self):
        """Usage heading plus the generated usage line (used after parse errors)."""
        return [
            "<heading>Usage:</heading>",
            "%s<text>%s</text>" % (_INDENT, self.usage_line()),
        ]

    def options(self):
        """Rows for the options table: (label, description lines)."""
        rows = []
        for spec in self._grammar.options.values():
            label = "--" + spec.name
            if spec.short:
                label = "-%s, %s" % (spec.short, label)
            if not spec.boolean:
                label += "=" + spec.banner
            descr = list(spec.descr)
            if not spec.boolean and not empty(spec.default):
                annotation = "<yellow>[default: %s]</yellow>" % _render_default(spec.default)
                if descr:
                    descr[-1] = "%s %s" % (descr[-1], annotation)
                else:
                    descr.append(annotation)
            rows.append((label, descr))
        return rows

    def arguments(self):
        """Rows for the arguments table."""
        return [(spec.name, list(spec.descr)) for spec in self._grammar.arguments]

    def subcommands(self):
        """Rows for the sub-commands table."""
        return [(name, list(descr)) for name, descr in self._grammar.subcommands.items()]

    def help(self):
        """
        Render the full help text as tagged lines.
        """
        grammar = self._grammar
        sections = []

        if grammar.descr:
            sections.append(["<text>%s</text>" % line for line in grammar.descr])

        usage = self.usage()
        usage.extend("%s<text>%s</text>" % (_INDENT, line) for line in grammar.usages)
        sections.append(usage)

        for heading, rows in (
                ("Options:", self.options()),
                ("Arguments:", self.arguments()),
                ("Commands:", self.subcommands()),
        ):
            if rows:
                sections.append(["<heading>%s</heading>" % heading] + _table(rows))

        if grammar.epilog:
            sections.append(["<text>%s</text>" % line for line in grammar.epilog])

        if grammar.help:
            sections.append(["<heading>Help:</heading>"] + ["%s<text>%s</text>" % (_INDENT, line) for line in grammar.help])

        rendered = []
        for index, section in enumerate(sections):
            if index:
                rendered.append("")
            rendered.extend(section)
        return rendered


__all__ = (
    "HelpFormatter",
)
