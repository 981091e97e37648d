"""
Bosun faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing issues
  (errors and warnings). Codes are grouped by domain to keep copy consistent
  and make searches predictable.
- GrammarError: declaration-time programmer errors (bad option/argument setup).
  These are never recovered by the core; they surface while a command builds
  its grammar, before any token is parsed.
- CommandException / ParseError family: user-input errors. They carry a message
  plus read-only options (code, title, hint, and context such as the offending
  name) and know how to render themselves as tagged lines for an output sink.
- CommandWarning family: non-fatal issues emitted through the warnings module.

Rendering
- render() returns lines with semantic tags (<exception>, <text>, <warning>);
  the sink decides what the tags look like. The core never picks colors.

Integration
- Grammar raises GrammarError immediately from add_option/add_argument.
- The parser raises ParseError subclasses; the command lifecycle catches them,
  writes render() plus the usage text and reports failure.
- UnknownCommandError is rendered by the dispatcher and by nested run_command().
"""
from enum import IntEnum
from types import MappingProxyType

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping (by high-level domain)
    - grammar (101xx): declaration-time rules
      • DUPLICATE_OPTION, DUPLICATE_SHORT, DUPLICATE_ARGUMENT, DUPLICATE_SUBCOMMAND,
        DUPLICATE_COMMAND, REQUIRED_DEFAULT, UNSUPPORTED_TYPE, DEFAULT_TYPE,
        REQUIRED_AFTER_OPTIONAL, COLLECTION_NOT_LAST, INVALID_NAME
    - routing (111xx)
      • UNKNOWN_COMMAND
    - options/arguments (112xx)
      • UNKNOWN_OPTION, MISSING_VALUE, INVALID_VALUE, MISSING_OPTION, MISSING_ARGUMENT
    - warnings (12xxx)
      • INLINE_FLAG_VALUE, UNEXPECTED_ARGUMENT
    """
    # --- grammar errors (101xx) ---
    DUPLICATE_OPTION        = 10101
    DUPLICATE_SHORT         = 10102
    DUPLICATE_ARGUMENT      = 10103
    DUPLICATE_SUBCOMMAND    = 10104
    DUPLICATE_COMMAND       = 10105
    REQUIRED_DEFAULT        = 10111
    UNSUPPORTED_TYPE        = 10112
    DEFAULT_TYPE            = 10113
    REQUIRED_AFTER_OPTIONAL = 10121
    COLLECTION_NOT_LAST     = 10122
    INVALID_NAME            = 10131

    # --- routing errors (111xx) ---
    UNKNOWN_COMMAND         = 11101

    # --- option/argument errors (112xx) ---
    UNKNOWN_OPTION          = 11201
    MISSING_VALUE           = 11202
    INVALID_VALUE           = 11203
    MISSING_OPTION          = 11204
    MISSING_ARGUMENT        = 11205

    # --- warnings (12xxx) ---
    INLINE_FLAG_VALUE       = 12101
    UNEXPECTED_ARGUMENT     = 12102


class GrammarError(ValueError):
    """
    Declaration-time error: the grammar being built violates one of its rules.

    attributes
    - rule: FaultCode naming the violated rule.
    - options: read-only mapping with extra context (e.g. name).
    """

    def __init__(self, message, /, rule, **options):
        super().__init__(message)
        self.message = message
        self.rule = FaultCode(rule)
        self.options = MappingProxyType(options)


class CommandException(Exception):
    """
    Base type for user-facing command errors.

    carries
    - message: one-sentence, lowercase description.
    - options: read-only mapping; known keys are code, title and hint, plus any
      context the raiser wants to keep (name, value, kind...).
    """
    code = Unset
    title = "error"

    def __init__(self, message, /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        options.setdefault("code", type(self).code)
        options.setdefault("title", type(self).title)
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return self.message == other.message and dict(self.options) == dict(other.options)

    def __hash__(self):
        return hash((type(self), self.message))

    def __getattr__(self, name):
        # context values (name, value, kind...) read as attributes
        try:
            return self.__dict__["options"][name]
        except KeyError:
            raise AttributeError(name) from None

    def render(self):
        """
        tagged lines for an output sink.

        format
        - "<exception> ERROR </exception> <text>{message}</text>"
        - "<text>{hint}</text>" when a hint is present
        """
        rendered = ["<exception> ERROR </exception> <text>%s</text>" % self.message]
        if hint := self.options.get("hint"):
            rendered.append("<text>%s</text>" % hint)
        return rendered


class ParseError(CommandException):
    """
    Base type for errors raised while parsing a token vector against a grammar.
    """
    title = "parse error"


class UnknownOptionError(ParseError):
    """A long or short option that the grammar does not declare."""
    code = FaultCode.UNKNOWN_OPTION
    title = "unknown option"

    def __init__(self, name, /, short=False, **options):
        dashes = "-" if short else "--"
        super().__init__(
            "unknown %soption %s%s" % ("short " if short else "", dashes, name),
            name=name,
            short=short,
            **options,
        )


class MissingValueError(ParseError):
    """A non-boolean option given without the =value form."""
    code = FaultCode.MISSING_VALUE
    title = "missing value"

    def __init__(self, name, /, **options):
        options.setdefault("hint", "use the inline form: --%s=<value>" % name)
        super().__init__("option --%s requires a value" % name, name=name, **options)


class InvalidValueError(ParseError):
    """A value that cannot be coerced to the declared kind."""
    code = FaultCode.INVALID_VALUE
    title = "invalid value"

    def __init__(self, name, value, kind, /, **options):
        super().__init__(
            "invalid %s value %r for %s" % (kind, value, name),
            name=name,
            value=value,
            kind=kind,
            **options,
        )


class MissingOptionError(ParseError):
    """A required option that was neither given nor defaulted."""
    code = FaultCode.MISSING_OPTION
    title = "missing option"

    def __init__(self, name, /, **options):
        super().__init__("missing required option `%s`" % name, name=name, **options)


class MissingArgumentError(ParseError):
    """A required positional argument that was not supplied."""
    code = FaultCode.MISSING_ARGUMENT
    title = "missing argument"

    def __init__(self, name, /, **options):
        super().__init__("missing required argument `%s`" % name, name=name, **options)


class UnknownCommandError(CommandException):
    """A command name with no registry entry."""
    code = FaultCode.UNKNOWN_COMMAND
    title = "unknown command"

    def __init__(self, name, /, **options):
        super().__init__("command `%s` not found" % name, name=name, **options)

    def render(self):
        return ["<error>%s</error>" % self.message]


class CommandWarning(Warning):
    """
    Base type for non-fatal command issues, issued through warnings.warn.

    The lifecycle records these while parsing and writes render() to the error sink.
    """
    code = Unset
    title = "warning"

    def __init__(self, message, /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        options.setdefault("code", type(self).code)
        options.setdefault("title", type(self).title)
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message

    def render(self):
        return ["<warning>%s</warning>" % self.message]


class InlineFlagValueWarning(CommandWarning):
    """A boolean option written as --flag=value; the value is ignored."""
    code = FaultCode.INLINE_FLAG_VALUE
    title = "flag value ignored"

    def __init__(self, name, value, /, **options):
        super().__init__("boolean option --%s ignores the value %r" % (name, value), name=name, value=value, **options)


class UnexpectedArgumentWarning(CommandWarning):
    """Positional tokens beyond the declared arguments; they are ignored."""
    code = FaultCode.UNEXPECTED_ARGUMENT
    title = "unexpected argument"

    def __init__(self, values, /, **options):
        values = tuple(values)
        super().__init__(
            "ignoring unexpected argument%s %s" % ("s" * (len(values) > 1), ", ".join(map(repr, values))),
            values=values,
            **options,
        )


__all__ = (
    "FaultCode",
    "GrammarError",
    "CommandException",
    "ParseError",
    "UnknownOptionError",
    "MissingValueError",
    "InvalidValueError",
    "MissingOptionError",
    "MissingArgumentError",
    "UnknownCommandError",
    "CommandWarning",
    "InlineFlagValueWarning",
    "UnexpectedArgumentWarning",
)
