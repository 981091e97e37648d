"""
Bosun grammar: the declared options, arguments and help metadata of one command.

What this module provides
- Grammar: an ordered set of ArgumentSpecs, a mapping of OptionSpecs keyed by
  long name (with short aliases resolving to the same spec), sub-command
  entries used for help grouping, and free-text metadata consumed only by the
  help formatter.

Rules (enforced immediately, never deferred to parse time)
- option long names are unique; short aliases are unique.
- argument names are unique.
- once an optional argument is declared, no required argument may follow.
- a list/map argument takes every remaining positional, so nothing may follow it.
- spec-level rules (type, required + default, default type) are enforced by the
  spec constructors in bosun.arguments.

Every violation raises GrammarError with the rule's FaultCode.
"""
from .arguments import ArgumentSpec, OptionSpec
from .faults import FaultCode, GrammarError
from .utils import *


class Grammar:
    """
    Declarative model of a command line.

    Usage
        grammar = Grammar("db:create", descr="creates the database")
        grammar.add_option("connection", short="c", default="default")
        grammar.add_argument("name", required=True)

    Read-only views
    - options: {long name: OptionSpec} in declaration order.
    - shorts: {alias: OptionSpec}; each value is the same object as in options.
    - arguments: tuple of ArgumentSpec in declaration order.
    - subcommands: {name: description lines}.
    """

    options = mirror("options")
    shorts = mirror("shorts")
    arguments = mirror("arguments")
    subcommands = mirror("subcommands")
    usages = mirror("usages")

    def __init__(self, name="command", descr=None):
        self._name = name
        self._descr = lines(descr)
        self._epilog = []
        self._help = []
        self._usages = []
        self._options = {}
        self._shorts = {}
        self._arguments = []
        self._subcommands = {}

    def __repr__(self):
        return "grammar(name=%r, options=%r, arguments=%r)" % (
            self._name, tuple(self._options), tuple(argument.name for argument in self._arguments)
        )

    def __rich_repr__(self):
        yield "name", self._name
        yield "options", self.options
        yield "arguments", self.arguments
        yield "subcommands", self.subcommands

    # ── metadata ────────────────────────────────────────────────────────────

    @property
    def name(self):
        return self._name

    @name.setter
    def name(self, name):
        if not isinstance(name, str) or not name.strip():
            raise TypeError("grammar name must be a non-empty string")
        self._name = name.strip()

    @property
    def descr(self):
        return tuple(self._descr)

    @descr.setter
    def descr(self, text):
        self._descr = lines(text)

    @property
    def epilog(self):
        return tuple(self._epilog)

    @epilog.setter
    def epilog(self, text):
        self._epilog = lines(text)

    @property
    def help(self):
        return tuple(self._help)

    @help.setter
    def help(self, text):
        self._help = lines(text)

    def add_usage(self, usage):
        """Append one or more extra usage lines shown under the generated usage."""
        self._usages.extend(lines(usage))

    # ── declarations ────────────────────────────────────────────────────────

    def add_option(self, spec, /, **fields):
        """
        Declare an option.

        Parameters
        - spec: OptionSpec | str
          A ready spec, or the long name followed by OptionSpec fields
          (short, type, required, default, descr, banner).

        Raises
        - GrammarError: DUPLICATE_OPTION when the long name is taken,
          DUPLICATE_SHORT when the alias is taken, or any spec-level rule.

        Returns
        - the registered OptionSpec.
        """
        if not isinstance(spec, OptionSpec):
            spec = OptionSpec(spec, **fields)
        elif fields:
            raise TypeError("add_option() takes either a spec or a name with fields")

        if spec.name in self._options:
            raise GrammarError(
                "option %r is already declared" % spec.name,
                FaultCode.DUPLICATE_OPTION,
                name=spec.name,
            )
        if spec.short and spec.short in self._shorts:
            raise GrammarError(
                "short option %r of %r is already used by %r" % (spec.short, spec.name, self._shorts[spec.short].name),
                FaultCode.DUPLICATE_SHORT,
                name=spec.name,
            )

        self._options[spec.name] = spec
        if spec.short:
            self._shorts[spec.short] = spec
        return spec

    def add_argument(self, spec, /, **fields):
        """
        Declare the next positional argument.

        Parameters
        - spec: ArgumentSpec | str
          A ready spec, or the name followed by ArgumentSpec fields
          (type, required, default, descr).

        Raises
        - GrammarError: DUPLICATE_ARGUMENT, REQUIRED_AFTER_OPTIONAL,
          COLLECTION_NOT_LAST, or any spec-level rule.

        Returns
        - the registered ArgumentSpec.
        """
        if not isinstance(spec, ArgumentSpec):
            spec = ArgumentSpec(spec, **fields)
        elif fields:
            raise TypeError("add_argument() takes either a spec or a name with fields")

        if any(argument.name == spec.name for argument in self._arguments):
            raise GrammarError(
                "argument %r is already declared" % spec.name,
                FaultCode.DUPLICATE_ARGUMENT,
                name=spec.name,
            )

        if self._arguments:
            last = self._arguments[-1]
            if last.collection:
                raise GrammarError(
                    "argument %r cannot follow the %s argument %r" % (spec.name, last.type.value, last.name),
                    FaultCode.COLLECTION_NOT_LAST,
                    name=spec.name,
                )
            if spec.required and not all(argument.required for argument in self._arguments):
                raise GrammarError(
                    "required argument %r cannot follow an optional argument" % spec.name,
                    FaultCode.REQUIRED_AFTER_OPTIONAL,
                    name=spec.name,
                )

        self._arguments.append(spec)
        return spec

    def add_subcommand(self, name, descr=None):
        """
        Record a sub-command for help output (no parsing behavior).

        Raises
        - GrammarError: DUPLICATE_SUBCOMMAND when the name is already listed.
        """
        if not isinstance(name, str) or not (name := name.strip()):
            raise GrammarError("subcommand name must be a non-empty string", FaultCode.INVALID_NAME)
        if name in self._subcommands:
            raise GrammarError(
                "subcommand %r is already declared" % name,
                FaultCode.DUPLICATE_SUBCOMMAND,
                name=name,
            )
        self._subcommands[name] = tuple(lines(descr))

    # ── lookups ─────────────────────────────────────────────────────────────

    def find(self, name, /, short=False):
        """
        Resolve an option by long name (or by alias when short=True).

        Returns
        - OptionSpec, or None when nothing is declared under that name.
        """
        return (self._shorts if short else self._options).get(name)


__all__ = (
    "Grammar",
)
