"""
Bosun command layer: one command, one grammar, one lifecycle per run.

What this module provides
- Command: base class for runnable commands. Subclasses declare their grammar
  in initialize() and put their logic in execute().
- State: the lifecycle stages a run goes through.
- Context: the collaborators a command receives explicitly (output sink,
  registry for nested commands, application services).

Lifecycle of Command.run(tokens)
    CREATED → INITIALIZING → PARSING ─┬─ PARSE_FAILED   → DONE  (error + usage, failure)
                                      ├─ HELP_REQUESTED → DONE  (full help, success)
                                      └─ PARSED → STARTING → EXECUTING → SHUTTING_DOWN → DONE

- INITIALIZING runs only on the first run of an instance.
- abort()/exit() may be called at any depth of startup/execute/shutdown; the
  run stops right there and returns Outcome.terminate(code, message).
- run_command() runs another registered command synchronously. A terminated
  nested run terminates the caller too, so the signal reaches the dispatcher.

Quick start
    from bosun import Command, Dispatcher, Registry

    registry = Registry()

    @registry.register
    class Greet(Command):
        name = "greet"
        descr = "Says hello"

        def initialize(self):
            self.add_argument("who", required=True, descr="who to greet")
            self.add_option("shout", short="s", type="boolean")

        def execute(self):
            message = "hello {who}"
            if self.options("shout"):
                message = message.upper()
            self.out(message, {"who": self.arguments("who")})

    Dispatcher(registry).run(["greet", "world", "-s"])
"""
import re
import warnings
from abc import ABC, abstractmethod
from collections.abc import Mapping
from enum import Enum

from .faults import *
from .formatter import HelpFormatter
from .grammar import Grammar
from .io import ConsoleIo
from .parser import ParseResult, parse
from .signals import *
from .utils import *


class State(Enum):
    """Lifecycle stages of a command run."""
    CREATED = "created"
    INITIALIZING = "initializing"
    PARSING = "parsing"
    PARSE_FAILED = "parse-failed"
    HELP_REQUESTED = "help-requested"
    PARSED = "parsed"
    STARTING = "starting"
    EXECUTING = "executing"
    SHUTTING_DOWN = "shutting-down"
    DONE = "done"


class Context:
    """
    Collaborators injected into a command.

    - io: output sink (write/write_error/read_line); defaults to ConsoleIo().
    - registry: command registry used by run_command(); may be None.
    - services: any application object commands need (data access, config...).
    """
    __slots__ = ("io", "registry", "services")

    def __init__(self, io=None, registry=None, services=None):
        self.io = io if io is not None else ConsoleIo()
        self.registry = registry
        self.services = services

    def __repr__(self):
        return "context(io=%r, registry=%r, services=%r)" % (self.io, self.registry, self.services)


_NAME = re.compile(r"[a-z][a-z-]+(?::[a-z-]+)*")


def _argv(args):
    """
    turn run_command() arguments into tokens.

    - a mapping: int keys are positionals (value as-is); str keys are options,
      rendered "key=value", just "key" for True, skipped for False/None.
    - any other iterable: each item as a string.
    """
    if isinstance(args, str):
        return [args]
    if not isinstance(args, Mapping):
        return [str(arg) for arg in args]
    tokens = []
    for key, value in args.items():
        if isinstance(key, int):
            tokens.append(str(value))
        elif value is True:
            tokens.append(key)
        elif value is False or value is None:
            continue
        else:
            tokens.append("%s=%s" % (key, value))
    return tokens


class Command(ABC):
    """
    Base class for runnable commands.

    Class attributes (help metadata)
    - name: command name, "word", "word-word" or "namespace:word" (lowercase).
    - descr: description shown before help and in the dispatcher listing.
    - epilog: text shown after the help tables.
    - help: extended help shown in the "Help:" section.
    - usages: extra usage lines.

    Every command understands --help/-h and --verbose/-v.

    Extension points
    - initialize(): declare options and arguments.
    - startup() / shutdown(): hooks around execute().
    - execute(): the command's work (required).
    """

    name = Unset
    descr = None
    epilog = None
    help = None
    usages = ()

    def __init__(self, context=None):
        if not isinstance(name := self.name, str) or not _NAME.fullmatch(name):
            raise GrammarError("command name %r is invalid" % (name,), FaultCode.INVALID_NAME, name=name)

        self._context = context if context is not None else Context()
        self._grammar = Grammar(name)
        self._grammar.add_option("help", short="h", type="boolean", descr="Displays this help message")
        self._grammar.add_option("verbose", short="v", type="boolean", descr="Displays additional output (if available)")
        self._state = State.CREATED
        self._result = ParseResult()
        self._verbose = False
        self._initialized = False
        self._depth = 0

    def __repr__(self):
        return "command(name=%r, state=%r)" % (self.name, self._state.value)

    # ── introspection ───────────────────────────────────────────────────────

    @property
    def context(self):
        return self._context

    @property
    def io(self):
        return self._context.io

    @property
    def services(self):
        return self._context.services

    @property
    def grammar(self):
        return self._grammar

    @property
    def formatter(self):
        return HelpFormatter(self._grammar)

    @property
    def state(self):
        return self._state

    @property
    def result(self):
        return self._result

    @property
    def verbose(self):
        return self._verbose

    def options(self, name=None):
        """All parsed options (read-only mapping), or one option's value (None when absent)."""
        if name is None:
            return self._result.options
        return self._result.option(name)

    def arguments(self, name=None):
        """All parsed arguments (read-only mapping), or one argument's value (None when absent)."""
        if name is None:
            return self._result.arguments
        return self._result.argument(name)

    # ── grammar declarations ────────────────────────────────────────────────

    def add_option(self, spec, /, **fields):
        return self._grammar.add_option(spec, **fields)

    def add_argument(self, spec, /, **fields):
        return self._grammar.add_argument(spec, **fields)

    def add_subcommand(self, name, descr=None):
        self._grammar.add_subcommand(name, descr)

    def add_usage(self, usage):
        self._grammar.add_usage(usage)

    # ── hooks ───────────────────────────────────────────────────────────────

    def initialize(self):
        """Declare options and arguments here (runs once per instance)."""

    def startup(self):
        """Called before execute()."""

    @abstractmethod
    def execute(self):
        """The command body; every concrete command implements it."""

    def shutdown(self):
        """Called after execute()."""

    # ── lifecycle ───────────────────────────────────────────────────────────

    def _prepare(self):
        self._state = State.INITIALIZING
        self.initialize()
        self._grammar.descr = self.descr
        self._grammar.epilog = self.epilog
        self._grammar.help = self.help
        self._grammar.add_usage(self.usages)
        self._initialized = True

    def _parse(self, tokens):
        """
        parse with warnings recorded; command warnings go to the error sink,
        anything else is re-issued unchanged.
        """
        self._state = State.PARSING
        caught = []
        try:
            with warnings.catch_warnings(record=True) as caught:
                warnings.simplefilter("always")
                return parse(tokens, self._grammar)
        finally:
            for warning in caught:
                if isinstance(warning.message, CommandWarning):
                    self.io.write_error(warning.message.render())
                else:
                    warnings.warn_explicit(warning.message, warning.category, warning.filename, warning.lineno)

    def _lifecycle(self, tokens):
        try:
            if not self._initialized:
                self._prepare()

            try:
                result = self._parse(tokens)
            except ParseError as fault:
                self._state = State.PARSE_FAILED
                self.io.write_error(fault.render() + [""])
                self.io.write(self.formatter.usage())
                return Outcome.proceed(False)

            self._result = result
            self._verbose = bool(result.option("verbose"))

            if result.option("help"):
                self._state = State.HELP_REQUESTED
                self.display_help()
                return Outcome.proceed(True)

            self._state = State.PARSED
            self._state = State.STARTING
            self.startup()
            self._state = State.EXECUTING
            self.execute()
            self._state = State.SHUTTING_DOWN
            self.shutdown()
            return Outcome.proceed(True)
        except Stop as stop:
            return stop.outcome
        finally:
            self._state = State.DONE

    def run(self, tokens=()):
        """
        Run the full lifecycle against a token vector.

        Parameters
        - tokens: Iterable[str], without the command name.

        Returns
        - Outcome: Continue(True/False) or Terminate(code, message).

        Raises
        - GrammarError from initialize(); errors raised by the command's own code.

        Notes
        - Re-entrant: a run started from inside another run of this same
          instance restores the outer run's state and parse result when it ends.
        """
        if isinstance(tokens, str):
            raise TypeError("run() tokens must be an iterable of strings, not a string")
        snapshot = self._state, self._result, self._verbose
        self._depth += 1
        try:
            return self._lifecycle(list(tokens))
        finally:
            self._depth -= 1
            if self._depth:
                self._state, self._result, self._verbose = snapshot

    def run_command(self, name, args=()):
        """
        Run another registered command from this one.

        Parameters
        - name: registered command name.
        - args: tokens, or a mapping such as {0: "my_db", "--connection": "default", "--help": True}.

        Returns
        - Outcome of the nested run (Continue); Outcome.proceed(False) when the
          name is not registered (an error line is written).

        Terminated nested runs stop this command as well (when called from
        inside a run) with the same code and message.
        """
        registry = self._context.registry
        descriptor = registry.find(name) if registry is not None else None
        if descriptor is None:
            self.io.write_error(UnknownCommandError(name).render())
            return Outcome.proceed(False)

        outcome = descriptor.build(self._context).run(_argv(args))
        if outcome.terminated and self._depth:
            raise Stop(outcome)
        return outcome

    def abort(self, message="Command aborted", code=ERROR):
        """Stop the current run with an error code (any int allowed)."""
        raise Stop(Outcome.terminate(code, message))

    def exit(self, message="Command exited", code=SUCCESS):
        """Stop the current run successfully (or with the given code)."""
        raise Stop(Outcome.terminate(code, message))

    # ── output helpers ──────────────────────────────────────────────────────

    def display_help(self):
        self.io.write(self.formatter.help())

    def out(self, message, context=None):
        """Write message(s) with {key} placeholders filled from context."""
        self.io.write(interpolate(message, context))

    def _tagged(self, tag, message, context):
        return ["<%s>%s</%s>" % (tag, line, tag) for line in interpolate(message, context)]

    def debug(self, message, context=None):
        """Write only when --verbose was given."""
        if self._verbose:
            self.io.write(self._tagged("debug", message, context))

    def info(self, message, context=None):
        self.io.write(self._tagged("info", message, context))

    def notice(self, message, context=None):
        self.io.write(self._tagged("notice", message, context))

    def success(self, message, context=None):
        self.io.write(self._tagged("success", message, context))

    def warning(self, message, context=None):
        self.io.write_error(self._tagged("warning", message, context))

    def error(self, message, context=None):
        self.io.write_error(self._tagged("error", message, context))

    def throw_error(self, title, message=None):
        """Write a formatted error block, then abort with title as the message.

        The outcome is marked reported, so the dispatcher does not repeat the
        title as an <error> line.
        """
        rendered = ["<exception> ERROR </exception> <heading>%s</heading>" % title]
        if message:
            rendered.append("<text>%s</text>" % message)
        self.io.write_error(rendered)
        raise Stop(Outcome.terminate(ERROR, title, reported=True))

    def ask(self, prompt, default=None):
        """Read one line from the sink; an empty answer yields default."""
        if default is not None:
            prompt = "%s [%s]" % (prompt, default)
        answer = self.io.read_line(prompt)
        return answer if answer else default


__all__ = (
    "State",
    "Context",
    "Command",
)
