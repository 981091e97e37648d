"""
Bosun dispatcher: registry of commands + top-level entry point.

- CommandDescriptor: immutable (name, factory, description) entry. The factory
  takes a Context and returns a ready Command.
- Registry: explicit, ordered command table. Commands are added with
  register(), which also works as a class decorator.
- Dispatcher: resolves the first token to a registered command, builds it with
  an injected Context, runs its lifecycle, and turns the Outcome into an exit
  code. With no tokens it writes the listing of every registered command.

Example
    registry = Registry()

    @registry.register
    class Migrate(Command):
        name = "db:migrate"
        descr = "Runs pending migrations"

        def execute(self):
            ...

    Dispatcher(registry, title="my-app").main()
"""
import sys

from .commands import Command, Context
from .faults import *
from .io import ConsoleIo
from .signals import *
from .utils import *


class CommandDescriptor:
    """
    One registry entry.

    Parameters
    - name: command name.
    - factory: callable(Context) -> Command; a Command subclass qualifies.
    - descr: listing description (str or lines); defaults to the factory's
      `descr` attribute when it has one.
    """
    __slots__ = ("_name", "_factory", "_descr")

    def __init__(self, name, factory, descr=Unset):
        if not isinstance(name, str) or not name:
            raise GrammarError("command name must be a non-empty string", FaultCode.INVALID_NAME, name=name)
        if not callable(factory):
            raise TypeError("command factory for %r must be callable" % name)
        descr = coalesce(descr, getattr(factory, "descr", None))
        object.__setattr__(self, "_name", name)
        object.__setattr__(self, "_factory", factory)
        object.__setattr__(self, "_descr", tuple(lines(descr)) if descr is not None else ())

    def __setattr__(self, name, value, /):
        raise AttributeError("command descriptor is read-only")

    @property
    def name(self):
        return self._name

    @property
    def factory(self):
        return self._factory

    @property
    def descr(self):
        return self._descr

    def build(self, context):
        """Create the command for one run."""
        return self._factory(context)

    def __repr__(self):
        return "command-descriptor(name=%r, descr=%r)" % (self._name, self._descr)

    def __rich_repr__(self):
        yield "name", self._name
        yield "descr", self._descr


class Registry:
    """
    Ordered name → CommandDescriptor table.

    Usage
        registry.register(Greet)                       # Command subclass
        registry.register("greet", factory, "Says hi")  # name + factory
        registry.register(CommandDescriptor(...))      # prebuilt descriptor

        @registry.register
        class Greet(Command): ...

    Duplicated names raise GrammarError(DUPLICATE_COMMAND).
    """

    def __init__(self, commands=()):
        self._descriptors = {}
        for command in commands:
            self.register(command)

    def _add(self, descriptor):
        if descriptor.name in self._descriptors:
            raise GrammarError(
                "command %r is already registered" % descriptor.name,
                FaultCode.DUPLICATE_COMMAND,
                name=descriptor.name,
            )
        self._descriptors[descriptor.name] = descriptor
        return descriptor

    def register(self, source, /, factory=Unset, descr=Unset):
        """
        Register a command.

        Returns
        - the class itself when given a Command subclass (decorator use),
          otherwise the registered CommandDescriptor.
        """
        if isinstance(source, CommandDescriptor):
            return self._add(source)
        if isinstance(source, type) and issubclass(source, Command):
            self._add(CommandDescriptor(source.name, source, descr))
            return source
        if isinstance(source, str) and factory is not Unset:
            return self._add(CommandDescriptor(source, factory, descr))
        raise TypeError("register() expects a Command subclass, a CommandDescriptor or a name and a factory")

    def list(self):
        """Every descriptor, in registration order."""
        return tuple(self._descriptors.values())

    def find(self, name):
        """The descriptor registered under name, or None."""
        if not isinstance(name, str):
            return None
        return self._descriptors.get(name)

    def __contains__(self, name):
        return self.find(name) is not None

    def __iter__(self):
        return iter(self.list())

    def __len__(self):
        return len(self._descriptors)

    def __repr__(self):
        return "registry(%r)" % list(self._descriptors)


def _namespace(name):
    namespace, sign, _ = name.partition(":")
    return namespace if sign else ""


class Dispatcher:
    """
    Top-level entry point.

    Parameters
    - registry: Registry (an empty one by default).
    - io: output sink, shared with every command (ConsoleIo() by default).
    - services: application services handed to commands through Context.
    - title: first line of the listing.
    - script: program name shown in the listing's usage line.
    """

    def __init__(self, registry=None, io=None, services=None, *, title="bosun", script="console"):
        self._registry = registry if registry is not None else Registry()
        self._io = io if io is not None else ConsoleIo()
        self._services = services
        self._title = title
        self._script = script

    @property
    def registry(self):
        return self._registry

    @property
    def io(self):
        return self._io

    def context(self):
        return Context(self._io, self._registry, self._services)

    def resolve(self, name):
        """The descriptor for name, or None."""
        return self._registry.find(name)

    def listing(self):
        """
        Lines listing every registered command.

        Commands are grouped by namespace (the part before ":"); groups and
        the commands in them are sorted by name, the group without a
        namespace comes first and carries no heading.
        """
        rendered = [
            "<text>%s</text>" % self._title,
            "",
            "<heading>Usage:</heading>",
            "  <text>%s <command> [options] [arguments]</text>" % self._script,
            "",
        ]

        groups = {}
        for descriptor in self._registry.list():
            groups.setdefault(_namespace(descriptor.name), []).append(descriptor)
        if not groups:
            return rendered

        width = max(len(descriptor.name) for descriptor in self._registry.list()) + 2
        rendered.append("<heading>Available Commands:</heading>")
        for namespace in sorted(groups):
            if namespace:
                rendered.append("<heading>%s</heading>" % namespace)
            for descriptor in sorted(groups[namespace], key=lambda descriptor: descriptor.name):
                name = descriptor.name
                if not descriptor.descr:
                    rendered.append("  <code>%s</code>" % name)
                    continue
                first, *rest = descriptor.descr
                rendered.append("  <code>%s</code>%s<text>%s</text>" % (name, " " * (width - len(name)), first))
                rendered.extend("  %s<text>%s</text>" % (" " * width, line) for line in rest)
        return rendered

    def dispatch(self, tokens=()):
        """
        Run one command line and return its exit code.

        - no tokens: write the listing, return SUCCESS.
        - unknown command: write an error, return ERROR.
        - otherwise: Outcome.code of the command's run; a terminated run with
          a failure code also writes its message.
        """
        if isinstance(tokens, str):
            raise TypeError("dispatch() tokens must be an iterable of strings, not a string")
        tokens = list(tokens)
        if not tokens:
            self._io.write(self.listing())
            return SUCCESS

        name, *rest = tokens
        descriptor = self.resolve(name)
        if descriptor is None:
            self._io.write_error(UnknownCommandError(name).render())
            return ERROR

        outcome = descriptor.build(self.context()).run(rest)
        if outcome.terminated and outcome.code != SUCCESS and outcome.message and not outcome.reported:
            self._io.write_error("<error>%s</error>" % outcome.message)
        return outcome.code

    def run(self, tokens=()):
        """Same as dispatch(), as a boolean success flag."""
        return self.dispatch(tokens) == SUCCESS

    def main(self, argv=None):
        """Dispatch sys.argv[1:] (or argv) and exit the process with the code."""
        sys.exit(self.dispatch(sys.argv[1:] if argv is None else argv))


__all__ = (
    "CommandDescriptor",
    "Registry",
    "Dispatcher",
)
