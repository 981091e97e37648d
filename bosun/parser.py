"""
Bosun parser: token vector + Grammar → ParseResult.

phases
- classify: "--name[=value]" is a long option, "-n[=value]" a short option
  (aliases resolve to their long option), everything else is positional.
  inline values split on the first "=".
- bind options: booleans are True on presence; other kinds need "=value".
  repeated options keep the last value.
- bind positionals: walk the declared arguments in order, one token each; a
  list argument takes the rest, a map argument takes the rest split on ":".
- validate: required options, then required arguments (skipped when the
  parsed "help" option is true, so "cmd --help" never trips on positionals).
- defaults: absent booleans → False; absent options/arguments with a
  non-empty default → the default; anything else stays absent.

errors
- UnknownOptionError, MissingValueError, InvalidValueError,
  MissingOptionError, MissingArgumentError (all ParseError).

warnings
- InlineFlagValueWarning when a boolean option carries "=value".
- UnexpectedArgumentWarning when positionals outnumber the declared arguments.

parse() is pure: the same tokens and grammar always produce an equal result.
"""
import re
import warnings
from types import MappingProxyType

from .arguments import Kind, coerce
from .faults import *
from .utils import *

_INDEX = re.compile(r"0|-?[1-9]\d*")


class ParseResult:
    """
    Outcome of a successful parse, read-only at the mapping level.

    - options: read-only {option name: value}; every boolean option is present,
      other options only when given or defaulted.
    - arguments: read-only {argument name: value}; present only when supplied
      or defaulted.

    list and map values are plain list/dict objects created for this result
    alone; changing one never reaches another result or a grammar default.
    """
    __slots__ = ("_options", "_arguments")

    def __init__(self, options=None, arguments=None):
        object.__setattr__(self, "_options", MappingProxyType(dict(options or {})))
        object.__setattr__(self, "_arguments", MappingProxyType(dict(arguments or {})))

    def __setattr__(self, name, value, /):
        raise AttributeError("parse result is read-only")

    @property
    def options(self):
        return self._options

    @property
    def arguments(self):
        return self._arguments

    def option(self, name, default=None, /):
        return self._options.get(name, default)

    def argument(self, name, default=None, /):
        return self._arguments.get(name, default)

    def __eq__(self, other):
        if not isinstance(other, ParseResult):
            return NotImplemented
        return dict(self._options) == dict(other._options) and dict(self._arguments) == dict(other._arguments)

    __hash__ = None

    def __repr__(self):
        return "parse-result(options=%r, arguments=%r)" % (dict(self._options), dict(self._arguments))

    def __rich_repr__(self):
        yield "options", dict(self._options)
        yield "arguments", dict(self._arguments)


def _split(token):
    """
    split "name=value" on the first "="; value is None when there is no "=".
    """
    name, sign, value = token.partition("=")
    return name, (value if sign else None)


def _pairs(items):
    """
    build a map value from "key:value" items.

    canonical decimal keys ("0", "12", "-3" but not "07") become ints. items
    without ":" are appended under the next integer slot: one past the largest
    integer key seen so far, 0 at the start. keyed and bare entries share one
    dict.
    """
    values = {}
    slot = 0
    for item in items:
        key, sign, value = item.partition(":")
        if not sign:
            values[slot] = item
            slot += 1
            continue
        if _INDEX.fullmatch(key):
            key = int(key)
            slot = max(slot, key + 1)
        values[key] = value
    return values


def _option_value(spec, raw):
    """
    convert an inline option value according to the option's kind.
    """
    match spec.type:
        case Kind.LIST:
            return [item for item in raw.split(",") if item] if raw else []
        case Kind.MAP:
            return _pairs(item for item in raw.split(",") if item) if raw else {}
        case kind:
            return coerce(kind, raw, "--" + spec.name)


def _classify(tokens, grammar):
    """
    walk the tokens once, binding options and collecting positionals.

    returns
    - (options, positionals): options maps long names to typed values (only
      those that were given); positionals is the ordered list of raw tokens.
    """
    options = {}
    positionals = []

    for token in tokens:
        if token.startswith("--"):
            name, value = _split(token[2:])
            spec = grammar.find(name)
            if spec is None:
                raise UnknownOptionError(name)
        elif token.startswith("-"):
            name, value = _split(token[1:])
            spec = grammar.find(name, short=True)
            if spec is None:
                raise UnknownOptionError(name, short=True)
        else:
            positionals.append(token)
            continue

        if spec.boolean:
            if value is not None:
                warnings.warn(InlineFlagValueWarning(spec.name, value), stacklevel=3)
            options[spec.name] = True
        elif value is None:
            raise MissingValueError(spec.name)
        else:
            options[spec.name] = _option_value(spec, value)

    return options, positionals


def _bind(positionals, grammar):
    """
    bind positional tokens to the declared arguments by index.
    """
    arguments = {}
    declared = grammar.arguments

    for index, spec in enumerate(declared):
        if index >= len(positionals):
            break
        match spec.type:
            case Kind.LIST:
                arguments[spec.name] = list(positionals[index:])
                return arguments
            case Kind.MAP:
                arguments[spec.name] = _pairs(positionals[index:])
                return arguments
            case kind:
                arguments[spec.name] = coerce(kind, positionals[index], spec.name)

    if len(positionals) > len(declared):
        warnings.warn(UnexpectedArgumentWarning(positionals[len(declared):]), stacklevel=3)

    return arguments


def _materialize(default):
    """
    hand out a fresh, mutable copy of a collection default.
    """
    if isinstance(default, tuple):
        return list(default)
    if isinstance(default, MappingProxyType | dict):
        return dict(default)
    return default


def parse(tokens, grammar, /):
    """
    parse a token vector against a grammar.

    parameters
    - tokens: Iterable[str], without the program or command name.
    - grammar: Grammar.

    returns
    - ParseResult.

    raises
    - ParseError subclasses (see module docstring).
    """
    tokens = list(tokens)
    if not all(isinstance(token, str) for token in tokens):
        raise TypeError("parse() tokens must be strings")

    options, positionals = _classify(tokens, grammar)
    arguments = _bind(positionals, grammar)

    for name, spec in grammar.options.items():
        if spec.required and empty(options.get(name)):
            raise MissingOptionError(name)
        if spec.boolean:
            options.setdefault(name, False)
        elif name not in options and not empty(spec.default):
            options[name] = _materialize(spec.default)

    if not options.get("help"):
        for spec in grammar.arguments:
            if spec.required and spec.name not in arguments:
                raise MissingArgumentError(spec.name)

    for spec in grammar.arguments:
        if spec.name not in arguments and not empty(spec.default):
            arguments[spec.name] = _materialize(spec.default)

    return ParseResult(
        {name: options[name] for name in grammar.options if name in options},
        arguments,
    )


__all__ = (
    "ParseResult",
    "parse",
)
