r"""
Bosun option and argument specifications.

Overview
- Kind: the closed set of value kinds a grammar understands
  (string, integer, boolean, list, map).
- OptionSpec: named input (--name / -n), optionally valued.
- ArgumentSpec: positional input bound by declaration order.
- coerce(kind, raw, name): turn a raw token into a typed value for scalar kinds.

Introspection & representation
- SpecType metaclass provides stable __repr__/__rich_repr__ and exposes the
  fields declared in __introspectable__ as read-only properties (see mirror()).

Metadata (sanitized on construction)
- Shared (both specs)
  • name: non-empty word starting with a letter; letters, digits, "-" and "_" allowed.
  • type: Kind or its string value.
  • required: bool.
  • default: None or a value matching the kind; a non-empty default cannot be
    combined with required=True.
  • descr: None | str | Iterable[str] (help text).
- OptionSpec only
  • short: Unset | single character alias (not "-" or "=").
  • banner: label shown after "=" in help; defaults to the uppercased name.
  • boolean options are presence-only; their only accepted default is False.

Validation highlights
- Every violation raises GrammarError naming the rule (see faults.FaultCode).
- Ordering rules between arguments belong to the Grammar, not to a single spec.

Quick example:
    >>> from bosun.arguments import OptionSpec, ArgumentSpec
    >>> OptionSpec("env", default="dev", descr="target environment")
    option-spec(name='env', short=None, type=<Kind.STRING: 'string'>, ...)
    >>> ArgumentSpec("files", type="list")
    argument-spec(name='files', type=<Kind.LIST: 'list'>, ...)

Public API
- Enums: Kind
- Classes: OptionSpec, ArgumentSpec
- Functions: coerce
"""
import functools
import operator
import re
from collections.abc import Iterable, Mapping, Sequence
from enum import StrEnum

from .faults import FaultCode, GrammarError, InvalidValueError
from .utils import *


class Kind(StrEnum):
    """
    closed value-kind tag for options and arguments.

    - STRING: passthrough.
    - INTEGER: strict decimal integer.
    - BOOLEAN: presence (options) or truthiness (arguments).
    - LIST: ordered strings; as an argument it takes every remaining positional.
    - MAP: key/value pairs split on ":"; as an argument it takes every remaining positional.
    """
    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    LIST = "list"
    MAP = "map"

    @property
    def collection(self):
        """True for kinds that consume the remaining positionals (list, map)."""
        return self in (Kind.LIST, Kind.MAP)


_INTEGER = re.compile(r"\s*[+-]?\d+\s*")


def coerce(kind, raw, name, /):
    """
    Convert a raw string to the scalar value for kind.

    Behavior
    - string: returned unchanged.
    - integer: strict decimal (optional sign, surrounding blanks tolerated);
      anything else raises InvalidValueError naming `name`.
    - boolean: truthiness of the raw string; "" and "0" are false, any other
      text is true.

    Collections are assembled by the parser, not here.
    """
    match kind:
        case Kind.STRING:
            return raw
        case Kind.INTEGER:
            if not _INTEGER.fullmatch(raw):
                raise InvalidValueError(name, raw, kind.value)
            return int(raw)
        case Kind.BOOLEAN:
            return raw not in ("", "0")
        case _:
            raise TypeError("coerce() cannot convert to %s" % kind)


class SpecType(type):
    """
    Metaclass that turns spec classes into introspectable, read-only records.

    Responsibilities
    - Expose each name in __introspectable__ as a read-only property backed by
      "_{name}" (via mirror()).
    - Provide stable, readable __repr__/__rich_repr__ implementations.
    - Derive __typename__ from the class name (camel-case split with hyphens),
      used in error messages.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - option-spec(name='verbose', short='v', type=<Kind.BOOLEAN: 'boolean'>, ...)
            """
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate the fields shared by both specs.

    Responsibilities
    - name: required, stripped, must match r"[^\W\d_][\w-]*".
    - type: Kind member or its string value; anything else is UNSUPPORTED_TYPE.
    - required: coerced to bool.
    - descr: None, a string, or an iterable of strings (normalized to a tuple of lines).

    Side effects
    - Mutates the provided metadata dict in place.
    """
    if not isinstance(name := metadata["name"], str):
        raise GrammarError(f"{cls.__typename__} name must be a string", FaultCode.INVALID_NAME)
    elif not re.fullmatch(r"[^\W\d_][\w-]*", name := name.strip()):
        raise GrammarError(
            f"{cls.__typename__} name {name!r} must start with a letter and hold only letters, digits, '-' or '_'",
            FaultCode.INVALID_NAME,
            name=name,
        )
    metadata["name"] = name

    try:
        metadata["type"] = Kind(metadata["type"])
    except ValueError:
        raise GrammarError(
            "%s %r has an invalid type %r (expected one of %s)" % (
                cls.__typename__, name, metadata["type"], ", ".join(kind.value for kind in Kind)
            ),
            FaultCode.UNSUPPORTED_TYPE,
            name=name,
        ) from None

    metadata["required"] = bool(metadata["required"])

    try:
        metadata["descr"] = tuple(lines(metadata["descr"]))
    except TypeError:
        raise GrammarError(f"{cls.__typename__} {name!r} description must be text", FaultCode.INVALID_NAME, name=name) from None


def _sanitize_default(cls, metadata, /):
    """
    Internal: validate a declared default against the kind and the required flag.

    Rules
    - required with a non-empty default is REQUIRED_DEFAULT.
    - None means "no default" and is always accepted.
    - string → str; integer → int (bool rejected); boolean → bool;
      list → sequence of str (normalized to a tuple); map → mapping (copied into a dict).
    """
    name, kind, default = metadata["name"], metadata["type"], metadata["default"]

    if metadata["required"] and not empty(default):
        raise GrammarError(
            f"{cls.__typename__} {name!r} cannot be required and have a default value",
            FaultCode.REQUIRED_DEFAULT,
            name=name,
        )

    if default is None:
        return

    match kind:
        case Kind.STRING:
            valid = isinstance(default, str)
        case Kind.INTEGER:
            valid = isinstance(default, int) and not isinstance(default, bool)
        case Kind.BOOLEAN:
            valid = isinstance(default, bool)
        case Kind.LIST:
            valid = (
                isinstance(default, Sequence) and not isinstance(default, str) and
                all(isinstance(item, str) for item in default)
            )
            if valid:
                default = tuple(default)
        case Kind.MAP:
            valid = isinstance(default, Mapping)
            if valid:
                default = dict(default)

    if not valid:
        raise GrammarError(
            f"{cls.__typename__} {name!r} default {default!r} does not match its {kind.value} type",
            FaultCode.DEFAULT_TYPE,
            name=name,
        )
    metadata["default"] = default


class OptionSpec(metaclass=SpecType):
    """
    Named option specification (--name, optionally -n).

    Highlights
    - Boolean options bind True on presence and resolve to False when absent.
    - Every other kind takes its value from the inline form --name=value / -n=value.
    - The short alias resolves to this same spec inside a Grammar.
    - banner is the help label rendered after "=" (defaults to NAME).

    Properties
    - The names listed in __introspectable__ are exposed read-only.
    """

    __introspectable__ = (
        "name",
        "short",
        "type",
        "required",
        "default",
        "descr",
        "banner",
    )

    def __new__(
            cls,
            name,
            /,
            short=Unset,
            type=Kind.STRING,
            required=False,
            default=None,
            descr=None,
            banner=Unset,
    ):
        """
        Construct an OptionSpec with the provided metadata.

        Parameters
        - name: str
          Long name, used as "--name" and as the key in parse results.
        - short: Unset | str
          Single-character alias used as "-x".
        - type: Kind | str
          One of string, integer, boolean, list, map.
        - required: bool
          The option must be given (with a non-empty value) on every run.
        - default: Any
          Value used when the option is absent. Must match type; boolean options
          accept only False, and required options accept none.
        - descr: None | str | Iterable[str]
          Help text.
        - banner: Unset | str
          Help label for the value; defaults to the uppercased name.

        Raises
        - GrammarError naming the violated rule.
        """
        metadata = {
            "name": name,
            "short": short,
            "type": type,
            "required": required,
            "default": default,
            "descr": descr,
            "banner": banner,
        }
        _sanitize_metadata(cls, metadata)

        name = metadata["name"]
        if metadata["type"] is Kind.BOOLEAN and default is not None and default is not False:
            raise GrammarError(
                f"boolean {cls.__typename__} {name!r} is presence-only and can only default to False",
                FaultCode.DEFAULT_TYPE,
                name=name,
            )
        _sanitize_default(cls, metadata)

        if short is not Unset and short is not None:
            if not isinstance(short, str) or len(short := short.lstrip("-")) != 1 or short in "-=":
                raise GrammarError(
                    f"{cls.__typename__} {name!r} short alias must be a single character",
                    FaultCode.INVALID_NAME,
                    name=name,
                )
        metadata["short"] = short or None

        if (banner := metadata["banner"]) is not Unset and (not isinstance(banner, str) or not banner.strip()):
            raise GrammarError(f"{cls.__typename__} {name!r} banner must be a non-empty string", FaultCode.INVALID_NAME, name=name)
        metadata["banner"] = coalesce(banner, name.upper()).strip()

        self = super().__new__(cls)
        for field, object in metadata.items():
            setattr(self, "_" + field, object)
        return self

    @property
    def boolean(self):
        return self._type is Kind.BOOLEAN


class ArgumentSpec(metaclass=SpecType):
    """
    Positional argument specification.

    Position is significant: a Grammar binds positional tokens to its argument
    specs in declaration order. list/map arguments take every remaining
    positional, so a Grammar only allows them last.
    """

    __introspectable__ = (
        "name",
        "type",
        "required",
        "default",
        "descr",
    )

    def __new__(
            cls,
            name,
            /,
            type=Kind.STRING,
            required=False,
            default=None,
            descr=None,
    ):
        """
        Construct an ArgumentSpec.

        Parameters
        - name: str, key in parse results and label in usage/help.
        - type: Kind | str.
        - required: bool.
        - default: value used when the argument is not supplied (must match type;
          forbidden together with required).
        - descr: help text.
        """
        metadata = {
            "name": name,
            "type": type,
            "required": required,
            "default": default,
            "descr": descr,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_default(cls, metadata)

        self = super().__new__(cls)
        for field, object in metadata.items():
            setattr(self, "_" + field, object)
        return self

    @property
    def collection(self):
        return self._type.collection


__all__ = (
    "Kind",
    "OptionSpec",
    "ArgumentSpec",
    "coerce",
)

# Not part of the public API.
del SpecType
