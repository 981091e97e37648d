"""
Bosun utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the grammar, parser, lifecycle and dispatcher
  layers so they agree on "missing", "empty" and read-only semantics.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False) and printable as "Unset".

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/[].

- empty(value)
  • The grammar's notion of "no value": None, "" and empty collections. 0 and False are values.

- @rename("name")
  • Assign stable __name__/__qualname__ to generated callables for clean tracebacks.

- mirror("attr")
  • Read-only property factory exposing a private backing field (self._attr) through
    immutable views (tuple / MappingProxyType / frozenset).

- lines(text)
  • Normalize a help/description value (string or iterable of strings) into a list of lines.

- interpolate(messages, context)
  • Replace {key} placeholders with context values, leaving unknown placeholders untouched.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> empty(0), empty("")
    (False, True)
    >>> interpolate("hello {name}", {"name": "world"})
    ['hello world']
"""
import functools
import re
from collections.abc import Iterable, Mapping, Sequence, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Sentinel type for "not provided", kept apart from None (a legitimate value).

    bool(Unset) is False, repr(Unset) is "Unset", and UnsetType() always
    returns the same instance.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Falsey values like None, 0, "" or [] are preserved as-is; only Unset is replaced.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def empty(object, /):
    """
    Return True when a value counts as "not given" for grammar purposes.

    None, Unset, the empty string and empty collections are empty. Numbers
    (including 0) and booleans (including False) are never empty.
    """
    if object is None or object is Unset:
        return True
    if isinstance(object, bool | int | float):
        return False
    if isinstance(object, str | Sequence | Mapping | Set):
        return len(object) == 0
    return False


def rename(name, /):
    """
    Decorator giving a generated callable a stable __name__ and __qualname__.
    """
    def decorate(callable):
        callable.__name__ = callable.__qualname__ = name
        return callable

    return decorate


def _freeze(object):
    """
    Wrap containers in read-only views (one level deep).

    - Mapping           → MappingProxyType over a copy
    - Sequence (non-str) → tuple
    - Set               → frozenset
    - anything else     → returned as-is
    """
    if isinstance(object, Mapping):
        return MappingProxyType(dict(object))
    if isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(object)
    if isinstance(object, Set):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The property reads "_{name}" from the instance and returns an immutable view
    for container types, so callers cannot mutate grammar or result state through
    the public API.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


def lines(text, /):
    """
    Normalize free text into a list of lines.

    A string is split on newlines; an iterable of strings is flattened the same
    way; None/Unset yields an empty list.
    """
    if text is None or text is Unset:
        return []
    if isinstance(text, str):
        return text.splitlines() if text else []
    if not isinstance(text, Iterable):
        raise TypeError("text must be a string or an iterable of strings")
    result = []
    for item in text:
        if not isinstance(item, str):
            raise TypeError("text must be a string or an iterable of strings")
        result.extend(item.splitlines() or [""])
    return result


_PLACEHOLDER = re.compile(r"\{(\w+)\}")


def interpolate(messages, context=None, /):
    """
    Interpolate {key} placeholders from context into one or more messages.

    Only scalar context values (and objects with their own __str__) are
    substituted; containers are skipped and unknown placeholders are left as
    they are. Always returns a list of strings.
    """
    messages = [messages] if isinstance(messages, str) else list(messages)
    if not context:
        return messages

    replacements = {}
    for key, value in context.items():
        if isinstance(value, Mapping | Set) or (isinstance(value, Sequence) and not isinstance(value, str)):
            continue
        replacements[str(key)] = str(value)

    def substitute(match):
        return replacements.get(match[1], match[0])

    return [_PLACEHOLDER.sub(substitute, message) for message in messages]


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Notes
- Singleton: there is only one Unset instance.
- Distinct from None: identity checks must not treat it as None.
- Typical pattern: value = coalesce(user_value, default).
"""


__all__ = (
    # Functions
    "coalesce",
    "empty",
    "rename",
    "mirror",
    "lines",
    "interpolate",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
