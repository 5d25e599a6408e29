"""Core value definitions and scalar interpretation.

This module defines the value model of parsed author documents and the
value processor turning the textual right-hand side of a statement into
a scalar or a list of scalars.

Values are plain Python containers: documents and blocks are `dict`,
collisions and comma lists are `list`, scalars are `str`. Plugins may
produce any other value from typed statements.
"""

from collections.abc import Mapping, Sequence
from typing import Any

#: Scalars are values taken verbatim from the source text.
type Scalar = str

#: A value in runtime represents any Python object returned by a plugin,
#: for example a typed value produced by a type handler.
type RuntimeValue = Any

#: A value held by a document: a scalar, a list of scalars, a typed value
#: returned by a plugin, or a list of nested block documents.
type Value = Scalar | Sequence['Value'] | Mapping[str, 'Value'] | RuntimeValue

#: A parsed author document or a single block within it.
type Document = dict[str, Value]

MAPPINGS = (dict,)
SCALARS = (str, bytes, int, float, bool)
SEQUENCES = (list, tuple, set)

QUOTE = '"'
LIST_SEPARATOR = ','

TYPE_FIELD = 'type'
VALUE_FIELD = 'value'


def unquote(value: str) -> str:
    """Strip one pair of surrounding double quotes.

    No escape processing is performed.

    Args:
        value: Trimmed raw value.

    Returns:
        The value without its wrapping quotes, or the value unchanged.
    """
    if len(value) >= 2 and value.startswith(QUOTE) and value.endswith(QUOTE):  # noqa: PLR2004
        return value[1:-1]

    return value


def process_value(value: str) -> str | list[str]:
    """Interpret a raw statement value.

    Quoted values are unquoted first. A value containing a comma is split
    into a list of trimmed, non-empty parts.

    Args:
        value: Raw value taken from the right side of a statement.

    Returns:
        A string scalar or an ordered list of string scalars.
    """
    value = unquote(value.strip())

    if LIST_SEPARATOR in value:
        return [
            part
            for item in value.split(LIST_SEPARATOR)
            if (part := item.strip())
        ]

    return value


def make_typed(type_name: str, value: Value) -> dict[str, Value]:
    """Build the plain typed value used when no type handler applies."""
    return {TYPE_FIELD: type_name, VALUE_FIELD: value}


def is_typed(value: Value) -> bool:
    """Check whether a value looks like a typed value mapping.

    Typed values carry both a string `type` field and a `value` field.
    """
    return (
        isinstance(value, MAPPINGS)
        and isinstance(value.get(TYPE_FIELD), str)
        and VALUE_FIELD in value
    )


def get_value(document: Mapping[str, Value], key: str) -> Value | None:
    """Look up a key case-insensitively.

    Args:
        document: Parsed document or block.
        key: Key to look up, in any letter case.

    Returns:
        The value of the first key matching case-insensitively, otherwise `None`.
    """
    expected = key.lower()
    for name, value in document.items():
        if name.lower() == expected:
            return value

    return None
