"""Declarative type handler definitions.

A type handler interprets values of statements annotated with a type tag,
for example `Website@url: https://example.com`. The handler declares the
tags it handles, a processor replacing the statement value, and an optional
validator reporting warnings about processed values.
"""

from collections.abc import Callable

from pydantic import Field

from author_dsl.context import PluginContext
from author_dsl.models import SchemaModel
from author_dsl.names import TypeTag  # noqa: TC001
from author_dsl.values import RuntimeValue  # noqa: TC001

#: The processor receives the raw statement value, the type tag and
#: the invocation context, and returns the value stored in the document.
type ValueProcessor = Callable[[str, str, PluginContext], RuntimeValue]

#: The validator receives a processed value, the type tag and the
#: invocation context, and returns warnings or `None` when there are none.
type ValueValidator = Callable[[RuntimeValue, str, PluginContext], list[str] | None]


class TypeHandler(SchemaModel):
    """Declarative type handler role.

    A handler is selected by exact match of the statement type tag against
    `types`. Its result fully replaces the statement value.
    """

    types: list[TypeTag] = Field(
        min_length=1,
        title='Handled type tags',
        description='Type tags this handler is selected for.',
    )

    processor: ValueProcessor = Field(
        title='Processor function',
        description=(
            'Callable converting the raw statement value into the value '
            'stored in the document.'
        ),
    )

    validator: ValueValidator | None = Field(
        default=None,
        title='Value validator function',
        description=(
            'Optional callable checking a processed value. Returns a list of '
            'warning messages, or `None` when the value is acceptable.'
        ),
    )
