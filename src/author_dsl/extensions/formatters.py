"""Declarative output formatter definitions."""

from collections.abc import Callable

from pydantic import Field

from author_dsl.models import SchemaModel
from author_dsl.names import FormatTag  # noqa: TC001
from author_dsl.values import Document, RuntimeValue  # noqa: TC001

#: The runner receives the document and free-form options and
#: returns the rendered text.
type DocumentFormatter = Callable[[Document, RuntimeValue], str]


class Formatter(SchemaModel):
    """Declarative formatter role.

    A formatter renders a document into one of the output formats listed
    in `formats`, for example `json` or `yaml`.
    """

    formats: list[FormatTag] = Field(
        min_length=1,
        title='Handled format tags',
        description='Output format tags this formatter renders.',
    )

    formatter: DocumentFormatter = Field(
        title='Formatter function',
        description=(
            'Callable receiving the document and an options value '
            '(usually a mapping or `None`) and returning a string.'
        ),
    )
