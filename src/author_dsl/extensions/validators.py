"""Declarative document validator definitions."""

from collections.abc import Callable

from pydantic import Field

from author_dsl.models import SchemaModel
from author_dsl.values import Document  # noqa: TC001

#: The runner receives the final document and returns warning messages.
type DocumentValidator = Callable[[Document], list[str]]


class Validator(SchemaModel):
    """Declarative validator role.

    Validators inspect a fully parsed document and report human-readable
    warnings. They must not mutate the document.
    """

    validator: DocumentValidator = Field(
        title='Validator function',
        description=(
            'Callable receiving the parsed document and returning a list '
            'of warning messages.'
        ),
    )
