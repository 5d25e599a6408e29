"""Invocation context handed to plugin hooks.

Every per-line hook receives a `PluginContext` describing the line being
processed and the frame (the currently open document or block) it affects.
"""

from typing import Any

from pydantic import Field, InstanceOf

from author_dsl.models import SchemaModel


class PluginContext(SchemaModel):
    """Snapshot of the parser state at a plugin invocation point.

    The context itself is immutable, but `data` is the live mapping of the
    current frame. Hooks may read it; mutating it changes the document.
    """

    line_num: int | None = Field(
        default=None,
        title='Line number',
        description='One-based number of the source line, if any.',
    )

    line: str | None = Field(
        default=None,
        title='Source line',
        description='Raw text of the source line, if any.',
    )

    key: str = Field(
        default='',
        title='Statement key',
        description='Key of the statement being processed, empty for blocks.',
    )

    value: Any = Field(
        default='',
        title='Statement value',
        description=(
            'Processed scalar value of the statement, or its raw text '
            'when the value is a list. Empty for blocks.'
        ),
    )

    type: str | None = Field(
        default=None,
        title='Type tag',
        description='Type tag of the statement key, if annotated.',
    )

    data: InstanceOf[dict] = Field(
        default_factory=dict,
        title='Current frame',
        description='Mapping of the currently open document or block.',
    )
