"""Declarative parse hook definitions.

A parse hook intercepts the parser at any subset of its five hook points.
Every hook is an explicit optional slot: absent hooks are `None` and are
skipped by the pipeline, present hooks are called in registry order.
"""

from collections.abc import Callable

from pydantic import Field, model_validator

from author_dsl.context import PluginContext
from author_dsl.models import SchemaModel
from author_dsl.values import Document, RuntimeValue  # noqa: TC001

#: Receives the raw input text and returns the text passed further.
type TextHook = Callable[[str], str]

#: Receives the assembled document and returns the document passed further.
type DocumentHook = Callable[[Document], Document]

#: Receives a key, its value and the context, and returns a replacement
#: `(key, value)` pair or `None` to keep the current pair.
type KeyValueHook = Callable[[str, RuntimeValue, PluginContext], tuple[str, RuntimeValue] | None]

#: Receives a block name and the context. Observational only.
type BlockHook = Callable[[str, PluginContext], None]

HOOK_NAMES = (
    'before_parse',
    'after_parse',
    'on_key_value',
    'on_block_start',
    'on_block_end',
)


class ParseHook(SchemaModel):
    """Declarative parse hook role.

    At least one hook must be provided.
    """

    before_parse: TextHook | None = Field(
        default=None,
        title='Before parse hook',
        description='Transforms the raw input text before parsing starts.',
    )

    after_parse: DocumentHook | None = Field(
        default=None,
        title='After parse hook',
        description='Transforms the fully assembled document.',
    )

    on_key_value: KeyValueHook | None = Field(
        default=None,
        title='Key-value hook',
        description=(
            'Called for every statement before its value is stored. '
            'May return a replacement `(key, value)` pair.'
        ),
    )

    on_block_start: BlockHook | None = Field(
        default=None,
        title='Block start hook',
        description='Called for every `Begin` line before the block opens.',
    )

    on_block_end: BlockHook | None = Field(
        default=None,
        title='Block end hook',
        description='Called for every `End` line before the block closes.',
    )

    @model_validator(mode='after')
    def check_hooks(self) -> 'ParseHook':
        """Require at least one hook."""
        if not self.hooks:
            raise ValueError('Parse hook must implement at least one hook')

        return self

    @property
    def hooks(self) -> frozenset[str]:
        """Names of the implemented hooks."""
        return frozenset(
            name
            for name in HOOK_NAMES
            if getattr(self, name) is not None
        )
