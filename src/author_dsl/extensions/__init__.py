"""Declarative DSL plugin definition.

This module defines the top-level declarative container describing a
plugin for the author DSL.

A plugin carries identification metadata, optional lifecycle callables,
and an explicit set of capability roles:
- a type handler (interprets `Key@Type` values),
- a validator (reports warnings about a parsed document),
- a formatter (renders a document into output formats),
- a parse hook (intercepts parsing stages).

Roles are declared, never probed: a registry classifies a plugin only by
the roles it carries, which makes classification a total function of the
declaration.
"""

from collections.abc import Callable
from enum import StrEnum

from pydantic import Field, HttpUrl, model_validator

from author_dsl.models import SchemaModel
from author_dsl.names import PluginName  # noqa: TC001

from .formatters import Formatter
from .handlers import TypeHandler
from .hooks import ParseHook
from .validators import Validator

__all__ = (
    'Capability',
    'Formatter',
    'ParseHook',
    'Plugin',
    'TypeHandler',
    'Validator',
)

#: Lifecycle callables take no arguments.
type LifecycleHook = Callable[[], None]


class Capability(StrEnum):
    """Capability roles a plugin may declare."""

    TYPE_HANDLER = 'type-handler'
    VALIDATOR = 'validator'
    FORMATTER = 'formatter'
    PARSE_HOOK = 'parse-hook'


class Plugin(SchemaModel):
    """Declarative container for an author DSL plugin.

    Roles are non-exclusive: a single plugin may, for example, both handle
    a type and validate documents. At least one role is required.

    Example:
        ```python
        upper = Plugin(
            name='upper',
            description='Uppercases the input',
            parse_hook=ParseHook(before_parse=str.upper),
        )
        ```
    """

    name: PluginName = Field(
        title='Plugin name',
        description=(
            'Unique name of the plugin. Used for identification, '
            'unregistration and error messages.'
        ),
    )

    version: str = Field(
        default='1.0.0',
        title='Plugin version',
        description='Version of the plugin implementation.',
    )

    description: str = Field(
        default='',
        title='Description',
        description='Human-readable description of the plugin.',
    )

    author: str | None = Field(
        default=None,
        title='Author',
        description='Optional plugin author.',
    )

    homepage: HttpUrl | None = Field(
        default=None,
        title='Homepage',
        description='Optional plugin homepage.',
    )

    initialize: LifecycleHook | None = Field(
        default=None,
        title='Initialization hook',
        description='Called once when the plugin is registered.',
    )

    destroy: LifecycleHook | None = Field(
        default=None,
        title='Destruction hook',
        description='Called once when the plugin is unregistered.',
    )

    type_handler: TypeHandler | None = Field(
        default=None,
        title='Type handler role',
    )

    validator: Validator | None = Field(
        default=None,
        title='Validator role',
    )

    formatter: Formatter | None = Field(
        default=None,
        title='Formatter role',
    )

    parse_hook: ParseHook | None = Field(
        default=None,
        title='Parse hook role',
    )

    @model_validator(mode='after')
    def check_capabilities(self) -> 'Plugin':
        """Require at least one capability role."""
        if not self.capabilities:
            raise ValueError(f'Plugin {self.name!r} declares no capability')

        return self

    @property
    def capabilities(self) -> frozenset[Capability]:
        """Capability roles declared by the plugin."""
        roles = {
            Capability.TYPE_HANDLER: self.type_handler,
            Capability.VALIDATOR: self.validator,
            Capability.FORMATTER: self.formatter,
            Capability.PARSE_HOOK: self.parse_hook,
        }

        return frozenset(
            capability
            for capability, role in roles.items()
            if role is not None
        )
