"""DSL names primitive types and line patterns.

This module defines the patterns used by the line classifier and the
strongly-typed aliases used to validate plugin names, type tags, and
format tags.

The rules defined here form part of the public DSL contract and are relied
upon by the parser, the plugin registry, and plugin authors.
"""

from re import IGNORECASE
from re import compile as regexp
from typing import Annotated

from pydantic import Field

#: Base pattern for type and format tags.
#: Tags start with a letter and may contain letters, digits, dashes or underscores.
_TAG_PATTERN = r'[a-zA-Z][\w-]*'

#: Base pattern for plugin names.
_PLUGIN_PATTERN = r'[a-zA-Z][\w.-]*'

#: Compiled pattern for block openings ("Begin Profile").
BLOCK_START_PATTERN = regexp(r'^begin\s+(?P<name>.*)$', flags=IGNORECASE)

#: Compiled pattern for block closings ("End Profile").
BLOCK_END_PATTERN = regexp(r'^end\s+(?P<name>.*)$', flags=IGNORECASE)

#: Compiled pattern for line separators, tolerant to CR/LF endings.
LINE_SEPARATOR_PATTERN = regexp(r'\r?\n')

COMMENT_PREFIX = '#'
KEY_SEPARATOR = ':'
TYPE_SEPARATOR = '@'
MULTILINE_MARKER = '"""'


PluginName = Annotated[
    str, Field(
        pattern=rf'^{_PLUGIN_PATTERN}$',
        title='Plugin name',
        description=(
            'Unique name of a plugin within a registry. '
            'Used for identification, unregistration and error messages.'
        ),
        examples=[
            'url-type',
            'json-formatter',
        ],
    ),
]

TypeTag = Annotated[
    str, Field(
        pattern=rf'^{_TAG_PATTERN}$',
        title='Type tag',
        description=(
            'Tag following `@` in a statement key, for example `url` in '
            '`Website@url: https://example.com`. Selects a type handler.'
        ),
        examples=[
            'url',
            'email',
        ],
    ),
]

FormatTag = Annotated[
    str, Field(
        pattern=rf'^{_TAG_PATTERN}$',
        title='Format tag',
        description='Name of an output format rendered by a formatter.',
        examples=[
            'json',
            'yaml',
        ],
    ),
]
