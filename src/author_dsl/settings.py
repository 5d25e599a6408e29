"""Runtime settings for parsers built from the environment."""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from author_dsl.models import SettingsModel
from author_dsl.names import FormatTag  # noqa: TC001

ENV_PREFIX = 'AUTHOR_DSL_'


class ParserSettings(SettingsModel):
    """Parser configuration resolved from `AUTHOR_DSL_*` variables.

    Example:
        `AUTHOR_DSL_STRICT=1 AUTHOR_DSL_FORMAT=yaml author-dsl parse author.txt`
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        frozen=True,
        extra='ignore',
    )

    strict: bool = Field(
        default=False,
        title='Strict mode',
        description=(
            'Raise errors instead of emitting warnings on plugin shadowing '
            'and plugin loading failures.'
        ),
    )

    builtins: bool = Field(
        default=True,
        title='Built-in plugins',
        description='Register built-in type handlers, validators and formatters.',
    )

    entrypoints: bool = Field(
        default=True,
        title='Entry-point plugins',
        description='Discover plugins from the `author_dsl_plugins` entry-point group.',
    )

    format: FormatTag = Field(
        default='json',
        title='Output format',
        description='Default output format tag used by the command line.',
    )

    indent: int = Field(
        default=2,
        ge=0,
        title='Indentation',
        description='Indentation passed to formatters supporting it.',
    )
