"""CLI utilities for author.txt files.

The commands build a parser from `AUTHOR_DSL_*` settings, optionally
overridden by command-line options, and report validation warnings on
standard error.
"""

from pathlib import Path
from typing import TYPE_CHECKING

from click import BadParameter, ClickException, IntRange, argument, echo, group, option
from click import Path as PathParam
from pydantic import ValidationError

from author_dsl.core import DocumentParser
from author_dsl.errors import DSLError
from author_dsl.settings import ParserSettings

if TYPE_CHECKING:
    from author_dsl.values import RuntimeValue

WARNING_PREFIX = 'warning: '

InputFilepath = PathParam(
    exists=True,
    dir_okay=False,
    readable=True,
    path_type=Path,
)


def _make_settings(**overrides: 'RuntimeValue') -> ParserSettings:
    """Resolve settings, letting explicit options win over the environment.

    Options left unset on the command line are `None` and are skipped.
    """
    return ParserSettings(**{
        name: value
        for name, value in overrides.items()
        if value is not None
    })


@group(help='Command-line utilities for author.txt files.')
def cli() -> None:
    """Root CLI group for author-dsl tools."""
    return None


@cli.command(
    name='parse',
    help='Parse an author file and print the formatted document to standard output.',
)
@option(
    '-f', '--format', 'format_name',
    help='Output format tag, for example json, yaml, md or text.',
    default=None,
)
@option(
    '--validate/--no-validate',
    help='Report validation warnings on standard error.',
    default=True,
)
@option(
    '--strict/--no-strict',
    help='Fail on plugin shadowing and plugin loading issues.',
    default=None,
)
@option(
    '--builtins/--no-builtins',
    help='Register built-in type handlers, validators and formatters.',
    default=None,
)
@option(
    '--indent',
    type=IntRange(min=0),
    help='Indentation passed to formatters supporting it.',
    default=None,
)
@argument(
    'source',
    type=InputFilepath,
)
def parse_file(source: Path, format_name: str | None, validate: bool,  # noqa: FBT001
               strict: bool | None, builtins: bool | None, indent: int | None) -> None:
    """Parse, validate and format an author file.

    Args:
        source: Path to the author file.
        format_name: Output format tag overriding the settings.
        validate: Whether to report validation warnings.
        strict: Strict mode overriding the settings.
        builtins: Built-in plugins flag overriding the settings.
        indent: Indentation overriding the settings.

    Raises:
        BadParameter: If options or settings variables are invalid.
        ClickException: If the file is not UTF-8 text, or if parsing,
            validation or formatting fails.
    """
    try:
        settings = _make_settings(
            format=format_name,
            strict=strict,
            builtins=builtins,
            indent=indent,
        )
    except ValidationError as error:
        raise BadParameter(str(error)) from error

    try:
        content = source.read_text(encoding='utf-8')
    except UnicodeDecodeError as error:
        raise ClickException(f'Cannot decode {source} as UTF-8: {error.reason}') from error

    try:
        parser = DocumentParser.from_settings(settings)
        document = parser.parse(content)

        warnings = []
        if validate:
            warnings = parser.validate(document, check_values=True)

        output = parser.format(document, settings.format, {'indent': settings.indent})

    except DSLError as error:
        raise ClickException(str(error)) from error

    for warning in warnings:
        echo(f'{WARNING_PREFIX}{warning}', err=True)

    echo(output)


@cli.command(
    name='formats',
    help='Print available output format tags, one per line.',
)
def print_formats() -> None:
    """Print format tags of registered formatters."""
    parser = DocumentParser.from_settings(_make_settings())

    for format_name in parser.formats:
        echo(format_name)


@cli.command(
    name='plugins',
    help='Print registered plugins with their versions and capabilities.',
)
def print_plugins() -> None:
    """Print name, version and capability roles of every plugin."""
    parser = DocumentParser.from_settings(_make_settings())

    for plugin in parser.registry:
        capabilities = ','.join(sorted(plugin.capabilities))
        echo(f'{plugin.name} {plugin.version} {capabilities}')


if __name__ == '__main__':
    cli()
