"""Built-in output formatters for author DSL.

This module defines formatters rendering parsed documents as JSON, YAML,
Markdown and an indented plain-text outline.

Options are passed as a mapping; the JSON and YAML formatters accept
`indent`, other keys are ignored.
"""

from json import dumps
from typing import TYPE_CHECKING

from yaml import safe_dump

from author_dsl.extensions import Formatter, Plugin
from author_dsl.values import MAPPINGS, SEQUENCES

if TYPE_CHECKING:
    from author_dsl.values import Document, RuntimeValue, Value

BUILTIN_AUTHOR = 'author-dsl'

DEFAULT_INDENT = 2
MARKDOWN_TITLE = '# Author Profile'
AUTHOR_KEY = 'author'


def _option(options: 'RuntimeValue', name: str, default: 'RuntimeValue') -> 'RuntimeValue':
    """Read a formatter option, falling back to a default."""
    if isinstance(options, MAPPINGS) and options.get(name) is not None:
        return options[name]

    return default


def _json(document: 'Document', options: 'RuntimeValue' = None) -> str:
    """Render a document as JSON.

    Values JSON cannot represent are rendered with `str`.
    """
    return dumps(
        document,
        indent=_option(options, 'indent', DEFAULT_INDENT),
        ensure_ascii=False,
        default=str,
    )


def _yaml(document: 'Document', options: 'RuntimeValue' = None) -> str:
    """Render a document as block-style YAML, keeping key order."""
    return safe_dump(
        document,
        indent=_option(options, 'indent', DEFAULT_INDENT),
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )


def _markdown_items(value: 'Document', depth: int) -> list[str]:
    """Render a mapping as a nested Markdown list."""
    spaces = '  ' * depth
    lines = []

    for key, item in value.items():
        if isinstance(item, MAPPINGS):
            lines.append(f'{spaces}- **{key}**:')
            lines.extend(_markdown_items(item, depth + 1))

        elif isinstance(item, SEQUENCES):
            lines.append(f'{spaces}- **{key}**:')
            for element in item:
                if isinstance(element, MAPPINGS):
                    lines.extend(_markdown_items(element, depth + 2))
                else:
                    lines.append(f'{spaces}  - {element}')

        else:
            lines.append(f'{spaces}- **{key}**: {item}')

    return lines


def _markdown(document: 'Document', options: 'RuntimeValue' = None) -> str:  # noqa: ARG001
    """Render a document as a Markdown profile.

    The author name becomes a second-level heading, lists and blocks
    become third-level sections, other keys become bold labels.
    """
    lines = [MARKDOWN_TITLE, '']

    for key, value in document.items():
        if key.lower() == AUTHOR_KEY and not isinstance(value, MAPPINGS + SEQUENCES):
            lines.extend([f'## {value}', ''])

        elif isinstance(value, SEQUENCES):
            lines.extend([f'### {key}', ''])
            for item in value:
                if isinstance(item, MAPPINGS):
                    lines.extend(_markdown_items(item, 0))
                else:
                    lines.append(f'- {item}')
            lines.append('')

        elif isinstance(value, MAPPINGS):
            lines.extend([f'### {key}', '', *_markdown_items(value, 0), ''])

        else:
            lines.extend([f'**{key}**: {value}', ''])

    return '\n'.join(lines)


def _text_lines(value: 'Value', depth: int) -> list[str]:
    """Render a mapping as an indented outline with list indices."""
    spaces = '  ' * depth
    lines = []

    for key, item in value.items():
        if isinstance(item, SEQUENCES):
            lines.append(f'{spaces}{key}:')
            for index, element in enumerate(item):
                if isinstance(element, MAPPINGS):
                    lines.append(f'{spaces}  [{index}]:')
                    lines.extend(_text_lines(element, depth + 2))
                else:
                    lines.append(f'{spaces}  [{index}]: {element}')

        elif isinstance(item, MAPPINGS):
            lines.append(f'{spaces}{key}:')
            lines.extend(_text_lines(item, depth + 1))

        else:
            lines.append(f'{spaces}{key}: {item}')

    return lines


def _text(document: 'Document', options: 'RuntimeValue' = None) -> str:  # noqa: ARG001
    """Render a document as an indented plain-text outline."""
    return '\n'.join(_text_lines(document, 0))


json = Plugin(
    name='json-formatter',
    description='JSON formatter for author data',
    author=BUILTIN_AUTHOR,
    formatter=Formatter(formats=['json'], formatter=_json),
)

yaml = Plugin(
    name='yaml-formatter',
    description='YAML formatter for author data',
    author=BUILTIN_AUTHOR,
    formatter=Formatter(formats=['yaml', 'yml'], formatter=_yaml),
)

markdown = Plugin(
    name='markdown-formatter',
    description='Markdown formatter for author data',
    author=BUILTIN_AUTHOR,
    formatter=Formatter(formats=['markdown', 'md'], formatter=_markdown),
)

text = Plugin(
    name='text-formatter',
    description='Plain-text outline formatter for author data',
    author=BUILTIN_AUTHOR,
    formatter=Formatter(formats=['text'], formatter=_text),
)
