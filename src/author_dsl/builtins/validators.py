"""Built-in document validators for author DSL.

This module defines validators reporting common authoring mistakes
(missing author, near-duplicate keys, oversized values, deprecated
untyped keys) and potentially unsafe markup in values.
"""

from collections import Counter
from re import IGNORECASE
from re import compile as regexp
from typing import TYPE_CHECKING

from author_dsl.extensions import Plugin, Validator
from author_dsl.values import MAPPINGS, SEQUENCES, get_value

if TYPE_CHECKING:
    from collections.abc import Iterator

    from author_dsl.values import Document, Value

BUILTIN_AUTHOR = 'author-dsl'

AUTHOR_KEY = 'author'
DEPRECATED_KEYS = ('name', 'email', 'website')

MAX_VALUE_LENGTH = 1000
MAX_LIST_LENGTH = 100

XSS_PATTERNS = tuple(
    regexp(pattern, IGNORECASE)
    for pattern in (
        r'<script',
        r'javascript:',
        r'on\w+\s*=',
        r'<iframe',
        r'<object',
        r'<embed',
    )
)


def _enhanced(document: 'Document') -> list[str]:
    """Report common authoring mistakes at the document root.

    Args:
        document: Parsed document.

    Returns:
        Warning messages, in check order.
    """
    warnings = []

    if not get_value(document, AUTHOR_KEY):
        warnings.append('Warning: No author name specified')

    counts = Counter(key.lower() for key in document)
    if duplicates := [key for key, count in counts.items() if count > 1]:
        warnings.append(f'Warning: Potential duplicate keys (case-insensitive): {", ".join(duplicates)}')

    for key, value in document.items():
        if isinstance(value, str) and len(value) > MAX_VALUE_LENGTH:
            warnings.append(f'Warning: Very long value for key {key!r} ({len(value)} characters)')

        elif isinstance(value, SEQUENCES) and len(value) > MAX_LIST_LENGTH:
            warnings.append(f'Warning: Very large array for key {key!r} ({len(value)} items)')

    for key in DEPRECATED_KEYS:
        if document.get(key):
            warnings.append(f'Warning: Deprecated key {key!r} found. Consider using the typed version.')

    return warnings


def _unsafe_paths(value: 'Value', path: str) -> 'Iterator[str]':
    """Yield paths of string values that look like injected markup."""
    if isinstance(value, str):
        if any(pattern.search(value) for pattern in XSS_PATTERNS):
            yield path

    elif isinstance(value, MAPPINGS):
        for key, item in value.items():
            yield from _unsafe_paths(item, f'{path}.{key}')

    elif isinstance(value, SEQUENCES):
        for index, item in enumerate(value):
            yield from _unsafe_paths(item, f'{path}[{index}]')


def _security(document: 'Document') -> list[str]:
    """Report values containing script-like markup.

    Args:
        document: Parsed document.

    Returns:
        A warning for every offending value, with its path.
    """
    return [
        f'Security warning: Potential XSS in key {path!r}'
        for key, value in document.items()
        for path in _unsafe_paths(value, key)
    ]


enhanced = Plugin(
    name='enhanced-validation',
    description='Enhanced validation rules for author data',
    author=BUILTIN_AUTHOR,
    validator=Validator(validator=_enhanced),
)

security = Plugin(
    name='security-validation',
    description='Security validation rules for author data',
    author=BUILTIN_AUTHOR,
    validator=Validator(validator=_security),
)
