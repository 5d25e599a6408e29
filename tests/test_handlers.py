"""Tests for built-in type handlers."""

from typing import TYPE_CHECKING

import pytest

from author_dsl.core import DocumentParser

if TYPE_CHECKING:
    from author_dsl.values import Document


@pytest.mark.parametrize(('line', 'expected'), (
    pytest.param(
        'Site@url: https://example.com/path',
        {'type': 'url', 'value': 'example.com/path', 'original': 'https://example.com/path'},
        id='url',
    ),
    pytest.param(
        'Site@url: mailto:jane@example.com',
        {'type': 'url', 'value': 'jane@example.com'},
        id='url mailto',
    ),
    pytest.param(
        'Mail@email: mailto:jane@example.com',
        {'type': 'email', 'value': 'jane@example.com'},
        id='email',
    ),
    pytest.param(
        'Born@date: 2024-01-15',
        {'type': 'date', 'value': '2024-01-15', 'timestamp': 1705276800000, 'iso': '2024-01-15T00:00:00+00:00'},
        id='date',
    ),
    pytest.param(
        'Born@date: someday',
        {'type': 'date', 'value': 'someday'},
        id='date unparsable',
    ),
    pytest.param(
        'Phone@phone: +1 (555) 010-9999',
        {'type': 'phone', 'value': '+15550109999', 'formatted': '+1 (555) 010-9999'},
        id='phone',
    ),
    pytest.param(
        'Code@github: @octocat',
        {'type': 'github', 'value': 'octocat', 'url': 'https://github.com/octocat'},
        id='github',
    ),
))
def test_builtin_types(builtin_parser: DocumentParser, line: str, expected: 'Document') -> None:
    """Verify processing of built-in typed values."""
    document = builtin_parser.parse(line)

    assert list(document.values()) == [expected]


@pytest.mark.parametrize(('line', 'warning'), (
    pytest.param('Site@url: https://', 'Invalid URL format: https://', id='url'),
    pytest.param('Mail@email: jane.example.com', 'Invalid email format: jane.example.com', id='email'),
    pytest.param('Born@date: 15/01/2024', 'Invalid date format: 15/01/2024', id='date'),
    pytest.param('Phone@phone: call me', 'Invalid phone format: callme', id='phone'),
    pytest.param('Code@github: -octo-', 'Invalid GitHub username format: -octo-', id='github'),
))
def test_builtin_type_warnings(builtin_parser: DocumentParser, line: str, warning: str) -> None:
    """Verify warnings for malformed built-in typed values."""
    document = builtin_parser.parse(f'Author: Jane\n{line}')

    assert builtin_parser.validate(document, check_values=True) == [warning]


@pytest.mark.parametrize('line', (
    pytest.param('Site@url: example.com', id='url without scheme'),
    pytest.param('Mail@email: jane@example.com', id='email'),
    pytest.param('Born@date: 2024-01-15T10:30:00+02:00', id='datetime'),
    pytest.param('Phone@phone: +44 20 7946 0958', id='phone'),
    pytest.param('Code@github: octo-cat', id='github'),
))
def test_builtin_types_valid(builtin_parser: DocumentParser, line: str) -> None:
    """Verify that well-formed typed values produce no warnings."""
    document = builtin_parser.parse(f'Author: Jane\n{line}')

    assert builtin_parser.validate(document, check_values=True) == []


@pytest.mark.parametrize('content', (
    pytest.param('Begin Project\ntype: library\nContact@email: not-an-email\nEnd Project', id='block'),
    pytest.param('type: email\nContact@email: not-an-email', id='root'),
))
def test_type_keys_do_not_hide_values(builtin_parser: DocumentParser, content: str) -> None:
    """Verify that plain `type` keys do not stop the typed value walk."""
    document = builtin_parser.parse(f'Author: Jane\n{content}')

    assert builtin_parser.validate(document, check_values=True) == ['Invalid email format: not-an-email']
