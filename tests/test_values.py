"""Tests for value processing and document lookups."""

import pytest

from author_dsl.values import get_value, is_typed, make_typed, process_value, unquote


@pytest.mark.parametrize(('value', 'expected'), (
    pytest.param('plain', 'plain', id='plain'),
    pytest.param('  padded  ', 'padded', id='trimmed'),
    pytest.param('"quoted"', 'quoted', id='quoted'),
    pytest.param('"a, b"', ['a', 'b'], id='quoted list'),
    pytest.param('Assembly, Rust, C', ['Assembly', 'Rust', 'C'], id='comma list'),
    pytest.param('a,,b, ', ['a', 'b'], id='empty parts dropped'),
    pytest.param(',', [], id='only separator'),
    pytest.param('"', '"', id='single quote char'),
    pytest.param('""', '', id='empty quoted'),
    pytest.param('"a\\"b"', 'a\\"b', id='no escape processing'),
    pytest.param('', '', id='empty'),
))
def test_process_value(value: str, expected: str | list[str]) -> None:
    """Verify scalar and comma list interpretation."""
    assert process_value(value) == expected


@pytest.mark.parametrize(('value', 'expected'), (
    pytest.param('"x"', 'x', id='wrapped'),
    pytest.param('"x', '"x', id='open only'),
    pytest.param('x"', 'x"', id='close only'),
    pytest.param('""x""', '"x"', id='one pair only'),
))
def test_unquote(value: str, expected: str) -> None:
    """Verify that exactly one pair of quotes is stripped."""
    assert unquote(value) == expected


def test_typed_values() -> None:
    """Verify typed value construction and detection."""
    typed = make_typed('custom', 'v')

    assert typed == {'type': 'custom', 'value': 'v'}
    assert is_typed(typed)
    assert not is_typed({'value': 'v'})
    assert not is_typed({'type': 1, 'value': 'v'})
    assert not is_typed({'type': 'custom'})
    assert not is_typed('custom')


@pytest.mark.parametrize(('key', 'expected'), (
    pytest.param('author', 'Jane', id='lower'),
    pytest.param('AUTHOR', 'Jane', id='upper'),
    pytest.param('Author', 'Jane', id='exact'),
    pytest.param('missing', None, id='missing'),
))
def test_get_value(key: str, expected: str | None) -> None:
    """Verify case-insensitive lookup."""
    assert get_value({'Author': 'Jane', 'Skills': ['a']}, key) == expected


def test_get_value_returns_first_match() -> None:
    """Verify that the first case-insensitive match wins."""
    assert get_value({'Name': 'first', 'name': 'second'}, 'NAME') == 'first'
