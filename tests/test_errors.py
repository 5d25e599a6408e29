"""Tests for error formatting."""

from os import linesep

import pytest

from author_dsl.errors import (
    DSLError,
    ErrorContext,
    ErrorFormatter,
    FormatUnavailableError,
    PluginError,
    PluginErrorCode,
    StructuralError,
)


def test_plain_message() -> None:
    """Verify that errors without context render their message only."""
    assert str(DSLError('Something failed')) == 'Something failed'


def test_structural_error() -> None:
    """Verify line prefix and source snippet of structural errors."""
    error = StructuralError('Empty key not allowed', 4, '  : value')

    assert error.reason == 'Empty key not allowed'
    assert str(error) == f'Line 4: Empty key not allowed{linesep}        > : value'


def test_structural_error_without_line() -> None:
    """Verify structural errors raised at the end of input."""
    error = StructuralError('Unclosed block(s): A')

    assert str(error) == 'Unclosed block(s): A'
    assert error.line_num is None


def test_plugin_error_location() -> None:
    """Verify plugin and invocation point in the location line."""
    error = PluginError('upper', PluginErrorCode.KEY_VALUE, 'boom')

    assert str(error) == f"Plugin upper error: boom{linesep}    by plugin 'upper' (key-value-failed)"


def test_plugin_error_snippet() -> None:
    """Verify YAML snippets of the failing element."""
    error = PluginError.wrap('upper', PluginErrorCode.KEY_VALUE, ValueError('boom'), element={
        'Skills': ['a', 'b'],
        'Handler': object(),
    })

    lines = str(error).split(linesep)
    assert lines[0] == 'Plugin upper error: boom'
    assert lines[2:] == [
        '         ...',
        '        Skills:',
        '        - a',
        '        - b',
        '        Handler: <runtime object>',
    ]


@pytest.mark.parametrize(('error', 'message'), (
    pytest.param(ValueError('bad value'), 'bad value', id='message'),
    pytest.param(KeyError('key'), "'key'", id='key error'),
    pytest.param(RuntimeError(), 'RuntimeError', id='empty message'),
))
def test_plugin_error_wrap(error: Exception, message: str) -> None:
    """Verify the reason of wrapped plugin failures."""
    wrapped = PluginError.wrap('plugin', PluginErrorCode.VALIDATION, error)

    assert wrapped.reason == message
    assert wrapped.plugin == 'plugin'
    assert wrapped.code is PluginErrorCode.VALIDATION
    assert wrapped.context['error'] is error


def test_context_without_location() -> None:
    """Verify that a source line alone renders a snippet without a location."""
    context = ErrorContext(line='Begin A')

    assert str(DSLError('Failure', context=context)) == f'Failure{linesep}        > Begin A'
    assert ErrorFormatter.get_location_string(context) == ''


def test_format_unavailable() -> None:
    """Verify the message of missing formats."""
    assert str(FormatUnavailableError('csv')) == 'No formatter plugin found for format: csv'
    assert str(FormatUnavailableError('csv', ['json', 'md'])) == (
        'No formatter plugin found for format: csv (available: json, md)'
    )
