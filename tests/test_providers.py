"""Tests for plugin loading from entry points."""

from typing import TYPE_CHECKING

import pydantic
import pytest

from author_dsl.builtins import formatters
from author_dsl.core import DocumentParser
from author_dsl.errors import PluginError, PluginErrorCode, PluginWarning
from author_dsl.extensions import Plugin, Validator
from tests.examples.plugins import color, social

if TYPE_CHECKING:
    from collections.abc import Callable

if TYPE_CHECKING:
    from pytest_mock import MockType


def _validation_error() -> pydantic.ValidationError:
    try:
        pydantic.TypeAdapter(int).validate_python('error')
    except pydantic.ValidationError as exception:
        return exception

    raise AssertionError


def test_base_loading(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Verify successful loading of plugins from entrypoints."""
    patch_entrypoints(color, social)

    parser = DocumentParser(entrypoints=True)

    assert [plugin.name for plugin in parser.registry] == ['color-type', 'social-media-type']
    assert parser.parse('Accent@color: blue') == {
        'Accent': {'type': 'color', 'value': 'blue', 'hex': '#0000ff'},
    }


def test_loading_without_entrypoints(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Verify that entrypoints are not loaded unless requested."""
    patch = patch_entrypoints(color)

    parser = DocumentParser()

    assert len(parser.registry) == 0
    patch.assert_not_called()


def test_loading_with_empty_entrypoints(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Verify behavior when no plugins are installed."""
    patch_entrypoints()

    parser = DocumentParser(entrypoints=True)

    assert len(parser.registry) == 0
    assert parser.parse('Accent@color: blue') == {'Accent': {'type': 'color', 'value': 'blue'}}


def test_loading_skip_with_failed_entrypoint(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Verify skipping of plugins that fail during loading."""
    patch_entrypoints(None, raises=SyntaxError)
    with pytest.warns(PluginWarning, match=r'^Failed to load entrypoint'):
        DocumentParser(entrypoints=True)


def test_loading_fail_with_failed_entrypoint(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Verify failing of plugins that fail during loading with strict mode."""
    patch_entrypoints(None, raises=SyntaxError)
    with pytest.raises(PluginError, match=r'Failed to load entrypoint') as error:
        DocumentParser(strict=True, entrypoints=True)

    assert error.value.code is PluginErrorCode.LOADING
    assert isinstance(error.value.__cause__, SyntaxError)


def test_loading_skip_with_not_valid_entrypoint(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Verify skipping of plugins that fail validation during loading."""
    patch_entrypoints(None, raises=_validation_error())
    with pytest.warns(PluginWarning, match=r'^Failed to validate entrypoint'):
        DocumentParser(strict=False, entrypoints=True)


def test_loading_fail_with_not_valid_entrypoint(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Verify failing of plugins that fail validation during loading with strict mode."""
    patch_entrypoints(None, raises=_validation_error())
    with pytest.raises(PluginError, match=r'Failed to validate entrypoint'):
        DocumentParser(strict=True, entrypoints=True)


def test_loading_skip_with_invalid_provider(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Verify handling of objects that are not plugins."""
    patch_entrypoints({})
    with pytest.warns(PluginWarning, match=r'object is not a plugin$'):
        DocumentParser(entrypoints=True)


def test_loading_fail_with_invalid_provider(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Verify failing on objects that are not plugins with strict mode."""
    patch_entrypoints({})
    with pytest.raises(PluginError, match=r'object is not a plugin$'):
        DocumentParser(strict=True, entrypoints=True)


def test_loading_skip_with_failed_initialization(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Verify that plugins failing to initialize are skipped."""
    def fail() -> None:
        raise RuntimeError('no config')

    broken = Plugin(
        name='broken',
        initialize=fail,
        validator=Validator(validator=lambda document: []),
    )
    patch_entrypoints(broken, color)

    with pytest.warns(PluginWarning, match=r"^Failed to register entrypoint 'tests0': no config$"):
        parser = DocumentParser(entrypoints=True)

    assert 'broken' not in parser.registry
    assert 'color-type' in parser.registry


def test_loading_shadows_builtins(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Verify that entrypoint plugins take over built-in tags with a warning."""
    override = Plugin(
        name='json-override',
        formatter=formatters.text.formatter.model_copy(update={'formats': ['json']}),
    )
    patch_entrypoints(override)

    with pytest.warns(PluginWarning, match=r"^Formatter 'json' from 'json-override' is shadowing 'json-formatter'$"):
        parser = DocumentParser(builtins=True, entrypoints=True)

    assert parser.format({'A': '1'}, 'json') == 'A: 1'
