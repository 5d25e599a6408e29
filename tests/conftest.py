"""Tests configurations and fixtures."""

from importlib.metadata import EntryPoint, EntryPoints
from typing import TYPE_CHECKING

import pytest

from author_dsl.core import ENTRYPOINT_GROUP, DocumentParser, PluginRegistry

if TYPE_CHECKING:
    from collections.abc import Callable

if TYPE_CHECKING:
    from pytest_mock import MockerFixture, MockType

if TYPE_CHECKING:
    from author_dsl.extensions import Plugin


@pytest.fixture
def registry() -> PluginRegistry:
    """Provide an empty non-strict plugin registry."""
    return PluginRegistry()


@pytest.fixture
def parser(registry: PluginRegistry) -> DocumentParser:
    """Provide a parser without any plugins.

    The parser shares the `registry` fixture, so tests may register
    plugins on either of them.
    """
    return DocumentParser(registry)


@pytest.fixture
def builtin_parser() -> DocumentParser:
    """Provide a parser with built-in plugins registered."""
    return DocumentParser(builtins=True)


@pytest.fixture
def patch_entrypoints(mocker: 'MockerFixture') -> 'Callable[[Plugin, Exception], MockType]':
    """Provide a factory for mocking `importlib.metadata.entry_points`.

    Returns a callable that patches `entry_points()` to simulate
    discovery of plugins in the `author_dsl_plugins` entry point group.

    The returned factory allows configuring:
    - successfully loadable plugins,
    - or an exception raised during plugin loading,
    - or an empty entry point list.

    This fixture is intended for testing plugin discovery and error
    handling logic without relying on real installed entry points.
    """
    def patch(*plugins: 'Plugin', raises: Exception | None = None) -> 'MockType':
        """Patch `entry_points` with a controlled plugin configuration.

        Args:
            plugins: Plugin objects to be returned by `EntryPoint.load()`.
                If empty, no entry points are registered.
            raises: Exception to raise when `EntryPoint.load()` is called.
                Used to simulate plugin load failures.

        Returns:
            A mock patch object produced by `mocker.patch` that replaces
            `importlib.metadata.entry_points` for the duration of the test.
        """
        entrypoints = []
        for index, plugin in enumerate(plugins):
            ep = mocker.Mock(spec=EntryPoint)
            ep.group = ENTRYPOINT_GROUP
            ep.name = f'tests{index}'
            ep.value = f'tests.examples.plugins:plugin{index}'
            ep.load.return_value = plugin
            if raises is not None:
                ep.load.side_effect = raises
            entrypoints.append(ep)

        return mocker.patch(
            'importlib.metadata.entry_points',
            return_value=EntryPoints(entrypoints),
        )

    return patch
