"""Plugin registry and extension loading infrastructure.

This module defines the registry holding every plugin known to a parser.
The registry classifies plugins by their declared capability roles and
keeps one ordered collection per category:

- type handlers and formatters are keyed by tag; a later registration for
  a tag replaces the earlier one for that tag only;
- validators and parse hooks are ordered by priority (descending) and then
  by registration order, and are re-sorted on every mutation.

Plugins exposed via the `author_dsl_plugins` entry-point group are loaded
defensively: individual failures do not interrupt loading unless strict
mode is enabled.
"""

from typing import TYPE_CHECKING
from warnings import warn

from pydantic import ValidationError

from author_dsl.errors import PluginError, PluginErrorCode, PluginWarning
from author_dsl.extensions import Capability, Plugin
from author_dsl.models import SchemaModel

if TYPE_CHECKING:
    from collections.abc import Iterator
    from importlib.metadata import EntryPoint

ENTRYPOINT_GROUP = 'author_dsl_plugins'


class Registration(SchemaModel):
    """Bookkeeping record of a registered plugin."""

    plugin: Plugin
    priority: int = 0
    sequence: int = 0

    @property
    def name(self) -> str:
        """Name of the registered plugin."""
        return self.plugin.name

    @property
    def order(self) -> tuple[int, int]:
        """Sort key: higher priority first, then registration order."""
        return -self.priority, self.sequence


class PluginRegistry:
    """Registry of plugins classified by capability.

    The registry is long-lived and shared by every parse, validate and
    format call made against it. It is not thread-safe: registration must
    not overlap a call in flight on the same registry.

    Attributes:
        strict_mode: If True, shadowing and loading issues raise an error.
            If False, issues are emitted as warnings and processing continues.
        destroy_failures: Errors raised by destruction hooks, in order.
    """

    def __init__(self, strict: bool = False) -> None:
        """Initialize an empty registry.

        Args:
            strict: Whether to raise errors on plugin shadowing or loading
                failures instead of emitting warnings.
        """
        self.strict_mode = strict
        self.destroy_failures: list[PluginError] = []

        self._sequence = 0

        self._entries: dict[str, Registration] = {}
        self._type_handlers: dict[str, Registration] = {}
        self._formatters: dict[str, Registration] = {}
        self._validators: list[Registration] = []
        self._parse_hooks: list[Registration] = []

    def __contains__(self, name: object) -> bool:
        """Check whether a plugin with the name is registered."""
        return name in self._entries

    def __len__(self) -> int:
        """Number of registered plugins."""
        return len(self._entries)

    def __iter__(self) -> 'Iterator[Plugin]':
        """Iterate over registered plugins in registration order."""
        return iter([entry.plugin for entry in self._entries.values()])

    def get(self, name: str) -> Plugin | None:
        """Get a registered plugin by name."""
        if entry := self._entries.get(name):
            return entry.plugin

        return None

    def type_handler(self, type_name: str) -> Plugin | None:
        """Get the plugin handling a type tag, if any."""
        if entry := self._type_handlers.get(type_name):
            return entry.plugin

        return None

    def formatter(self, format_name: str) -> Plugin | None:
        """Get the plugin rendering a format tag, if any."""
        if entry := self._formatters.get(format_name):
            return entry.plugin

        return None

    @property
    def validators(self) -> list[Plugin]:
        """Validator plugins in invocation order."""
        return [entry.plugin for entry in self._validators]

    @property
    def parse_hooks(self) -> list[Plugin]:
        """Parse hook plugins in invocation order."""
        return [entry.plugin for entry in self._parse_hooks]

    @property
    def types(self) -> list[str]:
        """Type tags with a registered handler."""
        return list(self._type_handlers)

    @property
    def formats(self) -> list[str]:
        """Format tags with a registered formatter."""
        return list(self._formatters)

    def register(self, plugin: Plugin, *, priority: int = 0) -> None:
        """Register a plugin and initialize it.

        A plugin registered under an existing name replaces the previous
        one, which is unregistered first.

        Args:
            plugin: Declarative plugin definition.
            priority: Invocation priority for validators and parse hooks.
                Higher priorities run first; ties keep registration order.

        Raises:
            PluginError: If the plugin is shadowing another one in strict mode,
                or if its initialization hook fails.
        """
        if plugin.name in self._entries:
            if error := self.emit_plugin_issue(
                f'Plugin {plugin.name!r} is shadowing an existing',
                plugin.name,
            ):
                raise error
            self.unregister(plugin.name)

        self._check_tags(plugin)

        entry = Registration(plugin=plugin, priority=priority, sequence=self._sequence)
        self._sequence += 1

        self._entries[plugin.name] = entry
        self._attach(entry)

        if plugin.initialize is None:
            return

        try:
            plugin.initialize()

        except Exception as base:
            self._detach(entry)
            del self._entries[plugin.name]
            raise PluginError.wrap(plugin.name, PluginErrorCode.INITIALIZATION, base) from base

    def unregister(self, name: str) -> None:
        """Unregister a plugin and destroy it.

        Unknown names are ignored. Failures of the destruction hook are
        reported as warnings and recorded in `destroy_failures`.

        Args:
            name: Name of the plugin to remove.
        """
        entry = self._entries.pop(name, None)
        if entry is None:
            return

        self._detach(entry)

        if entry.plugin.destroy is None:
            return

        try:
            entry.plugin.destroy()

        except Exception as base:  # noqa: BLE001
            error = PluginError.wrap(name, PluginErrorCode.DESTRUCTION, base)
            self.destroy_failures.append(error)
            warn(f'Error destroying plugin {name!r}: {error.reason}', category=PluginWarning, stacklevel=2)

    def clear(self) -> None:
        """Unregister all plugins.

        Destruction failures of one plugin do not stop the others.
        """
        for name in list(self._entries):
            self.unregister(name)

    def _check_tags(self, plugin: Plugin) -> None:
        """Report tags of a plugin already owned by other plugins.

        Args:
            plugin: Plugin about to be registered.

        Raises:
            PluginError: If a tag is shadowed in strict mode.
        """
        owners: list[tuple[str, str, dict[str, Registration]]] = []
        if plugin.type_handler is not None:
            owners.extend(('Type handler', tag, self._type_handlers) for tag in plugin.type_handler.types)
        if plugin.formatter is not None:
            owners.extend(('Formatter', tag, self._formatters) for tag in plugin.formatter.formats)

        for title, tag, category in owners:
            if (owner := category.get(tag)) and (error := self.emit_plugin_issue(
                f'{title} {tag!r} from {plugin.name!r} is shadowing {owner.name!r}',
                plugin.name,
            )):
                raise error

    def _attach(self, entry: Registration) -> None:
        """Insert a registration into every matching category."""
        plugin = entry.plugin
        capabilities = plugin.capabilities

        if Capability.TYPE_HANDLER in capabilities and plugin.type_handler is not None:
            for tag in plugin.type_handler.types:
                self._type_handlers[tag] = entry

        if Capability.FORMATTER in capabilities and plugin.formatter is not None:
            for tag in plugin.formatter.formats:
                self._formatters[tag] = entry

        if Capability.VALIDATOR in capabilities:
            self._validators.append(entry)
            self._validators.sort(key=lambda item: item.order)

        if Capability.PARSE_HOOK in capabilities:
            self._parse_hooks.append(entry)
            self._parse_hooks.sort(key=lambda item: item.order)

    def _detach(self, entry: Registration) -> None:
        """Remove a registration from every category.

        Tags taken over by later plugins are left untouched.
        """
        for category in (self._type_handlers, self._formatters):
            for tag in [tag for tag, owner in category.items() if owner is entry]:
                del category[tag]

        self._validators = [item for item in self._validators if item is not entry]
        self._parse_hooks = [item for item in self._parse_hooks if item is not entry]

    def emit_plugin_issue(self, message: str, plugin: str,
                          entrypoint: 'EntryPoint | None' = None,
                          code: PluginErrorCode = PluginErrorCode.SHADOWING) -> PluginError | None:
        """Emit a plugin warning or return the exception.

        Args:
            message: Warning message to emit.
            plugin: Name of the plugin the issue relates to.
            entrypoint: Entry point from which the plugin was loaded, if applicable.
            code: Error code used in strict mode.

        Returns:
            PluginError on strict mode, otherwise `None`
                with producing a PluginWarning.
        """
        if self.strict_mode:
            return PluginError(plugin, code, message, entrypoint=entrypoint)

        warn(message, category=PluginWarning, stacklevel=3)

        return None

    def _load_plugin(self, entrypoint: 'EntryPoint') -> None:
        """Load and register a single plugin entry point.

        Any errors or malformed entries result in warnings and do not
        interrupt plugin loading by default, but raise on strict mode.

        Args:
            entrypoint: Entry point describing the plugin to load.

        Raises:
            PluginError: If any loading issues occur on strict mode.
        """
        try:
            plugin = entrypoint.load()

        except ValidationError as base:
            if error := self.emit_plugin_issue(
                f'Failed to validate entrypoint {entrypoint.name!r}',
                entrypoint.name,
                entrypoint,
                code=PluginErrorCode.LOADING,
            ):
                raise error from base
            return

        except Exception as base:
            if error := self.emit_plugin_issue(
                f'Failed to load entrypoint {entrypoint.name!r}',
                entrypoint.name,
                entrypoint,
                code=PluginErrorCode.LOADING,
            ):
                raise error from base
            return

        if not isinstance(plugin, Plugin):
            if error := self.emit_plugin_issue(
                f'Loaded from entrypoint {entrypoint.name!r} object is not a plugin',
                entrypoint.name,
                entrypoint,
                code=PluginErrorCode.LOADING,
            ):
                raise error
            return

        try:
            self.register(plugin)

        except PluginError as base:
            if self.strict_mode:
                raise
            warn(
                f'Failed to register entrypoint {entrypoint.name!r}: {base.reason}',
                category=PluginWarning,
                stacklevel=2,
            )

    def load_plugins(self) -> None:
        """Load plugins via entry points and register them.

        Discovers plugins from the `author_dsl_plugins` entry point group.

        Raises:
            PluginError: If any loading issues occur on strict mode.
        """
        from importlib.metadata import entry_points  # noqa: PLC0415

        for entrypoint in entry_points().select(group=ENTRYPOINT_GROUP):
            self._load_plugin(entrypoint)
