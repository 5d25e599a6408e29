"""Plugin invocation pipeline.

This module orchestrates registry-held plugins at every extension point of
a parse, validate and format cycle:

- `before_parse` and `after_parse` chain parse hooks over the input text
  and over the assembled document;
- `on_block_start` and `on_block_end` notify parse hooks of block lines;
- `process_value` selects a single type handler by exact tag match;
- `on_key_value` chains parse hooks over every `(key, value)` pair;
- `validate` concatenates the warnings of every validator;
- `format` renders a document with the formatter of a format tag.

Every exception raised by a plugin is wrapped into a `PluginError` carrying
the plugin name and the code of the invocation point.
"""

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from author_dsl.context import PluginContext
from author_dsl.errors import FormatUnavailableError, PluginError, PluginErrorCode
from author_dsl.values import SEQUENCES, TYPE_FIELD, VALUE_FIELD, is_typed, make_typed, process_value

if TYPE_CHECKING:
    from author_dsl.core.registry import PluginRegistry
    from author_dsl.extensions import Plugin
    from author_dsl.values import Document, RuntimeValue, Value


@contextmanager
def invoking(plugin: 'Plugin', code: PluginErrorCode, element: Any = None) -> Iterator[None]:  # noqa: ANN401
    """Wrap failures of a plugin invocation into `PluginError`.

    Args:
        plugin: Plugin being invoked.
        code: Invocation point.
        element: Optional data handed to the plugin, used in error snippets.

    Raises:
        PluginError: If the wrapped block raises any exception.
    """
    try:
        yield
    except Exception as base:
        raise PluginError.wrap(plugin.name, code, base, element=element) from base


class PluginPipeline:
    """Ordered invocation of registered plugins.

    The pipeline holds no state of its own; every call reads the current
    contents of the registry.
    """

    def __init__(self, registry: 'PluginRegistry') -> None:
        """Initialize the pipeline.

        Args:
            registry: Registry providing plugins in invocation order.
        """
        self.registry = registry

    def before_parse(self, text: str) -> str:
        """Chain `before_parse` hooks over the raw input.

        Args:
            text: Raw input text.

        Returns:
            Text produced by the last hook, or the input when there are none.

        Raises:
            PluginError: If any hook fails.
        """
        for plugin in self.registry.parse_hooks:
            if plugin.parse_hook is None or plugin.parse_hook.before_parse is None:
                continue
            with invoking(plugin, PluginErrorCode.BEFORE_PARSE):
                text = plugin.parse_hook.before_parse(text)

        return text

    def after_parse(self, document: 'Document') -> 'Document':
        """Chain `after_parse` hooks over the assembled document.

        Args:
            document: Fully assembled document.

        Returns:
            Document produced by the last hook, or the input when there are none.

        Raises:
            PluginError: If any hook fails.
        """
        for plugin in self.registry.parse_hooks:
            if plugin.parse_hook is None or plugin.parse_hook.after_parse is None:
                continue
            with invoking(plugin, PluginErrorCode.AFTER_PARSE):
                document = plugin.parse_hook.after_parse(document)

        return document

    def on_block_start(self, name: str, context: PluginContext) -> None:
        """Notify hooks of a block opening.

        Raises:
            PluginError: If any hook fails; the parse is aborted.
        """
        for plugin in self.registry.parse_hooks:
            if plugin.parse_hook is None or plugin.parse_hook.on_block_start is None:
                continue
            with invoking(plugin, PluginErrorCode.BLOCK_START, {'block': name}):
                plugin.parse_hook.on_block_start(name, context)

    def on_block_end(self, name: str, context: PluginContext) -> None:
        """Notify hooks of a block closing.

        Raises:
            PluginError: If any hook fails; the parse is aborted.
        """
        for plugin in self.registry.parse_hooks:
            if plugin.parse_hook is None or plugin.parse_hook.on_block_end is None:
                continue
            with invoking(plugin, PluginErrorCode.BLOCK_END, {'block': name}):
                plugin.parse_hook.on_block_end(name, context)

    def on_key_value(self, key: str, value: 'Value',
                     context: PluginContext) -> tuple[str, 'Value']:
        """Chain `on_key_value` hooks over a statement.

        A hook returning a pair replaces the input of the next hook,
        a hook returning `None` passes the current pair through.

        Args:
            key: Statement key.
            value: Processed statement value.
            context: Invocation context.

        Returns:
            The final `(key, value)` pair to store.

        Raises:
            PluginError: If any hook fails or returns a malformed result.
        """
        for plugin in self.registry.parse_hooks:
            if plugin.parse_hook is None or plugin.parse_hook.on_key_value is None:
                continue
            with invoking(plugin, PluginErrorCode.KEY_VALUE, {key: value}):
                result = plugin.parse_hook.on_key_value(key, value, context)
                if result is None:
                    continue
                if not isinstance(result, SEQUENCES) or len(result) != 2:  # noqa: PLR2004
                    raise TypeError(f'Expected a (key, value) pair, got {result!r}')
                key, value = result

        return key, value

    def process_value(self, value: str, type_name: str,
                      context: PluginContext) -> 'RuntimeValue':
        """Interpret a typed statement value.

        Args:
            value: Raw statement value.
            type_name: Type tag of the statement key.
            context: Invocation context.

        Returns:
            The handler result, or `{'type': tag, 'value': processed}`
            when no handler is registered for the tag.

        Raises:
            PluginError: If the handler fails.
        """
        plugin = self.registry.type_handler(type_name)
        if plugin is None or plugin.type_handler is None:
            return make_typed(type_name, process_value(value))

        with invoking(plugin, PluginErrorCode.VALUE_PROCESSING, {context.key: value}):
            return plugin.type_handler.processor(value, type_name, context)

    def validate_value(self, value: 'RuntimeValue', type_name: str,
                       context: PluginContext) -> list[str]:
        """Check a processed value with the validator of its type handler.

        Returns:
            Warning messages; empty when the handler has no validator.

        Raises:
            PluginError: If the validator fails.
        """
        plugin = self.registry.type_handler(type_name)
        if plugin is None or plugin.type_handler is None or plugin.type_handler.validator is None:
            return []

        with invoking(plugin, PluginErrorCode.VALUE_VALIDATION, {context.key: value}):
            return list(plugin.type_handler.validator(value, type_name, context) or ())

    def validate_values(self, document: 'Document') -> list[str]:
        """Check every typed value of a document with its type handler.

        Typed values are mappings with a string `type` field and a `value`
        field, as produced by built-in handlers and by the fallback for
        unknown tags. Mappings whose tag has no value validator are walked
        like any other block.

        Returns:
            Warning messages in document order.

        Raises:
            PluginError: If a validator fails.
        """
        return list(self._walk_values(document, ''))

    def _has_value_validator(self, type_name: str) -> bool:
        plugin = self.registry.type_handler(type_name)
        return plugin is not None and plugin.type_handler is not None and plugin.type_handler.validator is not None

    def _walk_values(self, value: 'Value', path: str) -> Iterator[str]:
        """Yield warnings for typed values nested in a value."""
        if is_typed(value) and self._has_value_validator(value[TYPE_FIELD]):
            type_name = value[TYPE_FIELD]
            context = PluginContext(key=path, value=value[VALUE_FIELD], type=type_name, data=value)
            yield from self.validate_value(value, type_name, context)
            return

        if isinstance(value, Mapping):
            for key, item in value.items():
                yield from self._walk_values(item, f'{path}.{key}' if path else str(key))

        elif isinstance(value, SEQUENCES):
            for index, item in enumerate(value):
                yield from self._walk_values(item, f'{path}[{index}]')

    def validate(self, document: 'Document') -> list[str]:
        """Run every validator once over a document.

        Args:
            document: Parsed document.

        Returns:
            Warnings of all validators concatenated in registry order.

        Raises:
            PluginError: On the first failing validator.
        """
        warnings: list[str] = []

        for plugin in self.registry.validators:
            if plugin.validator is None:
                continue
            with invoking(plugin, PluginErrorCode.VALIDATION):
                warnings.extend(plugin.validator.validator(document))

        return warnings

    def format(self, document: 'Document', format_name: str,
               options: 'RuntimeValue' = None) -> str:
        """Render a document with the formatter of a format tag.

        Args:
            document: Parsed document.
            format_name: Requested output format tag.
            options: Free-form options handed to the formatter.

        Returns:
            Rendered text.

        Raises:
            FormatUnavailableError: If no formatter handles the format.
            PluginError: If the formatter fails or returns a non-string.
        """
        plugin = self.registry.formatter(format_name)
        if plugin is None or plugin.formatter is None:
            raise FormatUnavailableError(format_name, self.registry.formats)

        with invoking(plugin, PluginErrorCode.FORMATTING):
            result = plugin.formatter.formatter(document, options)
            if not isinstance(result, str):
                raise TypeError(f'Formatter returned {type(result).__name__}, expected str')

        return result

    @property
    def formats(self) -> list[str]:
        """Available output format tags."""
        return self.registry.formats
