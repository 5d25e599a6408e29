"""Author DSL parser and plugin integration.

This module defines the high-level parser turning author files into nested
documents. The parser coordinates:

- the line classifier state machine (normal lines and multiline values),
- the block stack tracking nested `Begin`/`End` scopes,
- the value processor interpreting scalars and comma lists,
- the plugin pipeline invoked at every parsing stage.

As a result, a parse is a function of the input text and the plugins
registered at the time of the call.
"""

from enum import StrEnum
from typing import TYPE_CHECKING

from author_dsl.builtins import formatters, handlers, validators
from author_dsl.context import PluginContext
from author_dsl.errors import StructuralError
from author_dsl.names import BLOCK_END_PATTERN, BLOCK_START_PATTERN, COMMENT_PREFIX, LINE_SEPARATOR_PATTERN
from author_dsl.values import Document, Value, process_value  # noqa: TC001

from .blocks import BlockStack
from .multiline import MultilineAccumulator
from .pipeline import PluginPipeline
from .registry import PluginRegistry
from .statements import parse_statement

if TYPE_CHECKING:
    from io import TextIOBase

    from author_dsl.extensions import Plugin
    from author_dsl.settings import ParserSettings
    from author_dsl.values import RuntimeValue

#: Parsed document together with validation warnings.
type Report = tuple[Document, list[str]]


class ParseState(StrEnum):
    """Mutually exclusive states of the line classifier."""

    NORMAL = 'normal'
    IN_MULTILINE = 'in-multiline'


class ParseSession:
    """State of a single parse call.

    The block stack and the multiline accumulator are created fresh for
    every call and are never shared.
    """

    def __init__(self, pipeline: PluginPipeline) -> None:
        """Initialize the session in the normal state with an empty root.

        Args:
            pipeline: Plugin pipeline consulted at every step.
        """
        self.pipeline = pipeline
        self.stack = BlockStack()
        self.multiline = MultilineAccumulator()

    @property
    def state(self) -> ParseState:
        """Current classifier state."""
        if self.multiline.active:
            return ParseState.IN_MULTILINE

        return ParseState.NORMAL

    def context(self, line_num: int, line: str, *, key: str = '',
                value: 'Value' = '', type_name: str | None = None) -> PluginContext:
        """Build a hook context for the current frame."""
        return PluginContext(
            line_num=line_num,
            line=line,
            key=key,
            value=value,
            type=type_name,
            data=self.stack.current.data,
        )

    def feed(self, line: str, line_num: int) -> None:
        """Classify and process a single source line.

        Args:
            line: Raw source line.
            line_num: One-based line number.

        Raises:
            StructuralError: If the line breaks the grammar.
            PluginError: If a plugin invoked for the line fails.
        """
        if self.state is ParseState.IN_MULTILINE:
            key, type_name = self.multiline.key, self.multiline.type
            if key is not None and (value := self.multiline.feed(line)) is not None:
                self.store(key, value, self.context(line_num, line, key=key, value=value, type_name=type_name))
            return

        trimmed = line.strip()
        if not trimmed or trimmed.startswith(COMMENT_PREFIX):
            return

        if match := BLOCK_START_PATTERN.match(trimmed):
            name = match['name'].strip()
            self.pipeline.on_block_start(name, self.context(line_num, line))
            self.stack.open(name, line_num, line)
            return

        if match := BLOCK_END_PATTERN.match(trimmed):
            name = match['name'].strip()
            self.pipeline.on_block_end(name, self.context(line_num, line))
            self.stack.close(name, line_num, line)
            return

        statement = parse_statement(trimmed, line_num)

        if self.multiline.opens(statement.value):
            value = self.multiline.start(statement.key, statement.value, line_num, statement.type)
            if value is not None:
                self.store(statement.key, value, self.context(
                    line_num, line, key=statement.key, value=value, type_name=statement.type,
                ))
            return

        value = process_value(statement.value)
        context = self.context(
            line_num, line,
            key=statement.key,
            value=value if isinstance(value, str) else statement.value,
            type_name=statement.type,
        )

        if statement.type is not None:
            value = self.pipeline.process_value(statement.value, statement.type, context)

        self.store(statement.key, value, context)

    def store(self, key: str, value: 'Value', context: PluginContext) -> None:
        """Pass a statement through key-value hooks and assign it."""
        key, value = self.pipeline.on_key_value(key, value, context)
        self.stack.current.assign(key, value)

    def finish(self) -> Document:
        """Check end-of-input invariants and return the root document.

        Raises:
            StructuralError: If blocks or a multiline value are left open.
        """
        self.stack.ensure_closed()
        self.multiline.ensure_closed()

        return self.stack.root


class DocumentParser:
    """Author DSL parser with plugin support.

    This class is responsible for:
    - owning a plugin registry and the pipeline invoking it;
    - optionally registering built-in and entry-point plugins;
    - parsing author files into documents;
    - validating and formatting parsed documents.

    The registry is shared by every call made through the parser;
    construct a parser with a fresh registry for isolated calls.
    """

    def __init__(self, registry: PluginRegistry | None = None, *,
                 strict: bool = False, builtins: bool = False,
                 entrypoints: bool = False) -> None:
        """Initialize the parser.

        Args:
            registry: Registry to use. A new empty registry is created
                when not provided.
            strict: Whether a newly created registry raises errors on
                plugin shadowing or loading failures instead of emitting warnings.
            builtins: Whether to register built-in plugins.
            entrypoints: Whether to load plugins from entry points.

        Raises:
            PluginError: If a plugin fails to register.
        """
        if registry is None:
            registry = PluginRegistry(strict=strict)

        self.registry = registry
        self.pipeline = PluginPipeline(registry)

        if builtins:
            self.add_builtins()

        if entrypoints:
            self.registry.load_plugins()

    @classmethod
    def from_settings(cls, settings: 'ParserSettings | None' = None) -> 'DocumentParser':
        """Build a parser from runtime settings.

        Args:
            settings: Resolved settings; read from the environment when omitted.

        Returns:
            A parser configured according to the settings.
        """
        if settings is None:
            from author_dsl.settings import ParserSettings  # noqa: PLC0415
            settings = ParserSettings()

        return cls(
            strict=settings.strict,
            builtins=settings.builtins,
            entrypoints=settings.entrypoints,
        )

    def add_builtins(self) -> None:
        """Register built-in type handlers, validators and formatters."""
        self.register(handlers.url)
        self.register(handlers.email)
        self.register(handlers.date)
        self.register(handlers.phone)
        self.register(handlers.github)

        self.register(validators.enhanced)
        self.register(validators.security)

        self.register(formatters.json)
        self.register(formatters.yaml)
        self.register(formatters.markdown)
        self.register(formatters.text)

    def register(self, plugin: 'Plugin', *, priority: int = 0) -> None:
        """Register a plugin in the parser registry."""
        self.registry.register(plugin, priority=priority)

    def unregister(self, name: str) -> None:
        """Unregister a plugin from the parser registry."""
        self.registry.unregister(name)

    @staticmethod
    def read(content: 'TextIOBase | str') -> str:
        """Read and check parser input.

        Args:
            content: Text or a file-like object.

        Returns:
            The input text.

        Raises:
            StructuralError: If the input is not text or is empty.
        """
        if hasattr(content, 'read'):
            content = content.read()

        if not isinstance(content, str):
            raise StructuralError('Input must be a string')

        if not content.strip():
            raise StructuralError('Input cannot be empty')

        return content

    def parse(self, content: 'TextIOBase | str') -> Document:
        """Parse an author file into a document.

        Args:
            content: Author file contents as a string or file-like object.

        Returns:
            The parsed document after `after_parse` hooks.

        Raises:
            StructuralError: If the input breaks the grammar.
            PluginError: If any plugin fails during parsing.
        """
        text = self.pipeline.before_parse(self.read(content))

        session = ParseSession(self.pipeline)
        for line_num, line in enumerate(LINE_SEPARATOR_PATTERN.split(text), start=1):
            session.feed(line, line_num)

        return self.pipeline.after_parse(session.finish())

    def validate(self, document: Document, *, check_values: bool = False) -> list[str]:
        """Collect validation warnings for a document.

        Args:
            document: Parsed document.
            check_values: Whether to also check typed values with the
                validators of their type handlers.

        Returns:
            Validator warnings in registry order, followed by typed value
            warnings when requested.

        Raises:
            PluginError: If any validator fails.
        """
        warnings = self.pipeline.validate(document)
        if check_values:
            warnings.extend(self.pipeline.validate_values(document))

        return warnings

    def parse_and_validate(self, content: 'TextIOBase | str', *,
                           check_values: bool = False) -> Report:
        """Parse an author file and validate the result.

        Returns:
            A tuple of the document and its warnings.
        """
        document = self.parse(content)

        return document, self.validate(document, check_values=check_values)

    def format(self, document: Document, format_name: str,
               options: 'RuntimeValue' = None) -> str:
        """Render a document into an output format.

        Raises:
            FormatUnavailableError: If no formatter handles the format.
            PluginError: If the formatter fails.
        """
        return self.pipeline.format(document, format_name, options)

    @property
    def formats(self) -> list[str]:
        """Available output format tags."""
        return self.pipeline.formats
