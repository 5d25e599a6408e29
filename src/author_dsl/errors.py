"""Core exception hierarchy.

This module defines base error and warning types used across the library
to report structural problems in author files, plugin invocation failures,
and missing output formats in a structured and extensible way.
"""

from enum import StrEnum
from os import linesep
from typing import TYPE_CHECKING, Any, TypedDict

from yaml import dump

from author_dsl.values import MAPPINGS, SCALARS, SEQUENCES

if TYPE_CHECKING:
    from importlib.metadata import EntryPoint

SNIPPET_ELLIPSIS = f' ...{linesep}'
SNIPPET_INDENT = 2
SNIPPET_MARKER = '> '

FORMAT_REPLACER = '<runtime object>'
FORMAT_INDENT = 4


class PluginErrorCode(StrEnum):
    """Invocation points a plugin failure can originate from."""

    INITIALIZATION = 'initialization-failed'
    DESTRUCTION = 'destruction-failed'
    SHADOWING = 'plugin-shadowing'
    LOADING = 'plugin-loading-failed'

    BEFORE_PARSE = 'before-parse-failed'
    AFTER_PARSE = 'after-parse-failed'
    KEY_VALUE = 'key-value-failed'
    BLOCK_START = 'block-start-failed'
    BLOCK_END = 'block-end-failed'

    VALUE_PROCESSING = 'value-processing-failed'
    VALUE_VALIDATION = 'value-validation-failed'
    VALIDATION = 'validation-failed'
    FORMATTING = 'formatting-failed'


class ErrorContext(TypedDict, total=False):
    """Container describing contextual information for error formatting.

    All fields are optional; the formatter adapts output based on
    provided values.
    """

    #: Raw source line associated with the error.
    line: str | None

    #: Name of the plugin that failed.
    plugin: str | None
    #: Invocation point of the failure.
    code: str | None

    #: Underlying exception that triggered formatting.
    error: Exception | None

    #: Data element associated with the error.
    element: Any


class ErrorFormatter:
    """Utility class for formatting DSL-related errors.

    This formatter is responsible for producing human-readable
    error messages with optional plugin location and YAML-based
    contextual snippets.
    """

    @classmethod
    def format(cls, message: str, context: ErrorContext | None = None) -> str:
        """Format an error message using contextual information.

        Args:
            message: Base human-readable error message.
            context: Optional error context with location and data.

        Returns:
            A fully formatted error message suitable for display.
        """
        if not context:
            return message

        location = cls.get_location_string(context, indent=FORMAT_INDENT)
        snippet = cls.get_snippet_string(context, indent=FORMAT_INDENT * 2)
        if not location and not snippet:
            return message

        return f'{message}{linesep}{location}{snippet}'.rstrip()

    @classmethod
    def get_location_string(cls, context: ErrorContext, *,
                            indent: str | int | None = None) -> str:
        """Format the plugin location of a failure.

        Args:
            context: Error context containing the failing plugin.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted location string, or an empty string when
            no plugin is known.
        """
        indent = cls._ensure_indent(indent)

        message = ''
        if plugin := context.get('plugin'):
            message += f'{indent}by plugin {plugin!r}'
            if code := context.get('code'):
                message += f' ({code})'
            message += linesep

        return message

    @classmethod
    def get_snippet_string(cls, context: ErrorContext, *,
                           indent: str | int | None = None) -> str:
        """Generate a formatted snippet illustrating the error context.

        Args:
            context: Error context containing a source line or element.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted snippet string, or an empty string
            if no snippet data is available.
        """
        indent = cls._ensure_indent(indent)

        if line := context.get('line'):
            return f'{indent}{SNIPPET_MARKER}{line.strip()}{linesep}'

        if (element := context.get('element')) is not None:
            return f'{indent}{SNIPPET_ELLIPSIS}{cls._make_yaml(element, indent)}{linesep}'

        return ''

    @classmethod
    def _filter_unsafe(cls, value: Any) -> Any:  # noqa: ANN401
        """Recursively sanitize values for safe YAML serialization.

        Non-scalar and non-container objects are replaced with
        a placeholder to prevent leaking opaque data.

        Args:
            value: Arbitrary value to sanitize.

        Returns:
            A YAML-safe representation of the value.
        """
        if value is None or isinstance(value, SCALARS):
            return value

        if isinstance(value, MAPPINGS):
            return {
                str(key): cls._filter_unsafe(item)
                for key, item in value.items()
            }

        if isinstance(value, SEQUENCES):
            return [
                cls._filter_unsafe(item)
                for item in value
            ]

        return FORMAT_REPLACER

    @classmethod
    def _make_yaml(cls, value: Any, indent: str = '') -> str:  # noqa: ANN401
        """Serialize a value to an indented YAML string.

        Args:
            value: Arbitrary value to serialize.
            indent: Optional indentation prefix.

        Returns:
            A YAML-formatted string representation of the value.
        """
        data = dump(
            cls._filter_unsafe(value),
            indent=SNIPPET_INDENT,
            sort_keys=False,
            allow_unicode=True,
        )

        return cls._make_indent(data, indent)

    @staticmethod
    def _make_indent(value: str, indent: str) -> str:
        """Apply indentation to a multi-line string.

        Empty or whitespace-only lines are omitted.
        """
        if not indent:
            return value

        return linesep.join(
            f'{indent}{line}'
            for line in value.splitlines()
            if line.strip()
        )

    @staticmethod
    def _ensure_indent(indent: str | int | None = None) -> str:
        """Normalize indentation input to a string prefix."""
        if isinstance(indent, int) and indent > 0:
            return ' ' * indent

        if isinstance(indent, str):
            return indent

        return ''


class PluginWarning(UserWarning):
    """Warning emitted for non-fatal plugin-related issues.

    This warning is used when a plugin shadows another one, fails to be
    destroyed, or cannot be loaded from an entry point, but the issue does
    not prevent further execution (for example, in non-strict mode).
    """


class DSLError(Exception, ErrorFormatter):
    """Base exception for all author-dsl errors.

    All custom exceptions raised by the library inherit from
    this class to allow unified error handling by callers.
    """

    def __init__(self, message: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            message: Human-readable error description.
            context: Error context containing optional location values.
        """
        self.message = message
        self.context = context

        super().__init__(message)

    def __str__(self) -> str:
        """String represenatation."""
        return self.format(self.message, self.context)


class StructuralError(DSLError):
    """Error raised when an author file violates the DSL grammar.

    Structural errors are always fatal: a missing colon, an empty key or
    type, a malformed type annotation, unmatched or mismatched blocks and
    unclosed blocks or multiline values abort the parse immediately.
    """

    def __init__(self, message: str, line_num: int | None = None,
                 line: str | None = None) -> None:
        """Initialize a structural error.

        Args:
            message: Human-readable error description.
            line_num: One-based number of the offending line, if known.
            line: Raw text of the offending line, if known.
        """
        self.line_num = line_num
        self.line = line
        self.reason = message

        if line_num is not None:
            message = f'Line {line_num}: {message}'

        context = None
        if line:
            context = ErrorContext(line=line)

        super().__init__(message, context=context)


class PluginError(DSLError):
    """Error raised for fatal plugin-related failures.

    Wraps any exception raised inside a plugin invocation together with
    the name of the plugin and the invocation point, so callers can tell
    which plugin failed during which step without inspecting tracebacks.
    """

    def __init__(self, plugin: str, code: PluginErrorCode, message: str, *,
                 entrypoint: 'EntryPoint | None' = None,
                 context: ErrorContext | None = None) -> None:
        """Initialize a plugin error.

        Args:
            plugin: Name of the originating plugin.
            code: Invocation point that failed.
            message: Message of the underlying failure.
            entrypoint: Optional entry point the plugin was loaded from.
            context: Optional extra error context.
        """
        self.plugin = plugin
        self.code = code
        self.reason = message
        self.entrypoint = entrypoint

        super().__init__(
            f'Plugin {plugin} error: {message}',
            context=ErrorContext({
                **(context or {}),
                'plugin': plugin,
                'code': str(code),
            }),
        )

    @classmethod
    def wrap(cls, plugin: str, code: PluginErrorCode, error: Exception, *,
             element: Any = None) -> 'PluginError':  # noqa: ANN401
        """Build a plugin error from an exception raised by a plugin.

        Args:
            plugin: Name of the originating plugin.
            code: Invocation point that failed.
            error: Exception raised by the plugin.
            element: Optional data element passed to the plugin.

        Returns:
            A plugin error carrying the original message.
        """
        message = str(error) or type(error).__name__

        context = ErrorContext(error=error)
        if element is not None:
            context['element'] = element

        return cls(plugin, code, message, context=context)


class FormatUnavailableError(DSLError):
    """Error raised when no formatter handles a requested output format."""

    def __init__(self, fmt: str, available: 'list[str] | None' = None) -> None:
        """Initialize the error.

        Args:
            fmt: Requested format tag.
            available: Format tags that are registered.
        """
        self.format_name = fmt
        self.available = list(available or ())

        message = f'No formatter plugin found for format: {fmt}'
        if self.available:
            message += f' (available: {", ".join(self.available)})'

        super().__init__(message)
