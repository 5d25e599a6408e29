"""Multiline value accumulation.

A multiline value starts with a statement whose value begins with `\"\"\"`
and ends at the first following line whose trimmed form ends with the same
marker. Lines in between are kept verbatim, joined with newlines, and the
joined result is trimmed.
"""

from author_dsl.errors import StructuralError
from author_dsl.names import MULTILINE_MARKER


class MultilineAccumulator:
    """Buffer of a pending multiline value."""

    def __init__(self) -> None:
        """Initialize an inactive accumulator."""
        self.active = False
        self.key: str | None = None
        self.type: str | None = None
        self.line_num: int | None = None
        self.buffer: list[str] = []

    @staticmethod
    def opens(value: str) -> bool:
        """Check whether a statement value opens a multiline value."""
        return value.startswith(MULTILINE_MARKER)

    def start(self, key: str, value: str, line_num: int | None = None,
              type_name: str | None = None) -> str | None:
        """Start accumulating a value.

        The text after the opening marker becomes the first fragment.
        If that text also ends with the closing marker, the value is
        complete on the same line.

        Args:
            key: Key the value is assigned to.
            value: Statement value starting with the opening marker.
            line_num: Line number of the opening statement.
            type_name: Type tag of the key, kept for hook contexts only.

        Returns:
            The complete value when closed on the same line, otherwise `None`.
        """
        self.active = True
        self.key = key
        self.type = type_name
        self.line_num = line_num
        self.buffer = []

        rest = value[len(MULTILINE_MARKER):]
        if rest.strip().endswith(MULTILINE_MARKER):
            return self.feed(rest)

        if rest:
            self.buffer.append(rest)

        return None

    def feed(self, line: str) -> str | None:
        """Consume a line of a pending value.

        Args:
            line: Raw source line.

        Returns:
            The complete value when the line closes it, otherwise `None`.
        """
        trimmed = line.strip()
        if not trimmed.endswith(MULTILINE_MARKER):
            self.buffer.append(line)
            return None

        self.buffer.append(trimmed[:-len(MULTILINE_MARKER)])
        value = '\n'.join(self.buffer).strip()

        self.active = False
        self.buffer = []

        return value

    def ensure_closed(self) -> None:
        """Check that no multiline value is pending.

        Raises:
            StructuralError: Naming the key of the pending value.
        """
        if self.active:
            raise StructuralError(f'Unclosed multiline value for key: {self.key}')
