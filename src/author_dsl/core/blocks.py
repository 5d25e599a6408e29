"""Nested document scope tracking.

This module defines the block stack used by the parser: a stack of open
frames (the root document and every open block) and a parallel stack of
open block names enforcing matched `Begin`/`End` pairs.

Every frame applies the key-collision rule: the first occurrence of a key
stores a single value, the second promotes it to a two-element list, and
further occurrences append. Promotion is tracked explicitly, so a value that
is a list on its own (a comma list, a block list) is never mistaken for an
already promoted collision list.
"""

from author_dsl.errors import StructuralError
from author_dsl.values import Document, Value  # noqa: TC001


class Frame:
    """A single open scope: a mapping and its promoted keys."""

    def __init__(self, name: str | None = None) -> None:
        """Initialize an empty frame.

        Args:
            name: Block name, or `None` for the document root.
        """
        self.name = name
        self.data: Document = {}
        self.promoted: set[str] = set()

    def assign(self, key: str, value: 'Value') -> None:
        """Store a value under the key-collision rule.

        Args:
            key: Key to store.
            value: Value to store.
        """
        if key not in self.data:
            self.data[key] = value
        elif key in self.promoted:
            self.data[key].append(value)
        else:
            self.data[key] = [self.data[key], value]
            self.promoted.add(key)

    def attach(self, name: str, block: Document) -> None:
        """Store a nested block.

        Blocks are always kept in a list, which counts as a promoted
        collision list, so repeated blocks append in appearance order.

        Args:
            name: Block name.
            block: Mapping of the new block.
        """
        if name not in self.data:
            self.data[name] = [block]
            self.promoted.add(name)
            return

        self.assign(name, block)


class BlockStack:
    """Stack of open frames with matched block names.

    The name stack is always one shorter than the frame stack, whose
    bottom is the document root.
    """

    def __init__(self) -> None:
        """Initialize the stack with an empty root frame."""
        self.frames: list[Frame] = [Frame()]

    @property
    def depth(self) -> int:
        """Number of open frames, including the root."""
        return len(self.frames)

    @property
    def names(self) -> list[str]:
        """Names of open blocks in nesting order."""
        return [frame.name for frame in self.frames[1:] if frame.name is not None]

    @property
    def current(self) -> Frame:
        """Innermost open frame."""
        return self.frames[-1]

    @property
    def root(self) -> Document:
        """Mapping of the document root."""
        return self.frames[0].data

    def open(self, name: str, line_num: int | None = None,
             line: str | None = None) -> Document:
        """Open a nested block in the current frame.

        Args:
            name: Block name.
            line_num: Source line number for diagnostics.
            line: Source line for diagnostics.

        Returns:
            Mapping of the opened block.

        Raises:
            StructuralError: If the block name is empty.
        """
        if not name:
            raise StructuralError('Empty block name not allowed', line_num, line)

        frame = Frame(name)
        self.current.attach(name, frame.data)
        self.frames.append(frame)

        return frame.data

    def close(self, name: str, line_num: int | None = None,
              line: str | None = None) -> Document:
        """Close the innermost block.

        Args:
            name: Block name given by the `End` line.
            line_num: Source line number for diagnostics.
            line: Source line for diagnostics.

        Returns:
            Mapping of the closed block.

        Raises:
            StructuralError: If the name is empty, if no block is open,
                or if the innermost block has another name.
        """
        if not name:
            raise StructuralError('Empty block name not allowed', line_num, line)

        if self.depth == 1:
            raise StructuralError('No open blocks to close', line_num, line)

        if (expected := self.current.name) != name:
            raise StructuralError(f'Mismatched End: expected {expected!r}, got {name!r}', line_num, line)

        return self.frames.pop().data

    def ensure_closed(self) -> None:
        """Check that every opened block was closed.

        Raises:
            StructuralError: Listing open block names in nesting order.
        """
        if self.depth != 1:
            raise StructuralError(f'Unclosed block(s): {", ".join(self.names)}')
