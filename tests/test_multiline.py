"""Tests for multiline value accumulation."""

import pytest

from author_dsl.core.multiline import MultilineAccumulator
from author_dsl.errors import StructuralError


def test_accumulates_until_marker() -> None:
    """Verify that lines are joined with newlines and trimmed."""
    multiline = MultilineAccumulator()

    assert multiline.start('Bio', '"""', 1) is None
    assert multiline.active
    assert multiline.feed('  line1') is None
    assert multiline.feed('line2  ') is None
    assert multiline.feed('"""') == 'line1\nline2'

    assert not multiline.active
    assert multiline.key == 'Bio'


def test_first_fragment_and_closing_text() -> None:
    """Verify that text after the opening and before the closing marker is kept."""
    multiline = MultilineAccumulator()

    multiline.start('Bio', '"""first', 1)
    assert multiline.feed('  last"""  ') == 'first\nlast'


def test_same_line_close() -> None:
    """Verify that a value may open and close on the same line."""
    multiline = MultilineAccumulator()

    assert multiline.start('Bio', '"""short"""', 1) == 'short'
    assert not multiline.active


def test_inner_lines_are_verbatim() -> None:
    """Verify that inner lines are not classified or trimmed."""
    multiline = MultilineAccumulator()

    multiline.start('Code', '"""', 1)
    multiline.feed('Begin Block')
    multiline.feed('    Key: Value')

    assert multiline.feed('"""') == 'Begin Block\n    Key: Value'


def test_ensure_closed() -> None:
    """Verify that a pending value is reported by its key."""
    multiline = MultilineAccumulator()
    multiline.ensure_closed()

    multiline.start('Bio', '"""', 1)
    with pytest.raises(StructuralError, match=r'^Unclosed multiline value for key: Bio$'):
        multiline.ensure_closed()
