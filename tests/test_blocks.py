"""Tests for block stack and key-collision handling."""

import pytest

from author_dsl.core.blocks import BlockStack, Frame
from author_dsl.errors import StructuralError


def test_collision_promotes_and_appends() -> None:
    """Verify that repeated keys fold into a list in order."""
    frame = Frame()

    frame.assign('A', '1')
    assert frame.data == {'A': '1'}

    frame.assign('A', '2')
    frame.assign('A', '3')
    assert frame.data == {'A': ['1', '2', '3']}


def test_collision_with_list_value() -> None:
    """Verify that a list value is promoted, never extended."""
    frame = Frame()

    frame.assign('Skills', ['a', 'b'])
    frame.assign('Skills', 'c')

    assert frame.data == {'Skills': [['a', 'b'], 'c']}


def test_blocks_are_lists() -> None:
    """Verify that a single block is stored in a one-element list."""
    stack = BlockStack()

    block = stack.open('Project')
    block['Name'] = 'x'
    stack.close('Project')

    assert stack.root == {'Project': [{'Name': 'x'}]}
    assert stack.depth == 1


def test_repeated_blocks_append() -> None:
    """Verify that repeated blocks keep appearance order."""
    stack = BlockStack()

    for name in ('first', 'second'):
        stack.open('P')['Name'] = name
        stack.close('P')

    assert stack.root == {'P': [{'Name': 'first'}, {'Name': 'second'}]}


def test_scalar_after_block_appends() -> None:
    """Verify that a block list counts as a promoted collision list."""
    stack = BlockStack()

    stack.open('P')
    stack.close('P')
    stack.current.assign('P', 'scalar')

    assert stack.root == {'P': [{}, 'scalar']}


def test_block_after_scalar_promotes() -> None:
    """Verify that a block under an existing scalar key promotes it."""
    stack = BlockStack()

    stack.current.assign('P', 'scalar')
    stack.open('P')
    stack.close('P')

    assert stack.root == {'P': ['scalar', {}]}


def test_nested_names() -> None:
    """Verify the name stack of nested blocks."""
    stack = BlockStack()

    stack.open('Outer')
    stack.open('Inner')

    assert stack.names == ['Outer', 'Inner']
    assert stack.depth == 3
    assert stack.current.name == 'Inner'


@pytest.mark.parametrize(('opened', 'closing', 'message'), (
    pytest.param([], 'X', r'^Line 3: No open blocks to close', id='no open blocks'),
    pytest.param(['A'], 'B', r"^Line 3: Mismatched End: expected 'A', got 'B'", id='mismatch'),
    pytest.param(['A', 'B'], 'A', r"^Line 3: Mismatched End: expected 'B', got 'A'", id='inner first'),
    pytest.param(['A'], 'a', r"^Line 3: Mismatched End: expected 'A', got 'a'", id='case sensitive'),
    pytest.param(['A'], '', r'^Line 3: Empty block name not allowed', id='empty name'),
))
def test_close_errors(opened: list[str], closing: str, message: str) -> None:
    """Verify errors on unmatched and mismatched block ends."""
    stack = BlockStack()
    for name in opened:
        stack.open(name)

    with pytest.raises(StructuralError, match=message):
        stack.close(closing, 3, f'End {closing}')


def test_open_empty_name() -> None:
    """Verify that blocks must be named."""
    with pytest.raises(StructuralError, match=r'Empty block name not allowed'):
        BlockStack().open('')


def test_ensure_closed() -> None:
    """Verify that unclosed blocks are listed in nesting order."""
    stack = BlockStack()
    stack.ensure_closed()

    stack.open('A')
    stack.open('B')

    with pytest.raises(StructuralError, match=r'^Unclosed block\(s\): A, B$'):
        stack.ensure_closed()
