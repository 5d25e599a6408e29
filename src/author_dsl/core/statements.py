"""Key/value statement splitting.

A statement has the form `Key: Value` or `Key@Type: Value`. The key is
everything before the first colon; a key may carry exactly one type
annotation, and both the key and the type must be non-empty.
"""

from pydantic import Field

from author_dsl.errors import StructuralError
from author_dsl.models import SchemaModel
from author_dsl.names import KEY_SEPARATOR, TYPE_SEPARATOR


class Statement(SchemaModel):
    """A classified key/value line."""

    key: str = Field(
        min_length=1,
        title='Key',
        description='Trimmed key, without its type annotation.',
    )

    type: str | None = Field(
        default=None,
        title='Type tag',
        description='Trimmed type annotation, if any.',
    )

    value: str = Field(
        default='',
        title='Raw value',
        description='Trimmed text after the first colon.',
    )


def split_key(key: str, line_num: int | None = None,
              line: str | None = None) -> tuple[str, str | None]:
    """Split a statement key into the key and its type annotation.

    Any split yielding other than exactly two non-empty parts is rejected.

    Args:
        key: Trimmed statement key.
        line_num: Source line number for diagnostics.
        line: Source line for diagnostics.

    Returns:
        The key and the type tag, or `None` when the key is not annotated.

    Raises:
        StructuralError: If the annotation is malformed.
    """
    if TYPE_SEPARATOR not in key:
        return key, None

    parts = [part.strip() for part in key.split(TYPE_SEPARATOR)]
    if len(parts) != 2:  # noqa: PLR2004
        raise StructuralError('Invalid type syntax - use Key@Type format', line_num, line)

    name, type_name = parts
    if not name:
        raise StructuralError('Empty key not allowed', line_num, line)

    if not type_name:
        raise StructuralError('Empty type not allowed', line_num, line)

    return name, type_name


def parse_statement(line: str, line_num: int | None = None) -> Statement:
    """Split a trimmed line into a statement.

    Args:
        line: Trimmed source line.
        line_num: Source line number for diagnostics.

    Returns:
        The classified statement.

    Raises:
        StructuralError: If the colon is missing, or if the key or the
            type annotation is empty or malformed.
    """
    key, separator, value = line.partition(KEY_SEPARATOR)
    if not separator:
        raise StructuralError('Invalid line format - missing colon', line_num, line)

    key = key.strip()
    if not key:
        raise StructuralError('Empty key not allowed', line_num, line)

    key, type_name = split_key(key, line_num, line)

    return Statement(key=key, type=type_name, value=value.strip())
