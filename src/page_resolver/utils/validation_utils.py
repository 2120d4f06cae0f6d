"""Column decoding helpers for rows returned by the data source.

Drivers differ in what they hand back for the same column type: MySQL
``TINYINT(1)`` may arrive as int, ``BIT(1)`` as bytes, ``VARCHAR`` with a
binary collation as bytes. These helpers turn such values into plain Python
types and raise TypeError / ValueError for anything that does not fit.
"""

from typing import Any, Sequence


def decode_int(value: Any) -> int:
    """Decode an integer column.

    Args:
        value: Raw column value.

    Returns:
        The integer value.

    Raises:
        TypeError: If value is NULL or a bool.
        ValueError: If value is fractional or not numeric text.
    """
    if value is None or isinstance(value, bool):
        raise TypeError(f"expected integer, got {value!r}")
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"expected integer, got {value!r}")
    return int(value)


def decode_flag(value: Any) -> bool:
    """Decode a boolean/tinyint column. NULL counts as false."""
    if value is None:
        return False
    if isinstance(value, (bytes, bytearray)):
        # BIT(1) columns come back as a single byte.
        return any(value)
    if isinstance(value, str):
        return value.strip() not in ("", "0")
    return bool(value)


def decode_text(value: Any) -> str:
    """Decode a NOT NULL text column.

    Raises:
        TypeError: If value is NULL.
    """
    if value is None:
        raise TypeError("expected text, got NULL")
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8")
    return str(value)


def decode_optional_text(value: Any) -> str:
    """Decode a nullable text column; NULL becomes an empty string."""
    if value is None:
        return ""
    return decode_text(value)


def check_row_width(row: Sequence[Any], width: int) -> None:
    """Raise ValueError unless the row has exactly ``width`` columns."""
    if len(row) != width:
        raise ValueError(f"expected {width} columns, got {len(row)}")
