"""Field value typing for the line protocol.

A field literal is classified as STRING, INTEGER, BOOLEAN or FLOAT, in that
order. The literal text is kept as written (booleans are lower-cased), so
encoding never has to re-derive formatting.
"""

import math
import re
from dataclasses import dataclass
from enum import Enum

from fluxline.protocol.errors import CodecError, CodecErrorKind

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
# Hex floats need a binary exponent, as in Go float literals
_HEX_FLOAT_RE = re.compile(
    r"[+-]?0[xX]([0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)[pP][+-]?[0-9]+"
)
_INFINITY_SPELLINGS = {"inf", "+inf", "-inf", "infinity", "+infinity", "-infinity"}


class FieldType(Enum):
    """Types a field value can carry."""

    INTEGER = "INTEGER"
    FLOAT = "FLOAT"
    BOOLEAN = "BOOLEAN"
    STRING = "STRING"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class FieldValue:
    """A validated field value and the literal text it was written as"""

    type: FieldType
    literal: str

    def __str__(self) -> str:
        return self.literal

    def to_float(self) -> float:
        """
        Convert to the float representation points are stored with

        Integers and floats keep their value, booleans become 1.0/0.0 and
        strings become 1.0 (the field is present).
        """
        if self.type == FieldType.INTEGER:
            return float(int(self.literal[:-1]))
        if self.type == FieldType.FLOAT:
            return parse_float64(self.literal)
        if self.type == FieldType.BOOLEAN:
            return 1.0 if self.literal == "true" else 0.0
        return 1.0


def parse_int64(text: str) -> int | None:
    """Parse a base-10 signed 64-bit integer, or return None."""
    if not _INTEGER_RE.fullmatch(text):
        return None
    value = int(text)
    if value < INT64_MIN or value > INT64_MAX:
        return None
    return value


def parse_float64(text: str) -> float | None:
    """
    Parse a 64-bit float, or return None

    Python's float() is more lenient than a wire parser should be: it accepts
    surrounding whitespace and digit separators, and silently overflows to inf.
    Those cases are rejected here. Hexadecimal literals such as 0x1p-2 are
    accepted.
    """
    if not text or not text.isascii() or text != text.strip() or "_" in text:
        return None
    if _HEX_FLOAT_RE.fullmatch(text):
        try:
            return float.fromhex(text)
        except OverflowError:
            return None
    try:
        value = float(text)
    except ValueError:
        return None
    if math.isinf(value) and text.lower() not in _INFINITY_SPELLINGS:
        return None
    return value


def classify_value(text: str) -> FieldValue:
    """
    Classify a field literal

    Args:
        text: Field value text, already stripped

    Returns:
        FieldValue carrying the inferred type and the literal

    Raises:
        CodecError: If the literal is not a valid value of its inferred type

    Examples:
        >>> classify_value('"42"').type
        <FieldType.STRING: 'STRING'>
        >>> classify_value("42i").literal
        '42i'
        >>> classify_value("42").type
        <FieldType.FLOAT: 'FLOAT'>
    """
    if text.startswith('"') or text.endswith('"'):
        if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
            return FieldValue(FieldType.STRING, text)
        raise CodecError(
            CodecErrorKind.INVALID_STRING_FIELD, f"invalid string field value: {text}", text
        )

    if text.endswith("i"):
        if parse_int64(text[:-1]) is None:
            raise CodecError(
                CodecErrorKind.INVALID_INTEGER_FIELD,
                f"invalid integer field value: {text}",
                text,
            )
        return FieldValue(FieldType.INTEGER, text)

    lowered = text.lower()
    if lowered in ("true", "false"):
        return FieldValue(FieldType.BOOLEAN, lowered)

    if parse_float64(text) is None:
        raise CodecError(
            CodecErrorKind.INVALID_NUMERIC_FIELD, f"invalid numeric field value: {text}", text
        )
    return FieldValue(FieldType.FLOAT, text)
