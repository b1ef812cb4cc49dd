"""
Errors raised by the line protocol codec
"""

from enum import Enum


class CodecErrorKind(Enum):
    """Classification of a line that could not be decoded"""

    EMPTY_MEASUREMENT = "empty measurement"
    UNTERMINATED_QUOTE = "unterminated quote"
    INVALID_TAG_FORMAT = "invalid tag format"
    EMPTY_TAG_KEY = "empty tag key"
    EMPTY_TAG_VALUE = "empty tag value"
    INVALID_FIELD_FORMAT = "invalid field format"
    EMPTY_FIELD_KEY = "empty field key"
    INVALID_STRING_FIELD = "invalid string field"
    INVALID_INTEGER_FIELD = "invalid integer field"
    INVALID_NUMERIC_FIELD = "invalid numeric field"
    MISSING_FIELDS = "missing fields"
    INVALID_TIMESTAMP = "invalid timestamp"
    INVALID_FORMAT = "invalid format"


class CodecError(ValueError):
    """Raised when a line protocol line cannot be decoded"""

    def __init__(self, kind: CodecErrorKind, message: str, literal: str = ""):
        super().__init__(message)
        self.kind = kind
        self.literal = literal
