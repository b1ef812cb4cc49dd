"""
Line protocol codec: value typing, decoding and encoding
"""

from fluxline.protocol.errors import CodecError, CodecErrorKind
from fluxline.protocol.parser import LineParser, decode
from fluxline.protocol.record import Record
from fluxline.protocol.serializer import encode
from fluxline.protocol.values import FieldType, FieldValue, classify_value

__all__ = [
    "CodecError",
    "CodecErrorKind",
    "FieldType",
    "FieldValue",
    "LineParser",
    "Record",
    "classify_value",
    "decode",
    "encode",
]
