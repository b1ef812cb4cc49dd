"""
Line protocol serializer

Writes a Record back as a canonical line. Field literals are written verbatim;
only the measurement and tag values are re-quoted when they need it.
"""

from typing import Dict, List

from fluxline.protocol.record import Record

# A quoted measurement is unescaped on decode, a quoted tag value is not, so
# a bare tag value with balanced quotes is left bare
_MEASUREMENT_NEEDS_QUOTES = (" ", ",", '"')
_TAG_VALUE_NEEDS_QUOTES = (" ", ",")


def _quote(text: str) -> str:
    """Wrap text in double quotes, escaping embedded quotes"""
    return '"' + text.replace('"', '\\"') + '"'


def _maybe_quote(text: str, triggers) -> str:
    if any(char in text for char in triggers):
        return _quote(text)
    return text


def _ordered_keys(record: Record, mapping: Dict) -> List[str]:
    # Records built without decoding have no write order to preserve
    if record.ordered:
        return list(mapping)
    return sorted(mapping)


def encode(record: Record) -> str:
    """
    Serialize a Record into a line protocol line

    Args:
        record: Record to serialize

    Returns:
        Line protocol text without a trailing newline

    Examples:
        >>> encode(decode("cpu,host=server1 value=42i 1465839830100400200"))
        'cpu,host=server1 value=42i 1465839830100400200'
    """
    parts = [_maybe_quote(record.measurement, _MEASUREMENT_NEEDS_QUOTES)]

    for key in _ordered_keys(record, record.tags):
        parts.append(f",{key}={_maybe_quote(record.tags[key], _TAG_VALUE_NEEDS_QUOTES)}")

    fields = ",".join(
        f"{key}={record.fields[key].literal}" for key in _ordered_keys(record, record.fields)
    )
    parts.append(f" {fields}")

    # A zero timestamp cannot be told apart from an unset one
    if record.timestamp > 0:
        parts.append(f" {record.timestamp}")

    return "".join(parts)
