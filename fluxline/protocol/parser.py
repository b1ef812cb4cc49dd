"""
Line protocol parser - hand-written scanner

Parses one line of the form:

    <measurement>[,<tag_key>=<tag_value>...] <field_key>=<field_value>[,...] [timestamp]

- The measurement and tag values can be double-quoted to hold spaces and commas
- Inside quotes, \\" is an escaped quote; any other character is literal
- Field values are typed by classify_value() and keep their literal text
- The timestamp is an optional signed 64-bit integer in nanoseconds

Examples:
    cpu,host=server1,region=us-west value=42i,temp=23.4 1465839830100400200
    "my measurement",foo=bar value="string field"
    weather,location=us-midwest temperature=82 1465839830100400200
"""

from typing import List, Tuple

from fluxline.protocol.errors import CodecError, CodecErrorKind
from fluxline.protocol.record import Record
from fluxline.protocol.values import classify_value, parse_int64


class LineParser:
    """
    Scanner-based parser for a single line protocol line

    The parser holds no state beyond the line it was created for, so separate
    instances can be used from separate threads freely.
    """

    def __init__(self, line: str):
        self.line = line.strip()

    def parse(self) -> Record:
        """Parse the line into a Record"""
        parts = self._split_unquoted(self.line, " ", maxsplit=1)
        if len(parts) != 2:
            raise CodecError(
                CodecErrorKind.INVALID_FORMAT, "invalid line protocol format", self.line
            )
        head, rest = parts

        measurement, tags_text = self._parse_measurement(head)
        if not measurement:
            raise CodecError(CodecErrorKind.EMPTY_MEASUREMENT, "empty measurement", head)

        record = Record(measurement=measurement)
        if tags_text:
            record.tags = self._parse_tags(tags_text)

        fields_and_time = self._split_unquoted(rest, " ", maxsplit=1)
        if not fields_and_time[0]:
            raise CodecError(CodecErrorKind.MISSING_FIELDS, "missing fields", rest)
        record.fields = self._parse_fields(fields_and_time[0])

        if len(fields_and_time) > 1:
            record.timestamp = self._parse_timestamp(fields_and_time[1])

        return record

    def _split_unquoted(self, text: str, separator: str, maxsplit: int = -1) -> List[str]:
        """
        Split text on a separator that is not inside double quotes

        The whole text is always scanned, even after maxsplit pieces were cut,
        so an unterminated quote anywhere is reported.

        Raises:
            CodecError: If a quote is never closed
        """
        pieces = []
        start = 0
        in_quotes = False
        i = 0

        while i < len(text):
            char = text[i]
            if in_quotes and char == "\\" and i + 1 < len(text) and text[i + 1] == '"':
                i += 2
                continue
            if char == '"':
                in_quotes = not in_quotes
            elif (
                char == separator
                and not in_quotes
                and (maxsplit < 0 or len(pieces) < maxsplit)
            ):
                pieces.append(text[start:i])
                start = i + 1
            i += 1

        if in_quotes:
            raise CodecError(
                CodecErrorKind.UNTERMINATED_QUOTE, f"unterminated quote in: {text}", text
            )

        pieces.append(text[start:])
        return pieces

    def _parse_measurement(self, head: str) -> Tuple[str, str]:
        """
        Split measurement-and-tags into the measurement and the raw tag text

        Returns:
            Tuple of (measurement, tags_text)
        """
        if not head.startswith('"'):
            measurement, _, tags_text = head.partition(",")
            return measurement, tags_text

        # Quoted measurement: find the closing quote, skipping \"
        i = 1
        while i < len(head):
            if head[i] == "\\" and i + 1 < len(head) and head[i + 1] == '"':
                i += 2
                continue
            if head[i] == '"':
                break
            i += 1

        if i >= len(head):
            raise CodecError(
                CodecErrorKind.UNTERMINATED_QUOTE, "unterminated quoted measurement", head
            )

        measurement = head[1:i].replace('\\"', '"')
        after = head[i + 1 :]
        if after and not after.startswith(","):
            raise CodecError(
                CodecErrorKind.INVALID_FORMAT,
                f"invalid character after quoted measurement: {after[0]}",
                head,
            )
        return measurement, after[1:]

    def _parse_tags(self, text: str) -> dict:
        """
        Parse comma-separated tag pairs

        Example: host=server1,region="us west"
        """
        tags = {}
        for pair in self._split_unquoted(text, ","):
            key, sep, value = pair.partition("=")
            if not sep:
                raise CodecError(
                    CodecErrorKind.INVALID_TAG_FORMAT, f"invalid tag format: {pair}", pair
                )
            key = key.strip()
            value = value.strip()

            # Quote stripping is plain: escapes inside are left as written
            if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
                value = value[1:-1]

            if not key:
                raise CodecError(CodecErrorKind.EMPTY_TAG_KEY, "empty tag key", pair)
            if not value:
                raise CodecError(CodecErrorKind.EMPTY_TAG_VALUE, "empty tag value", pair)

            tags[key] = value
        return tags

    def _parse_fields(self, text: str) -> dict:
        """
        Parse comma-separated field pairs

        Example: value=42i,temp=23.4,ok=true,msg="hello world"
        """
        fields = {}
        for pair in self._split_unquoted(text, ","):
            key, sep, value = pair.partition("=")
            if not sep:
                raise CodecError(
                    CodecErrorKind.INVALID_FIELD_FORMAT, f"invalid field format: {pair}", pair
                )
            key = key.strip()
            if not key:
                raise CodecError(CodecErrorKind.EMPTY_FIELD_KEY, "empty field key", pair)

            fields[key] = classify_value(value.strip())
        return fields

    def _parse_timestamp(self, text: str) -> int:
        """Parse the trailing nanosecond timestamp"""
        timestamp = parse_int64(text)
        if timestamp is None:
            raise CodecError(
                CodecErrorKind.INVALID_TIMESTAMP, f"invalid timestamp: {text}", text
            )
        return timestamp


def decode(line: str) -> Record:
    """
    Convenience function to parse one line protocol line

    Args:
        line: Line protocol text

    Returns:
        Parsed Record

    Raises:
        CodecError: If the line is malformed

    Examples:
        >>> decode("cpu value=42").fields["value"].literal
        '42'
        >>> decode('cpu,host="server 1" value=42').tags
        {'host': 'server 1'}
    """
    return LineParser(line).parse()
