"""
Tests for field value typing
"""

import pytest

from fluxline.protocol.errors import CodecError, CodecErrorKind
from fluxline.protocol.values import FieldType, FieldValue, classify_value, parse_int64


class TestStringValues:
    """Test quoted string literals"""

    def test_quoted_digits_are_string(self):
        """Test that "42" is a string even though it is all digits"""
        value = classify_value('"42"')

        assert value.type == FieldType.STRING
        assert value.literal == '"42"'

    def test_string_with_spaces(self):
        """Test string literal keeps its content and quotes"""
        value = classify_value('"hello world"')
        assert value.literal == '"hello world"'

    def test_empty_string(self):
        """Test "" is a valid empty string"""
        assert classify_value('""').type == FieldType.STRING

    @pytest.mark.parametrize("literal", ['"', '"abc', 'abc"'])
    def test_malformed_quoting(self, literal):
        """Test a lone or unbalanced quote is an invalid string"""
        with pytest.raises(CodecError) as exc_info:
            classify_value(literal)

        assert exc_info.value.kind == CodecErrorKind.INVALID_STRING_FIELD
        assert exc_info.value.literal == literal


class TestIntegerValues:
    """Test integer literals (i suffix)"""

    def test_integer_keeps_suffix(self):
        """Test 42i stays 42i rather than being decoded"""
        value = classify_value("42i")

        assert value.type == FieldType.INTEGER
        assert value.literal == "42i"

    def test_negative_integer(self):
        """Test negative integers"""
        assert classify_value("-42i").type == FieldType.INTEGER

    def test_int64_bounds(self):
        """Test the signed 64-bit range is enforced"""
        assert classify_value("9223372036854775807i").type == FieldType.INTEGER
        assert classify_value("-9223372036854775808i").type == FieldType.INTEGER

        with pytest.raises(CodecError) as exc_info:
            classify_value("9223372036854775808i")
        assert exc_info.value.kind == CodecErrorKind.INVALID_INTEGER_FIELD

    @pytest.mark.parametrize("literal", ["4.2i", "i", "hi", "-i", "1_0i"])
    def test_invalid_integer(self, literal):
        """Test anything ending in i must be an integer"""
        with pytest.raises(CodecError) as exc_info:
            classify_value(literal)

        assert exc_info.value.kind == CodecErrorKind.INVALID_INTEGER_FIELD


class TestBooleanValues:
    """Test boolean literals"""

    @pytest.mark.parametrize(
        "literal,expected",
        [("true", "true"), ("TRUE", "true"), ("False", "false"), ("fAlSe", "false")],
    )
    def test_case_normalized(self, literal, expected):
        """Test booleans are lower-cased"""
        value = classify_value(literal)

        assert value.type == FieldType.BOOLEAN
        assert value.literal == expected

    def test_short_forms_are_not_booleans(self):
        """Test t/f are not accepted as booleans"""
        with pytest.raises(CodecError):
            classify_value("t")


class TestFloatValues:
    """Test the float default"""

    @pytest.mark.parametrize("literal", ["42", "-0.5", "4.2e3", "1E-9", "inf", "+3"])
    def test_floats(self, literal):
        """Test unsuffixed numbers are floats, digits included"""
        value = classify_value(literal)

        assert value.type == FieldType.FLOAT
        assert value.literal == literal

    @pytest.mark.parametrize(
        "literal", ["abc", "", "1_000", "1e400", "4 2", "0x", "0x1", "0x1p99999", "0x1_0p1"]
    )
    def test_invalid_numeric(self, literal):
        """Test values that are not floats"""
        with pytest.raises(CodecError) as exc_info:
            classify_value(literal)

        assert exc_info.value.kind == CodecErrorKind.INVALID_NUMERIC_FIELD

    @pytest.mark.parametrize(
        "literal, expected", [("0x1p3", 8.0), ("-0x1.8p1", -3.0), ("0X.8P0", 0.5)]
    )
    def test_hex_floats(self, literal, expected):
        """Test hexadecimal literals with a binary exponent"""
        value = classify_value(literal)

        assert value.type == FieldType.FLOAT
        assert value.literal == literal
        assert value.to_float() == expected


class TestToFloat:
    """Test conversion to the stored float representation"""

    def test_conversions(self):
        """Test each type's float value"""
        assert classify_value("42i").to_float() == 42.0
        assert classify_value("2.5").to_float() == 2.5
        assert classify_value("true").to_float() == 1.0
        assert classify_value("false").to_float() == 0.0
        assert classify_value('"on"').to_float() == 1.0

    def test_str_is_literal(self):
        """Test str() gives back the literal"""
        assert str(FieldValue(FieldType.INTEGER, "7i")) == "7i"


class TestParseInt64:
    """Test the integer helper shared with timestamps"""

    def test_parse(self):
        assert parse_int64("123") == 123
        assert parse_int64("-123") == -123
        assert parse_int64("+1") == 1

    def test_rejects(self):
        assert parse_int64("") is None
        assert parse_int64(" 1") is None
        assert parse_int64("1.0") is None
        assert parse_int64("9223372036854775808") is None
