"""
Tests for the literal codec.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from tripledoc.errors import DecodeError
from tripledoc.literals import (
    datetime_to_lexical,
    decode,
    encode,
    lexical_to_datetime,
    try_decode,
)
from tripledoc.terms import (
    LiteralKind,
    RDF_LANGSTRING,
    TypedLiteral,
    XSD_DATETIME,
    XSD_DECIMAL,
    XSD_INTEGER,
    XSD_STRING,
)


class TestEncode:
    """Native values to literals."""

    def test_string(self):
        assert encode("hello") == TypedLiteral("hello", XSD_STRING)

    def test_integer(self):
        assert encode(1337) == TypedLiteral("1337", XSD_INTEGER)
        assert encode(-5) == TypedLiteral("-5", XSD_INTEGER)

    def test_float_is_decimal(self):
        assert encode(4.2) == TypedLiteral("4.2", XSD_DECIMAL)
        assert encode(4.0) == TypedLiteral("4.0", XSD_DECIMAL)

    def test_python_decimal(self):
        assert encode(Decimal("1.50")) == TypedLiteral("1.50", XSD_DECIMAL)

    def test_datetime_uses_fixed_layout(self):
        value = datetime(2019, 7, 4, 13, 5, 9, 999999, tzinfo=timezone.utc)
        assert encode(value) == TypedLiteral("2019-07-04T13:05:09Z", XSD_DATETIME)

    def test_aware_datetime_converted_to_utc(self):
        tz = timezone(timedelta(hours=2))
        value = datetime(2019, 7, 4, 1, 0, 0, tzinfo=tz)
        assert encode(value).lexical == "2019-07-03T23:00:00Z"

    def test_naive_datetime_rejected(self):
        with pytest.raises(ValueError):
            encode(datetime(2020, 1, 1, 12))
        with pytest.raises(ValueError):
            datetime_to_lexical(datetime(1970, 1, 1))

    @pytest.mark.parametrize("value, lexical", [
        (1e-7, "0.0000001"),
        (1e22, "10000000000000000000000.0"),
        (Decimal("1E+2"), "100.0"),
    ])
    def test_decimal_written_without_exponent(self, value, lexical):
        assert encode(value) == TypedLiteral(lexical, XSD_DECIMAL)

    def test_bool_rejected(self):
        with pytest.raises(TypeError):
            encode(True)

    def test_unsupported_type_rejected(self):
        with pytest.raises(TypeError):
            encode([1, 2])

    def test_nan_rejected(self):
        with pytest.raises(ValueError):
            encode(float("nan"))


class TestDecode:
    """Literals to native values."""

    def test_plain_string(self):
        assert decode(TypedLiteral("verbatim ")) == "verbatim "

    def test_integer(self):
        value = decode(TypedLiteral("-42", XSD_INTEGER))
        assert value == -42
        assert isinstance(value, int)

    def test_decimal(self):
        value = decode(TypedLiteral("4.2", XSD_DECIMAL))
        assert value == 4.2
        assert isinstance(value, float)

    def test_datetime(self):
        value = decode(TypedLiteral("2020-02-29T23:59:58Z", XSD_DATETIME))
        assert value == datetime(2020, 2, 29, 23, 59, 58, tzinfo=timezone.utc)

    def test_datetime_fraction_truncated(self):
        assert lexical_to_datetime("2020-01-01T00:00:01.750Z") == datetime(
            2020, 1, 1, 0, 0, 1, tzinfo=timezone.utc
        )

    @pytest.mark.parametrize("lexical", ["12a", "1.5", "", " 3", "1_000"])
    def test_malformed_integer(self, lexical):
        with pytest.raises(DecodeError):
            decode(TypedLiteral(lexical, XSD_INTEGER))

    @pytest.mark.parametrize("lexical", ["NaN", "INF", "abc", "1.2.3", "1e5", "1e400"])
    def test_malformed_decimal(self, lexical):
        with pytest.raises(DecodeError):
            decode(TypedLiteral(lexical, XSD_DECIMAL))

    def test_decimal_overflow_is_not_infinity(self):
        literal = TypedLiteral("1" + "0" * 400, XSD_DECIMAL)
        with pytest.raises(DecodeError):
            decode(literal)
        assert try_decode(literal) is None

    @pytest.mark.parametrize("lexical", [
        "2020-01-01",
        "2020-01-01T00:00:00+02:00",
        "2020-13-01T00:00:00Z",
        "2020-02-30T00:00:00Z",
    ])
    def test_malformed_datetime(self, lexical):
        with pytest.raises(DecodeError):
            decode(TypedLiteral(lexical, XSD_DATETIME))

    def test_language_tagged_not_decodable(self):
        literal = TypedLiteral("Hallo", RDF_LANGSTRING, "de")
        assert literal.kind == LiteralKind.OTHER
        with pytest.raises(DecodeError):
            decode(literal)

    def test_unknown_datatype_not_decodable(self):
        with pytest.raises(DecodeError):
            decode(TypedLiteral("true", "http://www.w3.org/2001/XMLSchema#boolean"))

    def test_try_decode_returns_none(self):
        assert try_decode(TypedLiteral("x", XSD_INTEGER)) is None
        assert try_decode(TypedLiteral("7", XSD_INTEGER)) == 7


class TestRoundTrip:
    """decode(encode(v)) == v for every supported value type."""

    @pytest.mark.parametrize("value", [
        "",
        "with \"quotes\" and\nnewlines",
        0,
        -(2 ** 70),
        3.141592653589793,
        -0.001,
        1e-7,
        1e22,
    ])
    def test_round_trip(self, value):
        decoded = decode(encode(value))
        assert decoded == value
        assert type(decoded) is type(value)

    def test_datetime_round_trip_to_the_second(self):
        value = datetime(2001, 9, 9, 1, 46, 40, 123456, tzinfo=timezone.utc)
        assert decode(encode(value)) == value.replace(microsecond=0)

    def test_datetime_round_trip_in_other_timezone(self):
        value = datetime(2020, 1, 1, 12, tzinfo=timezone(timedelta(hours=-5)))
        decoded = decode(encode(value))
        assert decoded == value
        assert decoded.tzinfo == timezone.utc
