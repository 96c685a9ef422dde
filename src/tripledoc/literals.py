"""
Literal codec.

Maps native Python scalars to typed literals and back:

    str       <-> xsd:string (plain literals decode the same way)
    int       <-> xsd:integer
    float     <-> xsd:decimal
    datetime  <-> xsd:dateTime

Timestamps use the fixed-width UTC layout ``YYYY-MM-DDTHH:MM:SSZ`` on both
sides. Decoding reads that layout field by field instead of going through a
general ISO-8601 parser, so values written by older producers read back
identically; offsets other than ``Z`` are not understood.
"""

import logging
import math
import re
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, Union

from tripledoc.errors import DecodeError
from tripledoc.terms import (
    LiteralKind,
    TypedLiteral,
    XSD_DATETIME,
    XSD_DECIMAL,
    XSD_INTEGER,
    XSD_STRING,
)

logger = logging.getLogger(__name__)

NativeValue = Union[str, int, float, datetime]

DATETIME_LAYOUT = "%04d-%02d-%02dT%02d:%02d:%02dZ"

_INTEGER_PATTERN = re.compile(r"[+-]?\d+")
_DECIMAL_PATTERN = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)")
_DATETIME_PATTERN = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(\.\d+)?Z"
)


# =============================================================================
# Timestamps
# =============================================================================

def datetime_to_lexical(value: datetime) -> str:
    """
    Format a timestamp with the fixed UTC layout.

    Aware datetimes are converted to UTC. Sub-second precision is dropped.

    Raises:
        ValueError: for naive datetimes, which would not read back equal
    """
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"Cannot store naive datetime {value.isoformat()}; attach a timezone")
    value = value.astimezone(timezone.utc)
    return DATETIME_LAYOUT % (
        value.year, value.month, value.day,
        value.hour, value.minute, value.second,
    )


def lexical_to_datetime(lexical: str) -> datetime:
    """Parse the fixed UTC layout into an aware datetime."""
    match = _DATETIME_PATTERN.fullmatch(lexical)
    if match is None:
        raise DecodeError(lexical, XSD_DATETIME, "expected YYYY-MM-DDTHH:MM:SSZ")
    year, month, day, hour, minute, second = (int(g) for g in match.groups()[:6])
    try:
        return datetime(year, month, day, hour, minute, second, tzinfo=timezone.utc)
    except ValueError as e:
        raise DecodeError(lexical, XSD_DATETIME, str(e)) from e


# =============================================================================
# Codec
# =============================================================================

def _plain_decimal(text: str) -> str:
    """Rewrite a number such as ``1e-07`` in the exponent-free xsd:decimal form."""
    if "e" not in text.lower():
        return text
    plain = format(Decimal(text), "f")
    return plain if "." in plain else plain + ".0"


def encode(value: NativeValue) -> TypedLiteral:
    """
    Convert a native value to the literal that represents it.

    Raises:
        TypeError: for values of an unsupported type (including bool)
        ValueError: for NaN or infinite floats, which have no decimal form, and
            for naive datetimes
    """
    if isinstance(value, datetime):
        return TypedLiteral(datetime_to_lexical(value), XSD_DATETIME)
    if isinstance(value, bool):
        raise TypeError("Boolean literals are not supported")
    if isinstance(value, int):
        return TypedLiteral(str(value), XSD_INTEGER)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Cannot store {value!r} as xsd:decimal")
        return TypedLiteral(_plain_decimal(repr(value)), XSD_DECIMAL)
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"Cannot store {value!r} as xsd:decimal")
        return TypedLiteral(_plain_decimal(str(value)), XSD_DECIMAL)
    if isinstance(value, str):
        return TypedLiteral(value, XSD_STRING)
    raise TypeError(f"Unsupported literal type: {type(value).__name__}")


def decode(literal: TypedLiteral) -> NativeValue:
    """
    Convert a literal to its native value.

    Raises:
        DecodeError: if the lexical form does not fit the datatype, or if the
            literal is of a kind the codec does not read (other datatypes,
            language-tagged strings)
    """
    kind = literal.kind
    if kind == LiteralKind.STRING:
        return literal.lexical
    if kind == LiteralKind.INTEGER:
        if not _INTEGER_PATTERN.fullmatch(literal.lexical):
            raise DecodeError(literal.lexical, literal.datatype, "not a base-10 integer")
        return int(literal.lexical)
    if kind == LiteralKind.DECIMAL:
        if not _DECIMAL_PATTERN.fullmatch(literal.lexical):
            raise DecodeError(literal.lexical, literal.datatype, "not a decimal number")
        value = float(literal.lexical)
        if not math.isfinite(value):
            raise DecodeError(literal.lexical, literal.datatype, "out of range for a float")
        return value
    if kind == LiteralKind.DATETIME:
        return lexical_to_datetime(literal.lexical)
    raise DecodeError(literal.lexical, literal.datatype, "unsupported datatype")


def try_decode(literal: TypedLiteral) -> Optional[NativeValue]:
    """Decode a literal, returning None when it cannot be decoded."""
    try:
        return decode(literal)
    except DecodeError as e:
        logger.debug(f"Ignoring literal: {e}")
        return None
