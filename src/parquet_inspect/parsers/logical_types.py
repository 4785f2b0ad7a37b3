"""
Logical type conversion for display.

Turns decoded physical values into the values a person expects to read:
scaled decimals, ISO-8601 dates and timestamps, UUID strings and so on.
The rules are applied in a fixed order:

1. INT96 is always a legacy nanosecond timestamp.
2. Byte arrays with neither a logical nor a converted type are opaque and
   shown as base64.
3. A converted type, when present, wins over the logical type.
4. Otherwise the logical type decides.
5. Anything left is passed through.
"""

from __future__ import annotations

import base64
import logging
import math
import struct
import uuid

from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, assert_never

from bson import decode as bson_decode
from bson import json_util
from bson.errors import InvalidBSON, InvalidDocument

from parquet_inspect.constants import (
    CELL_DISPLAY_LIMIT,
    ELLIPSIS,
    JULIAN_EPOCH_DAY,
    MISSING_STAT_DISPLAY,
    NULL_DISPLAY,
    STAT_DISPLAY_LIMIT,
)
from parquet_inspect.enums import ConvertedType, TimeUnit, Type
from parquet_inspect.logical import (
    BsonTypeInfo,
    DateTypeInfo,
    DecimalTypeInfo,
    EnumTypeInfo,
    Float16TypeInfo,
    GeographyTypeInfo,
    GeometryTypeInfo,
    IntTypeInfo,
    JsonTypeInfo,
    ListTypeInfo,
    LogicalTypeInfoUnion,
    MapTypeInfo,
    StringTypeInfo,
    TimestampTypeInfo,
    TimeTypeInfo,
    UnknownTypeInfo,
    UuidTypeInfo,
    VariantTypeInfo,
)
from parquet_inspect.types import SchemaElement

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1)
_EPOCH_DATE = date(1970, 1, 1)
_NANOS_PER_DAY = 86_400 * 1_000_000_000

_UNITS_PER_SECOND = {
    TimeUnit.MILLIS: 1_000,
    TimeUnit.MICROS: 1_000_000,
    TimeUnit.NANOS: 1_000_000_000,
}
_FRACTION_DIGITS = {
    TimeUnit.MILLIS: 3,
    TimeUnit.MICROS: 6,
    TimeUnit.NANOS: 9,
}

_UNSIGNED_CONVERTED = frozenset(
    {
        ConvertedType.UINT_8,
        ConvertedType.UINT_16,
        ConvertedType.UINT_32,
        ConvertedType.UINT_64,
    },
)
_TEXT_CONVERTED = frozenset(
    {ConvertedType.UTF8, ConvertedType.JSON, ConvertedType.ENUM},
)


def convert_value(
    value: Any,
    physical_type: Type | int,
    element: SchemaElement | None,
) -> Any:
    """
    Convert a decoded physical value into its display value.

    Malformed inputs (wrong byte width, out-of-range dates) come back
    unchanged rather than raising; this is a viewer, and the raw value is
    still worth showing.
    """
    if value is None:
        return None

    logical = element.logical_type if element is not None else None
    converted = element.converted_type if element is not None else None

    if physical_type == Type.INT96:
        return _int96_to_iso(value)

    if (
        physical_type in (Type.BYTE_ARRAY, Type.FIXED_LEN_BYTE_ARRAY)
        and logical is None
        and converted is None
    ):
        return _base64(value)

    if converted is not None:
        return _convert_with_converted_type(
            value,
            physical_type,
            converted,
            element,
            logical,
        )

    if logical is not None:
        return _convert_with_logical_type(value, physical_type, logical)

    return value


def format_cell_value(
    value: Any,
    physical_type: Type | int,
    element: SchemaElement | None,
) -> str:
    """Display string for one page cell; nulls read ``NULL``."""
    if value is None:
        return NULL_DISPLAY
    return truncate(
        to_display(convert_value(value, physical_type, element), physical_type),
        CELL_DISPLAY_LIMIT,
    )


def format_stat_value(
    value: Any,
    physical_type: Type | int,
    element: SchemaElement | None,
) -> str:
    """Display string for a min or max statistic."""
    if value is None or value == b'':
        return MISSING_STAT_DISPLAY
    return truncate(
        to_display(convert_value(value, physical_type, element), physical_type),
        STAT_DISPLAY_LIMIT,
    )


def truncate(text: str, limit: int) -> str:
    if len(text) > limit:
        return text[:limit] + ELLIPSIS
    return text


def to_display(value: Any, physical_type: Type | int | None = None) -> str:
    match value:
        case str():
            return value
        case bool():
            return 'true' if value else 'false'
        case float():
            return _format_float(value, single=physical_type == Type.FLOAT)
        case bytes():
            return _base64(value)
        case _:
            return str(value)


def describe_logical_type(element: SchemaElement | None) -> str:
    if element is None or element.logical_type is None:
        return MISSING_STAT_DISPLAY
    return element.logical_type.describe()


def describe_converted_type(element: SchemaElement | None) -> str:
    if element is None or element.converted_type is None:
        return MISSING_STAT_DISPLAY
    return element.converted_type.name


def _convert_with_converted_type(  # noqa: C901
    value: Any,
    physical_type: Type | int,
    converted: ConvertedType,
    element: SchemaElement | None,
    logical: LogicalTypeInfoUnion | None,
) -> Any:
    match converted:
        case ConvertedType.DECIMAL:
            if element is not None and element.scale is not None:
                scale = element.scale
            elif isinstance(logical, DecimalTypeInfo):
                scale = logical.scale
            else:
                scale = 0
            return _decimal(value, scale)
        case ConvertedType.DATE:
            return _date(value)
        case ConvertedType.TIME_MILLIS | ConvertedType.TIME_MICROS:
            unit = (
                TimeUnit.MILLIS
                if converted == ConvertedType.TIME_MILLIS
                else TimeUnit.MICROS
            )
            return _time_of_day(value, unit)
        case ConvertedType.TIMESTAMP_MILLIS | ConvertedType.TIMESTAMP_MICROS:
            unit = (
                TimeUnit.MILLIS
                if converted == ConvertedType.TIMESTAMP_MILLIS
                else TimeUnit.MICROS
            )
            # Legacy timestamps are UTC unless a logical type says otherwise
            adjusted = (
                logical.is_adjusted_to_utc
                if isinstance(logical, TimestampTypeInfo)
                else True
            )
            return _timestamp(value, unit, adjusted)
        case ConvertedType.INTERVAL:
            return _interval(value)
        case ConvertedType.BSON:
            return _bson(value)
        case _ if converted in _TEXT_CONVERTED:
            return _text(value)
        case _ if converted in _UNSIGNED_CONVERTED:
            return _unsigned(value, physical_type)
        case _:
            if logical is not None:
                return _convert_with_logical_type(value, physical_type, logical)
            return value


def _convert_with_logical_type(  # noqa: C901
    value: Any,
    physical_type: Type | int,
    logical: LogicalTypeInfoUnion,
) -> Any:
    match logical:
        case DecimalTypeInfo(scale=scale):
            return _decimal(value, scale)
        case DateTypeInfo():
            return _date(value)
        case TimeTypeInfo(unit=unit):
            return _time_of_day(value, unit)
        case TimestampTypeInfo(unit=unit, is_adjusted_to_utc=adjusted):
            return _timestamp(value, unit, adjusted)
        case UuidTypeInfo():
            return _uuid(value)
        case BsonTypeInfo():
            return _bson(value)
        case Float16TypeInfo():
            return _float16(value)
        case StringTypeInfo() | JsonTypeInfo() | EnumTypeInfo():
            return _text(value)
        case IntTypeInfo(is_signed=is_signed):
            return value if is_signed else _unsigned(value, physical_type)
        case (
            MapTypeInfo()
            | ListTypeInfo()
            | UnknownTypeInfo()
            | VariantTypeInfo()
            | GeometryTypeInfo()
            | GeographyTypeInfo()
        ):
            return value
        case _ as unreachable:
            assert_never(unreachable)


def _base64(value: Any) -> Any:
    if isinstance(value, bytes):
        return base64.b64encode(value).decode('ascii')
    return value


def _text(value: Any) -> Any:
    if isinstance(value, bytes):
        return value.decode('utf-8', errors='replace')
    return value


def _unsigned(value: Any, physical_type: Type | int) -> Any:
    if not isinstance(value, int) or value >= 0:
        return value
    bits = 64 if physical_type == Type.INT64 else 32
    return value & ((1 << bits) - 1)


def _decimal(value: Any, scale: int) -> Any:
    match value:
        case bool():
            return value
        case int():
            unscaled = value
        case bytes():
            # Byte-array decimals are big-endian two's complement
            unscaled = int.from_bytes(value, 'big', signed=True)
        case _:
            return value
    return format(Decimal(unscaled).scaleb(-scale), 'f')


def _date(value: Any) -> Any:
    if not isinstance(value, int):
        return value
    try:
        return (_EPOCH_DATE + timedelta(days=value)).isoformat()
    except OverflowError:
        logger.debug('Date %d days from epoch is out of range', value)
        return value


def _time_of_day(value: Any, unit: TimeUnit) -> Any:
    if not isinstance(value, int) or value < 0:
        return value
    seconds, fraction = divmod(value, _UNITS_PER_SECOND[unit])
    minutes, second = divmod(seconds, 60)
    hour, minute = divmod(minutes, 60)
    digits = _FRACTION_DIGITS[unit]
    return f'{hour:02d}:{minute:02d}:{second:02d}.{fraction:0{digits}d}'


def _timestamp(value: Any, unit: TimeUnit, adjusted_to_utc: bool) -> Any:
    if not isinstance(value, int):
        return value
    seconds, fraction = divmod(value, _UNITS_PER_SECOND[unit])
    try:
        moment = _EPOCH + timedelta(seconds=seconds)
    except OverflowError:
        logger.debug('Timestamp %d %s from epoch is out of range', value, unit)
        return value
    digits = _FRACTION_DIGITS[unit]
    suffix = 'Z' if adjusted_to_utc else ''
    return f'{moment:%Y-%m-%dT%H:%M:%S}.{fraction:0{digits}d}{suffix}'


def _int96_to_iso(value: Any) -> Any:
    """
    Decode a legacy INT96 timestamp.

    The first 8 bytes are nanoseconds within the day, the last 4 the Julian
    day number, both little-endian.
    """
    if not isinstance(value, bytes) or len(value) != 12:
        return _base64(value)
    nanos_of_day, julian_day = struct.unpack('<qi', value)
    nanos = (julian_day - JULIAN_EPOCH_DAY) * _NANOS_PER_DAY + nanos_of_day
    return _timestamp(nanos, TimeUnit.NANOS, adjusted_to_utc=True)


def _interval(value: Any) -> Any:
    """Render months, days and milliseconds as an ISO-8601 duration."""
    if not isinstance(value, bytes) or len(value) != 12:
        return value
    months, days, millis = struct.unpack('<III', value)
    seconds = format(Decimal(millis).scaleb(-3).normalize(), 'f')
    return f'P{months}M{days}DT{seconds}S'


def _uuid(value: Any) -> Any:
    if isinstance(value, bytes) and len(value) == 16:
        return str(uuid.UUID(bytes=value))
    return value


def _float16(value: Any) -> Any:
    if isinstance(value, bytes) and len(value) == 2:
        return struct.unpack('<e', value)[0]
    return value


def _bson(value: Any) -> Any:
    if not isinstance(value, bytes):
        return value
    try:
        document = bson_decode(value)
    except (InvalidBSON, InvalidDocument, ValueError) as e:
        logger.debug('Value is not a valid BSON document: %s', e)
        return _base64(value)
    return json_util.dumps(document)


def _format_float(value: float, single: bool = False) -> str:
    if math.isnan(value) or math.isinf(value) or not single:
        return repr(value)
    # Shortest representation that survives a float32 round trip
    for precision in range(1, 10):
        text = f'{value:.{precision}g}'
        if struct.unpack('<f', struct.pack('<f', float(text)))[0] == value:
            return text
    return repr(value)
