"""
PLAIN decoding of Parquet physical types.

All fixed-width types are little-endian and byte-packed. BYTE_ARRAY values
carry a 4-byte little-endian length prefix. Decoding is best-effort: when
the buffer runs out before ``count`` values have been read, the values
decoded so far are returned.
"""

import logging
import struct
from typing import TypeAlias

from parquet_inspect.enums import Type
from parquet_inspect.exceptions import ParquetDataError

logger = logging.getLogger(__name__)

INT96_SIZE = 12

# struct format and byte width per fixed-width physical type
FIXED_WIDTH_FORMATS: dict[Type, tuple[str, int]] = {
    Type.INT32: ('<i', 4),
    Type.INT64: ('<q', 8),
    Type.FLOAT: ('<f', 4),
    Type.DOUBLE: ('<d', 8),
}

PlainValue: TypeAlias = bool | int | float | bytes


def decode_plain_values(
    buffer: bytes,
    physical_type: Type | int,
    count: int,
    type_length: int | None = None,
) -> list[PlainValue]:
    """
    Decode up to ``count`` PLAIN values from ``buffer``.

    Args:
        buffer: Raw value bytes
        physical_type: Physical type of the column
        count: Number of values wanted
        type_length: Width of FIXED_LEN_BYTE_ARRAY values, from the schema

    Returns:
        The decoded values; fewer than ``count`` if the buffer is short

    Raises:
        ParquetDataError: For FIXED_LEN_BYTE_ARRAY without ``type_length`` or
            an unrecognized physical type
    """
    match physical_type:
        case Type.BOOLEAN:
            # One byte per value with the low bit set for true
            return [bool(b & 1) for b in buffer[:count]]
        case Type.INT32 | Type.INT64 | Type.FLOAT | Type.DOUBLE:
            fmt, width = FIXED_WIDTH_FORMATS[Type(physical_type)]
            available = min(count, len(buffer) // width)
            return [
                v for (v,) in struct.iter_unpack(fmt, buffer[: available * width])
            ]
        case Type.INT96:
            return _decode_fixed_width(buffer, count, INT96_SIZE)
        case Type.BYTE_ARRAY:
            return _decode_byte_arrays(buffer, count)
        case Type.FIXED_LEN_BYTE_ARRAY:
            if not type_length:
                raise ParquetDataError(
                    'FIXED_LEN_BYTE_ARRAY decoding requires the type_length from '
                    'the schema',
                )
            return _decode_fixed_width(buffer, count, type_length)
        case _:
            raise ParquetDataError(f'Unsupported physical type: {physical_type}')


def _decode_fixed_width(buffer: bytes, count: int, width: int) -> list[PlainValue]:
    available = min(count, len(buffer) // width)
    return [buffer[i * width : (i + 1) * width] for i in range(available)]


def _decode_byte_arrays(buffer: bytes, count: int) -> list[PlainValue]:
    values: list[PlainValue] = []
    pos = 0
    while len(values) < count and pos + 4 <= len(buffer):
        (length,) = struct.unpack_from('<I', buffer, pos)
        pos += 4
        if pos + length > len(buffer):
            logger.debug(
                'Byte array of %d bytes overruns buffer at %d, stopping',
                length,
                pos,
            )
            break
        values.append(buffer[pos : pos + length])
        pos += length
    return values


def decode_plain_booleans_bitpacked(buffer: bytes, count: int) -> list[PlainValue]:
    """
    Decode PLAIN booleans as stored in data pages: bit-packed, LSB first.
    """
    values: list[PlainValue] = []
    for byte in buffer:
        for bit in range(8):
            if len(values) == count:
                return values
            values.append(bool((byte >> bit) & 1))
    return values

