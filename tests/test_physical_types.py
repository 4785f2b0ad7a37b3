import struct

import pytest

from parquet_builder import plain
from parquet_inspect.enums import Type
from parquet_inspect.exceptions import ParquetDataError
from parquet_inspect.parsers.physical_types import (
    decode_plain_booleans_bitpacked,
    decode_plain_values,
)


@pytest.mark.parametrize(
    ('physical_type', 'values'),
    [
        (Type.INT32, [0, -1, 2**31 - 1, -(2**31)]),
        (Type.INT64, [0, -1, 2**63 - 1]),
        (Type.DOUBLE, [0.5, -1.25, 1e300]),
        (Type.BYTE_ARRAY, [b'', b'a', b'hello world']),
    ],
)
def test_plain_values(physical_type: Type, values: list) -> None:
    encoded = plain(physical_type, values)
    assert decode_plain_values(encoded, physical_type, len(values)) == values


def test_float_values() -> None:
    encoded = struct.pack('<2f', 1.5, -0.25)
    assert decode_plain_values(encoded, Type.FLOAT, 2) == [1.5, -0.25]


def test_booleans_one_byte_each() -> None:
    assert decode_plain_values(b'\x01\x00\x01\x03', Type.BOOLEAN, 3) == [
        True,
        False,
        True,
    ]


def test_booleans_bitpacked() -> None:
    values = [True, False, True, True, False, False, False, True, True]
    encoded = plain(Type.BOOLEAN, values)
    assert len(encoded) == 2
    assert decode_plain_booleans_bitpacked(encoded, len(values)) == values


def test_int96_and_fixed_len() -> None:
    raw = bytes(range(24))
    assert decode_plain_values(raw, Type.INT96, 2) == [raw[:12], raw[12:]]
    assert decode_plain_values(raw, Type.FIXED_LEN_BYTE_ARRAY, 3, type_length=8) == [
        raw[:8],
        raw[8:16],
        raw[16:],
    ]


def test_fixed_len_requires_type_length() -> None:
    with pytest.raises(ParquetDataError, match='type_length'):
        decode_plain_values(b'\x00' * 4, Type.FIXED_LEN_BYTE_ARRAY, 1)


def test_unknown_physical_type() -> None:
    with pytest.raises(ParquetDataError, match='Unsupported physical type'):
        decode_plain_values(b'\x00' * 4, 99, 1)


@pytest.mark.parametrize(
    ('physical_type', 'data', 'expected'),
    [
        (Type.INT32, struct.pack('<i', 5) + b'\x01\x02', [5]),
        (Type.INT64, b'\x00' * 7, []),
        (
            Type.BYTE_ARRAY,
            plain(Type.BYTE_ARRAY, [b'ok']) + b'\x09\x00\x00\x00ab',
            [b'ok'],
        ),
        (Type.BYTE_ARRAY, b'\x01\x00', []),
    ],
)
def test_short_buffer_stops_early(physical_type, data, expected) -> None:
    assert decode_plain_values(data, physical_type, 3) == expected


def test_count_limits_output() -> None:
    encoded = plain(Type.INT32, [1, 2, 3, 4])
    assert decode_plain_values(encoded, Type.INT32, 2) == [1, 2]
