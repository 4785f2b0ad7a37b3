import io
import logging

import pytest

from parquet_builder import (
    Chunk,
    Page,
    data_page,
    delta_binary_packed,
    delta_byte_array,
    delta_length_byte_array,
    dictionary_page,
    plain,
    rle,
)
from parquet_inspect.enums import Compression, Encoding, Type
from parquet_inspect.exceptions import ParquetDataError, ParquetIOError
from parquet_inspect.pages import read_page_header
from parquet_inspect.parsers.page_content import (
    DataPageParser,
    DecodedPage,
    DictionaryPageParser,
    read_payload,
)


def decode(
    chunk: Chunk,
    page: Page,
    max_definition: int = 0,
    max_repetition: int = 0,
    dictionary: list | None = None,
    type_length: int | None = None,
) -> DecodedPage:
    data = data_page(chunk, page, max_definition, max_repetition)
    header, size = read_page_header(io.BytesIO(data), 0)
    return DataPageParser().parse_content(
        data[size:],
        header,
        chunk.physical_type,
        chunk.codec,
        max_definition,
        max_repetition,
        dictionary,
        type_length,
    )


def test_required_plain_values() -> None:
    chunk = Chunk(['x'], Type.INT64, [])
    decoded = decode(chunk, Page([1, -2, 3]))
    assert decoded.values == [1, -2, 3]
    assert decoded.definition_levels == []
    assert decoded.repetition_levels == []


@pytest.mark.parametrize('v2', [False, True])
@pytest.mark.parametrize(
    'codec',
    [Compression.UNCOMPRESSED, Compression.SNAPPY, Compression.GZIP],
)
def test_optional_values_with_nulls(v2: bool, codec: Compression) -> None:
    chunk = Chunk(['x'], Type.INT32, [], codec=codec)
    page = Page([10, 20, 30], definition_levels=[1, 0, 1, 1, 0], v2=v2)
    decoded = decode(chunk, page, max_definition=1)
    assert decoded.values == [10, None, 20, 30, None]
    assert decoded.definition_levels == [1, 0, 1, 1, 0]


def test_all_nulls() -> None:
    chunk = Chunk(['x'], Type.INT32, [])
    decoded = decode(chunk, Page([], definition_levels=[0, 0]), max_definition=1)
    assert decoded.values == [None, None]


def test_repeated_column_levels() -> None:
    # Rows [1, 2], [], [3]
    chunk = Chunk(['x'], Type.INT32, [])
    page = Page(
        [1, 2, 3],
        definition_levels=[1, 1, 0, 1],
        repetition_levels=[0, 1, 0, 0],
    )
    decoded = decode(chunk, page, max_definition=1, max_repetition=1)
    assert decoded.values == [1, 2, None, 3]
    assert decoded.repetition_levels == [0, 1, 0, 0]


def test_booleans_are_bitpacked() -> None:
    chunk = Chunk(['x'], Type.BOOLEAN, [])
    values = [True, False, True, True, False, True, False, False, True]
    assert decode(chunk, Page(values)).values == values


def test_fixed_len_byte_array() -> None:
    chunk = Chunk(['x'], Type.FIXED_LEN_BYTE_ARRAY, [])
    decoded = decode(chunk, Page([b'abc', b'def']), type_length=3)
    assert decoded.values == [b'abc', b'def']


@pytest.mark.parametrize('v2', [False, True])
def test_dictionary_encoded(v2: bool) -> None:
    dictionary = [b'apple', b'banana', b'cherry']
    chunk = Chunk(['x'], Type.BYTE_ARRAY, [], dictionary=dictionary)
    page = Page(
        [b'cherry', b'apple', b'cherry'],
        definition_levels=[1, 1, 0, 1],
        v2=v2,
    )
    decoded = decode(chunk, page, max_definition=1, dictionary=dictionary)
    assert decoded.values == [b'cherry', b'apple', None, b'cherry']


def test_dictionary_page_parsing() -> None:
    chunk = Chunk(
        ['x'],
        Type.INT64,
        [],
        codec=Compression.GZIP,
        dictionary=[100, 200, 300],
    )
    data = dictionary_page(chunk)
    header, size = read_page_header(io.BytesIO(data), 0)
    values = DictionaryPageParser().parse_content(
        data[size:],
        header,
        Type.INT64,
        Compression.GZIP,
    )
    assert values == [100, 200, 300]


def test_dictionary_required() -> None:
    chunk = Chunk(['x'], Type.BYTE_ARRAY, [], dictionary=[b'a'])
    with pytest.raises(ParquetDataError, match='no dictionary page'):
        decode(chunk, Page([b'a']))


def test_dictionary_index_out_of_range() -> None:
    chunk = Chunk(['x'], Type.INT32, [])
    page = Page(
        [0],
        encoding=Encoding.RLE_DICTIONARY,
        encoded=bytes([2]) + rle([3], 2),
    )
    with pytest.raises(ParquetDataError, match='out of range'):
        decode(chunk, page, dictionary=[1, 2])


@pytest.mark.parametrize(
    'values',
    [
        [7],
        [1, 2, 3, 4, 5],
        [i * i * (-1) ** i for i in range(300)],
        [2**40, -(2**40), 0, 17],
    ],
)
def test_delta_binary_packed(values: list[int]) -> None:
    chunk = Chunk(['x'], Type.INT64, [])
    page = Page(
        values,
        encoding=Encoding.DELTA_BINARY_PACKED,
        encoded=delta_binary_packed(values),
    )
    assert decode(chunk, page).values == values


def test_delta_binary_packed_with_nulls() -> None:
    chunk = Chunk(['x'], Type.INT32, [])
    page = Page(
        [5, 6],
        definition_levels=[0, 1, 0, 1],
        encoding=Encoding.DELTA_BINARY_PACKED,
        encoded=delta_binary_packed([5, 6]),
    )
    assert decode(chunk, page, max_definition=1).values == [None, 5, None, 6]


def test_delta_binary_packed_rejects_byte_arrays() -> None:
    chunk = Chunk(['x'], Type.BYTE_ARRAY, [])
    page = Page(
        [b'a'],
        encoding=Encoding.DELTA_BINARY_PACKED,
        encoded=delta_binary_packed([1]),
    )
    with pytest.raises(ParquetDataError, match='not valid'):
        decode(chunk, page)


def test_delta_length_byte_array() -> None:
    values = [b'hello', b'', b'world!']
    chunk = Chunk(['x'], Type.BYTE_ARRAY, [])
    page = Page(
        values,
        encoding=Encoding.DELTA_LENGTH_BYTE_ARRAY,
        encoded=delta_length_byte_array(values),
    )
    assert decode(chunk, page).values == values


def test_delta_byte_array() -> None:
    values = [b'apple', b'applesauce', b'apricot', b'banana', b'band']
    chunk = Chunk(['x'], Type.BYTE_ARRAY, [])
    page = Page(
        values,
        encoding=Encoding.DELTA_BYTE_ARRAY,
        encoded=delta_byte_array(values),
    )
    assert decode(chunk, page).values == values


def test_unsupported_encoding() -> None:
    chunk = Chunk(['x'], Type.FLOAT, [])
    page = Page(
        [1.0],
        encoding=Encoding.BYTE_STREAM_SPLIT,
        encoded=b'\x00\x00\x80\x3f',
    )
    with pytest.raises(ParquetDataError, match='Unsupported encoding'):
        decode(chunk, page)


def test_value_shortfall_truncates(caplog) -> None:
    chunk = Chunk(['x'], Type.INT32, [])
    page = Page(
        [1, 2, 3],
        definition_levels=[1, 1, 1],
        encoded=plain(Type.INT32, [1, 2]),
    )
    with caplog.at_level(logging.WARNING):
        decoded = decode(chunk, page, max_definition=1)
    assert decoded.values == [1, 2]
    assert 'fewer values' in caplog.text


def test_payload_seek_failure() -> None:
    class Unseekable(io.BytesIO):
        def seek(self, *args):
            raise OSError('no seeking here')

    chunk = Chunk(['x'], Type.INT32, [])
    data = data_page(chunk, Page([1, 2, 3]), 0, 0)
    header, size = read_page_header(io.BytesIO(data), 0)
    with pytest.raises(ParquetIOError, match='operation=seek') as excinfo:
        read_payload(Unseekable(data), size, header)
    assert excinfo.value.offset == size


def test_short_payload() -> None:
    chunk = Chunk(['x'], Type.INT32, [])
    data = data_page(chunk, Page([1, 2, 3]), 0, 0)
    header, size = read_page_header(io.BytesIO(data), 0)
    with pytest.raises(ParquetIOError, match='operation=read'):
        read_payload(io.BytesIO(data[:-1]), size, header)
    assert read_payload(io.BytesIO(data), size, header) == data[size:]
