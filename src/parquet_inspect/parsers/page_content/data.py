"""
Data page content parsing for Parquet files.

Decodes the repetition levels, definition levels and values of a data page
(v1 or v2) into a flat list with ``None`` where the definition level marks a
null. Nested records are not reassembled: a repeated column yields one entry
per level pair, and the levels are returned alongside for anyone who wants
to rebuild the nesting.
"""

from __future__ import annotations

import logging
import struct

from dataclasses import dataclass, field
from io import BytesIO

from parquet_inspect.enums import Compression, Encoding, PageType, Type
from parquet_inspect.exceptions import ParquetDataError
from parquet_inspect.types import DataPageHeaderV2, PageHeader

from ..physical_types import (
    PlainValue,
    decode_plain_booleans_bitpacked,
    decode_plain_values,
)
from . import compressors
from .dictionary import DictType

logger = logging.getLogger(__name__)


@dataclass
class DecodedPage:
    values: list[PlainValue | None]
    definition_levels: list[int] = field(default_factory=list)
    repetition_levels: list[int] = field(default_factory=list)


class DataPageParser:
    """Parser for data page content."""

    def parse_content(
        self,
        payload: bytes,
        header: PageHeader,
        physical_type: Type | int,
        codec: Compression | int,
        max_definition_level: int,
        max_repetition_level: int,
        dictionary_values: DictType | None = None,
        type_length: int | None = None,
    ) -> DecodedPage:
        """
        Decode one DATA_PAGE or DATA_PAGE_V2 payload.

        Args:
            payload: The page's bytes as stored in the file
            header: Its page header
            physical_type: Physical type of the column
            codec: Compression codec of the column chunk
            max_definition_level: Number of non-REQUIRED fields on the path
            max_repetition_level: Number of REPEATED fields on the path
            dictionary_values: Values of the chunk's dictionary page, needed
                for dictionary-encoded pages
            type_length: Value width for FIXED_LEN_BYTE_ARRAY columns
        """
        match header.type:
            case PageType.DATA_PAGE if header.data_page_header is not None:
                num_values = header.data_page_header.num_values
                encoding = header.data_page_header.encoding
                stream, repetition_levels, definition_levels = self._split_v1(
                    payload,
                    header,
                    codec,
                    num_values,
                    max_definition_level,
                    max_repetition_level,
                )
            case PageType.DATA_PAGE_V2 if header.data_page_header_v2 is not None:
                num_values = header.data_page_header_v2.num_values
                encoding = header.data_page_header_v2.encoding
                stream, repetition_levels, definition_levels = self._split_v2(
                    payload,
                    header,
                    header.data_page_header_v2,
                    codec,
                    num_values,
                    max_definition_level,
                    max_repetition_level,
                )
            case _:
                raise ParquetDataError(
                    f'Page of type {header.type} is not a data page',
                )

        if definition_levels:
            num_non_null = sum(
                1 for level in definition_levels if level == max_definition_level
            )
        else:
            num_non_null = num_values

        non_null_values = self._read_values(
            stream,
            encoding,
            physical_type,
            num_non_null,
            dictionary_values,
            type_length,
        )

        return DecodedPage(
            values=self._merge_nulls(
                non_null_values,
                definition_levels,
                max_definition_level,
            ),
            definition_levels=definition_levels,
            repetition_levels=repetition_levels,
        )

    def _split_v1(
        self,
        payload: bytes,
        header: PageHeader,
        codec: Compression | int,
        num_values: int,
        max_definition_level: int,
        max_repetition_level: int,
    ) -> tuple[BytesIO, list[int], list[int]]:
        # Levels and values are compressed together in v1 pages
        data = compressors.decompress(payload, codec, header.uncompressed_page_size)
        if len(data) != header.uncompressed_page_size:
            logger.warning(
                "Decompressed data page size %d doesn't match expected %d",
                len(data),
                header.uncompressed_page_size,
            )

        stream = BytesIO(data)
        repetition_levels: list[int] = []
        definition_levels: list[int] = []
        if max_repetition_level > 0:
            repetition_levels = self._decode_rle_with_length_prefix(
                stream,
                max_repetition_level.bit_length(),
                num_values,
            )
        if max_definition_level > 0:
            definition_levels = self._decode_rle_with_length_prefix(
                stream,
                max_definition_level.bit_length(),
                num_values,
            )
        return stream, repetition_levels, definition_levels

    def _split_v2(
        self,
        payload: bytes,
        header: PageHeader,
        v2: DataPageHeaderV2,
        codec: Compression | int,
        num_values: int,
        max_definition_level: int,
        max_repetition_level: int,
    ) -> tuple[BytesIO, list[int], list[int]]:
        rep_length = v2.repetition_levels_byte_length
        def_length = v2.definition_levels_byte_length
        if rep_length + def_length > len(payload):
            raise ParquetDataError(
                f'Level sections ({rep_length} + {def_length} bytes) exceed '
                f'the {len(payload)}-byte page',
            )

        # Levels are never compressed in v2 pages
        repetition_levels: list[int] = []
        definition_levels: list[int] = []
        if max_repetition_level > 0 and rep_length:
            repetition_levels = self._decode_rle_levels(
                BytesIO(payload[:rep_length]),
                max_repetition_level.bit_length(),
                num_values,
            )
        if max_definition_level > 0 and def_length:
            definition_levels = self._decode_rle_levels(
                BytesIO(payload[rep_length : rep_length + def_length]),
                max_definition_level.bit_length(),
                num_values,
            )

        values = payload[rep_length + def_length :]
        if v2.is_compressed:
            expected = header.uncompressed_page_size - rep_length - def_length
            values = compressors.decompress(values, codec, expected)
            if len(values) != expected:
                logger.warning(
                    "Decompressed values size %d doesn't match expected %d",
                    len(values),
                    expected,
                )
        return BytesIO(values), repetition_levels, definition_levels

    def _merge_nulls(
        self,
        non_null_values: list[PlainValue],
        definition_levels: list[int],
        max_definition_level: int,
    ) -> list[PlainValue | None]:
        if not definition_levels:
            return list(non_null_values)

        merged: list[PlainValue | None] = []
        non_null_iter = iter(non_null_values)
        for level in definition_levels:
            if level < max_definition_level:
                merged.append(None)
                continue
            try:
                merged.append(next(non_null_iter))
            except StopIteration:
                logger.warning(
                    'Page holds fewer values than its definition levels require; '
                    'returning the first %d entries',
                    len(merged),
                )
                break
        return merged

    def _read_values(
        self,
        stream: BytesIO,
        encoding: Encoding | int,
        physical_type: Type | int,
        num_non_null: int,
        dictionary_values: DictType | None,
        type_length: int | None,
    ) -> list[PlainValue]:
        """Selects the correct value decoder based on the encoding."""
        if num_non_null == 0:
            return []

        match encoding:
            case Encoding.PLAIN:
                if physical_type == Type.BOOLEAN:
                    return decode_plain_booleans_bitpacked(stream.read(), num_non_null)
                return decode_plain_values(
                    stream.read(),
                    physical_type,
                    num_non_null,
                    type_length,
                )
            case Encoding.PLAIN_DICTIONARY | Encoding.RLE_DICTIONARY:
                return self._read_dictionary_values(
                    stream,
                    num_non_null,
                    dictionary_values,
                )
            case Encoding.DELTA_BINARY_PACKED:
                if physical_type not in (Type.INT32, Type.INT64):
                    raise ParquetDataError(
                        f'DELTA_BINARY_PACKED is not valid for {physical_type}',
                    )
                return self._read_delta_binary_packed_values(stream, num_non_null)
            case Encoding.DELTA_LENGTH_BYTE_ARRAY:
                return self._read_delta_length_byte_array_values(stream, num_non_null)
            case Encoding.DELTA_BYTE_ARRAY:
                return self._read_delta_byte_array_values(stream, num_non_null)
            case _:
                raise ParquetDataError(f'Unsupported encoding: {encoding}')

    # --- RLE / bit-packing hybrid ---

    def _decode_rle_with_length_prefix(
        self,
        stream: BytesIO,
        bit_width: int,
        num_values: int,
    ) -> list[int]:
        length_bytes = stream.read(4)
        if len(length_bytes) != 4:
            raise ParquetDataError('Could not read 4-byte length prefix for RLE levels')
        (data_length,) = struct.unpack('<I', length_bytes)
        rle_data = stream.read(data_length)
        return self._decode_rle_levels(BytesIO(rle_data), bit_width, num_values)

    def _decode_rle_levels(
        self,
        stream: BytesIO,
        bit_width: int,
        num_expected: int,
    ) -> list[int]:
        values: list[int] = []
        while len(values) < num_expected:
            header = self._read_varint(stream)
            if header is None:
                break

            if (header & 1) == 0:
                # RLE run: one value repeated
                count = header >> 1
                value_width = (bit_width + 7) // 8
                value_bytes = stream.read(value_width)
                if len(value_bytes) < value_width:
                    raise ParquetDataError('Unexpected EOF in RLE run')
                value = int.from_bytes(value_bytes, 'little')
                values.extend([value] * min(count, num_expected - len(values)))
            else:
                # Bit-packed run of groups of eight
                count = (header >> 1) * 8
                packed = stream.read((header >> 1) * bit_width)
                unpacked = self._unpack_bits(packed, count, bit_width)
                values.extend(unpacked[: num_expected - len(values)])

        return values

    def _read_varint(self, stream: BytesIO) -> int | None:
        result, shift = 0, 0
        while True:
            byte_data = stream.read(1)
            if not byte_data:
                return None
            byte = byte_data[0]
            result |= (byte & 0x7F) << shift
            if (byte & 0x80) == 0:
                return result
            shift += 7

    def _read_zigzag_varint(self, stream: BytesIO) -> int | None:
        value = self._read_varint(stream)
        if value is None:
            return None
        return (value >> 1) ^ (-(value & 1))

    def _unpack_bits(self, data: bytes, count: int, bit_width: int) -> list[int]:
        """Unpack up to ``count`` little-endian bit-packed integers."""
        if bit_width == 0:
            return [0] * count
        as_int = int.from_bytes(data, 'little')
        available = min(count, len(data) * 8 // bit_width)
        mask = (1 << bit_width) - 1
        return [(as_int >> (i * bit_width)) & mask for i in range(available)]

    # --- Per-encoding value readers ---

    def _read_dictionary_values(
        self,
        stream: BytesIO,
        num_values: int,
        dictionary_values: DictType | None,
    ) -> list[PlainValue]:
        if dictionary_values is None:
            raise ParquetDataError(
                'Dictionary-encoded page but the column chunk has no dictionary page',
            )
        bit_width_bytes = stream.read(1)
        if not bit_width_bytes:
            raise ParquetDataError('Could not read bit width for dictionary indices')
        indices = self._decode_rle_levels(stream, bit_width_bytes[0], num_values)
        try:
            return [dictionary_values[i] for i in indices]
        except IndexError:
            raise ParquetDataError(
                f'Dictionary index {max(indices)} out of range for a '
                f'{len(dictionary_values)}-entry dictionary',
            ) from None

    def _read_delta_binary_packed_values(
        self,
        stream: BytesIO,
        num_values: int,
    ) -> list[int]:
        """
        Decode a DELTA_BINARY_PACKED run.

        Leaves ``stream`` just past the run, including the padding of its
        last mini-block, so a following section can be read from there.
        """
        block_size = self._read_varint(stream)
        num_mini_blocks = self._read_varint(stream)
        total_value_count = self._read_varint(stream)
        first_value = self._read_zigzag_varint(stream)

        if (
            block_size is None
            or num_mini_blocks is None
            or total_value_count is None
            or first_value is None
        ):
            raise ParquetDataError('Could not read DELTA_BINARY_PACKED header')

        if total_value_count == 0:
            return []
        if num_mini_blocks == 0 or block_size % num_mini_blocks:
            raise ParquetDataError(
                f'Invalid DELTA_BINARY_PACKED block: {block_size} values in '
                f'{num_mini_blocks} mini-blocks',
            )

        values_per_mini_block = block_size // num_mini_blocks
        values = [first_value]
        current_value = first_value

        while len(values) < total_value_count:
            min_delta = self._read_zigzag_varint(stream)
            if min_delta is None:
                raise ParquetDataError('Could not read block min_delta')
            bit_widths = stream.read(num_mini_blocks)
            if len(bit_widths) != num_mini_blocks:
                raise ParquetDataError('Could not read mini-block bit widths')

            for bit_width in bit_widths:
                # Mini-blocks past the last value are not stored
                if len(values) >= total_value_count:
                    break
                packed = stream.read(values_per_mini_block * bit_width // 8)
                deltas = self._unpack_bits(packed, values_per_mini_block, bit_width)
                for delta in deltas[: total_value_count - len(values)]:
                    current_value += delta + min_delta
                    values.append(current_value)

        if num_values > len(values):
            logger.warning(
                'DELTA_BINARY_PACKED run holds %d values, %d expected',
                len(values),
                num_values,
            )
        return values[:num_values]

    def _read_delta_length_byte_array_values(
        self,
        stream: BytesIO,
        num_values: int,
    ) -> list[bytes]:
        lengths = self._read_delta_binary_packed_values(stream, num_values)
        values: list[bytes] = []
        for length in lengths:
            value = stream.read(length)
            if len(value) != length:
                raise ParquetDataError(f'EOF reading byte array of length {length}')
            values.append(value)
        return values

    def _read_delta_byte_array_values(
        self,
        stream: BytesIO,
        num_values: int,
    ) -> list[bytes]:
        # Prefix lengths, then suffixes as DELTA_LENGTH_BYTE_ARRAY
        prefix_lengths = self._read_delta_binary_packed_values(stream, num_values)
        suffixes = self._read_delta_length_byte_array_values(stream, num_values)

        values: list[bytes] = []
        previous = b''
        for i, (prefix_length, suffix) in enumerate(
            zip(prefix_lengths, suffixes, strict=False),
        ):
            if prefix_length < 0 or prefix_length > len(previous):
                raise ParquetDataError(
                    f'Invalid prefix length at index {i}: '
                    f'prefix={prefix_length}, prev_len={len(previous)}',
                )
            previous = previous[:prefix_length] + suffix
            values.append(previous)
        return values
