"""
Byte-exact Parquet files for tests.

Writes the Thrift compact protocol directly so each test controls every page
header, offset and level stream, including layouts no mainstream writer
would produce.
"""

from __future__ import annotations

import gzip
import itertools
import struct

from dataclasses import dataclass, field
from typing import Any, TypeAlias

from parquet_inspect.enums import (
    Compression,
    ConvertedType,
    Encoding,
    PageType,
    Repetition,
    Type,
)

# Thrift compact field types
BOOL = 1
I32 = 5
I64 = 6
BINARY = 8
LIST = 9
STRUCT = 12

Fields: TypeAlias = list[tuple[int, int, Any]]


def uvarint(n: int) -> bytes:
    out = bytearray()
    while True:
        byte = n & 0x7F
        n >>= 7
        if n:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def zigzag(n: int) -> bytes:
    return uvarint((n << 1) ^ (n >> 63))


def _element(field_type: int, value: Any) -> bytes:
    match field_type:
        case 5 | 6:
            return zigzag(value)
        case 8:
            return uvarint(len(value)) + value
        case 9:
            element_type, items = value
            if len(items) < 15:
                header = bytes([(len(items) << 4) | element_type])
            else:
                header = bytes([0xF0 | element_type]) + uvarint(len(items))
            return header + b''.join(_element(element_type, i) for i in items)
        case 12:
            return encode_struct(value)
        case _:
            raise ValueError(f'unsupported field type {field_type}')


def encode_struct(fields: Fields) -> bytes:
    """Encode ``(field_id, type, value)`` triples; ``None`` values are left out."""
    out = bytearray()
    last = 0
    for field_id, field_type, value in fields:
        if value is None:
            continue
        nibble = (1 if value else 2) if field_type == BOOL else field_type
        delta = field_id - last
        if 0 < delta <= 15:
            out.append((delta << 4) | nibble)
        else:
            out.append(nibble)
            out += zigzag(field_id)
        last = field_id
        if field_type != BOOL:
            out += _element(field_type, value)
    out.append(0)
    return bytes(out)


def string(text: str) -> bytes:
    return text.encode('utf-8')


# --- logical type unions ---


def logical_string() -> Fields:
    return [(1, STRUCT, [])]


def logical_decimal(precision: int, scale: int) -> Fields:
    return [(5, STRUCT, [(1, I32, scale), (2, I32, precision)])]


def logical_date() -> Fields:
    return [(6, STRUCT, [])]


def _unit(unit: str) -> Fields:
    return [({'MILLIS': 1, 'MICROS': 2, 'NANOS': 3}[unit], STRUCT, [])]


def logical_time(unit: str, adjusted: bool) -> Fields:
    return [(7, STRUCT, [(1, BOOL, adjusted), (2, STRUCT, _unit(unit))])]


def logical_timestamp(unit: str, adjusted: bool) -> Fields:
    return [(8, STRUCT, [(1, BOOL, adjusted), (2, STRUCT, _unit(unit))])]


def logical_integer(bit_width: int, signed: bool) -> Fields:
    return [(10, STRUCT, [(1, I32, bit_width), (2, BOOL, signed)])]


def logical_uuid() -> Fields:
    return [(14, STRUCT, [])]


def logical_geometry(crs: str | None = None) -> Fields:
    return [(17, STRUCT, [(1, BINARY, string(crs) if crs else None)])]


# --- value encodings ---


def plain(physical_type: Type, values: list, bitpack_booleans: bool = True) -> bytes:
    match physical_type:
        case Type.BOOLEAN if bitpack_booleans:
            out = bytearray((len(values) + 7) // 8)
            for i, value in enumerate(values):
                if value:
                    out[i // 8] |= 1 << (i % 8)
            return bytes(out)
        case Type.BOOLEAN:
            return bytes(1 if v else 0 for v in values)
        case Type.INT32:
            return b''.join(struct.pack('<i', v) for v in values)
        case Type.INT64:
            return b''.join(struct.pack('<q', v) for v in values)
        case Type.FLOAT:
            return b''.join(struct.pack('<f', v) for v in values)
        case Type.DOUBLE:
            return b''.join(struct.pack('<d', v) for v in values)
        case Type.BYTE_ARRAY:
            return b''.join(struct.pack('<I', len(v)) + v for v in values)
        case _:
            return b''.join(values)


def rle(values: list[int], bit_width: int) -> bytes:
    """RLE/bit-packing hybrid using RLE runs only."""
    width = (bit_width + 7) // 8
    out = bytearray()
    for value, group in itertools.groupby(values):
        out += uvarint(len(list(group)) << 1)
        out += value.to_bytes(width, 'little')
    return bytes(out)


def delta_binary_packed(
    values: list[int],
    block_size: int = 128,
    mini_blocks: int = 4,
) -> bytes:
    out = bytearray()
    out += uvarint(block_size) + uvarint(mini_blocks) + uvarint(len(values))
    out += zigzag(values[0] if values else 0)
    deltas = [b - a for a, b in itertools.pairwise(values)]
    per_mini = block_size // mini_blocks
    for start in range(0, len(deltas), block_size):
        block = deltas[start : start + block_size]
        min_delta = min(block)
        adjusted = [d - min_delta for d in block]
        out += zigzag(min_delta)
        minis = [adjusted[i : i + per_mini] for i in range(0, block_size, per_mini)]
        widths = [max(m).bit_length() if m else 0 for m in minis]
        out += bytes(widths)
        for mini, width in zip(minis, widths, strict=True):
            if not mini:
                continue
            packed = 0
            for i, value in enumerate(mini):
                packed |= value << (i * width)
            out += packed.to_bytes(per_mini * width // 8, 'little')
    return bytes(out)


def delta_length_byte_array(values: list[bytes]) -> bytes:
    return delta_binary_packed([len(v) for v in values]) + b''.join(values)


def delta_byte_array(values: list[bytes]) -> bytes:
    prefixes = []
    suffixes = []
    previous = b''
    for value in values:
        common = 0
        while (
            common < min(len(previous), len(value))
            and previous[common] == value[common]
        ):
            common += 1
        prefixes.append(common)
        suffixes.append(value[common:])
        previous = value
    return delta_binary_packed(prefixes) + delta_length_byte_array(suffixes)


def compress(data: bytes, codec: Compression) -> bytes:
    match codec:
        case Compression.UNCOMPRESSED:
            return data
        case Compression.GZIP:
            return gzip.compress(data)
        case Compression.SNAPPY:
            import snappy

            return snappy.compress(data)
        case Compression.ZSTD:
            import zstandard

            return zstandard.ZstdCompressor().compress(data)
        case Compression.LZ4:
            import lz4.frame

            return lz4.frame.compress(data)
        case _:
            raise ValueError(f'cannot compress with {codec}')


# --- file layout ---


@dataclass
class Stats:
    min_value: bytes | None = None
    max_value: bytes | None = None
    null_count: int | None = None
    distinct_count: int | None = None
    min: bytes | None = None
    max: bytes | None = None

    def fields(self) -> Fields:
        return [
            (1, BINARY, self.max),
            (2, BINARY, self.min),
            (3, I64, self.null_count),
            (4, I64, self.distinct_count),
            (5, BINARY, self.max_value),
            (6, BINARY, self.min_value),
        ]


@dataclass
class Node:
    """A schema element; a node without a physical type is a group."""

    name: str
    physical_type: Type | None = None
    repetition: Repetition | None = Repetition.REQUIRED
    children: list[Node] = field(default_factory=list)
    type_length: int | None = None
    converted_type: ConvertedType | None = None
    scale: int | None = None
    precision: int | None = None
    logical_type: Fields | None = None

    def flatten(self) -> list[Node]:
        nodes = [self]
        for child in self.children:
            nodes.extend(child.flatten())
        return nodes

    def fields(self) -> Fields:
        return [
            (1, I32, self.physical_type),
            (2, I32, self.type_length),
            (3, I32, self.repetition),
            (4, BINARY, string(self.name)),
            (5, I32, len(self.children) if self.physical_type is None else None),
            (6, I32, self.converted_type),
            (7, I32, self.scale),
            (8, I32, self.precision),
            (10, STRUCT, self.logical_type),
        ]


def root(*children: Node) -> Node:
    return Node('schema', repetition=None, children=list(children))


def levels_for(schema: Node, path: list[str]) -> tuple[int, int]:
    max_definition = max_repetition = 0
    node = schema
    for name in path:
        node = next(child for child in node.children if child.name == name)
        if node.repetition == Repetition.OPTIONAL:
            max_definition += 1
        elif node.repetition == Repetition.REPEATED:
            max_definition += 1
            max_repetition += 1
    return max_definition, max_repetition


@dataclass
class Page:
    """
    One data page.

    ``values`` are the non-null values. Dictionary-encoded chunks map them to
    indices; ``encoded`` overrides the value section entirely.
    """

    values: list = field(default_factory=list)
    definition_levels: list[int] | None = None
    repetition_levels: list[int] | None = None
    v2: bool = False
    encoding: Encoding | None = None
    encoded: bytes | None = None
    statistics: Stats | None = None
    page_type: PageType | None = None
    crc: int | None = None

    @property
    def num_values(self) -> int:
        if self.definition_levels is not None:
            return len(self.definition_levels)
        if self.repetition_levels is not None:
            return len(self.repetition_levels)
        return len(self.values)


@dataclass
class Chunk:
    path: list[str]
    physical_type: Type
    pages: list[Page]
    codec: Compression = Compression.UNCOMPRESSED
    dictionary: list | None = None
    statistics: Stats | None = None
    num_values: int | None = None


def _page_header(
    page_type: PageType,
    uncompressed: int,
    compressed: int,
    sub_header_id: int | None,
    sub_header: Fields | None,
    crc: int | None = None,
) -> bytes:
    fields: Fields = [
        (1, I32, page_type),
        (2, I32, uncompressed),
        (3, I32, compressed),
        (4, I32, crc),
    ]
    if sub_header_id is not None:
        fields.append((sub_header_id, STRUCT, sub_header))
    return encode_struct(fields)


def dictionary_page(chunk: Chunk) -> bytes:
    assert chunk.dictionary is not None
    raw = plain(chunk.physical_type, chunk.dictionary, bitpack_booleans=False)
    body = compress(raw, chunk.codec)
    header = _page_header(
        PageType.DICTIONARY_PAGE,
        len(raw),
        len(body),
        7,
        [(1, I32, len(chunk.dictionary)), (2, I32, Encoding.PLAIN_DICTIONARY)],
    )
    return header + body


def _value_section(chunk: Chunk, page: Page) -> tuple[Encoding, bytes]:
    if page.encoded is not None:
        return page.encoding or Encoding.PLAIN, page.encoded
    if chunk.dictionary is not None:
        bit_width = max(1, (len(chunk.dictionary) - 1).bit_length())
        indices = [chunk.dictionary.index(v) for v in page.values]
        return Encoding.RLE_DICTIONARY, bytes([bit_width]) + rle(indices, bit_width)
    return Encoding.PLAIN, plain(chunk.physical_type, page.values)


def data_page(
    chunk: Chunk,
    page: Page,
    max_definition: int,
    max_repetition: int,
) -> bytes:
    encoding, values = _value_section(chunk, page)
    repetition = b''
    definition = b''
    if max_repetition > 0 and page.repetition_levels is not None:
        repetition = rle(page.repetition_levels, max_repetition.bit_length())
    if max_definition > 0 and page.definition_levels is not None:
        definition = rle(page.definition_levels, max_definition.bit_length())

    if page.v2:
        compressed_values = compress(values, chunk.codec)
        body = repetition + definition + compressed_values
        uncompressed = len(repetition) + len(definition) + len(values)
        num_nulls = (
            sum(1 for level in page.definition_levels if level < max_definition)
            if page.definition_levels is not None
            else 0
        )
        sub: Fields = [
            (1, I32, page.num_values),
            (2, I32, num_nulls),
            (3, I32, page.num_values),
            (4, I32, encoding),
            (5, I32, len(definition)),
            (6, I32, len(repetition)),
            (7, BOOL, chunk.codec != Compression.UNCOMPRESSED),
            (8, STRUCT, page.statistics.fields() if page.statistics else None),
        ]
        header = _page_header(
            page.page_type or PageType.DATA_PAGE_V2,
            uncompressed,
            len(body),
            8,
            sub,
            page.crc,
        )
        return header + body

    raw = b''
    if repetition:
        raw += struct.pack('<I', len(repetition)) + repetition
    if definition:
        raw += struct.pack('<I', len(definition)) + definition
    raw += values
    body = compress(raw, chunk.codec)
    sub = [
        (1, I32, page.num_values),
        (2, I32, encoding),
        (3, I32, Encoding.RLE),
        (4, I32, Encoding.RLE),
        (5, STRUCT, page.statistics.fields() if page.statistics else None),
    ]
    header = _page_header(
        page.page_type or PageType.DATA_PAGE,
        len(raw),
        len(body),
        5,
        sub,
        page.crc,
    )
    return header + body


@dataclass
class Layout:
    """Offsets of everything written, for assertions."""

    page_offsets: list[list[list[int]]] = field(default_factory=list)
    metadata_offset: int = 0


def build_parquet(
    schema: Node,
    row_groups: list[list[Chunk]],
    num_rows: int | None = None,
    created_by: str | None = 'parquet-inspect test builder',
    key_value_metadata: dict[str, str] | None = None,
    layout: Layout | None = None,
) -> bytes:
    out = bytearray(b'PAR1')
    row_group_fields = []
    total_rows = 0
    for chunks in row_groups:
        chunk_fields = []
        rg_offsets = []
        rg_rows = 0
        rg_bytes = 0
        for chunk in chunks:
            max_definition, max_repetition = levels_for(schema, chunk.path)
            start = len(out)
            offsets = []
            dictionary_offset = None
            if chunk.dictionary is not None:
                dictionary_offset = len(out)
                offsets.append(len(out))
                out += dictionary_page(chunk)
            data_offset = len(out)
            for page in chunk.pages:
                offsets.append(len(out))
                out += data_page(chunk, page, max_definition, max_repetition)
            size = len(out) - start
            rg_offsets.append(offsets)
            rg_bytes += size
            num_values = (
                chunk.num_values
                if chunk.num_values is not None
                else sum(p.num_values for p in chunk.pages)
            )
            chunk_rows = sum(
                p.repetition_levels.count(0)
                if p.repetition_levels is not None
                else p.num_values
                for p in chunk.pages
            )
            rg_rows = max(rg_rows, chunk_rows)
            encodings = sorted(
                {Encoding.RLE}
                | {_value_section(chunk, p)[0] for p in chunk.pages}
                | ({Encoding.PLAIN_DICTIONARY} if chunk.dictionary else set()),
            )
            meta: Fields = [
                (1, I32, chunk.physical_type),
                (2, LIST, (I32, encodings)),
                (3, LIST, (BINARY, [string(p) for p in chunk.path])),
                (4, I32, chunk.codec),
                (5, I64, num_values),
                (6, I64, size),
                (7, I64, size),
                (9, I64, data_offset),
                (11, I64, dictionary_offset),
                (12, STRUCT, chunk.statistics.fields() if chunk.statistics else None),
            ]
            chunk_fields.append([(2, I64, start), (3, STRUCT, meta)])
        total_rows += rg_rows
        row_group_fields.append(
            [
                (1, LIST, (STRUCT, chunk_fields)),
                (2, I64, rg_bytes),
                (3, I64, rg_rows),
            ],
        )
        if layout is not None:
            layout.page_offsets.append(rg_offsets)

    key_values = None
    if key_value_metadata:
        key_values = (
            STRUCT,
            [
                [(1, BINARY, string(k)), (2, BINARY, string(v))]
                for k, v in key_value_metadata.items()
            ],
        )

    metadata = encode_struct(
        [
            (1, I32, 1),
            (2, LIST, (STRUCT, [node.fields() for node in schema.flatten()])),
            (3, I64, total_rows if num_rows is None else num_rows),
            (4, LIST, (STRUCT, row_group_fields)),
            (5, LIST, key_values),
            (6, BINARY, string(created_by) if created_by else None),
        ],
    )
    if layout is not None:
        layout.metadata_offset = len(out)
    out += metadata
    out += struct.pack('<I', len(metadata))
    out += b'PAR1'
    return bytes(out)
