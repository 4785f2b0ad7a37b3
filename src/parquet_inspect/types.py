"""
Raw Parquet footer and page-header structures.

These mirror the Thrift structs in parquet.thrift. The struct parsers fill
them in field by field; once a parser returns, nothing mutates them again.
Enum-typed fields keep the raw ``int`` when a writer used a value this
library does not know, so the decision about what to do with it is left to
the code that needs it.
"""

from dataclasses import dataclass, field

from .enums import (
    Compression,
    ConvertedType,
    Encoding,
    PageType,
    Repetition,
    Type,
)
from .logical import LogicalTypeInfoUnion


@dataclass
class SchemaElement:
    name: str
    type: Type | int | None = None
    type_length: int | None = None
    repetition: Repetition | None = None
    num_children: int | None = None
    converted_type: ConvertedType | None = None
    scale: int | None = None
    precision: int | None = None
    field_id: int | None = None
    logical_type: LogicalTypeInfoUnion | None = None

    @property
    def is_leaf(self) -> bool:
        return self.type is not None

    @property
    def child_count(self) -> int:
        return self.num_children or 0


@dataclass
class Statistics:
    """
    Column or page statistics as stored, before any decoding.

    ``min``/``max`` are the deprecated fields written by older writers with
    signed byte-wise ordering; ``min_value``/``max_value`` replace them.
    """

    max: bytes | None = None
    min: bytes | None = None
    null_count: int | None = None
    distinct_count: int | None = None
    max_value: bytes | None = None
    min_value: bytes | None = None
    is_max_value_exact: bool | None = None
    is_min_value_exact: bool | None = None

    @property
    def effective_min(self) -> bytes:
        return self.min_value or self.min or b''

    @property
    def effective_max(self) -> bytes:
        return self.max_value or self.max or b''


@dataclass
class ColumnMetaData:
    type: Type | int
    encodings: list[Encoding | int]
    path_in_schema: list[str]
    codec: Compression | int
    num_values: int
    total_uncompressed_size: int
    total_compressed_size: int
    data_page_offset: int
    index_page_offset: int | None = None
    dictionary_page_offset: int | None = None
    statistics: Statistics | None = None
    key_value_metadata: dict[str, str] = field(default_factory=dict)

    @property
    def start_offset(self) -> int:
        """Offset of the first page: the dictionary page when there is one."""
        if self.dictionary_page_offset is not None:
            return self.dictionary_page_offset
        return self.data_page_offset

    @property
    def dotted_path(self) -> str:
        return '.'.join(self.path_in_schema)


@dataclass
class ColumnChunk:
    file_offset: int
    meta_data: ColumnMetaData | None = None
    file_path: str | None = None
    offset_index_offset: int | None = None
    offset_index_length: int | None = None
    column_index_offset: int | None = None
    column_index_length: int | None = None


@dataclass
class RowGroup:
    columns: list[ColumnChunk]
    total_byte_size: int
    num_rows: int
    file_offset: int | None = None
    total_compressed_size: int | None = None
    ordinal: int | None = None

    @property
    def compressed_size(self) -> int:
        """Declared compressed size, or the sum over the column chunks."""
        if self.total_compressed_size is not None:
            return self.total_compressed_size
        return sum(
            col.meta_data.total_compressed_size
            for col in self.columns
            if col.meta_data is not None
        )


@dataclass
class FileMetaData:
    version: int
    schema: list[SchemaElement]
    num_rows: int
    row_groups: list[RowGroup]
    created_by: str | None = None
    key_value_metadata: dict[str, str] = field(default_factory=dict)

    @property
    def leaf_column_count(self) -> int:
        return sum(1 for element in self.schema if element.is_leaf)


@dataclass
class DataPageHeader:
    num_values: int
    encoding: Encoding | int
    definition_level_encoding: Encoding | int
    repetition_level_encoding: Encoding | int
    statistics: Statistics | None = None


@dataclass
class DataPageHeaderV2:
    num_values: int
    num_nulls: int
    num_rows: int
    encoding: Encoding | int
    definition_levels_byte_length: int
    repetition_levels_byte_length: int
    is_compressed: bool = True
    statistics: Statistics | None = None


@dataclass
class DictionaryPageHeader:
    num_values: int
    encoding: Encoding | int
    is_sorted: bool | None = None


@dataclass
class PageHeader:
    type: PageType | int
    uncompressed_page_size: int
    compressed_page_size: int
    crc: int | None = None
    data_page_header: DataPageHeader | None = None
    index_page_header: bool = False
    dictionary_page_header: DictionaryPageHeader | None = None
    data_page_header_v2: DataPageHeaderV2 | None = None

    @property
    def data_value_count(self) -> int:
        """Values this page contributes to its column chunk's total."""
        if self.type == PageType.DATA_PAGE and self.data_page_header is not None:
            return self.data_page_header.num_values
        if self.type == PageType.DATA_PAGE_V2 and self.data_page_header_v2 is not None:
            return self.data_page_header_v2.num_values
        return 0
