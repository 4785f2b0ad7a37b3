"""
Records returned by ParquetInspector queries.

Every record is a frozen pydantic model; ``model_dump(mode='json')`` gives a
plain structure suitable for JSON output.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, computed_field

_SIZE_UNITS = ('KB', 'MB', 'GB', 'TB', 'PB', 'EB')


def format_bytes(size: int) -> str:
    """Human-readable byte count: ``512 B``, ``1.5 KB``, ``2.0 MB``."""
    if size < 1024:
        return f'{size} B'
    value = float(size)
    unit = _SIZE_UNITS[0]
    for unit in _SIZE_UNITS:
        value /= 1024
        if value < 1024:
            break
    return f'{value:.1f} {unit}'


def compression_ratio(uncompressed: int, compressed: int) -> float:
    if compressed <= 0:
        return 0.0
    return uncompressed / compressed


def enum_name(value: IntEnum | int | None) -> str | None:
    """Name of an enum member, or ``UNKNOWN(n)`` for a value we do not know."""
    if value is None:
        return None
    if isinstance(value, IntEnum):
        return value.name
    return f'UNKNOWN({value})'


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True)


class _SizedRecord(_Record):
    compressed_size: int
    uncompressed_size: int

    @computed_field
    @property
    def compression_ratio(self) -> float:
        return compression_ratio(self.uncompressed_size, self.compressed_size)

    @computed_field
    @property
    def compressed_size_display(self) -> str:
        return format_bytes(self.compressed_size)

    @computed_field
    @property
    def uncompressed_size_display(self) -> str:
        return format_bytes(self.uncompressed_size)


class FileInfo(_SizedRecord):
    version: int
    num_row_groups: int
    num_rows: int
    num_columns: int
    created_by: str | None = None
    key_value_metadata: dict[str, str] = {}


class RowGroupInfo(_SizedRecord):
    index: int
    num_rows: int
    num_columns: int


class StatisticsSummary(_Record):
    """Formatted min/max plus counts; ``None`` where the writer left a gap."""

    min: str | None = None
    max: str | None = None
    null_count: int | None = None
    distinct_count: int | None = None


class ColumnChunkInfo(_SizedRecord):
    index: int
    path: list[str]
    physical_type: str
    logical_type: str
    converted_type: str
    codec: str
    num_values: int
    encodings: list[str]
    data_page_offset: int
    dictionary_page_offset: int | None = None
    statistics: StatisticsSummary | None = None

    @computed_field
    @property
    def name(self) -> str:
        return '.'.join(self.path)


class PageMetadata(_SizedRecord):
    index: int
    offset: int
    page_type: str
    header_size: int
    num_values: int
    encoding: str | None = None
    definition_level_encoding: str | None = None
    repetition_level_encoding: str | None = None
    statistics: StatisticsSummary | None = None
    has_crc: bool = False

    @property
    def next_offset(self) -> int:
        return self.offset + self.header_size + self.compressed_size


class PageContent(_Record):
    """
    Decoded values of one page.

    ``values`` holds the raw scalars (``None`` for nulls) and ``formatted``
    the matching display strings.
    """

    model_config = ConfigDict(frozen=True, ser_json_bytes='base64')

    row_group: int
    column: int
    page: int
    page_type: str
    physical_type: str
    encoding: str | None
    values: list[Any]
    formatted: list[str]
    definition_levels: list[int] = []
    repetition_levels: list[int] = []
