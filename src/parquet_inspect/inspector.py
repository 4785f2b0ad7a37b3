"""
ParquetInspector: the read-only query interface.

The footer is parsed once when the inspector is created. Every later query
reads pages through its own cursor, so a page walk in progress is never
disturbed by another query.
"""

from __future__ import annotations

import logging
import os
import struct
import threading

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from io import SEEK_END
from pathlib import Path

from .constants import (
    FOOTER_SIZE,
    MAX_PAGES_PER_CHUNK,
    MIN_FILE_SIZE,
    PAGE_SCAN_SLACK,
    PARQUET_MAGIC,
)
from .enums import Encoding, PageType, Repetition
from .exceptions import (
    ColumnIndexError,
    PageIndexError,
    PageTypeError,
    ParquetDataError,
    ParquetFormatError,
    ParquetIOError,
    RowGroupIndexError,
)
from .models import (
    ColumnChunkInfo,
    FileInfo,
    PageContent,
    PageMetadata,
    RowGroupInfo,
    enum_name,
)
from .pages import LocatedPage, describe_page, enumerate_pages, scan_pages
from .parsers.logical_types import (
    describe_converted_type,
    describe_logical_type,
    format_cell_value,
)
from .parsers.page_content import (
    DataPageParser,
    DictionaryPageParser,
    DictType,
    read_payload,
)
from .parsers.parquet.metadata import MetadataParser
from .protocols import ReadableSeekable
from .schema_path import find_schema_element, resolve_schema_lineage
from .statistics import extract_statistics
from .types import ColumnMetaData, FileMetaData, RowGroup, SchemaElement
from .util.http_file import HttpFile

logger = logging.getLogger(__name__)

_DICTIONARY_ENCODINGS = frozenset({Encoding.PLAIN_DICTIONARY, Encoding.RLE_DICTIONARY})


def read_file_metadata(reader: ReadableSeekable) -> FileMetaData:
    """
    Locate and parse the footer of a Parquet file.

    Raises:
        ParquetFormatError: If the magic bytes or the footer length are wrong
        ThriftParsingError: If the footer metadata cannot be decoded
    """
    reader.seek(0, SEEK_END)
    file_size = reader.tell()
    if file_size < MIN_FILE_SIZE:
        raise ParquetFormatError(
            f'File is too small to be Parquet: {file_size} bytes',
        )

    reader.seek(0)
    magic_header = reader.read(len(PARQUET_MAGIC))
    reader.seek(file_size - FOOTER_SIZE)
    footer = reader.read(FOOTER_SIZE)
    if magic_header != PARQUET_MAGIC or footer[4:] != PARQUET_MAGIC:
        raise ParquetFormatError(
            f'Invalid Parquet magic bytes: expected {PARQUET_MAGIC!r}, '
            f'got {magic_header!r} and {footer[4:]!r}',
        )

    (metadata_length,) = struct.unpack('<I', footer[:4])
    metadata_start = file_size - FOOTER_SIZE - metadata_length
    if metadata_start < len(PARQUET_MAGIC):
        raise ParquetFormatError(
            f'Footer length {metadata_length} exceeds the {file_size}-byte file',
        )

    reader.seek(metadata_start)
    metadata_bytes = reader.read(metadata_length)
    if len(metadata_bytes) != metadata_length:
        raise ParquetFormatError('Could not read complete footer metadata')

    logger.debug(
        'Footer metadata: %d bytes at offset %d',
        metadata_length,
        metadata_start,
    )
    return MetadataParser(metadata_bytes).parse()


def definition_and_repetition_levels(lineage: list[SchemaElement]) -> tuple[int, int]:
    """Maximum definition and repetition levels along a column's lineage."""
    max_definition = sum(
        1
        for element in lineage
        if element.repetition not in (None, Repetition.REQUIRED)
    )
    max_repetition = sum(
        1 for element in lineage if element.repetition == Repetition.REPEATED
    )
    return max_definition, max_repetition


class ParquetInspector:
    """
    Read-only view of a Parquet file's row groups, column chunks and pages.

    ``source`` is a local path, an ``http(s)://`` URL, or an open binary file
    object. Paths and URLs are reopened for every query; a caller-supplied
    file object cannot be, so queries on it are serialized behind a lock.
    The caller keeps ownership of a supplied file object and closes it.
    """

    def __init__(
        self,
        source: str | os.PathLike[str] | ReadableSeekable,
        *,
        max_pages: int = MAX_PAGES_PER_CHUNK,
        scan_slack: int = PAGE_SCAN_SLACK,
    ) -> None:
        self.max_pages = max_pages
        self.scan_slack = scan_slack
        self._opener: Callable[[], ReadableSeekable] | None = None
        self._file: ReadableSeekable | None = None
        self._lock = threading.RLock()

        if isinstance(source, str) and source.startswith(('http://', 'https://')):
            self.source_name = source
            with HttpFile(source) as probe:
                size = probe.size
            self._opener = lambda: HttpFile(source, size=size)
        elif isinstance(source, str | os.PathLike):
            path = Path(source)
            self.source_name = str(path)
            self._opener = lambda: path.open('rb')
        else:
            self.source_name = repr(source)
            self._file = source

        with self._cursor() as reader:
            self._metadata = read_file_metadata(reader)

        logger.debug(
            'Opened %s: version %d, %d row groups, %d rows',
            self.source_name,
            self._metadata.version,
            len(self._metadata.row_groups),
            self._metadata.num_rows,
        )

    @contextmanager
    def _cursor(self) -> Iterator[ReadableSeekable]:
        """Yield a reader that no other operation is using."""
        if self._opener is not None:
            reader = self._opener()
            try:
                yield reader
            finally:
                reader.close()  # type: ignore[attr-defined]
        elif self._file is not None:
            with self._lock:
                yield self._file
        else:
            raise ParquetIOError('Inspector has no byte source', operation='open')

    @property
    def metadata(self) -> FileMetaData:
        return self._metadata

    @property
    def schema(self) -> list[SchemaElement]:
        return self._metadata.schema

    # --- lookups ---

    def _row_group(self, rg: int) -> RowGroup:
        row_groups = self._metadata.row_groups
        if not 0 <= rg < len(row_groups):
            raise RowGroupIndexError(rg, len(row_groups))
        return row_groups[rg]

    def _column(self, rg: int, col: int) -> ColumnMetaData:
        columns = self._row_group(rg).columns
        if not 0 <= col < len(columns):
            raise ColumnIndexError(col, len(columns))
        meta = columns[col].meta_data
        if meta is None:
            raise ParquetFormatError(
                f'Column {col} of row group {rg} has no column metadata',
            )
        return meta

    def _element(self, column: ColumnMetaData) -> SchemaElement | None:
        return find_schema_element(self.schema, column.path_in_schema)

    def _pages(
        self, reader: ReadableSeekable, column: ColumnMetaData,
    ) -> list[LocatedPage]:
        return scan_pages(reader, column, self.max_pages, self.scan_slack)

    @staticmethod
    def _pick_page(pages: list[LocatedPage], page: int) -> LocatedPage:
        if not 0 <= page < len(pages):
            raise PageIndexError(page, len(pages))
        return pages[page]

    # --- queries ---

    def file_info(self) -> FileInfo:
        meta = self._metadata
        return FileInfo(
            version=meta.version,
            num_row_groups=len(meta.row_groups),
            num_rows=meta.num_rows,
            num_columns=meta.leaf_column_count,
            compressed_size=sum(rg.compressed_size for rg in meta.row_groups),
            uncompressed_size=sum(rg.total_byte_size for rg in meta.row_groups),
            created_by=meta.created_by,
            key_value_metadata=meta.key_value_metadata,
        )

    def list_row_groups(self) -> list[RowGroupInfo]:
        return [self.get_row_group(i) for i in range(len(self._metadata.row_groups))]

    def get_row_group(self, rg: int) -> RowGroupInfo:
        row_group = self._row_group(rg)
        return RowGroupInfo(
            index=rg,
            num_rows=row_group.num_rows,
            num_columns=len(row_group.columns),
            compressed_size=row_group.compressed_size,
            uncompressed_size=row_group.total_byte_size,
        )

    def list_columns(self, rg: int) -> list[ColumnChunkInfo]:
        return [
            self.get_column(rg, col) for col in range(len(self._row_group(rg).columns))
        ]

    def get_column(self, rg: int, col: int) -> ColumnChunkInfo:
        column = self._column(rg, col)
        element = self._element(column)
        return ColumnChunkInfo(
            index=col,
            path=column.path_in_schema,
            physical_type=enum_name(column.type) or '',
            logical_type=describe_logical_type(element),
            converted_type=describe_converted_type(element),
            codec=enum_name(column.codec) or '',
            num_values=column.num_values,
            encodings=[enum_name(e) or '' for e in column.encodings],
            data_page_offset=column.data_page_offset,
            dictionary_page_offset=column.dictionary_page_offset,
            compressed_size=column.total_compressed_size,
            uncompressed_size=column.total_uncompressed_size,
            statistics=extract_statistics(column.statistics, column, element),
        )

    def list_pages(self, rg: int, col: int) -> list[PageMetadata]:
        column = self._column(rg, col)
        element = self._element(column)
        with self._cursor() as reader:
            return enumerate_pages(
                reader,
                column,
                element,
                self.max_pages,
                self.scan_slack,
            )

    def get_page(self, rg: int, col: int, page: int) -> PageMetadata:
        column = self._column(rg, col)
        element = self._element(column)
        with self._cursor() as reader:
            located = self._pick_page(self._pages(reader, column), page)
        return describe_page(located, column, element)

    def get_page_content(self, rg: int, col: int, page: int) -> PageContent:
        """
        Decode the values of one page.

        Raises:
            PageIndexError: If ``page`` is not one of the chunk's pages
            PageTypeError: If the page is an INDEX page
            ParquetDataError: If the codec, encoding or payload is unsupported
                or corrupt
            ParquetIOError: If the page payload cannot be read
        """
        column = self._column(rg, col)
        lineage = resolve_schema_lineage(self.schema, column.path_in_schema)
        element = lineage[-1] if lineage else None
        type_length = element.type_length if element is not None else None

        with self._cursor() as reader:
            pages = self._pages(reader, column)
            target = self._pick_page(pages, page)
            header = target.header
            payload = read_payload(reader, target.payload_offset, header)

            definition_levels: list[int] = []
            repetition_levels: list[int] = []
            match header.type:
                case PageType.INDEX_PAGE:
                    raise PageTypeError(
                        f'Page {page} is an INDEX page and carries no values',
                    )
                case PageType.DICTIONARY_PAGE:
                    encoding = (
                        header.dictionary_page_header.encoding
                        if header.dictionary_page_header is not None
                        else None
                    )
                    values = list(
                        DictionaryPageParser().parse_content(
                            payload,
                            header,
                            column.type,
                            column.codec,
                            type_length,
                        ),
                    )
                case PageType.DATA_PAGE | PageType.DATA_PAGE_V2:
                    encoding = self._data_page_encoding(target)
                    dictionary = None
                    if encoding in _DICTIONARY_ENCODINGS:
                        dictionary = self._read_dictionary(
                            reader,
                            pages,
                            column,
                            type_length,
                        )
                    max_definition, max_repetition = (
                        definition_and_repetition_levels(lineage)
                    )
                    decoded = DataPageParser().parse_content(
                        payload,
                        header,
                        column.type,
                        column.codec,
                        max_definition,
                        max_repetition,
                        dictionary,
                        type_length,
                    )
                    values = decoded.values
                    definition_levels = decoded.definition_levels
                    repetition_levels = decoded.repetition_levels
                case _:
                    raise PageTypeError(
                        f'Page {page} has unknown page type {header.type}',
                    )

        return PageContent(
            row_group=rg,
            column=col,
            page=page,
            page_type=enum_name(header.type) or '',
            physical_type=enum_name(column.type) or '',
            encoding=enum_name(encoding),
            values=values,
            formatted=[format_cell_value(v, column.type, element) for v in values],
            definition_levels=definition_levels,
            repetition_levels=repetition_levels,
        )

    @staticmethod
    def _data_page_encoding(page: LocatedPage) -> Encoding | int:
        header = page.header
        if header.data_page_header is not None:
            return header.data_page_header.encoding
        if header.data_page_header_v2 is not None:
            return header.data_page_header_v2.encoding
        raise ParquetDataError(f'Data page {page.index} is missing its data header')

    @staticmethod
    def _read_dictionary(
        reader: ReadableSeekable,
        pages: list[LocatedPage],
        column: ColumnMetaData,
        type_length: int | None,
    ) -> DictType:
        for page in pages:
            if page.header.type == PageType.DICTIONARY_PAGE:
                payload = read_payload(reader, page.payload_offset, page.header)
                return DictionaryPageParser().parse_content(
                    payload,
                    page.header,
                    column.type,
                    column.codec,
                    type_length,
                )
        raise ParquetDataError(
            f'Column {column.dotted_path} is dictionary encoded but has no '
            'dictionary page',
        )

