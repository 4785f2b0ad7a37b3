"""
Locating and describing the pages of a column chunk.

Pages are found by walking the chunk: read a header, skip its payload, and
repeat. The offset index would avoid the walk but is optional and often
absent, while the walk works for every file.
"""

from __future__ import annotations

import logging

from dataclasses import dataclass

from .constants import MAX_PAGES_PER_CHUNK, PAGE_SCAN_SLACK
from .enums import PageType
from .exceptions import ParquetDecodeError, ParquetIOError
from .models import PageMetadata, enum_name
from .parsers.parquet.page import PageParser
from .parsers.thrift.parser import ThriftCompactParser
from .protocols import ReadableSeekable
from .statistics import extract_statistics
from .types import ColumnMetaData, PageHeader, SchemaElement

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocatedPage:
    """A page header together with where it sits in the file."""

    index: int
    offset: int
    header_size: int
    header: PageHeader

    @property
    def payload_offset(self) -> int:
        return self.offset + self.header_size

    @property
    def next_offset(self) -> int:
        return self.payload_offset + self.header.compressed_page_size


def read_page_header(
    reader: ReadableSeekable,
    offset: int,
) -> tuple[PageHeader, int]:
    """
    Decode the page header at ``offset``.

    Returns:
        The header and the number of bytes it occupied. The reader is left
        positioned at the first payload byte.

    Raises:
        ParquetIOError: If the reader cannot seek to ``offset``
        ThriftParsingError: If the header is truncated or malformed
    """
    try:
        reader.seek(offset)
    except (OSError, ValueError) as e:
        raise ParquetIOError(
            f'Cannot seek to page header: {e}',
            offset=offset,
            operation='seek',
        ) from e

    parser = ThriftCompactParser(reader)
    header = PageParser(parser).read_page_header()
    return header, parser.pos


def scan_pages(
    reader: ReadableSeekable,
    column: ColumnMetaData,
    max_pages: int = MAX_PAGES_PER_CHUNK,
    scan_slack: int = PAGE_SCAN_SLACK,
) -> list[LocatedPage]:
    """
    Walk a column chunk and return every page header found.

    The walk stops once the data pages account for the chunk's declared
    value count. It also stops, without raising, when a header cannot be
    read or when it has gone past ``max_pages`` pages or ``scan_slack``
    bytes beyond the chunk's declared end, so a corrupt chunk still shows
    the pages before the damage.
    """
    start = column.start_offset
    limit = start + column.total_compressed_size + scan_slack
    offset = start
    values_read = 0
    pages: list[LocatedPage] = []

    while values_read < column.num_values:
        if len(pages) >= max_pages:
            logger.warning(
                'Column %s: stopped after %d pages',
                column.dotted_path,
                max_pages,
            )
            break
        if offset > limit:
            logger.warning(
                'Column %s: page offset %d is past the chunk end, stopping',
                column.dotted_path,
                offset,
            )
            break

        try:
            header, header_size = read_page_header(reader, offset)
        except (ParquetDecodeError, OSError) as e:
            logger.debug(
                'Column %s: no readable page header at %d (%s)',
                column.dotted_path,
                offset,
                e,
            )
            break

        page = LocatedPage(
            index=len(pages),
            offset=offset,
            header_size=header_size,
            header=header,
        )
        pages.append(page)
        values_read += header.data_value_count
        offset = page.next_offset

    logger.debug(
        'Column %s: found %d pages, %d of %d values',
        column.dotted_path,
        len(pages),
        values_read,
        column.num_values,
    )
    return pages


def describe_page(
    page: LocatedPage,
    column: ColumnMetaData,
    element: SchemaElement | None,
) -> PageMetadata:
    header = page.header
    num_values = 0
    encoding = None
    definition_level_encoding = None
    repetition_level_encoding = None
    statistics = None

    match header.type:
        case PageType.DATA_PAGE if header.data_page_header is not None:
            sub = header.data_page_header
            num_values = sub.num_values
            encoding = enum_name(sub.encoding)
            definition_level_encoding = enum_name(sub.definition_level_encoding)
            repetition_level_encoding = enum_name(sub.repetition_level_encoding)
            statistics = sub.statistics
        case PageType.DATA_PAGE_V2 if header.data_page_header_v2 is not None:
            sub_v2 = header.data_page_header_v2
            num_values = sub_v2.num_values
            encoding = enum_name(sub_v2.encoding)
            statistics = sub_v2.statistics
        case PageType.DICTIONARY_PAGE if header.dictionary_page_header is not None:
            num_values = header.dictionary_page_header.num_values
            encoding = enum_name(header.dictionary_page_header.encoding)
        case _:
            pass

    return PageMetadata(
        index=page.index,
        offset=page.offset,
        page_type=enum_name(header.type) or '',
        header_size=page.header_size,
        compressed_size=header.compressed_page_size,
        uncompressed_size=header.uncompressed_page_size,
        num_values=num_values,
        encoding=encoding,
        definition_level_encoding=definition_level_encoding,
        repetition_level_encoding=repetition_level_encoding,
        statistics=(
            extract_statistics(statistics, column, element)
            if statistics is not None
            else None
        ),
        has_crc=header.crc is not None,
    )


def enumerate_pages(
    reader: ReadableSeekable,
    column: ColumnMetaData,
    element: SchemaElement | None,
    max_pages: int = MAX_PAGES_PER_CHUNK,
    scan_slack: int = PAGE_SCAN_SLACK,
) -> list[PageMetadata]:
    """List the pages of a column chunk in file order."""
    return [
        describe_page(page, column, element)
        for page in scan_pages(reader, column, max_pages, scan_slack)
    ]
