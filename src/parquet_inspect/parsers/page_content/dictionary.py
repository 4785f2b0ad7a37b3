"""
Dictionary page content parsing.

A dictionary page holds the distinct values of a column chunk, PLAIN
encoded; data pages then refer to them by index.
"""

import logging
from typing import TypeAlias

from parquet_inspect.enums import Compression, Encoding, Type
from parquet_inspect.exceptions import ParquetDataError, ParquetIOError
from parquet_inspect.protocols import ReadableSeekable
from parquet_inspect.types import PageHeader

from ..physical_types import PlainValue, decode_plain_values
from . import compressors

logger = logging.getLogger(__name__)

DictType: TypeAlias = list[PlainValue]


def read_payload(
    reader: ReadableSeekable,
    offset: int,
    header: PageHeader,
) -> bytes:
    """
    Read the ``compressed_page_size`` bytes of a page payload.

    Raises:
        ParquetIOError: If the reader cannot seek to ``offset`` or the
            source ends before the payload does
    """
    try:
        reader.seek(offset)
    except (OSError, ValueError) as e:
        raise ParquetIOError(
            f'Cannot seek to page content: {e}',
            offset=offset,
            operation='seek',
        ) from e

    data = reader.read(header.compressed_page_size)
    if len(data) != header.compressed_page_size:
        raise ParquetIOError(
            f'Could not read expected {header.compressed_page_size} bytes '
            f'of page content, got {len(data)} bytes',
            offset=offset,
            operation='read',
        )
    return data


class DictionaryPageParser:
    """Parser for dictionary page content."""

    def parse_content(
        self,
        payload: bytes,
        header: PageHeader,
        physical_type: Type | int,
        codec: Compression | int,
        type_length: int | None = None,
    ) -> DictType:
        """
        Decode a dictionary page.

        Args:
            payload: The page's bytes as stored in the file
            header: Its page header
            physical_type: Physical type of the column
            codec: Compression codec of the column chunk
            type_length: Value width for FIXED_LEN_BYTE_ARRAY columns

        Returns:
            The dictionary values in index order
        """
        dictionary_header = header.dictionary_page_header
        if dictionary_header is None:
            raise ParquetDataError('Dictionary page is missing its dictionary header')

        if dictionary_header.encoding not in (
            Encoding.PLAIN,
            Encoding.PLAIN_DICTIONARY,
        ):
            raise ParquetDataError(
                f'Unsupported dictionary encoding: {dictionary_header.encoding}',
            )

        data = compressors.decompress(payload, codec, header.uncompressed_page_size)
        if len(data) != header.uncompressed_page_size:
            logger.warning(
                "Decompressed dictionary size %d doesn't match expected %d",
                len(data),
                header.uncompressed_page_size,
            )

        values = decode_plain_values(
            data,
            physical_type,
            dictionary_header.num_values,
            type_length,
        )
        if len(values) < dictionary_header.num_values:
            logger.warning(
                'Dictionary page declares %d values, decoded %d',
                dictionary_header.num_values,
                len(values),
            )
        return values
