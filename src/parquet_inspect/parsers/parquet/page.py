"""
Page header parsing.

Every page in a column chunk starts with a Thrift-encoded PageHeader; the
page payload follows immediately. The header's ``type`` says which of the
sub-headers is populated.
"""

import logging

from parquet_inspect.enums import Encoding, PageType
from parquet_inspect.types import (
    DataPageHeader,
    DataPageHeaderV2,
    DictionaryPageHeader,
    PageHeader,
)

from ..thrift.enums import ThriftFieldType
from ..thrift.parser import ThriftStructParser
from .base import BaseParser
from .enums import (
    DataPageHeaderFieldId,
    DataPageHeaderV2FieldId,
    DictionaryPageHeaderFieldId,
    PageHeaderFieldId,
)
from .statistics import StatisticsParser

logger = logging.getLogger(__name__)


class PageParser(BaseParser):
    def read_page_header(self) -> PageHeader:  # noqa: C901
        struct_parser = ThriftStructParser(self.parser)
        header = PageHeader(
            type=PageType.DATA_PAGE,
            uncompressed_page_size=0,
            compressed_page_size=0,
        )
        logger.debug('Reading page header')

        while True:
            field_type, field_id = struct_parser.read_field_header()
            if field_type == ThriftFieldType.STOP:
                break

            if field_type == ThriftFieldType.STRUCT:
                match field_id:
                    case PageHeaderFieldId.DATA_PAGE_HEADER:
                        header.data_page_header = self.read_data_page_header()
                    case PageHeaderFieldId.DICTIONARY_PAGE_HEADER:
                        header.dictionary_page_header = (
                            self.read_dictionary_page_header()
                        )
                    case PageHeaderFieldId.DATA_PAGE_HEADER_V2:
                        header.data_page_header_v2 = self.read_data_page_header_v2()
                    case PageHeaderFieldId.INDEX_PAGE_HEADER:
                        # IndexPageHeader has no fields
                        struct_parser.skip_field(field_type)
                        header.index_page_header = True
                    case _:
                        struct_parser.skip_field(field_type)
                continue

            value = struct_parser.read_value(field_type)
            if value is None:
                continue

            match field_id:
                case PageHeaderFieldId.TYPE:
                    header.type = self.enum_or_int(PageType, value)
                case PageHeaderFieldId.UNCOMPRESSED_PAGE_SIZE:
                    header.uncompressed_page_size = value
                case PageHeaderFieldId.COMPRESSED_PAGE_SIZE:
                    header.compressed_page_size = value
                case PageHeaderFieldId.CRC:
                    header.crc = value

        logger.debug(
            'Read page header: type=%s, compressed=%d bytes, uncompressed=%d bytes',
            header.type,
            header.compressed_page_size,
            header.uncompressed_page_size,
        )
        return header

    def read_data_page_header(self) -> DataPageHeader:
        struct_parser = ThriftStructParser(self.parser)
        header = DataPageHeader(
            num_values=0,
            encoding=Encoding.PLAIN,
            definition_level_encoding=Encoding.RLE,
            repetition_level_encoding=Encoding.RLE,
        )

        while True:
            field_type, field_id = struct_parser.read_field_header()
            if field_type == ThriftFieldType.STOP:
                break

            if field_type == ThriftFieldType.STRUCT:
                if field_id == DataPageHeaderFieldId.STATISTICS:
                    header.statistics = StatisticsParser(self.parser).read_statistics()
                else:
                    struct_parser.skip_field(field_type)
                continue

            value = struct_parser.read_value(field_type)
            if value is None:
                continue

            match field_id:
                case DataPageHeaderFieldId.NUM_VALUES:
                    header.num_values = value
                case DataPageHeaderFieldId.ENCODING:
                    header.encoding = self.enum_or_int(Encoding, value)
                case DataPageHeaderFieldId.DEFINITION_LEVEL_ENCODING:
                    header.definition_level_encoding = self.enum_or_int(
                        Encoding,
                        value,
                    )
                case DataPageHeaderFieldId.REPETITION_LEVEL_ENCODING:
                    header.repetition_level_encoding = self.enum_or_int(
                        Encoding,
                        value,
                    )

        logger.debug(
            'Read data page header: %d values, encoding=%s',
            header.num_values,
            header.encoding,
        )
        return header

    def read_data_page_header_v2(self) -> DataPageHeaderV2:  # noqa: C901
        """
        Read a DataPageHeaderV2 struct.

        V2 pages store repetition and definition levels uncompressed ahead of
        the values; ``is_compressed`` applies to the values section only and
        defaults to true when absent.
        """
        struct_parser = ThriftStructParser(self.parser)
        header = DataPageHeaderV2(
            num_values=0,
            num_nulls=0,
            num_rows=0,
            encoding=Encoding.PLAIN,
            definition_levels_byte_length=0,
            repetition_levels_byte_length=0,
            is_compressed=True,
        )

        while True:
            field_type, field_id = struct_parser.read_field_header()
            if field_type == ThriftFieldType.STOP:
                break

            if field_type == ThriftFieldType.STRUCT:
                if field_id == DataPageHeaderV2FieldId.STATISTICS:
                    header.statistics = StatisticsParser(self.parser).read_statistics()
                else:
                    struct_parser.skip_field(field_type)
                continue

            value = struct_parser.read_value(field_type)
            if value is None:
                continue

            match field_id:
                case DataPageHeaderV2FieldId.NUM_VALUES:
                    header.num_values = value
                case DataPageHeaderV2FieldId.NUM_NULLS:
                    header.num_nulls = value
                case DataPageHeaderV2FieldId.NUM_ROWS:
                    header.num_rows = value
                case DataPageHeaderV2FieldId.ENCODING:
                    header.encoding = self.enum_or_int(Encoding, value)
                case DataPageHeaderV2FieldId.DEFINITION_LEVELS_BYTE_LENGTH:
                    header.definition_levels_byte_length = value
                case DataPageHeaderV2FieldId.REPETITION_LEVELS_BYTE_LENGTH:
                    header.repetition_levels_byte_length = value
                case DataPageHeaderV2FieldId.IS_COMPRESSED:
                    header.is_compressed = bool(value)

        logger.debug(
            'Read data page header v2: %d values (%d nulls), %d rows, encoding=%s',
            header.num_values,
            header.num_nulls,
            header.num_rows,
            header.encoding,
        )
        return header

    def read_dictionary_page_header(self) -> DictionaryPageHeader:
        struct_parser = ThriftStructParser(self.parser)
        header = DictionaryPageHeader(
            num_values=0,
            encoding=Encoding.PLAIN,
        )

        while True:
            field_type, field_id = struct_parser.read_field_header()
            if field_type == ThriftFieldType.STOP:
                break

            value = struct_parser.read_value(field_type)
            if value is None:
                continue

            match field_id:
                case DictionaryPageHeaderFieldId.NUM_VALUES:
                    header.num_values = value
                case DictionaryPageHeaderFieldId.ENCODING:
                    header.encoding = self.enum_or_int(Encoding, value)
                case DictionaryPageHeaderFieldId.IS_SORTED:
                    header.is_sorted = bool(value)

        logger.debug(
            'Read dictionary page header: %d values, encoding=%s, sorted=%s',
            header.num_values,
            header.encoding,
            header.is_sorted,
        )
        return header
