"""
Column chunk and column metadata parsing.
"""

import logging

from parquet_inspect.enums import Compression, Encoding, Type
from parquet_inspect.types import ColumnChunk, ColumnMetaData

from ..thrift.enums import ThriftFieldType
from ..thrift.parser import ThriftStructParser
from .base import BaseParser
from .enums import ColumnChunkFieldId, ColumnMetadataFieldId
from .key_value import KeyValueParser
from .statistics import StatisticsParser

logger = logging.getLogger(__name__)


class ColumnParser(BaseParser):
    def read_column_chunk(self) -> ColumnChunk:
        """
        Read a ColumnChunk struct.

        ``file_path`` is only set when the chunk lives in another file;
        ``meta_data`` carries everything needed to find and decode its pages.
        """
        struct_parser = ThriftStructParser(self.parser)
        chunk = ColumnChunk(file_offset=0)
        logger.debug('Reading column chunk')

        while True:
            field_type, field_id = struct_parser.read_field_header()
            if field_type == ThriftFieldType.STOP:
                break

            if field_type == ThriftFieldType.STRUCT:
                if field_id == ColumnChunkFieldId.META_DATA:
                    chunk.meta_data = self.read_column_metadata()
                else:
                    struct_parser.skip_field(field_type)
                continue

            value = struct_parser.read_value(field_type)
            if value is None:
                continue

            match field_id:
                case ColumnChunkFieldId.FILE_PATH:
                    chunk.file_path = value.decode('utf-8', errors='replace')
                case ColumnChunkFieldId.FILE_OFFSET:
                    chunk.file_offset = value
                case ColumnChunkFieldId.OFFSET_INDEX_OFFSET:
                    chunk.offset_index_offset = value
                case ColumnChunkFieldId.OFFSET_INDEX_LENGTH:
                    chunk.offset_index_length = value
                case ColumnChunkFieldId.COLUMN_INDEX_OFFSET:
                    chunk.column_index_offset = value
                case ColumnChunkFieldId.COLUMN_INDEX_LENGTH:
                    chunk.column_index_length = value

        return chunk

    def read_column_metadata(self) -> ColumnMetaData:  # noqa: C901
        struct_parser = ThriftStructParser(self.parser)
        meta = ColumnMetaData(
            type=Type.BOOLEAN,
            encodings=[],
            path_in_schema=[],
            codec=Compression.UNCOMPRESSED,
            num_values=0,
            total_uncompressed_size=0,
            total_compressed_size=0,
            data_page_offset=0,
        )

        while True:
            field_type, field_id = struct_parser.read_field_header()
            if field_type == ThriftFieldType.STOP:
                break

            if field_type == ThriftFieldType.LIST:
                match field_id:
                    case ColumnMetadataFieldId.ENCODINGS:
                        meta.encodings = [
                            self.enum_or_int(Encoding, e)
                            for e in self.read_list(self.read_i32)
                        ]
                    case ColumnMetadataFieldId.PATH_IN_SCHEMA:
                        meta.path_in_schema = self.read_list(self.read_string)
                    case ColumnMetadataFieldId.KEY_VALUE_METADATA:
                        meta.key_value_metadata = KeyValueParser(
                            self.parser,
                        ).read_key_value_list()
                    case _:
                        struct_parser.skip_field(field_type)
                continue

            if field_type == ThriftFieldType.STRUCT:
                if field_id == ColumnMetadataFieldId.STATISTICS:
                    meta.statistics = StatisticsParser(self.parser).read_statistics()
                else:
                    struct_parser.skip_field(field_type)
                continue

            value = struct_parser.read_value(field_type)
            if value is None:
                continue

            match field_id:
                case ColumnMetadataFieldId.TYPE:
                    meta.type = self.enum_or_int(Type, value)
                case ColumnMetadataFieldId.CODEC:
                    meta.codec = self.enum_or_int(Compression, value)
                case ColumnMetadataFieldId.NUM_VALUES:
                    meta.num_values = value
                case ColumnMetadataFieldId.TOTAL_UNCOMPRESSED_SIZE:
                    meta.total_uncompressed_size = value
                case ColumnMetadataFieldId.TOTAL_COMPRESSED_SIZE:
                    meta.total_compressed_size = value
                case ColumnMetadataFieldId.DATA_PAGE_OFFSET:
                    meta.data_page_offset = value
                case ColumnMetadataFieldId.INDEX_PAGE_OFFSET:
                    meta.index_page_offset = value
                case ColumnMetadataFieldId.DICTIONARY_PAGE_OFFSET:
                    meta.dictionary_page_offset = value

        logger.debug(
            'Read column metadata: %s, %d values, codec=%s',
            meta.dotted_path,
            meta.num_values,
            meta.codec,
        )
        return meta
