"""
FileMetaData parsing: the entry point for decoding a Parquet footer.
"""

import logging

from parquet_inspect.types import FileMetaData

from ..thrift.enums import ThriftFieldType
from ..thrift.parser import ThriftCompactParser, ThriftStructParser
from .base import BaseParser
from .enums import FileMetadataFieldId
from .key_value import KeyValueParser
from .row_group import RowGroupParser
from .schema import SchemaParser

logger = logging.getLogger(__name__)


class MetadataParser(BaseParser):
    """
    Composes the struct parsers to decode a complete FileMetaData.

    Parsing progress can be followed by enabling debug logging for the
    ``parquet_inspect.parsers`` package.
    """

    def __init__(self, metadata_bytes: bytes) -> None:
        super().__init__(ThriftCompactParser(metadata_bytes))

    def parse(self) -> FileMetaData:
        logger.debug('Starting FileMetaData parsing...')

        struct_parser = ThriftStructParser(self.parser)
        metadata = FileMetaData(
            version=0,
            schema=[],
            num_rows=0,
            row_groups=[],
        )

        while True:
            field_type, field_id = struct_parser.read_field_header()
            if field_type == ThriftFieldType.STOP:
                break

            logger.debug('Processing field %s of type %s', field_id, field_type)

            if field_type == ThriftFieldType.LIST:
                match field_id:
                    case FileMetadataFieldId.SCHEMA:
                        metadata.schema = SchemaParser(self.parser).parse_schema_field()
                    case FileMetadataFieldId.ROW_GROUPS:
                        row_group_parser = RowGroupParser(self.parser)
                        metadata.row_groups = self.read_list(
                            row_group_parser.read_row_group,
                        )
                        logger.debug('  Parsed %d row groups', len(metadata.row_groups))
                    case FileMetadataFieldId.KEY_VALUE_METADATA:
                        metadata.key_value_metadata = KeyValueParser(
                            self.parser,
                        ).read_key_value_list()
                    case _:
                        logger.debug('  Skipping unknown list field %s', field_id)
                        struct_parser.skip_field(field_type)
                continue

            value = struct_parser.read_value(field_type)
            if value is None:
                continue

            match field_id:
                case FileMetadataFieldId.VERSION:
                    metadata.version = value
                case FileMetadataFieldId.NUM_ROWS:
                    metadata.num_rows = value
                case FileMetadataFieldId.CREATED_BY:
                    metadata.created_by = value.decode('utf-8', errors='replace')

        logger.debug(
            'FileMetaData parsed: version=%d, %d rows, %d schema elements',
            metadata.version,
            metadata.num_rows,
            len(metadata.schema),
        )
        return metadata
