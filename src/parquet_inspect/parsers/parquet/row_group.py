"""
Row group parsing.
"""

import logging

from parquet_inspect.types import RowGroup

from ..thrift.enums import ThriftFieldType
from ..thrift.parser import ThriftStructParser
from .base import BaseParser
from .column import ColumnParser
from .enums import RowGroupFieldId

logger = logging.getLogger(__name__)


class RowGroupParser(BaseParser):
    def read_row_group(self) -> RowGroup:
        """
        Read a RowGroup struct.

        ``total_compressed_size`` and ``ordinal`` were added to the format
        later and are missing from files written by older tools.
        """
        struct_parser = ThriftStructParser(self.parser)
        rg = RowGroup(columns=[], total_byte_size=0, num_rows=0)
        logger.debug('Reading row group')

        while True:
            field_type, field_id = struct_parser.read_field_header()
            if field_type == ThriftFieldType.STOP:
                break

            if field_type == ThriftFieldType.LIST:
                if field_id == RowGroupFieldId.COLUMNS:
                    column_parser = ColumnParser(self.parser)
                    rg.columns = self.read_list(column_parser.read_column_chunk)
                else:
                    struct_parser.skip_field(field_type)
                continue

            value = struct_parser.read_value(field_type)
            if value is None:
                continue

            match field_id:
                case RowGroupFieldId.TOTAL_BYTE_SIZE:
                    rg.total_byte_size = value
                case RowGroupFieldId.NUM_ROWS:
                    rg.num_rows = value
                case RowGroupFieldId.FILE_OFFSET:
                    rg.file_offset = value
                case RowGroupFieldId.TOTAL_COMPRESSED_SIZE:
                    rg.total_compressed_size = value
                case RowGroupFieldId.ORDINAL:
                    rg.ordinal = value

        logger.debug(
            'Read row group with %d columns, %d rows, %d bytes',
            len(rg.columns),
            rg.num_rows,
            rg.total_byte_size,
        )
        return rg
