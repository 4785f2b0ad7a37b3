"""
Schema element parsing.

The footer stores the schema as a flat list in depth-first pre-order: the
root first, then each group followed by its children. The list is kept flat;
ancestry is reconstructed on demand from ``num_children`` by
``parquet_inspect.schema_path``.
"""

import logging

from parquet_inspect.constants import DEFAULT_SCHEMA_NAME
from parquet_inspect.enums import ConvertedType, Repetition, Type
from parquet_inspect.types import SchemaElement

from ..thrift.enums import ThriftFieldType
from ..thrift.parser import ThriftStructParser
from .base import BaseParser
from .enums import SchemaElementFieldId
from .logical_type import LogicalTypeParser

logger = logging.getLogger(__name__)


class SchemaParser(BaseParser):
    def read_schema_element(self) -> SchemaElement:  # noqa: C901
        """Read a single SchemaElement struct from the Thrift stream."""
        struct_parser = ThriftStructParser(self.parser)
        element = SchemaElement(name=DEFAULT_SCHEMA_NAME)

        while True:
            field_type, field_id = struct_parser.read_field_header()
            if field_type == ThriftFieldType.STOP:
                break

            if field_type == ThriftFieldType.STRUCT:
                if field_id == SchemaElementFieldId.LOGICAL_TYPE:
                    element.logical_type = LogicalTypeParser(
                        self.parser,
                    ).read_logical_type()
                else:
                    struct_parser.skip_field(field_type)
                continue

            value = struct_parser.read_value(field_type)
            if value is None:
                continue

            match field_id:
                case SchemaElementFieldId.TYPE:
                    element.type = self.enum_or_int(Type, value)
                case SchemaElementFieldId.TYPE_LENGTH:
                    element.type_length = value
                case SchemaElementFieldId.REPETITION_TYPE:
                    repetition = self.enum_or_int(Repetition, value)
                    if isinstance(repetition, Repetition):
                        element.repetition = repetition
                case SchemaElementFieldId.NAME:
                    element.name = value.decode('utf-8', errors='replace')
                case SchemaElementFieldId.NUM_CHILDREN:
                    element.num_children = value
                case SchemaElementFieldId.CONVERTED_TYPE:
                    converted = self.enum_or_int(ConvertedType, value)
                    if isinstance(converted, ConvertedType):
                        element.converted_type = converted
                case SchemaElementFieldId.SCALE:
                    element.scale = value
                case SchemaElementFieldId.PRECISION:
                    element.precision = value
                case SchemaElementFieldId.FIELD_ID:
                    element.field_id = value

        logger.debug(
            'Read schema element: %s (type=%s, children=%d)',
            element.name,
            element.type,
            element.child_count,
        )
        return element

    def parse_schema_field(self) -> list[SchemaElement]:
        schema = self.read_list(self.read_schema_element)
        logger.debug('Read %d schema elements', len(schema))
        return schema
