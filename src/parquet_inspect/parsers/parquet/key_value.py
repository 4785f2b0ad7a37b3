import logging

from parquet_inspect.exceptions import ThriftParsingError

from ..thrift.enums import ThriftFieldType
from ..thrift.parser import ThriftStructParser
from .base import BaseParser
from .enums import KeyValueFieldId

logger = logging.getLogger(__name__)


class KeyValueParser(BaseParser):
    def read_key_value(self) -> tuple[str, str | None]:
        struct_parser = ThriftStructParser(self.parser)
        key = None
        value = None

        while True:
            field_type, field_id = struct_parser.read_field_header()
            if field_type == ThriftFieldType.STOP:
                break

            field_value = struct_parser.read_value(field_type)
            if field_value is None:
                continue

            if field_id == KeyValueFieldId.KEY:
                key = field_value.decode('utf-8', errors='replace')
            elif field_id == KeyValueFieldId.VALUE:
                value = field_value.decode('utf-8', errors='replace')

        if key is None:
            raise ThriftParsingError(
                'Incomplete key/value pair: missing key field. '
                'This may indicate corrupted metadata.',
            )
        return key, value

    def read_key_value_list(self) -> dict[str, str]:
        """Read a list of KeyValue structs; a missing value becomes ''."""
        pairs = self.read_list(self.read_key_value)
        return {k: v or '' for k, v in pairs if k}
