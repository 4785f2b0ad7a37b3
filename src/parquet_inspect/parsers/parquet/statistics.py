"""
Statistics struct parsing.

Statistics appear in two places: on column chunk metadata, covering the
whole chunk, and on data page headers, covering a single page. The struct is
the same in both; values stay as raw bytes here and are decoded later, once
the column's physical and logical types are at hand.
"""

import logging

from parquet_inspect.types import Statistics

from ..thrift.enums import ThriftFieldType
from ..thrift.parser import ThriftStructParser
from .base import BaseParser
from .enums import StatisticsFieldId

logger = logging.getLogger(__name__)


class StatisticsParser(BaseParser):
    def read_statistics(self) -> Statistics:
        struct_parser = ThriftStructParser(self.parser)
        stats = Statistics()

        while True:
            field_type, field_id = struct_parser.read_field_header()
            if field_type == ThriftFieldType.STOP:
                break

            value = struct_parser.read_value(field_type)
            if value is None:
                continue

            match field_id:
                case StatisticsFieldId.MAX:
                    stats.max = value
                case StatisticsFieldId.MIN:
                    stats.min = value
                case StatisticsFieldId.NULL_COUNT:
                    stats.null_count = value
                case StatisticsFieldId.DISTINCT_COUNT:
                    stats.distinct_count = value
                case StatisticsFieldId.MAX_VALUE:
                    stats.max_value = value
                case StatisticsFieldId.MIN_VALUE:
                    stats.min_value = value
                case StatisticsFieldId.IS_MAX_VALUE_EXACT:
                    stats.is_max_value_exact = bool(value)
                case StatisticsFieldId.IS_MIN_VALUE_EXACT:
                    stats.is_min_value_exact = bool(value)

        logger.debug(
            'Read statistics: null_count=%s, has_min=%s, has_max=%s',
            stats.null_count,
            bool(stats.effective_min),
            bool(stats.effective_max),
        )
        return stats
