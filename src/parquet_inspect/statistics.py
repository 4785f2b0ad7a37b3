"""
Turn raw Statistics structs into display summaries.

Min and max are stored as the PLAIN encoding of a single value, except that
byte arrays are stored without their length prefix.
"""

import logging

from .constants import NOT_APPLICABLE_DISPLAY
from .enums import ConvertedType, Type
from .logical import UNORDERED_LOGICAL_TYPES
from .models import StatisticsSummary, enum_name
from .parsers.logical_types import format_stat_value
from .parsers.physical_types import decode_plain_values
from .types import ColumnMetaData, SchemaElement, Statistics

logger = logging.getLogger(__name__)

_PLAIN_DECODED_TYPES = frozenset(
    {Type.BOOLEAN, Type.INT32, Type.INT64, Type.FLOAT, Type.DOUBLE},
)


def has_ordering(element: SchemaElement | None) -> bool:
    """False for types whose min/max carry no meaning for a reader."""
    if element is None:
        return True
    if element.converted_type == ConvertedType.INTERVAL:
        return False
    logical = element.logical_type
    return logical is None or logical.logical_type not in UNORDERED_LOGICAL_TYPES


def format_bound(
    raw: bytes,
    physical_type: Type | int,
    element: SchemaElement | None,
) -> str:
    if not raw:
        return format_stat_value(None, physical_type, element)

    if physical_type in _PLAIN_DECODED_TYPES:
        values = decode_plain_values(raw, physical_type, 1)
        if not values:
            logger.debug(
                'Statistic of %d bytes too short for %s',
                len(raw),
                enum_name(physical_type),
            )
            return (
                f'error: {len(raw)} bytes is too short for '
                f'{enum_name(physical_type)}'
            )
        value = values[0]
    else:
        value = raw

    return format_stat_value(value, physical_type, element)


def extract_statistics(
    statistics: Statistics | None,
    column: ColumnMetaData,
    element: SchemaElement | None,
) -> StatisticsSummary:
    """
    Summarize a column chunk's or a page's statistics.

    ``min_value``/``max_value`` are preferred over the deprecated
    ``min``/``max`` whenever they are present and non-empty.
    """
    if statistics is None:
        return StatisticsSummary()

    if has_ordering(element):
        minimum = format_bound(statistics.effective_min, column.type, element)
        maximum = format_bound(statistics.effective_max, column.type, element)
    else:
        minimum = maximum = NOT_APPLICABLE_DISPLAY

    return StatisticsSummary(
        min=minimum,
        max=maximum,
        null_count=statistics.null_count,
        distinct_count=statistics.distinct_count,
    )
