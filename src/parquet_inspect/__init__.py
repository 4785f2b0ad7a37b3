"""
parquet-inspect: page-level introspection of Parquet files.
"""

from ._version import get_version
from .exceptions import (
    ColumnIndexError,
    PageIndexError,
    PageTypeError,
    ParquetDataError,
    ParquetDecodeError,
    ParquetFormatError,
    ParquetIndexError,
    ParquetInspectError,
    ParquetIOError,
    RowGroupIndexError,
    ThriftParsingError,
)
from .inspector import ParquetInspector, read_file_metadata
from .models import (
    ColumnChunkInfo,
    FileInfo,
    PageContent,
    PageMetadata,
    RowGroupInfo,
    StatisticsSummary,
    format_bytes,
)

__version__ = get_version()

__all__ = [
    'ColumnChunkInfo',
    'ColumnIndexError',
    'FileInfo',
    'PageContent',
    'PageIndexError',
    'PageMetadata',
    'PageTypeError',
    'ParquetDataError',
    'ParquetDecodeError',
    'ParquetFormatError',
    'ParquetIOError',
    'ParquetIndexError',
    'ParquetInspectError',
    'ParquetInspector',
    'RowGroupIndexError',
    'RowGroupInfo',
    'StatisticsSummary',
    'ThriftParsingError',
    '__version__',
    'format_bytes',
    'read_file_metadata',
]
