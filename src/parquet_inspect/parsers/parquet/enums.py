from enum import IntEnum


# Field IDs for Parquet Thrift structures, as numbered in parquet.thrift
class SchemaElementFieldId(IntEnum):
    """Field IDs for SchemaElement struct in Parquet metadata."""

    TYPE = 1
    TYPE_LENGTH = 2
    REPETITION_TYPE = 3
    NAME = 4
    NUM_CHILDREN = 5
    CONVERTED_TYPE = 6
    SCALE = 7
    PRECISION = 8
    FIELD_ID = 9
    LOGICAL_TYPE = 10


class ColumnMetadataFieldId(IntEnum):
    """Field IDs for ColumnMetaData struct in Parquet metadata."""

    TYPE = 1
    ENCODINGS = 2
    PATH_IN_SCHEMA = 3
    CODEC = 4
    NUM_VALUES = 5
    TOTAL_UNCOMPRESSED_SIZE = 6
    TOTAL_COMPRESSED_SIZE = 7
    KEY_VALUE_METADATA = 8
    DATA_PAGE_OFFSET = 9
    INDEX_PAGE_OFFSET = 10
    DICTIONARY_PAGE_OFFSET = 11
    STATISTICS = 12


class ColumnChunkFieldId(IntEnum):
    """Field IDs for ColumnChunk struct in Parquet metadata."""

    FILE_PATH = 1
    FILE_OFFSET = 2
    META_DATA = 3
    OFFSET_INDEX_OFFSET = 4
    OFFSET_INDEX_LENGTH = 5
    COLUMN_INDEX_OFFSET = 6
    COLUMN_INDEX_LENGTH = 7


class RowGroupFieldId(IntEnum):
    """Field IDs for RowGroup struct in Parquet metadata."""

    COLUMNS = 1
    TOTAL_BYTE_SIZE = 2
    NUM_ROWS = 3
    SORTING_COLUMNS = 4
    FILE_OFFSET = 5
    TOTAL_COMPRESSED_SIZE = 6
    ORDINAL = 7


class FileMetadataFieldId(IntEnum):
    """Field IDs for FileMetaData struct in Parquet metadata."""

    VERSION = 1
    SCHEMA = 2
    NUM_ROWS = 3
    ROW_GROUPS = 4
    KEY_VALUE_METADATA = 5
    CREATED_BY = 6


class KeyValueFieldId(IntEnum):
    """Field IDs for KeyValue struct in Parquet metadata."""

    KEY = 1
    VALUE = 2


class StatisticsFieldId(IntEnum):
    """Field IDs for Statistics struct in Parquet metadata."""

    MAX = 1
    MIN = 2
    NULL_COUNT = 3
    DISTINCT_COUNT = 4
    MAX_VALUE = 5
    MIN_VALUE = 6
    IS_MAX_VALUE_EXACT = 7
    IS_MIN_VALUE_EXACT = 8


class LogicalTypeFieldId(IntEnum):
    """Member IDs of the LogicalType union."""

    STRING = 1
    MAP = 2
    LIST = 3
    ENUM = 4
    DECIMAL = 5
    DATE = 6
    TIME = 7
    TIMESTAMP = 8
    INTEGER = 10
    UNKNOWN = 11
    JSON = 12
    BSON = 13
    UUID = 14
    FLOAT16 = 15
    VARIANT = 16
    GEOMETRY = 17
    GEOGRAPHY = 18


class DecimalTypeFieldId(IntEnum):
    SCALE = 1
    PRECISION = 2


class TimeTypeFieldId(IntEnum):
    """Shared by the TIME and TIMESTAMP members."""

    IS_ADJUSTED_TO_UTC = 1
    UNIT = 2


class TimeUnitFieldId(IntEnum):
    MILLIS = 1
    MICROS = 2
    NANOS = 3


class IntTypeFieldId(IntEnum):
    BIT_WIDTH = 1
    IS_SIGNED = 2


class VariantTypeFieldId(IntEnum):
    SPECIFICATION_VERSION = 1


class GeospatialTypeFieldId(IntEnum):
    CRS = 1
    ALGORITHM = 2


class PageHeaderFieldId(IntEnum):
    """Field IDs for PageHeader struct."""

    TYPE = 1
    UNCOMPRESSED_PAGE_SIZE = 2
    COMPRESSED_PAGE_SIZE = 3
    CRC = 4
    DATA_PAGE_HEADER = 5
    INDEX_PAGE_HEADER = 6
    DICTIONARY_PAGE_HEADER = 7
    DATA_PAGE_HEADER_V2 = 8


class DataPageHeaderFieldId(IntEnum):
    """Field IDs for DataPageHeader struct."""

    NUM_VALUES = 1
    ENCODING = 2
    DEFINITION_LEVEL_ENCODING = 3
    REPETITION_LEVEL_ENCODING = 4
    STATISTICS = 5


class DataPageHeaderV2FieldId(IntEnum):
    """Field IDs for DataPageHeaderV2 struct."""

    NUM_VALUES = 1
    NUM_NULLS = 2
    NUM_ROWS = 3
    ENCODING = 4
    DEFINITION_LEVELS_BYTE_LENGTH = 5
    REPETITION_LEVELS_BYTE_LENGTH = 6
    IS_COMPRESSED = 7
    STATISTICS = 8


class DictionaryPageHeaderFieldId(IntEnum):
    """Field IDs for DictionaryPageHeader struct."""

    NUM_VALUES = 1
    ENCODING = 2
    IS_SORTED = 3
