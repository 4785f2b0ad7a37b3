PARQUET_MAGIC = b'PAR1'

# 4-byte little-endian metadata length followed by the magic bytes
FOOTER_SIZE = 8

# Smallest possible file: leading magic, footer length, trailing magic
MIN_FILE_SIZE = 12

DEFAULT_SCHEMA_NAME = 'schema'

# Page enumeration stops after this many pages in one column chunk
MAX_PAGES_PER_CHUNK = 10_000

# Bytes scanned past the declared end of a column chunk before giving up
PAGE_SCAN_SLACK = 1024 * 1024

# Display caps, in characters
STAT_DISPLAY_LIMIT = 50
CELL_DISPLAY_LIMIT = 200
ELLIPSIS = '...'

NULL_DISPLAY = 'NULL'
MISSING_STAT_DISPLAY = '-'
NOT_APPLICABLE_DISPLAY = 'N/A'

# Julian day number of 1970-01-01, used by INT96 timestamps
JULIAN_EPOCH_DAY = 2_440_588

# Thrift compact protocol layout
THRIFT_FIELD_TYPE_MASK = 0x0F
THRIFT_FIELD_DELTA_SHIFT = 4
THRIFT_SIZE_SHIFT = 4
THRIFT_SPECIAL_LIST_SIZE = 15
THRIFT_MAX_NESTING = 64
