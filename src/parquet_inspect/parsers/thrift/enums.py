from enum import IntEnum


class ThriftFieldType(IntEnum):
    """Type nibble of a Thrift compact-protocol field or collection header."""

    STOP = 0
    BOOL_TRUE = 1
    BOOL_FALSE = 2
    BYTE = 3
    I16 = 4
    I32 = 5
    I64 = 6
    DOUBLE = 7
    BINARY = 8
    LIST = 9
    SET = 10
    MAP = 11
    STRUCT = 12


COMPLEX_FIELD_TYPES = frozenset(
    {
        ThriftFieldType.LIST,
        ThriftFieldType.SET,
        ThriftFieldType.MAP,
        ThriftFieldType.STRUCT,
    },
)
