"""
Thrift compact protocol reader.

Parquet serializes its footer and every page header with the Thrift compact
protocol. Only the reading half is needed here, and only the parts Parquet
uses: structs, lists, varint integers, doubles, binaries and booleans. Maps
and sets never appear in parquet.thrift but are still skipped correctly so a
future writer adding one cannot derail the decoder.
"""

import io
import logging
import struct

from collections.abc import Callable
from typing import Any, TypeVar

from parquet_inspect.constants import (
    THRIFT_FIELD_DELTA_SHIFT,
    THRIFT_FIELD_TYPE_MASK,
    THRIFT_MAX_NESTING,
    THRIFT_SIZE_SHIFT,
    THRIFT_SPECIAL_LIST_SIZE,
)
from parquet_inspect.exceptions import ThriftParsingError
from parquet_inspect.protocols import ReadableSeekable

from .enums import COMPLEX_FIELD_TYPES, ThriftFieldType
from .tracking import PositionTracker

logger = logging.getLogger(__name__)

T = TypeVar('T')


class ThriftCompactParser:
    """
    Low-level reader for compact-protocol primitives.

    Accepts either raw bytes (the footer) or a readable stream positioned at
    the start of a struct (a page header). ``pos`` is the number of bytes
    consumed so far.
    """

    def __init__(self, source: bytes | ReadableSeekable) -> None:
        if isinstance(source, bytes | bytearray | memoryview):
            source = io.BytesIO(bytes(source))
        self.stream = PositionTracker(source)

    @property
    def pos(self) -> int:
        return self.stream.bytes_read

    def read(self, length: int) -> bytes:
        if length < 0:
            raise ThriftParsingError(f'Negative length {length} at byte {self.pos}')
        data = self.stream.read(length) if length else b''
        if len(data) != length:
            raise ThriftParsingError(
                f'Unexpected end of data: wanted {length} bytes at byte '
                f'{self.pos - len(data)}, got {len(data)}',
            )
        return data

    def read_byte(self) -> int:
        return self.read(1)[0]

    def read_varint(self) -> int:
        result = 0
        shift = 0
        while True:
            byte = self.read_byte()
            result |= (byte & 0x7F) << shift
            if not byte & 0x80:
                return result
            shift += 7
            if shift > 63:
                raise ThriftParsingError(f'Varint too long at byte {self.pos}')

    def read_zigzag(self) -> int:
        n = self.read_varint()
        return (n >> 1) ^ -(n & 1)

    def read_i8(self) -> int:
        return struct.unpack('<b', self.read(1))[0]

    def read_i16(self) -> int:
        return self.read_zigzag()

    def read_i32(self) -> int:
        return self.read_zigzag()

    def read_i64(self) -> int:
        return self.read_zigzag()

    def read_double(self) -> float:
        return struct.unpack('<d', self.read(8))[0]

    def read_bool(self) -> bool:
        """Read a standalone boolean (a list element): one byte, 1 is true."""
        return self.read_byte() == ThriftFieldType.BOOL_TRUE

    def read_binary(self) -> bytes:
        return self.read(self.read_varint())

    def read_string(self) -> str:
        return self.read_binary().decode('utf-8', errors='replace')

    def read_collection_header(self) -> tuple[int, int]:
        """Return ``(element_type, size)`` for a list or set header."""
        header = self.read_byte()
        size = header >> THRIFT_SIZE_SHIFT
        element_type = header & THRIFT_FIELD_TYPE_MASK
        if size == THRIFT_SPECIAL_LIST_SIZE:
            size = self.read_varint()
        return element_type, size

    def read_map_header(self) -> tuple[int, int, int]:
        """Return ``(key_type, value_type, size)`` for a map header."""
        size = self.read_varint()
        if size == 0:
            return ThriftFieldType.STOP, ThriftFieldType.STOP, 0
        types = self.read_byte()
        return types >> 4, types & THRIFT_FIELD_TYPE_MASK, size

    def read_list(self, read_element: Callable[[], T]) -> list[T]:
        _, size = self.read_collection_header()
        return [read_element() for _ in range(size)]

    def skip(self, field_type: int, depth: int = 0) -> None:  # noqa: C901
        if depth > THRIFT_MAX_NESTING:
            raise ThriftParsingError(
                f'Thrift structure nested deeper than {THRIFT_MAX_NESTING} levels',
            )
        match field_type:
            case ThriftFieldType.BOOL_TRUE | ThriftFieldType.BOOL_FALSE:
                # Booleans inside collections take one byte; struct fields
                # carry theirs in the header and never reach here.
                if depth:
                    self.read(1)
            case ThriftFieldType.BYTE:
                self.read(1)
            case ThriftFieldType.I16 | ThriftFieldType.I32 | ThriftFieldType.I64:
                self.read_varint()
            case ThriftFieldType.DOUBLE:
                self.read(8)
            case ThriftFieldType.BINARY:
                self.read_binary()
            case ThriftFieldType.LIST | ThriftFieldType.SET:
                element_type, size = self.read_collection_header()
                for _ in range(size):
                    self.skip(element_type, depth + 1)
            case ThriftFieldType.MAP:
                key_type, value_type, size = self.read_map_header()
                for _ in range(size):
                    self.skip(key_type, depth + 1)
                    self.skip(value_type, depth + 1)
            case ThriftFieldType.STRUCT:
                struct_parser = ThriftStructParser(self)
                while True:
                    inner_type, _ = struct_parser.read_field_header()
                    if inner_type == ThriftFieldType.STOP:
                        break
                    if inner_type in (
                        ThriftFieldType.BOOL_TRUE,
                        ThriftFieldType.BOOL_FALSE,
                    ):
                        continue
                    self.skip(inner_type, depth + 1)
            case _:
                raise ThriftParsingError(
                    f'Unknown Thrift field type {field_type} at byte {self.pos}',
                )


class ThriftStructParser:
    """
    Walks the fields of one struct.

    Compact-protocol field ids are delta-encoded against the previous field
    of the same struct, so every nested struct needs its own instance.
    """

    def __init__(self, parser: ThriftCompactParser) -> None:
        self.parser = parser
        self.last_field_id = 0

    def read_field_header(self) -> tuple[int, int]:
        header = self.parser.read_byte()
        field_type = header & THRIFT_FIELD_TYPE_MASK
        if field_type == ThriftFieldType.STOP:
            return ThriftFieldType.STOP, 0

        delta = header >> THRIFT_FIELD_DELTA_SHIFT
        if delta:
            field_id = self.last_field_id + delta
        else:
            field_id = self.parser.read_i16()
        self.last_field_id = field_id

        try:
            return ThriftFieldType(field_type), field_id
        except ValueError:
            raise ThriftParsingError(
                f'Unknown Thrift field type {field_type} for field {field_id} '
                f'at byte {self.parser.pos}',
            ) from None

    def read_value(self, field_type: int) -> Any:
        """
        Read a primitive field value.

        Complex values (lists, sets, maps, structs) are skipped and ``None``
        is returned; callers that want them must handle them before calling.
        """
        match field_type:
            case ThriftFieldType.BOOL_TRUE:
                return True
            case ThriftFieldType.BOOL_FALSE:
                return False
            case ThriftFieldType.BYTE:
                return self.parser.read_i8()
            case ThriftFieldType.I16 | ThriftFieldType.I32 | ThriftFieldType.I64:
                return self.parser.read_zigzag()
            case ThriftFieldType.DOUBLE:
                return self.parser.read_double()
            case ThriftFieldType.BINARY:
                return self.parser.read_binary()
            case _ if field_type in COMPLEX_FIELD_TYPES:
                self.skip_field(field_type)
                return None
            case _:
                raise ThriftParsingError(f'Cannot read Thrift field type {field_type}')

    def skip_field(self, field_type: int) -> None:
        logger.debug(
            'Skipping field of type %s at byte %d', field_type, self.parser.pos,
        )
        self.parser.skip(field_type)
