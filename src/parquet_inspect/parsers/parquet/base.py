import logging

from collections.abc import Callable
from enum import IntEnum
from typing import TypeVar

from ..thrift.parser import ThriftCompactParser

logger = logging.getLogger(__name__)

T = TypeVar('T')
E = TypeVar('E', bound=IntEnum)


class BaseParser:
    """Shared plumbing for the Parquet struct parsers."""

    def __init__(self, parser: ThriftCompactParser) -> None:
        self.parser = parser

    def read_list(self, read_element: Callable[[], T]) -> list[T]:
        return self.parser.read_list(read_element)

    def read_i32(self) -> int:
        return self.parser.read_i32()

    def read_i64(self) -> int:
        return self.parser.read_i64()

    def read_string(self) -> str:
        return self.parser.read_string()

    def read_bool(self) -> bool:
        return self.parser.read_bool()

    @staticmethod
    def enum_or_int(enum_type: type[E], value: int) -> E | int:
        """
        Map a Thrift enum value, keeping unknown values as plain ints.

        Newer writers add codecs, encodings and types over time; the footer
        must still load so the column that uses one can report it.
        """
        try:
            return enum_type(value)
        except ValueError:
            logger.debug('Unknown %s value %d', enum_type.__name__, value)
            return value
