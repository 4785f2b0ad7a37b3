from .enums import ThriftFieldType
from .parser import ThriftCompactParser, ThriftStructParser
from .tracking import PositionTracker

__all__ = [
    'PositionTracker',
    'ThriftCompactParser',
    'ThriftFieldType',
    'ThriftStructParser',
]
