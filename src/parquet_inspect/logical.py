"""
The closed LogicalType union.

Each member of the Thrift LogicalType union becomes one frozen model tagged by
its ``logical_type`` literal, so code can ``match`` on the tag and rely on the
union being exhaustive.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Discriminator

from .enums import EdgeInterpolationAlgorithm, LogicalType, TimeUnit


class LogicalTypeInfo(BaseModel):
    """Base class for logical type information."""

    model_config = ConfigDict(frozen=True)

    logical_type: LogicalType

    def describe(self) -> str:
        return self.logical_type.value


class StringTypeInfo(LogicalTypeInfo):
    logical_type: Literal[LogicalType.STRING] = LogicalType.STRING


class MapTypeInfo(LogicalTypeInfo):
    logical_type: Literal[LogicalType.MAP] = LogicalType.MAP


class ListTypeInfo(LogicalTypeInfo):
    logical_type: Literal[LogicalType.LIST] = LogicalType.LIST


class EnumTypeInfo(LogicalTypeInfo):
    logical_type: Literal[LogicalType.ENUM] = LogicalType.ENUM


class DecimalTypeInfo(LogicalTypeInfo):
    """Decimal logical type with scale and precision."""

    logical_type: Literal[LogicalType.DECIMAL] = LogicalType.DECIMAL
    scale: int = 0
    precision: int = 10

    def describe(self) -> str:
        return f'DECIMAL({self.precision},{self.scale})'


class DateTypeInfo(LogicalTypeInfo):
    logical_type: Literal[LogicalType.DATE] = LogicalType.DATE


class TimeTypeInfo(LogicalTypeInfo):
    """Time of day with unit and UTC adjustment."""

    logical_type: Literal[LogicalType.TIME] = LogicalType.TIME
    is_adjusted_to_utc: bool = False
    unit: TimeUnit = TimeUnit.MILLIS

    def describe(self) -> str:
        return f'TIME({self.unit},{str(self.is_adjusted_to_utc).lower()})'


class TimestampTypeInfo(LogicalTypeInfo):
    """Timestamp with unit and UTC adjustment."""

    logical_type: Literal[LogicalType.TIMESTAMP] = LogicalType.TIMESTAMP
    is_adjusted_to_utc: bool = False
    unit: TimeUnit = TimeUnit.MILLIS

    def describe(self) -> str:
        return f'TIMESTAMP({self.unit},{str(self.is_adjusted_to_utc).lower()})'


class IntTypeInfo(LogicalTypeInfo):
    """Integer with bit width and signedness."""

    logical_type: Literal[LogicalType.INTEGER] = LogicalType.INTEGER
    bit_width: int = 32
    is_signed: bool = True

    def describe(self) -> str:
        sign = 'signed' if self.is_signed else 'unsigned'
        return f'INTEGER({self.bit_width},{sign})'


class UnknownTypeInfo(LogicalTypeInfo):
    logical_type: Literal[LogicalType.UNKNOWN] = LogicalType.UNKNOWN


class JsonTypeInfo(LogicalTypeInfo):
    logical_type: Literal[LogicalType.JSON] = LogicalType.JSON


class BsonTypeInfo(LogicalTypeInfo):
    logical_type: Literal[LogicalType.BSON] = LogicalType.BSON


class UuidTypeInfo(LogicalTypeInfo):
    logical_type: Literal[LogicalType.UUID] = LogicalType.UUID


class Float16TypeInfo(LogicalTypeInfo):
    logical_type: Literal[LogicalType.FLOAT16] = LogicalType.FLOAT16


class VariantTypeInfo(LogicalTypeInfo):
    logical_type: Literal[LogicalType.VARIANT] = LogicalType.VARIANT
    specification_version: int | None = None


class GeometryTypeInfo(LogicalTypeInfo):
    logical_type: Literal[LogicalType.GEOMETRY] = LogicalType.GEOMETRY
    crs: str | None = None


class GeographyTypeInfo(LogicalTypeInfo):
    logical_type: Literal[LogicalType.GEOGRAPHY] = LogicalType.GEOGRAPHY
    crs: str | None = None
    algorithm: EdgeInterpolationAlgorithm | None = None


LogicalTypeInfoUnion = (
    StringTypeInfo
    | MapTypeInfo
    | ListTypeInfo
    | EnumTypeInfo
    | DecimalTypeInfo
    | DateTypeInfo
    | TimeTypeInfo
    | TimestampTypeInfo
    | IntTypeInfo
    | UnknownTypeInfo
    | JsonTypeInfo
    | BsonTypeInfo
    | UuidTypeInfo
    | Float16TypeInfo
    | VariantTypeInfo
    | GeometryTypeInfo
    | GeographyTypeInfo
)

LogicalTypeInfoDiscriminated = Annotated[
    LogicalTypeInfoUnion,
    Discriminator('logical_type'),
]

# Logical types whose values carry no meaningful min/max ordering
UNORDERED_LOGICAL_TYPES = frozenset({LogicalType.GEOMETRY, LogicalType.GEOGRAPHY})
