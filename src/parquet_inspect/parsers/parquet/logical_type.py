"""
LogicalType union parsing.

A Thrift union is encoded as a struct with exactly one field set. The field id
says which member it is, and the member itself is a (usually empty) struct.
"""

import logging

from parquet_inspect.enums import EdgeInterpolationAlgorithm, TimeUnit
from parquet_inspect.logical import (
    BsonTypeInfo,
    DateTypeInfo,
    DecimalTypeInfo,
    EnumTypeInfo,
    Float16TypeInfo,
    GeographyTypeInfo,
    GeometryTypeInfo,
    IntTypeInfo,
    JsonTypeInfo,
    ListTypeInfo,
    LogicalTypeInfoUnion,
    MapTypeInfo,
    StringTypeInfo,
    TimestampTypeInfo,
    TimeTypeInfo,
    UnknownTypeInfo,
    UuidTypeInfo,
    VariantTypeInfo,
)

from ..thrift.enums import ThriftFieldType
from ..thrift.parser import ThriftStructParser
from .base import BaseParser
from .enums import (
    DecimalTypeFieldId,
    GeospatialTypeFieldId,
    IntTypeFieldId,
    LogicalTypeFieldId,
    TimeTypeFieldId,
    TimeUnitFieldId,
    VariantTypeFieldId,
)

logger = logging.getLogger(__name__)

_EMPTY_MEMBERS = {
    LogicalTypeFieldId.STRING: StringTypeInfo,
    LogicalTypeFieldId.MAP: MapTypeInfo,
    LogicalTypeFieldId.LIST: ListTypeInfo,
    LogicalTypeFieldId.ENUM: EnumTypeInfo,
    LogicalTypeFieldId.DATE: DateTypeInfo,
    LogicalTypeFieldId.UNKNOWN: UnknownTypeInfo,
    LogicalTypeFieldId.JSON: JsonTypeInfo,
    LogicalTypeFieldId.BSON: BsonTypeInfo,
    LogicalTypeFieldId.UUID: UuidTypeInfo,
    LogicalTypeFieldId.FLOAT16: Float16TypeInfo,
}


class LogicalTypeParser(BaseParser):
    def read_logical_type(self) -> LogicalTypeInfoUnion | None:  # noqa: C901
        """
        Read a LogicalType union.

        Returns:
            The member that was set, or None for a member this library does
            not know (the column then falls back to its converted type).
        """
        struct_parser = ThriftStructParser(self.parser)
        result: LogicalTypeInfoUnion | None = None

        while True:
            field_type, field_id = struct_parser.read_field_header()
            if field_type == ThriftFieldType.STOP:
                break

            if field_type != ThriftFieldType.STRUCT:
                struct_parser.skip_field(field_type)
                continue

            match field_id:
                case LogicalTypeFieldId.DECIMAL:
                    result = self._read_decimal()
                case LogicalTypeFieldId.TIME:
                    adjusted, unit = self._read_time_fields()
                    result = TimeTypeInfo(is_adjusted_to_utc=adjusted, unit=unit)
                case LogicalTypeFieldId.TIMESTAMP:
                    adjusted, unit = self._read_time_fields()
                    result = TimestampTypeInfo(is_adjusted_to_utc=adjusted, unit=unit)
                case LogicalTypeFieldId.INTEGER:
                    result = self._read_integer()
                case LogicalTypeFieldId.VARIANT:
                    result = self._read_variant()
                case LogicalTypeFieldId.GEOMETRY:
                    crs, _ = self._read_geospatial()
                    result = GeometryTypeInfo(crs=crs)
                case LogicalTypeFieldId.GEOGRAPHY:
                    crs, algorithm = self._read_geospatial()
                    result = GeographyTypeInfo(crs=crs, algorithm=algorithm)
                case _ if field_id in _EMPTY_MEMBERS:
                    struct_parser.skip_field(field_type)
                    result = _EMPTY_MEMBERS[LogicalTypeFieldId(field_id)]()
                case _:
                    logger.debug('Unknown logical type member %d', field_id)
                    struct_parser.skip_field(field_type)

        return result

    def _read_decimal(self) -> DecimalTypeInfo:
        struct_parser = ThriftStructParser(self.parser)
        scale, precision = 0, 10
        while True:
            field_type, field_id = struct_parser.read_field_header()
            if field_type == ThriftFieldType.STOP:
                break
            value = struct_parser.read_value(field_type)
            if value is None:
                continue
            match field_id:
                case DecimalTypeFieldId.SCALE:
                    scale = value
                case DecimalTypeFieldId.PRECISION:
                    precision = value
        return DecimalTypeInfo(scale=scale, precision=precision)

    def _read_time_fields(self) -> tuple[bool, TimeUnit]:
        struct_parser = ThriftStructParser(self.parser)
        adjusted = False
        unit = TimeUnit.MILLIS
        while True:
            field_type, field_id = struct_parser.read_field_header()
            if field_type == ThriftFieldType.STOP:
                break
            is_unit = field_id == TimeTypeFieldId.UNIT
            if field_type == ThriftFieldType.STRUCT and is_unit:
                unit = self._read_time_unit()
                continue
            value = struct_parser.read_value(field_type)
            if value is not None and field_id == TimeTypeFieldId.IS_ADJUSTED_TO_UTC:
                adjusted = bool(value)
        return adjusted, unit

    def _read_time_unit(self) -> TimeUnit:
        struct_parser = ThriftStructParser(self.parser)
        unit = TimeUnit.MILLIS
        while True:
            field_type, field_id = struct_parser.read_field_header()
            if field_type == ThriftFieldType.STOP:
                break
            struct_parser.skip_field(field_type)
            match field_id:
                case TimeUnitFieldId.MILLIS:
                    unit = TimeUnit.MILLIS
                case TimeUnitFieldId.MICROS:
                    unit = TimeUnit.MICROS
                case TimeUnitFieldId.NANOS:
                    unit = TimeUnit.NANOS
        return unit

    def _read_integer(self) -> IntTypeInfo:
        struct_parser = ThriftStructParser(self.parser)
        bit_width, is_signed = 32, True
        while True:
            field_type, field_id = struct_parser.read_field_header()
            if field_type == ThriftFieldType.STOP:
                break
            value = struct_parser.read_value(field_type)
            if value is None:
                continue
            match field_id:
                case IntTypeFieldId.BIT_WIDTH:
                    bit_width = value
                case IntTypeFieldId.IS_SIGNED:
                    is_signed = bool(value)
        return IntTypeInfo(bit_width=bit_width, is_signed=is_signed)

    def _read_variant(self) -> VariantTypeInfo:
        struct_parser = ThriftStructParser(self.parser)
        version = None
        while True:
            field_type, field_id = struct_parser.read_field_header()
            if field_type == ThriftFieldType.STOP:
                break
            value = struct_parser.read_value(field_type)
            if (
                value is not None
                and field_id == VariantTypeFieldId.SPECIFICATION_VERSION
            ):
                version = value
        return VariantTypeInfo(specification_version=version)

    def _read_geospatial(self) -> tuple[str | None, EdgeInterpolationAlgorithm | None]:
        struct_parser = ThriftStructParser(self.parser)
        crs = None
        algorithm = None
        while True:
            field_type, field_id = struct_parser.read_field_header()
            if field_type == ThriftFieldType.STOP:
                break
            value = struct_parser.read_value(field_type)
            if value is None:
                continue
            match field_id:
                case GeospatialTypeFieldId.CRS:
                    crs = value.decode('utf-8', errors='replace')
                case GeospatialTypeFieldId.ALGORITHM:
                    try:
                        algorithm = EdgeInterpolationAlgorithm(value)
                    except ValueError:
                        logger.debug('Unknown edge interpolation algorithm %d', value)
        return crs, algorithm
