from parquet_inspect.models import (
    ColumnChunkInfo,
    FileInfo,
    PageContent,
    PageMetadata,
    RowGroupInfo,
    StatisticsSummary,
)
from parquet_inspect.parsers.logical_types import (
    describe_converted_type,
    describe_logical_type,
)
from parquet_inspect.types import SchemaElement


def _header(title: str) -> str:
    return f'{title}\n{"=" * 60}'


def _or_dash(value) -> str:
    return '-' if value is None else str(value)


def _format_statistics(stats: StatisticsSummary | None, indent: str) -> list[str]:
    if stats is None:
        return [f'{indent}Statistics: none']
    return [
        f'{indent}Min: {_or_dash(stats.min)}',
        f'{indent}Max: {_or_dash(stats.max)}',
        f'{indent}Null count: {_or_dash(stats.null_count)}',
    ]


def _format_schema_element(element: SchemaElement, index: int, depth: int) -> str:
    indent = '  ' * depth
    if not element.is_leaf:
        return (
            f'  {index:2}: {indent}{element.name} '
            f'(GROUP, {element.child_count} children)'
        )

    rep = f' {element.repetition.name}' if element.repetition is not None else ''
    type_name = getattr(element.type, 'name', str(element.type))
    length_info = f' (length: {element.type_length})' if element.type_length else ''
    annotations = []
    if element.logical_type is not None:
        annotations.append(f'logical: {describe_logical_type(element)}')
    if element.converted_type is not None:
        annotations.append(f'converted: {describe_converted_type(element)}')
    annotation_info = f' [{", ".join(annotations)}]' if annotations else ''

    return (
        f'  {index:2}: {indent}{element.name}: '
        f'{type_name}{length_info}{rep}{annotation_info}'
    )


def format_schema(schema: list[SchemaElement]) -> str:
    lines = [_header('Schema Structure')]

    # Remaining children per open group, innermost last
    remaining: list[int] = []
    for i, element in enumerate(schema):
        while remaining and remaining[-1] == 0:
            remaining.pop()
        depth = len(remaining)
        if remaining:
            remaining[-1] -= 1
        lines.append(_format_schema_element(element, i, depth))
        if element.child_count:
            remaining.append(element.child_count)

    return '\n'.join(lines)


def format_info(info: FileInfo) -> str:
    lines = [
        _header('Parquet File Summary'),
        f'Version: {info.version}',
        f'Created by: {info.created_by or "unknown"}',
        f'Total rows: {info.num_rows:,}',
        f'Row groups: {info.num_row_groups}',
        f'Columns: {info.num_columns}',
        f'Compressed size: {info.compressed_size_display}',
        f'Uncompressed size: {info.uncompressed_size_display}',
        f'Compression ratio: {info.compression_ratio:.2f}x',
    ]
    if info.key_value_metadata:
        lines.append(f'\nKey-Value Metadata: {len(info.key_value_metadata)} keys')
        lines.extend(f'  {key}' for key in info.key_value_metadata)
    return '\n'.join(lines)


def format_rowgroups(row_groups: list[RowGroupInfo]) -> str:
    lines = [_header('Row Groups')]
    lines.extend(
        f'  {rg.index:2}: {rg.num_rows:,} rows, {rg.num_columns} cols, '
        f'{rg.compressed_size_display} / {rg.uncompressed_size_display} '
        f'({rg.compression_ratio:.2f}x)'
        for rg in row_groups
    )
    return '\n'.join(lines)


def format_columns(rg: int, columns: list[ColumnChunkInfo]) -> str:
    lines = [_header(f'Columns in Row Group {rg}')]
    for col in columns:
        stats = col.statistics
        null_count = stats.null_count if stats is not None else None
        lines.append(
            f'  {col.index:2}: {col.name} ({col.physical_type}, {col.codec}, '
            f'{col.num_values:,} values, nulls {_or_dash(null_count)}, '
            f'{col.compressed_size_display})',
        )
    return '\n'.join(lines)


def format_column(rg: int, col: ColumnChunkInfo) -> str:
    lines = [
        _header(f'Column {col.index} in Row Group {rg}'),
        f'Path: {col.name}',
        f'Physical type: {col.physical_type}',
        f'Logical type: {col.logical_type}',
        f'Converted type: {col.converted_type}',
        f'Codec: {col.codec}',
        f'Encodings: {", ".join(col.encodings)}',
        f'Values: {col.num_values:,}',
        f'Compressed size: {col.compressed_size_display}',
        f'Uncompressed size: {col.uncompressed_size_display}',
        f'Compression ratio: {col.compression_ratio:.2f}x',
        f'Data page offset: {col.data_page_offset}',
        f'Dictionary page offset: {_or_dash(col.dictionary_page_offset)}',
        *_format_statistics(col.statistics, ''),
    ]
    return '\n'.join(lines)


def format_pages(rg: int, col: int, pages: list[PageMetadata]) -> str:
    lines = [_header(f'Pages of Column {col} in Row Group {rg}')]
    lines.extend(
        f'  {page.index:3}: {page.page_type} @ {page.offset}, '
        f'{page.num_values:,} values, {page.encoding or "-"}, '
        f'header {page.header_size} B, {page.compressed_size_display}'
        for page in pages
    )
    if not pages:
        lines.append('No pages found.')
    return '\n'.join(lines)


def format_page(page: PageMetadata) -> str:
    lines = [
        _header(f'Page {page.index}'),
        f'Type: {page.page_type}',
        f'Offset: {page.offset}',
        f'Header size: {page.header_size} B',
        f'Compressed size: {page.compressed_size_display}',
        f'Uncompressed size: {page.uncompressed_size_display}',
        f'Values: {page.num_values:,}',
        f'Encoding: {_or_dash(page.encoding)}',
    ]
    if page.definition_level_encoding is not None:
        lines.append(f'Definition level encoding: {page.definition_level_encoding}')
    if page.repetition_level_encoding is not None:
        lines.append(f'Repetition level encoding: {page.repetition_level_encoding}')
    lines.append(f'CRC: {"yes" if page.has_crc else "no"}')
    if page.statistics is not None:
        lines.extend(_format_statistics(page.statistics, ''))
    return '\n'.join(lines)


def format_content(content: PageContent, limit: int | None = None) -> str:
    shown = content.formatted if limit is None else content.formatted[:limit]
    lines = [
        _header(
            f'Page {content.page} of Column {content.column} '
            f'in Row Group {content.row_group}',
        ),
        f'Type: {content.page_type} ({content.physical_type}, '
        f'{content.encoding or "-"})',
        f'Values: {len(content.formatted):,}',
        '',
    ]
    lines.extend(f'  {i:5}: {value}' for i, value in enumerate(shown))
    if len(shown) < len(content.formatted):
        lines.append(f'  ... {len(content.formatted) - len(shown):,} more')
    return '\n'.join(lines)
