class ParquetInspectError(Exception):
    """Base class for all errors raised by parquet-inspect."""


class ParquetIndexError(ParquetInspectError, IndexError):
    """A row group, column or page index is out of range."""

    kind = 'index'

    def __init__(self, index: int, count: int) -> None:
        self.index = index
        self.count = count
        super().__init__(
            f'{self.kind.capitalize()} {index} does not exist '
            f'(valid range is 0..{count - 1})'
            if count
            else f'{self.kind.capitalize()} {index} does not exist (none available)',
        )


class RowGroupIndexError(ParquetIndexError):
    kind = 'row group'


class ColumnIndexError(ParquetIndexError):
    kind = 'column'


class PageIndexError(ParquetIndexError):
    kind = 'page'


class PageTypeError(ParquetInspectError):
    """Content was requested from a page that carries no values."""


class ParquetDecodeError(ParquetInspectError):
    """Bytes could not be decoded into the structure they claim to be."""


class ThriftParsingError(ParquetDecodeError):
    """Malformed or truncated Thrift compact-protocol data."""


class ParquetFormatError(ParquetDecodeError):
    """The file does not have a valid Parquet layout."""


class ParquetDataError(ParquetDecodeError):
    """Page payload or value bytes that cannot be decoded."""


class ParquetIOError(ParquetInspectError, OSError):
    """A seek or read on the underlying byte source failed."""

    def __init__(
        self,
        message: str,
        offset: int | None = None,
        operation: str | None = None,
    ) -> None:
        self.offset = offset
        self.operation = operation
        context = []
        if operation is not None:
            context.append(f'operation={operation}')
        if offset is not None:
            context.append(f'offset={offset}')
        if context:
            message = f'{message} ({", ".join(context)})'
        super().__init__(message)


class ParquetUrlError(ParquetIOError):
    """The URL is not a usable HTTP(S) location."""


class ParquetNetworkError(ParquetIOError):
    """An HTTP range request failed."""
