import io

from parquet_inspect.protocols import ReadableSeekable


class PositionTracker(io.RawIOBase):
    """
    Read-through wrapper that counts the bytes consumed from a source.

    Page headers carry no length of their own, so the only way to learn how
    many bytes one occupied is to count what the Thrift decoder pulled off the
    stream. The wrapper never seeks the underlying source; it is read-only.
    """

    def __init__(self, source: ReadableSeekable) -> None:
        super().__init__()
        self._source = source
        self.bytes_read = 0

    def readable(self) -> bool:
        return True

    def writable(self) -> bool:
        return False

    def read(self, size: int = -1, /) -> bytes:
        data = self._source.read(size)
        self.bytes_read += len(data)
        return data

    def readinto(self, buffer) -> int:
        data = self.read(len(buffer))
        buffer[: len(data)] = data
        return len(data)

    def write(self, data, /) -> int:
        raise io.UnsupportedOperation('PositionTracker is read-only')
