"""
Page payload decompression.

Codec libraries are imported lazily so a file that only uses, say, SNAPPY can
be inspected without zstandard or lz4 installed.
"""

import io
import logging

from parquet_inspect.enums import Compression
from parquet_inspect.exceptions import ParquetDataError

logger = logging.getLogger(__name__)


def get_gzip():
    import gzip

    return gzip


def get_lz4_frame():
    try:
        import lz4.frame
    except ImportError:
        raise ParquetDataError(
            'LZ4 compression requires lz4 package',
        ) from None
    return lz4.frame


def get_snappy():
    try:
        import snappy
    except ImportError:
        raise ParquetDataError(
            'Snappy compression requires python-snappy package',
        ) from None
    return snappy


def get_zstd():
    try:
        import zstandard
    except ImportError:
        raise ParquetDataError(
            'Zstandard compression requires zstandard package',
        ) from None
    return zstandard


def decompress(
    data: bytes,
    codec: Compression | int,
    uncompressed_size: int,
) -> bytes:
    """
    Decompress one page payload.

    Errors raised by a codec library propagate unchanged.

    Raises:
        ParquetDataError: For LZO, BROTLI, LZ4_RAW and unknown codecs, a
            missing codec library, or LZ4 output shorter than
            ``uncompressed_size``
    """
    match codec:
        case Compression.UNCOMPRESSED:
            return data
        case Compression.SNAPPY:
            return get_snappy().decompress(data)
        case Compression.GZIP:
            with get_gzip().GzipFile(fileobj=io.BytesIO(data)) as stream:
                return stream.read()
        case Compression.LZ4:
            return _decompress_lz4(data, uncompressed_size)
        case Compression.ZSTD:
            dctx = get_zstd().ZstdDecompressor()
            # Frames written without a content size need the streaming API
            with dctx.stream_reader(io.BytesIO(data)) as reader:
                return reader.read()
        case Compression.LZO:
            raise ParquetDataError('LZO compression not supported')
        case Compression.BROTLI:
            raise ParquetDataError('Brotli decompression not implemented')
        case _:
            raise ParquetDataError(f'unsupported compression codec: {codec}')


def _decompress_lz4(data: bytes, uncompressed_size: int) -> bytes:
    with get_lz4_frame().LZ4FrameFile(io.BytesIO(data), mode='rb') as stream:
        result = stream.read(uncompressed_size)
    if len(result) != uncompressed_size:
        raise ParquetDataError(
            f'LZ4 payload decompressed to {len(result)} bytes, '
            f'expected {uncompressed_size}',
        )
    return result
