import io

import pytest

from parquet_inspect.exceptions import ParquetNetworkError, ParquetUrlError
from parquet_inspect.util.http_file import HttpFile, check_url

DATA = bytes(range(256)) * 4


@pytest.fixture
def url(http_server) -> str:
    base_url, handler = http_server
    handler.files['/data.bin'] = DATA
    return f'{base_url}/data.bin'


def test_size_and_full_read(url: str) -> None:
    with HttpFile(url, block_size=100) as f:
        assert f.size == len(DATA)
        assert f.read() == DATA
        assert f.tell() == len(DATA)
        assert f.read(10) == b''


def test_reads_across_blocks(url: str) -> None:
    with HttpFile(url, block_size=64) as f:
        f.seek(60)
        assert f.read(10) == DATA[60:70]
        assert f.read(1) == DATA[70:71]
        assert f.tell() == 71


def test_seek_whence(url: str) -> None:
    with HttpFile(url) as f:
        assert f.seek(-8, io.SEEK_END) == len(DATA) - 8
        assert f.read() == DATA[-8:]
        f.seek(10)
        assert f.seek(5, io.SEEK_CUR) == 15
        assert f.seek(len(DATA) + 100) == len(DATA)
        with pytest.raises(ValueError, match='Negative seek'):
            f.seek(-1)
        with pytest.raises(ValueError, match='whence'):
            f.seek(0, 7)


def test_blocks_are_cached(http_server, url: str) -> None:
    _, handler = http_server
    with HttpFile(url, block_size=128, size=len(DATA)) as f:
        for offset in range(0, 128, 4):
            f.seek(offset)
            f.read(4)
    assert handler.requests == ['bytes=0-127']


def test_cache_is_bounded(http_server, url: str) -> None:
    _, handler = http_server
    with HttpFile(url, block_size=64, max_blocks=1, size=len(DATA)) as f:
        f.read(10)
        f.seek(200)
        f.read(1)
        f.seek(0)
        f.read(1)
    assert len(handler.requests) == 3


def test_closed_file_rejects_reads(url: str) -> None:
    f = HttpFile(url)
    f.close()
    with pytest.raises(ValueError, match='closed'):
        f.read(1)


def test_missing_file(http_server) -> None:
    base_url, _ = http_server
    with pytest.raises(ParquetNetworkError, match='Cannot determine file size'):
        HttpFile(f'{base_url}/missing.parquet')


@pytest.mark.parametrize('bad', ['ftp://example.com/x', 'file:///etc/passwd', 'x'])
def test_check_url(bad: str) -> None:
    with pytest.raises(ParquetUrlError, match='must start with'):
        check_url(bad)
    with pytest.raises(ParquetUrlError):
        HttpFile(bad)


def test_repr(url: str) -> None:
    with HttpFile(url, size=len(DATA)) as f:
        assert repr(f) == f'HttpFile(url={url!r}, size={len(DATA)}, pos=0)'
