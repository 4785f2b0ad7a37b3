import re
import shlex
import struct
import threading
from typing import TypeAlias

from collections.abc import Callable, Iterator
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

import pytest

from click.testing import CliRunner, Result

from parquet_builder import (
    Chunk,
    Layout,
    Node,
    Page,
    Stats,
    build_parquet,
    logical_string,
    root,
)
from parquet_inspect.cli import cli
from parquet_inspect.enums import ConvertedType, Repetition, Type

Invoke: TypeAlias = Callable[..., Result]


@pytest.fixture(scope='session')
def invoke() -> Invoke:
    runner = CliRunner()

    def _invoke(cmd: str, **kwargs) -> Result:
        kwargs['catch_exceptions'] = kwargs.get('catch_exceptions', False)
        return runner.invoke(cli, shlex.split(cmd), **kwargs)

    return _invoke


def i32(value: int) -> bytes:
    return struct.pack('<i', value)


SAMPLE_SCHEMA = root(
    Node('id', Type.INT32),
    Node(
        'name',
        Type.BYTE_ARRAY,
        Repetition.OPTIONAL,
        converted_type=ConvertedType.UTF8,
        logical_type=logical_string(),
    ),
)


def sample_row_group() -> list[Chunk]:
    """Seven rows: ``id`` in two plain pages, ``name`` dictionary encoded."""
    return [
        Chunk(
            path=['id'],
            physical_type=Type.INT32,
            pages=[Page([1, 2, 3]), Page([4, 5, 6, 7])],
            statistics=Stats(min_value=i32(1), max_value=i32(7), null_count=0),
        ),
        Chunk(
            path=['name'],
            physical_type=Type.BYTE_ARRAY,
            dictionary=[b'apple', b'banana', b'cherry'],
            pages=[
                Page([b'apple', b'banana'], definition_levels=[1, 1, 0]),
                Page(
                    [b'apple', b'cherry', b'banana'],
                    definition_levels=[1, 1, 0, 1],
                ),
            ],
            statistics=Stats(min_value=b'apple', max_value=b'cherry', null_count=2),
        ),
    ]


@pytest.fixture
def sample_layout() -> Layout:
    return Layout()


@pytest.fixture
def sample_bytes(sample_layout: Layout) -> bytes:
    return build_parquet(
        SAMPLE_SCHEMA,
        [sample_row_group()],
        key_value_metadata={'origin': 'tests'},
        layout=sample_layout,
    )


@pytest.fixture
def write_parquet(tmp_path: Path) -> Callable[..., Path]:
    def _write(data: bytes, name: str = 'test.parquet') -> Path:
        path = tmp_path / name
        path.write_bytes(data)
        return path

    return _write


@pytest.fixture
def sample_file(write_parquet, sample_bytes: bytes) -> Path:
    return write_parquet(sample_bytes, 'sample.parquet')


_RANGE = re.compile(r'bytes=(\d+)-(\d*)')


class _RangeHandler(BaseHTTPRequestHandler):
    files: dict[str, bytes] = {}
    requests: list[str] = []

    def do_GET(self) -> None:
        data = self.files.get(self.path)
        if data is None:
            self.send_error(404)
            return

        match = _RANGE.fullmatch(self.headers.get('Range', ''))
        if match is None:
            self.send_error(416)
            return
        start = int(match.group(1))
        end = int(match.group(2)) if match.group(2) else len(data) - 1
        end = min(end, len(data) - 1)
        body = data[start : end + 1]
        self.requests.append(self.headers['Range'])

        self.send_response(206)
        self.send_header('Content-Range', f'bytes {start}-{end}/{len(data)}')
        self.send_header('Content-Length', str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args) -> None:  # noqa: A002
        pass


@pytest.fixture
def http_server() -> Iterator[tuple[str, type[_RangeHandler]]]:
    """Serve registered files over HTTP with Range support."""
    handler = type('Handler', (_RangeHandler,), {'files': {}, 'requests': []})
    server = ThreadingHTTPServer(('127.0.0.1', 0), handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f'http://127.0.0.1:{server.server_address[1]}', handler
    finally:
        server.shutdown()
        server.server_close()
