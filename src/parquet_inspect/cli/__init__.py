import json
import logging
import sys

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import click

from click_option_group import (
    RequiredMutuallyExclusiveOptionGroup,
    optgroup,
)

from parquet_inspect.exceptions import ParquetIndexError, ParquetInspectError
from parquet_inspect.inspector import ParquetInspector
from parquet_inspect.util.http_file import check_url

from . import formatters


@contextmanager
def handle_errors() -> Iterator[None]:
    """Report inspector errors on stderr and exit with a status code."""
    try:
        yield
    except ParquetIndexError as e:
        click.echo(f'Error: {e}', err=True)
        sys.exit(2)
    except (ParquetInspectError, OSError) as e:
        click.echo(f'Error: {e}', err=True)
        sys.exit(1)


def source_options(command):
    """Attach the required, mutually exclusive file/URL source options."""
    command = optgroup.option('-u', '--url', help='HTTP(S) URL to Parquet file')(
        command,
    )
    command = optgroup.option(
        '-f',
        '--file',
        'file_path',
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help='Path to Parquet file',
    )(command)
    return optgroup.group(
        'Parquet source file',
        cls=RequiredMutuallyExclusiveOptionGroup,
        help='A parquet file local path or remote HTTP(S) url',
    )(command)


json_option = click.option(
    '--json',
    'as_json',
    is_flag=True,
    help='Print the result as JSON',
)


def open_inspector(file_path: Path | None, url: str | None) -> ParquetInspector:
    source = file_path if file_path is not None else url
    if source is None:
        raise click.UsageError("Didn't get a file or a url")
    with handle_errors():
        if url is not None:
            check_url(url)
        inspector = ParquetInspector(source)
    return inspector


def echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2))


@click.group()
@click.version_option(package_name='parquet-inspect')
@click.option(
    '-v',
    '--verbose',
    count=True,
    help='Log progress to stderr; repeat for debug output',
)
def cli(verbose: int):
    """parquet-inspect - look inside Parquet files, page by page"""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG if verbose > 1 else logging.INFO,
            format='%(levelname)s %(name)s: %(message)s',
        )


@cli.command()
@source_options
@json_option
def info(file_path: Path | None, url: str | None, as_json: bool):
    """Show a summary of the file."""
    inspector = open_inspector(file_path, url)
    result = inspector.file_info()
    if as_json:
        echo_json(result.model_dump(mode='json'))
    else:
        click.echo(formatters.format_info(result))


@cli.command()
@source_options
def schema(file_path: Path | None, url: str | None):
    """Show the schema elements in file order."""
    inspector = open_inspector(file_path, url)
    click.echo(formatters.format_schema(inspector.schema))


@cli.command()
@source_options
@json_option
def rowgroups(file_path: Path | None, url: str | None, as_json: bool):
    """List the row groups."""
    inspector = open_inspector(file_path, url)
    result = inspector.list_row_groups()
    if as_json:
        echo_json([rg.model_dump(mode='json') for rg in result])
    else:
        click.echo(formatters.format_rowgroups(result))


@cli.command()
@source_options
@json_option
@click.argument('rg', type=int)
def columns(file_path: Path | None, url: str | None, as_json: bool, rg: int):
    """List the column chunks of row group RG."""
    inspector = open_inspector(file_path, url)
    with handle_errors():
        result = inspector.list_columns(rg)
    if as_json:
        echo_json([col.model_dump(mode='json') for col in result])
    else:
        click.echo(formatters.format_columns(rg, result))


@cli.command()
@source_options
@json_option
@click.argument('rg', type=int)
@click.argument('col', type=int)
def column(file_path: Path | None, url: str | None, as_json: bool, rg: int, col: int):
    """Show column chunk COL of row group RG."""
    inspector = open_inspector(file_path, url)
    with handle_errors():
        result = inspector.get_column(rg, col)
    if as_json:
        echo_json(result.model_dump(mode='json'))
    else:
        click.echo(formatters.format_column(rg, result))


@cli.command()
@source_options
@json_option
@click.argument('rg', type=int)
@click.argument('col', type=int)
def pages(file_path: Path | None, url: str | None, as_json: bool, rg: int, col: int):
    """List the pages of column chunk COL in row group RG."""
    inspector = open_inspector(file_path, url)
    with handle_errors():
        result = inspector.list_pages(rg, col)
    if as_json:
        echo_json([page.model_dump(mode='json') for page in result])
    else:
        click.echo(formatters.format_pages(rg, col, result))


@cli.command()
@source_options
@json_option
@click.argument('rg', type=int)
@click.argument('col', type=int)
@click.argument('page_index', metavar='PAGE', type=int)
def page(
    file_path: Path | None,
    url: str | None,
    as_json: bool,
    rg: int,
    col: int,
    page_index: int,
):
    """Show page PAGE of column chunk COL in row group RG."""
    inspector = open_inspector(file_path, url)
    with handle_errors():
        result = inspector.get_page(rg, col, page_index)
    if as_json:
        echo_json(result.model_dump(mode='json'))
    else:
        click.echo(formatters.format_page(result))


@cli.command()
@source_options
@json_option
@click.option(
    '-n',
    '--limit',
    type=click.IntRange(min=0),
    default=None,
    help='Show at most this many values',
)
@click.argument('rg', type=int)
@click.argument('col', type=int)
@click.argument('page_index', metavar='PAGE', type=int)
def content(
    file_path: Path | None,
    url: str | None,
    as_json: bool,
    limit: int | None,
    rg: int,
    col: int,
    page_index: int,
):
    """Decode the values of page PAGE of column chunk COL in row group RG."""
    inspector = open_inspector(file_path, url)
    with handle_errors():
        result = inspector.get_page_content(rg, col, page_index)
    if as_json:
        echo_json(result.model_dump(mode='json'))
    else:
        click.echo(formatters.format_content(result, limit))


if __name__ == '__main__':
    cli()
