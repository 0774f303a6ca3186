"""lzpack - LZ77 / RLE file and folder compressor."""
from __future__ import annotations

import contextlib
import os
import sys
import tempfile
from pathlib import Path
from typing import BinaryIO, Iterator

import click

from lzpack_codec.detect import detect_stream, get_codec
from lzpack_archive.archive import pack_folder, unpack_archive
from lzpack_archive.bench import run_benchmark, write_report


def _algorithm(rle: bool, lz: bool, default: str | None) -> str | None:
    if rle and lz:
        raise click.UsageError("Please specify only one of --rle or --lz")
    if rle:
        return "rle"
    if lz:
        return "lz"
    return default


@contextlib.contextmanager
def open_input(name: str) -> Iterator[BinaryIO]:
    if name == "-":
        yield sys.stdin.buffer
    else:
        with open(name, "rb") as f:
            yield f


@contextlib.contextmanager
def open_output(name: str) -> Iterator[BinaryIO]:
    """Write to a temporary file beside ``name`` and rename it on success.

    A failed operation leaves no partial output file behind.
    """
    if name == "-":
        yield sys.stdout.buffer
        sys.stdout.buffer.flush()
        return

    dest = Path(name)
    dest.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=f".{dest.name}.", suffix=".part", dir=dest.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            yield f
        os.replace(tmp, dest)
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(tmp)
        raise


def _fail_closed(fn, *args) -> None:
    try:
        fn(*args)
    except (ValueError, OSError) as e:
        # Fail closed, with a single-line reason.
        click.echo(f"FATAL: {e}", err=True)
        raise SystemExit(1)


@click.group()
def main():
    """Compress files and folders with LZ77 or RLE."""


@main.command("compress")
@click.argument("input", type=str)
@click.argument("output", type=str)
@click.option("--rle", is_flag=True, help="Use RLE compression")
@click.option("--lz", is_flag=True, help="Use LZ77 compression (default)")
def compress_cmd(input: str, output: str, rle: bool, lz: bool) -> None:
    """Compress a file (use - for stdin/stdout)."""
    algorithm = _algorithm(rle, lz, "lz")

    def run() -> None:
        compress_stream, _ = get_codec(algorithm)
        with open_input(input) as src, open_output(output) as dst:
            compress_stream(src, dst)

    _fail_closed(run)


@main.command("decompress")
@click.argument("input", type=str)
@click.argument("output", type=str)
@click.option("--rle", is_flag=True, help="Use RLE decompression")
@click.option("--lz", is_flag=True, help="Use LZ77 decompression")
def decompress_cmd(input: str, output: str, rle: bool, lz: bool) -> None:
    """Decompress a file, detecting the algorithm unless one is given."""
    algorithm = _algorithm(rle, lz, None)

    def run() -> None:
        with open_input(input) as src:
            # Peek at the magic byte; the codec reads the stream from its start.
            name = algorithm or detect_stream(src)
            _, decompress_stream = get_codec(name)
            with open_output(output) as dst:
                decompress_stream(src, dst)

    _fail_closed(run)


@main.command("compress-folder")
@click.argument("folder", type=click.Path(exists=True, path_type=Path))
@click.argument("output", type=str)
@click.option("--rle", is_flag=True, help="Use RLE compression")
@click.option("--lz", is_flag=True, help="Use LZ77 compression (default)")
def compress_folder_cmd(folder: Path, output: str, rle: bool, lz: bool) -> None:
    """Pack every file under FOLDER into one archive."""
    algorithm = _algorithm(rle, lz, "lz")

    def run() -> None:
        with open_output(output) as dst:
            count = pack_folder(folder, dst, algorithm)
        click.echo(f"PASS: {count} files archived with {algorithm}", err=True)

    _fail_closed(run)


@main.command("decompress-folder")
@click.argument("archive", type=str)
@click.argument("out_dir", type=click.Path(file_okay=False, path_type=Path))
@click.option("--rle", is_flag=True, help="Archive uses RLE")
@click.option("--lz", is_flag=True, help="Archive uses LZ77")
def decompress_folder_cmd(archive: str, out_dir: Path, rle: bool, lz: bool) -> None:
    """Extract an archive into OUT_DIR."""
    algorithm = _algorithm(rle, lz, None)

    def run() -> None:
        out_dir.mkdir(parents=True, exist_ok=True)
        with open_input(archive) as src:
            written = unpack_archive(src, out_dir, algorithm)
        click.echo(f"PASS: {len(written)} files extracted to {out_dir}", err=True)

    _fail_closed(run)


@main.command("bench")
@click.argument("input", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--out", type=click.Path(dir_okay=False, path_type=Path), help="Write the report as Parquet")
def bench_cmd(input: Path, out: Path | None) -> None:
    """Benchmark every codec on INPUT."""

    def run() -> None:
        df = run_benchmark(input)
        click.echo(df.drop(columns=["content_hash"]).to_string(index=False))
        if out is not None:
            write_report(df, out)
            click.echo(f"Report written to {out}", err=True)
        if (df["status"] != "VERIFIED").any():
            raise ValueError("round-trip mismatch")

    _fail_closed(run)


if __name__ == "__main__":
    main()
