"""Folder archives: many compressed streams with length-prefixed framing.

Layout (little-endian)::

    [Magic(1) | Count(4)]
    { [PathLen(2) | Path(UTF-8, POSIX, relative) | StreamLen(4) | Stream] } * Count

Every Stream is a complete codec stream and starts with the same magic byte
as the archive header.
"""
from __future__ import annotations

import io
import struct
from pathlib import Path, PurePosixPath
from typing import BinaryIO
from warnings import warn

from lzpack_core.errors import ArchiveError, MagicByteMismatch
from lzpack_core.protocol import (
    ALGORITHMS,
    ARCHIVE_HEADER_FMT,
    ARCHIVE_HEADER_LEN,
    DEFAULT_MAX_STREAM_SIZE,
    ENTRY_PATH_LEN_FMT,
    ENTRY_PATH_LEN_LEN,
    ENTRY_STREAM_LEN_FMT,
    ENTRY_STREAM_LEN_LEN,
    MAX_PATH_LEN,
)
from lzpack_codec.detect import detect_algorithm, get_codec
from lzpack_codec.tokens import read_fully


def collect_files(folder: Path) -> list[tuple[str, Path]]:
    """Regular files under ``folder`` as sorted ``(relative posix path, path)`` pairs."""
    folder = Path(folder)
    if folder.is_file():
        return [(folder.name, folder)]
    if not folder.is_dir():
        raise FileNotFoundError(f"No such file or directory: {folder}")

    files: list[tuple[str, Path]] = []
    for p in folder.rglob("*"):
        if p.is_symlink() or (not p.is_file() and not p.is_dir()):
            warn(f"Skipping non-regular file {p}")
            continue
        if p.is_file():
            files.append((p.relative_to(folder).as_posix(), p))
    files.sort(key=lambda item: item[0])
    return files


def pack_folder(folder: Path, writer: BinaryIO, algorithm: str = "lz") -> int:
    """Compress every file under ``folder`` into one archive. Returns the file count."""
    compress_stream, _ = get_codec(algorithm)
    files = collect_files(folder)
    if not files:
        warn(f"No files to archive under {folder}")

    writer.write(struct.pack(ARCHIVE_HEADER_FMT, ALGORITHMS[algorithm], len(files)))
    for rel, p in files:
        rel_bytes = rel.encode("utf-8")
        if len(rel_bytes) > MAX_PATH_LEN:
            raise ValueError(f"Path too long for archive: {rel}")

        buf = io.BytesIO()
        with open(p, "rb") as f:
            compress_stream(f, buf)
        stream = buf.getvalue()

        writer.write(struct.pack(ENTRY_PATH_LEN_FMT, len(rel_bytes)))
        writer.write(rel_bytes)
        writer.write(struct.pack(ENTRY_STREAM_LEN_FMT, len(stream)))
        writer.write(stream)

    writer.flush()
    return len(files)


def _safe_member_path(rel: str, position: int) -> PurePosixPath:
    member = PurePosixPath(rel)
    if (
        not member.parts
        or member.is_absolute()
        or ".." in member.parts
        or "\\" in rel
        or "\x00" in rel
    ):
        raise ArchiveError(f"unsafe member path {rel!r}", position=position)
    return member


def unpack_archive(reader: BinaryIO, out_dir: Path, algorithm: str | None = None) -> list[Path]:
    """Extract an archive into ``out_dir``. Returns the written paths in archive order.

    The algorithm is taken from the archive header unless given explicitly,
    in which case the header must agree with it.
    """
    out_dir = Path(out_dir)
    header = read_fully(reader, ARCHIVE_HEADER_LEN)
    if len(header) < ARCHIVE_HEADER_LEN:
        raise ArchiveError(f"truncated archive header ({len(header)} bytes)", position=0)

    magic, count = struct.unpack(ARCHIVE_HEADER_FMT, header)
    found = detect_algorithm(bytes((magic,)))
    if algorithm is not None and found != algorithm:
        raise MagicByteMismatch(f"archive holds {found!r} streams, expected {algorithm!r}", position=0)
    _, decompress_stream = get_codec(found)

    pos = ARCHIVE_HEADER_LEN
    written: list[Path] = []
    for i in range(count):
        entry_start = pos

        raw = read_fully(reader, ENTRY_PATH_LEN_LEN)
        if len(raw) < ENTRY_PATH_LEN_LEN:
            raise ArchiveError(f"truncated header of member {i}", position=entry_start)
        (path_len,) = struct.unpack(ENTRY_PATH_LEN_FMT, raw)
        pos += ENTRY_PATH_LEN_LEN

        rel_bytes = read_fully(reader, path_len)
        if len(rel_bytes) < path_len:
            raise ArchiveError(f"truncated path of member {i}", position=entry_start)
        pos += path_len
        try:
            rel = rel_bytes.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ArchiveError(f"member {i} path is not UTF-8: {e}", position=entry_start) from None
        member = _safe_member_path(rel, entry_start)

        raw = read_fully(reader, ENTRY_STREAM_LEN_LEN)
        if len(raw) < ENTRY_STREAM_LEN_LEN:
            raise ArchiveError(f"truncated length of member {rel}", position=entry_start)
        (stream_len,) = struct.unpack(ENTRY_STREAM_LEN_FMT, raw)
        pos += ENTRY_STREAM_LEN_LEN

        # Zip bomb protection
        if stream_len > DEFAULT_MAX_STREAM_SIZE:
            raise ArchiveError(
                f"member {rel} stream size {stream_len} exceeds limit {DEFAULT_MAX_STREAM_SIZE}",
                position=entry_start,
            )

        stream = read_fully(reader, stream_len)
        if len(stream) < stream_len:
            raise ArchiveError(f"torn stream for member {rel}", position=entry_start)
        if not stream or stream[0] != magic:
            raise ArchiveError(f"member {rel} stream does not match archive algorithm", position=pos)
        pos += stream_len

        out = io.BytesIO()
        decompress_stream(io.BytesIO(stream), out)

        target = out_dir.joinpath(*member.parts)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(out.getvalue())
        written.append(target)

    if reader.read(1):
        warn(f"Trailing bytes after {count} archive members at offset {pos}")

    return written
