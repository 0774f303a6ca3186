"""Magic-byte algorithm detection and codec lookup."""
from __future__ import annotations

import io
from typing import BinaryIO, Callable

from lzpack_core.errors import UnknownFormat
from lzpack_core.protocol import ALGORITHMS
from lzpack_codec.lz77 import compress_lz_stream, decompress_lz_stream
from lzpack_codec.rle import compress_rle_stream, decompress_rle_stream

StreamFn = Callable[[BinaryIO, BinaryIO], None]

CODECS: dict[str, tuple[StreamFn, StreamFn]] = {
    "lz": (compress_lz_stream, decompress_lz_stream),
    "rle": (compress_rle_stream, decompress_rle_stream),
}

_BY_MAGIC = {magic: name for name, magic in ALGORITHMS.items()}


def detect_algorithm(data: bytes) -> str:
    """Name the codec that produced ``data`` from its first byte."""
    if not data:
        raise UnknownFormat("empty input", position=0)
    name = _BY_MAGIC.get(data[0])
    if name is None:
        raise UnknownFormat(f"magic byte 0x{data[0]:02X}", position=0)
    return name


def get_codec(name: str) -> tuple[StreamFn, StreamFn]:
    """Return the ``(compress_stream, decompress_stream)`` pair for ``name``."""
    try:
        return CODECS[name]
    except KeyError:
        raise ValueError(f"Unknown algorithm {name!r} (expected one of {sorted(CODECS)})") from None


def detect_stream(reader: io.BufferedReader) -> str:
    """Name the codec of a buffered stream without consuming its first byte."""
    return detect_algorithm(reader.peek(1)[:1])
