"""Run-length codec: [Magic] followed by (byte, count) pairs."""
from __future__ import annotations

import io
from typing import BinaryIO

from lzpack_core.errors import TruncatedToken, ZeroLengthRun
from lzpack_core.protocol import MAX_RUN_LENGTH, READ_CHUNK_SIZE, RLE_MAGIC, RLE_PAIR_LEN
from lzpack_codec.tokens import TokenReader, read_fully


def compress_rle_stream(reader: BinaryIO, writer: BinaryIO) -> None:
    writer.write(bytes((RLE_MAGIC,)))

    out = bytearray()
    current = -1
    count = 0
    while True:
        chunk = reader.read(READ_CHUNK_SIZE)
        if not chunk:
            break
        for b in chunk:
            if b == current and count < MAX_RUN_LENGTH:
                count += 1
            else:
                if count:
                    out += bytes((current, count))
                current = b
                count = 1
        if len(out) >= READ_CHUNK_SIZE:
            writer.write(out)
            out.clear()

    # Last run
    if count:
        out += bytes((current, count))
    if out:
        writer.write(out)
    writer.flush()


def decompress_rle_stream(reader: BinaryIO, writer: BinaryIO) -> None:
    header = TokenReader(reader)
    header.read_magic(RLE_MAGIC)
    pos = header.position

    out = bytearray()
    while True:
        pair = read_fully(reader, RLE_PAIR_LEN)

        # Clean EOF
        if not pair:
            break
        if len(pair) < RLE_PAIR_LEN:
            raise TruncatedToken("run byte without count", position=pos)

        b, count = pair
        if count == 0:
            raise ZeroLengthRun(f"byte 0x{b:02X}", position=pos)
        out += bytes((b,)) * count
        pos += RLE_PAIR_LEN

        if len(out) >= READ_CHUNK_SIZE:
            writer.write(out)
            out.clear()

    if out:
        writer.write(out)
    writer.flush()


def compress(data: bytes) -> bytes:
    out = io.BytesIO()
    compress_rle_stream(io.BytesIO(data), out)
    return out.getvalue()


def decompress(data: bytes) -> bytes:
    out = io.BytesIO()
    decompress_rle_stream(io.BytesIO(data), out)
    return out.getvalue()
