"""LZ77 sliding-window codec: streaming compress and decompress loops.

Both directions keep a HistoryWindow and push every produced byte into it in
the same order, so a match offset always refers to the same byte on the
encoder and the decoder.
"""
from __future__ import annotations

import io
from typing import BinaryIO

from lzpack_core.errors import MatchTooShort, OffsetOutOfRange, ZeroLengthMatch
from lzpack_core.protocol import (
    LZ_MAGIC,
    MAX_LENGTH_FIELD,
    MAX_MATCH_LENGTH,
    MAX_OFFSET,
    MIN_MATCH_LENGTH,
    READ_CHUNK_SIZE,
    WINDOW_SIZE,
)
from lzpack_core.window import HistoryWindow
from lzpack_codec.matcher import find_longest_match
from lzpack_codec.tokens import Literal, Match, TokenReader, encode_token


class LZ77Codec:
    """LZ77 codec bound to one window size and maximum match length.

    Every call to ``compress_stream``/``decompress_stream`` owns a fresh
    window and lookahead; nothing is shared between calls.
    """

    def __init__(self, window_size: int = WINDOW_SIZE, max_match_length: int = MAX_MATCH_LENGTH):
        if not 1 <= window_size <= MAX_OFFSET:
            raise ValueError(f"window_size must be in [1, {MAX_OFFSET}], got {window_size}")
        if not MIN_MATCH_LENGTH <= max_match_length <= MAX_LENGTH_FIELD:
            raise ValueError(
                f"max_match_length must be in [{MIN_MATCH_LENGTH}, {MAX_LENGTH_FIELD}], got {max_match_length}"
            )
        self.window_size = window_size
        self.max_match_length = max_match_length

    def compress_stream(self, reader: BinaryIO, writer: BinaryIO) -> None:
        writer.write(bytes((LZ_MAGIC,)))

        window = HistoryWindow(self.window_size)
        lookahead = bytearray()
        out = bytearray()
        eof = False

        def refill() -> None:
            nonlocal eof
            while not eof and len(lookahead) < self.max_match_length:
                chunk = reader.read(self.max_match_length - len(lookahead))
                if not chunk:
                    eof = True
                else:
                    lookahead.extend(chunk)

        refill()
        while lookahead:
            offset, length = find_longest_match(
                window, bytes(lookahead), self.max_match_length, self.window_size
            )
            if length >= MIN_MATCH_LENGTH and offset <= MAX_OFFSET:
                out += encode_token(Match(offset, length))
            else:
                length = 1
                out += encode_token(Literal(lookahead[0]))

            window.extend(lookahead[:length])
            del lookahead[:length]
            refill()

            if len(out) >= READ_CHUNK_SIZE:
                writer.write(out)
                out.clear()

        if out:
            writer.write(out)
        writer.flush()

    def decompress_stream(self, reader: BinaryIO, writer: BinaryIO) -> None:
        tokens = TokenReader(reader)
        tokens.read_magic(LZ_MAGIC)

        window = HistoryWindow(self.window_size)
        out = bytearray()

        while True:
            start = tokens.position
            token = tokens.read_token()
            if token is None:
                break

            if isinstance(token, Literal):
                window.push(token.byte)
                out.append(token.byte)
            else:
                offset, length = token.offset, token.length
                if offset == 0 or offset > len(window):
                    raise OffsetOutOfRange(
                        f"offset {offset} with {len(window)} bytes of history", position=start
                    )
                if length == 0:
                    raise ZeroLengthMatch(position=start)
                if length < MIN_MATCH_LENGTH:
                    raise MatchTooShort(f"length {length}", position=start)

                # Byte by byte: an overlapping match reads bytes it has just produced.
                for _ in range(length):
                    b = window.get(offset)
                    window.push(b)
                    out.append(b)

            if len(out) >= READ_CHUNK_SIZE:
                writer.write(out)
                out.clear()

        if out:
            writer.write(out)
        writer.flush()

    def compress(self, data: bytes) -> bytes:
        out = io.BytesIO()
        self.compress_stream(io.BytesIO(data), out)
        return out.getvalue()

    def decompress(self, data: bytes) -> bytes:
        out = io.BytesIO()
        self.decompress_stream(io.BytesIO(data), out)
        return out.getvalue()


_DEFAULT = LZ77Codec()


def compress_lz_stream(reader: BinaryIO, writer: BinaryIO) -> None:
    _DEFAULT.compress_stream(reader, writer)


def decompress_lz_stream(reader: BinaryIO, writer: BinaryIO) -> None:
    _DEFAULT.decompress_stream(reader, writer)


def compress(data: bytes) -> bytes:
    """Compress ``data`` into a complete LZ77 stream (magic byte included)."""
    return _DEFAULT.compress(data)


def decompress(data: bytes) -> bytes:
    """Decompress a complete LZ77 stream. Raises FormatError subclasses."""
    return _DEFAULT.decompress(data)
