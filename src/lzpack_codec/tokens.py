"""LZ77 token stream: literal/match tokens and their byte layout.

Stream layout::

    [Magic(1)] { [Tag=0 | Byte] | [Tag=1 | Offset | Length] }*

A clean end of stream between tokens terminates the stream. Anything cut
off inside a token is a fatal format error.
"""
from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import BinaryIO, Union

from lzpack_core.errors import InvalidToken, MagicByteMismatch, TruncatedToken
from lzpack_core.protocol import (
    LZ_MAGIC,
    LITERAL_PAYLOAD_LEN,
    MATCH_PAYLOAD_FMT,
    MATCH_PAYLOAD_LEN,
    MAX_LENGTH_FIELD,
    MAX_OFFSET,
    TAG_LITERAL,
    TAG_MATCH,
)


@dataclass(frozen=True)
class Literal:
    byte: int


@dataclass(frozen=True)
class Match:
    offset: int
    length: int


Token = Union[Literal, Match]


def encode_token(token: Token) -> bytes:
    if isinstance(token, Literal):
        return bytes((TAG_LITERAL, token.byte))
    if not 1 <= token.offset <= MAX_OFFSET:
        raise ValueError(f"Match offset {token.offset} does not fit the offset field")
    if not 1 <= token.length <= MAX_LENGTH_FIELD:
        raise ValueError(f"Match length {token.length} does not fit the length field")
    return bytes((TAG_MATCH,)) + struct.pack(MATCH_PAYLOAD_FMT, token.offset, token.length)


def read_fully(f: BinaryIO, n: int) -> bytes:
    """Read up to ``n`` bytes, retrying short reads until EOF."""
    data = f.read(n)
    if len(data) == n or not data:
        return data
    parts = [data]
    got = len(data)
    while got < n:
        chunk = f.read(n - got)
        if not chunk:
            break
        parts.append(chunk)
        got += len(chunk)
    return b"".join(parts)


class TokenReader:
    """Parse tokens from a compressed stream, tracking the byte position."""

    def __init__(self, f: BinaryIO):
        self.f = f
        self.position = 0

    def _read(self, n: int) -> bytes:
        data = read_fully(self.f, n)
        self.position += len(data)
        return data

    def read_magic(self, expected: int = LZ_MAGIC) -> None:
        magic = self._read(1)
        if not magic:
            raise MagicByteMismatch("empty stream, no magic byte", position=0)
        if magic[0] != expected:
            raise MagicByteMismatch(f"found 0x{magic[0]:02X}, expected 0x{expected:02X}", position=0)

    def read_token(self) -> Token | None:
        """Return the next token, or None at a clean end of stream."""
        start = self.position
        tag = self._read(1)

        # Clean EOF
        if not tag:
            return None

        if tag[0] == TAG_LITERAL:
            payload = self._read(LITERAL_PAYLOAD_LEN)
            if len(payload) < LITERAL_PAYLOAD_LEN:
                raise TruncatedToken("literal without payload byte", position=start)
            return Literal(payload[0])

        if tag[0] == TAG_MATCH:
            payload = self._read(MATCH_PAYLOAD_LEN)
            if len(payload) < MATCH_PAYLOAD_LEN:
                raise TruncatedToken(
                    f"match needs {MATCH_PAYLOAD_LEN} field bytes, got {len(payload)}", position=start
                )
            offset, length = struct.unpack(MATCH_PAYLOAD_FMT, payload)
            return Match(offset, length)

        raise InvalidToken(f"tag 0x{tag[0]:02X}", position=start)

    def __iter__(self):
        while True:
            token = self.read_token()
            if token is None:
                return
            yield token
