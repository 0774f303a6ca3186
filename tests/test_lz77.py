import io
import random

import pytest

from lzpack_core.errors import (
    FormatError,
    InvalidToken,
    MagicByteMismatch,
    MatchTooShort,
    OffsetOutOfRange,
    TruncatedToken,
    ZeroLengthMatch,
)
from lzpack_core.protocol import LZ_MAGIC, MAX_MATCH_LENGTH, MAX_OFFSET, WINDOW_SIZE
from lzpack_codec.lz77 import LZ77Codec, compress, decompress
from lzpack_codec.tokens import Literal, Match, TokenReader


class Trickle(io.RawIOBase):
    """Reader that hands out at most one byte per read call."""

    def __init__(self, data: bytes):
        self.data = data
        self.pos = 0

    def readable(self):
        return True

    def read(self, n=-1):
        chunk = self.data[self.pos:self.pos + 1]
        self.pos += len(chunk)
        return chunk


def sample(seed: int, n: int, alphabet: bytes = b"abcd") -> bytes:
    rng = random.Random(seed)
    return bytes(rng.choice(alphabet) for _ in range(n))


def test_empty_input_is_only_the_magic_byte():
    assert compress(b"") == bytes([LZ_MAGIC])
    assert decompress(bytes([LZ_MAGIC])) == b""


@pytest.mark.parametrize(
    "data",
    [
        b"a",
        b"ab",
        b"abc",
        b"That Sam-I-am, that Sam-I-am, I do not like that Sam-I-am.000000000000000000",
        bytes(range(256)) * 3,
        b"A" * (MAX_MATCH_LENGTH + 1),
        b"xy" * WINDOW_SIZE,
        sample(1, WINDOW_SIZE - 1),
        sample(2, WINDOW_SIZE),
        sample(3, WINDOW_SIZE + 1),
        sample(4, 5000, alphabet=bytes(range(256))),
    ],
)
def test_round_trip(data):
    out = compress(data)
    assert out[0] == LZ_MAGIC
    assert decompress(out) == data


def test_compress_is_deterministic():
    data = sample(5, 3000)
    assert compress(data) == compress(data)


def test_abab_example():
    out = compress(b"ABABABABABAB")
    assert out == b"\x4c" + b"\x00A" + b"\x00B" + b"\x01\x02\x0a"
    assert decompress(out) == b"ABABABABABAB"


def test_self_overlapping_match():
    out = compress(b"A" * 10)
    assert out == b"\x4c\x00A\x01\x01\x09"
    assert decompress(out) == b"A" * 10


def test_max_length_run_then_different_byte():
    data = b"A" * MAX_MATCH_LENGTH + b"B"
    out = compress(data)
    assert out == b"\x4c\x00A\x01\x01\xfe\x00B"
    assert decompress(out) == data

    data = b"A" * (MAX_MATCH_LENGTH + 1) + b"B"
    out = compress(data)
    assert out == b"\x4c\x00A\x01\x01\xff\x00B"
    assert decompress(out) == data


def test_emitted_matches_are_valid():
    data = sample(6, 4000) + b"Z" * 600 + sample(7, 2000)
    r = TokenReader(io.BytesIO(compress(data)))
    r.read_magic()
    produced = 0
    for token in r:
        if isinstance(token, Match):
            assert 1 <= token.offset <= min(produced, MAX_OFFSET)
            assert 3 <= token.length <= MAX_MATCH_LENGTH
            produced += token.length
        else:
            assert isinstance(token, Literal)
            produced += 1
    assert produced == len(data)


def test_short_reads_give_identical_output():
    data = sample(8, 1500)
    out = io.BytesIO()
    LZ77Codec().compress_stream(Trickle(data), out)
    assert out.getvalue() == compress(data)

    restored = io.BytesIO()
    LZ77Codec().decompress_stream(Trickle(out.getvalue()), restored)
    assert restored.getvalue() == data


def test_small_window_codec():
    codec = LZ77Codec(window_size=4, max_match_length=5)
    data = b"abcabcabcabc" + sample(9, 500)
    out = codec.compress(data)
    assert codec.decompress(out) == data
    r = TokenReader(io.BytesIO(out))
    r.read_magic()
    for token in r:
        if isinstance(token, Match):
            assert token.offset <= 4
            assert token.length <= 5


def test_codec_rejects_parameters_outside_wire_fields():
    with pytest.raises(ValueError):
        LZ77Codec(window_size=MAX_OFFSET + 1)
    with pytest.raises(ValueError):
        LZ77Codec(window_size=0)
    with pytest.raises(ValueError):
        LZ77Codec(max_match_length=2)
    with pytest.raises(ValueError):
        LZ77Codec(max_match_length=256)


@pytest.mark.parametrize(
    "stream, error, position",
    [
        (b"", MagicByteMismatch, 0),
        (b"\x52\x41\x03", MagicByteMismatch, 0),
        (b"\x4c\x00", TruncatedToken, 1),
        (b"\x4c\x00A\x01", TruncatedToken, 3),
        (b"\x4c\x00A\x01\x01", TruncatedToken, 3),
        (b"\x4c\x02A", InvalidToken, 1),
        (b"\x4c\x00A\xff", InvalidToken, 3),
        (b"\x4c\x01\x01\x03", OffsetOutOfRange, 1),
        (b"\x4c\x00A\x01\x00\x03", OffsetOutOfRange, 3),
        (b"\x4c\x00A\x01\x02\x03", OffsetOutOfRange, 3),
        (b"\x4c\x00A\x01\x01\x00", ZeroLengthMatch, 3),
        (b"\x4c\x00A\x01\x01\x02", MatchTooShort, 3),
    ],
)
def test_malformed_streams(stream, error, position):
    with pytest.raises(error) as e:
        decompress(stream)
    assert isinstance(e.value, FormatError)
    assert e.value.position == position
