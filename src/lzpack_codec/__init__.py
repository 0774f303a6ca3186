"""lzpack codecs - LZ77 sliding window and run-length encoding."""
from .lz77 import LZ77Codec, compress, decompress, compress_lz_stream, decompress_lz_stream
from .rle import compress_rle_stream, decompress_rle_stream
from .detect import detect_algorithm, detect_stream, get_codec

__all__ = [
    "LZ77Codec",
    "compress",
    "decompress",
    "compress_lz_stream",
    "decompress_lz_stream",
    "compress_rle_stream",
    "decompress_rle_stream",
    "detect_algorithm",
    "detect_stream",
    "get_codec",
]
