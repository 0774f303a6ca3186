"""lzpack protocol constants.

Single source of truth for magic bytes, token tags and record layouts.
Keep this file stable. Encoder and decoder must remain synchronized.
"""

# Stream magics (first byte of every compressed stream)
LZ_MAGIC = 0x4C   # 'L'
RLE_MAGIC = 0x52  # 'R'

# LZ77 token tags
TAG_LITERAL = 0
TAG_MATCH = 1

# LZ77 token layout: [tag(1) | payload(1)] or [tag(1) | offset(1) | length(1)]
LITERAL_PAYLOAD_LEN = 1
MATCH_PAYLOAD_FMT = "<BB"
MATCH_PAYLOAD_LEN = 2

# Field limits for the 1-byte offset/length fields
MAX_OFFSET = 0xFF
MAX_LENGTH_FIELD = 0xFF

# Sliding window defaults
WINDOW_SIZE = MAX_OFFSET
MIN_MATCH_LENGTH = 3
MAX_MATCH_LENGTH = MAX_LENGTH_FIELD

# RLE pair: [byte(1) | count(1)]
RLE_PAIR_LEN = 2
MAX_RUN_LENGTH = 0xFF

# Archive: [Magic(1) | Count(4)] then per file [PathLen(2) | Path | StreamLen(4) | Stream]
ARCHIVE_HEADER_FMT = "<BI"
ARCHIVE_HEADER_LEN = 5
ENTRY_PATH_LEN_FMT = "<H"
ENTRY_PATH_LEN_LEN = 2
ENTRY_STREAM_LEN_FMT = "<I"
ENTRY_STREAM_LEN_LEN = 4
MAX_PATH_LEN = 0xFFFF

# Default safety bounds
DEFAULT_MAX_STREAM_SIZE = 1024 * 1024 * 1024  # 1 GiB per archive member

# I/O
READ_CHUNK_SIZE = 64 * 1024

ALGORITHMS = {
    "lz": LZ_MAGIC,
    "rle": RLE_MAGIC,
}
