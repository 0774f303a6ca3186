"""lzpack core - protocol constants, format errors and the history window."""
from .errors import (
    ERRORS,
    FormatError,
    MagicByteMismatch,
    TruncatedToken,
    InvalidToken,
    OffsetOutOfRange,
    ZeroLengthMatch,
    MatchTooShort,
    ZeroLengthRun,
    UnknownFormat,
    ArchiveError,
)
from .window import HistoryWindow

__all__ = [
    "ERRORS",
    "FormatError",
    "MagicByteMismatch",
    "TruncatedToken",
    "InvalidToken",
    "OffsetOutOfRange",
    "ZeroLengthMatch",
    "MatchTooShort",
    "ZeroLengthRun",
    "UnknownFormat",
    "ArchiveError",
    "HistoryWindow",
]
