"""Typed format errors raised by the lzpack codecs."""
from __future__ import annotations

ERRORS = {
    "E_FORMAT": "Malformed compressed stream",
    "E_MAGIC": "Magic byte does not identify this codec",
    "E_TRUNCATED": "Token cut off mid-stream",
    "E_INVALID_TOKEN": "Unknown token tag",
    "E_OFFSET_RANGE": "Match offset outside the history window",
    "E_ZERO_LENGTH": "Match length is zero",
    "E_SHORT_MATCH": "Match length below the minimum match length",
    "E_ZERO_RUN": "Run count is zero",
    "E_UNKNOWN_FORMAT": "Compression algorithm could not be detected",
    "E_ARCHIVE": "Archive framing invalid",
}


class FormatError(ValueError):
    """Base class for every malformed-stream failure.

    ``position`` is the byte offset into the compressed stream where the
    offending token (or field) starts, or None when it does not apply.
    """

    code = "E_FORMAT"

    def __init__(self, detail: str | None = None, position: int | None = None):
        self.detail = detail
        self.position = position
        message = ERRORS[self.code]
        if detail:
            message = f"{message}: {detail}"
        if position is not None:
            message = f"{message} (at byte {position})"
        super().__init__(message)


class MagicByteMismatch(FormatError):
    code = "E_MAGIC"


class TruncatedToken(FormatError):
    code = "E_TRUNCATED"


class InvalidToken(FormatError):
    code = "E_INVALID_TOKEN"


class OffsetOutOfRange(FormatError):
    code = "E_OFFSET_RANGE"


class ZeroLengthMatch(FormatError):
    code = "E_ZERO_LENGTH"


class MatchTooShort(FormatError):
    code = "E_SHORT_MATCH"


class ZeroLengthRun(FormatError):
    code = "E_ZERO_RUN"


class UnknownFormat(FormatError):
    code = "E_UNKNOWN_FORMAT"


class ArchiveError(FormatError):
    code = "E_ARCHIVE"
