"""Greedy longest-match search over the history window."""
from __future__ import annotations

from lzpack_core.protocol import MAX_MATCH_LENGTH, MAX_OFFSET
from lzpack_core.window import HistoryWindow


def find_longest_match(
    window: HistoryWindow,
    lookahead: bytes,
    max_length: int = MAX_MATCH_LENGTH,
    max_offset: int = MAX_OFFSET,
) -> tuple[int, int]:
    """Return ``(offset, length)`` of the longest match for ``lookahead``.

    Candidates are scanned from the newest byte backwards and only a strictly
    longer match replaces the current best, so equal lengths resolve to the
    smallest offset. A match may run past the end of the window into the
    lookahead itself (offset < length); the decoder reproduces those bytes
    one at a time. ``(0, 0)`` means no match.
    """
    limit = min(len(lookahead), max_length)
    history = window.tail(min(len(window), max_offset))
    n = len(history)
    if limit == 0 or n == 0:
        return 0, 0

    # Window followed by lookahead: the source of a match can extend into
    # bytes that are being encoded by that same match.
    source = history + lookahead[:limit]
    first = lookahead[0]

    best_offset = 0
    best_length = 0
    for offset in range(1, n + 1):
        start = n - offset
        if source[start] != first:
            continue
        length = 1
        while length < limit and source[start + length] == lookahead[length]:
            length += 1
        if length > best_length:
            best_offset = offset
            best_length = length
            if length == limit:
                # No candidate can do better.
                break

    return best_offset, best_length
