"""Marker scanning over raw archive bytes.

A marker line has the form ``-- NAME --`` and must start at the beginning of a
line. The scanner never splits the buffer into lines; it looks for the
three-byte prefix at the buffer start and after every newline, then validates
the candidate line precisely. Everything is offset based, so a full scan is
linear in the size of the buffer.
"""

from __future__ import annotations

from typing import Iterator, Optional, Tuple

from .constants import (
    CRLF,
    ENCODING,
    MARKER_PREFIX,
    MARKER_SUFFIX,
    MIN_MARKER_LEN,
    NEWLINE,
    NEWLINE_MARKER,
)
from .errors import ArchiveEncodingError


def normalize_newlines(data: bytes) -> bytes:
    """Convert CRLF line endings to LF."""
    return data.replace(CRLF, NEWLINE)


def _line_end(data: bytes, pos: int) -> int:
    end = data.find(NEWLINE, pos)
    return len(data) if end < 0 else end


def match_marker(data: bytes, pos: int = 0) -> Optional[Tuple[str, int]]:
    """Validate a marker line starting exactly at ``pos``.

    Args:
        data: Archive bytes with LF line endings.
        pos: Offset of the candidate line start.

    Returns:
        ``(name, after)`` where ``name`` is the trimmed file name (possibly
        empty) and ``after`` the offset just past the marker line's newline,
        or None when the line is not a marker.
    """
    if not data.startswith(MARKER_PREFIX, pos):
        return None
    end = _line_end(data, pos)
    line = data[pos:end].rstrip()
    if len(line) < MIN_MARKER_LEN or not line.endswith(MARKER_SUFFIX):
        return None
    raw = line[len(MARKER_PREFIX):-len(MARKER_SUFFIX)].strip()
    try:
        name = raw.decode(ENCODING)
    except UnicodeDecodeError as exc:
        raise ArchiveEncodingError(f"file name at offset {pos} is not valid UTF-8: {exc}") from exc
    return name, min(end + 1, len(data))


def _find_from(data: bytes, start: int) -> Optional[Tuple[int, str, int]]:
    """Locate the next marker at or after ``start`` (which must be a line start)."""
    i = start
    while True:
        found = match_marker(data, i)
        if found is not None:
            name, after = found
            return i, name, after
        j = data.find(NEWLINE_MARKER, i)
        if j < 0:
            return None
        # Candidate begins after the newline. A false positive at i is never
        # revisited since the search above starts past its own newline.
        i = j + 1


def find_next_marker(data: bytes) -> Tuple[bytes, Optional[str], bytes]:
    """Split ``data`` around its first marker line.

    Returns:
        ``(before, name, after)``. When no marker exists the result is
        ``(data, None, b"")``; None rather than an empty string signals the
        end because an empty file name is legal.
    """
    found = _find_from(data, 0)
    if found is None:
        return data, None, b""
    pos, name, after = found
    return data[:pos], name, data[after:]


def iter_sections(data: bytes) -> Iterator[Tuple[Optional[str], bytes]]:
    """Yield ``(name, body)`` pairs in archive order.

    The first pair always has name None and holds the comment section (which
    may be empty). Each following pair is one file section.
    """
    name: Optional[str] = None
    start = 0
    while True:
        found = _find_from(data, start)
        if found is None:
            yield name, data[start:]
            return
        pos, next_name, after = found
        yield name, data[start:pos]
        name, start = next_name, after


def has_dangling_marker(data: bytes) -> bool:
    """Report a truncated marker line at the very end of ``data``.

    True when the buffer stops, without a final newline, inside a line that
    starts with the marker prefix and was cut off while writing the closing
    ``" --"`` (it ends in ``-`` but is not a valid marker). Other final lines
    starting with ``-- `` (SQL or Lua comments, say) are ordinary content.
    """
    if not data or data.endswith(NEWLINE):
        return False
    start = data.rfind(NEWLINE) + 1
    if not data.startswith(MARKER_PREFIX, start):
        return False
    if not data[start:].rstrip().endswith(b"-"):
        return False
    return match_marker(data, start) is None
