from __future__ import annotations

from typing import IO, Union

from .archive import Archive
from .constants import ENCODING
from .errors import (
    ArchiveEncodingError,
    EmptyArchiveError,
    NoFilesError,
    UnterminatedMarkerError,
)
from .scanner import has_dangling_marker, iter_sections, normalize_newlines


Source = Union[bytes, bytearray, memoryview, str, IO[bytes], IO[str]]


def _read_all(source: Source) -> bytes:
    if hasattr(source, "read"):
        source = source.read()  # type: ignore[union-attr]
    if isinstance(source, str):
        return source.encode(ENCODING)
    return bytes(source)  # type: ignore[arg-type]


def _decode(body: bytes, what: str) -> str:
    try:
        return body.decode(ENCODING)
    except UnicodeDecodeError as exc:
        raise ArchiveEncodingError(f"{what} is not valid UTF-8: {exc}") from exc


def parse(source: Source) -> Archive:
    """Parse a txtar archive.

    Args:
        source: Archive bytes or text, or a readable stream (read to the end).

    Returns:
        The populated archive. Comment and contents are normalized the same
        way :class:`Archive` normalizes on write.

    Raises:
        EmptyArchiveError: The input is empty.
        NoFilesError: The input contains no file marker.
        UnterminatedMarkerError: The input ends inside a truncated marker line.
        DuplicateFileError: Two sections share a file name.
        ArchiveEncodingError: A name, the comment, or contents are not UTF-8.
    """
    data = _read_all(source)
    if not data:
        raise EmptyArchiveError("cannot parse an empty archive")
    data = normalize_newlines(data)

    sections = iter_sections(data)
    _, head = next(sections)
    archive = Archive()
    archive.comment = _decode(head, "archive comment")

    seen_file = False
    for name, body in sections:
        seen_file = True
        archive.add(name, _decode(body, f"contents of {name!r}"))

    if not seen_file:
        raise NoFilesError("archive contains no file markers")
    if has_dangling_marker(data):
        raise UnterminatedMarkerError("archive ends inside an unterminated file marker")
    return archive
