"""In-memory txtar archive.

An :class:`Archive` holds one comment and a set of uniquely named files. Names
and contents are normalized on every mutation:

- names and the comment are stripped of surrounding whitespace
- contents are stripped and, when non-empty, end in exactly one newline

The module level functions accept ``None`` in place of an archive and fall
back to neutral defaults for reads; mutators raise :class:`NilArchiveError`.
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Tuple, Union

from .constants import ENCODING, MARKER_PREFIX, MARKER_SUFFIX
from .errors import (
    ArchiveEncodingError,
    ArchiveFileNotFoundError,
    DuplicateFileError,
    InvalidNameError,
    NilArchiveError,
)


Contents = Union[str, bytes, bytearray]

_PREFIX = MARKER_PREFIX.decode(ENCODING)
_SUFFIX = MARKER_SUFFIX.decode(ENCODING)


def _clean_name(name: str) -> str:
    return name.strip()


def _storable_name(name: str) -> str:
    key = _clean_name(name)
    # A name must fit on its marker line
    if "\n" in key or "\r" in key:
        raise InvalidNameError(f"file name may not contain a line break: {key!r}")
    return key


def _clean_text(text: str) -> str:
    return text.replace("\r\n", "\n").strip()


def _clean_contents(contents: Contents) -> str:
    if isinstance(contents, (bytes, bytearray)):
        try:
            contents = bytes(contents).decode(ENCODING)
        except UnicodeDecodeError as exc:
            raise ArchiveEncodingError(f"file contents are not valid UTF-8: {exc}") from exc
    text = _clean_text(contents)
    if text:
        text += "\n"
    return text


class Archive:
    """A comment plus a name -> contents mapping."""

    def __init__(self) -> None:
        self._files: Dict[str, str] = {}
        self._comment = ""

    @property
    def comment(self) -> str:
        return self._comment

    @comment.setter
    def comment(self, value: str) -> None:
        self._comment = _clean_text(value)

    def has(self, name: str) -> bool:
        return _clean_name(name) in self._files

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def add(self, name: str, contents: Contents) -> None:
        """Insert a new file.

        Raises:
            DuplicateFileError: A file with the same (trimmed) name exists.
            InvalidNameError: The name contains a line break.
        """
        key = _storable_name(name)
        if key in self._files:
            raise DuplicateFileError(f"file with name {key!r} already exists in archive")
        self._files[key] = _clean_contents(contents)

    def write(self, name: str, contents: Contents) -> None:
        """Insert or overwrite a file."""
        self._files[_storable_name(name)] = _clean_contents(contents)

    def read(self, name: str) -> str:
        """Return the contents of ``name``.

        Raises:
            ArchiveFileNotFoundError: No such file in the archive.
        """
        key = _clean_name(name)
        try:
            return self._files[key]
        except KeyError:
            raise ArchiveFileNotFoundError(f"file {key!r} not contained in the archive") from None

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._files.get(_clean_name(name), default)

    def delete(self, name: str) -> None:
        self._files.pop(_clean_name(name), None)

    def size(self) -> int:
        return len(self._files)

    def __len__(self) -> int:
        return len(self._files)

    def names(self) -> List[str]:
        return sorted(self._files)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def files(self) -> Iterator[Tuple[str, str]]:
        """Yield ``(name, contents)`` in ascending name order.

        The pairs are captured when iteration starts; later changes to the
        archive do not affect a running iteration.
        """
        yield from sorted(self._files.items())

    def serialize(self) -> str:
        """Render the archive in canonical txtar form.

        The comment comes first, separated from the files by a blank line;
        files follow in ascending name order.
        """
        out: List[str] = []
        if self._comment:
            out.append(self._comment + "\n")
            if self._files:
                out.append("\n")
        for name, contents in self.files():
            out.append(f"{_PREFIX}{name}{_SUFFIX}\n")
            out.append(contents)
        return "".join(out)

    def __str__(self) -> str:
        return self.serialize()

    def __repr__(self) -> str:
        return f"Archive(comment={self._comment!r}, files={self.names()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Archive):
            return NotImplemented
        return equal(self, other)

    __hash__ = None  # type: ignore[assignment]


# -------- None-aware helpers --------

def comment(archive: Optional[Archive]) -> str:
    if archive is None:
        return ""
    return archive.comment


def has(archive: Optional[Archive], name: str) -> bool:
    if archive is None:
        return False
    return archive.has(name)


def read(archive: Optional[Archive], name: str) -> Tuple[str, bool]:
    """Return ``(contents, found)``; ``("", False)`` for missing files or archives."""
    if archive is None:
        return "", False
    contents = archive.get(name)
    if contents is None:
        return "", False
    return contents, True


def size(archive: Optional[Archive]) -> int:
    if archive is None:
        return 0
    return archive.size()


def files(archive: Optional[Archive]) -> Iterator[Tuple[str, str]]:
    if archive is None:
        return iter(())
    return archive.files()


def serialize(archive: Optional[Archive]) -> str:
    if archive is None:
        return ""
    return archive.serialize()


def delete(archive: Optional[Archive], name: str) -> None:
    if archive is None:
        return
    archive.delete(name)


def write(archive: Optional[Archive], name: str, contents: Contents) -> None:
    if archive is None:
        raise NilArchiveError("cannot write to a missing archive")
    archive.write(name, contents)


def add(archive: Optional[Archive], name: str, contents: Contents) -> None:
    if archive is None:
        raise NilArchiveError("cannot add to a missing archive")
    archive.add(name, contents)


def equal(a: Optional[Archive], b: Optional[Archive]) -> bool:
    """Compare two archives by comment and file contents.

    Two missing archives are equal; a missing and a present one are not.
    """
    if a is None or b is None:
        return a is None and b is None
    if a.comment != b.comment:
        return False
    if a.size() != b.size():
        return False
    for name, contents in a.files():
        other = b.get(name)
        if other is None or other != contents:
            return False
    return True
