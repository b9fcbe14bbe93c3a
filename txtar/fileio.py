from __future__ import annotations

import io
import os
from typing import IO, Optional, Union

from .archive import Archive
from .constants import ENCODING
from .errors import NilArchiveError
from .parser import parse


PathLike = Union[str, "os.PathLike[str]"]


def parse_file(path: PathLike) -> Archive:
    """Read and parse the archive stored at ``path``."""
    with open(path, "rb") as fh:
        return parse(fh)


def dump(stream: IO, archive: Optional[Archive]) -> None:
    """Write ``archive`` in canonical form to a text or binary stream.

    Raises:
        NilArchiveError: ``archive`` is None.
    """
    if archive is None:
        raise NilArchiveError("cannot dump a missing archive")
    text = archive.serialize()
    if isinstance(stream, io.TextIOBase):
        stream.write(text)
    else:
        stream.write(text.encode(ENCODING))


def dump_file(path: PathLike, archive: Optional[Archive]) -> None:
    """Write ``archive`` to ``path`` (UTF-8, LF line endings), replacing any existing file."""
    if archive is None:
        raise NilArchiveError("cannot dump a missing archive")
    with open(path, "w", encoding=ENCODING, newline="\n") as fh:
        fh.write(archive.serialize())
