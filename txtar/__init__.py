"""
txtar: a trivial text-based file archive format

An archive is an optional comment followed by zero or more file sections, each
introduced by a marker line of the form "-- NAME --". The format is meant to be
created and edited by hand and to diff nicely; it does not try to be a general
archive format (no binary data, file modes, symlinks or directories).

This package provides:

- A marker scanner and parser (txtar.parser.parse)
- An in-memory Archive with name-keyed add/write/read/delete
- Canonical serialization: comment, blank line, files in name order
- Option-based construction (txtar.options.new) that reports all errors at once
- File helpers (parse_file, dump, dump_file) and a CLI to zip/unzip directories

Names and contents are normalized on the way in: surrounding whitespace is
stripped and non-empty contents end in exactly one newline, so
parse(serialize(a)) == a for any archive holding at least one file.
"""

from .archive import Archive, equal
from .errors import TxtarError
from .fileio import dump, dump_file, parse_file
from .options import new, with_comment, with_file
from .parser import parse

__version__ = "0.1"

__all__ = [
    "Archive",
    "TxtarError",
    "dump",
    "dump_file",
    "equal",
    "new",
    "parse",
    "parse_file",
    "with_comment",
    "with_file",
]
