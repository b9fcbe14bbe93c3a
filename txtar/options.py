from __future__ import annotations

from typing import Callable, List

from .archive import Archive, Contents
from .errors import OptionsError, TxtarError


Option = Callable[[Archive], None]


def with_comment(comment: str) -> Option:
    """Set the archive comment; a later ``with_comment`` replaces an earlier one."""

    def _apply(archive: Archive) -> None:
        archive.comment = comment

    return _apply


def with_file(name: str, contents: Contents) -> Option:
    """Add a file; a name given twice makes :func:`new` fail."""

    def _apply(archive: Archive) -> None:
        archive.add(name, contents)

    return _apply


def new(*options: Option) -> Archive:
    """Build an archive from options.

    Every option is applied even after a failure so that all problems are
    reported together.

    Raises:
        OptionsError: One or more options failed; see ``OptionsError.errors``.
    """
    archive = Archive()
    errors: List[TxtarError] = []
    for option in options:
        try:
            option(archive)
        except TxtarError as exc:
            errors.append(exc)
    if errors:
        raise OptionsError(errors)
    return archive
