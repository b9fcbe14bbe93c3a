from __future__ import annotations

from typing import List


class TxtarError(Exception):
    """Base class for txtar-specific errors."""


# Parse time
class EmptyArchiveError(TxtarError):
    pass


class NoFilesError(TxtarError):
    pass


class UnterminatedMarkerError(TxtarError):
    pass


class ArchiveEncodingError(TxtarError):
    pass


# Store access
class DuplicateFileError(TxtarError):
    pass


class ArchiveFileNotFoundError(TxtarError):
    pass


class InvalidNameError(TxtarError):
    pass


class NilArchiveError(TxtarError):
    pass


class OptionsError(TxtarError):
    """Every failure raised while applying construction options.

    The individual exceptions are kept on ``errors`` in the order the options
    were given.
    """

    def __init__(self, errors: List[TxtarError]):
        self.errors = list(errors)
        super().__init__("; ".join(str(e) for e in self.errors))
