"""Exceptions raised by fsembed."""

from __future__ import annotations


# -----------------------------------------------------------------------------
# Base
# -----------------------------------------------------------------------------


class FsEmbedError(Exception):
    """Base exception for fsembed operations."""

    pass


# -----------------------------------------------------------------------------
# Pack time
# -----------------------------------------------------------------------------


class PackError(FsEmbedError):
    """Raised when packing fails. Aborts the whole run."""

    pass


class WalkError(PackError):
    """Raised when a path cannot be read during traversal."""

    def __init__(self, path: str, cause: BaseException) -> None:
        super().__init__(f"Failed to read {path}: {cause}")
        self.path = path
        self.__cause__ = cause


class AlreadyExistsError(PackError, FileExistsError):
    """Raised when an output path exists and overwriting was not requested."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Output already exists: {path}")
        self.path = path


class TargetIsDirectoryError(PackError, IsADirectoryError):
    """Raised when an output path points at an existing directory."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Output path is a directory: {path}")
        self.path = path


# -----------------------------------------------------------------------------
# Run time
# -----------------------------------------------------------------------------


class DecodeError(FsEmbedError, ValueError):
    """Raised when an embedded payload is corrupt."""

    pass


class NotFoundError(FsEmbedError, FileNotFoundError):
    """Raised when a virtual path is not present in a filesystem."""

    def __init__(self, path: str) -> None:
        super().__init__(f"No such file: {path}")
        self.path = path
