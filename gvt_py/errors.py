"""
Error taxonomy for GVT.

Every operation ends in a ``ResultStatus``. Failures detected below the
engine are raised as ``GvtError`` subclasses carrying their status, and are
turned into results at the operation boundary.
"""

from enum import Enum


class ResultStatus(Enum):
    """Outcome categories of a versioning operation."""

    SUCCESS = "success"
    UNCHANGED = "unchanged"  # no-op success, no version created
    NOT_INITIALIZED = "not_initialized"
    ALREADY_INITIALIZED = "already_initialized"
    NO_FILE_SPECIFIED = "no_file_specified"
    FILE_NOT_FOUND = "file_not_found"
    INVALID_VERSION = "invalid_version"
    CORRUPT_REPOSITORY = "corrupt_repository"
    SYSTEM_IO = "system_io"
    UNKNOWN_COMMAND = "unknown_command"

    @property
    def ok(self) -> bool:
        return self in (ResultStatus.SUCCESS, ResultStatus.UNCHANGED)


class GvtError(Exception):
    """Base class for errors raised by the store and the command parser."""

    status = ResultStatus.SYSTEM_IO


class NotInitializedError(GvtError):
    """Raised when the working directory has no repository."""

    status = ResultStatus.NOT_INITIALIZED

    def __init__(self) -> None:
        super().__init__(
            "Current directory is not initialized. "
            "Please use init command to initialize."
        )


class AlreadyInitializedError(GvtError):
    """Raised by ``init`` when a repository already exists."""

    status = ResultStatus.ALREADY_INITIALIZED

    def __init__(self) -> None:
        super().__init__("Current directory is already initialized.")


class CorruptRepositoryError(GvtError):
    """Raised when a version pointer is missing or unreadable."""

    status = ResultStatus.CORRUPT_REPOSITORY

    def __init__(self, detail: str):
        super().__init__(f"Repository is corrupt: {detail}")
        self.detail = detail


class VersionNotFoundError(GvtError):
    """Raised when a version id is outside ``[0, latest]``."""

    status = ResultStatus.INVALID_VERSION

    def __init__(self, version: object):
        super().__init__(f"Invalid version number: {version}")
        self.version = version


class TrackedFileNotFoundError(GvtError):
    """Raised when a file is absent from a version or the working directory."""

    status = ResultStatus.FILE_NOT_FOUND

    def __init__(self, name: str):
        super().__init__(f"File not found. File: {name}")
        self.name = name


class VersionAlreadyExistsError(GvtError):
    """Raised when the next version directory is already on disk.

    Only happens when the pointers lag behind the directories, which the
    engine treats as a fatal consistency error.
    """

    status = ResultStatus.CORRUPT_REPOSITORY

    def __init__(self, version: int):
        super().__init__(f"Version directory already exists: {version}")
        self.version = version


class CommandError(GvtError):
    """Raised when an operation's arguments cannot be parsed."""

    def __init__(self, status: ResultStatus, message: str):
        super().__init__(message)
        self.status = status


class InvalidFileNameError(GvtError):
    """Raised when a file name cannot be stored inside a version directory."""

    status = ResultStatus.NO_FILE_SPECIFIED

    def __init__(self, name: str):
        super().__init__(f"Invalid file name. File: {name}")
        self.name = name
