"""
Store package for GVT.

This module provides the repository state record and the base class for
version stores. A store owns the numbered version directories and the
latest/active pointers; it knows nothing about add, commit or checkout.
"""

import abc
from dataclasses import dataclass
from pathlib import Path
from typing import Set

from gvt_py.errors import CorruptRepositoryError


@dataclass(frozen=True)
class RepositoryState:
    """The two repository-wide pointers."""

    latest: int
    active: int

    def __post_init__(self) -> None:
        if not 0 <= self.active <= self.latest:
            raise ValueError(
                f"Inconsistent pointers: active={self.active}, latest={self.latest}"
            )

    def advance(self) -> "RepositoryState":
        """State after a mutation: a new latest version, which is also active."""
        return RepositoryState(latest=self.latest + 1, active=self.latest + 1)

    def with_active(self, version: int) -> "RepositoryState":
        return RepositoryState(latest=self.latest, active=version)


class BaseVersionStore(abc.ABC):
    """Base class for version stores."""

    INITIAL_MESSAGE = "GVT initialized."

    @abc.abstractmethod
    def is_initialized(self) -> bool:
        """Return True when the repository marker exists."""
        pass

    @abc.abstractmethod
    def initialize(self) -> RepositoryState:
        """
        Create the repository with an empty version 0.

        Returns:
            The initial state (latest=0, active=0)

        Raises:
            AlreadyInitializedError: if the repository marker already exists
        """
        pass

    @abc.abstractmethod
    def read_latest_version(self) -> int:
        """Read the latest pointer, raising CorruptRepositoryError if unreadable."""
        pass

    @abc.abstractmethod
    def read_active_version(self) -> int:
        """Read the active pointer, raising CorruptRepositoryError if unreadable."""
        pass

    @abc.abstractmethod
    def write_latest_version(self, version: int) -> None:
        pass

    @abc.abstractmethod
    def write_active_version(self, version: int) -> None:
        pass

    @abc.abstractmethod
    def version_path(self, version: int) -> Path:
        """Return the location of a version's snapshot."""
        pass

    @abc.abstractmethod
    def version_exists(self, version: int) -> bool:
        pass

    @abc.abstractmethod
    def is_storable_name(self, name: str) -> bool:
        """
        Check that a file name maps to an entry inside a version snapshot.

        Names that clash with bookkeeping entries or resolve outside the
        snapshot are not storable.
        """
        pass

    @abc.abstractmethod
    def list_tracked_files(self, version: int) -> Set[str]:
        """
        List the files tracked by a version.

        Args:
            version: Version id

        Returns:
            File names, excluding internal bookkeeping entries
        """
        pass

    @abc.abstractmethod
    def read_file(self, version: int, name: str) -> bytes:
        """Return a tracked file's content, raising TrackedFileNotFoundError."""
        pass

    @abc.abstractmethod
    def create_version_directory(self, version: int) -> Path:
        """
        Create an empty directory for a new version.

        Raises:
            VersionAlreadyExistsError: if the directory is already present
        """
        pass

    @abc.abstractmethod
    def copy_file_in(self, version: int, name: str, source: Path) -> None:
        """Copy *source* into a version under *name*, replacing any existing entry."""
        pass

    @abc.abstractmethod
    def copy_file_out(self, version: int, name: str, target: Path) -> None:
        """Copy a tracked file to *target*, replacing any existing file."""
        pass

    @abc.abstractmethod
    def remove_file(self, version: int, name: str) -> None:
        pass

    @abc.abstractmethod
    def read_message(self, version: int) -> str:
        """Return the full commit message of a version."""
        pass

    @abc.abstractmethod
    def write_message(self, version: int, message: str) -> None:
        pass

    def read_state(self) -> RepositoryState:
        """Read both pointers as a ``RepositoryState``."""
        latest = self.read_latest_version()
        active = self.read_active_version()
        try:
            return RepositoryState(latest=latest, active=active)
        except ValueError as e:
            raise CorruptRepositoryError(str(e)) from e

    def write_state(self, state: RepositoryState) -> None:
        """Persist both pointers, latest first."""
        self.write_latest_version(state.latest)
        self.write_active_version(state.active)

    def contains(self, version: int, name: str) -> bool:
        """Return True when *name* is tracked by *version*."""
        return name in self.list_tracked_files(version)
