"""
Snapshot construction for GVT.

A new version is always a full copy of its base version with exactly one
mutation applied: a file added, a file removed, or a file's content
replaced from the working directory.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional

from gvt_py.errors import InvalidFileNameError, TrackedFileNotFoundError
from gvt_py.store import BaseVersionStore

logger = logging.getLogger("gvt.snapshot")

MESSAGE_FLAG = "-m"


class Mutation(Enum):
    """The single change a new version applies to its base."""

    ADD = "added"
    DETACH = "detached"
    COMMIT = "committed"

    @property
    def reads_working_copy(self) -> bool:
        return self is not Mutation.DETACH

    def default_message(self, name: str) -> str:
        return f"File {self.value} successfully. File: {name}"


def extract_message(args: List[str]) -> Optional[str]:
    """
    Find the commit message in an operation's arguments.

    The flag may appear anywhere; the first occurrence that has a value
    after it wins. A trailing flag with no value is ignored.
    """
    for i in range(len(args) - 1):
        if args[i] == MESSAGE_FLAG:
            return args[i + 1]
    return None


class SnapshotBuilder:
    """Materializes version ``n+1`` from version ``n`` plus one mutation."""

    def __init__(self, store: BaseVersionStore, working_dir: Path):
        self.store = store
        self.working_dir = Path(working_dir)

    def build(
        self,
        base: int,
        mutation: Mutation,
        name: str,
        message: Optional[str] = None,
    ) -> Optional[int]:
        """
        Create the version after *base*.

        Args:
            base: Version to copy
            mutation: Change to apply on top of the copy
            name: Tracked file name, relative to the working directory
            message: Commit message; a default is generated when None

        Returns:
            The new version id, or None when the mutation is a no-op (adding a
            tracked file, detaching or committing an untracked one)

        Raises:
            InvalidFileNameError: if *name* cannot be stored in a version
            TrackedFileNotFoundError: if add/commit finds no working-directory file
        """
        if not self.store.is_storable_name(name):
            raise InvalidFileNameError(name)

        source = self.working_dir / name
        if mutation.reads_working_copy and not source.is_file():
            raise TrackedFileNotFoundError(name)

        tracked = self.store.contains(base, name)
        if mutation is Mutation.ADD and tracked:
            logger.info(f"Nothing to do: {name} is already tracked")
            return None
        if mutation is not Mutation.ADD and not tracked:
            logger.info(f"Nothing to do: {name} is not tracked")
            return None

        version = base + 1
        self.store.create_version_directory(version)
        base_path = self.store.version_path(base)
        for tracked_name in sorted(self.store.list_tracked_files(base)):
            self.store.copy_file_in(version, tracked_name, base_path / tracked_name)

        if mutation is Mutation.DETACH:
            self.store.remove_file(version, name)
        else:
            self.store.copy_file_in(version, name, source)

        if message is None:
            message = mutation.default_message(name)
        self.store.write_message(version, message)

        logger.info(f"Created version {version}: {name} {mutation.value}")
        return version
