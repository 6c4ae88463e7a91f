"""
Filesystem version store for GVT.

Layout, relative to the working directory::

    .gvt/
      .gvt_latest          latest version number (decimal ASCII)
      .gvt_active          active version number (decimal ASCII)
      0/.gvt_message       "GVT initialized."
      1/<tracked files>    full copy of every tracked file
      1/.gvt_message       commit message, first line is the summary
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Set

from gvt_py.errors import (
    AlreadyInitializedError,
    CorruptRepositoryError,
    TrackedFileNotFoundError,
    VersionAlreadyExistsError,
)
from gvt_py.store import BaseVersionStore, RepositoryState

logger = logging.getLogger("gvt.store")

DEFAULT_STORAGE_NAME = ".gvt"
LATEST_VERSION_FILE = ".gvt_latest"
ACTIVE_VERSION_FILE = ".gvt_active"
MESSAGE_FILE_NAME = ".gvt_message"


class FileSystemVersionStore(BaseVersionStore):
    """Version store backed by numbered directories next to the working tree."""

    def __init__(self, working_dir: Path, storage_name: str = DEFAULT_STORAGE_NAME):
        """
        Initialize the store.

        Args:
            working_dir: Directory whose files are versioned
            storage_name: Name of the storage directory inside *working_dir*
        """
        self.working_dir = Path(working_dir)
        self.storage_dir = self.working_dir / storage_name

    def version_path(self, version: int) -> Path:
        return self.storage_dir / str(version)

    def is_initialized(self) -> bool:
        return self.storage_dir.is_dir()

    def initialize(self) -> RepositoryState:
        if self.is_initialized():
            raise AlreadyInitializedError()

        logger.info(f"Initializing repository at {self.storage_dir}")
        self.storage_dir.mkdir()
        state = RepositoryState(latest=0, active=0)
        self.write_state(state)
        self.create_version_directory(0)
        self.write_message(0, self.INITIAL_MESSAGE)
        return state

    def _read_pointer(self, file_name: str) -> int:
        path = self.storage_dir / file_name
        try:
            raw = path.read_text(encoding="ascii").strip()
        except FileNotFoundError as e:
            raise CorruptRepositoryError(f"missing {file_name}") from e
        except UnicodeDecodeError as e:
            raise CorruptRepositoryError(f"unreadable {file_name}") from e

        if not raw.isdigit():
            raise CorruptRepositoryError(f"{file_name} holds {raw!r}")
        return int(raw)

    def _write_pointer(self, file_name: str, version: int) -> None:
        logger.debug(f"Setting {file_name} to {version}")
        (self.storage_dir / file_name).write_text(str(version), encoding="ascii")

    def read_latest_version(self) -> int:
        return self._read_pointer(LATEST_VERSION_FILE)

    def read_active_version(self) -> int:
        return self._read_pointer(ACTIVE_VERSION_FILE)

    def write_latest_version(self, version: int) -> None:
        self._write_pointer(LATEST_VERSION_FILE, version)

    def write_active_version(self, version: int) -> None:
        self._write_pointer(ACTIVE_VERSION_FILE, version)

    def version_exists(self, version: int) -> bool:
        return version >= 0 and self.version_path(version).is_dir()

    def is_storable_name(self, name: str) -> bool:
        if not name:
            return False
        path = Path(os.path.normpath(name))
        if path.is_absolute() or not path.parts or path.parts[0] == os.pardir:
            return False
        if path.parts[0] == self.storage_dir.name:
            return False
        return path != Path(MESSAGE_FILE_NAME)

    def list_tracked_files(self, version: int) -> Set[str]:
        root = self.version_path(version)
        tracked: Set[str] = set()
        for dirpath, _, files in os.walk(root):
            for file in files:
                rel_path = (Path(dirpath) / file).relative_to(root)
                if rel_path == Path(MESSAGE_FILE_NAME):
                    continue
                tracked.add(rel_path.as_posix())
        return tracked

    def contains(self, version: int, name: str) -> bool:
        if Path(name) == Path(MESSAGE_FILE_NAME):
            return False
        return (self.version_path(version) / name).is_file()

    def read_file(self, version: int, name: str) -> bytes:
        path = self.version_path(version) / name
        if not path.is_file():
            raise TrackedFileNotFoundError(name)
        return path.read_bytes()

    def create_version_directory(self, version: int) -> Path:
        path = self.version_path(version)
        try:
            path.mkdir()
        except FileExistsError as e:
            raise VersionAlreadyExistsError(version) from e
        logger.debug(f"Created version directory {path}")
        return path

    def copy_file_in(self, version: int, name: str, source: Path) -> None:
        target = self.version_path(version) / name
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, target)

    def copy_file_out(self, version: int, name: str, target: Path) -> None:
        source = self.version_path(version) / name
        if not source.is_file():
            raise TrackedFileNotFoundError(name)
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, target)

    def remove_file(self, version: int, name: str) -> None:
        path = self.version_path(version) / name
        if not path.is_file():
            raise TrackedFileNotFoundError(name)
        path.unlink()

        # Drop directories emptied by the removal, up to the version root
        root = self.version_path(version)
        parent = path.parent
        while parent != root and not any(parent.iterdir()):
            parent.rmdir()
            parent = parent.parent

    def read_message(self, version: int) -> str:
        path = self.version_path(version) / MESSAGE_FILE_NAME
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.warning(f"Version {version} has no message")
            return ""

    def write_message(self, version: int, message: str) -> None:
        (self.version_path(version) / MESSAGE_FILE_NAME).write_text(
            message, encoding="utf-8"
        )
