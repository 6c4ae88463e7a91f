"""
Versioning engine for GVT.

This module implements the repository operations (init, add, detach,
commit, checkout, history, version, files) on top of a version store and
a snapshot builder. Every operation yields an ``OperationResult``; errors
never propagate past ``VersioningEngine.execute``.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Tuple

from gvt_py.commands import (
    Checkout,
    Command,
    FileCommand,
    History,
    Init,
    ListFiles,
    ShowVersion,
    parse_command,
)
from gvt_py.errors import (
    GvtError,
    NotInitializedError,
    ResultStatus,
    VersionNotFoundError,
)
from gvt_py.snapshot import Mutation, SnapshotBuilder
from gvt_py.store import BaseVersionStore, RepositoryState

logger = logging.getLogger("gvt.engine")

SYSTEM_ERROR_MESSAGE = "Underlying system problem. See ERR for details."


@dataclass
class OperationResult:
    """Result of a versioning operation."""

    status: ResultStatus
    message: str
    state: Optional[RepositoryState] = None

    # Structured payload of read operations (history entries, file names)
    data: Optional[Any] = None

    @property
    def ok(self) -> bool:
        return self.status.ok


class VersioningEngine:
    """Applies commands to a repository."""

    def __init__(
        self,
        store: BaseVersionStore,
        working_dir: Path,
        builder: Optional[SnapshotBuilder] = None,
    ):
        """
        Initialize the engine.

        Args:
            store: Version store holding the snapshots and pointers
            working_dir: Directory that checkout writes into and add/commit read from
            builder: Snapshot builder; one over *store* is created when omitted
        """
        self.store = store
        self.working_dir = Path(working_dir)
        self.builder = builder or SnapshotBuilder(store, self.working_dir)

    def execute(self, op: str, args: Optional[List[str]] = None) -> OperationResult:
        """
        Run one operation given its name and raw arguments.

        The pointers are written only after ``apply`` has finished with the
        version directories and the working directory, so a failure part way
        through leaves at most an unreferenced version directory behind.
        """
        logger.debug(f"Executing {op} {args or []}")
        try:
            if op and op.lower() != "init" and not self.store.is_initialized():
                raise NotInitializedError()

            command = parse_command(op, args)
            state = None if isinstance(command, Init) else self.store.read_state()
            new_state, result = self.apply(state, command)

            if state is not None and new_state != state:
                self.store.write_state(new_state)
            return result
        except GvtError as e:
            logger.debug(f"{op} failed: {e}")
            return OperationResult(status=e.status, message=str(e))
        except OSError:
            logger.exception(f"System error during {op}")
            return OperationResult(
                status=ResultStatus.SYSTEM_IO, message=SYSTEM_ERROR_MESSAGE
            )

    def apply(
        self, state: Optional[RepositoryState], command: Command
    ) -> Tuple[Optional[RepositoryState], OperationResult]:
        """
        Apply a command to the repository in *state*.

        Version directories and the working directory are updated here; the
        returned state is what the caller must persist.

        Args:
            state: Current pointers, or None before ``init``
            command: Parsed command

        Returns:
            Tuple of (new_state, result)
        """
        if isinstance(command, Init):
            new_state = self.store.initialize()
            return new_state, OperationResult(
                ResultStatus.SUCCESS,
                "Current directory initialized successfully.",
                state=new_state,
            )

        if state is None:
            raise NotInitializedError()

        if isinstance(command, FileCommand):
            return self._apply_file_command(state, command)
        if isinstance(command, Checkout):
            return self._checkout(state, command.version)
        if isinstance(command, History):
            return state, self._history(state, command.last)
        if isinstance(command, ShowVersion):
            return state, self._show_version(state, command.version)
        if isinstance(command, ListFiles):
            return state, self._list_files(state, command.version)

        raise TypeError(f"Unsupported command: {command!r}")

    def _apply_file_command(
        self, state: RepositoryState, command: FileCommand
    ) -> Tuple[RepositoryState, OperationResult]:
        mutation = command.mutation
        try:
            version = self.builder.build(
                state.latest, mutation, command.file, command.message
            )
        except OSError:
            logger.exception(f"Failed to {command.name} {command.file}")
            return state, OperationResult(
                ResultStatus.SYSTEM_IO,
                f"File cannot be {mutation.value}. See ERR for details. "
                f"File: {command.file}",
                state=state,
            )

        if version is None:
            if mutation is Mutation.ADD:
                message = f"File already added. File: {command.file}"
            else:
                message = f"File is not added to gvt. File: {command.file}"
            return state, OperationResult(ResultStatus.UNCHANGED, message, state=state)

        new_state = state.advance()
        return new_state, OperationResult(
            ResultStatus.SUCCESS,
            mutation.default_message(command.file),
            state=new_state,
        )

    def _check_version(self, state: RepositoryState, version: int) -> None:
        if not 0 <= version <= state.latest:
            raise VersionNotFoundError(version)

    def _checkout(
        self, state: RepositoryState, version: int
    ) -> Tuple[RepositoryState, OperationResult]:
        self._check_version(state, version)

        # Remove everything the active version tracks before copying, so files
        # missing from the target version disappear from the working directory
        for name in sorted(self.store.list_tracked_files(state.active)):
            (self.working_dir / name).unlink(missing_ok=True)

        restored = sorted(self.store.list_tracked_files(version))
        for name in restored:
            self.store.copy_file_out(version, name, self.working_dir / name)
        logger.info(f"Restored {len(restored)} files from version {version}")

        new_state = state.with_active(version)
        return new_state, OperationResult(
            ResultStatus.SUCCESS,
            f"Checkout successful for version: {version}",
            state=new_state,
            data=restored,
        )

    def _history(self, state: RepositoryState, last: Optional[int]) -> OperationResult:
        limit = state.latest + 1 if last is None else last
        entries = []
        for version in range(state.latest, -1, -1):
            if state.latest - version >= limit:
                break
            lines = self.store.read_message(version).splitlines()
            entries.append({"version": version, "message": lines[0] if lines else ""})

        text = "".join(f"{e['version']}: {e['message']}\n" for e in entries)
        return OperationResult(ResultStatus.SUCCESS, text, state=state, data=entries)

    def _show_version(
        self, state: RepositoryState, version: Optional[int]
    ) -> OperationResult:
        if version is None:
            version = state.active
        self._check_version(state, version)

        message = self.store.read_message(version)
        return OperationResult(
            ResultStatus.SUCCESS,
            f"Version: {version}\n{message}",
            state=state,
            data={"version": version, "message": message},
        )

    def _list_files(
        self, state: RepositoryState, version: Optional[int]
    ) -> OperationResult:
        if version is None:
            version = state.active
        self._check_version(state, version)

        files = sorted(self.store.list_tracked_files(version))
        return OperationResult(
            ResultStatus.SUCCESS, "\n".join(files), state=state, data=files
        )
