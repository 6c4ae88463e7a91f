"""
Command variants for GVT.

Each operation is a small frozen dataclass. ``parse_command`` turns the
operation name and its raw argument list (as typed on the command line)
into one of them.
"""

from dataclasses import dataclass
from typing import ClassVar, Dict, List, Optional, Union

from gvt_py.errors import CommandError, ResultStatus
from gvt_py.snapshot import MESSAGE_FLAG, Mutation, extract_message

HISTORY_LIMIT_FLAG = "-last"


@dataclass(frozen=True)
class Init:
    """Create the repository."""


@dataclass(frozen=True)
class FileCommand:
    """An operation that creates a new version by changing one file."""

    file: str
    message: Optional[str] = None

    name: ClassVar[str] = ""
    mutation: ClassVar[Mutation]


@dataclass(frozen=True)
class Add(FileCommand):
    name = "add"
    mutation = Mutation.ADD


@dataclass(frozen=True)
class Detach(FileCommand):
    name = "detach"
    mutation = Mutation.DETACH


@dataclass(frozen=True)
class Commit(FileCommand):
    name = "commit"
    mutation = Mutation.COMMIT


@dataclass(frozen=True)
class Checkout:
    version: int


@dataclass(frozen=True)
class History:
    last: Optional[int] = None


@dataclass(frozen=True)
class ShowVersion:
    version: Optional[int] = None


@dataclass(frozen=True)
class ListFiles:
    version: Optional[int] = None


Command = Union[Init, Add, Detach, Commit, Checkout, History, ShowVersion, ListFiles]

FILE_COMMANDS: Dict[str, type] = {cls.name: cls for cls in (Add, Detach, Commit)}


def invalid_version(raw: object) -> CommandError:
    return CommandError(ResultStatus.INVALID_VERSION, f"Invalid version number: {raw}")


def parse_version(raw: str) -> int:
    """Parse a version argument, raising an INVALID_VERSION CommandError."""
    try:
        return int(raw)
    except ValueError:
        raise invalid_version(raw) from None


def _parse_file_command(op: str, args: List[str]) -> FileCommand:
    if not args or args[0] == MESSAGE_FLAG:
        raise CommandError(
            ResultStatus.NO_FILE_SPECIFIED, f"Please specify file to {op}."
        )
    return FILE_COMMANDS[op](file=args[0], message=extract_message(args))


def _parse_history(args: List[str]) -> History:
    if len(args) >= 2 and args[0] == HISTORY_LIMIT_FLAG:
        try:
            return History(last=int(args[1]))
        except ValueError:
            pass  # a malformed limit shows the full history
    return History()


def parse_command(op: str, args: Optional[List[str]] = None) -> Command:
    """
    Parse an operation name and its arguments.

    Args:
        op: Operation name, case-insensitive
        args: Positional arguments following the operation

    Returns:
        The parsed command

    Raises:
        CommandError: if the operation is unknown or its arguments are invalid
    """
    args = list(args or [])
    command = op.lower()

    if not command:
        raise CommandError(ResultStatus.UNKNOWN_COMMAND, "Please specify command.")
    if command == "init":
        return Init()
    if command in FILE_COMMANDS:
        return _parse_file_command(command, args)
    if command == "checkout":
        if len(args) != 1:
            raise invalid_version(args[0] if args else "")
        return Checkout(version=parse_version(args[0]))
    if command == "history":
        return _parse_history(args)
    if command == "version":
        return ShowVersion(version=parse_version(args[0]) if args else None)
    if command == "files":
        return ListFiles(version=parse_version(args[0]) if args else None)

    raise CommandError(ResultStatus.UNKNOWN_COMMAND, f"Unknown command {op}.")
