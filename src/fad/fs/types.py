"""File system type classification from ``st_mode`` bits."""

from __future__ import annotations

import stat
from enum import Enum
from typing import Callable


class FileType(str, Enum):
    TEMPORARY = "T"
    SYMLINK = "L"
    DEVICE = "D"
    NAMED_PIPE = "p"
    SOCKET = "S"
    CHAR_DEVICE = "c"
    REGULAR = "f"
    DIRECTORY = "d"
    UNKNOWN = "?"

    @property
    def code(self) -> str:
        return self.value

    @classmethod
    def from_code(cls, code: str) -> FileType:
        member = _BY_CODE.get(code)
        if member is None:
            raise ValueError(f"'{code}' is not one of {VALID_CODES_TEXT}")
        return member


def _never(mode: int) -> bool:  # noqa: ARG001
    return False


# Precedence order matters: some platforms set more than one type bit.
# POSIX has no temporary-file bit so that slot never matches here.
_PRECEDENCE: tuple[tuple[Callable[[int], bool], FileType], ...] = (
    (_never, FileType.TEMPORARY),
    (stat.S_ISLNK, FileType.SYMLINK),
    (stat.S_ISBLK, FileType.DEVICE),
    (stat.S_ISFIFO, FileType.NAMED_PIPE),
    (stat.S_ISSOCK, FileType.SOCKET),
    (stat.S_ISCHR, FileType.CHAR_DEVICE),
    (stat.S_ISREG, FileType.REGULAR),
    (stat.S_ISDIR, FileType.DIRECTORY),
)

_BY_CODE: dict[str, FileType] = {
    member.value: member for member in FileType if member is not FileType.UNKNOWN
}

_sorted_codes = sorted(_BY_CODE)
VALID_CODES_TEXT = ",".join(_sorted_codes[:-1]) + " or " + _sorted_codes[-1]


def classify_mode(mode: int) -> FileType:
    for predicate, file_type in _PRECEDENCE:
        if predicate(mode):
            return file_type
    return FileType.UNKNOWN
