"""Open flags, file mode bits, file information and file-system errors."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import IntFlag
from typing import Optional

from . import errors

FileMode = int


class OpenFlag(IntFlag):
    """Flags for opening a file."""

    RDONLY = 0x0
    WRONLY = 0x1
    RDWR = 0x2
    APPEND = 0x400
    CREATE = 0x40
    EXCL = 0x80
    SYNC = 0x101000
    TRUNC = 0x200


def has_flag(flags: int, test: int) -> bool:
    """Return True if any bit of ``test`` is set in ``flags``."""
    return (int(flags) & int(test)) != 0


def combine_flags(*args: int) -> int:
    """Combine flags into one integer."""
    result = 0
    for flag in args:
        result |= int(flag)
    return result


MODE_DIR = 0x80000000
MODE_APPEND = 0x40000000
MODE_EXCLUSIVE = 0x20000000
MODE_TEMPORARY = 0x10000000
MODE_SYMLINK = 0x08000000
MODE_DEVICE = 0x04000000
MODE_NAMED_PIPE = 0x02000000
MODE_SOCKET = 0x01000000
MODE_SETUID = 0x00800000
MODE_SETGID = 0x00400000
MODE_CHAR_DEVICE = 0x00200000
MODE_STICKY = 0x00100000
MODE_IRREGULAR = 0x00080000

MODE_PERM_BITS = 0o777


@dataclass
class FileInfo:
    """What is known about a file."""

    name: str
    size: int
    mode: FileMode
    mod_time: datetime
    is_dir: bool

    def is_regular(self) -> bool:
        """Return True unless the mode marks a directory."""
        return (self.mode & MODE_DIR) == 0


class PathError(errors.Error):
    """An operation on a path that failed, and why."""

    def __init__(self, op: str, path: str, err: Optional[errors.Error]) -> None:
        super().__init__(op, path, err)
        self.op = op
        self.path = path
        self.err = err

    def error(self) -> str:
        text = f"{self.op} {self.path}"
        if self.err is not None:
            text += ": " + self.err.error()
        return text

    def unwrap(self) -> Optional[errors.Error]:
        return self.err


class SyscallError(errors.Error):
    """A system call that failed, and why."""

    def __init__(self, syscall: str, err: Optional[errors.Error]) -> None:
        super().__init__(syscall, err)
        self.syscall = syscall
        self.err = err

    def error(self) -> str:
        if self.err is not None:
            return f"{self.syscall}: {self.err.error()}"
        return self.syscall

    def unwrap(self) -> Optional[errors.Error]:
        return self.err