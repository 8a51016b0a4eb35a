"""Errors raised by temp-file handles."""

from __future__ import annotations

import errno as _errno
from typing import Optional, Tuple, Type, Union

from fs import errors as fs_errors
from relic.core.errors import RelicToolError

_NOT_FOUND = "The file does not exist"
_NO_ACCESS = "Missing permission for the file or one of its parents"
_IS_DIRECTORY = "The file is a directory and user is not super-user"
_NOT_DIRECTORY = "A component of the file name is not a directory"
_BAD_NAME = "Filename had an improper type"

# Ordered; the first matching class wins (InvalidCharsInPath is an InvalidPath)
_FS_ERROR_TABLE: Tuple[Tuple[Type[BaseException], int, str], ...] = (
    (fs_errors.ResourceNotFound, _errno.ENOENT, _NOT_FOUND),
    (fs_errors.PermissionDenied, _errno.EACCES, _NO_ACCESS),
    (fs_errors.FileExpected, _errno.EPERM, _IS_DIRECTORY),
    (fs_errors.DirectoryExpected, _errno.ENOTDIR, _NOT_DIRECTORY),
    (fs_errors.InvalidPath, _errno.EINVAL, _BAD_NAME),
    (fs_errors.IllegalBackReference, _errno.EINVAL, _BAD_NAME),
)

_OS_ERRNO_TABLE = {
    _errno.ENOENT: _NOT_FOUND,
    _errno.EACCES: _NO_ACCESS,
    _errno.EPERM: _IS_DIRECTORY,
    _errno.EISDIR: _IS_DIRECTORY,
    _errno.ENOTDIR: _NOT_DIRECTORY,
    _errno.EINVAL: _BAD_NAME,
}


class InvalidHandleError(RelicToolError, ValueError):
    """A temp-file operation received ``None`` instead of a handle."""

    def __init__(self, name: str = "tempfile"):
        super().__init__(f"{name} must not be None")
        self.name = name


class TempFileIOError(RelicToolError):
    """A filesystem operation on a temporary file failed.

    Args:
        message (str): Human-readable description of the failure.
        can_retry (bool): Whether repeating the operation may succeed.
        errno (Optional[int]): The platform error code the failure maps to, if known.
    """

    def __init__(
        self, message: str, can_retry: bool = False, errno: Optional[int] = None
    ):
        super().__init__(message)
        self.message = message
        self.can_retry = can_retry
        self.errno = errno

    def __str__(self) -> str:
        return f"Tempfile failed: {self.message}, retriable: {self.can_retry}"

    @property
    def not_found(self) -> bool:
        return self.errno == _errno.ENOENT

    @classmethod
    def not_open(cls) -> TempFileIOError:
        return cls("File is not open")

    @classmethod
    def missing(cls) -> TempFileIOError:
        return cls(_NOT_FOUND, errno=_errno.ENOENT)

    @classmethod
    def not_a_directory(cls) -> TempFileIOError:
        return cls(_NOT_DIRECTORY, errno=_errno.ENOTDIR)

    @classmethod
    def from_error(
        cls, exc: Union[fs_errors.FSError, OSError, ValueError]
    ) -> TempFileIOError:
        """Describe a PyFilesystem or OS error the way the handle reports it.

        :param exc: The error raised by the underlying filesystem call.
        :returns: A TempFileIOError carrying a descriptive message and the matching errno.
        """
        for err_cls, code, message in _FS_ERROR_TABLE:
            if isinstance(exc, err_cls):
                return cls(message, errno=code)
        if isinstance(exc, OSError) and exc.errno in _OS_ERRNO_TABLE:
            return cls(_OS_ERRNO_TABLE[exc.errno], errno=exc.errno)
        code = getattr(exc, "errno", None)
        return cls(str(exc), errno=code if isinstance(code, int) else None)


__all__ = [
    "InvalidHandleError",
    "TempFileIOError",
]
