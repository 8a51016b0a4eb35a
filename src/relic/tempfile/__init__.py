"""
Temporary files with explicit, checked lifecycle transitions
"""
from relic.tempfile.definitions import TempFileOptions
from relic.tempfile.errors import InvalidHandleError, TempFileIOError
from relic.tempfile.handle import (
    TempHandle,
    open,
    path,
    write,
    binwrite,
    close,
    close_and_unlink,
    unlink,
    is_open,
    exists,
    stat,
    scoped,
)
from relic.tempfile.naming import get_name

__version__ = "0.1.0"

__all__ = [
    "TempFileOptions",
    "InvalidHandleError",
    "TempFileIOError",
    "TempHandle",
    "get_name",
    "open",
    "path",
    "write",
    "binwrite",
    "close",
    "close_and_unlink",
    "unlink",
    "is_open",
    "exists",
    "stat",
    "scoped",
]
