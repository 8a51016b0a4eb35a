"""Temporary file handles.

A :class:`TempHandle` is an immutable value; every transition (close, unlink)
returns a new handle and leaves the old one untouched. Handles move strictly
``open -> close -> unlink``; closing twice is a no-op and unlinking closes
first, so ``unlink`` alone is always enough to clean up.

Every operation taking a handle raises :class:`InvalidHandleError` when given
``None``; this catches a failed ``open`` being passed along unnoticed.
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import BinaryIO, Iterator, Optional, Tuple, Union

from fs import errors as fs_errors
from fs.info import Info
from fs.osfs import OSFS
from fs.path import dirname
from relic.core.logmsg import BraceMessage

from relic.tempfile.definitions import (
    DEFAULT_ENCODING,
    DEFAULT_MODE,
    TempFileOptions,
)
from relic.tempfile.errors import InvalidHandleError, TempFileIOError
from relic.tempfile.naming import get_name

logger = logging.getLogger(__name__)

_INFO_NAMESPACES = ["basic", "details"]


@dataclass(frozen=True)
class TempHandle:
    """The state of one temporary file.

    Args:
        path (Optional[str]): Location of the file; None once unlinked.
        stream (Optional[BinaryIO]): The open stream; None once closed.
        is_open (bool): True while the stream is live and writable.
        encoding (str): Codec used by text writes.
    """

    path: Optional[str] = None
    stream: Optional[BinaryIO] = None
    is_open: bool = False
    encoding: str = DEFAULT_ENCODING

    @property
    def disposed(self) -> bool:
        return self.path is None


def _require(handle: Optional[TempHandle]) -> TempHandle:
    if handle is None:
        raise InvalidHandleError()
    return handle


def _host_location(file_path: str) -> Tuple[str, str]:
    """Split ``file_path`` into its drive root and the resource path below it."""
    abs_path = os.path.abspath(file_path)
    root = os.path.splitdrive(abs_path)[0] + os.sep
    resource = "/" + os.path.relpath(abs_path, root).replace(os.sep, "/")
    return root, resource


@contextmanager
def _host_fs(file_path: str) -> Iterator[Tuple[OSFS, str]]:
    """Open the drive holding ``file_path`` and translate filesystem errors.

    The OSFS is rooted at the drive; the caller's directory is passed as a
    resource path and never goes through ``expanduser`` or ``expandvars``.
    """
    root, resource = _host_location(file_path)
    try:
        host = OSFS(root)
    except fs_errors.CreateFailed as exc:
        logger.debug(BraceMessage("Cannot open drive `{0}` of `{1}`: {2}", root, file_path, exc))
        raise TempFileIOError.missing() from exc
    with host:
        try:
            parent = dirname(resource)
            if not host.exists(parent):
                raise TempFileIOError.missing()
            if not host.isdir(parent):
                raise TempFileIOError.not_a_directory()
            yield host, resource
        except (fs_errors.FSError, fs_errors.IllegalBackReference, OSError) as exc:
            logger.debug(BraceMessage("Filesystem call on `{0}` failed: {1!r}", file_path, exc))
            raise TempFileIOError.from_error(exc) from exc


def open(
    prefix: Optional[str] = None,
    *,
    ext: Optional[str] = None,
    dir: Optional[str] = None,
    encoding: Optional[str] = None,
    options: Optional[TempFileOptions] = None,
) -> TempHandle:
    """Create a new temporary file and open it for writing.

    :param prefix: Prepended to the random part of the file name.
    :param ext: File extension. Defaults to '.tmp'.
    :param dir: Directory to create the file in. Defaults to the platform's temp directory.
    :param encoding: Codec used by :func:`write`. Defaults to 'utf-8'.
    :param options: Base options; keyword arguments take precedence over its fields.

    :raises TempFileIOError: The file could not be created.
    """
    opts = (options or TempFileOptions()).merge(
        prefix=prefix, ext=ext, dir=dir, encoding=encoding
    )
    opts = opts.resolve()
    tmp_path = get_name(options=opts)
    with _host_fs(tmp_path) as (host, name):
        stream = host.openbin(name, DEFAULT_MODE)
    logger.debug(BraceMessage("Opened `{0}`", tmp_path))
    return TempHandle(
        path=tmp_path,
        stream=stream,
        is_open=True,
        encoding=opts.encoding,
    )


def path(handle: Optional[TempHandle]) -> Optional[str]:
    """The full path of the file; None once unlinked."""
    return _require(handle).path


def binwrite(handle: Optional[TempHandle], data: Union[bytes, bytearray, memoryview]) -> None:
    """Write raw bytes to the file; no encoding is applied."""
    handle = _require(handle)
    stream = handle.stream
    # A stale copy of a handle may still claim to be open after another copy was closed
    if not handle.is_open or stream is None or stream.closed:
        raise TempFileIOError.not_open()
    try:
        stream.write(data)
        stream.flush()
    except OSError as exc:
        logger.debug(BraceMessage("Writing to `{0}` failed: {1!r}", handle.path, exc))
        raise TempFileIOError.from_error(exc) from exc


def write(handle: Optional[TempHandle], data: str) -> None:
    """Write text to the file, encoded with the handle's encoding."""
    handle = _require(handle)
    if not isinstance(data, str):
        raise TypeError(f"write() expects str, got '{type(data).__name__}'")
    binwrite(handle, data.encode(handle.encoding))


def close(handle: Optional[TempHandle], *, delete: bool = False) -> TempHandle:
    """Close the file, keeping it on disk unless ``delete`` is set.

    Closing a closed handle does nothing.

    :param handle: The handle to close.
    :param delete: Unlink the file after closing it.

    :rtype: TempHandle
    :returns: The closed (or, with ``delete``, disposed) handle.
    """
    handle = _require(handle)
    if handle.is_open and handle.stream is not None:
        try:
            handle.stream.close()
        except OSError as exc:
            logger.debug(BraceMessage("Closing `{0}` failed: {1!r}", handle.path, exc))
            raise TempFileIOError.from_error(exc) from exc
        logger.debug(BraceMessage("Closed `{0}`", handle.path))
    closed = replace(handle, stream=None, is_open=False)
    if delete:
        return unlink(closed)
    return closed


def close_and_unlink(handle: Optional[TempHandle]) -> TempHandle:
    """Close the file, then delete it."""
    return close(handle, delete=True)


def unlink(handle: Optional[TempHandle]) -> TempHandle:
    """Close the file if needed, then delete it from the filesystem.

    Unlinking a handle that was already unlinked raises a TempFileIOError whose
    ``not_found`` is True; treat it as already done.

    :raises TempFileIOError: The file could not be deleted.
    """
    closed = close(_require(handle))
    if closed.path is None:
        raise TempFileIOError.missing()
    with _host_fs(closed.path) as (host, name):
        host.remove(name)
    logger.debug(BraceMessage("Unlinked `{0}`", closed.path))
    return replace(closed, path=None)


def is_open(handle: Optional[TempHandle]) -> bool:
    return _require(handle).is_open


def exists(handle: Optional[TempHandle]) -> bool:
    """True if the handle still has a path and something exists there."""
    handle = _require(handle)
    if handle.path is None:
        return False
    try:
        with _host_fs(handle.path) as (host, name):
            return host.exists(name)
    except TempFileIOError:
        return False


def stat(handle: Optional[TempHandle]) -> Info:
    """Get the file's metadata.

    :rtype: fs.info.Info
    :returns: Info with the 'basic' and 'details' namespaces (size, type, timestamps).

    :raises TempFileIOError: The file is gone or cannot be queried.
    """
    handle = _require(handle)
    if handle.path is None:
        raise TempFileIOError.missing()
    with _host_fs(handle.path) as (host, name):
        return host.getinfo(name, namespaces=_INFO_NAMESPACES)


@contextmanager
def scoped(
    prefix: Optional[str] = None, **kwargs: Optional[Union[str, TempFileOptions]]
) -> Iterator[TempHandle]:
    """Open a temporary file that is unlinked when the block exits.

    The file may be closed or unlinked inside the block; a file that is
    already gone on exit is not an error.
    """
    handle = open(prefix, **kwargs)  # type: ignore[arg-type]
    try:
        yield handle
    finally:
        try:
            unlink(handle)
        except TempFileIOError as exc:
            if not exc.not_found:
                raise
            logger.debug(BraceMessage("`{0}` was already removed", handle.path))


__all__ = [
    "TempHandle",
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
