"""Defaults and option records shared by the naming and handle modules."""

from __future__ import annotations

import os
import string
import tempfile
from dataclasses import dataclass, replace
from typing import Optional

DEFAULT_PREFIX = ""
DEFAULT_EXT = ".tmp"
DEFAULT_ENCODING = "utf-8"
# Files are always created for writing; existing content is truncated
DEFAULT_MODE = "w"

NAME_LENGTH = 20
NAME_ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits


def normalize_ext(ext: Optional[str]) -> str:
    """Return ``ext`` with a leading ``.``; ``None`` or empty means the default."""
    if not ext:
        return DEFAULT_EXT
    if not ext.startswith("."):
        return "." + ext
    return ext


@dataclass(frozen=True)
class TempFileOptions:
    """Options recognized when naming or creating a temporary file.

    Args:
        prefix (str): Prepended to the random part of the file name.
        ext (Optional[str]): File extension; a leading '.' is added when missing. Defaults to '.tmp'.
        dir (Optional[str]): Directory the file lives in. Defaults to the platform's temp directory.
        encoding (Optional[str]): Codec used for text writes. Defaults to 'utf-8'.
    """

    prefix: str = DEFAULT_PREFIX
    ext: Optional[str] = None
    dir: Optional[str] = None
    encoding: Optional[str] = None

    def resolve(self) -> TempFileOptions:
        """Fill in every default; the result has no ``None`` fields.

        A leading ``~`` in ``dir`` is expanded; environment variables are not.
        """
        return replace(
            self,
            prefix=self.prefix or DEFAULT_PREFIX,
            ext=normalize_ext(self.ext),
            dir=os.path.expanduser(self.dir)
            if self.dir is not None
            else tempfile.gettempdir(),
            encoding=self.encoding or DEFAULT_ENCODING,
        )

    def merge(self, **overrides: Optional[str]) -> TempFileOptions:
        """Return a copy with every non-``None`` override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)


__all__ = [
    "DEFAULT_PREFIX",
    "DEFAULT_EXT",
    "DEFAULT_ENCODING",
    "DEFAULT_MODE",
    "NAME_LENGTH",
    "NAME_ALPHABET",
    "normalize_ext",
    "TempFileOptions",
]
