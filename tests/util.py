import os
from pathlib import Path
from typing import Optional

from relic.tempfile import TempHandle


def read_back(handle: TempHandle) -> bytes:
    with open(handle.path, "rb") as h:
        return h.read()


class ScratchDir:
    """Creates handles inside a pytest ``tmp_path`` and removes leftovers on exit."""

    def __init__(self, root: Path):
        self.root = root
        self._paths = []

    @property
    def dir(self) -> str:
        return str(self.root)

    def track(self, handle: Optional[TempHandle]) -> Optional[TempHandle]:
        if handle is not None and handle.path is not None:
            self._paths.append(handle.path)
        return handle

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        for path in self._paths:
            if os.path.isfile(path):
                os.unlink(path)
