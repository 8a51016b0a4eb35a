from __future__ import annotations

import itertools
import os
import random
import time
from typing import Optional

from relic.tempfile.definitions import (
    NAME_ALPHABET,
    NAME_LENGTH,
    TempFileOptions,
)


_CALLS = itertools.count()


def _fresh_random() -> random.Random:
    # The counter makes every seed within a process distinct, even within one clock tick
    seed = f"{os.getpid()}:{next(_CALLS)}:{time.perf_counter_ns()}:{time.time_ns()}"
    return random.Random(seed)


def random_string(size: int = NAME_LENGTH, rng: Optional[random.Random] = None) -> str:
    """Draw ``size`` characters uniformly from ``[a-zA-Z0-9]``."""
    rng = rng if rng is not None else _fresh_random()
    return "".join(rng.choice(NAME_ALPHABET) for _ in range(size))


def get_name(
    prefix: Optional[str] = None,
    *,
    ext: Optional[str] = None,
    dir: Optional[str] = None,
    options: Optional[TempFileOptions] = None,
) -> str:
    """Get a name for a new temporary file.

    Nothing is created; the name is only probabilistically unique.

    :param prefix: Prepended to the random part of the file name. Defaults to ''.
    :param ext: The file extension, a leading '.' is added if missing. Defaults to '.tmp'.
    :param dir: The directory of the file. Defaults to the platform's temp directory.
    :param options: Base options; keyword arguments take precedence over its fields.

    :rtype: str
    :returns: '<dir>/<prefix><20 random alphanumerics><ext>'
    """
    opts = (options or TempFileOptions()).merge(prefix=prefix, ext=ext, dir=dir)
    opts = opts.resolve()
    file_name = f"{opts.prefix}{random_string()}{opts.ext}"
    return os.path.join(opts.dir, file_name)  # type: ignore[arg-type]


__all__ = [
    "get_name",
    "random_string",
]
