"""File reading shared by the analyzers."""

import os
from typing import Optional, Union

from .errors import FileReadError

PathType = Union[str, os.PathLike]


def read_file(path: PathType, max_file_size: Optional[int] = None) -> bytes:
    """Read a whole file, optionally refusing anything over ``max_file_size`` bytes.

    Raises:
        FileReadError: the file could not be read or is too large
    """
    try:
        with open(path, "rb") as f:
            if max_file_size is None:
                return f.read()
            data = f.read(max_file_size + 1)
    except OSError as e:
        raise FileReadError(f"failed to read {os.fspath(path)}: {e}") from e

    if len(data) > max_file_size:
        raise FileReadError(
            f"failed to read {os.fspath(path)}: larger than maximum allowed ({max_file_size} bytes)"
        )
    return data
