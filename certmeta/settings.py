"""Runtime settings."""

from typing import Literal

import pydantic

# 10 megs... a PEM file is never anywhere near that
MAX_FILE_SIZE = 1024 * 1024 * 10


class Settings(pydantic.BaseModel):
    """Application settings."""
    verbose:        bool = False
    debug:          bool = False
    max_file_size:  int  = pydantic.Field(default=MAX_FILE_SIZE, gt=0)
    output_format:  Literal["json", "text"] = "json"
