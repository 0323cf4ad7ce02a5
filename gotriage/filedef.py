"""Type definitions for files."""

import io
from typing import Protocol


class TextIOReadline(Protocol):
    """A typing.TextIO class of which only the readline method is used for event streams."""

    def readline(self, size: int = -1) -> str:
        raise io.UnsupportedOperation
