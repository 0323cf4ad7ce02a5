"""Open test event log files

Transparently decompresses logs, if needed.
"""

import io
from typing import TextIO

import zstd


COMPRESS_EXT = '.zst'
# Files are always assumed to be using this character map
CHARMAP = 'UTF-8'


class EventFileError(OSError):
    """An event log file couldn't be read."""


def open_event_file(fn: str) -> TextIO:
    """Open an event log for reading.

    A file ending in COMPRESS_EXT is decompressed into memory first. Characters are decoded
    while reading, so bad UTF-8 shows up as a DecodeError from eventparse.

    Raises:
        OSError (including EventFileError) if the file can't be read or decompressed
    """
    if fn.endswith(COMPRESS_EXT):
        with open(fn, 'rb') as compress_file:
            try:
                data = zstd.decompress(compress_file.read())
            except zstd.Error as e:
                raise EventFileError(f'Failed to decompress {fn}: {e}') from e
        return io.TextIOWrapper(io.BytesIO(data), encoding=CHARMAP)
    return open(fn, encoding=CHARMAP)
