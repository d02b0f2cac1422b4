"""
File access helpers shared by the byte-oriented tools.

Regular files are memory-mapped read-only; anything that cannot be mapped
(empty files, pipes, character devices) is read into memory instead.
"""

import logging
import mmap
import os
import stat
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO

from devutils.errors import FileReadError

logger = logging.getLogger(__name__)

STDIN_NAME = "(standard input)"


def describe_os_error(error: OSError) -> str:
    """Return the strerror-style text for an OSError."""
    return error.strerror or str(error)


@contextmanager
def open_buffer(path: Path | str, use_mmap: bool = True) -> Iterator[bytes | mmap.mmap]:
    """
    Open a file and expose its whole content as a read-only buffer.

    Args:
        path: File to open
        use_mmap: Map regular files instead of reading them

    Yields:
        A bytes-like object valid until the context exits

    Raises:
        FileReadError: If the file cannot be opened, mapped or read
    """
    try:
        f = open(path, "rb")
    except OSError as e:
        raise FileReadError(str(path), describe_os_error(e)) from e

    with f:
        try:
            st = os.fstat(f.fileno())
            if use_mmap and stat.S_ISREG(st.st_mode) and st.st_size > 0:
                mapped = mmap.mmap(f.fileno(), 0, access=mmap.ACCESS_READ)
                if hasattr(mapped, "madvise") and hasattr(mmap, "MADV_SEQUENTIAL"):
                    mapped.madvise(mmap.MADV_SEQUENTIAL)
            else:
                mapped = None
                data = f.read()
        except OSError as e:
            raise FileReadError(str(path), describe_os_error(e)) from e

        if mapped is None:
            yield data
            return

        try:
            yield mapped
        finally:
            mapped.close()


def iter_chunks(stream: BinaryIO, chunk_size: int) -> Iterator[bytes]:
    """Yield successive chunks from a binary stream until EOF."""
    while chunk := stream.read(chunk_size):
        yield chunk
