"""Cancellation-aware streaming copy."""

from typing import BinaryIO, Protocol

from ..core.cancel import CancellationToken

DEFAULT_BUFFER_SIZE = 32 * 1024


class Readable(Protocol):
    def read(self, size: int = -1) -> bytes:  # pragma: no cover - protocol
        ...


def copy_stream(
    token: CancellationToken,
    dst: BinaryIO,
    src: Readable,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
) -> int:
    """Copy src into dst one chunk at a time.

    The token is checked before every chunk. On cancellation the bytes
    written so far stay in dst; discarding the partial file is up to the
    caller.

    Args:
        token: Cancellation token.
        dst: Writable binary file object.
        src: Anything with a ``read(size)`` method (file, botocore StreamingBody).
        buffer_size: Chunk size in bytes.

    Returns:
        Number of bytes copied.

    Raises:
        CancelledError: If the token fired mid-copy.
    """
    copied = 0
    while True:
        token.raise_if_cancelled("copy")
        chunk = src.read(buffer_size)
        if not chunk:
            return copied
        dst.write(chunk)
        copied += len(chunk)
