"""Cancellation token shared by every retrieval call."""

from __future__ import annotations

import threading

from .exceptions import CancelledError


class CancellationToken:
    """Cooperative cancellation flag.

    One token is handed to a retrieval; any thread may call :meth:`cancel`.
    Retrievers check it at chunk, page and subprocess-poll boundaries.

    Example:
        token = CancellationToken()
        worker = threading.Thread(target=client.fetch, args=(request, token))
        worker.start()
        token.cancel()
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        """Whether cancellation has been requested."""
        return self._event.is_set()

    def raise_if_cancelled(self, operation: str = "retrieval") -> None:
        """Raise CancelledError if the token has fired."""
        if self._event.is_set():
            raise CancelledError(operation)

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancelled or timeout elapses. Returns the cancelled state."""
        return self._event.wait(timeout)
