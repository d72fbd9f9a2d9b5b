"""Run external commands under a cancellation token."""

from __future__ import annotations

import subprocess
from typing import Protocol, Sequence

from loguru import logger

from ..core.cancel import CancellationToken
from ..core.exceptions import CancelledError, CommandError


class CommandRunner(Protocol):
    """Runs one command to completion or raises."""

    def run(
        self, args: Sequence[str], cwd: str | None, token: CancellationToken
    ) -> None:  # pragma: no cover - protocol
        ...


class SubprocessRunner:
    """Run commands with subprocess, killing them when the token fires.

    A non-zero exit status raises CommandError carrying the command's stderr.
    """

    def __init__(self, poll_interval: float = 0.1) -> None:
        self._poll_interval = poll_interval

    def run(self, args: Sequence[str], cwd: str | None, token: CancellationToken) -> None:
        args = list(args)
        token.raise_if_cancelled(" ".join(args[:2]))

        logger.debug(f"Running {args} (cwd={cwd})")
        proc = subprocess.Popen(
            args,
            cwd=cwd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
        while True:
            try:
                _, stderr = proc.communicate(timeout=self._poll_interval)
                break
            except subprocess.TimeoutExpired:
                if token.cancelled:
                    proc.kill()
                    proc.communicate()
                    raise CancelledError(" ".join(args[:2])) from None

        if proc.returncode != 0:
            raise CommandError(args, proc.returncode, stderr.decode(errors="replace"))
