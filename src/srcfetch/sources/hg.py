"""Mercurial getter.

Directories are retrieved as a working copy: ``hg clone -U`` when the
destination is new, then ``hg pull`` and ``hg update [rev]``. Single files
are taken from a throwaway checkout.
"""

from __future__ import annotations

import os
import posixpath
import shutil
import tempfile
from typing import Callable
from urllib.parse import urlsplit, urlunsplit

from loguru import logger

from ..core.cancel import CancellationToken
from ..core.config import Config
from ..core.exceptions import AddressError, ToolNotFoundError
from ..core.types import Address, Mode, Request
from ..utils.command import CommandRunner, SubprocessRunner
from ..utils.urls import fix_windows_drive_path, fmt_file_url, pop_query_param
from .base import BaseGetter
from .filesystem import FileGetter
from .shorthand import ShorthandResult, detect_bitbucket


def split_file_path(path: str) -> tuple[str, str]:
    """Split a URL path into the repository path and the file inside it.

    ``/repo//path/to/file`` splits at the double slash; otherwise the last
    path segment is the file.

    Raises:
        AddressError: If no file name is present.
    """
    idx = path.find("//", 1)
    if idx >= 0:
        repo, filename = path[:idx], path[idx + 2:]
    else:
        repo, filename = posixpath.dirname(path), posixpath.basename(path)
    if not filename or filename.endswith("/"):
        raise AddressError(path, "no file name in hg address")
    return repo, filename


class HgGetter(BaseGetter):
    """Getter for Mercurial repositories.

    Example:
        getter = HgGetter()
        address = Address("hg", "https://example.com/repo?rev=abc123")
        getter.get(Request(src=str(address), dst="/tmp/repo", address=address), token)
    """

    name = "hg"

    def __init__(
        self,
        config: Config | None = None,
        runner: CommandRunner | None = None,
        which: Callable[[str], str | None] = shutil.which,
        shorthand: Callable[[str], ShorthandResult | None] = detect_bitbucket,
    ) -> None:
        super().__init__(config)
        self._runner = runner or SubprocessRunner(self.config.hg.poll_interval)
        self._which = which
        self._shorthand = shorthand

    def detect_shorthand(self, src: str, pwd: str) -> str | None:
        result = self._shorthand(src)
        if result is not None and result.scm == "hg":
            return result.url
        return None

    def mode(self, address: Address) -> Mode:
        # A repository is always a tree
        return Mode.DIR

    def get(self, request: Request, token: CancellationToken) -> None:
        hg = self.config.hg.binary
        if self._which(hg) is None:
            raise ToolNotFoundError(hg)

        address = request.require_address()
        parts = fix_windows_drive_path(urlsplit(address.url))
        parts, rev = pop_query_param(parts, "rev")
        url = urlunsplit(parts)

        try:
            os.stat(request.dst)
            exists = True
        except FileNotFoundError:
            exists = False

        if not exists:
            logger.info(f"Cloning {url} -> {request.dst}")
            self._runner.run([hg, "clone", "-U", url, request.dst], None, token)

        self._runner.run([hg, "pull"], request.dst, token)

        args = [hg, "update"]
        if rev:
            args.append(rev)
        self._runner.run(args, request.dst, token)
        logger.info(f"Updated {request.dst} to {rev or 'tip'}")

    def get_file(self, request: Request, token: CancellationToken) -> None:
        address = request.require_address()
        parts = urlsplit(address.url)
        repo_path, filename = split_file_path(parts.path)

        repo_parts = parts._replace(path=repo_path)
        if os.name == "nt" and parts.scheme.lower() == "file":
            repo_parts = repo_parts._replace(netloc="localhost")
        repo_url = urlunsplit(repo_parts)

        # Always a fresh checkout; removed whatever happens
        with tempfile.TemporaryDirectory(prefix="srcfetch-hg-") as tmp:
            checkout = os.path.join(tmp, "repo")
            self.get(
                Request(
                    src=repo_url,
                    dst=checkout,
                    address=Address(self.name, repo_url),
                ),
                token,
            )

            source_url = fmt_file_url(os.path.join(checkout, *filename.split("/")))
            # The checkout is about to vanish, so never link
            FileGetter(self.config).get_file(
                Request(
                    src=source_url,
                    dst=request.dst,
                    copy=True,
                    address=Address("file", source_url),
                ),
                token,
            )
