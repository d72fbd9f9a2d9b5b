"""Local filesystem getter.

Directories are always materialized as a symlink to the source. Single files
are symlinked or copied depending on ``Request.copy``.
"""

from __future__ import annotations

import errno
import os
import shutil
import stat

from loguru import logger

from ..core.cancel import CancellationToken
from ..core.exceptions import (
    DestinationConflictError,
    MissingPwdError,
    SourceKindError,
    SourceNotFoundError,
)
from ..core.types import Address, Mode, Request
from ..utils.copy import copy_stream
from ..utils.urls import fmt_file_url, is_windows_smb_path, local_path, url_scheme
from .base import BaseGetter

# Windows ERROR_PRIVILEGE_NOT_HELD
_WINERROR_PRIVILEGE_NOT_HELD = 1314


def _is_privilege_error(exc: OSError) -> bool:
    """Whether a symlink failure means the platform denies the link privilege."""
    if getattr(exc, "winerror", None) == _WINERROR_PRIVILEGE_NOT_HELD:
        return True
    return exc.errno == errno.EPERM


def _lstat(path: str) -> os.stat_result | None:
    try:
        return os.lstat(path)
    except FileNotFoundError:
        return None


def _stat_source(path: str) -> os.stat_result:
    try:
        return os.stat(path)
    except FileNotFoundError:
        raise SourceNotFoundError(path) from None


class FileGetter(BaseGetter):
    """Getter for ``file://`` addresses and plain local paths.

    Example:
        getter = FileGetter()
        url = getter.detect("./modules/foo", "/work")   # file:///work/modules/foo
        request = Request(src=url, dst="/tmp/out", address=Address("file", url))
        getter.get(request, CancellationToken())        # /tmp/out -> /work/modules/foo
    """

    name = "file"

    def detect(self, src: str, pwd: str, forced: str = "") -> str | None:
        if not src:
            return None

        if forced and not self.valid_scheme(forced):
            return None

        scheme = url_scheme(src)
        if scheme == "file":
            return src
        if scheme and not forced:
            # URL for some other getter
            return None

        if not os.path.isabs(src):
            if not pwd:
                raise MissingPwdError(src)
            src = os.path.normpath(os.path.join(self._resolve_pwd(pwd), src))

        if is_windows_smb_path(src):
            # Left for a share-aware getter
            return None

        return fmt_file_url(src)

    @staticmethod
    def _resolve_pwd(pwd: str) -> str:
        """Resolve pwd to its real absolute target when it is a symlink.

        A missing pwd is left alone; using the address will fail later.
        """
        st = _lstat(pwd)
        if st is not None and stat.S_ISLNK(st.st_mode):
            resolved = os.path.realpath(pwd)
            logger.debug(f"Resolved symlinked pwd {pwd} -> {resolved}")
            return resolved
        return pwd

    def mode(self, address: Address) -> Mode:
        path = local_path(address.url)
        st = _stat_source(path)
        if stat.S_ISDIR(st.st_mode):
            return Mode.DIR
        return Mode.FILE

    def get(self, request: Request, token: CancellationToken) -> None:
        path = local_path(request.require_address().url)

        st = _stat_source(path)
        if not stat.S_ISDIR(st.st_mode):
            raise SourceKindError(path, "directory")

        dst_st = _lstat(request.dst)

        if request.inplace:
            request.dst = path
            return

        if dst_st is not None:
            if not stat.S_ISLNK(dst_st.st_mode):
                raise DestinationConflictError(
                    request.dst, "destination exists and is not a symlink"
                )
            os.remove(request.dst)

        os.makedirs(os.path.dirname(request.dst) or ".", mode=0o755, exist_ok=True)

        logger.debug(f"Linking directory {path} -> {request.dst}")
        os.symlink(path, request.dst, target_is_directory=True)

    def get_file(self, request: Request, token: CancellationToken) -> None:
        path = local_path(request.require_address().url)

        st = _stat_source(path)
        if stat.S_ISDIR(st.st_mode):
            raise SourceKindError(path, "file")

        if request.inplace:
            request.dst = path
            return

        # Unlike get(), any existing destination is replaced.
        dst_st = _lstat(request.dst)
        if dst_st is not None:
            if stat.S_ISDIR(dst_st.st_mode):
                shutil.rmtree(request.dst)
            else:
                os.remove(request.dst)

        os.makedirs(os.path.dirname(request.dst) or ".", mode=0o755, exist_ok=True)

        if not request.copy:
            try:
                os.symlink(path, request.dst)
                logger.debug(f"Linked file {path} -> {request.dst}")
                return
            except OSError as e:
                if not _is_privilege_error(e):
                    raise
                logger.warning(
                    f"Symlink privilege not held, copying {path} instead: {e}"
                )

        self.copy_file(path, request.dst, token)

    def copy_file(self, src: str, dst: str, token: CancellationToken) -> int:
        """Stream src into dst, checking token between chunks.

        Returns:
            Number of bytes copied.
        """
        with open(src, "rb") as src_f, open(dst, "wb") as dst_f:
            copied = copy_stream(token, dst_f, src_f, self.config.copy.buffer_size)
        logger.debug(f"Copied {copied} bytes {src} -> {dst}")
        return copied
