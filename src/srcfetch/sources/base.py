"""Base protocol and shared behaviour for getters.

A getter owns one address scheme and implements four operations:

- ``detect``: turn a raw source string into an address for this getter
- ``mode``: report whether an address names a file or a directory
- ``get``: retrieve a directory into ``request.dst``
- ``get_file``: retrieve a single file into ``request.dst``

Uses Protocol (structural subtyping) so third-party getters don't need to
inherit from BaseGetter; BaseGetter only supplies the common detection rules.
"""

from __future__ import annotations

import os
from typing import Protocol, runtime_checkable

from ..core.cancel import CancellationToken
from ..core.config import Config
from ..core.types import Address, Mode, Request
from ..utils.urls import to_slash, url_scheme


# =============================================================================
# Protocol Definition
# =============================================================================


@runtime_checkable
class Getter(Protocol):
    """Protocol defining the interface for retrieval backends.

    Example implementation:

        class FTPGetter(BaseGetter):
            name = "ftp"

            def mode(self, address: Address) -> Mode:
                return Mode.FILE

            def get(self, request: Request, token: CancellationToken) -> None:
                raise NotImplementedError

            def get_file(self, request: Request, token: CancellationToken) -> None:
                ...
    """

    name: str

    def valid_scheme(self, scheme: str) -> bool:
        """Whether scheme (or a forced getter name) belongs to this getter."""
        ...

    def detect(self, src: str, pwd: str, forced: str = "") -> str | None:
        """Resolve src to a URL for this getter.

        Args:
            src: Raw source string without any ``getter::`` prefix.
            pwd: Working directory for relative paths (may be "").
            forced: Forced getter name, or "".

        Returns:
            The URL this getter will handle, or None if not applicable.

        Raises:
            SrcFetchError: If src is clearly meant for this getter but invalid.
        """
        ...

    def mode(self, address: Address) -> Mode:
        """Report whether the address names a file or a directory."""
        ...

    def get(self, request: Request, token: CancellationToken) -> None:
        """Retrieve a directory to request.dst."""
        ...

    def get_file(self, request: Request, token: CancellationToken) -> None:
        """Retrieve a single file to request.dst."""
        ...


# =============================================================================
# Default Implementation Helpers
# =============================================================================


class BaseGetter:
    """Optional base class implementing the common detection rules.

    Subclasses set ``name`` and may override :meth:`detect_shorthand` to claim
    sources that carry no URL scheme.
    """

    name: str = ""

    def __init__(self, config: Config | None = None) -> None:
        self._config = config or Config()

    @property
    def config(self) -> Config:
        return self._config

    def valid_scheme(self, scheme: str) -> bool:
        return scheme.lower() == self.name

    def detect(self, src: str, pwd: str, forced: str = "") -> str | None:
        if not src:
            return None

        if forced and not self.valid_scheme(forced):
            # Another getter is forced
            return None
        is_forced = bool(forced)

        scheme = url_scheme(src)
        if scheme:
            if is_forced or self.valid_scheme(scheme):
                return src
            return None

        result = self.detect_shorthand(src, pwd)
        if result is not None:
            return result

        if is_forced:
            if pwd and not os.path.isabs(src):
                src = os.path.join(pwd, src)
            return to_slash(src)

        return None

    def detect_shorthand(self, src: str, pwd: str) -> str | None:
        """Claim a scheme-less source by a getter-specific pattern.

        Default: claim nothing.
        """
        return None
