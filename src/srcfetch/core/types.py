"""Core data types for srcfetch."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..utils.urls import split_forced, url_scheme
from .exceptions import AddressError


class Mode(Enum):
    """Whether an address names a single artifact or a tree."""

    FILE = "file"
    DIR = "dir"


@dataclass(frozen=True)
class Address:
    """Canonical, getter-qualified source address.

    Attributes:
        getter: Name of the backend that handles this address (e.g. 'file', 's3', 'hg').
        url: URL (or path) in the form the backend understands.
    """

    getter: str
    url: str

    @classmethod
    def parse(cls, address: str) -> "Address":
        """Parse an address string in ``getter::url`` or ``scheme://...`` form.

        Raises:
            AddressError: If the string names no getter.
        """
        forced, url = split_forced(address)
        if forced:
            return cls(getter=forced.lower(), url=url)

        scheme = url_scheme(address)
        if not scheme:
            raise AddressError(address, "address has no scheme")
        return cls(getter=scheme, url=address)

    @property
    def scheme(self) -> str:
        """Scheme of the underlying URL ('' for bare paths)."""
        return url_scheme(self.url)

    def __str__(self) -> str:
        if self.scheme == self.getter:
            return self.url
        return f"{self.getter}::{self.url}"


@dataclass
class Request:
    """A single retrieval.

    Attributes:
        src: Source string as given by the caller (path, shorthand or URL).
        dst: Local destination path.
        pwd: Working directory used to resolve relative sources.
        forced: Name of a getter that must handle the source, or "".
        copy: Copy files instead of symlinking them where a getter could link.
        inplace: Use the source location itself as the result (no transfer).
            A getter that honours this rewrites ``dst`` to the source path.
        address: Resolved address; filled in by detection if not given.
    """

    src: str
    dst: str
    pwd: str = ""
    forced: str = ""
    copy: bool = False
    inplace: bool = False
    address: Address | None = None

    def require_address(self) -> Address:
        """Return the resolved address, parsing ``src`` if detection was skipped."""
        if self.address is None:
            self.address = Address.parse(self.src)
        return self.address


@dataclass(frozen=True)
class GetResult:
    """Outcome of a full detect, probe and retrieve cycle."""

    address: Address
    mode: Mode
    dst: str
