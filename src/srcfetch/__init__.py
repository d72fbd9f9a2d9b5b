"""srcfetch - resolve loosely specified sources and retrieve them locally.

Quick Start
-----------

    from srcfetch import Client, Request

    client = Client()
    result = client.fetch(Request(src="./modules/foo", dst="/tmp/foo", pwd="/work"))

Sources may be local paths, ``file://`` URLs, S3 URLs or host references,
or Mercurial repositories (``hg::https://...``).
"""

from .client import Client
from .core import (
    Address,
    AddressError,
    CancellationToken,
    CancelledError,
    CommandError,
    Config,
    DestinationConflictError,
    DetectionError,
    GetResult,
    MissingPwdError,
    Mode,
    Request,
    SourceKindError,
    SourceNotFoundError,
    SrcFetchError,
    ToolNotFoundError,
    TransportError,
)
from .sources import detect, get_default_registry

__all__ = [
    "Address",
    "AddressError",
    "CancellationToken",
    "CancelledError",
    "Client",
    "CommandError",
    "Config",
    "DestinationConflictError",
    "DetectionError",
    "GetResult",
    "MissingPwdError",
    "Mode",
    "Request",
    "SourceKindError",
    "SourceNotFoundError",
    "SrcFetchError",
    "ToolNotFoundError",
    "TransportError",
    "detect",
    "get_default_registry",
]
