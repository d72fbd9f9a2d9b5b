"""Core types, configuration and exceptions for srcfetch."""

from .cancel import CancellationToken
from .config import Config, CopyConfig, HgConfig, S3Config
from .exceptions import (
    AddressError,
    CancelledError,
    CommandError,
    DestinationConflictError,
    DetectionError,
    MissingPwdError,
    SourceKindError,
    SourceNotFoundError,
    SrcFetchError,
    ToolNotFoundError,
    TransportError,
)
from .types import Address, GetResult, Mode, Request

__all__ = [
    "Address",
    "AddressError",
    "CancellationToken",
    "CancelledError",
    "CommandError",
    "Config",
    "CopyConfig",
    "DestinationConflictError",
    "DetectionError",
    "GetResult",
    "HgConfig",
    "MissingPwdError",
    "Mode",
    "Request",
    "S3Config",
    "SourceKindError",
    "SourceNotFoundError",
    "SrcFetchError",
    "ToolNotFoundError",
    "TransportError",
]
