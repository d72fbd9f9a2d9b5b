"""Getter backends for srcfetch.

Supported Address Forms
-----------------------
- ``file://`` URLs and local paths: FileGetter
- ``s3://`` URLs, ``*.amazonaws.com`` hosts and S3-compatible endpoints: S3Getter
- ``hg::<url>`` and Bitbucket Mercurial shorthands: HgGetter

Custom Getters
--------------
Implement the Getter protocol (or subclass BaseGetter) and register it:

    class FTPGetter(BaseGetter):
        name = "ftp"
        ...

    registry = get_default_registry()
    registry.register(FTPGetter())
"""

from .auth import (
    AWSCredentials,
    CredentialError,
    CredentialNotFoundError,
    CredentialProvider,
    EnvironmentCredentials,
    InstanceMetadataCredentials,
    SharedCredentialsFile,
    StaticCredentials,
    resolve_aws_credentials,
)
from .base import BaseGetter, Getter
from .detect import DetectionChain, detect
from .filesystem import FileGetter
from .hg import HgGetter
from .registry import (
    GetterRegistry,
    RegistryError,
    UnknownGetterError,
    create_registry,
    get_default_registry,
    reset_default_registry,
)
from .s3 import InvalidS3URLError, S3Getter, S3Location, parse_s3_url
from .shorthand import ShorthandDetectionError, ShorthandResult, detect_bitbucket

__all__ = [
    # Base types
    "BaseGetter",
    "Getter",
    # Detection
    "DetectionChain",
    "detect",
    # Registry
    "GetterRegistry",
    "RegistryError",
    "UnknownGetterError",
    "create_registry",
    "get_default_registry",
    "reset_default_registry",
    # Getters
    "FileGetter",
    "HgGetter",
    "S3Getter",
    "S3Location",
    "InvalidS3URLError",
    "parse_s3_url",
    # Shorthand
    "ShorthandDetectionError",
    "ShorthandResult",
    "detect_bitbucket",
    # Auth
    "AWSCredentials",
    "CredentialError",
    "CredentialNotFoundError",
    "CredentialProvider",
    "EnvironmentCredentials",
    "InstanceMetadataCredentials",
    "SharedCredentialsFile",
    "StaticCredentials",
    "resolve_aws_credentials",
]
