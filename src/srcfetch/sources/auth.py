"""AWS credential resolution for the S3 getter.

Credentials are resolved fresh for every retrieval from, in order:

- explicit query parameters on the address
  (``aws_access_key_id``, ``aws_access_key_secret``, ``aws_access_token``)
- environment variables (``AWS_ACCESS_KEY_ID``, ``AWS_SECRET_ACCESS_KEY``,
  ``AWS_SESSION_TOKEN``)
- the shared credentials file (``AWS_SHARED_CREDENTIALS_FILE`` or
  ``~/.aws/credentials``, profile ``AWS_PROFILE`` or ``default``)
- the EC2 instance metadata service (root overridable via ``AWS_METADATA_URL``)

The last three are thin adapters over botocore's own providers. Nothing is
cached between calls.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Protocol, runtime_checkable

from botocore.credentials import (
    EnvProvider,
    InstanceMetadataProvider,
    SharedCredentialProvider,
)
from botocore.exceptions import BotoCoreError
from botocore.utils import InstanceMetadataFetcher
from loguru import logger

from ..core.config import DEFAULT_METADATA_URL
from ..core.exceptions import SrcFetchError


# =============================================================================
# Exceptions
# =============================================================================


class CredentialError(SrcFetchError):
    """Base exception for credential operations."""

    pass


class CredentialNotFoundError(CredentialError):
    """Every provider in the chain came up empty."""

    def __init__(self, providers: list[str]):
        self.providers = providers
        super().__init__(
            f"No AWS credentials found (tried: {', '.join(providers)})"
        )


# =============================================================================
# Credential Types
# =============================================================================


@dataclass(frozen=True)
class AWSCredentials:
    """Static AWS credential triple."""

    access_key_id: str
    secret_access_key: str
    session_token: str | None = None
    source: str = "static"

    def __repr__(self) -> str:
        return (
            f"AWSCredentials(access_key_id={self.access_key_id!r}, "
            f"secret_access_key='***', source={self.source!r})"
        )


@runtime_checkable
class CredentialProvider(Protocol):
    """Protocol for AWS credential providers."""

    @property
    def name(self) -> str:
        """Provider name for logging/errors."""
        ...

    def get_credentials(self) -> AWSCredentials | None:
        """Return credentials, or None if this provider has none."""
        ...


def _load(provider: Any, name: str) -> AWSCredentials | None:
    """Run a botocore provider and freeze whatever it found.

    Raises:
        CredentialError: If the provider found a broken configuration,
            such as a key id without its secret.
    """
    try:
        credentials = provider.load()
    except BotoCoreError as e:
        raise CredentialError(f"Failed to load AWS credentials from {name}: {e}") from e
    if credentials is None:
        return None

    frozen = credentials.get_frozen_credentials()
    return AWSCredentials(
        access_key_id=frozen.access_key,
        secret_access_key=frozen.secret_key,
        session_token=frozen.token or None,
        source=name,
    )


def metadata_base_url(metadata_url: str) -> str:
    """Convert an ``.../latest`` metadata root into the host root botocore expects."""
    base = metadata_url.rstrip("/")
    if base.endswith("/latest"):
        base = base[: -len("/latest")]
    return base + "/"


# =============================================================================
# Built-in Providers
# =============================================================================


class StaticCredentials:
    """Credentials carried in the address query string.

    Any one of the three keys being present selects this provider, even if
    the others are empty.
    """

    KEYS = ("aws_access_key_id", "aws_access_key_secret", "aws_access_token")

    def __init__(self, query: Mapping[str, str]):
        self._query = query

    @property
    def name(self) -> str:
        return "query"

    def get_credentials(self) -> AWSCredentials | None:
        if not any(key in self._query for key in self.KEYS):
            return None
        return AWSCredentials(
            access_key_id=self._query.get("aws_access_key_id", ""),
            secret_access_key=self._query.get("aws_access_key_secret", ""),
            session_token=self._query.get("aws_access_token") or None,
            source=self.name,
        )


class EnvironmentCredentials:
    """Read credentials from environment variables."""

    def __init__(self, environ: Mapping[str, str]):
        self._provider = EnvProvider(environ=environ)

    @property
    def name(self) -> str:
        return "environment"

    def get_credentials(self) -> AWSCredentials | None:
        return _load(self._provider, self.name)


class SharedCredentialsFile:
    """Read credentials from an AWS shared credentials (INI) file."""

    def __init__(self, environ: Mapping[str, str]):
        path = environ.get("AWS_SHARED_CREDENTIALS_FILE")
        if not path:
            home = environ.get("HOME") or os.path.expanduser("~")
            path = os.path.join(home, ".aws", "credentials")
        self._path = path
        self._profile = environ.get("AWS_PROFILE") or "default"
        self._provider = SharedCredentialProvider(
            creds_filename=path, profile_name=self._profile
        )

    @property
    def name(self) -> str:
        return f"shared-file:{self._profile}"

    def get_credentials(self) -> AWSCredentials | None:
        return _load(self._provider, self.name)


class InstanceMetadataCredentials:
    """Read role credentials from the EC2 instance metadata service.

    botocore's fetcher tries an IMDSv2 session token first and falls back to
    plain v1 requests. An unreachable service means "no credentials here".
    """

    def __init__(
        self,
        metadata_url: str = DEFAULT_METADATA_URL,
        timeout: float = 1.0,
        fetcher: Any = None,
    ):
        if fetcher is None:
            fetcher = InstanceMetadataFetcher(
                timeout=timeout,
                num_attempts=1,
                base_url=metadata_base_url(metadata_url),
            )
        self._provider = InstanceMetadataProvider(iam_role_fetcher=fetcher)

    @property
    def name(self) -> str:
        return "instance-metadata"

    def get_credentials(self) -> AWSCredentials | None:
        return _load(self._provider, self.name)


# =============================================================================
# Resolution
# =============================================================================

MetadataProbe = Callable[[], "AWSCredentials | None"]


def resolve_aws_credentials(
    query: Mapping[str, str],
    environ: Mapping[str, str] | None = None,
    metadata_probe: MetadataProbe | None = None,
) -> AWSCredentials:
    """Resolve credentials for one S3 request.

    Args:
        query: Query parameters of the address.
        environ: Environment to consult (defaults to ``os.environ``).
        metadata_probe: Callable returning instance-role credentials or None.
            Defaults to an InstanceMetadataCredentials probe rooted at
            ``AWS_METADATA_URL``.

    Returns:
        The first credentials found.

    Raises:
        CredentialNotFoundError: If no provider had credentials.
    """
    if environ is None:
        environ = os.environ
    if metadata_probe is None:
        metadata_url = environ.get("AWS_METADATA_URL") or DEFAULT_METADATA_URL
        metadata_probe = InstanceMetadataCredentials(metadata_url).get_credentials

    providers: list[tuple[str, MetadataProbe]] = [
        (p.name, p.get_credentials)
        for p in (
            StaticCredentials(query),
            EnvironmentCredentials(environ),
            SharedCredentialsFile(environ),
        )
    ]
    providers.append(("instance-metadata", metadata_probe))

    for name, probe in providers:
        credentials = probe()
        if credentials is not None:
            logger.debug(f"Using AWS credentials from {name}")
            return credentials

    raise CredentialNotFoundError([name for name, _ in providers])
