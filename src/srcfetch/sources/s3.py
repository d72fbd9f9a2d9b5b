"""S3 and S3-compatible object storage getter.

Accepted address forms:

- ``https://s3.amazonaws.com/bucket/key`` (path style, region us-east-1)
- ``https://s3-<region>.amazonaws.com/bucket/key``
- ``https://s3.<region>.amazonaws.com/bucket/key``
- ``https://bucket.s3[.-<region>].amazonaws.com/key`` (virtual-hosted style)
- ``https://minio.example.com:9000/bucket/key?region=eu-west-1`` (any other host)
- ``s3://bucket/key``

Scheme-less strings containing ``.amazonaws.com/`` are detected and rewritten
into the path-style https form.

Query parameters: ``version``, ``region``, ``aws_access_key_id``,
``aws_access_key_secret``, ``aws_access_token``.
"""

from __future__ import annotations

import os
import posixpath
import shutil
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator
from urllib.parse import urlsplit

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger

from ..core.cancel import CancellationToken
from ..core.config import Config
from ..core.exceptions import AddressError, TransportError
from ..core.types import Address, Mode, Request
from ..utils.copy import copy_stream
from ..utils.urls import query_params
from .auth import InstanceMetadataCredentials, resolve_aws_credentials
from .base import BaseGetter


class InvalidS3URLError(AddressError):
    """URL is not a valid S3 (or S3-compatible) URL."""

    pass


# =============================================================================
# Address Parsing
# =============================================================================


@dataclass(frozen=True)
class S3Location:
    """Parsed S3 address.

    Attributes:
        bucket: Bucket name.
        key: Object key or key prefix (may be empty for the bucket root).
        region: Region name.
        version: Object version id, or "".
        endpoint_url: Endpoint to talk to, or None for the AWS default.
        query: All query parameters of the address.
    """

    bucket: str
    key: str
    region: str
    version: str = ""
    endpoint_url: str | None = None
    query: dict[str, str] = field(default_factory=dict)


def _is_s3_label(label: str) -> bool:
    return label == "s3" or label.startswith("s3-")


def split_aws_host(host: str, default_region: str) -> tuple[str | None, str]:
    """Split an ``*.amazonaws.com`` host into ``(bucket, region)``.

    bucket is None for path-style hosts.

    Raises:
        InvalidS3URLError: If the host does not follow an S3 naming pattern.
    """
    labels = host.lower().split(".")
    if labels[-2:] != ["amazonaws", "com"] or len(labels) < 3:
        raise InvalidS3URLError(host, "URL is not a valid S3 URL")
    labels = labels[:-2]

    s3_index = None
    for i in range(len(labels) - 1, -1, -1):
        if _is_s3_label(labels[i]):
            s3_index = i
            break
    if s3_index is None:
        raise InvalidS3URLError(host, "URL is not a valid S3 URL")

    bucket = ".".join(labels[:s3_index]) or None
    region = labels[s3_index][len("s3-"):] if labels[s3_index] != "s3" else ""
    rest = labels[s3_index + 1:]
    if rest:
        if region or len(rest) != 1:
            raise InvalidS3URLError(host, "URL is not a valid S3 URL")
        region = rest[0]

    return bucket, region or default_region


def parse_s3_url(url: str, default_region: str = "us-east-1") -> S3Location:
    """Parse an S3 address into its location.

    Raises:
        InvalidS3URLError: If the URL lacks a bucket or uses an unknown AWS host form.
    """
    parts = urlsplit(url)
    query = query_params(url)
    version = query.get("version", "")

    if parts.scheme.lower() == "s3":
        bucket = parts.netloc
        key = parts.path.lstrip("/")
        if not bucket:
            raise InvalidS3URLError(url, "URL is not a valid S3 URL")
        return S3Location(
            bucket=bucket,
            key=key,
            region=query.get("region") or default_region,
            version=version,
            query=query,
        )

    host = parts.hostname or ""
    path_parts = parts.path.split("/", 2)

    if "amazonaws.com" in host:
        # AWS hosts use the regional default endpoint
        endpoint_url = None
        vhost_bucket, region = split_aws_host(host, default_region)
        if vhost_bucket:
            # Virtual-hosted style, the path is all key
            return S3Location(
                bucket=vhost_bucket,
                key=parts.path.lstrip("/"),
                region=region,
                version=version,
                query=query,
            )
        if len(path_parts) != 3 or not path_parts[1]:
            raise InvalidS3URLError(url, "URL is not a valid S3 URL")
    else:
        endpoint_url = f"{parts.scheme or 'https'}://{parts.netloc}"
        if len(path_parts) != 3 or not path_parts[1]:
            raise InvalidS3URLError(url, "URL is not a valid S3 compliant URL")
        region = query.get("region") or default_region

    return S3Location(
        bucket=path_parts[1],
        key=path_parts[2],
        region=region,
        version=version,
        endpoint_url=endpoint_url,
        query=query,
    )


def detect_s3_http(src: str, default_region: str = "us-east-1") -> str:
    """Rewrite a scheme-less AWS S3 host reference into a path-style https URL.

    ``bucket.s3.us-west-2.amazonaws.com/key/obj.txt`` becomes
    ``https://s3.us-west-2.amazonaws.com/bucket/key/obj.txt``.
    """
    host, sep, path = src.partition("/")
    if not sep:
        raise InvalidS3URLError(src, "URL is not a valid S3 URL")

    bucket, region = split_aws_host(host, default_region)
    if bucket:
        path = f"{bucket}/{path}"

    # Keep the region-less host when the source named none
    _, named_region = split_aws_host(host, "")
    canonical_host = f"s3.{named_region}.amazonaws.com" if named_region else "s3.amazonaws.com"
    return f"https://{canonical_host}/{path}"


def relative_key(prefix: str, key: str) -> str | None:
    """Return key relative to prefix, "." for the prefix itself.

    Returns None for keys outside the prefix "directory" (e.g. ``foobar/x``
    listed for prefix ``foo``).
    """
    if not prefix:
        return key
    rel = posixpath.relpath(key, prefix)
    if rel == ".." or rel.startswith("../"):
        return None
    return rel


# =============================================================================
# Getter Implementation
# =============================================================================

ClientFactory = Callable[[S3Location], Any]


@contextmanager
def _transport_errors(address: str) -> Iterator[None]:
    try:
        yield
    except (ClientError, BotoCoreError) as e:
        raise TransportError(address, str(e)) from e


class S3Getter(BaseGetter):
    """Getter for S3 buckets and S3-compatible object stores.

    Example:
        getter = S3Getter()
        address = Address("s3", "https://s3.us-west-2.amazonaws.com/bucket/key/obj.txt")
        if getter.mode(address) is Mode.FILE:
            getter.get_file(Request(src=str(address), dst="/tmp/obj.txt", address=address), token)
    """

    name = "s3"

    def __init__(
        self,
        config: Config | None = None,
        client_factory: ClientFactory | None = None,
    ) -> None:
        """Initialize S3 getter.

        Args:
            config: Library configuration.
            client_factory: Builds an S3 client for a location. Defaults to a
                boto3 client with credentials resolved per call.
        """
        super().__init__(config)
        self._client_factory = client_factory or self._create_client

    def detect_shorthand(self, src: str, pwd: str) -> str | None:
        if ".amazonaws.com/" in src:
            return detect_s3_http(src, self.config.s3.default_region)
        return None

    def parse(self, address: Address) -> S3Location:
        return parse_s3_url(address.url, self.config.s3.default_region)

    def _create_client(self, location: S3Location) -> Any:
        s3_config = self.config.s3
        probe = InstanceMetadataCredentials(
            s3_config.metadata_url, timeout=s3_config.metadata_timeout
        ).get_credentials
        credentials = resolve_aws_credentials(location.query, metadata_probe=probe)

        session = boto3.Session(
            aws_access_key_id=credentials.access_key_id,
            aws_secret_access_key=credentials.secret_access_key,
            aws_session_token=credentials.session_token,
            region_name=location.region,
        )
        return session.client(
            "s3",
            region_name=location.region,
            endpoint_url=location.endpoint_url,
            config=BotoConfig(
                connect_timeout=s3_config.connect_timeout,
                read_timeout=s3_config.read_timeout,
                retries={"max_attempts": s3_config.max_attempts, "mode": "standard"},
                s3={"addressing_style": "path"},
            ),
        )

    def mode(self, address: Address) -> Mode:
        location = self.parse(address)
        client = self._client_factory(location)

        with _transport_errors(str(address)):
            resp = client.list_objects(Bucket=location.bucket, Prefix=location.key)

        key = location.key
        contents = resp.get("Contents", [])
        # A trailing separator names a prefix, even if a marker object has that key
        if not key or key.endswith("/"):
            return Mode.DIR if contents else Mode.FILE

        for obj in contents:
            # Use file mode on exact match
            if obj["Key"] == key:
                return Mode.FILE
            # Use dir mode if child keys are found
            if obj["Key"].startswith(key + "/"):
                return Mode.DIR

        # No match: report a file and let the fetch produce the real error
        return Mode.FILE

    def get(self, request: Request, token: CancellationToken) -> None:
        address = request.require_address()
        location = self.parse(address)

        # The destination belongs to this retrieval
        if os.path.lexists(request.dst):
            if os.path.isdir(request.dst) and not os.path.islink(request.dst):
                shutil.rmtree(request.dst)
            else:
                os.remove(request.dst)

        os.makedirs(os.path.dirname(request.dst) or ".", mode=0o755, exist_ok=True)

        client = self._client_factory(location)
        logger.info(f"Listing s3://{location.bucket}/{location.key} -> {request.dst}")

        last_marker = ""
        fetched = 0
        while True:
            token.raise_if_cancelled("s3 listing")

            params = {"Bucket": location.bucket, "Prefix": location.key}
            if last_marker:
                params["Marker"] = last_marker

            with _transport_errors(str(address)):
                resp = client.list_objects(**params)

            contents = resp.get("Contents", [])
            for obj in contents:
                obj_key = obj["Key"]
                last_marker = obj_key

                # Zero-byte directory markers
                if obj_key.endswith("/"):
                    continue

                rel = relative_key(location.key, obj_key)
                if rel is None:
                    logger.debug(f"Skipping {obj_key}: outside prefix {location.key}")
                    continue

                obj_dst = os.path.normpath(os.path.join(request.dst, *rel.split("/")))
                self._get_object(
                    client, token, str(address), obj_dst, location.bucket, obj_key, ""
                )
                fetched += 1

            if not resp.get("IsTruncated"):
                break
            if not contents:
                # Truncated but empty page: continue from NextMarker if given
                next_marker = resp.get("NextMarker")
                if not next_marker:
                    break
                last_marker = next_marker

        logger.info(f"Fetched {fetched} objects into {request.dst}")

    def get_file(self, request: Request, token: CancellationToken) -> None:
        address = request.require_address()
        location = self.parse(address)
        client = self._client_factory(location)
        self._get_object(
            client,
            token,
            str(address),
            request.dst,
            location.bucket,
            location.key,
            location.version,
        )

    def _get_object(
        self,
        client: Any,
        token: CancellationToken,
        address: str,
        dst: str,
        bucket: str,
        key: str,
        version: str,
    ) -> None:
        params = {"Bucket": bucket, "Key": key}
        if version:
            params["VersionId"] = version

        logger.debug(f"Fetching s3://{bucket}/{key} -> {dst}")
        with _transport_errors(address):
            resp = client.get_object(**params)

        body = resp["Body"]
        try:
            os.makedirs(os.path.dirname(dst) or ".", mode=0o755, exist_ok=True)
            with open(dst, "wb") as f, _transport_errors(address):
                copy_stream(token, f, body, self.config.copy.buffer_size)
        finally:
            body.close()
