"""Code-hosting shorthand detection.

Bitbucket hosts both git and Mercurial repositories behind the same
``bitbucket.org/<owner>/<repo>`` shorthand, so the repository type has to be
looked up through the Bitbucket API before the shorthand can be expanded.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit

import httpx
from loguru import logger

from ..core.exceptions import TransportError

BITBUCKET_PREFIX = "bitbucket.org/"
BITBUCKET_API = "https://api.bitbucket.org/2.0/repositories"


class ShorthandDetectionError(TransportError):
    """A shorthand was recognized but could not be expanded."""

    pass


@dataclass(frozen=True)
class ShorthandResult:
    """Expanded shorthand.

    Attributes:
        scm: Repository type ('git' or 'hg').
        url: Clone URL for the repository.
    """

    scm: str
    url: str


def detect_bitbucket(
    src: str,
    client: httpx.Client | None = None,
    timeout: float = 10.0,
) -> ShorthandResult | None:
    """Expand a ``bitbucket.org/owner/repo`` shorthand.

    Args:
        src: Raw source string.
        client: Optional HTTP client (a temporary one is used otherwise).
        timeout: Request timeout in seconds for the temporary client.

    Returns:
        ShorthandResult, or None if src is not a Bitbucket shorthand.

    Raises:
        ShorthandDetectionError: If the lookup fails or the repository type
            is unknown.
    """
    if not src.startswith(BITBUCKET_PREFIX):
        return None

    url = f"https://{src}"
    path = urlsplit(url).path
    info_url = f"{BITBUCKET_API}{path}"

    logger.debug(f"Looking up Bitbucket repository type: {info_url}")
    owns_client = client is None
    http = client or httpx.Client(timeout=timeout)
    try:
        response = http.get(info_url)
        if response.status_code == 403:
            raise ShorthandDetectionError(
                src,
                "shorthand Bitbucket URL can't be used for private repos, "
                "please use a full URL",
            )
        response.raise_for_status()
        info = response.json()
    except httpx.HTTPError as e:
        raise ShorthandDetectionError(src, f"error looking up Bitbucket URL: {e}") from e
    except ValueError as e:
        raise ShorthandDetectionError(src, f"invalid Bitbucket API response: {e}") from e
    finally:
        if owns_client:
            http.close()

    scm = info.get("scm")
    if scm == "git":
        if not url.endswith(".git"):
            url += ".git"
        return ShorthandResult(scm="git", url=url)
    if scm == "hg":
        return ShorthandResult(scm="hg", url=url)

    raise ShorthandDetectionError(src, f"unknown Bitbucket SCM type: {scm}")
