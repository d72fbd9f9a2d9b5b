"""Address string helpers shared by the detectors and getters."""

from __future__ import annotations

import ntpath
import os
import re
from urllib.parse import SplitResult, parse_qsl, quote, unquote, urlencode, urlsplit

FORCED_RE = re.compile(r"^([A-Za-z0-9]+)::(.+)$")

# \\host\share\path or //host/share/path
_WINDOWS_SMB_RE = re.compile(r"^(\\\\|//)[^\\/]+[\\/][^\\/]+")

_DRIVE_RE = re.compile(r"^[A-Za-z]:")

# Characters left unescaped when re-encoding a decoded path for comparison
_PATH_SAFE = "/:@!$&'()*+,;=~"


def split_forced(src: str) -> tuple[str, str]:
    """Split a ``getter::url`` string into ``(getter, url)``.

    Returns ``("", src)`` when there is no forced-getter prefix.
    """
    match = FORCED_RE.match(src)
    if match is None:
        return "", src
    return match.group(1), match.group(2)


def url_scheme(src: str) -> str:
    """Return the lowercased URL scheme of src, or "" if it has none.

    Single-letter schemes are Windows drive letters, not URL schemes.
    """
    try:
        scheme = urlsplit(src).scheme
    except ValueError:
        return ""
    if len(scheme) <= 1:
        return ""
    return scheme.lower()


def to_slash(path: str) -> str:
    """Normalize platform separators to the URL convention."""
    if os.sep != "/":
        path = path.replace(os.sep, "/")
    return path


def fmt_file_url(path: str) -> str:
    """Format an absolute local path as a ``file://`` URL."""
    path = to_slash(path)
    if _DRIVE_RE.match(path):
        # file:///C:/foo
        path = "/" + path
    return f"file://{path}"


def is_windows_smb_path(path: str, windows: bool | None = None) -> bool:
    """Whether path is a Windows network share (UNC) path on a Windows host."""
    if windows is None:
        windows = os.name == "nt"
    return windows and bool(_WINDOWS_SMB_RE.match(path)) and ntpath.isabs(path)


def local_path(url: str) -> str:
    """Return the local filesystem path named by a ``file://`` URL or bare path.

    The path as written (still escaped) is preferred whenever it differs from
    the canonical escaping of its decoded form; otherwise the decoded path is
    used.
    """
    parts = urlsplit(url)
    if parts.scheme.lower() != "file":
        return url

    raw = parts.path
    if _DRIVE_RE.match(parts.netloc):
        # file://C:/foo
        raw = parts.netloc + raw
    elif re.match(r"^/[A-Za-z]:", raw) and os.name == "nt":
        raw = raw[1:]

    decoded = unquote(raw)
    if quote(decoded, safe=_PATH_SAFE) != raw:
        return raw
    return decoded


def fix_windows_drive_path(parts: SplitResult, windows: bool | None = None) -> SplitResult:
    """Give Windows drive-letter file URLs the leading slash hg expects.

    ``file://c:/foo`` becomes ``file:///c:/foo``. Other URLs are returned
    unchanged.
    """
    if windows is None:
        windows = os.name == "nt"
    if not windows or parts.scheme.lower() != "file":
        return parts

    if _DRIVE_RE.match(parts.netloc):
        return parts._replace(netloc="", path=f"/{parts.netloc}{parts.path}")
    if len(parts.path) > 1 and parts.path[0] != "/" and parts.path[1] == ":":
        return parts._replace(path=f"/{parts.path}")
    return parts


def pop_query_param(parts: SplitResult, key: str) -> tuple[SplitResult, str]:
    """Remove key from the query string of parts.

    Returns the rewritten parts and the first value found for key ("" if
    absent). The remaining parameters keep their order.
    """
    if not parts.query:
        return parts, ""

    value = ""
    kept: list[tuple[str, str]] = []
    for name, item in parse_qsl(parts.query, keep_blank_values=True):
        if name == key:
            if not value:
                value = item
            continue
        kept.append((name, item))
    return parts._replace(query=urlencode(kept)), value


def query_params(url: str) -> dict[str, str]:
    """Return the query parameters of url, first value wins."""
    params: dict[str, str] = {}
    for name, value in parse_qsl(urlsplit(url).query, keep_blank_values=True):
        params.setdefault(name, value)
    return params
