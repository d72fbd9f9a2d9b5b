"""Tests for code-hosting shorthand detection."""

import httpx
import pytest
import respx

from srcfetch.core.exceptions import TransportError
from srcfetch.sources.shorthand import (
    ShorthandDetectionError,
    ShorthandResult,
    detect_bitbucket,
)

API_URL = "https://api.bitbucket.org/2.0/repositories/owner/repo"


class TestDetectBitbucket:
    """Tests for detect_bitbucket."""

    def test_not_bitbucket(self):
        """Other sources are ignored without any lookup."""
        with respx.mock(assert_all_called=False) as router:
            assert detect_bitbucket("github.com/owner/repo") is None
            assert detect_bitbucket("./bitbucket.org/owner/repo") is None

        assert router.calls.call_count == 0

    @respx.mock
    def test_mercurial_repository(self):
        respx.get(API_URL).mock(return_value=httpx.Response(200, json={"scm": "hg"}))

        assert detect_bitbucket("bitbucket.org/owner/repo") == ShorthandResult(
            "hg", "https://bitbucket.org/owner/repo"
        )

    @respx.mock
    def test_git_repository(self):
        """Git repositories get a .git suffix."""
        respx.get(API_URL).mock(return_value=httpx.Response(200, json={"scm": "git"}))

        assert detect_bitbucket("bitbucket.org/owner/repo") == ShorthandResult(
            "git", "https://bitbucket.org/owner/repo.git"
        )

    @respx.mock
    def test_private_repository(self):
        """403 means the shorthand cannot be used."""
        respx.get(API_URL).mock(return_value=httpx.Response(403))

        with pytest.raises(ShorthandDetectionError, match="private repos"):
            detect_bitbucket("bitbucket.org/owner/repo")

    @respx.mock
    def test_server_error(self):
        respx.get(API_URL).mock(return_value=httpx.Response(500))

        with pytest.raises(ShorthandDetectionError) as exc_info:
            detect_bitbucket("bitbucket.org/owner/repo")

        assert isinstance(exc_info.value, TransportError)
        assert exc_info.value.address == "bitbucket.org/owner/repo"

    @respx.mock
    def test_connection_error(self):
        respx.get(API_URL).mock(side_effect=httpx.ConnectError("unreachable"))

        with pytest.raises(ShorthandDetectionError, match="error looking up"):
            detect_bitbucket("bitbucket.org/owner/repo")

    @respx.mock
    def test_invalid_json(self):
        respx.get(API_URL).mock(return_value=httpx.Response(200, text="<html>"))

        with pytest.raises(ShorthandDetectionError, match="invalid Bitbucket API response"):
            detect_bitbucket("bitbucket.org/owner/repo")

    @respx.mock
    def test_unknown_scm(self):
        respx.get(API_URL).mock(return_value=httpx.Response(200, json={"scm": "svn"}))

        with pytest.raises(ShorthandDetectionError, match="unknown Bitbucket SCM type"):
            detect_bitbucket("bitbucket.org/owner/repo")

    @respx.mock
    def test_uses_given_client(self):
        """A caller-supplied client is used and left open."""
        respx.get(API_URL).mock(return_value=httpx.Response(200, json={"scm": "hg"}))

        with httpx.Client() as client:
            detect_bitbucket("bitbucket.org/owner/repo", client=client)
            assert not client.is_closed
