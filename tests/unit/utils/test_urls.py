"""Tests for address string helpers."""

from urllib.parse import urlsplit, urlunsplit

import pytest

from srcfetch.utils.urls import (
    fix_windows_drive_path,
    fmt_file_url,
    is_windows_smb_path,
    local_path,
    pop_query_param,
    query_params,
    split_forced,
    url_scheme,
)


class TestSplitForced:
    """Tests for split_forced."""

    def test_with_prefix(self):
        assert split_forced("hg::https://example.com/repo") == ("hg", "https://example.com/repo")

    def test_without_prefix(self):
        assert split_forced("https://example.com/repo") == ("", "https://example.com/repo")

    def test_prefix_must_be_alphanumeric(self):
        """Only [A-Za-z0-9]+ counts as a getter name."""
        assert split_forced("my-getter::x") == ("", "my-getter::x")

    def test_prefix_needs_a_url(self):
        """Nothing after :: is not a forced address."""
        assert split_forced("hg::") == ("", "hg::")


class TestUrlScheme:
    """Tests for url_scheme."""

    @pytest.mark.parametrize(
        "src,expected",
        [
            ("s3://bucket/key", "s3"),
            ("FILE:///tmp/x", "file"),
            ("./modules/foo", ""),
            ("/abs/path", ""),
            ("C:\\Users\\foo", ""),
            ("bucket.s3.amazonaws.com/key", ""),
        ],
    )
    def test_schemes(self, src, expected):
        """Drive letters and bare paths have no scheme."""
        assert url_scheme(src) == expected


class TestFmtFileUrl:
    """Tests for fmt_file_url."""

    def test_posix_path(self):
        assert fmt_file_url("/work/modules/foo") == "file:///work/modules/foo"

    def test_drive_path(self):
        """Drive letters get the extra slash of file:///C:/..."""
        assert fmt_file_url("C:/work/foo") == "file:///C:/work/foo"


class TestLocalPath:
    """Tests for local_path."""

    def test_plain_file_url(self):
        assert local_path("file:///work/foo") == "/work/foo"

    def test_bare_path_unchanged(self):
        assert local_path("/work/foo") == "/work/foo"

    def test_canonical_escape_is_decoded(self):
        """A path escaped the canonical way is decoded."""
        assert local_path("file:///work/a%20b") == "/work/a b"

    def test_non_canonical_escape_kept_raw(self):
        """The raw variant wins when it differs from the re-escaped decoded path."""
        assert local_path("file:///work/a%2Fb") == "/work/a%2Fb"

    def test_drive_in_netloc(self):
        assert local_path("file://C:/work/foo") == "C:/work/foo"

    def test_other_scheme_unchanged(self):
        assert local_path("s3://bucket/key") == "s3://bucket/key"


class TestIsWindowsSmbPath:
    """Tests for is_windows_smb_path."""

    @pytest.mark.parametrize(
        "path",
        [r"\\fileserver\share\modules", "//fileserver/share/modules"],
    )
    def test_share_paths_on_windows(self, path):
        assert is_windows_smb_path(path, windows=True) is True

    def test_drive_path_is_not_share(self):
        assert is_windows_smb_path(r"C:\work\foo", windows=True) is False

    def test_never_on_posix(self):
        assert is_windows_smb_path(r"\\fileserver\share\modules", windows=False) is False


class TestFixWindowsDrivePath:
    """Tests for fix_windows_drive_path."""

    def test_drive_in_netloc(self):
        """file://c:/foo becomes file:///c:/foo."""
        parts = fix_windows_drive_path(urlsplit("file://c:/foo"), windows=True)

        assert urlunsplit(parts) == "file:///c:/foo"

    def test_already_fixed(self):
        parts = urlsplit("file:///c:/foo")

        assert fix_windows_drive_path(parts, windows=True) == parts

    def test_not_windows(self):
        parts = urlsplit("file://c:/foo")

        assert fix_windows_drive_path(parts, windows=False) == parts

    def test_other_scheme(self):
        parts = urlsplit("https://example.com/repo")

        assert fix_windows_drive_path(parts, windows=True) == parts


class TestQueryHelpers:
    """Tests for pop_query_param and query_params."""

    def test_pop_present(self):
        """The key is removed and the others keep their order."""
        parts, value = pop_query_param(
            urlsplit("https://example.com/repo?b=2&rev=abc123&a=1"), "rev"
        )

        assert value == "abc123"
        assert urlunsplit(parts) == "https://example.com/repo?b=2&a=1"

    def test_pop_only_param(self):
        """Popping the only parameter leaves no query string."""
        parts, value = pop_query_param(urlsplit("https://example.com/repo?rev=abc123"), "rev")

        assert value == "abc123"
        assert urlunsplit(parts) == "https://example.com/repo"

    def test_pop_absent(self):
        parts = urlsplit("https://example.com/repo")

        assert pop_query_param(parts, "rev") == (parts, "")

    def test_query_params_first_wins(self):
        assert query_params("s3://b/k?region=eu-west-1&region=us-east-2&version=") == {
            "region": "eu-west-1",
            "version": "",
        }
