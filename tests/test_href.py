"""Tests for href encoding and path resolution."""

from pathlib import Path

import pytest

from infopack.href import (
    decode_href,
    encode_href,
    relative_folders,
    relative_path_from_href,
    resolve_under,
)


class TestEncoding:
    def test_encode_spaces_and_unicode(self):
        """Reserved characters are percent-encoded; slashes are kept."""
        assert encode_href("data/my file ñ.txt", True) == "data/my%20file%20%C3%B1.txt"

    def test_encoding_disabled(self):
        assert encode_href("data/my file.txt", False) == "data/my file.txt"

    def test_decode_inverts_encode(self):
        path = "representations/rep 1/data/ça va?.txt"

        assert decode_href(encode_href(path, True), True) == path


class TestRelativePathFromHref:
    @pytest.mark.parametrize(
        "href,expected",
        [
            ("data/file.txt", "data/file.txt"),
            ("./data/file.txt", "data/file.txt"),
            ("file://./data/file.txt", "data/file.txt"),
            ("file:data/file.txt", "data/file.txt"),
            ("data/./sub/file.txt", "data/sub/file.txt"),
            ("data/my%20file.txt", "data/my file.txt"),
        ],
    )
    def test_normalization(self, href, expected):
        assert relative_path_from_href(href, True) == expected

    @pytest.mark.parametrize(
        "href", ["", None, "/etc/passwd", "../outside.txt", "data/../../x", "data\\file.txt"]
    )
    def test_unsafe_or_empty(self, href):
        """Absolute, escaping and empty hrefs are rejected."""
        assert relative_path_from_href(href, True) is None

    def test_no_decoding_when_disabled(self):
        assert relative_path_from_href("data/a%20b.txt", False) == "data/a%20b.txt"


class TestFolders:
    def test_resolve_under(self, tmp_path):
        assert resolve_under(tmp_path, "a/b/c.txt") == tmp_path / "a" / "b" / "c.txt"

    def test_relative_folders(self, tmp_path):
        """Folders between the zone root and the file are kept in order."""
        root = tmp_path / "data"

        assert relative_folders(root, root / "x" / "y" / "f.txt") == ["x", "y"]
        assert relative_folders(root, root / "f.txt") == []

    def test_outside_zone_root(self, tmp_path):
        assert relative_folders(tmp_path / "data", Path("/elsewhere/f.txt")) == []
