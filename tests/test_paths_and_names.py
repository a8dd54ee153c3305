"""
Unit tests for path resolution, fingerprints and name validation.
"""

import hashlib
from pathlib import Path

import pytest

from swgen.errors import InvalidNameError
from swgen.errors import PathOutsideRootError
from swgen.reconcile.fingerprints import fingerprint_file
from swgen.reconcile.names import STATE_FILE_CHARS
from swgen.reconcile.names import sanitize_name
from swgen.storage.paths import iter_regular_files
from swgen.storage.paths import resolve_in_root
from swgen.storage.paths import to_url


@pytest.mark.unit
class TestResolveInRoot:
    """Test containment checks against the document root."""

    def test_relative_path_is_joined_to_root(self, doc_root: Path) -> None:
        """Test relative paths are taken relative to the root."""
        assert resolve_in_root("css/site.css", doc_root) == doc_root / "css" / "site.css"

    def test_absolute_path_inside_root(self, doc_root: Path) -> None:
        """Test absolute paths under the root are accepted."""
        target = doc_root / "index.html"
        assert resolve_in_root(target, doc_root) == target

    def test_root_itself_is_inside(self, doc_root: Path) -> None:
        """Test the root resolves to itself."""
        assert resolve_in_root(".", doc_root) == doc_root

    def test_parent_traversal_rejected(self, doc_root: Path) -> None:
        """Test ../ escaping the root raises PathOutsideRootError."""
        with pytest.raises(PathOutsideRootError) as exc_info:
            resolve_in_root("../outside.txt", doc_root)

        assert "is outside of" in str(exc_info.value)
        assert exc_info.value.path == "../outside.txt"
        assert exc_info.value.root == str(doc_root)

    def test_sibling_with_common_prefix_rejected(self, doc_root: Path) -> None:
        """Test a sibling directory sharing the root's name prefix is outside."""
        sibling = doc_root.parent / (doc_root.name + "-other")
        sibling.mkdir()
        (sibling / "a.txt").write_text("a")

        with pytest.raises(PathOutsideRootError):
            resolve_in_root(sibling / "a.txt", doc_root)

    def test_symlink_escaping_root_rejected(self, doc_root: Path) -> None:
        """Test symlinks are resolved before the containment check."""
        outside = doc_root.parent / "secret.txt"
        outside.write_text("secret")
        (doc_root / "link.txt").symlink_to(outside)

        with pytest.raises(PathOutsideRootError):
            resolve_in_root("link.txt", doc_root)


@pytest.mark.unit
class TestToUrl:
    """Test url conversion."""

    def test_file_url_has_leading_slash(self, doc_root: Path) -> None:
        assert to_url(doc_root / "img" / "logo.svg", doc_root) == "/img/logo.svg"

    def test_root_url(self, doc_root: Path) -> None:
        assert to_url(doc_root, doc_root) == "/"


@pytest.mark.unit
class TestIterRegularFiles:
    """Test recursive directory walking."""

    def test_walk_is_recursive_and_sorted(self, doc_root: Path) -> None:
        """Test files come back in sorted order, nested ones included."""
        files = [to_url(p, doc_root) for p in iter_regular_files(doc_root / "vendor")]

        assert files == ["/vendor/lib.js", "/vendor/nested/extra.js"]

    def test_not_a_directory_raises(self, doc_root: Path) -> None:
        with pytest.raises(NotADirectoryError):
            list(iter_regular_files(doc_root / "index.html"))


@pytest.mark.unit
class TestFingerprint:
    """Test content fingerprints."""

    def test_sha256_of_content(self, doc_root: Path) -> None:
        """Test the fingerprint is the SHA-256 hex digest of the bytes."""
        path = doc_root / "index.html"
        expected = hashlib.sha256(path.read_bytes()).hexdigest()

        assert fingerprint_file(path) == expected

    def test_content_change_changes_fingerprint(self, doc_root: Path) -> None:
        path = doc_root / "js" / "app.js"
        before = fingerprint_file(path)

        path.write_text("console.log('changed');")

        assert fingerprint_file(path) != before


@pytest.mark.unit
class TestSanitizeName:
    """Test cache and state-file name validation."""

    def test_whitespace_trimmed(self) -> None:
        assert sanitize_name("  site-v2 ", "cache name") == "site-v2"

    def test_uppercase_accepted(self) -> None:
        assert sanitize_name("Site_V2", "cache name") == "Site_V2"

    @pytest.mark.parametrize("value", ["", "   ", "v 2", "v2!", "cache/name", "ünïcode"])
    def test_invalid_cache_names_rejected(self, value: str) -> None:
        with pytest.raises(InvalidNameError):
            sanitize_name(value, "cache name")

    def test_state_file_allows_dots_and_slashes(self) -> None:
        assert sanitize_name("state/sw.lock.json", "state file name", STATE_FILE_CHARS) == "state/sw.lock.json"

    def test_invalid_name_is_value_error(self) -> None:
        """Test InvalidNameError can be caught as ValueError."""
        with pytest.raises(ValueError):
            sanitize_name("bad name", "cache name")
