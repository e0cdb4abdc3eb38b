"""Tests for artifact sanitization."""

from artifact_deploy.core import Sanitizer

from tests.conftest import write


def _artifact(root):
    write(root / "docroot" / "index.php")
    write(root / "docroot" / "README.md")
    write(root / "docroot" / "core" / "CHANGELOG.txt")
    write(root / "docroot" / "core" / "LICENSE.txt")
    write(root / "docroot" / "core" / "lib" / "notes.txt")
    write(root / "docroot" / "core" / "INSTALL.pgsql.txt")
    write(root / "docroot" / "modules" / "contrib" / "foo" / ".git" / "HEAD")
    write(root / "docroot" / "modules" / "contrib" / "foo" / ".github" / "workflows" / "ci.yml")
    write(root / "docroot" / "modules" / "contrib" / "foo" / "MAINTAINERS.txt")
    write(root / "docroot" / "modules" / "contrib" / "foo" / "CONTRIBUTING.md")
    write(root / "docroot" / "modules" / "contrib" / "foo" / "INSTALL.mysql.md")
    write(root / "vendor" / "acme" / "lib" / ".git" / "config")
    write(root / "vendor" / "acme" / "lib" / ".github" / "FUNDING.yml")
    write(root / "vendor" / "acme" / "lib" / "CHANGELOG.md")
    write(root / "CHANGELOG.md")
    return root


class TestSanitizer:
    def test_finds_every_pattern(self, tmp_path):
        root = _artifact(tmp_path / "artifact")
        foo = root / "docroot" / "modules" / "contrib" / "foo"

        matches = Sanitizer(root).find_matches()

        assert set(matches) == {
            root / "docroot" / "core" / "CHANGELOG.txt",
            root / "docroot" / "core" / "lib" / "notes.txt",
            root / "docroot" / "core" / "INSTALL.pgsql.txt",
            foo / ".git",
            foo / ".github",
            foo / "MAINTAINERS.txt",
            foo / "CONTRIBUTING.md",
            foo / "INSTALL.mysql.md",
            root / "vendor" / "acme" / "lib" / ".git",
            root / "vendor" / "acme" / "lib" / ".github",
        }
        assert matches == sorted(matches)

    def test_sanitize_deletes_matches_only(self, tmp_path):
        root = _artifact(tmp_path / "artifact")

        removed = Sanitizer(root).sanitize()

        assert all(not p.exists() for p in removed)
        assert (root / "docroot" / "index.php").exists()
        assert (root / "docroot" / "README.md").exists()
        assert (root / "docroot" / "core" / "LICENSE.txt").exists()
        # Text files are only pruned from the docroot
        assert (root / "vendor" / "acme" / "lib" / "CHANGELOG.md").exists()
        assert (root / "CHANGELOG.md").exists()

    def test_artifact_vcs_metadata_is_kept(self, tmp_path):
        root = _artifact(tmp_path / "artifact")
        write(root / ".git" / "HEAD")

        Sanitizer(root).sanitize()

        assert (root / ".git" / "HEAD").exists()

    def test_missing_trees(self, tmp_path):
        assert Sanitizer(tmp_path).sanitize() == []

    def test_custom_docroot(self, tmp_path):
        write(tmp_path / "web" / "core" / "CHANGELOG.txt")

        matches = Sanitizer(tmp_path, docroot_name="web").find_matches()

        assert matches == [tmp_path / "web" / "core" / "CHANGELOG.txt"]
