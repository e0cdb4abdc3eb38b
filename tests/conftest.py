"""Shared fixtures: throwaway source repositories, bare remotes and a fake build toolchain."""

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from artifact_deploy.models import DeployConfig
from artifact_deploy.plugins import HookPoint
from artifact_deploy.services import BuildOperations

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")
requires_rsync = pytest.mark.skipif(shutil.which("rsync") is None, reason="rsync is not installed")


@pytest.fixture(autouse=True)
def _isolate_git(monkeypatch, tmp_path_factory):
    """Keep the user's git configuration and identity out of the tests."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test Author")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "author@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test Author")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "author@example.com")
    monkeypatch.delenv("ARTIFACT_DEPLOY_CONFIG", raising=False)


@pytest.fixture(autouse=True)
def _restore_logging():
    """The CLI quiet flag disables logging process-wide."""
    yield
    logging.disable(logging.NOTSET)


def git(cwd: Path, *args: str) -> str:
    """Run git and return stripped stdout, failing the test on error."""
    result = subprocess.run(
        ["git", *args], cwd=str(cwd), capture_output=True, text=True, check=True
    )
    return result.stdout.strip()


def write(path: Path, content: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


@pytest.fixture
def source_repo(tmp_path) -> Path:
    """A committed project on branch ``main`` with a docroot and documentation files."""
    root = tmp_path / "source"
    write(root / "composer.json", '{"name": "acme/site"}\n')
    write(root / "composer.lock", '{"packages": []}\n')
    write(root / "README.md", "# Acme\n")
    write(root / "docroot" / "index.php", "<?php\n")
    write(root / "docroot" / "README.md", "Docroot readme\n")
    write(root / "docroot" / "core" / "CHANGELOG.txt", "changes\n")
    write(root / "docroot" / "core" / "LICENSE.txt", "GPL\n")
    write(root / "docroot" / "core" / "INSTALL.mysql.txt", "mysql\n")
    write(root / "docroot" / "sites" / "default" / "settings.php", "<?php\n")
    write(root / "docroot" / "sites" / "default" / "files" / "upload.jpg", "binary\n")
    write(root / "tests" / "SomeTest.php", "<?php\n")

    git(root, "init", "--quiet")
    git(root, "checkout", "--quiet", "-b", "main")
    git(root, "add", "-A")
    git(root, "commit", "--quiet", "-m", "Initial source commit")
    return root


@pytest.fixture
def bare_remote(tmp_path) -> Path:
    """An empty bare repository usable as a push target."""
    path = tmp_path / "remote.git"
    path.mkdir()
    git(path, "init", "--quiet", "--bare")
    return path


def make_config(source: Path, deploy_dir: Path, remotes: List[str],
                build_dependencies: bool = False, **overrides: Any) -> DeployConfig:
    """Build a configuration for ``source``, by default without dependency installation.

    Overrides use ``section__key`` for nested values, e.g. ``deploy__tag_source=False``.
    """
    data: Dict[str, Any] = {
        "repo": {"root": str(source)},
        "deploy": {
            "dir": str(deploy_dir),
            "build-dependencies": build_dependencies,
        },
        "git": {"remotes": remotes},
    }
    for key, value in overrides.items():
        section, _, name = key.partition("__")
        if name:
            data.setdefault(section, {})[name] = value
        else:
            data[section] = value
    return DeployConfig.from_dict(data, base_dir=source)


@pytest.fixture
def config_factory(source_repo, tmp_path):
    def factory(remotes: Optional[List[str]] = None, **overrides: Any) -> DeployConfig:
        return make_config(source_repo, tmp_path / "artifact", remotes or [], **overrides)
    return factory


class FakeOperations(BuildOperations):
    """Records external build operations instead of running project tooling."""

    def __init__(self, fail_on: Optional[str] = None):
        self.calls: List[Any] = []
        self.fail_on = fail_on

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, *args) if args else name)
        if name == self.fail_on:
            raise RuntimeError(f"{name} exploded")

    def build_frontend(self) -> None:
        self._record("build_frontend")

    def init_hash_salt(self) -> None:
        self._record("init_hash_salt")

    def init_deployment_identifier(self, identifier: Optional[str] = None) -> None:
        self._record("init_deployment_identifier", identifier)

    def build_simplesamlphp_config(self) -> None:
        self._record("build_simplesamlphp_config")

    def install_drupal(self) -> None:
        self._record("install_drupal")

    def run_hook(self, hook: HookPoint, data: Optional[Dict[str, Any]] = None) -> None:
        self._record("run_hook", hook)


@pytest.fixture
def operations() -> FakeOperations:
    return FakeOperations()
