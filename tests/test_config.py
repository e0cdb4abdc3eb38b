"""Tests for configuration loading."""

import pytest

from artifact_deploy.api.exceptions import ConfigError
from artifact_deploy.constants import PROJECT_CONFIG_FILE
from artifact_deploy.models import DeployConfig
from artifact_deploy.services import ConfigService, find_project_root
from artifact_deploy.templates import DEPLOY_EXCLUDE_TEMPLATE, TEMPLATES_DIR

CONFIG_YAML = """
deploy:
  dir: build/artifact
  tag_source: false
  build-dependencies: true
git:
  remotes:
    - ${ACME_REMOTE}
    - git@example.com:acme/mirror.git
  commit-msg:
    pattern: "/^ACME-[0-9]+: .{10,}/"
multisites:
  - default
  - intranet
commands:
  build_frontend: npm run build
"""


class TestDeployConfig:
    def test_defaults(self, tmp_path):
        config = DeployConfig.from_dict({}, base_dir=tmp_path)

        assert config.repo_root == tmp_path.resolve()
        assert config.deploy_dir == tmp_path.resolve() / "deploy"
        assert config.docroot == tmp_path.resolve() / "docroot"
        assert config.exclude_file == TEMPLATES_DIR / DEPLOY_EXCLUDE_TEMPLATE
        assert config.exclude_file.is_file()
        assert config.gitignore_file.is_file()
        assert config.tag_source is True
        assert config.build_dependencies is True
        assert config.git_remotes == ()
        assert config.multisite_dirs == [tmp_path.resolve() / "docroot" / "sites" / "default"]

    def test_repo_root_anchors_relative_paths(self, tmp_path):
        config = DeployConfig.from_dict(
            {"repo": {"root": "project"}, "deploy": {"exclude_file": "blt/exclude.txt"}},
            base_dir=tmp_path
        )

        root = (tmp_path / "project").resolve()
        assert config.repo_root == root
        assert config.exclude_file == root / "blt" / "exclude.txt"
        assert config.exclude_additions_file == root / "blt" / "deploy-exclude-additions.txt"

    def test_single_remote_string(self, tmp_path):
        config = DeployConfig.from_dict({"git": {"remotes": "git@example.com:a.git"}}, base_dir=tmp_path)

        assert config.git_remotes == ("git@example.com:a.git",)

    def test_dotted_lookup(self, tmp_path):
        config = DeployConfig.from_dict({"git": {"commit-msg": {"example": "ACME-1: x"}}}, base_dir=tmp_path)

        assert config.get("git.commit-msg.example") == "ACME-1: x"
        assert config.get("git.missing", "fallback") == "fallback"
        assert config.commit_msg_example == "ACME-1: x"


class TestConfigService:
    def test_load_expands_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ACME_REMOTE", "git@example.com:acme/site.git")
        path = tmp_path / PROJECT_CONFIG_FILE
        path.write_text(CONFIG_YAML)

        config = ConfigService(path).load_config()

        assert config.repo_root == tmp_path.resolve()
        assert config.deploy_dir == tmp_path.resolve() / "build" / "artifact"
        assert config.tag_source is False
        assert config.build_dependencies is True
        assert config.git_remotes == (
            "git@example.com:acme/site.git",
            "git@example.com:acme/mirror.git",
        )
        assert config.multisites == ("default", "intranet")
        assert config.get_command("build_frontend") == "npm run build"
        assert config.get_command("install_drupal") is None
        assert config.commit_msg_pattern == "/^ACME-[0-9]+: .{10,}/"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            ConfigService(tmp_path / "missing.yaml").load_config()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / PROJECT_CONFIG_FILE
        path.write_text("deploy: [unclosed\n")

        with pytest.raises(ConfigError) as exc_info:
            ConfigService(path).load_config()

        assert exc_info.value.error_code == "AD001"

    def test_non_mapping(self, tmp_path):
        path = tmp_path / PROJECT_CONFIG_FILE
        path.write_text("- just\n- a list\n")

        with pytest.raises(ConfigError):
            ConfigService(path).load_config()

    def test_discover_walks_up(self, tmp_path):
        (tmp_path / PROJECT_CONFIG_FILE).write_text("git:\n  remotes: []\n")
        nested = tmp_path / "docroot" / "modules"
        nested.mkdir(parents=True)

        assert find_project_root(nested) == tmp_path.resolve()
        assert ConfigService.discover(nested).config_path == tmp_path.resolve() / PROJECT_CONFIG_FILE

    def test_discover_without_config(self, tmp_path):
        with pytest.raises(ConfigError):
            ConfigService.discover(tmp_path)
