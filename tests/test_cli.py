"""Tests for the command line interface."""

import json
import sys
from unittest.mock import patch

import pytest
import yaml
from click.testing import CliRunner

from artifact_deploy.cli.main import Context, cli, main
from artifact_deploy.constants import EXIT_INTERRUPTED, PROJECT_CONFIG_FILE

from tests.conftest import git, requires_git, requires_rsync, write


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def project_config(source_repo, tmp_path):
    def factory(**data):
        base = {
            "deploy": {"dir": str(tmp_path / "artifact"), "build-dependencies": False},
            "git": {"remotes": []},
        }
        for key, value in data.items():
            base.setdefault(key, {}).update(value)
        path = tmp_path / "config" / PROJECT_CONFIG_FILE
        path.parent.mkdir(exist_ok=True)
        base["repo"] = {"root": str(source_repo)}
        path.write_text(yaml.safe_dump(base))
        return path
    return factory


class TestCli:
    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for command in ("deploy", "build", "check-dirty", "commit-msg", "install-drupal"):
            assert command in result.output

    def test_missing_config(self, runner, tmp_path):
        result = runner.invoke(cli, ["-q", "--config", str(tmp_path / "nope.yaml"), "deploy", "-n"])

        assert result.exit_code == 1
        assert "not found" in result.output

    @requires_git
    def test_branch_and_tag_are_exclusive(self, runner, project_config):
        result = runner.invoke(cli, [
            "-q", "--config", str(project_config()), "deploy", "--branch", "a", "--tag", "b"
        ])

        assert result.exit_code == 1
        assert "Cannot specify both" in result.output

    @requires_git
    def test_deploy_without_remotes_fails(self, runner, project_config, tmp_path):
        result = runner.invoke(cli, [
            "-q", "--config", str(project_config()), "deploy", "--branch", "main-build", "-n"
        ])

        assert result.exit_code == 1
        assert "git.remotes is empty" in result.output
        assert not (tmp_path / "artifact").exists()

    @requires_git
    @requires_rsync
    def test_deploy_to_bare_remote(self, runner, project_config, bare_remote):
        config = project_config(git={"remotes": [str(bare_remote)]})

        result = runner.invoke(cli, [
            "-q", "--config", str(config), "deploy",
            "--branch", "main-build", "--commit-msg", "CLI build", "-n"
        ])

        assert result.exit_code == 0, result.output
        assert "Artifact deployed successfully" in result.output
        assert git(bare_remote, "log", "--format=%s", "main-build") == "CLI build"

    @requires_git
    def test_check_dirty(self, runner, project_config, source_repo):
        config = str(project_config())

        clean = runner.invoke(cli, ["-q", "--config", config, "check-dirty"])
        write(source_repo / "untracked.txt", "x")
        dirty = runner.invoke(cli, ["-q", "--config", config, "check-dirty"])
        ignored = runner.invoke(cli, ["-q", "--config", config, "check-dirty", "--ignore-dirty"])

        assert clean.exit_code == 0
        assert "clean" in clean.output
        assert dirty.exit_code == 1
        assert "untracked.txt" in dirty.output
        assert ignored.exit_code == 0

    @requires_git
    def test_install_drupal_without_command(self, runner, project_config):
        result = runner.invoke(cli, ["-q", "--config", str(project_config()), "install-drupal"])

        assert result.exit_code == 1
        assert "install_drupal" in result.output


@requires_git
class TestCommitMsg:
    PATTERN = r"/^ACME-[0-9]+(: )[^ ].{15,}\./"

    def test_valid_message(self, runner, project_config):
        config = project_config(git={"commit-msg": {"pattern": self.PATTERN}})

        result = runner.invoke(cli, [
            "--config", str(config), "commit-msg", "ACME-12: Fix the login redirect loop."
        ])

        assert result.exit_code == 0, result.output

    def test_invalid_message_from_file(self, runner, project_config, tmp_path):
        config = project_config(git={"commit-msg": {
            "pattern": self.PATTERN,
            "example": "ACME-12: Fix the login redirect loop.",
        }})
        message = write(tmp_path / "COMMIT_EDITMSG", "fixed it\n")

        result = runner.invoke(cli, ["--config", str(config), "commit-msg", "--file", str(message)])

        assert result.exit_code == 1
        assert "Invalid commit message" in result.output
        assert "Example: ACME-12" in result.output

    def test_message_is_required(self, runner, project_config):
        result = runner.invoke(cli, ["--config", str(project_config()), "commit-msg"])

        assert result.exit_code == 1

    def test_without_project_config_any_message_passes(self, runner, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(cli, ["commit-msg", "wip"])

        assert result.exit_code == 0, result.output

    def test_explicit_missing_config_fails(self, runner, tmp_path):
        result = runner.invoke(cli, [
            "--config", str(tmp_path / "nope.yaml"), "commit-msg", "wip"
        ])

        assert result.exit_code == 1
        assert "not found" in result.output


class TestMain:
    def _run_main(self, monkeypatch, *args):
        monkeypatch.setattr(sys, "argv", ["artifact-deploy", *args])
        with pytest.raises(SystemExit) as exc_info:
            main()
        return exc_info.value.code

    def test_help_exits_zero(self, monkeypatch):
        assert self._run_main(monkeypatch, "--help") == 0

    def test_usage_error(self, monkeypatch):
        assert self._run_main(monkeypatch, "no-such-command") == 2

    def test_interrupt_exits_130(self, monkeypatch, tmp_path):
        with patch.object(Context, "load_config", side_effect=KeyboardInterrupt):
            code = self._run_main(monkeypatch, "-q", "--config", str(tmp_path / "c.yaml"),
                                  "config", "show")

        assert code == EXIT_INTERRUPTED

    def test_command_failure_keeps_its_exit_code(self, monkeypatch, tmp_path):
        code = self._run_main(monkeypatch, "-q", "--config", str(tmp_path / "nope.yaml"),
                              "commit-msg", "wip")

        assert code == 1


@requires_git
class TestConfigShow:
    def test_table(self, runner, project_config):
        result = runner.invoke(cli, ["--config", str(project_config()), "config", "show"])

        assert result.exit_code == 0, result.output
        assert "deploy.tag_source" in result.output
        assert "git.remotes is empty" in result.output

    def test_json(self, runner, project_config, tmp_path):
        config = project_config(git={"remotes": ["git@example.com:acme/site.git"]})

        result = runner.invoke(cli, ["--config", str(config), "config", "show", "--output", "json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["git"]["remotes"] == ["git@example.com:acme/site.git"]
        assert data["deploy"]["dir"] == str(tmp_path / "artifact")
        assert data["deploy"]["build-dependencies"] is False


@requires_git
def test_deploy_json_output(runner, project_config):
    result = runner.invoke(cli, [
        "-q", "--config", str(project_config()), "deploy", "--branch", "main-build",
        "-n", "--output", "json"
    ])

    assert result.exit_code == 1
    data = json.loads(result.output)
    assert data["state"] == "aborted"
    assert data["stages"][-1]["error"]["code"] == "AD004"
