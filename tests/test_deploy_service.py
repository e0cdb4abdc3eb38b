"""Tests for the deploy pipeline controller."""

from typing import Dict, List, Optional
from unittest.mock import patch

import pytest

from artifact_deploy.api.exceptions import (
    DirtyCheckError,
    DirtyRepositoryError,
    InvalidTagNameError,
    MissingRemoteConfigurationError,
    PushError,
)
from artifact_deploy.constants import (
    ErrorCode,
    MSG_DRY_RUN,
    MSG_PUSH_SKIPPED,
    PROMPT_BRANCH_NAME,
    PROMPT_COMMIT_MESSAGE,
)
from artifact_deploy.models import (
    DeployOptions,
    DeployPath,
    OperationStatus,
    PipelineState,
)
from artifact_deploy.plugins import HookPoint
from artifact_deploy.services import DeployService, Prompter
from artifact_deploy.utils import CommandResult, remote_name_for_url

from tests.conftest import FakeOperations, git, requires_git, requires_rsync, write

NON_INTERACTIVE = dict(interactive=False)


class ScriptedPrompter(Prompter):
    """Answers prompts from a script and records the questions asked."""

    def __init__(self, confirm: bool = False, answers: Optional[Dict[str, str]] = None):
        self._confirm = confirm
        self.answers = answers or {}
        self.questions: List[str] = []

    def confirm(self, question: str, default: bool = False) -> bool:
        self.questions.append(question)
        return self._confirm

    def ask(self, question: str, default: Optional[str] = None) -> str:
        self.questions.append(question)
        return self.answers.get(question, default or "")


def _stage(result, name):
    return next(s for s in result.stages if s.name == name)


@pytest.fixture
def service_factory(config_factory, operations):
    def factory(remotes=None, prompter=None, **overrides):
        config = config_factory(remotes, **overrides)
        return DeployService(config, operations=operations, prompter=prompter)
    return factory


@requires_git
class TestChoosePath:
    def test_tag_option(self, service_factory):
        service = service_factory()
        assert service.choose_path(DeployOptions(tag_name="1.0.0")) == DeployPath.TAG

    def test_branch_option_skips_prompt(self, service_factory):
        prompter = ScriptedPrompter(confirm=True)
        service = service_factory(prompter=prompter)

        assert service.choose_path(DeployOptions(branch_name="main-build")) == DeployPath.BRANCH
        assert prompter.questions == []

    def test_interactive_prompt(self, service_factory):
        prompter = ScriptedPrompter(confirm=True)
        service = service_factory(prompter=prompter)

        assert service.choose_path(DeployOptions()) == DeployPath.TAG
        assert len(prompter.questions) == 1

    @pytest.mark.parametrize("options", [
        DeployOptions(dry_run=True),
        DeployOptions(interactive=False),
    ])
    def test_no_prompt_defaults_to_branch(self, service_factory, options):
        prompter = ScriptedPrompter(confirm=True)
        service = service_factory(prompter=prompter)

        assert service.choose_path(options) == DeployPath.BRANCH
        assert prompter.questions == []


@requires_git
class TestCheckDirty:
    def test_clean(self, service_factory):
        assert service_factory().check_dirty() is False

    def test_dirty_fails(self, service_factory, source_repo):
        write(source_repo / "untracked.txt", "x")

        with pytest.raises(DirtyRepositoryError):
            service_factory().check_dirty()

    def test_dirty_ignored(self, service_factory, source_repo):
        write(source_repo / "untracked.txt", "x")

        assert service_factory().check_dirty(ignore_dirty=True) is True

    def test_status_failure(self, service_factory):
        failed = CommandResult(args=["git"], returncode=128, stderr="not a git repository")
        service = service_factory()

        with patch("artifact_deploy.services.deploy_service.porcelain_status", return_value=failed):
            with pytest.raises(DirtyCheckError):
                service.check_dirty()
            assert service.check_dirty(ignore_dirty=True) is True


@requires_git
class TestResolveContext:
    def test_branch_defaults(self, service_factory):
        service = service_factory(["/remote.git"])

        context = service.resolve_context(DeployOptions(**NON_INTERACTIVE), DeployPath.BRANCH)

        assert context.working_branch == "main-build"
        assert context.commit_message == "Initial source commit"
        assert context.push_identifier == "main-build"
        assert context.upstream_remote.url == "/remote.git"

    def test_prompted_values(self, service_factory):
        prompter = ScriptedPrompter(answers={
            PROMPT_COMMIT_MESSAGE: "Custom message",
            PROMPT_BRANCH_NAME: "release-build",
        })
        service = service_factory(["/remote.git"], prompter=prompter)

        context = service.resolve_context(DeployOptions(), DeployPath.BRANCH)

        assert context.commit_message == "Custom message"
        assert context.working_branch == "release-build"

    def test_tag_path_uses_temporary_branch(self, service_factory):
        service = service_factory(["/remote.git"])

        context = service.resolve_context(
            DeployOptions(tag_name="1.0.0", commit_message="Release", **NON_INTERACTIVE),
            DeployPath.TAG
        )

        assert context.working_branch == "main-build-temp"
        assert context.push_identifier == "1.0.0"

    def test_empty_tag_is_rejected(self, service_factory):
        service = service_factory(["/remote.git"], prompter=ScriptedPrompter())

        with pytest.raises(InvalidTagNameError):
            service.resolve_context(DeployOptions(commit_message="Release"), DeployPath.TAG)

    def test_remotes_are_required(self, service_factory):
        with pytest.raises(MissingRemoteConfigurationError):
            service_factory([]).resolve_context(DeployOptions(**NON_INTERACTIVE), DeployPath.BRANCH)


@requires_git
class TestDeployAborts:
    def test_missing_remotes_abort_before_any_mutation(self, service_factory, operations):
        service = service_factory([])

        result = service.deploy(DeployOptions(branch_name="main-build", **NON_INTERACTIVE))

        assert result.state == PipelineState.ABORTED
        assert result.failed_stage.name == "resolve-options"
        assert result.failed_stage.error.code == ErrorCode.MISSING_REMOTE_CONFIGURATION
        assert isinstance(result.exception, MissingRemoteConfigurationError)
        assert not service.config.deploy_dir.exists()
        assert operations.calls == []

    def test_dirty_source_aborts(self, service_factory, source_repo, operations):
        write(source_repo / "untracked.txt", "x")
        service = service_factory(["/remote.git"])

        result = service.deploy(DeployOptions(branch_name="main-build", **NON_INTERACTIVE))

        assert result.state == PipelineState.ABORTED
        assert result.failed_stage.name == "check-dirty"
        assert result.failed_stage.error.code == ErrorCode.DIRTY_REPOSITORY
        assert result.context is None
        assert not service.config.deploy_dir.exists()
        assert operations.calls == []


@requires_git
@requires_rsync
class TestDeployPipeline:
    def test_first_branch_deploy(self, service_factory, bare_remote, operations):
        service = service_factory([str(bare_remote)])

        result = service.deploy(DeployOptions(
            branch_name="main-build", commit_message="First build", **NON_INTERACTIVE
        ))

        assert result.success, result.error
        assert result.pushed is True
        assert _stage(result, "merge-upstream").status == OperationStatus.SKIPPED
        assert git(bare_remote, "log", "--format=%s", "main-build") == "First build"

        artifact = service.config.deploy_dir
        assert (artifact / "docroot" / "index.php").exists()
        assert (artifact / "docroot" / "README.md").exists()
        assert (artifact / "docroot" / "core" / "LICENSE.txt").exists()
        assert not (artifact / "docroot" / "core" / "CHANGELOG.txt").exists()
        assert not (artifact / "docroot" / "core" / "INSTALL.mysql.txt").exists()
        assert not (artifact / "tests").exists()
        assert (artifact / ".gitignore").exists()
        assert git(artifact, "status", "--porcelain") == ""

        assert operations.calls == [
            ("run_hook", HookPoint.PRE_DEPLOY_BUILD),
            "build_frontend",
            "init_hash_salt",
            ("init_deployment_identifier", None),
            ("run_hook", HookPoint.POST_DEPLOY_BUILD),
        ]

    def test_second_branch_deploy_merges_upstream(self, service_factory, bare_remote, source_repo):
        service = service_factory([str(bare_remote)])
        options = DeployOptions(branch_name="main-build", commit_message="First build", **NON_INTERACTIVE)
        assert service.deploy(options).success

        write(source_repo / "docroot" / "new.php", "<?php\n")
        git(source_repo, "add", "-A")
        git(source_repo, "commit", "--quiet", "-m", "Add page")

        result = service.deploy(DeployOptions(branch_name="main-build", **NON_INTERACTIVE))

        assert result.success, result.error
        assert _stage(result, "merge-upstream").status == OperationStatus.SUCCESS
        assert git(bare_remote, "log", "--format=%s", "main-build").splitlines() == [
            "Add page",
            "First build",
        ]
        assert "docroot/new.php" in git(bare_remote, "ls-tree", "-r", "--name-only", "main-build")

    def test_tag_deploy(self, service_factory, bare_remote, source_repo, operations):
        service = service_factory([str(bare_remote)])

        result = service.deploy(DeployOptions(
            tag_name="1.0.0", commit_message="Release 1.0.0", **NON_INTERACTIVE
        ))

        assert result.success, result.error
        names = [s.name for s in result.stages]
        assert "merge-upstream" not in names
        assert names[-3:] == ["tag-build", "tag-source", "push"]
        assert git(bare_remote, "tag") == "1.0.0"
        assert git(bare_remote, "branch") == ""
        assert git(source_repo, "tag") == "1.0.0"
        assert ("init_deployment_identifier", "1.0.0") in operations.calls

    def test_tag_deploy_without_source_tag(self, service_factory, bare_remote, source_repo):
        service = service_factory([str(bare_remote)], deploy__tag_source=False)

        result = service.deploy(DeployOptions(
            tag_name="1.0.0", commit_message="Release 1.0.0", **NON_INTERACTIVE
        ))

        assert result.success, result.error
        assert "tag-source" not in [s.name for s in result.stages]
        assert git(source_repo, "tag") == ""
        assert git(bare_remote, "tag") == "1.0.0"

    def test_dry_run_commits_without_pushing(self, service_factory, bare_remote):
        service = service_factory([str(bare_remote)])

        result = service.deploy(DeployOptions(
            branch_name="main-build", commit_message="Dry", dry_run=True, **NON_INTERACTIVE
        ))

        assert result.success, result.error
        assert result.pushed is False
        assert _stage(result, "push").status == OperationStatus.SKIPPED
        assert MSG_DRY_RUN in result.warnings
        assert MSG_PUSH_SKIPPED in result.warnings
        assert git(bare_remote, "for-each-ref") == ""
        assert git(service.config.deploy_dir, "log", "--format=%s") == "Dry"

    def test_push_failure_attempts_every_remote(self, service_factory, bare_remote, tmp_path):
        missing = str(tmp_path / "missing.git")
        service = service_factory([str(bare_remote), missing])

        result = service.deploy(DeployOptions(
            branch_name="main-build", commit_message="Build", **NON_INTERACTIVE
        ))

        assert result.state == PipelineState.ABORTED
        assert result.failed_stage.name == "push"
        assert isinstance(result.exception, PushError)
        assert result.exception.failed_remotes == [missing]
        assert git(bare_remote, "log", "--format=%s", "main-build") == "Build"

    def test_repeated_remote_url_is_pushed_once(self, service_factory, bare_remote):
        service = service_factory([str(bare_remote), str(bare_remote)])

        result = service.deploy(DeployOptions(
            branch_name="main-build", commit_message="Build", **NON_INTERACTIVE
        ))

        assert result.success, result.error
        assert [r.url for r in result.context.remotes] == [str(bare_remote)]
        assert git(service.config.deploy_dir, "remote").splitlines() == [
            remote_name_for_url(str(bare_remote))
        ]
        assert git(bare_remote, "log", "--format=%s", "main-build") == "Build"

    def test_default_operations_allow_repeated_deploys(self, config_factory, bare_remote, source_repo):
        service = DeployService(config_factory([str(bare_remote)]))
        options = DeployOptions(branch_name="main-build", commit_message="Build", **NON_INTERACTIVE)

        assert service.deploy(options).success
        assert git(source_repo, "status", "--porcelain") == ""

        result = service.deploy(options)

        assert result.success, result.error
        assert (service.config.deploy_dir / "salt.txt").exists()
        assert (service.config.deploy_dir / "deployment_identifier").exists()

    def test_build_step_failure_stops_pipeline(self, config_factory, bare_remote):
        operations = FakeOperations(fail_on="build_frontend")
        service = DeployService(config_factory([str(bare_remote)]), operations=operations)

        result = service.deploy(DeployOptions(
            branch_name="main-build", commit_message="Build", **NON_INTERACTIVE
        ))

        assert result.state == PipelineState.ABORTED
        assert result.failed_stage.name == "build-frontend"
        assert result.failed_stage.error.code == ErrorCode.UNEXPECTED
        assert "commit" not in [s.name for s in result.stages]
        assert git(bare_remote, "for-each-ref") == ""

    def test_simplesamlphp_step(self, service_factory, bare_remote, operations):
        service = service_factory([str(bare_remote)], simplesamlphp=True)

        result = service.deploy(DeployOptions(
            branch_name="main-build", commit_message="Build", dry_run=True, **NON_INTERACTIVE
        ))

        assert result.success, result.error
        assert "build_simplesamlphp_config" in operations.calls


@requires_git
@requires_rsync
class TestBuild:
    def test_build_without_repository(self, service_factory, operations):
        service = service_factory()

        result = service.build(tag_name="abc123")

        assert result.success, result.error
        artifact = service.config.deploy_dir
        assert (artifact / "docroot" / "index.php").exists()
        assert not (artifact / ".git").exists()
        assert ("init_deployment_identifier", "abc123") in operations.calls
