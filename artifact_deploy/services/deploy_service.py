"""Artifact deploy pipeline controller"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from rich.console import Console
from rich.markup import escape

from ..api.exceptions import (
    ArtifactDeployError,
    CommitError,
    ConfigError,
    DirtyCheckError,
    DirtyRepositoryError,
    InvalidTagNameError,
    MissingRemoteConfigurationError,
)
from ..constants import (
    BUILD_BRANCH_SUFFIX,
    TEMP_BRANCH_SUFFIX,
    ErrorCode,
    MSG_DEPS_DISABLED,
    MSG_DIRTY_IGNORED,
    MSG_DIRTY_UNKNOWN,
    MSG_DRY_RUN,
    MSG_PUSH_SKIPPED,
    MSG_TAG_SOURCE_DISABLED,
    PROMPT_BRANCH_NAME,
    PROMPT_COMMIT_MESSAGE,
    PROMPT_CREATE_TAG,
    PROMPT_TAG_NAME,
)
from ..core import (
    ArtifactDirectory,
    CommitEngine,
    ContentSynchronizer,
    DependencyInstaller,
    PushCoordinator,
    RemoteRegistry,
    Sanitizer,
    UpstreamMergeResolver,
)
from ..models import (
    DeployConfig,
    DeployOptions,
    DeployPath,
    DeployResult,
    ErrorDetail,
    MergeOutcome,
    OperationStatus,
    PipelineContext,
    PipelineState,
    RemoteSpec,
    StageResult,
    TagTarget,
)
from ..plugins import HookPoint
from ..utils.git_utils import get_current_branch, get_last_commit_message, porcelain_status
from .build_operations import BuildOperations, ShellBuildOperations
from .prompter import NonInteractivePrompter, Prompter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Step:
    """One transition of the pipeline"""
    name: str
    state: PipelineState
    action: Callable[[], Any]
    title: Optional[str] = None
    skip_if: Optional[Callable[[Any], bool]] = None
    skip_message: Optional[str] = None


class DeployService:
    """Builds the artifact and delivers it to a branch or a tag

    Every stage yields a StageResult. The first failed stage ends the run
    in the ABORTED state with its error preserved in the DeployResult.
    """

    def __init__(self,
                 config: DeployConfig,
                 operations: Optional[BuildOperations] = None,
                 prompter: Optional[Prompter] = None,
                 console: Optional[Console] = None):
        self.config = config
        self.operations = operations or ShellBuildOperations(config)
        self.prompter = prompter or NonInteractivePrompter()
        self.console = console or Console()

        deploy_dir = config.deploy_dir
        self.artifact = ArtifactDirectory(deploy_dir)
        self.remote_registry = RemoteRegistry(deploy_dir)
        self.synchronizer = ContentSynchronizer(config)
        self.installer = DependencyInstaller(config)
        self.sanitizer = Sanitizer(deploy_dir, self._docroot_name())
        self.merge_resolver = UpstreamMergeResolver(deploy_dir)
        self.commit_engine = CommitEngine(deploy_dir, config.repo_root)
        self.pusher = PushCoordinator(deploy_dir)

    def _docroot_name(self) -> str:
        try:
            return str(self.config.docroot.relative_to(self.config.repo_root))
        except ValueError:
            return self.config.docroot.name

    def say(self, message: str) -> None:
        self.console.print(message)

    # Decisions taken before anything is mutated

    def choose_path(self, options: DeployOptions) -> DeployPath:
        """Decide between the tag and branch flows"""
        if options.tag_name:
            return DeployPath.TAG
        if options.branch_name:
            return DeployPath.BRANCH
        if options.interactive and not options.dry_run:
            if self.prompter.confirm(PROMPT_CREATE_TAG, default=False):
                return DeployPath.TAG
        return DeployPath.BRANCH

    def check_dirty(self, ignore_dirty: bool = False) -> bool:
        """
        Check the source repository for uncommitted changes

        Args:
            ignore_dirty: Warn instead of failing

        Returns:
            True if the repository is dirty and ignore_dirty allowed it

        Raises:
            DirtyCheckError: If git status could not run
            DirtyRepositoryError: If dirty and not ignored
        """
        status = porcelain_status(self.config.repo_root)
        if not status.ok:
            if not ignore_dirty:
                raise DirtyCheckError()
            logger.warning(MSG_DIRTY_UNKNOWN)
            return True

        if not status.stdout.strip():
            return False

        self.console.print(status.stdout.rstrip(), markup=False, highlight=False)
        if not ignore_dirty:
            raise DirtyRepositoryError()

        logger.warning(MSG_DIRTY_IGNORED)
        return True

    def _ask(self, options: DeployOptions, question: str, default: Optional[str] = None) -> str:
        if not options.interactive:
            return default or ""
        return self.prompter.ask(question, default=default) or ""

    def resolve_commit_message(self, options: DeployOptions) -> str:
        """Explicit message, or the last source commit summary as default"""
        if options.commit_message:
            self.say(f"Commit message is set to [yellow]{escape(options.commit_message)}[/yellow].")
            return options.commit_message

        default = get_last_commit_message(self.config.repo_root)
        message = self._ask(options, PROMPT_COMMIT_MESSAGE, default).strip()
        if not message:
            raise CommitError("A commit message is required to commit the deployment artifact!")
        return message

    def default_branch_name(self) -> str:
        """``<current-branch>-build``"""
        current = get_current_branch(self.config.repo_root)
        if not current:
            raise ConfigError(
                f"Unable to determine the current branch of {self.config.repo_root}"
            )
        return f"{current}{BUILD_BRANCH_SUFFIX}"

    def resolve_branch_name(self, options: DeployOptions) -> str:
        if options.branch_name:
            self.say(f"Branch is set to [yellow]{escape(options.branch_name)}[/yellow].")
            return options.branch_name

        default = self.default_branch_name()
        return self._ask(options, PROMPT_BRANCH_NAME, default).strip() or default

    def resolve_tag_name(self, options: DeployOptions) -> str:
        tag_name = (options.tag_name or self._ask(options, PROMPT_TAG_NAME)).strip()
        if not tag_name:
            raise InvalidTagNameError()
        self.say(f"Tag is set to [yellow]{escape(tag_name)}[/yellow].")
        return tag_name

    def resolve_context(self, options: DeployOptions, path: DeployPath) -> PipelineContext:
        """
        Resolve every name and message used by the run

        Raises:
            MissingRemoteConfigurationError: If git.remotes is empty
            InvalidTagNameError: If the tag path has no tag name
        """
        remotes = RemoteSpec.from_urls(self.config.git_remotes)
        if not remotes:
            raise MissingRemoteConfigurationError()

        commit_message = self.resolve_commit_message(options)

        if path == DeployPath.TAG:
            tag_name = self.resolve_tag_name(options)
            if not self.config.tag_source:
                logger.warning(MSG_TAG_SOURCE_DISABLED)
            # Tags are cut from a local branch that is never pushed
            working_branch = f"{self.default_branch_name()}{TEMP_BRANCH_SUFFIX}"
        else:
            tag_name = None
            working_branch = self.resolve_branch_name(options)

        return PipelineContext(
            path=path,
            working_branch=working_branch,
            commit_message=commit_message,
            remotes=remotes,
            options=options,
            tag_name=tag_name
        )

    # Flows

    def deploy(self, options: DeployOptions) -> DeployResult:
        """
        Run the full deploy pipeline

        Args:
            options: Per-invocation options

        Returns:
            DeployResult in state DONE or ABORTED
        """
        result = DeployResult()
        if options.dry_run:
            logger.warning(MSG_DRY_RUN)
            result.add_warning(MSG_DRY_RUN)

        choice = self._run_stage(result, _Step(
            "choose-path", PipelineState.INIT, lambda: self.choose_path(options)
        ))
        if choice.is_failed:
            return self._abort(result)

        dirty = self._run_stage(result, _Step(
            "check-dirty", PipelineState.DIRTY_CHECK,
            lambda: self.check_dirty(options.ignore_dirty)
        ))
        if dirty.is_failed:
            return self._abort(result)
        if dirty.value:
            result.add_warning(MSG_DIRTY_IGNORED)

        path = choice.value
        chosen = (
            PipelineState.TAG_PATH_CHOSEN if path == DeployPath.TAG
            else PipelineState.BRANCH_PATH_CHOSEN
        )
        resolved = self._run_stage(result, _Step(
            "resolve-options", chosen, lambda: self.resolve_context(options, path)
        ))
        if resolved.is_failed:
            return self._abort(result)

        context = result.context = resolved.value
        if not self._run_steps(result, self._deploy_steps(context, result)):
            return self._abort(result)

        result.complete(PipelineState.DONE)
        return result

    def build(self, tag_name: Optional[str] = None, ignore_platform_reqs: bool = False) -> DeployResult:
        """
        Build the artifact into the deploy directory without committing

        Returns:
            DeployResult in state DONE or ABORTED
        """
        result = DeployResult()
        if not self._run_steps(result, self._build_steps(tag_name, ignore_platform_reqs)):
            return self._abort(result)
        result.complete(PipelineState.DONE)
        return result

    def _deploy_steps(self, context: PipelineContext, result: DeployResult) -> List[_Step]:
        steps = [
            _Step("prepare", PipelineState.PREPARED, self.artifact.prepare,
                  title="Preparing artifact directory..."),
            _Step("add-remotes", PipelineState.REMOTES_ADDED,
                  lambda: self.remote_registry.register(r.url for r in context.remotes)),
            _Step("checkout", PipelineState.BRANCH_CHECKED_OUT,
                  lambda: self.artifact.checkout_branch(context.working_branch)),
        ]

        if not context.is_tag:
            steps.append(_Step(
                "merge-upstream", PipelineState.MERGED_OR_SKIPPED,
                lambda: self.merge_resolver.merge(context.upstream_remote, context.working_branch),
                title="Merging upstream changes into local artifact...",
                skip_if=lambda outcome: outcome == MergeOutcome.NO_REMOTE_BRANCH
            ))

        steps.extend(self._build_steps(context.tag_name, context.options.ignore_platform_reqs))

        steps.append(_Step(
            "commit", PipelineState.COMMITTED,
            lambda: self.commit_engine.commit(context.commit_message),
            title=f"Committing artifact to [yellow]{escape(context.working_branch)}[/yellow]..."
        ))

        if context.is_tag:
            steps.append(_Step(
                "tag-build", PipelineState.TAGGED,
                lambda: self.commit_engine.tag(TagTarget.BUILD, context.tag_name, context.commit_message)
            ))
            if self.config.tag_source:
                steps.append(_Step(
                    "tag-source", PipelineState.SOURCE_TAGGED,
                    lambda: self.commit_engine.tag(TagTarget.SOURCE, context.tag_name, context.commit_message)
                ))

        steps.append(_Step(
            "push", PipelineState.PUSHED,
            lambda: self._push(context, result),
            title=None if context.options.dry_run else "Pushing artifact to git.remotes...",
            skip_if=lambda pushed: pushed is False,
            skip_message=MSG_PUSH_SKIPPED
        ))
        return steps

    def _build_steps(self, tag_name: Optional[str], ignore_platform_reqs: bool) -> List[_Step]:
        hook_data = self._hook_data(tag_name)
        steps = [
            _Step("pre-build-hook", PipelineState.BUILT,
                  lambda: self.operations.run_hook(HookPoint.PRE_DEPLOY_BUILD, hook_data),
                  title="Generating build artifact..."),
            _Step("build-frontend", PipelineState.BUILT, self.operations.build_frontend),
            _Step("hash-salt", PipelineState.BUILT, self.operations.init_hash_salt),
            _Step("deployment-identifier", PipelineState.BUILT,
                  lambda: self.operations.init_deployment_identifier(tag_name)),
            _Step("copy", PipelineState.BUILT, self.synchronizer.build_copy,
                  title="Rsyncing files from source repo into the build artifact..."),
            _Step("dependencies", PipelineState.BUILT,
                  lambda: self.installer.install(self.config.deploy_dir, ignore_platform_reqs),
                  title="Rebuilding dependencies for production...",
                  skip_if=lambda installed: installed is False,
                  skip_message=MSG_DEPS_DISABLED),
            _Step("sanitize", PipelineState.SANITIZED, self.sanitizer.sanitize,
                  title="Sanitizing artifact..."),
        ]

        if self.config.simplesamlphp:
            steps.append(_Step("simplesamlphp-config", PipelineState.SANITIZED,
                               self.operations.build_simplesamlphp_config))

        steps.append(_Step("post-build-hook", PipelineState.SANITIZED,
                           lambda: self._finish_build(hook_data)))
        return steps

    def _hook_data(self, tag_name: Optional[str]) -> Dict[str, Any]:
        data = {
            "deploy_dir": str(self.config.deploy_dir),
            "repo_root": str(self.config.repo_root),
        }
        if tag_name:
            data["tag"] = tag_name
        return data

    def _finish_build(self, hook_data: Dict[str, Any]) -> None:
        self.operations.run_hook(HookPoint.POST_DEPLOY_BUILD, hook_data)
        self.say(f"[green]The deployment artifact was generated at {self.config.deploy_dir}.[/green]")

    def _push(self, context: PipelineContext, result: DeployResult) -> bool:
        pushed = self.pusher.push(context.push_identifier, context.remotes, context.options.dry_run)
        result.pushed = pushed
        return pushed

    # Stage execution

    def _run_steps(self, result: DeployResult, steps: List[_Step]) -> bool:
        for step in steps:
            if self._run_stage(result, step).is_failed:
                return False
        return True

    def _run_stage(self, result: DeployResult, step: _Step) -> StageResult:
        if step.title:
            self.say(step.title)
        logger.debug("Stage %s (%s)", step.name, step.state.value)

        try:
            value = step.action()
        except ArtifactDeployError as e:
            stage = self._failed_stage(step, e, e.error_code or ErrorCode.UNEXPECTED)
        except Exception as e:
            logger.debug("Unexpected failure in stage %s", step.name, exc_info=True)
            stage = self._failed_stage(step, e, ErrorCode.UNEXPECTED)
        else:
            skipped = step.skip_if is not None and step.skip_if(value)
            stage = StageResult(
                name=step.name,
                state=step.state,
                status=OperationStatus.SKIPPED if skipped else OperationStatus.SUCCESS,
                message=(step.skip_message or "") if skipped else "",
                value=value
            )
            if skipped and step.skip_message:
                result.add_warning(step.skip_message)
            result.state = step.state

        result.stages.append(stage)
        return stage

    @staticmethod
    def _failed_stage(step: _Step, error: Exception, code: str) -> StageResult:
        message = str(error) or error.__class__.__name__
        return StageResult(
            name=step.name,
            state=step.state,
            status=OperationStatus.FAILED,
            message=message,
            error=ErrorDetail(code=code, message=message, context={"stage": step.name}),
            exception=error
        )

    def _abort(self, result: DeployResult) -> DeployResult:
        failed = result.failed_stage
        if failed is not None:
            logger.error("Stage '%s' failed: %s", failed.name, failed.message)
        result.complete(PipelineState.ABORTED)
        return result
