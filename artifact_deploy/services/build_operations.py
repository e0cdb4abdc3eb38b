"""External build operations invoked by the pipeline"""

import logging
import secrets
import shlex
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

from ..api.exceptions import BuildStepError
from ..models.config import DeployConfig
from ..plugins import HookPoint, LifecycleHooksPlugin, PluginContext, PluginManager
from ..utils.async_utils import run_async
from ..utils.process_utils import run_command, run_git

logger = logging.getLogger(__name__)

HASH_SALT_FILE = "salt.txt"
DEPLOYMENT_IDENTIFIER_FILE = "deployment_identifier"
HASH_SALT_LENGTH = 55


class BuildOperations(ABC):
    """Operations the pipeline delegates to the surrounding project tooling"""

    @abstractmethod
    def build_frontend(self) -> None:
        """Generate frontend assets in the source repository"""

    @abstractmethod
    def init_hash_salt(self) -> None:
        """Ensure the hash salt exists"""

    @abstractmethod
    def init_deployment_identifier(self, identifier: Optional[str] = None) -> None:
        """Write the deployment identifier, optionally a given one"""

    @abstractmethod
    def build_simplesamlphp_config(self) -> None:
        """Copy SimpleSAMLphp configuration into the artifact"""

    @abstractmethod
    def install_drupal(self) -> None:
        """Install the site from the deployed codebase"""

    @abstractmethod
    def run_hook(self, hook: HookPoint, data: Optional[Dict[str, Any]] = None) -> None:
        """Fire an extension hook"""


class ShellBuildOperations(BuildOperations):
    """Runs the shell commands configured under ``commands``

    An operation without a command is skipped, except the hash salt and
    deployment identifier which fall back to writing their files in the
    repository root. Those files are added to the local git exclude list so
    they never make the source tree dirty.
    """

    def __init__(self, config: DeployConfig, plugin_manager: Optional[PluginManager] = None):
        self.config = config
        self.plugin_manager = plugin_manager or self._default_plugins(config)

    @staticmethod
    def _default_plugins(config: DeployConfig) -> PluginManager:
        manager = PluginManager()
        manager.register(LifecycleHooksPlugin({
            'hooks_dir': config.hooks_dir,
            'timeout': config.hook_timeout,
            'cwd': str(config.repo_root),
        }))
        return manager

    def _run(self, operation: str, command: Optional[str] = None) -> bool:
        command = command or self.config.get_command(operation)
        if not command:
            logger.debug("No command configured for %s, skipping", operation)
            return False

        logger.info("Running %s: %s", operation, command)
        result = run_command(command, cwd=self.config.repo_root, shell=True)
        if not result.ok:
            raise BuildStepError(operation, result.output or f"exit code {result.returncode}")
        return True

    def _exclude_from_status(self, filename: str) -> None:
        """Add a generated file to the source repository's info/exclude"""
        root = self.config.repo_root
        git_path = run_git(["rev-parse", "--git-path", "info/exclude"], cwd=root)
        prefix = run_git(["rev-parse", "--show-prefix"], cwd=root)
        if not (git_path.ok and prefix.ok):
            logger.debug("%s is not a git work tree, not excluding %s", root, filename)
            return

        exclude = Path(git_path.stdout.strip())
        if not exclude.is_absolute():
            exclude = root / exclude
        pattern = f"/{prefix.stdout.strip()}{filename}"

        try:
            content = exclude.read_text() if exclude.exists() else ""
            if pattern in content.splitlines():
                return
            if content and not content.endswith("\n"):
                content += "\n"
            exclude.parent.mkdir(parents=True, exist_ok=True)
            exclude.write_text(content + pattern + "\n")
        except OSError as e:
            raise BuildStepError("git_exclude", str(e)) from e
        logger.debug("Excluded %s from git status via %s", pattern, exclude)

    def build_frontend(self) -> None:
        self._run("build_frontend")

    def init_hash_salt(self) -> None:
        if self._run("hash_salt_init"):
            return

        self._exclude_from_status(HASH_SALT_FILE)
        salt_file = self.config.repo_root / HASH_SALT_FILE
        if salt_file.exists():
            return
        try:
            salt_file.write_text(secrets.token_urlsafe(HASH_SALT_LENGTH)[:HASH_SALT_LENGTH])
        except OSError as e:
            raise BuildStepError("hash_salt_init", str(e)) from e
        logger.info("Generated hash salt in %s", salt_file)

    def init_deployment_identifier(self, identifier: Optional[str] = None) -> None:
        template = self.config.get_command("deployment_identifier_init")
        if template:
            command = template.replace("{id}", shlex.quote(identifier or ""))
            self._run("deployment_identifier_init", command)
            return

        self._exclude_from_status(DEPLOYMENT_IDENTIFIER_FILE)
        id_file = self.config.repo_root / DEPLOYMENT_IDENTIFIER_FILE
        try:
            id_file.write_text(identifier or uuid.uuid4().hex)
        except OSError as e:
            raise BuildStepError("deployment_identifier_init", str(e)) from e

    def build_simplesamlphp_config(self) -> None:
        self._run("simplesamlphp_config")

    def install_drupal(self) -> None:
        if not self._run("install_drupal"):
            raise BuildStepError("install_drupal", "no command configured under commands.install_drupal")

    def run_hook(self, hook: HookPoint, data: Optional[Dict[str, Any]] = None) -> None:
        context = PluginContext(hook_point=hook, operation="deploy", data=dict(data or {}))
        context = run_async(self.plugin_manager.execute_hook(hook, context))

        for warning in context.warnings:
            logger.warning(warning)
        if context.has_errors():
            raise BuildStepError(hook.value, "; ".join(context.errors))
