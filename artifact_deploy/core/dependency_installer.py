"""Production dependency installation inside the artifact"""

import logging
from pathlib import Path
from typing import List, Union

from ..api.exceptions import DependencyInstallError
from ..constants import (
    DEPENDENCY_DIR,
    DEPENDENCY_INSTALL_COMMAND,
    DEPENDENCY_LOCK,
    DEPENDENCY_MANIFEST,
    IGNORE_PLATFORM_REQS_FLAG,
    MSG_DEPS_DISABLED,
    MSG_DEPS_DISABLED_HINT,
)
from ..models.config import DeployConfig
from ..utils.file_utils import copy_file, remove_path
from ..utils.process_utils import run_command

logger = logging.getLogger(__name__)


def install_command(ignore_platform_reqs: bool = False) -> List[str]:
    """Composer invocation for a production install"""
    command = list(DEPENDENCY_INSTALL_COMMAND)
    if ignore_platform_reqs:
        command.append(IGNORE_PLATFORM_REQS_FLAG)
    return command


class DependencyInstaller:
    """Rebuilds production dependencies from the source manifest and lock file"""

    def __init__(self, config: DeployConfig):
        self.config = config

    def install(self, dest: Union[str, Path, None] = None, ignore_platform_reqs: bool = False) -> bool:
        """
        Install dependencies into ``dest``

        Returns:
            True if installed, False if disabled by configuration

        Raises:
            DependencyInstallError: If copying the manifests or the install fails
        """
        if not self.config.build_dependencies:
            logger.warning(MSG_DEPS_DISABLED)
            logger.warning(MSG_DEPS_DISABLED_HINT)
            return False

        dest = Path(dest) if dest else self.config.deploy_dir
        source = self.config.repo_root

        try:
            remove_path(dest / DEPENDENCY_DIR)
            for name in (DEPENDENCY_MANIFEST, DEPENDENCY_LOCK):
                copy_file(source / name, dest / name)
        except OSError as e:
            raise DependencyInstallError(f"Unable to stage dependency manifests: {e}") from e

        command = install_command(ignore_platform_reqs)
        result = run_command(command, cwd=dest)
        if not result.ok:
            raise DependencyInstallError(
                f"'{' '.join(command)}' exited with code {result.returncode}: {result.output}"
            )
        return True
