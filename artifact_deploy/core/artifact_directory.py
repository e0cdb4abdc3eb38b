"""Artifact (staging) directory management"""

import logging
from pathlib import Path
from typing import Union

from ..api.exceptions import DirectoryPreparationError
from ..constants import MSG_GLOBAL_IGNORE_DISABLED
from ..utils.file_utils import remove_path
from ..utils.process_utils import run_git

logger = logging.getLogger(__name__)


class ArtifactDirectory:
    """A freshly initialised git repository holding the build artifact

    The repository never shares history with the source repository when
    created; history only enters through an explicit fetch and merge.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def prepare(self) -> Path:
        """Delete, recreate and ``git init`` the artifact directory

        Returns:
            The prepared directory

        Raises:
            DirectoryPreparationError: If any step fails
        """
        try:
            remove_path(self.path)
            self.path.mkdir(parents=True)
        except OSError as e:
            raise DirectoryPreparationError(str(self.path), str(e)) from e

        for args in (
            ["init", "--quiet"],
            ["config", "--local", "core.excludesfile", "false"],
            ["config", "--local", "core.fileMode", "true"],
        ):
            result = run_git(args, cwd=self.path)
            if not result.ok:
                raise DirectoryPreparationError(
                    str(self.path), f"git {' '.join(args)}: {result.output}"
                )

        logger.info(MSG_GLOBAL_IGNORE_DISABLED)
        return self.path

    def checkout_branch(self, branch: str) -> None:
        """Create and switch to a new local branch"""
        result = run_git(["checkout", "-b", branch], cwd=self.path)
        if not result.ok:
            raise DirectoryPreparationError(
                str(self.path), f"unable to check out branch '{branch}': {result.output}"
            )
