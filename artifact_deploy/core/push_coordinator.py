"""Pushing the artifact to every remote"""

import logging
from pathlib import Path
from typing import Iterable, List, Union

from ..api.exceptions import PushError
from ..constants import MSG_PUSH_SKIPPED
from ..models.pipeline import RemoteSpec
from ..utils.process_utils import run_git

logger = logging.getLogger(__name__)


class PushCoordinator:
    """Pushes a branch or tag to all registered remotes"""

    def __init__(self, repo_path: Union[str, Path]):
        self.repo_path = Path(repo_path)

    def push(self, identifier: str, remotes: Iterable[RemoteSpec], dry_run: bool = False) -> bool:
        """
        Push ``identifier`` to each remote

        Every remote is attempted before failures are reported.

        Args:
            identifier: Branch or tag name
            remotes: Registered remotes
            dry_run: Skip pushing entirely

        Returns:
            True if pushed, False if skipped by dry run

        Raises:
            PushError: If any remote rejected the push
        """
        if dry_run:
            logger.warning(MSG_PUSH_SKIPPED)
            return False

        failed: List[str] = []
        for remote in remotes:
            result = run_git(["push", remote.name, identifier], cwd=self.repo_path)
            if result.ok:
                logger.info("Pushed %s to %s", identifier, remote.url)
            else:
                logger.error("Push of %s to %s failed: %s", identifier, remote.url, result.output)
                failed.append(remote.url)

        if failed:
            raise PushError(identifier, failed)
        return True
