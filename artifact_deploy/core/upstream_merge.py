"""Merging of an existing remote artifact branch"""

import logging
from pathlib import Path
from typing import Union

from ..api.exceptions import MergeConflictError, UnexpectedProbeExitCodeError
from ..constants import LS_REMOTE_NOT_FOUND
from ..models.pipeline import MergeOutcome, RemoteSpec
from ..utils.process_utils import run_git

logger = logging.getLogger(__name__)


class UpstreamMergeResolver:
    """Keeps branch deploys incremental by merging the remote branch first"""

    def __init__(self, repo_path: Union[str, Path]):
        self.repo_path = Path(repo_path)

    def remote_branch_exists(self, remote: RemoteSpec, branch: str) -> bool:
        """
        Probe a remote for a branch with ``git ls-remote --exit-code``

        Raises:
            UnexpectedProbeExitCodeError: For any exit code other than 0 or 2
        """
        result = run_git(
            ["ls-remote", "--exit-code", "--heads", remote.url, branch],
            cwd=self.repo_path
        )
        if result.returncode == 0:
            return True
        if result.returncode == LS_REMOTE_NOT_FOUND:
            return False
        raise UnexpectedProbeExitCodeError(result.returncode, remote.url, result.output)

    def merge(self, remote: RemoteSpec, branch: str) -> MergeOutcome:
        """
        Fetch and merge ``branch`` from ``remote`` if it exists

        Args:
            remote: Remote to probe
            branch: Branch name on the remote

        Returns:
            MERGED, or NO_REMOTE_BRANCH when the remote lacks the branch

        Raises:
            UnexpectedProbeExitCodeError: If the probe fails unexpectedly
            MergeConflictError: If fetching or merging fails
        """
        if not self.remote_branch_exists(remote, branch):
            logger.info("Remote %s has no branch %s, starting fresh", remote.url, branch)
            return MergeOutcome.NO_REMOTE_BRANCH

        fetch = run_git(["fetch", remote.name, branch, "--depth=1"], cwd=self.repo_path)
        if not fetch.ok:
            raise MergeConflictError(branch, f"fetch from {remote.url} failed: {fetch.output}")

        merge = run_git(["merge", f"{remote.name}/{branch}"], cwd=self.repo_path)
        if not merge.ok:
            raise MergeConflictError(branch, merge.output)

        return MergeOutcome.MERGED
