"""Registration of git remotes in the artifact repository"""

import logging
from pathlib import Path
from typing import Iterable, Tuple, Union

from ..api.exceptions import DirectoryPreparationError, MissingRemoteConfigurationError
from ..models.pipeline import RemoteSpec
from ..utils.process_utils import run_git

logger = logging.getLogger(__name__)


class RemoteRegistry:
    """Adds one remote per configured URL, named by the URL's hash"""

    def __init__(self, repo_path: Union[str, Path]):
        self.repo_path = Path(repo_path)

    def register(self, urls: Iterable[str]) -> Tuple[RemoteSpec, ...]:
        """
        Register remotes for the given URLs

        The repository must be freshly initialised; adding a name that
        already exists fails.

        Args:
            urls: Ordered remote URLs

        Returns:
            The registered remotes, in order

        Raises:
            MissingRemoteConfigurationError: If no URL is given
            DirectoryPreparationError: If git refuses a remote
        """
        remotes = RemoteSpec.from_urls(urls)
        if not remotes:
            raise MissingRemoteConfigurationError()

        for remote in remotes:
            result = run_git(["remote", "add", remote.name, remote.url], cwd=self.repo_path)
            if not result.ok:
                raise DirectoryPreparationError(
                    str(self.repo_path),
                    f"unable to add remote {remote.url}: {result.output}"
                )
            logger.debug("Added remote %s -> %s", remote.name, remote.url)

        return remotes
