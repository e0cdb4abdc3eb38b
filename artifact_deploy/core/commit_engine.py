"""Committing and tagging the artifact"""

import logging
from pathlib import Path
from typing import Union

from ..api.exceptions import CommitError, TagError
from ..models.pipeline import TagTarget
from ..utils.process_utils import run_git

logger = logging.getLogger(__name__)


class CommitEngine:
    """Records the artifact tree in the artifact repository"""

    def __init__(self, artifact_path: Union[str, Path], source_path: Union[str, Path]):
        self.artifact_path = Path(artifact_path)
        self.source_path = Path(source_path)

    def commit(self, message: str) -> None:
        """
        Commit the current artifact tree

        The index is emptied and rebuilt first, so the commit matches the
        filesystem exactly, including files removed since the merged
        upstream commit.

        Raises:
            CommitError: If any git step fails
        """
        if not message:
            raise CommitError("A commit message is required to commit the deployment artifact!")

        for args in (
            ["rm", "-r", "--cached", "--ignore-unmatch", "--quiet", "."],
            ["add", "-A"],
            ["commit", "--quiet", "-m", message],
        ):
            result = run_git(args, cwd=self.artifact_path)
            if not result.ok:
                logger.error("git %s failed: %s", args[0], result.output)
                raise CommitError(f"Failed to commit deployment artifact! {result.output}".strip())

    def tag(self, target: TagTarget, name: str, message: str) -> None:
        """
        Create an annotated tag

        Args:
            target: BUILD for the artifact repository, SOURCE for the source
            name: Tag name
            message: Annotation message

        Raises:
            TagError: If git refuses the tag
        """
        cwd = self.artifact_path if target == TagTarget.BUILD else self.source_path
        result = run_git(["tag", "-a", name, "-m", message], cwd=cwd)
        if not result.ok:
            raise TagError(name, target.value, result.output)
        logger.info("The tag %s was created on the %s repository.", name, target.value)
