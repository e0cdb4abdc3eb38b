"""Copying source repository content into the artifact"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, Optional, Tuple, Union

from ..api.exceptions import SyncError
from ..constants import MULTISITE_NARROW_MODE, MULTISITE_WIDE_MODE
from ..models.config import DeployConfig
from ..utils.file_utils import bracketed_permissions, copy_file, merge_line_files
from ..utils.process_utils import run_command

logger = logging.getLogger(__name__)


def rsync_command(source: Path, dest: Path, exclude_list: Path) -> list:
    """Build the one-way mirror command; ``dest/.git`` is always protected"""
    return [
        "rsync", "-a", "--no-g", "--delete", "--delete-excluded",
        f"--exclude-from={exclude_list}",
        f"{source}/", f"{dest}/",
        "--filter", "protect /.git/",
    ]


class ContentSynchronizer:
    """Mirrors the source tree into the artifact directory"""

    def __init__(self, config: DeployConfig):
        self.config = config

    def resolve_exclude_list(self) -> Tuple[Path, Optional[Path]]:
        """
        Get the exclude list to hand to rsync

        When the additions file exists, base and additions are merged into
        a temporary file which the caller must delete.

        Returns:
            Tuple of (exclude list path, temporary file or None)
        """
        base = self.config.exclude_file
        additions = self.config.exclude_additions_file

        if additions is None or not additions.is_file():
            return base, None

        logger.info("Combining exclusions from %s and %s", base, additions)
        fd, temp_name = tempfile.mkstemp(prefix="artifact-deploy-exclude-", suffix=".txt")
        os.close(fd)
        temp_path = Path(temp_name)
        try:
            merge_line_files(base, additions, temp_path)
        except OSError:
            temp_path.unlink()
            raise
        return temp_path, temp_path

    def sync(self, source: Path, dest: Path, exclude_list: Path,
             writable_dirs: Iterable[Path] = ()) -> None:
        """
        Mirror ``source`` into ``dest``

        ``writable_dirs`` are opened up while rsync runs and narrowed again
        afterwards, whether or not it succeeded.

        Raises:
            SyncError: If rsync fails
        """
        with bracketed_permissions(writable_dirs, MULTISITE_WIDE_MODE, MULTISITE_NARROW_MODE):
            result = run_command(rsync_command(source, dest, exclude_list), cwd=source)

        if not result.ok:
            raise SyncError(f"Failed to copy {source} into {dest}: {result.output}")

    def build_copy(self, dest: Union[str, Path, None] = None) -> Path:
        """
        Copy the source repository into the artifact and install its .gitignore

        Returns:
            The artifact directory
        """
        source = self.config.repo_root
        dest = Path(dest) if dest else self.config.deploy_dir

        try:
            exclude_list, temp_file = self.resolve_exclude_list()
        except OSError as e:
            raise SyncError(f"Unable to read exclude lists: {e}") from e

        try:
            logger.info("Rsyncing files from source repo into the build artifact...")
            self.sync(source, dest, exclude_list, self.config.multisite_dirs)
        finally:
            if temp_file is not None and temp_file.exists():
                temp_file.unlink()

        try:
            copy_file(self.config.gitignore_file, dest / ".gitignore")
        except OSError as e:
            raise SyncError(f"Unable to install {self.config.gitignore_file}: {e}") from e

        return dest
