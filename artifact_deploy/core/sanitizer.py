"""Removal of VCS metadata and documentation files from the artifact"""

import logging
import os
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Set, Union

from ..constants import (
    CORE_SUBTREE,
    CORE_TEXT_KEEP,
    DEPENDENCY_DIR,
    HOSTING_DIR_NAME,
    INSTALL_DB_PATTERN,
    TEXT_FILE_PATTERN,
    VCS_DIR_NAME,
)
from ..utils.file_utils import remove_paths

logger = logging.getLogger(__name__)


def _walk(root: Path, include_hidden: bool) -> Iterator[Path]:
    """Yield every file and directory below root without following links"""
    if not root.is_dir():
        return
    for dirpath, dirnames, filenames in os.walk(root):
        if not include_hidden:
            dirnames[:] = [d for d in dirnames if not d.startswith('.')]
            filenames = [f for f in filenames if not f.startswith('.')]
        base = Path(dirpath)
        for name in dirnames:
            yield base / name
        for name in filenames:
            yield base / name


def _find(roots: Iterable[Path], predicate: Callable[[Path], bool],
          include_hidden: bool = False) -> List[Path]:
    return [p for root in roots for p in _walk(root, include_hidden) if predicate(p)]


class Sanitizer:
    """Finds and deletes files that must not ship with the artifact"""

    def __init__(self, artifact_path: Union[str, Path], docroot_name: str = "docroot"):
        self.artifact_path = Path(artifact_path)
        self.docroot = self.artifact_path / docroot_name
        self.vendor = self.artifact_path / DEPENDENCY_DIR

    def find_core_text_files(self) -> List[Path]:
        core = self.docroot / CORE_SUBTREE
        return _find(
            [core],
            lambda p: p.suffix == ".txt" and p.name != CORE_TEXT_KEEP and _is_file(p)
        )

    def find_vcs_dirs(self) -> List[Path]:
        return _find(
            [self.docroot, self.vendor],
            lambda p: p.name == VCS_DIR_NAME and _is_dir(p),
            include_hidden=True
        )

    def find_hosting_dirs(self) -> List[Path]:
        return _find(
            [self.docroot, self.vendor],
            lambda p: p.name == HOSTING_DIR_NAME and _is_dir(p),
            include_hidden=True
        )

    def find_install_db_files(self) -> List[Path]:
        return _find(
            [self.docroot],
            lambda p: INSTALL_DB_PATTERN.search(p.name) is not None and _is_file(p)
        )

    def find_text_files(self) -> List[Path]:
        return _find(
            [self.docroot],
            lambda p: TEXT_FILE_PATTERN.search(p.name) is not None and _is_file(p)
        )

    def find_matches(self) -> List[Path]:
        """Collect every path to delete, before anything is deleted"""
        matches: Set[Path] = set()
        for label, finder in (
            ("core text files", self.find_core_text_files),
            ("VCS directories", self.find_vcs_dirs),
            ("hosting platform directories", self.find_hosting_dirs),
            ("INSTALL database text files", self.find_install_db_files),
            ("other common text files", self.find_text_files),
        ):
            found = finder()
            logger.info("Find %s... %d found", label, len(found))
            matches.update(found)
        return sorted(matches)

    def sanitize(self) -> List[Path]:
        """
        Delete all matches in one batch

        Returns:
            The matched paths
        """
        matches = self.find_matches()
        logger.info("Remove sanitized files from build...")
        remove_paths(matches)
        return matches


def _is_file(path: Path) -> bool:
    return path.is_file() and not path.is_symlink()


def _is_dir(path: Path) -> bool:
    return path.is_dir() and not path.is_symlink()
