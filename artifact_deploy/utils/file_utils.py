"""File operation utilities"""

import logging
import os
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, List, Union

logger = logging.getLogger(__name__)


def read_lines(file_path: Path) -> List[str]:
    """
    Read a text file as a list of lines without line terminators

    Args:
        file_path: Path to file

    Returns:
        List of lines
    """
    with open(file_path, 'r', encoding='utf-8') as f:
        return f.read().splitlines()


def merge_line_files(first: Path, second: Path, output: Path) -> Path:
    """
    Write the de-duplicated union of two line-oriented files

    Order is preserved: lines of ``first`` followed by the lines of
    ``second`` that were not seen before.

    Args:
        first: First input file
        second: Second input file
        output: Destination of the merged list

    Returns:
        Path of the written file
    """
    merged = list(dict.fromkeys(read_lines(first) + read_lines(second)))

    output.parent.mkdir(parents=True, exist_ok=True)
    with open(output, 'w', encoding='utf-8') as f:
        f.write("\n".join(merged))
        if merged:
            f.write("\n")

    return output


def set_permissions(paths: Iterable[Path], mode: int) -> None:
    """
    Apply a permission mode to each existing path

    Args:
        paths: Paths to change
        mode: Numeric mode, e.g. 0o755
    """
    for path in paths:
        if not path.exists():
            logger.debug("Skipping chmod of missing path %s", path)
            continue
        os.chmod(path, mode)
        logger.debug("chmod %o %s", mode, path)


@contextmanager
def bracketed_permissions(paths: Iterable[Path], wide_mode: int, narrow_mode: int) -> Iterator[List[Path]]:
    """
    Widen permissions for the duration of a block

    ``narrow_mode`` is applied on every exit path, including exceptions.

    Args:
        paths: Directories to change
        wide_mode: Mode applied on entry
        narrow_mode: Mode applied on exit
    """
    targets = list(paths)
    try:
        set_permissions(targets, wide_mode)
        yield targets
    finally:
        set_permissions(targets, narrow_mode)


def remove_path(path: Union[str, Path]) -> None:
    """
    Remove a file, symlink or directory tree if it exists

    Args:
        path: Path to remove
    """
    path = Path(path)
    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.is_dir():
        shutil.rmtree(path)


def remove_paths(paths: Iterable[Path]) -> int:
    """
    Remove a batch of paths

    Paths nested under a directory removed earlier in the same batch are
    skipped silently.

    Args:
        paths: Paths to remove

    Returns:
        Number of paths that existed and were removed
    """
    removed = 0
    for path in paths:
        if not path.exists() and not path.is_symlink():
            continue
        remove_path(path)
        removed += 1
    return removed


def copy_file(source: Path, dest: Path) -> Path:
    """
    Copy a file, overwriting the destination

    Args:
        source: Source file
        dest: Destination file

    Returns:
        Destination path
    """
    dest.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(source, dest)
    return dest
