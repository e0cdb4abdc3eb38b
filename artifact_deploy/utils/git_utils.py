"""Git query utilities for the source repository"""

from pathlib import Path
from typing import Optional

from .process_utils import CommandResult, run_git


def get_current_branch(path: Path) -> Optional[str]:
    """
    Get current Git branch

    Args:
        path: Repository path

    Returns:
        Branch name or None
    """
    result = run_git(["rev-parse", "--abbrev-ref", "HEAD"], cwd=path)
    if not result.ok:
        return None
    return result.stdout.strip() or None


def get_last_commit_message(path: Path) -> str:
    """
    Get the summary line of the last commit

    Args:
        path: Repository path

    Returns:
        Commit summary, empty string if the repository has no commits
    """
    result = run_git(["log", "--oneline", "-1"], cwd=path)
    if not result.ok:
        return ""

    parts = result.stdout.strip().split(" ", 1)
    return parts[1].strip() if len(parts) == 2 else ""


def porcelain_status(path: Path) -> CommandResult:
    """Run `git status --porcelain`; non-empty stdout means dirty"""
    return run_git(["status", "--porcelain"], cwd=path)
