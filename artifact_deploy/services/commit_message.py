"""Commit message validation for the commit-msg git hook"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Pattern

from ..api.exceptions import ConfigError
from ..models.config import DeployConfig

logger = logging.getLogger(__name__)

_DELIMITED = re.compile(r"^/(?P<body>.*)/(?P<flags>[imsx]*)$", re.DOTALL)
_FLAGS = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL, "x": re.VERBOSE}


def compile_pattern(pattern: str) -> Pattern:
    """
    Compile a commit message pattern

    Accepts a bare regular expression or one wrapped in slashes with
    trailing flags, e.g. ``/^ABC-[0-9]+: .+/i``.

    Raises:
        ConfigError: If the expression is invalid
    """
    flags = 0
    match = _DELIMITED.match(pattern)
    if match:
        pattern = match.group("body")
        for flag in match.group("flags"):
            flags |= _FLAGS[flag]

    try:
        return re.compile(pattern, flags)
    except re.error as e:
        raise ConfigError(f"Invalid git.commit-msg.pattern: {e}") from e


@dataclass
class CommitMessageCheck:
    """Outcome of a commit message validation"""
    valid: bool
    pattern: Optional[str] = None
    hints: List[str] = field(default_factory=list)


def validate_commit_message(message: str, config: DeployConfig) -> CommitMessageCheck:
    """Check a commit message against git.commit-msg.pattern"""
    pattern = config.commit_msg_pattern
    if not pattern:
        logger.debug("No git.commit-msg.pattern configured, accepting message")
        return CommitMessageCheck(valid=True)

    logger.debug("Validating commit message with regex %s", pattern)
    if compile_pattern(pattern).search(message):
        return CommitMessageCheck(valid=True, pattern=pattern)

    hints = []
    if config.commit_msg_help:
        hints.append(config.commit_msg_help)
    if config.commit_msg_example:
        hints.append(f"Example: {config.commit_msg_example}")
    return CommitMessageCheck(valid=False, pattern=pattern, hints=hints)
