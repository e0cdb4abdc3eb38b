"""CLI commands"""

from . import config
from . import deploy
from . import git

__all__ = [
    "config",
    "deploy",
    "git",
]
