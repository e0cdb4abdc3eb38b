"""CLI decorators"""

from .config import require_config

__all__ = [
    'require_config',
]
