"""CLI utility functions"""

from .output import console, format_build_result, format_deploy_result, format_stages
from .interactive import RichPrompter

__all__ = [
    'console',
    'format_build_result',
    'format_deploy_result',
    'format_stages',
    'RichPrompter',
]
