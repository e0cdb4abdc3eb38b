"""Service layer for artifact-deploy"""

from .config_service import ConfigService, find_project_root
from .prompter import Prompter, NonInteractivePrompter
from .build_operations import BuildOperations, ShellBuildOperations
from .deploy_service import DeployService
from .commit_message import CommitMessageCheck, compile_pattern, validate_commit_message

__all__ = [
    'ConfigService',
    'find_project_root',
    'Prompter',
    'NonInteractivePrompter',
    'BuildOperations',
    'ShellBuildOperations',
    'DeployService',
    'CommitMessageCheck',
    'compile_pattern',
    'validate_commit_message',
]
