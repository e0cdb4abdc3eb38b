"""Utility functions for artifact-deploy"""

from .process_utils import CommandResult, run_command, run_git
from .git_utils import (
    get_current_branch,
    get_last_commit_message,
    porcelain_status,
)
from .hash_utils import remote_name_for_url
from .file_utils import (
    read_lines,
    merge_line_files,
    set_permissions,
    bracketed_permissions,
    remove_path,
    remove_paths,
    copy_file,
)
from .async_utils import run_async

__all__ = [
    # Processes
    'CommandResult',
    'run_command',
    'run_git',

    # Git
    'get_current_branch',
    'get_last_commit_message',
    'porcelain_status',

    # Hashing
    'remote_name_for_url',

    # Files
    'read_lines',
    'merge_line_files',
    'set_permissions',
    'bracketed_permissions',
    'remove_path',
    'remove_paths',
    'copy_file',

    # Async
    'run_async',
]
