"""Core pipeline components for artifact-deploy"""

from .artifact_directory import ArtifactDirectory
from .remote_registry import RemoteRegistry
from .content_sync import ContentSynchronizer, rsync_command
from .dependency_installer import DependencyInstaller, install_command
from .sanitizer import Sanitizer
from .upstream_merge import UpstreamMergeResolver
from .commit_engine import CommitEngine
from .push_coordinator import PushCoordinator

__all__ = [
    'ArtifactDirectory',
    'RemoteRegistry',
    'ContentSynchronizer',
    'rsync_command',
    'DependencyInstaller',
    'install_command',
    'Sanitizer',
    'UpstreamMergeResolver',
    'CommitEngine',
    'PushCoordinator',
]
