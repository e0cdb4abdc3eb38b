"""API layer for artifact-deploy"""

from .exceptions import (
    ArtifactDeployError,
    ConfigError,
    ConfigNotFoundError,
    DirtyRepositoryError,
    DirtyCheckError,
    MissingRemoteConfigurationError,
    InvalidTagNameError,
    UnexpectedProbeExitCodeError,
    MergeConflictError,
    DependencyInstallError,
    CommitError,
    TagError,
    PushError,
    DirectoryPreparationError,
    SyncError,
    BuildStepError,
    UserCancelledError,
)
from .deployer import Deployer, deploy

__all__ = [
    # Main classes
    "Deployer",

    # Convenience functions
    "deploy",

    # Exceptions
    "ArtifactDeployError",
    "ConfigError",
    "ConfigNotFoundError",
    "DirtyRepositoryError",
    "DirtyCheckError",
    "MissingRemoteConfigurationError",
    "InvalidTagNameError",
    "UnexpectedProbeExitCodeError",
    "MergeConflictError",
    "DependencyInstallError",
    "CommitError",
    "TagError",
    "PushError",
    "DirectoryPreparationError",
    "SyncError",
    "BuildStepError",
    "UserCancelledError",
]
