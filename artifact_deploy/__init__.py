"""Artifact Deploy - build, sanitize and push deployment artifacts.

Copies a source repository into an independent git repository, installs
production dependencies, strips development files, commits the result and
pushes it to every configured remote as a branch or a tag.
"""

from .__version__ import __version__, __version_info__, __license__

# Core API
from .api.deployer import Deployer, deploy

# Data models
from .models import DeployConfig, DeployOptions, DeployResult, PipelineState

# Exceptions
from .api.exceptions import (
    ArtifactDeployError,
    ConfigError,
    DirtyRepositoryError,
    MissingRemoteConfigurationError,
    InvalidTagNameError,
    UnexpectedProbeExitCodeError,
    MergeConflictError,
    DependencyInstallError,
    CommitError,
    TagError,
    PushError,
    DirectoryPreparationError,
)

__all__ = [
    # Version information
    "__version__",
    "__version_info__",
    "__license__",

    # Main classes
    "Deployer",
    "deploy",

    # Data models
    "DeployConfig",
    "DeployOptions",
    "DeployResult",
    "PipelineState",

    # Exceptions
    "ArtifactDeployError",
    "ConfigError",
    "DirtyRepositoryError",
    "MissingRemoteConfigurationError",
    "InvalidTagNameError",
    "UnexpectedProbeExitCodeError",
    "MergeConflictError",
    "DependencyInstallError",
    "CommitError",
    "TagError",
    "PushError",
    "DirectoryPreparationError",
]
