"""Exception definitions for artifact-deploy API"""

from typing import List, Optional

from ..constants import ErrorCode, MSG_DIRTY, MSG_DIRTY_UNKNOWN, MSG_INVALID_TAG, MSG_NO_REMOTES


class ArtifactDeployError(Exception):
    """Base exception for artifact-deploy"""

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.error_code = error_code


class ConfigError(ArtifactDeployError):
    """Configuration error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIG_ERROR)


class ConfigNotFoundError(ConfigError):
    """No configuration file where one was expected"""


class DirtyRepositoryError(ArtifactDeployError):
    """Source repository has uncommitted changes"""

    def __init__(self, message: str = MSG_DIRTY):
        super().__init__(message, ErrorCode.DIRTY_REPOSITORY)


class DirtyCheckError(ArtifactDeployError):
    """Status of the source repository could not be determined"""

    def __init__(self, message: str = MSG_DIRTY_UNKNOWN):
        super().__init__(message, ErrorCode.DIRTY_CHECK_FAILED)


class MissingRemoteConfigurationError(ConfigError):
    """No git remotes configured"""

    def __init__(self, message: str = MSG_NO_REMOTES):
        super().__init__(message)
        self.error_code = ErrorCode.MISSING_REMOTE_CONFIGURATION


class InvalidTagNameError(ArtifactDeployError):
    """Tag name is empty"""

    def __init__(self, message: str = MSG_INVALID_TAG):
        super().__init__(message, ErrorCode.INVALID_TAG_NAME)


class UnexpectedProbeExitCodeError(ArtifactDeployError):
    """Remote branch probe exited with an unknown code"""

    def __init__(self, exit_code: int, remote_url: str, details: str = ""):
        message = (
            f"Unexpected error while searching for remote branch on {remote_url} "
            f"(exit code {exit_code})"
        )
        if details:
            message = f"{message}: {details}"
        super().__init__(message, ErrorCode.UNEXPECTED_PROBE_EXIT_CODE)
        self.exit_code = exit_code
        self.remote_url = remote_url


class MergeConflictError(ArtifactDeployError):
    """Upstream branch could not be merged into the artifact"""

    def __init__(self, branch: str, details: str = ""):
        message = f"Failed to merge upstream branch '{branch}' into the artifact"
        if details:
            message = f"{message}: {details}"
        super().__init__(message, ErrorCode.MERGE_CONFLICT)
        self.branch = branch


class DependencyInstallError(ArtifactDeployError):
    """Dependency installer failed"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.DEPENDENCY_INSTALL_FAILED)


class CommitError(ArtifactDeployError):
    """Artifact commit failed"""

    def __init__(self, message: str = "Failed to commit deployment artifact!"):
        super().__init__(message, ErrorCode.COMMIT_FAILED)


class TagError(ArtifactDeployError):
    """Tag creation failed"""

    def __init__(self, tag_name: str, target: str, details: str = ""):
        message = f"Failed to create Git tag '{tag_name}' on the {target} repository!"
        if details:
            message = f"{message} {details}"
        super().__init__(message, ErrorCode.TAG_FAILED)
        self.tag_name = tag_name
        self.target = target


class PushError(ArtifactDeployError):
    """Push to one or more remotes failed"""

    def __init__(self, identifier: str, failed_remotes: List[str]):
        remotes = ", ".join(failed_remotes)
        message = f"Failed to push deployment artifact '{identifier}' to: {remotes}"
        super().__init__(message, ErrorCode.PUSH_FAILED)
        self.identifier = identifier
        self.failed_remotes = failed_remotes


class DirectoryPreparationError(ArtifactDeployError):
    """Artifact directory could not be prepared"""

    def __init__(self, path: str, details: str = ""):
        message = f"Unable to prepare artifact directory {path}"
        if details:
            message = f"{message}: {details}"
        super().__init__(message, ErrorCode.DIRECTORY_PREPARATION_FAILED)
        self.path = path


class SyncError(ArtifactDeployError):
    """Copying source files into the artifact failed"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.SYNC_FAILED)


class BuildStepError(ArtifactDeployError):
    """An external build operation failed"""

    def __init__(self, operation: str, details: Optional[str] = None):
        message = f"Build step '{operation}' failed"
        if details:
            message = f"{message}: {details}"
        super().__init__(message, ErrorCode.BUILD_STEP_FAILED)
        self.operation = operation


class UserCancelledError(ArtifactDeployError):
    """User cancelled the operation"""

    def __init__(self):
        super().__init__("Operation cancelled by user", ErrorCode.USER_CANCELLED)
