"""Global constants for artifact-deploy"""

import re

APP_NAME = "artifact-deploy"

# Project identification
PROJECT_CONFIG_FILE = ".artifact-deploy.yaml"

# Logging
LOG_FORMAT = "%(message)s"

# Default locations (relative to repo.root)
DEFAULT_DEPLOY_DIR = "deploy"
DEFAULT_DOCROOT = "docroot"
DEFAULT_EXCLUDE_ADDITIONS_FILE = "blt/deploy-exclude-additions.txt"
DEFAULT_HOOKS_DIR = ".artifact-deploy/hooks"
DEFAULT_HOOK_TIMEOUT = 300  # seconds
DEFAULT_MULTISITES = ["default"]


# Branch naming
BUILD_BRANCH_SUFFIX = "-build"
TEMP_BRANCH_SUFFIX = "-temp"

# Dependency manager
DEPENDENCY_DIR = "vendor"
DEPENDENCY_MANIFEST = "composer.json"
DEPENDENCY_LOCK = "composer.lock"
DEPENDENCY_INSTALL_COMMAND = [
    "composer", "install", "--no-dev", "--no-interaction", "--optimize-autoloader"
]
IGNORE_PLATFORM_REQS_FLAG = "--ignore-platform-reqs"

# Permissions bracketed around the content sync
MULTISITE_WIDE_MODE = 0o777
MULTISITE_NARROW_MODE = 0o755

# Sanitizer patterns
CORE_SUBTREE = "core"
CORE_TEXT_KEEP = "LICENSE.txt"
VCS_DIR_NAME = ".git"
HOSTING_DIR_NAME = ".github"
INSTALL_DB_PATTERN = re.compile(r"INSTALL\.[a-z]+\.(md|txt)$")
SANITIZE_FILENAMES = [
    "AUTHORS",
    "CHANGELOG",
    "CONDUCT",
    "CONTRIBUTING",
    "INSTALL",
    "MAINTAINERS",
    "PATCHES",
    "TESTING",
    "UPDATE",
]
TEXT_FILE_PATTERN = re.compile(r"(" + "|".join(SANITIZE_FILENAMES) + r")\.(md|txt)$")

# `git ls-remote --exit-code` returns this when no matching ref exists
LS_REMOTE_NOT_FOUND = 2

# Process exit codes
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130
COMMAND_NOT_FOUND = 127


# Configuration keys
class ConfigKey:
    DEPLOY_DIR = "deploy.dir"
    EXCLUDE_FILE = "deploy.exclude_file"
    EXCLUDE_ADDITIONS_FILE = "deploy.exclude_additions_file"
    GITIGNORE_FILE = "deploy.gitignore_file"
    TAG_SOURCE = "deploy.tag_source"
    BUILD_DEPENDENCIES = "deploy.build-dependencies"
    GIT_REMOTES = "git.remotes"
    COMMIT_MSG_PATTERN = "git.commit-msg.pattern"
    COMMIT_MSG_HELP = "git.commit-msg.help_description"
    COMMIT_MSG_EXAMPLE = "git.commit-msg.example"
    REPO_ROOT = "repo.root"
    MULTISITES = "multisites"
    DOCROOT = "docroot"
    SIMPLESAMLPHP = "simplesamlphp"
    HOOKS_DIR = "hooks.dir"
    HOOKS_TIMEOUT = "hooks.timeout"
    COMMANDS = "commands"


# Error codes
class ErrorCode:
    CONFIG_ERROR = "AD001"
    DIRTY_REPOSITORY = "AD002"
    DIRTY_CHECK_FAILED = "AD003"
    MISSING_REMOTE_CONFIGURATION = "AD004"
    INVALID_TAG_NAME = "AD005"
    UNEXPECTED_PROBE_EXIT_CODE = "AD006"
    MERGE_CONFLICT = "AD007"
    DEPENDENCY_INSTALL_FAILED = "AD008"
    COMMIT_FAILED = "AD009"
    TAG_FAILED = "AD010"
    PUSH_FAILED = "AD011"
    DIRECTORY_PREPARATION_FAILED = "AD012"
    SYNC_FAILED = "AD013"
    BUILD_STEP_FAILED = "AD014"
    USER_CANCELLED = "AD015"
    UNEXPECTED = "AD099"


# Display constants
EMOJI_SUCCESS = "✓"
EMOJI_ERROR = "✗"
EMOJI_WARNING = "⚠"

# Messages templates
MSG_DRY_RUN = "This will be a dry run, the artifact will not be pushed."
MSG_DIRTY = "There are uncommitted changes, commit or stash these changes before deploying."
MSG_DIRTY_IGNORED = "There are uncommitted changes on the source repository."
MSG_DIRTY_UNKNOWN = "Unable to determine if local git repository is dirty."
MSG_NO_REMOTES = (
    "git.remotes is empty. Please define at least one value for git.remotes "
    f"in {PROJECT_CONFIG_FILE}."
)
MSG_INVALID_TAG = "You must enter a valid tag name."
MSG_TAG_SOURCE_DISABLED = "Config option deploy.tag_source is FALSE. The source repo will not be tagged."
MSG_DEPS_DISABLED = (
    "Dependencies will not be built because deploy.build-dependencies is not enabled"
)
MSG_DEPS_DISABLED_HINT = (
    "You should define a custom deploy.exclude_file to ensure that dependencies "
    "are copied from the root repository."
)
MSG_PUSH_SKIPPED = "Skipping push of deployment artifact. Dry run is enabled."
MSG_GLOBAL_IGNORE_DISABLED = (
    "Global .gitignore file is being disabled for this repository to prevent "
    "unexpected behavior."
)

# Interactive prompts
PROMPT_CREATE_TAG = "Would you like to create a tag?"
PROMPT_COMMIT_MESSAGE = "Enter a valid commit message"
PROMPT_BRANCH_NAME = "Enter the branch name for the deployment artifact"
PROMPT_TAG_NAME = "Enter the tag name for the deployment artifact, e.g., 1.0.0-build"
