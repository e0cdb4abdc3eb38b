"""Configuration data models"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from ..constants import (
    ConfigKey,
    DEFAULT_DEPLOY_DIR,
    DEFAULT_DOCROOT,
    DEFAULT_EXCLUDE_ADDITIONS_FILE,
    DEFAULT_HOOKS_DIR,
    DEFAULT_HOOK_TIMEOUT,
    DEFAULT_MULTISITES,
)
from ..templates import TEMPLATES_DIR, DEPLOY_EXCLUDE_TEMPLATE, DEPLOY_GITIGNORE_TEMPLATE


def lookup(data: Dict[str, Any], key: str, default: Any = None) -> Any:
    """Resolve a dotted key such as ``deploy.dir`` against nested mappings"""
    node: Any = data
    for part in key.split('.'):
        if not isinstance(node, dict) or part not in node:
            return default
        node = node[part]
    return node


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _as_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (str, bytes)):
        return [str(value)]
    return [str(v) for v in value]


@dataclass(frozen=True)
class DeployConfig:
    """Read-only configuration snapshot for one pipeline run"""

    repo_root: Path
    deploy_dir: Path
    docroot: Path
    exclude_file: Path
    gitignore_file: Path
    exclude_additions_file: Optional[Path] = None
    tag_source: bool = True
    build_dependencies: bool = True
    git_remotes: Tuple[str, ...] = ()
    multisites: Tuple[str, ...] = tuple(DEFAULT_MULTISITES)
    simplesamlphp: bool = False

    # Shell commands for the external build operations
    commands: Dict[str, str] = field(default_factory=dict)

    # Lifecycle hooks
    hooks_dir: Optional[Path] = None
    hook_timeout: int = DEFAULT_HOOK_TIMEOUT

    # Commit message validation
    commit_msg_pattern: Optional[str] = None
    commit_msg_help: Optional[str] = None
    commit_msg_example: Optional[str] = None

    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    def get(self, key: str, default: Any = None) -> Any:
        """Look up any configuration value by dotted key"""
        return lookup(self.raw, key, default)

    @property
    def multisite_dirs(self) -> List[Path]:
        """Site directories under the docroot"""
        return [self.docroot / "sites" / site for site in self.multisites]

    def get_command(self, name: str) -> Optional[str]:
        """Get the configured shell command for an external operation"""
        command = self.commands.get(name)
        return command or None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]],
                  base_dir: Union[str, Path, None] = None) -> 'DeployConfig':
        """
        Create from a parsed configuration mapping

        Args:
            data: Nested configuration mapping
            base_dir: Directory relative paths fall back to when
                ``repo.root`` is not set (usually the config file's directory)

        Returns:
            Configuration snapshot
        """
        data = data or {}
        base = Path(base_dir or Path.cwd()).resolve()

        repo_root = lookup(data, ConfigKey.REPO_ROOT)
        repo_root = _resolve(repo_root, base) if repo_root else base

        def path_value(key: str, default: Optional[Union[str, Path]]) -> Optional[Path]:
            value = lookup(data, key)
            if value in (None, ""):
                value = default
            if value is None:
                return None
            return _resolve(value, repo_root)

        commands = lookup(data, ConfigKey.COMMANDS, {}) or {}

        return cls(
            repo_root=repo_root,
            deploy_dir=path_value(ConfigKey.DEPLOY_DIR, DEFAULT_DEPLOY_DIR),
            docroot=path_value(ConfigKey.DOCROOT, DEFAULT_DOCROOT),
            exclude_file=path_value(ConfigKey.EXCLUDE_FILE, TEMPLATES_DIR / DEPLOY_EXCLUDE_TEMPLATE),
            gitignore_file=path_value(ConfigKey.GITIGNORE_FILE, TEMPLATES_DIR / DEPLOY_GITIGNORE_TEMPLATE),
            exclude_additions_file=path_value(
                ConfigKey.EXCLUDE_ADDITIONS_FILE, DEFAULT_EXCLUDE_ADDITIONS_FILE
            ),
            tag_source=_as_bool(lookup(data, ConfigKey.TAG_SOURCE), True),
            build_dependencies=_as_bool(lookup(data, ConfigKey.BUILD_DEPENDENCIES), True),
            git_remotes=tuple(_as_list(lookup(data, ConfigKey.GIT_REMOTES))),
            multisites=tuple(_as_list(lookup(data, ConfigKey.MULTISITES, DEFAULT_MULTISITES))),
            simplesamlphp=_as_bool(lookup(data, ConfigKey.SIMPLESAMLPHP), False),
            commands={str(k): str(v) for k, v in commands.items() if v},
            hooks_dir=path_value(ConfigKey.HOOKS_DIR, DEFAULT_HOOKS_DIR),
            hook_timeout=int(lookup(data, ConfigKey.HOOKS_TIMEOUT, DEFAULT_HOOK_TIMEOUT)),
            commit_msg_pattern=lookup(data, ConfigKey.COMMIT_MSG_PATTERN),
            commit_msg_help=lookup(data, ConfigKey.COMMIT_MSG_HELP),
            commit_msg_example=lookup(data, ConfigKey.COMMIT_MSG_EXAMPLE),
            raw=data
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "repo": {"root": str(self.repo_root)},
            "deploy": {
                "dir": str(self.deploy_dir),
                "exclude_file": str(self.exclude_file),
                "exclude_additions_file": (
                    str(self.exclude_additions_file) if self.exclude_additions_file else None
                ),
                "gitignore_file": str(self.gitignore_file),
                "tag_source": self.tag_source,
                "build-dependencies": self.build_dependencies,
            },
            "git": {"remotes": list(self.git_remotes)},
            "docroot": str(self.docroot),
            "multisites": list(self.multisites),
            "simplesamlphp": self.simplesamlphp,
            "commands": dict(self.commands),
        }


def _resolve(value: Union[str, Path], base: Path) -> Path:
    path = Path(value).expanduser()
    if path.is_absolute():
        return path
    return (base / path).resolve()
