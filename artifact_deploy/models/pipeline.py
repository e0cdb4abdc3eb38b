"""Pipeline data models"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple

from ..utils.hash_utils import remote_name_for_url


class DeployPath(Enum):
    """Which flow a run follows; fixed before any mutation"""
    BRANCH = "branch"
    TAG = "tag"


class TagTarget(Enum):
    """Repository receiving a tag"""
    BUILD = "build"
    SOURCE = "source"


class MergeOutcome(Enum):
    """Result of the upstream merge probe"""
    MERGED = "merged"
    NO_REMOTE_BRANCH = "no_remote_branch"


class PipelineState(Enum):
    """Pipeline controller states"""
    INIT = "init"
    DIRTY_CHECK = "dirty_check"
    TAG_PATH_CHOSEN = "tag_path_chosen"
    BRANCH_PATH_CHOSEN = "branch_path_chosen"
    PREPARED = "prepared"
    REMOTES_ADDED = "remotes_added"
    BRANCH_CHECKED_OUT = "branch_checked_out"
    MERGED_OR_SKIPPED = "merged_or_skipped"
    BUILT = "built"
    SANITIZED = "sanitized"
    COMMITTED = "committed"
    TAGGED = "tagged"
    SOURCE_TAGGED = "source_tagged"
    PUSHED = "pushed"
    DONE = "done"
    ABORTED = "aborted"


@dataclass(frozen=True)
class DeployOptions:
    """Per-invocation deploy options"""
    branch_name: Optional[str] = None
    tag_name: Optional[str] = None
    commit_message: Optional[str] = None
    ignore_dirty: bool = False
    dry_run: bool = False
    ignore_platform_reqs: bool = False
    interactive: bool = True


@dataclass(frozen=True)
class RemoteSpec:
    """A remote URL and the local remote name derived from it"""
    url: str
    name: str

    @classmethod
    def from_url(cls, url: str) -> 'RemoteSpec':
        return cls(url=url, name=remote_name_for_url(url))

    @classmethod
    def from_urls(cls, urls: Iterable[str]) -> Tuple['RemoteSpec', ...]:
        """One remote per distinct URL, in first-seen order"""
        return tuple(cls.from_url(url) for url in dict.fromkeys(urls))


@dataclass(frozen=True)
class PipelineContext:
    """Values resolved once at the start of a run

    ``working_branch`` is the branch checked out in the artifact repository.
    On the tag path it is a disposable branch that is never pushed, and
    ``push_identifier`` is the tag name.
    """
    path: DeployPath
    working_branch: str
    commit_message: str
    remotes: Tuple[RemoteSpec, ...]
    options: DeployOptions
    tag_name: Optional[str] = None

    @property
    def is_tag(self) -> bool:
        return self.path == DeployPath.TAG

    @property
    def push_identifier(self) -> str:
        return self.tag_name if self.is_tag else self.working_branch

    @property
    def upstream_remote(self) -> RemoteSpec:
        """Remote probed for an existing branch to merge"""
        return self.remotes[0]
