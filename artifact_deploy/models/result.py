"""Outcome records for deploy and build runs"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from .pipeline import PipelineContext, PipelineState


def _now() -> datetime:
    return datetime.now(timezone.utc)


class OperationStatus(Enum):
    """How a stage ended; skipped stages had nothing to do"""
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class ErrorDetail:
    """Error code and message of a failed stage

    ``code`` is the AD0xx code of the raised error.
    """

    code: str
    message: str
    context: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=_now)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
            "at": self.timestamp.isoformat(),
        }


@dataclass
class StageResult:
    """Outcome of a single pipeline stage"""

    name: str
    state: PipelineState
    status: OperationStatus
    message: str = ""
    error: Optional[ErrorDetail] = None
    exception: Optional[BaseException] = field(default=None, repr=False)
    value: Any = field(default=None, repr=False, compare=False)

    @property
    def is_failed(self) -> bool:
        return self.status == OperationStatus.FAILED

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "name": self.name,
            "state": self.state.value,
            "status": self.status.value,
            "message": self.message,
        }
        if self.error is not None:
            data["error"] = self.error.to_dict()
        return data


@dataclass
class DeployResult:
    """Result of a deploy or build run"""

    state: PipelineState = PipelineState.INIT
    context: Optional[PipelineContext] = None
    stages: List[StageResult] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    pushed: bool = False
    start_time: datetime = field(default_factory=_now)
    end_time: Optional[datetime] = None

    @property
    def success(self) -> bool:
        return self.state == PipelineState.DONE

    @property
    def failed_stage(self) -> Optional[StageResult]:
        for stage in self.stages:
            if stage.is_failed:
                return stage
        return None

    @property
    def error(self) -> Optional[str]:
        stage = self.failed_stage
        if stage and stage.error:
            return stage.error.message
        return None

    @property
    def exception(self) -> Optional[BaseException]:
        stage = self.failed_stage
        return stage.exception if stage else None

    @property
    def duration(self) -> Optional[float]:
        """Wall-clock seconds, once the run has finished"""
        if self.end_time is not None:
            return (self.end_time - self.start_time).total_seconds()
        return None

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def complete(self, state: PipelineState) -> None:
        """Mark run as finished in a terminal state"""
        self.state = state
        self.end_time = _now()

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready summary used by `deploy --output json`"""
        data = {
            "state": self.state.value,
            "success": self.success,
            "pushed": self.pushed,
            "stages": [s.to_dict() for s in self.stages],
            "warnings": self.warnings,
            "duration": self.duration,
        }
        if self.context:
            data["path"] = self.context.path.value
            data["branch"] = self.context.working_branch
            data["tag"] = self.context.tag_name
            data["remotes"] = [r.url for r in self.context.remotes]
        if self.error is not None:
            data["error"] = self.error
        return data
