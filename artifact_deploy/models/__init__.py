"""Data models for artifact-deploy"""

from .config import DeployConfig, lookup
from .pipeline import (
    DeployOptions,
    DeployPath,
    MergeOutcome,
    PipelineContext,
    PipelineState,
    RemoteSpec,
    TagTarget,
)
from .result import DeployResult, ErrorDetail, OperationStatus, StageResult

__all__ = [
    'DeployConfig',
    'lookup',
    'DeployOptions',
    'DeployPath',
    'MergeOutcome',
    'PipelineContext',
    'PipelineState',
    'RemoteSpec',
    'TagTarget',
    'DeployResult',
    'ErrorDetail',
    'OperationStatus',
    'StageResult',
]
