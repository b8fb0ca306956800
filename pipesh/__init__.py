"""pipesh package: pipeline execution engine with a minimal shell around it."""

from .config import ShellConfig
from .exceptions import (
    ParseError,
    ParseErrorKind,
    PipelineError,
    RedirectionError,
    ResourceError,
    SpawnError,
)
from .executor import ExitOutcome, PipelineExecutor, ProcessState, StageProcess
from .expand import environ_lookup, expand
from .jobs import Job, JobTable
from .parser import PipelineSpec, StageSpec, parse_pipeline, parse_stage, split_pipeline
from .shell import PipelineShell
from .text import normalize

__all__ = [
    "ExitOutcome",
    "Job",
    "JobTable",
    "ParseError",
    "ParseErrorKind",
    "PipelineError",
    "PipelineExecutor",
    "PipelineShell",
    "PipelineSpec",
    "ProcessState",
    "RedirectionError",
    "ResourceError",
    "ShellConfig",
    "SpawnError",
    "StageProcess",
    "StageSpec",
    "environ_lookup",
    "expand",
    "normalize",
    "parse_pipeline",
    "parse_stage",
    "split_pipeline",
]
