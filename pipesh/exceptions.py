"""Exception hierarchy for pipesh."""

from __future__ import annotations

from enum import Enum


EXIT_USAGE = 2
EXIT_REDIRECT_FAILED = 1
EXIT_RESOURCE = 1
EXIT_NOT_EXECUTABLE = 126
EXIT_NOT_FOUND = 127


class PipelineError(Exception):
    """Base error for pipeline parsing and execution."""

    status: int = 1

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status


class ParseErrorKind(Enum):
    EMPTY_COMMAND = "empty command"
    MISSING_TARGET = "missing redirection target"


class ParseError(PipelineError):
    """Raised when a stage cannot become a command; nothing is spawned."""

    status = EXIT_USAGE

    def __init__(self, kind: ParseErrorKind, detail: str = "") -> None:
        message = kind.value if not detail else f"{kind.value}: {detail}"
        super().__init__(message)
        self.kind = kind


class RedirectionError(PipelineError):
    """A redirection target could not be opened for one stage."""

    status = EXIT_REDIRECT_FAILED

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class SpawnError(PipelineError):
    """A stage's program could not be located or executed."""

    def __init__(self, program: str, reason: str, *, status: int = EXIT_NOT_FOUND) -> None:
        super().__init__(f"{program}: {reason}", status=status)
        self.program = program
        self.reason = reason


class ResourceError(PipelineError):
    """Pipe allocation failed; the whole pipeline is abandoned."""

    status = EXIT_RESOURCE


__all__ = [
    "EXIT_NOT_EXECUTABLE",
    "EXIT_NOT_FOUND",
    "EXIT_REDIRECT_FAILED",
    "EXIT_RESOURCE",
    "EXIT_USAGE",
    "ParseError",
    "ParseErrorKind",
    "PipelineError",
    "RedirectionError",
    "ResourceError",
    "SpawnError",
]
