"""Stage result types and pipeline errors."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar

T = TypeVar("T")


class Stage(StrEnum):
    """Pipeline stages reported in errors and logs."""

    INPUT = "input"
    TRANSCRIPT = "transcript"
    CONTEXT = "context"
    LOCATIONS = "locations"
    SHOTS = "shots"
    IMAGES = "images"


class ErrorKind(StrEnum):
    """Kinds of fatal pipeline failures surfaced to callers."""

    INVALID_INPUT = "invalid-input"
    NO_USABLE_CONTENT = "no-usable-content"
    UPSTREAM_UNAVAILABLE = "upstream-unavailable"
    UPSTREAM_FAILED = "upstream-failed"
    UPSTREAM_TIMEOUT = "upstream-timeout"
    GENERATION_FAILED = "generation-failed"
    INTERNAL_ERROR = "internal-error"


class PipelineError(Exception):
    """Fatal failure raised inside a stage."""

    def __init__(self, kind: ErrorKind, message: str, stage: Stage) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.stage = stage


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Stage produced a validated value."""

    value: T


@dataclass(frozen=True)
class RecoverableDefault(Generic[T]):
    """Stage failed but a documented default was substituted."""

    value: T
    reason: str


@dataclass(frozen=True)
class Fatal:
    """Stage failed with no safe default."""

    kind: ErrorKind
    message: str
    stage: Stage

    def to_error(self) -> PipelineError:
        """Convert into a raisable pipeline error."""
        return PipelineError(self.kind, self.message, self.stage)


StageResult = Ok[T] | RecoverableDefault[T] | Fatal
