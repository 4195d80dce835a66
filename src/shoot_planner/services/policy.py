"""Fallback policy for stage failures."""

from dataclasses import dataclass
from enum import StrEnum

from shoot_planner.domain.results import ErrorKind, Stage


class FailureMode(StrEnum):
    """Ways a stage can fail."""

    EMPTY_CONTENT = "empty-content"
    UNAVAILABLE = "unavailable"
    UPSTREAM_FAILED = "upstream-failed"
    TIMEOUT = "timeout"
    UNPARSEABLE = "unparseable"
    CAPABILITY_ERROR = "capability-error"


@dataclass(frozen=True)
class PolicyDecision:
    """Outcome of consulting the fallback policy."""

    recoverable: bool
    kind: ErrorKind | None = None


_RECOVER = PolicyDecision(recoverable=True)


def _fatal(kind: ErrorKind) -> PolicyDecision:
    return PolicyDecision(recoverable=False, kind=kind)


FALLBACK_POLICY: dict[tuple[Stage, FailureMode], PolicyDecision] = {
    (Stage.TRANSCRIPT, FailureMode.EMPTY_CONTENT): _fatal(
        ErrorKind.NO_USABLE_CONTENT
    ),
    (Stage.TRANSCRIPT, FailureMode.UNAVAILABLE): _fatal(
        ErrorKind.UPSTREAM_UNAVAILABLE
    ),
    (Stage.TRANSCRIPT, FailureMode.UPSTREAM_FAILED): _fatal(ErrorKind.UPSTREAM_FAILED),
    (Stage.TRANSCRIPT, FailureMode.TIMEOUT): _fatal(ErrorKind.UPSTREAM_TIMEOUT),
    # No safe fabricated default exists for subject and intent.
    (Stage.CONTEXT, FailureMode.UNPARSEABLE): _fatal(ErrorKind.GENERATION_FAILED),
    (Stage.CONTEXT, FailureMode.CAPABILITY_ERROR): _fatal(
        ErrorKind.GENERATION_FAILED
    ),
    (Stage.LOCATIONS, FailureMode.UNPARSEABLE): _RECOVER,
    (Stage.LOCATIONS, FailureMode.CAPABILITY_ERROR): _RECOVER,
    (Stage.SHOTS, FailureMode.UNPARSEABLE): _RECOVER,
    (Stage.SHOTS, FailureMode.CAPABILITY_ERROR): _RECOVER,
}


def decide(stage: Stage, mode: FailureMode) -> PolicyDecision:
    """Look up how a failure should be handled."""
    return FALLBACK_POLICY.get((stage, mode), _fatal(ErrorKind.INTERNAL_ERROR))
