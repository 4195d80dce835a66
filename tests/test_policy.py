"""Tests for the fallback policy table."""

import pytest

from shoot_planner.domain.results import ErrorKind, Stage
from shoot_planner.services.policy import FailureMode, decide


@pytest.mark.parametrize("stage", [Stage.LOCATIONS, Stage.SHOTS])
@pytest.mark.parametrize(
    "mode", [FailureMode.UNPARSEABLE, FailureMode.CAPABILITY_ERROR]
)
def test_plan_stages_recover_with_defaults(stage: Stage, mode: FailureMode) -> None:
    assert decide(stage, mode).recoverable is True


def test_context_failures_are_fatal() -> None:
    decision = decide(Stage.CONTEXT, FailureMode.UNPARSEABLE)

    assert decision.recoverable is False
    assert decision.kind == ErrorKind.GENERATION_FAILED


@pytest.mark.parametrize(
    ("mode", "kind"),
    [
        (FailureMode.EMPTY_CONTENT, ErrorKind.NO_USABLE_CONTENT),
        (FailureMode.UNAVAILABLE, ErrorKind.UPSTREAM_UNAVAILABLE),
        (FailureMode.UPSTREAM_FAILED, ErrorKind.UPSTREAM_FAILED),
        (FailureMode.TIMEOUT, ErrorKind.UPSTREAM_TIMEOUT),
    ],
)
def test_transcript_failures_map_to_kinds(mode: FailureMode, kind: ErrorKind) -> None:
    decision = decide(Stage.TRANSCRIPT, mode)

    assert decision.recoverable is False
    assert decision.kind == kind


def test_unknown_combination_is_internal_error() -> None:
    decision = decide(Stage.IMAGES, FailureMode.TIMEOUT)

    assert decision.recoverable is False
    assert decision.kind == ErrorKind.INTERNAL_ERROR
