"""Request models for the session-processing pipeline."""

from dataclasses import dataclass
from enum import StrEnum

from shoot_planner.domain.plans import IntakeForm, LocationCandidate, PlanningContext
from shoot_planner.domain.results import ErrorKind, PipelineError, Stage


class StageSelector(StrEnum):
    """Which part of the plan the caller wants."""

    CONTEXT = "context"
    LOCATIONS = "locations"
    SHOTS = "shots"
    FULL = "full"

    @classmethod
    def parse(cls, raw: str | None) -> "StageSelector":
        """Parse a selector, accepting the legacy ``storyboard`` name."""
        if raw is None:
            return cls.FULL
        value = raw.strip().lower()
        if value == "storyboard":
            return cls.SHOTS
        try:
            return cls(value)
        except ValueError as exc:
            raise PipelineError(
                ErrorKind.INVALID_INPUT, f"Unknown stage: {raw}", Stage.INPUT
            ) from exc


_STAGE_PLAN = {
    StageSelector.CONTEXT: (Stage.CONTEXT,),
    StageSelector.LOCATIONS: (Stage.CONTEXT, Stage.LOCATIONS),
    StageSelector.SHOTS: (Stage.CONTEXT, Stage.LOCATIONS, Stage.SHOTS),
    StageSelector.FULL: (Stage.CONTEXT, Stage.LOCATIONS, Stage.SHOTS),
}


@dataclass(frozen=True)
class SessionRequest:  # noqa: PLR0902
    """A single invocation of the pipeline."""

    stage: StageSelector = StageSelector.FULL
    conversation_id: str | None = None
    transcript: str | None = None
    intake_form: IntakeForm | None = None
    generate_images: bool = False
    max_images: int | None = None
    context: PlanningContext | None = None
    locations: list[LocationCandidate] | None = None

    @property
    def source_count(self) -> int:
        sources = (self.conversation_id, self.transcript, self.intake_form)
        return sum(1 for source in sources if source is not None)

    def stages(self) -> list[Stage]:
        """Return the stages that must run, skipping caller-supplied outputs."""
        planned = list(_STAGE_PLAN[self.stage])
        if self.stage in {StageSelector.LOCATIONS, StageSelector.SHOTS}:
            if self.context is not None:
                planned.remove(Stage.CONTEXT)
            if self.stage == StageSelector.SHOTS and self.locations:
                planned.remove(Stage.LOCATIONS)
        return planned

    def validate(self) -> None:
        """Reject requests that cannot be satisfied before any stage runs."""
        if self.source_count > 1:
            raise PipelineError(
                ErrorKind.INVALID_INPUT,
                "Provide only one of conversationId, transcript or intakeForm",
                Stage.INPUT,
            )
        needs_context = Stage.CONTEXT in self.stages()
        if needs_context and self.source_count == 0:
            raise PipelineError(
                ErrorKind.INVALID_INPUT,
                "One of conversationId, transcript or intakeForm is required",
                Stage.INPUT,
            )
        if (
            needs_context
            and self.transcript is not None
            and not self.transcript.strip()
        ):
            raise PipelineError(
                ErrorKind.NO_USABLE_CONTENT,
                "Transcript has no usable content",
                Stage.INPUT,
            )
        if self.max_images is not None and self.max_images < 0:
            raise PipelineError(
                ErrorKind.INVALID_INPUT,
                "maxImages must not be negative",
                Stage.INPUT,
            )
