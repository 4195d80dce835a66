"""Response envelope returned by the pipeline."""

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from shoot_planner.domain.plans import LocationCandidate, PlanningContext, ShotPlan
from shoot_planner.domain.results import ErrorKind, Stage


class SessionResponse(BaseModel):
    """Either the produced plan parts or a typed failure."""

    success: bool
    correlation_id: str
    stage: str
    conversation_id: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(tz=UTC))
    context: PlanningContext | None = None
    locations: list[LocationCandidate] | None = None
    shots: list[ShotPlan] | None = None
    error_kind: ErrorKind | None = None
    message: str | None = None

    @classmethod
    def failure(
        cls, correlation_id: str, kind: ErrorKind, message: str, stage: Stage
    ) -> "SessionResponse":
        """Build a failure envelope naming the stage that failed."""
        return cls(
            success=False,
            correlation_id=correlation_id,
            stage=str(stage),
            error_kind=kind,
            message=message,
        )
