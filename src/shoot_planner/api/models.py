"""Wire models for the HTTP surface.

The core uses snake_case; the browser client speaks camelCase. These
subclasses only add the alias mapping at the boundary.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from shoot_planner.domain.plans import (
    GeneratedImageAsset,
    IntakeForm,
    LocationCandidate,
    PlanningContext,
    ShotPlan,
)
from shoot_planner.domain.requests import SessionRequest, StageSelector
from shoot_planner.domain.responses import SessionResponse
from shoot_planner.domain.results import ErrorKind

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiIntakeForm(IntakeForm):
    """Data collection payload from the voice agent."""

    model_config = _CAMEL


class ApiPlanningContext(PlanningContext):
    """Planning context as sent to and from the browser."""

    model_config = _CAMEL


class ApiLocation(LocationCandidate):
    """Location candidate as sent to and from the browser."""

    model_config = _CAMEL


class ApiImageAsset(GeneratedImageAsset):
    """Storyboard image reference for the browser."""

    model_config = _CAMEL


class ApiShot(ShotPlan):
    """Shot plan for the browser."""

    model_config = _CAMEL

    storyboard_image: ApiImageAsset | None = None


class ProcessSessionRequest(BaseModel):
    """Body of POST /sessions/process."""

    model_config = _CAMEL

    conversation_id: str | None = None
    transcript: str | None = None
    intake_form: ApiIntakeForm | None = None
    stage: str | None = None
    generate_images: bool = False
    max_images: int | None = None
    context: ApiPlanningContext | None = None
    locations: list[ApiLocation] | None = None

    def to_session_request(self) -> SessionRequest:
        """Convert to the core request type."""
        return SessionRequest(
            stage=StageSelector.parse(self.stage),
            conversation_id=self.conversation_id,
            transcript=self.transcript,
            intake_form=(
                IntakeForm.model_validate(self.intake_form.model_dump())
                if self.intake_form
                else None
            ),
            generate_images=self.generate_images,
            max_images=self.max_images,
            context=(
                PlanningContext.model_validate(self.context.model_dump())
                if self.context
                else None
            ),
            locations=(
                [
                    LocationCandidate.model_validate(location.model_dump())
                    for location in self.locations
                ]
                if self.locations is not None
                else None
            ),
        )


class ProcessSessionResponse(BaseModel):
    """Response envelope with camelCase keys."""

    model_config = _CAMEL

    success: bool
    correlation_id: str
    stage: str
    conversation_id: str | None = None
    timestamp: datetime
    context: ApiPlanningContext | None = None
    locations: list[ApiLocation] | None = None
    shots: list[ApiShot] | None = None
    error_kind: ErrorKind | None = None
    message: str | None = None

    @classmethod
    def from_session_response(
        cls, response: SessionResponse
    ) -> "ProcessSessionResponse":
        """Re-key a core response for the wire."""
        return cls.model_validate(response.model_dump())
