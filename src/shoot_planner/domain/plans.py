"""Models for the generated photo-shoot plan."""

from pydantic import BaseModel, Field

DEFAULT_SHOOT_TYPE = "portrait"
DEFAULT_MOOD = ("natural", "candid")
DEFAULT_TIME_OF_DAY = "flexible"
DEFAULT_DURATION = "2 hours"
DEFAULT_EXPERIENCE = "intermediate"
DEFAULT_LOCATION_PREFERENCE = "clustered"


class IntakeForm(BaseModel):
    """Pre-structured answers collected by the voice agent."""

    shoot_type: str | None = None
    mood: str | None = None
    primary_subjects: str | None = None
    secondary_subjects: str | None = None
    duration: str | None = None
    experience: str | None = None
    special_requirements: str | None = None
    must_have_shots: str | None = None
    location: str | None = None
    date: str | None = None
    start_time: str | None = None
    location_preference: str | None = None


class PlanningContext(BaseModel):
    """Intent extracted from the planning conversation."""

    shoot_type: str = DEFAULT_SHOOT_TYPE
    mood: list[str] = Field(default_factory=lambda: list(DEFAULT_MOOD))
    time_of_day: str = DEFAULT_TIME_OF_DAY
    subject: str
    duration: str = DEFAULT_DURATION
    equipment: list[str] = Field(default_factory=list)
    experience: str = DEFAULT_EXPERIENCE
    special_requests: str | None = None
    location: str | None = None
    date: str | None = None
    start_time: str | None = None
    location_preference: str = DEFAULT_LOCATION_PREFERENCE
    must_have_shots: str | None = None
    primary_subjects: str | None = None
    secondary_subjects: str | None = None


class LocationCandidate(BaseModel):
    """A suggested shooting location."""

    name: str
    address: str | None = None
    description: str
    best_time: str
    lighting_notes: str
    accessibility: str
    permits: str
    alternatives: list[str] = Field(default_factory=list)


class GeneratedImageAsset(BaseModel):
    """Reference to a persisted storyboard image."""

    uri: str
    shot_number: int
    success: bool = True


class ShotPlan(BaseModel):
    """One planned photograph."""

    location_index: int = Field(ge=0)
    shot_number: int = Field(ge=1)
    title: str
    image_prompt: str
    pose_instruction: str
    technical_notes: str
    equipment: list[str] = Field(default_factory=list)
    ideal_lighting: str | None = None
    framing_composition: str | None = None
    blocking_environment: str | None = None
    communication_cues: str | None = None
    storyboard_image: GeneratedImageAsset | None = None
