"""Planning-context extraction from a conversation transcript."""

import logging
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from shoot_planner.domain.plans import (
    DEFAULT_DURATION,
    DEFAULT_EXPERIENCE,
    DEFAULT_LOCATION_PREFERENCE,
    DEFAULT_MOOD,
    DEFAULT_SHOOT_TYPE,
    DEFAULT_TIME_OF_DAY,
    IntakeForm,
    PlanningContext,
)
from shoot_planner.domain.results import (
    ErrorKind,
    PipelineError,
    Stage,
    StageResult,
)
from shoot_planner.services.generation import GenerationTask, SchemaGuidedGenerator

_NULLABLE_STRING = {"anyOf": [{"type": "string"}, {"type": "null"}]}

CONTEXT_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "shoot_type": _NULLABLE_STRING,
        "mood": {"type": "array", "items": {"type": "string"}},
        "time_of_day": _NULLABLE_STRING,
        "subject": {"type": "string"},
        "duration": _NULLABLE_STRING,
        "equipment": {"type": "array", "items": {"type": "string"}},
        "experience": _NULLABLE_STRING,
        "special_requests": _NULLABLE_STRING,
        "location": _NULLABLE_STRING,
        "date": _NULLABLE_STRING,
        "start_time": _NULLABLE_STRING,
        "location_preference": _NULLABLE_STRING,
    },
    "required": [
        "shoot_type",
        "mood",
        "time_of_day",
        "subject",
        "duration",
        "equipment",
        "experience",
        "special_requests",
        "location",
        "date",
        "start_time",
        "location_preference",
    ],
    "additionalProperties": False,
}

_MIN_MOODS = 2
_MAX_MOODS = 3


class _ExtractedContext(BaseModel):
    """Raw model output; every field may be missing."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    shoot_type: str | None = None
    mood: list[str] | str | None = None
    time_of_day: str | None = None
    subject: str | None = None
    duration: str | None = None
    equipment: list[str] | None = None
    experience: str | None = None
    special_requests: str | None = None
    location: str | None = None
    date: str | None = None
    start_time: str | None = None
    location_preference: str | None = None


@dataclass
class ContextExtractor:
    """Builds a PlanningContext from a transcript or an intake form."""

    generator: SchemaGuidedGenerator

    async def extract(
        self, transcript: str, log: logging.LoggerAdapter
    ) -> StageResult[PlanningContext]:
        """Extract the planning context with the structured generator."""
        task = GenerationTask(
            stage=Stage.CONTEXT,
            schema_name="planning_context",
            schema=CONTEXT_SCHEMA,
            parse=parse_context,
        )
        return await self.generator.run(task, build_context_prompt(transcript), log)


def build_context_prompt(transcript: str) -> str:
    """Prompt asking the model to pull shoot details out of a transcript."""
    return (
        "Extract photography shoot details from this conversation transcript "
        "between a photographer's planning assistant and a client.\n"
        "- shoot_type: kind of photography (portrait, wedding, lifestyle, "
        "branding, ...)\n"
        "- mood: 2-3 mood or style descriptors\n"
        "- time_of_day: preferred light, or 'flexible'\n"
        "- subject: who or what is being photographed\n"
        "- duration, equipment, experience, special_requests, location, date, "
        "start_time, location_preference (clustered or itinerary)\n"
        "Use null for anything that was not discussed. Do not invent a subject.\n\n"
        f"Transcript:\n{transcript}"
    )


def parse_context(payload: object) -> PlanningContext:
    """Validate model output and fill documented defaults."""
    if not isinstance(payload, dict):
        raise ValueError("context payload must be an object")
    raw = _ExtractedContext.model_validate(payload)
    subject = _clean(raw.subject)
    if subject is None:
        raise ValueError("context payload has no subject")
    return PlanningContext(
        shoot_type=_clean(raw.shoot_type) or DEFAULT_SHOOT_TYPE,
        mood=_normalize_mood(raw.mood),
        time_of_day=_clean(raw.time_of_day) or DEFAULT_TIME_OF_DAY,
        subject=subject,
        duration=_clean(raw.duration) or DEFAULT_DURATION,
        equipment=[item.strip() for item in raw.equipment or [] if item.strip()],
        experience=_clean(raw.experience) or DEFAULT_EXPERIENCE,
        special_requests=_clean(raw.special_requests),
        location=_clean(raw.location),
        date=_clean(raw.date),
        start_time=_clean(raw.start_time),
        location_preference=(
            _clean(raw.location_preference) or DEFAULT_LOCATION_PREFERENCE
        ),
    )


def context_from_intake_form(form: IntakeForm) -> PlanningContext:
    """Map the voice agent's data collection directly, without a model call."""
    primary = _clean(form.primary_subjects)
    secondary = _clean(form.secondary_subjects)
    subject = ", ".join(part for part in (primary, secondary) if part)
    if not subject:
        raise PipelineError(
            ErrorKind.INVALID_INPUT,
            "Intake form names no primary or secondary subjects",
            Stage.CONTEXT,
        )
    return PlanningContext(
        shoot_type=_clean(form.shoot_type) or DEFAULT_SHOOT_TYPE,
        mood=_normalize_mood(form.mood),
        time_of_day=DEFAULT_TIME_OF_DAY,
        subject=subject,
        duration=_clean(form.duration) or DEFAULT_DURATION,
        equipment=[],
        experience=_clean(form.experience) or DEFAULT_EXPERIENCE,
        special_requests=(
            _clean(form.special_requirements) or _clean(form.must_have_shots)
        ),
        location=_clean(form.location),
        date=_clean(form.date),
        start_time=_clean(form.start_time),
        location_preference=(
            _clean(form.location_preference) or DEFAULT_LOCATION_PREFERENCE
        ),
        must_have_shots=_clean(form.must_have_shots),
        primary_subjects=primary,
        secondary_subjects=secondary,
    )


def _normalize_mood(raw: list[str] | str | None) -> list[str]:
    """Return 2-3 mood descriptors, padding with defaults."""
    if isinstance(raw, str):
        raw = raw.split(",")
    moods: list[str] = []
    for value in raw or []:
        cleaned = value.strip()
        if cleaned and cleaned.lower() not in {mood.lower() for mood in moods}:
            moods.append(cleaned)
    for default in DEFAULT_MOOD:
        if len(moods) >= _MIN_MOODS:
            break
        if default.lower() not in {mood.lower() for mood in moods}:
            moods.append(default)
    return moods[:_MAX_MOODS]


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None
