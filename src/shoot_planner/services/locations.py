"""Location scouting stage."""

import logging
from dataclasses import dataclass
from functools import partial

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from shoot_planner.domain.plans import LocationCandidate, PlanningContext
from shoot_planner.domain.results import Stage, StageResult
from shoot_planner.services.generation import GenerationTask, SchemaGuidedGenerator

MIN_LOCATIONS = 4
MAX_LOCATIONS = 5

_CLUSTER_HINTS = ("cluster", "close", "walk")
_NULLABLE_STRING = {"anyOf": [{"type": "string"}, {"type": "null"}]}

CLUSTERED_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "primary_location": {"type": "string"},
        "high_level_goals": {"type": "string"},
        "accessibility_note": _NULLABLE_STRING,
        "permit_requirement": _NULLABLE_STRING,
        "spots": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "description": {"type": "string"},
                    "why_it_works": {"type": "string"},
                    "time_and_lighting": {"type": "string"},
                },
                "required": ["name", "description", "why_it_works", "time_and_lighting"],
                "additionalProperties": False,
            },
        },
    },
    "required": [
        "primary_location",
        "high_level_goals",
        "accessibility_note",
        "permit_requirement",
        "spots",
    ],
    "additionalProperties": False,
}

ITINERARY_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "itinerary_title": {"type": "string"},
        "high_level_goals": {"type": "string"},
        "stops": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "location_name": {"type": "string"},
                    "travel_notes": {"type": "string"},
                    "accessibility_note": _NULLABLE_STRING,
                    "permit_requirement": _NULLABLE_STRING,
                    "shot_name": {"type": "string"},
                    "description": {"type": "string"},
                    "time_and_lighting": {"type": "string"},
                    "potential_shots": {"type": "string"},
                },
                "required": [
                    "location_name",
                    "travel_notes",
                    "accessibility_note",
                    "permit_requirement",
                    "shot_name",
                    "description",
                    "time_and_lighting",
                    "potential_shots",
                ],
                "additionalProperties": False,
            },
        },
    },
    "required": ["itinerary_title", "high_level_goals", "stops"],
    "additionalProperties": False,
}


class _LenientModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class _Spot(_LenientModel):
    name: str
    description: str
    why_it_works: str
    time_and_lighting: str


class _ClusteredPlan(_LenientModel):
    primary_location: str
    high_level_goals: str | None = None
    accessibility_note: str | None = None
    permit_requirement: str | None = None
    spots: list[_Spot]


class _Stop(_LenientModel):
    location_name: str
    travel_notes: str
    accessibility_note: str | None = None
    permit_requirement: str | None = None
    shot_name: str | None = None
    description: str
    time_and_lighting: str
    potential_shots: str


class _ItineraryPlan(_LenientModel):
    itinerary_title: str | None = None
    high_level_goals: str | None = None
    stops: list[_Stop]


class _StandardLocation(_LenientModel):
    name: str
    address: str | None = None
    description: str
    best_time: str
    lighting_notes: str
    accessibility: str
    permits: str
    alternatives: list[str] = []


def default_locations() -> list[LocationCandidate]:
    """Documented fallback used when location generation fails."""
    return [
        LocationCandidate(
            name="Main Location - Open Area",
            address=None,
            description=(
                "An open, uncluttered area with soft background separation and "
                "room for wide environmental frames."
            ),
            best_time="Golden hour, about one hour before sunset",
            lighting_notes="Backlight the subjects and use open shade for close-ups.",
            accessibility="Public access, level walking paths",
            permits="Not usually required for small portrait sessions",
            alternatives=["Main Location - Sheltered Spot"],
        ),
        LocationCandidate(
            name="Main Location - Sheltered Spot",
            address=None,
            description=(
                "A covered or shaded corner with textured walls or foliage for "
                "intimate, detail-focused frames."
            ),
            best_time="Any time; best in midday when open areas are harsh",
            lighting_notes="Even, diffused light; face subjects toward the opening.",
            accessibility="Short walk from the open area",
            permits="Check with the venue",
            alternatives=[],
        ),
    ]


def is_clustered(context: PlanningContext) -> bool:
    """True when the client wants spots close together."""
    preference = context.location_preference.lower()
    return any(hint in preference for hint in _CLUSTER_HINTS)


@dataclass
class LocationPlanner:
    """Suggests 4-5 shooting locations for a planning context."""

    generator: SchemaGuidedGenerator

    async def plan(
        self, context: PlanningContext, log: logging.LoggerAdapter
    ) -> StageResult[list[LocationCandidate]]:
        """Generate location candidates, falling back to the default pair."""
        clustered = is_clustered(context)
        task = GenerationTask(
            stage=Stage.LOCATIONS,
            schema_name="clustered_locations" if clustered else "location_itinerary",
            schema=CLUSTERED_SCHEMA if clustered else ITINERARY_SCHEMA,
            parse=partial(parse_locations, clustered=clustered),
            default_factory=default_locations,
        )
        log.info(
            "Planning locations in %s mode for %s",
            "clustered" if clustered else "itinerary",
            context.location or "the local area",
        )
        return await self.generator.run(
            task, build_location_prompt(context, clustered), log
        )


def build_location_prompt(context: PlanningContext, clustered: bool) -> str:
    """Prompt for an expert location scout."""
    location = context.location or "the local area"
    if clustered:
        layout = (
            "Clustered model: 4-5 distinct photo spots inside one small, walkable "
            "area (the same park, block or building). Maximize variety with "
            "minimal travel. Name the primary location and list each spot."
        )
    else:
        layout = (
            "Itinerary model: 4-5 stops that may be spread out but form a "
            "logical, efficient plan for a single day of shooting, in order, "
            "with travel notes between stops."
        )
    return (
        "You are an expert location scout and photographer's assistant with an "
        "eye for unique, beautiful and logistically sound photo spots.\n"
        f"Find locations in: {location}\n"
        f"Shoot type: {context.shoot_type}. Aesthetic: {', '.join(context.mood)}.\n"
        f"Date: {context.date or 'the scheduled date'}, starting at "
        f"{context.start_time or 'a flexible time'}, for {context.duration}.\n"
        f"Location preference: {context.location_preference}\n"
        f"{layout}\n\n"
        f"Primary subjects: {context.primary_subjects or context.subject}\n"
        f"Secondary subjects: {context.secondary_subjects or 'None'}\n"
        f"Must-have shots: {context.must_have_shots or 'None specified'}\n"
        f"Special requirements: {context.special_requests or 'None'}\n"
        f"Photographer experience: {context.experience}\n\n"
        "Prefer hidden gems and unique angles over generic tourist shots. "
        "From the start time, work out the light (golden hour, blue hour, "
        f"midday) and how it changes over the {context.duration} shoot."
    )


def parse_locations(payload: object, *, clustered: bool) -> list[LocationCandidate]:
    """Convert either scout layout into 4-5 location candidates."""
    if isinstance(payload, dict) and clustered and "spots" in payload:
        candidates = _from_clustered(_ClusteredPlan.model_validate(payload))
    elif isinstance(payload, dict) and "stops" in payload:
        candidates = _from_itinerary(_ItineraryPlan.model_validate(payload))
    elif isinstance(payload, dict) and "spots" in payload:
        candidates = _from_clustered(_ClusteredPlan.model_validate(payload))
    elif isinstance(payload, dict) and isinstance(payload.get("locations"), list):
        candidates = _from_standard(payload["locations"])
    elif isinstance(payload, list):
        candidates = _from_standard(payload)
    else:
        raise ValueError("unrecognized locations payload")

    if len(candidates) < MIN_LOCATIONS:
        raise ValueError(
            f"expected at least {MIN_LOCATIONS} locations, got {len(candidates)}"
        )
    return candidates[:MAX_LOCATIONS]


def _from_clustered(plan: _ClusteredPlan) -> list[LocationCandidate]:
    return [
        LocationCandidate(
            name=f"{plan.primary_location} - {spot.name}",
            address=plan.primary_location,
            description=spot.description,
            best_time=spot.time_and_lighting,
            lighting_notes=spot.why_it_works,
            accessibility=plan.accessibility_note or "See main location",
            permits=plan.permit_requirement or "Check with venue",
            alternatives=(
                [other.name for other in plan.spots[1:3]] if index == 0 else []
            ),
        )
        for index, spot in enumerate(plan.spots)
    ]


def _from_itinerary(plan: _ItineraryPlan) -> list[LocationCandidate]:
    return [
        LocationCandidate(
            name=stop.location_name,
            address=stop.travel_notes,
            description=stop.description,
            best_time=stop.time_and_lighting,
            lighting_notes=stop.potential_shots,
            accessibility=stop.accessibility_note or "Standard access",
            permits=stop.permit_requirement or "No special permits required",
            alternatives=[],
        )
        for stop in plan.stops
    ]


def _from_standard(items: list[object]) -> list[LocationCandidate]:
    return [
        LocationCandidate(**_StandardLocation.model_validate(item).model_dump())
        for item in items
    ]
