"""Shot list and storyboard planning stage."""

import json
import logging
from dataclasses import dataclass
from functools import partial

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from shoot_planner.domain.plans import LocationCandidate, PlanningContext, ShotPlan
from shoot_planner.domain.results import Stage, StageResult
from shoot_planner.services.generation import GenerationTask, SchemaGuidedGenerator

MAX_SHOTS = 8
SHOTS_PER_LOCATION = 2

_SHOT_FIELDS = {
    "location_index": {"type": "integer"},
    "shot_number": {"type": "integer"},
    "title": {"type": "string"},
    "ideal_lighting": {"type": "string"},
    "framing_composition": {"type": "string"},
    "body_positions_poses": {"type": "string"},
    "blocking_environment": {"type": "string"},
    "communication_cues": {"type": "string"},
    "image_prompt": {"type": "string"},
    "technical_notes": {"type": "string"},
    "equipment": {"type": "array", "items": {"type": "string"}},
}

SHOTS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "shots": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": _SHOT_FIELDS,
                "required": list(_SHOT_FIELDS),
                "additionalProperties": False,
            },
        }
    },
    "required": ["shots"],
    "additionalProperties": False,
}


class _GeneratedShot(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    location_index: int
    shot_number: int
    title: str
    ideal_lighting: str | None = None
    framing_composition: str | None = None
    body_positions_poses: str = ""
    blocking_environment: str | None = None
    communication_cues: str | None = None
    image_prompt: str
    technical_notes: str = ""
    equipment: list[str] = Field(default_factory=list)


def shot_count(location_count: int) -> int:
    """Number of shots to request for a set of locations."""
    return min(MAX_SHOTS, location_count * SHOTS_PER_LOCATION)


def default_shots(locations: list[LocationCandidate]) -> list[ShotPlan]:
    """Documented fallback shot list, valid for any non-empty location list."""
    second_index = min(1, len(locations) - 1)
    return [
        ShotPlan(
            location_index=0,
            shot_number=1,
            title="Establishing portrait",
            image_prompt=(
                "Subjects standing together in the open, full-length, location "
                "visible around them"
            ),
            pose_instruction="Stand close, weight on the back foot, look at each other",
            technical_notes="35mm, f/4, 1/500s, expose for the faces",
            equipment=["35mm lens"],
            ideal_lighting="Soft side light or backlight",
            framing_composition="Wide shot, subjects on the lower third",
            blocking_environment="Subjects centered with leading lines behind them",
            communication_cues="Walk toward me slowly and talk to each other",
        ),
        ShotPlan(
            location_index=second_index,
            shot_number=2,
            title="Close connection",
            image_prompt="Tight head-and-shoulders frame, candid laughter, soft background",
            pose_instruction="Foreheads close, eyes closed, relaxed shoulders",
            technical_notes="85mm, f/2, 1/640s, focus on the nearest eye",
            equipment=["85mm lens"],
            ideal_lighting="Open shade",
            framing_composition="Close-up, shallow depth of field",
            blocking_environment="Subjects a few steps in front of the background",
            communication_cues="Whisper something that makes them laugh",
        ),
    ]


@dataclass
class ShotPlanner:
    """Creates a shot list distributed across the chosen locations."""

    generator: SchemaGuidedGenerator

    async def plan(
        self,
        context: PlanningContext,
        locations: list[LocationCandidate],
        log: logging.LoggerAdapter,
    ) -> StageResult[list[ShotPlan]]:
        """Generate shots; invalid indices or numbering count as parse failures."""
        task = GenerationTask(
            stage=Stage.SHOTS,
            schema_name="storyboard_shots",
            schema=SHOTS_SCHEMA,
            parse=partial(parse_shots, location_count=len(locations)),
            default_factory=partial(default_shots, locations),
        )
        return await self.generator.run(
            task, build_shot_prompt(context, locations), log
        )


def build_shot_prompt(
    context: PlanningContext, locations: list[LocationCandidate]
) -> str:
    """Prompt for a storyboard assistant."""
    opportunities = [
        {
            "location_index": index,
            "location": location.name,
            "time_of_day": location.best_time,
            "primary_subjects": context.primary_subjects or context.subject,
            "secondary_subjects": context.secondary_subjects or "",
            "shot_description": f"{context.shoot_type} shot at {location.name}",
        }
        for index, location in enumerate(locations)
    ]
    subjects = context.primary_subjects or context.subject
    if context.secondary_subjects:
        subjects = f"{subjects} and {context.secondary_subjects}"
    return (
        "You are an experienced portrait and wedding photographer and creative "
        "director who plans every frame and directs subjects with confidence.\n"
        "Propose a storyboard for these photo opportunities:\n"
        f"{json.dumps(opportunities, indent=2)}\n\n"
        f"Shoot type: {context.shoot_type}\n"
        f"Mood/style: {', '.join(context.mood)}\n"
        f"Duration: {context.duration}\n"
        f"Date: {context.date or 'TBD'}\n"
        f"Special requirements: {context.special_requests or 'None'}\n"
        f"Must-have shots: {context.must_have_shots or 'None specified'}\n\n"
        f"Create exactly {shot_count(len(locations))} shots balanced across the "
        "locations. location_index must be one of the indices above. "
        "shot_number starts at 1 and increases by one. Mix wide, medium and "
        f"close-up frames, and make communication cues fit {subjects}. "
        "image_prompt is a 30-word description of the frame for a sketch artist."
    )


def parse_shots(payload: object, *, location_count: int) -> list[ShotPlan]:
    """Validate generated shots against the location list."""
    if isinstance(payload, dict):
        payload = payload.get("shots")
    if not isinstance(payload, list) or not payload:
        raise ValueError("shots payload must be a non-empty list")

    shots = [_to_shot_plan(_GeneratedShot.model_validate(item)) for item in payload]
    for shot in shots:
        if not 0 <= shot.location_index < location_count:
            raise ValueError(
                f"shot {shot.shot_number} has location index {shot.location_index} "
                f"outside 0..{location_count - 1}"
            )
    numbers = sorted(shot.shot_number for shot in shots)
    if numbers != list(range(1, len(shots) + 1)):
        raise ValueError(f"shot numbers must be 1..{len(shots)}, got {numbers}")
    return sorted(shots, key=lambda shot: shot.shot_number)


def _to_shot_plan(shot: _GeneratedShot) -> ShotPlan:
    return ShotPlan(
        location_index=shot.location_index,
        shot_number=shot.shot_number,
        title=shot.title,
        image_prompt=shot.image_prompt,
        pose_instruction=shot.body_positions_poses,
        technical_notes=shot.technical_notes,
        equipment=shot.equipment,
        ideal_lighting=shot.ideal_lighting,
        framing_composition=shot.framing_composition,
        blocking_environment=shot.blocking_environment,
        communication_cues=shot.communication_cues,
    )
