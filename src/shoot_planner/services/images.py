"""Concurrent storyboard sketch generation."""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Protocol

from shoot_planner.domain.plans import (
    GeneratedImageAsset,
    LocationCandidate,
    PlanningContext,
    ShotPlan,
)

DEFAULT_MAX_IMAGES = 6

STORYBOARD_STYLE = (
    "Monochrome pencil storyboard sketch on white paper. Loose confident line "
    "work, simple hatching for shadows, no color, no text or labels. Show the "
    "camera angle and framing clearly, keep the subjects readable as simple "
    "figures, and sketch the background only as much as the composition needs."
)


class ImageGenerationClient(Protocol):
    """Interface for text-to-image generation."""

    async def generate_image(self, *, prompt: str, aspect_ratio: str) -> bytes:
        """Return encoded image bytes for the prompt."""


class ObjectStorage(Protocol):
    """Interface for persisting generated files."""

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        """Store bytes under key and return a public URI."""


@dataclass(frozen=True)
class ImageFanOutReport:
    """Outcome of one fan-out round."""

    attempted: int
    succeeded: int
    shots: list[ShotPlan]


@dataclass
class StoryboardImageService:
    """Illustrates shots in parallel, tolerating individual failures."""

    image_client: ImageGenerationClient
    storage: ObjectStorage
    default_max_images: int = DEFAULT_MAX_IMAGES
    aspect_ratio: str = "16:9"

    async def illustrate(  # noqa: PLR0913
        self,
        *,
        shots: list[ShotPlan],
        locations: list[LocationCandidate],
        context: PlanningContext,
        request_id: str,
        log: logging.LoggerAdapter,
        max_images: int | None = None,
    ) -> ImageFanOutReport:
        """Generate and persist one sketch per selected shot."""
        limit = self.default_max_images if max_images is None else max_images
        selected = sorted(shots, key=lambda shot: shot.shot_number)[
            : min(limit, len(shots))
        ]
        if not selected:
            return ImageFanOutReport(attempted=0, succeeded=0, shots=list(shots))

        results = await asyncio.gather(
            *[
                self._illustrate_one(
                    shot, locations, context, request_id, index, log
                )
                for index, shot in enumerate(selected)
            ],
            return_exceptions=True,
        )

        assets: dict[int, GeneratedImageAsset] = {}
        for shot, result in zip(selected, results, strict=True):
            if isinstance(result, BaseException):
                log.warning(
                    "Storyboard image for shot %s failed: %s", shot.shot_number, result
                )
                continue
            assets[shot.shot_number] = result

        illustrated = [
            shot.model_copy(update={"storyboard_image": assets[shot.shot_number]})
            if shot.shot_number in assets
            else shot
            for shot in shots
        ]
        log.info(
            "Storyboard images: %s/%s succeeded", len(assets), len(selected)
        )
        return ImageFanOutReport(
            attempted=len(selected), succeeded=len(assets), shots=illustrated
        )

    async def _illustrate_one(  # noqa: PLR0913
        self,
        shot: ShotPlan,
        locations: list[LocationCandidate],
        context: PlanningContext,
        request_id: str,
        index: int,
        log: logging.LoggerAdapter,
    ) -> GeneratedImageAsset:
        prompt = build_image_prompt(shot, locations, context)
        image_bytes = await self.image_client.generate_image(
            prompt=prompt, aspect_ratio=self.aspect_ratio
        )
        key = storage_key(request_id, shot.shot_number, index)
        uri = await self.storage.put(key, image_bytes, "image/jpeg")
        log.info("Storyboard image for shot %s stored at %s", shot.shot_number, key)
        return GeneratedImageAsset(uri=uri, shot_number=shot.shot_number)


def build_image_prompt(
    shot: ShotPlan, locations: list[LocationCandidate], context: PlanningContext
) -> str:
    """Compose a deterministic sketch prompt for one shot."""
    location = (
        locations[shot.location_index]
        if 0 <= shot.location_index < len(locations)
        else None
    )
    parts = [
        STORYBOARD_STYLE,
        f"Shot {shot.shot_number}: {shot.title}.",
        f"Scene: {shot.image_prompt}",
    ]
    if shot.framing_composition:
        parts.append(f"Framing: {shot.framing_composition}")
    if shot.pose_instruction:
        parts.append(f"Poses: {shot.pose_instruction}")
    if shot.technical_notes:
        parts.append(f"Camera: {shot.technical_notes}")
    if location is not None:
        parts.append(f"Setting: {location.name}. {location.description}")
    parts.append(f"Mood: {', '.join(context.mood)}")
    return "\n".join(parts)


def storage_key(request_id: str, shot_number: int, index: int) -> str:
    """Object key that stays unique across requests and retries."""
    timestamp_ms = int(time.time() * 1000)
    return f"{request_id}/shot-{shot_number:02d}-{index}-{timestamp_ms}.jpg"
