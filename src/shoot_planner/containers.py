"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from shoot_planner.adapters.elevenlabs_client import HttpxConversationClient
from shoot_planner.adapters.openai_generation_client import OpenAIStructuredClient
from shoot_planner.adapters.openai_image_client import OpenAIImageClient
from shoot_planner.adapters.supabase_object_storage import SupabaseObjectStorage
from shoot_planner.config import Settings
from shoot_planner.services.context import ContextExtractor
from shoot_planner.services.generation import SchemaGuidedGenerator
from shoot_planner.services.images import StoryboardImageService
from shoot_planner.services.locations import LocationPlanner
from shoot_planner.services.orchestrator import SessionOrchestrator
from shoot_planner.services.shots import ShotPlanner
from shoot_planner.services.transcripts import TranscriptService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    orchestrator: SessionOrchestrator
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    conversation_client = HttpxConversationClient.create(
        api_key=resolved_settings.elevenlabs_api_key,
        base_url=resolved_settings.elevenlabs_base_url,
    )
    generation_client = OpenAIStructuredClient.create(
        api_key=resolved_settings.openai_api_key,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    image_client = OpenAIImageClient.create(
        api_key=resolved_settings.openai_api_key,
        model=resolved_settings.openai_image_model,
    )
    generator = SchemaGuidedGenerator(
        client=generation_client,
        max_attempts=resolved_settings.generation_attempts,
    )
    orchestrator = SessionOrchestrator(
        transcript_service=TranscriptService(
            client=conversation_client,
            poll_interval_seconds=resolved_settings.poll_interval_seconds,
            poll_attempts=resolved_settings.poll_attempts,
        ),
        context_extractor=ContextExtractor(generator),
        location_planner=LocationPlanner(generator),
        shot_planner=ShotPlanner(generator),
        image_service=StoryboardImageService(
            image_client=image_client,
            storage=SupabaseObjectStorage(
                client=supabase_client, bucket=resolved_settings.storage_bucket
            ),
            default_max_images=resolved_settings.max_images,
            aspect_ratio=resolved_settings.image_aspect_ratio,
        ),
    )

    async def close_resources() -> None:
        await conversation_client.close()
        await generation_client.close()
        await image_client.close()

    return AppContainer(
        settings=resolved_settings,
        orchestrator=orchestrator,
        close_resources=close_resources,
    )
