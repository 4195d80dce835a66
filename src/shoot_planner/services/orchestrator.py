"""Session orchestrator sequencing the planning stages."""

import logging
import time
from dataclasses import dataclass, field
from uuid import uuid4

from shoot_planner.app_logging import request_logger
from shoot_planner.domain.plans import LocationCandidate, PlanningContext, ShotPlan
from shoot_planner.domain.requests import SessionRequest
from shoot_planner.domain.responses import SessionResponse
from shoot_planner.domain.results import (
    ErrorKind,
    Fatal,
    PipelineError,
    RecoverableDefault,
    Stage,
    StageResult,
    T,
)
from shoot_planner.services.context import ContextExtractor, context_from_intake_form
from shoot_planner.services.images import StoryboardImageService
from shoot_planner.services.locations import LocationPlanner
from shoot_planner.services.shots import ShotPlanner
from shoot_planner.services.transcripts import TranscriptService


@dataclass
class _PlanState:
    """Accumulates stage outputs for one request."""

    context: PlanningContext | None = None
    locations: list[LocationCandidate] | None = None
    shots: list[ShotPlan] | None = None
    produced: set[Stage] = field(default_factory=set)


@dataclass
class SessionOrchestrator:
    """Runs the stages a request needs and assembles the response."""

    transcript_service: TranscriptService
    context_extractor: ContextExtractor
    location_planner: LocationPlanner
    shot_planner: ShotPlanner
    image_service: StoryboardImageService | None = None

    async def process(self, request: SessionRequest) -> SessionResponse:
        """Process one request; never raises for pipeline failures."""
        correlation_id = uuid4().hex
        log = request_logger(correlation_id)
        current = Stage.INPUT
        state = _PlanState(context=request.context, locations=request.locations)
        try:
            request.validate()
            stages = request.stages()
            log.info(
                "Pipeline started: selector=%s stages=%s images=%s",
                request.stage,
                ",".join(stages),
                request.generate_images,
            )
            for stage in stages:
                current = stage
                started = time.monotonic()
                log.info("Stage %s started", stage)
                await self._run_stage(stage, request, state, log)
                state.produced.add(stage)
                log.info(
                    "Stage %s finished in %.2fs", stage, time.monotonic() - started
                )

            if request.generate_images and Stage.SHOTS in state.produced:
                current = Stage.IMAGES
                await self._run_images(request, state, correlation_id, log)
        except PipelineError as exc:
            log.error(
                "Pipeline failed at %s: kind=%s message=%s",
                exc.stage,
                exc.kind,
                exc.message,
            )
            return SessionResponse.failure(
                correlation_id, exc.kind, exc.message, exc.stage
            )
        except Exception:
            log.exception("Unexpected pipeline failure at %s", current)
            return SessionResponse.failure(
                correlation_id,
                ErrorKind.INTERNAL_ERROR,
                "An unexpected error occurred",
                current,
            )

        log.info("Pipeline finished: produced=%s", ",".join(sorted(state.produced)))
        return SessionResponse(
            success=True,
            correlation_id=correlation_id,
            stage=str(request.stage),
            conversation_id=request.conversation_id,
            context=state.context if Stage.CONTEXT in state.produced else None,
            locations=state.locations if Stage.LOCATIONS in state.produced else None,
            shots=state.shots if Stage.SHOTS in state.produced else None,
        )

    async def _run_stage(
        self,
        stage: Stage,
        request: SessionRequest,
        state: _PlanState,
        log: logging.LoggerAdapter,
    ) -> None:
        if stage == Stage.CONTEXT:
            state.context = await self._resolve_context(request, log)
        elif stage == Stage.LOCATIONS:
            context = _require(state.context, stage)
            result = await self.location_planner.plan(context, log)
            state.locations = _unwrap(result, log)
            log.info("Locations planned: count=%s", len(state.locations))
        elif stage == Stage.SHOTS:
            context = _require(state.context, stage)
            locations = _require(state.locations, stage)
            result = await self.shot_planner.plan(context, locations, log)
            state.shots = _unwrap(result, log)
            log.info("Shots planned: count=%s", len(state.shots))

    async def _resolve_context(
        self, request: SessionRequest, log: logging.LoggerAdapter
    ) -> PlanningContext:
        if request.intake_form is not None:
            log.info("Using structured intake form for context")
            return context_from_intake_form(request.intake_form)
        if request.conversation_id is not None:
            log.info("Acquiring transcript for conversation %s", request.conversation_id)
            transcript = await self.transcript_service.acquire(
                request.conversation_id, log
            )
        else:
            transcript = self.transcript_service.from_text(request.transcript or "")
        result = await self.context_extractor.extract(transcript, log)
        return _unwrap(result, log)

    async def _run_images(
        self,
        request: SessionRequest,
        state: _PlanState,
        correlation_id: str,
        log: logging.LoggerAdapter,
    ) -> None:
        if self.image_service is None:
            log.warning("Image generation requested but no image service configured")
            return
        report = await self.image_service.illustrate(
            shots=_require(state.shots, Stage.IMAGES),
            locations=_require(state.locations, Stage.IMAGES),
            context=_require(state.context, Stage.IMAGES),
            request_id=correlation_id,
            log=log,
            max_images=request.max_images,
        )
        state.shots = report.shots
        log.info(
            "Images attempted=%s succeeded=%s", report.attempted, report.succeeded
        )


def _unwrap(result: StageResult[T], log: logging.LoggerAdapter) -> T:
    """Return the stage value or raise the stage's fatal error."""
    if isinstance(result, Fatal):
        raise result.to_error()
    if isinstance(result, RecoverableDefault):
        log.warning("Substituted default output: %s", result.reason)
    return result.value


def _require(value: T | None, stage: Stage) -> T:
    if value is None:
        raise PipelineError(
            ErrorKind.INVALID_INPUT, f"Missing input for stage {stage}", stage
        )
    return value
