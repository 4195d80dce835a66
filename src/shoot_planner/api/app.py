"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shoot_planner.api.models import ProcessSessionRequest, ProcessSessionResponse
from shoot_planner.app_logging import configure_logging
from shoot_planner.containers import AppContainer
from shoot_planner.domain.responses import SessionResponse
from shoot_planner.domain.results import ErrorKind, PipelineError, Stage

_STATUS_BY_KIND = {
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NO_USABLE_CONTENT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UPSTREAM_UNAVAILABLE: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.UPSTREAM_FAILED: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.UPSTREAM_TIMEOUT: status.HTTP_504_GATEWAY_TIMEOUT,
    ErrorKind.GENERATION_FAILED: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(RequestValidationError)
    async def invalid_body_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Render malformed bodies in the same envelope as pipeline failures."""
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(
            str(part) for part in first.get("loc", ()) if part != "body"
        )
        message = (
            f"Invalid request body at {field or 'body'}: "
            f"{first.get('msg', 'invalid value')}"
        )
        logger.info("Rejected request: %s", message)
        return _render(
            SessionResponse.failure(
                uuid4().hex, ErrorKind.INVALID_INPUT, message, Stage.INPUT
            )
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/sessions/process")
    async def process_session(
        body: ProcessSessionRequest, request: Request
    ) -> JSONResponse:
        """Run the planning pipeline for one conversation."""
        state_container: AppContainer = request.app.state.container
        try:
            session_request = body.to_session_request()
        except PipelineError as exc:
            logger.info("Rejected request: %s", exc.message)
            return _render(
                SessionResponse.failure(uuid4().hex, exc.kind, exc.message, exc.stage)
            )
        result = await state_container.orchestrator.process(session_request)
        return _render(result)

    return app


def _render(result: SessionResponse) -> JSONResponse:
    status_code = (
        status.HTTP_200_OK
        if result.success
        else _STATUS_BY_KIND.get(
            result.error_kind or ErrorKind.INTERNAL_ERROR,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    )
    payload = ProcessSessionResponse.from_session_response(result)
    return JSONResponse(
        status_code=status_code,
        content=payload.model_dump(mode="json", by_alias=True, exclude_none=True),
    )
