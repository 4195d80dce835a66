"""Schema-guided structured generation with parse recovery.

Every generation stage (context, locations, shots) goes through
:class:`SchemaGuidedGenerator`. A single attempt is:

1. ask the structured-generation capability for text constrained to a schema;
2. strict parse of the text as JSON, validated by the stage's ``parse``;
3. lenient parse after stripping code fences and surrounding prose.

Attempts repeat up to ``max_attempts``. When all attempts fail, the fallback
policy decides between the stage's documented default and a fatal result.
"""

import json
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar

from shoot_planner.domain.results import (
    ErrorKind,
    Fatal,
    Ok,
    RecoverableDefault,
    Stage,
    StageResult,
)
from shoot_planner.services.policy import FailureMode, decide

T = TypeVar("T")

_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)

_PARSE_ERRORS = (ValueError, TypeError, KeyError)


class StructuredGenerationClient(Protocol):
    """Interface for schema-constrained text generation."""

    async def generate(
        self, *, prompt: str, schema: dict[str, object], schema_name: str
    ) -> str:
        """Return model text expected to match the schema."""


class GenerationParseError(ValueError):
    """Raised when generated text cannot be parsed into the stage shape."""


@dataclass(frozen=True)
class GenerationTask(Generic[T]):
    """Describes one stage's schema, parser and default."""

    stage: Stage
    schema_name: str
    schema: dict[str, object]
    parse: Callable[[object], T]
    default_factory: Callable[[], T] | None = None


@dataclass
class SchemaGuidedGenerator:
    """Run a generation task with strict/lenient parsing and fallbacks."""

    client: StructuredGenerationClient
    max_attempts: int = 2

    async def run(
        self,
        task: GenerationTask[T],
        prompt: str,
        log: logging.LoggerAdapter,
    ) -> StageResult[T]:
        """Generate, parse and validate one stage output."""
        failure_mode = FailureMode.UNPARSEABLE
        failure_reason = "no attempts made"
        for attempt in range(1, self.max_attempts + 1):
            try:
                text = await self.client.generate(
                    prompt=prompt, schema=task.schema, schema_name=task.schema_name
                )
            except Exception as exc:
                failure_mode = FailureMode.CAPABILITY_ERROR
                failure_reason = f"generation call failed: {exc}"
                log.warning(
                    "Generation %s failed (attempt %s/%s): %s",
                    task.stage,
                    attempt,
                    self.max_attempts,
                    exc,
                )
                continue
            try:
                return Ok(parse_structured(text, task.parse))
            except GenerationParseError as exc:
                failure_mode = FailureMode.UNPARSEABLE
                failure_reason = str(exc)
                log.warning(
                    "Generation %s unparseable (attempt %s/%s): %s",
                    task.stage,
                    attempt,
                    self.max_attempts,
                    exc,
                )

        decision = decide(task.stage, failure_mode)
        if decision.recoverable and task.default_factory is not None:
            log.warning("Generation %s using documented defaults", task.stage)
            return RecoverableDefault(task.default_factory(), reason=failure_reason)
        return Fatal(
            kind=decision.kind or ErrorKind.INTERNAL_ERROR,
            message=f"Failed to generate {task.stage}: {failure_reason}",
            stage=task.stage,
        )


def parse_structured(text: str, parse: Callable[[object], T]) -> T:
    """Parse text strictly, then leniently after stripping formatting."""
    try:
        return parse(json.loads(text))
    except _PARSE_ERRORS as strict_error:
        cleaned = strip_formatting(text)
        try:
            return parse(json.loads(cleaned))
        except _PARSE_ERRORS as lenient_error:
            raise GenerationParseError(
                f"strict: {_short(strict_error)}; lenient: {_short(lenient_error)}"
            ) from lenient_error


def strip_formatting(text: str) -> str:
    """Remove code fences and any prose around the JSON payload."""
    cleaned = _FENCE.sub("", text).strip()
    starts = [index for index in (cleaned.find("{"), cleaned.find("[")) if index >= 0]
    if not starts:
        return cleaned
    start = min(starts)
    end = max(cleaned.rfind("}"), cleaned.rfind("]"))
    if end < start:
        return cleaned[start:]
    return cleaned[start : end + 1]


def _short(error: Exception) -> str:
    message = str(error).splitlines()[0] if str(error) else type(error).__name__
    return message[:200]
