"""Transcript acquisition from the conversation capability."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Protocol

import httpx

from shoot_planner.domain.results import ErrorKind, PipelineError, Stage
from shoot_planner.domain.transcripts import (
    ConversationRecord,
    ConversationStatus,
    Transcript,
    Turn,
)
from shoot_planner.services.policy import FailureMode, decide


class ConversationClient(Protocol):
    """Interface for fetching recorded conversations."""

    async def get_conversation(self, conversation_id: str) -> ConversationRecord:
        """Return the current status and turns of a conversation."""


@dataclass
class TranscriptService:
    """Polls a conversation until it settles and flattens its transcript."""

    client: ConversationClient
    poll_interval_seconds: float = 2.0
    poll_attempts: int = 30
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep)

    async def acquire(self, conversation_id: str, log: logging.LoggerAdapter) -> str:
        """Wait for a terminal status and return the transcript text."""
        for attempt in range(1, self.poll_attempts + 1):
            try:
                record = await self.client.get_conversation(conversation_id)
            except httpx.HTTPError as exc:
                raise _fatal(
                    FailureMode.UNAVAILABLE,
                    f"Conversation service unreachable: {exc}",
                ) from exc

            if record.status == ConversationStatus.DONE:
                log.info(
                    "Conversation %s done after %s attempt(s), turns=%s",
                    conversation_id,
                    attempt,
                    len(record.turns),
                )
                return flatten(record.turns)
            if record.status == ConversationStatus.FAILED:
                raise _fatal(
                    FailureMode.UPSTREAM_FAILED,
                    f"Conversation {conversation_id} failed upstream",
                )

            log.info(
                "Conversation %s status=%s (attempt %s/%s)",
                conversation_id,
                record.status,
                attempt,
                self.poll_attempts,
            )
            if attempt < self.poll_attempts:
                await self.sleep(self.poll_interval_seconds)

        raise _fatal(
            FailureMode.TIMEOUT,
            f"Conversation {conversation_id} not ready after "
            f"{self.poll_attempts} attempts",
        )

    def from_text(self, raw: str) -> str:
        """Apply the emptiness guard to a transcript supplied directly."""
        if not raw.strip():
            raise _fatal(FailureMode.EMPTY_CONTENT, "Transcript has no usable content")
        return raw.strip()


def flatten(turns: list[Turn]) -> str:
    """Collapse turns into text, failing when nothing usable remains."""
    transcript = Transcript(turns=turns)
    if not transcript.has_content:
        raise _fatal(
            FailureMode.EMPTY_CONTENT, "Conversation transcript has no usable content"
        )
    return transcript.as_text()


def _fatal(mode: FailureMode, message: str) -> PipelineError:
    decision = decide(Stage.TRANSCRIPT, mode)
    return PipelineError(
        decision.kind or ErrorKind.INTERNAL_ERROR, message, Stage.TRANSCRIPT
    )
