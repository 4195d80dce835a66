"""Tests for transcript acquisition."""

import asyncio

import httpx
import pytest

from shoot_planner.domain.results import ErrorKind, PipelineError, Stage
from shoot_planner.domain.transcripts import ConversationRecord, ConversationStatus, Turn
from shoot_planner.services.transcripts import TranscriptService, flatten
from tests.conftest import FakeConversationClient, RecordingSleep, done_record


def _service(
    client: FakeConversationClient, attempts: int = 30
) -> tuple[TranscriptService, RecordingSleep]:
    sleep = RecordingSleep()
    service = TranscriptService(
        client=client,
        poll_interval_seconds=2.0,
        poll_attempts=attempts,
        sleep=sleep,
    )
    return service, sleep


def test_done_conversation_is_flattened(log) -> None:
    client = FakeConversationClient(records=[done_record("Hello", "  ", "Engagement shoot")])
    service, sleep = _service(client)

    text = asyncio.run(service.acquire("conv-1", log))

    assert text == "agent: Hello\nagent: Engagement shoot"
    assert client.calls == 1
    assert sleep.delays == []


def test_polls_until_done(log) -> None:
    client = FakeConversationClient(
        records=[
            ConversationRecord(status=ConversationStatus.PENDING),
            ConversationRecord(status=ConversationStatus.PROCESSING),
            done_record("Hi", "Portraits please"),
        ]
    )
    service, sleep = _service(client)

    text = asyncio.run(service.acquire("conv-1", log))

    assert "Portraits please" in text
    assert client.calls == 3
    assert sleep.delays == [2.0, 2.0]


def test_failed_status_aborts_immediately(log) -> None:
    client = FakeConversationClient(
        records=[ConversationRecord(status=ConversationStatus.FAILED)]
    )
    service, sleep = _service(client)

    with pytest.raises(PipelineError) as exc_info:
        asyncio.run(service.acquire("conv-1", log))

    assert exc_info.value.kind == ErrorKind.UPSTREAM_FAILED
    assert exc_info.value.stage == Stage.TRANSCRIPT
    assert client.calls == 1
    assert sleep.delays == []


def test_never_terminal_times_out_after_configured_attempts(log) -> None:
    client = FakeConversationClient(
        records=[ConversationRecord(status=ConversationStatus.PROCESSING)]
    )
    service, sleep = _service(client, attempts=7)

    with pytest.raises(PipelineError) as exc_info:
        asyncio.run(service.acquire("conv-1", log))

    assert exc_info.value.kind == ErrorKind.UPSTREAM_TIMEOUT
    assert client.calls == 7
    assert sum(sleep.delays) <= 7 * 2.0
    assert len(sleep.delays) == 6


def test_whitespace_only_turns_are_no_usable_content(log) -> None:
    client = FakeConversationClient(records=[done_record("   ", "\n\t", "")])
    service, _ = _service(client)

    with pytest.raises(PipelineError) as exc_info:
        asyncio.run(service.acquire("conv-1", log))

    assert exc_info.value.kind == ErrorKind.NO_USABLE_CONTENT


def test_unreachable_service_is_upstream_unavailable(log) -> None:
    client = FakeConversationClient(error=httpx.ConnectError("refused"))
    service, _ = _service(client)

    with pytest.raises(PipelineError) as exc_info:
        asyncio.run(service.acquire("conv-1", log))

    assert exc_info.value.kind == ErrorKind.UPSTREAM_UNAVAILABLE
    assert client.calls == 1


def test_from_text_applies_emptiness_guard() -> None:
    service, _ = _service(FakeConversationClient())

    assert service.from_text("  user: hi  ") == "user: hi"
    with pytest.raises(PipelineError) as exc_info:
        service.from_text("   ")
    assert exc_info.value.kind == ErrorKind.NO_USABLE_CONTENT


def test_flatten_skips_empty_turns() -> None:
    turns = [Turn("agent", "Hi"), Turn("user", ""), Turn("user", "Sunset please")]

    assert flatten(turns) == "agent: Hi\nuser: Sunset please"
