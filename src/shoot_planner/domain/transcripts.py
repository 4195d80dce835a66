"""Domain models for conversation transcripts."""

from dataclasses import dataclass, field
from enum import StrEnum


class ConversationStatus(StrEnum):
    """Lifecycle of a recorded conversation."""

    PENDING = "pending"
    PROCESSING = "processing"
    DONE = "done"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in {ConversationStatus.DONE, ConversationStatus.FAILED}


@dataclass(frozen=True)
class Turn:
    """Single utterance in a conversation."""

    role: str
    text: str


@dataclass(frozen=True)
class ConversationRecord:
    """Snapshot of a conversation returned by the conversation capability."""

    status: ConversationStatus
    turns: list[Turn] = field(default_factory=list)


@dataclass(frozen=True)
class Transcript:
    """Ordered speaker turns of a completed conversation."""

    turns: list[Turn]

    @property
    def has_content(self) -> bool:
        return any(turn.text.strip() for turn in self.turns)

    def as_text(self) -> str:
        """Collapse the dialogue into one text blob, skipping empty turns."""
        return "\n".join(
            f"{turn.role}: {turn.text.strip()}"
            for turn in self.turns
            if turn.text.strip()
        )
