"""ElevenLabs Conversational AI client for recorded conversations."""

from dataclasses import dataclass

import httpx

from shoot_planner.domain.transcripts import ConversationRecord, ConversationStatus, Turn
from shoot_planner.services.transcripts import ConversationClient

_STATUS_MAP = {
    "initiated": ConversationStatus.PENDING,
    "pending": ConversationStatus.PENDING,
    "in-progress": ConversationStatus.PROCESSING,
    "processing": ConversationStatus.PROCESSING,
    "done": ConversationStatus.DONE,
    "failed": ConversationStatus.FAILED,
}


@dataclass
class HttpxConversationClient(ConversationClient):
    """Conversation client backed by the ElevenLabs REST API."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "HttpxConversationClient":
        """Create a conversation client with a managed httpx session."""
        return cls(api_key=api_key, base_url=base_url, http_client=httpx.AsyncClient())

    async def get_conversation(self, conversation_id: str) -> ConversationRecord:
        """Fetch a conversation's status and transcript."""
        url = f"{self.base_url}/v1/convai/conversations/{conversation_id}"
        response = await self.http_client.get(
            url, headers={"xi-api-key": self.api_key}, timeout=15
        )
        response.raise_for_status()
        payload = response.json()
        status = _STATUS_MAP.get(
            str(payload.get("status", "")).lower(), ConversationStatus.PROCESSING
        )
        turns = [
            Turn(role=str(item.get("role", "unknown")), text=item.get("message") or "")
            for item in payload.get("transcript") or []
            if isinstance(item, dict)
        ]
        return ConversationRecord(status=status, turns=turns)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
