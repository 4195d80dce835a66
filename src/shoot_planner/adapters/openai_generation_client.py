"""OpenAI Responses API client for schema-constrained generation."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from shoot_planner.services.generation import StructuredGenerationClient


@dataclass
class OpenAIStructuredClient(StructuredGenerationClient):
    """Structured generation backed by OpenAI structured outputs."""

    client: AsyncOpenAI
    model: str
    reasoning_effort: str | None = None
    store: bool = False

    @classmethod
    def create(
        cls,
        api_key: str,
        model: str,
        reasoning_effort: str | None = None,
        store: bool = False,
    ) -> "OpenAIStructuredClient":
        """Create an OpenAI structured generation client."""
        return cls(
            client=AsyncOpenAI(api_key=api_key),
            model=model,
            reasoning_effort=reasoning_effort,
            store=store,
        )

    async def generate(
        self, *, prompt: str, schema: dict[str, object], schema_name: str
    ) -> str:
        """Call the Responses API and return the raw output text."""
        request_payload: dict[str, object] = {
            "model": self.model,
            "input": [
                {
                    "role": "user",
                    "content": [{"type": "input_text", "text": prompt}],
                }
            ],
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": schema_name,
                    "strict": True,
                    "schema": schema,
                }
            },
            "store": self.store,
        }
        if self.reasoning_effort:
            request_payload["reasoning"] = {"effort": self.reasoning_effort}

        response = await self.client.responses.create(**request_payload)
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return output_text

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
