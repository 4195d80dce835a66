"""OpenAI Images API client for storyboard sketches."""

import base64
from dataclasses import dataclass

from openai import AsyncOpenAI

from shoot_planner.services.images import ImageGenerationClient

_SIZES = {
    "16:9": "1536x1024",
    "3:2": "1536x1024",
    "1:1": "1024x1024",
    "9:16": "1024x1536",
    "2:3": "1024x1536",
}


@dataclass
class OpenAIImageClient(ImageGenerationClient):
    """Image generation backed by the OpenAI Images API."""

    client: AsyncOpenAI
    model: str

    @classmethod
    def create(cls, api_key: str, model: str) -> "OpenAIImageClient":
        """Create an OpenAI image client."""
        return cls(client=AsyncOpenAI(api_key=api_key), model=model)

    async def generate_image(self, *, prompt: str, aspect_ratio: str) -> bytes:
        """Generate one JPEG image and return its bytes."""
        response = await self.client.images.generate(
            model=self.model,
            prompt=prompt,
            n=1,
            size=size_for_aspect_ratio(aspect_ratio),
            output_format="jpeg",
        )
        if not response.data or not response.data[0].b64_json:
            raise RuntimeError("OpenAI returned no image data")
        return base64.b64decode(response.data[0].b64_json)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()


def size_for_aspect_ratio(aspect_ratio: str) -> str:
    """Map an aspect ratio to the closest supported image size."""
    return _SIZES.get(aspect_ratio, "auto")
