"""Supabase Storage-backed object storage."""

import asyncio
from dataclasses import dataclass

from supabase import Client

from shoot_planner.services.images import ObjectStorage


@dataclass
class SupabaseObjectStorage(ObjectStorage):
    """Stores generated images in a public Supabase Storage bucket."""

    client: Client
    bucket: str

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        """Upload bytes and return the object's public URL."""
        return await asyncio.to_thread(self._upload, key, data, content_type)

    def _upload(self, key: str, data: bytes, content_type: str) -> str:
        storage = self.client.storage.from_(self.bucket)
        storage.upload(
            path=key,
            file=data,
            file_options={"content-type": content_type, "upsert": "false"},
        )
        public_url = storage.get_public_url(key)
        if not public_url:
            raise RuntimeError(f"No public URL returned for {key}")
        return public_url
