"""Tests for container wiring."""

import asyncio

from shoot_planner.containers import build_container


def test_build_container_creates_orchestrator(settings) -> None:
    container = build_container(settings)
    assert container.orchestrator is not None
    assert container.orchestrator.image_service is not None
    assert container.orchestrator.image_service.default_max_images == 6
    asyncio.run(container.close_resources())
