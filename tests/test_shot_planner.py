"""Tests for shot planning."""

import asyncio

import pytest

from shoot_planner.domain.results import Ok, RecoverableDefault
from shoot_planner.services.generation import SchemaGuidedGenerator
from shoot_planner.services.locations import default_locations
from shoot_planner.services.shots import (
    ShotPlanner,
    default_shots,
    parse_shots,
    shot_count,
)
from tests.conftest import FakeGenerationClient, shot_payload, shots_payload


def test_generated_shots_are_mapped_and_sorted(
    log, sample_context, sample_locations
) -> None:
    client = FakeGenerationClient()
    client.queue(
        "storyboard_shots",
        {"shots": [shot_payload(1, 2), shot_payload(0, 1), shot_payload(3, 3)]},
    )
    planner = ShotPlanner(SchemaGuidedGenerator(client=client))

    result = asyncio.run(planner.plan(sample_context, sample_locations, log))

    assert isinstance(result, Ok)
    shots = result.value
    assert [shot.shot_number for shot in shots] == [1, 2, 3]
    assert shots[0].pose_instruction == "Holding hands"
    assert shots[0].framing_composition == "Wide shot"
    assert all(0 <= shot.location_index < len(sample_locations) for shot in shots)
    assert "Create exactly 8 shots" in client.calls[0][1]


def test_out_of_range_location_index_falls_back(
    log, sample_context, sample_locations
) -> None:
    bad = {"shots": [shot_payload(0, 1), shot_payload(9, 2)]}
    client = FakeGenerationClient()
    client.queue("storyboard_shots", bad, bad)
    planner = ShotPlanner(SchemaGuidedGenerator(client=client, max_attempts=2))

    result = asyncio.run(planner.plan(sample_context, sample_locations, log))

    assert isinstance(result, RecoverableDefault)
    assert result.value == default_shots(sample_locations)
    assert all(
        0 <= shot.location_index < len(sample_locations) for shot in result.value
    )


def test_retry_recovers_from_invalid_numbering(
    log, sample_context, sample_locations
) -> None:
    duplicated = {"shots": [shot_payload(0, 1), shot_payload(1, 1)]}
    client = FakeGenerationClient()
    client.queue("storyboard_shots", duplicated, shots_payload(4, 4))
    planner = ShotPlanner(SchemaGuidedGenerator(client=client, max_attempts=2))

    result = asyncio.run(planner.plan(sample_context, sample_locations, log))

    assert isinstance(result, Ok)
    assert len(result.value) == 4


@pytest.mark.parametrize(
    "numbers",
    [[1, 1], [2, 3], [1, 3]],
)
def test_non_contiguous_or_duplicate_numbers_rejected(numbers: list[int]) -> None:
    payload = [shot_payload(0, number) for number in numbers]

    with pytest.raises(ValueError, match="shot numbers"):
        parse_shots(payload, location_count=2)


def test_negative_location_index_rejected() -> None:
    with pytest.raises(ValueError):
        parse_shots([shot_payload(-1, 1)], location_count=2)


def test_bare_array_with_camel_case_is_accepted() -> None:
    shots = parse_shots(
        [
            {
                "locationIndex": 0,
                "shotNumber": 1,
                "title": "Hello",
                "imagePrompt": "Couple",
                "bodyPositionsPoses": "Hug",
                "technicalNotes": "50mm",
                "equipment": [],
            }
        ],
        location_count=1,
    )

    assert shots[0].pose_instruction == "Hug"


def test_default_shots_fit_single_location() -> None:
    shots = default_shots(default_locations()[:1])

    assert [shot.location_index for shot in shots] == [0, 0]
    assert [shot.shot_number for shot in shots] == [1, 2]


def test_shot_count_is_capped() -> None:
    assert shot_count(2) == 4
    assert shot_count(5) == 8
