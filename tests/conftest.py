"""Shared pytest fixtures."""

import json
from pathlib import Path
from typing import Any

import pytest
import yaml

from feedindex.episodes.models import EpisodeRecord


def _make_episode(
    id: str,
    *,
    recorded: str | None = None,
    published: str | None = None,
    **fields: Any,
) -> EpisodeRecord:
    """Build an EpisodeRecord from compact test arguments."""
    return EpisodeRecord(
        id=id,
        recording_time=recorded,
        published=published,
        **fields,
    )


@pytest.fixture
def make_episode():
    """Factory fixture: make_episode("id", recorded="2020-01-01", tags=[...])."""
    return _make_episode


@pytest.fixture
def sample_descriptors() -> list[dict[str, Any]]:
    """Decoded descriptors as an ingestion collaborator would provide them."""
    return [
        {
            "id": "ep-1",
            "title": "Signals From Europa",
            "date": "2020-03-14T10:00:00+00:00",
            "published": "2020-04-01T12:00:00+00:00",
            "model": "PC-7",
            "integrity": "92.5",
            "origin": "Research Station",
            "locale": "Ice Shelf",
            "region": "Northern Hemisphere",
            "zone": "Outer",
            "planet": "Europa",
            "tags": ["Sci-Fi", "Oceans"],
            "description": "Static beneath the ice.",
            "audioUrl": "https://example.com/ep1.mp3",
            "duration": 1800,
            "size": 1024,
        },
        {
            "id": "ep-2",
            "title": "a quiet harbor",
            "date": "2021-07-01T09:30:00+00:00",
            "published": "2021-07-10T08:00:00+00:00",
            "model": "PC-7",
            "integrity": 64,
            "origin": "Harbor",
            "region": "Coastal",
            "zone": "Inner",
            "tags": ["sci-fi", "Ocean", "Harbors"],
            "description": "Gulls and rope.",
            "duration": 900,
        },
        {
            "id": "ep-3",
            "title": "Basement Tapes",
            "date": "2023-01-20T18:00:00+00:00",
            "published": "2023-02-01T18:00:00+00:00",
            "model": "PC-9",
            "integrity": "corrupted",
            "origin": "Harbor",
            "tags": ["Horror"],
            "description": "Something knocks.",
            "duration": 2400,
        },
        {
            "id": "ep-4",
            "title": "Undated Fragment",
            "published": "2019-05-05T00:00:00+00:00",
            "tags": [],
            "description": "No recording date survived.",
        },
    ]


@pytest.fixture
def sample_episodes(sample_descriptors: list[dict[str, Any]]) -> list[EpisodeRecord]:
    """Sample descriptors converted to records."""
    return [EpisodeRecord.from_descriptor(d) for d in sample_descriptors]


@pytest.fixture
def episodes_file(tmp_path: Path, sample_descriptors: list[dict[str, Any]]) -> Path:
    """JSON file with feed metadata and the sample descriptors."""
    path = tmp_path / "episodes.json"
    path.write_text(
        json.dumps(
            {
                "metadata": {"title": "Test Transmissions", "author": "Archivist"},
                "episodes": sample_descriptors,
            }
        )
    )
    return path


@pytest.fixture
def cli_config_dir(tmp_path: Path) -> Path:
    """Config directory with WARNING logging so stdout stays clean."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    with open(config_dir / "config.yaml", "w") as f:
        yaml.safe_dump(
            {
                "log_level": "WARNING",
                "index": {"min_category_threshold": 2, "min_year_group_threshold": 2},
            },
            f,
        )
    return config_dir
