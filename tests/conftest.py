"""Shared fixtures for place records and record directories."""

import json
import uuid
from pathlib import Path

import pytest

from maginhawa.config import Config


def sample_record(**overrides) -> dict:
    """A complete, valid place record in on-disk layout."""
    record = {
        "id": "550e8400-e29b-41d4-a716-446655440000",
        "slug": "rodics-diner",
        "name": "Rodic's Diner",
        "description": "Home of the famous tapsilog along Maginhawa.",
        "address": "Maginhawa St, Teachers Village, Quezon City",
        "phone": "+63 2 8123 4567",
        "email": "hello@rodicsdiner.com",
        "website": "https://rodicsdiner.com",
        "logoUrl": "",
        "photosUrls": ["https://images.rodicsdiner.com/tapsilog.jpg"],
        "operatingHours": {
            "monday": {"open": "07:00", "close": "21:00"},
            "sunday": {"closed": True},
        },
        "priceRange": "$$",
        "paymentMethods": ["Cash", "GCash"],
        "tags": ["breakfast", "silog"],
        "amenities": ["wifi"],
        "cuisineTypes": ["filipino"],
        "specialties": ["tapsilog"],
        "latitude": 14.6507,
        "longitude": 121.0621,
        "createdAt": "2024-01-15T08:00:00.000Z",
        "updatedAt": "2024-02-01T10:30:00.000Z",
    }
    record.update(overrides)
    return record


def numbered_record(n: int, **overrides) -> dict:
    """A valid record with a unique id and slug derived from n."""
    fields = {
        "id": str(uuid.UUID(int=n + 1)),
        "slug": f"place-{n:03d}",
        "name": f"Place {n}",
    }
    fields.update(overrides)
    return sample_record(**fields)


def write_record(directory: Path, record: dict, name: str | None = None) -> Path:
    path = directory / (name or f"{record['slug']}.json")
    path.write_text(json.dumps(record, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def record():
    """A fresh valid record for each test."""
    return sample_record()


@pytest.fixture
def places_dir(tmp_path):
    """An empty places directory."""
    directory = tmp_path / "places"
    directory.mkdir()
    return directory


@pytest.fixture
def config(tmp_path, places_dir):
    """Configuration pointing at temporary paths, no GitHub token."""
    return Config(
        _env_file=None,
        places_dir=places_dir,
        index_path=tmp_path / "out" / "places.json",
        stats_path=tmp_path / "out" / "stats.json",
        github_pat=None,
    )
