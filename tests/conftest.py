"""
Shared pytest fixtures for all tests.

This module provides common fixtures including:
- Sample viewpoints and plants
- Mock garden client and provider client
- FastAPI test client
"""
import pytest
from datetime import date
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient
from tenacity import wait_none

from app.main import app
from app.api.limiter import limiter
from app.domain.models import (
    CoverageArea,
    LifecycleStatus,
    PlantRecord,
    Point2D,
    SourcePhoto,
    Viewpoint,
)
from app.infrastructure.garden_api_client import GardenAPIClient
from app.infrastructure.generation_client import GenerationProviderClient

# 1x1 transparent PNG
PNG_BASE64 = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)


@pytest.fixture(autouse=True)
def disable_rate_limit():
    """Tests share one client address; keep the limiter out of the way."""
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest.fixture
def no_retry_wait(monkeypatch):
    """Retry immediately instead of backing off."""
    monkeypatch.setattr(GardenAPIClient._fetch.retry, "wait", wait_none())


# ============================================================
# Sample Data Fixtures
# ============================================================

@pytest.fixture
def front_lawn() -> Viewpoint:
    """Viewpoint covering the south-west quarter of the property."""
    return Viewpoint(
        id="vp_front_lawn",
        name="Front lawn",
        description="Looking across the lawn towards the old wall",
        camera_position=Point2D(x=5, y=5),
        camera_direction=45,
        field_of_view=60,
        coverage_area=CoverageArea(xmin=0, xmax=50, ymin=0, ymax=50),
        photo_url="https://blobs.test/photos/front_lawn.jpg",
    )


@pytest.fixture
def whole_garden() -> Viewpoint:
    """Viewpoint registered before coverage areas were recorded."""
    return Viewpoint(id="vp_legacy", name="Whole garden")


@pytest.fixture
def oak_in_view() -> PlantRecord:
    return PlantRecord(
        id="p_oak",
        species="Quercus robur",
        common_name="English Oak",
        category="tree",
        position=Point2D(x=10, y=10),
        planted_date=date(2023, 5, 1),
        lifecycle_status=LifecycleStatus.PLANTED,
    )


@pytest.fixture
def hazel_out_of_view() -> PlantRecord:
    return PlantRecord(
        id="p_hazel",
        species="corylus_avellana",
        common_name="Hazel",
        category="shrub",
        position=Point2D(x=90, y=90),
        planted_date=date(2024, 3, 1),
        lifecycle_status=LifecycleStatus.PLANTED,
    )


@pytest.fixture
def sample_plants(oak_in_view, hazel_out_of_view) -> list[PlantRecord]:
    return [oak_in_view, hazel_out_of_view]


@pytest.fixture
def flat_provider_response() -> dict:
    return {
        "success": True,
        "image": PNG_BASE64,
        "mime_type": "image/png",
        "description": "The oak now casts dappled shade across the lawn.",
        "plants_shown": [
            {"name": "English Oak", "visualAppearance": "A young oak in full leaf"},
        ],
    }


# ============================================================
# Mock Client Fixtures
# ============================================================

@pytest.fixture
def mock_garden_client(front_lawn, sample_plants):
    """Create a mock garden backend client."""
    mock_client = AsyncMock(spec=GardenAPIClient)
    mock_client.get_viewpoint.return_value = front_lawn
    mock_client.list_viewpoints.return_value = [front_lawn]
    mock_client.get_plants.return_value = sample_plants
    mock_client.get_photo.return_value = SourcePhoto(content=b"\xff\xd8jpeg-bytes")
    return mock_client


@pytest.fixture
def mock_provider_client(flat_provider_response):
    """Create a mock generation provider client."""
    mock_client = AsyncMock(spec=GenerationProviderClient)
    mock_client.generate.return_value = flat_provider_response
    return mock_client


# ============================================================
# FastAPI Test Client Fixtures
# ============================================================

@pytest.fixture
def test_client() -> TestClient:
    """Create a synchronous test client for FastAPI."""
    return TestClient(app)
