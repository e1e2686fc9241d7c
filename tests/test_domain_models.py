"""
Unit tests for domain models.

Tests cover:
- Plant position formats accepted from the backend
- Category and season parsing
- Viewpoint camera defaults and normalization
"""
import pytest
from pydantic import ValidationError

from app.domain.models import (
    DEFAULT_FIELD_OF_VIEW,
    LifecycleStatus,
    PlantCategory,
    PlantRecord,
    Point2D,
    Season,
    Viewpoint,
)


# ============================================================
# Plant Record Tests
# ============================================================

class TestPlantRecord:
    """Tests for plant records as supplied by the backend."""

    def test_nested_position(self):
        plant = PlantRecord.model_validate({
            "id": "p1", "species": "rosa_canina", "category": "shrub",
            "position": {"x": 12.5, "y": 40},
        })

        assert plant.position == Point2D(x=12.5, y=40)

    def test_flat_position(self):
        plant = PlantRecord.model_validate({
            "id": "p1", "species": "rosa_canina", "category": "shrub", "x": 3, "y": 4,
        })

        assert plant.position == Point2D(x=3, y=4)

    def test_metadata_position(self):
        plant = PlantRecord.model_validate({
            "id": "p1", "species": "rosa_canina", "category": "shrub",
            "metadata": {"x": 70, "y": 20},
        })

        assert plant.position == Point2D(x=70, y=20)

    def test_lat_lng_only_plant_has_no_position(self):
        plant = PlantRecord.model_validate({
            "id": "p1", "species": "rosa_canina", "category": "shrub",
            "latitude": 51.5, "longitude": -0.12,
        })

        assert plant.position is None
        assert plant.latitude == 51.5

    def test_numeric_id_is_coerced_to_string(self):
        plant = PlantRecord.model_validate({"id": 42, "species": "x", "category": "herb"})

        assert plant.id == "42"

    def test_defaults(self):
        plant = PlantRecord(id="p1", species="malus_domestica", category="fruit_tree")

        assert plant.lifecycle_status is LifecycleStatus.PLANNED
        assert plant.display_name == "malus domestica"
        assert plant.plant_category is PlantCategory.FRUIT_TREE

    def test_negative_estimated_age_rejected(self):
        with pytest.raises(ValidationError):
            PlantRecord(id="p1", species="x", category="tree", estimated_age_years=-1)


# ============================================================
# Enum Parsing Tests
# ============================================================

class TestEnums:
    """Tests for category and season parsing."""

    @pytest.mark.parametrize("raw,expected", [
        ("tree", PlantCategory.TREE),
        ("Fruit Tree", PlantCategory.FRUIT_TREE),
        ("wall-plant", PlantCategory.WALL_PLANT),
        ("cactus", None),
        ("", None),
        (None, None),
    ])
    def test_category_parse(self, raw, expected):
        assert PlantCategory.parse(raw) is expected

    def test_fall_is_autumn(self):
        assert Season("fall") is Season.AUTUMN

    def test_season_is_case_insensitive(self):
        assert Season("Winter") is Season.WINTER

    def test_unknown_season_rejected(self):
        with pytest.raises(ValueError):
            Season("monsoon")


# ============================================================
# Viewpoint Tests
# ============================================================

class TestViewpoint:
    """Tests for viewpoint camera fields."""

    def test_missing_camera_fields_get_defaults(self):
        viewpoint = Viewpoint.model_validate({
            "id": "vp1", "camera_direction": None, "field_of_view": None,
        })

        assert viewpoint.camera_direction == 0.0
        assert viewpoint.field_of_view == DEFAULT_FIELD_OF_VIEW
        assert viewpoint.camera_position is None

    @pytest.mark.parametrize("raw,expected", [(450, 90.0), (-90, 270.0), (360, 0.0)])
    def test_direction_is_normalized(self, raw, expected):
        assert Viewpoint(id="vp1", camera_direction=raw).camera_direction == expected

    def test_field_of_view_must_be_positive(self):
        with pytest.raises(ValidationError):
            Viewpoint(id="vp1", field_of_view=0)

    def test_point_rejects_nan(self):
        with pytest.raises(ValidationError):
            Point2D(x=float("nan"), y=1)
