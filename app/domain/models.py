"""
Domain models for viewpoints, plants and generation results.

These models represent the core domain entities and should be independent
of any infrastructure concerns (API clients, databases, etc.).

Planar coordinates are a 0-100 grid local to a property. They are unrelated
to the latitude/longitude a plant may also carry.
"""
import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import (
    BaseModel,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

logger = logging.getLogger(__name__)

PLANAR_MIN = 0.0
PLANAR_MAX = 100.0
DEFAULT_FIELD_OF_VIEW = 60.0


class PlantCategory(str, Enum):
    """Closed set of plant categories known to the garden planner."""
    TREE = "tree"
    FRUIT_TREE = "fruit_tree"
    SHRUB = "shrub"
    PERENNIAL = "perennial"
    HEDGE = "hedge"
    ANNUAL = "annual"
    VEGETABLE = "vegetable"
    HERB = "herb"
    BERRY = "berry"
    WALL_PLANT = "wall_plant"
    BULB = "bulb"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["PlantCategory"]:
        """Return the matching category, or None for unknown values."""
        if not value:
            return None
        normalized = value.strip().lower().replace(" ", "_").replace("-", "_")
        try:
            return cls(normalized)
        except ValueError:
            return None

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


class LifecycleStatus(str, Enum):
    PLANNED = "planned"
    PLANTED = "planted"
    ESTABLISHED = "established"
    REMOVED = "removed"


class Season(str, Enum):
    """Season shown in a generated image. Accepts 'fall' for autumn."""
    SPRING = "spring"
    SUMMER = "summer"
    AUTUMN = "autumn"
    WINTER = "winter"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            normalized = value.strip().lower()
            if normalized == "fall":
                return cls.AUTUMN
            for member in cls:
                if member.value == normalized:
                    return member
        return None


class GrowthHabit(str, Enum):
    WOODY = "woody"
    HERBACEOUS = "herbaceous"


class ErrorKind(str, Enum):
    """Failure taxonomy of the pipeline."""
    NOT_FOUND = "not_found"
    INVALID_INPUT = "invalid_input"
    PROVIDER_TIMEOUT = "provider_timeout"
    PROVIDER_REJECTED = "provider_rejected"
    PROVIDER_UNAVAILABLE = "provider_unavailable"


class GenerationStatus(str, Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class Point2D(BaseModel):
    """A point in planar property coordinates."""
    x: float = Field(allow_inf_nan=False)
    y: float = Field(allow_inf_nan=False)

    class Config:
        frozen = True

    @property
    def in_bounds(self) -> bool:
        return (
            PLANAR_MIN <= self.x <= PLANAR_MAX
            and PLANAR_MIN <= self.y <= PLANAR_MAX
        )


class CoverageArea(BaseModel):
    """Axis-aligned rectangle of the garden shown by a viewpoint photo."""
    xmin: float = Field(allow_inf_nan=False)
    xmax: float = Field(allow_inf_nan=False)
    ymin: float = Field(allow_inf_nan=False)
    ymax: float = Field(allow_inf_nan=False)

    class Config:
        frozen = True

    @model_validator(mode="after")
    def _check_bounds(self) -> "CoverageArea":
        if self.xmin > self.xmax or self.ymin > self.ymax:
            raise ValueError(
                f"Coverage area bounds are inverted: "
                f"x=[{self.xmin}, {self.xmax}] y=[{self.ymin}, {self.ymax}]"
            )
        return self

    @property
    def center(self) -> tuple[float, float]:
        return ((self.xmin + self.xmax) / 2.0, (self.ymin + self.ymax) / 2.0)


def _lenient(model: type[BaseModel], value, field_name: str):
    """Parse optional nested metadata, dropping it when malformed."""
    if value is None or value == {}:
        return None
    if isinstance(value, model):
        return value
    try:
        return model.model_validate(value)
    except ValidationError as e:
        logger.warning(f"Ignoring malformed {field_name} {value!r}: {e.error_count()} error(s)")
        return None


class Viewpoint(BaseModel):
    """A registered viewpoint photo and the camera geometry it was taken with."""
    id: str
    name: str = ""
    description: Optional[str] = None
    capture_date: Optional[date] = None
    camera_position: Optional[Point2D] = None
    camera_direction: float = Field(
        default=0.0,
        allow_inf_nan=False,
        description="Compass direction of the camera in degrees, [0, 360)"
    )
    field_of_view: float = Field(default=DEFAULT_FIELD_OF_VIEW, gt=0, le=360)
    coverage_area: Optional[CoverageArea] = Field(
        default=None,
        description="Absent means the photo covers the whole property"
    )
    photo_url: Optional[str] = None

    class Config:
        coerce_numbers_to_str = True

    @field_validator("coverage_area", mode="before")
    @classmethod
    def _parse_coverage(cls, value):
        # Viewpoints registered before coverage tracking carry {} here
        return _lenient(CoverageArea, value, "coverage_area")

    @field_validator("camera_position", mode="before")
    @classmethod
    def _parse_camera_position(cls, value):
        return _lenient(Point2D, value, "camera_position")

    @field_validator("camera_direction", mode="before")
    @classmethod
    def _default_direction(cls, value):
        return 0.0 if value is None else value

    @field_validator("camera_direction")
    @classmethod
    def _normalize_direction(cls, value: float) -> float:
        return value % 360.0

    @field_validator("field_of_view", mode="before")
    @classmethod
    def _default_field_of_view(cls, value):
        return DEFAULT_FIELD_OF_VIEW if value is None else value


class PlantRecord(BaseModel):
    """A plant in a garden plan as supplied by the persistence layer."""
    id: str
    species: str
    common_name: Optional[str] = None
    category: str
    position: Optional[Point2D] = Field(
        default=None,
        description="Planar coordinates; absent for plants placed only by lat/lng"
    )
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    planted_date: Optional[date] = None
    estimated_age_years: Optional[float] = Field(default=None, ge=0)
    lifecycle_status: LifecycleStatus = LifecycleStatus.PLANNED

    class Config:
        coerce_numbers_to_str = True

    @model_validator(mode="before")
    @classmethod
    def _lift_planar_position(cls, data):
        """Accept position as {x, y}, flat x/y or metadata.x/metadata.y."""
        if not isinstance(data, dict):
            return data
        if data.get("position"):
            return data

        x, y = data.get("x"), data.get("y")
        if x is None or y is None:
            metadata = data.get("metadata") or {}
            x, y = metadata.get("x"), metadata.get("y")

        data = {**data, "position": None}
        if x is not None and y is not None:
            data["position"] = {"x": x, "y": y}
        return data

    @property
    def plant_category(self) -> Optional[PlantCategory]:
        return PlantCategory.parse(self.category)

    @property
    def display_name(self) -> str:
        return self.common_name or self.species.replace("_", " ")


@dataclass(frozen=True)
class GrowthProfile:
    """Static growth reference data for a species or category."""
    initial_height_cm: float
    annual_height_growth_cm: float
    mature_height_cm: float
    initial_canopy_cm: float
    annual_canopy_growth_cm: float
    mature_canopy_cm: float
    carbon_per_year_kg: float
    maturity_years: float
    deciduous: bool = True
    habit: GrowthHabit = GrowthHabit.WOODY

    def height_at(self, age_years: float) -> float:
        return min(
            self.mature_height_cm,
            self.initial_height_cm + self.annual_height_growth_cm * age_years,
        )

    def canopy_at(self, age_years: float) -> float:
        return min(
            self.mature_canopy_cm,
            self.initial_canopy_cm + self.annual_canopy_growth_cm * age_years,
        )

    def carbon_between(self, from_age: float, to_age: float) -> float:
        """Carbon sequestered between two ages; stops accruing at maturity."""
        grown = min(to_age, self.maturity_years) - min(from_age, self.maturity_years)
        return max(0.0, self.carbon_per_year_kg * grown)


@dataclass(frozen=True)
class ProjectedPlant:
    """A plant's projected state at the target horizon."""
    plant_id: str
    name: str
    species: str
    category: str
    current_age_years: float
    projected_age_years: float
    current_height_cm: float
    height_cm: float
    canopy_cm: float
    carbon_kg: float
    growth_stage: str
    height_band: str
    visual_appearance: str
    profile_source: str
    newly_planted: bool = False


@dataclass(frozen=True)
class CameraGeometry:
    position: Optional[Point2D]
    direction: float
    field_of_view: float

    @classmethod
    def from_viewpoint(cls, viewpoint: Viewpoint) -> "CameraGeometry":
        return cls(
            position=viewpoint.camera_position,
            direction=viewpoint.camera_direction,
            field_of_view=viewpoint.field_of_view,
        )


@dataclass(frozen=True)
class SourcePhoto:
    """Raw bytes of a viewpoint photo resolved from blob storage."""
    content: bytes
    mime_type: str = "image/jpeg"


@dataclass(frozen=True)
class MatchQuality:
    score: int
    label: str


@dataclass(frozen=True)
class LocationMatch:
    viewpoint: Optional[Viewpoint]
    match_quality: Optional[MatchQuality] = None
    message: Optional[str] = None
    suggestion: Optional[str] = None


@dataclass(frozen=True)
class GardenProjection:
    target_years: int
    season: Season
    plants: List[ProjectedPlant]

    @property
    def total_carbon_kg(self) -> float:
        return round(sum(p.carbon_kg for p in self.plants), 1)


class PlantShown(BaseModel):
    """A plant the generated scene actually refers to."""
    name: str
    visual_appearance: str = Field(default="", alias="visualAppearance")

    class Config:
        populate_by_name = True

    @field_validator("visual_appearance", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return "" if value is None else value


class GenerationResult(BaseModel):
    """Outcome of one generation request, normalized across provider shapes."""
    status: GenerationStatus = GenerationStatus.PENDING
    image_base64: Optional[str] = None
    image_mime_type: Optional[str] = None
    image_url: Optional[str] = None
    scene_description: str = ""
    prompt: str = ""
    image_prompt: str = ""
    plants_shown: List[PlantShown] = Field(default_factory=list)
    error_kind: Optional[ErrorKind] = None
    error_message: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status is GenerationStatus.SUCCEEDED

    @classmethod
    def failed(
        cls,
        kind: ErrorKind,
        message: str,
        prompt: str = "",
        image_prompt: str = "",
    ) -> "GenerationResult":
        return cls(
            status=GenerationStatus.FAILED,
            error_kind=kind,
            error_message=message,
            prompt=prompt,
            image_prompt=image_prompt,
        )
