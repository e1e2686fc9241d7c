"""
API response models using Pydantic.
"""
from typing import List, Optional
from pydantic import BaseModel, Field

from app.domain.models import (
    ErrorKind,
    GardenProjection,
    GenerationResult,
    GenerationStatus,
    LocationMatch,
    PlantShown,
    ProjectedPlant,
    Season,
    Viewpoint,
)


class TransformViewpointResponse(BaseModel):
    """Response model for the viewpoint transformation endpoint."""
    viewpoint_photo_id: str
    target_years: int
    season: Season
    success: bool = Field(description="True when the provider returned an image or description")
    status: GenerationStatus
    image_base64: Optional[str] = None
    image_mime_type: Optional[str] = None
    image_url: Optional[str] = None
    scene_description: str = ""
    plants_shown: List[PlantShown] = Field(default_factory=list)
    prompt: str = ""
    image_prompt: str = ""
    error_kind: Optional[ErrorKind] = None
    error_message: Optional[str] = Field(
        default=None,
        description="Human-readable reason when the generation failed"
    )

    @classmethod
    def from_result(
        cls,
        viewpoint_photo_id: str,
        target_years: int,
        season: Season,
        result: GenerationResult,
    ) -> "TransformViewpointResponse":
        return cls(
            viewpoint_photo_id=viewpoint_photo_id,
            target_years=target_years,
            season=season,
            success=result.success,
            **result.model_dump(),
        )


class MatchQualityModel(BaseModel):
    score: int = Field(ge=0, le=100)
    label: str = Field(examples=["excellent", "good", "fair", "poor"])


class LocationMatchResponse(BaseModel):
    """Response model for the location lookup endpoint."""
    viewpoint: Optional[Viewpoint] = None
    match_quality: Optional[MatchQualityModel] = None
    message: Optional[str] = None
    suggestion: Optional[str] = None

    @classmethod
    def from_match(cls, match: LocationMatch) -> "LocationMatchResponse":
        quality = None
        if match.match_quality is not None:
            quality = MatchQualityModel(
                score=match.match_quality.score,
                label=match.match_quality.label,
            )
        return cls(
            viewpoint=match.viewpoint,
            match_quality=quality,
            message=match.message,
            suggestion=match.suggestion,
        )

    class Config:
        json_schema_extra = {
            "example": {
                "viewpoint": {
                    "id": "vp_front_lawn",
                    "name": "Front lawn",
                    "camera_direction": 90.0,
                    "field_of_view": 60.0,
                    "coverage_area": {"xmin": 0, "xmax": 50, "ymin": 0, "ymax": 50},
                },
                "match_quality": {"score": 93, "label": "excellent"},
                "message": None,
                "suggestion": None,
            }
        }


class ProjectedPlantModel(BaseModel):
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
    visual_appearance: str
    profile_source: str
    newly_planted: bool

    @classmethod
    def from_projected(cls, plant: ProjectedPlant) -> "ProjectedPlantModel":
        return cls(
            plant_id=plant.plant_id,
            name=plant.name,
            species=plant.species,
            category=plant.category,
            current_age_years=plant.current_age_years,
            projected_age_years=plant.projected_age_years,
            current_height_cm=plant.current_height_cm,
            height_cm=plant.height_cm,
            canopy_cm=plant.canopy_cm,
            carbon_kg=plant.carbon_kg,
            growth_stage=plant.growth_stage,
            visual_appearance=plant.visual_appearance,
            profile_source=plant.profile_source,
            newly_planted=plant.newly_planted,
        )


class GrowthProjectionResponse(BaseModel):
    """Response model for the growth projection endpoint."""
    target_years: int
    season: Season
    plant_count: int
    total_carbon_kg: float = Field(description="Carbon sequestered over the horizon, in kg")
    plants: List[ProjectedPlantModel]

    @classmethod
    def from_projection(cls, projection: GardenProjection) -> "GrowthProjectionResponse":
        return cls(
            target_years=projection.target_years,
            season=projection.season,
            plant_count=len(projection.plants),
            total_carbon_kg=projection.total_carbon_kg,
            plants=[ProjectedPlantModel.from_projected(p) for p in projection.plants],
        )
