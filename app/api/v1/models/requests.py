"""
API request models using Pydantic.
"""
from typing import List, Optional
from pydantic import BaseModel, Field

from app.domain.models import PlantRecord, Point2D, Season


class TransformViewpointRequest(BaseModel):
    """Request body for the viewpoint transformation endpoint."""
    viewpoint_photo_id: str = Field(
        alias="viewpointPhotoId",
        description="Viewpoint photo to transform",
    )
    target_years: int = Field(
        alias="targetYears",
        description="Years into the future to project",
    )
    season: Season = Field(
        default=Season.SUMMER,
        description="Season to depict; 'fall' is accepted for autumn",
    )
    garden_plan_id: Optional[str] = Field(
        default=None,
        alias="gardenPlanId",
        description="Plan to read plants from; takes precedence over plants",
    )
    plants: Optional[List[PlantRecord]] = Field(
        default=None,
        description="Plants to place when no plan is given",
    )
    camera_position: Optional[Point2D] = Field(
        default=None,
        alias="cameraPosition",
        description="Camera position override for this request only",
    )
    camera_direction: Optional[float] = Field(
        default=None,
        alias="cameraDirection",
        allow_inf_nan=False,
        description="Camera direction override in degrees for this request only",
    )

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "viewpointPhotoId": "vp_front_lawn",
                "targetYears": 5,
                "season": "summer",
                "gardenPlanId": "plan_42",
            }
        }


class ProjectGrowthRequest(BaseModel):
    """Request body for the growth projection endpoint."""
    target_years: int = Field(
        alias="targetYears",
        description="Years into the future to project",
    )
    season: Season = Season.SUMMER
    garden_plan_id: Optional[str] = Field(default=None, alias="gardenPlanId")
    plants: Optional[List[PlantRecord]] = None

    class Config:
        populate_by_name = True
