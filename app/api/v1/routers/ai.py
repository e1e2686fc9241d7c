"""
API router for future-vision generation and growth projection.
"""
from fastapi import APIRouter, HTTPException

from app.api.dependencies import ViewpointServiceDep
from app.api.v1.models.requests import ProjectGrowthRequest, TransformViewpointRequest
from app.api.v1.models.responses import GrowthProjectionResponse, TransformViewpointResponse
from app.domain.errors import NotFoundError


router = APIRouter(
    prefix="/ai",
    tags=["ai"],
)


@router.post(
    "/transform_viewpoint",
    response_model=TransformViewpointResponse,
    summary="Generate the future view of a viewpoint photo",
    description="""
    Show a garden viewpoint photo as it will look after the given number of
    years in the given season.

    This endpoint:
    1. Fetches the viewpoint photo and applies any camera overrides
    2. Keeps only the plants inside the photo's coverage area
    3. Projects each visible plant's height, canopy and appearance
    4. Composes a deterministic prompt and calls the generation provider once

    Provider failures are reported in the body (`success: false` with
    `error_kind` and `error_message`), never retried.
    """,
    responses={
        200: {
            "description": "Generation finished, successfully or with a reported failure",
            "content": {
                "application/json": {
                    "example": {
                        "viewpoint_photo_id": "vp_front_lawn",
                        "target_years": 5,
                        "season": "summer",
                        "success": True,
                        "status": "succeeded",
                        "image_base64": "iVBORw0KGgo...",
                        "image_mime_type": "image/png",
                        "scene_description": "The oak now shades the lawn...",
                        "plants_shown": [
                            {"name": "English Oak", "visualAppearance": "Young tree, about 3.5 m tall"}
                        ],
                    }
                }
            }
        },
        400: {"description": "Horizon out of range"},
        404: {"description": "Viewpoint photo or garden plan not found"},
        429: {"description": "Rate limit exceeded"},
    }
)
async def transform_viewpoint(
    body: TransformViewpointRequest,
    viewpoint_service: ViewpointServiceDep,
) -> TransformViewpointResponse:
    """
    Generate the future view of a viewpoint photo.

    Raises:
        HTTPException: If the viewpoint or plan is not found
    """
    try:
        result = await viewpoint_service.transform_viewpoint(
            viewpoint_id=body.viewpoint_photo_id,
            target_years=body.target_years,
            season=body.season,
            garden_plan_id=body.garden_plan_id,
            plants=body.plants,
            camera_position=body.camera_position,
            camera_direction=body.camera_direction,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)

    return TransformViewpointResponse.from_result(
        viewpoint_photo_id=body.viewpoint_photo_id,
        target_years=body.target_years,
        season=body.season,
        result=result,
    )


@router.post(
    "/project_growth",
    response_model=GrowthProjectionResponse,
    summary="Project plant growth without generating an image",
    responses={
        400: {"description": "Horizon out of range"},
        404: {"description": "Garden plan not found"},
        429: {"description": "Rate limit exceeded"},
    }
)
async def project_growth(
    body: ProjectGrowthRequest,
    viewpoint_service: ViewpointServiceDep,
) -> GrowthProjectionResponse:
    try:
        projection = await viewpoint_service.project_garden(
            target_years=body.target_years,
            season=body.season,
            garden_plan_id=body.garden_plan_id,
            plants=body.plants,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)

    return GrowthProjectionResponse.from_projection(projection)
