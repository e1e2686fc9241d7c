"""
API router for viewpoint photo lookups.
"""
from fastapi import APIRouter, Query
from typing import Annotated

from app.api.dependencies import ViewpointServiceDep
from app.api.v1.models.responses import LocationMatchResponse


router = APIRouter(
    prefix="/property/viewpoint_photos",
    tags=["viewpoints"],
)


@router.get(
    "/by_location",
    response_model=LocationMatchResponse,
    summary="Find the viewpoint photo that shows a location",
    description="""
    Return the viewpoint photo whose coverage area contains the given map
    location, preferring the photo whose area is centred closest to it.

    Viewpoints without coverage metadata cover the whole property and rank
    last. When no photo covers the location the response carries a null
    viewpoint with a message and a suggestion instead of a 404.
    """,
    responses={
        200: {"description": "Best match, or a null viewpoint with a suggestion"},
        400: {"description": "Coordinates are not finite or outside the 0-100 grid"},
        429: {"description": "Rate limit exceeded"},
    }
)
async def get_viewpoint_by_location(
    x: Annotated[float, Query(description="Planar x coordinate (0-100)")],
    y: Annotated[float, Query(description="Planar y coordinate (0-100)")],
    viewpoint_service: ViewpointServiceDep,
) -> LocationMatchResponse:
    """
    Look up the best viewpoint photo for a map location.

    Invalid coordinates raise InvalidInputError, which the error middleware
    turns into a 400 response.
    """
    match = await viewpoint_service.match_location(x, y)
    return LocationMatchResponse.from_match(match)
