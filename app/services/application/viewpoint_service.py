"""
Application service: Orchestration layer for viewpoint operations.
"""
import logging
from datetime import date
from typing import List, Optional, Sequence

from pydantic import ValidationError

from app.config import settings
from app.domain.errors import InvalidInputError
from app.domain.models import (
    CameraGeometry,
    GardenProjection,
    GenerationResult,
    LifecycleStatus,
    LocationMatch,
    PlantRecord,
    Point2D,
    Season,
    Viewpoint,
)
from app.infrastructure.garden_api_client import GardenAPIClient
from app.services.application.generation_orchestrator import GenerationOrchestrator
from app.services.domain.growth_projector import GrowthProjector
from app.services.domain.prompt_composer import PhotoContext, PromptComposer
from app.services.domain.viewpoint_index import ViewpointIndex
from app.services.domain.visibility_filter import PlantVisibilityFilter

logger = logging.getLogger(__name__)

NO_MATCH_MESSAGE = "No photo covers this location"
NO_MATCH_SUGGESTION = "Add a viewpoint photo that includes this area"


class ViewpointService:
    """
    Application service for viewpoint-related operations.

    Orchestrates data fetching and business logic execution.
    Follows the application layer pattern - no business logic here,
    only coordination between infrastructure and domain layers.
    """

    def __init__(
        self,
        garden_client: GardenAPIClient,
        orchestrator: GenerationOrchestrator,
        index: Optional[ViewpointIndex] = None,
        visibility_filter: Optional[PlantVisibilityFilter] = None,
        projector: Optional[GrowthProjector] = None,
        composer: Optional[PromptComposer] = None,
    ):
        """
        Initialize the service with dependencies.

        Args:
            garden_client: Garden backend client for viewpoints, plants and photos
            orchestrator: Generation orchestrator for the provider call
            index: Viewpoint matcher
            visibility_filter: Coverage-based plant filter
            projector: Growth projector
            composer: Prompt composer
        """
        self.garden_client = garden_client
        self.orchestrator = orchestrator
        self.index = index or ViewpointIndex()
        self.visibility_filter = visibility_filter or PlantVisibilityFilter()
        self.projector = projector or GrowthProjector()
        self.composer = composer or PromptComposer()

    def _check_horizon(self, target_years: int):
        if not 1 <= target_years <= settings.max_horizon_years:
            raise InvalidInputError(
                f"target_years must be between 1 and {settings.max_horizon_years}"
            )

    async def _load_plants(
        self,
        garden_plan_id: Optional[str],
        plants: Optional[Sequence[PlantRecord]],
    ) -> List[PlantRecord]:
        if garden_plan_id is not None:
            loaded = await self.garden_client.get_plants(garden_plan_id)
        else:
            loaded = list(plants or [])
        return [p for p in loaded if p.lifecycle_status is not LifecycleStatus.REMOVED]

    async def transform_viewpoint(
        self,
        viewpoint_id: str,
        target_years: int,
        season: Season,
        garden_plan_id: Optional[str] = None,
        plants: Optional[Sequence[PlantRecord]] = None,
        camera_position: Optional[Point2D] = None,
        camera_direction: Optional[float] = None,
        as_of: Optional[date] = None,
    ) -> GenerationResult:
        """
        Generate the future view of a viewpoint photo.

        This method orchestrates:
        1. Fetching the viewpoint (camera overrides apply to this request only)
        2. Fetching the plan's plants, or using the plants supplied
        3. Filtering plants to the viewpoint's coverage area
        4. Projecting each visible plant to the horizon
        5. Composing the prompts and calling the generation provider

        Args:
            viewpoint_id: Viewpoint photo to transform
            target_years: Horizon in years (1..max_horizon_years)
            season: Season to depict
            garden_plan_id: Plan to read plants from; takes precedence over ``plants``
            plants: Plants to use when no plan is given
            camera_position: Camera position override
            camera_direction: Camera direction override in degrees
            as_of: Reference date for plant ages

        Returns:
            GenerationResult, failed if the provider could not deliver

        Raises:
            InvalidInputError: If the horizon is out of range
            NotFoundError: If the viewpoint or plan does not exist
        """
        self._check_horizon(target_years)
        as_of = as_of or date.today()

        viewpoint = await self.garden_client.get_viewpoint(viewpoint_id)
        viewpoint = self._with_camera_overrides(viewpoint, camera_position, camera_direction)

        all_plants = await self._load_plants(garden_plan_id, plants)
        visible = self.visibility_filter.filter(all_plants, viewpoint.coverage_area)
        projected = self.projector.project_all(visible, target_years, season, as_of=as_of)

        composed = self.composer.compose(
            photo=PhotoContext(name=viewpoint.name or f"Viewpoint {viewpoint.id}", description=viewpoint.description),
            projected_plants=projected,
            target_years=target_years,
            season=season,
            camera=CameraGeometry.from_viewpoint(viewpoint),
            target_calendar_year=as_of.year + target_years,
        )

        source_photo = await self.garden_client.get_photo(viewpoint)
        return await self.orchestrator.generate(
            source_photo,
            composed.text_prompt,
            composed.image_prompt,
            projected_plants=projected,
        )

    def _with_camera_overrides(
        self,
        viewpoint: Viewpoint,
        camera_position: Optional[Point2D],
        camera_direction: Optional[float],
    ) -> Viewpoint:
        if camera_position is None and camera_direction is None:
            return viewpoint
        data = viewpoint.model_dump()
        if camera_position is not None:
            data["camera_position"] = camera_position.model_dump()
        if camera_direction is not None:
            data["camera_direction"] = camera_direction
        return Viewpoint.model_validate(data)

    async def match_location(self, x: float, y: float) -> LocationMatch:
        """
        Find the viewpoint photo that best shows a map location.

        Args:
            x: Planar x coordinate (0-100)
            y: Planar y coordinate (0-100)

        Returns:
            LocationMatch; ``viewpoint`` is None with a suggestion when nothing covers the point

        Raises:
            InvalidInputError: If the coordinates are not finite or out of bounds
        """
        try:
            point = Point2D(x=x, y=y)
        except ValidationError:
            raise InvalidInputError(f"Coordinates must be finite numbers, got ({x}, {y})")
        if not point.in_bounds:
            raise InvalidInputError(f"Coordinates ({x}, {y}) are outside the 0-100 property grid")

        viewpoints = await self.garden_client.list_viewpoints()
        best = self.index.find_best_match(viewpoints, point)
        if best is None:
            logger.info(f"No viewpoint among {len(viewpoints)} covers ({x}, {y})")
            return LocationMatch(
                viewpoint=None,
                message=NO_MATCH_MESSAGE,
                suggestion=NO_MATCH_SUGGESTION,
            )
        return LocationMatch(viewpoint=best, match_quality=self.index.match_quality(best, point))

    async def project_garden(
        self,
        target_years: int,
        season: Season,
        garden_plan_id: Optional[str] = None,
        plants: Optional[Sequence[PlantRecord]] = None,
        as_of: Optional[date] = None,
    ) -> GardenProjection:
        """
        Project every active plant of a plan without calling the provider.

        Raises:
            InvalidInputError: If the horizon is out of range
            NotFoundError: If the plan does not exist
        """
        self._check_horizon(target_years)
        all_plants = await self._load_plants(garden_plan_id, plants)
        projected = self.projector.project_all(all_plants, target_years, season, as_of=as_of)
        return GardenProjection(target_years=target_years, season=season, plants=projected)
