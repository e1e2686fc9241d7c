"""
Domain service: restrict a plant inventory to what a viewpoint photo shows.
"""
import logging
from typing import Optional, Sequence

from app.domain.models import CoverageArea, PlantRecord
from app.utils.geo_coverage import contains

logger = logging.getLogger(__name__)


class PlantVisibilityFilter:
    """
    Keeps the plants that fall inside a viewpoint's coverage area.

    Plants placed only by latitude/longitude cannot be related to the photo
    frame, so they are always kept.
    """

    def filter(
        self,
        plants: Sequence[PlantRecord],
        area: Optional[CoverageArea],
    ) -> list[PlantRecord]:
        """
        Filter plants to those visible in a coverage area.

        Args:
            plants: Plants of the garden plan
            area: Coverage rectangle of the viewpoint; None keeps every plant

        Returns:
            Visible plants, in input order
        """
        if area is None:
            return list(plants)

        visible = []
        unplaced = 0
        for plant in plants:
            if plant.position is None:
                unplaced += 1
                visible.append(plant)
            elif contains(area, plant.position):
                visible.append(plant)

        if unplaced:
            logger.info(f"Kept {unplaced} plant(s) without planar coordinates as visible")
        logger.info(f"Visible plants: {len(visible)}/{len(plants)}")
        return visible
