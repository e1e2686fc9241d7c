"""
Domain service: match map locations to the viewpoint photo that best shows them.

Matching is purely rectangular: a viewpoint's field of view and direction are
recorded but do not restrict which points it covers.
"""
import logging
from typing import Optional, Sequence

import numpy as np

from app.config import settings
from app.domain.models import MatchQuality, Point2D, Viewpoint
from app.utils.geo_coverage import contains, distance_from_center

logger = logging.getLogger(__name__)

# Lower bound of each label band, best first
QUALITY_BANDS: tuple[tuple[int, str], ...] = (
    (80, "excellent"),
    (50, "good"),
    (20, "fair"),
)


def label_for_score(score: int) -> str:
    for lower_bound, label in QUALITY_BANDS:
        if score >= lower_bound:
            return label
    return "poor"


class ViewpointIndex:
    """
    Finds the best-covering viewpoint for a point and scores the match.

    The score decays linearly with the distance from the coverage centre and
    reaches zero at ``max_distance`` planar units.
    """

    def __init__(self, max_distance: Optional[float] = None):
        self.max_distance = max_distance or settings.match_max_distance

    def covering(self, viewpoints: Sequence[Viewpoint], point: Point2D) -> list[Viewpoint]:
        return [v for v in viewpoints if contains(v.coverage_area, point)]

    def find_best_match(
        self,
        viewpoints: Sequence[Viewpoint],
        point: Point2D,
    ) -> Optional[Viewpoint]:
        """
        Find the viewpoint whose coverage is best centred on a point.

        Args:
            viewpoints: Candidate viewpoints for the property
            point: Planar location to match

        Returns:
            The covering viewpoint closest to its coverage centre, or None
        """
        candidates = self.covering(viewpoints, point)
        if not candidates:
            logger.debug(f"No viewpoint covers ({point.x}, {point.y})")
            return None

        distances = np.array(
            [distance_from_center(v.coverage_area, point) for v in candidates],
            dtype=float,
        )
        # argmin keeps the first viewpoint on ties
        best = candidates[int(np.argmin(distances))]
        logger.debug(
            f"Matched ({point.x}, {point.y}) to viewpoint {best.id} "
            f"out of {len(candidates)} covering candidates"
        )
        return best

    def match_quality(self, viewpoint: Viewpoint, point: Point2D) -> MatchQuality:
        distance = distance_from_center(viewpoint.coverage_area, point)
        raw = (1 - distance / self.max_distance) * 100
        score = int(round(float(np.clip(raw, 0.0, 100.0))))
        return MatchQuality(score=score, label=label_for_score(score))
