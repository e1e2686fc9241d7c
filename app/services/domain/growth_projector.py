"""
Domain service: project a plant's size and appearance to a future horizon.

The growth model is linear from planting size and saturates at the mature
cap. Season only changes the appearance text, never the numbers.
"""
import logging
import math
from datetime import date
from typing import Optional, Sequence

from app.config import settings
from app.domain.errors import InvalidInputError
from app.domain.models import (
    GrowthHabit,
    GrowthProfile,
    PlantRecord,
    ProjectedPlant,
    Season,
)
from app.services.domain.growth_profiles import ProfileSource, resolve_growth_profile

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365.25

# (upper bound of age / maturity, stage)
GROWTH_STAGES: tuple[tuple[float, str], ...] = (
    (0.1, "Seedling"),
    (0.3, "Young"),
    (0.6, "Established"),
    (1.0, "Maturing"),
)

SEASON_PHRASES: dict[str, dict[Season, str]] = {
    "deciduous": {
        Season.SPRING: "fresh leaves and blossom",
        Season.SUMMER: "in full green leaf",
        Season.AUTUMN: "leaves turning gold and russet",
        Season.WINTER: "bare branches",
    },
    "evergreen": {
        Season.SPRING: "glossy new growth",
        Season.SUMMER: "dense evergreen foliage",
        Season.AUTUMN: "dark evergreen foliage",
        Season.WINTER: "evergreen foliage touched by frost",
    },
    "herbaceous": {
        Season.SPRING: "fresh green shoots",
        Season.SUMMER: "in full flower",
        Season.AUTUMN: "seed heads and fading foliage",
        Season.WINTER: "dormant and cut back",
    },
}


def growth_stage(age_years: float, maturity_years: float) -> str:
    progress = age_years / maturity_years if maturity_years > 0 else 1.0
    for upper_bound, stage in GROWTH_STAGES:
        if progress < upper_bound:
            return stage
    return "Mature"


def height_band(height_cm: float, mature_height_cm: float) -> str:
    ratio = height_cm / mature_height_cm if mature_height_cm > 0 else 1.0
    if ratio < 0.35:
        return "sapling"
    if ratio < 0.85:
        return "young"
    return "mature"


def season_phrase(profile: GrowthProfile, season: Season) -> str:
    if profile.habit is GrowthHabit.HERBACEOUS:
        key = "herbaceous"
    else:
        key = "deciduous" if profile.deciduous else "evergreen"
    return SEASON_PHRASES[key][season]


class GrowthProjector:
    """
    Projects plants forward by a horizon of whole years.

    Stateless: every call recomputes from the plant record and the static
    growth tables.
    """

    def __init__(self, max_horizon_years: Optional[int] = None):
        self.max_horizon_years = max_horizon_years or settings.max_horizon_years

    def current_age_years(self, plant: PlantRecord, as_of: date) -> float:
        """
        Age of a plant in whole years as of a date.

        Uses the planting date when known, then the estimated age, else 0.
        """
        if plant.planted_date is not None:
            days = (as_of - plant.planted_date).days
            return float(max(0, math.floor(days / DAYS_PER_YEAR)))
        if plant.estimated_age_years is not None:
            return float(plant.estimated_age_years)
        return 0.0

    def project(
        self,
        plant: PlantRecord,
        target_years: int,
        season: Season,
        as_of: Optional[date] = None,
    ) -> ProjectedPlant:
        """
        Project a plant to ``target_years`` from now.

        Args:
            plant: The plant to project
            target_years: Horizon offset in years (not a calendar year)
            season: Season the appearance text describes
            as_of: Reference date for the current age, defaults to today

        Returns:
            ProjectedPlant with size, carbon and appearance at the horizon

        Raises:
            InvalidInputError: If the horizon is outside 0..max_horizon_years
        """
        if not 0 <= target_years <= self.max_horizon_years:
            raise InvalidInputError(
                f"target_years must be between 0 and {self.max_horizon_years}, got {target_years}"
            )

        resolved = resolve_growth_profile(plant.species, plant.category)
        profile = resolved.profile
        if resolved.source is ProfileSource.GENERIC:
            logger.warning(
                f"No growth profile for species '{plant.species}' or category "
                f"'{plant.category}' (plant {plant.id}); using generic {profile.habit.value} profile"
            )

        current_age = self.current_age_years(plant, as_of or date.today())
        projected_age = current_age + target_years

        current_height = round(profile.height_at(current_age))
        current_canopy = round(profile.canopy_at(current_age))
        height = round(profile.height_at(projected_age))
        canopy = round(profile.canopy_at(projected_age))
        carbon = round(profile.carbon_between(current_age, projected_age), 2)

        band = height_band(height, profile.mature_height_cm)
        category = plant.plant_category
        label = category.label if category else (plant.category or "plant").replace("_", " ")
        appearance = (
            f"{band.capitalize()} {label}, about {height / 100:.1f} m tall and "
            f"{canopy / 100:.1f} m wide, {season_phrase(profile, season)}"
        )

        unchanged = height == current_height and canopy == current_canopy
        return ProjectedPlant(
            plant_id=plant.id,
            name=plant.display_name,
            species=plant.species,
            category=plant.category,
            current_age_years=current_age,
            projected_age_years=projected_age,
            current_height_cm=current_height,
            height_cm=height,
            canopy_cm=canopy,
            carbon_kg=carbon,
            growth_stage=growth_stage(projected_age, profile.maturity_years),
            height_band=band,
            visual_appearance=appearance,
            profile_source=resolved.source.value,
            newly_planted=current_age == 0 and unchanged,
        )

    def project_all(
        self,
        plants: Sequence[PlantRecord],
        target_years: int,
        season: Season,
        as_of: Optional[date] = None,
    ) -> list[ProjectedPlant]:
        as_of = as_of or date.today()
        return [self.project(p, target_years, season, as_of=as_of) for p in plants]
