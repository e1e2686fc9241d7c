"""
Growth reference data and profile resolution.

Resolution order: exact species, then the category default, then a generic
woody or herbaceous profile. Every PlantCategory has a category default.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from app.domain.models import GrowthHabit, GrowthProfile, PlantCategory


class ProfileSource(str, Enum):
    SPECIES = "species"
    CATEGORY = "category"
    GENERIC = "generic"


@dataclass(frozen=True)
class ResolvedProfile:
    profile: GrowthProfile
    source: ProfileSource


# Sapling sizes at planting (height cm, canopy cm)
PLANTING_SIZES: dict[PlantCategory, tuple[float, float]] = {
    PlantCategory.TREE: (150, 50),
    PlantCategory.FRUIT_TREE: (120, 50),
    PlantCategory.SHRUB: (40, 30),
    PlantCategory.HEDGE: (60, 25),
    PlantCategory.BERRY: (30, 25),
    PlantCategory.WALL_PLANT: (20, 20),
    PlantCategory.PERENNIAL: (10, 10),
    PlantCategory.HERB: (10, 10),
    PlantCategory.ANNUAL: (5, 5),
    PlantCategory.VEGETABLE: (5, 5),
    PlantCategory.BULB: (5, 5),
}

WOODY_CATEGORIES = frozenset({
    PlantCategory.TREE,
    PlantCategory.FRUIT_TREE,
    PlantCategory.SHRUB,
    PlantCategory.HEDGE,
    PlantCategory.BERRY,
    PlantCategory.WALL_PLANT,
})


def habit_for(category: PlantCategory) -> GrowthHabit:
    return GrowthHabit.WOODY if category in WOODY_CATEGORIES else GrowthHabit.HERBACEOUS


def _category_default(
    category: PlantCategory,
    mature_height_cm: float,
    mature_canopy_cm: float,
    years_to_mature: float,
    carbon_per_year_kg: float,
    deciduous: bool = True,
) -> GrowthProfile:
    """Linear growth from planting size that reaches the cap at maturity."""
    initial_height, initial_canopy = PLANTING_SIZES[category]
    return GrowthProfile(
        initial_height_cm=initial_height,
        annual_height_growth_cm=(mature_height_cm - initial_height) / years_to_mature,
        mature_height_cm=mature_height_cm,
        initial_canopy_cm=initial_canopy,
        annual_canopy_growth_cm=(mature_canopy_cm - initial_canopy) / years_to_mature,
        mature_canopy_cm=mature_canopy_cm,
        carbon_per_year_kg=carbon_per_year_kg,
        maturity_years=years_to_mature,
        deciduous=deciduous,
        habit=habit_for(category),
    )


def _species(
    category: PlantCategory,
    mature_height_cm: float,
    yearly_height_growth_cm: float,
    canopy_spread_rate_cm: float,
    carbon_per_year_kg: float,
    maturity_years: float,
    deciduous: bool = True,
) -> GrowthProfile:
    initial_height, initial_canopy = PLANTING_SIZES[category]
    return GrowthProfile(
        initial_height_cm=min(initial_height, mature_height_cm),
        annual_height_growth_cm=yearly_height_growth_cm,
        mature_height_cm=mature_height_cm,
        initial_canopy_cm=initial_canopy,
        annual_canopy_growth_cm=canopy_spread_rate_cm,
        # Canopy is assumed to top out around 80% of mature height
        mature_canopy_cm=mature_height_cm * 0.8,
        carbon_per_year_kg=carbon_per_year_kg,
        maturity_years=maturity_years,
        deciduous=deciduous,
        habit=habit_for(category),
    )


CATEGORY_PROFILES: dict[PlantCategory, GrowthProfile] = {
    PlantCategory.TREE: _category_default(PlantCategory.TREE, 1500, 1000, 30, 15),
    PlantCategory.FRUIT_TREE: _category_default(PlantCategory.FRUIT_TREE, 500, 400, 15, 8),
    PlantCategory.SHRUB: _category_default(PlantCategory.SHRUB, 200, 150, 5, 2),
    PlantCategory.PERENNIAL: _category_default(PlantCategory.PERENNIAL, 80, 60, 3, 0.5),
    PlantCategory.HEDGE: _category_default(PlantCategory.HEDGE, 250, 100, 8, 3),
    PlantCategory.ANNUAL: _category_default(PlantCategory.ANNUAL, 60, 40, 1, 0.1),
    PlantCategory.VEGETABLE: _category_default(PlantCategory.VEGETABLE, 80, 50, 1, 0.1),
    PlantCategory.HERB: _category_default(PlantCategory.HERB, 50, 40, 2, 0.2, deciduous=False),
    PlantCategory.BERRY: _category_default(PlantCategory.BERRY, 150, 100, 4, 1),
    PlantCategory.WALL_PLANT: _category_default(
        PlantCategory.WALL_PLANT, 30, 50, 3, 0.3, deciduous=False
    ),
    PlantCategory.BULB: _category_default(PlantCategory.BULB, 40, 20, 2, 0.1),
}

SPECIES_PROFILES: dict[str, GrowthProfile] = {
    # Trees
    "quercus_robur": _species(PlantCategory.TREE, 3000, 40, 30, 22, 50),
    "fagus_sylvatica": _species(PlantCategory.TREE, 2500, 35, 25, 18, 40),
    "acer_campestre": _species(PlantCategory.TREE, 1500, 30, 25, 12, 30),
    "betula_pendula": _species(PlantCategory.TREE, 2000, 50, 30, 10, 25),
    "prunus_avium": _species(PlantCategory.TREE, 1500, 35, 25, 8, 20),
    "tilia_cordata": _species(PlantCategory.TREE, 2500, 30, 25, 15, 40),
    # Fruit trees
    "malus_domestica": _species(PlantCategory.FRUIT_TREE, 400, 30, 30, 5, 8),
    "pyrus_communis": _species(PlantCategory.FRUIT_TREE, 500, 35, 25, 6, 10),
    "prunus_cerasus": _species(PlantCategory.FRUIT_TREE, 400, 40, 30, 4, 7),
    "prunus_domestica": _species(PlantCategory.FRUIT_TREE, 400, 30, 25, 4, 8),
    # Shrubs
    "corylus_avellana": _species(PlantCategory.SHRUB, 500, 40, 35, 3, 10),
    "sambucus_nigra": _species(PlantCategory.SHRUB, 400, 50, 40, 2, 5),
    "viburnum_opulus": _species(PlantCategory.SHRUB, 300, 30, 30, 1.5, 8),
    "rosa_canina": _species(PlantCategory.SHRUB, 300, 40, 30, 1, 5),
    "crataegus_monogyna": _species(PlantCategory.SHRUB, 600, 25, 25, 3, 15),
    # Hedges
    "carpinus_betulus": _species(PlantCategory.HEDGE, 200, 30, 20, 2, 10),
    "ligustrum_vulgare": _species(PlantCategory.HEDGE, 250, 35, 25, 1.5, 8),
    "buxus_sempervirens": _species(PlantCategory.HEDGE, 150, 10, 10, 0.5, 20, deciduous=False),
    # Perennials and herbs
    "lavandula_angustifolia": _species(PlantCategory.PERENNIAL, 60, 20, 25, 0.2, 3, deciduous=False),
    "salvia_officinalis": _species(PlantCategory.HERB, 60, 25, 30, 0.15, 3, deciduous=False),
    "rosmarinus_officinalis": _species(PlantCategory.HERB, 120, 30, 30, 0.3, 5, deciduous=False),
}

# Fallbacks for categories outside the known set
GENERIC_WOODY = GrowthProfile(
    initial_height_cm=50,
    annual_height_growth_cm=30,
    mature_height_cm=300,
    initial_canopy_cm=30,
    annual_canopy_growth_cm=25,
    mature_canopy_cm=240,
    carbon_per_year_kg=2,
    maturity_years=10,
    deciduous=True,
    habit=GrowthHabit.WOODY,
)

GENERIC_HERBACEOUS = GrowthProfile(
    initial_height_cm=5,
    annual_height_growth_cm=55,
    mature_height_cm=60,
    initial_canopy_cm=5,
    annual_canopy_growth_cm=35,
    mature_canopy_cm=40,
    carbon_per_year_kg=0.1,
    maturity_years=1,
    deciduous=True,
    habit=GrowthHabit.HERBACEOUS,
)

_WOODY_HINTS = ("tree", "shrub", "hedge", "bush", "climber", "vine", "conifer", "wood")


def normalize_species(species: Optional[str]) -> str:
    """'Quercus robur' and 'quercus_robur' both map to 'quercus_robur'."""
    if not species:
        return ""
    return "_".join(species.strip().lower().replace("-", " ").replace("_", " ").split())


def generic_profile(category: Optional[str]) -> GrowthProfile:
    """Pick a generic profile from whatever the category text hints at."""
    text = (category or "").lower()
    if any(hint in text for hint in _WOODY_HINTS):
        return GENERIC_WOODY
    return GENERIC_HERBACEOUS


def resolve_growth_profile(species: Optional[str], category: Optional[str]) -> ResolvedProfile:
    """
    Look up the growth profile for a plant.

    Args:
        species: Species name, any casing or separator style
        category: Raw category string

    Returns:
        The profile and which table it came from
    """
    species_profile = SPECIES_PROFILES.get(normalize_species(species))
    if species_profile is not None:
        return ResolvedProfile(species_profile, ProfileSource.SPECIES)

    plant_category = PlantCategory.parse(category)
    if plant_category is not None:
        return ResolvedProfile(CATEGORY_PROFILES[plant_category], ProfileSource.CATEGORY)

    return ResolvedProfile(generic_profile(category), ProfileSource.GENERIC)
