"""
Unit tests for growth profiles and growth projection.

Tests cover:
- Profile resolution order (species, category, generic)
- Monotonic, capped growth
- Carbon accrual up to maturity
- Appearance text and seasons
- Horizon validation
"""
import logging
import pytest
from datetime import date

from app.domain.errors import InvalidInputError
from app.domain.models import PlantCategory, PlantRecord, Season
from app.services.domain.growth_profiles import (
    CATEGORY_PROFILES,
    GENERIC_HERBACEOUS,
    GENERIC_WOODY,
    ProfileSource,
    SPECIES_PROFILES,
    normalize_species,
    resolve_growth_profile,
)
from app.services.domain.growth_projector import (
    GrowthProjector,
    growth_stage,
    height_band,
)

AS_OF = date(2026, 6, 1)


@pytest.fixture
def projector() -> GrowthProjector:
    return GrowthProjector(max_horizon_years=50)


def make_plant(species="unknown", category="tree", **kwargs) -> PlantRecord:
    return PlantRecord(id="p1", species=species, category=category, **kwargs)


# ============================================================
# Profile Resolution Tests
# ============================================================

class TestProfileResolution:
    """Tests for growth profile lookup."""

    def test_every_category_has_a_profile(self):
        assert set(CATEGORY_PROFILES) == set(PlantCategory)

    @pytest.mark.parametrize("species", ["quercus_robur", "Quercus robur", "  QUERCUS-ROBUR "])
    def test_species_lookup_ignores_case_and_separators(self, species):
        resolved = resolve_growth_profile(species, "tree")

        assert resolved.source is ProfileSource.SPECIES
        assert resolved.profile.mature_height_cm == 3000

    def test_normalize_species(self):
        assert normalize_species("Malus  domestica") == "malus_domestica"
        assert normalize_species(None) == ""

    def test_unknown_species_falls_back_to_category(self):
        resolved = resolve_growth_profile("Ginkgo biloba", "tree")

        assert resolved.source is ProfileSource.CATEGORY
        assert resolved.profile is CATEGORY_PROFILES[PlantCategory.TREE]

    def test_unknown_category_uses_generic_profile(self):
        woody = resolve_growth_profile("mystery", "climbing vine")
        herbaceous = resolve_growth_profile("mystery", "groundcover")

        assert woody.source is ProfileSource.GENERIC
        assert woody.profile is GENERIC_WOODY
        assert herbaceous.profile is GENERIC_HERBACEOUS

    def test_category_profiles_reach_their_cap_at_maturity(self):
        for category, profile in CATEGORY_PROFILES.items():
            assert profile.height_at(profile.maturity_years) == pytest.approx(profile.mature_height_cm), category


# ============================================================
# Projection Tests
# ============================================================

class TestProjection:
    """Tests for GrowthProjector.project."""

    def test_projects_planted_oak(self, projector):
        oak = make_plant(
            species="Quercus robur",
            common_name="English Oak",
            planted_date=date(2023, 5, 1),
        )

        projected = projector.project(oak, 5, Season.SUMMER, as_of=AS_OF)

        assert projected.current_age_years == 3
        assert projected.projected_age_years == 8
        assert projected.current_height_cm == 270
        assert projected.height_cm == 470
        assert projected.canopy_cm == 290
        assert projected.carbon_kg == pytest.approx(110.0)
        assert projected.growth_stage == "Young"
        assert projected.profile_source == "species"
        assert projected.name == "English Oak"
        assert projected.visual_appearance == (
            "Sapling tree, about 4.7 m tall and 2.9 m wide, in full green leaf"
        )
        assert not projected.newly_planted

    @pytest.mark.parametrize("category", list(PlantCategory))
    def test_growth_is_monotonic_and_capped(self, projector, category):
        plant = make_plant(category=category.value, estimated_age_years=0)
        profile = CATEGORY_PROFILES[category]

        heights = [projector.project(plant, n, Season.SUMMER, as_of=AS_OF).height_cm for n in range(51)]
        canopies = [projector.project(plant, n, Season.SUMMER, as_of=AS_OF).canopy_cm for n in range(51)]

        assert heights == sorted(heights)
        assert canopies == sorted(canopies)
        assert max(heights) <= profile.mature_height_cm
        assert max(canopies) <= profile.mature_canopy_cm

    @pytest.mark.parametrize("species", sorted(SPECIES_PROFILES))
    def test_species_growth_is_monotonic_and_capped(self, projector, species):
        plant = make_plant(species=species, estimated_age_years=0)
        profile = SPECIES_PROFILES[species]

        projections = [projector.project(plant, n, Season.SUMMER, as_of=AS_OF) for n in range(51)]
        heights = [p.height_cm for p in projections]
        canopies = [p.canopy_cm for p in projections]

        assert all(p.profile_source == "species" for p in projections)
        assert heights == sorted(heights)
        assert canopies == sorted(canopies)
        assert max(heights) <= profile.mature_height_cm
        assert max(canopies) <= profile.mature_canopy_cm

    def test_age_from_planted_date_is_whole_years(self, projector):
        plant = make_plant(planted_date=date(2025, 6, 2))

        assert projector.current_age_years(plant, AS_OF) == 0

    def test_future_planted_date_counts_as_zero(self, projector):
        plant = make_plant(planted_date=date(2027, 1, 1))

        assert projector.current_age_years(plant, AS_OF) == 0

    def test_estimated_age_used_without_planted_date(self, projector):
        plant = make_plant(estimated_age_years=12)

        assert projector.current_age_years(plant, AS_OF) == 12

    def test_carbon_stops_at_maturity(self, projector):
        annual = make_plant(category="annual")

        projected = projector.project(annual, 5, Season.SUMMER, as_of=AS_OF)

        assert projected.carbon_kg == pytest.approx(0.1)
        assert projected.growth_stage == "Mature"

    def test_mature_plant_sequesters_nothing(self, projector):
        old_tree = make_plant(category="tree", estimated_age_years=40)

        assert projector.project(old_tree, 5, Season.SUMMER, as_of=AS_OF).carbon_kg == 0

    def test_new_plant_at_horizon_zero_is_newly_planted(self, projector):
        seedling = make_plant(category="vegetable")

        projected = projector.project(seedling, 0, Season.SPRING, as_of=AS_OF)

        assert projected.newly_planted
        assert projected.height_cm == projected.current_height_cm

    def test_new_plant_that_grows_is_not_newly_planted(self, projector):
        seedling = make_plant(category="vegetable")

        assert not projector.project(seedling, 1, Season.SPRING, as_of=AS_OF).newly_planted

    def test_generic_fallback_logs_warning(self, projector, caplog):
        plant = make_plant(species="mystery", category="succulent")

        with caplog.at_level(logging.WARNING):
            projected = projector.project(plant, 3, Season.SUMMER, as_of=AS_OF)

        assert projected.profile_source == "generic"
        assert "No growth profile" in caplog.text

    @pytest.mark.parametrize("target_years", [-1, 51])
    def test_horizon_out_of_range(self, projector, target_years):
        with pytest.raises(InvalidInputError):
            projector.project(make_plant(), target_years, Season.SUMMER, as_of=AS_OF)

    def test_project_all_keeps_order(self, projector):
        plants = [
            PlantRecord(id="a", species="x", category="herb"),
            PlantRecord(id="b", species="y", category="tree"),
        ]

        projected = projector.project_all(plants, 2, Season.SUMMER, as_of=AS_OF)

        assert [p.plant_id for p in projected] == ["a", "b"]


# ============================================================
# Season and Appearance Tests
# ============================================================

class TestSeasonAppearance:
    """Season changes the appearance text, never the numbers."""

    def test_season_does_not_change_size(self, projector):
        tree = make_plant(category="tree", estimated_age_years=2)

        summer = projector.project(tree, 5, Season.SUMMER, as_of=AS_OF)
        winter = projector.project(tree, 5, Season.WINTER, as_of=AS_OF)

        assert (summer.height_cm, summer.canopy_cm, summer.carbon_kg) == (
            winter.height_cm, winter.canopy_cm, winter.carbon_kg
        )
        assert summer.visual_appearance != winter.visual_appearance

    def test_deciduous_tree_in_winter_has_bare_branches(self, projector):
        tree = make_plant(category="tree")

        assert "bare branches" in projector.project(tree, 5, Season.WINTER, as_of=AS_OF).visual_appearance

    def test_evergreen_keeps_foliage_in_winter(self, projector):
        box = make_plant(species="buxus_sempervirens", category="hedge")

        appearance = projector.project(box, 5, Season.WINTER, as_of=AS_OF).visual_appearance

        assert "bare branches" not in appearance
        assert "evergreen" in appearance

    @pytest.mark.parametrize("age,maturity,stage", [
        (0, 10, "Seedling"),
        (1, 10, "Young"),
        (3, 10, "Established"),
        (6, 10, "Maturing"),
        (10, 10, "Mature"),
        (15, 10, "Mature"),
    ])
    def test_growth_stage(self, age, maturity, stage):
        assert growth_stage(age, maturity) == stage

    def test_height_band(self):
        assert height_band(100, 1000) == "sapling"
        assert height_band(500, 1000) == "young"
        assert height_band(900, 1000) == "mature"
