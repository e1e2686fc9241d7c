"""
Unit tests for prompt composition.
"""
import pytest

from app.domain.models import CameraGeometry, Point2D, ProjectedPlant, Season
from app.services.domain.prompt_composer import (
    PhotoContext,
    PromptComposer,
    compass_point,
    describe_camera,
)


def make_projected(name: str, newly_planted: bool = False, **overrides) -> ProjectedPlant:
    values = dict(
        plant_id=name.lower().replace(" ", "_"),
        name=name,
        species="quercus_robur",
        category="tree",
        current_age_years=3,
        projected_age_years=8,
        current_height_cm=270,
        height_cm=470,
        canopy_cm=290,
        carbon_kg=110.0,
        growth_stage="Young",
        height_band="sapling",
        visual_appearance="Sapling tree, about 4.7 m tall and 2.9 m wide, in full green leaf",
        profile_source="species",
        newly_planted=newly_planted,
    )
    values.update(overrides)
    return ProjectedPlant(**values)


@pytest.fixture
def camera() -> CameraGeometry:
    return CameraGeometry(position=Point2D(x=5, y=5), direction=90, field_of_view=60)


@pytest.fixture
def photo() -> PhotoContext:
    return PhotoContext(name="Front lawn", description="Looking across the lawn")


class TestPromptComposer:
    """Tests for PromptComposer.compose."""

    def test_same_inputs_give_same_prompts(self, photo, camera):
        plants = [make_projected("English Oak"), make_projected("Hazel")]
        composer = PromptComposer()

        first = composer.compose(photo, plants, 5, Season.SUMMER, camera, target_calendar_year=2031)
        second = composer.compose(photo, plants, 5, Season.SUMMER, camera, target_calendar_year=2031)

        assert first == second

    def test_every_plant_named_with_appearance(self, photo, camera):
        plants = [make_projected("English Oak"), make_projected("Hazel", visual_appearance="Young shrub")]

        composed = PromptComposer().compose(photo, plants, 5, Season.SUMMER, camera)

        for prompt in (composed.text_prompt, composed.image_prompt):
            assert "English Oak" in prompt
            assert "Sapling tree, about 4.7 m tall and 2.9 m wide" in prompt
            assert "Hazel" in prompt
            assert "Young shrub" in prompt
        assert "- English Oak: 4.7m tall, 2.9m canopy spread, Young stage." in composed.text_prompt

    def test_plants_listed_in_given_order(self, photo, camera):
        plants = [make_projected("Zelkova"), make_projected("Acer")]

        text = PromptComposer().compose(photo, plants, 5, Season.SUMMER, camera).text_prompt

        assert text.index("Zelkova") < text.index("Acer")

    def test_camera_direction_and_field_of_view_stated(self, photo, camera):
        composed = PromptComposer().compose(photo, [], 5, Season.SUMMER, camera)

        for prompt in (composed.text_prompt, composed.image_prompt):
            assert "facing 90° (east)" in prompt
            assert "60° field of view" in prompt
            assert "map position (5.0, 5.0)" in prompt

    def test_newly_planted_plants_are_flagged_not_omitted(self, photo, camera):
        plants = [make_projected("Basil", newly_planted=True)]

        composed = PromptComposer().compose(photo, plants, 1, Season.SPRING, camera)

        assert "Basil" in composed.text_prompt
        assert "[newly planted]" in composed.text_prompt
        assert "- Basil [newly planted]:" in composed.image_prompt

    def test_empty_plant_list(self, photo, camera):
        composed = PromptComposer().compose(photo, [], 5, Season.AUTUMN, camera)

        assert "No specific plants in this view yet" in composed.text_prompt
        assert "No new plants" in composed.image_prompt

    def test_horizon_season_and_year_in_prompt(self, photo, camera):
        composed = PromptComposer().compose(
            photo, [], 1, Season.WINTER, camera, target_calendar_year=2027
        )

        assert "in 1 year (by 2027)" in composed.text_prompt
        assert "winter" in composed.image_prompt
        assert '"Front lawn"' in composed.image_prompt
        assert "Description: Looking across the lawn" in composed.text_prompt

    def test_text_prompt_requests_json_response(self, photo, camera):
        text = PromptComposer().compose(photo, [], 5, Season.SUMMER, camera).text_prompt

        assert "sceneDescription" in text
        assert "plantsShown" in text


class TestCameraDescription:
    """Tests for camera geometry text."""

    @pytest.mark.parametrize("direction,point", [
        (0, "north"),
        (10, "north"),
        (45, "north-east"),
        (180, "south"),
        (270, "west"),
        (350, "north"),
    ])
    def test_compass_point(self, direction, point):
        assert compass_point(direction) == point

    def test_unrecorded_position(self):
        camera = CameraGeometry(position=None, direction=0, field_of_view=60)

        assert "unrecorded map position" in describe_camera(camera)
