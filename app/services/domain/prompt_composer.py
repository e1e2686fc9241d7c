"""
Domain service: build the prompts sent to the generation provider.

Prompts are plain functions of their inputs (no clock, no randomness) so a
regeneration with the same plants, horizon and season sends the same text.
"""
from dataclasses import dataclass
from typing import Optional, Sequence

from app.domain.models import CameraGeometry, ProjectedPlant, Season

SEASON_DETAILS: dict[Season, str] = {
    Season.SPRING: "early spring with fresh new growth, budding leaves and spring flowers",
    Season.SUMMER: "full summer with lush green foliage, flowers in bloom and vibrant colors",
    Season.AUTUMN: "autumn with changing leaves in warm reds, oranges and yellows",
    Season.WINTER: "winter with bare deciduous trees, evergreen presence and possible frost",
}

COMPASS_POINTS = (
    "north", "north-east", "east", "south-east",
    "south", "south-west", "west", "north-west",
)


@dataclass(frozen=True)
class PhotoContext:
    name: str
    description: Optional[str] = None


@dataclass(frozen=True)
class ComposedPrompt:
    text_prompt: str
    image_prompt: str


def compass_point(direction: float) -> str:
    return COMPASS_POINTS[int(((direction % 360) + 22.5) // 45) % 8]


def describe_camera(camera: CameraGeometry) -> str:
    if camera.position is not None:
        where = f"standing at map position ({camera.position.x:.1f}, {camera.position.y:.1f})"
    else:
        where = "standing at an unrecorded map position"
    return (
        f"{where}, facing {camera.direction:.0f}° ({compass_point(camera.direction)}) "
        f"with a {camera.field_of_view:.0f}° field of view"
    )


def _plant_marker(plant: ProjectedPlant) -> str:
    return " [newly planted]" if plant.newly_planted else ""


class PromptComposer:
    """Composes the scene-description prompt and the photo-edit prompt."""

    def compose(
        self,
        photo: PhotoContext,
        projected_plants: Sequence[ProjectedPlant],
        target_years: int,
        season: Season,
        camera: CameraGeometry,
        target_calendar_year: Optional[int] = None,
    ) -> ComposedPrompt:
        """
        Build both prompts for one generation request.

        Args:
            photo: Name and description of the viewpoint photo
            projected_plants: Visible plants projected to the horizon, in display order
            target_years: Horizon in years
            season: Season to depict
            camera: Camera position, direction and field of view
            target_calendar_year: Calendar year shown to the model, if known

        Returns:
            ComposedPrompt with the text and image prompts
        """
        when = f"in {target_years} year{'s' if target_years != 1 else ''}"
        if target_calendar_year is not None:
            when += f" (by {target_calendar_year})"

        return ComposedPrompt(
            text_prompt=self._text_prompt(photo, projected_plants, when, season, camera),
            image_prompt=self._image_prompt(photo, projected_plants, when, season, camera),
        )

    def _text_prompt(
        self,
        photo: PhotoContext,
        plants: Sequence[ProjectedPlant],
        when: str,
        season: Season,
        camera: CameraGeometry,
    ) -> str:
        season_details = SEASON_DETAILS[season]
        lines = [
            "You are an expert garden designer and landscape visualizer. "
            f'This is a photo of my garden viewpoint called "{photo.name}".',
        ]
        if photo.description:
            lines.append(f"Description: {photo.description}")
        lines += [
            f"The photo was taken {describe_camera(camera)}.",
            "",
            "## Your Task",
            "",
            f"Describe in vivid detail how this exact view will look {when}, "
            f"during {season_details}.",
            "",
            "## Plants That Will Be Visible (with predicted growth)",
            "",
        ]
        if plants:
            for plant in plants:
                lines.append(
                    f"- {plant.name}: {plant.height_cm / 100:.1f}m tall, "
                    f"{plant.canopy_cm / 100:.1f}m canopy spread, {plant.growth_stage} stage"
                    f"{_plant_marker(plant)}. Appearance: {plant.visual_appearance}"
                )
        else:
            lines.append("No specific plants in this view yet - describe a natural garden progression.")
        lines += [
            "",
            "## Response Format",
            "",
            "Respond with JSON only:",
            '{"sceneDescription": "3-4 paragraphs describing the transformed view", '
            '"plantsShown": [{"name": "plant name", '
            '"visualAppearance": "1-2 sentences on how this plant looks in the scene"}]}',
            "",
            "Be poetic but grounded in botanical reality.",
        ]
        return "\n".join(lines)

    def _image_prompt(
        self,
        photo: PhotoContext,
        plants: Sequence[ProjectedPlant],
        when: str,
        season: Season,
        camera: CameraGeometry,
    ) -> str:
        lines = [
            f'Edit this photograph of the garden viewpoint "{photo.name}" to show the same view '
            f"{when}, during {SEASON_DETAILS[season]}.",
            f"Camera: {describe_camera(camera)}. Keep the exact camera position, perspective, "
            "horizon and framing; only the plants change.",
        ]
        if plants:
            lines.append("Plants to show:")
            for plant in plants:
                lines.append(f"- {plant.name}{_plant_marker(plant)}: {plant.visual_appearance}")
        else:
            lines.append("No new plants: show the existing garden matured naturally.")
        lines.append(
            "Keep buildings, paths, fences and sky unchanged. "
            "Photorealistic, natural lighting, no text or watermarks."
        )
        return "\n".join(lines)
