"""
Application service: run one generation request against the provider.

The provider answers either with a flat object or with the same object inside
a ``data`` envelope. Both shapes are parsed as an explicit union at this
boundary and unwrapped into a single payload before building the result.
"""
import asyncio
import base64
import binascii
import logging
import re
from typing import Annotated, List, Optional, Sequence, Union

from pydantic import AliasChoices, BaseModel, Field, TypeAdapter, ValidationError, field_validator

from app.config import settings
from app.domain.errors import ProviderError, ProviderRejectedError
from app.domain.models import (
    ErrorKind,
    GenerationResult,
    GenerationStatus,
    PlantShown,
    ProjectedPlant,
    SourcePhoto,
)
from app.infrastructure.generation_client import GenerationProviderClient

logger = logging.getLogger(__name__)

DEFAULT_GENERATED_MIME_TYPE = "image/png"

_WHITESPACE = re.compile(r"\s+")


def _well_formed_plants(value):
    """Keep the parseable entries of a plants-shown list, dropping the rest."""
    if not isinstance(value, list):
        return value
    plants = []
    for entry in value:
        try:
            plants.append(PlantShown.model_validate(entry))
        except ValidationError as e:
            logger.warning(f"Ignoring malformed plants_shown entry {entry!r}: {e.error_count()} error(s)")
    return plants


class StructuredDescription(BaseModel):
    """The JSON answer the scene prompt asks the model for."""
    scene_description: str = Field(
        default="",
        validation_alias=AliasChoices("sceneDescription", "scene_description", "description"),
    )
    plants_shown: Optional[List[PlantShown]] = Field(
        default=None,
        validation_alias=AliasChoices("plantsShown", "plants_shown"),
    )

    @field_validator("scene_description", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return "" if value is None else value

    @field_validator("plants_shown", mode="before")
    @classmethod
    def _drop_malformed_plants(cls, value):
        return _well_formed_plants(value)


class FlatProviderResponse(BaseModel):
    """Provider payload with its fields at the top level."""
    success: bool = True
    image: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("image", "image_base64", "imageBase64"),
        description="Base64 data, a data: URI or a URL",
    )
    image_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("image_url", "imageUrl"),
    )
    mime_type: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("mime_type", "mimeType"),
    )
    description: str = Field(
        default="",
        validation_alias=AliasChoices("description", "scene_description", "sceneDescription"),
    )
    plants_shown: Optional[List[PlantShown]] = Field(
        default=None,
        validation_alias=AliasChoices("plants_shown", "plantsShown"),
    )
    error: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("error", "message"),
    )

    @field_validator("description", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return "" if value is None else value

    @field_validator("plants_shown", mode="before")
    @classmethod
    def _drop_malformed_plants(cls, value):
        return _well_formed_plants(value)

    def unwrap(self) -> "FlatProviderResponse":
        return self


class EnvelopeProviderResponse(BaseModel):
    """Provider payload wrapped as ``{"data": {...}}``."""
    data: FlatProviderResponse
    success: Optional[bool] = None
    error: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("error", "message"),
    )

    def unwrap(self) -> FlatProviderResponse:
        if self.success is False:
            return self.data.model_copy(
                update={"success": False, "error": self.error or self.data.error}
            )
        return self.data


# Envelope first: a flat model would also accept an envelope with every field defaulted
ProviderResponse = Annotated[
    Union[EnvelopeProviderResponse, FlatProviderResponse],
    Field(union_mode="left_to_right"),
]
_provider_response_adapter = TypeAdapter(ProviderResponse)


def normalize_provider_response(raw) -> FlatProviderResponse:
    """
    Parse either provider response shape into one flat payload.

    Raises:
        ProviderRejectedError: If the body matches neither shape
    """
    if not isinstance(raw, dict):
        raise ProviderRejectedError(
            f"Generation provider returned {type(raw).__name__} instead of an object"
        )
    try:
        parsed = _provider_response_adapter.validate_python(raw)
    except ValidationError as e:
        raise ProviderRejectedError(
            f"Generation provider response is malformed ({e.error_count()} validation error(s))"
        )
    return lift_structured_description(parsed.unwrap())


def lift_structured_description(payload: FlatProviderResponse) -> FlatProviderResponse:
    """
    Read the scene and plants out of a description that holds the model's JSON answer.

    The object may be wrapped in prose or a code fence. Text that holds no
    parseable object is kept as the description.
    """
    text = payload.description
    start, end = text.find("{"), text.rfind("}")
    if start == -1 or end <= start:
        return payload
    try:
        structured = StructuredDescription.model_validate_json(text[start:end + 1])
    except ValidationError:
        return payload
    if not structured.scene_description and structured.plants_shown is None:
        return payload

    update = {"description": structured.scene_description or text}
    if payload.plants_shown is None:
        update["plants_shown"] = structured.plants_shown
    return payload.model_copy(update=update)


def split_image(payload: FlatProviderResponse) -> tuple[Optional[str], Optional[str], Optional[str]]:
    """
    Work out whether the generated image came inline or as a URL.

    Returns:
        (base64 data, mime type, url); unused members are None

    Raises:
        ProviderRejectedError: If inline image data is not valid base64
    """
    image_b64, mime_type, url = None, payload.mime_type, payload.image_url
    image = (payload.image or "").strip()

    if image.startswith(("http://", "https://")):
        url = url or image
    elif image.startswith("data:"):
        header, _, image_b64 = image.partition(",")
        mime_type = header[len("data:"):].split(";")[0] or mime_type
    elif image:
        image_b64 = image

    # MIME-style base64 is line-wrapped
    image_b64 = _WHITESPACE.sub("", image_b64 or "")
    if image_b64:
        try:
            base64.b64decode(image_b64, validate=True)
        except (binascii.Error, ValueError):
            raise ProviderRejectedError("Generation provider returned image data that is not valid base64")
        return image_b64, mime_type or DEFAULT_GENERATED_MIME_TYPE, url
    return None, None, url


class GenerationOrchestrator:
    """
    Sends a composed prompt to the provider and returns a GenerationResult.

    Failures come back as a failed result carrying an ErrorKind and the
    provider's message; nothing is retried here.
    """

    def __init__(
        self,
        provider_client: GenerationProviderClient,
        timeout_seconds: Optional[float] = None,
    ):
        self.provider_client = provider_client
        self.timeout_seconds = timeout_seconds or settings.provider_timeout_seconds

    async def generate(
        self,
        source_photo: Optional[SourcePhoto],
        prompt: str,
        image_prompt: str,
        projected_plants: Sequence[ProjectedPlant] = (),
    ) -> GenerationResult:
        """
        Generate the future view of a viewpoint.

        Args:
            source_photo: Photo to edit, or None for a description only
            prompt: Scene-description prompt
            image_prompt: Photo-edit prompt
            projected_plants: Plants the prompt mentions, used when the
                provider does not say which plants it showed

        Returns:
            A succeeded or failed GenerationResult
        """
        logger.info(
            f"Generation {GenerationStatus.PENDING.value}: "
            f"{len(projected_plants)} plant(s), photo={'yes' if source_photo else 'no'}"
        )
        try:
            raw = await asyncio.wait_for(
                self.provider_client.generate(prompt, image_prompt, source_photo),
                timeout=self.timeout_seconds,
            )
            result = self._build_result(normalize_provider_response(raw), prompt, image_prompt, projected_plants)
        except asyncio.TimeoutError:
            return self._failed(
                ErrorKind.PROVIDER_TIMEOUT,
                f"Generation timed out after {self.timeout_seconds:.0f}s; please try again",
                prompt,
                image_prompt,
            )
        except ProviderError as e:
            return self._failed(e.kind, e.message, prompt, image_prompt)

        logger.info(
            f"Generation {result.status.value}: "
            f"image={'inline' if result.image_base64 else 'url' if result.image_url else 'none'}, "
            f"{len(result.plants_shown)} plant(s) shown"
        )
        return result

    def _build_result(
        self,
        payload: FlatProviderResponse,
        prompt: str,
        image_prompt: str,
        projected_plants: Sequence[ProjectedPlant],
    ) -> GenerationResult:
        if not payload.success:
            raise ProviderRejectedError(payload.error or "Generation provider reported a failure")

        image_b64, mime_type, url = split_image(payload)
        if not image_b64 and not url and not payload.description.strip():
            raise ProviderRejectedError("Generation provider returned neither an image nor a description")

        if payload.plants_shown is not None:
            plants_shown = payload.plants_shown
        else:
            plants_shown = [
                PlantShown(name=p.name, visual_appearance=p.visual_appearance)
                for p in projected_plants
            ]

        return GenerationResult(
            status=GenerationStatus.SUCCEEDED,
            image_base64=image_b64,
            image_mime_type=mime_type,
            image_url=url,
            scene_description=payload.description.strip(),
            prompt=prompt,
            image_prompt=image_prompt,
            plants_shown=plants_shown,
        )

    def _failed(
        self,
        kind: ErrorKind,
        message: str,
        prompt: str,
        image_prompt: str,
    ) -> GenerationResult:
        logger.error(f"Generation {GenerationStatus.FAILED.value} ({kind.value}): {message}")
        return GenerationResult.failed(kind, message, prompt=prompt, image_prompt=image_prompt)
