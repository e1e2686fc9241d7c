"""
Infrastructure layer: client for the generative image/text provider.

Calls to the provider are paid, so this client never retries. Every failure
is raised as one of the ProviderError subclasses and left to the caller.
"""
import base64
import logging
from typing import Any, Optional

import httpx

from app.config import settings
from app.domain.errors import (
    ProviderRejectedError,
    ProviderTimeoutError,
    ProviderUnavailableError,
)
from app.domain.models import SourcePhoto
from app.infrastructure.api_constants import APIConstants, ProviderEndpoints

logger = logging.getLogger(__name__)


class GenerationProviderClient:
    """Client for the scene-description and photo-edit provider."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        model: Optional[str] = None,
    ):
        self.base_url = base_url or settings.provider_base_url
        self.api_key = api_key if api_key is not None else settings.provider_api_key
        self.timeout_seconds = timeout_seconds or settings.provider_timeout_seconds
        self.model = model or settings.provider_model
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": APIConstants.CONTENT_TYPE_JSON,
                "accept": APIConstants.CONTENT_TYPE_JSON,
            },
            timeout=httpx.Timeout(self.timeout_seconds, connect=APIConstants.CONNECT_TIMEOUT),
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def __aenter__(self) -> "GenerationProviderClient":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def close(self):
        await self.client.aclose()

    def build_payload(
        self,
        prompt: str,
        image_prompt: str,
        source_photo: Optional[SourcePhoto],
    ) -> dict[str, Any]:
        image = None
        if source_photo is not None:
            image = {
                "mime_type": source_photo.mime_type,
                "data": base64.b64encode(source_photo.content).decode("ascii"),
            }
        return {
            "model": self.model,
            "prompt": prompt,
            "image_prompt": image_prompt,
            "image": image,
        }

    async def generate(
        self,
        prompt: str,
        image_prompt: str,
        source_photo: Optional[SourcePhoto] = None,
    ) -> Any:
        """
        Request a scene description and an edited photo.

        Args:
            prompt: Scene-description prompt
            image_prompt: Photo-edit prompt
            source_photo: Photo to edit; text-only when None

        Returns:
            Decoded JSON body, in whichever shape the provider sent it

        Raises:
            ProviderTimeoutError: The call exceeded the timeout
            ProviderRejectedError: The provider refused the request or sent malformed JSON
            ProviderUnavailableError: Transport failure, rate limit or server error
        """
        if not self.is_configured:
            raise ProviderUnavailableError(
                "Image generation is not configured: set PROVIDER_API_KEY to enable it"
            )

        payload = self.build_payload(prompt, image_prompt, source_photo)
        logger.info(
            f"Requesting generation from provider "
            f"({'with' if source_photo else 'without'} source photo)"
        )
        try:
            response = await self.client.post(ProviderEndpoints.GENERATE, json=payload)
        except httpx.TimeoutException as e:
            raise ProviderTimeoutError(
                f"Generation provider did not answer within {self.timeout_seconds:.0f}s: {e}"
            )
        except httpx.RequestError as e:
            raise ProviderUnavailableError(f"Generation provider unreachable: {str(e)}")

        status = response.status_code
        if status == 429:
            raise ProviderUnavailableError(f"Generation provider rate limit reached: {response.text}")
        if status >= 500:
            raise ProviderUnavailableError(f"Generation provider error: {status} - {response.text}")
        if status >= 400:
            # Content policy refusals and malformed requests
            raise ProviderRejectedError(f"Generation provider rejected the request: {status} - {response.text}")

        try:
            return response.json()
        except ValueError:
            raise ProviderRejectedError("Generation provider returned a response that is not JSON")


# Singleton instance
_provider_client: Optional[GenerationProviderClient] = None


def get_provider_client() -> GenerationProviderClient:
    global _provider_client
    if _provider_client is None:
        _provider_client = GenerationProviderClient()
    return _provider_client
