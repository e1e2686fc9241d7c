"""
Infrastructure layer: Garden backend client with retry logic.

Reads viewpoints and plants from the persistence backend and resolves photo
blobs. All calls are idempotent GETs, so transient failures are retried.
"""
import logging
from typing import Any, List, Optional

import httpx
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from app.config import settings
from app.domain.errors import NotFoundError
from app.domain.models import PlantRecord, SourcePhoto, Viewpoint
from app.infrastructure.api_constants import APIConstants, GardenAPIEndpoints

logger = logging.getLogger(__name__)


class ExternalAPIError(Exception):
    """Custom exception for garden backend errors."""

    def __init__(self, message: str, status_code: int = 502):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class GardenAPIClient:
    """
    Client for the garden backend (viewpoints, plants, photo blobs).
    Implements retry logic with exponential backoff.
    """

    def __init__(self, base_url: Optional[str] = None, api_key: Optional[str] = None):
        """Initialize the API client with configuration."""
        self.base_url = base_url or settings.garden_api_base_url
        self.api_key = api_key if api_key is not None else settings.garden_api_key
        headers = {"accept": APIConstants.CONTENT_TYPE_JSON}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=APIConstants.DEFAULT_TIMEOUT,
        )

    async def __aenter__(self) -> "GardenAPIClient":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    @retry(
        stop=stop_after_attempt(settings.max_retry_attempts),
        wait=wait_exponential(
            multiplier=settings.retry_backoff_multiplier,
            min=settings.retry_min_wait,
            max=settings.retry_max_wait,
        ),
        retry=retry_if_exception_type((httpx.HTTPStatusError, httpx.RequestError)),
        reraise=True,
    )
    async def _fetch(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        """
        Make an HTTP request with retry logic.

        Args:
            method: HTTP method
            endpoint: API endpoint path or absolute URL
            **kwargs: Additional arguments for the request

        Returns:
            The successful response

        Raises:
            ExternalAPIError: On client errors (4xx), which are not retried
        """
        response = await self.client.request(method, endpoint, **kwargs)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            # Retry on server errors (5xx)
            if e.response.status_code >= 500:
                raise
            # Don't retry on client errors (4xx)
            raise ExternalAPIError(
                f"API request failed: {e.response.status_code} - {e.response.text}",
                status_code=e.response.status_code,
            )
        return response

    async def _send(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        try:
            return await self._fetch(method, endpoint, **kwargs)
        except httpx.HTTPStatusError as e:
            logger.error(f"Garden backend failed after retries: {e.response.status_code} {endpoint}")
            raise ExternalAPIError(
                f"API request failed: {e.response.status_code} - {e.response.text}",
                status_code=e.response.status_code,
            )
        except httpx.RequestError as e:
            logger.error(f"Garden backend unreachable: {e}")
            raise ExternalAPIError(f"API request error: {str(e)}")

    async def _make_request(self, method: str, endpoint: str, **kwargs) -> Any:
        response = await self._send(method, endpoint, **kwargs)
        try:
            return response.json()
        except ValueError:
            raise ExternalAPIError(f"Invalid JSON from garden backend at {endpoint}")

    @staticmethod
    def _collection(data: Any, key: str) -> List[dict]:
        """Accept a bare list or a list wrapped under ``key`` or ``data``."""
        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            for wrapper in (key, "data"):
                if isinstance(data.get(wrapper), list):
                    return data[wrapper]
        raise ExternalAPIError(f"Unexpected {key} payload from garden backend")

    async def get_viewpoint(self, viewpoint_id: str) -> Viewpoint:
        """
        Fetch a single viewpoint photo.

        Raises:
            NotFoundError: If the backend has no such viewpoint
            ExternalAPIError: If the request fails
        """
        try:
            data = await self._make_request("GET", GardenAPIEndpoints.get_viewpoint(viewpoint_id))
        except ExternalAPIError as e:
            if e.status_code == 404:
                raise NotFoundError(f"Viewpoint photo '{viewpoint_id}' not found")
            raise
        if isinstance(data, dict) and isinstance(data.get("data"), dict):
            data = data["data"]
        return Viewpoint.model_validate(data)

    async def list_viewpoints(self) -> List[Viewpoint]:
        """Fetch every viewpoint photo registered for the property."""
        data = await self._make_request("GET", GardenAPIEndpoints.VIEWPOINT_PHOTOS)
        return [
            Viewpoint.model_validate(item)
            for item in self._collection(data, "viewpoint_photos")
        ]

    async def get_plants(self, garden_plan_id: str) -> List[PlantRecord]:
        """
        Fetch the plants of a garden plan.

        Raises:
            NotFoundError: If the garden plan does not exist
        """
        try:
            data = await self._make_request("GET", GardenAPIEndpoints.get_plants(garden_plan_id))
        except ExternalAPIError as e:
            if e.status_code == 404:
                raise NotFoundError(f"Garden plan '{garden_plan_id}' not found")
            raise
        return [PlantRecord.model_validate(item) for item in self._collection(data, "plants")]

    async def get_photo(self, viewpoint: Viewpoint) -> Optional[SourcePhoto]:
        """
        Resolve a viewpoint's photo to raw bytes.

        Returns:
            SourcePhoto, or None if the viewpoint has no photo attached
        """
        if not viewpoint.photo_url:
            return None
        response = await self._send("GET", viewpoint.photo_url, headers={"accept": "image/*"})
        mime_type = response.headers.get("content-type", APIConstants.DEFAULT_IMAGE_MIME_TYPE)
        return SourcePhoto(content=response.content, mime_type=mime_type.split(";")[0].strip())


# Singleton instance
_api_client: Optional[GardenAPIClient] = None


def get_api_client() -> GardenAPIClient:
    """
    Get or create the singleton garden API client instance.

    Returns:
        GardenAPIClient instance
    """
    global _api_client
    if _api_client is None:
        _api_client = GardenAPIClient()
    return _api_client
