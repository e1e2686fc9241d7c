"""
API endpoint constants and configuration.

This module contains all external API endpoint paths and related constants.
Centralizing these values makes it easy to swap out endpoints or update API versions.
"""


# Garden backend endpoints (persistence collaborator)
class GardenAPIEndpoints:
    """Garden backend endpoint paths."""

    # Base paths
    PROPERTY_BASE = "/api/v1/property"

    VIEWPOINT_PHOTOS = f"{PROPERTY_BASE}/viewpoint_photos"
    VIEWPOINT_PHOTO_BY_ID = f"{PROPERTY_BASE}/viewpoint_photos/{{viewpoint_id}}"
    GARDEN_PLAN_PLANTS = f"{PROPERTY_BASE}/garden_plans/{{garden_plan_id}}/plants"

    @classmethod
    def get_viewpoint(cls, viewpoint_id: str) -> str:
        """
        Get the endpoint for a single viewpoint photo.

        Args:
            viewpoint_id: Viewpoint photo ID

        Returns:
            Formatted endpoint path
        """
        return cls.VIEWPOINT_PHOTO_BY_ID.format(viewpoint_id=viewpoint_id)

    @classmethod
    def get_plants(cls, garden_plan_id: str) -> str:
        return cls.GARDEN_PLAN_PLANTS.format(garden_plan_id=garden_plan_id)


# Generation provider endpoints
class ProviderEndpoints:
    GENERATE = "/v1/garden-visions:generate"


# API Configuration Constants
class APIConstants:
    """General API configuration constants."""

    # HTTP Headers
    CONTENT_TYPE_JSON = "application/json"

    # Timeouts (in seconds)
    DEFAULT_TIMEOUT = 30.0
    CONNECT_TIMEOUT = 10.0

    DEFAULT_IMAGE_MIME_TYPE = "image/jpeg"
