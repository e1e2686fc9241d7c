"""
Dependency injection for FastAPI.
"""
from typing import Annotated
from fastapi import Depends

from app.infrastructure.garden_api_client import (
    GardenAPIClient,
    get_api_client,
)
from app.infrastructure.generation_client import (
    GenerationProviderClient,
    get_provider_client,
)
from app.services.application.generation_orchestrator import GenerationOrchestrator
from app.services.application.viewpoint_service import ViewpointService


def get_generation_orchestrator(
    provider_client: Annotated[GenerationProviderClient, Depends(get_provider_client)],
) -> GenerationOrchestrator:
    """
    Dependency factory for GenerationOrchestrator.

    Args:
        provider_client: Generation provider client (injected)

    Returns:
        GenerationOrchestrator instance
    """
    return GenerationOrchestrator(provider_client=provider_client)


def get_viewpoint_service(
    garden_client: Annotated[GardenAPIClient, Depends(get_api_client)],
    orchestrator: Annotated[GenerationOrchestrator, Depends(get_generation_orchestrator)],
) -> ViewpointService:
    """
    Dependency factory for ViewpointService.

    Args:
        garden_client: Garden backend client (injected)
        orchestrator: Generation orchestrator (injected)

    Returns:
        ViewpointService instance
    """
    return ViewpointService(garden_client=garden_client, orchestrator=orchestrator)


# Type aliases for cleaner route signatures
ViewpointServiceDep = Annotated[ViewpointService, Depends(get_viewpoint_service)]
