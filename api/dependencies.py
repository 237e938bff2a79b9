"""Shared FastAPI dependencies for the fee routes."""

from fastapi import Depends, Request

from integrations.adapter_registry import AdapterRegistry
from services.fee_query_service import FeeQueryService


def get_registry(request: Request) -> AdapterRegistry:
    """Get the adapter registry built at startup (overridden in tests)."""
    return request.app.state.registry


def get_fee_query_service(
    registry: AdapterRegistry = Depends(get_registry),
) -> FeeQueryService:
    """Get a FeeQueryService over the application's registry."""
    return FeeQueryService(registry)
