"""Protocol listing and protocol page API endpoints."""

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_fee_query_service, get_registry
from config import settings
from integrations.adapter_registry import AdapterRegistry
from integrations.exceptions import ProtocolNotFoundError, UpstreamFetchError
from schemas.fees import (
    ProtocolDetailResponse,
    ProtocolMetadataResponse,
    ProtocolSummaryResponse,
    WindowResponse,
)
from services.fee_query_service import FeeQueryService, default_window
from utils.dates import utc_today

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/protocols", tags=["protocols"])


@router.get("", response_model=list[ProtocolSummaryResponse])
def list_protocols(registry: AdapterRegistry = Depends(get_registry)):
    """List every registered protocol, sorted by id."""
    result = []
    for protocol_id in registry.list_ids():
        metadata = registry.get_metadata(protocol_id)
        result.append(
            ProtocolSummaryResponse(
                id=protocol_id,
                name=metadata.name,
                category=metadata.category,
                blockchain=metadata.blockchain,
            )
        )
    return result


@router.get("/{protocol_id}", response_model=ProtocolDetailResponse)
def get_protocol(
    protocol_id: str,
    registry: AdapterRegistry = Depends(get_registry),
    service: FeeQueryService = Depends(get_fee_query_service),
):
    """Get a protocol's metadata plus fees for the default window.

    The ``fee_cache`` seeds the client's fee store so the first chart
    renders without another round trip.
    """
    try:
        metadata = registry.get_metadata(protocol_id)
    except ProtocolNotFoundError:
        raise HTTPException(status_code=404, detail=f"Unknown protocol: {protocol_id}")

    days = settings.DEFAULT_WINDOW_DAYS
    today = utc_today()
    try:
        fee_cache = service.get_initial_snapshot(protocol_id, days, today=today)
    except UpstreamFetchError as e:
        logger.warning("Initial fee snapshot failed for %s", protocol_id, exc_info=True)
        raise HTTPException(status_code=502, detail=str(e))

    start, end = default_window(days, today=today)
    return ProtocolDetailResponse(
        id=protocol_id,
        metadata=ProtocolMetadataResponse(**asdict(metadata)),
        protocols=registry.protocol_names(),
        window=WindowResponse(start=start, end=end),
        fee_cache=fee_cache,
    )
