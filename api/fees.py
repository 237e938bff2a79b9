"""Fee data API endpoints."""

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from api.dependencies import get_fee_query_service
from integrations.exceptions import ProtocolNotFoundError, UpstreamFetchError
from schemas.fees import FeeRecordResponse, FeesByDayResponse, ProtocolFeesResponse
from services.fee_query_service import FeeQueryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["fees"])


def parse_missing_dates(request: Request) -> dict[str, list[str]]:
    """Read ``?<protocol>=<date>,<date>&...`` into protocol id -> DateKeys.

    Empty values are allowed and yield an empty list for that protocol.
    """
    missing: dict[str, list[str]] = {}
    for protocol_id, value in request.query_params.multi_items():
        if not protocol_id:
            continue
        dates = missing.setdefault(protocol_id, [])
        dates.extend(d.strip() for d in value.split(",") if d.strip())
    return missing


def _failure(status_code: int, message: str) -> JSONResponse:
    body = FeesByDayResponse(success=False, error=message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


@router.get("/feesByDay", response_model=FeesByDayResponse)
def get_fees_by_day(
    request: Request,
    service: FeeQueryService = Depends(get_fee_query_service),
):
    """Fetch fees for specific days of one or more protocols.

    Query parameters are protocol ids, each mapped to a comma-separated
    list of ``YYYY-MM-DD`` days, e.g. ``?uniswap-v2=2024-01-01,2024-01-02``.
    """
    missing = parse_missing_dates(request)
    if not missing:
        return _failure(400, "No protocols requested")

    try:
        service.validate_fees_by_day(missing)
    except ProtocolNotFoundError as e:
        return _failure(404, str(e))
    except ValueError as e:
        return _failure(400, str(e))

    try:
        results = service.get_fees_by_day(missing)
    except UpstreamFetchError as e:
        logger.warning("feesByDay failed for %s", ", ".join(missing), exc_info=True)
        return _failure(502, str(e))

    return FeesByDayResponse(
        success=True,
        data=[
            ProtocolFeesResponse(
                id=protocol.id,
                data=[FeeRecordResponse(**record.to_dict()) for record in protocol.data],
            )
            for protocol in results
        ],
    )


@router.get("/fees/{protocol_id}", response_model=list[FeeRecordResponse])
def get_date_range_fees(
    protocol_id: str,
    start: date = Query(..., description="Start date (inclusive)"),
    end: date = Query(..., description="End date (inclusive)"),
    service: FeeQueryService = Depends(get_fee_query_service),
):
    """Fetch one fee record per day in [start, end], ascending."""
    if start > end:
        raise HTTPException(status_code=400, detail="start must be on or before end")

    try:
        records = service.get_date_range_data(protocol_id, start, end)
    except ProtocolNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except UpstreamFetchError as e:
        logger.warning("Fee range fetch failed for %s", protocol_id, exc_info=True)
        raise HTTPException(status_code=502, detail=str(e))

    return [FeeRecordResponse(**record.to_dict()) for record in records]
