"""Pydantic schemas for protocols and fee data."""

from typing import Optional

from pydantic import BaseModel


class FeeRecordResponse(BaseModel):
    """USD fee for one day. Extra numeric attributes pass through."""

    date: str
    fee: float

    model_config = {"extra": "allow"}


class ProtocolFeesResponse(BaseModel):
    """Fee records for one protocol."""

    id: str
    data: list[FeeRecordResponse]


class FeesByDayResponse(BaseModel):
    """Response schema for a batch missing-day fetch."""

    success: bool
    data: list[ProtocolFeesResponse] = []
    error: Optional[str] = None


class ProtocolMetadataResponse(BaseModel):
    """Descriptive metadata for a protocol."""

    name: str
    category: str
    description: Optional[str] = None
    fee_description: Optional[str] = None
    website: Optional[str] = None
    blockchain: Optional[str] = None
    source: Optional[str] = None
    adapter: Optional[str] = None
    token_ticker: Optional[str] = None
    token_coingecko: Optional[str] = None
    protocol_launch: Optional[str] = None
    token_launch: Optional[str] = None

    model_config = {"from_attributes": True}


class ProtocolSummaryResponse(BaseModel):
    """Response schema for one entry of the protocol list."""

    id: str
    name: str
    category: str
    blockchain: Optional[str] = None


class WindowResponse(BaseModel):
    start: str
    end: str


class ProtocolDetailResponse(BaseModel):
    """Everything a protocol page needs for its first render.

    ``fee_cache`` seeds the client-side fee store for the default window;
    ``protocols`` maps every id to its name for the comparison picker.
    """

    id: str
    metadata: ProtocolMetadataResponse
    protocols: dict[str, str]
    window: WindowResponse
    fee_cache: dict[str, dict[str, dict[str, float]]]
