"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import fees, protocols
from config import settings
from integrations.adapter_registry import build_adapter_registry
from integrations.coingecko_client import CoinGeckoClient
from integrations.graph_client import GraphClient
from logging_config import setup_logging

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the adapter registry once, before the first request."""
    graph_client = GraphClient(
        base_url=settings.SUBGRAPH_BASE_URL,
        api_key=settings.GRAPH_API_KEY or None,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )
    price_client = CoinGeckoClient(
        api_key=settings.COINGECKO_API_KEY or None,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )
    app.state.registry = build_adapter_registry(graph_client, price_client)
    try:
        yield
    finally:
        graph_client.close()
        price_client.close()


app = FastAPI(
    title="Crypto Fees",
    description="Daily transaction fees per blockchain protocol",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS configuration for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(fees.router)
app.include_router(protocols.router)


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "ok"}
