#!/usr/bin/env python
"""Print a protocol's daily fee series, as the chart would show it.

Fees go through an IncrementalFeeCache, either resolved in-process
through the adapters or fetched from a running backend.

Usage:
    python -m scripts.fee_chart uniswap-v2
    python -m scripts.fee_chart uniswap-v2 --secondary sushiswap --days 30 --smoothing 7
    python -m scripts.fee_chart uniswap-v3 --api-url http://localhost:8000
"""

import argparse
import asyncio
from datetime import datetime, timezone

from config import settings
from integrations.adapter_registry import build_adapter_registry
from integrations.coingecko_client import CoinGeckoClient
from integrations.fee_api_client import FeeApiClient
from integrations.graph_client import GraphClient
from logging_config import setup_logging
from services.fee_cache import IncrementalFeeCache, LocalFeeFetcher
from services.fee_query_service import FeeQueryService
from services.fee_series import SeriesPoint, Window
from services.fee_store import FeeStore
from utils.dates import shift_days, utc_today


def format_series(points: list[SeriesPoint], primary: str, secondary: str | None) -> list[str]:
    """Render series points as aligned text rows."""
    header = f"{'date':<12}{primary:>20}"
    if secondary:
        header += f"{secondary:>20}"
    lines = [header]
    for point in points:
        day = datetime.fromtimestamp(point.timestamp, tz=timezone.utc).date().isoformat()
        line = f"{day:<12}{point.primary:>20,.2f}"
        if secondary:
            line += f"{point.secondary:>20,.2f}"
        lines.append(line)
    return lines


async def run(args) -> list[SeriesPoint]:
    today = utc_today()
    window = Window(shift_days(today, -args.days), shift_days(today, -1))

    if args.api_url:
        async with FeeApiClient(args.api_url, timeout=settings.HTTP_TIMEOUT_SECONDS) as client:
            # Seed from the page snapshot; only days outside it are fetched.
            detail = await client.get_protocol(args.protocol)
            cache = IncrementalFeeCache(client, FeeStore(detail["fee_cache"]))
            return await cache.recompute(window, args.protocol, args.secondary, args.smoothing)

    graph_client = GraphClient(
        base_url=settings.SUBGRAPH_BASE_URL,
        api_key=settings.GRAPH_API_KEY or None,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )
    price_client = CoinGeckoClient(
        api_key=settings.COINGECKO_API_KEY or None,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )
    try:
        registry = build_adapter_registry(graph_client, price_client)
        cache = IncrementalFeeCache(LocalFeeFetcher(FeeQueryService(registry)))
        return await cache.recompute(window, args.protocol, args.secondary, args.smoothing)
    finally:
        graph_client.close()
        price_client.close()


def main():
    parser = argparse.ArgumentParser(description="Print daily protocol fees")
    parser.add_argument("protocol", help="Protocol id, e.g. uniswap-v2")
    parser.add_argument("--secondary", default=None, help="Protocol id to compare against")
    parser.add_argument(
        "--days",
        type=int,
        default=settings.DEFAULT_WINDOW_DAYS,
        help="Number of days ending yesterday (default: %(default)s)",
    )
    parser.add_argument(
        "--smoothing",
        type=int,
        default=0,
        help="Trailing days averaged into each point (default: 0)",
    )
    parser.add_argument(
        "--api-url",
        default=None,
        help="Fetch from a running backend instead of querying subgraphs directly",
    )

    args = parser.parse_args()
    if args.days < 1:
        parser.error("--days must be at least 1")
    if args.smoothing < 0:
        parser.error("--smoothing must not be negative")

    setup_logging()
    points = asyncio.run(run(args))
    if not points:
        print("No fee data available.")
        return
    for line in format_series(points, args.protocol, args.secondary):
        print(line)


if __name__ == "__main__":
    main()
