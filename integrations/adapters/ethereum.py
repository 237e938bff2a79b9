"""Ethereum network fee adapter.

Transaction fees are indexed in ETH by a daily-fee subgraph and converted to
USD with CoinGecko's price for the same day.
"""

from functools import partial

from integrations.adapter_protocol import ProtocolMetadata, RegisterFunction
from integrations.adapters import DailyFeeAdapter, entity_rows, last_row, parse_amount
from integrations.coingecko_client import CoinGeckoClient
from integrations.graph_client import GraphClient

SUBGRAPH = "dmihal/ethereum-daily-fees"
COINGECKO_ID = "ethereum"

QUERY = """query fees($date: String!) {
  days(where: {date: $date}) {
    date
    fees
  }
}"""


def get_ethereum_fee(graph: GraphClient, prices: CoinGeckoClient, date_key: str) -> float:
    data = graph.query(SUBGRAPH, QUERY, {"date": date_key}, "fees")
    day = last_row(entity_rows(data, "days", SUBGRAPH), "days", date_key)
    fees_eth = parse_amount(day, "fees", SUBGRAPH)
    return fees_eth * prices.get_daily_price(COINGECKO_ID, date_key)


def register(
    register_fn: RegisterFunction, graph_client: GraphClient, price_client: CoinGeckoClient
) -> None:
    register_fn(
        "eth",
        DailyFeeAdapter("eth", partial(get_ethereum_fee, graph_client, price_client)),
        ProtocolMetadata(
            name="Ethereum",
            category="l1",
            description="Ethereum is the most widely used smart-contract platform",
            fee_description="Transaction fees are paid by users to miners",
            website="https://ethereum.org",
            blockchain="Ethereum",
            source="The Graph Protocol, CoinGecko",
            adapter="ethereum",
            token_ticker="ETH",
            token_coingecko="ethereum",
            protocol_launch="2015-07-30",
            token_launch="2015-07-30",
        ),
    )
