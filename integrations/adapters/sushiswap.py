"""SushiSwap fee adapter."""

from functools import partial

from integrations.adapter_protocol import ProtocolMetadata, RegisterFunction
from integrations.adapters import DailyFeeAdapter, entity_rows, parse_amount
from integrations.graph_client import GraphClient
from utils.dates import date_to_timestamp

SUBGRAPH = "sushiswap/exchange"

# 0.25% goes to liquidity providers, 0.05% to xSUSHI stakers
SWAP_FEE_RATE = 0.003

QUERY = """query fees($date: Int!) {
  dayDatas(where: {date: $date}) {
    date
    volumeUSD
  }
}"""


def get_sushiswap_fee(graph: GraphClient, date_key: str) -> float:
    data = graph.query(SUBGRAPH, QUERY, {"date": date_to_timestamp(date_key)}, "fees")
    rows = entity_rows(data, "dayDatas", SUBGRAPH)
    if not rows:
        return 0.0
    return parse_amount(rows[-1], "volumeUSD", SUBGRAPH) * SWAP_FEE_RATE


def register(register_fn: RegisterFunction, graph_client: GraphClient, price_client) -> None:
    register_fn(
        "sushiswap",
        DailyFeeAdapter("sushiswap", partial(get_sushiswap_fee, graph_client)),
        ProtocolMetadata(
            name="SushiSwap",
            category="dex",
            description="SushiSwap is a community-owned fork of Uniswap",
            fee_description=(
                "Trading fees are paid by traders to liquidity providers and SUSHI stakers"
            ),
            website="https://sushi.com",
            blockchain="Ethereum",
            source="The Graph Protocol",
            adapter="sushiswap",
            token_ticker="SUSHI",
            token_coingecko="sushi",
            protocol_launch="2020-09-09",
            token_launch="2020-08-26",
        ),
    )
