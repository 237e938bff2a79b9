"""Uniswap V1, V2 and V3 (Ethereum and Optimism) fee adapters."""

from functools import partial

from integrations.adapter_protocol import ProtocolMetadata, RegisterFunction
from integrations.adapters import DailyFeeAdapter, entity_rows, last_row, parse_amount
from integrations.graph_client import GraphClient
from utils.dates import date_to_timestamp

# V1 and V2 charge a flat 0.3% on every trade
SWAP_FEE_RATE = 0.003

# V2 pairs whose volume is wash trading and is excluded before applying the fee rate
BLACKLIST_ADDRESSES = [
    "0x7d7e813082ef6c143277c71786e5be626ec77b20",
    "0xe5ffe183ae47f1a0e4194618d34c5b05b98953a8",
    "0xf9c1fa7d41bf44ade1dd08d37cc68f67ae75bf92",
    "0x23fe4ee3bd9bfd1152993a7954298bb4d426698f",
    "0x382a9a8927f97f7489af3f0c202b23ed1eb772b5",
]

V1_SUBGRAPH = "graphprotocol/uniswap"
V2_SUBGRAPH = "uniswap/uniswap-v2"
V3_SUBGRAPH = "ianlapham/uniswap-v3-prod"
OPTIMISM_SUBGRAPH = "ianlapham/uniswap-optimism"

V1_QUERY = """query fees($date: Int!) {
  uniswapDayDatas(where: {date: $date}) {
    date
    dailyVolumeInUSD
  }
}"""

V2_QUERY = """query fees($date: Int!, $blacklistAddresses: [Bytes!]!) {
  uniswapDayDatas(where: {date: $date}) {
    date
    dailyVolumeUSD
  }
  blacklist: pairDayDatas(where: {pairAddress_in: $blacklistAddresses, date: $date}) {
    date
    dailyVolumeUSD
  }
}"""

V3_QUERY = """query fees($date: Int!) {
  uniswapDayDatas(where: {date: $date}) {
    feesUSD
  }
}"""


def get_uniswap_v1_fee(graph: GraphClient, date_key: str) -> float:
    data = graph.query(V1_SUBGRAPH, V1_QUERY, {"date": date_to_timestamp(date_key)}, "fees")
    day = last_row(entity_rows(data, "uniswapDayDatas", V1_SUBGRAPH), "uniswapDayDatas", date_key)
    return parse_amount(day, "dailyVolumeInUSD", V1_SUBGRAPH) * SWAP_FEE_RATE


def get_uniswap_v2_fee(graph: GraphClient, date_key: str) -> float:
    """Daily V2 fees, with blacklisted pair volume subtracted first."""
    data = graph.query(
        V2_SUBGRAPH,
        V2_QUERY,
        {"date": date_to_timestamp(date_key), "blacklistAddresses": BLACKLIST_ADDRESSES},
        "fees",
    )
    blacklist_volume = sum(
        parse_amount(pair, "dailyVolumeUSD", V2_SUBGRAPH)
        for pair in entity_rows(data, "blacklist", V2_SUBGRAPH)
    )
    day = last_row(entity_rows(data, "uniswapDayDatas", V2_SUBGRAPH), "uniswapDayDatas", date_key)
    volume = parse_amount(day, "dailyVolumeUSD", V2_SUBGRAPH) - blacklist_volume
    return max(volume, 0.0) * SWAP_FEE_RATE


def get_uniswap_v3_fee(graph: GraphClient, subgraph: str, date_key: str) -> float:
    """Daily V3 fees as reported by the subgraph.

    A day with no rows counts as zero fees: chains added recently (Optimism)
    don't index their full history yet.
    """
    data = graph.query(subgraph, V3_QUERY, {"date": date_to_timestamp(date_key)}, "fees")
    rows = entity_rows(data, "uniswapDayDatas", subgraph)
    if not rows:
        return 0.0
    return parse_amount(rows[-1], "feesUSD", subgraph)


_DESCRIPTION = "Uniswap is a permissionless, decentralized exchange"
_FEE_DESCRIPTION = "Trading fees are paid by traders to liquidity providers"


def register(register_fn: RegisterFunction, graph_client: GraphClient, price_client) -> None:
    register_fn(
        "uniswap-v1",
        DailyFeeAdapter("uniswap-v1", partial(get_uniswap_v1_fee, graph_client)),
        ProtocolMetadata(
            name="Uniswap V1",
            category="dex",
            description=_DESCRIPTION,
            fee_description=_FEE_DESCRIPTION,
            website="https://uniswap.org",
            blockchain="Ethereum",
            source="The Graph Protocol",
            adapter="uniswap",
            protocol_launch="2018-11-02",
        ),
    )

    register_fn(
        "uniswap-v2",
        DailyFeeAdapter("uniswap-v2", partial(get_uniswap_v2_fee, graph_client)),
        ProtocolMetadata(
            name="Uniswap V2",
            category="dex",
            description=_DESCRIPTION,
            fee_description=_FEE_DESCRIPTION,
            website="https://uniswap.org",
            blockchain="Ethereum",
            source="The Graph Protocol",
            adapter="uniswap",
            token_ticker="UNI",
            token_coingecko="uniswap",
            protocol_launch="2020-05-04",
            token_launch="2020-09-14",
        ),
    )

    register_fn(
        "uniswap-v3",
        DailyFeeAdapter("uniswap-v3", partial(get_uniswap_v3_fee, graph_client, V3_SUBGRAPH)),
        ProtocolMetadata(
            name="Uniswap V3",
            category="dex",
            description=_DESCRIPTION,
            fee_description=_FEE_DESCRIPTION,
            website="https://uniswap.org",
            blockchain="Ethereum",
            source="The Graph Protocol",
            adapter="uniswap",
            token_ticker="UNI",
            token_coingecko="uniswap",
            protocol_launch="2021-05-05",
            token_launch="2020-09-14",
        ),
    )

    register_fn(
        "uniswap-optimism",
        DailyFeeAdapter(
            "uniswap-optimism", partial(get_uniswap_v3_fee, graph_client, OPTIMISM_SUBGRAPH)
        ),
        ProtocolMetadata(
            name="Uniswap V3 (Optimism)",
            category="dex",
            description=_DESCRIPTION,
            fee_description=_FEE_DESCRIPTION,
            website="https://uniswap.org",
            blockchain="Optimism",
            source="The Graph Protocol",
            adapter="uniswap",
            token_ticker="UNI",
            token_coingecko="uniswap",
            protocol_launch="2021-07-09",
            token_launch="2020-09-14",
        ),
    )
