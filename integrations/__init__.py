"""External data integrations.

This package contains:
- Adapter protocol: Common interface for per-protocol fee adapters
- Adapter registry: Maps protocol ids to adapters and metadata
- Upstream clients: The Graph subgraphs and CoinGecko prices
- Adapters: One module per protocol family
"""

from integrations.adapter_protocol import (
    FEE_ATTRIBUTE,
    FeeAdapter,
    FeeRecord,
    ProtocolFees,
    ProtocolMetadata,
    ProtocolRegistration,
)
from integrations.adapter_registry import AdapterRegistry, build_adapter_registry

__all__ = [
    "FEE_ATTRIBUTE",
    "AdapterRegistry",
    "FeeAdapter",
    "FeeRecord",
    "ProtocolFees",
    "ProtocolMetadata",
    "ProtocolRegistration",
    "build_adapter_registry",
]
