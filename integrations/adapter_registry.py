"""Adapter registry for per-protocol fee adapters.

The registry is responsible for:
- Holding one ProtocolRegistration per protocol id
- Resolving a protocol id to its adapter and metadata
- Listing every registered id (for protocol pickers and page generation)

The registry is populated once, by build_adapter_registry(), before any query
runs. There is no module-level instance; callers receive the registry they
were built with.
"""

import importlib
import logging

from integrations.adapter_protocol import FeeAdapter, ProtocolMetadata, ProtocolRegistration
from integrations.exceptions import ConfigurationError, ProtocolNotFoundError

logger = logging.getLogger(__name__)

# Adapter modules, each exposing register(register_fn, graph_client, price_client).
# Adding a new adapter module only requires appending one entry here.
ADAPTER_MODULES: list[str] = [
    "integrations.adapters.uniswap",
    "integrations.adapters.sushiswap",
    "integrations.adapters.ethereum",
]


class AdapterRegistry:
    """Registry mapping protocol ids to their fee adapter and metadata.

    Example:
        registry = AdapterRegistry()
        registry.register("uniswap-v2", adapter, metadata)
        fee = registry.lookup("uniswap-v2").adapter.query("fee", "2024-01-15")
    """

    def __init__(self):
        self._registrations: dict[str, ProtocolRegistration] = {}

    def register(self, protocol_id: str, adapter: FeeAdapter, metadata: ProtocolMetadata) -> None:
        """Register a protocol.

        Raises:
            ConfigurationError: If the id is already registered.
        """
        if protocol_id in self._registrations:
            raise ConfigurationError(
                f"Protocol '{protocol_id}' is already registered", protocol_id
            )
        self._registrations[protocol_id] = ProtocolRegistration(
            id=protocol_id, adapter=adapter, metadata=metadata
        )
        logger.debug("Protocol registered: %s", protocol_id)

    def lookup(self, protocol_id: str) -> ProtocolRegistration:
        """Get a registration by protocol id.

        Raises:
            ProtocolNotFoundError: If the id is not registered.
        """
        if protocol_id not in self._registrations:
            raise ProtocolNotFoundError(f"Unknown protocol: {protocol_id}", protocol_id)
        return self._registrations[protocol_id]

    def get_metadata(self, protocol_id: str) -> ProtocolMetadata:
        return self.lookup(protocol_id).metadata

    def list_ids(self) -> list[str]:
        """List all registered protocol ids, sorted."""
        return sorted(self._registrations)

    def protocol_names(self) -> dict[str, str]:
        """Map every protocol id to its display name, sorted by id."""
        return {pid: self._registrations[pid].metadata.name for pid in self.list_ids()}

    def __contains__(self, protocol_id: object) -> bool:
        return protocol_id in self._registrations

    def __len__(self) -> int:
        return len(self._registrations)


def build_adapter_registry(graph_client, price_client) -> AdapterRegistry:
    """Create a registry and run every adapter module's registration once.

    Args:
        graph_client: GraphClient used by subgraph-backed adapters.
        price_client: CoinGeckoClient used by adapters that convert
            native-token fees to USD.

    Returns:
        A fully populated AdapterRegistry.

    Raises:
        ConfigurationError: If two adapter modules register the same id.
    """
    registry = AdapterRegistry()
    for module_path in ADAPTER_MODULES:
        module = importlib.import_module(module_path)
        module.register(registry.register, graph_client, price_client)

    logger.info("Registered %d protocols: %s", len(registry), ", ".join(registry.list_ids()))
    return registry
