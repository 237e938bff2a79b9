"""Typed exception hierarchy for fee data errors.

Provides structured exceptions for differentiated error handling
(configuration defects vs upstream failures vs broken cache invariants).
"""


class FeeDataError(Exception):
    """Base exception for all fee-data errors.

    Carries the protocol id so callers can identify which protocol failed.
    """

    def __init__(self, message: str, protocol_id: str = ""):
        self.protocol_id = protocol_id
        super().__init__(message)


class ConfigurationError(FeeDataError):
    """Registry misconfiguration (duplicate or unknown protocol id)."""

    pass


class ProtocolNotFoundError(ConfigurationError):
    """Lookup of a protocol id that was never registered."""

    pass


class UnsupportedAttributeError(FeeDataError):
    """An adapter was asked for an attribute other than ``"fee"``."""

    def __init__(self, attribute: str, protocol_id: str = ""):
        self.attribute = attribute
        super().__init__(
            f"{protocol_id or 'Adapter'} doesn't support {attribute}", protocol_id
        )


class UpstreamFetchError(FeeDataError):
    """The adapter's upstream data source (subgraph, price API) failed."""

    def __init__(
        self,
        message: str,
        protocol_id: str = "",
        status_code: int | None = None,
    ):
        self.status_code = status_code
        super().__init__(message, protocol_id)

    @property
    def retriable(self) -> bool:
        """429 (rate limit) and 5xx errors are generally retriable."""
        if self.status_code is None:
            return False
        return self.status_code == 429 or self.status_code >= 500


class UpstreamDataError(UpstreamFetchError):
    """Malformed or unparseable response from the upstream source."""

    pass


class MissingCellError(FeeDataError):
    """A (protocol, date) cell needed for a series is absent from the store.

    Raised after a presumed-successful fetch; indicates the query service
    did not return every requested day.
    """

    def __init__(self, protocol_id: str, date_key: str):
        self.date_key = date_key
        super().__init__(f"No fee data for {protocol_id} on {date_key}", protocol_id)


class FeeApiError(FeeDataError):
    """The fee backend answered a batch request with ``success: false``."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
