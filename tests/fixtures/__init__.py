"""Test fixtures and sample data."""
import pytest

from services.fee_query_service import FeeQueryService
from tests.fixtures.mocks import MockFeeAdapter, build_mock_registry
from utils.dates import parse_date_key


def linear_fees(base: float = 100.0, step: float = 10.0):
    """Fee function growing by ``step`` per day of the month.

    Makes every day's fee distinct and easy to recompute in assertions.
    """

    def fee(date_key: str) -> float:
        return base + step * (parse_date_key(date_key).day - 1)

    return fee


@pytest.fixture
def primary_adapter():
    return MockFeeAdapter(linear_fees(100.0, 10.0), protocol_id="alpha")


@pytest.fixture
def secondary_adapter():
    return MockFeeAdapter(linear_fees(5.0, 1.0), protocol_id="beta")


@pytest.fixture
def mock_registry(primary_adapter, secondary_adapter):
    """Registry with two mock protocols, 'alpha' and 'beta'."""
    return build_mock_registry({"alpha": primary_adapter, "beta": secondary_adapter})


@pytest.fixture
def fee_query_service(mock_registry):
    return FeeQueryService(mock_registry)
