"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_registry
from main import app
# Pytest fixtures - imported to make them available to tests
from tests.fixtures import (  # noqa: F401
    fee_query_service,
    mock_registry,
    primary_adapter,
    secondary_adapter,
)
from tests.fixtures.mocks import MockFeeAdapter, build_busy_price_registry, build_mock_registry


@pytest.fixture(name="client")
def client_fixture(mock_registry):
    """Create a test client backed by the mock registry."""

    def override_get_registry():
        return mock_registry

    app.dependency_overrides[get_registry] = override_get_registry
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="client_with_failing_upstream")
def client_with_failing_upstream_fixture():
    """Create a test client whose only protocol's upstream always fails."""
    failing_registry = build_mock_registry(
        {"broken": MockFeeAdapter(protocol_id="broken", should_fail=True)}
    )

    def override_get_registry():
        return failing_registry

    app.dependency_overrides[get_registry] = override_get_registry
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="client_with_busy_price_api")
def client_with_busy_price_api_fixture():
    """Create a test client whose price API answers with an HTML page."""
    busy_registry = build_busy_price_registry()

    def override_get_registry():
        return busy_registry

    app.dependency_overrides[get_registry] = override_get_registry
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
