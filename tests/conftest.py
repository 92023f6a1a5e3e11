"""Test fixtures shared by the controller tests."""

import pytest

from hub_reconcile.client import InMemoryObjectClient
from hub_reconcile.store import InMemoryPackageManifestStore


@pytest.fixture(name="client")
def client_fixture() -> InMemoryObjectClient:
    """Create an in-memory object client for testing."""
    return InMemoryObjectClient()


@pytest.fixture(name="store")
def store_fixture() -> InMemoryPackageManifestStore:
    """Create an in-memory facts store for testing."""
    return InMemoryPackageManifestStore()
