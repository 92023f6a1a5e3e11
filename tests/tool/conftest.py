"""Test fixtures for the command line tool."""

from collections.abc import AsyncGenerator
import contextlib

import pytest

from hub_reconcile.client import InMemoryObjectClient, ObjectClient


@pytest.fixture(autouse=True)
def fake_cluster(
    client: InMemoryObjectClient, monkeypatch: pytest.MonkeyPatch
) -> InMemoryObjectClient:
    """Point the tool at the in-memory client instead of a real cluster."""
    connections: list[tuple[str | None, str | None]] = []

    @contextlib.asynccontextmanager
    async def object_client(
        kubeconfig: str | None, context: str | None
    ) -> AsyncGenerator[ObjectClient, None]:
        connections.append((kubeconfig, context))
        yield client

    monkeypatch.setattr("hub_reconcile.tool.ensure_view.object_client", object_client)
    monkeypatch.setattr(
        "hub_reconcile.tool.sync_package_manifest.object_client", object_client
    )
    client.connections = connections  # type: ignore[attr-defined]
    return client
