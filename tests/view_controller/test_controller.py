"""Tests for the ManagedClusterView synchronizer."""

import asyncio
from typing import Any

import pytest

from hub_reconcile.client import InMemoryObjectClient
from hub_reconcile.exceptions import (
    DecodeError,
    ObjectConflictError,
    RemoteTransportError,
)
from hub_reconcile.resource import MANAGED_CLUSTER_VIEW, ViewScope
from hub_reconcile.view_controller import (
    ViewSynchronizer,
    ViewSynchronizerConfig,
    is_view_ready,
)

CLUSTER = "cluster1"
VIEW_NAME = "multicluster-operators-channel"

DESIRED_SPEC = {
    "scope": {
        "name": "multicluster-operators-channel",
        "namespace": "open-cluster-management",
        "resource": "deployments",
    }
}


@pytest.fixture(name="synchronizer")
def synchronizer_fixture(client: InMemoryObjectClient) -> ViewSynchronizer:
    """Create a ViewSynchronizer with an in-memory client."""
    return ViewSynchronizer(client)


def test_desired_view(synchronizer: ViewSynchronizer) -> None:
    """Test the desired view document."""
    assert synchronizer.desired_view(CLUSTER) == {
        "apiVersion": "view.open-cluster-management.io/v1beta1",
        "kind": "ManagedClusterView",
        "metadata": {
            "name": VIEW_NAME,
            "namespace": CLUSTER,
        },
        "spec": DESIRED_SPEC,
    }


def test_desired_view_configured() -> None:
    """Test the view scope comes from configuration."""
    synchronizer = ViewSynchronizer(
        InMemoryObjectClient(),
        ViewSynchronizerConfig(
            view_name="my-view",
            scope=ViewScope(name="web", namespace="apps", resource="statefulsets"),
        ),
    )
    view = synchronizer.desired_view(CLUSTER)
    assert view["metadata"] == {"name": "my-view", "namespace": CLUSTER}
    assert view["spec"] == {
        "scope": {"name": "web", "namespace": "apps", "resource": "statefulsets"}
    }


async def test_create_when_not_found(
    client: InMemoryObjectClient, synchronizer: ViewSynchronizer
) -> None:
    """Test a missing view is created with the desired spec."""
    view = await synchronizer.ensure_view(CLUSTER)

    assert client.count_calls("get") == 1
    assert client.count_calls("create") == 1
    assert client.count_calls("update") == 0
    assert view["spec"] == DESIRED_SPEC
    stored = client.get_object(MANAGED_CLUSTER_VIEW, CLUSTER, VIEW_NAME)
    assert stored is not None
    assert stored["spec"] == DESIRED_SPEC


async def test_ensure_view_idempotent(
    client: InMemoryObjectClient, synchronizer: ViewSynchronizer
) -> None:
    """Test a second reconcile with no external change does not write."""
    first = await synchronizer.ensure_view(CLUSTER)
    second = await synchronizer.ensure_view(CLUSTER)

    assert client.count_calls("create") == 1
    assert client.count_calls("update") == 0
    assert (
        second["metadata"]["resourceVersion"] == first["metadata"]["resourceVersion"]
    )


async def test_key_order_is_not_a_change(
    client: InMemoryObjectClient, synchronizer: ViewSynchronizer
) -> None:
    """Test a stored spec with different key order is not rewritten."""
    client.add_object(
        MANAGED_CLUSTER_VIEW,
        {
            "metadata": {"name": VIEW_NAME, "namespace": CLUSTER},
            "spec": {
                "scope": {
                    "resource": "deployments",
                    "namespace": "open-cluster-management",
                    "name": "multicluster-operators-channel",
                }
            },
        },
    )

    await synchronizer.ensure_view(CLUSTER)

    assert client.count_calls("update") == 0


@pytest.mark.parametrize(
    ("spec"),
    [
        {"scope": {"name": VIEW_NAME, "namespace": "other", "resource": "deployments"}},
        {"scope": {"name": VIEW_NAME}},
        {"scope": {**DESIRED_SPEC["scope"], "extra": "field"}},
        None,
    ],
    ids=["changed", "partial", "extra-field", "missing"],
)
async def test_update_when_spec_differs(
    client: InMemoryObjectClient,
    synchronizer: ViewSynchronizer,
    spec: dict[str, Any] | None,
) -> None:
    """Test a drifted spec is replaced by the desired spec."""
    existing: dict[str, Any] = {
        "apiVersion": "view.open-cluster-management.io/v1beta1",
        "kind": "ManagedClusterView",
        "metadata": {
            "name": VIEW_NAME,
            "namespace": CLUSTER,
            "labels": {"owner": "someone"},
        },
        "status": {"conditions": []},
    }
    if spec is not None:
        existing["spec"] = spec
    seeded = client.add_object(MANAGED_CLUSTER_VIEW, existing)

    view = await synchronizer.ensure_view(CLUSTER)

    assert client.count_calls("create") == 0
    assert client.count_calls("update") == 1
    assert view["spec"] == DESIRED_SPEC
    assert view["metadata"]["labels"] == {"owner": "someone"}
    assert (
        view["metadata"]["resourceVersion"]
        != seeded["metadata"]["resourceVersion"]
    )

    # Converged, nothing more to write
    await synchronizer.ensure_view(CLUSTER)
    assert client.count_calls("update") == 1


async def test_update_conflict(
    client: InMemoryObjectClient, synchronizer: ViewSynchronizer
) -> None:
    """Test a concurrent modification surfaces as a conflict."""
    client.add_object(
        MANAGED_CLUSTER_VIEW,
        {
            "metadata": {"name": VIEW_NAME, "namespace": CLUSTER},
            "spec": {"scope": {}},
        },
    )
    client.inject_error("update", ObjectConflictError("resourceVersion is stale"))

    with pytest.raises(ObjectConflictError):
        await synchronizer.ensure_view(CLUSTER)


async def test_create_failure(
    client: InMemoryObjectClient, synchronizer: ViewSynchronizer
) -> None:
    """Test a failed create is raised and not retried."""
    client.inject_error("create", RemoteTransportError("forbidden", status=403))

    with pytest.raises(RemoteTransportError, match="forbidden"):
        await synchronizer.ensure_view(CLUSTER)
    assert client.count_calls("create") == 1
    assert client.get_object(MANAGED_CLUSTER_VIEW, CLUSTER, VIEW_NAME) is None


async def test_get_failure(
    client: InMemoryObjectClient, synchronizer: ViewSynchronizer
) -> None:
    """Test fetch errors other than not found are raised unchanged."""
    err = RemoteTransportError("internal error", status=500)
    client.inject_error("get", err)

    with pytest.raises(RemoteTransportError) as excinfo:
        await synchronizer.ensure_view(CLUSTER)
    assert excinfo.value is err
    assert client.count_calls("create") == 0
    assert client.count_calls("update") == 0


async def test_ensure_view_cancelled(
    client: InMemoryObjectClient, synchronizer: ViewSynchronizer
) -> None:
    """Test cancellation during the fetch stops the reconcile."""
    task = asyncio.create_task(synchronizer.ensure_view(CLUSTER))
    await asyncio.sleep(0)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert client.count_calls("create") == 0


@pytest.mark.parametrize(
    ("view", "expected"),
    [
        (None, False),
        ({"metadata": {"name": VIEW_NAME}}, False),
        ({"status": {"conditions": []}}, False),
        ({"status": {"result": {"status": {"readyReplicas": 3, "replicas": 3}}}}, True),
        ({"status": {"result": {"status": {"readyReplicas": 2, "replicas": 3}}}}, False),
        ({"status": {"result": {"status": {"replicas": 1}}}}, False),
        ({"status": {"result": {"kind": "Deployment", "status": {}}}}, True),
        ({"status": {"result": {"kind": "Deployment"}}}, True),
    ],
    ids=[
        "absent",
        "no-status",
        "no-result",
        "ready",
        "not-ready",
        "no-ready-replicas",
        "empty-status",
        "no-deployment-status",
    ],
)
def test_is_view_ready(view: dict[str, Any] | None, expected: bool) -> None:
    """Test readiness of the mirrored deployment."""
    assert is_view_ready(view) == expected
    assert ViewSynchronizer.is_ready(view) == expected


@pytest.mark.parametrize(
    ("view"),
    [
        {"status": "Synced"},
        {"status": {"result": "not-a-deployment"}},
        {"status": {"result": {"status": []}}},
        {"status": {"result": {"status": {"readyReplicas": "3", "replicas": 3}}}},
        {"status": {"result": {"status": {"readyReplicas": True, "replicas": 1}}}},
    ],
    ids=[
        "status-not-mapping",
        "result-not-mapping",
        "deployment-status-not-mapping",
        "string-counter",
        "bool-counter",
    ],
)
def test_is_view_ready_malformed(view: dict[str, Any]) -> None:
    """Test a malformed result raises DecodeError."""
    with pytest.raises(DecodeError):
        is_view_ready(view)
