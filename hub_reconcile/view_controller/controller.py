"""ManagedClusterView synchronizer.

The hub observes the multicluster operators channel deployment on a managed
cluster through a ManagedClusterView created in that cluster's namespace. The
view controller on the managed cluster copies the deployment into the view's
`status.result`.

Key Concepts:
    - Desired spec: built only from configuration, so it is identical on
      every reconcile and can be compared against the stored spec.
    - Readiness: the mirrored deployment has all replicas ready.
"""

import copy
from dataclasses import dataclass, field
import logging

from hub_reconcile.client import ObjectClient
from hub_reconcile.context import reconcile_step
from hub_reconcile.exceptions import DecodeError, ObjectNotFoundError
from hub_reconcile.resource import (
    MANAGED_CLUSTER_VIEW,
    MULTICLUSTER_CHANNEL_NAME,
    DeploymentStatus,
    RemoteObject,
    ViewScope,
    ViewSpec,
)
from hub_reconcile.resource_diff import perform_spec_diff, spec_changed

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewSynchronizerConfig:
    """Configuration for the ViewSynchronizer."""

    view_name: str = MULTICLUSTER_CHANNEL_NAME
    scope: ViewScope = field(default_factory=ViewScope)


def is_view_ready(view: RemoteObject | None) -> bool:
    """Return True if the deployment mirrored by the view is fully ready.

    A view that does not exist yet or has not been populated by the managed
    cluster is not ready. A result that is not a Deployment raises
    DecodeError.
    """
    if view is None:
        return False
    if (status := view.get("status")) is None:
        return False
    if not isinstance(status, dict):
        raise DecodeError(
            f"Expected status to be a mapping, got {type(status).__name__}"
        )
    if (result := status.get("result")) is None:
        return False
    return DeploymentStatus.parse_doc(result).ready


class ViewSynchronizer:
    """Ensures the ManagedClusterView exists and matches the desired spec."""

    def __init__(
        self, client: ObjectClient, config: ViewSynchronizerConfig | None = None
    ) -> None:
        """
        Initialize the synchronizer.

        Args:
            client: Client for the hub's object store
            config: The configuration for the synchronizer
        """
        self._client = client
        self._config = config or ViewSynchronizerConfig()

    def desired_view(self, namespace: str) -> RemoteObject:
        """Return the ManagedClusterView that should exist in `namespace`."""
        spec = ViewSpec(scope=self._config.scope)
        return spec.build_object(self._config.view_name, namespace)

    async def ensure_view(self, namespace: str) -> RemoteObject:
        """Create or update the view in a managed cluster namespace.

        Errors from the object store other than a missing view are raised
        unchanged. The call is safe to repeat: an up to date view is not
        written again.
        """
        name = self._config.view_name
        desired = self.desired_view(namespace)
        with reconcile_step(f"ensure_view({namespace}/{name})"):
            try:
                with reconcile_step("get"):
                    existing = await self._client.get(
                        MANAGED_CLUSTER_VIEW, namespace, name
                    )
            except ObjectNotFoundError:
                _LOGGER.info(
                    "Creating %s ManagedClusterView in %s namespace", name, namespace
                )
                with reconcile_step("create"):
                    return await self._client.create(
                        MANAGED_CLUSTER_VIEW, namespace, desired
                    )

            if not spec_changed(existing.get("spec"), desired["spec"]):
                _LOGGER.debug("ManagedClusterView %s/%s is up to date", namespace, name)
                return existing

            if _LOGGER.isEnabledFor(logging.DEBUG):
                for line in perform_spec_diff(existing.get("spec"), desired["spec"]):
                    _LOGGER.debug("%s", line)
            _LOGGER.info("Updating %s ManagedClusterView in %s namespace", name, namespace)
            with reconcile_step("update"):
                return await self._client.update(
                    MANAGED_CLUSTER_VIEW, namespace, _with_spec(existing, desired)
                )

    is_ready = staticmethod(is_view_ready)


def _with_spec(existing: RemoteObject, desired: RemoteObject) -> RemoteObject:
    """Return the existing object with its spec replaced by the desired spec.

    The existing metadata, including resourceVersion, is kept so the write is
    rejected if the view changed since it was read.
    """
    updated = copy.deepcopy(existing)
    updated["apiVersion"] = desired["apiVersion"]
    updated["kind"] = desired["kind"]
    updated["spec"] = copy.deepcopy(desired["spec"])
    return updated
