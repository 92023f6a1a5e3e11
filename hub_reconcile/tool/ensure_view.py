"""Hub-reconcile ensure-view action."""

from argparse import ArgumentParser, _SubParsersAction as SubParsersAction
import asyncio
import logging
from typing import cast

import yaml

from hub_reconcile.client import ObjectClient
from hub_reconcile.exceptions import WaitTimeoutError
from hub_reconcile.resource import (
    DEFAULT_SCOPE_NAMESPACE,
    DEFAULT_SCOPE_RESOURCE,
    MANAGED_CLUSTER_VIEW,
    MULTICLUSTER_CHANNEL_NAME,
    RemoteObject,
    ViewScope,
)
from hub_reconcile.view_controller import (
    ViewSynchronizer,
    ViewSynchronizerConfig,
    is_view_ready,
)

from .connection import add_connection_flags, object_client

_LOGGER = logging.getLogger(__name__)


async def wait_view_ready(
    client: ObjectClient,
    view: RemoteObject,
    timeout: float,
    interval: float,
) -> RemoteObject:
    """Re-read the view until the deployment it mirrors is ready.

    Raises:
        WaitTimeoutError: If the view is not ready after `timeout` seconds.
    """
    metadata = view["metadata"]
    namespace, name = metadata.get("namespace"), metadata["name"]
    try:
        async with asyncio.timeout(timeout):
            while not is_view_ready(view):
                _LOGGER.debug("Waiting for ManagedClusterView %s/%s", namespace, name)
                await asyncio.sleep(interval)
                view = await client.get(MANAGED_CLUSTER_VIEW, namespace, name)
    except TimeoutError as err:
        raise WaitTimeoutError(
            f"ManagedClusterView {namespace}/{name} not ready after {timeout}s"
        ) from err
    return view


class EnsureViewAction:
    """Create or update the ManagedClusterView for a managed cluster."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "ensure-view",
                help="Create or update the ManagedClusterView for a managed cluster",
                description=(
                    "Ensure the ManagedClusterView mirroring the channel deployment "
                    "exists in the managed cluster namespace and report readiness"
                ),
            ),
        )
        args.add_argument(
            "namespace",
            help="Managed cluster namespace on the hub",
        )
        args.add_argument(
            "--view-name",
            default=MULTICLUSTER_CHANNEL_NAME,
            help="Name of the view and of the deployment it mirrors",
        )
        args.add_argument(
            "--scope-namespace",
            default=DEFAULT_SCOPE_NAMESPACE,
            help="Namespace of the mirrored object on the managed cluster",
        )
        args.add_argument(
            "--scope-resource",
            default=DEFAULT_SCOPE_RESOURCE,
            help="Resource type of the mirrored object",
        )
        args.add_argument(
            "--wait-ready",
            action="store_true",
            default=False,
            help="Poll the view until the mirrored deployment is ready",
        )
        args.add_argument(
            "--timeout",
            type=float,
            default=300.0,
            help="Seconds to wait with --wait-ready before failing",
        )
        args.add_argument(
            "--interval",
            type=float,
            default=5.0,
            help="Seconds between polls with --wait-ready",
        )
        add_connection_flags(args)
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        namespace: str,
        view_name: str,
        scope_namespace: str,
        scope_resource: str,
        wait_ready: bool,
        timeout: float,
        interval: float,
        kubeconfig: str | None,
        context: str | None,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        config = ViewSynchronizerConfig(
            view_name=view_name,
            scope=ViewScope(
                name=view_name, namespace=scope_namespace, resource=scope_resource
            ),
        )
        async with object_client(kubeconfig, context) as client:
            view = await ViewSynchronizer(client, config).ensure_view(namespace)
            if wait_ready:
                view = await wait_view_ready(client, view, timeout, interval)
        metadata = view.get("metadata", {})
        print(
            yaml.dump(
                {
                    "name": metadata.get("name"),
                    "namespace": metadata.get("namespace"),
                    "resourceVersion": metadata.get("resourceVersion"),
                    "ready": is_view_ready(view),
                },
                sort_keys=False,
                explicit_start=True,
            ),
            end="",
        )
