"""Shared flags for connecting to the hub cluster."""

from argparse import ArgumentParser
from collections.abc import AsyncGenerator
import contextlib
import logging

from hub_reconcile.client import KubernetesObjectClient, ObjectClient

_LOGGER = logging.getLogger(__name__)


def add_connection_flags(args: ArgumentParser) -> None:
    """Add flags selecting the hub cluster credentials."""
    args.add_argument(
        "--kubeconfig",
        default=None,
        help="Path to a kubeconfig file. Defaults to ~/.kube/config or the in-cluster service account",
    )
    args.add_argument(
        "--context",
        default=None,
        help="Name of the kubeconfig context to use",
    )


@contextlib.asynccontextmanager
async def object_client(
    kubeconfig: str | None, context: str | None
) -> AsyncGenerator[ObjectClient, None]:
    """Yield an ObjectClient for the hub, closing the connection on exit."""
    api_client = await KubernetesObjectClient.connect(kubeconfig, context)
    try:
        yield KubernetesObjectClient(api_client)
    finally:
        await api_client.close()
