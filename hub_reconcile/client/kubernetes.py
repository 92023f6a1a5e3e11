"""Object client backed by the kubernetes API server."""

from collections.abc import Awaitable
import logging
from typing import TypeVar

import aiohttp
from kubernetes_asyncio import client, config
from kubernetes_asyncio.client import ApiException

from hub_reconcile.exceptions import (
    InputException,
    ObjectConflictError,
    ObjectNotFoundError,
    RemoteTransportError,
)
from hub_reconcile.resource import GroupVersionResource, RemoteObject

from .client import ObjectClient

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


def _name(obj: RemoteObject) -> str:
    return obj["metadata"]["name"]


class KubernetesObjectClient(ObjectClient):
    """ObjectClient using the kubernetes custom objects API.

    The caller owns the lifetime of the `ApiClient`; use `connect` to build
    one from the local kubeconfig or in-cluster service account.
    """

    def __init__(self, api_client: client.ApiClient) -> None:
        """Initialize the client with an already configured ApiClient."""
        self._api = client.CustomObjectsApi(api_client)

    @classmethod
    async def connect(
        cls, kubeconfig: str | None = None, context: str | None = None
    ) -> client.ApiClient:
        """Load cluster credentials and return a new ApiClient.

        Falls back to the in-cluster service account when no kubeconfig
        is given and none is found in the default location.

        Raises:
            InputException: If no usable credentials can be loaded.
        """
        try:
            await config.load_kube_config(config_file=kubeconfig, context=context)
        except (config.ConfigException, OSError) as err:
            if kubeconfig:
                raise InputException(
                    f"Unable to load kubeconfig {kubeconfig}: {err}"
                ) from err
            _LOGGER.debug("No kubeconfig found, using in-cluster configuration")
            try:
                config.load_incluster_config()
            except config.ConfigException as incluster_err:
                raise InputException(
                    "No kubeconfig found and not running in a cluster: "
                    f"{incluster_err}"
                ) from incluster_err
        return client.ApiClient()

    async def get(
        self, gvr: GroupVersionResource, namespace: str | None, name: str
    ) -> RemoteObject:
        """Fetch an object."""
        _LOGGER.debug("GET %s %s/%s", gvr, namespace, name)
        if namespace:
            coro = self._api.get_namespaced_custom_object(
                gvr.group, gvr.version, namespace, gvr.resource, name
            )
        else:
            coro = self._api.get_cluster_custom_object(
                gvr.group, gvr.version, gvr.resource, name
            )
        return await self._call(coro, f"get {gvr} {namespace}/{name}")

    async def create(
        self, gvr: GroupVersionResource, namespace: str | None, obj: RemoteObject
    ) -> RemoteObject:
        """Create an object and return it as stored."""
        _LOGGER.debug("CREATE %s %s/%s", gvr, namespace, _name(obj))
        if namespace:
            coro = self._api.create_namespaced_custom_object(
                gvr.group, gvr.version, namespace, gvr.resource, obj
            )
        else:
            coro = self._api.create_cluster_custom_object(
                gvr.group, gvr.version, gvr.resource, obj
            )
        return await self._call(coro, f"create {gvr} {namespace}/{_name(obj)}")

    async def update(
        self, gvr: GroupVersionResource, namespace: str | None, obj: RemoteObject
    ) -> RemoteObject:
        """Replace an existing object and return it as stored."""
        name = _name(obj)
        _LOGGER.debug("UPDATE %s %s/%s", gvr, namespace, name)
        if namespace:
            coro = self._api.replace_namespaced_custom_object(
                gvr.group, gvr.version, namespace, gvr.resource, name, obj
            )
        else:
            coro = self._api.replace_cluster_custom_object(
                gvr.group, gvr.version, gvr.resource, name, obj
            )
        return await self._call(coro, f"update {gvr} {namespace}/{name}")

    async def _call(self, coro: Awaitable[T], description: str) -> T:
        """Await an API call translating failures into library exceptions."""
        try:
            return await coro
        except ApiException as err:
            raise _translate(err, description) from err
        except aiohttp.ClientError as err:
            raise RemoteTransportError(f"Failed to {description}: {err}") from err


def _translate(err: ApiException, description: str) -> Exception:
    status = err.status
    message = f"Failed to {description}: {status} {err.reason}"
    if status == 404:
        return ObjectNotFoundError(message)
    if status == 409:
        return ObjectConflictError(message)
    return RemoteTransportError(message, status=status)
