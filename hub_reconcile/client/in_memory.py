"""Module for an in memory object client."""

import asyncio
import copy
from dataclasses import dataclass
import itertools
import logging

from hub_reconcile.exceptions import ObjectConflictError, ObjectNotFoundError
from hub_reconcile.resource import GroupVersionResource, RemoteObject, ResourceKey

from .client import ObjectClient

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClientCall:
    """A record of a single call made against the client."""

    method: str
    gvr: GroupVersionResource
    key: ResourceKey


class InMemoryObjectClient(ObjectClient):
    """In-memory implementation of the ObjectClient interface.

    Objects are keyed by resource and namespaced name and are copied on the
    way in and out so callers never share state with the store. Every write
    is assigned a new `metadata.resourceVersion` and updates carrying a stale
    version are rejected, as the kubernetes API server does.
    """

    def __init__(self) -> None:
        """Initialize the InMemoryObjectClient."""
        self._objects: dict[tuple[GroupVersionResource, ResourceKey], RemoteObject] = {}
        self._versions = itertools.count(1)
        self._errors: dict[str, list[Exception]] = {}
        self.calls: list[ClientCall] = []

    def add_object(
        self, gvr: GroupVersionResource, obj: RemoteObject
    ) -> RemoteObject:
        """Seed an object directly, bypassing call recording."""
        key = ResourceKey.from_object(obj)
        stored = self._stamp(copy.deepcopy(obj))
        self._objects[(gvr, key)] = stored
        return copy.deepcopy(stored)

    def get_object(
        self, gvr: GroupVersionResource, namespace: str | None, name: str
    ) -> RemoteObject | None:
        """Return a copy of a stored object, bypassing call recording."""
        obj = self._objects.get((gvr, ResourceKey(namespace, name)))
        return copy.deepcopy(obj) if obj is not None else None

    def inject_error(self, method: str, err: Exception) -> None:
        """Raise `err` from the next call to `method` instead of running it."""
        self._errors.setdefault(method, []).append(err)

    def count_calls(self, method: str) -> int:
        """Return how many times `method` was called."""
        return sum(1 for call in self.calls if call.method == method)

    async def get(
        self, gvr: GroupVersionResource, namespace: str | None, name: str
    ) -> RemoteObject:
        """Fetch an object."""
        key = ResourceKey(namespace, name)
        await self._begin("get", gvr, key)
        if (obj := self._objects.get((gvr, key))) is None:
            raise ObjectNotFoundError(f"{gvr} {key} not found")
        return copy.deepcopy(obj)

    async def create(
        self, gvr: GroupVersionResource, namespace: str | None, obj: RemoteObject
    ) -> RemoteObject:
        """Create an object and return it as stored."""
        key = ResourceKey(namespace, ResourceKey.from_object(obj).name)
        await self._begin("create", gvr, key)
        if (gvr, key) in self._objects:
            raise ObjectConflictError(f"{gvr} {key} already exists")
        stored = self._stamp(copy.deepcopy(obj))
        stored["metadata"]["namespace"] = namespace
        self._objects[(gvr, key)] = stored
        _LOGGER.debug("Created %s %s", gvr, key)
        return copy.deepcopy(stored)

    async def update(
        self, gvr: GroupVersionResource, namespace: str | None, obj: RemoteObject
    ) -> RemoteObject:
        """Replace an existing object and return it as stored."""
        key = ResourceKey(namespace, ResourceKey.from_object(obj).name)
        await self._begin("update", gvr, key)
        if (existing := self._objects.get((gvr, key))) is None:
            raise ObjectNotFoundError(f"{gvr} {key} not found")
        version = obj["metadata"].get("resourceVersion")
        if version and version != existing["metadata"]["resourceVersion"]:
            raise ObjectConflictError(
                f"{gvr} {key} has been modified (resourceVersion {version} is stale)"
            )
        stored = self._stamp(copy.deepcopy(obj))
        if "status" in existing and "status" not in stored:
            stored["status"] = copy.deepcopy(existing["status"])
        self._objects[(gvr, key)] = stored
        _LOGGER.debug("Updated %s %s", gvr, key)
        return copy.deepcopy(stored)

    async def _begin(
        self, method: str, gvr: GroupVersionResource, key: ResourceKey
    ) -> None:
        self.calls.append(ClientCall(method, gvr, key))
        # Yield like a real network call so cancellation can be observed
        await asyncio.sleep(0)
        if errors := self._errors.get(method):
            raise errors.pop(0)

    def _stamp(self, obj: RemoteObject) -> RemoteObject:
        metadata = obj.setdefault("metadata", {})
        metadata["resourceVersion"] = str(next(self._versions))
        return obj
