"""Client interface for the remote object store."""

from abc import ABC, abstractmethod

from hub_reconcile.resource import GroupVersionResource, RemoteObject


class ObjectClient(ABC):
    """Abstract base class for reading and writing remote custom objects.

    All methods may suspend on network I/O. Cancellation of the awaiting task
    is honored by the implementation and no call is retried internally.
    """

    @abstractmethod
    async def get(
        self, gvr: GroupVersionResource, namespace: str | None, name: str
    ) -> RemoteObject:
        """Fetch an object.

        Raises:
            ObjectNotFoundError: If the object does not exist.
            RemoteTransportError: For any other failure.
        """

    @abstractmethod
    async def create(
        self, gvr: GroupVersionResource, namespace: str | None, obj: RemoteObject
    ) -> RemoteObject:
        """Create an object and return it as stored by the remote system."""

    @abstractmethod
    async def update(
        self, gvr: GroupVersionResource, namespace: str | None, obj: RemoteObject
    ) -> RemoteObject:
        """Replace an existing object and return it as stored.

        When `metadata.resourceVersion` is set on `obj` the write only succeeds
        if it still matches the stored object.

        Raises:
            ObjectNotFoundError: If the object does not exist.
            ObjectConflictError: If the resourceVersion is stale.
        """
