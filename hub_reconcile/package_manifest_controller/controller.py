"""PackageManifest controller implementation.

The controller is invoked with a `namespace/name` key each time the watched
PackageManifest changes. It only observes the object and never writes it back.
"""

from dataclasses import dataclass
import logging

from hub_reconcile.client import ObjectClient
from hub_reconcile.context import reconcile_step
from hub_reconcile.exceptions import MalformedKeyError
from hub_reconcile.resource import (
    ACM_PACKAGE_NAME,
    PACKAGE_MANIFEST,
    REDHAT_OPERATORS,
    PackageManifestFacts,
    PackageManifestStatus,
    RemoteObject,
    ResourceKey,
)
from hub_reconcile.store import PackageManifestStore

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackageManifestControllerConfig:
    """Configuration for the PackageManifestController."""

    package_name: str = ACM_PACKAGE_NAME
    """Only keys naming this package are accepted for reconcile."""

    catalog_source: str = REDHAT_OPERATORS
    """Manifests from any other catalog source are ignored."""


def meta_namespace_key(obj: RemoteObject) -> str:
    """Return the `namespace/name` queue key for an object."""
    return str(ResourceKey.from_object(obj))


class PackageManifestController:
    """Controller publishing the default channel of a PackageManifest."""

    def __init__(
        self,
        client: ObjectClient,
        store: PackageManifestStore,
        config: PackageManifestControllerConfig | None = None,
    ) -> None:
        """
        Initialize the controller.

        Args:
            client: Client for the hub's object store
            store: Destination for the extracted facts
            config: The configuration for the controller
        """
        self._client = client
        self._store = store
        self._config = config or PackageManifestControllerConfig()

    def accepts(self, key: str) -> bool:
        """Return True if the dispatcher should enqueue `key`."""
        try:
            resource_key = ResourceKey.parse(key)
        except MalformedKeyError:
            return False
        return resource_key.name == self._config.package_name

    async def sync(self, key: str) -> PackageManifestFacts | None:
        """Reconcile the PackageManifest identified by `key`.

        Returns the published facts, or None when the manifest comes from a
        catalog source that is not tracked.

        Raises:
            MalformedKeyError: If the key is not `namespace/name`.
            DecodeError: If the manifest status does not have the expected shape.
            RemoteException: If the manifest cannot be fetched.
        """
        resource_key = ResourceKey.parse(key)
        _LOGGER.debug(
            "Reconciling for packagemanifest %s in namespace %s",
            resource_key.name,
            resource_key.namespace,
        )
        with reconcile_step(f"sync({resource_key})"):
            obj = await self._client.get(
                PACKAGE_MANIFEST, resource_key.namespace, resource_key.name
            )
            catalog_source = PackageManifestStatus.parse_catalog_source(obj)
            if catalog_source != self._config.catalog_source:
                _LOGGER.debug(
                    "Ignoring packagemanifest %s from catalog source %s",
                    resource_key,
                    catalog_source,
                )
                return None

            status = PackageManifestStatus.parse_doc(obj)
            facts = PackageManifestFacts.from_status(status)
            _LOGGER.debug("The defaultChannel is %s", facts.default_channel)
            _LOGGER.debug("The currentCSV is %s", facts.current_csv)
            self._store.set(facts)
            return facts
