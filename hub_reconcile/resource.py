"""Representation of the remote resources reconciled by the hub controllers.

Remote objects are handled as plain nested dictionaries, exactly as returned by
the object store. The parts of those documents that the controllers depend on
are decoded into typed dataclasses with explicit shape checks, so that an
unexpected payload is reported as a `DecodeError` rather than surfacing later
as a `KeyError` or `TypeError`.
"""

from dataclasses import dataclass, field
import logging
from typing import Any

from mashumaro import DataClassDictMixin, field_options
from mashumaro.config import BaseConfig

from .exceptions import DecodeError, MalformedKeyError

__all__ = [
    "RemoteObject",
    "GroupVersionResource",
    "ResourceKey",
    "ViewScope",
    "ViewSpec",
    "DeploymentStatus",
    "PackageChannel",
    "PackageManifestStatus",
    "PackageManifestFacts",
    "MANAGED_CLUSTER_VIEW",
    "PACKAGE_MANIFEST",
]

_LOGGER = logging.getLogger(__name__)


RemoteObject = dict[str, Any]

VIEW_DOMAIN = "view.open-cluster-management.io"
VIEW_VERSION = "v1beta1"
VIEW_KIND = "ManagedClusterView"
PACKAGE_DOMAIN = "packages.operators.coreos.com"
PACKAGE_VERSION = "v1"
PACKAGE_MANIFEST_KIND = "PackageManifest"

# The view and the deployment it mirrors share a name on the managed cluster.
MULTICLUSTER_CHANNEL_NAME = "multicluster-operators-channel"
DEFAULT_SCOPE_NAMESPACE = "open-cluster-management"
DEFAULT_SCOPE_RESOURCE = "deployments"

REDHAT_OPERATORS = "redhat-operators"
ACM_PACKAGE_NAME = "advanced-cluster-management"


@dataclass(frozen=True)
class GroupVersionResource:
    """Identifies a collection of resources served by the object store."""

    group: str
    version: str
    resource: str
    """The plural resource name, e.g. `managedclusterviews`."""

    @property
    def api_version(self) -> str:
        """Return the apiVersion used in object documents."""
        if self.group:
            return f"{self.group}/{self.version}"
        return self.version

    def __str__(self) -> str:
        return f"{self.resource}.{self.api_version}"


MANAGED_CLUSTER_VIEW = GroupVersionResource(
    VIEW_DOMAIN, VIEW_VERSION, "managedclusterviews"
)
PACKAGE_MANIFEST = GroupVersionResource(
    PACKAGE_DOMAIN, PACKAGE_VERSION, "packagemanifests"
)


@dataclass(frozen=True, order=True)
class ResourceKey:
    """A queue key identifying one object by namespace and name."""

    namespace: str | None
    name: str

    @classmethod
    def parse(cls, key: str) -> "ResourceKey":
        """Split a `namespace/name` (or cluster scoped `name`) key."""
        parts = key.split("/")
        if len(parts) == 1:
            namespace, name = None, parts[0]
        elif len(parts) == 2:
            namespace, name = parts[0], parts[1]
            if not namespace:
                raise MalformedKeyError(key, "empty namespace")
        else:
            raise MalformedKeyError(key, "unexpected number of '/' separators")
        if not name:
            raise MalformedKeyError(key, "empty name")
        return cls(namespace=namespace, name=name)

    @classmethod
    def from_object(cls, obj: RemoteObject) -> "ResourceKey":
        """Build the key for an object from its metadata."""
        metadata = obj.get("metadata")
        if not isinstance(metadata, dict) or not metadata.get("name"):
            raise MalformedKeyError(str(obj), "object missing metadata.name")
        return cls(namespace=metadata.get("namespace") or None, name=metadata["name"])

    def __str__(self) -> str:
        if self.namespace:
            return f"{self.namespace}/{self.name}"
        return self.name


def _mapping(doc: Any, path: str) -> dict[str, Any]:
    if not isinstance(doc, dict):
        raise DecodeError(f"Expected {path} to be a mapping, got {type(doc).__name__}")
    return doc


def _string(doc: dict[str, Any], key: str, path: str) -> str:
    value = doc.get(key)
    if not isinstance(value, str):
        raise DecodeError(
            f"Expected {path}.{key} to be a string, got {type(value).__name__}"
        )
    return value


def _count(doc: dict[str, Any], key: str, path: str) -> int:
    """Read an optional replica counter; the wire format omits zero values."""
    value = doc.get(key, 0)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(
            f"Expected {path}.{key} to be an integer, got {type(value).__name__}"
        )
    return value


@dataclass(frozen=True)
class ViewScope(DataClassDictMixin):
    """The object on the managed cluster that a view mirrors."""

    name: str = MULTICLUSTER_CHANNEL_NAME
    namespace: str = DEFAULT_SCOPE_NAMESPACE
    resource: str = DEFAULT_SCOPE_RESOURCE


@dataclass(frozen=True)
class ViewSpec(DataClassDictMixin):
    """Desired `spec` of a ManagedClusterView."""

    scope: ViewScope = field(default_factory=ViewScope)

    def build_object(self, name: str, namespace: str) -> RemoteObject:
        """Return the complete ManagedClusterView document for this spec."""
        return {
            "apiVersion": MANAGED_CLUSTER_VIEW.api_version,
            "kind": VIEW_KIND,
            "metadata": {
                "name": name,
                "namespace": namespace,
            },
            "spec": self.to_dict(),
        }


@dataclass(frozen=True)
class DeploymentStatus:
    """Replica counters of a Deployment returned as a view result."""

    replicas: int = 0
    ready_replicas: int = 0

    @property
    def ready(self) -> bool:
        return self.ready_replicas == self.replicas

    @classmethod
    def parse_doc(cls, doc: Any) -> "DeploymentStatus":
        """Parse the counters from a Deployment document."""
        deployment = _mapping(doc, "status.result")
        status = deployment.get("status")
        if status is None:
            return cls()
        status = _mapping(status, "status.result.status")
        return cls(
            replicas=_count(status, "replicas", "status.result.status"),
            ready_replicas=_count(status, "readyReplicas", "status.result.status"),
        )


@dataclass(frozen=True)
class PackageChannel:
    """A subscription channel advertised by a PackageManifest.

    Only the default channel's CSV is read, so `current_csv` is None when the
    entry has no string `currentCSV`, and it is reported when that entry is
    the one selected.
    """

    name: str
    current_csv: str | None = None
    path: str = field(default="status.channels[]", compare=False, repr=False)

    @classmethod
    def parse_doc(cls, doc: Any, path: str) -> "PackageChannel":
        """Parse a single entry of `status.channels`."""
        channel = _mapping(doc, path)
        current_csv = channel.get("currentCSV")
        return cls(
            name=_string(channel, "name", path),
            current_csv=current_csv if isinstance(current_csv, str) else None,
            path=path,
        )


@dataclass(frozen=True)
class PackageManifestStatus:
    """The parts of a PackageManifest status used by the hub."""

    catalog_source: str
    default_channel: str
    channels: tuple[PackageChannel, ...] = ()

    @staticmethod
    def parse_catalog_source(doc: RemoteObject) -> str:
        """Return `status.catalogSource` without decoding the rest of the status."""
        return _string(_mapping(doc.get("status"), "status"), "catalogSource", "status")

    @classmethod
    def parse_doc(cls, doc: RemoteObject) -> "PackageManifestStatus":
        """Parse the status section of a PackageManifest object."""
        status = _mapping(doc.get("status"), "status")
        channels = status.get("channels")
        if channels is None:
            channels = []
        if not isinstance(channels, list):
            raise DecodeError(
                f"Expected status.channels to be a list, got {type(channels).__name__}"
            )
        return cls(
            catalog_source=_string(status, "catalogSource", "status"),
            default_channel=_string(status, "defaultChannel", "status"),
            channels=tuple(
                PackageChannel.parse_doc(channel, f"status.channels[{i}]")
                for i, channel in enumerate(channels)
            ),
        )

    def current_csv(self) -> str:
        """Return the CSV of the default channel, or empty if it is not listed.

        When a channel name is listed more than once the last entry wins.
        """
        matches = [c for c in self.channels if c.name == self.default_channel]
        if not matches:
            _LOGGER.debug(
                "Default channel %s not found in %d channels",
                self.default_channel,
                len(self.channels),
            )
            return ""
        channel = matches[-1]
        if channel.current_csv is None:
            raise DecodeError(f"Expected {channel.path}.currentCSV to be a string")
        return channel.current_csv


@dataclass(frozen=True)
class PackageManifestFacts(DataClassDictMixin):
    """Facts extracted from the most recent PackageManifest reconcile."""

    default_channel: str = field(metadata=field_options(alias="defaultChannel"))
    current_csv: str = field(metadata=field_options(alias="currentCSV"))

    @classmethod
    def from_status(cls, status: PackageManifestStatus) -> "PackageManifestFacts":
        return cls(
            default_channel=status.default_channel,
            current_csv=status.current_csv(),
        )

    class Config(BaseConfig):
        serialize_by_alias = True
