"""Test helpers for the PackageManifest controller."""

from typing import Any

from hub_reconcile.resource import RemoteObject

NAMESPACE = "openshift-marketplace"
NAME = "advanced-cluster-management"
KEY = f"{NAMESPACE}/{NAME}"


def package_manifest(status: Any = None, name: str = NAME) -> RemoteObject:
    """Build a PackageManifest document with the given status."""
    obj: RemoteObject = {
        "apiVersion": "packages.operators.coreos.com/v1",
        "kind": "PackageManifest",
        "metadata": {"name": name, "namespace": NAMESPACE},
    }
    if status is not None:
        obj["status"] = status
    return obj
