"""
Reconciliation of hub custom resources.

The controllers in this package are invoked per resource key by an external
dispatcher and reconcile a single object each time:

- `view_controller` keeps a ManagedClusterView in sync with its desired spec.
- `package_manifest_controller` publishes the default channel of the hub
  operator's PackageManifest to a `store`.
"""

__all__ = [
    "client",
    "exceptions",
    "package_manifest_controller",
    "resource",
    "resource_diff",
    "store",
    "view_controller",
    # Note this is exposed for CLI documentation, not to be used as a library
    "tool",
]
