"""
The store module holds the facts extracted by the PackageManifest controller
so that other components of the hub can read them.

- Holds a single value that is replaced wholesale on every write.
- Is an explicit object passed to the controller and its readers, not a
  module level global.

This abstract interface allows for various implementations.
"""

from .store import PackageManifestStore
from .in_memory import InMemoryPackageManifestStore

__all__ = [
    "PackageManifestStore",
    "InMemoryPackageManifestStore",
]
