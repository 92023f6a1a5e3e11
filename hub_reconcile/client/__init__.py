"""
The client module provides access to the remote object store holding the
custom resources reconciled by the hub controllers.

- Objects are addressed by GroupVersionResource, namespace and name.
- Objects are plain nested dictionaries; typed decoding happens in
  `hub_reconcile.resource`.
- A missing object is reported as `ObjectNotFoundError` so callers can
  distinguish it from other failures.

The abstract interface allows for various implementations (kubernetes API
server, in-memory, etc.).
"""

from .client import ObjectClient
from .in_memory import InMemoryObjectClient
from .kubernetes import KubernetesObjectClient

__all__ = [
    "ObjectClient",
    "InMemoryObjectClient",
    "KubernetesObjectClient",
]
