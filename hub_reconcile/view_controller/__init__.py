"""View controller package.

This package contains the synchronizer that keeps the ManagedClusterView for
the multicluster operators channel deployment present on each managed
cluster namespace of the hub.
"""

from .controller import ViewSynchronizer, ViewSynchronizerConfig, is_view_ready

__all__ = ["ViewSynchronizer", "ViewSynchronizerConfig", "is_view_ready"]
