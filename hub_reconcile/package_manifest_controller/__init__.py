"""PackageManifest controller package.

This package contains the controller that reads the default channel and
current CSV of the hub's operator package and publishes them to a
`PackageManifestStore`.
"""

from .controller import (
    PackageManifestController,
    PackageManifestControllerConfig,
    meta_namespace_key,
)

__all__ = [
    "PackageManifestController",
    "PackageManifestControllerConfig",
    "meta_namespace_key",
]
