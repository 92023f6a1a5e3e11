"""Store module for holding the latest PackageManifest facts."""

from abc import ABC, abstractmethod
from collections.abc import Callable

from hub_reconcile.resource import PackageManifestFacts


class PackageManifestStore(ABC):
    """Abstract base class for the single-slot PackageManifest facts store."""

    @abstractmethod
    def set(self, facts: PackageManifestFacts) -> None:
        """Replace the stored facts."""

    @abstractmethod
    def get(self) -> PackageManifestFacts | None:
        """Return the latest facts, or None if nothing was synced yet."""

    @abstractmethod
    def add_listener(
        self, callback: Callable[[PackageManifestFacts], None]
    ) -> Callable[[], None]:
        """Register a callback invoked with the new facts after every `set`.

        Returns a callable that can be called to remove the listener.
        """
