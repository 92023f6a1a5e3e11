"""Module for in memory facts store."""

from collections.abc import Callable
import logging
import threading

from hub_reconcile.resource import PackageManifestFacts

from .store import PackageManifestStore

_LOGGER = logging.getLogger(__name__)


class InMemoryPackageManifestStore(PackageManifestStore):
    """In-memory implementation of the PackageManifestStore interface.

    A lock guards the slot so that readers on other threads never observe a
    write in progress. Facts are immutable so the stored reference is handed
    out directly.
    """

    def __init__(self) -> None:
        """Initialize the InMemoryPackageManifestStore."""
        self._lock = threading.Lock()
        self._facts: PackageManifestFacts | None = None
        self._listeners: list[Callable[[PackageManifestFacts], None]] = []

    def set(self, facts: PackageManifestFacts) -> None:
        """Replace the stored facts."""
        if not isinstance(facts, PackageManifestFacts):
            raise ValueError(
                f"Facts are not of type {PackageManifestFacts.__name__} (was {facts.__class__.__name__})"
            )
        with self._lock:
            previous = self._facts
            self._facts = facts
            listeners = list(self._listeners)
        if previous != facts:
            _LOGGER.info(
                "PackageManifest facts updated: defaultChannel=%s currentCSV=%s",
                facts.default_channel,
                facts.current_csv,
            )
        for cb in listeners:
            try:
                cb(facts)
            except Exception:
                _LOGGER.exception("Store listener callback failed")

    def get(self) -> PackageManifestFacts | None:
        """Return the latest facts, or None if nothing was synced yet."""
        with self._lock:
            return self._facts

    def add_listener(
        self, callback: Callable[[PackageManifestFacts], None]
    ) -> Callable[[], None]:
        """Register a callback invoked with the new facts after every `set`."""

        def remove() -> None:
            with self._lock:
                if callback in self._listeners:
                    self._listeners.remove(callback)

        with self._lock:
            self._listeners.append(callback)
        return remove
