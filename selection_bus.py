# selection_bus.py
"""
"Selection changed" notifications.

Two transports sit behind one subscription API:
- SelectionWatcher: in-document channel, fires for changes made by this
  document (one per NiceGUI client / browser tab)
- StorageWatcher: cross-document channel shared by every tab of one
  browser profile; fires in every document except the one that wrote

Signals carry no payload. Observers are zero-argument callables and must
re-read the selection store when called.
"""

from typing import Callable, Dict, List

import logging
logger = logging.getLogger(__name__)

Observer = Callable[[], None]


def _deliver(observers: List[Observer]) -> None:
    # copy: observers may unsubscribe while being notified
    for observer in list(observers):
        try:
            observer()
        except Exception:
            logger.exception(f"Selection observer {observer!r} failed")


class SelectionWatcher:
    def __init__(self):
        self.observers: List[Observer] = []

    def add_observer(self, observer: Observer):
        self.observers.append(observer)

    def remove_observer(self, observer: Observer):
        if observer in self.observers:
            self.observers.remove(observer)

    def notify(self):
        _deliver(self.observers)


class StorageWatcher:
    def __init__(self):
        self._documents: Dict[str, List[Observer]] = {}

    def add_observer(self, document_id: str, observer: Observer):
        self._documents.setdefault(document_id, []).append(observer)

    def remove_observer(self, document_id: str, observer: Observer):
        observers = self._documents.get(document_id, [])
        if observer in observers:
            observers.remove(observer)
        if not observers:
            self._documents.pop(document_id, None)

    def has_documents(self) -> bool:
        return bool(self._documents)

    def notify(self, origin: str):
        """Deliver to all documents except `origin`."""
        for document_id, observers in list(self._documents.items()):
            if document_id != origin:
                _deliver(observers)


# one cross-document channel per browser profile
_storage_watchers: Dict[str, StorageWatcher] = {}


def get_storage_watcher(profile_key: str) -> StorageWatcher:
    return _storage_watchers.setdefault(profile_key, StorageWatcher())


def discard_storage_watcher(profile_key: str) -> None:
    watcher = _storage_watchers.get(profile_key)
    if watcher is not None and not watcher.has_documents():
        _storage_watchers.pop(profile_key, None)


class SelectionBus:
    """
    Per-document entry point. Subscribing here covers changes from this
    document and from every other document of the same profile.
    """

    def __init__(self, document_id: str, storage_watcher: StorageWatcher | None = None):
        self.document_id = document_id
        self._local = SelectionWatcher()
        self._storage = storage_watcher or StorageWatcher()

    def add_observer(self, observer: Observer):
        self._local.add_observer(observer)
        self._storage.add_observer(self.document_id, observer)

    def remove_observer(self, observer: Observer):
        self._local.remove_observer(observer)
        self._storage.remove_observer(self.document_id, observer)

    def publish(self):
        logger.debug(f"Selection changed in document {self.document_id}")
        self._local.notify()
        self._storage.notify(origin=self.document_id)
