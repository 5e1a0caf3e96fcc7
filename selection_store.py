# selection_store.py
"""
Durable selection store.

Holds the selected assistant's id and a full snapshot of it in a
browser-scoped key-value storage (NiceGUI's app.storage.user in the app,
a plain dict in tests). The storage survives reloads and is shared by all
tabs of the same browser profile.
"""

import json
from typing import MutableMapping, Optional

from errors import AssistantError, ErrorKind
from models import Assistant, SelectionState
from selection_bus import SelectionBus

import logging
logger = logging.getLogger(__name__)

SELECTED_ID_KEY = 'selectedAssistantId'
SELECTED_SNAPSHOT_KEY = 'selectedAssistant'


class SelectionStore:
    def __init__(self, storage: MutableMapping, bus: Optional[SelectionBus] = None):
        self._storage = storage
        self._bus = bus

    def _load_snapshot(self, assistant_id: str) -> Assistant:
        raw = self._storage.get(SELECTED_SNAPSHOT_KEY)
        if not isinstance(raw, str):
            raise AssistantError(ErrorKind.STORAGE_CORRUPT, 'Selected assistant snapshot is missing')
        try:
            snapshot = Assistant.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError) as e:
            raise AssistantError(ErrorKind.STORAGE_CORRUPT, f'Selected assistant snapshot is unreadable: {e}') from e
        if snapshot.id != assistant_id:
            raise AssistantError(ErrorKind.STORAGE_CORRUPT, 'Selected assistant snapshot does not match the selected id')
        return snapshot

    def read(self) -> Optional[SelectionState]:
        """
        Current selection, or None if nothing is selected.
        Corrupt entries are removed and read as "no selection".
        """
        assistant_id = self._storage.get(SELECTED_ID_KEY)
        if not assistant_id:
            if SELECTED_SNAPSHOT_KEY in self._storage:
                logger.warning("Discarding stored selection: snapshot without a selected id")
                self._remove()
            return None

        try:
            snapshot = self._load_snapshot(assistant_id)
        except AssistantError as e:
            logger.warning(f"Discarding stored selection: {e.message}")
            self._remove()
            return None

        return SelectionState(assistant_id=assistant_id, snapshot=snapshot)

    def write(self, assistant: Assistant) -> None:
        # snapshot before id: a reader that sees the new id also sees its snapshot
        self._storage[SELECTED_SNAPSHOT_KEY] = json.dumps(assistant.to_dict())
        self._storage[SELECTED_ID_KEY] = assistant.id
        logger.info(f"Assistant {assistant.id} selected")
        self._publish()

    def clear(self) -> None:
        self._remove()
        logger.info("Assistant selection cleared")
        self._publish()

    def _remove(self) -> None:
        self._storage.pop(SELECTED_ID_KEY, None)
        self._storage.pop(SELECTED_SNAPSHOT_KEY, None)

    def _publish(self) -> None:
        if self._bus is not None:
            self._bus.publish()
