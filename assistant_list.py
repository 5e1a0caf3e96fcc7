# assistant_list.py
"""
View-model behind the assistant list.

Responsibilities:
- Keep the in-memory assistant collection and per-row expand state
- Reflect the selection held by the selection store (never owned here)
- Drive create / update / delete / select against the API and the store

Nothing in here imports NiceGUI: navigation, notifications and the delete
confirmation are injected callables.
"""

from typing import Awaitable, Callable, List, Optional, Set

from assistant_api import AssistantApi
from errors import AssistantError, ErrorKind
from models import Assistant
from selection_bus import SelectionBus
from selection_store import SelectionStore

import logging
logger = logging.getLogger(__name__)

DELETE_CONFIRMATION = 'Are you sure you want to delete this assistant?'

Navigate = Callable[[Optional[Assistant]], None]
Notify = Callable[[str, str], None]
Confirm = Callable[[str], Awaitable[bool]]


class AssistantListModel:
    def __init__(
        self,
        api: AssistantApi,
        store: SelectionStore,
        bus: SelectionBus,
        *,
        navigate: Navigate,
        notify: Notify,
        confirm: Confirm,
    ):
        self._api = api
        self._store = store
        self._bus = bus
        self._navigate = navigate
        self._notify = notify
        self._confirm = confirm

        self.assistants: List[Assistant] = []
        self.expanded: Set[str] = set()
        self.selected_id: Optional[str] = None
        self.loading = True
        self.error: Optional[str] = None

        self._refresh_generation = 0
        self._mutation_count = 0
        self.observers: List[Callable[[], None]] = []

    # -------------------------------------------------------------------
    # Observers (renderers)
    # -------------------------------------------------------------------

    def add_observer(self, observer: Callable[[], None]):
        self.observers.append(observer)

    def remove_observer(self, observer: Callable[[], None]):
        if observer in self.observers:
            self.observers.remove(observer)

    def _changed(self):
        for observer in list(self.observers):
            observer()

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------

    def mount(self):
        self._bus.add_observer(self._on_selection_changed)
        self._sync_selection()

    def unmount(self):
        self._bus.remove_observer(self._on_selection_changed)
        self.observers.clear()

    def _sync_selection(self):
        state = self._store.read()
        self.selected_id = state.assistant_id if state else None

    def _on_selection_changed(self):
        self._sync_selection()
        self._changed()

    # -------------------------------------------------------------------
    # Row queries
    # -------------------------------------------------------------------

    def is_selected(self, assistant_id: str) -> bool:
        return self.selected_id == assistant_id

    def is_expanded(self, assistant_id: str) -> bool:
        return assistant_id in self.expanded

    def toggle_expanded(self, assistant_id: str):
        if assistant_id in self.expanded:
            self.expanded.remove(assistant_id)
        else:
            self.expanded.add(assistant_id)
        self._changed()

    # -------------------------------------------------------------------
    # Collection
    # -------------------------------------------------------------------

    async def refresh(self):
        """
        Reload the collection. Only the most recently issued refresh is
        applied; results of superseded calls are dropped.
        """
        self._refresh_generation += 1
        generation = self._refresh_generation
        mutations = self._mutation_count

        try:
            assistants = await self._api.list_assistants()
        except AssistantError as e:
            if generation != self._refresh_generation:
                logger.debug(f"Dropping failure of superseded refresh {generation}")
                return
            logger.warning(f"Error fetching assistants: {e.message}")
            self.error = f'Failed to load assistants: {e.message}'
            self.loading = False
            self._changed()
            return

        if generation != self._refresh_generation:
            logger.debug(f"Dropping result of superseded refresh {generation}")
            return

        self.assistants = assistants
        self.error = None
        self.loading = False
        known = {a.id for a in assistants}
        self.expanded &= known

        # the live collection decides whether the selection still exists
        if mutations == self._mutation_count:
            self._sync_selection()
            if self.selected_id is not None and self.selected_id not in known:
                logger.info(f"Selected assistant {self.selected_id} no longer exists, clearing selection")
                self._store.clear()
                self._sync_selection()

        self._changed()

    async def create(self, name: str, instructions: str, persona: Optional[str] = None) -> Optional[Assistant]:
        try:
            assistant = await self._api.create_assistant(name, instructions, persona or None)
        except AssistantError as e:
            logger.warning(f"Error creating assistant: {e.message}")
            self._notify(f'Failed to create assistant: {e.message}', 'negative')
            return None

        self._mutation_count += 1
        self.assistants = [assistant, *self.assistants]
        self._changed()
        return assistant

    async def update(
        self,
        assistant_id: str,
        *,
        name: Optional[str] = None,
        instructions: Optional[str] = None,
        persona: Optional[str] = None,
    ) -> Optional[Assistant]:
        try:
            updated = await self._api.update_assistant(
                assistant_id, name=name, instructions=instructions, persona=persona,
            )
        except AssistantError as e:
            logger.warning(f"Error updating assistant {assistant_id}: {e.message}")
            self._notify(f'Failed to update assistant: {e.message}', 'negative')
            return None

        self._mutation_count += 1
        self.assistants = [updated if a.id == assistant_id else a for a in self.assistants]
        if self.is_selected(assistant_id):
            # keep the cached snapshot in step with the live record
            self._store.write(updated)
        self._changed()
        return updated

    async def delete(self, assistant_id: str) -> bool:
        if not await self._confirm(DELETE_CONFIRMATION):
            return False

        try:
            await self._api.delete_assistant(assistant_id)
        except AssistantError as e:
            if e.kind != ErrorKind.NOT_FOUND:
                logger.warning(f"Error deleting assistant {assistant_id}: {e.message}")
                self._notify(f'Failed to delete assistant: {e.message}', 'negative')
                return False
            logger.info(f"Assistant {assistant_id} was already deleted")

        self._mutation_count += 1
        self.assistants = [a for a in self.assistants if a.id != assistant_id]
        self.expanded.discard(assistant_id)

        if self.is_selected(assistant_id):
            self.clear_selection()
        else:
            self._changed()
        return True

    # -------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------

    def select(self, assistant: Assistant):
        """
        Make `assistant` the active one; selecting it again deselects it.
        """
        if self.is_selected(assistant.id):
            self.clear_selection()
            return

        # the store publishes; _on_selection_changed re-reads and re-renders
        self._store.write(assistant)
        self._navigate(assistant)

    def clear_selection(self):
        self._store.clear()
        self._navigate(None)
