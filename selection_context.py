# selection_context.py
"""
Ambient access to the currently selected assistant.

A page scopes one SelectionProvider with `provide_selection`; anything
rendered inside that block reaches it through `use_selection()` instead of
having the provider passed down by hand.
"""

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Callable, Iterator, List, Optional

from models import Assistant
from selection_bus import SelectionBus
from selection_store import SelectionStore

import logging
logger = logging.getLogger(__name__)


class SelectionProvider:
    def __init__(self, store: SelectionStore, bus: Optional[SelectionBus] = None):
        self._store = store
        self._bus = bus
        self.observers: List[Callable[[], None]] = []

        state = store.read()
        self.current_selection: Optional[Assistant] = state.snapshot if state else None

        if bus is not None:
            bus.add_observer(self._on_selection_changed)

    def _on_selection_changed(self):
        state = self._store.read()
        self.current_selection = state.snapshot if state else None
        for observer in list(self.observers):
            observer()

    def add_observer(self, observer: Callable[[], None]):
        self.observers.append(observer)

    def select(self, assistant: Optional[Assistant]):
        if assistant is None:
            self._store.clear()
        else:
            self._store.write(assistant)
        self.current_selection = assistant

    def clear_selection(self):
        self.select(None)

    def close(self):
        if self._bus is not None:
            self._bus.remove_observer(self._on_selection_changed)
        self.observers.clear()


_current_provider: ContextVar[Optional[SelectionProvider]] = ContextVar('selection_provider', default=None)


@contextmanager
def provide_selection(provider: SelectionProvider) -> Iterator[SelectionProvider]:
    token = _current_provider.set(provider)
    try:
        yield provider
    finally:
        _current_provider.reset(token)


def use_selection() -> SelectionProvider:
    provider = _current_provider.get()
    if provider is None:
        raise RuntimeError('use_selection must be used within provide_selection')
    return provider
