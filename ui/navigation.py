# ui/navigation.py
import httpx
from nicegui import app, ui
from fastapi import FastAPI, Request

from assistant_api import AssistantApi
from assistant_list import AssistantListModel
from assistant_routes import USER_HEADER
from models import Assistant
from selection_bus import SelectionBus, get_storage_watcher, discard_storage_watcher
from selection_context import SelectionProvider, provide_selection, use_selection
from selection_store import SelectionStore
from storage import API_BASE_URL, DEFAULT_USER_ID
from ui.assistant_creator import confirm_dialog
from ui.assistant_list import render_assistant_list

import logging
logger = logging.getLogger(__name__)

# set by main.py: the API is served by the same process
_local_app: FastAPI | None = None


def attach_api(fastapi_app: FastAPI):
    global _local_app
    _local_app = fastapi_app


def _make_api(user_id: str) -> AssistantApi:
    headers = {USER_HEADER: user_id}
    if API_BASE_URL:
        return AssistantApi(API_BASE_URL, headers=headers)
    return AssistantApi(headers=headers, transport=httpx.ASGITransport(app=_local_app))


# -------------------
# Callbacks handed to the view-model
# -------------------

def _navigate(assistant: Assistant | None):
    # a fresh interaction scoped to the (new) selection
    logger.info(f"Starting new chat with {assistant.name if assistant else 'default assistant'}")
    ui.navigate.to('/')


def _notify(message: str, kind: str):
    ui.notify(message, type=kind, close_button='OK')


# -------------------
# Header (called inside each page)
# -------------------
def build_header():
    provider = use_selection()

    dark = ui.dark_mode()
    dark.enable()
    with ui.header().classes('items-center'):
        ui.colors(brand='#424242')
        ui.label('Assistant Manager').classes('text-lg font-bold text-brand')
        ui.space()

        @ui.refreshable
        def selected_ui():
            assistant = provider.current_selection
            if assistant:
                ui.chip(assistant.name, icon='smart_toy', color='green')
                with ui.button(icon='close', on_click=provider.clear_selection).props('flat dense round size=sm'):
                    ui.tooltip('Use default assistant')
            else:
                ui.chip('Default assistant', icon='smart_toy', color='gray')

        selected_ui()
        provider.add_observer(selected_ui.refresh)

        ui.label(f"{app.storage.user.get('user_id', 'no user')}").classes('font-bold text-brand')


def build_chat_area():
    """Placeholder for the interaction view scoped to the current selection."""
    provider = use_selection()

    @ui.refreshable
    def chat_ui():
        assistant = provider.current_selection
        with ui.column().classes('w-full max-w-3xl p-4'):
            if assistant:
                ui.label(f'New chat with {assistant.name}').classes('text-2xl font-bold')
                ui.markdown(assistant.instructions).classes('text-gray-400')
                if assistant.persona:
                    ui.label(assistant.persona).classes('text-sm italic text-gray-500')
            else:
                ui.label('New chat').classes('text-2xl font-bold')
                ui.label('Select a custom assistant from the list to shape the conversation.').classes('text-gray-400')

    chat_ui()
    provider.add_observer(chat_ui.refresh)


# -------------------
# Pages
# -------------------
@ui.page('/')
def home_page(request: Request):
    user_id = request.headers.get(USER_HEADER) or DEFAULT_USER_ID
    app.storage.user['user_id'] = user_id
    logger.info(f"home_page called for {user_id}")

    client = ui.context.client
    profile = app.storage.browser['id']

    bus = SelectionBus(client.id, get_storage_watcher(profile))
    store = SelectionStore(app.storage.user, bus)
    api = _make_api(user_id)
    provider = SelectionProvider(store, bus)
    model = AssistantListModel(
        api, store, bus,
        navigate=_navigate,
        notify=_notify,
        confirm=confirm_dialog,
    )

    with provide_selection(provider):
        build_header()
        with ui.left_drawer(value=True).classes('p-2'):
            render_assistant_list(model)
        build_chat_area()

    def teardown():
        provider.close()
        discard_storage_watcher(profile)

    client.on_delete(teardown)
    client.on_delete(api.aclose)
