# ui/assistant_list.py
"""
Assistant list UI.

Responsibilities:
- Render the assistant collection held by AssistantListModel
- Expand / collapse rows, select, edit and delete assistants
- Re-render whenever the model or the selection changes
"""

from datetime import datetime

from nicegui import ui

from assistant_list import AssistantListModel
from models import Assistant
from ui.assistant_creator import open_creator_dialog, open_editor_dialog

import logging
logger = logging.getLogger(__name__)


# -------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------

def _created_label(assistant: Assistant) -> str:
    if not assistant.created_at:
        return ''
    try:
        created = datetime.fromisoformat(assistant.created_at)
    except ValueError:
        return ''
    return f'Created {created.strftime("%Y-%m-%d")}'


def _assistant_row(model: AssistantListModel, assistant: Assistant):
    is_selected = model.is_selected(assistant.id)
    is_expanded = model.is_expanded(assistant.id)

    card = ui.card().classes('w-full')
    if is_selected:
        card.classes('ring-2 ring-green-500')

    with card:
        with ui.row().classes('w-full items-center no-wrap'):
            ui.button(
                icon='expand_more' if is_expanded else 'chevron_right',
                on_click=lambda a=assistant: model.toggle_expanded(a.id),
            ).props('flat dense round size=sm')
            title = ui.label(assistant.name).classes('font-medium text-sm cursor-pointer col-grow')
            title.on('click', lambda a=assistant: model.toggle_expanded(a.id))
            if is_selected:
                title.classes('text-green-600')
                ui.icon('circle', color='green').classes('text-xs')

            ui.button(
                'Selected' if is_selected else 'Select',
                on_click=lambda a=assistant: model.select(a),
            ).props('flat dense size=sm' + (' color=positive' if is_selected else ''))
            ui.button(
                icon='edit',
                on_click=lambda a=assistant: open_editor_dialog(model, a),
            ).props('flat dense round size=sm')
            ui.button(
                'Delete',
                on_click=lambda a=assistant: model.delete(a.id),
            ).props('flat dense size=sm color=negative')

        if is_expanded:
            ui.separator()
            ui.label('Instructions:').classes('text-sm font-bold')
            ui.label(assistant.instructions).classes('text-sm text-gray-400')
            if assistant.persona:
                ui.label('Persona:').classes('text-sm font-bold')
                ui.label(assistant.persona).classes('text-sm text-gray-400')
            ui.label(_created_label(assistant)).classes('text-xs text-gray-500')


# -------------------------------------------------------------------
# Main renderer
# -------------------------------------------------------------------

def render_assistant_list(model: AssistantListModel):
    logger.info("ui.assistant_list render_assistant_list is started")

    @ui.refreshable
    def assistant_list_ui():
        with ui.row().classes('w-full items-center px-2'):
            ui.label('Custom Assistants').classes('text-sm font-semibold')
            ui.space()
            if model.selected_id:
                ui.button('Clear', on_click=model.clear_selection).props('flat dense size=sm color=negative')
            ui.button('New', icon='add', on_click=lambda: open_creator_dialog(model)).props('flat dense size=sm')

        if model.loading:
            ui.label('Loading assistants...').classes('p-4')
            return

        if model.error:
            with ui.row().classes('w-full items-center px-2'):
                ui.label(model.error).classes('text-xs text-red-500')
                ui.button(icon='refresh', on_click=model.refresh).props('flat dense round size=sm')

        if not model.assistants:
            ui.label('No custom assistants yet. Create your first one!').classes('text-center text-gray-500 text-xs w-full')
            return

        with ui.column().classes('w-full gap-2'):
            for assistant in model.assistants:
                _assistant_row(model, assistant)

    model.mount()
    assistant_list_ui()
    model.add_observer(assistant_list_ui.refresh)

    # remove when the page is deleted
    ui.context.client.on_delete(model.unmount)

    ui.timer(0.1, model.refresh, once=True)
