# ui/assistant_creator.py
"""
Create / edit assistant dialogs.
"""

from nicegui import ui

from assistant_list import AssistantListModel
from models import Assistant

import logging
logger = logging.getLogger(__name__)


def _assistant_form(assistant: Assistant | None = None):
    name = ui.input(
        'Assistant Name *',
        value=assistant.name if assistant else '',
        placeholder='e.g., Code Reviewer, Creative Writer',
    ).classes('w-full')
    instructions = ui.textarea(
        'Instructions *',
        value=assistant.instructions if assistant else '',
        placeholder='Describe what this assistant should do and how it should behave...',
    ).classes('w-full')
    persona = ui.textarea(
        'Persona (Optional)',
        value=(assistant.persona or '') if assistant else '',
        placeholder='Define the personality, tone, and style of responses...',
    ).classes('w-full')
    return name, instructions, persona


# -------------------------------------------------------------------
# Creation dialog
# -------------------------------------------------------------------

def open_creator_dialog(model: AssistantListModel):
    with ui.dialog() as dialog, ui.card().classes('w-full max-w-md'):
        ui.label('Create Custom Assistant').classes('text-xl font-bold w-full')

        name, instructions, persona = _assistant_form()

        async def save():
            create_button.disable()
            try:
                created = await model.create(name.value, instructions.value, persona.value)
            finally:
                create_button.enable()
            if created:
                ui.notify(f'Assistant "{created.name}" created', type='positive')
                dialog.close()

        with ui.row().classes('justify-end gap-2 w-full'):
            ui.button('Cancel', on_click=dialog.close).props('outline')
            create_button = ui.button('Create Assistant', on_click=save)

    dialog.open()


# -------------------------------------------------------------------
# Edit dialog
# -------------------------------------------------------------------

def open_editor_dialog(model: AssistantListModel, assistant: Assistant):
    with ui.dialog() as dialog, ui.card().classes('w-full max-w-md'):
        ui.label(f'Edit {assistant.name}').classes('text-xl font-bold w-full')

        name, instructions, persona = _assistant_form(assistant)

        async def save():
            updated = await model.update(
                assistant.id,
                name=name.value,
                instructions=instructions.value,
                persona=persona.value,
            )
            if updated:
                ui.notify('Assistant updated', type='positive')
                dialog.close()

        with ui.row().classes('justify-end gap-2 w-full'):
            ui.button('Cancel', on_click=dialog.close).props('outline')
            ui.button('Save', on_click=save)

    dialog.open()


# -------------------------------------------------------------------
# Delete confirmation
# -------------------------------------------------------------------

async def confirm_dialog(message: str) -> bool:
    with ui.dialog() as dialog, ui.card():
        ui.label('Confirm Delete').classes('text-lg font-bold text-red-600')
        ui.label(message)
        with ui.row().classes('justify-end'):
            ui.button('Cancel', on_click=lambda: dialog.submit(False))
            ui.button('Delete', color='negative', on_click=lambda: dialog.submit(True))

    result = await dialog
    return bool(result)
