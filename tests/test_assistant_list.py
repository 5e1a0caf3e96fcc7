import asyncio

import httpx
import pytest
import pytest_asyncio

from assistant_api import AssistantApi
from assistant_list import DELETE_CONFIRMATION, AssistantListModel
from assistant_routes import USER_HEADER
from errors import AssistantError, ErrorKind
from selection_bus import SelectionBus
from selection_store import SelectionStore


class FakeApi:
    """Scriptable stand-in for AssistantApi."""

    def __init__(self, assistants=()):
        self.assistants = list(assistants)
        self.fail_with = None
        self.deleted = []

    def _maybe_fail(self):
        if self.fail_with:
            raise self.fail_with

    async def list_assistants(self):
        self._maybe_fail()
        return list(self.assistants)

    async def create_assistant(self, name, instructions, persona=None):
        self._maybe_fail()
        raise AssertionError("not scripted")

    async def update_assistant(self, assistant_id, **fields):
        self._maybe_fail()
        raise AssertionError("not scripted")

    async def delete_assistant(self, assistant_id):
        self._maybe_fail()
        self.deleted.append(assistant_id)


def make_model(api, store, bus, recorder) -> AssistantListModel:
    model = AssistantListModel(
        api, store, bus,
        navigate=recorder.navigate,
        notify=recorder.notify,
        confirm=recorder.confirm,
    )
    model.mount()
    return model


@pytest_asyncio.fixture
async def model(assistant_api, store, bus, recorder):
    model = make_model(assistant_api, store, bus, recorder)
    await model.refresh()
    yield model
    model.unmount()


def selected_rows(model):
    return [a.id for a in model.assistants if model.is_selected(a.id)]


@pytest.mark.asyncio
class TestAssistantListModel:
    async def test_create_prepends(self, model):
        """Test a created assistant is inserted at index 0 without refetching"""
        first = await model.create("Writer", "Write things")
        second = await model.create("Reviewer", "Review code for bugs")

        assert second.id and second.created_at
        assert [a.id for a in model.assistants] == [second.id, first.id]
        assert model.loading is False

    async def test_create_validation_failure_leaves_collection(self, model, recorder):
        await model.create("Writer", "Write things")

        assert await model.create("", "x") is None

        assert len(model.assistants) == 1
        assert recorder.notifications == [("Failed to create assistant: Name is required", "negative")]

    async def test_select_writes_store_and_navigates(self, model, store, recorder):
        assistant = await model.create("Reviewer", "Review code for bugs")

        model.select(assistant)

        state = store.read()
        assert state.assistant_id == assistant.id
        assert state.snapshot == assistant
        assert model.is_selected(assistant.id)
        assert recorder.navigations == [assistant]

    async def test_select_twice_toggles_off(self, model, store, recorder):
        assistant = await model.create("Reviewer", "Review code for bugs")

        model.select(assistant)
        model.select(assistant)

        assert store.read() is None
        assert model.selected_id is None
        assert recorder.navigations == [assistant, None]

    async def test_at_most_one_selected(self, model):
        a = await model.create("A", "a")
        b = await model.create("B", "b")
        c = await model.create("C", "c")

        for step in (a, b, b, c, a, c):
            model.select(step)
            assert len(selected_rows(model)) <= 1

        assert selected_rows(model) == [c.id]

    async def test_delete_selected_clears_selection(self, model, store, recorder):
        assistant = await model.create("Reviewer", "Review code for bugs")
        model.select(assistant)

        assert await model.delete(assistant.id) is True

        assert model.assistants == []
        assert store.read() is None
        assert recorder.confirmations == [DELETE_CONFIRMATION]
        assert recorder.navigations[-1] is None

    async def test_delete_keeps_other_selection(self, model, store):
        keep = await model.create("Keep", "k")
        drop = await model.create("Drop", "d")
        model.select(keep)

        await model.delete(drop.id)

        assert [a.id for a in model.assistants] == [keep.id]
        assert store.read().assistant_id == keep.id

    async def test_delete_needs_confirmation(self, model, recorder):
        assistant = await model.create("Reviewer", "Review code for bugs")
        recorder.confirm_result = False

        assert await model.delete(assistant.id) is False

        assert [a.id for a in model.assistants] == [assistant.id]

    async def test_delete_already_deleted_repairs_locally(self, store, bus, recorder, make_assistant):
        assistant = make_assistant()
        api = FakeApi([assistant])
        model = make_model(api, store, bus, recorder)
        await model.refresh()
        model.select(assistant)

        api.fail_with = AssistantError(ErrorKind.NOT_FOUND, "Assistant not found", status=404)
        assert await model.delete(assistant.id) is True

        assert model.assistants == []
        assert store.read() is None
        assert recorder.notifications == []

    async def test_delete_failure_leaves_everything(self, store, bus, recorder, make_assistant):
        assistant = make_assistant()
        api = FakeApi([assistant])
        model = make_model(api, store, bus, recorder)
        await model.refresh()
        model.select(assistant)

        api.fail_with = AssistantError(ErrorKind.REQUEST_FAILED, "Failed to delete assistant", status=500)
        assert await model.delete(assistant.id) is False

        assert model.assistants == [assistant]
        assert store.read().assistant_id == assistant.id
        assert recorder.notifications == [("Failed to delete assistant: Failed to delete assistant", "negative")]

    async def test_refresh_failure_keeps_collection(self, store, bus, recorder, make_assistant):
        api = FakeApi([make_assistant()])
        model = make_model(api, store, bus, recorder)
        await model.refresh()

        api.fail_with = AssistantError(ErrorKind.REQUEST_FAILED, "Failed to fetch assistants", status=500)
        await model.refresh()

        assert [a.id for a in model.assistants] == ["a1"]
        assert model.error == "Failed to load assistants: Failed to fetch assistants"

        api.fail_with = None
        await model.refresh()
        assert model.error is None

    async def test_refresh_clears_stale_selection(self, store, bus, recorder, make_assistant):
        store.write(make_assistant("gone"))
        api = FakeApi([make_assistant("a1")])
        model = make_model(api, store, bus, recorder)
        assert model.selected_id == "gone"

        await model.refresh()

        assert model.selected_id is None
        assert store.read() is None
        assert recorder.navigations == []

    async def test_only_latest_refresh_applies(self, store, bus, recorder, make_assistant):
        release_slow = asyncio.Event()
        responses = iter([
            ("slow", [make_assistant("old")]),
            ("fast", [make_assistant("new")]),
        ])

        class RacingApi(FakeApi):
            async def list_assistants(self):
                kind, result = next(responses)
                if kind == "slow":
                    await release_slow.wait()
                return result

        model = make_model(RacingApi(), store, bus, recorder)

        slow = asyncio.create_task(model.refresh())
        await asyncio.sleep(0)
        await model.refresh()
        release_slow.set()
        await slow

        assert [a.id for a in model.assistants] == ["new"]

    async def test_toggle_expanded_is_local(self, model, store):
        assistant = await model.create("Reviewer", "Review code for bugs")

        model.toggle_expanded(assistant.id)
        assert model.is_expanded(assistant.id)
        model.toggle_expanded(assistant.id)
        assert not model.is_expanded(assistant.id)
        assert store.read() is None

    async def test_update_refreshes_selected_snapshot(self, model, store):
        assistant = await model.create("Reviewer", "Review code for bugs")
        model.select(assistant)

        updated = await model.update(assistant.id, persona="Strict")

        assert model.assistants == [updated]
        assert store.read().snapshot.persona == "Strict"
        assert model.is_selected(assistant.id)

    async def test_observers_rerender_on_changes(self, model):
        renders = []
        model.add_observer(lambda: renders.append(model.selected_id))

        assistant = await model.create("Reviewer", "Review code for bugs")
        model.select(assistant)

        assert renders[-1] == assistant.id

    async def test_other_component_sees_delete_of_selection(self, model, store, bus, browser_storage):
        """Test a separate subscriber observes the cleared selection without refreshing"""
        assistant = await model.create("Reviewer", "Review code for bugs")
        model.select(assistant)

        observed = []
        other_store = SelectionStore(browser_storage)
        bus.add_observer(lambda: observed.append(other_store.read()))

        await model.delete(assistant.id)

        assert observed[-1] is None

    async def test_second_tab_observes_selection(self, model, browser_storage, storage_watcher):
        assistant = await model.create("Reviewer", "Review code for bugs")

        tab_2_bus = SelectionBus("tab-2", storage_watcher)
        tab_2_store = SelectionStore(browser_storage, tab_2_bus)
        seen = []
        tab_2_bus.add_observer(lambda: seen.append(tab_2_store.read()))

        model.select(assistant)

        assert seen[-1].snapshot == assistant

    async def test_unmount_stops_listening(self, store, bus, recorder, make_assistant):
        model = make_model(FakeApi(), store, bus, recorder)
        model.unmount()

        store.write(make_assistant())

        assert model.selected_id is None

    async def test_closed_api_is_notified_not_raised(self, api_app, store, bus, recorder):
        """Test a closed client after unmount/remount surfaces as a notification"""
        api = AssistantApi("http://test", headers={USER_HEADER: "alice"}, transport=httpx.ASGITransport(app=api_app))
        model = make_model(api, store, bus, recorder)
        model.unmount()
        await api.aclose()
        model.mount()

        assert await model.create("Reviewer", "Review code for bugs") is None
        await model.refresh()

        assert model.assistants == []
        assert recorder.notifications == [("Failed to create assistant: Request failed: client is closed", "negative")]
        assert model.error == "Failed to load assistants: Request failed: client is closed"

    async def test_select_renders_once(self, model):
        assistant = await model.create("Reviewer", "Review code for bugs")
        renders = []
        model.add_observer(lambda: renders.append(model.selected_id))

        model.select(assistant)
        assert renders == [assistant.id]

        model.clear_selection()
        assert renders == [assistant.id, None]
