import os
import tempfile

# storage.py creates its directories on import
os.environ.setdefault("ASSISTANT_MNGR_DATA", tempfile.mkdtemp(prefix="assistant-mngr-"))

from typing import AsyncGenerator, Dict, List

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

import assistants
from assistant_api import AssistantApi
from assistant_routes import USER_HEADER, router
from models import Assistant
from selection_bus import SelectionBus, StorageWatcher
from selection_store import SelectionStore


def _make_assistant(assistant_id: str = "a1", name: str = "Reviewer", **kwargs) -> Assistant:
    return Assistant(
        id=assistant_id,
        name=name,
        instructions=kwargs.pop("instructions", "Review code for bugs"),
        created_at=kwargs.pop("created_at", "2025-01-01T00:00:00+00:00"),
        user_id=kwargs.pop("user_id", "alice"),
        **kwargs,
    )


@pytest.fixture
def assistants_file(tmp_path, monkeypatch):
    path = tmp_path / "assistants.json"
    monkeypatch.setattr(assistants, "ASSISTANTS_FILE", path)
    return path


@pytest.fixture
def api_app(assistants_file) -> FastAPI:
    app = FastAPI()
    app.include_router(router, prefix="/api")
    return app


@pytest_asyncio.fixture
async def http_client(api_app) -> AsyncGenerator[httpx.AsyncClient, None]:
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=api_app), base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def assistant_api(api_app) -> AsyncGenerator[AssistantApi, None]:
    async with AssistantApi(
        "http://test",
        headers={USER_HEADER: "alice"},
        transport=httpx.ASGITransport(app=api_app),
    ) as api:
        yield api


@pytest.fixture
def browser_storage() -> Dict:
    """Stands in for the per-browser app.storage.user."""
    return {}


@pytest.fixture
def storage_watcher() -> StorageWatcher:
    return StorageWatcher()


@pytest.fixture
def bus(storage_watcher) -> SelectionBus:
    return SelectionBus("tab-1", storage_watcher)


@pytest.fixture
def store(browser_storage, bus) -> SelectionStore:
    return SelectionStore(browser_storage, bus)


class Recorder:
    """Collects navigation / notification / confirmation calls of the view-model."""

    def __init__(self, confirm_result: bool = True):
        self.navigations: List = []
        self.notifications: List = []
        self.confirmations: List[str] = []
        self.confirm_result = confirm_result

    def navigate(self, assistant):
        self.navigations.append(assistant)

    def notify(self, message, kind):
        self.notifications.append((message, kind))

    async def confirm(self, message):
        self.confirmations.append(message)
        return self.confirm_result


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def make_assistant():
    return _make_assistant
