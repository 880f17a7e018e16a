from __future__ import annotations

import inject
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from paidagent.application.event_bus import EventBusManager
from paidagent.setup.api_config import ApiSettings
from paidagent.setup.app_config import configure_di
from support import StubGenerator


@pytest.fixture
def settings() -> ApiSettings:
    return ApiSettings(ANTHROPIC_API_KEY="test-key", PORT=41243)


@pytest.fixture
def generator() -> StubGenerator:
    return StubGenerator()


@pytest.fixture
def buses() -> EventBusManager:
    return EventBusManager()


@pytest.fixture
def api_client(settings: ApiSettings, generator: StubGenerator):
    """FastAPI test client with the DI container wired to the stub generator."""
    from paidagent.presentation.routes import router as a2a_router
    from paidagent.presentation.websockets import router as ws_router

    configure_di(settings, generator=generator)
    app = FastAPI()
    app.include_router(a2a_router)
    app.include_router(ws_router)
    with TestClient(app) as client:
        yield client
    inject.clear()
