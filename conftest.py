"""
Shared test fixtures for the Hush SOS backend.

This module provides reusable fixtures for:
- In-memory key-value storage
- Contact and profile stores bound to that storage
- A location provider driven by a manual platform
- A dummy dispatcher that records what it was asked to send
- Config reloaded from a clean environment
- A FastAPI TestClient wired to all of the above
"""

import pytest

from common.dispatch_status import DispatchResult
from libs.kv_store import MemoryKeyValueStore
from services.contacts.store import ContactStore, ProfileStore
from services.dispatch.factory import DummyDispatcher
from services.location.events import AuthorizationChanged, AuthorizationStatus
from services.location.provider import LocationProvider, ManualLocationPlatform
from services.sos.manager import SOSManager


@pytest.fixture
def memory_store():
    """Empty in-memory key-value store."""
    return MemoryKeyValueStore()


@pytest.fixture
def contact_store(memory_store):
    return ContactStore(store=memory_store)


@pytest.fixture
def profile_store(memory_store):
    return ProfileStore(store=memory_store)


@pytest.fixture
def location_platform():
    return ManualLocationPlatform()


@pytest.fixture
def location_provider(location_platform):
    """Provider that has asked for permission but not received an answer yet."""
    return LocationProvider(platform=location_platform)


@pytest.fixture
def granted_location_provider(location_provider, location_platform):
    """Provider with location permission granted."""
    location_platform.emit(AuthorizationChanged(status=AuthorizationStatus.GRANTED))
    return location_provider


@pytest.fixture
def dummy_dispatcher():
    return DummyDispatcher(result=DispatchResult.SENT)


@pytest.fixture
def sos_manager(contact_store, profile_store, location_provider, dummy_dispatcher):
    return SOSManager(
        contacts=contact_store,
        profile=profile_store,
        location=location_provider,
        dispatcher=dummy_dispatcher,
        emergency_number="000",
        app_name="Emergency Helper App",
    )


@pytest.fixture
def client(sos_manager):
    """
    TestClient with the SOS manager dependency overridden.

    Returns:
        TestClient bound to the sos_manager fixture
    """
    from fastapi.testclient import TestClient

    from services.sos.main import app, get_manager

    app.dependency_overrides[get_manager] = lambda: sos_manager
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def clean_config(monkeypatch):
    """
    Config reloaded from an environment with no dispatch or Twilio settings.

    Every Config attribute is restored after the test.
    """
    from libs.config import Config

    for attr in [
        "STORAGE_BACKEND",
        "DISPATCH_MODE",
        "TWILIO_ACCOUNT_SID",
        "TWILIO_AUTH_TOKEN",
        "TWILIO_PHONE_NUMBER",
        "EMERGENCY_NUMBER",
        "APP_NAME",
        "LOG_LEVEL",
    ]:
        monkeypatch.setattr(Config, attr, getattr(Config, attr))
    for var in ["DISPATCH_MODE", "TWILIO_ACCOUNT_SID", "TWILIO_AUTH_TOKEN", "TWILIO_PHONE_NUMBER"]:
        monkeypatch.delenv(var, raising=False)
    Config.reload()
    return Config
