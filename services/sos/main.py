# Run:
# uvicorn services.sos.main:app --host 0.0.0.0 --port 20006 --reload
# Docs: http://127.0.0.1:20006/docs

import logging
from datetime import datetime
from typing import Optional

from dotenv import load_dotenv
from fastapi import Depends, HTTPException

# Load environment variables from .env file
load_dotenv()

from libs.config import Config
from libs.fastapi_service import FastAPIServiceFactory, ServiceAppConfig
from services.contacts.models import (
    ContactCreateRequest,
    ContactOut,
    ContactRemoveRequest,
    ContactsListResponse,
    ProfileRequest,
    ProfileResponse,
)
from services.contacts.store import ContactStore, ProfileStore
from services.dispatch.factory import DispatcherFactory
from services.location.events import (
    AuthorizationChanged,
    LocationFailed,
    LocationSnapshot,
    LocationUpdated,
)
from services.location.provider import LocationProvider
from services.sos.manager import SOSManager, SOSUnavailableError
from services.sos.models import (
    AuthorizationEventRequest,
    LocationFailureRequest,
    LocationFixRequest,
    LocationSnapshotOut,
    LocationStateResponse,
    SOSPreviewResponse,
    SOSRequest,
    SOSSendResponse,
    SOSStatusResponse,
    TemplateOut,
    TemplatesListResponse,
)
from services.templates.catalog import TemplateNotFoundError, all_templates, default_template

Config.reload()
logging.basicConfig(level=Config.LOG_LEVEL.upper())
logger = logging.getLogger(__name__)

factory = FastAPIServiceFactory(
    ServiceAppConfig(
        title="Hush SOS Service",
        description="Emergency contacts, device location and SOS text dispatch.",
        service_name="sos",
    )
)
app = factory.create_app()

# Business metric: SOS dispatches by outcome
SOS_DISPATCH_TOTAL = factory.add_business_metric(
    "sos_dispatch_total",
    "Total SOS messages handed to the dispatcher",
    ["outcome"],
)

_manager: Optional[SOSManager] = None


def get_manager() -> SOSManager:
    """Build the manager from configuration on first use."""
    global _manager
    if _manager is None:
        _manager = SOSManager(
            contacts=ContactStore(),
            profile=ProfileStore(),
            location=LocationProvider(),
            dispatcher=DispatcherFactory().get_dispatcher(),
        )
    return _manager


def _contact_out(contact) -> ContactOut:
    return ContactOut(
        id=contact.id,
        name=contact.name,
        phone_number=contact.phone_number,
        relationship=contact.relationship,
    )


def _location_state(manager: SOSManager) -> LocationStateResponse:
    state = manager.location.state()
    snapshot = None
    if state.snapshot is not None:
        snapshot = LocationSnapshotOut(**state.snapshot.model_dump())
    return LocationStateResponse(
        authorization=state.authorization,
        has_permission=state.has_permission,
        status_text=state.status_text,
        snapshot=snapshot,
        emergency_text=manager.location.emergency_location_text(state=state),
    )


@app.get("/")
async def root():
    return {"service": "sos", "status": "running"}


# ========= Contacts =========


@app.get("/v1/contacts", response_model=ContactsListResponse, tags=["Contacts"])
async def list_contacts(manager: SOSManager = Depends(get_manager)):
    contacts = manager.contacts.contacts
    return ContactsListResponse(
        contacts=[_contact_out(c) for c in contacts], count=len(contacts)
    )


@app.post("/v1/contacts", response_model=ContactOut, tags=["Contacts"])
async def add_contact(payload: ContactCreateRequest, manager: SOSManager = Depends(get_manager)):
    if not payload.name or not payload.phone_number:
        raise HTTPException(status_code=422, detail="Name and phone number are required")
    contact = manager.contacts.add(
        name=payload.name,
        phone_number=payload.phone_number,
        relationship=payload.relationship,
    )
    return _contact_out(contact)


@app.post("/v1/contacts/remove", response_model=ContactsListResponse, tags=["Contacts"])
async def remove_contacts(
    payload: ContactRemoveRequest, manager: SOSManager = Depends(get_manager)
):
    manager.contacts.remove_at(payload.indices)
    contacts = manager.contacts.contacts
    return ContactsListResponse(
        contacts=[_contact_out(c) for c in contacts], count=len(contacts)
    )


# ========= Profile =========


@app.get("/v1/profile", response_model=ProfileResponse, tags=["Profile"])
async def get_profile(manager: SOSManager = Depends(get_manager)):
    return ProfileResponse(user_name=manager.profile.get_user_name())


@app.put("/v1/profile", response_model=ProfileResponse, tags=["Profile"])
async def update_profile(payload: ProfileRequest, manager: SOSManager = Depends(get_manager)):
    manager.profile.set_user_name(payload.user_name)
    return ProfileResponse(user_name=payload.user_name)


# ========= Templates =========


@app.get("/v1/templates", response_model=TemplatesListResponse, tags=["Templates"])
async def list_templates():
    return TemplatesListResponse(
        templates=[TemplateOut(**t.model_dump()) for t in all_templates()],
        default_template_id=default_template().id,
    )


# ========= Location =========


@app.get("/v1/location", response_model=LocationStateResponse, tags=["Location"])
async def get_location(manager: SOSManager = Depends(get_manager)):
    return _location_state(manager)


@app.post("/v1/location/permission", response_model=LocationStateResponse, tags=["Location"])
async def request_permission(manager: SOSManager = Depends(get_manager)):
    manager.location.request_permission()
    return _location_state(manager)


@app.post("/v1/location/request", response_model=LocationStateResponse, tags=["Location"])
async def request_location(manager: SOSManager = Depends(get_manager)):
    manager.location.request_location()
    return _location_state(manager)


@app.post(
    "/v1/location/events/authorization",
    response_model=LocationStateResponse,
    tags=["Location"],
)
async def authorization_changed(
    payload: AuthorizationEventRequest, manager: SOSManager = Depends(get_manager)
):
    manager.location.handle_event(AuthorizationChanged(status=payload.status))
    return _location_state(manager)


@app.post("/v1/location/events/fix", response_model=LocationStateResponse, tags=["Location"])
async def location_updated(
    payload: LocationFixRequest, manager: SOSManager = Depends(get_manager)
):
    fix = LocationSnapshot(
        latitude=payload.latitude,
        longitude=payload.longitude,
        captured_at=payload.captured_at or datetime.now(),
    )
    manager.location.handle_event(LocationUpdated(fixes=(fix,)))
    return _location_state(manager)


@app.post(
    "/v1/location/events/failure",
    response_model=LocationStateResponse,
    tags=["Location"],
)
async def location_failed(
    payload: LocationFailureRequest, manager: SOSManager = Depends(get_manager)
):
    manager.location.handle_event(LocationFailed(error=payload.error))
    return _location_state(manager)


# ========= SOS =========


@app.get("/v1/sos/status", response_model=SOSStatusResponse, tags=["SOS"])
async def sos_status(manager: SOSManager = Depends(get_manager)):
    return manager.status()


@app.post("/v1/sos/preview", response_model=SOSPreviewResponse, tags=["SOS"])
async def sos_preview(body: SOSRequest, manager: SOSManager = Depends(get_manager)):
    try:
        return manager.compose(body.template_id, body.additional_info)
    except TemplateNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.post("/v1/sos/send", response_model=SOSSendResponse, tags=["SOS"])
async def sos_send(body: SOSRequest, manager: SOSManager = Depends(get_manager)):
    """
    Compose the SOS text and hand it to the dispatcher.
    The dispatch outcome is reported back verbatim; nothing is retried.
    """
    try:
        response = await manager.send_sos(body.template_id, body.additional_info)
    except TemplateNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SOSUnavailableError as e:
        raise HTTPException(
            status_code=409, detail={"message": str(e), "reasons": e.reasons}
        )

    SOS_DISPATCH_TOTAL.labels(outcome=response.status).inc()
    return response
