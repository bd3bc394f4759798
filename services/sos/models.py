from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel

from services.location.events import AuthorizationStatus
from services.templates.catalog import EmergencyCategory


class StatusCard(BaseModel):
    title: str
    content: str
    is_good: bool


class SOSStatusResponse(BaseModel):
    location: StatusCard
    contacts: StatusCard
    can_send: bool
    reasons: List[str]
    last_outcome: Optional[Literal["sent", "failed", "cancelled"]] = None


class SOSRequest(BaseModel):
    template_id: Optional[str] = None
    additional_info: str = ""


class SOSPreviewResponse(BaseModel):
    template_id: str
    message: str
    recipients: List[str]


class SOSSendResponse(BaseModel):
    status: Literal["sent", "failed", "cancelled"]
    info: str
    message_sent: str
    recipients: List[str]
    timestamp: datetime


class TemplateOut(BaseModel):
    id: str
    title: str
    emoji: str
    category: EmergencyCategory
    message_fragment: str


class TemplatesListResponse(BaseModel):
    templates: List[TemplateOut]
    default_template_id: str


class AuthorizationEventRequest(BaseModel):
    status: AuthorizationStatus


class LocationFixRequest(BaseModel):
    latitude: float
    longitude: float
    captured_at: Optional[datetime] = None


class LocationFailureRequest(BaseModel):
    error: str = ""


class LocationSnapshotOut(BaseModel):
    latitude: float
    longitude: float
    captured_at: datetime


class LocationStateResponse(BaseModel):
    authorization: AuthorizationStatus
    has_permission: bool
    status_text: str
    snapshot: Optional[LocationSnapshotOut] = None
    emergency_text: str
