"""
Type definitions for the location provider.

Platform callbacks are modelled as three event kinds delivered to a single
handler: LocationUpdated, LocationFailed and AuthorizationChanged.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from common.constants import LOCATION_STATUS_INITIAL


class AuthorizationStatus(str, Enum):
    """Location permission state."""

    UNREQUESTED = "unrequested"
    PENDING = "pending"
    GRANTED = "granted"
    DENIED = "denied"
    RESTRICTED = "restricted"


class LocationSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float
    captured_at: datetime = Field(default_factory=datetime.now)


@dataclass(frozen=True)
class LocationUpdated:
    fixes: Tuple[LocationSnapshot, ...]


@dataclass(frozen=True)
class LocationFailed:
    error: str = ""


@dataclass(frozen=True)
class AuthorizationChanged:
    status: AuthorizationStatus


LocationEvent = Union[LocationUpdated, LocationFailed, AuthorizationChanged]


@dataclass(frozen=True)
class LocationState:
    """Snapshot, permission and status text, always replaced together."""

    snapshot: Optional[LocationSnapshot] = None
    authorization: AuthorizationStatus = AuthorizationStatus.UNREQUESTED
    status_text: str = field(default=LOCATION_STATUS_INITIAL)

    @property
    def has_permission(self) -> bool:
        return self.authorization == AuthorizationStatus.GRANTED

    @property
    def has_fix(self) -> bool:
        return self.snapshot is not None
