"""
Location provider wrapping a device location platform.

The platform is fire-and-forget: request_authorization() and request_location()
return immediately and results come back through the handler registered with
set_handler(). All state changes go through one lock and replace the whole
LocationState, so a reader never sees a snapshot paired with a stale status.
"""

import logging
import threading
from dataclasses import replace
from datetime import datetime
from typing import Callable, List, Optional

from common.constants import (
    LOCATION_NOT_AVAILABLE,
    LOCATION_STATUS_DENIED,
    LOCATION_STATUS_FAILED,
    LOCATION_STATUS_PERMISSION_NEEDED,
    LOCATION_STATUS_WAITING,
)
from services.location.events import (
    AuthorizationChanged,
    AuthorizationStatus,
    LocationEvent,
    LocationFailed,
    LocationSnapshot,
    LocationState,
    LocationUpdated,
)

logger = logging.getLogger(__name__)

EventHandler = Callable[[LocationEvent], None]


class LocationPlatform:
    """Base class for device location platforms"""

    def set_handler(self, handler: EventHandler) -> None:
        raise NotImplementedError("Platform must implement set_handler()")

    def request_authorization(self) -> None:
        raise NotImplementedError("Platform must implement request_authorization()")

    def request_location(self) -> None:
        raise NotImplementedError("Platform must implement request_location()")


class ManualLocationPlatform(LocationPlatform):
    """
    Platform whose results are pushed in from outside.

    Used when the device reports permission changes and fixes over the API, and
    in tests. Requests are only counted; call emit() to deliver an event.
    """

    def __init__(self):
        self._handler: Optional[EventHandler] = None
        self.authorization_requests = 0
        self.location_requests = 0

    def set_handler(self, handler: EventHandler) -> None:
        self._handler = handler

    def request_authorization(self) -> None:
        self.authorization_requests += 1

    def request_location(self) -> None:
        self.location_requests += 1

    def emit(self, event: LocationEvent) -> None:
        if self._handler is None:
            raise RuntimeError("No location event handler registered")
        self._handler(event)


def _aware(moment: datetime) -> datetime:
    # naive timestamps are device-local time
    return moment if moment.tzinfo is not None else moment.astimezone()


def short_status(snapshot: LocationSnapshot) -> str:
    return f"📍 Located: {snapshot.latitude:.4f}, {snapshot.longitude:.4f}"


class LocationProvider:
    """
    Owns the latest location snapshot, permission state and status text.

    States: unrequested -> pending -> granted / denied / restricted. Once granted
    the provider moves from "no fix yet" to "has fix" and keeps the newest fix.
    """

    def __init__(
        self,
        platform: Optional[LocationPlatform] = None,
        request_on_start: bool = True,
    ):
        self._platform = platform if platform is not None else ManualLocationPlatform()
        self._lock = threading.Lock()
        self._state = LocationState()
        self._platform.set_handler(self.handle_event)
        if request_on_start:
            self.request_permission()

    @property
    def platform(self) -> LocationPlatform:
        return self._platform

    def state(self) -> LocationState:
        with self._lock:
            return self._state

    @property
    def snapshot(self) -> Optional[LocationSnapshot]:
        return self.state().snapshot

    @property
    def authorization(self) -> AuthorizationStatus:
        return self.state().authorization

    @property
    def status_text(self) -> str:
        return self.state().status_text

    @property
    def has_permission(self) -> bool:
        return self.state().has_permission

    def request_permission(self) -> None:
        with self._lock:
            if self._state.authorization == AuthorizationStatus.UNREQUESTED:
                self._state = replace(self._state, authorization=AuthorizationStatus.PENDING)
        self._platform.request_authorization()

    def request_location(self) -> bool:
        """
        Ask the platform for a one-shot fix.

        Returns:
            False without querying the platform when permission is missing
        """
        with self._lock:
            if not self._state.has_permission:
                self._state = replace(self._state, status_text=LOCATION_STATUS_PERMISSION_NEEDED)
                return False
        self._platform.request_location()
        return True

    def handle_event(self, event: LocationEvent) -> None:
        if isinstance(event, LocationUpdated):
            self._on_location_updated(list(event.fixes))
        elif isinstance(event, LocationFailed):
            self._on_location_failed(event.error)
        elif isinstance(event, AuthorizationChanged):
            self._on_authorization_changed(event.status)
        else:
            raise TypeError(f"Unsupported location event: {type(event).__name__}")

    def _on_location_updated(self, fixes: List[LocationSnapshot]) -> None:
        if not fixes:
            return
        fix = fixes[0]
        with self._lock:
            current = self._state.snapshot
            if current is not None and _aware(fix.captured_at) < _aware(current.captured_at):
                logger.debug("Ignoring location fix older than the current snapshot")
                return
            self._state = replace(self._state, snapshot=fix, status_text=short_status(fix))

    def _on_location_failed(self, error: str) -> None:
        logger.warning(f"Location request failed: {error}")
        with self._lock:
            self._state = replace(self._state, status_text=LOCATION_STATUS_FAILED)

    def _on_authorization_changed(self, status: AuthorizationStatus) -> None:
        with self._lock:
            if status in (AuthorizationStatus.DENIED, AuthorizationStatus.RESTRICTED):
                self._state = replace(
                    self._state, authorization=status, status_text=LOCATION_STATUS_DENIED
                )
            elif status == AuthorizationStatus.GRANTED:
                self._state = replace(self._state, authorization=status)
            else:
                self._state = replace(
                    self._state, authorization=status, status_text=LOCATION_STATUS_WAITING
                )
        logger.info(f"Location authorization changed to {status.value}")
        if status == AuthorizationStatus.GRANTED:
            self.request_location()

    def emergency_location_text(
        self, now: Optional[datetime] = None, state: Optional[LocationState] = None
    ) -> str:
        """
        Precise location block for the SOS message.

        Uses 6 decimal places, unlike the 4 places of the short status text.
        Pass a state already read with state() to render that exact snapshot.
        """
        if state is None:
            state = self.state()
        snapshot = state.snapshot
        if snapshot is None:
            return LOCATION_NOT_AVAILABLE

        moment = now or datetime.now()
        return (
            "📍 EXACT LOCATION:\n"
            f"Latitude: {snapshot.latitude:.6f}\n"
            f"Longitude: {snapshot.longitude:.6f}\n"
            f"Time: {moment.strftime('%d/%m/%Y, %H:%M')}"
        )
