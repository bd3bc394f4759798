import logging
from datetime import datetime
from typing import List, Optional

from common.dispatch_status import DISPATCH_MESSAGES, DispatchResult
from libs.config import Config
from services.contacts.store import ContactStore, ProfileStore
from services.dispatch.factory import BaseDispatcher
from services.location.provider import LocationProvider
from services.sos.models import SOSPreviewResponse, SOSSendResponse, SOSStatusResponse, StatusCard
from services.templates.builder import build_message
from services.templates.catalog import EmergencyTemplate, default_template, get_template

logger = logging.getLogger(__name__)

REASON_NO_CONTACTS = "no_contacts"
REASON_DISPATCH_UNAVAILABLE = "dispatch_unavailable"
REASON_NO_LOCATION_PERMISSION = "location_permission"


class SOSUnavailableError(Exception):
    """Raised when an SOS is requested while sending is disabled."""

    def __init__(self, reasons: List[str]):
        super().__init__(f"SOS sending is disabled: {', '.join(reasons)}")
        self.reasons = reasons


class SOSManager:
    """
    Ties contacts, profile, location and the dispatcher together.

    Owns no domain state of its own apart from the last dispatch outcome.
    """

    def __init__(
        self,
        contacts: ContactStore,
        profile: ProfileStore,
        location: LocationProvider,
        dispatcher: BaseDispatcher,
        emergency_number: Optional[str] = None,
        app_name: Optional[str] = None,
    ) -> None:
        self.contacts = contacts
        self.profile = profile
        self.location = location
        self.dispatcher = dispatcher
        self.emergency_number = emergency_number or Config.EMERGENCY_NUMBER
        self.app_name = app_name or Config.APP_NAME
        self.last_result: Optional[DispatchResult] = None

    def eligibility_reasons(self) -> List[str]:
        reasons = []
        if self.contacts.is_empty():
            reasons.append(REASON_NO_CONTACTS)
        if not self.dispatcher.can_send():
            reasons.append(REASON_DISPATCH_UNAVAILABLE)
        if not self.location.has_permission:
            reasons.append(REASON_NO_LOCATION_PERMISSION)
        return reasons

    def can_send_sos(self) -> bool:
        return not self.eligibility_reasons()

    def status(self) -> SOSStatusResponse:
        state = self.location.state()
        count = self.contacts.count
        reasons = self.eligibility_reasons()
        return SOSStatusResponse(
            location=StatusCard(
                title="Location Status",
                content=state.status_text,
                is_good=state.has_permission and state.has_fix,
            ),
            contacts=StatusCard(
                title="Emergency Contacts",
                content=f"{count} contacts saved",
                is_good=count > 0,
            ),
            can_send=not reasons,
            reasons=reasons,
            last_outcome=self.last_result.value if self.last_result else None,
        )

    def _resolve_template(self, template_id: Optional[str]) -> EmergencyTemplate:
        return get_template(template_id) if template_id else default_template()

    def compose(
        self,
        template_id: Optional[str] = None,
        additional_info: str = "",
        sent_at: Optional[datetime] = None,
    ) -> SOSPreviewResponse:
        template = self._resolve_template(template_id)
        message = build_message(
            template,
            user_name=self.profile.get_user_name(),
            location_text=self.location.emergency_location_text(now=sent_at),
            additional_info=additional_info,
            sent_at=sent_at,
            emergency_number=self.emergency_number,
            app_name=self.app_name,
        )
        return SOSPreviewResponse(
            template_id=template.id,
            message=message,
            recipients=self.contacts.list_phone_numbers(),
        )

    async def send_sos(
        self, template_id: Optional[str] = None, additional_info: str = ""
    ) -> SOSSendResponse:
        """
        Compose the SOS and hand it to the dispatcher.

        Raises:
            SOSUnavailableError: if contacts, dispatch or location permission are missing
            TemplateNotFoundError: if template_id is not in the catalog
        """
        reasons = self.eligibility_reasons()
        if reasons:
            raise SOSUnavailableError(reasons)

        now = datetime.now()
        preview = self.compose(template_id, additional_info, sent_at=now)
        result = await self.dispatcher.dispatch(preview.message, preview.recipients)
        self.last_result = result
        logger.info(
            f"SOS {preview.template_id} dispatched to {len(preview.recipients)} "
            f"contact(s): {result.value}"
        )

        return SOSSendResponse(
            status=result.value,
            info=DISPATCH_MESSAGES[result],
            message_sent=preview.message,
            recipients=preview.recipients,
            timestamp=now,
        )
