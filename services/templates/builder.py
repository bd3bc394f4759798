from datetime import datetime
from typing import Optional

from common.constants import DEFAULT_APP_NAME, DEFAULT_EMERGENCY_NUMBER
from services.templates.catalog import EmergencyTemplate

TIMESTAMP_FORMAT = "%d %b %Y, %H:%M"


def format_timestamp(moment: datetime) -> str:
    """Short local date/time, e.g. '19 Oct 2026, 14:05'."""
    return moment.strftime(TIMESTAMP_FORMAT)


def build_message(
    template: EmergencyTemplate,
    user_name: str,
    location_text: str,
    additional_info: str = "",
    sent_at: Optional[datetime] = None,
    emergency_number: str = DEFAULT_EMERGENCY_NUMBER,
    app_name: str = DEFAULT_APP_NAME,
) -> str:
    """
    Build the SOS text sent to every emergency contact.

    Name and additional info lines are left out entirely when empty. Inputs are
    used verbatim: no escaping, truncation or SMS length limits are applied.

    Args:
        template: Selected emergency scenario
        user_name: Optional sender name
        location_text: Location block, inserted as-is
        additional_info: Optional free text from the user
        sent_at: Timestamp to print (defaults to local now)
        emergency_number: Local emergency services number
        app_name: Sending application shown in the trailer

    Returns:
        The complete multi-line message
    """
    moment = sent_at or datetime.now()

    message = "🚨 DEAF CAMPER EMERGENCY 🚨\n"
    message += f"PLEASE CALL {emergency_number} IMMEDIATELY\n\n"
    message += f"Emergency: {template.message_fragment}\n\n"
    message += "I am DEAF and CANNOT make voice calls.\n"
    message += "Please call emergency services for me.\n\n"
    message += f"📍 LOCATION:\n{location_text}\n\n"

    if user_name:
        message += f"Name: {user_name}\n"

    if additional_info:
        message += f"Additional info: {additional_info}\n"

    message += f"\n⚠️ CRITICAL: Tell {emergency_number} this person is DEAF\n"
    message += f"🕐 Time: {format_timestamp(moment)}\n"
    message += f"📱 Sent from {app_name}"

    return message
