"""
Dispatch Status Enums
Shared status enumerations for the SMS dispatch boundary and SOS service.
"""

from enum import Enum


class DispatchResult(str, Enum):
    """Outcome reported back by the SMS dispatch mechanism"""
    SENT = "sent"
    FAILED = "failed"
    CANCELLED = "cancelled"


# Informational text shown to the user for each outcome
DISPATCH_MESSAGES = {
    DispatchResult.SENT: "Emergency message sent",
    DispatchResult.FAILED: "Emergency message failed to send",
    DispatchResult.CANCELLED: "Emergency message cancelled",
}
