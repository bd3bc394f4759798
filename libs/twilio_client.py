"""
Twilio SMS Client
Sends the SOS text to one emergency contact per call
"""

from typing import Optional

from twilio.base.exceptions import TwilioRestException
from twilio.rest import Client

from libs.config import Config


def _failed(to_phone: str, error: str) -> dict:
    return {
        "status": "failed",
        "sid": None,
        "to": to_phone,
        "message_status": "failed",
        "error": error,
    }


class TwilioClient:
    """Sends SMS from the configured TWILIO_PHONE_NUMBER"""

    def __init__(self):
        if not Config.validate_twilio_config():
            raise ValueError(
                "Missing Twilio configuration. Please set TWILIO_ACCOUNT_SID, "
                "TWILIO_AUTH_TOKEN, and TWILIO_PHONE_NUMBER in your .env file"
            )

        self.from_phone = Config.TWILIO_PHONE_NUMBER
        self.client = Client(Config.TWILIO_ACCOUNT_SID, Config.TWILIO_AUTH_TOKEN)

    def send_sms(self, to_phone: str, message: str) -> dict:
        """
        Send one SMS. Errors are reported in the result, never raised.

        Returns:
            dict with status ("sent"/"failed"), sid, to, message_status and error
        """
        try:
            msg = self.client.messages.create(body=message, from_=self.from_phone, to=to_phone)
        except TwilioRestException as e:
            return _failed(to_phone, str(e))
        except Exception as e:
            return _failed(to_phone, f"Unexpected error: {e}")

        return {
            "status": "sent",
            "sid": msg.sid,
            "to": msg.to,
            "message_status": msg.status,
            "error": None,
        }


_twilio_client: Optional[TwilioClient] = None


def get_twilio_client() -> TwilioClient:
    """Create the client on first use; raises ValueError while unconfigured."""
    global _twilio_client
    if _twilio_client is None:
        _twilio_client = TwilioClient()
    return _twilio_client
