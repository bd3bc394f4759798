"""
SMS dispatch boundary.

The core hands a dispatcher the built message and the ordered recipient numbers
and gets back exactly one DispatchResult. Nothing here retries.
"""

import asyncio
import logging
from typing import Dict, List, Optional, Tuple

from common.dispatch_status import DispatchResult
from libs.config import Config
from libs.twilio_client import get_twilio_client

logger = logging.getLogger(__name__)


class BaseDispatcher:
    """Base class for SMS dispatchers"""

    def can_send(self) -> bool:
        """Whether this dispatcher is able to send text messages at all."""
        raise NotImplementedError("Dispatcher must implement can_send()")

    async def dispatch(self, message: str, recipients: List[str]) -> DispatchResult:
        """
        Send one message to every recipient.

        Args:
            message: Complete SOS text
            recipients: Phone numbers in contact order

        Returns:
            DispatchResult.SENT, FAILED or CANCELLED
        """
        raise NotImplementedError("Dispatcher must implement dispatch()")


class DummyDispatcher(BaseDispatcher):
    """Dispatcher for local dev and tests; records what it was asked to send."""

    def __init__(self, result: DispatchResult = DispatchResult.SENT, capable: bool = True):
        self.result = result
        self.capable = capable
        self.sent: List[Tuple[str, List[str]]] = []

    def can_send(self) -> bool:
        return self.capable

    async def dispatch(self, message: str, recipients: List[str]) -> DispatchResult:
        self.sent.append((message, list(recipients)))
        logger.info(f"[DUMMY DISPATCH] {len(recipients)} recipient(s), result={self.result.value}")
        return self.result


class TwilioDispatcher(BaseDispatcher):
    """Sends one SMS per recipient through Twilio."""

    def can_send(self) -> bool:
        return Config.validate_twilio_config()

    async def dispatch(self, message: str, recipients: List[str]) -> DispatchResult:
        if not recipients:
            logger.warning("No recipients to dispatch to")
            return DispatchResult.FAILED

        try:
            twilio = get_twilio_client()
        except ValueError as e:
            logger.error(f"Twilio configuration error: {e}")
            return DispatchResult.FAILED

        failures = 0
        for phone in recipients:
            result = await asyncio.to_thread(twilio.send_sms, phone, message)
            if result["status"] != "sent":
                failures += 1
                logger.error(f"SMS to {phone} failed: {result.get('error')}")

        if failures:
            logger.warning(f"SOS dispatch failed for {failures}/{len(recipients)} recipient(s)")
            return DispatchResult.FAILED
        return DispatchResult.SENT


class DispatcherFactory:
    def __init__(self) -> None:
        self._dispatchers: Dict[str, BaseDispatcher] = {
            "dummy": DummyDispatcher(),
            "twilio": TwilioDispatcher(),
        }

    def get_dispatcher(self, mode: Optional[str] = None) -> BaseDispatcher:
        mode = (mode or Config.DISPATCH_MODE).lower()
        if mode not in self._dispatchers:
            raise ValueError(f"Unsupported dispatch mode: {mode}")
        return self._dispatchers[mode]
