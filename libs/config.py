"""
Configuration module for loading environment variables
"""

import os
from typing import Optional

from common.constants import DEFAULT_APP_NAME, DEFAULT_EMERGENCY_NUMBER


class Config:
    """Application configuration"""

    # Storage Configuration
    STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "memory")

    # Dispatch Configuration ("dummy" sends nothing; dev and tests only)
    DISPATCH_MODE: str = os.getenv("DISPATCH_MODE", "twilio")

    # Twilio Configuration
    TWILIO_ACCOUNT_SID: Optional[str] = os.getenv("TWILIO_ACCOUNT_SID")
    TWILIO_AUTH_TOKEN: Optional[str] = os.getenv("TWILIO_AUTH_TOKEN")
    TWILIO_PHONE_NUMBER: Optional[str] = os.getenv("TWILIO_PHONE_NUMBER")

    # Message Configuration
    EMERGENCY_NUMBER: str = os.getenv("EMERGENCY_NUMBER", DEFAULT_EMERGENCY_NUMBER)
    APP_NAME: str = os.getenv("APP_NAME", DEFAULT_APP_NAME)

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def validate_twilio_config(cls) -> bool:
        """Check if Twilio configuration is complete"""
        return all(
            [cls.TWILIO_ACCOUNT_SID, cls.TWILIO_AUTH_TOKEN, cls.TWILIO_PHONE_NUMBER]
        )

    @classmethod
    def reload(cls) -> None:
        """Re-read every setting from the environment (used after load_dotenv)."""
        cls.STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory")
        cls.DISPATCH_MODE = os.getenv("DISPATCH_MODE", "twilio")
        cls.TWILIO_ACCOUNT_SID = os.getenv("TWILIO_ACCOUNT_SID")
        cls.TWILIO_AUTH_TOKEN = os.getenv("TWILIO_AUTH_TOKEN")
        cls.TWILIO_PHONE_NUMBER = os.getenv("TWILIO_PHONE_NUMBER")
        cls.EMERGENCY_NUMBER = os.getenv("EMERGENCY_NUMBER", DEFAULT_EMERGENCY_NUMBER)
        cls.APP_NAME = os.getenv("APP_NAME", DEFAULT_APP_NAME)
        cls.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


config = Config()
