"""
Application-wide constants for the Hush SOS backend.

This module contains all shared constants used across the application.
"""

import os

# ========= Service Configuration =========
# Service configuration: service_name -> (module_path, port)
SERVICES = {
    "sos": ("services.sos.main", 20006),
}

# ========= Storage Keys =========
# Whole contact list is stored as one JSON blob under this key
CONTACTS_KEY = "EmergencyContacts"
USER_NAME_KEY = "UserName"

# ========= Redis Configuration =========
REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
REDIS_PORT = int(os.getenv("REDIS_PORT", "6379"))
REDIS_DB = int(os.getenv("REDIS_DB", "0"))
# Note: REDIS_PASSWORD should be read from env in the store, not here (security)

# ========= Message Defaults =========
DEFAULT_EMERGENCY_NUMBER = "000"
DEFAULT_APP_NAME = "Emergency Helper App"

# ========= Location Status Text =========
LOCATION_STATUS_INITIAL = "Getting your location..."
LOCATION_STATUS_PERMISSION_NEEDED = "Location permission needed"
LOCATION_STATUS_FAILED = "❌ Location failed"
LOCATION_STATUS_DENIED = "❌ Location permission denied"
LOCATION_STATUS_WAITING = "⏳ Waiting for permission..."
LOCATION_NOT_AVAILABLE = "Location not available"
