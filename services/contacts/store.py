"""
Contact and profile storage on top of the key-value store.

The contact list is serialized whole to a single key on every change and read
back whole on startup; there is no partial persistence.
"""

import logging
import threading
from typing import Iterable, List, Optional

from pydantic import TypeAdapter, ValidationError

from common.constants import CONTACTS_KEY, USER_NAME_KEY
from libs.kv_store import KeyValueStore, get_key_value_store
from services.contacts.models import EmergencyContact

logger = logging.getLogger(__name__)

_contact_list = TypeAdapter(List[EmergencyContact])


class ContactStore:
    """
    Owns the ordered list of emergency contacts.

    Features:
    - Insertion order is preserved; removal keeps survivors in relative order
    - Every mutation persists the full list
    - Corrupt or missing data loads as an empty list
    """

    def __init__(self, store: Optional[KeyValueStore] = None, key: str = CONTACTS_KEY):
        self._store = store if store is not None else get_key_value_store()
        self._key = key
        self._lock = threading.Lock()
        self._contacts: List[EmergencyContact] = []
        self.load()

    @property
    def contacts(self) -> List[EmergencyContact]:
        with self._lock:
            return list(self._contacts)

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._contacts)

    def is_empty(self) -> bool:
        return self.count == 0

    def add(self, name: str, phone_number: str, relationship: str) -> EmergencyContact:
        """
        Create a contact with a fresh id, append it and persist the list.

        Args:
            name: Display name (e.g. "Mum")
            phone_number: Number handed to the dispatcher, not validated
            relationship: Free text (e.g. "Parent")

        Returns:
            The stored EmergencyContact
        """
        contact = EmergencyContact(
            name=name, phone_number=phone_number, relationship=relationship
        )
        with self._lock:
            self._contacts.append(contact)
            self._save_locked()
        logger.info(f"Added emergency contact {contact.id}")
        return contact

    def remove_at(self, indices: Iterable[int]) -> List[EmergencyContact]:
        """
        Remove every contact at the given positions in one update.

        Out-of-range (including negative) positions are ignored.

        Returns:
            The removed contacts, in list order
        """
        wanted = set(indices)
        with self._lock:
            removed = [c for i, c in enumerate(self._contacts) if i in wanted]
            self._contacts = [c for i, c in enumerate(self._contacts) if i not in wanted]
            self._save_locked()
        if removed:
            logger.info(f"Removed {len(removed)} emergency contact(s)")
        return removed

    def reset(self) -> None:
        with self._lock:
            self._contacts = []
            self._save_locked()

    def list_phone_numbers(self) -> List[str]:
        """Phone numbers in list order. Empty numbers are passed through as-is."""
        with self._lock:
            return [c.phone_number for c in self._contacts]

    def load(self) -> None:
        data = self._store.get(self._key)
        contacts: List[EmergencyContact] = []
        if data:
            try:
                contacts = _contact_list.validate_json(data)
            except (ValidationError, UnicodeDecodeError) as e:
                logger.warning(f"Could not decode stored contacts, starting empty: {e}")
                contacts = []
        with self._lock:
            self._contacts = contacts

    def _save_locked(self) -> None:
        payload = _contact_list.dump_json(self._contacts, by_alias=True)
        if not self._store.set(self._key, payload):
            logger.warning("Failed to persist emergency contacts")


class ProfileStore:
    """Holds the optional user display name included in SOS messages."""

    def __init__(self, store: Optional[KeyValueStore] = None, key: str = USER_NAME_KEY):
        self._store = store if store is not None else get_key_value_store()
        self._key = key

    def get_user_name(self) -> str:
        data = self._store.get(self._key)
        if not data:
            return ""
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError:
            logger.warning("Stored user name is not valid UTF-8, ignoring it")
            return ""

    def set_user_name(self, name: str) -> None:
        if not self._store.set(self._key, name.encode("utf-8")):
            logger.warning("Failed to persist user name")
