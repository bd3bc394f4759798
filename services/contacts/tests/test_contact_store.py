# pytest services/contacts/tests/test_contact_store.py -q

import json

import pytest

from common.constants import CONTACTS_KEY, USER_NAME_KEY
from libs.kv_store import KeyValueStore, MemoryKeyValueStore
from services.contacts.models import EmergencyContact
from services.contacts.store import ContactStore, ProfileStore

pytestmark = pytest.mark.unit


class FailingStore(KeyValueStore):
    """Store whose writes always fail and reads return nothing."""

    def __init__(self):
        self.set_calls = 0

    def get(self, key):
        return None

    def set(self, key, value):
        self.set_calls += 1
        return False

    def delete(self, key):
        return False


# ----------------------------
# add / list_phone_numbers
# ----------------------------
def test_add_single_contact_lists_its_number(contact_store):
    contact = contact_store.add(name="Mum", phone_number="0400000000", relationship="Parent")

    assert contact_store.list_phone_numbers() == ["0400000000"]
    assert contact.name == "Mum"
    assert contact.relationship == "Parent"
    assert contact.id


def test_phone_numbers_follow_insertion_order(contact_store):
    numbers = ["0411111111", "0422222222", "0433333333", "0444444444"]
    for i, number in enumerate(numbers):
        contact_store.add(name=f"Contact {i}", phone_number=number, relationship="Friend")

    assert contact_store.list_phone_numbers() == numbers
    assert contact_store.count == 4


def test_duplicates_are_allowed_and_get_distinct_ids(contact_store):
    a = contact_store.add(name="Dad", phone_number="0400000001", relationship="Parent")
    b = contact_store.add(name="Dad", phone_number="0400000001", relationship="Parent")

    assert a.id != b.id
    assert contact_store.list_phone_numbers() == ["0400000001", "0400000001"]


def test_empty_phone_numbers_are_not_filtered(contact_store):
    contact_store.add(name="No Number", phone_number="", relationship="")
    contact_store.add(name="Partner", phone_number="0455555555", relationship="Partner")

    assert contact_store.list_phone_numbers() == ["", "0455555555"]
    assert contact_store.contacts[0].has_phone_number is False


def test_new_store_is_empty(contact_store):
    assert contact_store.is_empty()
    assert contact_store.list_phone_numbers() == []


# ----------------------------
# remove_at
# ----------------------------
def test_remove_single_index_keeps_relative_order(contact_store):
    for n in ["01", "02", "03", "04"]:
        contact_store.add(name=n, phone_number=n, relationship="")

    removed = contact_store.remove_at({1})

    assert [c.phone_number for c in removed] == ["02"]
    assert contact_store.list_phone_numbers() == ["01", "03", "04"]


def test_remove_multiple_indices_in_one_update(contact_store):
    for n in ["01", "02", "03", "04", "05"]:
        contact_store.add(name=n, phone_number=n, relationship="")

    contact_store.remove_at({0, 2, 4})

    assert contact_store.list_phone_numbers() == ["02", "04"]


def test_remove_ignores_out_of_range_indices(contact_store):
    contact_store.add(name="A", phone_number="01", relationship="")
    contact_store.add(name="B", phone_number="02", relationship="")

    removed = contact_store.remove_at({5, -1, 1})

    assert len(removed) == 1
    assert contact_store.list_phone_numbers() == ["01"]


def test_remove_is_persisted(memory_store):
    store = ContactStore(store=memory_store)
    store.add(name="A", phone_number="01", relationship="")
    store.add(name="B", phone_number="02", relationship="")
    store.remove_at([0])

    reloaded = ContactStore(store=memory_store)
    assert reloaded.list_phone_numbers() == ["02"]


def test_reset_clears_and_persists(memory_store):
    store = ContactStore(store=memory_store)
    store.add(name="A", phone_number="01", relationship="")
    store.reset()

    assert store.is_empty()
    assert ContactStore(store=memory_store).is_empty()


# ----------------------------
# Persistence
# ----------------------------
def test_persist_reload_round_trip_is_field_for_field(memory_store):
    store = ContactStore(store=memory_store)
    store.add(name="Mum", phone_number="0400000000", relationship="Parent")
    store.add(name="Sam", phone_number="+61 412 345 678", relationship="Friend, hiking")
    store.add(name="Émile", phone_number="0499", relationship="")

    reloaded = ContactStore(store=memory_store)

    assert reloaded.contacts == store.contacts
    assert [c.id for c in reloaded.contacts] == [c.id for c in store.contacts]


def test_persisted_blob_uses_camel_case_field_names(memory_store, contact_store):
    contact = contact_store.add(name="Mum", phone_number="0400000000", relationship="Parent")

    raw = json.loads(memory_store.get(CONTACTS_KEY))

    assert raw == [
        {
            "id": contact.id,
            "name": "Mum",
            "phoneNumber": "0400000000",
            "relationship": "Parent",
        }
    ]


def test_loads_existing_blob():
    blob = json.dumps(
        [
            {"id": "c-1", "name": "Dad", "phoneNumber": "0411", "relationship": "Parent"},
            {"id": "c-2", "name": "Jo", "phoneNumber": "0422", "relationship": "Friend"},
        ]
    ).encode("utf-8")
    store = ContactStore(store=MemoryKeyValueStore({CONTACTS_KEY: blob}))

    assert store.list_phone_numbers() == ["0411", "0422"]
    assert store.contacts[0] == EmergencyContact(
        id="c-1", name="Dad", phoneNumber="0411", relationship="Parent"
    )


@pytest.mark.parametrize(
    "blob",
    [
        b"not json",
        b"{\"name\": \"not a list\"}",
        b"[{\"name\": \"missing fields\"}]",
        b"\xff\xfe\x00",
    ],
)
def test_corrupt_blob_loads_as_empty(blob):
    store = ContactStore(store=MemoryKeyValueStore({CONTACTS_KEY: blob}))

    assert store.is_empty()


def test_write_failure_keeps_in_memory_state():
    failing = FailingStore()
    store = ContactStore(store=failing)

    store.add(name="Mum", phone_number="0400000000", relationship="Parent")

    assert failing.set_calls == 1
    assert store.list_phone_numbers() == ["0400000000"]


# ----------------------------
# ProfileStore
# ----------------------------
def test_user_name_defaults_to_empty(profile_store):
    assert profile_store.get_user_name() == ""


def test_user_name_round_trip(memory_store, profile_store):
    profile_store.set_user_name("Jedda")

    assert ProfileStore(store=memory_store).get_user_name() == "Jedda"
    assert memory_store.get(USER_NAME_KEY) == b"Jedda"


def test_user_name_is_independent_of_contacts(memory_store, contact_store, profile_store):
    profile_store.set_user_name("Alex")
    contact_store.reset()

    assert profile_store.get_user_name() == "Alex"


def test_undecodable_user_name_degrades_to_empty():
    profile = ProfileStore(store=MemoryKeyValueStore({USER_NAME_KEY: b"\xff\xfe"}))

    assert profile.get_user_name() == ""
