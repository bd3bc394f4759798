import uuid

from pydantic import BaseModel, ConfigDict, Field


def _new_contact_id() -> str:
    return str(uuid.uuid4())


class EmergencyContact(BaseModel):
    """A person who can call emergency services on the user's behalf.

    Persisted with camelCase field names ({id, name, phoneNumber, relationship}).
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(default_factory=_new_contact_id)
    name: str
    phone_number: str = Field(alias="phoneNumber")
    relationship: str

    @property
    def has_phone_number(self) -> bool:
        return bool(self.phone_number)


class ContactCreateRequest(BaseModel):
    name: str
    phone_number: str
    relationship: str = ""


class ContactRemoveRequest(BaseModel):
    indices: list[int]


class ContactOut(BaseModel):
    id: str
    name: str
    phone_number: str
    relationship: str


class ContactsListResponse(BaseModel):
    contacts: list[ContactOut]
    count: int


class ProfileRequest(BaseModel):
    user_name: str


class ProfileResponse(BaseModel):
    user_name: str
