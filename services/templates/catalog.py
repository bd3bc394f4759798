"""
Built-in emergency templates for Australian camping/hiking.

The catalog is fixed and ordered: list order is presentation order and the
first entry is the default choice.
"""

from enum import Enum
from typing import List, Tuple

from pydantic import BaseModel, ConfigDict


class EmergencyCategory(str, Enum):
    """Emergency category enumeration."""

    NAVIGATION = "Navigation"
    MEDICAL = "Medical"
    WEATHER = "Weather"
    EQUIPMENT = "Equipment"
    WILDLIFE = "Wildlife"
    GENERAL = "General"


class EmergencyTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    emoji: str
    category: EmergencyCategory
    message_fragment: str


class TemplateNotFoundError(LookupError):
    """Raised when a template id is not in the catalog."""

    def __init__(self, template_id: str):
        super().__init__(f"Unknown emergency template: {template_id}")
        self.template_id = template_id


CAMPING_TEMPLATES: Tuple[EmergencyTemplate, ...] = (
    EmergencyTemplate(
        id="lost_on_trail",
        title="Lost on Trail",
        emoji="🗺️",
        category=EmergencyCategory.NAVIGATION,
        message_fragment="I AM LOST on hiking trail and need rescue assistance",
    ),
    EmergencyTemplate(
        id="medical_emergency",
        title="Medical Emergency",
        emoji="🩹",
        category=EmergencyCategory.MEDICAL,
        message_fragment="MEDICAL EMERGENCY - I am injured and need immediate medical assistance",
    ),
    EmergencyTemplate(
        id="severe_weather",
        title="Severe Weather",
        emoji="⛈️",
        category=EmergencyCategory.WEATHER,
        message_fragment="Caught in DANGEROUS WEATHER CONDITIONS and need immediate rescue",
    ),
    EmergencyTemplate(
        id="equipment_failure",
        title="Equipment Failure",
        emoji="⚙️",
        category=EmergencyCategory.EQUIPMENT,
        message_fragment="CRITICAL EQUIPMENT FAILURE - stranded and need rescue assistance",
    ),
    EmergencyTemplate(
        id="wildlife_encounter",
        title="Wildlife Encounter",
        emoji="🐨",
        category=EmergencyCategory.WILDLIFE,
        message_fragment="DANGEROUS WILDLIFE ENCOUNTER - need immediate assistance",
    ),
    EmergencyTemplate(
        id="fall_injury",
        title="Fall/Injury",
        emoji="🩼",
        category=EmergencyCategory.MEDICAL,
        message_fragment="SERIOUS FALL with potential injuries - cannot move safely",
    ),
    EmergencyTemplate(
        id="snake_bite",
        title="Snake Bite",
        emoji="🐍",
        category=EmergencyCategory.MEDICAL,
        message_fragment="SNAKE BITE EMERGENCY - need immediate medical evacuation",
    ),
    EmergencyTemplate(
        id="flash_flood",
        title="Flash Flood",
        emoji="🌊",
        category=EmergencyCategory.WEATHER,
        message_fragment="Trapped by FLASH FLOODING - need immediate rescue",
    ),
    EmergencyTemplate(
        id="bushfire_threat",
        title="Bushfire Threat",
        emoji="🔥",
        category=EmergencyCategory.WEATHER,
        message_fragment="BUSHFIRE APPROACHING - need immediate evacuation assistance",
    ),
    EmergencyTemplate(
        id="general_emergency",
        title="General Emergency",
        emoji="🚨",
        category=EmergencyCategory.GENERAL,
        message_fragment="EMERGENCY SITUATION - need immediate assistance",
    ),
)

_BY_ID = {t.id: t for t in CAMPING_TEMPLATES}


def all_templates() -> List[EmergencyTemplate]:
    return list(CAMPING_TEMPLATES)


def default_template() -> EmergencyTemplate:
    return CAMPING_TEMPLATES[0]


def get_template(template_id: str) -> EmergencyTemplate:
    try:
        return _BY_ID[template_id]
    except KeyError:
        raise TemplateNotFoundError(template_id) from None


def templates_by_category(category: EmergencyCategory) -> List[EmergencyTemplate]:
    return [t for t in CAMPING_TEMPLATES if t.category == category]
