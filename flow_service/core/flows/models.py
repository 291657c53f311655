"""
Logical form schema consumed by the flow compiler.

These are the pre-compiled screen/component shapes that builders submit
and that bots store; the compiler turns them into WhatsApp Flow JSON.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class ComponentKind(str, Enum):
    """Canonical WhatsApp Flow component kinds the compiler emits"""
    TEXT_BODY = "TextBody"
    TEXT_HEADING = "TextHeading"
    TEXT_SUBHEADING = "TextSubheading"
    TEXT_CAPTION = "TextCaption"
    RADIO_BUTTONS = "RadioButtonsGroup"
    DROPDOWN = "Dropdown"
    CHECKBOX = "CheckboxGroup"
    TEXT_AREA = "TextArea"
    TEXT_INPUT = "TextInput"
    DATE_PICKER = "DatePicker"
    PHOTO_PICKER = "PhotoPicker"
    DOCUMENT_PICKER = "DocumentPicker"


# Accepted input spellings for each kind
COMPONENT_ALIASES: Dict[str, ComponentKind] = {
    "text": ComponentKind.TEXT_BODY,
    "TextBody": ComponentKind.TEXT_BODY,
    "heading": ComponentKind.TEXT_HEADING,
    "TextHeading": ComponentKind.TEXT_HEADING,
    "subheading": ComponentKind.TEXT_SUBHEADING,
    "TextSubheading": ComponentKind.TEXT_SUBHEADING,
    "caption": ComponentKind.TEXT_CAPTION,
    "TextCaption": ComponentKind.TEXT_CAPTION,
    "radio": ComponentKind.RADIO_BUTTONS,
    "radio_buttons": ComponentKind.RADIO_BUTTONS,
    "dropdown": ComponentKind.DROPDOWN,
    "checkbox": ComponentKind.CHECKBOX,
    "textarea": ComponentKind.TEXT_AREA,
    "input": ComponentKind.TEXT_INPUT,
    "text_entry": ComponentKind.TEXT_INPUT,
    "date": ComponentKind.DATE_PICKER,
    "date_picker": ComponentKind.DATE_PICKER,
    "photo_picker": ComponentKind.PHOTO_PICKER,
    "document_picker": ComponentKind.DOCUMENT_PICKER,
}

STATIC_KINDS = frozenset({
    ComponentKind.TEXT_BODY,
    ComponentKind.TEXT_HEADING,
    ComponentKind.TEXT_SUBHEADING,
    ComponentKind.TEXT_CAPTION,
})

CHOICE_KINDS = frozenset({
    ComponentKind.RADIO_BUTTONS,
    ComponentKind.DROPDOWN,
    ComponentKind.CHECKBOX,
})


def resolve_kind(component_type: str) -> Optional[ComponentKind]:
    """Canonical kind for an input type, None when the type is unknown"""
    return COMPONENT_ALIASES.get(component_type)


class Component(BaseModel):
    """One form element of a screen"""

    type: str
    label: Optional[str] = None
    name: Optional[str] = None
    text: Optional[str] = None
    options: Optional[List[str]] = None
    required: bool = False

    # Picker settings
    source: Optional[str] = None
    uploads: Optional[int] = None
    description: Optional[str] = None

    @property
    def kind(self) -> Optional[ComponentKind]:
        return resolve_kind(self.type)

    @property
    def is_static(self) -> bool:
        return self.kind in STATIC_KINDS


class Screen(BaseModel):
    """An ordered group of components shown together"""

    id: str = Field(..., min_length=1)
    title: str
    components: List[Component] = Field(default_factory=list)


class FlowSchema(BaseModel):
    """Compiler input: screens in navigation order"""

    screens: List[Screen] = Field(..., min_length=1)

