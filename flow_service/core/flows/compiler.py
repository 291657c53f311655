"""
WhatsApp Flow JSON compiler.

Turns a logical FlowSchema into a Flow JSON document: one single-column
form per screen, a generated footer that navigates to the next screen or
completes the flow, cross-screen data declarations for every value
collected earlier, and a linear routing model.
"""

import copy
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from flow_service.config.constants import FLOW_DATA_API_VERSION, FLOW_JSON_VERSION
from flow_service.config.settings import Settings, UnknownComponentPolicy
from flow_service.exceptions.flow_exceptions import (
    CompilationIncompleteError,
    DuplicateScreenIdError,
    MissingComponentNameError,
    TooManyComponentsError,
    TooManyScreensError,
    UnrecognizedComponentTypeError,
)
from flow_service.utils.logger import get_logger
from .models import CHOICE_KINDS, Component, ComponentKind, FlowSchema, Screen

logger = get_logger(__name__)

CompiledDocument = Dict[str, Any]

_WHITESPACE = re.compile(r"\s+")

FORM_NAME = "flow_path"
STRING_PLACEHOLDER = {"type": "string", "__example__": "Example"}
ARRAY_PLACEHOLDER = {"type": "array", "items": {"type": "string"}, "__example__": []}


@dataclass(frozen=True)
class CompilerOptions:
    """Validation policy of a FlowCompiler"""
    max_screens: int = 8
    max_components_per_screen: int = 8
    enforce_component_limit: bool = True
    require_component_names: bool = True
    label_max_length: int = 20
    unknown_component_policy: UnknownComponentPolicy = UnknownComponentPolicy.OMIT

    @classmethod
    def from_settings(cls, settings: Settings) -> "CompilerOptions":
        return cls(
            max_screens=settings.FLOW_MAX_SCREENS,
            max_components_per_screen=settings.FLOW_MAX_COMPONENTS_PER_SCREEN,
            enforce_component_limit=settings.FLOW_ENFORCE_COMPONENT_LIMIT,
            require_component_names=settings.FLOW_REQUIRE_COMPONENT_NAMES,
            label_max_length=settings.FLOW_LABEL_MAX_LENGTH,
            unknown_component_policy=settings.FLOW_UNKNOWN_COMPONENT_POLICY,
        )


def field_key(screen_id: str, component: Component, index: int) -> str:
    """Form field name of a component; unique across screens for named components"""
    if not component.name:
        return f"unnamed_{index}"
    return f"{screen_id}_{_WHITESPACE.sub('_', component.name)}_{index}"


def option_id(index: int, option: str) -> str:
    return f"{index}_{_WHITESPACE.sub('_', option.strip()).lower()}"


def _without_absent(node: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in node.items() if value is not None}


class FlowCompiler:
    """
    Compiles FlowSchema instances into Flow JSON documents.

    Stateless apart from its options; one instance is shared by all requests.
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        self.options = options or CompilerOptions()

    def compile(self, schema: FlowSchema) -> CompiledDocument:
        """
        Compile a schema into a Flow JSON document

        Raises:
            FlowCompilationError: If the schema violates the compiler's limits
        """
        screens = schema.screens
        self._validate_screens(screens)

        compiled_screens = []
        routing_model: Dict[str, List[str]] = {}

        for index, screen in enumerate(screens):
            compiled = self._compile_screen(screens, index)
            if compiled:
                compiled_screens.append(compiled)
            if index < len(screens) - 1:
                routing_model[screen.id] = [screens[index + 1].id]

        if len(compiled_screens) != len(screens):
            raise CompilationIncompleteError(expected=len(screens), compiled=len(compiled_screens))

        logger.debug(
            "Flow compiled",
            screen_count=len(compiled_screens),
            screen_ids=[screen.id for screen in screens]
        )

        return {
            "version": FLOW_JSON_VERSION,
            "data_api_version": FLOW_DATA_API_VERSION,
            "routing_model": routing_model,
            "screens": compiled_screens,
        }

    def _validate_screens(self, screens: List[Screen]) -> None:
        if len(screens) > self.options.max_screens:
            raise TooManyScreensError(screen_count=len(screens), max_screens=self.options.max_screens)

        seen = set()
        for screen in screens:
            if screen.id in seen:
                raise DuplicateScreenIdError(screen.id)
            seen.add(screen.id)

            if (self.options.enforce_component_limit
                    and len(screen.components) > self.options.max_components_per_screen):
                raise TooManyComponentsError(
                    screen_id=screen.id,
                    component_count=len(screen.components),
                    max_components=self.options.max_components_per_screen
                )

            for index, component in enumerate(screen.components):
                kind = component.kind
                if kind is None:
                    if self.options.unknown_component_policy == UnknownComponentPolicy.REJECT:
                        raise UnrecognizedComponentTypeError(screen.id, index, component.type)
                    continue
                if self.options.require_component_names and not component.is_static and not component.name:
                    raise MissingComponentNameError(screen.id, index, component.type)

    def _compile_screen(self, screens: List[Screen], index: int) -> Dict[str, Any]:
        screen = screens[index]
        terminal = index == len(screens) - 1

        children = []
        for position, component in enumerate(screen.components):
            node = self._translate_component(screen.id, component, position)
            if node is not None:
                children.append(node)

        local_payload = {
            key: f"${{form.{key}}}"
            for key, _ in self._named_fields([screen], 1)
        }

        if terminal:
            payload = self._data_references(screens, len(screens))
            payload.update(local_payload)
            action = {"name": "complete", "payload": payload}
        else:
            payload = self._data_references(screens, index + 1)
            payload.update(local_payload)
            action = {
                "name": "navigate",
                "next": {"type": "screen", "name": screens[index + 1].id},
                "payload": payload,
            }

        children.append({
            "type": "Footer",
            "label": "Done" if terminal else "Continue",
            "on-click-action": action,
        })

        return {
            "id": screen.id,
            "title": screen.title,
            "data": self._data_declarations(screens, index),
            "terminal": terminal,
            "layout": {
                "type": "SingleColumnLayout",
                "children": [
                    {"type": "Form", "name": FORM_NAME, "children": children}
                ],
            },
        }

    @staticmethod
    def _named_fields(screens: List[Screen], upto: int):
        for screen in screens[:upto]:
            for position, component in enumerate(screen.components):
                if component.name:
                    yield field_key(screen.id, component, position), component

    def _data_declarations(self, screens: List[Screen], upto: int) -> Dict[str, Any]:
        declarations = {}
        for key, component in self._named_fields(screens, upto):
            placeholder = ARRAY_PLACEHOLDER if component.kind == ComponentKind.CHECKBOX else STRING_PLACEHOLDER
            declarations[key] = copy.deepcopy(placeholder)
        return declarations

    def _data_references(self, screens: List[Screen], upto: int) -> Dict[str, str]:
        return {key: f"${{data.{key}}}" for key, _ in self._named_fields(screens, upto)}

    def _translate_component(self, screen_id: str, component: Component, index: int) -> Optional[Dict[str, Any]]:
        kind = component.kind
        if kind is None:
            logger.warning(
                "Unrecognized component type omitted",
                screen_id=screen_id,
                component_index=index,
                component_type=component.type
            )
            return None

        if component.is_static:
            return _without_absent({"type": kind.value, "text": component.text})

        name = field_key(screen_id, component, index)
        label = self._truncate_label(component.label)

        if kind in CHOICE_KINDS:
            node = {
                "type": kind.value,
                "label": label,
                "name": name,
                "data-source": (
                    [{"id": option_id(i, option), "title": option} for i, option in enumerate(component.options)]
                    if component.options is not None else None
                ),
                "required": component.required,
            }
        elif kind == ComponentKind.TEXT_INPUT:
            node = {
                "type": kind.value,
                "label": label,
                "name": name,
                "required": component.required,
                "input-type": "text",
            }
        elif kind == ComponentKind.PHOTO_PICKER:
            # PhotoPicker nodes are emitted without a type key
            node = {
                "name": name,
                "label": label,
                "photo-source": component.source,
                "max-uploaded-photos": component.uploads,
            }
        elif kind == ComponentKind.DOCUMENT_PICKER:
            node = {
                "type": kind.value,
                "name": name,
                "label": label,
                "description": component.description,
                "max-uploaded-documents": component.uploads,
            }
        else:
            # TextArea, DatePicker
            node = {
                "type": kind.value,
                "label": label,
                "name": name,
                "required": component.required,
            }

        return _without_absent(node)

    def _truncate_label(self, label: Optional[str]) -> Optional[str]:
        limit = self.options.label_max_length
        if label and len(label) > limit:
            logger.warning("Label truncated", label=label, max_length=limit)
            return label[:limit]
        return label

