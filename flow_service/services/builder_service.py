"""
Form Builder Service

Backs the in-WhatsApp form builder flow. Each builder action arrives as
the data-exchange payload of the builder's own screens; ``add_component``
turns the builder's field values into a logical Component and appends it
to a screen of the bot being edited.
"""

from typing import Any, Callable, Dict, List

from flow_service.core.flows import Component
from flow_service.exceptions import ValidationError
from flow_service.repositories import BotRepository, EntityNotFoundError
from flow_service.services.base_service import BaseService

BUILDER_SCREEN = "Flow_Screens"
CREATE_SCREEN_ENTRY = {"id": "create_screen", "title": "Create Screen"}


def _split_options(raw: Any) -> List[str]:
    if isinstance(raw, list):
        return [str(option).strip() for option in raw if str(option).strip()]
    return [option.strip() for option in str(raw).split(",") if option.strip()]


def _optional_int(raw: Any) -> Any:
    if raw in (None, ""):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError("Upload limit must be a number", field="uploads", value=raw)


def _basic_text(data: Dict[str, Any]) -> Component:
    return Component(type=data.get("text_type_dropdown") or "text", text=data.get("basic_text_body"))


def _named(component_type: str, name_field: str, **extra: Callable[[Dict[str, Any]], Any]):
    def build(data: Dict[str, Any]) -> Component:
        name = data.get(name_field)
        if not name:
            raise ValidationError(f"Missing required field: {name_field}", field=name_field)
        values = {key: getter(data) for key, getter in extra.items()}
        return Component(type=component_type, name=name, label=name, **values)
    return build


# Builder component id -> factory of the logical component
COMPONENT_BUILDERS: Dict[str, Callable[[Dict[str, Any]], Component]] = {
    "basic_text": _basic_text,
    "text-entry": _named("text_entry", "text_entry_field_name"),
    "checkbox": _named(
        "checkbox", "checkbox_field_name",
        options=lambda data: _split_options(data.get("checkbox_options", ""))
    ),
    "radio-buttons": _named(
        "radio_buttons", "radio_buttons_field_name",
        options=lambda data: _split_options(data.get("radio_button_options", ""))
    ),
    "dropdown": _named(
        "dropdown", "dropdown_field_name",
        options=lambda data: _split_options(data.get("drop_down_options", ""))
    ),
    "date-picker": _named("date_picker", "date_picker_field_name"),
    "image-upload": _named(
        "photo_picker", "photo_picker_field_name",
        source=lambda data: data.get("photo_source"),
        uploads=lambda data: _optional_int(data.get("photo_picker_max_uploads")),
        description=lambda data: data.get("photo_picker_field_description"),
    ),
    "document-picker": _named(
        "document_picker", "document_picker_field_name",
        uploads=lambda data: _optional_int(data.get("document_picker_max_uploads")),
        description=lambda data: data.get("document_picker_field_description"),
    ),
}


class BuilderService(BaseService):
    """Handles data-exchange actions of the form builder"""

    def __init__(self, bot_repository: BotRepository):
        super().__init__()
        self.bot_repository = bot_repository

    async def handle(self, data: Dict[str, Any]) -> Dict[str, Any]:
        action = data.get("type")
        if action == "add_component":
            return await self.add_component(data)
        raise ValidationError(f"Unsupported builder action: {action}", field="type", value=action)

    async def add_component(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Append a component to a screen of a stored bot

        Creates the screen when the bot has no screen with that id.

        Returns:
            Builder response listing the bot's screens
        """
        self._validate_required_fields(data, ["botId", "screen_name", "component"])

        builder = COMPONENT_BUILDERS.get(data["component"])
        if builder is None:
            raise ValidationError(
                f"Unsupported component: {data['component']}",
                field="component",
                value=data["component"]
            )
        component = builder(data).model_dump(exclude_none=True)

        try:
            bot = await self.bot_repository.get_by_id(data["botId"])
        except EntityNotFoundError:
            self.logger.warning("Builder bot not found", bot_id=data["botId"])
            return {
                "status": "failed",
                "data": {"screen": "Error", "data": {"message": "No bot found"}},
            }

        screens = bot.get("screens")
        if not isinstance(screens, list):
            screens = []

        screen_id = data["screen_name"]
        for screen in screens:
            if screen.get("id") == screen_id:
                screen.setdefault("components", []).append(component)
                break
        else:
            screens.append({"id": screen_id, "title": screen_id, "components": [component]})

        await self.bot_repository.set_screens(data["botId"], screens)

        self.log_operation(
            "add_component",
            bot_id=data["botId"],
            screen_id=screen_id,
            component_type=component["type"]
        )

        return {
            "status": "success",
            "data": {
                "screen": BUILDER_SCREEN,
                "data": {
                    "screens": [dict(CREATE_SCREEN_ENTRY)] + [
                        {"id": screen.get("id"), "title": screen.get("title")} for screen in screens
                    ]
                },
            },
        }
