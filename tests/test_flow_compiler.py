"""Tests for the Flow JSON compiler."""

from unittest.mock import MagicMock

import pytest

from flow_service.config.settings import Settings, UnknownComponentPolicy
from flow_service.core.flows import CompilerOptions, FlowCompiler, FlowSchema, field_key, option_id
from flow_service.core.flows import compiler as compiler_module
from flow_service.core.flows.models import Component
from flow_service.exceptions import (
    DuplicateScreenIdError,
    FlowCompilationError,
    MissingComponentNameError,
    TooManyComponentsError,
    TooManyScreensError,
    UnrecognizedComponentTypeError,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _schema(*screens) -> FlowSchema:
    return FlowSchema.model_validate({"screens": list(screens)})


def _screen(screen_id: str, *components, title: str = None) -> dict:
    return {"id": screen_id, "title": title or screen_id, "components": list(components)}


def _form_children(compiled_screen: dict) -> list:
    form = compiled_screen["layout"]["children"][0]
    assert form["type"] == "Form"
    assert form["name"] == "flow_path"
    return form["children"]


def _footer(compiled_screen: dict) -> dict:
    footer = _form_children(compiled_screen)[-1]
    assert footer["type"] == "Footer"
    return footer


# ---------------------------------------------------------------------------
# End-to-end
# ---------------------------------------------------------------------------

class TestSingleScreen:
    def test_email_input_scenario(self, compiler):
        schema = _schema(_screen("A", {"type": "input", "name": "Email", "required": True}))

        document = compiler.compile(schema)

        assert document["version"] == "3.1"
        assert document["data_api_version"] == "3.0"
        assert document["routing_model"] == {}
        assert len(document["screens"]) == 1

        screen = document["screens"][0]
        assert screen["id"] == "A"
        assert screen["terminal"] is True
        assert screen["data"] == {}
        assert screen["layout"]["type"] == "SingleColumnLayout"

        children = _form_children(screen)
        assert children[0] == {
            "type": "TextInput",
            "name": "A_Email_0",
            "required": True,
            "input-type": "text",
        }

        footer = _footer(screen)
        assert footer["label"] == "Done"
        assert footer["on-click-action"]["name"] == "complete"
        assert footer["on-click-action"]["payload"]["A_Email_0"] == "${form.A_Email_0}"

    def test_title_passes_through(self, compiler):
        document = compiler.compile(_schema(_screen("A", title="Welcome aboard")))
        assert document["screens"][0]["title"] == "Welcome aboard"

    def test_screen_without_components_only_has_footer(self, compiler):
        document = compiler.compile(_schema(_screen("A")))
        children = _form_children(document["screens"][0])
        assert len(children) == 1
        assert children[0]["on-click-action"] == {"name": "complete", "payload": {}}


# ---------------------------------------------------------------------------
# Screens and routing
# ---------------------------------------------------------------------------

class TestScreensAndRouting:
    def test_screen_count_matches_input(self, compiler):
        screens = [_screen(f"S{i}") for i in range(8)]
        document = compiler.compile(_schema(*screens))
        assert len(document["screens"]) == 8

    def test_nine_screens_rejected(self, compiler):
        screens = [_screen(f"S{i}") for i in range(9)]
        with pytest.raises(TooManyScreensError) as exc_info:
            compiler.compile(_schema(*screens))
        assert exc_info.value.status_code == 400
        assert exc_info.value.details == {"screen_count": 9, "max_screens": 8}

    def test_only_last_screen_is_terminal(self, compiler):
        document = compiler.compile(_schema(_screen("A"), _screen("B"), _screen("C")))
        assert [screen["terminal"] for screen in document["screens"]] == [False, False, True]

    def test_linear_routing_model(self, compiler):
        document = compiler.compile(_schema(_screen("A"), _screen("B"), _screen("C")))
        assert document["routing_model"] == {"A": ["B"], "B": ["C"]}

    def test_non_terminal_footer_navigates_to_next_screen(self, compiler):
        document = compiler.compile(_schema(_screen("A"), _screen("B")))
        footer = _footer(document["screens"][0])
        assert footer["label"] == "Continue"
        action = footer["on-click-action"]
        assert action["name"] == "navigate"
        assert action["next"] == {"type": "screen", "name": "B"}

    def test_duplicate_screen_ids_rejected(self, compiler):
        with pytest.raises(DuplicateScreenIdError):
            compiler.compile(_schema(_screen("A"), _screen("A")))

    def test_empty_schema_rejected_by_model(self):
        with pytest.raises(ValueError):
            FlowSchema.model_validate({"screens": []})

    def test_screen_limit_follows_options(self):
        compiler = FlowCompiler(CompilerOptions(max_screens=2))
        with pytest.raises(TooManyScreensError):
            compiler.compile(_schema(_screen("A"), _screen("B"), _screen("C")))


# ---------------------------------------------------------------------------
# Cross-screen data
# ---------------------------------------------------------------------------

class TestCrossScreenData:
    def _three_screens(self):
        return _schema(
            _screen("A", {"type": "input", "name": "Email"}),
            _screen("B", {"type": "checkbox", "name": "Topics", "label": "Topics", "options": ["News", "Sport"]}),
            _screen("C", {"type": "textarea", "name": "Notes", "label": "Notes"}),
        )

    def test_first_screen_declares_no_data(self, compiler):
        document = compiler.compile(self._three_screens())
        assert document["screens"][0]["data"] == {}

    def test_later_screens_declare_earlier_fields(self, compiler):
        document = compiler.compile(self._three_screens())

        assert document["screens"][1]["data"] == {
            "A_Email_0": {"type": "string", "__example__": "Example"},
        }
        assert document["screens"][2]["data"] == {
            "A_Email_0": {"type": "string", "__example__": "Example"},
            "B_Topics_0": {"type": "array", "items": {"type": "string"}, "__example__": []},
        }

    def test_navigate_payload_overlays_form_on_data(self, compiler):
        document = compiler.compile(self._three_screens())
        payload = _footer(document["screens"][1])["on-click-action"]["payload"]
        assert payload == {
            "A_Email_0": "${data.A_Email_0}",
            "B_Topics_0": "${form.B_Topics_0}",
        }

    def test_complete_payload_carries_every_field(self, compiler):
        document = compiler.compile(self._three_screens())
        payload = _footer(document["screens"][2])["on-click-action"]["payload"]
        assert payload == {
            "A_Email_0": "${data.A_Email_0}",
            "B_Topics_0": "${data.B_Topics_0}",
            "C_Notes_0": "${form.C_Notes_0}",
        }

    def test_declarations_are_independent_copies(self, compiler):
        document = compiler.compile(self._three_screens())
        document["screens"][1]["data"]["A_Email_0"]["__example__"] = "changed"
        assert document["screens"][2]["data"]["A_Email_0"]["__example__"] == "Example"


# ---------------------------------------------------------------------------
# Component translation
# ---------------------------------------------------------------------------

class TestComponentTranslation:
    def _compile_one(self, compiler, component: dict) -> dict:
        document = compiler.compile(_schema(_screen("S", component)))
        return _form_children(document["screens"][0])[0]

    @pytest.mark.parametrize("component_type,expected", [
        ("text", "TextBody"),
        ("heading", "TextHeading"),
        ("subheading", "TextSubheading"),
        ("caption", "TextCaption"),
        ("TextHeading", "TextHeading"),
    ])
    def test_static_text(self, compiler, component_type, expected):
        node = self._compile_one(compiler, {"type": component_type, "text": "Hello"})
        assert node == {"type": expected, "text": "Hello"}

    @pytest.mark.parametrize("component_type,expected", [
        ("radio", "RadioButtonsGroup"),
        ("radio_buttons", "RadioButtonsGroup"),
        ("dropdown", "Dropdown"),
        ("checkbox", "CheckboxGroup"),
    ])
    def test_choice_components(self, compiler, component_type, expected):
        node = self._compile_one(compiler, {
            "type": component_type,
            "name": "Size",
            "label": "Size",
            "options": ["Small", "Extra  Large "],
            "required": True,
        })
        assert node == {
            "type": expected,
            "label": "Size",
            "name": "S_Size_0",
            "data-source": [
                {"id": "0_small", "title": "Small"},
                {"id": "1_extra_large", "title": "Extra  Large "},
            ],
            "required": True,
        }

    def test_textarea(self, compiler):
        node = self._compile_one(compiler, {"type": "textarea", "name": "Notes", "label": "Notes"})
        assert node == {"type": "TextArea", "label": "Notes", "name": "S_Notes_0", "required": False}

    @pytest.mark.parametrize("component_type", ["input", "text_entry"])
    def test_text_input(self, compiler, component_type):
        node = self._compile_one(compiler, {"type": component_type, "name": "City", "label": "City"})
        assert node["type"] == "TextInput"
        assert node["input-type"] == "text"

    @pytest.mark.parametrize("component_type", ["date", "date_picker"])
    def test_date_picker(self, compiler, component_type):
        node = self._compile_one(compiler, {"type": component_type, "name": "Day", "label": "Day"})
        assert node == {"type": "DatePicker", "label": "Day", "name": "S_Day_0", "required": False}

    def test_photo_picker_has_no_type(self, compiler):
        node = self._compile_one(compiler, {
            "type": "photo_picker",
            "name": "Receipt",
            "label": "Receipt",
            "source": "camera_gallery",
            "uploads": 2,
        })
        assert node == {
            "name": "S_Receipt_0",
            "label": "Receipt",
            "photo-source": "camera_gallery",
            "max-uploaded-photos": 2,
        }

    def test_document_picker(self, compiler):
        node = self._compile_one(compiler, {
            "type": "document_picker",
            "name": "Contract",
            "label": "Contract",
            "description": "Signed PDF",
            "uploads": 1,
        })
        assert node == {
            "type": "DocumentPicker",
            "name": "S_Contract_0",
            "label": "Contract",
            "description": "Signed PDF",
            "max-uploaded-documents": 1,
        }

    def test_absent_values_are_omitted(self, compiler):
        node = self._compile_one(compiler, {"type": "dropdown", "name": "Pick"})
        assert "label" not in node
        assert "data-source" not in node

    def test_static_text_without_text_has_no_text_key(self, compiler):
        node = self._compile_one(compiler, {"type": "heading"})
        assert node == {"type": "TextHeading"}

    def test_field_keys_use_position_and_whitespace(self, compiler):
        document = compiler.compile(_schema(_screen(
            "S",
            {"type": "text", "text": "Intro"},
            {"type": "input", "name": "  First   Name ", "label": "First name"},
        )))
        node = _form_children(document["screens"][0])[1]
        assert node["name"] == "S__First_Name__1"

    def test_field_keys_keep_trailing_whitespace(self, compiler):
        document = compiler.compile(_schema(_screen("A", {"type": "input", "name": "Email "})))
        assert _form_children(document["screens"][0])[0]["name"] == "A_Email__0"

    def test_field_keys_are_unique_across_screens(self, compiler):
        document = compiler.compile(_schema(
            _screen("A", {"type": "input", "name": "Email"}),
            _screen("B", {"type": "input", "name": "Email"}),
        ))
        names = [
            _form_children(screen)[0]["name"]
            for screen in document["screens"]
        ]
        assert names == ["A_Email_0", "B_Email_0"]


class TestHelpers:
    def test_field_key_for_unnamed_component(self):
        assert field_key("S", Component(type="text"), 3) == "unnamed_3"

    def test_option_id(self):
        assert option_id(2, "  Dark   Roast ") == "2_dark_roast"


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------

class TestLabelTruncation:
    def test_long_label_truncated_with_warning(self, compiler, monkeypatch):
        logger = MagicMock()
        monkeypatch.setattr(compiler_module, "logger", logger)

        label = "Please enter your full legal name"
        document = compiler.compile(_schema(_screen("S", {"type": "input", "name": "Name", "label": label})))

        node = _form_children(document["screens"][0])[0]
        assert node["label"] == label[:20]
        logger.warning.assert_called_once()
        assert logger.warning.call_args.args[0] == "Label truncated"

    def test_label_at_limit_unchanged(self, compiler, monkeypatch):
        logger = MagicMock()
        monkeypatch.setattr(compiler_module, "logger", logger)

        label = "x" * 20
        document = compiler.compile(_schema(_screen("S", {"type": "input", "name": "Name", "label": label})))

        assert _form_children(document["screens"][0])[0]["label"] == label
        logger.warning.assert_not_called()


# ---------------------------------------------------------------------------
# Policies
# ---------------------------------------------------------------------------

class TestPolicies:
    def test_component_limit(self, compiler):
        components = [{"type": "text", "text": str(i)} for i in range(9)]
        with pytest.raises(TooManyComponentsError):
            compiler.compile(_schema(_screen("S", *components)))

    def test_component_limit_can_be_disabled(self):
        compiler = FlowCompiler(CompilerOptions(enforce_component_limit=False))
        components = [{"type": "text", "text": str(i)} for i in range(9)]
        document = compiler.compile(_schema(_screen("S", *components)))
        assert len(_form_children(document["screens"][0])) == 10

    def test_missing_name_rejected(self, compiler):
        with pytest.raises(MissingComponentNameError) as exc_info:
            compiler.compile(_schema(_screen("S", {"type": "input", "label": "Email"})))
        assert exc_info.value.details == {"screen_id": "S", "index": 0, "type": "input"}

    def test_static_components_need_no_name(self, compiler):
        compiler.compile(_schema(_screen("S", {"type": "heading", "text": "Hi"})))

    def test_missing_name_allowed_when_not_required(self):
        compiler = FlowCompiler(CompilerOptions(require_component_names=False))
        document = compiler.compile(_schema(
            _screen("A", {"type": "input", "label": "Email"}),
            _screen("B"),
        ))
        assert _form_children(document["screens"][0])[0]["name"] == "unnamed_0"
        assert document["screens"][1]["data"] == {}
        assert _footer(document["screens"][0])["on-click-action"]["payload"] == {}

    def test_unknown_type_omitted_by_default(self, compiler, monkeypatch):
        logger = MagicMock()
        monkeypatch.setattr(compiler_module, "logger", logger)

        document = compiler.compile(_schema(_screen(
            "S",
            {"type": "carousel", "name": "Pics"},
            {"type": "input", "name": "Email"},
        )))

        children = _form_children(document["screens"][0])
        assert [child["type"] for child in children] == ["TextInput", "Footer"]
        assert children[0]["name"] == "S_Email_1"
        logger.warning.assert_called_once()

    def test_unknown_type_rejected_in_reject_mode(self):
        compiler = FlowCompiler(CompilerOptions(unknown_component_policy=UnknownComponentPolicy.REJECT))
        with pytest.raises(UnrecognizedComponentTypeError) as exc_info:
            compiler.compile(_schema(_screen("S", {"type": "carousel"})))
        assert exc_info.value.component_type == "carousel"
        assert isinstance(exc_info.value, FlowCompilationError)

    def test_options_from_settings(self):
        settings = Settings(
            FLOW_MAX_SCREENS=3,
            FLOW_ENFORCE_COMPONENT_LIMIT=False,
            FLOW_UNKNOWN_COMPONENT_POLICY="reject",
        )
        options = CompilerOptions.from_settings(settings)
        assert options.max_screens == 3
        assert options.enforce_component_limit is False
        assert options.unknown_component_policy == UnknownComponentPolicy.REJECT


# ---------------------------------------------------------------------------
# Determinism
# ---------------------------------------------------------------------------

class TestDeterminism:
    def test_compiling_twice_gives_identical_output(self, compiler):
        schema = _schema(
            _screen("A", {"type": "radio", "name": "Plan", "label": "Plan", "options": ["Basic", "Pro"]}),
            _screen("B", {"type": "checkbox", "name": "Extras", "options": ["A", "B"]}),
        )
        assert compiler.compile(schema) == compiler.compile(schema)

    def test_schema_is_not_mutated(self, compiler):
        schema = _schema(_screen("A", {"type": "input", "name": "Email", "label": "x" * 30}))
        before = schema.model_dump()
        compiler.compile(schema)
        assert schema.model_dump() == before
