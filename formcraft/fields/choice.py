"""Choice field types: single checkbox, checkbox group and select."""

from typing import Any, Dict, Optional

from formcraft.fields.base import (
    HELPER_TEXT_SCHEMA,
    LABEL_SCHEMA,
    MULTI_VALUE_DELIMITER,
    PLACEHOLDER_SCHEMA,
    REQUIRED_SCHEMA,
    TRUE_VALUE,
    FALSE_VALUE,
    FieldInstance,
    FieldTypeDefinition,
    as_text,
    object_schema,
    split_multi_value,
)
from formcraft.types import FieldType

# Option text may not contain the delimiter, or a joined submission could not
# be split back into the options that were selected.
OPTIONS_SCHEMA: Dict[str, Any] = {
    "type": "array",
    "minItems": 1,
    "uniqueItems": True,
    "items": {
        "type": "string",
        "minLength": 1,
        "maxLength": 100,
        "pattern": "^[^%s]*$" % MULTI_VALUE_DELIMITER,
    },
}


def selection_is_valid(options, value: Optional[str], required: bool) -> bool:
    """Check a delimiter-joined selection against the allowed options.

    An empty selection is valid only when the field is optional; every
    selected item must be a distinct, listed option.
    """
    selected = split_multi_value(value)
    if not selected:
        return not required
    if len(set(selected)) != len(selected):
        return False
    allowed = set(options)
    return all(item in allowed for item in selected)


class CheckboxField(FieldTypeDefinition):
    """A single boolean checkbox submitted as ``"true"`` or ``"false"``.

    When required, the box must be checked. A checkbox configured with
    ``options`` renders one box per option instead, and its value is the
    delimiter-joined list of checked options.
    """

    type = FieldType.CHECKBOX
    palette_label = "Checkbox Field"
    default_configuration = {
        "label": "Accept Terms and Conditions",
        "helperText": "You must agree to proceed",
        "required": True,
    }

    def configuration_schema(self) -> Dict[str, Any]:
        return object_schema({
            "label": LABEL_SCHEMA,
            "helperText": HELPER_TEXT_SCHEMA,
            "required": REQUIRED_SCHEMA,
            "options": OPTIONS_SCHEMA,
        }, optional=("options",))

    def validate_value(self, instance: FieldInstance, value: Optional[str]) -> bool:
        options = instance.configuration.get("options")
        if options is not None:
            return selection_is_valid(options, value, self.is_required(instance))
        text = as_text(value)
        if self.is_required(instance):
            return text == TRUE_VALUE
        return text in ("", TRUE_VALUE, FALSE_VALUE)


class CheckboxGroupField(FieldTypeDefinition):
    """Several checkboxes; the checked options are submitted delimiter-joined."""

    type = FieldType.CHECKBOX_GROUP
    palette_label = "Checkbox Group"
    default_configuration = {
        "label": "Checkbox group",
        "helperText": "Select all that apply",
        "required": False,
        "options": ["Option 1", "Option 2"],
    }

    def configuration_schema(self) -> Dict[str, Any]:
        return object_schema({
            "label": LABEL_SCHEMA,
            "helperText": HELPER_TEXT_SCHEMA,
            "required": REQUIRED_SCHEMA,
            "options": OPTIONS_SCHEMA,
        })

    def validate_value(self, instance: FieldInstance, value: Optional[str]) -> bool:
        return selection_is_valid(
            instance.configuration.get("options", ()), value, self.is_required(instance)
        )


class SelectField(FieldTypeDefinition):
    """A drop-down allowing exactly one of its options."""

    type = FieldType.SELECT
    palette_label = "Select Field"
    default_configuration = {
        "label": "Select field",
        "placeholder": "Choose an option",
        "helperText": "Helper text",
        "required": False,
        "options": ["Option 1", "Option 2"],
    }

    def configuration_schema(self) -> Dict[str, Any]:
        return object_schema({
            "label": LABEL_SCHEMA,
            "placeholder": PLACEHOLDER_SCHEMA,
            "helperText": HELPER_TEXT_SCHEMA,
            "required": REQUIRED_SCHEMA,
            "options": OPTIONS_SCHEMA,
        })

    def validate_value(self, instance: FieldInstance, value: Optional[str]) -> bool:
        text = as_text(value)
        if text == "":
            return not self.is_required(instance)
        return text in instance.configuration.get("options", ())


__all__ = [
    "CheckboxField",
    "CheckboxGroupField",
    "SelectField",
]
