"""Free-text input field types: text, text area, email, number and date."""

import math
import re
from typing import Any, Dict, List, Mapping, Optional

from dateutil import parser as date_parser

from formcraft.errors import FieldError
from formcraft.fields.base import (
    HELPER_TEXT_SCHEMA,
    LABEL_SCHEMA,
    PLACEHOLDER_SCHEMA,
    REQUIRED_SCHEMA,
    FieldInstance,
    FieldTypeDefinition,
    as_text,
    is_blank,
    object_schema,
)
from formcraft.types import FieldErrorCode, FieldType

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
# Plain decimal notation with an optional exponent; no underscores, inf or nan
NUMBER_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class TextField(FieldTypeDefinition):
    type = FieldType.TEXT
    palette_label = "Text Field"
    default_configuration = {
        "label": "Text field",
        "placeholder": "Value here...",
        "helperText": "Helper text",
        "required": False,
    }

    def configuration_schema(self) -> Dict[str, Any]:
        return object_schema({
            "label": LABEL_SCHEMA,
            "placeholder": PLACEHOLDER_SCHEMA,
            "helperText": HELPER_TEXT_SCHEMA,
            "required": REQUIRED_SCHEMA,
        })

    def validate_value(self, instance: FieldInstance, value: Optional[str]) -> bool:
        if self.is_required(instance):
            return not is_blank(value)
        return True


class TextAreaField(TextField):
    type = FieldType.TEXT_AREA
    palette_label = "TextArea Field"
    default_configuration = {
        "label": "Text area",
        "placeholder": "Value here...",
        "helperText": "Helper text",
        "required": False,
        "rows": 3,
    }

    def configuration_schema(self) -> Dict[str, Any]:
        schema = super().configuration_schema()
        schema["properties"] = dict(schema["properties"], rows={
            "type": "integer", "minimum": 1, "maximum": 10,
        })
        schema["required"] = schema["required"] + ["rows"]
        return schema


class EmailField(TextField):
    """Text input whose non-empty values must look like an email address."""

    type = FieldType.EMAIL
    palette_label = "Email Field"
    default_configuration = {
        "label": "Email",
        "placeholder": "name@example.com",
        "helperText": "Helper text",
        "required": False,
    }

    def validate_value(self, instance: FieldInstance, value: Optional[str]) -> bool:
        if is_blank(value):
            return not self.is_required(instance)
        return EMAIL_PATTERN.match(as_text(value).strip()) is not None


class NumberField(TextField):
    """Numeric input, optionally bounded by ``min`` and ``max``."""

    type = FieldType.NUMBER
    palette_label = "Number Field"
    default_configuration = {
        "label": "Number field",
        "placeholder": "0",
        "helperText": "Helper text",
        "required": False,
    }

    def configuration_schema(self) -> Dict[str, Any]:
        properties = dict(
            super().configuration_schema()["properties"],
            min={"type": "number"},
            max={"type": "number"},
        )
        return object_schema(properties, optional=("min", "max"))

    def check_configuration(self, configuration: Mapping[str, Any]) -> List[FieldError]:
        low, high = configuration.get("min"), configuration.get("max")
        if low is not None and high is not None and low > high:
            return [FieldError(
                path="min",
                code=FieldErrorCode.INVALID_VALUE,
                message=f"Attribute 'min' ({low}) must not exceed 'max' ({high})",
                expected=f"<= {high}",
                received=low,
            )]
        return []

    def validate_value(self, instance: FieldInstance, value: Optional[str]) -> bool:
        if is_blank(value):
            return not self.is_required(instance)
        text = as_text(value).strip()
        if NUMBER_PATTERN.match(text) is None:
            return False
        number = float(text)
        if not math.isfinite(number):
            return False
        low = instance.configuration.get("min")
        high = instance.configuration.get("max")
        if low is not None and number < low:
            return False
        if high is not None and number > high:
            return False
        return True


class DateField(TextField):
    """Date input; submitted values are ISO 8601 calendar dates (``YYYY-MM-DD``).

    Times, week dates and the compact ``YYYYMMDD`` form are rejected.
    """

    type = FieldType.DATE
    palette_label = "Date Field"
    default_configuration = {
        "label": "Date field",
        "placeholder": "Pick a date",
        "helperText": "Pick a date",
        "required": False,
    }

    def validate_value(self, instance: FieldInstance, value: Optional[str]) -> bool:
        if is_blank(value):
            return not self.is_required(instance)
        text = as_text(value).strip()
        if DATE_PATTERN.match(text) is None:
            return False
        try:
            date_parser.isoparser().parse_isodate(text)
        except ValueError:
            return False
        return True


__all__ = [
    "TextField",
    "TextAreaField",
    "EmailField",
    "NumberField",
    "DateField",
]
