"""Layout-only field types.

These carry display attributes only. They have no ``required`` attribute and
accept any submitted value, so they never block a submission.
"""

from typing import Any, Dict

from formcraft.fields.base import FieldTypeDefinition, object_schema
from formcraft.types import FieldType

_TEXT_SCHEMA: Dict[str, Any] = {"type": "string", "minLength": 1, "maxLength": 100}


class TitleField(FieldTypeDefinition):
    type = FieldType.TITLE
    palette_label = "Title Field"
    layout_only = True
    default_configuration = {"title": "Title field"}

    def configuration_schema(self) -> Dict[str, Any]:
        return object_schema({"title": _TEXT_SCHEMA})


class SubTitleField(TitleField):
    type = FieldType.SUB_TITLE
    palette_label = "SubTitle Field"
    default_configuration = {"title": "SubTitle field"}


class ParagraphField(FieldTypeDefinition):
    type = FieldType.PARAGRAPH
    palette_label = "Paragraph Field"
    layout_only = True
    default_configuration = {"text": "Text here"}

    def configuration_schema(self) -> Dict[str, Any]:
        return object_schema({
            "text": {"type": "string", "minLength": 1, "maxLength": 500},
        })


class SeparatorField(FieldTypeDefinition):
    type = FieldType.SEPARATOR
    palette_label = "Separator Field"
    layout_only = True
    default_configuration = {}

    def configuration_schema(self) -> Dict[str, Any]:
        return object_schema({})


class SpacerField(FieldTypeDefinition):
    """Vertical whitespace of ``height`` pixels."""

    type = FieldType.SPACER
    palette_label = "Spacer Field"
    layout_only = True
    default_configuration = {"height": 20}

    def configuration_schema(self) -> Dict[str, Any]:
        return object_schema({
            "height": {"type": "integer", "minimum": 5, "maximum": 200},
        })


__all__ = [
    "TitleField",
    "SubTitleField",
    "ParagraphField",
    "SeparatorField",
    "SpacerField",
]
