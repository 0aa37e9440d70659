"""Field type definitions available in the designer palette.

``FIELD_DEFINITIONS`` lists one definition class per ``FieldType`` tag, in
palette order. Adding a field type means adding a definition class and listing
it here; dispatch sites never change.
"""

from formcraft.fields.base import (
    MULTI_VALUE_DELIMITER,
    SUBMISSION_ENCODING_VERSION,
    FieldInstance,
    FieldTypeDefinition,
    join_multi_value,
    split_multi_value,
)
from formcraft.fields.choice import CheckboxField, CheckboxGroupField, SelectField
from formcraft.fields.layout import (
    ParagraphField,
    SeparatorField,
    SpacerField,
    SubTitleField,
    TitleField,
)
from formcraft.fields.text import DateField, EmailField, NumberField, TextAreaField, TextField

FIELD_DEFINITIONS = (
    TextField,
    TextAreaField,
    EmailField,
    NumberField,
    DateField,
    CheckboxField,
    CheckboxGroupField,
    SelectField,
    TitleField,
    SubTitleField,
    ParagraphField,
    SeparatorField,
    SpacerField,
)

__all__ = [
    "FIELD_DEFINITIONS",
    "MULTI_VALUE_DELIMITER",
    "SUBMISSION_ENCODING_VERSION",
    "FieldInstance",
    "FieldTypeDefinition",
    "join_multi_value",
    "split_multi_value",
    "TextField",
    "TextAreaField",
    "EmailField",
    "NumberField",
    "DateField",
    "CheckboxField",
    "CheckboxGroupField",
    "SelectField",
    "TitleField",
    "SubTitleField",
    "ParagraphField",
    "SeparatorField",
    "SpacerField",
]
