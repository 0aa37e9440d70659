"""Base classes shared by every field type definition.

A field type definition bundles three capabilities for one ``FieldType`` tag:

- an immutable default configuration template, cloned on every ``construct``
- a JSON Schema describing valid configurations (``configuration_schema``)
- a pure predicate over submitted values (``validate_value``)

``FieldInstance`` is the concrete field placed in a designer document.
"""

import copy
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, ClassVar, Dict, List, Mapping, Optional

from formcraft.configuration import ConfigurationValidator
from formcraft.errors import FieldError
from formcraft.types import FieldType

MULTI_VALUE_DELIMITER = ","
"""Delimiter joining the selected options of a multi-valued submission."""

SUBMISSION_ENCODING_VERSION = 1
"""Version of the string encoding used for submitted values.

Version 1: every value is a string; booleans are ``"true"``/``"false"``;
multi-valued selections are joined with ``MULTI_VALUE_DELIMITER``.
"""

TRUE_VALUE = "true"
FALSE_VALUE = "false"

# Reusable schema fragments for the common display attributes
LABEL_SCHEMA: Dict[str, Any] = {"type": "string", "minLength": 2, "maxLength": 50}
HELPER_TEXT_SCHEMA: Dict[str, Any] = {"type": "string", "maxLength": 200}
PLACEHOLDER_SCHEMA: Dict[str, Any] = {"type": "string", "maxLength": 50}
REQUIRED_SCHEMA: Dict[str, Any] = {"type": "boolean"}


def freeze(value: Any) -> Any:
    """Return a read-only copy of a JSON-like value (dicts and lists)."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(v) for v in value)
    return value


def thaw(value: Any) -> Any:
    """Return a fresh, mutable deep copy of a JSON-like value."""
    if isinstance(value, Mapping):
        return {k: thaw(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [thaw(v) for v in value]
    return copy.deepcopy(value)


def as_text(value: Optional[str]) -> str:
    """Decode a submitted value; an absent value reads as the empty string.

    Raises:
        TypeError: If the value is neither None nor a string
    """
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"Submitted values must be strings, got {type(value).__name__}")
    return value


def is_blank(value: Optional[str]) -> bool:
    return as_text(value).strip() == ""


def split_multi_value(value: Optional[str]) -> List[str]:
    """Decode a delimiter-joined multi-valued submission into its items.

    Examples:
        >>> split_multi_value("Option 1,Option 2")
        ['Option 1', 'Option 2']
        >>> split_multi_value("")
        []
    """
    text = as_text(value)
    if text == "":
        return []
    return text.split(MULTI_VALUE_DELIMITER)


def join_multi_value(items: List[str]) -> str:
    return MULTI_VALUE_DELIMITER.join(items)


@dataclass(frozen=True)
class FieldInstance:
    """One field placed in a designer document.

    Attributes:
        id: Opaque unique identifier, generated by the document
        type: Field type tag
        configuration: Type-specific configuration payload

    The configuration is stored as a read-only copy, so snapshots sharing an
    instance can never observe a write. A configuration update produces a new
    instance.
    """
    id: str
    type: FieldType
    configuration: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "configuration", freeze(self.configuration))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "id": self.id,
            "type": self.type.value if isinstance(self.type, FieldType) else self.type,
            "configuration": thaw(self.configuration),
        }

    @property
    def label(self) -> Optional[str]:
        return self.configuration.get("label")


class FieldTypeDefinition:
    """Behavior bundle for one field type tag.

    Subclasses set ``type``, ``palette_label`` and ``default_configuration``
    and implement ``configuration_schema``. Value-bearing subclasses override
    ``validate_value``; layout-only types set ``layout_only = True`` and keep
    the vacuous default.
    """

    type: ClassVar[FieldType]
    palette_label: ClassVar[str] = ""
    layout_only: ClassVar[bool] = False
    default_configuration: ClassVar[Mapping[str, Any]] = MappingProxyType({})

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls.default_configuration = freeze(cls.default_configuration)

    def __init__(self) -> None:
        self._validator: Optional[ConfigurationValidator] = None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.type.value}>"

    def configuration_schema(self) -> Dict[str, Any]:
        """Return the JSON Schema that a configuration of this type must satisfy."""
        raise NotImplementedError

    def build_configuration_validator(self) -> ConfigurationValidator:
        """Return the (cached) validator for this type's configurations."""
        if self._validator is None:
            self._validator = ConfigurationValidator(self.configuration_schema())
        return self._validator

    def construct(self, instance_id: str) -> FieldInstance:
        """Create an instance configured with this type's defaults."""
        return FieldInstance(
            id=instance_id,
            type=self.type,
            configuration=self.default_configuration,
        )

    def with_defaults(self, configuration: Mapping[str, Any]) -> Dict[str, Any]:
        """Fill attributes missing from a persisted configuration with their defaults."""
        merged = thaw(self.default_configuration)
        merged.update(thaw(configuration))
        return merged

    def validate_configuration(self, configuration: Any) -> List[FieldError]:
        configuration = thaw(configuration)
        errors = self.build_configuration_validator().validate(configuration)
        if not errors:
            errors = self.check_configuration(configuration)
        return errors

    def check_configuration(self, configuration: Mapping[str, Any]) -> List[FieldError]:
        """Hook for cross-attribute rules a JSON Schema cannot express."""
        return []

    def validate_value(self, instance: FieldInstance, value: Optional[str]) -> bool:
        """Return whether a submitted value is acceptable for ``instance``."""
        return True

    def is_required(self, instance: FieldInstance) -> bool:
        return bool(instance.configuration.get("required", False))


def object_schema(properties: Dict[str, Any], optional: tuple = ()) -> Dict[str, Any]:
    """Build a closed object schema requiring every property not listed as optional."""
    return {
        "type": "object",
        "properties": properties,
        "required": [name for name in properties if name not in optional],
        "additionalProperties": False,
    }


__all__ = [
    "MULTI_VALUE_DELIMITER",
    "SUBMISSION_ENCODING_VERSION",
    "TRUE_VALUE",
    "FALSE_VALUE",
    "FieldInstance",
    "FieldTypeDefinition",
    "as_text",
    "is_blank",
    "split_multi_value",
    "join_multi_value",
    "freeze",
    "thaw",
    "object_schema",
]
