"""JSON Schema validation of field configurations.

Every field type describes the shape of its configuration as a JSON Schema
(Draft 7). ``ConfigurationValidator`` wraps the jsonschema validator built from
that schema and translates its errors into FormCraft ``FieldError`` records,
with the offending attribute as ``path`` and a specific ``FieldErrorCode``.

Usage:
    >>> schema = {
    ...     "type": "object",
    ...     "properties": {"label": {"type": "string", "minLength": 2}},
    ...     "required": ["label"],
    ... }
    >>> validator = ConfigurationValidator(schema)
    >>> validator.validate({"label": "Name"})
    []
    >>> validator.validate({})[0].code
    <FieldErrorCode.REQUIRED: 'required'>
"""

import re
from typing import Any, Dict, List

import jsonschema
from jsonschema import Draft7Validator

from formcraft.errors import FieldError
from formcraft.types import FieldErrorCode

_QUOTED = re.compile(r"'([^']*)'")


class ConfigurationValidator:
    """Validates configuration payloads against one field type's schema.

    Attributes:
        schema: The JSON Schema definition to validate against
        validator: The underlying jsonschema validator instance
    """

    def __init__(self, schema: Dict[str, Any]) -> None:
        """Initialize the validator with a JSON Schema.

        Raises:
            jsonschema.SchemaError: If the provided schema is itself invalid
        """
        self.schema = schema
        Draft7Validator.check_schema(schema)
        self.validator = Draft7Validator(schema)

    def is_valid(self, configuration: Any) -> bool:
        return self.validator.is_valid(configuration)

    def validate(self, configuration: Any) -> List[FieldError]:
        """Validate a configuration payload.

        Args:
            configuration: The proposed configuration object

        Returns:
            One FieldError per failed check, ordered by attribute path.
            An empty list means the configuration is accepted.
        """
        errors = sorted(
            self.validator.iter_errors(configuration),
            key=lambda e: [str(p) for p in e.path],
        )
        return [self._translate_error(error) for error in errors]

    def _translate_error(self, error: jsonschema.ValidationError) -> FieldError:
        """Translate a jsonschema ValidationError to a FieldError.

        Error mapping:
            - 'required' -> REQUIRED
            - 'additionalProperties' -> UNKNOWN_ATTRIBUTE
            - 'type' -> INVALID_TYPE
            - 'minLength' / 'minItems' -> TOO_SHORT
            - 'maxLength' / 'maxItems' -> TOO_LONG
            - 'pattern' -> INVALID_FORMAT
            - 'enum', 'const', 'uniqueItems', numeric bounds -> INVALID_VALUE
            - anything else -> CUSTOM
        """
        path = ".".join(str(p) for p in error.path)

        if error.validator == "required":
            match = _QUOTED.search(error.message)
            missing = match.group(1) if match else "attribute"
            full_path = f"{path}.{missing}" if path else missing
            return FieldError(
                path=full_path,
                code=FieldErrorCode.REQUIRED,
                message=f"Attribute '{full_path}' is required but was not provided",
                expected="required attribute",
            )

        if error.validator == "additionalProperties":
            unexpected = sorted(
                key for key in error.instance
                if key not in error.schema.get("properties", {})
            )
            names = ", ".join(unexpected)
            return FieldError(
                path=path or (unexpected[0] if unexpected else ""),
                code=FieldErrorCode.UNKNOWN_ATTRIBUTE,
                message=f"Unknown attribute(s): {names}",
                expected=sorted(error.schema.get("properties", {})),
                received=unexpected,
            )

        if error.validator == "type":
            received_type = type(error.instance).__name__
            return FieldError(
                path=path,
                code=FieldErrorCode.INVALID_TYPE,
                message=(
                    f"Attribute '{path}' has invalid type. "
                    f"Expected {error.validator_value}, got {received_type}"
                ),
                expected=error.validator_value,
                received=received_type,
            )

        if error.validator in ("minLength", "maxLength"):
            bound = error.validator_value
            actual = len(error.instance) if error.instance else 0
            too_short = error.validator == "minLength"
            return FieldError(
                path=path,
                code=FieldErrorCode.TOO_SHORT if too_short else FieldErrorCode.TOO_LONG,
                message=(
                    f"Attribute '{path}' is too {'short' if too_short else 'long'}. "
                    f"{'Minimum' if too_short else 'Maximum'} length: {bound}, got: {actual}"
                ),
                expected=f"{'minimum' if too_short else 'maximum'} {bound} characters",
                received=f"{actual} characters",
            )

        if error.validator in ("minItems", "maxItems"):
            bound = error.validator_value
            too_short = error.validator == "minItems"
            return FieldError(
                path=path,
                code=FieldErrorCode.TOO_SHORT if too_short else FieldErrorCode.TOO_LONG,
                message=(
                    f"Attribute '{path}' needs {'at least' if too_short else 'at most'} "
                    f"{bound} item(s), got: {len(error.instance)}"
                ),
                expected=f"{'minimum' if too_short else 'maximum'} {bound} items",
                received=f"{len(error.instance)} items",
            )

        if error.validator == "pattern":
            return FieldError(
                path=path,
                code=FieldErrorCode.INVALID_FORMAT,
                message=f"Attribute '{path}' does not match required pattern: {error.validator_value}",
                expected=f"pattern: {error.validator_value}",
                received=error.instance,
            )

        if error.validator == "uniqueItems":
            return FieldError(
                path=path,
                code=FieldErrorCode.INVALID_VALUE,
                message=f"Attribute '{path}' must not contain duplicate items",
                expected="unique items",
                received=error.instance,
            )

        if error.validator in ("enum", "const"):
            return FieldError(
                path=path,
                code=FieldErrorCode.INVALID_VALUE,
                message=f"Attribute '{path}' has invalid value. Must be one of: {error.validator_value}",
                expected=error.validator_value,
                received=error.instance,
            )

        if error.validator in ("minimum", "maximum", "exclusiveMinimum", "exclusiveMaximum"):
            return FieldError(
                path=path,
                code=FieldErrorCode.INVALID_VALUE,
                message=f"Attribute '{path}' violates {error.validator} constraint: {error.validator_value}",
                expected=f"{error.validator}: {error.validator_value}",
                received=error.instance,
            )

        return FieldError(
            path=path,
            code=FieldErrorCode.CUSTOM,
            message=f"Attribute '{path}' validation failed: {error.message}",
            expected=error.validator_value,
            received=error.instance,
        )


__all__ = [
    "ConfigurationValidator",
]
