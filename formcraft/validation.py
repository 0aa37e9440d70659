"""Submission validation against a published form schema.

The ``SubmissionValidator`` checks a map of submitted values (field instance
id -> string) against the ordered field instances of a designer document and
produces a ``ValidationReport`` with a verdict per field and an aggregate.

Every field is evaluated independently and all fields are always evaluated,
so callers can highlight every invalid field at once. Value problems are never
raised: a rule that fails, or even raises, is recorded as an invalid entry.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from formcraft.document import DesignerDocument
from formcraft.errors import FieldError
from formcraft.fields.base import is_blank
from formcraft.registry import DEFAULT_REGISTRY, FieldTypeRegistry
from formcraft.types import FieldErrorCode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationReport:
    """Result of validating one submission.

    Attributes:
        per_field: Field instance id -> valid flag, in document order
        all_valid: True iff every entry in ``per_field`` is True
        errors: One FieldError per invalid field, in document order

    Examples:
        >>> report = ValidationReport(per_field={"a": True}, all_valid=True)
        >>> report.to_dict()
        {'perField': {'a': True}, 'allValid': True, 'errors': []}
    """
    per_field: Dict[str, bool]
    all_valid: bool
    errors: List[FieldError] = field(default_factory=list)

    @property
    def invalid_fields(self) -> List[str]:
        return [instance_id for instance_id, valid in self.per_field.items() if not valid]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "perField": dict(self.per_field),
            "allValid": self.all_valid,
            "errors": [e.to_dict() for e in self.errors],
        }


class SubmissionValidator:
    """Validates submitted values against a document's field instances.

    The validator holds no per-call state, so one instance can serve any
    number of concurrent submissions against the same frozen document.

    Attributes:
        registry: Field type registry used to resolve each instance's rules

    Examples:
        >>> doc, text_id = DesignerDocument().insert("TextField")
        >>> doc = doc.update_configuration(
        ...     text_id, dict(doc.get(text_id).configuration, required=True)
        ... )
        >>> validator = SubmissionValidator()
        >>> validator.validate(doc, {text_id: "hello"}).all_valid
        True
        >>> validator.validate(doc, {}).all_valid
        False
    """

    def __init__(self, registry: FieldTypeRegistry = DEFAULT_REGISTRY) -> None:
        self.registry = registry

    def validate(
        self, document: DesignerDocument, submitted_values: Mapping[str, Optional[str]]
    ) -> ValidationReport:
        """Validate a submission.

        Args:
            document: The published document to validate against
            submitted_values: Field instance id -> submitted string value.
                Absent ids are treated as an empty value.

        Returns:
            ValidationReport covering every instance of the document
        """
        per_field: Dict[str, bool] = {}
        errors: List[FieldError] = []

        for instance in document.instances:
            value = submitted_values.get(instance.id)
            try:
                definition = self.registry.resolve(instance.type)
                valid = bool(definition.validate_value(instance, value))
            except Exception:
                logger.exception(
                    "Value rule for %s %s raised; recording field as invalid",
                    instance.type.value, instance.id,
                )
                valid = False

            per_field[instance.id] = valid
            if not valid:
                errors.append(self._field_error(instance.id, value))

        unknown = set(submitted_values) - set(per_field)
        if unknown:
            logger.warning(
                "Ignoring %d submitted value(s) for unknown field(s): %s",
                len(unknown), ", ".join(sorted(map(str, unknown))),
            )

        return ValidationReport(
            per_field=per_field,
            all_valid=all(per_field.values()),
            errors=errors,
        )

    @staticmethod
    def _field_error(instance_id: str, value: Any) -> FieldError:
        try:
            missing = is_blank(value)
        except TypeError:
            missing = False
        if missing:
            return FieldError(
                path=instance_id,
                code=FieldErrorCode.REQUIRED,
                message="This field is required",
                expected="a value",
            )
        return FieldError(
            path=instance_id,
            code=FieldErrorCode.INVALID_VALUE,
            message="Invalid value",
            received=value,
        )


def validate(
    document: DesignerDocument, submitted_values: Mapping[str, Optional[str]]
) -> ValidationReport:
    """Validate a submission using the document's own registry."""
    return SubmissionValidator(document.registry).validate(document, submitted_values)


__all__ = [
    "SubmissionValidator",
    "ValidationReport",
    "validate",
]
