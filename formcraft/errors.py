"""Structured error types for the FormCraft form schema engine.

This module defines two things:

- ``FieldError``: a frozen record describing one failed check, either on a
  configuration attribute (``path`` is the attribute name, e.g. ``"label"``)
  or on a submitted value (``path`` is the field instance id).
- The exception hierarchy raised by registry, document and lifecycle
  operations. Every exception derives from ``FormEngineError`` and carries the
  context a caller needs to recover (the offending tag, id, index or the list
  of ``FieldError`` records).

Submitted-value failures are never raised; the submission validator encodes
them in its report instead.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from formcraft.types import FieldErrorCode, FormState


@dataclass(frozen=True)
class FieldError:
    """Per-attribute or per-field validation error details.

    Attributes:
        path: Configuration attribute name or field instance id
        code: Specific validation error code
        message: Human-readable error description
        expected: Optional - what was expected (type, bounds, allowed values)
        received: Optional - what was actually received

    Examples:
        >>> err = FieldError(
        ...     path="label",
        ...     code=FieldErrorCode.TOO_SHORT,
        ...     message="Attribute 'label' is too short",
        ...     expected="minimum 2 characters",
        ...     received="1 characters"
        ... )
        >>> err.path
        'label'
    """
    path: str
    code: FieldErrorCode
    message: str
    expected: Optional[Any] = None
    received: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {
            "path": self.path,
            "code": self.code.value if isinstance(self.code, FieldErrorCode) else self.code,
            "message": self.message,
        }
        if self.expected is not None:
            result["expected"] = self.expected
        if self.received is not None:
            result["received"] = self.received
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldError":
        """Create FieldError from dict."""
        code = data["code"]
        if isinstance(code, str):
            code = FieldErrorCode(code)
        return cls(
            path=data["path"],
            code=code,
            message=data["message"],
            expected=data.get("expected"),
            received=data.get("received"),
        )


class FormEngineError(Exception):
    """Base class for every error raised by the form schema engine."""


class UnknownFieldType(FormEngineError):
    """Raised when a field type tag is not registered.

    Attributes:
        tag: The unrecognized tag, as received
    """

    def __init__(self, tag: Any):
        self.tag = tag
        super().__init__(f"Unknown field type: {tag!r}")


class InvalidConfiguration(FormEngineError):
    """Raised when a configuration is rejected by its field type's validator.

    The document the update was applied to is left unchanged.

    Attributes:
        field_type: Tag of the field type that rejected the configuration
        errors: One FieldError per failed attribute check
    """

    def __init__(self, field_type: Any, errors: List[FieldError]):
        self.field_type = field_type
        self.errors = list(errors)
        tag = getattr(field_type, "value", field_type)
        details = "; ".join(e.message for e in self.errors)
        super().__init__(f"Invalid configuration for {tag}: {details}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict so the interaction layer can show field-level messages."""
        return {
            "fieldType": getattr(self.field_type, "value", self.field_type),
            "errors": [e.to_dict() for e in self.errors],
        }


class InvalidIndex(FormEngineError):
    """Raised when an insert or move targets a position outside the document.

    Attributes:
        index: The rejected index
        length: Document length at the time of the call
    """

    def __init__(self, index: int, length: int, message: Optional[str] = None):
        self.index = index
        self.length = length
        super().__init__(
            message or f"Index {index} is out of range for a document of {length} field(s)"
        )


class InstanceNotFound(FormEngineError):
    """Raised when a field instance id is not present in the document.

    Attributes:
        instance_id: The id that could not be found
    """

    def __init__(self, instance_id: str):
        self.instance_id = instance_id
        super().__init__(f"Field instance {instance_id!r} not found")


class InvalidDocument(FormEngineError):
    """Raised when a persisted document payload is structurally malformed."""


class InvalidStateTransitionError(FormEngineError):
    """Raised when attempting an invalid form lifecycle transition.

    Attributes:
        current_state: The current state before the attempted transition
        target_state: The target state that was attempted
    """

    def __init__(self, current_state: FormState, target_state: FormState, message: str):
        self.current_state = current_state
        self.target_state = target_state
        super().__init__(message)


class FormStateError(FormEngineError):
    """Raised when an operation is not legal in the form's current state.

    Attributes:
        form_id: Form the operation was attempted on
        state: Current lifecycle state of the form
        operation: Name of the rejected operation
    """

    def __init__(self, form_id: str, state: FormState, operation: str):
        self.form_id = form_id
        self.state = state
        self.operation = operation
        super().__init__(
            f"Operation '{operation}' is not allowed on form '{form_id}' "
            f"in state '{state.value}'"
        )


class FormNotPublishableError(FormEngineError):
    """Raised when publishing a form that has no value-bearing field.

    Attributes:
        form_id: Form that could not be published
    """

    def __init__(self, form_id: str):
        self.form_id = form_id
        super().__init__(
            f"Form '{form_id}' cannot be published: it has no input field"
        )


__all__ = [
    "FieldError",
    "FormEngineError",
    "UnknownFieldType",
    "InvalidConfiguration",
    "InvalidIndex",
    "InstanceNotFound",
    "InvalidDocument",
    "InvalidStateTransitionError",
    "FormStateError",
    "FormNotPublishableError",
]
