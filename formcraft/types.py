"""Core type definitions for the FormCraft form schema engine.

This module defines the fundamental types used throughout FormCraft:
- FieldType: Closed set of field type tags available in the designer palette
- FormState: Lifecycle states for a form (draft, published, archived)
- FieldErrorCode: Validation error codes for configuration and value checks
- EventType: Audit event types for the event stream
- Actor: Identity representation for editors and system processes

These types form the contract between the designer, the submission pipeline
and the persistence layer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class FieldType(str, Enum):
    """Field type tags.

    The set is closed: a new kind of field means a new tag here plus a new
    definition registered in ``formcraft.fields``.
    """
    TEXT = "TextField"
    TEXT_AREA = "TextAreaField"
    EMAIL = "EmailField"
    NUMBER = "NumberField"
    DATE = "DateField"
    CHECKBOX = "CheckboxField"
    CHECKBOX_GROUP = "CheckboxGroupField"
    SELECT = "SelectField"
    TITLE = "TitleField"
    SUB_TITLE = "SubTitleField"
    PARAGRAPH = "ParagraphField"
    SEPARATOR = "SeparatorField"
    SPACER = "SpacerField"


class FormState(str, Enum):
    """Form lifecycle states.

    Terminal state: archived. There is no transition back to draft.
    """
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class FieldErrorCode(str, Enum):
    """Error codes for configuration attributes and submitted values."""
    REQUIRED = "required"
    INVALID_TYPE = "invalid_type"
    INVALID_FORMAT = "invalid_format"
    INVALID_VALUE = "invalid_value"
    TOO_LONG = "too_long"
    TOO_SHORT = "too_short"
    UNKNOWN_ATTRIBUTE = "unknown_attribute"
    CUSTOM = "custom"


class EventType(str, Enum):
    """Audit event types.

    Every lifecycle transition and every document mutation emits one event.
    """
    FORM_CREATED = "form.created"
    FIELD_INSERTED = "field.inserted"
    FIELD_REMOVED = "field.removed"
    FIELD_MOVED = "field.moved"
    FIELD_UPDATED = "field.updated"
    FIELD_SELECTED = "field.selected"
    FORM_PUBLISHED = "form.published"
    FORM_ARCHIVED = "form.archived"
    SUBMISSION_VALIDATED = "submission.validated"
    SUBMISSION_REJECTED = "submission.rejected"


class ActorKind(str, Enum):
    """Actor type classification."""
    HUMAN = "human"
    SYSTEM = "system"


@dataclass(frozen=True)
class Actor:
    """Identity of whoever performs an operation on a form.

    Attributes:
        kind: Type of actor (human editor or system process)
        id: Unique identifier for this actor
        name: Optional display name (e.g., "Jane Doe")
        metadata: Optional arbitrary data

    Examples:
        >>> editor = Actor(kind=ActorKind.HUMAN, id="user_123", name="Jane Doe")
        >>> editor.to_dict()
        {'kind': 'human', 'id': 'user_123', 'name': 'Jane Doe'}
    """
    kind: ActorKind
    id: str
    name: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {
            "kind": self.kind.value if isinstance(self.kind, ActorKind) else self.kind,
            "id": self.id,
        }
        if self.name is not None:
            result["name"] = self.name
        if self.metadata:
            result["metadata"] = self.metadata
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Actor":
        """Create Actor from dict."""
        kind = data["kind"]
        if isinstance(kind, str):
            kind = ActorKind(kind)
        return cls(
            kind=kind,
            id=data["id"],
            name=data.get("name"),
            metadata=data.get("metadata", {}),
        )


SYSTEM_ACTOR = Actor(kind=ActorKind.SYSTEM, id="formcraft")


__all__ = [
    "FieldType",
    "FormState",
    "FieldErrorCode",
    "EventType",
    "ActorKind",
    "Actor",
    "SYSTEM_ACTOR",
]
