"""FormRuntime orchestrator for FormCraft forms.

This module provides the FormRuntime class that ties one form's designer
document to its lifecycle state machine and to the submission validator:

- while the form is a draft, designer operations edit the document
- ``publish`` freezes the document as the form's schema
- once published, submissions are validated against that frozen schema

Usage:
    >>> from formcraft.runtime import FormRuntime
    >>> runtime = FormRuntime(form_id="contact", name="Contact us")
    >>> email_id = runtime.insert_field("EmailField")
    >>> _ = runtime.publish()
    >>> runtime.state.value
    'published'
    >>> runtime.validate_submission({email_id: "jane@example.com"}).all_valid
    True
"""

import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from dateutil import parser as date_parser

from formcraft.document import DesignerDocument
from formcraft.errors import FormNotPublishableError, FormStateError
from formcraft.events import EventEmitter, FormEvent
from formcraft.registry import DEFAULT_REGISTRY, FieldTypeRegistry, TagLike
from formcraft.settings import Settings, get_settings
from formcraft.state_machine import FormStateMachine
from formcraft.types import SYSTEM_ACTOR, Actor, EventType, FormState
from formcraft.validation import SubmissionValidator, ValidationReport

logger = logging.getLogger(__name__)


class FormRuntime:
    """Lifecycle-aware owner of one form's designer document.

    Attributes:
        form_id: Unique identifier for this form
        name: Display name of the form
        registry: Field type registry the document is built against
        published_at: UTC time the form was published, if it was

    Examples:
        >>> runtime = FormRuntime(name="Survey")
        >>> runtime.form_id  # doctest: +ELLIPSIS
        'form_...'
        >>> runtime.state.value
        'draft'
    """

    def __init__(
        self,
        form_id: Optional[str] = None,
        name: str = "Untitled form",
        registry: FieldTypeRegistry = DEFAULT_REGISTRY,
        emitter: Optional[EventEmitter] = None,
        actor: Actor = SYSTEM_ACTOR,
        settings: Optional[Settings] = None,
        _document: Optional[DesignerDocument] = None,
        _state_machine: Optional[FormStateMachine] = None,
        _published_at: Optional[datetime] = None,
    ):
        """Initialize the FormRuntime.

        A brand new form records a ``form.created`` event; forms restored with
        ``from_dict`` do not.

        Args:
            form_id: Form identifier; generated when omitted
            name: Display name of the form
            registry: Field type registry used by the document and validator
            emitter: Optional emitter notified of every event
            actor: Actor recorded on the creation event
            settings: Engine settings; defaults to ``get_settings()``
        """
        self.form_id = form_id or f"form_{uuid.uuid4().hex[:16]}"
        self.name = name
        self.registry = registry
        self.published_at = _published_at
        self._settings = settings
        self._document = _document if _document is not None else DesignerDocument(registry=registry)
        self._validator = SubmissionValidator(registry)
        self._state_machine = _state_machine or FormStateMachine(
            form_id=self.form_id, emitter=emitter
        )
        if _document is None:
            self._state_machine.record(EventType.FORM_CREATED, actor, {"name": name})

    @property
    def settings(self) -> Settings:
        return self._settings or get_settings()

    @property
    def state(self) -> FormState:
        return self._state_machine.state

    @property
    def document(self) -> DesignerDocument:
        """The current document snapshot."""
        return self._document

    def get_events(self) -> List[FormEvent]:
        return self._state_machine.get_events()

    def _require_state(self, state: FormState, operation: str) -> None:
        if self.state != state:
            raise FormStateError(self.form_id, self.state, operation)

    def _commit(
        self,
        document: DesignerDocument,
        event_type: EventType,
        actor: Actor,
        payload: Dict[str, Any],
    ) -> None:
        self._document = document
        self._state_machine.record(event_type, actor, payload)

    # Designer operations (draft only)

    def insert_field(
        self, tag: TagLike, at_index: Optional[int] = None, actor: Actor = SYSTEM_ACTOR
    ) -> str:
        """Insert a new field and return its id.

        Raises:
            FormStateError: If the form is not a draft
            InvalidIndex: If ``at_index`` is out of range
            UnknownFieldType: If ``tag`` is not registered
        """
        self._require_state(FormState.DRAFT, "insert_field")
        document, instance_id = self._document.insert(tag, at_index)
        self._commit(document, EventType.FIELD_INSERTED, actor, {
            "fieldId": instance_id,
            "type": document.get(instance_id).type.value,
            "index": document.index_of(instance_id),
        })
        return instance_id

    def remove_field(self, instance_id: str, actor: Actor = SYSTEM_ACTOR) -> None:
        self._require_state(FormState.DRAFT, "remove_field")
        document = self._document.remove_by_id(instance_id)
        self._commit(document, EventType.FIELD_REMOVED, actor, {"fieldId": instance_id})

    def move_field(self, instance_id: str, new_index: int, actor: Actor = SYSTEM_ACTOR) -> None:
        self._require_state(FormState.DRAFT, "move_field")
        old_index = self._document.index_of(instance_id)
        document = self._document.move_to(instance_id, new_index)
        self._commit(document, EventType.FIELD_MOVED, actor, {
            "fieldId": instance_id,
            "fromIndex": old_index,
            "toIndex": new_index,
        })

    def update_field(
        self,
        instance_id: str,
        configuration: Mapping[str, Any],
        actor: Actor = SYSTEM_ACTOR,
    ) -> None:
        """Commit a new configuration for a field.

        Raises:
            FormStateError: If the form is not a draft
            InstanceNotFound: If no field has this id
            InvalidConfiguration: If the configuration is rejected; the
                document is left unchanged
        """
        self._require_state(FormState.DRAFT, "update_field")
        document = self._document.update_configuration(instance_id, configuration)
        self._commit(document, EventType.FIELD_UPDATED, actor, {"fieldId": instance_id})

    def select_field(self, instance_id: Optional[str] = None, actor: Actor = SYSTEM_ACTOR) -> None:
        self._require_state(FormState.DRAFT, "select_field")
        document = self._document.select(instance_id)
        self._commit(document, EventType.FIELD_SELECTED, actor, {"fieldId": instance_id})

    # Lifecycle

    def publish(self, actor: Actor = SYSTEM_ACTOR) -> FormEvent:
        """Freeze the document as this form's schema.

        Raises:
            InvalidStateTransitionError: If the form is not a draft
            FormNotPublishableError: If the form has no value-bearing field and
                ``require_input_field_to_publish`` is enabled
        """
        if (
            self.state == FormState.DRAFT
            and self.settings.require_input_field_to_publish
            and not self._document.columns()
        ):
            raise FormNotPublishableError(self.form_id)
        event = self._state_machine.transition_to(FormState.PUBLISHED, actor)
        self.published_at = event.ts
        return event

    def archive(self, actor: Actor = SYSTEM_ACTOR) -> FormEvent:
        return self._state_machine.transition_to(FormState.ARCHIVED, actor)

    # Submissions (published only)

    def validate_submission(
        self, submitted_values: Mapping[str, Optional[str]], actor: Actor = SYSTEM_ACTOR
    ) -> ValidationReport:
        """Validate submitted values against the published schema.

        Raises:
            FormStateError: If the form is not published
        """
        self._require_state(FormState.PUBLISHED, "validate_submission")
        report = self._validator.validate(self._document, submitted_values)
        event_type = (
            EventType.SUBMISSION_VALIDATED if report.all_valid else EventType.SUBMISSION_REJECTED
        )
        self._state_machine.record(event_type, actor, {
            "allValid": report.all_valid,
            "invalidFields": report.invalid_fields,
        })
        return report

    # Persistence

    def to_dict(self) -> Dict[str, Any]:
        """Serialize lifecycle state, form metadata and the document."""
        data = self._state_machine.to_dict()
        data.update({
            "name": self.name,
            "publishedAt": self.published_at.isoformat() if self.published_at else None,
            "document": self._document.serialize(),
        })
        return data

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        registry: FieldTypeRegistry = DEFAULT_REGISTRY,
        emitter: Optional[EventEmitter] = None,
        settings: Optional[Settings] = None,
    ) -> "FormRuntime":
        """Restore a form saved with ``to_dict``.

        Raises:
            UnknownFieldType: If the document uses a tag this registry lacks
            InvalidConfiguration: If a stored configuration is rejected
            InvalidDocument: If the document payload is malformed
        """
        document = DesignerDocument.deserialize(data["document"], registry=registry)
        state_machine = FormStateMachine.from_dict(data, emitter=emitter)
        published_at = data.get("publishedAt")
        runtime = cls(
            form_id=state_machine.form_id,
            name=data.get("name", "Untitled form"),
            registry=registry,
            emitter=emitter,
            settings=settings,
            _document=document,
            _state_machine=state_machine,
            _published_at=date_parser.isoparse(published_at) if published_at else None,
        )
        logger.debug("Restored form %s in state %s", runtime.form_id, runtime.state.value)
        return runtime


__all__ = [
    "FormRuntime",
]
