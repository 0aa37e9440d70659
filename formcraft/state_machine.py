"""Form lifecycle state machine.

A form starts as a draft, is published once its schema is final and can later
be archived:

    draft --publish--> published --archive--> archived

The state machine:
- Enforces valid transitions between states
- Tracks the current form state
- Records typed events for transitions and for designer activity
- Provides serialization/deserialization for storage

Usage:
    >>> from formcraft.state_machine import FormStateMachine
    >>> from formcraft.types import FormState, Actor, ActorKind
    >>> sm = FormStateMachine(form_id="form_123")
    >>> sm.state
    <FormState.DRAFT: 'draft'>
    >>> actor = Actor(kind=ActorKind.HUMAN, id="user_1")
    >>> event = sm.transition_to(FormState.PUBLISHED, actor)
    >>> sm.state
    <FormState.PUBLISHED: 'published'>
    >>> len(sm.get_events())
    1
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Set
import logging
import uuid

from formcraft.errors import InvalidStateTransitionError
from formcraft.events import EventEmitter, FormEvent
from formcraft.types import Actor, EventType, FormState

logger = logging.getLogger(__name__)


# Map target states to their corresponding event types
STATE_TO_EVENT_TYPE: Dict[FormState, EventType] = {
    FormState.DRAFT: EventType.FORM_CREATED,
    FormState.PUBLISHED: EventType.FORM_PUBLISHED,
    FormState.ARCHIVED: EventType.FORM_ARCHIVED,
}


# Maps each state to the set of states it can transition to
VALID_TRANSITIONS: Dict[FormState, Set[FormState]] = {
    FormState.DRAFT: {FormState.PUBLISHED},
    FormState.PUBLISHED: {FormState.ARCHIVED},
    # Terminal state - no transitions allowed
    FormState.ARCHIVED: set(),
}


@dataclass
class FormStateMachine:
    """State machine for one form's lifecycle.

    Attributes:
        form_id: Unique identifier for this form
        state: Current state of the form
        emitter: Optional emitter notified of every recorded event

    Examples:
        >>> sm = FormStateMachine(form_id="form_123")
        >>> sm.can_transition_to(FormState.PUBLISHED)
        True
        >>> sm.can_transition_to(FormState.ARCHIVED)
        False
    """

    form_id: str
    state: FormState = FormState.DRAFT
    emitter: Optional[EventEmitter] = field(default=None, repr=False, compare=False)
    _events: List[FormEvent] = field(default_factory=list, init=False, repr=False)

    def can_transition_to(self, target_state: FormState) -> bool:
        """Check if transition to target state is valid."""
        return target_state in VALID_TRANSITIONS.get(self.state, set())

    def transition_to(self, target_state: FormState, actor: Actor) -> FormEvent:
        """Transition to a new state and record a transition event.

        Args:
            target_state: The state to transition to
            actor: The actor performing this transition

        Returns:
            The recorded transition event

        Raises:
            InvalidStateTransitionError: If the transition is not allowed
        """
        if not self.can_transition_to(target_state):
            allowed = VALID_TRANSITIONS[self.state]
            raise InvalidStateTransitionError(
                current_state=self.state,
                target_state=target_state,
                message=(
                    f"Invalid state transition: cannot transition from "
                    f"'{self.state.value}' to '{target_state.value}'. "
                    f"Valid transitions from '{self.state.value}' are: "
                    f"{', '.join(sorted(s.value for s in allowed))}"
                    if allowed
                    else f"Invalid state transition: '{self.state.value}' is a terminal state, "
                    f"no transitions are allowed."
                ),
            )

        old_state = self.state
        self.state = target_state
        logger.info(
            "Form %s transitioned from %s to %s", self.form_id, old_state.value, target_state.value
        )
        return self.record(
            STATE_TO_EVENT_TYPE[target_state],
            actor,
            {"from_state": old_state.value, "to_state": target_state.value},
        )

    def is_terminal(self) -> bool:
        """Check if the current state is terminal (archived)."""
        return len(VALID_TRANSITIONS[self.state]) == 0

    def record(
        self, event_type: EventType, actor: Actor, payload: Optional[Dict[str, Any]] = None
    ) -> FormEvent:
        """Append an event for this form and notify the emitter, if any."""
        event = FormEvent(
            event_id=f"evt_{uuid.uuid4().hex[:16]}",
            type=event_type,
            form_id=self.form_id,
            ts=datetime.now(timezone.utc),
            actor=actor,
            state=self.state,
            payload=payload,
        )
        self._events.append(event)
        if self.emitter is not None:
            self.emitter.emit(event)
        return event

    def get_events(self) -> List[FormEvent]:
        """Get all recorded events in chronological order."""
        return list(self._events)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the state machine to a dictionary.

        Examples:
            >>> sm = FormStateMachine(form_id="form_123", state=FormState.PUBLISHED)
            >>> sm.to_dict()
            {'formId': 'form_123', 'state': 'published'}
        """
        return {
            "formId": self.form_id,
            "state": self.state.value if isinstance(self.state, FormState) else self.state,
        }

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], emitter: Optional[EventEmitter] = None
    ) -> "FormStateMachine":
        """Deserialize a state machine from a dictionary."""
        state = data["state"]
        if isinstance(state, str):
            state = FormState(state)
        return cls(form_id=data["formId"], state=state, emitter=emitter)


__all__ = [
    "FormStateMachine",
    "InvalidStateTransitionError",
    "VALID_TRANSITIONS",
    "STATE_TO_EVENT_TYPE",
]
