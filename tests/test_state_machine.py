"""Unit tests for the form lifecycle state machine.

Tests cover:
- Initialization defaults
- Valid and invalid transitions
- Terminal state detection
- Transition events
- Serialization and deserialization
"""

import pytest

from formcraft.errors import InvalidStateTransitionError
from formcraft.events import EventEmitter
from formcraft.state_machine import FormStateMachine, VALID_TRANSITIONS
from formcraft.types import Actor, ActorKind, EventType, FormState

EDITOR = Actor(kind=ActorKind.HUMAN, id="user_1", name="Jane Doe")


class TestStateMachineInitialization:
    """Test state machine initialization and defaults."""

    def test_init_defaults_to_draft(self):
        """Should initialize in DRAFT state."""
        sm = FormStateMachine(form_id="form_1")
        assert sm.form_id == "form_1"
        assert sm.state == FormState.DRAFT
        assert sm.get_events() == []

    def test_init_with_custom_state(self):
        """Should initialize with a custom state if provided."""
        sm = FormStateMachine(form_id="form_1", state=FormState.PUBLISHED)
        assert sm.state == FormState.PUBLISHED


class TestTransitions:
    """Test valid and invalid transitions."""

    def test_draft_to_published(self):
        """Should publish a draft."""
        sm = FormStateMachine(form_id="form_1")
        sm.transition_to(FormState.PUBLISHED, EDITOR)
        assert sm.state == FormState.PUBLISHED

    def test_published_to_archived(self):
        """Should archive a published form."""
        sm = FormStateMachine(form_id="form_1", state=FormState.PUBLISHED)
        sm.transition_to(FormState.ARCHIVED, EDITOR)
        assert sm.state == FormState.ARCHIVED

    @pytest.mark.parametrize("current, target", [
        (FormState.DRAFT, FormState.ARCHIVED),
        (FormState.DRAFT, FormState.DRAFT),
        (FormState.PUBLISHED, FormState.DRAFT),
        (FormState.PUBLISHED, FormState.PUBLISHED),
        (FormState.ARCHIVED, FormState.DRAFT),
        (FormState.ARCHIVED, FormState.PUBLISHED),
    ])
    def test_invalid_transitions(self, current, target):
        """Should raise InvalidStateTransitionError and keep the state."""
        sm = FormStateMachine(form_id="form_1", state=current)
        with pytest.raises(InvalidStateTransitionError) as exc_info:
            sm.transition_to(target, EDITOR)
        assert exc_info.value.current_state == current
        assert exc_info.value.target_state == target
        assert sm.state == current
        assert sm.get_events() == []

    def test_terminal_error_message(self):
        """Should explain that archived is terminal."""
        sm = FormStateMachine(form_id="form_1", state=FormState.ARCHIVED)
        with pytest.raises(InvalidStateTransitionError, match="terminal state"):
            sm.transition_to(FormState.PUBLISHED, EDITOR)

    def test_can_transition_to(self):
        """Should report allowed transitions."""
        sm = FormStateMachine(form_id="form_1")
        assert sm.can_transition_to(FormState.PUBLISHED) is True
        assert sm.can_transition_to(FormState.ARCHIVED) is False

    def test_is_terminal(self):
        """Should report only ARCHIVED as terminal."""
        assert FormStateMachine(form_id="f", state=FormState.ARCHIVED).is_terminal() is True
        assert FormStateMachine(form_id="f", state=FormState.DRAFT).is_terminal() is False
        assert FormStateMachine(form_id="f", state=FormState.PUBLISHED).is_terminal() is False

    def test_no_unpublish(self):
        """Should never allow returning to DRAFT."""
        for targets in VALID_TRANSITIONS.values():
            assert FormState.DRAFT not in targets


class TestTransitionEvents:
    """Test events recorded on transitions."""

    def test_publish_event(self):
        """Should record a FORM_PUBLISHED event with from/to states."""
        sm = FormStateMachine(form_id="form_1")
        event = sm.transition_to(FormState.PUBLISHED, EDITOR)
        assert event.type == EventType.FORM_PUBLISHED
        assert event.form_id == "form_1"
        assert event.actor == EDITOR
        assert event.state == FormState.PUBLISHED
        assert event.payload == {"from_state": "draft", "to_state": "published"}
        assert sm.get_events() == [event]

    def test_full_lifecycle_events(self):
        """Should record events in chronological order."""
        sm = FormStateMachine(form_id="form_1")
        sm.transition_to(FormState.PUBLISHED, EDITOR)
        sm.transition_to(FormState.ARCHIVED, EDITOR)
        assert [e.type for e in sm.get_events()] == [
            EventType.FORM_PUBLISHED,
            EventType.FORM_ARCHIVED,
        ]

    def test_events_reach_emitter(self):
        """Should forward recorded events to the emitter."""
        emitter = EventEmitter()
        received = []
        emitter.on_any(received.append)
        sm = FormStateMachine(form_id="form_1", emitter=emitter)
        sm.record(EventType.FIELD_INSERTED, EDITOR, {"fieldId": "fld_1"})
        assert len(received) == 1
        assert received[0].payload == {"fieldId": "fld_1"}

    def test_get_events_returns_copy(self):
        """Should not expose the internal event list."""
        sm = FormStateMachine(form_id="form_1")
        sm.transition_to(FormState.PUBLISHED, EDITOR)
        sm.get_events().clear()
        assert len(sm.get_events()) == 1


class TestSerialization:
    """Test state machine serialization."""

    def test_to_dict(self):
        """Should serialize id and state."""
        sm = FormStateMachine(form_id="form_1", state=FormState.PUBLISHED)
        assert sm.to_dict() == {"formId": "form_1", "state": "published"}

    def test_from_dict(self):
        """Should restore id and state."""
        sm = FormStateMachine.from_dict({"formId": "form_1", "state": "archived"})
        assert sm.form_id == "form_1"
        assert sm.state == FormState.ARCHIVED

    def test_round_trip(self):
        """Should round-trip through to_dict/from_dict."""
        sm = FormStateMachine(form_id="form_9", state=FormState.PUBLISHED)
        restored = FormStateMachine.from_dict(sm.to_dict())
        assert restored.to_dict() == sm.to_dict()
