"""Event system for FormCraft forms.

This module provides the event data structure and the event emitter used for
audit logging and notifications. Every lifecycle transition and every designer
mutation of a form emits a typed FormEvent that is appended to the form's
event stream.

The event stream is append-only and immutable.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
import json
import logging

from dateutil import parser as date_parser

from .types import Actor, ActorKind, EventType, FormState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FormEvent:
    """A single event in a form's lifecycle.

    Attributes:
        event_id: Globally unique event identifier (e.g., "evt_01H8...")
        type: Event type from EventType enum
        form_id: ID of the form this event relates to
        ts: UTC timestamp when the event occurred
        actor: Actor who triggered this event
        state: Form state after this event
        payload: Optional event-specific data (e.g., field id, indexes, report)

    Examples:
        >>> from datetime import datetime, timezone
        >>> from formcraft.types import Actor, ActorKind, EventType, FormState
        >>>
        >>> event = FormEvent(
        ...     event_id="evt_001",
        ...     type=EventType.FORM_CREATED,
        ...     form_id="form_001",
        ...     ts=datetime.now(timezone.utc),
        ...     actor=Actor(kind=ActorKind.HUMAN, id="user_1"),
        ...     state=FormState.DRAFT
        ... )
    """
    event_id: str
    type: EventType
    form_id: str
    ts: datetime
    actor: Actor
    state: FormState
    payload: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        """Validate and normalize fields."""
        if isinstance(self.actor, Actor) and isinstance(self.actor.kind, str):
            object.__setattr__(
                self,
                "actor",
                Actor(
                    kind=ActorKind(self.actor.kind),
                    id=self.actor.id,
                    name=self.actor.name,
                    metadata=self.actor.metadata,
                ),
            )

        if isinstance(self.state, str):
            object.__setattr__(self, "state", FormState(self.state))

        if isinstance(self.type, str):
            object.__setattr__(self, "type", EventType(self.type))

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization.

        Timestamp is formatted as an ISO 8601 string.
        """
        result: Dict[str, Any] = {
            "eventId": self.event_id,
            "type": self.type.value,
            "formId": self.form_id,
            "ts": self.ts.isoformat(),
            "actor": self.actor.to_dict(),
            "state": self.state.value,
        }
        if self.payload is not None:
            result["payload"] = self.payload
        return result

    def to_jsonl(self) -> str:
        """Convert event to JSONL format (single-line JSON)."""
        return json.dumps(self.to_dict(), separators=(',', ':'))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FormEvent":
        """Create FormEvent from dictionary (camelCase keys)."""
        return cls(
            event_id=data["eventId"],
            type=EventType(data["type"]),
            form_id=data["formId"],
            ts=date_parser.isoparse(data["ts"]),
            actor=Actor.from_dict(data["actor"]),
            state=FormState(data["state"]),
            payload=data.get("payload"),
        )


EventListener = Callable[[FormEvent], None]
"""Type alias for event listener callbacks.

Event listeners are called synchronously when events are emitted.
"""


class EventEmitter:
    """Event emitter for managing event listeners and dispatching events.

    Features:
    - Type-specific subscriptions (listen to specific event types)
    - Wildcard subscriptions (listen to all events)
    - Synchronous dispatch (listeners called in registration order)
    - Error isolation (a failing listener is logged and skipped)

    Examples:
        >>> emitter = EventEmitter()
        >>> seen = []
        >>> emitter.on(EventType.FORM_PUBLISHED, seen.append)
        >>> emitter.listener_count(EventType.FORM_PUBLISHED)
        1
    """

    def __init__(self):
        """Initialize event emitter with empty listener registries."""
        self._listeners: Dict[EventType, List[EventListener]] = {}
        self._any_listeners: List[EventListener] = []

    def on(self, event_type: EventType, listener: EventListener) -> None:
        """Subscribe to a specific event type."""
        self._listeners.setdefault(event_type, []).append(listener)

    def on_any(self, listener: EventListener) -> None:
        """Subscribe to all event types (wildcard subscription)."""
        self._any_listeners.append(listener)

    def off(self, event_type: EventType, listener: EventListener) -> None:
        """Unsubscribe from a specific event type; unknown listeners are ignored."""
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)

    def off_any(self, listener: EventListener) -> None:
        """Unsubscribe from wildcard subscription; unknown listeners are ignored."""
        if listener in self._any_listeners:
            self._any_listeners.remove(listener)

    def emit(self, event: FormEvent) -> None:
        """Dispatch an event to all registered listeners.

        Type-specific listeners run first, then wildcard listeners. A listener
        that raises is logged and does not prevent the others from running.
        """
        listeners = list(self._listeners.get(event.type, [])) + list(self._any_listeners)
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception(
                    "Event listener %r failed for %s on form %s",
                    listener, event.type.value, event.form_id,
                )

    def clear(self) -> None:
        """Remove all event listeners."""
        self._listeners.clear()
        self._any_listeners.clear()

    def listener_count(self, event_type: Optional[EventType] = None) -> int:
        """Get count of registered listeners.

        Args:
            event_type: If provided, count listeners for this type only.
                        If None, count all listeners (including wildcard).
        """
        if event_type is not None:
            return len(self._listeners.get(event_type, []))
        return len(self._any_listeners) + sum(len(v) for v in self._listeners.values())


__all__ = [
    "FormEvent",
    "EventListener",
    "EventEmitter",
]
