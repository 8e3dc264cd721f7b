"""Event system for the application wizard.

Every field edit, step change and submission attempt produces a WizardEvent.
The wizard keeps them in an append-only list, and an EventEmitter lets a UI
layer subscribe to the ones it cares about (for example to show an alert when
a submission fails).
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from .types import EventType, SubmissionStatus, WizardStep

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WizardEvent:
    """A single event in a wizard session.

    Attributes:
        event_id: Unique event identifier (e.g., "evt_3f2a...")
        type: Event type from EventType enum
        ts: UTC timestamp when the event occurred
        step: Wizard step after this event
        status: Submission status after this event
        payload: Optional event-specific data (field name, error message, ...)

    Examples:
        >>> from datetime import datetime, timezone
        >>> event = WizardEvent(
        ...     event_id="evt_001",
        ...     type=EventType.STEP_ADVANCED,
        ...     ts=datetime.now(timezone.utc),
        ...     step=WizardStep.EDUCATION,
        ...     status=SubmissionStatus.IDLE,
        ... )
    """
    event_id: str
    type: EventType
    ts: datetime
    step: WizardStep
    status: SubmissionStatus
    payload: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        """Normalize raw enum values."""
        if not isinstance(self.type, EventType):
            object.__setattr__(self, "type", EventType(self.type))
        if not isinstance(self.step, WizardStep):
            object.__setattr__(self, "step", WizardStep(self.step))
        if not isinstance(self.status, SubmissionStatus):
            object.__setattr__(self, "status", SubmissionStatus(self.status))

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization.

        Timestamp is formatted as an ISO 8601 string.
        """
        result: Dict[str, Any] = {
            "eventId": self.event_id,
            "type": self.type.value,
            "ts": self.ts.isoformat(),
            "step": self.step.value,
            "status": self.status.value,
        }
        if self.payload is not None:
            result["payload"] = self.payload
        return result

    def to_jsonl(self) -> str:
        """Single-line JSON suitable for appending to a JSONL log."""
        return json.dumps(self.to_dict(), separators=(',', ':'))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WizardEvent":
        ts = datetime.fromisoformat(data["ts"].replace('Z', '+00:00'))
        return cls(
            event_id=data["eventId"],
            type=EventType(data["type"]),
            ts=ts,
            step=WizardStep(data["step"]),
            status=SubmissionStatus(data["status"]),
            payload=data.get("payload"),
        )


EventListener = Callable[[WizardEvent], None]
"""Type alias for event listener callbacks.

Listeners are called synchronously when events are emitted.
"""


class EventEmitter:
    """Registry of event listeners.

    - Type-specific subscriptions (listen to specific event types)
    - Wildcard subscriptions (listen to all events)
    - Synchronous dispatch in registration order
    - A failing listener is logged and does not stop the others

    Examples:
        >>> emitter = EventEmitter()
        >>> emitter.on(EventType.SUBMISSION_FAILED, lambda e: print(e.payload["error"]))
        >>> emitter.listener_count()
        1
    """

    def __init__(self):
        self._listeners: Dict[EventType, List[EventListener]] = {}
        self._any_listeners: List[EventListener] = []

    def on(self, event_type: EventType, listener: EventListener) -> None:
        """Subscribe to a specific event type."""
        self._listeners.setdefault(event_type, []).append(listener)

    def on_any(self, listener: EventListener) -> None:
        """Subscribe to all event types."""
        self._any_listeners.append(listener)

    def off(self, event_type: EventType, listener: EventListener) -> None:
        """Unsubscribe from a specific event type. Unknown listeners are ignored."""
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)

    def off_any(self, listener: EventListener) -> None:
        """Unsubscribe a wildcard listener. Unknown listeners are ignored."""
        if listener in self._any_listeners:
            self._any_listeners.remove(listener)

    def emit(self, event: WizardEvent) -> None:
        """Dispatch an event to type-specific listeners, then wildcard listeners."""
        for listener in list(self._listeners.get(event.type, [])) + list(self._any_listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(f"Event listener failed for {event.type.value} ({event.event_id})")

    def clear(self) -> None:
        """Remove all event listeners."""
        self._listeners.clear()
        self._any_listeners.clear()

    def listener_count(self, event_type: Optional[EventType] = None) -> int:
        """Count listeners for one type, or all listeners when type is None."""
        if event_type is not None:
            return len(self._listeners.get(event_type, []))
        return len(self._any_listeners) + sum(len(ls) for ls in self._listeners.values())


__all__ = [
    "WizardEvent",
    "EventListener",
    "EventEmitter",
]
