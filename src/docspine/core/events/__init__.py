"""Change notification for workflow entities.

Why This Package Exists
-----------------------
Hosts embedding a workflow entity (editors, review queues, audit trails)
need to hear about lifecycle changes without the entity importing them.
Every accepted ``publish``/``approve`` produces one ``TransitionEvent``,
delivered synchronously to each registered subscriber.

Usage::

    from docspine.core.events import TransitionEvent
    from docspine.workflow import WorkflowEntity

    def on_change(event: TransitionEvent) -> None:
        print(f"{event.entity_id}: {event.effect}")

    doc = WorkflowEntity("doc-1")
    doc.register(on_change)
    doc.publish()   # prints "doc-1: moved to moderation"

Subscribers are plain callables. The registry holds them weakly, so keep a
reference to a subscriber for as long as it should keep receiving events.

Modules
-------
registry    SubscriberRegistry + BroadcastReport
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

from docspine.core.timestamps import generate_ulid, utc_now

if TYPE_CHECKING:
    from docspine.workflow.states import DocumentState, WorkflowAction

__all__ = [
    "TransitionEvent",
    "Subscriber",
]


# ── Event Model ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class TransitionEvent:
    """Payload delivered to subscribers on an accepted transition.

    Attributes:
        entity_id: Identifier of the entity that changed
        new_state: State after the transition (may equal previous_state)
        effect: Human-readable description of what happened
        action: The workflow action that was applied
        previous_state: State before the transition
        timestamp: When the transition was applied (UTC)
        event_id: Unique event identifier
    """

    entity_id: str
    new_state: DocumentState
    effect: str
    action: WorkflowAction | None = None
    previous_state: DocumentState | None = None
    timestamp: datetime = field(default_factory=utc_now)
    event_id: str = field(default_factory=generate_ulid)

    @property
    def is_noop(self) -> bool:
        """True when the state did not change (repeated attempt)."""
        return self.previous_state is not None and self.previous_state == self.new_state

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logging."""
        return {
            "event_id": self.event_id,
            "entity_id": self.entity_id,
            "action": self.action.value if self.action is not None else None,
            "previous_state": (
                self.previous_state.value if self.previous_state is not None else None
            ),
            "new_state": self.new_state.value,
            "effect": self.effect,
            "timestamp": self.timestamp.isoformat(),
        }


# ── Type Aliases ─────────────────────────────────────────────────────────

Subscriber = Callable[[TransitionEvent], Any]
