"""Workflow entity: lifecycle state, content, undo history and subscribers.

This module defines ``WorkflowEntity``, the object a host application edits
and moves through the document lifecycle, and ``TransitionOutcome``, what an
accepted ``publish``/``approve`` returns.

Manifesto:
    The entity is the single owner of its state, content, history and
    subscriber list. Callers change it only through its operations, and
    every accepted lifecycle action is visible to subscribers exactly once.

Operations:
    save()              capture content into history (no broadcast)
    restore(snapshot)   put a snapshot's content back (no broadcast)
    set_content(value)  edit content; call save() first to make it undoable
    undo()              pop the history and restore in one step
    publish()/approve() apply the transition policy, then broadcast

Example::

    doc = WorkflowEntity("doc-1", "a")
    doc.save()
    doc.set_content("b")
    doc.undo()              # content back to "a"

    doc.approve()           # Err(TransitionRejectedError): cannot approve a draft
    doc.publish()           # Ok(...), subscribers hear "moved to moderation"

Not thread-safe: a multi-threaded host must serialize all calls on one
entity, including registry changes.

Tags:
    doc-spine, workflow, memento, observer, state-machine

Doc-Types:
    api-reference
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from docspine.core.errors import TransitionRejectedError, ValidationError
from docspine.core.events import Subscriber, TransitionEvent
from docspine.core.events.registry import BroadcastReport, SubscriberRegistry
from docspine.core.logging import LogContext, get_logger
from docspine.core.result import Err, Ok, Result
from docspine.core.timestamps import generate_ulid
from docspine.workflow.history import History, Snapshot
from docspine.workflow.states import (
    DocumentState,
    Transition,
    WorkflowAction,
    next_transition,
)

if TYPE_CHECKING:
    from docspine.core.settings import DocSpineSettings

logger = get_logger(__name__)


@dataclass(frozen=True)
class TransitionOutcome:
    """Result of an accepted lifecycle action.

    Attributes:
        transition: The policy answer that was applied
        event: The event that was broadcast
        report: Delivery report (delivered count, subscriber failures)
    """

    transition: Transition
    event: TransitionEvent
    report: BroadcastReport

    @property
    def state(self) -> DocumentState:
        return self.transition.target

    @property
    def effect(self) -> str:
        return self.transition.effect


class WorkflowEntity:
    """An editable document with a constrained lifecycle.

    Args:
        entity_id: Identifier; a ULID is generated when omitted
        content: Initial content (defaults to empty)
        max_history: Optional cap on the undo history
        registry: Subscriber registry to broadcast through; a private one is
            created when omitted
    """

    def __init__(
        self,
        entity_id: str | None = None,
        content: str = "",
        *,
        max_history: int | None = None,
        registry: SubscriberRegistry | None = None,
    ) -> None:
        _require_str("content", content)
        self._id = generate_ulid() if entity_id is None else entity_id
        self._state = DocumentState.DRAFT
        self._content = content
        self._sequence = 0
        self._history = History(max_entries=max_history)
        self._subscribers = registry if registry is not None else SubscriberRegistry()

    @classmethod
    def from_settings(
        cls,
        settings: DocSpineSettings,
        entity_id: str | None = None,
        content: str = "",
    ) -> WorkflowEntity:
        """Create an entity using the history cap from *settings*."""
        return cls(entity_id, content, max_history=settings.history_max_entries)

    # ── Introspection ────────────────────────────────────────────

    @property
    def id(self) -> str:
        return self._id

    @property
    def state(self) -> DocumentState:
        return self._state

    @property
    def content(self) -> str:
        return self._content

    @property
    def history(self) -> History:
        return self._history

    @property
    def subscribers(self) -> SubscriberRegistry:
        return self._subscribers

    # ── Content / undo ───────────────────────────────────────────

    def save(self) -> Snapshot:
        """Capture the current content and push it onto the history."""
        self._sequence += 1
        snapshot = Snapshot(content=self._content, sequence=self._sequence)
        self._history.push(snapshot)
        logger.debug(
            "snapshot_saved",
            entity_id=self._id,
            sequence=snapshot.sequence,
            history_size=len(self._history),
        )
        return snapshot

    def restore(self, snapshot: Snapshot) -> None:
        """Replace the content with *snapshot*'s content.

        The history is not consulted; obtain the snapshot from
        ``history.pop()`` (or use ``undo()``).

        Raises:
            ValidationError: If *snapshot* is not a ``Snapshot`` (for example
                an un-unwrapped ``Result``).
        """
        if not isinstance(snapshot, Snapshot):
            raise ValidationError(
                f"restore() expects a Snapshot, got {type(snapshot).__name__}"
            ).with_context(entity_id=self._id)
        self._content = snapshot.content
        logger.debug("content_restored", entity_id=self._id, sequence=snapshot.sequence)

    def set_content(self, value: str) -> None:
        """Replace the content. No snapshot is taken automatically."""
        _require_str("content", value)
        self._content = value

    def undo(self) -> Result[Snapshot]:
        """Pop the most recent snapshot and restore it.

        Returns:
            ``Ok(snapshot)`` that was restored, or ``Err(EmptyHistoryError)``
            with the content left unchanged.
        """
        result = self._history.pop()
        match result:
            case Ok(snapshot):
                self.restore(snapshot)
            case Err(error):
                error.with_context(entity_id=self._id)
        return result

    # ── Lifecycle ────────────────────────────────────────────────

    def publish(self) -> Result[TransitionOutcome]:
        """Request the ``publish`` action."""
        return self._apply(WorkflowAction.PUBLISH)

    def approve(self) -> Result[TransitionOutcome]:
        """Request the ``approve`` action."""
        return self._apply(WorkflowAction.APPROVE)

    def _apply(self, action: WorkflowAction) -> Result[TransitionOutcome]:
        transition = next_transition(self._state, action)

        with LogContext(entity_id=self._id, action=action.value):
            if transition.rejected:
                logger.info(
                    "transition_rejected",
                    state=self._state.value,
                    reason=transition.effect,
                )
                return Err(
                    TransitionRejectedError(
                        transition.source.value, action.value, transition.effect
                    ).with_context(entity_id=self._id)
                )

            self._state = transition.target
            event = TransitionEvent(
                entity_id=self._id,
                new_state=transition.target,
                effect=transition.effect,
                action=action,
                previous_state=transition.source,
            )
            logger.info(
                "transition_applied",
                previous_state=transition.source.value,
                state=transition.target.value,
                effect=transition.effect,
                noop=transition.is_noop,
            )
            report = self._subscribers.broadcast(event)

        return Ok(TransitionOutcome(transition=transition, event=event, report=report))

    # ── Observation ──────────────────────────────────────────────

    def register(self, subscriber: Subscriber) -> None:
        """Subscribe *subscriber* to this entity's transitions."""
        self._subscribers.register(subscriber)

    def unregister(self, subscriber: Subscriber) -> bool:
        """Remove the first registration of *subscriber*."""
        return self._subscribers.unregister(subscriber)

    def to_dict(self) -> dict[str, Any]:
        """Introspection view (not a persistence format)."""
        return {
            "id": self._id,
            "state": self._state.value,
            "content": self._content,
            "history_size": len(self._history),
            "subscriber_count": len(self._subscribers),
        }

    def __repr__(self) -> str:
        return f"WorkflowEntity(id={self._id!r}, state={self._state.value})"


def _require_str(name: str, value: Any) -> None:
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be a str, got {type(value).__name__}")


__all__ = ["TransitionOutcome", "WorkflowEntity"]
