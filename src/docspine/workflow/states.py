"""Document lifecycle states and the transition policy.

The whole lifecycle is one enumerated state plus a pure lookup table. No
per-state objects and no back-references to the entity: the entity asks
``next_transition(state, action)`` and applies the answer itself.

Manifesto:
    Which action is legal from which state is data, not behaviour spread
    over classes. Keeping it in ``TRANSITION_TABLE`` means one place to read,
    one place to change, and a policy that can be tested without an entity.

Tags:
    doc-spine, workflow, state-machine, transition-table

Doc-Types:
    api-reference
"""

from dataclasses import dataclass
from enum import Enum


class DocumentState(str, Enum):
    """Lifecycle state of a workflow entity.

    Transition graph::

        DRAFT       --publish-->  MODERATION
        MODERATION  --approve-->  PUBLISHED
        MODERATION  --publish-->  MODERATION   (no-op, still broadcast)
        PUBLISHED   --publish/approve-->  PUBLISHED   (no-op, still broadcast)
        DRAFT       --approve-->  rejected     (no change, no broadcast)
    """

    DRAFT = "draft"
    MODERATION = "moderation"
    PUBLISHED = "published"


class WorkflowAction(str, Enum):
    """Lifecycle actions a caller can request."""

    PUBLISH = "publish"
    APPROVE = "approve"


@dataclass(frozen=True, slots=True)
class Transition:
    """Answer of the transition policy for one (state, action) pair.

    Attributes:
        source: State the action was requested from
        action: Requested action
        target: Resulting state (equals ``source`` for no-ops and rejections)
        effect: Human-readable description, or the rejection reason
        rejected: True when the action is not allowed from ``source``
    """

    source: DocumentState
    action: WorkflowAction
    target: DocumentState
    effect: str
    rejected: bool = False

    @property
    def is_noop(self) -> bool:
        """Accepted, but the state stays the same."""
        return not self.rejected and self.source == self.target

    @property
    def changes_state(self) -> bool:
        return not self.rejected and self.source != self.target


def _accept(source, action, target, effect) -> Transition:
    return Transition(source=source, action=action, target=target, effect=effect)


def _reject(source, action, reason) -> Transition:
    return Transition(source=source, action=action, target=source, effect=reason, rejected=True)


_D, _M, _P = DocumentState.DRAFT, DocumentState.MODERATION, DocumentState.PUBLISHED
_PUB, _APP = WorkflowAction.PUBLISH, WorkflowAction.APPROVE

TRANSITION_TABLE: dict[tuple[DocumentState, WorkflowAction], Transition] = {
    (_D, _PUB): _accept(_D, _PUB, _M, "moved to moderation"),
    (_D, _APP): _reject(_D, _APP, "cannot approve a draft"),
    (_M, _PUB): _accept(_M, _PUB, _M, "already in moderation, needs approval"),
    (_M, _APP): _accept(_M, _APP, _P, "approved and published"),
    (_P, _PUB): _accept(_P, _PUB, _P, "already published"),
    (_P, _APP): _accept(_P, _APP, _P, "already approved and published"),
}


def next_transition(state: DocumentState, action: WorkflowAction) -> Transition:
    """Look up what *action* does from *state*.

    Pure: no side effects, same answer every time.

    Example:
        >>> next_transition(DocumentState.DRAFT, WorkflowAction.APPROVE).rejected
        True
        >>> next_transition(DocumentState.DRAFT, WorkflowAction.PUBLISH).target
        <DocumentState.MODERATION: 'moderation'>
    """
    return TRANSITION_TABLE[(DocumentState(state), WorkflowAction(action))]


def allowed_actions(state: DocumentState) -> frozenset[WorkflowAction]:
    """Actions that are not rejected from *state* (no-ops included)."""
    return frozenset(
        action for action in WorkflowAction if not next_transition(state, action).rejected
    )


def is_terminal(state: DocumentState) -> bool:
    """True when no action can move the entity out of *state*."""
    return not any(next_transition(state, action).changes_state for action in WorkflowAction)


__all__ = [
    "DocumentState",
    "WorkflowAction",
    "Transition",
    "TRANSITION_TABLE",
    "next_transition",
    "allowed_actions",
    "is_terminal",
]
