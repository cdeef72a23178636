"""
doc-spine - versioned, observable, finite-state workflow entities.

A ``WorkflowEntity`` moves through Draft -> Moderation -> Published, keeps a
linear undo history of content snapshots, and broadcasts every accepted
lifecycle action to its subscribers.

    from docspine import WorkflowEntity

    doc = WorkflowEntity("doc-1", "first draft")
    doc.register(print)
    doc.publish()
"""

__version__ = "0.1.0"

from docspine.core.errors import (
    DocSpineError,
    EmptyHistoryError,
    SubscriberError,
    TransitionRejectedError,
)
from docspine.core.events import Subscriber, TransitionEvent
from docspine.core.events.registry import BroadcastReport, SubscriberRegistry
from docspine.core.result import Err, Ok, Result
from docspine.workflow import (
    DocumentState,
    History,
    Snapshot,
    TransitionOutcome,
    WorkflowAction,
    WorkflowEntity,
)

__all__ = [
    "__version__",
    # Engine
    "WorkflowEntity",
    "TransitionOutcome",
    "DocumentState",
    "WorkflowAction",
    "History",
    "Snapshot",
    # Notification
    "Subscriber",
    "SubscriberRegistry",
    "BroadcastReport",
    "TransitionEvent",
    # Outcomes
    "Ok",
    "Err",
    "Result",
    "DocSpineError",
    "TransitionRejectedError",
    "EmptyHistoryError",
    "SubscriberError",
]
