"""Document workflow engine.

Modules
-------
states      DocumentState, WorkflowAction, transition table
history     Snapshot + History (linear undo log)
entity      WorkflowEntity + TransitionOutcome
"""

from docspine.workflow.entity import TransitionOutcome, WorkflowEntity
from docspine.workflow.history import History, Snapshot
from docspine.workflow.states import (
    TRANSITION_TABLE,
    DocumentState,
    Transition,
    WorkflowAction,
    allowed_actions,
    is_terminal,
    next_transition,
)

__all__ = [
    "WorkflowEntity",
    "TransitionOutcome",
    "History",
    "Snapshot",
    "DocumentState",
    "WorkflowAction",
    "Transition",
    "TRANSITION_TABLE",
    "next_transition",
    "allowed_actions",
    "is_terminal",
]
