"""
Structured error types for doc-spine.

Provides a small hierarchy of typed errors carrying a category, structured
context and an optional chained cause. Most of these errors are never raised
by the engine itself: rejected transitions and empty history are returned to
the caller inside an ``Err`` (see ``docspine.core.result``) so that the caller
has to branch on them. ``Err.unwrap()`` raises the carried error for callers
that prefer exception flow.

Manifesto:
    - **Typed Error Hierarchy:** Different error types for different concerns
    - **Rich Context:** Errors carry entity/state/action metadata for logging
    - **Error Chaining:** Preserve original exceptions while adding context
    - **Outcomes, not crashes:** Expected failures travel as values

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────┐
        │                       DocSpineError                          │
        │           (category, context, cause, to_dict)                │
        ├─────────────────────────────────────────────────────────────┤
        │                                                              │
        │  WorkflowError          HistoryError       ValidationError   │
        │  (WORKFLOW)             (HISTORY)          (VALIDATION)      │
        │       │                      │                   │           │
        │  TransitionRejected     EmptyHistory       InvalidSubscriber │
        │                                                              │
        │  SubscriberError        ConfigError                          │
        │  (SUBSCRIBER)           (CONFIG)                             │
        │                              │                               │
        │                         InvalidConfig                        │
        └─────────────────────────────────────────────────────────────┘

Examples:
    >>> error = TransitionRejectedError("draft", "approve", "cannot approve a draft")
    >>> error.category
    <ErrorCategory.WORKFLOW: 'WORKFLOW'>
    >>> error.to_dict()["context"]["state"]
    'draft'

Tags:
    error-handling, exception-hierarchy, error-context, doc-spine

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Standard error categories for classification and log routing.

    Attributes:
        WORKFLOW: Lifecycle transition outcomes (rejections)
        HISTORY: Undo log conditions (nothing to restore)
        SUBSCRIBER: A subscriber failed while being notified
        VALIDATION: Bad arguments handed to the engine
        CONFIG: Missing or invalid settings
        INTERNAL: Bugs, unexpected state
        UNKNOWN: Uncategorized errors
    """

    WORKFLOW = "WORKFLOW"
    HISTORY = "HISTORY"
    SUBSCRIBER = "SUBSCRIBER"
    VALIDATION = "VALIDATION"
    CONFIG = "CONFIG"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Only fields that are set end up in ``to_dict()``, so the same context
    class serves transition rejections, empty history and subscriber failures.

    Attributes:
        entity_id: Identifier of the workflow entity involved
        state: Lifecycle state at the time of the error
        action: Workflow action that was attempted
        sequence: Snapshot sequence number, when relevant
        metadata: Additional key-value pairs
    """

    entity_id: str | None = None
    state: str | None = None
    action: str | None = None
    sequence: int | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["entity_id", "state", "action", "sequence"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class DocSpineError(Exception):
    """
    Base exception for all doc-spine errors.

    Every instance carries a category (defaulting to the subclass'
    ``default_category``), an ``ErrorContext`` and an optional cause. The
    cause is also chained as ``__cause__`` so tracebacks show the origin.

    Examples:
        >>> error = DocSpineError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>

        >>> error = DocSpineError("Restore failed").with_context(entity_id="doc-1")
        >>> error.context.entity_id
        'doc-1'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> DocSpineError:
        """
        Add context to this error (fluent API).

        Usage:
            return Err(EmptyHistoryError().with_context(entity_id=self.id))
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        if self.context:
            context_dict = self.context.to_dict()
            if context_dict:
                result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# WORKFLOW ERRORS
# =============================================================================


class WorkflowError(DocSpineError):
    """Lifecycle (state machine) error."""

    default_category = ErrorCategory.WORKFLOW


class TransitionRejectedError(WorkflowError):
    """
    An action is not allowed from the entity's current state.

    This is a normal, locally recoverable outcome: the entity's state and
    content are untouched and no subscriber is notified.
    """

    def __init__(self, state: str, action: str, reason: str, **kwargs: Any):
        super().__init__(reason, **kwargs)
        self.state = state
        self.action = action
        self.reason = reason
        self.context.state = state
        self.context.action = action


# =============================================================================
# HISTORY ERRORS
# =============================================================================


class HistoryError(DocSpineError):
    """Undo log error."""

    default_category = ErrorCategory.HISTORY


class EmptyHistoryError(HistoryError):
    """Nothing to restore: the history holds no snapshots."""

    def __init__(self, message: str = "nothing to restore", **kwargs: Any):
        super().__init__(message, **kwargs)


# =============================================================================
# VALIDATION / SUBSCRIBER ERRORS
# =============================================================================


class ValidationError(DocSpineError):
    """Invalid argument handed to the engine."""

    default_category = ErrorCategory.VALIDATION


class InvalidSubscriberError(ValidationError):
    """Raised when registering something that cannot receive events."""

    def __init__(self, subscriber: Any):
        super().__init__(f"Subscriber must be callable, got {type(subscriber).__name__}")
        self.subscriber = subscriber


class SubscriberError(DocSpineError):
    """
    A subscriber raised while being notified.

    Never raised by ``broadcast``; collected in ``BroadcastReport.failures``
    so delivery to the remaining subscribers continues.
    """

    default_category = ErrorCategory.SUBSCRIBER

    def __init__(self, subscriber: Any, cause: Exception, **kwargs: Any):
        name = getattr(subscriber, "__qualname__", None) or repr(subscriber)
        super().__init__(f"Subscriber {name} failed: {cause}", cause=cause, **kwargs)
        self.subscriber = subscriber
        self.subscriber_name = name


# =============================================================================
# CONFIG ERRORS
# =============================================================================


class ConfigError(DocSpineError):
    """Configuration error."""

    default_category = ErrorCategory.CONFIG


class InvalidConfigError(ConfigError):
    """Invalid configuration value."""

    def __init__(self, key: str, value: Any, message: str | None = None):
        super().__init__(message or f"Invalid value for {key}: {value!r}")
        self.key = key
        self.value = value


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def categorize_error(error: Exception) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, DocSpineError):
        return error.category
    if isinstance(error, (TypeError, ValueError)):
        return ErrorCategory.VALIDATION
    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "DocSpineError",
    "WorkflowError",
    "TransitionRejectedError",
    "HistoryError",
    "EmptyHistoryError",
    "ValidationError",
    "InvalidSubscriberError",
    "SubscriberError",
    "ConfigError",
    "InvalidConfigError",
    "categorize_error",
]
