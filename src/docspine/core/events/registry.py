"""
Subscriber registry with synchronous broadcast.

Manifesto:
    An entity must be able to tell interested parties about lifecycle changes
    without owning them, without reordering them, and without one misbehaving
    subscriber silencing the rest.

Rules:
    - Registration order is delivery order.
    - Duplicates are kept: a subscriber registered twice is called twice per
      broadcast, and one ``unregister`` removes only the first occurrence.
    - Subscribers are referenced weakly. Bound methods are tracked with
      ``weakref.WeakMethod``. Bound builtin methods (``list.append``) are
      created afresh on every attribute access, so they are held strongly,
      as are objects that cannot be weakly referenced (including methods of
      ``__slots__`` instances). Collected subscribers are dropped on the
      next broadcast.
    - A subscriber that raises is logged and recorded in the returned
      ``BroadcastReport``; delivery continues with the next one.
    - Changes made to the registry from inside a subscriber take effect on
      the next broadcast.

Tags:
    doc-spine, events, observer, weakref, in-process

Doc-Types:
    api-reference
"""

from __future__ import annotations

import inspect
import weakref
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from docspine.core.errors import InvalidSubscriberError, SubscriberError
from docspine.core.events import Subscriber, TransitionEvent
from docspine.core.logging import get_logger

__all__ = ["BroadcastReport", "SubscriberRegistry"]

logger = get_logger(__name__)


class _StrongRef:
    """Mimics the ``weakref.ref`` call interface for strongly held targets."""

    __slots__ = ("_target",)

    def __init__(self, target: Subscriber) -> None:
        self._target = target

    def __call__(self) -> Subscriber:
        return self._target


def _make_handle(subscriber: Subscriber) -> Callable[[], Subscriber | None]:
    if inspect.ismethod(subscriber):
        try:
            return weakref.WeakMethod(subscriber)
        except TypeError:
            # owner without __weakref__ (__slots__ classes)
            return _StrongRef(subscriber)
    if inspect.isbuiltin(subscriber) and not inspect.ismodule(subscriber.__self__):
        return _StrongRef(subscriber)
    try:
        return weakref.ref(subscriber)
    except TypeError:
        return _StrongRef(subscriber)


def _describe(subscriber: Any) -> str:
    return getattr(subscriber, "__qualname__", None) or type(subscriber).__name__


@dataclass(frozen=True)
class BroadcastReport:
    """Outcome of one broadcast.

    Attributes:
        event: The event that was delivered
        delivered: Number of subscriber occurrences that returned normally
        failures: One ``SubscriberError`` per occurrence that raised
    """

    event: TransitionEvent
    delivered: int = 0
    failures: tuple[SubscriberError, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def attempted(self) -> int:
        return self.delivered + len(self.failures)


class SubscriberRegistry:
    """Ordered, duplicate-permitting collection of event subscribers.

    Example::

        registry = SubscriberRegistry()
        received = []
        registry.register(received.append)
        registry.register(received.append)
        registry.broadcast(event)      # received == [event, event]
        registry.unregister(received.append)
        registry.broadcast(event)      # one more delivery
    """

    def __init__(self) -> None:
        self._handles: list[Callable[[], Subscriber | None]] = []

    def register(self, subscriber: Subscriber) -> None:
        """Append *subscriber*; no uniqueness check.

        Raises:
            InvalidSubscriberError: If *subscriber* is not callable.
        """
        if not callable(subscriber):
            raise InvalidSubscriberError(subscriber)
        self._handles.append(_make_handle(subscriber))

    def unregister(self, subscriber: Subscriber) -> bool:
        """Remove the first registered occurrence of *subscriber*.

        Returns:
            True if an occurrence was removed, False if none matched.
        """
        for index, handle in enumerate(self._handles):
            target = handle()
            if target is not None and (target is subscriber or target == subscriber):
                del self._handles[index]
                return True
        return False

    def broadcast(self, event: TransitionEvent) -> BroadcastReport:
        """Deliver *event* to every live subscriber occurrence, in order."""
        delivered = 0
        failures: list[SubscriberError] = []

        for handle in list(self._handles):
            subscriber = handle()
            if subscriber is None:
                self._drop(handle)
                continue
            try:
                subscriber(event)
            except Exception as e:
                failure = SubscriberError(subscriber, e).with_context(
                    entity_id=event.entity_id,
                    state=event.new_state.value,
                )
                failures.append(failure)
                logger.warning(
                    "subscriber_notification_failed",
                    subscriber=_describe(subscriber),
                    entity_id=event.entity_id,
                    event_id=event.event_id,
                    error=str(e),
                    error_type=type(e).__name__,
                )
            else:
                delivered += 1

        return BroadcastReport(event=event, delivered=delivered, failures=tuple(failures))

    def clear(self) -> None:
        """Remove every registration."""
        self._handles.clear()

    def _drop(self, handle: Callable[[], Subscriber | None]) -> None:
        for index, existing in enumerate(self._handles):
            if existing is handle:
                del self._handles[index]
                logger.debug("subscriber_dropped", remaining=len(self._handles))
                return

    def _prune(self) -> None:
        self._handles = [h for h in self._handles if h() is not None]

    def __len__(self) -> int:
        """Number of live registrations (duplicates counted)."""
        self._prune()
        return len(self._handles)

    def __contains__(self, subscriber: object) -> bool:
        for handle in self._handles:
            target = handle()
            if target is not None and (target is subscriber or target == subscriber):
                return True
        return False

    def __repr__(self) -> str:
        return f"SubscriberRegistry(subscribers={len(self)})"
