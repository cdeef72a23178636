"""
Shared pytest fixtures for doc-spine tests.

This module provides:
- A fresh workflow entity per test
- A recording subscriber that keeps every event it receives
- structlog capture for asserting on log events
- Logging/context reset between tests

Fixtures are auto-discovered by pytest; request them as test arguments.
"""

from pathlib import Path
from typing import Generator

import pytest
import structlog
from structlog.testing import capture_logs

from docspine.core.events import TransitionEvent
from docspine.core.logging import clear_context
from docspine.workflow import WorkflowEntity


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)

        if "integration" in str(test_path):
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Undo any structlog configuration and bound context a test left behind."""
    yield
    clear_context()
    structlog.reset_defaults()


# =============================================================================
# Subscribers
# =============================================================================


class Recorder:
    """Callable subscriber that records every event, optionally tagging calls."""

    def __init__(self, name: str = "recorder", calls: list | None = None) -> None:
        self.name = name
        self.events: list[TransitionEvent] = []
        self.calls = calls if calls is not None else []

    def __call__(self, event: TransitionEvent) -> None:
        self.events.append(event)
        self.calls.append((self.name, event.effect))

    @property
    def effects(self) -> list[str]:
        return [e.effect for e in self.events]


class Exploding:
    """Subscriber that always fails."""

    def __init__(self) -> None:
        self.attempts = 0

    def __call__(self, event: TransitionEvent) -> None:
        self.attempts += 1
        raise RuntimeError("subscriber is down")


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def exploding() -> Exploding:
    return Exploding()


# =============================================================================
# Entities
# =============================================================================


@pytest.fixture
def entity() -> WorkflowEntity:
    """Draft entity with empty content."""
    return WorkflowEntity("doc-1")


@pytest.fixture
def observed_entity(entity: WorkflowEntity, recorder: Recorder) -> WorkflowEntity:
    """Draft entity with ``recorder`` registered once."""
    entity.register(recorder)
    return entity


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture
def log_events() -> Generator[list[dict], None, None]:
    """Captured structlog event dicts for the duration of the test."""
    with capture_logs() as captured:
        yield captured


@pytest.fixture
def call_log() -> list[tuple[str, str]]:
    """Shared, ordered log of (subscriber name, effect) across recorders."""
    return []


@pytest.fixture
def make_recorder(call_log: list[tuple[str, str]]):
    """Factory for named recorders that also append to ``call_log``.

    Keep a reference to each recorder: the registry holds subscribers weakly.
    """

    def _make(name: str) -> Recorder:
        return Recorder(name, call_log)

    return _make
