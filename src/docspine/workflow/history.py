"""Content snapshots and the per-entity undo history.

Key Concepts:
    Snapshot: An immutable capture of an entity's content, tagged with a
        per-entity sequence number (1 for the first save).
    History: A LIFO log of snapshots. ``push`` appends (each push must carry
        a higher sequence than the current top), ``pop`` removes the most
        recent one. Popping an empty history returns
        ``Err(EmptyHistoryError)`` rather than a made-up snapshot.

Only a single linear history is kept: there is no redo stack and no
branching. A history may be capped with ``max_entries``; once full, the
oldest snapshot is evicted to make room for the new one.

Example:
    history = History()
    history.push(Snapshot(content="a", sequence=1))
    history.push(Snapshot(content="b", sequence=2))

    match history.pop():
        case Ok(snapshot):
            print(snapshot.content)     # "b"
        case Err(error):
            print("nothing to restore")
"""

from __future__ import annotations

import hashlib
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from docspine.core.errors import EmptyHistoryError, InvalidConfigError, ValidationError
from docspine.core.logging import get_logger
from docspine.core.result import Err, Ok, Result
from docspine.core.timestamps import utc_now

logger = get_logger(__name__)


# ============================================================================
# SNAPSHOT
# ============================================================================


@dataclass(frozen=True, slots=True)
class Snapshot:
    """
    Immutable capture of content at a point in time.

    Attributes:
        content: The captured text
        sequence: Per-entity, strictly increasing save counter
        created_at: When the snapshot was taken
        content_hash: SHA-256 of ``content``, computed on creation
    """

    content: str
    sequence: int
    created_at: datetime = field(default_factory=utc_now)
    content_hash: str = field(default="")

    def __post_init__(self):
        if not self.content_hash:
            digest = hashlib.sha256(self.content.encode("utf-8")).hexdigest()
            object.__setattr__(self, "content_hash", digest)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "content": self.content,
            "sequence": self.sequence,
            "created_at": self.created_at.isoformat(),
            "content_hash": self.content_hash,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Snapshot:
        """Deserialize from dictionary."""
        created_at = data.get("created_at")
        return cls(
            content=data["content"],
            sequence=data["sequence"],
            created_at=datetime.fromisoformat(created_at) if created_at else utc_now(),
            content_hash=data.get("content_hash", ""),
        )


# ============================================================================
# HISTORY
# ============================================================================


class History:
    """
    LIFO log of snapshots for one entity.

    Args:
        max_entries: Optional cap. ``None`` (default) keeps every snapshot.

    Raises:
        InvalidConfigError: If ``max_entries`` is set below 1.
    """

    def __init__(self, max_entries: int | None = None) -> None:
        if max_entries is not None and max_entries < 1:
            raise InvalidConfigError("max_entries", max_entries, "max_entries must be >= 1")
        self._max_entries = max_entries
        self._entries: deque[Snapshot] = deque()

    @property
    def max_entries(self) -> int | None:
        return self._max_entries

    def push(self, snapshot: Snapshot) -> None:
        """Append *snapshot* as the new most recent entry.

        Raises:
            ValidationError: If *snapshot* is not newer than the current top.
        """
        if self._entries and snapshot.sequence <= self._entries[-1].sequence:
            raise ValidationError(
                f"snapshot sequence {snapshot.sequence} is not newer than "
                f"the current top ({self._entries[-1].sequence})"
            ).with_context(sequence=snapshot.sequence)
        if self._max_entries is not None and len(self._entries) >= self._max_entries:
            evicted = self._entries.popleft()
            logger.info(
                "history_evicted",
                sequence=evicted.sequence,
                max_entries=self._max_entries,
            )
        self._entries.append(snapshot)

    def pop(self) -> Result[Snapshot]:
        """Remove and return the most recent snapshot.

        Returns:
            ``Ok(snapshot)``, or ``Err(EmptyHistoryError)`` when empty.
        """
        if not self._entries:
            return Err(EmptyHistoryError())
        return Ok(self._entries.pop())

    def peek(self) -> Result[Snapshot]:
        """Return the most recent snapshot without removing it."""
        if not self._entries:
            return Err(EmptyHistoryError())
        return Ok(self._entries[-1])

    def clear(self) -> None:
        self._entries.clear()

    @property
    def is_empty(self) -> bool:
        return not self._entries

    @property
    def snapshots(self) -> tuple[Snapshot, ...]:
        """All snapshots, oldest first."""
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"History(size={len(self._entries)}, max_entries={self._max_entries})"


__all__ = ["Snapshot", "History"]
