"""
History Stack - previous match states for single-step undo.

States are immutable and share structure with their successors, so pushing
one keeps a reference rather than copying it.
"""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class HistoryStack:
    """Unbounded LIFO of MatchState values, cleared at set boundaries."""

    def __init__(self):
        self._states: list = []

    def __len__(self) -> int:
        return len(self._states)

    @property
    def can_undo(self) -> bool:
        return bool(self._states)

    def push(self, state) -> None:
        """Record the state as it was before a mutating call."""
        self._states.append(state)
        logger.debug("Snapshot pushed (version %d, depth %d)", state.version, len(self._states))

    def pop(self) -> Optional[object]:
        """Most recent snapshot, or None when there is nothing to undo."""
        if not self._states:
            return None
        return self._states.pop()

    def clear(self) -> None:
        self._states.clear()
