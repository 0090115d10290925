"""
Lineup - the six serve-rotation slots, the libero and the designated setter.

Slot 1 is always the current server. Slots 2-4 are the front row and
slots 1, 5 and 6 the back row.
"""

from dataclasses import dataclass, replace
from typing import Optional

from config import MATCH_SETTINGS
from engine.errors import ErrorKind, LineupError

SLOTS: tuple[int, ...] = tuple(range(1, MATCH_SETTINGS.court_slots + 1))


def _check_slot(slot: int) -> int:
    if slot not in SLOTS:
        raise LineupError(ErrorKind.INVALID_SLOT, f"Slot must be 1-{len(SLOTS)}, got {slot!r}")
    return slot


@dataclass(frozen=True)
class Lineup:
    """
    Immutable on-court assignment.

    Attributes:
        slots: Player id (or None) for slots 1-6, in serve order
        libero: Libero player id, held outside the rotation
        setter: Designated setter, used to attribute assists on kills
    """
    slots: tuple[Optional[str], ...] = (None,) * MATCH_SETTINGS.court_slots
    libero: Optional[str] = None
    setter: Optional[str] = None

    def player_at(self, slot: int) -> Optional[str]:
        """Player id holding a slot (None if empty)."""
        return self.slots[_check_slot(slot) - 1]

    def slot_of(self, player_id: Optional[str]) -> Optional[int]:
        """Slot currently held by a player, or None if not in the rotation."""
        if player_id is None:
            return None
        for index, occupant in enumerate(self.slots):
            if occupant == player_id:
                return index + 1
        return None

    @property
    def server(self) -> Optional[str]:
        return self.slots[0]

    @property
    def is_full(self) -> bool:
        return all(occupant is not None for occupant in self.slots)

    @property
    def player_ids(self) -> tuple[str, ...]:
        """Filled slots in slot order."""
        return tuple(p for p in self.slots if p is not None)

    @property
    def on_court_ids(self) -> frozenset[str]:
        """Everyone in a slot plus the libero."""
        ids = set(self.player_ids)
        if self.libero:
            ids.add(self.libero)
        return frozenset(ids)

    def is_back_row(self, player_id: str) -> bool:
        return self.slot_of(player_id) in MATCH_SETTINGS.back_row_slots

    def with_slot(self, slot: int, player_id: Optional[str]) -> "Lineup":
        """Direct assignment, used during setup and substitutions."""
        _check_slot(slot)
        slots = list(self.slots)
        slots[slot - 1] = player_id
        return replace(self, slots=tuple(slots))

    def with_libero(self, player_id: Optional[str]) -> "Lineup":
        return replace(self, libero=player_id)

    def with_setter(self, player_id: Optional[str]) -> "Lineup":
        return replace(self, setter=player_id)

    def rotate(self) -> "Lineup":
        """
        Shift every occupant one slot toward the server.

        Slot i receives the player formerly in slot i+1 and slot 6 receives
        the former server. Whoever holds a slot moves, libero included.
        """
        return replace(self, slots=self.slots[1:] + self.slots[:1])


def next_rotation(rotation: int) -> int:
    """Rotation counter after one rotation (6 wraps to 1)."""
    return (rotation % len(SLOTS)) + 1
