"""
Substitution Ledger - tracks which players may interchange for each
starting slot during a set.

Every starter seeds a family keyed by their own id. A free agent (someone
in no family yet) joins the family of the player they replace; from then on
they can only swap with members of that family. Membership is kept as a
plain player id -> family key map, so a snapshot of the ledger is simply
the map itself.
"""

import logging
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from engine.errors import ErrorKind, SubstitutionError, LineupError
from engine.roster import find_player

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubstitutionLedger:
    """
    Immutable family membership for the current set.

    Attributes:
        groups: player id -> family key (the starter's id), held as a
            read-only view; every change produces a new ledger.
    """
    groups: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.groups, MappingProxyType):
            object.__setattr__(self, "groups", MappingProxyType(dict(self.groups)))

    @classmethod
    def seeded(cls, starting_ids: Iterable[str]) -> "SubstitutionLedger":
        """One singleton family per starting player."""
        return cls(groups={pid: pid for pid in starting_ids})

    @classmethod
    def from_groups(cls, groups: dict[str, Iterable[str]]) -> "SubstitutionLedger":
        """Rebuild from serialized families (family key -> member ids)."""
        membership: dict[str, str] = {}
        for key, members in groups.items():
            membership[key] = key
            for member in members:
                membership[member] = key
        return cls(groups=membership)

    def group_of(self, player_id: str) -> Optional[str]:
        """Family key for a player, or None for a free agent."""
        return self.groups.get(player_id)

    def members(self, key: str) -> tuple[str, ...]:
        """All players in a family, in the order they joined."""
        return tuple(pid for pid, group in self.groups.items() if group == key)

    def to_groups(self) -> dict[str, list[str]]:
        """Serialize as family key -> member ids."""
        families: dict[str, list[str]] = {}
        for pid, key in self.groups.items():
            families.setdefault(key, []).append(pid)
        return families

    def validate(self, player_out_id: str, player_in_id: str) -> None:
        """
        Check substitution legality.

        Raises:
            SubstitutionError: IllegalCrossGroup when the incoming player
                already belongs to a different family than the outgoing one
        """
        in_group = self.group_of(player_in_id)
        if in_group is None:
            return
        if in_group != self.group_of(player_out_id):
            raise SubstitutionError(
                ErrorKind.ILLEGAL_CROSS_GROUP,
                "Incoming player may only replace a member of their own substitution family",
            )

    def apply(self, player_out_id: str, player_in_id: str) -> "SubstitutionLedger":
        """Validate and record a substitution, returning the new ledger."""
        self.validate(player_out_id, player_in_id)
        if self.group_of(player_in_id) is not None:
            return self

        groups = dict(self.groups)
        key = groups.setdefault(player_out_id, player_out_id)
        groups[player_in_id] = key
        return replace(self, groups=groups)


def apply_substitution(state, slot: int, player_out_id: str, player_in_id: str):
    """
    Swap a bench player (or the libero) into a slot.

    The outgoing player returns to the bench and the home substitution
    count goes up by one. Rejections leave ``state`` untouched.

    Returns:
        The new MatchState
    """
    lineup = state.lineup
    occupant = lineup.player_at(slot)
    if occupant is None:
        raise LineupError(ErrorKind.EMPTY_SLOT, f"Slot {slot} is empty")
    if occupant != player_out_id:
        raise SubstitutionError(
            ErrorKind.INVALID_SUBSTITUTION,
            f"Slot {slot} is not held by player {player_out_id!r}",
        )

    player_out = find_player(state.roster, player_out_id)
    try:
        player_in = find_player(state.roster, player_in_id)
    except LineupError as exc:
        raise SubstitutionError(ErrorKind.INVALID_SUBSTITUTION, exc.message) from exc
    if lineup.slot_of(player_in_id) is not None:
        raise SubstitutionError(
            ErrorKind.INVALID_SUBSTITUTION,
            f"{player_in.label} is already in the rotation",
        )

    ledger = state.ledger.apply(player_out_id, player_in_id)

    new_lineup = lineup.with_slot(slot, player_in_id)

    bench = tuple(pid for pid in state.bench if pid != player_in_id) + (player_out_id,)
    game = replace(state.game, home_subs=state.game.home_subs + 1)
    log_line = f"SUB: {player_in.label} for {player_out.label}"

    logger.info("Substitution in slot %d: %s for %s", slot, player_in.label, player_out.label)
    return replace(
        state,
        lineup=new_lineup,
        ledger=ledger,
        bench=bench,
        game=game,
        point_log=(log_line,) + state.point_log,
    )
