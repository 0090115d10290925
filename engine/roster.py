"""
Roster - the immutable list of players for a match.
"""

import uuid
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from config import MATCH_SETTINGS
from engine.errors import ErrorKind, LineupError


@dataclass(frozen=True)
class Player:
    """A rostered player. Immutable for the whole match."""
    id: str
    number: int
    name: str

    @classmethod
    def create(cls, number: int, name: str, player_id: Optional[str] = None) -> "Player":
        """Factory method that assigns a fresh opaque id when none is given."""
        return cls(id=player_id or uuid.uuid4().hex, number=number, name=name.strip())

    @property
    def label(self) -> str:
        """Scoresheet label, e.g. '#7 Dana'."""
        return f"#{self.number} {self.name}"


RosterEntry = Union[Player, tuple[int, str]]


def build_roster(entries: Iterable[RosterEntry]) -> tuple[Player, ...]:
    """
    Build and validate a roster.

    Args:
        entries: Players, or (number, name) tuples that get fresh ids

    Raises:
        LineupError: InsufficientRoster when fewer than six players are
            given, InvalidRoster for negative or duplicate numbers/ids
    """
    players = tuple(
        entry if isinstance(entry, Player) else Player.create(*entry)
        for entry in entries
    )

    if len(players) < MATCH_SETTINGS.min_roster_size:
        raise LineupError(
            ErrorKind.INSUFFICIENT_ROSTER,
            f"Roster needs at least {MATCH_SETTINGS.min_roster_size} players, got {len(players)}",
        )

    numbers = [p.number for p in players]
    if any(n < 0 for n in numbers):
        raise LineupError(ErrorKind.INVALID_ROSTER, "Jersey numbers cannot be negative")
    if len(set(numbers)) != len(numbers):
        raise LineupError(ErrorKind.INVALID_ROSTER, "Jersey numbers must be unique")
    if len({p.id for p in players}) != len(players):
        raise LineupError(ErrorKind.INVALID_ROSTER, "Player ids must be unique")

    return players


def find_player(roster: tuple[Player, ...], player_id: Optional[str]) -> Player:
    """Look up a rostered player, raising UnknownPlayer if absent."""
    for player in roster:
        if player.id == player_id:
            return player
    raise LineupError(ErrorKind.UNKNOWN_PLAYER, f"Player {player_id!r} is not on the roster")
