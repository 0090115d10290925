"""
Match state aggregate.

Every field is an immutable value. Operations build a new ``MatchState``
with ``dataclasses.replace`` and share whatever they did not touch with the
previous state, so keeping the previous state around is all an undo
snapshot needs.
"""

import uuid
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from config import MATCH_SETTINGS
from models.match import Side, MatchPhase
from engine.lineup import Lineup, SLOTS
from engine.roster import Player
from engine.statbook import StatBook
from engine.substitutions import SubstitutionLedger


@dataclass(frozen=True)
class GameState:
    """Scoreboard for the current set plus the running set tally."""
    home_score: int = 0
    opponent_score: int = 0
    home_sets_won: int = 0
    opponent_sets_won: int = 0
    serving_team: Optional[Side] = None
    home_subs: int = 0
    current_set: int = 1
    rotation: int = 1


@dataclass(frozen=True)
class RotationTally:
    """Points won by each side while one rotation slot was serving."""
    home: int = 0
    opponent: int = 0

    def credit(self, side: Side) -> "RotationTally":
        if side is Side.HOME:
            return RotationTally(self.home + 1, self.opponent)
        return RotationTally(self.home, self.opponent + 1)


@dataclass(frozen=True)
class SetResult:
    """Final score of a completed set."""
    set_number: int
    home_score: int
    opponent_score: int
    winner: Side


@dataclass(frozen=True)
class PendingAssist:
    """A KWDA kill was recorded and still needs its assisting player."""
    attacker_id: str


def empty_rotation_scores() -> Mapping[int, RotationTally]:
    return MappingProxyType({slot: RotationTally() for slot in SLOTS})


@dataclass(frozen=True)
class MatchState:
    """
    Complete engine state for one match.

    ``version`` increases with every accepted operation; undo restores the
    version along with everything else.
    """
    version: int = 0
    phase: MatchPhase = MatchPhase.PRE_MATCH
    match_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    match_name: str = ""
    game: GameState = field(default_factory=GameState)
    roster: tuple[Player, ...] = ()
    lineup: Lineup = field(default_factory=Lineup)
    ledger: SubstitutionLedger = field(default_factory=SubstitutionLedger)
    bench: tuple[str, ...] = ()
    match_stats: StatBook = field(default_factory=StatBook)
    set_stats: StatBook = field(default_factory=StatBook)
    rotation_scores: Mapping[int, RotationTally] = field(default_factory=empty_rotation_scores)
    point_log: tuple[str, ...] = ()
    set_results: tuple[SetResult, ...] = ()
    pending_assist: Optional[PendingAssist] = None

    def __post_init__(self):
        if not isinstance(self.rotation_scores, MappingProxyType):
            object.__setattr__(self, "rotation_scores", MappingProxyType(dict(self.rotation_scores)))

    @property
    def is_match_complete(self) -> bool:
        return self.phase == MatchPhase.POST_MATCH

    @property
    def match_winner(self) -> Optional[Side]:
        """Side that reached the set target, if any."""
        if self.game.home_sets_won >= MATCH_SETTINGS.sets_to_win:
            return Side.HOME
        if self.game.opponent_sets_won >= MATCH_SETTINGS.sets_to_win:
            return Side.OPPONENT
        return None
