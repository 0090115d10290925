"""
Statistic categories and the fixed rule tables that drive the stat engine.
"""

import enum
from dataclasses import dataclass

from models.match import Side


class Stat(enum.Enum):
    """Every action the scorer can record. Values are the display names."""
    SERVE_ATTEMPT = "Serve Attempt"
    ACE = "Ace"
    SERVE_ERROR = "Serve Error"
    HIT_ATTEMPT = "Hit Attempt"
    KILL = "Kill"
    HIT_ERROR = "Hit Error"
    SET_ATTEMPT = "Set Attempt"
    ASSIST = "Assist"
    SET_ERROR = "Set Error"
    BLOCK = "Block"
    BLOCK_ERROR = "Block Error"
    DIG = "Dig"
    RECEPTION_ERROR = "RE"

    # Actions that are not tallied under their own name
    KWDA = "KWDA"
    OPPONENT_ERROR = "Opponent Error"
    OPPONENT_POINT = "Opponent Point"


class Beneficiary(enum.Enum):
    """Who receives a derived increment."""
    ACTOR = "actor"
    SETTER = "setter"


@dataclass(frozen=True)
class Derived:
    """One extra increment applied alongside a raw stat."""
    stat: Stat
    beneficiary: Beneficiary = Beneficiary.ACTOR


# Display order of the tallied stats (box score columns)
STAT_ORDER: tuple[Stat, ...] = (
    Stat.SERVE_ATTEMPT, Stat.ACE, Stat.SERVE_ERROR,
    Stat.HIT_ATTEMPT, Stat.KILL, Stat.HIT_ERROR,
    Stat.SET_ATTEMPT, Stat.ASSIST, Stat.SET_ERROR,
    Stat.BLOCK, Stat.BLOCK_ERROR, Stat.DIG, Stat.RECEPTION_ERROR,
)

# Trigger stat -> derived increments applied in the same step.
# Setter rules only fire when a setter other than the actor is designated.
DERIVED_STATS: dict[Stat, tuple[Derived, ...]] = {
    Stat.KILL: (
        Derived(Stat.HIT_ATTEMPT),
        Derived(Stat.ASSIST, Beneficiary.SETTER),
        Derived(Stat.SET_ATTEMPT, Beneficiary.SETTER),
    ),
    Stat.HIT_ERROR: (Derived(Stat.HIT_ATTEMPT),),
    Stat.ASSIST: (Derived(Stat.SET_ATTEMPT),),
    Stat.SET_ERROR: (Derived(Stat.SET_ATTEMPT),),
}

# Stats that end the rally, and the side that wins it
POINT_OUTCOMES: dict[Stat, Side] = {
    Stat.ACE: Side.HOME,
    Stat.KILL: Side.HOME,
    Stat.KWDA: Side.HOME,
    Stat.BLOCK: Side.HOME,
    Stat.OPPONENT_ERROR: Side.HOME,
    Stat.SERVE_ERROR: Side.OPPONENT,
    Stat.HIT_ERROR: Side.OPPONENT,
    Stat.SET_ERROR: Side.OPPONENT,
    Stat.RECEPTION_ERROR: Side.OPPONENT,
    Stat.BLOCK_ERROR: Side.OPPONENT,
    Stat.OPPONENT_POINT: Side.OPPONENT,
}

# Home points that break the opponent's serve; the incoming server is
# credited with the serve attempt before the rotation happens.
SIDEOUT_REASONS: frozenset[Stat] = frozenset({
    Stat.KILL, Stat.KWDA, Stat.BLOCK, Stat.OPPONENT_ERROR,
})

# Stats only the serving player can earn
SERVING_STATS: frozenset[Stat] = frozenset({Stat.ACE, Stat.SERVE_ERROR})

# Team-level actions recorded without a player
TEAM_ACTIONS: frozenset[Stat] = frozenset({Stat.OPPONENT_ERROR, Stat.OPPONENT_POINT})
