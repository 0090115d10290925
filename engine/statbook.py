"""
Stat book - per-player counts and the derivation rules applied to them.

The rule table itself lives in ``models.stat.DERIVED_STATS``; this module
turns a raw stat into the full list of increments and applies them.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from models.stat import Stat, Beneficiary, DERIVED_STATS, STAT_ORDER
from engine.roster import Player

Increment = tuple[str, Stat]

_EMPTY_ROW: Mapping[Stat, int] = MappingProxyType({})


def increments_for(stat: Stat, actor_id: str, setter_id: Optional[str] = None) -> list[Increment]:
    """
    Expand a raw stat into every increment it implies.

    The raw stat always comes first. Setter-directed rules apply only when
    a setter other than the actor is designated.
    """
    increments: list[Increment] = [(actor_id, stat)]
    for rule in DERIVED_STATS.get(stat, ()):
        if rule.beneficiary is Beneficiary.ACTOR:
            increments.append((actor_id, rule.stat))
        elif setter_id and setter_id != actor_id:
            increments.append((setter_id, rule.stat))
    return increments


@dataclass(frozen=True)
class StatBook:
    """
    Immutable player id -> (stat -> count) table.

    Rows and the table itself are read-only views. ``increment`` copies
    only the rows it touches; untouched rows are shared with the previous
    book.
    """
    counts: Mapping[str, Mapping[Stat, int]] = field(default_factory=dict)

    def __post_init__(self):
        if isinstance(self.counts, MappingProxyType):
            return
        frozen = {
            pid: row if isinstance(row, MappingProxyType) else MappingProxyType(dict(row))
            for pid, row in self.counts.items()
        }
        object.__setattr__(self, "counts", MappingProxyType(frozen))

    @classmethod
    def empty(cls, player_ids: Iterable[str]) -> "StatBook":
        return cls(counts={pid: {} for pid in player_ids})

    def get(self, player_id: str, stat: Stat) -> int:
        return self.counts.get(player_id, {}).get(stat, 0)

    def row(self, player_id: str) -> Mapping[Stat, int]:
        return self.counts.get(player_id, _EMPTY_ROW)

    def increment(self, increments: Iterable[Increment]) -> "StatBook":
        counts = dict(self.counts)
        copied: set[str] = set()
        for player_id, stat in increments:
            if player_id not in copied:
                counts[player_id] = dict(counts.get(player_id, {}))
                copied.add(player_id)
            row = counts[player_id]
            row[stat] = row.get(stat, 0) + 1
        return StatBook(counts=counts)


def hitting_percentage(row: Optional[Mapping[Stat, int]]) -> float:
    """(Kill - Hit Error) / Hit Attempt, or 0.0 with no attempts."""
    if not row:
        return 0.0
    attempts = row.get(Stat.HIT_ATTEMPT, 0)
    if attempts == 0:
        return 0.0
    return (row.get(Stat.KILL, 0) - row.get(Stat.HIT_ERROR, 0)) / attempts


def format_hitting_percentage(row: Optional[Mapping[Stat, int]]) -> str:
    """Hitting percentage as shown on a box score, e.g. '0.250'."""
    return f"{hitting_percentage(row):.3f}"


def team_totals(book: StatBook, roster: Iterable[Player]) -> dict[Stat, int]:
    """Sum of every tallied stat across the roster."""
    players = list(roster)
    return {
        stat: sum(book.get(p.id, stat) for p in players)
        for stat in STAT_ORDER
    }


@dataclass(frozen=True)
class BoxScoreRow:
    """One line of a box score."""
    label: str
    values: tuple[int, ...]
    hitting: str


def box_score(book: StatBook, roster: Iterable[Player]) -> list[BoxScoreRow]:
    """Per-player rows in STAT_ORDER followed by a TEAM TOTAL row."""
    players = list(roster)
    rows = [
        BoxScoreRow(
            label=p.label,
            values=tuple(book.get(p.id, stat) for stat in STAT_ORDER),
            hitting=format_hitting_percentage(book.row(p.id)),
        )
        for p in players
    ]
    totals = team_totals(book, players)
    rows.append(BoxScoreRow(
        label="TEAM TOTAL",
        values=tuple(totals[stat] for stat in STAT_ORDER),
        hitting=format_hitting_percentage(totals),
    ))
    return rows
