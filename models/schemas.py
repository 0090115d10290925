"""
Pydantic schemas for data validation.

``MatchDocument`` is the serialized form of a match exchanged with the
persistence port.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from models.match import Side, MatchPhase
from models.stat import Stat

SCHEMA_VERSION = 1


# ============ Player Schemas ============

class PlayerSchema(BaseModel):
    """A rostered player."""
    id: str = Field(..., min_length=1)
    number: int = Field(..., ge=0)
    name: str = Field(..., max_length=200)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()


# ============ Match State Schemas ============

class GameStateSchema(BaseModel):
    """Scoreboard fields."""
    home_score: int = Field(0, ge=0)
    opponent_score: int = Field(0, ge=0)
    home_sets_won: int = Field(0, ge=0)
    opponent_sets_won: int = Field(0, ge=0)
    serving_team: Optional[Side] = None
    home_subs: int = Field(0, ge=0)
    current_set: int = Field(1, ge=1)
    rotation: int = Field(1, ge=1, le=6)


class RotationTallySchema(BaseModel):
    home: int = Field(0, ge=0)
    opponent: int = Field(0, ge=0)


class SetResultSchema(BaseModel):
    set_number: int = Field(..., ge=1)
    home_score: int = Field(..., ge=0)
    opponent_score: int = Field(..., ge=0)
    winner: Side


StatRows = dict[str, dict[str, int]]


def _check_stat_rows(rows: StatRows) -> StatRows:
    known = {s.value for s in Stat}
    for player_id, row in rows.items():
        for name, count in row.items():
            if name not in known:
                raise ValueError(f"Unknown stat {name!r} for player {player_id}")
            if count < 0:
                raise ValueError(f"Negative count for {name!r} of player {player_id}")
    return rows


# ============ Match Document ============

class MatchDocument(BaseModel):
    """
    Full serializable snapshot of a match.

    Substitution families are stored as family key -> member ids and
    rebuilt into a membership map on load.
    """
    schema_version: int = SCHEMA_VERSION
    match_id: str = Field(..., min_length=1)
    match_name: str = Field("", max_length=200)
    last_saved: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    phase: MatchPhase
    game: GameStateSchema
    roster: list[PlayerSchema]
    lineup: dict[int, Optional[str]]
    libero: Optional[str] = None
    setter_id: Optional[str] = None
    bench: list[str] = Field(default_factory=list)
    point_log: list[str] = Field(default_factory=list)
    player_stats: StatRows = Field(default_factory=dict)
    set_stats: StatRows = Field(default_factory=dict)
    rotation_scores: dict[int, RotationTallySchema] = Field(default_factory=dict)
    sub_groups: dict[str, list[str]] = Field(default_factory=dict)
    set_results: list[SetResultSchema] = Field(default_factory=list)
    pending_assist_for: Optional[str] = None

    @field_validator("schema_version")
    @classmethod
    def supported_version(cls, v: int) -> int:
        if v != SCHEMA_VERSION:
            raise ValueError(f"Unsupported schema_version {v}")
        return v

    @field_validator("lineup", "rotation_scores")
    @classmethod
    def valid_slots(cls, v: dict) -> dict:
        for slot in v:
            if not 1 <= slot <= 6:
                raise ValueError(f"Slot must be 1-6, got {slot}")
        return v

    @field_validator("player_stats", "set_stats")
    @classmethod
    def valid_stat_rows(cls, v: StatRows) -> StatRows:
        return _check_stat_rows(v)

    @model_validator(mode="after")
    def references_roster(self) -> "MatchDocument":
        roster_ids = {p.id for p in self.roster}
        referenced = [pid for pid in self.lineup.values() if pid is not None]
        referenced += self.bench
        referenced += [pid for pid in (self.libero, self.setter_id, self.pending_assist_for) if pid]
        for key, members in self.sub_groups.items():
            referenced += [key, *members]
        referenced += list(self.player_stats) + list(self.set_stats)
        unknown = sorted(set(referenced) - roster_ids)
        if unknown:
            raise ValueError(f"Document references players not on the roster: {unknown}")
        return self


class SavedMatchSummary(BaseModel):
    """Listing entry for a saved match."""
    match_id: str
    match_name: str
    phase: MatchPhase
    current_set: int
    home_sets_won: int
    opponent_sets_won: int
    last_saved: datetime

    class Config:
        from_attributes = True
