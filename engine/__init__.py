"""
Sideout Match Engine

Core game logic for live volleyball scoring.
This module contains no GUI dependencies.
"""

from engine.errors import ErrorKind, EngineError, OperationResult
from engine.history import HistoryStack
from engine.lineup import Lineup
from engine.match import MatchEngine
from engine.roster import Player, build_roster
from engine.rules import VolleyballRules
from engine.state import GameState, MatchState, PendingAssist, RotationTally, SetResult
from engine.statbook import StatBook, hitting_percentage, team_totals, box_score
from engine.substitutions import SubstitutionLedger

__all__ = [
    "ErrorKind",
    "EngineError",
    "OperationResult",
    "HistoryStack",
    "Lineup",
    "MatchEngine",
    "Player",
    "build_roster",
    "VolleyballRules",
    "GameState",
    "MatchState",
    "PendingAssist",
    "RotationTally",
    "SetResult",
    "StatBook",
    "hitting_percentage",
    "team_totals",
    "box_score",
    "SubstitutionLedger",
]
