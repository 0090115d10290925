"""
Sideout Data Models

SQLAlchemy ORM models, domain enums and pydantic schemas.
"""

from models.base import Base, engine, SessionLocal, get_session, init_db
from models.match import SavedMatch, Side, MatchPhase
from models.stat import (
    Stat,
    Beneficiary,
    Derived,
    STAT_ORDER,
    DERIVED_STATS,
    POINT_OUTCOMES,
    SIDEOUT_REASONS,
    SERVING_STATS,
    TEAM_ACTIONS,
)

__all__ = [
    "Base",
    "engine",
    "SessionLocal",
    "get_session",
    "init_db",
    "SavedMatch",
    "Side",
    "MatchPhase",
    "Stat",
    "Beneficiary",
    "Derived",
    "STAT_ORDER",
    "DERIVED_STATS",
    "POINT_OUTCOMES",
    "SIDEOUT_REASONS",
    "SERVING_STATS",
    "TEAM_ACTIONS",
]
