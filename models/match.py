"""
Match lifecycle enums and the saved-match record.
"""

import enum
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import String, Integer, DateTime, JSON, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class Side(enum.Enum):
    """The two sides of the net, from the home scorer's point of view."""
    HOME = "home"
    OPPONENT = "opponent"


class MatchPhase(enum.Enum):
    """Match lifecycle states."""
    PRE_MATCH = "pre_match"
    LINEUP_SETUP = "lineup_setup"
    PLAYING = "playing"
    POST_MATCH = "post_match"


class SavedMatch(Base):
    """
    A persisted match document.

    The full document is stored as JSON; the summary columns exist so
    saved matches can be listed without parsing every document.
    """
    __tablename__ = "saved_matches"

    match_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    match_name: Mapped[str] = mapped_column(String(200), nullable=False)
    phase: Mapped[MatchPhase] = mapped_column(SAEnum(MatchPhase), nullable=False)

    # Set tally at the time of the save
    current_set: Mapped[int] = mapped_column(Integer, default=1)
    home_sets_won: Mapped[int] = mapped_column(Integer, default=0)
    opponent_sets_won: Mapped[int] = mapped_column(Integer, default=0)

    last_saved: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(timezone.utc)
    )

    # Serialized MatchDocument
    document: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    def __repr__(self) -> str:
        return f"<SavedMatch(id={self.match_id}, name='{self.match_name}', phase={self.phase.value})>"
