"""
Persistence port and its SQLite implementation.

The engine only knows ``MatchRepository``; ``SqlMatchRepository`` stores
each MatchDocument as a JSON column in the ``saved_matches`` table.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from engine.errors import MatchNotFoundError
from models.base import SessionLocal, get_session
from models.match import SavedMatch
from models.schemas import MatchDocument, SavedMatchSummary

logger = logging.getLogger(__name__)


class MatchRepository(ABC):
    """Where finished and in-progress matches are kept."""

    @abstractmethod
    def save(self, document: MatchDocument) -> None:
        """
        Store a match document, replacing any earlier save of the same match.

        Raises:
            SQLAlchemyError (or the backend's own error) on storage failure
        """

    @abstractmethod
    def load(self, match_id: str) -> MatchDocument:
        """
        Fetch a match document.

        Raises:
            MatchNotFoundError: if no match has this id
        """

    def list_matches(self) -> list[SavedMatchSummary]:
        """Summaries of every saved match, newest first."""
        return []


class SqlMatchRepository(MatchRepository):
    """SQLAlchemy-backed repository."""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self._session_factory = session_factory or SessionLocal

    def save(self, document: MatchDocument) -> None:
        payload = document.model_dump(mode="json")
        with get_session(self._session_factory) as session:
            record = session.get(SavedMatch, document.match_id)
            if record is None:
                record = SavedMatch(match_id=document.match_id)
                session.add(record)
            record.match_name = document.match_name
            record.phase = document.phase
            record.current_set = document.game.current_set
            record.home_sets_won = document.game.home_sets_won
            record.opponent_sets_won = document.game.opponent_sets_won
            record.last_saved = document.last_saved
            record.document = payload
        logger.info("Saved match %s (%s)", document.match_id, document.phase.value)

    def load(self, match_id: str) -> MatchDocument:
        with get_session(self._session_factory) as session:
            record = session.get(SavedMatch, match_id)
            if record is None:
                raise MatchNotFoundError(match_id)
            payload = dict(record.document)
        logger.info("Loaded match %s", match_id)
        return MatchDocument.model_validate(payload)

    def list_matches(self) -> list[SavedMatchSummary]:
        with get_session(self._session_factory) as session:
            records = session.scalars(
                select(SavedMatch).order_by(SavedMatch.last_saved.desc())
            ).all()
            return [SavedMatchSummary.model_validate(r) for r in records]

    def delete(self, match_id: str) -> bool:
        """Remove a saved match. Returns False if it did not exist."""
        with get_session(self._session_factory) as session:
            record = session.get(SavedMatch, match_id)
            if record is None:
                return False
            session.delete(record)
        return True
