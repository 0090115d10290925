"""
Sideout Services

Application services for event handling, persistence and export.
"""

from services.event_bus import EventBus
from services.export import BoxScoreExporter
from services.persistence import MatchRepository, SqlMatchRepository

__all__ = ["EventBus", "BoxScoreExporter", "MatchRepository", "SqlMatchRepository"]
